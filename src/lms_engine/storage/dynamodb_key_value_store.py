import logging
import typing

import boto3
from botocore.exceptions import ClientError

from lms_engine.utils.base_types import StorageKey

_LOGGER = logging.getLogger(__name__)
_LOGGER.setLevel(logging.INFO)


class DynamoDbKeyValueStore:
    """
    Key-value store backed by a DynamoDB table.

    Table Schema:
      - PK: storageKey (String), e.g. "lms_courses"
      - Attributes:
          - storageValue (String) - the serialized collection
    """

    def __init__(self, table_name: str) -> None:
        self.client = boto3.resource("dynamodb")
        self.table = self.client.Table(table_name)
        _LOGGER.info(f"DynamoDbKeyValueStore initialized for table: {table_name}")

    def get(self, key: StorageKey) -> typing.Optional[str]:
        _LOGGER.debug(f"Fetching value for key: {key}")
        try:
            response = self.table.get_item(Key={"storageKey": key})
            item = response.get("Item")
            if not item:
                _LOGGER.debug(f"No value stored for key: {key}")
                return None
            value = item.get("storageValue")
            if not isinstance(value, str):
                _LOGGER.warning(f"Ignoring non-string value stored for key: {key}")
                return None
            return value
        except ClientError as e:
            _LOGGER.error(f"Failed to get key {key}: {e.response['Error']['Message']}", exc_info=True)
            raise

    def set(self, key: StorageKey, value: str) -> None:
        try:
            self.table.put_item(Item={"storageKey": key, "storageValue": value})
            _LOGGER.debug(f"Saved value for key: {key}")
        except ClientError as e:
            _LOGGER.error(f"Failed to save key {key}: {e.response['Error']['Message']}", exc_info=True)
            raise

    def remove(self, key: StorageKey) -> None:
        try:
            self.table.delete_item(Key={"storageKey": key})
            _LOGGER.debug(f"Removed key: {key}")
        except ClientError as e:
            _LOGGER.error(f"Failed to remove key {key}: {e.response['Error']['Message']}", exc_info=True)
            raise
