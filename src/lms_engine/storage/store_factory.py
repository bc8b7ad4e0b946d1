import logging

from lms_engine.models.answer_models import ScoringOptions
from lms_engine.storage.dynamodb_key_value_store import DynamoDbKeyValueStore
from lms_engine.storage.key_value_store import (
    InMemoryKeyValueStore,
    JsonFileKeyValueStore,
    KeyValueStore,
)
from lms_engine.utils.env_vars import (
    get_store_backend,
    get_store_path,
    get_store_table_name,
    is_fillblank_ignore_case_enabled,
    is_fillblank_trim_whitespace_enabled,
)

_LOGGER = logging.getLogger(__name__)
_LOGGER.setLevel(logging.INFO)


def create_store_from_env() -> KeyValueStore:
    """
    Builds the key-value store selected by LMS_STORE_BACKEND.

    :raises ValueError: If the backend is unknown or its required variable is missing.
    """
    backend = get_store_backend()
    _LOGGER.info(f"Creating key-value store for backend: {backend}")
    if backend == "file":
        return JsonFileKeyValueStore(get_store_path())
    if backend == "dynamodb":
        return DynamoDbKeyValueStore(get_store_table_name())
    return InMemoryKeyValueStore()


def scoring_options_from_env() -> ScoringOptions:
    return ScoringOptions(
        fillblank_ignore_case=is_fillblank_ignore_case_enabled(),
        fillblank_trim_whitespace=is_fillblank_trim_whitespace_enabled(),
    )
