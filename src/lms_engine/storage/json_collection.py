import json
import logging
import typing

import pydantic

from lms_engine.storage.key_value_store import KeyValueStore
from lms_engine.utils.base_types import StorageKey

_LOGGER = logging.getLogger(__name__)
_LOGGER.setLevel(logging.INFO)

ModelT = typing.TypeVar("ModelT", bound=pydantic.BaseModel)


class JsonCollection(typing.Generic[ModelT]):
    """
    A list of records of one model type stored as a JSON array under a single key.

    Reads never fail: an absent key, unparseable JSON or a non-array value all read
    as an empty collection, and records that fail validation are skipped.
    Writes replace the whole array; records that fail validation are carried over
    unchanged, so a save never drops data it cannot read. A value that is not a
    JSON array at all is overwritten by the next write.
    """

    def __init__(self, store: KeyValueStore, storage_key: StorageKey, model_cls: type[ModelT]) -> None:
        self.store = store
        self.storage_key = storage_key
        self.model_cls = model_cls

    def _parse_item(self, raw_item: typing.Any) -> typing.Optional[ModelT]:
        try:
            return self.model_cls.model_validate(raw_item)
        except pydantic.ValidationError as e:
            _LOGGER.error(f"Skipping invalid record in {self.storage_key}: {e}", exc_info=True)
            return None

    def _load_raw(self) -> list[typing.Any]:
        raw_value = self.store.get(self.storage_key)
        if raw_value is None:
            return []
        try:
            raw_items = json.loads(raw_value)
        except json.JSONDecodeError as e:
            _LOGGER.error(f"Stored value for {self.storage_key} is not valid JSON, treating as empty: {e}")
            return []
        if not isinstance(raw_items, list):
            _LOGGER.error(f"Stored value for {self.storage_key} is not a JSON array, treating as empty.")
            return []
        return raw_items

    def _write_raw(self, raw_items: list[typing.Any]) -> None:
        self.store.set(self.storage_key, json.dumps(raw_items, ensure_ascii=False))
        _LOGGER.debug(f"Wrote {len(raw_items)} record(s) to {self.storage_key}")

    @staticmethod
    def _dump(item: ModelT) -> dict[str, typing.Any]:
        return item.model_dump(mode="json", exclude_none=True)

    def load_all(self) -> list[ModelT]:
        parsed_items = (self._parse_item(raw_item) for raw_item in self._load_raw())
        return [item for item in parsed_items if item is not None]

    def upsert(self, item: ModelT, matches: typing.Callable[[ModelT], bool]) -> ModelT:
        """
        Replaces the first valid record for which `matches` is true, or appends the item.
        Records that fail validation are written back unchanged.
        """
        raw_items = self._load_raw()
        for index, raw_item in enumerate(raw_items):
            existing = self._parse_item(raw_item)
            if existing is not None and matches(existing):
                raw_items[index] = self._dump(item)
                break
        else:
            raw_items.append(self._dump(item))
        self._write_raw(raw_items)
        return item

    def remove_where(self, matches: typing.Callable[[ModelT], bool]) -> int:
        """Removes every valid record for which `matches` is true; invalid records are kept."""
        raw_items = self._load_raw()
        kept: list[typing.Any] = []
        for raw_item in raw_items:
            existing = self._parse_item(raw_item)
            if existing is None or not matches(existing):
                kept.append(raw_item)
        removed = len(raw_items) - len(kept)
        if removed:
            self._write_raw(kept)
        return removed
