import json
import logging
import os
import typing

from lms_engine.utils.base_types import StorageKey

_LOGGER = logging.getLogger(__name__)
_LOGGER.setLevel(logging.INFO)


class KeyValueStore(typing.Protocol):
    """
    The persistence substrate the engine runs on: a flat mapping of keys to
    serialized text values. Writes replace the whole value for a key.
    """

    def get(self, key: StorageKey) -> typing.Optional[str]: ...

    def set(self, key: StorageKey, value: str) -> None: ...

    def remove(self, key: StorageKey) -> None: ...


class InMemoryKeyValueStore:
    """Process-local store, used for tests and throwaway sessions."""

    def __init__(self, initial: typing.Optional[dict[str, str]] = None) -> None:
        self._values: dict[str, str] = dict(initial or {})

    def get(self, key: StorageKey) -> typing.Optional[str]:
        return self._values.get(key)

    def set(self, key: StorageKey, value: str) -> None:
        self._values[key] = value

    def remove(self, key: StorageKey) -> None:
        self._values.pop(key, None)

    def keys(self) -> list[str]:
        return list(self._values.keys())


class JsonFileKeyValueStore:
    """
    Keeps every key in a single JSON object on disk.

    The file is re-read on every access so that edits made by another process
    between calls are picked up; there is no locking (single writer assumed).
    A missing or corrupt file reads as an empty store.
    """

    def __init__(self, file_path: str) -> None:
        self.file_path = file_path
        self._ensure_storage_dir()
        _LOGGER.info(f"JsonFileKeyValueStore initialized for file: {file_path}")

    def _ensure_storage_dir(self) -> None:
        """Ensure the directory holding the store file exists"""
        storage_dir = os.path.dirname(os.path.abspath(self.file_path))
        if not os.path.exists(storage_dir):
            os.makedirs(storage_dir)

    def _load(self) -> dict[str, str]:
        if not os.path.exists(self.file_path):
            return {}
        try:
            with open(self.file_path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            _LOGGER.error(f"Store file {self.file_path} is corrupt, treating as empty: {e}", exc_info=True)
            return {}
        if not isinstance(data, dict):
            _LOGGER.error(f"Store file {self.file_path} does not hold a JSON object, treating as empty.")
            return {}
        return {str(k): v for k, v in data.items() if isinstance(v, str)}

    def _save(self, values: dict[str, str]) -> None:
        tmp_path = f"{self.file_path}.tmp"
        with open(tmp_path, "w", encoding="utf-8") as f:
            json.dump(values, f, indent=2, ensure_ascii=False)
        os.replace(tmp_path, self.file_path)

    def get(self, key: StorageKey) -> typing.Optional[str]:
        return self._load().get(key)

    def set(self, key: StorageKey, value: str) -> None:
        values = self._load()
        values[key] = value
        self._save(values)
        _LOGGER.debug(f"Saved key {key} to {self.file_path}")

    def remove(self, key: StorageKey) -> None:
        values = self._load()
        if key in values:
            del values[key]
            self._save(values)
            _LOGGER.debug(f"Removed key {key} from {self.file_path}")
