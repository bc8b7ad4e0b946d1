import os
import typing

StoreBackend = typing.Literal["memory", "file", "dynamodb"]

_STORE_BACKENDS: tuple[str, ...] = ("memory", "file", "dynamodb")


def _get_resource_by_env_var(env_var: str) -> str:
    value = os.environ.get(env_var)
    if not value:
        raise ValueError(f"Missing environment variable: {env_var}")
    return value


def _get_flag_by_env_var(env_var: str) -> bool:
    """
    Reads a boolean flag. Defaults to False if not set or invalid value.
    """
    value = os.environ.get(env_var, "false").lower()
    return value in ("true", "1", "yes")


def get_store_backend() -> StoreBackend:
    value = os.environ.get("LMS_STORE_BACKEND", "memory").lower()
    if value not in _STORE_BACKENDS:
        raise ValueError(f"Unsupported LMS_STORE_BACKEND: {value}. Expected one of {', '.join(_STORE_BACKENDS)}")
    return typing.cast(StoreBackend, value)


def get_store_path() -> str:
    return _get_resource_by_env_var("LMS_STORE_PATH")


def get_store_table_name() -> str:
    return _get_resource_by_env_var("LMS_STORE_TABLE_NAME")


def is_fillblank_ignore_case_enabled() -> bool:
    return _get_flag_by_env_var("LMS_FILLBLANK_IGNORE_CASE")


def is_fillblank_trim_whitespace_enabled() -> bool:
    return _get_flag_by_env_var("LMS_FILLBLANK_TRIM_WHITESPACE")
