import typing
import uuid
from datetime import datetime, timezone

from lms_engine.utils.base_types import IsoTimestamp

Clock = typing.Callable[[], IsoTimestamp]


def utc_now_iso() -> IsoTimestamp:
    return IsoTimestamp(datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"))


def parse_iso_timestamp(value: str) -> typing.Optional[datetime]:
    """
    Parses an ISO8601 string (with or without a trailing 'Z') into an aware datetime.
    Naive values are assumed to be UTC. Returns None if the value cannot be parsed.
    """
    if not value:
        return None
    try:
        if value.endswith("Z"):
            parsed = datetime.fromisoformat(value[:-1] + "+00:00")
        else:
            parsed = datetime.fromisoformat(value)
    except ValueError:
        return None
    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def generate_id(prefix: str) -> str:
    return f"{prefix}-{uuid.uuid4().hex}"
