from datetime import datetime, timezone
from functools import lru_cache
from typing import Optional
from zoneinfo import ZoneInfo

from app.core.exceptions import InvalidInputError

PRETTY_FORMAT = "%m/%d/%Y, %I:%M %p"  # 01/02/2006, 03:04 PM like the UI date picker


def utcnow() -> datetime:
    """Current instant as naive UTC, the storage convention for every DateTime column."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def to_utc_naive(value: datetime) -> datetime:
    """Normalise an instant for storage. Naive input is taken to be UTC already."""
    if value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


def as_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Attach UTC to a stored naive instant for serialisation."""
    if value is None or value.tzinfo is not None:
        return value
    return value.replace(tzinfo=timezone.utc)


def parse_timestamp(raw: Optional[str], *, field: str = "timestamp") -> datetime:
    """Parse an RFC 3339 query value with or without fractional seconds.

    Returns naive UTC. Missing or unparseable values raise InvalidInputError.
    """
    if raw is None or not raw.strip():
        raise InvalidInputError(f"{field} is required")
    text = raw.strip()
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    # RFC 3339 allows any number of fractional digits; fromisoformat wants micros.
    if "." in text:
        head, _, tail = text.partition(".")
        digits = len(tail) - len(tail.lstrip("0123456789"))
        fraction = tail[:digits][:6].ljust(6, "0")
        text = f"{head}.{fraction}{tail[digits:]}"
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        raise InvalidInputError(f"invalid {field}: {raw!r}")
    return to_utc_naive(parsed)


@lru_cache(maxsize=8)
def _zone(name: str) -> ZoneInfo:
    return ZoneInfo(name)


def localize(value: datetime, tz_name: str) -> datetime:
    return as_utc(value).astimezone(_zone(tz_name))


def format_pretty(value: Optional[datetime], tz_name: str) -> str:
    if value is None:
        return ""
    return localize(value, tz_name).strftime(PRETTY_FORMAT)


def format_iso(value: Optional[datetime], tz_name: str) -> str:
    if value is None:
        return ""
    return localize(value, tz_name).isoformat()
