"""General utility functions."""
import math
from datetime import datetime, timezone
from typing import Any, Optional, Union

Number = Union[int, float]


def to_utc(dt: datetime) -> datetime:
    """Convert datetime to UTC timezone."""
    if dt.tzinfo is None:
        # Assume UTC if no timezone
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def parse_iso_datetime(value: str) -> datetime:
    """
    Parse an ISO-8601 string (``Z`` suffix accepted) into an aware UTC datetime.

    Raises:
        ValueError: if the string is not ISO-8601
    """
    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    return to_utc(datetime.fromisoformat(text))


def parse_number(value: Any) -> Optional[Number]:
    """
    Parse ``value`` as a finite number the way a loose numeric check would.

    Returns an int when the value is integral, a float otherwise, and None
    when it is not numeric at all. Booleans and blank strings are not numbers.
    """
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, (int, float)):
        number = value
    else:
        text = str(value).strip()
        if not text:
            return None
        try:
            number = float(text)
        except ValueError:
            return None
    if isinstance(number, float):
        if not math.isfinite(number):
            return None
        if number.is_integer():
            return int(number)
    return number


def to_epoch_millis(value: Any) -> Number:
    """
    Normalize any timestamp shape a scan can carry to epoch milliseconds.

    Accepted shapes:
        - structured store timestamps as mappings: ``{"seconds", "nanoseconds"}``
          or the serialized ``{"_seconds", "_nanoseconds"}`` form
        - ``datetime`` objects (what Firestore returns for Timestamp fields)
        - raw numbers, taken to already be epoch milliseconds
        - numeric strings and ISO-8601 strings

    Anything else (None, garbage) normalizes to 0 so sorting never fails.
    """
    if value is None or isinstance(value, bool):
        return 0
    if isinstance(value, datetime):
        return int(to_utc(value).timestamp() * 1000)
    if isinstance(value, dict):
        seconds = value.get("seconds", value.get("_seconds"))
        nanos = value.get("nanoseconds", value.get("_nanoseconds")) or 0
        seconds = parse_number(seconds)
        nanos = parse_number(nanos) or 0
        if seconds is None:
            return 0
        return int(seconds * 1000 + nanos // 1_000_000)
    if isinstance(value, (int, float)):
        return value if math.isfinite(value) else 0
    if isinstance(value, str):
        number = parse_number(value)
        if number is not None:
            return number
        try:
            return int(parse_iso_datetime(value).timestamp() * 1000)
        except ValueError:
            return 0
    # Objects exposing a seconds attribute (e.g. protobuf Timestamp)
    seconds = getattr(value, "seconds", None)
    if seconds is not None:
        nanos = getattr(value, "nanos", getattr(value, "nanoseconds", 0)) or 0
        return int(seconds * 1000 + nanos // 1_000_000)
    return 0


def full_name(first_name: Optional[str], last_name: Optional[str]) -> str:
    return f"{first_name or ''} {last_name or ''}".strip()
