import math
from datetime import date, datetime, time, timezone
from enum import Enum
from typing import Any, Optional


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def utcnow_iso() -> str:
    return utcnow().isoformat()


def date_to_iso_timestamp(value: date) -> str:
    """Midnight UTC of ``value`` as an ISO-8601 timestamp."""
    return datetime.combine(value, time.min, tzinfo=timezone.utc).isoformat()


def parse_timestamp(value: Any) -> Optional[datetime]:
    """
    Parse an ISO-8601 timestamp or date into an aware UTC datetime.

    Naive values are taken to be UTC.  Returns None for anything that does
    not parse.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, date):
        parsed = datetime.combine(value, time.min)
    else:
        text = str(value).strip()
        if not text:
            return None
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError:
            return None
    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def normalize_status(value: Any) -> str:
    """Lower-cased status string; tolerates enum members and None."""
    if isinstance(value, Enum):
        value = value.value
    return str(value or "").strip().lower()


def round_half_up(value: float) -> int:
    # round() would round 0.5 to the nearest even integer
    return int(math.floor(value + 0.5))
