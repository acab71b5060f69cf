"""Date manipulation utilities"""

from datetime import date, datetime, timedelta, timezone
from typing import Any, Optional

EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)
ONE_DAY = timedelta(days=1)


def parse_date(value: Any) -> Optional[datetime]:
    """
    Coerce a stored date-like value to an aware UTC datetime.

    Accepts datetimes (naive ones are taken as UTC), dates (midnight UTC),
    epoch milliseconds and ISO-8601 strings. Returns None for anything that
    is missing or cannot be parsed.
    """
    if value is None or isinstance(value, bool):
        return None

    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, date):
        parsed = datetime(value.year, value.month, value.day)
    elif isinstance(value, (int, float)):
        try:
            return EPOCH + timedelta(milliseconds=value)
        except (OverflowError, ValueError):
            return None
    elif isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        if text.endswith(("Z", "z")):
            text = text[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError:
            return None
    else:
        return None

    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def whole_days_between(start: datetime, end: datetime) -> int:
    """Whole days elapsed from start to end, floored, never negative"""
    return max(0, (end - start) // ONE_DAY)
