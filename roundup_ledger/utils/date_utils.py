"""Date-time parsing for the fixed ``YYYY-MM-DD hh:mm:ss`` pattern"""

import re
from datetime import datetime, timedelta

DATETIME_FORMAT = "%Y-%m-%d %H:%M:%S"

_PATTERN = re.compile(r"([0-9]{4})-([0-9]{2})-([0-9]{2}) ([0-9]{2}):([0-9]{2}):([0-9]{2})")


def _split(value: str) -> tuple[int, ...]:
    match = _PATTERN.fullmatch(value) if isinstance(value, str) else None
    if match is None:
        raise ValueError(f"Expected format YYYY-MM-DD hh:mm:ss, got {value!r}")
    return tuple(int(part) for part in match.groups())


def parse_strict(value: str) -> datetime:
    """
    Parse an expense timestamp.

    Rejects anything that is not an exact match of the pattern as well as
    impossible calendar values (2023-11-31, 25:00:00).

    Raises:
        ValueError: On any mismatch
    """
    year, month, day, hour, minute, second = _split(value)
    return datetime(year, month, day, hour, minute, second)


def parse_lenient(value: str) -> datetime:
    """
    Parse a rule-period boundary, normalizing calendar overflow.

    Each field is allowed to overflow into the next larger one, so
    2023-11-31 23:59:59 becomes 2023-12-01 23:59:59 and 2023-13-01
    becomes 2024-01-01.

    Raises:
        ValueError: When the string does not match the pattern at all
    """
    year, month, day, hour, minute, second = _split(value)

    # Month overflow carries into the year; month 00 rolls back into December
    carry_year, month_index = divmod(month - 1, 12)
    if year + carry_year < 1:
        raise ValueError(f"Year out of range in {value!r}")
    base = datetime(year + carry_year, month_index + 1, 1)

    try:
        return base + timedelta(days=day - 1, hours=hour, minutes=minute, seconds=second)
    except OverflowError as e:
        raise ValueError(f"Date out of range in {value!r}") from e


def format_datetime(value: datetime) -> str:
    """Render an instant back into the wire pattern"""
    return value.strftime(DATETIME_FORMAT)
