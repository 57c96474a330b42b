"""
Datetime utility functions.
Calendar-date parsing and short display labels for event dates.
"""

from datetime import date, datetime
from typing import Optional, Union
import pytz

# Fixed English abbreviations so labels don't depend on the server locale
MONTH_ABBREVIATIONS = (
    "Jan", "Feb", "Mar", "Apr", "May", "Jun",
    "Jul", "Aug", "Sep", "Oct", "Nov", "Dec",
)


def utcnow() -> datetime:
    """
    Get current UTC datetime using pytz.UTC.

    Returns:
        Current UTC datetime with pytz timezone information
    """
    return datetime.now(pytz.UTC)


def parse_date_utc(value: Union[str, date, None]) -> Optional[date]:
    """
    Parse a stored calendar date ("YYYY-MM-DD") without any timezone shift.

    The value is treated as a plain year/month/day triple so a date stored as
    "2024-03-15" always displays as Mar 15, whatever the server timezone.

    Args:
        value: ISO calendar date string, a date object, or None

    Returns:
        date, or None if the value is missing or unparseable

    Examples:
        >>> parse_date_utc("2024-03-15")
        datetime.date(2024, 3, 15)
        >>> parse_date_utc("soon") is None
        True
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str):
        return None

    parts = value.strip().split("-")
    if len(parts) != 3:
        return None
    try:
        year, month, day = (int(p) for p in parts)
        return date(year, month, day)
    except ValueError:
        return None


def format_short_date(value: date, include_month: bool = True) -> str:
    """
    Format a date as a short label like "Mar 15" (or "15" without the month).

    Args:
        value: Date to format
        include_month: Whether to prefix the abbreviated month name

    Returns:
        Short label with no leading zeros
    """
    if not include_month:
        return str(value.day)
    return f"{MONTH_ABBREVIATIONS[value.month - 1]} {value.day}"


def format_long_date(value: Union[str, date, None], empty_label: str = "Date TBD") -> str:
    """
    Format a date as "Mar 15, 2024", falling back to empty_label when unparseable.

    Used by the per-sport pages where only a single start date is shown.
    """
    parsed = parse_date_utc(value)
    if parsed is None:
        return empty_label
    return f"{format_short_date(parsed)}, {parsed.year}"
