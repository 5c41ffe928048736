"""Date parsing utilities."""

from datetime import date, datetime, timedelta, UTC
from typing import Optional

from dateutil import parser as date_parser
from dateutil import tz

DEFAULT_TIMEZONE = "America/Santiago"


def utc_now() -> datetime:
    """Return the current time as an aware UTC datetime."""
    return datetime.now(UTC)


def as_utc(value: datetime) -> datetime:
    """Attach UTC to naive datetimes read back from the store."""
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


def local_today(timezone: Optional[str] = None, now: Optional[datetime] = None) -> date:
    """Return today's date in the given timezone.

    Args:
        timezone: IANA timezone name, defaults to America/Santiago
        now: Optional aware "now" to convert instead of the wall clock
    """
    zone = tz.gettz(timezone or DEFAULT_TIMEZONE)
    if zone is None:
        raise ValueError(f"Unknown timezone '{timezone}'")
    current = now if now is not None else utc_now()
    return as_utc(current).astimezone(zone).date()


def parse_date(date_str: str, today: Optional[date] = None) -> date:
    """Parse a date string into a date object.

    Supports absolute dates ("2024-01-15", "January 15, 2024") and the
    relative words "today", "yesterday" and "tomorrow".

    Args:
        date_str: Date string
        today: Reference date for relative words, defaults to the local date

    Returns:
        Date object

    Raises:
        ValueError: If date string cannot be parsed
    """
    date_str = date_str.strip().lower()
    if today is None:
        today = local_today()

    relative_dates = {
        "today": today,
        "yesterday": today - timedelta(days=1),
        "tomorrow": today + timedelta(days=1),
    }
    if date_str in relative_dates:
        return relative_dates[date_str]

    try:
        return date_parser.parse(date_str).date()
    except (ValueError, OverflowError) as e:
        raise ValueError(f"Could not parse date '{date_str}': {e}") from e
