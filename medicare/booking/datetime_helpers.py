import datetime as dt
from zoneinfo import ZoneInfo

from loguru import logger

WEEKDAY_NAMES = ("Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday")


def weekday_name(date: dt.date) -> str:
    """Convert ``date(2026, 10, 19)`` → ``Monday``, independent of the process locale."""
    return WEEKDAY_NAMES[date.weekday()]


def format_hour(hour: int) -> str:
    """Convert ``9`` → ``09:00``, the slot label format."""
    return f"{hour:02d}:00"


def resolve_timezone(name: str) -> dt.tzinfo:
    """Resolve a timezone name, falling back to UTC if invalid."""
    try:
        return ZoneInfo(name)
    except Exception:
        logger.warning("Invalid clinic timezone '{}'; defaulting to UTC", name)
        return dt.timezone.utc


def local_now(tz: dt.tzinfo | None = None) -> dt.datetime:
    """Current wall-clock time in ``tz``, or in the system zone when ``tz`` is None."""
    if tz is None:
        return dt.datetime.now().astimezone()
    return dt.datetime.now(tz)
