"""
Timezone utilities

Everything is stored and computed in UTC. Helpers for parsing request
dates, the fixed-width storage format and the API output format.
"""

from datetime import date, datetime, time, timezone

# Fixed-width storage format so that TEXT comparison matches time order
DB_TS_FORMAT = "%Y-%m-%dT%H:%M:%S.%fZ"


def now_utc() -> datetime:
    """Return the current UTC time (timezone aware)

    Returns:
        current UTC time (tzinfo=timezone.utc)
    """
    return datetime.now(timezone.utc)


def ensure_utc(dt: datetime) -> datetime:
    """Convert a datetime to aware UTC

    Args:
        dt: datetime (naive values are taken as UTC)

    Returns:
        UTC datetime
    """
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def parse_iso_datetime(value: str) -> datetime:
    """Parse a request date

    Accepts a bare date (``2026-10-01``) or a full ISO-8601 timestamp,
    including the ``Z`` suffix. A bare date is midnight UTC.

    Args:
        value: ISO string

    Returns:
        UTC datetime

    Raises:
        ValueError: the value is not an ISO date
    """
    text = value.strip()
    if text.endswith("Z") or text.endswith("z"):
        text = text[:-1] + "+00:00"
    return ensure_utc(datetime.fromisoformat(text))


def end_of_day(dt: datetime) -> datetime:
    """Move a datetime to 23:59:59.999 of the same UTC day

    Example:
        >>> end_of_day(datetime(2026, 10, 19, 8, 30, tzinfo=timezone.utc))
        datetime(2026, 10, 19, 23, 59, 59, 999000, tzinfo=timezone.utc)
    """
    dt = ensure_utc(dt)
    return dt.replace(hour=23, minute=59, second=59, microsecond=999000)


def start_of_day(day: date) -> datetime:
    """Return midnight UTC of a calendar day"""
    return datetime.combine(day, time.min, tzinfo=timezone.utc)


def to_iso_z(dt: datetime) -> str:
    """Format a datetime for the API (millisecond precision, Z suffix)

    Example:
        >>> to_iso_z(datetime(2026, 10, 19, 8, 30, tzinfo=timezone.utc))
        '2026-10-19T08:30:00.000Z'
    """
    utc_dt = ensure_utc(dt)
    base = utc_dt.strftime("%Y-%m-%dT%H:%M:%S")
    ms = utc_dt.microsecond // 1000
    return f"{base}.{ms:03d}Z"


def to_db_ts(dt: datetime) -> str:
    """Format a datetime for storage"""
    return ensure_utc(dt).strftime(DB_TS_FORMAT)


def from_db_ts(value: str | None) -> datetime | None:
    """Parse a stored timestamp

    Args:
        value: stored TEXT value (NULL stays None)

    Returns:
        UTC datetime or None
    """
    if value is None:
        return None
    try:
        return datetime.strptime(value, DB_TS_FORMAT).replace(tzinfo=timezone.utc)
    except ValueError:
        # rows written by other tools
        return parse_iso_datetime(value)
