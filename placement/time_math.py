"""
Clock arithmetic for placement.

All datetimes handled by the engine are naive local times in the user's
timezone; the timezone only matters when resolving "now".
"""

import re
from datetime import date, datetime, time, timedelta

import pytz

HHMM_PATTERN = re.compile(r"^([01]?[0-9]|2[0-3]):[0-5][0-9]$")

WEEKDAY_NAMES = ["monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday"]


def parse_time(time_str: str) -> time:
    """Parse "HH:MM" string to time object."""
    parts = time_str.split(":")
    return time(int(parts[0]), int(parts[1]))


def is_valid_hhmm(value: object) -> bool:
    """True for "H:MM"/"HH:MM" strings in 24-hour range."""
    return isinstance(value, str) and HHMM_PATTERN.match(value) is not None


def time_to_minutes(t: time) -> int:
    """Convert time to minutes since midnight."""
    return t.hour * 60 + t.minute


def format_time(t: time) -> str:
    """Format time as "HH:MM"."""
    return f"{t.hour:02d}:{t.minute:02d}"


def at_time(day: date, time_str: str) -> datetime:
    """Combine a calendar day with an "HH:MM" string."""
    return datetime.combine(day, parse_time(time_str))


def weekday_name(day: date) -> str:
    """Lowercase English weekday name ("monday" ... "sunday")."""
    return WEEKDAY_NAMES[day.weekday()]


def week_start(day: date) -> date:
    """Sunday on or before `day` (weeks run Sunday to Saturday)."""
    days_since_sunday = (day.weekday() + 1) % 7
    return day - timedelta(days=days_since_sunday)


def next_slot_boundary(moment: datetime, slot_minutes: int) -> datetime:
    """
    First slot boundary strictly after `moment`.

    Boundaries are multiples of `slot_minutes` from midnight, so 10:07 becomes
    10:15 and 10:00 becomes 10:15 for 15-minute slots.
    """
    midnight = datetime.combine(moment.date(), time(0, 0))
    elapsed = time_to_minutes(moment.time())
    boundary = (elapsed // slot_minutes + 1) * slot_minutes
    return midnight + timedelta(minutes=boundary)


def is_known_timezone(tz_name: str) -> bool:
    try:
        pytz.timezone(tz_name)
    except pytz.UnknownTimeZoneError:
        return False
    return True


def get_current_datetime_in_tz(tz_name: str | None) -> datetime:
    """
    Get current datetime in the specified timezone.

    Servers usually run in UTC, while events are expressed in the user's local
    wall-clock time, so "now" has to be converted before any past-time check.

    Args:
        tz_name: IANA timezone name (e.g., "America/Los_Angeles"), or None for
            the server's local time

    Returns:
        Current datetime in the specified timezone (naive, for local comparisons)
    """
    if tz_name is None:
        return datetime.now()
    tz = pytz.timezone(tz_name)
    now_utc = datetime.now(pytz.UTC)
    now_local = now_utc.astimezone(tz)
    # Return naive datetime for consistent comparisons with event times
    return now_local.replace(tzinfo=None)


def parse_iso_datetime(value: str, tz_name: str | None = None) -> datetime:
    """
    Parse an ISO 8601 string into a naive local datetime.

    Offset-aware values (including a trailing "Z") are converted into `tz_name`
    first; naive values are taken as already local.
    """
    parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    if parsed.tzinfo is None:
        return parsed
    if tz_name is not None:
        parsed = parsed.astimezone(pytz.timezone(tz_name))
    return parsed.replace(tzinfo=None)
