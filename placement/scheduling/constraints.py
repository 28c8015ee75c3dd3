"""
Constraint validation for placement.

Two levels:
1. Settings sanity checks - fatal, raised before any placement is attempted
2. Per-event rest-day / active-hours / past-time checks - returned as values
   so the caller can turn them into a placement failure
"""

from dataclasses import dataclass
from datetime import date, datetime, timedelta

from ..exceptions import ConfigurationError
from ..time_math import (
    at_time,
    format_time,
    is_known_timezone,
    is_valid_hhmm,
    parse_time,
    time_to_minutes,
    weekday_name,
)
from ..types import Event, EventType, UserSchedulingSettings

REST_DAYS = ("saturday", "sunday")


@dataclass(frozen=True)
class ConstraintCheck:
    """Result of a non-throwing constraint check."""

    valid: bool
    message: str | None = None


VALID = ConstraintCheck(valid=True)


def validate_user_settings(settings: UserSchedulingSettings | None) -> None:
    """
    Check that settings are present and well formed.

    Raises:
        ConfigurationError: on the first violation found
    """
    if settings is None:
        raise ConfigurationError("User settings are required for scheduling")

    for field_name in ("active_start_time", "active_end_time", "rest_day"):
        if not getattr(settings, field_name, None):
            raise ConfigurationError(f"User setting '{field_name}' is required")

    if not is_valid_hhmm(settings.active_start_time) or not is_valid_hhmm(
        settings.active_end_time
    ):
        raise ConfigurationError(
            "Invalid time format in user settings "
            f"({settings.active_start_time!r}, {settings.active_end_time!r}); expected HH:MM"
        )

    if settings.rest_day not in REST_DAYS:
        raise ConfigurationError(
            f'Rest day must be either "saturday" or "sunday", got {settings.rest_day!r}'
        )

    start_minutes = time_to_minutes(parse_time(settings.active_start_time))
    end_minutes = time_to_minutes(parse_time(settings.active_end_time))
    if end_minutes <= start_minutes:
        raise ConfigurationError(
            f"Active end time {settings.active_end_time} must be after "
            f"start time {settings.active_start_time}"
        )

    if settings.timezone is not None and not is_known_timezone(settings.timezone):
        raise ConfigurationError(f"Unknown timezone {settings.timezone!r}")


def is_rest_day(day: date, settings: UserSchedulingSettings) -> bool:
    return weekday_name(day) == settings.rest_day


def is_within_active_hours(
    start: datetime, end: datetime, settings: UserSchedulingSettings
) -> bool:
    """
    Check that [start, end) fits inside the active hours of start's date.

    Windows spilling past midnight never fit, since active hours end the same day.
    """
    day = start.date()
    active_start = at_time(day, settings.active_start_time)
    active_end = at_time(day, settings.active_end_time)
    return active_start <= start and end <= active_end


def check_basic_constraints(
    event: Event,
    settings: UserSchedulingSettings,
    now: datetime | None = None,
    check_window: bool = True,
) -> ConstraintCheck:
    """
    Check rest day, active hours and past time without looking at conflicts.

    Args:
        event: Event whose requested window is checked
        settings: User constraints
        now: Current local time; past-time rules are skipped when None
        check_window: False for events whose time-of-day is only a placeholder

    Returns:
        ConstraintCheck with a user-facing message when invalid
    """
    day = event.start.date()

    # Only Fixed events carry a real time; the others are placed from now onwards
    if now is not None and event.type is EventType.FIXED:
        if event.end < now:
            return ConstraintCheck(
                False,
                f"Cannot schedule events in the past: event ends at "
                f"{event.end:%A, %b %d %H:%M} but it is now {now:%A, %b %d %H:%M}",
            )
        if event.start < now:
            return ConstraintCheck(
                False,
                f"Fixed events cannot start in the past: requested {event.start:%A, %b %d %H:%M}, "
                f"now {now:%A, %b %d %H:%M}",
            )
    elif now is not None and day < now.date():
        return ConstraintCheck(
            False,
            f"Cannot schedule {event.type.value} events on past dates "
            f"(target {day:%A, %b %d %Y}, today {now:%A, %b %d %Y})",
        )

    if is_rest_day(day, settings):
        return ConstraintCheck(False, f"Cannot schedule on {settings.rest_day} (your rest day)")

    if check_window and not is_within_active_hours(event.start, event.end, settings):
        return ConstraintCheck(
            False,
            f"Event {format_time(event.start.time())}-{format_time(event.end.time())} is outside "
            f"active hours {settings.active_start_time}-{settings.active_end_time}",
        )

    return VALID


def working_days(
    first_day: date, settings: UserSchedulingSettings, today: date | None = None
) -> list[date]:
    """
    Days of the week starting at `first_day` that may hold events.

    Skips the rest day and, when `today` is given, days already in the past.
    """
    days = []
    for offset in range(7):
        day = first_day + timedelta(days=offset)
        if is_rest_day(day, settings):
            continue
        if today is not None and day < today:
            continue
        days.append(day)
    return days
