"""
Test helper functions for placement scenarios.

These functions can be imported by test modules to build events and check
placement results.
"""

import sys
from datetime import date, datetime, timedelta
from pathlib import Path

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from placement.scheduling.conflicts import overlaps
from placement.scheduling.constraints import is_rest_day, is_within_active_hours
from placement.time_math import parse_time
from placement.types import Event, EventType, PlacementResult, UserSchedulingSettings

# Week of Sunday 2026-01-04 to Saturday 2026-01-10
SUNDAY = date(2026, 1, 4)
MONDAY = date(2026, 1, 5)
TUESDAY = date(2026, 1, 6)
WEDNESDAY = date(2026, 1, 7)
THURSDAY = date(2026, 1, 8)
FRIDAY = date(2026, 1, 9)
SATURDAY = date(2026, 1, 10)

# Friday before that week, so every day of it lies in the future
NOW = datetime(2026, 1, 2, 8, 0)


def at(day: date, hhmm: str) -> datetime:
    """Datetime for "HH:MM" on a given day."""
    return datetime.combine(day, parse_time(hhmm))


def make_event(
    event_id: str,
    event_type: EventType | str,
    day: date,
    start: str,
    end: str,
    title: str | None = None,
    **kwargs,
) -> Event:
    """
    Build an event on `day` between two "HH:MM" times.

    Args:
        event_id: Event id (also the default title)
        event_type: EventType or its string value
        day: Calendar day
        start: Start time, "HH:MM"
        end: End time, "HH:MM"
        title: Optional title

    Returns:
        Event instance
    """
    return Event(
        id=event_id,
        title=title or event_id,
        type=EventType(event_type),
        start=at(day, start),
        end=at(day, end),
        owner_id="user-1",
        **kwargs,
    )


def make_settings(
    start: str = "09:00",
    end: str = "17:00",
    rest_day: str = "sunday",
    timezone: str | None = None,
) -> UserSchedulingSettings:
    return UserSchedulingSettings(
        active_start_time=start, active_end_time=end, rest_day=rest_day, timezone=timezone
    )


def block_day(day: date, prefix: str = "block", start: str = "09:00", end: str = "17:00") -> Event:
    """A Fixed event covering a whole stretch of a day."""
    return make_event(f"{prefix}-{day.isoformat()}", EventType.FIXED, day, start, end)


def final_positions(result: PlacementResult, existing: list[Event]) -> list[Event]:
    """
    Every event other than the scheduled one, at its position after the placement.
    """
    moved = {e.id: e for e in result.moved_events}
    scheduled_id = result.scheduled_event.id
    return [moved.get(e.id, e) for e in existing if e.id != scheduled_id]


def assert_valid_placement(
    result: PlacementResult, existing: list[Event], settings: UserSchedulingSettings
) -> None:
    """
    Check the properties every successful placement must have.

    - scheduled and moved events sit inside active hours, off the rest day
    - nothing overlaps at its final position
    """
    assert result.success, f"Expected success, got {result.error}"
    assert result.error is None

    placed = [result.scheduled_event, *result.moved_events]
    for event in placed:
        assert is_within_active_hours(event.start, event.end, settings), (
            f"{event.title} at {event.start}-{event.end} is outside active hours"
        )
        assert not is_rest_day(event.start.date(), settings), f"{event.title} is on the rest day"

    everything = [result.scheduled_event, *final_positions(result, existing)]
    for i, first in enumerate(everything):
        for second in everything[i + 1 :]:
            assert not overlaps(first.start, first.end, second.start, second.end), (
                f"{first.title} ({first.start}-{first.end}) overlaps "
                f"{second.title} ({second.start}-{second.end})"
            )


def window(event: Event) -> tuple[str, str, str]:
    """(date, start, end) strings for compact assertions."""
    return (event.start.date().isoformat(), f"{event.start:%H:%M}", f"{event.end:%H:%M}")


def minutes(event: Event) -> int:
    return int((event.end - event.start) / timedelta(minutes=1))
