"""
Slot generation, forward checking and gap calculation for a single day.

Forward checking prunes the candidate start times before anything is
committed: a slot survives only if the whole window fits the day's active
hours and is free of existing events and of any zone the moving event must
avoid.
"""

from collections.abc import Iterable
from datetime import date, datetime, timedelta

from ..time_math import at_time, next_slot_boundary
from ..types import DayGap, Event, RelocationRequest, TimeSlot, TimeWindow, UserSchedulingSettings
from .conflicts import find_conflicts

SLOT_DURATION_MINUTES = 15


def generate_day_time_slots(
    day: date,
    settings: UserSchedulingSettings,
    now: datetime | None = None,
    slot_minutes: int = SLOT_DURATION_MINUTES,
) -> list[datetime]:
    """
    Enumerate candidate start instants for a day.

    Starts at active start and steps by `slot_minutes` up to, but excluding,
    active end. On the current day, starts already behind `now` are skipped
    (the first candidate is the next slot boundary after now).
    """
    current = at_time(day, settings.active_start_time)
    end = at_time(day, settings.active_end_time)

    if now is not None and now.date() == day and current < now:
        current = max(current, next_slot_boundary(now, slot_minutes))

    step = timedelta(minutes=slot_minutes)
    slots = []
    while current < end:
        slots.append(current)
        current += step
    return slots


def forward_check(
    slots: Iterable[datetime],
    duration_minutes: int,
    existing_events: list[Event],
    settings: UserSchedulingSettings,
    moving: RelocationRequest | None = None,
) -> list[TimeSlot]:
    """
    Keep the slots whose window can actually hold the event.

    Args:
        slots: Candidate start instants, earliest first
        duration_minutes: Length of the window to fit
        existing_events: Events that stay where they are
        settings: User constraints (for active-hours end)
        moving: Set when an existing event is being relocated; its original
            window and forbidden zones are excluded

    Returns:
        Surviving windows, earliest first
    """
    duration = timedelta(minutes=duration_minutes)
    valid = []

    for start in slots:
        end = start + duration

        if end > at_time(start.date(), settings.active_end_time):
            continue

        if moving is not None and moving.blocks(start, end):
            continue

        candidate = TimeSlot(start, end)
        if find_conflicts(candidate, existing_events):
            continue

        valid.append(candidate)

    return valid


def _blocked_windows(
    day_events: Iterable[Event], moving: RelocationRequest | Event | None
) -> list[TimeWindow]:
    """Windows that count as occupied when looking for gaps."""
    moving_id = None
    blocked = []

    if isinstance(moving, RelocationRequest):
        moving_id = moving.event.id
        blocked.append(moving.original_window)
        blocked.extend(moving.forbidden_zones)
    elif moving is not None:
        moving_id = moving.id

    blocked.extend(event.window for event in day_events if event.id != moving_id)
    return blocked


def calculate_day_gaps(
    day: date,
    day_events: Iterable[Event],
    settings: UserSchedulingSettings,
    moving: RelocationRequest | Event | None = None,
) -> list[DayGap]:
    """
    Walk the day chronologically and emit every maximal idle interval.

    Occupied time is the day's events (minus the moving one) plus, for a
    relocation, its original window and forbidden zones. Blocks are clipped to
    active hours; blocks on other days are ignored. Zero-length gaps between
    touching blocks are included.

    Args:
        day: Calendar day to inspect
        day_events: Events scheduled on that day
        settings: User constraints (active-hours bounds)
        moving: The event being placed, if any

    Returns:
        Gaps in chronological order
    """
    day_start = at_time(day, settings.active_start_time)
    day_end = at_time(day, settings.active_end_time)

    clipped = [
        TimeWindow(max(window.start, day_start), min(window.end, day_end))
        for window in _blocked_windows(day_events, moving)
        if window.overlaps(day_start, day_end)
    ]
    clipped.sort(key=lambda window: (window.start, window.end))

    gaps = []
    cursor = day_start
    for window in clipped:
        if cursor <= window.start:
            gaps.append(DayGap(cursor, window.start))
        if window.end > cursor:
            cursor = window.end

    if cursor <= day_end:
        gaps.append(DayGap(cursor, day_end))

    return gaps
