"""
Data structures for event placement.

Events and settings arrive as immutable snapshots; placement never mutates
them and instead returns new Event instances inside a PlacementResult.
"""

from dataclasses import dataclass, field, replace
from datetime import date, datetime, timedelta
from enum import Enum
from typing import Literal

# =============================================================================
# Events
# =============================================================================


class EventType(str, Enum):
    """Rigidity class of an event, from most to least constrained."""

    FIXED = "fixed"  # Immovable window, displaces others
    FLEXIBLE = "flexible"  # Fixed day, movable time-of-day
    FLUID = "fluid"  # Movable anywhere in its week except the rest day


RestDay = Literal["saturday", "sunday"]


@dataclass(frozen=True)
class Event:
    """
    A calendar event as supplied by the caller.

    For Flexible and Fluid events, start/end are a placeholder: the day (or
    week) is taken from `start`, the time-of-day is chosen by placement.
    """

    id: str
    title: str
    type: EventType
    start: datetime
    end: datetime
    duration: int | None = None  # Seconds; None means end - start
    owner_id: str | None = None
    description: str = ""

    # Fluid only: search this week instead of the week containing `start`
    target_week_start: date | None = None

    def __post_init__(self) -> None:
        if self.end <= self.start:
            raise ValueError(
                f"Event {self.id!r} must end after it starts ({self.start} >= {self.end})"
            )
        # Placement works in whole minutes
        if self.duration is not None and self.duration < 60:
            raise ValueError(
                f"Event {self.id!r} duration must be at least 60 seconds (got {self.duration})"
            )

    @property
    def duration_minutes(self) -> int:
        """Requested duration in whole minutes."""
        if self.duration is not None:
            return self.duration // 60
        return int((self.end - self.start).total_seconds() // 60)

    @property
    def window(self) -> "TimeWindow":
        return TimeWindow(self.start, self.end)

    def moved_to(self, start: datetime, end: datetime) -> "Event":
        """Copy of this event occupying a new window."""
        duration_seconds = int((end - start).total_seconds())
        return replace(self, start=start, end=end, duration=duration_seconds)


@dataclass(frozen=True)
class TimeWindow:
    """Half-open interval [start, end)."""

    start: datetime
    end: datetime

    def overlaps(self, start: datetime, end: datetime) -> bool:
        return start < self.end and end > self.start


@dataclass(frozen=True)
class RelocationRequest:
    """
    An existing event that has to move because something displaced it.

    Internal to the cascade. The relocated event may not land on its own
    original window, nor on any forbidden zone (the window reserved for the
    event that triggered the move, plus zones inherited from parent moves).
    """

    event: Event
    forbidden_zones: tuple[TimeWindow, ...] = ()

    @property
    def original_window(self) -> TimeWindow:
        return self.event.window

    def blocks(self, start: datetime, end: datetime) -> bool:
        """True if [start, end) touches the original window or a forbidden zone."""
        if self.original_window.overlaps(start, end):
            return True
        return any(zone.overlaps(start, end) for zone in self.forbidden_zones)


# =============================================================================
# Settings and search primitives
# =============================================================================


@dataclass(frozen=True)
class UserSchedulingSettings:
    """Per-user constraints, read-only for the duration of a placement call."""

    active_start_time: str  # "09:00"
    active_end_time: str  # "17:00"
    rest_day: RestDay
    timezone: str | None = None  # IANA name used to resolve "now"


@dataclass(frozen=True)
class TimeSlot:
    """Candidate window produced by the forward checker."""

    start: datetime
    end: datetime


@dataclass(frozen=True)
class DayGap:
    """Idle interval between scheduled events within active hours."""

    start: datetime
    end: datetime

    @property
    def duration_minutes(self) -> int:
        return int((self.end - self.start) / timedelta(minutes=1))

    def is_adjacent_to(self, event: Event) -> bool:
        """True if the gap ends where the event starts or starts where it ends."""
        return self.end == event.start or self.start == event.end


# =============================================================================
# Results
# =============================================================================


class ErrorKind(str, Enum):
    """Failure taxonomy. Only CONFIGURATION is fatal to a whole batch."""

    CONFIGURATION = "configuration"
    CONSTRAINT_VIOLATION = "constraint_violation"
    FIXED_CONFLICT = "fixed_conflict"
    NO_AVAILABLE_SLOT = "no_available_slot"
    CASCADE_FAILURE = "cascade_failure"
    CASCADE_DEPTH_EXCEEDED = "cascade_depth_exceeded"


@dataclass(frozen=True)
class PlacementError:
    """Why a placement failed."""

    kind: ErrorKind
    message: str
    event_id: str | None = None  # Blocking event for cascade failures
    duration_minutes: int | None = None  # For NO_AVAILABLE_SLOT
    scope: Literal["day", "week"] | None = None  # For NO_AVAILABLE_SLOT


DecisionAction = Literal[
    "place",
    "placed",
    "already_placed",
    "rejected",
    "conflicts",
    "relocate",
    "relocated",
    "strategy",
    "strategy_failed",
    "depth_exceeded",
]


@dataclass(frozen=True)
class Decision:
    """One step of the placement trace."""

    depth: int
    action: DecisionAction
    event_id: str
    detail: str = ""


@dataclass
class PlacementResult:
    """Outcome of placing one event."""

    success: bool
    scheduled_event: Event | None = None
    moved_events: list[Event] = field(default_factory=list)
    error: PlacementError | None = None
    decisions: list[Decision] = field(default_factory=list)

    @classmethod
    def placed(cls, event: Event, moved_events: list[Event] | None = None) -> "PlacementResult":
        return cls(success=True, scheduled_event=event, moved_events=list(moved_events or []))

    @classmethod
    def failed(cls, kind: ErrorKind, message: str, **details) -> "PlacementResult":
        return cls(success=False, error=PlacementError(kind=kind, message=message, **details))


@dataclass
class BatchResult:
    """Outcome of placing a sequence of pre-expanded instances."""

    results: list[PlacementResult] = field(default_factory=list)

    @property
    def scheduled_events(self) -> list[Event]:
        return [r.scheduled_event for r in self.results if r.success]

    @property
    def moved_events(self) -> list[Event]:
        """Latest position of every event moved across the batch, by id."""
        latest: dict[str, Event] = {}
        for result in self.results:
            for event in result.moved_events:
                latest[event.id] = event
        return list(latest.values())

    @property
    def failures(self) -> list[PlacementResult]:
        return [r for r in self.results if not r.success]
