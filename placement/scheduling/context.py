"""Immutable state threaded through recursive placement calls."""

from collections.abc import Iterable
from dataclasses import dataclass, field, replace
from datetime import date, datetime

from ..types import Event, UserSchedulingSettings
from .decision_log import DecisionLog
from .slots import SLOT_DURATION_MINUTES

MAX_CASCADE_DEPTH = 3


@dataclass(frozen=True)
class PlacementContext:
    """
    Snapshot of everything a placement step may look at.

    Each recursive step derives a new context (deeper, with some events
    excluded or repositioned) instead of copying and filtering lists in place,
    so a failed branch leaves its parent's view untouched. The decision log is
    the one shared, append-only member.
    """

    settings: UserSchedulingSettings
    events: tuple[Event, ...]
    depth: int = 0
    max_depth: int = MAX_CASCADE_DEPTH
    now: datetime | None = None
    slot_minutes: int = SLOT_DURATION_MINUTES
    log: DecisionLog = field(default_factory=DecisionLog, compare=False)

    @property
    def depth_exceeded(self) -> bool:
        return self.depth > self.max_depth

    @property
    def today(self) -> date | None:
        return self.now.date() if self.now is not None else None

    def deeper(self) -> "PlacementContext":
        return replace(self, depth=self.depth + 1)

    def without(self, *event_ids: str) -> "PlacementContext":
        """Context whose snapshot excludes the given event ids."""
        excluded = set(event_ids)
        return replace(self, events=tuple(e for e in self.events if e.id not in excluded))

    def with_moved(self, moved: Iterable[Event]) -> "PlacementContext":
        """Context where each moved event replaces any copy with the same id."""
        moved = list(moved)
        moved_ids = {e.id for e in moved}
        kept = tuple(e for e in self.events if e.id not in moved_ids)
        return replace(self, events=kept + tuple(moved))

    def events_on(self, day: date) -> list[Event]:
        """Events starting on `day`, chronologically."""
        return sorted((e for e in self.events if e.start.date() == day), key=lambda e: e.start)


def merge_moves(moved: list[Event], new_moves: Iterable[Event]) -> list[Event]:
    """
    Append new moves, keeping one entry per event id.

    An event moved twice keeps only its final position, listed where its
    latest move happened.
    """
    merged = {event.id: event for event in moved}
    for event in new_moves:
        merged.pop(event.id, None)
        merged[event.id] = event
    return list(merged.values())
