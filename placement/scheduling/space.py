"""
Space creation for Flexible events.

A Flexible event is bound to its day. When no slot is free on that day, Fluid
events on the same day are moved elsewhere in their week to open one up.
Strategies run in increasing cost order and stop at the first success:

1. Direct replacement - one Fluid event at least as long as the need
2. Gap combination - a Fluid event plus an idle gap touching it
3. Adjacent pair - two back-to-back Fluid events

Every attempt works on derived contexts, so a failed attempt leaves nothing
behind for the next one.
"""

from collections.abc import Callable
from datetime import date
from itertools import combinations

from ..types import (
    ErrorKind,
    Event,
    EventType,
    PlacementResult,
    RelocationRequest,
    TimeWindow,
)
from .cascade import PlaceFn
from .context import PlacementContext, merge_moves
from .slots import calculate_day_gaps

DirectPlacementFn = Callable[
    [Event, RelocationRequest | None, date, PlacementContext], Event | None
]


class SpaceCreator:
    """Open a slot on a fixed day by relocating Fluid events."""

    def __init__(self, place: PlaceFn, try_direct_placement: DirectPlacementFn) -> None:
        self.place = place
        self.try_direct_placement = try_direct_placement

    def create_space(
        self,
        event: Event,
        moving: RelocationRequest | None,
        day: date,
        context: PlacementContext,
    ) -> PlacementResult:
        """
        Try each strategy in turn for a Flexible event on `day`.

        Args:
            event: The Flexible event needing room
            moving: Its relocation request when it is itself being displaced
            day: The event's (fixed) day
            context: Snapshot at the event's depth

        Returns:
            Success with the placed event and the Fluid events moved for it,
            or NO_AVAILABLE_SLOT scoped to the day
        """
        needed = event.duration_minutes
        day_events = [e for e in context.events_on(day) if e.id != event.id]
        fluid_events = [e for e in day_events if e.type is EventType.FLUID]

        if not fluid_events:
            return PlacementResult.failed(
                ErrorKind.NO_AVAILABLE_SLOT,
                f"No free {needed}-minute slot on {day:%A, %b %d} and no fluid events to move",
                duration_minutes=needed,
                scope="day",
            )

        strategies = (
            ("direct_replacement", self._direct_replacement),
            ("gap_combination", self._gap_combination),
            ("adjacent_pair", self._adjacent_pair),
        )
        first_entry = len(context.log)
        for name, strategy in strategies:
            context.log.record(context.depth, "strategy", event, name)
            result = strategy(event, moving, day, day_events, fluid_events, context)
            if result is not None:
                return result
            context.log.record(context.depth, "strategy_failed", event, name)

        # Report the depth limit rather than "no space" when it cut a strategy short
        attempts = context.log.decisions[first_entry:]
        if any(d.action == "depth_exceeded" for d in attempts):
            return PlacementResult.failed(
                ErrorKind.CASCADE_DEPTH_EXCEEDED,
                f"Maximum cascade depth ({context.max_depth}) exceeded while making room "
                f"on {day:%A, %b %d}",
                event_id=event.id,
            )

        return PlacementResult.failed(
            ErrorKind.NO_AVAILABLE_SLOT,
            f"Could not create {needed}-minute space on {day:%A, %b %d} using any strategy",
            duration_minutes=needed,
            scope="day",
        )

    def _relocate(
        self, fluid: Event, zones: tuple[TimeWindow, ...], pool: PlacementContext
    ) -> list[Event] | None:
        """Move one Fluid event one level deeper; returns the moves or None."""
        pool.log.record(pool.depth, "relocate", fluid, f"{len(zones)} forbidden zone(s)")
        result = self.place(RelocationRequest(fluid, zones), pool.deeper())
        if not result.success:
            return None
        return [result.scheduled_event, *result.moved_events]

    def _finish(
        self,
        event: Event,
        moving: RelocationRequest | None,
        day: date,
        pool: PlacementContext,
        moved: list[Event],
    ) -> PlacementResult | None:
        """Retry direct placement once the moved events sit at their new positions."""
        placed = self.try_direct_placement(event, moving, day, pool.with_moved(moved))
        if placed is None:
            return None
        return PlacementResult.placed(placed, moved)

    def _direct_replacement(self, event, moving, day, day_events, fluid_events, context):
        needed = event.duration_minutes
        parent_zones = moving.forbidden_zones if moving else ()

        candidates = sorted(
            (f for f in fluid_events if f.duration_minutes >= needed),
            key=lambda f: f.duration_minutes,
        )
        for fluid in candidates:
            pool = context.without(fluid.id)
            moved = self._relocate(fluid, parent_zones, pool)
            if moved is None:
                continue
            result = self._finish(event, moving, day, pool, moved)
            if result is not None:
                return result
        return None

    def _gap_combination(self, event, moving, day, day_events, fluid_events, context):
        needed = event.duration_minutes
        parent_zones = moving.forbidden_zones if moving else ()
        gaps = calculate_day_gaps(day, day_events, context.settings, moving or event)

        candidates = sorted(
            (f for f in fluid_events if f.duration_minutes < needed),
            key=lambda f: f.duration_minutes,
        )
        for fluid in candidates:
            for gap in gaps:
                if gap.duration_minutes + fluid.duration_minutes < needed:
                    continue
                if not gap.is_adjacent_to(fluid):
                    continue

                # The gap is where the Flexible event will go
                pool = context.without(fluid.id)
                zones = parent_zones + (TimeWindow(gap.start, gap.end),)
                moved = self._relocate(fluid, zones, pool)
                if moved is None:
                    continue
                result = self._finish(event, moving, day, pool, moved)
                if result is not None:
                    return result
        return None

    def _adjacent_pair(self, event, moving, day, day_events, fluid_events, context):
        needed = event.duration_minutes
        parent_zones = moving.forbidden_zones if moving else ()

        pairs = []
        for first, second in combinations(fluid_events, 2):
            if first.duration_minutes >= needed or second.duration_minutes >= needed:
                continue
            if first.end != second.start and second.end != first.start:
                continue
            total = first.duration_minutes + second.duration_minutes
            if total >= needed:
                pairs.append((total, first, second))
        pairs.sort(key=lambda pair: pair[0])

        for _total, first, second in pairs:
            moved = self._relocate(first, parent_zones, context.without(first.id))
            if moved is None:
                continue

            # Both paired events leave the pool; the second may not refill the first's slot
            pool = context.without(first.id, second.id)
            second_moves = self._relocate(
                second, parent_zones + (first.window,), pool.with_moved(moved)
            )
            if second_moves is None:
                continue
            moved = merge_moves(moved, second_moves)

            result = self._finish(event, moving, day, pool, moved)
            if result is not None:
                return result
        return None
