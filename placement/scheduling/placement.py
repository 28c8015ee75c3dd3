"""
Type-specific placement.

Dispatches on event rigidity:
- FIXED: exact window; displaces movable events through the cascade resolver
- FLEXIBLE: fixed day, earliest free time; opens space by moving Fluid events
- FLUID: earliest free slot on any working day of its week

Relocations re-enter `place` one level deeper, bounded by the context's
maximum cascade depth.
"""

from datetime import date
from typing import assert_never

from ..time_math import week_start
from ..types import ErrorKind, Event, EventType, PlacementResult, RelocationRequest
from .cascade import CascadeResolver
from .conflicts import find_conflicts
from .constraints import check_basic_constraints, working_days
from .context import PlacementContext
from .slots import forward_check, generate_day_time_slots
from .space import SpaceCreator


class PlacementEngine:
    """Recursive placement procedure shared by the cascade and space strategies."""

    def __init__(self) -> None:
        self.cascade = CascadeResolver(self.place)
        self.space = SpaceCreator(self.place, self.try_direct_placement)

    def place(self, request: Event | RelocationRequest, context: PlacementContext) -> PlacementResult:
        """
        Place an event, or relocate an already-scheduled one.

        Args:
            request: A new event, or a relocation request for a displaced event
            context: Snapshot of the events the placement must respect

        Returns:
            PlacementResult; never raises for placement failures
        """
        if isinstance(request, RelocationRequest):
            event, moving = request.event, request
        else:
            event, moving = request, None

        if context.depth_exceeded:
            context.log.record(context.depth, "depth_exceeded", event, f"limit {context.max_depth}")
            return PlacementResult.failed(
                ErrorKind.CASCADE_DEPTH_EXCEEDED,
                f"Maximum cascade depth ({context.max_depth}) exceeded",
                event_id=event.id,
            )

        context.log.record(
            context.depth, "place", event, f"{event.type.value}, {event.duration_minutes}min"
        )

        match event.type:
            case EventType.FIXED:
                result = self._place_fixed(event, context)
            case EventType.FLEXIBLE:
                result = self._place_flexible(event, moving, context)
            case EventType.FLUID:
                result = self._place_fluid(event, moving, context)
            case _:
                assert_never(event.type)

        if result.success:
            placed = result.scheduled_event
            context.log.record(
                context.depth,
                "placed",
                placed,
                f"{placed.start:%Y-%m-%d %H:%M}-{placed.end:%H:%M}, {len(result.moved_events)} moved",
            )
        else:
            context.log.record(context.depth, "rejected", event, result.error.message)
        return result

    def _place_fixed(self, event: Event, context: PlacementContext) -> PlacementResult:
        check = check_basic_constraints(event, context.settings, context.now)
        if not check.valid:
            return PlacementResult.failed(ErrorKind.CONSTRAINT_VIOLATION, check.message)

        conflicts = find_conflicts(event, context.events)
        if not conflicts:
            return PlacementResult.placed(event)

        # Two immovable events can never share time
        fixed_conflicts = [c for c in conflicts if c.type is EventType.FIXED]
        if fixed_conflicts:
            titles = ", ".join(c.title for c in fixed_conflicts)
            return PlacementResult.failed(
                ErrorKind.FIXED_CONFLICT,
                f"Fixed event conflicts with other fixed events: {titles}",
                event_id=fixed_conflicts[0].id,
            )

        return self.cascade.resolve(event, conflicts, context)

    def _place_flexible(
        self, event: Event, moving: RelocationRequest | None, context: PlacementContext
    ) -> PlacementResult:
        day = event.start.date()

        # The requested time-of-day is a placeholder, only the day is binding
        check = check_basic_constraints(event, context.settings, context.now, check_window=False)
        if not check.valid:
            return PlacementResult.failed(ErrorKind.CONSTRAINT_VIOLATION, check.message)

        placed = self.try_direct_placement(event, moving, day, context)
        if placed is not None:
            return PlacementResult.placed(placed)

        return self.space.create_space(event, moving, day, context)

    def _place_fluid(
        self, event: Event, moving: RelocationRequest | None, context: PlacementContext
    ) -> PlacementResult:
        duration = event.duration_minutes
        first_day = event.target_week_start or week_start(event.start.date())
        week_label = f"week of {first_day:%b %d, %Y}"

        days = working_days(first_day, context.settings, context.today)
        if not days:
            return PlacementResult.failed(
                ErrorKind.NO_AVAILABLE_SLOT,
                f"No working days available in the {week_label}",
                duration_minutes=duration,
                scope="week",
            )

        for day in days:
            slots = generate_day_time_slots(
                day, context.settings, context.now, context.slot_minutes
            )
            valid = forward_check(slots, duration, list(context.events), context.settings, moving)
            if valid:
                return PlacementResult.placed(event.moved_to(valid[0].start, valid[0].end))

        return PlacementResult.failed(
            ErrorKind.NO_AVAILABLE_SLOT,
            f"No available {duration}-minute slots in the {week_label}",
            duration_minutes=duration,
            scope="week",
        )

    def try_direct_placement(
        self,
        event: Event,
        moving: RelocationRequest | None,
        day: date,
        context: PlacementContext,
    ) -> Event | None:
        """Earliest free window on `day` without moving anything, or None."""
        slots = generate_day_time_slots(day, context.settings, context.now, context.slot_minutes)
        valid = forward_check(
            slots, event.duration_minutes, list(context.events), context.settings, moving
        )
        if not valid:
            return None
        return event.moved_to(valid[0].start, valid[0].end)
