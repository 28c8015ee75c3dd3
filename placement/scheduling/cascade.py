"""
Cascading conflict resolution.

When a higher-priority event claims a window, every event overlapping it is
relocated, and each relocation may in turn displace further events. Placement
is all-or-nothing: if any displaced event cannot be moved, nothing is moved.
"""

from collections.abc import Callable

from ..types import ErrorKind, Event, EventType, PlacementResult, RelocationRequest
from .context import PlacementContext, merge_moves

PlaceFn = Callable[[Event | RelocationRequest, PlacementContext], PlacementResult]


class CascadeResolver:
    """
    Relocate the events standing in a target window.

    Fluid conflicts go first (no day constraint, so they are cheaper to move
    and rarely cascade further), then Flexible ones. Fixed conflicts never
    reach this point.
    """

    def __init__(self, place: PlaceFn) -> None:
        """
        Args:
            place: Recursive placement entry point used for each relocation
        """
        self.place = place

    def resolve(
        self, target: Event, conflicts: list[Event], context: PlacementContext
    ) -> PlacementResult:
        """
        Move every conflict out of the target's window, then place the target there.

        Args:
            target: Event that will occupy its requested window
            conflicts: Movable events currently overlapping that window
            context: Snapshot at the target's depth

        Returns:
            Success with the target and every event moved (directly or
            transitively), or a failure naming the first event that could not move
        """
        fluid = [c for c in conflicts if c.type is EventType.FLUID]
        flexible = [c for c in conflicts if c.type is EventType.FLEXIBLE]
        context.log.record(
            context.depth,
            "conflicts",
            target,
            f"{len(fluid)} fluid, {len(flexible)} flexible to relocate",
        )

        zone = target.window
        displaced: set[str] = set()
        moved: list[Event] = []

        for conflict in fluid + flexible:
            displaced.add(conflict.id)
            # Displaced events leave the pool; everything moved so far re-enters
            # at its new position
            pool = context.without(*displaced).with_moved(moved).deeper()

            context.log.record(
                context.depth, "relocate", conflict, f"away from {zone.start:%H:%M}-{zone.end:%H:%M}"
            )
            result = self.place(RelocationRequest(conflict, (zone,)), pool)

            if not result.success:
                kind = ErrorKind.CASCADE_FAILURE
                if result.error.kind is ErrorKind.CASCADE_DEPTH_EXCEEDED:
                    kind = ErrorKind.CASCADE_DEPTH_EXCEEDED
                return PlacementResult.failed(
                    kind,
                    f'Cannot move {conflict.type.value} event "{conflict.title}": '
                    f"{result.error.message}",
                    event_id=conflict.id,
                )

            context.log.record(
                context.depth,
                "relocated",
                conflict,
                f"to {result.scheduled_event.start:%a %H:%M}",
            )
            moved = merge_moves(moved, [result.scheduled_event, *result.moved_events])

        return PlacementResult.placed(target, moved)
