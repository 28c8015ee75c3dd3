"""
Event placement entry point.

Architecture:
1. Settings are validated up front (ConfigurationError aborts the call)
2. "Now" is resolved in the user's timezone for past-time rules
3. The placement engine dispatches on event type (scheduling/placement.py)
4. Conflicts cascade through the resolver and space strategies, which recurse
   back into the engine up to the maximum cascade depth

The engine only reads its inputs. Callers persist `scheduled_event` and every
entry of `moved_events` together, and serialise placements per user.
"""

import logging
from collections.abc import Iterable
from datetime import datetime

from .scheduling.constraints import check_basic_constraints, validate_user_settings
from .scheduling.conflicts import find_conflicts
from .scheduling.context import MAX_CASCADE_DEPTH, PlacementContext
from .scheduling.decision_log import DecisionLog
from .scheduling.placement import PlacementEngine
from .scheduling.slots import SLOT_DURATION_MINUTES
from .time_math import get_current_datetime_in_tz
from .types import BatchResult, Event, PlacementResult, UserSchedulingSettings

logger = logging.getLogger(__name__)


class EventScheduler:
    """
    Place events into a user's calendar.

    Each call works on a snapshot: `existing_events` is never modified, and a
    failed placement reports no moved events at all.
    """

    def __init__(
        self,
        max_cascade_depth: int = MAX_CASCADE_DEPTH,
        slot_minutes: int = SLOT_DURATION_MINUTES,
    ) -> None:
        """
        Args:
            max_cascade_depth: Deepest relocation chain allowed before giving up
            slot_minutes: Granularity of candidate start times
        """
        self.max_cascade_depth = max_cascade_depth
        self.slot_minutes = slot_minutes
        self.engine = PlacementEngine()

    def schedule_event(
        self,
        event: Event,
        existing_events: Iterable[Event],
        settings: UserSchedulingSettings,
        current_datetime: datetime | None = None,
    ) -> PlacementResult:
        """
        Find a window for one event, relocating others if necessary.

        Args:
            event: Event to place (its id may already exist in the snapshot,
                in which case the stored copy is replaced)
            existing_events: The user's current events
            settings: Active hours and rest day
            current_datetime: Current local time (defaults to now in settings.timezone)

        Returns:
            PlacementResult with the decision trace attached

        Raises:
            ConfigurationError: If settings are missing or malformed
        """
        validate_user_settings(settings)

        if current_datetime is None:
            current_datetime = get_current_datetime_in_tz(settings.timezone)

        existing_events = list(existing_events)
        log = DecisionLog()
        context = PlacementContext(
            settings=settings,
            events=tuple(e for e in existing_events if e.id != event.id),
            max_depth=self.max_cascade_depth,
            now=current_datetime,
            slot_minutes=self.slot_minutes,
            log=log,
        )

        logger.info("Scheduling %r (%s)", event.title, event.type.value)

        if self._is_already_placed(event, existing_events, context):
            log.record(0, "already_placed", event, "unchanged")
            result = PlacementResult.placed(event)
        else:
            result = self.engine.place(event, context)

        result.decisions = list(log.decisions)

        if result.success:
            if result.moved_events:
                logger.info(
                    "Scheduled %r, moved: %s",
                    event.title,
                    ", ".join(e.title for e in result.moved_events),
                )
            else:
                logger.info("Scheduled %r", event.title)
        else:
            logger.info(
                "Scheduling failed for %r (%s): %s",
                event.title,
                result.error.kind.value,
                result.error.message,
            )

        return result

    def schedule_batch(
        self,
        events: Iterable[Event],
        existing_events: Iterable[Event],
        settings: UserSchedulingSettings,
        current_datetime: datetime | None = None,
    ) -> BatchResult:
        """
        Place a sequence of already-expanded events (e.g. recurrence instances).

        Each success, and everything it moved, becomes part of the snapshot for
        the following events. Failures are recorded and skipped.

        Raises:
            ConfigurationError: If settings are invalid; nothing is placed
        """
        validate_user_settings(settings)

        if current_datetime is None:
            current_datetime = get_current_datetime_in_tz(settings.timezone)

        snapshot = {e.id: e for e in existing_events}
        batch = BatchResult()

        for event in events:
            result = self.schedule_event(event, snapshot.values(), settings, current_datetime)
            batch.results.append(result)

            if not result.success:
                logger.warning("Skipping %r: %s", event.title, result.error.message)
                continue

            for placed in (result.scheduled_event, *result.moved_events):
                snapshot[placed.id] = placed

        return batch

    def _is_already_placed(
        self, event: Event, existing_events: list[Event], context: PlacementContext
    ) -> bool:
        """
        True if the exact same window is already stored and still valid.

        Lets callers re-submit an unchanged event without Flexible/Fluid
        events drifting to an earlier slot.
        """
        stored = any(
            e.id == event.id and e.type is event.type and e.start == event.start and e.end == event.end
            for e in existing_events
        )
        if not stored:
            return False

        if not check_basic_constraints(event, context.settings, context.now).valid:
            return False

        return not find_conflicts(event, context.events)


def schedule_event(
    event: Event,
    existing_events: Iterable[Event],
    settings: UserSchedulingSettings,
    current_datetime: datetime | None = None,
) -> PlacementResult:
    """Convenience wrapper around EventScheduler.schedule_event()."""
    return EventScheduler().schedule_event(event, existing_events, settings, current_datetime)
