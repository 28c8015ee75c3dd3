"""
Tests for placing pre-expanded instances one after another.
"""

import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).parent))
sys.path.insert(0, str(Path(__file__).parent.parent))

from helpers import MONDAY, make_event, make_settings, window

from placement.exceptions import ConfigurationError
from placement.types import ErrorKind, EventType


class TestScheduleBatch:
    def test_each_instance_sees_the_previous_ones(self, scheduler, settings, now):
        instances = [
            make_event(f"focus-{i}", EventType.FLEXIBLE, MONDAY, "09:00", "12:00")
            for i in range(1, 4)
        ]

        batch = scheduler.schedule_batch(instances, [], settings, now)

        assert [window(e) for e in batch.scheduled_events] == [
            ("2026-01-05", "09:00", "12:00"),
            ("2026-01-05", "12:00", "15:00"),
        ]
        assert len(batch.failures) == 1
        failure = batch.failures[0]
        assert failure.error.kind is ErrorKind.NO_AVAILABLE_SLOT
        assert failure.error.duration_minutes == 180

    def test_failures_are_skipped_not_fatal(self, scheduler, settings, now):
        events = [
            make_event("brunch", EventType.FIXED, MONDAY, "08:00", "09:00"),
            make_event("gym", EventType.FLEXIBLE, MONDAY, "09:00", "10:00"),
        ]

        batch = scheduler.schedule_batch(events, [], settings, now)

        assert [r.success for r in batch.results] == [False, True]
        assert batch.results[0].error.kind is ErrorKind.CONSTRAINT_VIOLATION

    def test_moved_events_feed_into_later_instances(self, scheduler, settings, now):
        existing = [make_event("reading", EventType.FLUID, MONDAY, "09:00", "09:30")]
        events = [
            make_event("meeting", EventType.FIXED, MONDAY, "09:00", "10:00"),
            make_event("emails", EventType.FLUID, MONDAY, "09:00", "09:30"),
        ]

        batch = scheduler.schedule_batch(events, existing, settings, now)

        assert not batch.failures
        assert [window(e) for e in batch.moved_events] == [("2026-01-05", "10:00", "10:30")]
        emails = batch.scheduled_events[1]
        assert window(emails) == ("2026-01-05", "10:30", "11:00")

    def test_invalid_settings_abort_the_batch(self, scheduler, now):
        events = [make_event("gym", EventType.FLEXIBLE, MONDAY, "09:00", "10:00")]
        with pytest.raises(ConfigurationError):
            scheduler.schedule_batch(events, [], make_settings(end="08:00"), now)

    def test_existing_list_is_not_mutated(self, scheduler, settings, now):
        existing = [make_event("reading", EventType.FLUID, MONDAY, "09:00", "09:30")]
        snapshot = list(existing)
        events = [make_event("meeting", EventType.FIXED, MONDAY, "09:00", "10:00")]

        scheduler.schedule_batch(events, existing, settings, now)

        assert existing == snapshot
