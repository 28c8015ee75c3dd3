"""
Chrony Event Placement

Assigns concrete time windows to calendar events under per-user active hours
and rest-day constraints, relocating lower-priority events when a
higher-priority one needs their time.

Main entry point: EventScheduler
"""

from .exceptions import ConfigurationError
from .scheduler import EventScheduler, schedule_event
from .types import (
    BatchResult,
    Decision,
    ErrorKind,
    Event,
    EventType,
    PlacementError,
    PlacementResult,
    RelocationRequest,
    TimeSlot,
    TimeWindow,
    UserSchedulingSettings,
)

__all__ = [
    # Types
    "Event",
    "EventType",
    "TimeWindow",
    "TimeSlot",
    "RelocationRequest",
    "UserSchedulingSettings",
    "PlacementResult",
    "PlacementError",
    "ErrorKind",
    "Decision",
    "BatchResult",
    # Errors
    "ConfigurationError",
    # Scheduler
    "EventScheduler",
    "schedule_event",
]
