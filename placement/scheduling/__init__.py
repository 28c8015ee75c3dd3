"""
Placement Layer.

Assigns concrete windows to events under working-hours and rest-day
constraints, moving lower-priority events out of the way when needed.

Modules:
- constraints: Settings validation and per-event rest-day/active-hours checks
- conflicts: Interval overlap detection
- slots: Slot generation, forward checking, gap calculation
- placement: Type-specific placement and dispatch
- cascade: Recursive relocation of displaced events
- space: Space-creation strategies for Flexible events
"""

from .cascade import CascadeResolver
from .constraints import check_basic_constraints, validate_user_settings
from .context import MAX_CASCADE_DEPTH, PlacementContext
from .decision_log import DecisionLog
from .placement import PlacementEngine
from .slots import SLOT_DURATION_MINUTES
from .space import SpaceCreator

__all__ = [
    "PlacementEngine",
    "CascadeResolver",
    "SpaceCreator",
    "PlacementContext",
    "DecisionLog",
    "check_basic_constraints",
    "validate_user_settings",
    "MAX_CASCADE_DEPTH",
    "SLOT_DURATION_MINUTES",
]
