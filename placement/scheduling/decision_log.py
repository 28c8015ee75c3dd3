"""
Decision trace for a placement call.

Records every placement, conflict, relocation and strategy attempt so callers
and tests can inspect why an event ended up where it did (or why it failed).
Entries are mirrored to the module logger at DEBUG level.
"""

import logging

from ..types import Decision, DecisionAction, Event

logger = logging.getLogger(__name__)


class DecisionLog:
    """Append-only list of Decision records."""

    def __init__(self) -> None:
        self.decisions: list[Decision] = []

    def record(self, depth: int, action: DecisionAction, event: Event, detail: str = "") -> None:
        self.decisions.append(Decision(depth=depth, action=action, event_id=event.id, detail=detail))
        logger.debug("%s%s %r: %s", "  " * depth, action, event.title, detail)

    def __len__(self) -> int:
        return len(self.decisions)
