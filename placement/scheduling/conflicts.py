"""Pairwise interval-overlap detection."""

from collections.abc import Iterable
from datetime import datetime
from typing import Protocol

from ..types import Event


class Interval(Protocol):
    start: datetime
    end: datetime


def overlaps(a_start: datetime, a_end: datetime, b_start: datetime, b_end: datetime) -> bool:
    """Half-open overlap test: touching intervals do not conflict."""
    return a_start < b_end and a_end > b_start


def find_conflicts(candidate: Interval, existing_events: Iterable[Event]) -> list[Event]:
    """
    Return the existing events overlapping the candidate window.

    Order follows `existing_events`.
    """
    return [
        other
        for other in existing_events
        if overlaps(candidate.start, candidate.end, other.start, other.end)
    ]
