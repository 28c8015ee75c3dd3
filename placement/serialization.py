"""
Conversion between JSON-style dicts and placement dataclasses.

Accepts both the camelCase field names used by API clients
(`activeStartTime`, `restDay`, `ownerId`, `_id`) and snake_case ones.
"""

from dataclasses import fields, is_dataclass
from datetime import date, datetime
from enum import Enum
from typing import Any

from .exceptions import InvalidRequestError
from .time_math import parse_iso_datetime
from .types import Event, EventType, UserSchedulingSettings


def _pick(data: dict[str, Any], *keys: str, default: Any = None) -> Any:
    """First present key wins."""
    for key in keys:
        if key in data and data[key] is not None:
            return data[key]
    return default


def _as_datetime(value: Any, tz_name: str | None) -> datetime:
    if isinstance(value, datetime):
        value = value.isoformat()
    return parse_iso_datetime(str(value), tz_name)


def settings_from_dict(data: dict[str, Any]) -> UserSchedulingSettings:
    """Build settings; validation happens later in validate_user_settings()."""
    return UserSchedulingSettings(
        active_start_time=_pick(data, "activeStartTime", "active_start_time"),
        active_end_time=_pick(data, "activeEndTime", "active_end_time"),
        rest_day=_pick(data, "restDay", "rest_day"),
        timezone=_pick(data, "timezone", "timeZone"),
    )


def event_from_dict(data: dict[str, Any], tz_name: str | None = None) -> Event:
    """
    Build an Event from a request record.

    Raises:
        InvalidRequestError: If a required field is missing or malformed
    """
    event_id = _pick(data, "id", "_id")
    if event_id is None:
        raise InvalidRequestError(f"Event is missing an id: {data!r}")

    try:
        event_type = EventType(str(data["type"]).lower())
        start = _as_datetime(data["start"], tz_name)
        end = _as_datetime(data["end"], tz_name)
    except KeyError as e:
        raise InvalidRequestError(f"Event {event_id!r} is missing field {e}") from e
    except ValueError as e:
        raise InvalidRequestError(f"Event {event_id!r} is malformed: {e}") from e

    week = _pick(data, "targetWeekStart", "target_week_start")
    if week is not None and not isinstance(week, date):
        try:
            week = date.fromisoformat(str(week)[:10])
        except ValueError as e:
            raise InvalidRequestError(
                f"Event {event_id!r} has an invalid targetWeekStart {week!r}"
            ) from e

    try:
        return Event(
            id=str(event_id),
            title=data.get("title", ""),
            type=event_type,
            start=start,
            end=end,
            duration=_pick(data, "duration"),
            owner_id=_pick(data, "ownerId", "owner_id", "user"),
            description=data.get("description") or "",
            target_week_start=week,
        )
    except ValueError as e:
        raise InvalidRequestError(str(e)) from e


def to_dict(obj: object) -> object:
    """Convert dataclass instances to JSON-ready values recursively."""
    if is_dataclass(obj) and not isinstance(obj, type):
        return {f.name: to_dict(getattr(obj, f.name)) for f in fields(obj)}
    elif isinstance(obj, (list, tuple)):
        return [to_dict(item) for item in obj]
    elif isinstance(obj, Enum):
        return obj.value
    elif isinstance(obj, (datetime, date)):
        return obj.isoformat()
    else:
        return obj
