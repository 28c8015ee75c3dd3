"""
Place events from a JSON request file.

Usage: place-event [--verbose] <request_file.json>

The request holds `settings`, `existingEvents` and either a single `event` or
a list of `events` (placed in order as a batch). Optional `currentDatetime`
pins "now". The placement result is written as JSON to stdout.

Exit codes: 0 placed, 1 placement failed, 2 bad settings or request.
"""

import argparse
import json
import logging
import sys

from .exceptions import EXIT_CODES, ConfigurationError, InvalidRequestError
from .scheduler import EventScheduler
from .scheduling.constraints import validate_user_settings
from .serialization import event_from_dict, settings_from_dict, to_dict
from .time_math import parse_iso_datetime


def run(data: dict) -> tuple[dict, bool]:
    """Execute one request; returns (payload, success)."""
    settings = settings_from_dict(data.get("settings") or {})
    # The timezone is needed to parse every datetime below
    validate_user_settings(settings)
    tz_name = settings.timezone

    existing = [event_from_dict(e, tz_name) for e in data.get("existingEvents", [])]
    current = data.get("currentDatetime")
    try:
        current_datetime = parse_iso_datetime(current, tz_name) if current else None
    except ValueError as e:
        raise InvalidRequestError(f"Invalid currentDatetime {current!r}: {e}") from e

    scheduler = EventScheduler()

    if "events" in data:
        events = [event_from_dict(e, tz_name) for e in data["events"]]
        batch = scheduler.schedule_batch(events, existing, settings, current_datetime)
        payload = {
            "results": to_dict(batch.results),
            "scheduledEvents": to_dict(batch.scheduled_events),
            "movedEvents": to_dict(batch.moved_events),
        }
        return payload, not batch.failures

    if "event" not in data:
        raise InvalidRequestError("Request needs an 'event' or 'events' field")

    event = event_from_dict(data["event"], tz_name)
    result = scheduler.schedule_event(event, existing, settings, current_datetime)
    return to_dict(result), result.success


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(prog="place-event", description=__doc__.splitlines()[1])
    parser.add_argument("request_file", help="JSON file with settings, events and existingEvents")
    parser.add_argument("-v", "--verbose", action="store_true", help="log placement decisions")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="[%(levelname)s] %(message)s",
        stream=sys.stderr,
    )

    try:
        with open(args.request_file) as f:
            data = json.load(f)
        payload, success = run(data)
    except FileNotFoundError:
        print(json.dumps({"error": f"Request file not found: {args.request_file}"}))
        return 2
    except json.JSONDecodeError as e:
        print(json.dumps({"error": f"Invalid JSON in request file: {e}"}))
        return 2
    except (ConfigurationError, InvalidRequestError) as e:
        print(json.dumps({"error": str(e), "kind": type(e).__name__}))
        return EXIT_CODES[type(e)]

    print(json.dumps(payload))
    return 0 if success else 1


if __name__ == "__main__":
    sys.exit(main())
