"""
Tests for settings validation and per-event constraint checks.
"""

import sys
from datetime import datetime
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).parent))
sys.path.insert(0, str(Path(__file__).parent.parent))

from helpers import MONDAY, SATURDAY, SUNDAY, WEDNESDAY, make_event, make_settings

from placement.exceptions import ConfigurationError
from placement.scheduling.constraints import (
    check_basic_constraints,
    is_within_active_hours,
    validate_user_settings,
    working_days,
)
from placement.types import EventType, UserSchedulingSettings


class TestValidateUserSettings:
    """Settings problems are fatal and raised before any placement."""

    def test_valid_settings_pass(self):
        validate_user_settings(make_settings())

    def test_single_digit_hour_is_accepted(self):
        validate_user_settings(make_settings(start="9:00", end="17:30"))

    def test_missing_settings_raise(self):
        with pytest.raises(ConfigurationError, match="required"):
            validate_user_settings(None)

    def test_missing_field_raises(self):
        settings = UserSchedulingSettings(
            active_start_time="09:00", active_end_time="", rest_day="sunday"
        )
        with pytest.raises(ConfigurationError, match="active_end_time"):
            validate_user_settings(settings)

    @pytest.mark.parametrize("bad_time", ["24:00", "09:60", "9am", "0900"])
    def test_malformed_time_raises(self, bad_time):
        with pytest.raises(ConfigurationError, match="Invalid time format"):
            validate_user_settings(make_settings(start=bad_time))

    def test_rest_day_must_be_weekend(self):
        with pytest.raises(ConfigurationError, match="Rest day"):
            validate_user_settings(make_settings(rest_day="monday"))

    def test_end_must_follow_start(self):
        with pytest.raises(ConfigurationError, match="must be after"):
            validate_user_settings(make_settings(start="17:00", end="09:00"))

    def test_unknown_timezone_raises(self):
        with pytest.raises(ConfigurationError, match="Unknown timezone"):
            validate_user_settings(make_settings(timezone="Mars/Olympus_Mons"))

    def test_known_timezone_passes(self):
        validate_user_settings(make_settings(timezone="America/New_York"))


class TestCheckBasicConstraints:
    """Rest-day, active-hours and past-time checks return values, never raise."""

    def test_event_inside_active_hours_is_valid(self):
        event = make_event("meeting", EventType.FIXED, MONDAY, "10:00", "11:00")
        check = check_basic_constraints(event, make_settings())
        assert check.valid
        assert check.message is None

    def test_rest_day_is_rejected(self):
        event = make_event("meeting", EventType.FIXED, SUNDAY, "10:00", "11:00")
        check = check_basic_constraints(event, make_settings(rest_day="sunday"))
        assert not check.valid
        assert "rest day" in check.message

    def test_saturday_rest_day_allows_sunday(self):
        event = make_event("meeting", EventType.FIXED, SUNDAY, "10:00", "11:00")
        assert check_basic_constraints(event, make_settings(rest_day="saturday")).valid

    def test_window_running_past_active_end_is_rejected(self):
        event = make_event("late", EventType.FIXED, MONDAY, "16:30", "17:30")
        check = check_basic_constraints(event, make_settings())
        assert not check.valid
        assert "outside active hours 09:00-17:00" in check.message

    def test_window_ending_exactly_at_active_end_is_valid(self):
        event = make_event("last", EventType.FIXED, MONDAY, "16:00", "17:00")
        assert check_basic_constraints(event, make_settings()).valid

    def test_placeholder_window_ignored_when_not_checked(self):
        """Flexible placeholders only bind the day."""
        event = make_event("gym", EventType.FLEXIBLE, MONDAY, "06:00", "07:00")
        assert check_basic_constraints(event, make_settings(), check_window=False).valid

    def test_fixed_event_in_the_past_is_rejected(self):
        event = make_event("standup", EventType.FIXED, MONDAY, "10:00", "11:00")
        now = datetime(2026, 1, 5, 12, 0)
        check = check_basic_constraints(event, make_settings(), now=now)
        assert not check.valid
        assert "past" in check.message

    def test_fixed_event_already_started_is_rejected(self):
        event = make_event("standup", EventType.FIXED, MONDAY, "10:00", "11:00")
        now = datetime(2026, 1, 5, 10, 30)
        check = check_basic_constraints(event, make_settings(), now=now)
        assert not check.valid
        assert "cannot start in the past" in check.message

    def test_flexible_event_on_past_day_is_rejected(self):
        event = make_event("gym", EventType.FLEXIBLE, MONDAY, "10:00", "11:00")
        now = datetime(2026, 1, 6, 8, 0)
        check = check_basic_constraints(event, make_settings(), now=now, check_window=False)
        assert not check.valid
        assert "past dates" in check.message

    def test_flexible_event_later_today_placeholder_is_allowed(self):
        """Same-day placeholders in the past are fine; slots start from now."""
        event = make_event("gym", EventType.FLEXIBLE, MONDAY, "09:00", "10:00")
        now = datetime(2026, 1, 5, 12, 0)
        assert check_basic_constraints(event, make_settings(), now=now, check_window=False).valid


class TestActiveHoursAndWorkingDays:
    def test_is_within_active_hours_bounds_are_inclusive(self):
        settings = make_settings()
        assert is_within_active_hours(
            datetime(2026, 1, 5, 9, 0), datetime(2026, 1, 5, 17, 0), settings
        )
        assert not is_within_active_hours(
            datetime(2026, 1, 5, 8, 45), datetime(2026, 1, 5, 9, 15), settings
        )

    def test_working_days_skip_rest_day(self):
        days = working_days(SUNDAY, make_settings(rest_day="sunday"))
        assert days[0] == MONDAY
        assert days[-1] == SATURDAY
        assert len(days) == 6

    def test_working_days_skip_saturday(self):
        days = working_days(SUNDAY, make_settings(rest_day="saturday"))
        assert days[0] == SUNDAY
        assert SATURDAY not in days
        assert len(days) == 6

    def test_working_days_skip_past_days(self):
        days = working_days(SUNDAY, make_settings(), today=WEDNESDAY)
        assert days[0] == WEDNESDAY
        assert len(days) == 4
