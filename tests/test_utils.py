"""Tests for shared utility functions and input validators."""

from datetime import date

import pytest

from lenslink.errors import ValidationError
from lenslink.schemas import Location
from lenslink.scheduling.validation import (
    compute_duration,
    validate_event_date,
    validate_guest_count,
    validate_location,
    validate_text,
    validate_time,
)
from lenslink.utils import (
    is_valid_email,
    is_valid_time,
    new_id,
    normalize_time,
    round_half_up,
    time_to_minutes,
)
from tests.conftest import NOW


class TestTimes:
    @pytest.mark.parametrize("value,minutes", [
        ("00:00", 0), ("09:30", 570), ("9:30", 570), ("23:59", 1439), (" 12:00 ", 720),
    ])
    def test_time_to_minutes(self, value, minutes):
        assert time_to_minutes(value) == minutes

    @pytest.mark.parametrize("value", ["24:00", "12:60", "1200", "noon", "12:5"])
    def test_invalid_times(self, value):
        assert not is_valid_time(value)
        with pytest.raises(ValueError):
            time_to_minutes(value)

    def test_normalize_time(self):
        assert normalize_time("7:05") == "07:05"


class TestRounding:
    @pytest.mark.parametrize("value,expected", [(2.5, 3), (3.5, 4), (2.4, 2), (166.5, 167)])
    def test_half_up(self, value, expected):
        assert round_half_up(value) == expected


class TestIds:
    def test_prefix_and_uniqueness(self):
        ids = {new_id("BK") for _ in range(50)}
        assert len(ids) == 50
        assert all(i.startswith("BK-") and len(i) == 15 for i in ids)


class TestEmail:
    def test_valid(self):
        assert is_valid_email("ava@example.com")

    def test_invalid(self):
        assert not is_valid_email("ava at example")


class TestValidators:
    def test_validate_time_requires_value(self):
        with pytest.raises(ValidationError) as exc_info:
            validate_time(None, "start_time")
        assert exc_info.value.field == "start_time"

    def test_duration_bounds(self):
        assert compute_duration("10:00", "10:30") == 0.5
        with pytest.raises(ValidationError, match="at least"):
            compute_duration("10:00", "10:15")

    def test_event_date_must_be_after_now(self):
        assert validate_event_date(date(2026, 10, 20), NOW) == date(2026, 10, 20)
        with pytest.raises(ValidationError):
            validate_event_date(date(2026, 10, 19), NOW)
        with pytest.raises(ValidationError):
            validate_event_date(None, NOW)

    def test_location_fields_required(self):
        with pytest.raises(ValidationError) as exc_info:
            validate_location(Location(venue="Hall", address=" ", city="Sydney"))
        assert exc_info.value.field == "location.address"

    def test_guest_count(self):
        assert validate_guest_count(None) is None
        assert validate_guest_count(150) == 150
        with pytest.raises(ValidationError):
            validate_guest_count(0)

    def test_text_trims_and_limits(self):
        assert validate_text("  hi  ", "note", 10) == "hi"
        assert validate_text("   ", "note", 10) is None
        with pytest.raises(ValidationError):
            validate_text("x" * 11, "note", 10)
