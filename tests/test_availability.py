"""Tests for weekly availability resolution."""

from datetime import date, timedelta

from lenslink.schemas import DayAvailability, WeeklyAvailability
from lenslink.scheduling.availability import (
    WEEKDAY_KEYS,
    day_index,
    day_key,
    get_available_slots,
    is_available_on,
    resolve_day,
)
from tests.conftest import EVENT_DAY, SUNDAY, weekday_availability


class TestWeekdayMapping:
    def test_table_is_sunday_first(self):
        assert WEEKDAY_KEYS[0] == "sunday"
        assert WEEKDAY_KEYS[6] == "saturday"
        assert len(WEEKDAY_KEYS) == 7

    def test_sunday_is_day_zero(self):
        assert day_index(date(2026, 10, 25)) == 0

    def test_monday_is_day_one(self):
        assert day_index(date(2026, 10, 19)) == 1

    def test_saturday_is_day_six(self):
        assert day_index(date(2026, 10, 24)) == 6

    def test_keys_match_calendar_names_for_a_full_week(self):
        start = date(2026, 10, 18)  # Sunday
        for offset in range(7):
            day = start + timedelta(days=offset)
            assert day_key(day) == day.strftime("%A").lower()


class TestAvailableSlots:
    def test_available_day_returns_declared_slots(self):
        slots = get_available_slots(weekday_availability(), EVENT_DAY)
        assert slots == ["09:00-12:00", "13:00-18:00"]

    def test_saturday_uses_saturday_entry(self):
        slots = get_available_slots(weekday_availability(), date(2026, 10, 24))
        assert slots == ["10:00-16:00"]

    def test_unavailable_day_returns_empty_despite_slots(self):
        availability = weekday_availability()
        assert availability.sunday.time_slots
        assert get_available_slots(availability, SUNDAY) == []

    def test_default_availability_is_closed(self):
        assert get_available_slots(WeeklyAvailability(), EVENT_DAY) == []

    def test_available_without_slots_is_still_available(self):
        availability = WeeklyAvailability(wednesday=DayAvailability(available=True))
        assert is_available_on(availability, EVENT_DAY)
        assert get_available_slots(availability, EVENT_DAY) == []

    def test_returned_slots_are_a_copy(self):
        availability = weekday_availability()
        slots = get_available_slots(availability, EVENT_DAY)
        slots.append("20:00-21:00")
        assert len(availability.wednesday.time_slots) == 2


class TestResolveDay:
    def test_capability_names_the_day(self):
        capability = resolve_day(weekday_availability(), SUNDAY)
        assert capability.day_name == "sunday"
        assert capability.available is False
        assert capability.time_slots == []
