"""Tests for the weekly first-fit availability matcher."""

from datetime import UTC, datetime, timedelta

import pytest
from foodrescue.matching.weekly import WeeklyAvailabilityMatcher
from foodrescue.user.user import User

NOW = datetime(2026, 3, 2, 8, 0, tzinfo=UTC)  # Monday


def _volunteer(name, *slots):
    return User.register(
        name=name,
        email=f"{name.lower()}@example.org",
        role="volunteer",
        now=NOW,
        availability=[{"day": d, "start_time": s, "end_time": e} for d, s, e in slots],
    )


def _window(day_offset, start_hour, start_minute, duration_minutes):
    start = NOW.replace(hour=start_hour, minute=start_minute) + timedelta(days=day_offset)
    return start, start + timedelta(minutes=duration_minutes)


class TestFirstFit:
    def test_finds_volunteer_covering_window(self):
        vera = _volunteer("Vera", ("Monday", "09:00", "13:00"))
        start, end = _window(0, 10, 0, 120)
        assert WeeklyAvailabilityMatcher().find_available_volunteer(start, end, [vera]) is vera

    def test_none_when_no_slot_covers(self):
        vera = _volunteer("Vera", ("Monday", "09:00", "11:00"))
        start, end = _window(0, 10, 0, 120)
        assert WeeklyAvailabilityMatcher().find_available_volunteer(start, end, [vera]) is None

    def test_none_without_candidates(self):
        start, end = _window(0, 10, 0, 60)
        assert WeeklyAvailabilityMatcher().find_available_volunteer(start, end, []) is None

    def test_wrong_weekday_is_skipped(self):
        tuesday_only = _volunteer("Tom", ("Tuesday", "09:00", "13:00"))
        start, end = _window(0, 10, 0, 60)
        assert WeeklyAvailabilityMatcher().find_available_volunteer(start, end, [tuesday_only]) is None

    def test_first_candidate_in_order_wins(self):
        first = _volunteer("Ann", ("Monday", "08:00", "14:00"))
        second = _volunteer("Bob", ("Monday", "09:00", "13:00"))
        start, end = _window(0, 10, 0, 60)
        matcher = WeeklyAvailabilityMatcher()
        assert matcher.find_available_volunteer(start, end, [first, second]) is first
        assert matcher.find_available_volunteer(start, end, [second, first]) is second

    def test_any_of_several_slots(self):
        vera = _volunteer("Vera", ("Sunday", "09:00", "10:00"), ("Wednesday", "17:00", "20:00"))
        start, end = _window(2, 18, 0, 60)
        assert WeeklyAvailabilityMatcher().find_available_volunteer(start, end, [vera]) is vera


class TestTimezone:
    def test_window_is_read_in_configured_timezone(self):
        # 15:00 UTC on Monday is 10:00 in New York (EST, before the March switch)
        vera = _volunteer("Vera", ("Monday", "09:00", "13:00"))
        start = NOW.replace(hour=15)
        end = start + timedelta(hours=1)

        assert WeeklyAvailabilityMatcher(timezone="America/New_York").find_available_volunteer(
            start, end, [vera]
        ) is vera
        assert WeeklyAvailabilityMatcher(timezone="UTC").find_available_volunteer(start, end, [vera]) is None

    def test_unknown_timezone_is_rejected(self):
        with pytest.raises(ValueError):
            WeeklyAvailabilityMatcher(timezone="Mars/Olympus_Mons")


class TestCrossMidnight:
    def test_evening_slot_accepts_window_running_past_midnight(self):
        # Pickup 22:00 Monday to 00:30 Tuesday. Only Monday is considered and
        # the 00:30 end is compared as a Monday clock time.
        evening = _volunteer("Eve", ("Monday", "21:00", "23:00"))
        start = NOW.replace(hour=22)
        end = start + timedelta(minutes=150)
        assert WeeklyAvailabilityMatcher().find_available_volunteer(start, end, [evening]) is evening
