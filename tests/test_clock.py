"""
Tests for ClockValue and ClockWindow.
"""

from datetime import date, timedelta

import pendulum
import pytest

from slotfinder.domain.clock import ClockValue, ClockWindow
from slotfinder.domain.exceptions import ValidationError


class TestClockValue:
    """Tests for ClockValue."""

    def test_create_valid_clock_value(self):
        """Test creating a clock value with all fields."""
        value = ClockValue(14, minute=30, second=15, millisecond=250, microsecond=7)

        assert value.hour == 14
        assert value.minute == 30
        assert value.second == 15
        assert value.millisecond == 250
        assert value.microsecond == 7

    @pytest.mark.parametrize(
        "fields, name",
        [
            ({"hour": 24}, "hour"),
            ({"hour": -1}, "hour"),
            ({"hour": 0, "minute": 60}, "minute"),
            ({"hour": 0, "second": 60}, "second"),
            ({"hour": 0, "millisecond": 1000}, "millisecond"),
            ({"hour": 0, "microsecond": 1000}, "microsecond"),
        ],
    )
    def test_out_of_range_field_raises_error(self, fields, name):
        """Test that each field is validated and named in the error."""
        with pytest.raises(ValidationError, match=f"^{name} must be between"):
            ClockValue(**fields)

    def test_validation_error_is_value_error(self):
        """Test that callers can catch validation errors as ValueError."""
        with pytest.raises(ValueError):
            ClockValue(25)

    def test_parse_formats(self):
        """Test the accepted text formats."""
        assert ClockValue.parse("22:09") == ClockValue(22, 9)
        assert ClockValue.parse("9:05:30") == ClockValue(9, 5, 30)
        assert ClockValue.parse("22:09:08.007006") == ClockValue(22, 9, 8, 7, 6)
        assert ClockValue.parse("22:09:08.5") == ClockValue(22, 9, 8, 500)

    def test_parse_wraps_day_overflow(self):
        """Test that hours past 23 wrap and the day offset is reported separately."""
        assert ClockValue.parse("25:09") == ClockValue(1, 9)
        assert ClockValue.parse_with_offset("25:09") == (1, ClockValue(1, 9))
        assert ClockValue.parse_with_offset("245:09:08") == (10, ClockValue(5, 9, 8))
        assert ClockValue.parse_with_offset("08:00") == (0, ClockValue(8))

    @pytest.mark.parametrize(
        "text",
        ["", "12", "1:2:3:4", "ab:00", "12:xx", "-1:00", "12:60", "12:00:00.1234567", "12:00:00.1a"],
    )
    def test_parse_invalid_text_raises_error(self, text):
        """Test that malformed strings are rejected."""
        with pytest.raises(ValidationError):
            ClockValue.parse(text)

    def test_format_round_trip(self):
        """Test that parse(str(value)) gives the value back."""
        for value in (
            ClockValue(0),
            ClockValue(9, 5),
            ClockValue(23, 59, 59, 999, 999),
            ClockValue(12, 0, 1, 0, 1),
        ):
            assert ClockValue.parse(str(value)) == value

    def test_string_formats(self):
        """Test the display helpers."""
        value = ClockValue(9, 5, 30, 7, 6)

        assert str(value) == "09:05:30.007006"
        assert value.format_24_hour == "09:05"
        assert value.format_with_seconds == "09:05:30"
        assert ClockValue(0).format_12_hour == "12:00 AM"
        assert ClockValue(12).format_12_hour == "12:00 PM"
        assert ClockValue(13, 30).format_12_hour == "1:30 PM"
        assert ClockValue(23, 45).format_12_hour == "11:45 PM"

    def test_ordering(self):
        """Test comparison operators and helpers."""
        early = ClockValue(8, 59, 59, 999, 999)
        late = ClockValue(9)

        assert early < late
        assert late > early
        assert early <= early
        assert early.is_before(late)
        assert late.is_after(early)
        assert late.is_same_as(ClockValue.parse("09:00"))
        assert late.is_same_or_after(late)
        assert early.is_same_or_before(late)
        assert sorted([late, ClockValue(0), early]) == [ClockValue(0), early, late]

    def test_add_wraps_around_midnight(self):
        """Test that adding durations wraps at 24 hours."""
        assert ClockValue(23, 30).add(timedelta(hours=1)) == ClockValue(0, 30)
        assert ClockValue(10, 45).add(timedelta(minutes=30)) == ClockValue(11, 15)
        assert ClockValue(1, 30).subtract(timedelta(hours=2)) == ClockValue(23, 30)
        assert ClockValue(22).add_hours(3) == ClockValue(1)
        assert ClockValue(23, 45).add_minutes(30) == ClockValue(0, 15)
        assert ClockValue(23, 59, 30).add_seconds(45) == ClockValue(0, 0, 15)

    @pytest.mark.parametrize(
        "duration",
        [
            timedelta(days=400, microseconds=3),
            timedelta(days=-3, hours=-5, microseconds=-1),
            timedelta(microseconds=-1),
            pendulum.duration(hours=-30, minutes=15),
        ],
    )
    def test_add_always_yields_valid_value(self, duration):
        """Test the wrap invariant for large and negative durations."""
        result = ClockValue(13, 17, 19, 123, 456).add(duration)

        assert 0 <= result.microseconds_since_midnight < 24 * 3600 * 1_000_000

    def test_add_huge_duration_keeps_microseconds(self):
        """Test that very long durations are added exactly."""
        value = ClockValue(0).add(timedelta(days=300_000, microseconds=1))

        assert value == ClockValue(0, microsecond=1)
        back = ClockValue(0, microsecond=1).subtract(timedelta(days=300_000))
        assert back == ClockValue(0, microsecond=1)

    def test_add_negative_microsecond_wraps_to_end_of_day(self):
        """Test that one microsecond before midnight is the last valid value."""
        assert ClockValue(0).add(timedelta(microseconds=-1)) == ClockValue(23, 59, 59, 999, 999)

    def test_minutes_since_and_until_midnight(self):
        """Test the midnight offsets."""
        assert ClockValue(1, 30).minutes_since_midnight == 90
        assert ClockValue(0, 1, 30).seconds_since_midnight == 90
        assert ClockValue(23, 30).minutes_until_midnight == 30
        assert ClockValue(0).minutes_until_midnight == 1440
        assert ClockValue(1, 0, 0, 1, 1).to_timedelta() == timedelta(hours=1, microseconds=1001)

    def test_day_parts(self):
        """Test the morning/afternoon/evening/night classification."""
        assert ClockValue(8).period == "morning"
        assert ClockValue(14).period == "afternoon"
        assert ClockValue(19).period == "evening"
        assert ClockValue(23).period == "night"
        assert ClockValue(2).is_night
        assert ClockValue(0).is_am
        assert ClockValue(12).is_pm

    def test_from_datetime_and_copy_with(self):
        """Test taking the clock part of a datetime and copying with changes."""
        moment = pendulum.naive(2024, 1, 8, 14, 30, 15, 250_007)
        value = ClockValue.from_datetime(moment)

        assert value == ClockValue(14, 30, 15, 250, 7)
        assert value.copy_with(hour=15) == ClockValue(15, 30, 15, 250, 7)
        with pytest.raises(ValidationError):
            value.copy_with(minute=61)

    def test_named_constructors(self):
        """Test midnight and noon."""
        assert ClockValue.midnight() == ClockValue(0)
        assert ClockValue.noon() == ClockValue(12)


class TestClockWindow:
    """Tests for ClockWindow."""

    def test_resolve_same_day_window(self):
        """Test resolving regular working hours."""
        window = ClockWindow(start=ClockValue(9), end=ClockValue(17))

        interval = window.resolve(pendulum.naive(2024, 1, 8, 13, 45))

        assert interval.start == pendulum.naive(2024, 1, 8, 9)
        assert interval.end == pendulum.naive(2024, 1, 8, 17)

    def test_resolve_plain_date(self):
        """Test that a bare date resolves at its naive midnight."""
        window = ClockWindow(start=ClockValue(9), end=ClockValue(17))

        interval = window.resolve(date(2024, 1, 8))

        assert interval.start == pendulum.naive(2024, 1, 8, 9)
        assert interval.end == pendulum.naive(2024, 1, 8, 17)

    def test_resolve_overnight_window(self):
        """Test that a night shift ends on the following day."""
        window = ClockWindow(start=ClockValue(22), end=ClockValue(6))

        interval = window.resolve(pendulum.naive(2024, 1, 8))

        assert interval.start == pendulum.naive(2024, 1, 8, 22)
        assert interval.end == pendulum.naive(2024, 1, 9, 6)
        assert window.crosses_midnight

    def test_resolve_overnight_window_at_month_end(self):
        """Test that the day advance rolls over the month."""
        window = ClockWindow(start=ClockValue(22), end=ClockValue(6))

        interval = window.resolve(pendulum.naive(2024, 1, 31, 12))

        assert interval.end == pendulum.naive(2024, 2, 1, 6)

    def test_resolve_keeps_timezone(self):
        """Test that aware reference dates stay in their zone."""
        window = ClockWindow(start=ClockValue(9, 30), end=ClockValue(17))

        interval = window.resolve(pendulum.parse("2024-11-25 00:00", tz="Europe/Berlin"))

        assert interval.start == pendulum.parse("2024-11-25 09:30", tz="Europe/Berlin")
        assert interval.end.timezone_name == "Europe/Berlin"

    def test_resolve_precision(self):
        """Test that sub-second fields survive resolution."""
        window = ClockWindow(start=ClockValue(9, 0, 0, 1, 2), end=ClockValue(9, 0, 1))

        interval = window.resolve(pendulum.naive(2024, 1, 8))

        assert interval.start.microsecond == 1002

    def test_includes_regular_window(self):
        """Test inclusion for a window inside one day."""
        window = ClockWindow(start=ClockValue(9), end=ClockValue(17))

        assert window.includes(pendulum.naive(2023, 6, 15, 10, 30))
        assert window.includes(pendulum.naive(2023, 6, 15, 9))
        assert window.includes(pendulum.naive(2023, 6, 15, 17))
        assert not window.includes(pendulum.naive(2023, 6, 15, 20, 30))

    def test_includes_overnight_window(self):
        """Test inclusion on both sides of midnight."""
        window = ClockWindow(start=ClockValue(22), end=ClockValue(6))

        assert window.includes(pendulum.naive(2023, 6, 15, 2))
        assert window.includes(pendulum.naive(2023, 6, 15, 23))
        assert window.includes(pendulum.naive(2023, 6, 15, 22))
        assert window.includes(pendulum.naive(2023, 6, 15, 6))
        assert not window.includes(pendulum.naive(2023, 6, 15, 12))
        assert not window.includes(pendulum.naive(2023, 6, 15, 6, 0, 1))

    def test_duration(self):
        """Test window lengths, including overnight ones."""
        assert ClockWindow(ClockValue(9), ClockValue(17)).duration == timedelta(hours=8)
        assert ClockWindow(ClockValue(22), ClockValue(6)).duration == timedelta(hours=8)
        assert ClockWindow(ClockValue(9), ClockValue(9)).duration == timedelta(0)

    def test_parse(self):
        """Test parsing a window from text."""
        window = ClockWindow.parse("22:00 - 06:30")

        assert window == ClockWindow(start=ClockValue(22), end=ClockValue(6, 30))
        assert str(window) == "22:00-06:30"

        with pytest.raises(ValidationError):
            ClockWindow.parse("22:00")
