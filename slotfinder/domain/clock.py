"""
Time-of-day values and recurring daily windows.

A ``ClockValue`` is a wall-clock reading with no date attached. A
``ClockWindow`` pairs two of them into a span that repeats every day and may
cross midnight (``22:00 - 06:00``). The window only becomes an absolute
``DateInterval`` once it is resolved against a concrete date.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import datetime, timedelta
from typing import Tuple

import pendulum

from .constants import MICROSECONDS_PER_DAY, MINUTES_PER_DAY
from .exceptions import ValidationError
from .models import DateInterval
from .timestamps import as_datetime, total_microseconds

_FIELD_BOUNDS = (
    ("hour", 23),
    ("minute", 59),
    ("second", 59),
    ("millisecond", 999),
    ("microsecond", 999),
)


@dataclass(frozen=True, order=True)
class ClockValue:
    """
    Immutable time of day from 00:00:00.000000 to 23:59:59.999999.

    Field order matches significance, so the generated comparison operators
    give the same ordering as microseconds since midnight.
    """
    hour: int
    minute: int = 0
    second: int = 0
    millisecond: int = 0
    microsecond: int = 0

    def __post_init__(self):
        for name, upper in _FIELD_BOUNDS:
            value = getattr(self, name)
            if not 0 <= value <= upper:
                raise ValidationError(
                    f"{name} must be between 0 and {upper}, got {value}"
                )

    @classmethod
    def parse(cls, text: str) -> "ClockValue":
        """
        Parse ``H:MM``, ``H:MM:SS`` or ``H:MM:SS.ffffff``.

        Hours past 23 wrap into the day (``"25:09"`` gives 01:09); use
        ``parse_with_offset`` to keep the number of days that were dropped.
        """
        _, value = cls.parse_with_offset(text)
        return value

    @classmethod
    def parse_with_offset(cls, text: str) -> Tuple[int, "ClockValue"]:
        """
        Parse a clock string and return ``(day_offset, value)``.

        Example:
            ClockValue.parse_with_offset("25:09")  # (1, ClockValue(1, 9))
        """
        parts = text.strip().split(":")
        if len(parts) not in (2, 3):
            raise ValidationError(f"Invalid time format: '{text}'")

        try:
            total_hours = int(parts[0])
            minute = int(parts[1])
            second, millisecond, microsecond = _parse_seconds(parts[2:])
        except ValueError as exc:
            raise ValidationError(f"Invalid time format: '{text}'") from exc

        if total_hours < 0:
            raise ValidationError(f"hour must not be negative, got {total_hours}")

        days, hour = divmod(total_hours, 24)
        return days, cls(
            hour,
            minute=minute,
            second=second,
            millisecond=millisecond,
            microsecond=microsecond,
        )

    @classmethod
    def from_datetime(cls, value: datetime) -> "ClockValue":
        """Take the wall-clock part of a datetime."""
        return cls(
            value.hour,
            minute=value.minute,
            second=value.second,
            millisecond=value.microsecond // 1000,
            microsecond=value.microsecond % 1000,
        )

    @classmethod
    def from_microseconds(cls, total: int) -> "ClockValue":
        """Build a value from microseconds since midnight, wrapping at 24h."""
        total %= MICROSECONDS_PER_DAY
        seconds, sub_second = divmod(total, 1_000_000)
        minutes, second = divmod(seconds, 60)
        hour, minute = divmod(minutes, 60)
        millisecond, microsecond = divmod(sub_second, 1000)
        return cls(hour, minute, second, millisecond, microsecond)

    @classmethod
    def now(cls) -> "ClockValue":
        """Current local time of day (impure)."""
        return cls.from_datetime(pendulum.now())

    @classmethod
    def midnight(cls) -> "ClockValue":
        return cls(0)

    @classmethod
    def noon(cls) -> "ClockValue":
        return cls(12)

    def copy_with(self, **changes) -> "ClockValue":
        return replace(self, **changes)

    # Comparison helpers

    def is_same_as(self, other: "ClockValue") -> bool:
        return self == other

    def is_before(self, other: "ClockValue") -> bool:
        return self < other

    def is_after(self, other: "ClockValue") -> bool:
        return self > other

    def is_same_or_before(self, other: "ClockValue") -> bool:
        return self <= other

    def is_same_or_after(self, other: "ClockValue") -> bool:
        return self >= other

    # Arithmetic

    @property
    def microseconds_since_midnight(self) -> int:
        return (
            self.seconds_since_midnight * 1_000_000
            + self.millisecond * 1000
            + self.microsecond
        )

    @property
    def minutes_since_midnight(self) -> int:
        return self.hour * 60 + self.minute

    @property
    def seconds_since_midnight(self) -> int:
        return self.minutes_since_midnight * 60 + self.second

    @property
    def minutes_until_midnight(self) -> int:
        """Minutes left in the day; 1440 at midnight."""
        return MINUTES_PER_DAY - self.minutes_since_midnight

    def to_timedelta(self) -> timedelta:
        return timedelta(microseconds=self.microseconds_since_midnight)

    def add(self, duration: timedelta) -> "ClockValue":
        """
        Add a duration, wrapping around midnight.

        Example:
            ClockValue(23, 30).add(timedelta(hours=1))  # 00:30
        """
        return self.from_microseconds(
            self.microseconds_since_midnight + total_microseconds(duration)
        )

    def subtract(self, duration: timedelta) -> "ClockValue":
        return self.add(-duration)

    def add_hours(self, hours: int) -> "ClockValue":
        return self.add(timedelta(hours=hours))

    def add_minutes(self, minutes: int) -> "ClockValue":
        return self.add(timedelta(minutes=minutes))

    def add_seconds(self, seconds: int) -> "ClockValue":
        return self.add(timedelta(seconds=seconds))

    # Day parts

    @property
    def is_morning(self) -> bool:
        return 6 <= self.hour < 12

    @property
    def is_afternoon(self) -> bool:
        return 12 <= self.hour < 18

    @property
    def is_evening(self) -> bool:
        return 18 <= self.hour < 22

    @property
    def is_night(self) -> bool:
        return self.hour >= 22 or self.hour < 6

    @property
    def is_am(self) -> bool:
        return self.hour < 12

    @property
    def is_pm(self) -> bool:
        return self.hour >= 12

    @property
    def period(self) -> str:
        if self.is_morning:
            return "morning"
        if self.is_afternoon:
            return "afternoon"
        if self.is_evening:
            return "evening"
        return "night"

    # Formatting

    @property
    def format_24_hour(self) -> str:
        return f"{self.hour:02d}:{self.minute:02d}"

    @property
    def format_with_seconds(self) -> str:
        return f"{self.format_24_hour}:{self.second:02d}"

    @property
    def format_12_hour(self) -> str:
        suffix = "AM" if self.hour < 12 else "PM"
        display_hour = self.hour % 12 or 12
        return f"{display_hour}:{self.minute:02d} {suffix}"

    def isoformat(self) -> str:
        fraction = self.millisecond * 1000 + self.microsecond
        return f"{self.format_with_seconds}.{fraction:06d}"

    def __str__(self) -> str:
        return self.isoformat()


def _parse_seconds(parts) -> Tuple[int, int, int]:
    """Split the optional ``SS[.ffffff]`` part into (second, ms, us)."""
    if not parts:
        return 0, 0, 0

    second_text, _, fraction_text = parts[0].partition(".")
    second = int(second_text)
    if not fraction_text:
        return second, 0, 0

    if len(fraction_text) > 6 or not fraction_text.isdigit():
        raise ValueError(f"Invalid fraction of a second: '{fraction_text}'")

    fraction = int(fraction_text.ljust(6, "0"))
    millisecond, microsecond = divmod(fraction, 1000)
    return second, millisecond, microsecond


@dataclass(frozen=True)
class ClockWindow:
    """
    A daily time-of-day span, e.g. working hours or a night shift.

    No ordering is imposed on ``start`` and ``end``: an ``end`` earlier than
    ``start`` means the window runs past midnight into the next day.
    """
    start: ClockValue
    end: ClockValue

    @classmethod
    def parse(cls, text: str) -> "ClockWindow":
        """Parse ``"HH:MM-HH:MM"`` (any ClockValue format on either side)."""
        start_text, separator, end_text = text.partition("-")
        if not separator:
            raise ValidationError(f"Invalid window format: '{text}'")
        return cls(start=ClockValue.parse(start_text), end=ClockValue.parse(end_text))

    @property
    def crosses_midnight(self) -> bool:
        return self.end < self.start

    @property
    def duration(self) -> timedelta:
        """Length of the window, counting overnight spans across midnight."""
        delta = self.end.microseconds_since_midnight - self.start.microseconds_since_midnight
        return timedelta(microseconds=delta % MICROSECONDS_PER_DAY)

    def resolve(self, reference: datetime) -> DateInterval:
        """
        Pin the window to the date of ``reference``.

        An overnight window ends on the following calendar day, so the
        result always satisfies ``start <= end``.
        """
        day = as_datetime(reference)
        start = _at_clock(day, self.start)
        end = _at_clock(day, self.end)

        if self.crosses_midnight:
            end = end.add(days=1)

        return DateInterval(start=start, end=end)

    def includes(self, timestamp: datetime) -> bool:
        """
        Check whether ``timestamp`` falls inside the window (inclusive).

        For an overnight window a timestamp earlier than ``start`` belongs to
        the occurrence that began the previous day.
        """
        moment = as_datetime(timestamp)
        reference = moment
        if self.crosses_midnight and ClockValue.from_datetime(moment) < self.start:
            reference = moment.subtract(days=1)

        return self.resolve(reference).includes(moment)

    def __str__(self) -> str:
        return f"{self.start.format_24_hour}-{self.end.format_24_hour}"


def _at_clock(day, clock: ClockValue):
    return day.set(
        hour=clock.hour,
        minute=clock.minute,
        second=clock.second,
        microsecond=clock.millisecond * 1000 + clock.microsecond,
    )
