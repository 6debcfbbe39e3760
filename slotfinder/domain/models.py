"""
Domain models for absolute date intervals.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import date, datetime, timedelta
from typing import Iterator, Optional

import pendulum
from pendulum import DateTime

from .exceptions import ValidationError
from .timestamps import as_datetime, total_microseconds


@dataclass(frozen=True)
class DateInterval:
    """
    Represents an immutable interval between two timestamps.

    Both ends are inclusive. Invariant: start must not be after end.
    """
    start: DateTime
    end: DateTime

    def __post_init__(self):
        object.__setattr__(self, "start", as_datetime(self.start))
        object.__setattr__(self, "end", as_datetime(self.end))

        if self.start > self.end:
            raise ValidationError(
                f"Start time {self.start} must not be after end time {self.end}"
            )

    @classmethod
    def day(cls, value: date) -> "DateInterval":
        """The whole calendar day of ``value``, start of day to end of day."""
        moment = as_datetime(value)
        return cls(start=moment.start_of("day"), end=moment.end_of("day"))

    @classmethod
    def today(cls) -> "DateInterval":
        """Today in local time (impure)."""
        return cls.day(pendulum.now())

    @property
    def duration(self) -> timedelta:
        return timedelta(microseconds=total_microseconds(self.end - self.start))

    def duration_minutes(self) -> int:
        """Return the duration in whole minutes."""
        return int(self.duration.total_seconds() // 60)

    @property
    def is_single_day(self) -> bool:
        return self.start.date() == self.end.date()

    @property
    def is_multi_day(self) -> bool:
        return not self.is_single_day

    def includes(self, moment: datetime) -> bool:
        """Check if a timestamp lies within the interval, endpoints included."""
        return self.start <= moment <= self.end

    def overlaps(self, other: "DateInterval") -> bool:
        """
        Check if this interval shares at least one instant with another.

        Touching endpoints count as overlapping. An interval lying strictly
        inside this one (or around it) overlaps as well.
        """
        return self.start <= other.end and other.start <= self.end

    def contains(self, other: "DateInterval") -> bool:
        """Check if another interval lies entirely within this one."""
        return self.includes(other.start) and self.includes(other.end)

    def intersect(self, other: "DateInterval") -> Optional["DateInterval"]:
        """
        Calculate the intersection of two intervals.
        Returns None if there is no overlap.
        """
        if not self.overlaps(other):
            return None

        start = max(self.start, other.start)
        end = min(self.end, other.end)

        return DateInterval(start=start, end=end)

    def merge(self, other: "DateInterval") -> "DateInterval":
        """
        Bounding merge: spans from the earliest start to the latest end.

        Disjoint inputs are bridged, the gap between them is included.
        """
        return DateInterval(
            start=min(self.start, other.start),
            end=max(self.end, other.end),
        )

    def extend(
        self,
        before: Optional[timedelta] = None,
        after: Optional[timedelta] = None,
    ) -> "DateInterval":
        """Return a new interval widened by ``before`` and ``after``."""
        return DateInterval(
            start=self.start - (before or timedelta(0)),
            end=self.end + (after or timedelta(0)),
        )

    def copy_with(
        self,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
    ) -> "DateInterval":
        return replace(
            self,
            start=start if start is not None else self.start,
            end=end if end is not None else self.end,
        )

    def generate(self, step: timedelta) -> "TimestampSequence":
        """
        Timestamps ``start, start + step, ...`` up to and including ``end``.

        The returned sequence is lazy and can be iterated more than once.

        Raises:
            ValidationError: If step is zero or negative
        """
        if step <= timedelta(0):
            raise ValidationError(f"Step must be positive, got {step}")
        return TimestampSequence(interval=self, step=step)

    @property
    def dates(self) -> "TimestampSequence":
        """One timestamp per day, starting at ``start``."""
        return self.generate(timedelta(days=1))

    def __str__(self) -> str:
        if self.is_single_day:
            return f"{self.start.format('DD.MM.YYYY HH:mm')} - {self.end.format('HH:mm')}"
        return f"{self.start.format('DD.MM.YYYY HH:mm')} - {self.end.format('DD.MM.YYYY HH:mm')}"


@dataclass(frozen=True)
class TimestampSequence:
    """Restartable iterable over the stepped timestamps of an interval."""
    interval: DateInterval
    step: timedelta

    def __iter__(self) -> Iterator[DateTime]:
        start = self.interval.start
        index = 0
        current = start
        while current <= self.interval.end:
            yield current
            index += 1
            current = start + self.step * index


# An already committed interval that candidate slots must not overlap.
BusySlot = DateInterval
