"""
Business calendar: working weekdays plus holidays.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import FrozenSet, Iterable, List, Optional

from pendulum import DateTime

from .constants import DEFAULT_MAX_NAVIGATION_DAYS, DEFAULT_WORKING_WEEKDAYS, MONDAY, SUNDAY
from .exceptions import ValidationError
from .timestamps import as_date, start_of_day


@dataclass(frozen=True)
class BusinessCalendar:
    """
    Working weekdays and holidays used to decide which days are bookable.

    Weekdays use ISO numbering (Monday=1 ... Sunday=7). Holidays are stored
    as calendar dates, so the time of day of a holiday given as a datetime
    is irrelevant.

    Example:
        calendar = BusinessCalendar(holidays={date(2024, 12, 25)})
        calendar.is_working_day(pendulum.naive(2024, 12, 25))  # False
    """
    holidays: FrozenSet[date] = field(default_factory=frozenset)
    working_weekdays: FrozenSet[int] = DEFAULT_WORKING_WEEKDAYS

    def __post_init__(self):
        weekdays = frozenset(self.working_weekdays)
        if not weekdays:
            raise ValidationError("working_weekdays must contain at least one weekday")

        invalid = sorted(day for day in weekdays if not MONDAY <= day <= SUNDAY)
        if invalid:
            raise ValidationError(
                f"working_weekdays must be between {MONDAY} and {SUNDAY}, got {invalid}"
            )

        object.__setattr__(self, "working_weekdays", weekdays)
        object.__setattr__(
            self, "holidays", frozenset(as_date(day) for day in self.holidays)
        )

    def copy_with(
        self,
        holidays: Optional[Iterable[date]] = None,
        working_weekdays: Optional[Iterable[int]] = None,
    ) -> "BusinessCalendar":
        return BusinessCalendar(
            holidays=frozenset(holidays) if holidays is not None else self.holidays,
            working_weekdays=(
                frozenset(working_weekdays)
                if working_weekdays is not None
                else self.working_weekdays
            ),
        )

    def is_holiday(self, day: date) -> bool:
        """Check if the calendar date of ``day`` is a holiday."""
        return as_date(day) in self.holidays

    def is_working_day(self, day: date) -> bool:
        """A working weekday that is not a holiday. Time of day is ignored."""
        return day.isoweekday() in self.working_weekdays and not self.is_holiday(day)

    def next_working_day(self, day: datetime) -> DateTime:
        """
        First working day strictly after ``day``, at start of day.

        Terminates because at least one weekday is always a working day and
        holidays are finite.
        """
        candidate = start_of_day(day).add(days=1)
        while not self.is_working_day(candidate):
            candidate = candidate.add(days=1)
        return candidate

    def previous_working_day(self, day: datetime) -> DateTime:
        """Last working day strictly before ``day``, at start of day."""
        candidate = start_of_day(day).subtract(days=1)
        while not self.is_working_day(candidate):
            candidate = candidate.subtract(days=1)
        return candidate

    def next_working_day_with_limit(
        self,
        day: datetime,
        max_days: int = DEFAULT_MAX_NAVIGATION_DAYS,
    ) -> Optional[DateTime]:
        """
        Like ``next_working_day`` but gives up after ``max_days`` days.

        Returns:
            The working day at start of day, or None if none was found
        """
        return self._scan_with_limit(day, max_days, step=1)

    def previous_working_day_with_limit(
        self,
        day: datetime,
        max_days: int = DEFAULT_MAX_NAVIGATION_DAYS,
    ) -> Optional[DateTime]:
        """
        Like ``previous_working_day`` but gives up after ``max_days`` days.

        Returns:
            The working day at start of day, or None if none was found
        """
        return self._scan_with_limit(day, max_days, step=-1)

    def _scan_with_limit(self, day: datetime, max_days: int, step: int) -> Optional[DateTime]:
        if max_days <= 0:
            raise ValidationError(f"max_days must be positive, got {max_days}")

        candidate = start_of_day(day).add(days=step)
        for _ in range(max_days):
            if self.is_working_day(candidate):
                return candidate
            candidate = candidate.add(days=step)

        return None

    def working_days_between(
        self,
        start: datetime,
        end: datetime,
        inclusive: bool = False,
    ) -> List[DateTime]:
        """
        All working days between two dates, at start of day.

        Args:
            start: First day of the range
            end: Last day of the range
            inclusive: Whether ``start`` and ``end`` themselves are considered

        Raises:
            ValidationError: If start is after end (compared by day)
        """
        first, last = self._normalize_range(start, end)

        if not inclusive:
            first = first.add(days=1)
            last = last.subtract(days=1)

        working_days: List[DateTime] = []
        current = first
        while current <= last:
            if self.is_working_day(current):
                working_days.append(current)
            current = current.add(days=1)

        return working_days

    def is_working_period(self, start: datetime, end: datetime) -> bool:
        """
        Check that every day from ``start`` to ``end`` (inclusive) is a working day.

        Raises:
            ValidationError: If start is after end (compared by day)
        """
        current, last = self._normalize_range(start, end)

        while current <= last:
            if not self.is_working_day(current):
                return False
            current = current.add(days=1)

        return True

    @staticmethod
    def _normalize_range(start: datetime, end: datetime):
        first = start_of_day(start)
        last = start_of_day(end)
        if first > last:
            raise ValidationError(
                f"Start date {first.to_date_string()} must not be after "
                f"end date {last.to_date_string()}"
            )
        return first, last
