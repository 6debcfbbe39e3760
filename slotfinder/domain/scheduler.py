"""
Slot search over daily windows and a pooled busy list.

Both searches walk the days of a range, pin each day's clock windows to
that date and test candidate starts against the busy slots.
"""

from __future__ import annotations

from datetime import datetime, timedelta
from typing import Callable, List, Optional, Sequence

from pendulum import DateTime

from .calendar import BusinessCalendar
from .clock import ClockWindow
from .constants import DEFAULT_SEARCH_LIMIT_DAYS, DEFAULT_SLOT_INTERVAL
from .exceptions import ValidationError
from .models import BusySlot, DateInterval
from .timestamps import as_datetime

WindowsFor = Callable[[DateTime], Sequence[ClockWindow]]


class AvailabilityScheduler:
    """
    Finds slots inside daily windows that avoid a list of busy intervals.

    Algorithm (shared by both searches):
    1. Sort the busy slots by start once per call
    2. Walk the days of the search range, skipping non-working days
    3. Resolve each of the day's windows to an absolute interval
    4. Step candidate start times through the interval at ``slot_interval``
    5. Keep candidates whose full duration avoids every busy slot

    The class holds no state; all methods are static.
    """

    @staticmethod
    def find_next_slot(
        from_: datetime,
        slot_duration: timedelta,
        slot_interval: timedelta,
        busy_slots: Sequence[BusySlot],
        windows_for: WindowsFor,
        calendar: Optional[BusinessCalendar] = None,
        search_limit_days: int = DEFAULT_SEARCH_LIMIT_DAYS,
    ) -> Optional[DateTime]:
        """
        Find the earliest slot starting at or after ``from_``.

        Args:
            from_: Moment from which to search
            slot_duration: Required length of the slot
            slot_interval: Spacing between candidate start times
            busy_slots: Already booked intervals to avoid
            windows_for: Returns the availability windows for a given day
            calendar: Optional business calendar; non-working days are skipped
            search_limit_days: How many calendar days to look ahead

        Returns:
            Start of the first free slot, or None if nothing fits in the horizon
        """
        AvailabilityScheduler._validate_slot_arguments(slot_duration, slot_interval)
        if search_limit_days <= 0:
            raise ValidationError(
                f"search_limit_days must be positive, got {search_limit_days}"
            )

        anchor = as_datetime(from_)
        search_end = anchor.add(days=search_limit_days)
        # The last scanned day and overnight windows run past search_end
        sorted_busy = sorted(busy_slots, key=lambda slot: slot.start)

        search_date = anchor
        while search_date < search_end:
            if calendar is None or calendar.is_working_day(search_date):
                for window in windows_for(search_date):
                    effective = window.resolve(search_date)
                    current = max(search_date, effective.start)

                    while current + slot_duration <= effective.end:
                        candidate = DateInterval(start=current, end=current + slot_duration)
                        if not AvailabilityScheduler._has_conflict(candidate, sorted_busy):
                            return current
                        current = current + slot_interval

            search_date = search_date.add(days=1).start_of("day")

        return None

    @staticmethod
    def find_available_slots(
        period: DateInterval,
        slot_duration: timedelta,
        busy_slots: Sequence[BusySlot],
        windows_for: WindowsFor,
        calendar: Optional[BusinessCalendar] = None,
        max_slots: Optional[int] = None,
        slot_interval: timedelta = DEFAULT_SLOT_INTERVAL,
    ) -> List[DateTime]:
        """
        Find every free slot that lies entirely within ``period``.

        Args:
            period: Interval to search; slots are clipped to it at both ends
            slot_duration: Required length of each slot
            busy_slots: Already booked intervals to avoid
            windows_for: Returns the availability windows for a given day
            calendar: Optional business calendar; non-working days are skipped
            max_slots: Stop once this many slots were found
            slot_interval: Spacing between candidate start times

        Returns:
            Start times of the free slots, ordered by day, then by window,
            then by time (chronological when each day's windows are
            ascending)
        """
        AvailabilityScheduler._validate_slot_arguments(slot_duration, slot_interval)
        if max_slots is not None and max_slots <= 0:
            raise ValidationError(f"max_slots must be positive, got {max_slots}")

        sorted_busy = AvailabilityScheduler._sort_busy_slots(busy_slots, period.end)
        available: List[DateTime] = []
        seen = set()

        def is_full() -> bool:
            return max_slots is not None and len(available) >= max_slots

        search_date = period.start.start_of("day")
        while search_date <= period.end and not is_full():
            if calendar is None or calendar.is_working_day(search_date):
                for window in windows_for(search_date):
                    effective = window.resolve(search_date)
                    current = max(period.start, effective.start)

                    while (
                        current + slot_duration <= effective.end
                        and current + slot_duration <= period.end
                        and not is_full()
                    ):
                        candidate = DateInterval(start=current, end=current + slot_duration)
                        if (
                            current not in seen
                            and not AvailabilityScheduler._has_conflict(candidate, sorted_busy)
                        ):
                            seen.add(current)
                            available.append(current)
                        current = current + slot_interval

            search_date = search_date.add(days=1)

        return available

    @staticmethod
    def has_conflict(candidate: DateInterval, busy_slots: Sequence[BusySlot]) -> bool:
        """Check a single interval against an unsorted busy list."""
        return AvailabilityScheduler._has_conflict(
            candidate, sorted(busy_slots, key=lambda slot: slot.start)
        )

    @staticmethod
    def _has_conflict(candidate: DateInterval, sorted_busy: Sequence[BusySlot]) -> bool:
        """
        Check if ``candidate`` overlaps any busy slot.

        ``sorted_busy`` must be sorted by start. Sharing only an endpoint is
        not a conflict, so back-to-back bookings are allowed.
        """
        for busy in sorted_busy:
            # Every remaining busy slot starts after the candidate ends
            if busy.start >= candidate.end:
                break

            if busy.end > candidate.start and candidate.end > busy.start:
                return True

        return False

    @staticmethod
    def _sort_busy_slots(busy_slots: Sequence[BusySlot], horizon: DateTime) -> List[BusySlot]:
        """
        Drop busy slots starting after ``horizon`` and sort the rest by start.

        Only valid when no candidate can end after ``horizon``.
        """
        return sorted(
            (slot for slot in busy_slots if slot.start <= horizon),
            key=lambda slot: slot.start,
        )

    @staticmethod
    def _validate_slot_arguments(slot_duration: timedelta, slot_interval: timedelta) -> None:
        if slot_duration <= timedelta(0):
            raise ValidationError(f"slot_duration must be positive, got {slot_duration}")
        if slot_interval <= timedelta(0):
            raise ValidationError(f"slot_interval must be positive, got {slot_interval}")
