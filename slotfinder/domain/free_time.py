"""
Block-level availability: the free stretches left inside daily windows.

Where ``AvailabilityScheduler`` answers "when can a slot of length X start",
``FreeTimeCalculator`` answers "which uninterrupted blocks are free".
"""

from __future__ import annotations

from datetime import timedelta
from typing import List, Optional, Sequence

from .calendar import BusinessCalendar
from .exceptions import ValidationError
from .models import BusySlot, DateInterval
from .scheduler import WindowsFor


class FreeTimeCalculator:
    """
    Calculates free blocks based on busy slots and daily windows.

    Algorithm:
    1. Resolve the windows of every working day in the period
    2. Clip each window to the period
    3. Subtract the busy slots from each window
    4. Merge blocks that touch (adjacent windows, overnight carry-over)
    5. Filter by minimum duration
    """

    def __init__(
        self,
        windows_for: WindowsFor,
        calendar: Optional[BusinessCalendar] = None,
    ):
        self.windows_for = windows_for
        self.calendar = calendar

    def find_free_blocks(
        self,
        period: DateInterval,
        busy_slots: Sequence[BusySlot],
        min_duration: timedelta = timedelta(0),
    ) -> List[DateInterval]:
        """
        Find all free blocks within ``period``.

        Args:
            period: Interval to search
            busy_slots: Already booked intervals
            min_duration: Blocks shorter than this are dropped

        Returns:
            Free blocks in chronological order
        """
        if min_duration < timedelta(0):
            raise ValidationError(f"min_duration must not be negative, got {min_duration}")

        windows = self._get_window_blocks(period)
        if not windows:
            return []

        sorted_busy = sorted(busy_slots, key=lambda slot: slot.start)
        free_blocks: List[DateInterval] = []

        for window in windows:
            overlapping_busy = [busy for busy in sorted_busy if window.overlaps(busy)]

            if not overlapping_busy:
                free_blocks.append(window)
                continue

            free_blocks.extend(self._subtract_busy_from_block(window, overlapping_busy))

        return [
            block
            for block in self._merge_adjacent_blocks(free_blocks)
            if block.duration > timedelta(0) and block.duration >= min_duration
        ]

    def _get_window_blocks(self, period: DateInterval) -> List[DateInterval]:
        """Resolved windows of every eligible day, clipped to the period."""
        blocks: List[DateInterval] = []

        current = period.start.start_of("day")
        while current <= period.end:
            if self.calendar is None or self.calendar.is_working_day(current):
                for window in self.windows_for(current):
                    clipped = window.resolve(current).intersect(period)
                    if clipped is not None and clipped.duration > timedelta(0):
                        blocks.append(clipped)

            current = current.add(days=1)

        return sorted(blocks, key=lambda block: block.start)

    @staticmethod
    def _subtract_busy_from_block(
        block: DateInterval,
        busy_slots: Sequence[BusySlot],
    ) -> List[DateInterval]:
        """
        Subtract busy slots from a block, yielding the free remainder.

        Example:
        Block: 09:00 - 17:00
        Busy: [10:00-11:00, 14:00-15:00]
        Result: [09:00-10:00, 11:00-14:00, 15:00-17:00]
        """
        free: List[DateInterval] = []
        current_start = block.start

        for busy in busy_slots:
            clipped_busy_start = max(busy.start, block.start)
            clipped_busy_end = min(busy.end, block.end)

            if current_start < clipped_busy_start:
                free.append(DateInterval(start=current_start, end=clipped_busy_start))

            current_start = max(current_start, clipped_busy_end)

        if current_start < block.end:
            free.append(DateInterval(start=current_start, end=block.end))

        return free

    @staticmethod
    def _merge_adjacent_blocks(blocks: List[DateInterval]) -> List[DateInterval]:
        """
        Merge overlapping or touching blocks.

        Example: [09:00-10:00, 10:00-11:00] -> [09:00-11:00]
        """
        if not blocks:
            return []

        sorted_blocks = sorted(blocks, key=lambda block: block.start)
        merged: List[DateInterval] = [sorted_blocks[0]]

        for current in sorted_blocks[1:]:
            last = merged[-1]
            if current.start <= last.end:
                merged[-1] = last.merge(current)
            else:
                merged.append(current)

        return merged
