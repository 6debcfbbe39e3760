"""
Application services for finding shared availability.

The service coordinates fetching busy slots via a source adapter and
delegates the actual search to the domain-level ``AvailabilityScheduler``.
Busy slots of all participants are pooled, so a returned slot is free for
everyone. The source is described by a small protocol so tests can plug in
a stub.
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta
from typing import Dict, List, Optional, Protocol, Sequence

from pendulum import DateTime

from ..config import SchedulerConfig
from ..domain.exceptions import BusySlotSourceError
from ..domain.free_time import FreeTimeCalculator
from ..domain.models import BusySlot, DateInterval
from ..domain.scheduler import AvailabilityScheduler
from ..domain.timestamps import as_datetime

logger = logging.getLogger(__name__)


class BusySlotSource(Protocol):
    """Protocol describing where the service gets busy slots from."""

    async def get_busy_slots(
        self,
        participants: List[str],
        start: DateTime,
        end: DateTime,
    ) -> Dict[str, List[BusySlot]]:
        """Return busy slots per participant."""


class AvailabilityService:
    """
    Orchestrates busy-slot retrieval and slot search.

    Scheduling defaults (slot interval, horizon, windows, calendar) come from
    a ``SchedulerConfig``.
    """

    def __init__(
        self,
        busy_source: BusySlotSource,
        config: Optional[SchedulerConfig] = None,
    ) -> None:
        self._busy_source = busy_source
        self._config = config or SchedulerConfig()
        self._calendar = self._config.build_calendar()

    @property
    def config(self) -> SchedulerConfig:
        return self._config

    async def next_slot(
        self,
        *,
        participants: Sequence[str],
        from_: datetime,
        duration: timedelta,
    ) -> Optional[DateTime]:
        """Earliest slot within the configured horizon where everyone is free."""
        anchor = as_datetime(from_)
        horizon_end = anchor.add(days=self._config.search_limit_days)
        busy_slots = await self.fetch_pooled_busy_slots(
            participants=participants,
            start=anchor,
            end=horizon_end,
        )

        slot = AvailabilityScheduler.find_next_slot(
            from_=anchor,
            slot_duration=duration,
            slot_interval=self._config.slot_interval,
            busy_slots=busy_slots,
            windows_for=self._config.windows_for,
            calendar=self._calendar,
            search_limit_days=self._config.search_limit_days,
        )

        if slot is None:
            logger.debug(
                "No %s slot for %d participant(s) within %d days of %s",
                duration,
                len(participants),
                self._config.search_limit_days,
                anchor,
            )
        return slot

    async def available_slots(
        self,
        *,
        participants: Sequence[str],
        period: DateInterval,
        duration: timedelta,
    ) -> List[DateTime]:
        """All slot starts within ``period`` where everyone is free."""
        busy_slots = await self.fetch_pooled_busy_slots(
            participants=participants,
            start=period.start,
            end=period.end,
        )

        slots = AvailabilityScheduler.find_available_slots(
            period=period,
            slot_duration=duration,
            busy_slots=busy_slots,
            windows_for=self._config.windows_for,
            calendar=self._calendar,
            max_slots=self._config.max_slots,
            slot_interval=self._config.slot_interval,
        )
        logger.debug("Found %d slot(s) in %s", len(slots), period)
        return slots

    async def free_blocks(
        self,
        *,
        participants: Sequence[str],
        period: DateInterval,
        min_duration: timedelta = timedelta(0),
    ) -> List[DateInterval]:
        """Uninterrupted blocks within ``period`` where everyone is free."""
        busy_slots = await self.fetch_pooled_busy_slots(
            participants=participants,
            start=period.start,
            end=period.end,
        )

        calculator = FreeTimeCalculator(
            windows_for=self._config.windows_for,
            calendar=self._calendar,
        )
        return calculator.find_free_blocks(period, busy_slots, min_duration=min_duration)

    async def fetch_pooled_busy_slots(
        self,
        *,
        participants: Sequence[str],
        start: DateTime,
        end: DateTime,
    ) -> List[BusySlot]:
        """Busy slots of all participants in a single list."""
        busy_by_participant = await self.fetch_busy_slots(
            participants=participants,
            start=start,
            end=end,
        )
        return [slot for slots in busy_by_participant.values() for slot in slots]

    async def fetch_busy_slots(
        self,
        *,
        participants: Sequence[str],
        start: DateTime,
        end: DateTime,
    ) -> Dict[str, List[BusySlot]]:
        """Fetch busy slots for the requested participants."""
        participant_list = list(participants)

        try:
            busy_slots = await self._busy_source.get_busy_slots(
                participants=participant_list,
                start=start,
                end=end,
            )
        except BusySlotSourceError:
            raise
        except Exception as exc:
            raise BusySlotSourceError(f"Could not fetch busy slots: {exc}") from exc

        return self._ensure_busy_slot_entries(participant_list, busy_slots)

    @staticmethod
    def _ensure_busy_slot_entries(
        participants: Sequence[str],
        busy_slots: Dict[str, List[BusySlot]],
    ) -> Dict[str, List[BusySlot]]:
        """
        Ensure every requested participant appears in the busy-slot map.

        Sources may omit participants without bookings; we normalise that to
        an explicit empty list. Entries for participants that were not asked
        for are dropped so they cannot block the search.
        """
        normalized: Dict[str, List[BusySlot]] = {}

        for participant in participants:
            normalized[participant] = list(busy_slots.get(participant, []))

        unexpected = sorted(set(busy_slots) - set(participants))
        if unexpected:
            logger.warning(
                "Ignoring busy slots for participants that were not requested: %s",
                ", ".join(unexpected),
            )

        return normalized
