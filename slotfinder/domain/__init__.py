"""
Domain layer - Pure scheduling logic without external I/O.
"""

from .calendar import BusinessCalendar
from .clock import ClockValue, ClockWindow
from .constants import DEFAULT_SEARCH_LIMIT_DAYS, DEFAULT_SLOT_INTERVAL
from .exceptions import BusySlotSourceError, SchedulingError, ValidationError
from .free_time import FreeTimeCalculator
from .models import BusySlot, DateInterval, TimestampSequence
from .scheduler import AvailabilityScheduler

__all__ = [
    "AvailabilityScheduler",
    "BusinessCalendar",
    "BusySlot",
    "BusySlotSourceError",
    "ClockValue",
    "ClockWindow",
    "DateInterval",
    "DEFAULT_SEARCH_LIMIT_DAYS",
    "DEFAULT_SLOT_INTERVAL",
    "FreeTimeCalculator",
    "SchedulingError",
    "TimestampSequence",
    "ValidationError",
]
