"""
slotfinder - conflict-free slot search inside recurring daily windows.
"""

from .config import SchedulerConfig, WindowConfig
from .domain import (
    AvailabilityScheduler,
    BusinessCalendar,
    BusySlot,
    ClockValue,
    ClockWindow,
    DateInterval,
    FreeTimeCalculator,
    SchedulingError,
    ValidationError,
)
from .services import AvailabilityService, BusySlotSource

__version__ = "0.1.0"

__all__ = [
    "AvailabilityScheduler",
    "AvailabilityService",
    "BusinessCalendar",
    "BusySlot",
    "BusySlotSource",
    "ClockValue",
    "ClockWindow",
    "DateInterval",
    "FreeTimeCalculator",
    "SchedulerConfig",
    "SchedulingError",
    "ValidationError",
    "WindowConfig",
]
