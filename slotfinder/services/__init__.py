"""
Service layer helpers that orchestrate busy-slot sources and domain logic.
"""

from .availability import AvailabilityService, BusySlotSource

__all__ = ["AvailabilityService", "BusySlotSource"]
