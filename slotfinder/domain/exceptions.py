"""
Domain-specific exception hierarchy for the slot finder.
"""


class SchedulingError(Exception):
    """Base class for all application-level errors."""


class ValidationError(SchedulingError, ValueError):
    """Raised when a value or argument is outside its valid range."""


class BusySlotSourceError(SchedulingError):
    """Raised when busy slots cannot be fetched from a source."""
