"""
Helpers for normalising caller-supplied timestamps.

The engine works on pendulum ``DateTime`` values. Plain ``datetime`` objects
are accepted everywhere and converted without touching their timezone: naive
values stay naive, aware values keep their ``tzinfo``. A bare ``date`` stands
for its naive midnight.
"""

from datetime import date, datetime, timedelta

import pendulum
from pendulum import DateTime

_ONE_MICROSECOND = timedelta(microseconds=1)


def as_datetime(value: date) -> DateTime:
    """Return ``value`` as a pendulum DateTime, preserving its tzinfo."""
    if isinstance(value, DateTime):
        return value
    if isinstance(value, datetime):
        return pendulum.instance(value, tz=value.tzinfo)
    if isinstance(value, date):
        return pendulum.naive(value.year, value.month, value.day)
    raise TypeError(f"Expected a date or datetime, got {type(value).__name__}")


def start_of_day(value: date) -> DateTime:
    return as_datetime(value).start_of("day")


def as_date(value: date) -> date:
    """Truncate a date or datetime to its calendar date."""
    return date(value.year, value.month, value.day)


def total_microseconds(delta: timedelta) -> int:
    """Length of a timedelta (or pendulum Duration) in whole microseconds."""
    return delta // _ONE_MICROSECOND
