"""
Shared defaults for the scheduling engine.
"""

from datetime import timedelta

# Granularity between candidate slot start times
DEFAULT_SLOT_INTERVAL = timedelta(minutes=15)

# How many calendar days find_next_slot looks ahead
DEFAULT_SEARCH_LIMIT_DAYS = 30

# Bound for the *_with_limit working day navigation
DEFAULT_MAX_NAVIGATION_DAYS = 365

# ISO weekdays, Monday=1 ... Sunday=7
MONDAY, TUESDAY, WEDNESDAY, THURSDAY, FRIDAY, SATURDAY, SUNDAY = range(1, 8)

DEFAULT_WORKING_WEEKDAYS = frozenset({MONDAY, TUESDAY, WEDNESDAY, THURSDAY, FRIDAY})

MINUTES_PER_DAY = 1440
MICROSECONDS_PER_DAY = 24 * 60 * 60 * 1_000_000
