"""
Domain layer - Pure business logic without I/O.
"""

from .events import EventConsolidator
from .models import (
    AbsoluteMoment,
    BlockedPeriod,
    ConsolidatedEvent,
    DailyShift,
    RecurringMoment,
    SearchWindow,
    SlotRules,
    TimeRange,
    TimeSlot,
    WeekdayAvailability,
)
from .shift_merger import merge_shifts, merge_shifts_in_availabilities
from .slot_calculator import SlotCalculator
from .validator import ConfigValidator

__all__ = [
    "AbsoluteMoment",
    "BlockedPeriod",
    "ConfigValidator",
    "ConsolidatedEvent",
    "DailyShift",
    "EventConsolidator",
    "RecurringMoment",
    "SearchWindow",
    "SlotCalculator",
    "SlotRules",
    "TimeRange",
    "TimeSlot",
    "WeekdayAvailability",
    "merge_shifts",
    "merge_shifts_in_availabilities",
]
