"""
Bookable appointment slot finder.

Computes the slots available within a search window from a weekly
availability schedule, blocked periods and buffer/alignment/horizon rules.
"""

from .config import SlotFinderConfig
from .domain.exceptions import InvalidConfiguration, InvalidSearchWindow, SlotFinderError
from .domain.models import TimeSlot
from .services.slot_finder import SlotFinderService, find_available_slots, validate_configuration

__version__ = "0.1.0"

__all__ = [
    "InvalidConfiguration",
    "InvalidSearchWindow",
    "SlotFinderConfig",
    "SlotFinderError",
    "SlotFinderService",
    "TimeSlot",
    "find_available_slots",
    "validate_configuration",
]
