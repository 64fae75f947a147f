"""
Application services for finding bookable slots.

The service validates the configuration and the requested window, derives
the effective boundaries from an explicitly sampled clock, resolves blocking
periods, and walks the calendar day by day delegating each shift window to
the domain-level ``SlotCalculator``.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import List, Optional, Sequence

import pendulum
from pendulum import DateTime

from ..config import SlotFinderConfig
from ..domain.boundaries import check_search_window, compute_search_window, to_instant
from ..domain.events import EventConsolidator
from ..domain.models import ConsolidatedEvent, SearchWindow, TimeSlot, WeekdayAvailability
from ..domain.shift_merger import merge_shifts_in_availabilities
from ..domain.slot_calculator import SlotCalculator
from ..domain.validator import ConfigValidator

logger = logging.getLogger(__name__)


class SlotFinderService:
    """
    Orchestrates validation, boundary computation and the per-shift search.

    Each call is a pure function of the configuration, the window and the
    current instant, which is read once per call.
    """

    def __init__(
        self,
        configuration: SlotFinderConfig,
        validator: Optional[ConfigValidator] = None,
    ) -> None:
        self._configuration = configuration
        self._validator = validator or ConfigValidator()

    def find_slots(
        self,
        *,
        start: datetime,
        end: datetime,
        now: Optional[datetime] = None,
    ) -> List[TimeSlot]:
        """
        Compute every bookable slot between ``start`` and ``end``.

        Raises:
            InvalidConfiguration: If the configuration is invalid
            InvalidSearchWindow: If the boundaries are malformed or unordered
        """
        configuration = self._configuration
        self._validator.validate(configuration)
        start_instant, end_instant = check_search_window(start, end)

        timezone = configuration.timezone
        current = pendulum.now(timezone) if now is None else to_instant(now, "now")

        rules = configuration.to_slot_rules()
        window = compute_search_window(
            start_instant,
            end_instant,
            timezone=timezone,
            rules=rules,
            min_time_before_first_slot=configuration.min_time_before_first_slot,
            max_days_before_last_slot=configuration.max_days_before_last_slot,
            now=current,
        )
        logger.debug("Search window %s -> %s", window.first_from, window.last_to)

        if window.is_empty:
            return []

        # Neighbouring years catch wrapping periods and buffers crossing New Year
        events = EventConsolidator(timezone).consolidate(
            configuration.blocked_periods(),
            range(window.first_from.year - 1, window.last_to.year + 2),
        )
        availabilities = merge_shifts_in_availabilities(configuration.weekday_availabilities())

        slots = self.calculate_slots(
            window=window,
            availabilities=availabilities,
            events=events,
            calculator=SlotCalculator(rules=rules),
        )
        logger.debug("Found %d slots", len(slots))
        return slots

    def calculate_slots(
        self,
        *,
        window: SearchWindow,
        availabilities: Sequence[WeekdayAvailability],
        events: Sequence[ConsolidatedEvent],
        calculator: SlotCalculator,
    ) -> List[TimeSlot]:
        """
        Walk the calendar days of the window and search each clipped shift.

        Days and shifts are visited in increasing order, so the concatenated
        result is chronological.
        """
        slots: List[TimeSlot] = []
        current: DateTime = window.first_from

        while current < window.last_to:
            availability = self._get_availability_for_day(availabilities, current)

            if availability:
                for shift_range in availability.get_shift_ranges_for_day(current):
                    clipped = shift_range.clip(window.first_from, window.last_to)
                    if clipped:
                        slots.extend(calculator.find_slots_in_window(clipped, events))

            current = current.add(days=1).start_of("day")

        return slots

    @staticmethod
    def _get_availability_for_day(
        availabilities: Sequence[WeekdayAvailability],
        day: DateTime,
    ) -> Optional[WeekdayAvailability]:
        """First availability configured for the day's ISO weekday, if any."""
        for availability in availabilities:
            if availability.is_available_on(day):
                return availability
        return None


def find_available_slots(
    configuration: SlotFinderConfig,
    start: datetime,
    end: datetime,
    *,
    now: Optional[datetime] = None,
) -> List[TimeSlot]:
    """
    Find bookable slots for ``configuration`` between ``start`` and ``end``.

    Args:
        configuration: The availability, blocking and slot rules
        start: Timezone-aware start of the search
        end: Timezone-aware end of the search
        now: Current instant; sampled from the system clock when omitted

    Returns:
        Slots sorted by start, all of the configured duration

    Raises:
        InvalidConfiguration: If the configuration is invalid
        InvalidSearchWindow: If the boundaries are malformed or unordered
    """
    return SlotFinderService(configuration).find_slots(start=start, end=end, now=now)


def validate_configuration(configuration: SlotFinderConfig) -> bool:
    """
    Check a configuration; returns True or raises ``InvalidConfiguration``.
    """
    return ConfigValidator().validate(configuration)
