"""
Validation of slot finder configurations.

Every rule raises ``InvalidConfiguration`` with a message naming the rule and,
where it applies, the 1-based index of the offending period. Rules are checked
in a fixed order and the first failure wins.
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING, Optional

import pendulum

from .exceptions import InvalidConfiguration
from .shift_merger import merge_shifts

if TYPE_CHECKING:
    from ..config import (
        AvailablePeriodConfig,
        MomentConfig,
        ShiftConfig,
        SlotFinderConfig,
        UnavailablePeriodConfig,
    )


SHIFT_TIME_PATTERN = re.compile(r"[0-9]{2}:[0-9]{2}")

MINUTES_PER_DAY = 24 * 60

# Leap year used to bound the day of recurring moments (Feb 29 is allowed)
_RECURRING_DAYS_REFERENCE_YEAR = 2000


def resolve_timezone(name: str):
    """
    Resolve a timezone identifier.

    Raises:
        InvalidConfiguration: If the identifier is empty or unknown
    """
    if not name:
        raise InvalidConfiguration("Missing time zone")
    try:
        return pendulum.timezone(name)
    except (ValueError, KeyError, OSError) as exc:
        raise InvalidConfiguration(f"Invalid time zone: {name}") from exc


def _null_or_at_least(limit: int, value: Optional[int]) -> bool:
    return value is None or value >= limit


def _null_or_between(lower: int, upper: int, value: Optional[int]) -> bool:
    return value is None or lower <= value <= upper


class ConfigValidator:
    """
    Checks a ``SlotFinderConfig`` without modifying it.
    """

    def validate(self, configuration: "SlotFinderConfig") -> bool:
        """
        Validate the configuration.

        Returns:
            True when every rule holds

        Raises:
            InvalidConfiguration: On the first broken rule
        """
        if configuration is None:
            raise InvalidConfiguration("No configuration defined")

        self._check_primitive_values(configuration)

        for index, available_period in enumerate(configuration.available_periods, 1):
            self._check_available_period(available_period, index)

        for index, unavailable_period in enumerate(configuration.unavailable_periods, 1):
            reason = self._unavailable_period_error(unavailable_period, configuration.timezone)
            if reason:
                raise InvalidConfiguration(f"Blocked period #{index} is invalid: {reason}")

        lead_time = configuration.min_time_before_first_slot
        horizon = configuration.max_days_before_last_slot
        if lead_time and horizon and lead_time / MINUTES_PER_DAY > horizon:
            raise InvalidConfiguration(
                "The first possible slot will always be after the last possible one "
                "(see min_time_before_first_slot and max_days_before_last_slot)"
            )

        return True

    def _check_primitive_values(self, configuration: "SlotFinderConfig") -> None:
        if configuration.slot_duration_minutes is None or configuration.slot_duration_minutes < 1:
            raise InvalidConfiguration("Slot duration must be at least 1 minute")
        if not _null_or_between(1, 30, configuration.slot_start_minute_step):
            raise InvalidConfiguration("Slot start minute step must be between 1 and 30")
        if not _null_or_at_least(0, configuration.min_available_time_before_slot):
            raise InvalidConfiguration("Time before a slot must be at least 0 minutes")
        if not _null_or_at_least(0, configuration.min_available_time_after_slot):
            raise InvalidConfiguration("Time after a slot must be at least 0 minutes")
        if not _null_or_at_least(0, configuration.min_time_before_first_slot):
            raise InvalidConfiguration("The number of minutes before first slot must be 0 or more")
        if not _null_or_at_least(1, configuration.max_days_before_last_slot):
            raise InvalidConfiguration("The number of days before latest slot must be at least 1")
        resolve_timezone(configuration.timezone)

    def _check_available_period(self, available_period: "AvailablePeriodConfig", index: int) -> None:
        iso_weekday = available_period.iso_weekday
        if not 1 <= iso_weekday <= 7:
            raise InvalidConfiguration(
                f"ISO weekday must be between 1 (Monday) and 7 (Sunday) for available period #{index}"
            )

        for shift in available_period.shifts:
            if not self._is_shift_valid(shift):
                raise InvalidConfiguration(
                    f"Daily shift {shift.start_time} - {shift.end_time} "
                    f"for available period #{index} is invalid"
                )

        shifts = [shift.to_shift() for shift in available_period.shifts]
        if len(merge_shifts(shifts)) != len(shifts):
            raise InvalidConfiguration(f"Some shifts are overlapping for available period #{index}")

    @staticmethod
    def _is_shift_valid(shift: "ShiftConfig") -> bool:
        if not SHIFT_TIME_PATTERN.fullmatch(shift.start_time) or not SHIFT_TIME_PATTERN.fullmatch(shift.end_time):
            return False
        start_hour, start_minute = (int(part) for part in shift.start_time.split(":"))
        end_hour, end_minute = (int(part) for part in shift.end_time.split(":"))
        return (
            0 <= start_hour <= 23
            and 0 <= start_minute <= 59
            and 0 <= end_hour <= 23
            and 0 <= end_minute <= 59
            and shift.end_time > shift.start_time
        )

    def _unavailable_period_error(self, period: "UnavailablePeriodConfig", timezone: str) -> Optional[str]:
        """Return the reason the period is invalid, or None."""
        start_error = self._moment_error(period.start_at)
        if start_error:
            return f"start: {start_error}"
        end_error = self._moment_error(period.end_at)
        if end_error:
            return f"end: {end_error}"

        if (period.start_at.year is None) != (period.end_at.year is None):
            return "year must be set on both ends or on neither"

        if period.start_at.year is not None:
            blocked = period.to_blocked_period()
            start = blocked.start_at.resolve(timezone)
            end = blocked.end_at.resolve(timezone, closing=True)
            if start >= end:
                return "start must precede end"

        return None

    @staticmethod
    def _moment_error(moment: "MomentConfig") -> Optional[str]:
        if moment.hour is None and moment.minute is not None:
            return "minute given without hour"
        if moment.year is not None and not 1 <= moment.year <= 9999:
            return f"year {moment.year} is out of range"
        if not 0 <= moment.month <= 11:
            return f"month {moment.month} is out of range (0-11)"

        year = moment.year if moment.year is not None else _RECURRING_DAYS_REFERENCE_YEAR
        days_in_month = pendulum.date(year, moment.month + 1, 1).days_in_month
        if not 1 <= moment.day <= days_in_month:
            return f"day {moment.day} is out of range for month {moment.month}"
        if moment.hour is not None and not 0 <= moment.hour <= 23:
            return f"hour {moment.hour} is out of range"
        if moment.minute is not None and not 0 <= moment.minute <= 59:
            return f"minute {moment.minute} is out of range"
        return None
