"""
Domain models for availability, blocking periods and slot calculations.
"""

from dataclasses import dataclass
from typing import List, Optional, Tuple, Union

import pendulum
from pendulum import DateTime


@dataclass(frozen=True)
class TimeRange:
    """
    Represents an immutable time range with start and end datetime.

    Invariant: start must be before end.
    """
    start: DateTime
    end: DateTime

    def __post_init__(self):
        if self.start >= self.end:
            raise ValueError(f"Start time {self.start} must be before end time {self.end}")

    def clip(self, min_bound: DateTime, max_bound: DateTime) -> "TimeRange | None":
        """
        Clip the range to fit within bounds.
        Returns None if nothing of the range is left inside the bounds.
        """
        clipped_start = max(self.start, min_bound)
        clipped_end = min(self.end, max_bound)

        if clipped_start >= clipped_end:
            return None

        return TimeRange(start=clipped_start, end=clipped_end)


@dataclass(frozen=True)
class DailyShift:
    """
    A time-of-day interval in the zero-padded ``HH:MM`` format.

    Lexical order of the strings equals chronological order within a day.
    """
    start_time: str
    end_time: str

    @staticmethod
    def _split(value: str) -> Tuple[int, int]:
        hour, minute = value.split(":")
        return int(hour), int(minute)

    def get_range_for_day(self, day: DateTime) -> Optional[TimeRange]:
        """
        Anchor the shift on the calendar day of ``day``.

        Returns None when the wall times collapse, e.g. a shift lying inside a
        DST gap.
        """
        start_hour, start_minute = self._split(self.start_time)
        end_hour, end_minute = self._split(self.end_time)
        start = day.set(hour=start_hour, minute=start_minute, second=0, microsecond=0)
        end = day.set(hour=end_hour, minute=end_minute, second=0, microsecond=0)
        if start >= end:
            return None
        return TimeRange(start=start, end=end)

    def __str__(self) -> str:
        return f"{self.start_time}-{self.end_time}"


@dataclass(frozen=True)
class WeekdayAvailability:
    """
    The shifts during which booking is possible on one ISO weekday.
    """
    iso_weekday: int  # 1=Monday, 7=Sunday
    shifts: Tuple[DailyShift, ...] = ()

    def is_available_on(self, day: DateTime) -> bool:
        """Check if a given datetime falls on this weekday."""
        return day.isoweekday() == self.iso_weekday

    def get_shift_ranges_for_day(self, day: DateTime) -> List[TimeRange]:
        """Get the absolute shift ranges for a specific day, in shift order."""
        if not self.is_available_on(day):
            return []
        ranges = (shift.get_range_for_day(day) for shift in self.shifts)
        return [shift_range for shift_range in ranges if shift_range is not None]


def _days_in_month(year: int, month: int) -> int:
    return pendulum.date(year, month, 1).days_in_month


def _resolve(
    year: int,
    month: int,
    day: int,
    hour: Optional[int],
    minute: Optional[int],
    timezone: str,
    closing: bool,
) -> DateTime:
    moment = pendulum.datetime(
        year,
        month + 1,
        min(day, _days_in_month(year, month + 1)),
        hour or 0,
        minute or 0,
        tz=timezone,
    )
    if hour is None:
        return moment.end_of("day") if closing else moment.start_of("day")
    return moment


@dataclass(frozen=True)
class AbsoluteMoment:
    """
    A date (and optional time) in a specific year.

    ``month`` is zero-based (0 = January).
    """
    year: int
    month: int
    day: int
    hour: Optional[int] = None
    minute: Optional[int] = None

    def resolve(self, timezone: str, reference_year: Optional[int] = None, closing: bool = False) -> DateTime:
        """
        Resolve to an instant in ``timezone``; ``reference_year`` is ignored.

        Without an hour the moment resolves to the start of the day, or to its
        end when ``closing`` is set.
        """
        return _resolve(self.year, self.month, self.day, self.hour, self.minute, timezone, closing)


@dataclass(frozen=True)
class RecurringMoment:
    """
    A date (and optional time) repeating every year.

    ``month`` is zero-based (0 = January). Feb 29 resolves to Feb 28 in
    non-leap years.
    """
    month: int
    day: int
    hour: Optional[int] = None
    minute: Optional[int] = None

    def resolve(self, timezone: str, reference_year: int, closing: bool = False) -> DateTime:
        """Resolve to an instant in ``timezone`` within ``reference_year``."""
        return _resolve(reference_year, self.month, self.day, self.hour, self.minute, timezone, closing)


CalendarMoment = Union[AbsoluteMoment, RecurringMoment]


@dataclass(frozen=True)
class BlockedPeriod:
    """
    An interval during which no slot may be offered.

    Both ends are absolute, or both are recurring.
    """
    start_at: CalendarMoment
    end_at: CalendarMoment

    @property
    def is_recurring(self) -> bool:
        return isinstance(self.start_at, RecurringMoment)


@dataclass(frozen=True)
class ConsolidatedEvent:
    """A blocking period resolved to absolute instants."""
    start_at: DateTime
    end_at: DateTime

    def overlaps(self, lower: DateTime, upper: DateTime) -> bool:
        """Check if the event intersects the open interval (lower, upper)."""
        return self.start_at < upper and self.end_at > lower


@dataclass(frozen=True)
class SlotRules:
    """
    Duration, alignment and buffer parameters applied to every slot.
    """
    duration_minutes: int
    start_minute_step: int = 5
    minutes_before: int = 0
    minutes_after: int = 0

    @property
    def required_free_minutes(self) -> int:
        """Free time needed around a slot, the slot itself included."""
        return self.minutes_before + self.duration_minutes + self.minutes_after


@dataclass(frozen=True)
class SearchWindow:
    """The effective global search boundaries."""
    first_from: DateTime
    last_to: DateTime

    @property
    def is_empty(self) -> bool:
        return self.first_from >= self.last_to


@dataclass(frozen=True)
class TimeSlot:
    """
    Represents a found bookable time slot.
    """
    start_at: DateTime
    end_at: DateTime
    duration_minutes: int

    def format_display(self) -> str:
        """
        Format the slot for display.
        Format: Wochentag, DD.MM.YYYY | HH:MM – HH:MM Uhr
        """
        weekday_names = {
            1: "Montag",
            2: "Dienstag",
            3: "Mittwoch",
            4: "Donnerstag",
            5: "Freitag",
            6: "Samstag",
            7: "Sonntag"
        }

        weekday = weekday_names[self.start_at.isoweekday()]
        date_str = self.start_at.format("DD.MM.YYYY")
        time_str = f"{self.start_at.format('HH:mm')} – {self.end_at.format('HH:mm')} Uhr"

        return f"{weekday}, {date_str} | {time_str} ({self.duration_minutes} Min.)"
