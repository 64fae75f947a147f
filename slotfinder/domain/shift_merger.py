"""
Collapse overlapping or touching daily shifts into a minimal set.
"""

from dataclasses import replace
from typing import Iterable, List, Sequence

from .models import DailyShift, WeekdayAvailability


def merge_shifts(shifts: Sequence[DailyShift]) -> List[DailyShift]:
    """
    Merge overlapping or adjacent shifts, never mutating the input.

    Example: [09:00-12:00, 11:00-13:00, 13:00-14:00, 15:00-16:00]
          -> [09:00-14:00, 15:00-16:00]
    """
    if len(shifts) < 2:
        return list(shifts)

    # Fixed HH:MM width makes lexical order chronological
    sorted_shifts = sorted(shifts, key=lambda s: s.start_time)
    merged: List[DailyShift] = []
    pending = sorted_shifts[0]

    for current in sorted_shifts[1:]:
        if pending.end_time >= current.start_time:
            if current.end_time > pending.end_time:
                pending = DailyShift(start_time=pending.start_time, end_time=current.end_time)
        else:
            merged.append(pending)
            pending = current

    merged.append(pending)
    return merged


def merge_shifts_in_availabilities(
    availabilities: Iterable[WeekdayAvailability],
) -> List[WeekdayAvailability]:
    """Return copies of the weekday availabilities with merged shifts."""
    return [
        replace(availability, shifts=tuple(merge_shifts(availability.shifts)))
        for availability in availabilities
    ]
