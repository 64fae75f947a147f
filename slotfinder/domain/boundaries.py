"""
Search window checks and the clock- and horizon-aware global boundaries.
"""

from datetime import datetime
from typing import Tuple

import pendulum
from pendulum import DateTime

from .exceptions import InvalidSearchWindow
from .models import SearchWindow, SlotRules

# Work grows with the number of days searched
MAX_SEARCH_WINDOW_DAYS = 3660


def to_instant(value: datetime, name: str = "datetime") -> DateTime:
    """
    Convert a timezone-aware datetime into a pendulum DateTime.

    Raises:
        InvalidSearchWindow: If the value is not an aware datetime
    """
    if not isinstance(value, datetime):
        raise InvalidSearchWindow(f"The {name} boundary must be a datetime, got {type(value).__name__}")
    if value.tzinfo is None or value.utcoffset() is None:
        raise InvalidSearchWindow(f"The {name} boundary must be timezone-aware")
    return pendulum.instance(value)


def check_search_window(start: datetime, end: datetime) -> Tuple[DateTime, DateTime]:
    """
    Validate caller supplied boundaries.

    Raises:
        InvalidSearchWindow: If a boundary is malformed, the window is empty
            or it spans more than ``MAX_SEARCH_WINDOW_DAYS``
    """
    start_instant = to_instant(start, "start")
    end_instant = to_instant(end, "end")

    if start_instant >= end_instant:
        raise InvalidSearchWindow("Invalid boundaries for the search: start must precede end")
    if end_instant > start_instant.add(days=MAX_SEARCH_WINDOW_DAYS):
        raise InvalidSearchWindow(
            f"Invalid boundaries for the search: window exceeds {MAX_SEARCH_WINDOW_DAYS} days"
        )

    return start_instant, end_instant


def compute_search_window(
    start: DateTime,
    end: DateTime,
    *,
    timezone: str,
    rules: SlotRules,
    min_time_before_first_slot: int,
    max_days_before_last_slot: "int | None",
    now: DateTime,
) -> SearchWindow:
    """
    Derive the effective window from the caller's bounds and the constraints.

    The first bound moves past ``now`` plus the before-buffer and the lead
    time; the before-buffer is taken off again by the sweep, so no slot
    preparation starts in the past. With a horizon the last bound is capped at
    the end of the day ``max_days_before_last_slot`` days after ``now``.
    """
    local_now = now.in_timezone(timezone)

    earliest = local_now.add(minutes=rules.minutes_before + (min_time_before_first_slot or 0))
    first_from = max(start.in_timezone(timezone), earliest)

    last_to = end.in_timezone(timezone)
    if max_days_before_last_slot:
        horizon = local_now.add(days=max_days_before_last_slot).end_of("day")
        last_to = min(last_to, horizon)

    return SearchWindow(first_from=first_from, last_to=last_to)
