"""
Core business logic for calculating bookable time slots.

This is the heart of the application - pure domain logic without any
external dependencies (no API calls, no database, no I/O).
"""

from bisect import bisect_right
from typing import List, Sequence

from pendulum import DateTime

from .models import ConsolidatedEvent, SlotRules, TimeRange, TimeSlot


class SlotCalculator:
    """
    Finds aligned, buffer-compliant slots inside one availability window.

    Algorithm:
    1. Keep the blocking events that touch the window widened by the buffers
    2. Sort them by start and drop events encompassed by an earlier one
    3. Sweep a cursor through the window: round it up to the next valid
       slot start, jump past the next event if it starts too soon, otherwise
       emit a slot and move after it
    """

    def __init__(self, rules: SlotRules):
        self.rules = rules

    def find_slots_in_window(
        self,
        window: TimeRange,
        events: Sequence[ConsolidatedEvent],
    ) -> List[TimeSlot]:
        """
        Find all slots within a single contiguous window.

        Args:
            window: Availability window, already clipped to the search window
            events: Consolidated blocking events (any order, any range)

        Returns:
            Slots in chronological order, each ending no later than the window
        """
        rules = self.rules
        required = rules.required_free_minutes

        # The cursor marks where the before-buffer of the next slot begins
        cursor = window.start.subtract(minutes=rules.minutes_before)
        search_end = window.end.subtract(minutes=required)

        cleaned = self.prepare_events(
            events,
            cursor,
            window.end.add(minutes=rules.minutes_after),
        )
        # Ends are strictly increasing once encompassed events are gone
        event_index = bisect_right([event.end_at for event in cleaned], cursor)

        slots: List[TimeSlot] = []

        while cursor <= search_end:
            candidate = self._next_search_moment(cursor)
            if candidate > search_end:
                break

            focused = cleaned[event_index] if event_index < len(cleaned) else None

            if focused is not None and focused.start_at < candidate.add(minutes=required):
                # Too close to the next event: resume the search after it
                cursor = focused.end_at
                event_index += 1
                continue

            slot = self._build_slot(candidate)
            slots.append(slot)
            # The after-buffer overlaps the next slot's before-buffer
            cursor = slot.end_at.add(
                minutes=max(rules.minutes_after - rules.minutes_before, 0)
            )

        return slots

    @staticmethod
    def prepare_events(
        events: Sequence[ConsolidatedEvent],
        lower: DateTime,
        upper: DateTime,
    ) -> List[ConsolidatedEvent]:
        """
        Filter, sort and de-duplicate events for the sweep.

        Events outside (lower, upper) are dropped. The rest are sorted by start,
        ties by descending end, so a single pass tracking the furthest end seen
        removes every event encompassed by an earlier-starting one.
        """
        relevant = [event for event in events if event.overlaps(lower, upper)]
        relevant.sort(key=lambda e: e.end_at, reverse=True)
        relevant.sort(key=lambda e: e.start_at)

        cleaned: List[ConsolidatedEvent] = []
        for event in relevant:
            if cleaned and cleaned[-1].end_at >= event.end_at:
                continue
            cleaned.append(event)

        return cleaned

    def _next_search_moment(self, moment: DateTime) -> DateTime:
        """
        Round a cursor up to the next valid search moment.

        Sub-minute remainders round up to the next whole minute. The minute of
        the slot start (moment plus before-buffer) is then rounded up to a
        multiple of the start minute step.
        """
        if moment.second or moment.microsecond:
            moment = moment.start_of("minute").add(minutes=1)

        step = self.rules.start_minute_step
        slot_start = moment.add(minutes=self.rules.minutes_before)
        minutes_to_add = (step - slot_start.minute % step) % step

        return moment.add(minutes=minutes_to_add)

    def _build_slot(self, search_moment: DateTime) -> TimeSlot:
        start_at = search_moment.add(minutes=self.rules.minutes_before)
        end_at = start_at.add(minutes=self.rules.duration_minutes)
        return TimeSlot(
            start_at=start_at,
            end_at=end_at,
            duration_minutes=self.rules.duration_minutes,
        )
