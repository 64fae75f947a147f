"""
Resolution of configured blocking periods into absolute events.
"""

import logging
from typing import Iterable, List, Sequence

from .models import BlockedPeriod, ConsolidatedEvent

logger = logging.getLogger(__name__)


class EventConsolidator:
    """
    Turns blocked periods into timezone-resolved ``ConsolidatedEvent`` objects.

    Absolute periods resolve once. Recurring periods resolve once per
    reference year; when the resolved end precedes the start the period wraps
    the year boundary (e.g. Dec 20 -> Jan 5) and the end moves one year later.
    Date-only moments cover the whole day: a missing hour resolves to the
    start of the day for ``start_at`` and to its end for ``end_at``.

    No filtering against the search window happens here.
    """

    def __init__(self, timezone: str):
        self.timezone = timezone

    def consolidate(
        self,
        periods: Sequence[BlockedPeriod],
        reference_years: Iterable[int],
    ) -> List[ConsolidatedEvent]:
        years = list(reference_years)
        events: List[ConsolidatedEvent] = []

        for period in periods:
            if period.is_recurring:
                events.extend(self._resolve(period, year) for year in years)
            else:
                events.append(self._resolve(period, None))

        logger.debug("Consolidated %d blocking events from %d periods", len(events), len(periods))
        return events

    def _resolve(self, period: BlockedPeriod, reference_year: "int | None") -> ConsolidatedEvent:
        start_at = period.start_at.resolve(self.timezone, reference_year)
        end_at = period.end_at.resolve(self.timezone, reference_year, closing=True)

        # Only reachable for recurring periods
        if end_at < start_at:
            end_at = end_at.add(years=1)

        logger.debug("Blocking event %s -> %s", start_at, end_at)
        return ConsolidatedEvent(start_at=start_at, end_at=end_at)
