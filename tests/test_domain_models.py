"""
Tests for domain models.
"""

import pendulum
import pytest

from slotfinder.domain.models import (
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

TZ = "Europe/Paris"


class TestTimeRange:
    """Tests for TimeRange model."""

    def test_create_valid_time_range(self):
        start = pendulum.parse("2020-10-16 09:00", tz=TZ)
        end = pendulum.parse("2020-10-16 17:00", tz=TZ)

        tr = TimeRange(start=start, end=end)

        assert tr.start == start
        assert tr.end == end

    def test_invalid_time_range_raises_error(self):
        start = pendulum.parse("2020-10-16 17:00", tz=TZ)
        end = pendulum.parse("2020-10-16 09:00", tz=TZ)

        with pytest.raises(ValueError, match="Start time .* must be before end time"):
            TimeRange(start=start, end=end)

    def test_clip(self):
        tr = TimeRange(
            start=pendulum.parse("2020-10-16 09:00", tz=TZ),
            end=pendulum.parse("2020-10-16 17:00", tz=TZ)
        )

        clipped = tr.clip(
            pendulum.parse("2020-10-16 10:30", tz=TZ),
            pendulum.parse("2020-10-17 00:00", tz=TZ),
        )

        assert clipped.start == pendulum.parse("2020-10-16 10:30", tz=TZ)
        assert clipped.end == tr.end

    def test_clip_outside_bounds_returns_none(self):
        tr = TimeRange(
            start=pendulum.parse("2020-10-16 09:00", tz=TZ),
            end=pendulum.parse("2020-10-16 17:00", tz=TZ)
        )

        assert tr.clip(
            pendulum.parse("2020-10-16 17:00", tz=TZ),
            pendulum.parse("2020-10-16 20:00", tz=TZ),
        ) is None


class TestDailyShift:
    """Tests for DailyShift."""

    def test_range_is_anchored_on_the_given_day(self):
        shift = DailyShift(start_time="10:00", end_time="12:30")
        day = pendulum.parse("2020-10-16 07:42:13", tz=TZ)

        tr = shift.get_range_for_day(day)

        assert tr.start == pendulum.datetime(2020, 10, 16, 10, 0, tz=TZ)
        assert tr.end == pendulum.datetime(2020, 10, 16, 12, 30, tz=TZ)

    def test_shift_inside_dst_gap_has_no_range(self):
        shift = DailyShift(start_time="02:00", end_time="03:00")

        assert shift.get_range_for_day(pendulum.parse("2021-03-28", tz=TZ)) is None
        assert shift.get_range_for_day(pendulum.parse("2021-03-21", tz=TZ)) is not None

    def test_str(self):
        assert str(DailyShift(start_time="08:00", end_time="09:15")) == "08:00-09:15"


class TestWeekdayAvailability:
    """Tests for WeekdayAvailability."""

    def test_is_available_on(self):
        friday = WeekdayAvailability(iso_weekday=5)

        assert friday.is_available_on(pendulum.parse("2020-10-16 12:00", tz=TZ))
        assert not friday.is_available_on(pendulum.parse("2020-10-17 12:00", tz=TZ))

    def test_shift_ranges_for_other_weekday_are_empty(self):
        friday = WeekdayAvailability(
            iso_weekday=5,
            shifts=(DailyShift(start_time="10:00", end_time="12:00"),)
        )

        assert friday.get_shift_ranges_for_day(pendulum.parse("2020-10-15", tz=TZ)) == []
        assert len(friday.get_shift_ranges_for_day(pendulum.parse("2020-10-16", tz=TZ))) == 1


class TestCalendarMoments:
    """Tests for absolute and recurring calendar moments."""

    def test_absolute_moment_with_time(self):
        moment = AbsoluteMoment(year=2020, month=9, day=16, hour=12, minute=30)

        assert moment.resolve(TZ) == pendulum.datetime(2020, 10, 16, 12, 30, tz=TZ)

    def test_absolute_day_only_moment_covers_the_whole_day(self):
        moment = AbsoluteMoment(year=2020, month=9, day=16)

        assert moment.resolve(TZ) == pendulum.datetime(2020, 10, 16, tz=TZ)
        assert moment.resolve(TZ, closing=True) == pendulum.datetime(
            2020, 10, 16, 23, 59, 59, 999999, tz=TZ
        )

    def test_month_is_zero_based(self):
        assert AbsoluteMoment(year=2021, month=0, day=5).resolve(TZ).month == 1
        assert RecurringMoment(month=11, day=20).resolve(TZ, 2020).month == 12

    def test_recurring_moment_uses_reference_year(self):
        moment = RecurringMoment(month=9, day=16, hour=8)

        assert moment.resolve(TZ, 2019) == pendulum.datetime(2019, 10, 16, 8, tz=TZ)
        assert moment.resolve(TZ, 2021) == pendulum.datetime(2021, 10, 16, 8, tz=TZ)

    def test_recurring_leap_day_is_clamped(self):
        moment = RecurringMoment(month=1, day=29)

        assert moment.resolve(TZ, 2020) == pendulum.datetime(2020, 2, 29, tz=TZ)
        assert moment.resolve(TZ, 2021) == pendulum.datetime(2021, 2, 28, tz=TZ)

    def test_blocked_period_kind(self):
        recurring = BlockedPeriod(
            start_at=RecurringMoment(month=11, day=20),
            end_at=RecurringMoment(month=0, day=5),
        )
        absolute = BlockedPeriod(
            start_at=AbsoluteMoment(year=2020, month=9, day=16),
            end_at=AbsoluteMoment(year=2020, month=9, day=17),
        )

        assert recurring.is_recurring
        assert not absolute.is_recurring


class TestValueObjects:
    """Tests for the small value objects used by the search."""

    def test_required_free_minutes(self):
        rules = SlotRules(duration_minutes=30, minutes_before=10, minutes_after=5)

        assert rules.required_free_minutes == 45
        assert rules.start_minute_step == 5

    def test_event_overlap_is_strict(self):
        event = ConsolidatedEvent(
            start_at=pendulum.parse("2020-10-16 12:00", tz=TZ),
            end_at=pendulum.parse("2020-10-16 13:00", tz=TZ),
        )

        assert event.overlaps(
            pendulum.parse("2020-10-16 12:59", tz=TZ),
            pendulum.parse("2020-10-16 14:00", tz=TZ),
        )
        assert not event.overlaps(
            pendulum.parse("2020-10-16 13:00", tz=TZ),
            pendulum.parse("2020-10-16 14:00", tz=TZ),
        )
        assert not event.overlaps(
            pendulum.parse("2020-10-16 10:00", tz=TZ),
            pendulum.parse("2020-10-16 12:00", tz=TZ),
        )

    def test_search_window_is_empty(self):
        start = pendulum.parse("2020-10-16 12:00", tz=TZ)

        assert SearchWindow(first_from=start, last_to=start).is_empty
        assert not SearchWindow(first_from=start, last_to=start.add(minutes=1)).is_empty

    def test_slot_format_display(self):
        slot = TimeSlot(
            start_at=pendulum.parse("2020-10-16 10:00", tz=TZ),
            end_at=pendulum.parse("2020-10-16 10:15", tz=TZ),
            duration_minutes=15,
        )

        assert slot.format_display() == "Freitag, 16.10.2020 | 10:00 – 10:15 Uhr (15 Min.)"
