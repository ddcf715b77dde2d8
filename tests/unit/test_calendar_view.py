"""Unit tests for ephemeris.calendar_view."""

from datetime import datetime, timedelta
from types import SimpleNamespace

import pytest

from ephemeris import view
from ephemeris.calendar_view import CalendarView
from ephemeris.exceptions import InvalidRangeError
from ephemeris.models import Occurrence, RecurrenceRule, Schedule
from ephemeris.recurrence import AnnualRecurrence, WeeklyRecurrence
from ephemeris.reducer import overlaps

pytestmark = pytest.mark.unit

D0 = datetime(2024, 9, 2)


def day(offset: float) -> datetime:
    return D0 + timedelta(days=offset)


def once(name: str, start: float, end: float) -> RecurrenceRule:
    return RecurrenceRule.once(day(start), day(end), name)


def occ(name: str, start: float, end: float) -> Occurrence:
    return Occurrence(start=day(start), end=day(end), name=name)


class TestScenarios:
    """Schedules resolved end to end through view()."""

    def test_equal_ranges_keep_later_entry(self):
        schedule = Schedule(name="s", entries=[once("one", 0, 7), once("two", 0, 7)])
        assert view(schedule, day(-1), day(10)) == [occ("two", 0, 7)]

    def test_same_start_truncates_earlier_entry(self):
        schedule = Schedule(name="s", entries=[once("one", 0, 8), once("two", 0, 7)])
        assert view(schedule, day(-1), day(10)) == [occ("one", 7, 8), occ("two", 0, 7)]

    def test_disjoint_entries_survive(self):
        schedule = Schedule(name="s", entries=[once("one", -5, -1), once("two", 0, 8)])
        assert view(schedule, day(-10), day(10)) == [occ("one", -5, -1), occ("two", 0, 8)]

    def test_middle_overlap(self):
        schedule = Schedule(name="s", entries=[once("one", -5, 2), once("two", 0, 8)])
        assert view(schedule, day(-10), day(10)) == [occ("one", -5, 0), occ("two", 0, 8)]

    def test_nested_entries(self):
        schedule = Schedule(
            name="s",
            entries=[once("one", 0, 5), once("two", 1, 2), once("three", 2, 4)],
        )
        result = view(schedule, day(-1), day(10))
        assert sorted(result, key=lambda o: o.start) == [
            occ("one", 0, 1),
            occ("two", 1, 2),
            occ("three", 2, 4),
            occ("one", 4, 5),
        ]

    def test_birthday_every_year(self):
        schedule = Schedule(
            name="birthdays",
            entries=[
                RecurrenceRule(
                    base=Occurrence(
                        start=datetime(2020, 2, 13),
                        end=datetime(2020, 2, 14),
                        name="Dominico's Birthday",
                    ),
                    pattern=AnnualRecurrence(count=1),
                    forward_limit=datetime(2025, 2, 13),
                )
            ],
        )
        result = view(schedule, datetime(2020, 2, 13), datetime(2025, 2, 13))
        assert [(o.start, o.end) for o in result] == [
            (datetime(year, 2, 13), datetime(year, 2, 14)) for year in range(2020, 2025)
        ]


class TestRecurringPriority:
    def test_weekly_exception_overrides_daily_routine(self):
        work = RecurrenceRule(
            base=Occurrence(start=day(0) + timedelta(hours=9), end=day(0) + timedelta(hours=17), name="Work"),
            repeat_every=timedelta(days=1),
        )
        meeting = RecurrenceRule(
            base=Occurrence(
                start=day(0) + timedelta(hours=13), end=day(0) + timedelta(hours=14), name="1:1"
            ),
            pattern=WeeklyRecurrence(count=1),
        )
        schedule = Schedule(name="week", entries=[work, meeting])

        result = view(schedule, day(0), day(2))

        assert sorted(result, key=lambda o: o.start) == [
            Occurrence(start=day(0) + timedelta(hours=9), end=day(0) + timedelta(hours=13), name="Work"),
            Occurrence(start=day(0) + timedelta(hours=13), end=day(0) + timedelta(hours=14), name="1:1"),
            Occurrence(start=day(0) + timedelta(hours=14), end=day(0) + timedelta(hours=17), name="Work"),
            Occurrence(start=day(1) + timedelta(hours=9), end=day(1) + timedelta(hours=17), name="Work"),
        ]

    def test_entry_order_decides_priority(self):
        vacation = once("Vacation", 0, 7)
        work = RecurrenceRule(
            base=Occurrence(start=day(0) + timedelta(hours=9), end=day(0) + timedelta(hours=17), name="Work"),
            repeat_every=timedelta(days=1),
        )

        work_wins = view(Schedule(entries=[vacation, work]), day(0), day(7))
        vacation_wins = view(Schedule(entries=[work, vacation]), day(0), day(7))

        assert vacation_wins == [occ("Vacation", 0, 7)]
        assert sum(1 for o in work_wins if o.name == "Work") == 7
        assert sum(1 for o in work_wins if o.name == "Vacation") == 8

    def test_result_never_overlaps(self):
        rules = [
            RecurrenceRule(
                base=Occurrence(start=day(0), end=day(0) + timedelta(hours=5), name=f"r{i}"),
                repeat_every=timedelta(hours=3 + i),
            )
            for i in range(4)
        ]
        result = view(Schedule(entries=rules), day(0), day(3))
        for i, first in enumerate(result):
            for second in result[i + 1 :]:
                assert not overlaps(first, second)


class TestCalendarView:
    def test_empty_schedule(self):
        assert CalendarView().view(Schedule(name="empty"), day(0), day(1)) == []

    def test_inverted_window_raises(self):
        schedule = Schedule(entries=[once("one", 0, 1)])
        with pytest.raises(InvalidRangeError):
            view(schedule, day(2), day(1))

    def test_inverted_window_raises_for_empty_schedule(self):
        with pytest.raises(InvalidRangeError):
            view(Schedule(), day(2), day(1))

    def test_expand_schedule_keeps_rule_order(self):
        schedule = Schedule(entries=[once("late", 5, 6), once("early", 0, 1)])
        expanded = CalendarView().expand_schedule(schedule, day(0), day(10))
        assert [o.name for o in expanded] == ["late", "early"]

    def test_settings_are_passed_to_expander(self):
        rule = RecurrenceRule(
            base=Occurrence(start=day(0), end=day(0) + timedelta(hours=1), name="tick"),
            repeat_every=timedelta(days=1),
        )
        calendar = CalendarView(SimpleNamespace(max_occurrences_per_rule=2))
        assert len(calendar.view(Schedule(entries=[rule]), day(0), day(10))) == 2

    def test_schedule_is_not_modified(self):
        schedule = Schedule(name="s", entries=[once("one", 0, 5), once("two", 1, 2)])
        snapshot = schedule.model_copy()
        view(schedule, day(0), day(10))
        assert schedule == snapshot
