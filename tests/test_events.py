"""Tests for core event logic."""

from datetime import date, datetime, time, timedelta

import pytest

from notus.core.errors import InvalidRecurrenceConfiguration, InvalidReminderConfiguration
from notus.core.events import FOREVER, Event, RecurringEvent
from notus.core.recurrence import Recurrence


@pytest.fixture
def standup():
    return RecurringEvent(
        "Standup",
        datetime(2024, 1, 1, 9, 0),
        end=datetime(2024, 1, 1, 9, 15),
        recurrence=Recurrence.WEEKLY,
    )


class TestEvent:
    def test_not_recurring(self):
        event = Event("Dentist", datetime(2024, 3, 10, 14, 0))
        assert event.is_recurring is False
        assert event.remind is False
        assert event.reminders == {}

    def test_orders_by_start(self):
        late = Event("Late", datetime(2024, 3, 10, 18, 0))
        early = Event("Early", datetime(2024, 3, 10, 8, 0))
        middle = Event("Middle", datetime(2024, 3, 10, 12, 0))
        assert [e.title for e in sorted([late, early, middle])] == ["Early", "Middle", "Late"]

    def test_reminders_sorted_and_deduplicated(self):
        event = Event("Talk", datetime(2024, 3, 10, 9, 0), reminders={"day": [3, 1, 3]})
        assert event.reminders == {"day": [1, 3]}

    def test_unknown_reminder_unit_rejected(self):
        with pytest.raises(InvalidReminderConfiguration, match="month"):
            Event("Talk", datetime(2024, 3, 10, 9, 0), reminders={"month": [1]})

    def test_reminder_error_is_value_error(self):
        with pytest.raises(ValueError):
            Event("Talk", datetime(2024, 3, 10, 9, 0), reminders={"hour": [1]})

    def test_occurs_on(self):
        event = Event("Dentist", datetime(2024, 3, 10, 14, 0))
        assert event.occurs_on(date(2024, 3, 10)) is True
        assert event.occurs_on(date(2024, 3, 11)) is False


class TestFromOffsets:
    def test_pairs_periods_with_units(self):
        event = Event.from_offsets(
            "Exam",
            datetime(2024, 5, 1, 9, 0),
            [2, 1, 1],
            ["day", "day", "week"],
            remind=True,
        )
        assert event.reminders == {"day": [1, 2], "week": [1]}
        assert event.remind is True

    def test_mismatched_lengths_rejected(self):
        with pytest.raises(InvalidReminderConfiguration):
            Event.from_offsets("Exam", datetime(2024, 5, 1, 9, 0), [1, 2], ["day"])

    def test_recurring(self):
        event = RecurringEvent.from_offsets(
            "Rent",
            datetime(2024, 1, 1, 9, 0),
            [3],
            ["day"],
            remind=True,
            recurrence=Recurrence.MONTHLY,
        )
        assert isinstance(event, RecurringEvent)
        assert event.recurrence is Recurrence.MONTHLY
        assert event.end_recurrence == FOREVER


class TestGetReminderDates:
    def test_days_before_start(self):
        event = Event(
            "Talk", datetime(2024, 3, 10, 9, 0), remind=True, reminders={"day": [1, 7]}
        )
        assert event.get_reminder_dates() == [date(2024, 3, 3), date(2024, 3, 9)]

    def test_empty_when_not_reminding(self):
        event = Event(
            "Talk", datetime(2024, 3, 10, 9, 0), remind=False, reminders={"day": [1, 7]}
        )
        assert event.get_reminder_dates() == []

    def test_merges_units_in_date_order(self):
        event = Event(
            "Talk",
            datetime(2024, 3, 10, 9, 0),
            remind=True,
            reminders={"day": [2], "week": [1, 2]},
        )
        assert event.get_reminder_dates() == [
            date(2024, 2, 25),
            date(2024, 3, 3),
            date(2024, 3, 8),
        ]

    def test_remind_without_offsets(self):
        event = Event("Talk", datetime(2024, 3, 10, 9, 0), remind=True)
        assert event.get_reminder_dates() == []


class TestRecurringEvent:
    def test_is_recurring(self, standup):
        assert standup.is_recurring is True

    def test_end_before_start_rejected(self):
        with pytest.raises(InvalidRecurrenceConfiguration):
            RecurringEvent(
                "Gym",
                datetime(2024, 1, 10, 7, 0),
                recurrence=Recurrence.DAILY,
                end_recurrence=date(2024, 1, 9),
            )

    def test_end_on_start_date_allowed(self):
        event = RecurringEvent(
            "Gym",
            datetime(2024, 1, 10, 7, 0),
            recurrence=Recurrence.DAILY,
            end_recurrence=date(2024, 1, 10),
        )
        assert len(event.get_recurrences(date(2024, 1, 1), date(2024, 12, 31))) == 1

    def test_weekly_standup(self, standup):
        occurrences = standup.get_recurrences(date(2024, 1, 1), date(2024, 1, 22))
        assert [o.start.date() for o in occurrences] == [
            date(2024, 1, 1),
            date(2024, 1, 8),
            date(2024, 1, 15),
            date(2024, 1, 22),
        ]

    def test_monthly_review_lands_on_leap_day(self):
        review = RecurringEvent(
            "Review", datetime(2024, 1, 31, 10, 0), recurrence=Recurrence.MONTHLY
        )
        occurrences = review.get_recurrences(date(2024, 2, 1), date(2024, 2, 29))
        assert [o.start for o in occurrences] == [datetime(2024, 2, 29, 10, 0)]

    def test_monthly_keeps_day_of_month(self):
        review = RecurringEvent(
            "Review", datetime(2024, 1, 31, 10, 0), recurrence=Recurrence.MONTHLY
        )
        occurrences = review.get_recurrences(date(2024, 1, 1), date(2024, 4, 30))
        assert [o.start.date() for o in occurrences] == [
            date(2024, 1, 31),
            date(2024, 2, 29),
            date(2024, 3, 31),
            date(2024, 4, 30),
        ]

    def test_includes_base_occurrence(self, standup):
        occurrences = standup.get_recurrences(date(2024, 1, 1), date(2024, 1, 1))
        assert len(occurrences) == 1
        assert occurrences[0].start == standup.start

    def test_range_before_start_is_empty(self, standup):
        assert standup.get_recurrences(date(2023, 12, 1), date(2023, 12, 31)) == []

    def test_range_after_end_of_recurrence_is_empty(self):
        gym = RecurringEvent(
            "Gym",
            datetime(2024, 1, 1, 7, 0),
            recurrence=Recurrence.DAILY,
            end_recurrence=date(2024, 1, 31),
        )
        assert gym.get_recurrences(date(2024, 2, 1), date(2024, 2, 28)) == []

    def test_stops_at_end_of_recurrence(self):
        gym = RecurringEvent(
            "Gym",
            datetime(2024, 1, 1, 7, 0),
            recurrence=Recurrence.DAILY,
            end_recurrence=date(2024, 1, 3),
        )
        occurrences = gym.get_recurrences(date(2024, 1, 1), date(2024, 1, 31))
        assert [o.start.day for o in occurrences] == [1, 2, 3]

    def test_daily_window_ending_on_last_date(self):
        event = RecurringEvent(
            "Last days",
            datetime(9999, 12, 30, 10, 0),
            recurrence=Recurrence.DAILY,
            end_recurrence=date(9999, 12, 31),
        )
        occurrences = event.get_recurrences(date(9999, 12, 1), date.max)
        assert [o.start.date() for o in occurrences] == [date(9999, 12, 30), date(9999, 12, 31)]

    @pytest.mark.parametrize(
        "recurrence, start, expected",
        [
            (Recurrence.DAILY, datetime(9999, 12, 29, 8, 0), 3),
            (Recurrence.WEEKLY, datetime(9999, 12, 20, 8, 0), 2),
            (Recurrence.MONTHLY, datetime(9999, 11, 30, 8, 0), 2),
            (Recurrence.YEARLY, datetime(9998, 6, 1, 8, 0), 2),
        ],
    )
    def test_open_ended_series_stops_at_last_date(self, recurrence, start, expected):
        event = RecurringEvent("Tail", start, recurrence=recurrence)
        assert len(event.get_recurrences(start.date(), date.max)) == expected

    def test_open_ended_series_far_in_the_future(self):
        event = RecurringEvent("Far", datetime(3001, 1, 1, 9, 0), recurrence=Recurrence.YEARLY)
        assert event.end_recurrence == date.max
        occurrences = event.get_recurrences(date(3001, 1, 1), date(3003, 12, 31))
        assert [o.start.year for o in occurrences] == [3001, 3002, 3003]

    @pytest.mark.parametrize(
        "start_range, end_range",
        [
            (date(2024, 1, 1), date(2024, 3, 31)),
            (date(2024, 1, 3), date(2024, 1, 28)),
            (date(2024, 2, 5), date(2024, 2, 5)),
            (date(2023, 11, 1), date(2024, 1, 9)),
        ],
    )
    def test_matches_every_kth_step_in_window(self, standup, start_range, end_range):
        expected = []
        d = standup.start.date()
        while d <= end_range:
            if d >= start_range:
                expected.append(d)
            d += timedelta(weeks=1)

        occurrences = standup.get_recurrences(start_range, end_range)
        assert [o.start.date() for o in occurrences] == expected

    def test_occurrence_copies_event(self):
        talk = RecurringEvent(
            "Talk",
            datetime(2024, 1, 1, 14, 30),
            end=datetime(2024, 1, 1, 15, 45),
            remind=True,
            reminders={"day": [1]},
            recurrence=Recurrence.WEEKLY,
        )
        occurrence = talk.occurrence_on(date(2024, 1, 15))

        assert occurrence.title == "Talk"
        assert occurrence.start == datetime(2024, 1, 15, 14, 30)
        assert occurrence.end == datetime(2024, 1, 15, 15, 45)
        assert occurrence.start.time() == time(14, 30)
        assert occurrence.remind is True
        assert occurrence.reminders == {"day": [1]}
        assert occurrence.is_recurring is False
        assert occurrence.series is talk
        assert occurrence.get_reminder_dates() == [date(2024, 1, 14)]

    def test_occurrence_reminders_are_a_copy(self, standup):
        standup.reminders = {"day": [1]}
        occurrence = standup.occurrence_on(date(2024, 1, 8))
        occurrence.reminders["day"].append(2)
        assert standup.reminders == {"day": [1]}

    def test_occurs_on(self, standup):
        assert standup.occurs_on(date(2024, 1, 29)) is True
        assert standup.occurs_on(date(2024, 1, 30)) is False


class TestSerialization:
    def test_recurring_without_end_stores_null(self, standup):
        data = standup.to_dict()
        assert data["recurrence"] == "weekly"
        assert data["end_recurrence"] is None

    def test_from_dict_builds_recurring_event(self):
        event = Event.from_dict(
            {
                "title": "Gym",
                "start": "2024-01-01T07:00:00",
                "end": None,
                "remind": True,
                "reminders": {"week": [1]},
                "recurrence": "daily",
                "end_recurrence": "2024-06-30",
            }
        )
        assert isinstance(event, RecurringEvent)
        assert event.recurrence is Recurrence.DAILY
        assert event.end_recurrence == date(2024, 6, 30)
        assert event.reminders == {"week": [1]}

    def test_from_dict_builds_one_off_event(self):
        event = Event.from_dict({"title": "Dentist", "start": "2024-03-10T14:00:00"})
        assert type(event) is Event
        assert event.start == datetime(2024, 3, 10, 14, 0)
        assert event.end is None
