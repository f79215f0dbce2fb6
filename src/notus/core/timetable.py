"""Timetable - range queries over one-off and recurring events, and reminders."""

import heapq
import itertools
import logging
from calendar import monthrange
from dataclasses import dataclass, field
from datetime import date
from typing import Iterator

from dateutil.relativedelta import relativedelta

from .errors import IndexOutOfRange
from .events import Event, RecurringEvent
from .recurrence import Recurrence

logger = logging.getLogger(__name__)

# (year, month) -> day of month -> events on that day, sorted by start
MonthKey = tuple[int, int]
Calendar = dict[MonthKey, dict[int, list[Event]]]


@dataclass(order=True)
class Reminder:
    """A reminder for ``event`` due on ``date_to_remind``."""

    date_to_remind: date
    event: Event = field(compare=False)


class ReminderQueue:
    """Min-priority queue of reminders ordered by date, ties by insertion."""

    def __init__(self, reminders: list[Reminder] | None = None):
        self._heap: list[tuple[date, int, Reminder]] = []
        self._counter = itertools.count()
        for reminder in reminders or []:
            self.push(reminder)

    def push(self, reminder: Reminder) -> None:
        heapq.heappush(self._heap, (reminder.date_to_remind, next(self._counter), reminder))

    def pop(self) -> Reminder:
        if not self._heap:
            raise IndexError("pop from an empty reminder queue")
        return heapq.heappop(self._heap)[2]

    def peek(self) -> Reminder | None:
        return self._heap[0][2] if self._heap else None

    def __len__(self) -> int:
        return len(self._heap)

    def __bool__(self) -> bool:
        return bool(self._heap)


class Timetable:
    """
    All events of a notebook.

    Events live in one master list (which defines their index) and in exactly
    one bucket: one-off events, or the bucket of their recurrence.
    """

    def __init__(
        self,
        events: list[Event] | None = None,
        reminder_horizon: relativedelta = relativedelta(months=1),
    ):
        self._events: list[Event] = []
        self._single: list[Event] = []
        self._recurring: dict[Recurrence, list[RecurringEvent]] = {r: [] for r in Recurrence}
        self.reminder_horizon = reminder_horizon
        for event in events or []:
            self.add_event(event)

    @property
    def events(self) -> list[Event]:
        return list(self._events)

    def __len__(self) -> int:
        return len(self._events)

    def __iter__(self) -> Iterator[Event]:
        return iter(list(self._events))

    def _bucket_for(self, event: Event) -> list:
        if event.is_recurring:
            return self._recurring[event.recurrence]
        return self._single

    def _get(self, index: int) -> Event:
        if index < 0 or index >= len(self._events):
            raise IndexOutOfRange(
                f"Event index {index} is out of range (have {len(self._events)} events)."
            )
        return self._events[index]

    def add_event(self, event: Event) -> None:
        """Add an event to the master list and its bucket."""
        self._events.append(event)
        self._bucket_for(event).append(event)
        logger.debug(f"Added event '{event.title}' at index {len(self._events) - 1}")

    def delete_event(self, index: int) -> Event:
        """Remove and return the event at ``index``."""
        event = self._get(index)
        del self._events[index]
        bucket = self._bucket_for(event)
        # Remove by identity: two events may be equal field for field.
        for i, candidate in enumerate(bucket):
            if candidate is event:
                del bucket[i]
                break
        logger.debug(f"Deleted event '{event.title}' from index {index}")
        return event

    def set_reminder(self, index: int, remind: bool) -> Event:
        """Turn reminders for the event at ``index`` on or off."""
        event = self._get(index)
        event.remind = remind
        return event

    # ============== Range queries ==============

    def events_between(self, start_date: date, end_date: date) -> list[Event]:
        """
        Every occurrence dated within [start_date, end_date], sorted by start.

        Pure function of the current events - no I/O.
        """
        found = [e for e in self._single if start_date <= e.start.date() <= end_date]
        for bucket in self._recurring.values():
            for event in bucket:
                found.extend(event.get_recurrences(start_date, end_date))
        return sorted(found, key=lambda e: e.start)

    def get_timetable(self, start_date: date, end_date: date) -> Calendar:
        """Occurrences within [start_date, end_date] grouped by month, then day."""
        calendar: Calendar = {}
        for event in self.events_between(start_date, end_date):
            d = event.start.date()
            calendar.setdefault((d.year, d.month), {}).setdefault(d.day, []).append(event)
        return calendar

    def get_month_timetable(self, year: int, month: int) -> Calendar:
        start_date = date(year, month, 1)
        end_date = date(year, month, monthrange(year, month)[1])
        return self.get_timetable(start_date, end_date)

    def get_year_timetable(self, year: int) -> Calendar:
        calendar: Calendar = {}
        for month in range(1, 13):
            calendar.update(self.get_month_timetable(year, month))
        return calendar

    # ============== Reminders ==============

    def get_event_set_reminder(self, events: list[Event]) -> ReminderQueue:
        """Queue a reminder for every reminder date of every event."""
        queue = ReminderQueue()
        for event in events:
            for reminder_date in event.get_reminder_dates():
                queue.push(Reminder(reminder_date, event))
        return queue

    def get_reminders(self, today: date | None = None) -> list[Reminder]:
        """
        Reminders due today for events within the reminder horizon.

        The queue is rebuilt on every call, so there is no state to invalidate
        when events are added or deleted.
        """
        today = today or date.today()
        try:
            horizon_end = today + self.reminder_horizon
        except (OverflowError, ValueError):
            horizon_end = date.max
        queue = self.get_event_set_reminder(self.events_between(today, horizon_end))
        # Reminders dated before today are stale; skip past them.
        while queue and queue.peek().date_to_remind < today:
            queue.pop()
        due = []
        while queue and queue.peek().date_to_remind == today:
            due.append(queue.pop())
        logger.debug(f"{len(due)} reminder(s) due on {today}")
        return due
