"""Functional core - pure business logic with no I/O."""

from .errors import (
    NotusError,
    IndexOutOfRange,
    InvalidRecurrenceConfiguration,
    InvalidReminderConfiguration,
    DuplicateNote,
    MissingNote,
)
from .recurrence import Recurrence
from .events import Event, RecurringEvent, FOREVER, REMINDER_DAY, REMINDER_WEEK
from .timetable import Timetable, Reminder, ReminderQueue
from .notebook import Notebook, Note, Tag, TagColor

__all__ = [
    # Errors
    "NotusError",
    "IndexOutOfRange",
    "InvalidRecurrenceConfiguration",
    "InvalidReminderConfiguration",
    "DuplicateNote",
    "MissingNote",
    # Events
    "Recurrence",
    "Event",
    "RecurringEvent",
    "FOREVER",
    "REMINDER_DAY",
    "REMINDER_WEEK",
    # Timetable
    "Timetable",
    "Reminder",
    "ReminderQueue",
    # Notebook
    "Notebook",
    "Note",
    "Tag",
    "TagColor",
]
