"""Errors raised by the notebook and timetable core."""


class NotusError(Exception):
    """Base class for caller-recoverable notus errors."""

    message = "Something went wrong."

    def __init__(self, message: str | None = None):
        super().__init__(message or self.message)


class IndexOutOfRange(NotusError, IndexError):
    """Raised when an index does not point at an existing item."""

    message = "The index you specified is out of range."


class InvalidRecurrenceConfiguration(NotusError, ValueError):
    """Raised when a recurring event would stop recurring before it starts."""

    message = "The recurrence must not end before the event starts."


class InvalidReminderConfiguration(NotusError, ValueError):
    """Raised when reminder offsets and units cannot be paired up."""

    message = "Reminder offsets must be given as a number of days or weeks."


class DuplicateNote(NotusError):
    """Raised when a note with the same title already exists."""

    message = "This note already exists in the notebook!"


class MissingNote(NotusError):
    """Raised when a note cannot be found."""

    message = "This note does not exist in the notebook!"
