"""Pure event domain logic - one-off and recurring events, reminder dates."""

from dataclasses import dataclass, field
from datetime import date, datetime, timedelta

from .errors import InvalidRecurrenceConfiguration, InvalidReminderConfiguration
from .recurrence import Recurrence

REMINDER_DAY = "day"
REMINDER_WEEK = "week"

REMINDER_UNITS = {
    REMINDER_DAY: timedelta(days=1),
    REMINDER_WEEK: timedelta(weeks=1),
}

# A recurring event without an end date recurs until the last representable date.
FOREVER = date.max


@dataclass
class Event:
    """
    A calendar event.

    ``reminders`` maps a reminder unit ("day" or "week") to the offsets before
    ``start`` on which a reminder should fire. Offsets are kept sorted and
    de-duplicated per unit.
    """

    title: str
    start: datetime
    end: datetime | None = None
    remind: bool = False
    reminders: dict[str, list[int]] = field(default_factory=dict)
    # Set on occurrences materialised from a recurring event.
    series: "RecurringEvent | None" = field(default=None, repr=False, compare=False)

    def __post_init__(self):
        unknown = [unit for unit in self.reminders if unit not in REMINDER_UNITS]
        if unknown:
            raise InvalidReminderConfiguration(
                f"Unknown reminder unit(s): {', '.join(map(str, unknown))}. "
                f"Use {REMINDER_DAY} or {REMINDER_WEEK}."
            )
        self.reminders = {
            unit: sorted(set(offsets)) for unit, offsets in self.reminders.items() if offsets
        }

    def __lt__(self, other: "Event") -> bool:
        return self.start < other.start

    @property
    def is_recurring(self) -> bool:
        return False

    @classmethod
    def from_offsets(
        cls,
        title: str,
        start: datetime,
        periods: list[int],
        units: list[str],
        **kwargs,
    ):
        """
        Create an event from parallel lists of reminder periods and units.

        ``periods[i]`` is paired with ``units[i]``; mismatched lengths are
        rejected rather than silently truncated.
        """
        if len(periods) != len(units):
            raise InvalidReminderConfiguration(
                f"Got {len(periods)} reminder period(s) but {len(units)} unit(s)."
            )
        reminders: dict[str, list[int]] = {}
        for period, unit in zip(periods, units):
            reminders.setdefault(unit, []).append(period)
        return cls(title, start, reminders=reminders, **kwargs)

    def get_reminder_dates(self) -> list[date]:
        """Dates on which a reminder for this event fires, ascending."""
        if not self.remind:
            return []
        start_date = self.start.date()
        return sorted(
            start_date - REMINDER_UNITS[unit] * offset
            for unit, offsets in self.reminders.items()
            for offset in offsets
        )

    def occurs_on(self, d: date) -> bool:
        return self.start.date() == d

    def to_dict(self) -> dict:
        """Serialize to a JSON-compatible dict."""
        return {
            "title": self.title,
            "start": self.start.isoformat(),
            "end": self.end.isoformat() if self.end else None,
            "remind": self.remind,
            "reminders": {unit: list(offsets) for unit, offsets in self.reminders.items()},
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Event":
        """Create an Event (or RecurringEvent) from ``to_dict`` output."""
        kwargs = dict(
            title=data["title"],
            start=datetime.fromisoformat(data["start"]),
            end=datetime.fromisoformat(data["end"]) if data.get("end") else None,
            remind=data.get("remind", False),
            reminders=data.get("reminders", {}),
        )
        if data.get("recurrence"):
            end_recurrence = data.get("end_recurrence")
            return RecurringEvent(
                **kwargs,
                recurrence=Recurrence(data["recurrence"]),
                end_recurrence=date.fromisoformat(end_recurrence) if end_recurrence else FOREVER,
            )
        return Event(**kwargs)


@dataclass(kw_only=True)
class RecurringEvent(Event):
    """An event that repeats with a fixed cadence until ``end_recurrence``."""

    recurrence: Recurrence
    end_recurrence: date = FOREVER

    def __post_init__(self):
        super().__post_init__()
        if self.end_recurrence < self.start.date():
            raise InvalidRecurrenceConfiguration(
                f"Recurrence of '{self.title}' ends on {self.end_recurrence}, "
                f"before it starts on {self.start.date()}."
            )

    @property
    def is_recurring(self) -> bool:
        return True

    def occurrence_on(self, d: date) -> Event:
        """Materialise this event on date ``d``, keeping its time of day."""
        shift = d - self.start.date()
        return Event(
            title=self.title,
            start=self.start + shift,
            end=self.end + shift if self.end else None,
            remind=self.remind,
            reminders={unit: list(offsets) for unit, offsets in self.reminders.items()},
            series=self,
        )

    def get_recurrences(self, start_range: date, end_range: date) -> list[Event]:
        """
        All occurrences dated within [start_range, end_range], inclusive.

        Steps forward from the event's own start date (which is checked too) and
        stops once past the range or the end of recurrence.
        """
        base = self.start.date()
        limit = min(end_range, self.end_recurrence)
        occurrences = []
        n = 0
        current = base
        while current <= limit:
            if current >= start_range:
                occurrences.append(self.occurrence_on(current))
            n += 1
            try:
                current = self.recurrence.nth(base, n)
            except (OverflowError, ValueError):
                # Stepped past date.max.
                break
        return occurrences

    def occurs_on(self, d: date) -> bool:
        return bool(self.get_recurrences(d, d))

    def to_dict(self) -> dict:
        data = super().to_dict()
        data["recurrence"] = self.recurrence.value
        data["end_recurrence"] = (
            self.end_recurrence.isoformat() if self.end_recurrence != FOREVER else None
        )
        return data
