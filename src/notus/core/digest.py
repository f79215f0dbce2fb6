"""Pure formatting of events, reminders and timetables - no I/O."""

from calendar import month_name
from datetime import date

from .events import Event
from .timetable import Calendar, Reminder


def format_event_line(event: Event) -> str:
    """
    Format a single event for display.

    Pure function - no I/O.
    """
    time_str = event.start.strftime("%H:%M")
    end_str = f" - {event.end.strftime('%H:%M')}" if event.end else ""
    repeat = f" ({event.series.recurrence.value})" if event.series else ""
    bell = " [remind]" if event.remind else ""
    return f"- {time_str}{end_str} {event.title}{repeat}{bell}"


def format_reminder(reminder: Reminder) -> str:
    """Event title on one line, date and time on the next."""
    event = reminder.event
    return (
        f"Event: {event.title}\n"
        f"Date: {event.start.date().isoformat()}\tTime: {event.start.strftime('%H:%M')}"
    )


def format_timetable(calendar: Calendar) -> str:
    """
    Render a month -> day -> events mapping as markdown sections.

    Pure function - no I/O.
    """
    if not calendar:
        return "No events."

    sections = []
    for (year, month), days in sorted(calendar.items()):
        lines = [f"## {month_name[month]} {year}"]
        for day, events in sorted(days.items()):
            lines.append(f"### {date(year, month, day).strftime('%A, %B %d')}")
            lines.extend(format_event_line(e) for e in events)
        sections.append("\n".join(lines))
    return "\n\n".join(sections)


def format_digest(reminders: list[Reminder], today: date) -> str:
    """Daily reminder digest for ``today``."""
    header = f"Reminders for {today.strftime('%A, %B %d')}"
    if not reminders:
        return f"{header}\n\nNothing to be reminded of today."
    body = "\n\n".join(format_reminder(r) for r in reminders)
    return f"{header}\n\n{body}"
