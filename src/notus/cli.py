"""Notus CLI - notebook and timetable."""

import json
import sys
from datetime import date, datetime
from typing import Callable

import click
from dateutil.relativedelta import relativedelta

from .adapters.json_store import JsonNotebookStore
from .config import Config, load_config
from .core.digest import format_reminder, format_timetable
from .core.errors import NotusError
from .core.events import Event, RecurringEvent, FOREVER
from .core.notebook import Note, Notebook, TagColor
from .core.recurrence import Recurrence
from .core.timetable import Timetable

DATETIME_FORMAT = "%Y-%m-%d %H:%M"

# click has no "purple"
_TAG_STYLES = {TagColor.PURPLE: "magenta"}


def _fail(e: Exception) -> None:
    click.echo(f"Error: {e}", err=True)
    sys.exit(1)


def _parse_datetime(ctx, param, value: str | None) -> datetime | None:
    if value is None:
        return None
    try:
        return datetime.strptime(value, DATETIME_FORMAT)
    except ValueError:
        raise click.BadParameter("use the YYYY-MM-DD HH:MM format (24-hour clock)")


def _parse_date(ctx, param, value: str | None) -> date | None:
    if value is None:
        return None
    try:
        return date.fromisoformat(value)
    except ValueError:
        raise click.BadParameter("use the YYYY-MM-DD format")


def _parse_reminders(specs: tuple[str, ...]) -> tuple[list[int], list[str]]:
    """Split reminder specs such as "1-day" or "2-week" into periods and units."""
    periods, units = [], []
    for spec in specs:
        count, _, unit = spec.partition("-")
        try:
            period = int(count)
        except ValueError:
            raise click.BadParameter(f"{spec!r} is not NUMBER-UNIT, e.g. 1-day", param_hint="--remind")
        if period <= 0:
            raise click.BadParameter(f"{spec!r} must remind at least 1 unit ahead", param_hint="--remind")
        periods.append(period)
        units.append(unit.strip().lower())
    return periods, units


def _store(config: Config) -> JsonNotebookStore:
    return JsonNotebookStore(config.data_file)


def _load_timetable(config: Config) -> Timetable:
    timetable = _store(config).load_timetable()
    timetable.reminder_horizon = relativedelta(months=config.reminder_horizon_months)
    return timetable


def _event_json(event: Event) -> dict:
    recurrence = event.series.recurrence if event.series else getattr(event, "recurrence", None)
    return {
        "title": event.title,
        "start": event.start.isoformat(),
        "end": event.end.isoformat() if event.end else None,
        "remind": event.remind,
        "recurrence": recurrence.value if recurrence else None,
    }


def _describe_event(event: Event) -> str:
    line = f"{event.title} ({event.start.strftime(DATETIME_FORMAT)})"
    if isinstance(event, RecurringEvent):
        line += f" repeats {event.recurrence.value}"
        if event.end_recurrence != FOREVER:
            line += f" until {event.end_recurrence}"
    if event.remind:
        offsets = ", ".join(
            f"{n} {unit}{'s' if n > 1 else ''}"
            for unit, ns in event.reminders.items()
            for n in ns
        )
        line += f" [remind: {offsets}]" if offsets else " [remind]"
    return line


@click.group()
@click.version_option()
@click.pass_context
def main(ctx):
    """Notus - notebook and timetable."""
    if ctx.obj is None:
        ctx.obj = load_config()


# ============== Events ==============


@main.group()
def event():
    """Manage events."""
    pass


@event.command("add")
@click.argument("title")
@click.option("--at", "start", required=True, callback=_parse_datetime, help="Start (YYYY-MM-DD HH:MM)")
@click.option("--end", callback=_parse_datetime, help="End (YYYY-MM-DD HH:MM)")
@click.option(
    "--repeat",
    type=click.Choice([r.value for r in Recurrence], case_sensitive=False),
    help="Make the event recurring",
)
@click.option("--until", callback=_parse_date, help="Last date of recurrence (YYYY-MM-DD)")
@click.option("--remind", "remind_specs", multiple=True, help="Remind ahead, e.g. 1-day or 2-week")
@click.pass_obj
def event_add(config: Config, title, start, end, repeat, until, remind_specs):
    """Add an event."""
    if until and not repeat:
        raise click.UsageError("--until only applies to repeating events (use --repeat)")
    periods, units = _parse_reminders(remind_specs)

    try:
        if repeat:
            new_event = RecurringEvent.from_offsets(
                title,
                start,
                periods,
                units,
                end=end,
                remind=bool(remind_specs),
                recurrence=Recurrence(repeat.lower()),
                end_recurrence=until or FOREVER,
            )
        else:
            new_event = Event.from_offsets(
                title, start, periods, units, end=end, remind=bool(remind_specs)
            )
        timetable = _load_timetable(config)
    except NotusError as e:
        _fail(e)

    timetable.add_event(new_event)
    _store(config).save_timetable(timetable)
    click.echo(f"Added: {_describe_event(new_event)}")


@event.command("list")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.pass_obj
def event_list(config: Config, as_json: bool):
    """List all events."""
    try:
        timetable = _load_timetable(config)
    except NotusError as e:
        _fail(e)

    if as_json:
        click.echo(json.dumps([_event_json(e) for e in timetable], indent=2))
        return

    if not len(timetable):
        click.echo("No events.")
        return

    for i, e in enumerate(timetable, 1):
        click.echo(f"{i:3}. {_describe_event(e)}")


@event.command("delete")
@click.argument("index", type=int)
@click.pass_obj
def event_delete(config: Config, index: int):
    """Delete the event at INDEX (as shown by 'event list')."""
    try:
        timetable = _load_timetable(config)
        deleted = timetable.delete_event(index - 1)
    except NotusError as e:
        _fail(e)

    _store(config).save_timetable(timetable)
    click.echo(f"Deleted: {_describe_event(deleted)}")


@event.command("remind")
@click.argument("index", type=int)
@click.option("--off", is_flag=True, help="Stop reminding")
@click.pass_obj
def event_remind(config: Config, index: int, off: bool):
    """Turn reminders on or off for the event at INDEX."""
    try:
        timetable = _load_timetable(config)
        updated = timetable.set_reminder(index - 1, not off)
    except NotusError as e:
        _fail(e)

    _store(config).save_timetable(timetable)
    state = "off" if off else "on"
    click.echo(f"Reminders {state}: {_describe_event(updated)}")


# ============== Timetable & reminders ==============


@main.command()
@click.option("--month", "month_str", default=None, help="Month to show (YYYY-MM)")
@click.option("--year", type=int, default=None, help="Year to show")
@click.option("--from", "start_date", callback=_parse_date, help="First date (YYYY-MM-DD)")
@click.option("--to", "end_date", callback=_parse_date, help="Last date (YYYY-MM-DD)")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.pass_obj
def timetable(config: Config, month_str, year, start_date, end_date, as_json: bool):
    """Show events by month and day (defaults to this month)."""
    try:
        tt = _load_timetable(config)
    except NotusError as e:
        _fail(e)

    if start_date or end_date:
        if not (start_date and end_date):
            raise click.UsageError("--from and --to must be given together")
        if start_date > end_date:
            raise click.UsageError("--from must not be after --to")
        calendar = tt.get_timetable(start_date, end_date)
    elif month_str:
        try:
            target = datetime.strptime(month_str, "%Y-%m")
        except ValueError:
            raise click.BadParameter("use the YYYY-MM format", param_hint="--month")
        calendar = tt.get_month_timetable(target.year, target.month)
    elif year:
        calendar = tt.get_year_timetable(year)
    else:
        today = date.today()
        calendar = tt.get_month_timetable(today.year, today.month)

    if as_json:
        click.echo(
            json.dumps(
                {
                    f"{y:04d}-{m:02d}": {
                        str(day): [_event_json(e) for e in events]
                        for day, events in days.items()
                    }
                    for (y, m), days in calendar.items()
                },
                indent=2,
            )
        )
    else:
        click.echo(format_timetable(calendar))


@main.command()
@click.option("--date", "on_date", callback=_parse_date, help="Date to check (YYYY-MM-DD), defaults to today")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.pass_obj
def reminders(config: Config, on_date: date | None, as_json: bool):
    """Show reminders due today."""
    try:
        due = _load_timetable(config).get_reminders(on_date)
    except NotusError as e:
        _fail(e)

    if as_json:
        click.echo(
            json.dumps(
                [
                    {"date_to_remind": r.date_to_remind.isoformat(), "event": _event_json(r.event)}
                    for r in due
                ],
                indent=2,
            )
        )
        return

    if not due:
        click.echo("No reminders today.")
        return

    click.echo("\n\n".join(format_reminder(r) for r in due))


@main.command()
@click.option("--debug", is_flag=True, help="Enable debug logging")
@click.option("--now", is_flag=True, help="Print today's digest once and exit")
@click.pass_obj
def digest(config: Config, debug: bool, now: bool):
    """Run the daily reminder digest."""
    import logging

    if debug:
        logging.basicConfig(
            format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            level=logging.DEBUG,
        )

    from .scheduler import run_digest, send_reminder_digest

    if now:
        try:
            send_reminder_digest(_store(config), config, click.echo)
        except NotusError as e:
            _fail(e)
        return

    click.echo(f"Sending reminder digest daily at {config.digest_time}")
    click.echo("Press Ctrl+C to stop")
    try:
        run_digest(config, click.echo)
    except KeyboardInterrupt:
        click.echo("\nDigest stopped.")


# ============== Notes ==============


@main.group()
def note():
    """Manage notes."""
    pass


@note.command("add")
@click.argument("title")
@click.option("--content", "-c", default="", help="Note body")
@click.option("--tag", "-t", "tags", multiple=True, help="Tag the note")
@click.option("--pin", is_flag=True, help="Pin the note to the top")
@click.pass_obj
def note_add(config: Config, title: str, content: str, tags: tuple[str, ...], pin: bool):
    """Add a note."""
    store = _store(config)
    try:
        notebook = store.load_notebook()
        notebook.add_note(Note(title, content, list(tags), pinned=pin))
    except NotusError as e:
        _fail(e)

    store.save_notebook(notebook)
    click.echo(f"Added note: {title}")


def _show_notes(notes: list[Note], empty_msg: str) -> None:
    if not notes:
        click.echo(empty_msg)
        return

    for i, n in enumerate(notes, 1):
        pin = "* " if n.pinned else ""
        tags = f" [{', '.join(n.tags)}]" if n.tags else ""
        click.echo(f"{i:3}. {pin}{n.title}{tags}")


@note.command("list")
@click.option("--archived", is_flag=True, help="List archived notes")
@click.option("--tag", "-t", default=None, help="Only notes with this tag")
@click.option("--find", "-f", "keyword", default=None, help="Only notes mentioning this keyword")
@click.pass_obj
def note_list(config: Config, archived: bool, tag: str | None, keyword: str | None):
    """List notes."""
    try:
        notebook = _store(config).load_notebook()
    except NotusError as e:
        _fail(e)

    if archived:
        _show_notes(notebook.archived_notes(), "No archived notes.")
    elif tag:
        _show_notes(notebook.notes_tagged(tag), f"No notes tagged {tag}.")
    elif keyword:
        _show_notes(notebook.find(keyword), f"No notes mention {keyword}.")
    else:
        _show_notes(notebook.active_notes(), "Notebook is empty.")


def _change_note(
    config: Config, change: Callable[[Notebook, int], Note], done: str, index: int
) -> None:
    store = _store(config)
    try:
        notebook = store.load_notebook()
        changed = change(notebook, index - 1)
    except NotusError as e:
        _fail(e)

    store.save_notebook(notebook)
    click.echo(f"{done}: {changed.title}")


@note.command("delete")
@click.argument("index", type=int)
@click.pass_obj
def note_delete(config: Config, index: int):
    """Delete the note at INDEX (as shown by 'note list')."""
    _change_note(config, Notebook.delete_note, "Deleted", index)


@note.command("archive")
@click.argument("index", type=int)
@click.pass_obj
def note_archive(config: Config, index: int):
    """Archive the note at INDEX (as shown by 'note list')."""
    _change_note(config, Notebook.archive_note, "Archived", index)


@note.command("unarchive")
@click.argument("index", type=int)
@click.pass_obj
def note_unarchive(config: Config, index: int):
    """Unarchive the note at INDEX (as shown by 'note list --archived')."""
    _change_note(config, Notebook.unarchive_note, "Unarchived", index)


@note.command("tag")
@click.argument("index", type=int)
@click.argument("name")
@click.option("--remove", is_flag=True, help="Remove the tag instead")
@click.pass_obj
def note_tag(config: Config, index: int, name: str, remove: bool):
    """Tag (or untag) the note at INDEX."""
    if remove:
        _change_note(
            config, lambda nb, i: nb.untag_note(i, name), f"Removed tag {name}", index
        )
    else:
        _change_note(config, lambda nb, i: nb.tag_note(i, name), f"Tagged {name}", index)


# ============== Tags ==============


@main.group()
def tag():
    """Manage tags."""
    pass


@tag.command("create")
@click.argument("name")
@click.option(
    "--color",
    type=click.Choice([c.value for c in TagColor], case_sensitive=False),
    default=TagColor.WHITE.value,
    help="Tag colour",
)
@click.pass_obj
def tag_create(config: Config, name: str, color: str):
    """Create a tag."""
    store = _store(config)
    try:
        notebook = store.load_notebook()
    except NotusError as e:
        _fail(e)

    if notebook.create_tag(name, TagColor(color.lower())):
        store.save_notebook(notebook)
        click.echo(f"Created tag: {name}")
    else:
        click.echo(f"Tag already exists: {notebook.get_tag(name).name}")


@tag.command("list")
@click.pass_obj
def tag_list(config: Config):
    """List tags."""
    try:
        notebook = _store(config).load_notebook()
    except NotusError as e:
        _fail(e)

    if not notebook.tags:
        click.echo("No tags.")
        return

    for t in notebook.tags:
        click.echo(click.style(t.name, fg=_TAG_STYLES.get(t.color, t.color.value)))
