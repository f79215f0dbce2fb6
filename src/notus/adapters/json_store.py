"""JSON file storage adapter."""

import json
import logging
from pathlib import Path

from notus.core.errors import NotusError
from notus.core.events import Event
from notus.core.notebook import Note, Notebook, Tag, TagColor
from notus.core.timetable import Timetable

logger = logging.getLogger(__name__)


class StoreError(NotusError):
    """Raised when the data file cannot be read."""

    message = "Unable to read the notus data file."


class JsonNotebookStore:
    """
    JSON file storage.

    Implements NotebookStore protocol. Events, notes and tags share one
    document; saving one section leaves the others untouched.
    """

    def __init__(self, path: Path | str):
        self.path = Path(path).expanduser()

    def _read(self) -> dict:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text())
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise StoreError(f"Data file {self.path} is corrupt: {e}") from e
        if not isinstance(data, dict):
            raise StoreError(f"Data file {self.path} does not hold a JSON object.")
        return data

    def _write_section(self, **sections) -> None:
        data = self._read()
        data.update(sections)
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(data, indent=2))
        logger.debug(f"Saved {', '.join(sections)} to {self.path}")

    def load_timetable(self) -> Timetable:
        try:
            events = [Event.from_dict(item) for item in self._read().get("events", [])]
        except (AttributeError, KeyError, TypeError, ValueError) as e:
            raise StoreError(f"Invalid event in {self.path}: {e}") from e
        logger.debug(f"Loaded {len(events)} event(s) from {self.path}")
        return Timetable(events)

    def save_timetable(self, timetable: Timetable) -> None:
        self._write_section(events=[e.to_dict() for e in timetable])

    def load_notebook(self) -> Notebook:
        data = self._read()
        try:
            notes = [Note.from_dict(item) for item in data.get("notes", [])]
            tags = [
                Tag(item["name"], TagColor(item.get("color", TagColor.WHITE.value)))
                for item in data.get("tags", [])
            ]
        except (AttributeError, KeyError, TypeError, ValueError) as e:
            raise StoreError(f"Invalid note or tag in {self.path}: {e}") from e
        return Notebook(notes, tags)

    def save_notebook(self, notebook: Notebook) -> None:
        self._write_section(
            notes=[n.to_dict() for n in notebook.notes],
            tags=[{"name": t.name, "color": t.color.value} for t in notebook.tags],
        )
