"""Notebook storage interface."""

from typing import Protocol

from notus.core.notebook import Notebook
from notus.core.timetable import Timetable


class NotebookStore(Protocol):
    """Interface for loading and saving events and notes."""

    def load_timetable(self) -> Timetable:
        """Load all events. Returns an empty timetable if nothing is stored."""
        ...

    def save_timetable(self, timetable: Timetable) -> None:
        """Persist all events, replacing what was stored."""
        ...

    def load_notebook(self) -> Notebook:
        """Load notes and tags. Returns an empty notebook if nothing is stored."""
        ...

    def save_notebook(self, notebook: Notebook) -> None:
        """Persist notes and tags, replacing what was stored."""
        ...
