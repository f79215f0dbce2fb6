"""Pure notebook domain logic - notes, tags, archiving."""

import logging
from dataclasses import dataclass, field
from enum import Enum

from .errors import DuplicateNote, IndexOutOfRange, MissingNote

logger = logging.getLogger(__name__)


class TagColor(Enum):
    """Colours a tag can be displayed in."""

    WHITE = "white"
    RED = "red"
    GREEN = "green"
    BLUE = "blue"
    YELLOW = "yellow"
    PURPLE = "purple"
    CYAN = "cyan"


@dataclass
class Tag:
    """A named, coloured label for notes."""

    name: str
    color: TagColor = TagColor.WHITE

    @property
    def key(self) -> str:
        return self.name.lower()


@dataclass
class Note:
    """A note in the notebook."""

    title: str
    content: str = ""
    tags: list[str] = field(default_factory=list)
    pinned: bool = False
    archived: bool = False

    def toggle_archived(self) -> None:
        self.archived = not self.archived

    def has_tag(self, name: str) -> bool:
        return name.lower() in (t.lower() for t in self.tags)

    def to_dict(self) -> dict:
        return {
            "title": self.title,
            "content": self.content,
            "tags": list(self.tags),
            "pinned": self.pinned,
            "archived": self.archived,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Note":
        return cls(
            title=data["title"],
            content=data.get("content", ""),
            tags=data.get("tags", []),
            pinned=data.get("pinned", False),
            archived=data.get("archived", False),
        )


def _pick(notes: list[Note], index: int, kind: str) -> Note:
    if index < 0 or index >= len(notes):
        raise IndexOutOfRange(f"{kind} note index {index} is out of range (have {len(notes)}).")
    return notes[index]


class Notebook:
    """Notes and the tags available to label them."""

    def __init__(self, notes: list[Note] | None = None, tags: list[Tag] | None = None):
        self.notes: list[Note] = list(notes or [])
        self._tags: dict[str, Tag] = {t.key: t for t in tags or []}

    @property
    def tags(self) -> list[Tag]:
        return list(self._tags.values())

    def _find_by_title(self, title: str) -> Note | None:
        for note in self.notes:
            if note.title.lower() == title.lower():
                return note
        return None

    def add_note(self, note: Note) -> None:
        if self._find_by_title(note.title):
            raise DuplicateNote(f"A note titled '{note.title}' already exists!")
        for name in note.tags:
            self.create_tag(name)
        self.notes.append(note)
        logger.debug(f"Added note '{note.title}'")

    def delete_note(self, index: int) -> Note:
        """Delete the note at ``index`` of ``active_notes()``."""
        note = _pick(self.active_notes(), index, "Active")
        self.notes = [n for n in self.notes if n is not note]
        return note

    def active_notes(self) -> list[Note]:
        """Unarchived notes, pinned first."""
        active = [n for n in self.notes if not n.archived]
        return sorted(active, key=lambda n: not n.pinned)

    def archived_notes(self) -> list[Note]:
        return [n for n in self.notes if n.archived]

    def archive_note(self, index: int) -> Note:
        """Archive the note at ``index`` of ``active_notes()``."""
        note = _pick(self.active_notes(), index, "Active")
        note.toggle_archived()
        return note

    def unarchive_note(self, index: int) -> Note:
        """Unarchive the note at ``index`` of ``archived_notes()``."""
        note = _pick(self.archived_notes(), index, "Archived")
        note.toggle_archived()
        return note

    def archive_by_title(self, title: str) -> Note:
        note = self._find_by_title(title)
        if note is None or note.archived:
            raise MissingNote(f"No active note titled '{title}'.")
        note.toggle_archived()
        return note

    def unarchive_by_title(self, title: str) -> Note:
        note = self._find_by_title(title)
        if note is None or not note.archived:
            raise MissingNote(f"No archived note titled '{title}'.")
        note.toggle_archived()
        return note

    def find(self, keyword: str) -> list[Note]:
        """Active notes whose title or content mentions ``keyword``."""
        keyword = keyword.lower()
        return [
            n
            for n in self.active_notes()
            if keyword in n.title.lower() or keyword in n.content.lower()
        ]

    def notes_tagged(self, name: str) -> list[Note]:
        return [n for n in self.active_notes() if n.has_tag(name)]

    # ============== Tags ==============

    def create_tag(self, name: str, color: TagColor = TagColor.WHITE) -> bool:
        """Create a tag. Returns False if a tag with that name already exists."""
        key = name.lower()
        if key in self._tags:
            return False
        self._tags[key] = Tag(name, color)
        return True

    def get_tag(self, name: str) -> Tag | None:
        return self._tags.get(name.lower())

    def tag_note(self, index: int, name: str) -> Note:
        """Tag the active note at ``index``, creating the tag if needed."""
        note = _pick(self.active_notes(), index, "Active")
        self.create_tag(name)
        if not note.has_tag(name):
            note.tags.append(self._tags[name.lower()].name)
        return note

    def untag_note(self, index: int, name: str) -> Note:
        note = _pick(self.active_notes(), index, "Active")
        note.tags = [t for t in note.tags if t.lower() != name.lower()]
        return note
