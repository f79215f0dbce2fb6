"""Ports - interfaces/protocols for external dependencies."""

from .notebook_store import NotebookStore

__all__ = [
    "NotebookStore",
]
