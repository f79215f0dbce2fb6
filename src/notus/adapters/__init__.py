"""Adapters - I/O implementations of ports."""

from .json_store import JsonNotebookStore, StoreError

__all__ = [
    "JsonNotebookStore",
    "StoreError",
]
