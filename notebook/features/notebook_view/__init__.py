"""Merged notebook view feature module"""

from notebook.features.notebook_view.domain import (
    ALL,
    OWNED_UNFILED,
    SHARED,
    FolderListItem,
    FolderOrder,
    NoteKind,
    NoteListItem,
    NoteSources,
)
from notebook.features.notebook_view.service import NotebookViewService

__all__ = [
    "NotebookViewService",
    "NoteSources",
    "NoteListItem",
    "FolderListItem",
    "FolderOrder",
    "NoteKind",
    "OWNED_UNFILED",
    "SHARED",
    "ALL",
]
