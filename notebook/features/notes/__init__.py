"""Note and folder CRUD feature module"""

from notebook.features.notes.schemas import NoteWriteResult, DeleteResponse
from notebook.features.notes.service import NoteService

__all__ = [
    "NoteService",
    "NoteWriteResult",
    "DeleteResponse",
]
