"""Request and response schemas for note and folder CRUD"""

from typing import List, Optional

from pydantic import BaseModel

from notebook.models.note import Note


class CreateNoteRequest(BaseModel):
    """Request model for creating a note"""
    title: str = ""
    content: str = ""
    color: Optional[str] = None
    folder_id: Optional[str] = None


class UpdateNoteRequest(BaseModel):
    """Request model for editing note fields"""
    title: Optional[str] = None
    content: Optional[str] = None
    color: Optional[str] = None


class MoveNoteRequest(BaseModel):
    """Request model for filing a note into a folder (null = no folder)"""
    folder_id: Optional[str] = None


class CreateFolderRequest(BaseModel):
    """Request model for creating a folder"""
    name: str
    icon: Optional[str] = None
    color: Optional[str] = None


class UpdateFolderRequest(BaseModel):
    """Request model for editing a folder"""
    name: Optional[str] = None
    icon: Optional[str] = None
    color: Optional[str] = None


class NoteWriteResult(BaseModel):
    """
    Outcome of creating or moving a note.

    The note is always written. failed_step is set when copying the folder's
    grants onto the note did not complete; moving the note into the same
    folder again finishes the copy.
    """
    note: Note
    materialized_count: int = 0
    warnings: List[str] = []
    failed_step: Optional[str] = None


class DeleteResponse(BaseModel):
    """Response model for deletions"""
    deleted: bool
    message: str
