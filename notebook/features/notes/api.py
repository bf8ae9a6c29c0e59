"""Note and folder CRUD endpoints"""

from fastapi import APIRouter, Depends

from notebook.api.deps import get_note_service
from notebook.features.notes.schemas import (
    CreateFolderRequest,
    CreateNoteRequest,
    DeleteResponse,
    MoveNoteRequest,
    NoteWriteResult,
    UpdateFolderRequest,
    UpdateNoteRequest,
)
from notebook.features.notes.service import NoteService
from notebook.middleware.auth import get_current_user_id
from notebook.models.folder import Folder, FolderUpdate
from notebook.models.note import Note, NoteUpdate

router = APIRouter(prefix="/api", tags=["notes"])


@router.post("/notes", response_model=NoteWriteResult, status_code=201)
async def create_note(
    request: CreateNoteRequest,
    user_id: str = Depends(get_current_user_id),
    service: NoteService = Depends(get_note_service),
):
    """Create a note. Inside a shared folder, the folder's collaborators get access immediately."""
    return await service.create_note(
        user_id,
        folder_id=request.folder_id,
        title=request.title,
        content=request.content,
        color=request.color,
    )


@router.patch("/notes/{note_id}", response_model=Note)
async def update_note(
    note_id: str,
    request: UpdateNoteRequest,
    user_id: str = Depends(get_current_user_id),
    service: NoteService = Depends(get_note_service),
):
    """Update title, content or color (owner or edit collaborator)"""
    patch = NoteUpdate(**request.model_dump(exclude_unset=True))
    return await service.update_note(note_id, user_id, patch)


@router.post("/notes/{note_id}/move", response_model=NoteWriteResult)
async def move_note(
    note_id: str,
    request: MoveNoteRequest,
    user_id: str = Depends(get_current_user_id),
    service: NoteService = Depends(get_note_service),
):
    """File a note into a folder, or take it out of its folder"""
    return await service.move_note(note_id, user_id, request.folder_id)


@router.delete("/notes/{note_id}", response_model=DeleteResponse)
async def delete_note(
    note_id: str,
    user_id: str = Depends(get_current_user_id),
    service: NoteService = Depends(get_note_service),
):
    deleted = await service.delete_note(note_id, user_id)
    return DeleteResponse(deleted=deleted, message="Note deleted" if deleted else "Note already deleted")


@router.post("/folders", response_model=Folder, status_code=201)
async def create_folder(
    request: CreateFolderRequest,
    user_id: str = Depends(get_current_user_id),
    service: NoteService = Depends(get_note_service),
):
    return await service.create_folder(user_id, request.name, request.icon, request.color)


@router.patch("/folders/{folder_id}", response_model=Folder)
async def update_folder(
    folder_id: str,
    request: UpdateFolderRequest,
    user_id: str = Depends(get_current_user_id),
    service: NoteService = Depends(get_note_service),
):
    patch = FolderUpdate(**request.model_dump(exclude_unset=True))
    return await service.update_folder(folder_id, user_id, patch)


@router.delete("/folders/{folder_id}", response_model=DeleteResponse)
async def delete_folder(
    folder_id: str,
    user_id: str = Depends(get_current_user_id),
    service: NoteService = Depends(get_note_service),
):
    """Delete a folder. Its notes are moved out of it, never deleted."""
    deleted = await service.delete_folder(folder_id, user_id)
    return DeleteResponse(deleted=deleted, message="Folder deleted" if deleted else "Folder already deleted")
