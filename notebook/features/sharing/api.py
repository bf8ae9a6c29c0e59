"""Sharing API endpoints: collaborators on notes and folders"""

import logging
from typing import List

from fastapi import APIRouter, Depends

from notebook.api.deps import get_sharing_service
from notebook.features.sharing.schemas import (
    ShareRequest,
    ShareResult,
    UnshareResponse,
    UpdatePermissionRequest,
)
from notebook.features.sharing.service import SharingService
from notebook.middleware.auth import get_current_user_id
from notebook.models.collaborator import FolderCollaborator, NoteCollaborator

logger = logging.getLogger(__name__)


router = APIRouter(prefix="/api", tags=["sharing"])


@router.get("/notes/{note_id}/collaborators", response_model=List[NoteCollaborator])
async def list_note_collaborators(
    note_id: str,
    user_id: str = Depends(get_current_user_id),
    service: SharingService = Depends(get_sharing_service),
):
    """List grants on a note (owner and collaborators only)"""
    return await service.list_note_collaborators(note_id, user_id)


@router.post("/notes/{note_id}/collaborators", response_model=ShareResult, status_code=201)
async def share_note(
    note_id: str,
    request: ShareRequest,
    user_id: str = Depends(get_current_user_id),
    service: SharingService = Depends(get_sharing_service),
):
    """
    Share a note with another user, by user id or email.

    Raises:
        400: sharing with yourself
        403: caller does not own the note
        404: note or target user not found
        409: already shared (informational)
    """
    if request.user_id:
        return await service.share_note(note_id, user_id, request.user_id, request.permission)
    return await service.share_note_by_email(note_id, user_id, request.email, request.permission)


@router.patch("/notes/{note_id}/collaborators/{target_user_id}", response_model=NoteCollaborator)
async def update_note_permission(
    note_id: str,
    target_user_id: str,
    request: UpdatePermissionRequest,
    user_id: str = Depends(get_current_user_id),
    service: SharingService = Depends(get_sharing_service),
):
    """Change a collaborator's permission on a note"""
    return await service.update_note_permission(note_id, user_id, target_user_id, request.permission)


@router.delete("/notes/{note_id}/collaborators/{target_user_id}", response_model=UnshareResponse)
async def unshare_note(
    note_id: str,
    target_user_id: str,
    user_id: str = Depends(get_current_user_id),
    service: SharingService = Depends(get_sharing_service),
):
    """Remove a collaborator from a note, or leave a note shared with you"""
    removed = await service.unshare_note(note_id, user_id, target_user_id)
    message = "Collaborator removed" if removed else "Note was not shared with this user"
    return UnshareResponse(removed=removed, message=message)


@router.get("/folders/{folder_id}/collaborators", response_model=List[FolderCollaborator])
async def list_folder_collaborators(
    folder_id: str,
    user_id: str = Depends(get_current_user_id),
    service: SharingService = Depends(get_sharing_service),
):
    """List grants on a folder (owner and collaborators only)"""
    return await service.list_folder_collaborators(folder_id, user_id)


@router.post("/folders/{folder_id}/collaborators", response_model=ShareResult, status_code=201)
async def share_folder(
    folder_id: str,
    request: ShareRequest,
    user_id: str = Depends(get_current_user_id),
    service: SharingService = Depends(get_sharing_service),
):
    """
    Share a folder and all of its notes with another user.

    A 201 with failed_step set means the folder grant was written but some
    per-note grants were not. Repeating the request writes the missing ones
    and answers 409 (informational) with their materialized_count.
    """
    if request.user_id:
        result = await service.share_folder(folder_id, user_id, request.user_id, request.permission)
    else:
        result = await service.share_folder_by_email(folder_id, user_id, request.email, request.permission)

    if result.partial:
        logger.warning(f"Partial folder share {folder_id}: {result.warnings}")
    return result


@router.patch("/folders/{folder_id}/collaborators/{target_user_id}", response_model=FolderCollaborator)
async def update_folder_permission(
    folder_id: str,
    target_user_id: str,
    request: UpdatePermissionRequest,
    user_id: str = Depends(get_current_user_id),
    service: SharingService = Depends(get_sharing_service),
):
    """Change a collaborator's permission on a folder"""
    return await service.update_folder_permission(folder_id, user_id, target_user_id, request.permission)


@router.delete("/folders/{folder_id}/collaborators/{target_user_id}", response_model=UnshareResponse)
async def unshare_folder(
    folder_id: str,
    target_user_id: str,
    user_id: str = Depends(get_current_user_id),
    service: SharingService = Depends(get_sharing_service),
):
    """Remove a collaborator from a folder, or leave a folder shared with you"""
    removed = await service.unshare_folder(folder_id, user_id, target_user_id)
    message = "Collaborator removed" if removed else "Folder was not shared with this user"
    return UnshareResponse(removed=removed, message=message)
