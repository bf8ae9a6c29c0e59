"""Merged view endpoints: the notes and folders a user can see"""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query

from notebook.api.deps import get_view_service
from notebook.features.notebook_view.domain import FolderListItem, FolderOrder, NoteListItem
from notebook.features.notebook_view.service import NotebookViewService
from notebook.middleware.auth import get_current_user_id_optional

router = APIRouter(prefix="/api", tags=["notebook"])


@router.get("/notes", response_model=List[NoteListItem])
async def list_notes(
    folder: Optional[str] = Query(
        None, description='"owned-unfiled", "shared", "all" or a folder id'
    ),
    q: Optional[str] = Query(None, description="Full-text search; ignores folder"),
    user_id: Optional[str] = Depends(get_current_user_id_optional),
    service: NotebookViewService = Depends(get_view_service),
):
    """
    Notes visible to the caller, newest first.

    Without credentials the list is empty.
    """
    if q is not None and q.strip():
        return await service.search_notes(user_id, q)
    return await service.list_notes(user_id, folder)


@router.get("/folders", response_model=List[FolderListItem])
async def list_folders(
    order: FolderOrder = Query(FolderOrder.CREATED_AT),
    user_id: Optional[str] = Depends(get_current_user_id_optional),
    service: NotebookViewService = Depends(get_view_service),
):
    """Owned folders and folders shared with the caller"""
    return await service.list_folders(user_id, order)
