"""Read side of the notebook: loads a user's sources and composes the merged view"""

import logging
from typing import List, Optional

from supabase import Client  # type: ignore

from notebook.features.notebook_view import compositor
from notebook.features.notebook_view.domain import (
    FolderListItem,
    FolderOrder,
    NoteListItem,
    NoteSources,
)
from notebook.infra.supabase.repositories import RepositoryFactory

logger = logging.getLogger(__name__)


class NotebookViewService:
    """
    Service layer for the merged view of notes and folders.

    Every call reads the store; nothing is cached between calls. A missing
    user id yields an empty view without touching the store.
    """

    def __init__(self, client: Client):
        self.repos = RepositoryFactory(client)

    async def load_sources(self, user_id: str) -> NoteSources:
        """Fetch the owned, directly shared and folder-shared sets for a user"""
        owned_notes = await self.repos.notes.find_owned(user_id)
        owned_folders = await self.repos.folders.find_owned(user_id)
        folder_grants = await self.repos.folder_collaborators.find_for_user(user_id)
        note_grants = await self.repos.note_collaborators.find_for_user(user_id)

        collaborated_ids = {grant.folder_id for grant in folder_grants}
        candidate_ids = {folder.id for folder in owned_folders}
        candidate_ids.update(note.folder_id for note in owned_notes if note.folder_id)
        shared_ids = await self.repos.folder_collaborators.find_shared_folder_ids(candidate_ids)
        shared_ids |= collaborated_ids

        direct_notes = await self.repos.notes.find_by_ids(grant.note_id for grant in note_grants)
        folder_notes = await self.repos.notes.find_in_folders(collaborated_ids)

        return NoteSources(
            user_id=user_id,
            owned_notes=owned_notes,
            shared_folder_ids=shared_ids,
            folder_grants=folder_grants,
            note_grants=note_grants,
            direct_notes=direct_notes,
            folder_notes=folder_notes,
        )

    async def list_notes(self, user_id: Optional[str], folder_filter: Optional[str] = None) -> List[NoteListItem]:
        """
        Notes visible to a user under a folder filter.

        Args:
            folder_filter: "owned-unfiled", "shared", "all"/None, or a folder id
        """
        if not user_id:
            return []
        sources = await self.load_sources(user_id)
        return compositor.compose_notes(sources, folder_filter)

    async def search_notes(self, user_id: Optional[str], query: str) -> List[NoteListItem]:
        """Full-text search over every note visible to the user"""
        if not user_id:
            return []
        sources = await self.load_sources(user_id)
        return compositor.search_notes(sources, query)

    async def list_folders(
        self,
        user_id: Optional[str],
        order: FolderOrder = FolderOrder.CREATED_AT,
    ) -> List[FolderListItem]:
        """Owned folders plus folders shared with the user"""
        if not user_id:
            return []

        owned = await self.repos.folders.find_owned(user_id)
        folder_grants = await self.repos.folder_collaborators.find_for_user(user_id)
        collaborated = await self.repos.folders.find_by_ids(grant.folder_id for grant in folder_grants)
        shared_ids = await self.repos.folder_collaborators.find_shared_folder_ids(
            folder.id for folder in owned
        )

        return compositor.compose_folders(
            user_id, owned, collaborated, folder_grants, shared_ids, order
        )
