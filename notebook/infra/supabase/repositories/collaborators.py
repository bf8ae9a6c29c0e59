"""Collaborator grant repositories (note-level and folder-level)"""
from typing import Iterable, List, Optional, Set

from supabase import Client  # type: ignore

from notebook.models.collaborator import (
    FolderCollaborator,
    FolderCollaboratorCreate,
    FolderCollaboratorUpdate,
    NoteCollaborator,
    NoteCollaboratorCreate,
    NoteCollaboratorUpdate,
)

from .base import BaseRepository


class NoteCollaboratorRepository(
    BaseRepository[NoteCollaborator, NoteCollaboratorCreate, NoteCollaboratorUpdate]
):
    """Repository for note-level grants, unique on (note_id, user_id)"""
    
    CONFLICT_COLUMNS = "note_id,user_id"
    
    def __init__(self, client: Client):
        super().__init__(client, "note_collaborators", NoteCollaborator)
    
    async def find_for_user(self, user_id: str) -> List[NoteCollaborator]:
        """Grants held by a user"""
        return await self.find_by_filters({"user_id": user_id})
    
    async def find_for_note(self, note_id: str) -> List[NoteCollaborator]:
        """Grants on a note"""
        return await self.find_by_filters({"note_id": note_id}, desc=False)
    
    async def find_pair(self, note_id: str, user_id: str) -> Optional[NoteCollaborator]:
        """The grant for one (note, user) pair, if any"""
        rows = await self.find_by_filters({"note_id": note_id, "user_id": user_id}, order_by=None)
        return rows[0] if rows else None
    
    async def find_noted_ids_for_user(self, note_ids: Iterable[str], user_id: str) -> Set[str]:
        """Which of note_ids already carry a grant for user_id"""
        rows = await self.find_in("note_id", note_ids, order_by=None, filters={"user_id": user_id})
        return {row.note_id for row in rows}
    
    async def create_many(self, rows: List[NoteCollaboratorCreate]) -> List[NoteCollaborator]:
        """Idempotent bulk insert; existing pairs are left untouched"""
        return await self.create_many_ignoring_duplicates(rows, self.CONFLICT_COLUMNS)
    
    async def delete_pair(self, note_id: str, user_id: str) -> bool:
        """Remove one grant. Removing an absent grant is a no-op."""
        return await self.delete_by_filters({"note_id": note_id, "user_id": user_id}) > 0
    
    async def delete_for_note(self, note_id: str) -> int:
        """Remove every grant on a note"""
        return await self.delete_by_filters({"note_id": note_id})


class FolderCollaboratorRepository(
    BaseRepository[FolderCollaborator, FolderCollaboratorCreate, FolderCollaboratorUpdate]
):
    """Repository for folder-level grants, unique on (folder_id, user_id)"""
    
    def __init__(self, client: Client):
        super().__init__(client, "folder_collaborators", FolderCollaborator)
    
    async def find_for_user(self, user_id: str) -> List[FolderCollaborator]:
        """Folder grants held by a user"""
        return await self.find_by_filters({"user_id": user_id})
    
    async def find_for_folder(self, folder_id: str) -> List[FolderCollaborator]:
        """Grants on a folder"""
        return await self.find_by_filters({"folder_id": folder_id}, desc=False)
    
    async def find_pair(self, folder_id: str, user_id: str) -> Optional[FolderCollaborator]:
        """The grant for one (folder, user) pair, if any"""
        rows = await self.find_by_filters({"folder_id": folder_id, "user_id": user_id}, order_by=None)
        return rows[0] if rows else None
    
    async def find_shared_folder_ids(self, folder_ids: Iterable[str]) -> Set[str]:
        """Subset of folder_ids that have at least one collaborator"""
        rows = await self.find_in("folder_id", folder_ids, order_by=None)
        return {row.folder_id for row in rows}
    
    async def delete_pair(self, folder_id: str, user_id: str) -> bool:
        """Remove one folder grant. Materialized note grants are kept."""
        return await self.delete_by_filters({"folder_id": folder_id, "user_id": user_id}) > 0
    
    async def delete_for_folder(self, folder_id: str) -> int:
        """Remove every grant on a folder"""
        return await self.delete_by_filters({"folder_id": folder_id})
