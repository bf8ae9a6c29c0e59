"""Notes repository"""
from typing import Iterable, List

from supabase import Client  # type: ignore

from notebook.models.note import Note, NoteCreate, NoteUpdate

from .base import BaseRepository


class NoteRepository(BaseRepository[Note, NoteCreate, NoteUpdate]):
    """Repository for notes operations"""
    
    def __init__(self, client: Client):
        super().__init__(client, "notes", Note)
    
    async def find_owned(self, owner_id: str) -> List[Note]:
        """Find all notes created by a user, newest first"""
        return await self.find_by_filters({"owner_id": owner_id})
    
    async def find_by_folder(self, folder_id: str) -> List[Note]:
        """Find all notes currently filed in a folder"""
        return await self.find_by_filters({"folder_id": folder_id})
    
    async def find_by_ids(self, note_ids: Iterable[str]) -> List[Note]:
        """Find notes by id, newest first"""
        return await self.find_in("id", note_ids)
    
    async def find_in_folders(self, folder_ids: Iterable[str]) -> List[Note]:
        """Find notes filed in any of the given folders"""
        return await self.find_in("folder_id", folder_ids)
    
    async def detach_folder(self, folder_id: str) -> List[Note]:
        """Move every note out of a folder (folder_id -> null)"""
        return await self.update_by_filters({"folder_id": folder_id}, {"folder_id": None})
