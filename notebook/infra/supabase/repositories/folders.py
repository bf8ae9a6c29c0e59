"""Folders repository"""
from typing import Iterable, List

from supabase import Client  # type: ignore

from notebook.models.folder import Folder, FolderCreate, FolderUpdate

from .base import BaseRepository


class FolderRepository(BaseRepository[Folder, FolderCreate, FolderUpdate]):
    """Repository for folder operations"""
    
    def __init__(self, client: Client):
        super().__init__(client, "folders", Folder)
    
    async def find_owned(self, owner_id: str) -> List[Folder]:
        """Find all folders owned by a user"""
        return await self.find_by_filters({"owner_id": owner_id})
    
    async def find_by_ids(self, folder_ids: Iterable[str]) -> List[Folder]:
        """Find folders by id"""
        return await self.find_in("id", folder_ids)
