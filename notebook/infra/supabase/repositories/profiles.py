"""User profiles repository"""
from typing import Optional

from supabase import Client  # type: ignore

from notebook.models.user import UserProfile, UserProfileCreate, UserProfileUpdate

from .base import BaseRepository


class UserProfileRepository(BaseRepository[UserProfile, UserProfileCreate, UserProfileUpdate]):
    """Repository for user profiles"""
    
    def __init__(self, client: Client):
        super().__init__(client, "profiles", UserProfile)
    
    async def find_by_email(self, email: str) -> Optional[UserProfile]:
        """Find a profile by (case-insensitive) email"""
        rows = await self.find_by_filters({"email": email.strip().lower()}, order_by=None, limit=1)
        return rows[0] if rows else None
