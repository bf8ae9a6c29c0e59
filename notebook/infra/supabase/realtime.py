"""Realtime change feed on the current user's note grants"""
import logging
from typing import Any, Callable, Dict, Optional

from supabase import AsyncClient, acreate_client  # type: ignore

from notebook import config

logger = logging.getLogger(__name__)

ChangeCallback = Callable[[Dict[str, Any]], None]

_async_client: Optional[AsyncClient] = None


async def get_async_supabase_client() -> AsyncClient:
    """Get or create the async Supabase client used for realtime channels"""
    global _async_client

    if _async_client is None:
        url = config.SUPABASE_URL
        key = config.SUPABASE_SERVICE_ROLE_KEY

        if not url or not key:
            raise ValueError("SUPABASE_URL and SUPABASE_SERVICE_ROLE_KEY must be set")

        _async_client = await acreate_client(url, key)

    return _async_client


class NoteCollaboratorFeed:
    """
    Subscription to inserts, updates and deletes on note_collaborators rows
    where user_id is the signed-in user. Filtering happens server side.
    """

    TABLE = "note_collaborators"

    def __init__(self, client: Optional[AsyncClient] = None):
        self._client = client
        self._channel = None

    @property
    def subscribed(self) -> bool:
        return self._channel is not None

    async def subscribe(self, user_id: str, callback: ChangeCallback) -> None:
        """Start delivering change events for user_id. Replaces any previous subscription."""
        await self.unsubscribe()
        if self._client is None:
            self._client = await get_async_supabase_client()

        channel = self._client.channel(f"{self.TABLE}:{user_id}")
        channel.on_postgres_changes(
            "*",
            schema="public",
            table=self.TABLE,
            filter=f"user_id=eq.{user_id}",
            callback=callback,
        )
        await channel.subscribe()
        self._channel = channel
        logger.info(f"Subscribed to {self.TABLE} changes for {user_id}")

    async def unsubscribe(self) -> None:
        if self._channel is None:
            return
        channel, self._channel = self._channel, None
        await self._client.remove_channel(channel)
        logger.info(f"Unsubscribed from {self.TABLE} changes")
