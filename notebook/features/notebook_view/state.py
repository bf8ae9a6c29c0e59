"""Session-bound notebook view with a single explicit refresh() entry point"""
import asyncio
import logging
from typing import Any, Awaitable, Dict, List, Optional, Set, TypeVar

from notebook.errors import StoreError
from notebook.features.editor.drafts import NoteEditor, RecoveryResult
from notebook.features.notebook_view import compositor
from notebook.features.notebook_view.domain import (
    OWNED_UNFILED,
    FolderListItem,
    FolderOrder,
    NoteListItem,
)
from notebook.features.notebook_view.service import NotebookViewService
from notebook.infra.supabase.realtime import NoteCollaboratorFeed

logger = logging.getLogger(__name__)

R = TypeVar("R")


class NotebookState:
    """
    The view one client session is looking at.

    Nothing here recomputes on its own: refresh() reloads everything and is
    called after local mutations (mutate()) and when the change feed reports
    a grant change. Results of a refresh that was overtaken by a newer one
    are dropped.
    """

    def __init__(
        self,
        view_service: NotebookViewService,
        feed: Optional[NoteCollaboratorFeed] = None,
        editor: Optional[NoteEditor] = None,
        folder_filter: str = OWNED_UNFILED,
        folder_order: FolderOrder = FolderOrder.CREATED_AT,
    ):
        self._view = view_service
        self._feed = feed
        self.editor = editor
        self.folder_filter = folder_filter
        self.folder_order = folder_order

        self.user_id: Optional[str] = None
        self.notes: List[NoteListItem] = []
        self.visible_notes: List[NoteListItem] = []
        self.folders: List[FolderListItem] = []
        self.loaded = False

        self._seq = 0
        self._background: Set[asyncio.Task] = set()

    # ------------------------------------------------------------------
    # Session lifecycle
    # ------------------------------------------------------------------

    async def sign_in(self, user_id: str) -> None:
        """Bind the view to a user, start the change feed and load"""
        if self.user_id and self.user_id != user_id:
            await self.sign_out()
        self.user_id = user_id
        if self.editor is not None:
            self.editor.user_id = user_id
        if self._feed is not None:
            await self._feed.subscribe(user_id, self._on_change)
        await self.refresh()

    async def sign_out(self) -> None:
        """Stop autosave and the change feed, and empty the view"""
        if self.editor is not None:
            self.editor.autosave.cancel()
            self.editor.user_id = None
        if self._feed is not None:
            await self._feed.unsubscribe()
        self.user_id = None
        self._seq += 1
        self._clear()

    async def token_refreshed(self, user_id: Optional[str]) -> None:
        """A refreshed token for another (or no) user is treated as a session change"""
        if not user_id:
            await self.sign_out()
        elif user_id != self.user_id:
            await self.sign_in(user_id)

    async def recover_editor(self) -> RecoveryResult:
        """Run draft recovery; bind a recovered note now if the list is already loaded"""
        if self.editor is None:
            return RecoveryResult.NO_DRAFT
        result = await self.editor.recover()
        if self.loaded and self.editor.awaiting_notes:
            self.editor.resolve_pending(self.visible_notes)
        return result

    def _clear(self) -> None:
        self.notes = []
        self.visible_notes = []
        self.folders = []
        self.loaded = False

    # ------------------------------------------------------------------
    # Invalidation
    # ------------------------------------------------------------------

    async def refresh(self) -> bool:
        """
        Recompute notes and folders from the store.

        Returns:
            False when the result was dropped (signed out, or a newer refresh started)
        """
        self._seq += 1
        seq = self._seq
        user_id = self.user_id

        if not user_id:
            self._clear()
            return False

        sources = await self._view.load_sources(user_id)
        folders = await self._view.list_folders(user_id, self.folder_order)

        if seq != self._seq or user_id != self.user_id:
            logger.debug(f"Dropping superseded refresh #{seq}")
            return False

        self.visible_notes = compositor.all_notes(sources)
        self.notes = compositor.compose_notes(sources, self.folder_filter)
        self.folders = folders
        self.loaded = True

        if self.editor is not None and self.editor.awaiting_notes:
            self.editor.resolve_pending(self.visible_notes)
        return True

    async def set_filter(self, folder_filter: str) -> None:
        self.folder_filter = folder_filter
        await self.refresh()

    async def mutate(self, operation: Awaitable[R]) -> R:
        """
        Run a local mutation, then refresh regardless of its outcome.

        When the mutation fails its error is what the caller sees; a refresh
        failing after it is only logged.
        """
        try:
            result = await operation
        except Exception:
            if self.user_id:
                try:
                    await self.refresh()
                except StoreError as e:
                    logger.error(f"Refresh after failed mutation also failed: {e}")
            raise

        if self.user_id:
            await self.refresh()
        return result

    def _on_change(self, payload: Dict[str, Any]) -> None:
        """Change-feed callback; schedules a refresh on the running loop"""
        logger.info(f"Grant change for {self.user_id}: {payload.get('eventType', 'unknown')}")
        task = asyncio.ensure_future(self.refresh())
        self._background.add(task)
        task.add_done_callback(self._feed_refresh_done)

    def _feed_refresh_done(self, task: asyncio.Task) -> None:
        self._background.discard(task)
        if not task.cancelled() and task.exception() is not None:
            logger.error(f"Refresh after grant change failed: {task.exception()}")
