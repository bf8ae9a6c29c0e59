"""Draft Persistence & Recovery - crash-safe snapshot of the open editing session"""
import asyncio
import logging
import time
from enum import Enum
from typing import Callable, Iterable, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic import ValidationError as PydanticValidationError

from notebook import config
from notebook.errors import NotFoundError, ValidationError
from notebook.features.editor.autosave import AutosaveEngine
from notebook.features.editor.draft_store import NOTE_DRAFT_KEY, WAS_IN_NOTE_KEY, DraftStore
from notebook.models.note import Note, NoteUpdate

logger = logging.getLogger(__name__)


class EditorMode(str, Enum):
    """Editor open state"""
    CLOSED = "closed"
    OPEN_UNSAVED = "open_unsaved"
    OPEN_EDITING_EXISTING = "open_editing_existing"


class RecoveryResult(str, Enum):
    """What recover() did"""
    NO_DRAFT = "no_draft"
    DISCARDED = "discarded"
    RESTORED = "restored"
    ALREADY_RAN = "already_ran"


class EditingRef(BaseModel):
    """The persisted note a draft belongs to"""
    id: str
    title: str = ""


class DraftRecord(BaseModel):
    """Draft as written to the local store under 'note-draft'"""
    model_config = ConfigDict(populate_by_name=True)

    is_open: bool = Field(True, alias="isOpen")
    title: str = ""
    body: str = ""
    color: Optional[str] = None
    editing_ref: Optional[EditingRef] = Field(None, alias="editingRef")
    folder_id: Optional[str] = Field(None, alias="folderId")
    timestamp: int  # epoch milliseconds


class NoteEditor:
    """
    Editing session for one note, mirrored to a local draft record.

    The record is written on open and on every field change, and deleted on
    close: no record means no draft. recover() restores an interrupted session
    once per editor lifetime.
    """

    def __init__(
        self,
        draft_store: DraftStore,
        note_service=None,
        user_id: Optional[str] = None,
        autosave: Optional[AutosaveEngine] = None,
        clock: Callable[[], float] = time.time,
        max_age_hours: float = config.DRAFT_MAX_AGE_HOURS,
    ):
        self._store = draft_store
        self._notes = note_service
        self.user_id = user_id
        self.autosave = autosave or AutosaveEngine(self._autosave_write)
        self._clock = clock
        self._max_age_ms = int(max_age_hours * 3600 * 1000)

        self.mode = EditorMode.CLOSED
        self.title = ""
        self.body = ""
        self.color: Optional[str] = None
        self.folder_id: Optional[str] = None
        self.editing_ref: Optional[EditingRef] = None
        self.editing_note: Optional[Note] = None

        self._pending_ref: Optional[EditingRef] = None
        self._recovery_ran = False

    # ------------------------------------------------------------------
    # Editing surface
    # ------------------------------------------------------------------

    @property
    def content(self) -> str:
        """Markup used to hydrate the editing surface on open"""
        return self.body

    @property
    def awaiting_notes(self) -> bool:
        """A recovered draft refers to a note that has not been looked up yet"""
        return self._pending_ref is not None

    def open_new(self, folder_id: Optional[str] = None, color: Optional[str] = None) -> None:
        """Start a new, unsaved note"""
        self.autosave.cancel()
        self.mode = EditorMode.OPEN_UNSAVED
        self.title = ""
        self.body = ""
        self.color = color or config.DEFAULT_NOTE_COLOR
        self.folder_id = folder_id
        self.editing_ref = None
        self.editing_note = None
        self._pending_ref = None
        self._persist()

    def open_existing(self, note: Note) -> None:
        """Open a persisted note for editing"""
        self.autosave.cancel()
        self.mode = EditorMode.OPEN_EDITING_EXISTING
        self.title = note.title
        self.body = note.content
        self.color = note.color
        self.folder_id = note.folder_id
        self.editing_ref = EditingRef(id=note.id, title=note.title)
        self.editing_note = note
        self._pending_ref = None
        self._persist()

    def set_title(self, title: str) -> None:
        self.title = title
        self._changed()

    def apply_content(self, markup: str) -> None:
        """onChange from the editing surface"""
        self.body = markup
        self._changed()

    def set_color(self, color: Optional[str]) -> None:
        self.color = color
        self._changed()

    def close(self) -> None:
        """Close the editor. Armed autosave is dropped without a flush."""
        self.autosave.cancel()
        self._store.delete(NOTE_DRAFT_KEY)
        self._store.delete(WAS_IN_NOTE_KEY)
        self.mode = EditorMode.CLOSED
        self.title = ""
        self.body = ""
        self.color = None
        self.folder_id = None
        self.editing_ref = None
        self.editing_note = None
        self._pending_ref = None

    def _changed(self) -> None:
        if self.mode == EditorMode.CLOSED:
            logger.debug("Ignoring edit while the editor is closed")
            return
        self._persist()
        if (
            self.mode == EditorMode.OPEN_EDITING_EXISTING
            and self.editing_note is not None
            and self.title.strip()
        ):
            self.autosave.schedule(self.editing_note.id, self._snapshot)

    def _snapshot(self) -> NoteUpdate:
        return NoteUpdate(title=self.title, content=self.body, color=self.color)

    def _now_ms(self) -> int:
        return int(self._clock() * 1000)

    def _persist(self) -> None:
        record = DraftRecord(
            is_open=True,
            title=self.title,
            body=self.body,
            color=self.color,
            editing_ref=self.editing_ref,
            folder_id=self.folder_id,
            timestamp=self._now_ms(),
        )
        self._store.set(NOTE_DRAFT_KEY, record.model_dump(by_alias=True, mode="json"))
        self._store.set(WAS_IN_NOTE_KEY, True)

    # ------------------------------------------------------------------
    # Recovery
    # ------------------------------------------------------------------

    def _discard(self, reason: str) -> RecoveryResult:
        logger.warning(f"Discarding local draft: {reason}")
        self._store.delete(NOTE_DRAFT_KEY)
        self._store.delete(WAS_IN_NOTE_KEY)
        return RecoveryResult.DISCARDED

    async def recover(self) -> RecoveryResult:
        """
        Restore an interrupted editing session. Runs once per editor.

        Fields are restored before the first await; the open state is set on
        the next event-loop tick. A draft that points at a persisted note stays
        pending until resolve_pending() is given the loaded notes.
        """
        if self._recovery_ran:
            return RecoveryResult.ALREADY_RAN
        self._recovery_ran = True

        raw = self._store.get(NOTE_DRAFT_KEY)
        if raw is None:
            return RecoveryResult.NO_DRAFT

        try:
            record = DraftRecord.model_validate(raw)
        except PydanticValidationError as e:
            return self._discard(f"malformed record ({e.error_count()} errors)")

        if not record.is_open:
            return self._discard("record is not open")
        age_ms = self._now_ms() - record.timestamp
        if age_ms >= self._max_age_ms:
            return self._discard(f"older than {self._max_age_ms // 3_600_000}h")

        self.title = record.title
        self.body = record.body
        self.color = record.color
        self.folder_id = record.folder_id
        self.editing_ref = record.editing_ref
        self._pending_ref = record.editing_ref

        # let the editing surface mount before reopening it
        await asyncio.sleep(0)

        if record.editing_ref is not None:
            self.mode = EditorMode.OPEN_EDITING_EXISTING
        else:
            self.mode = EditorMode.OPEN_UNSAVED
        logger.info(f"Recovered local draft ({self.mode.value})")
        return RecoveryResult.RESTORED

    def resolve_pending(self, notes: Iterable[Note]) -> Optional[Note]:
        """
        Bind a recovered draft to its note once the note list has loaded.

        If the note no longer exists the editor falls back to an unsaved draft
        with the recovered text, so the next save creates a note.
        """
        ref = self._pending_ref
        if ref is None:
            return None
        self._pending_ref = None

        note = next((n for n in notes if n.id == ref.id), None)
        if note is not None:
            self.editing_note = note
            return note

        logger.warning(f"Recovered draft refers to missing note {ref.id}, keeping it as a new note")
        self.editing_ref = None
        self.editing_note = None
        if self.mode != EditorMode.CLOSED:
            self.mode = EditorMode.OPEN_UNSAVED
            self._persist()
        return None

    # ------------------------------------------------------------------
    # Persistence to the relational store
    # ------------------------------------------------------------------

    def _require_service(self) -> None:
        if self._notes is None or not self.user_id:
            raise ValidationError("Sign in to save notes")

    async def _autosave_write(self, note_id: str, patch: NoteUpdate) -> Note:
        self._require_service()
        return await self._notes.update_note(note_id, self.user_id, patch)

    async def save(self) -> Note:
        """
        Explicit save: update the note being edited, or create one.

        An update whose note has vanished becomes a create.
        """
        self._require_service()
        if self.mode == EditorMode.CLOSED:
            raise ValidationError("No note is open")
        if not self.title.strip() and not self.body.strip():
            raise ValidationError("Cannot save an empty note")

        target_id = self.editing_note.id if self.editing_note else (
            self.editing_ref.id if self.editing_ref else None
        )
        note: Optional[Note] = None
        if target_id:
            try:
                note = await self._notes.update_note(target_id, self.user_id, self._snapshot())
            except NotFoundError:
                logger.warning(f"Note {target_id} vanished before save, creating a new one")

        if note is None:
            result = await self._notes.create_note(
                self.user_id,
                folder_id=self.folder_id,
                title=self.title,
                content=self.body,
                color=self.color,
            )
            note = result.note

        self.autosave.cancel()
        self.mode = EditorMode.OPEN_EDITING_EXISTING
        self.editing_note = note
        self.editing_ref = EditingRef(id=note.id, title=note.title)
        self._pending_ref = None
        self._persist()
        return note

    async def delete_current(self) -> bool:
        """Delete the note being edited (if persisted) and close the editor"""
        self.autosave.cancel()
        deleted = False
        if self.editing_note is not None:
            self._require_service()
            deleted = await self._notes.delete_note(self.editing_note.id, self.user_id)
        self.close()
        return deleted
