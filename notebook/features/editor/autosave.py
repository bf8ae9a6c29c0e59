"""Autosave Debounce Engine - coalesces edits of a persisted note into throttled writes"""
import asyncio
import logging
from enum import Enum
from typing import Any, Awaitable, Callable, Optional

from notebook import config
from notebook.models.note import NoteUpdate

logger = logging.getLogger(__name__)

SaveFn = Callable[[str, NoteUpdate], Awaitable[Any]]
SnapshotFn = Callable[[], NoteUpdate]
SleepFn = Callable[[float], Awaitable[None]]


class AutosaveStatus(str, Enum):
    """Autosave state"""
    IDLE = "idle"
    PENDING = "pending"
    SAVING = "saving"
    SAVED = "saved"


class AutosaveEngine:
    """
    Debounced, single-flight writer for one editing session.

    - schedule() (re)arms the debounce timer and moves to PENDING
    - when the timer fires the snapshot is read, so the write carries the
      latest values rather than those at arm time
    - at most one write is in flight; an edit during SAVING arms the next
      PENDING cycle, which waits for the running write before starting its own
    - success: SAVED, then IDLE after the display window
    - failure: IDLE, logged, not retried
    - cancel() stops armed timers; a write already in flight completes but its
      result is ignored
    """

    def __init__(
        self,
        save: SaveFn,
        delay: float = config.AUTOSAVE_DELAY_SECONDS,
        saved_display: float = config.AUTOSAVE_SAVED_DISPLAY_SECONDS,
        sleep: SleepFn = asyncio.sleep,
    ):
        self._save = save
        self._delay = delay
        self._saved_display = saved_display
        self._sleep = sleep

        self.status = AutosaveStatus.IDLE
        self._timer: Optional[asyncio.Task] = None
        self._display: Optional[asyncio.Task] = None
        self._write: Optional[asyncio.Task] = None

    @property
    def in_flight(self) -> bool:
        return self._write is not None and not self._write.done()

    def schedule(self, note_id: str, snapshot: SnapshotFn) -> None:
        """Arm (or re-arm) the debounce timer for note_id"""
        self._cancel_timers()
        self.status = AutosaveStatus.PENDING
        self._timer = asyncio.create_task(self._fire_after_delay(note_id, snapshot))

    def cancel(self) -> None:
        """Drop any armed timer and forget an in-flight result. Does not abort the write."""
        self._cancel_timers()
        self.status = AutosaveStatus.IDLE

    def _cancel_timers(self) -> None:
        for task in (self._timer, self._display):
            if task is not None and not task.done():
                task.cancel()
        self._timer = None
        self._display = None

    async def _fire_after_delay(self, note_id: str, snapshot: SnapshotFn) -> None:
        await self._sleep(self._delay)

        previous = self._write
        if previous is not None and not previous.done():
            # asyncio.wait never cancels what it waits on
            await asyncio.wait({previous})

        self.status = AutosaveStatus.SAVING
        write = asyncio.create_task(self._run_save(note_id, snapshot()))
        self._write = write
        await asyncio.wait({write})

        if write.cancelled() or not write.result():
            self.status = AutosaveStatus.IDLE
            return

        self.status = AutosaveStatus.SAVED
        self._timer = None
        self._display = asyncio.create_task(self._back_to_idle())

    async def _run_save(self, note_id: str, patch: NoteUpdate) -> bool:
        """Runs detached from the timer so cancel() cannot abort it"""
        try:
            await self._save(note_id, patch)
        except Exception as e:
            logger.warning(f"Autosave of note {note_id} failed: {e}")
            return False
        return True

    async def _back_to_idle(self) -> None:
        await self._sleep(self._saved_display)
        if self.status == AutosaveStatus.SAVED:
            self.status = AutosaveStatus.IDLE
