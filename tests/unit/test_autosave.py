"""
Unit tests for the autosave debounce engine.

Time is driven by a virtual clock, so the 2 second windows are exact.
"""

import asyncio

import pytest

from notebook.features.editor.autosave import AutosaveEngine, AutosaveStatus
from notebook.models.note import NoteUpdate
from tests.fakes import VirtualClock


class RecordingStore:
    """save() double that records (time, note_id, patch) and can block or fail"""

    def __init__(self, clock: VirtualClock):
        self.clock = clock
        self.writes = []
        self.fail_next = False
        self.gate = None
        self.in_flight = 0
        self.max_in_flight = 0

    async def save(self, note_id: str, patch: NoteUpdate):
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            if self.gate is not None:
                await self.gate.wait()
            self.writes.append((self.clock.now, note_id, patch.model_dump(exclude_unset=True)))
            if self.fail_next:
                self.fail_next = False
                raise RuntimeError("store unavailable")
        finally:
            self.in_flight -= 1


class Fields:
    def __init__(self):
        self.title = "Plan"
        self.body = ""

    def snapshot(self) -> NoteUpdate:
        return NoteUpdate(title=self.title, content=self.body, color="#fff")


@pytest.fixture
def store(clock):
    return RecordingStore(clock)


@pytest.fixture
def engine(clock, store):
    return AutosaveEngine(store.save, delay=2.0, saved_display=2.0, sleep=clock.sleep)


class TestDebounce:
    async def test_burst_of_edits_coalesces_into_one_write(self, clock, store, engine):
        """Edits at 0s, 1s and 1.9s produce one write at 3.9s with the 1.9s values."""
        fields = Fields()

        fields.body = "a"
        engine.schedule("note-1", fields.snapshot)
        await clock.advance(1.0)
        fields.body = "ab"
        engine.schedule("note-1", fields.snapshot)
        await clock.advance(0.9)
        fields.body = "abc"
        engine.schedule("note-1", fields.snapshot)

        await clock.advance(1.99)
        assert store.writes == []
        assert engine.status == AutosaveStatus.PENDING

        await clock.advance(0.01)
        assert len(store.writes) == 1
        written_at, note_id, patch = store.writes[0]
        assert written_at == pytest.approx(3.9)
        assert note_id == "note-1"
        assert patch["content"] == "abc"

        await clock.advance(10)
        assert len(store.writes) == 1

    async def test_values_read_at_fire_time(self, clock, store, engine):
        fields = Fields()
        fields.body = "armed"
        engine.schedule("note-1", fields.snapshot)
        fields.body = "changed without re-arming"

        await clock.advance(2.0)

        assert store.writes[0][2]["content"] == "changed without re-arming"

    async def test_saved_then_idle(self, clock, store, engine):
        engine.schedule("note-1", Fields().snapshot)

        await clock.advance(2.0)
        assert engine.status == AutosaveStatus.SAVED

        await clock.advance(1.9)
        assert engine.status == AutosaveStatus.SAVED

        await clock.advance(0.1)
        assert engine.status == AutosaveStatus.IDLE

    async def test_failure_returns_to_idle_without_retry(self, clock, store, engine):
        store.fail_next = True
        engine.schedule("note-1", Fields().snapshot)

        await clock.advance(2.0)

        assert engine.status == AutosaveStatus.IDLE
        await clock.advance(10)
        assert len(store.writes) == 1

    async def test_next_edit_after_failure_rearms(self, clock, store, engine):
        store.fail_next = True
        engine.schedule("note-1", Fields().snapshot)
        await clock.advance(2.0)

        engine.schedule("note-1", Fields().snapshot)
        await clock.advance(2.0)

        assert len(store.writes) == 2
        assert engine.status == AutosaveStatus.SAVED


class TestSingleFlight:
    async def test_edit_during_saving_waits_for_running_write(self, clock, store, engine):
        fields = Fields()
        store.gate = asyncio.Event()

        fields.body = "first"
        engine.schedule("note-1", fields.snapshot)
        await clock.advance(2.0)
        assert engine.status == AutosaveStatus.SAVING
        assert engine.in_flight

        fields.body = "second"
        engine.schedule("note-1", fields.snapshot)
        assert engine.status == AutosaveStatus.PENDING

        # second timer fires while the first write is still blocked
        await clock.advance(2.0)
        assert store.in_flight == 1

        store.gate.set()
        await clock.advance(0)

        assert [w[2]["content"] for w in store.writes] == ["first", "second"]
        assert store.max_in_flight == 1
        assert engine.status == AutosaveStatus.SAVED


class TestCancel:
    async def test_cancel_while_pending_drops_write(self, clock, store, engine):
        engine.schedule("note-1", Fields().snapshot)
        await clock.advance(1.0)

        engine.cancel()
        await clock.advance(5.0)

        assert store.writes == []
        assert engine.status == AutosaveStatus.IDLE

    async def test_cancel_while_saving_lets_write_finish_silently(self, clock, store, engine):
        store.gate = asyncio.Event()
        engine.schedule("note-1", Fields().snapshot)
        await clock.advance(2.0)
        assert engine.status == AutosaveStatus.SAVING

        engine.cancel()
        store.gate.set()
        await clock.advance(0)

        assert len(store.writes) == 1
        assert engine.status == AutosaveStatus.IDLE
