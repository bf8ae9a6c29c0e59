"""Editor session: local drafts, recovery and autosave"""

from notebook.features.editor.autosave import AutosaveEngine, AutosaveStatus
from notebook.features.editor.draft_store import (
    NOTE_DRAFT_KEY,
    WAS_IN_NOTE_KEY,
    DraftStore,
    InMemoryDraftStore,
    JsonFileDraftStore,
)
from notebook.features.editor.drafts import (
    DraftRecord,
    EditingRef,
    EditorMode,
    NoteEditor,
    RecoveryResult,
)

__all__ = [
    "AutosaveEngine",
    "AutosaveStatus",
    "DraftStore",
    "InMemoryDraftStore",
    "JsonFileDraftStore",
    "NOTE_DRAFT_KEY",
    "WAS_IN_NOTE_KEY",
    "DraftRecord",
    "EditingRef",
    "EditorMode",
    "NoteEditor",
    "RecoveryResult",
]
