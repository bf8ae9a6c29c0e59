"""Domain models for the merged notebook view"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional, Set

from notebook.models.collaborator import Access, FolderCollaborator, NoteCollaborator, Permission
from notebook.models.folder import Folder
from notebook.models.note import Note

# Folder filters understood by list_notes, besides a concrete folder id
OWNED_UNFILED = "owned-unfiled"
SHARED = "shared"
ALL = "all"


class NoteKind(str, Enum):
    """How a listed note reached the user. Computed per query, never stored."""
    OWNED = "owned"
    SHARED_DIRECT = "shared_direct"
    SHARED_VIA_FOLDER = "shared_via_folder"


class FolderOrder(str, Enum):
    CREATED_AT = "created_at"
    NAME = "name"


class NoteListItem(Note):
    """Note as listed for one user"""
    kind: NoteKind
    access: Access


class FolderListItem(Folder):
    """Folder as listed for one user"""
    is_shared: bool = False
    is_owner: bool = False
    permission: Optional[Permission] = None


@dataclass
class NoteSources:
    """
    Everything needed to compose one user's notes.

    owned_notes: every note the user owns, wherever it is filed
    shared_folder_ids: folders (of any owner) relevant to the user that have
        at least one collaborator
    folder_grants: folder grants held by the user
    note_grants: note grants held by the user
    direct_notes: notes referenced by note_grants
    folder_notes: notes filed in shared folders the user owns or collaborates on
    """
    user_id: str
    owned_notes: List[Note] = field(default_factory=list)
    shared_folder_ids: Set[str] = field(default_factory=set)
    folder_grants: List[FolderCollaborator] = field(default_factory=list)
    note_grants: List[NoteCollaborator] = field(default_factory=list)
    direct_notes: List[Note] = field(default_factory=list)
    folder_notes: List[Note] = field(default_factory=list)

    @property
    def folder_permissions(self) -> Dict[str, Permission]:
        return {grant.folder_id: grant.permission for grant in self.folder_grants}

    @property
    def note_permissions(self) -> Dict[str, Permission]:
        return {grant.note_id: grant.permission for grant in self.note_grants}
