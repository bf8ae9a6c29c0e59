"""
Pure composition of a user's notes and folders.

Nothing here touches the store. The service loads NoteSources and these
functions partition, classify, de-duplicate, filter and order them.

Partitions for a user U:
    (a) owned notes not filed in a shared folder      -> "owned-unfiled"
    (b) notes U holds a direct grant on
    (c) notes filed in folders U collaborates on
    shared = (b) ∪ (c) ∪ owned notes filed in a shared folder
A note in a shared folder is therefore listed under "shared" and never under
"owned-unfiled".
"""
from typing import Dict, Iterable, List, Optional

from notebook.features.notebook_view.domain import (
    ALL,
    OWNED_UNFILED,
    SHARED,
    FolderListItem,
    FolderOrder,
    NoteKind,
    NoteListItem,
    NoteSources,
)
from notebook.models.collaborator import Access, FolderCollaborator, Permission
from notebook.models.folder import Folder
from notebook.models.note import Note
from notebook.utils.markup import markup_to_plain_text


def _in_shared_folder(note: Note, sources: NoteSources) -> bool:
    return bool(note.folder_id) and note.folder_id in sources.shared_folder_ids


def _newest_first(items: Iterable[NoteListItem]) -> List[NoteListItem]:
    return sorted(items, key=lambda item: (item.created_at, item.id), reverse=True)


def _unique(notes: Iterable[Note]) -> List[Note]:
    seen: Dict[str, Note] = {}
    for note in notes:
        seen.setdefault(note.id, note)
    return list(seen.values())


def classify(note: Note, sources: NoteSources) -> NoteListItem:
    """Tag a note with how it reached the user and what they may do with it"""
    data = note.model_dump()
    if note.owner_id == sources.user_id:
        return NoteListItem(**data, kind=NoteKind.OWNED, access=Access.OWNER)

    via_folder = sources.folder_permissions.get(note.folder_id) if note.folder_id else None
    direct = sources.note_permissions.get(note.id)

    kind = NoteKind.SHARED_VIA_FOLDER if via_folder else NoteKind.SHARED_DIRECT
    access = Access.EDIT if Permission.EDIT in (via_folder, direct) else Access.VIEW
    return NoteListItem(**data, kind=kind, access=access)


def owned_partition(sources: NoteSources) -> List[NoteListItem]:
    """(a): the user's own notes outside shared folders"""
    return _newest_first(
        classify(note, sources)
        for note in sources.owned_notes
        if not _in_shared_folder(note, sources)
    )


def shared_partition(sources: NoteSources) -> List[NoteListItem]:
    """(b) ∪ (c), plus the user's own notes that live in shared folders"""
    collaborated = set(sources.folder_permissions)
    notes = _unique(
        [
            *sources.direct_notes,
            *(note for note in sources.folder_notes if note.folder_id in collaborated),
            *(note for note in sources.owned_notes if _in_shared_folder(note, sources)),
        ]
    )
    return _newest_first(classify(note, sources) for note in notes)


def all_notes(sources: NoteSources) -> List[NoteListItem]:
    """Every note visible to the user, each listed once"""
    owned = owned_partition(sources)
    owned_ids = {item.id for item in owned}
    shared = [item for item in shared_partition(sources) if item.id not in owned_ids]
    return _newest_first([*owned, *shared])


def compose_notes(sources: NoteSources, folder_filter: Optional[str]) -> List[NoteListItem]:
    """
    Notes for one folder filter.

    "owned-unfiled" -> (a); "shared" -> shared partition; "all" or None ->
    everything; any other value is a folder id.
    """
    if folder_filter == OWNED_UNFILED:
        return owned_partition(sources)
    if folder_filter == SHARED:
        return shared_partition(sources)
    if folder_filter in (None, "", ALL):
        return all_notes(sources)
    return [item for item in all_notes(sources) if item.folder_id == folder_filter]


def matches(note: Note, query: str) -> bool:
    """Case-insensitive match against the title and the plain text of the content"""
    needle = query.strip().casefold()
    if not needle:
        return True
    if needle in (note.title or "").casefold():
        return True
    return needle in markup_to_plain_text(note.content).casefold()


def search_notes(sources: NoteSources, query: str) -> List[NoteListItem]:
    """Full-text search over every visible note, regardless of folder"""
    return [item for item in all_notes(sources) if matches(item, query)]


def compose_folders(
    user_id: str,
    owned: List[Folder],
    collaborated: List[Folder],
    folder_grants: List[FolderCollaborator],
    shared_folder_ids: Iterable[str],
    order: FolderOrder = FolderOrder.CREATED_AT,
) -> List[FolderListItem]:
    """Owned folders plus folders shared with the user, tagged and ordered"""
    shared_ids = set(shared_folder_ids)
    permissions = {grant.folder_id: grant.permission for grant in folder_grants}

    items: Dict[str, FolderListItem] = {}
    for folder in owned:
        items[folder.id] = FolderListItem(
            **folder.model_dump(),
            is_shared=folder.id in shared_ids,
            is_owner=True,
        )
    for folder in collaborated:
        if folder.id in items or folder.owner_id == user_id:
            continue
        items[folder.id] = FolderListItem(
            **folder.model_dump(),
            is_shared=True,
            is_owner=False,
            permission=permissions.get(folder.id),
        )

    if order == FolderOrder.NAME:
        return sorted(items.values(), key=lambda item: (item.name.casefold(), item.id))
    return sorted(items.values(), key=lambda item: (item.created_at, item.id), reverse=True)
