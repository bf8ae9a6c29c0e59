"""Business logic for note and folder CRUD"""

import logging
from typing import Dict, Optional

from supabase import Client  # type: ignore

from notebook import config
from notebook.errors import NotFoundError, PermissionDeniedError, StoreError, ValidationError
from notebook.features.notes.schemas import NoteWriteResult
from notebook.features.sharing.service import SharingService, require_user_id
from notebook.models.collaborator import Permission
from notebook.models.folder import Folder, FolderCreate, FolderUpdate
from notebook.models.note import Note, NoteCreate, NoteUpdate

logger = logging.getLogger(__name__)


class NoteService:
    """Service layer for creating, editing, filing and deleting notes and folders"""

    def __init__(self, client: Client, sharing: Optional[SharingService] = None):
        self.sharing = sharing or SharingService(client)
        self.repos = self.sharing.repos

    async def _get_note(self, note_id: str) -> Note:
        note = await self.repos.notes.find_by_id(note_id)
        if not note:
            raise NotFoundError(f"Note {note_id} not found")
        return note

    async def _get_folder(self, folder_id: str) -> Folder:
        folder = await self.repos.folders.find_by_id(folder_id)
        if not folder:
            raise NotFoundError(f"Folder {folder_id} not found")
        return folder

    async def _require_folder_edit(self, folder_id: str, user_id: str) -> Folder:
        """The folder must exist and the user must own it or hold an edit grant on it"""
        folder = await self._get_folder(folder_id)
        access = await self.sharing.folder_access(folder, user_id)
        if not access or not access.can_edit:
            raise PermissionDeniedError("You cannot add notes to this folder")
        return folder

    async def _copy_folder_grants(self, note: Note, folder: Folder, actor_id: str) -> NoteWriteResult:
        """
        Give every current folder collaborator a grant on a note just filed there.

        The note's owner is skipped. When the owner is a collaborator rather than
        the folder owner, the folder owner gets an edit grant so the note stays
        visible to them.
        """
        try:
            grants = await self.repos.folder_collaborators.find_for_folder(folder.id)
            targets: Dict[str, Permission] = {
                grant.user_id: grant.permission
                for grant in grants
                if grant.user_id != note.owner_id
            }
            if folder.owner_id != note.owner_id:
                targets[folder.owner_id] = Permission.EDIT

            count = await self.sharing.materialize_note_grants([note.id], targets, invited_by=actor_id)
        except StoreError as e:
            logger.warning(f"Note {note.id} saved but folder grants were not copied: {e}")
            return NoteWriteResult(
                note=note,
                warnings=[
                    f"Note saved, but sharing from its folder did not complete: {e.message}. "
                    "Move the note into the same folder again to finish."
                ],
                failed_step=e.step or "materialize note grants",
            )

        if count:
            logger.info(f"Materialized {count} grants on note {note.id} from folder {folder.id}")
        return NoteWriteResult(note=note, materialized_count=count)

    # ------------------------------------------------------------------
    # Notes
    # ------------------------------------------------------------------

    async def create_note(
        self,
        owner_id: str,
        folder_id: Optional[str] = None,
        title: str = "",
        content: str = "",
        color: Optional[str] = None,
    ) -> NoteWriteResult:
        """
        Create a note, optionally inside a folder.

        When the folder is shared, each folder collaborator receives a note
        grant with their folder permission before this returns.

        Raises:
            ValidationError: owner missing
            NotFoundError: folder does not exist
            PermissionDeniedError: owner cannot add notes to the folder
            StoreError: the note itself could not be written
        """
        require_user_id(owner_id, "owner_id")
        folder = await self._require_folder_edit(folder_id, owner_id) if folder_id else None

        note = await self.repos.notes.create(
            NoteCreate(
                owner_id=owner_id,
                folder_id=folder_id,
                title=title,
                content=content,
                color=color or config.DEFAULT_NOTE_COLOR,
            )
        )
        logger.info(f"Note {note.id} created by {owner_id}")

        if not folder:
            return NoteWriteResult(note=note)
        return await self._copy_folder_grants(note, folder, owner_id)

    async def update_note(self, note_id: str, actor_id: str, patch: NoteUpdate) -> Note:
        """
        Write title/content/color of a note. Allowed for the owner and edit collaborators.

        Filing is done through move_note, so a patch that sets folder_id is rejected.
        """
        require_user_id(actor_id, "actor_id")
        if "folder_id" in patch.model_fields_set:
            raise ValidationError("Use move_note to change a note's folder")

        note = await self._get_note(note_id)
        access = await self.sharing.note_access(note, actor_id)
        if not access or not access.can_edit:
            raise PermissionDeniedError("You do not have edit access to this note")

        updated = await self.repos.notes.update(note_id, patch)
        if not updated:
            raise NotFoundError(f"Note {note_id} was deleted")
        return updated

    async def move_note(self, note_id: str, actor_id: str, folder_id: Optional[str]) -> NoteWriteResult:
        """
        Move a note into a folder or out of any folder. Owner only.

        Moving a note into the folder it is already in copies any folder
        grants it is missing, which completes a partially shared create.
        """
        require_user_id(actor_id, "actor_id")
        note = await self._get_note(note_id)
        if note.owner_id != actor_id:
            raise PermissionDeniedError("Only the note owner can move it")

        folder = await self._require_folder_edit(folder_id, actor_id) if folder_id else None

        updated = await self.repos.notes.update(note_id, NoteUpdate(folder_id=folder_id))
        if not updated:
            raise NotFoundError(f"Note {note_id} was deleted")
        logger.info(f"Note {note_id} moved to folder {folder_id}")

        if not folder:
            return NoteWriteResult(note=updated)
        return await self._copy_folder_grants(updated, folder, actor_id)

    async def delete_note(self, note_id: str, actor_id: str) -> bool:
        """
        Delete a note and its grants. Owner only.

        Returns:
            False when the note was already gone
        """
        require_user_id(actor_id, "actor_id")
        note = await self.repos.notes.find_by_id(note_id)
        if not note:
            return False
        if note.owner_id != actor_id:
            raise PermissionDeniedError("Only the note owner can delete it")

        await self.repos.note_collaborators.delete_for_note(note_id)
        deleted = await self.repos.notes.delete(note_id)
        logger.info(f"Note {note_id} deleted by {actor_id}")
        return deleted

    # ------------------------------------------------------------------
    # Folders
    # ------------------------------------------------------------------

    async def create_folder(
        self,
        owner_id: str,
        name: str,
        icon: Optional[str] = None,
        color: Optional[str] = None,
    ) -> Folder:
        """Create a folder owned by owner_id"""
        require_user_id(owner_id, "owner_id")
        if not name or not name.strip():
            raise ValidationError("Folder name is required")

        folder = await self.repos.folders.create(
            FolderCreate(owner_id=owner_id, name=name.strip(), icon=icon, color=color)
        )
        logger.info(f"Folder {folder.id} created by {owner_id}")
        return folder

    async def update_folder(self, folder_id: str, actor_id: str, patch: FolderUpdate) -> Folder:
        """Rename or restyle a folder. Owner only."""
        require_user_id(actor_id, "actor_id")
        if patch.name is not None and not patch.name.strip():
            raise ValidationError("Folder name cannot be empty")

        folder = await self._get_folder(folder_id)
        if folder.owner_id != actor_id:
            raise PermissionDeniedError("Only the folder owner can edit it")

        updated = await self.repos.folders.update(folder_id, patch)
        if not updated:
            raise NotFoundError(f"Folder {folder_id} was deleted")
        return updated

    async def delete_folder(self, folder_id: str, actor_id: str) -> bool:
        """
        Delete a folder. Owner only.

        Steps, in order: detach every note (folder_id -> null), remove the
        folder's grants, remove the folder. Notes are never deleted. Note grants
        materialized from the folder are kept.

        Returns:
            False when the folder was already gone
        """
        require_user_id(actor_id, "actor_id")
        folder = await self.repos.folders.find_by_id(folder_id)
        if not folder:
            return False
        if folder.owner_id != actor_id:
            raise PermissionDeniedError("Only the folder owner can delete it")

        detached = await self.repos.notes.detach_folder(folder_id)
        await self.repos.folder_collaborators.delete_for_folder(folder_id)
        deleted = await self.repos.folders.delete(folder_id)
        logger.info(f"Folder {folder_id} deleted by {actor_id}, {len(detached)} notes detached")
        return deleted
