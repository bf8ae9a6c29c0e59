"""Business logic for note- and folder-level sharing"""

import logging
from typing import Dict, Iterable, List, Optional

from supabase import Client  # type: ignore

from notebook.errors import (
    DuplicateError,
    NotFoundError,
    PermissionDeniedError,
    StoreError,
    ValidationError,
)
from notebook.infra.supabase.repositories import RepositoryFactory
from notebook.models.collaborator import (
    Access,
    FolderCollaborator,
    FolderCollaboratorCreate,
    FolderCollaboratorUpdate,
    NoteCollaborator,
    NoteCollaboratorCreate,
    NoteCollaboratorUpdate,
    Permission,
)
from notebook.models.folder import Folder
from notebook.models.note import Note
from notebook.features.sharing.schemas import ShareResult

logger = logging.getLogger(__name__)


def require_user_id(user_id: Optional[str], field: str = "user_id") -> str:
    """Reject a missing or blank user id before any store access"""
    if not user_id or not str(user_id).strip():
        raise ValidationError(f"{field} is required")
    return user_id


class SharingService:
    """Service layer for the sharing graph: grants, materialization and access checks"""

    def __init__(self, client: Client):
        self.repos = RepositoryFactory(client)

    # ------------------------------------------------------------------
    # Lookups
    # ------------------------------------------------------------------

    async def _get_folder(self, folder_id: str) -> Folder:
        folder = await self.repos.folders.find_by_id(folder_id)
        if not folder:
            raise NotFoundError(f"Folder {folder_id} not found")
        return folder

    async def _get_note(self, note_id: str) -> Note:
        note = await self.repos.notes.find_by_id(note_id)
        if not note:
            raise NotFoundError(f"Note {note_id} not found")
        return note

    async def _require_profile(self, user_id: str) -> None:
        if not await self.repos.profiles.find_by_id(user_id):
            raise NotFoundError(f"User {user_id} not found")

    async def _resolve_email(self, email: str) -> str:
        if not email or not email.strip():
            raise ValidationError("email is required")
        profile = await self.repos.profiles.find_by_email(email)
        if not profile:
            raise NotFoundError(f"No user with email {email}")
        return profile.id

    async def note_access(self, note: Note, user_id: Optional[str]) -> Optional[Access]:
        """
        Effective access of a user on a note.

        Owner wins; otherwise the strongest of the direct grant and the grant on
        the note's folder. None means the note is not visible to the user.
        """
        if not user_id:
            return None
        if note.owner_id == user_id:
            return Access.OWNER

        permissions: List[Permission] = []
        direct = await self.repos.note_collaborators.find_pair(note.id, user_id)
        if direct:
            permissions.append(direct.permission)
        if note.folder_id:
            via_folder = await self.repos.folder_collaborators.find_pair(note.folder_id, user_id)
            if via_folder:
                permissions.append(via_folder.permission)

        if not permissions:
            return None
        if Permission.EDIT in permissions:
            return Access.EDIT
        return Access.VIEW

    async def folder_access(self, folder: Folder, user_id: Optional[str]) -> Optional[Access]:
        """Effective access of a user on a folder"""
        if not user_id:
            return None
        if folder.owner_id == user_id:
            return Access.OWNER
        grant = await self.repos.folder_collaborators.find_pair(folder.id, user_id)
        if not grant:
            return None
        return Access.from_permission(grant.permission)

    # ------------------------------------------------------------------
    # Materialization
    # ------------------------------------------------------------------

    async def materialize_note_grants(
        self,
        note_ids: Iterable[str],
        targets: Dict[str, Permission],
        invited_by: str,
    ) -> int:
        """
        Insert one note grant per (note, target user) pair that does not have one yet.

        Existing rows are never overwritten; the bulk insert also ignores
        conflicts so concurrent calls cannot produce duplicates.

        Returns:
            Number of rows written
        """
        note_ids = list(dict.fromkeys(note_ids))
        if not note_ids or not targets:
            return 0

        rows: List[NoteCollaboratorCreate] = []
        for user_id, permission in targets.items():
            already = await self.repos.note_collaborators.find_noted_ids_for_user(note_ids, user_id)
            rows.extend(
                NoteCollaboratorCreate(
                    note_id=note_id,
                    user_id=user_id,
                    permission=permission,
                    invited_by=invited_by,
                )
                for note_id in note_ids
                if note_id not in already
            )

        if not rows:
            return 0

        created = await self.repos.note_collaborators.create_many(rows)
        return len(created)

    # ------------------------------------------------------------------
    # Folder grants
    # ------------------------------------------------------------------

    async def _materialize_folder_share(
        self,
        folder_id: str,
        target_user_id: str,
        permission: Permission,
        granter_id: str,
    ) -> int:
        """Copy one folder grant onto every note in the folder that target_user_id does not own"""
        notes = await self.repos.notes.find_by_folder(folder_id)
        return await self.materialize_note_grants(
            (note.id for note in notes if note.owner_id != target_user_id),
            {target_user_id: permission},
            invited_by=granter_id,
        )

    async def share_folder(
        self,
        folder_id: str,
        granter_id: str,
        target_user_id: str,
        permission: Permission = Permission.VIEW,
    ) -> ShareResult:
        """
        Share a folder, and every note currently in it, with another user.

        Business rules:
        - Only the folder owner may share it
        - A user cannot share with themself
        - Every note in the folder gets a note grant with the same permission,
          except notes the target owns (the granter is the folder owner)
        - Sharing again reports DuplicateError, after writing any per-note
          grants an earlier partial share left out (at the stored permission).
          Repeating a partial share therefore completes it.

        Raises:
            ValidationError, PermissionDeniedError, NotFoundError, DuplicateError,
            StoreError (the folder grant itself could not be written)
        """
        require_user_id(granter_id, "granter_id")
        require_user_id(target_user_id, "target_user_id")
        if target_user_id == granter_id:
            raise ValidationError("You cannot share a folder with yourself")

        folder = await self._get_folder(folder_id)
        if folder.owner_id != granter_id:
            raise PermissionDeniedError("Only the folder owner can share it")
        await self._require_profile(target_user_id)

        existing = await self.repos.folder_collaborators.find_pair(folder_id, target_user_id)
        if existing:
            count = await self._materialize_folder_share(
                folder_id, target_user_id, existing.permission, granter_id
            )
            if count:
                logger.info(f"Completed {count} missing note grants for folder {folder_id}")
            raise DuplicateError("Folder is already shared with this user", materialized_count=count)

        grant = await self.repos.folder_collaborators.create(
            FolderCollaboratorCreate(
                folder_id=folder_id,
                user_id=target_user_id,
                permission=permission,
                invited_by=granter_id,
            )
        )
        logger.info(f"Folder {folder_id} shared with {target_user_id} ({permission.value})")

        try:
            count = await self._materialize_folder_share(folder_id, target_user_id, permission, granter_id)
        except StoreError as e:
            logger.warning(
                f"Folder {folder_id} shared with {target_user_id} but note grants failed: {e}"
            )
            return ShareResult(
                grant=grant,
                warnings=[
                    f"Folder shared, but per-note access could not be written: {e.message}. "
                    "Share the folder again to finish."
                ],
                failed_step=e.step or "materialize note grants",
            )

        if count:
            logger.info(f"Materialized {count} note grants for folder {folder_id}")
        return ShareResult(grant=grant, materialized_count=count)

    async def share_folder_by_email(
        self,
        folder_id: str,
        granter_id: str,
        email: str,
        permission: Permission = Permission.VIEW,
    ) -> ShareResult:
        """Share a folder with the user registered under email"""
        target_user_id = await self._resolve_email(email)
        return await self.share_folder(folder_id, granter_id, target_user_id, permission)

    async def unshare_folder(self, folder_id: str, actor_id: str, target_user_id: str) -> bool:
        """
        Remove a folder grant. Allowed for the folder owner, or for the
        recipient leaving the folder.

        Note grants materialized while the folder was shared are kept.

        Returns:
            False when there was no grant to remove
        """
        require_user_id(actor_id, "actor_id")
        folder = await self._get_folder(folder_id)
        if actor_id not in (folder.owner_id, target_user_id):
            raise PermissionDeniedError("Only the folder owner can remove collaborators")

        removed = await self.repos.folder_collaborators.delete_pair(folder_id, target_user_id)
        if removed:
            logger.info(f"Folder {folder_id} unshared from {target_user_id} by {actor_id}")
        return removed

    async def update_folder_permission(
        self,
        folder_id: str,
        actor_id: str,
        target_user_id: str,
        permission: Permission,
    ) -> FolderCollaborator:
        """Change the level of a folder grant. Materialized note grants are left as they are."""
        require_user_id(actor_id, "actor_id")
        folder = await self._get_folder(folder_id)
        if folder.owner_id != actor_id:
            raise PermissionDeniedError("Only the folder owner can change permissions")

        grant = await self.repos.folder_collaborators.find_pair(folder_id, target_user_id)
        if not grant:
            raise NotFoundError("Folder is not shared with this user")

        updated = await self.repos.folder_collaborators.update(
            grant.id, FolderCollaboratorUpdate(permission=permission)
        )
        if not updated:
            raise NotFoundError("Folder grant was removed")
        return updated

    async def list_folder_collaborators(self, folder_id: str, actor_id: str) -> List[FolderCollaborator]:
        """Grants on a folder, visible to its owner and collaborators"""
        folder = await self._get_folder(folder_id)
        if not await self.folder_access(folder, actor_id):
            raise PermissionDeniedError("You do not have access to this folder")
        return await self.repos.folder_collaborators.find_for_folder(folder_id)

    # ------------------------------------------------------------------
    # Note grants
    # ------------------------------------------------------------------

    async def share_note(
        self,
        note_id: str,
        granter_id: str,
        target_user_id: str,
        permission: Permission = Permission.VIEW,
    ) -> ShareResult:
        """
        Share a single note with another user.

        Ownership is checked against the note as currently stored.

        Raises:
            ValidationError, PermissionDeniedError, NotFoundError, DuplicateError, StoreError
        """
        require_user_id(granter_id, "granter_id")
        require_user_id(target_user_id, "target_user_id")
        if target_user_id == granter_id:
            raise ValidationError("You cannot share a note with yourself")

        note = await self._get_note(note_id)
        if note.owner_id != granter_id:
            raise PermissionDeniedError("Only the note owner can share it")
        await self._require_profile(target_user_id)

        if await self.repos.note_collaborators.find_pair(note_id, target_user_id):
            raise DuplicateError("Note is already shared with this user")

        grant = await self.repos.note_collaborators.create(
            NoteCollaboratorCreate(
                note_id=note_id,
                user_id=target_user_id,
                permission=permission,
                invited_by=granter_id,
            )
        )
        logger.info(f"Note {note_id} shared with {target_user_id} ({permission.value})")
        return ShareResult(grant=grant)

    async def share_note_by_email(
        self,
        note_id: str,
        granter_id: str,
        email: str,
        permission: Permission = Permission.VIEW,
    ) -> ShareResult:
        """Share a note with the user registered under email"""
        target_user_id = await self._resolve_email(email)
        return await self.share_note(note_id, granter_id, target_user_id, permission)

    async def unshare_note(self, note_id: str, actor_id: str, target_user_id: str) -> bool:
        """Remove a note grant (owner, or the recipient leaving). Absent grant is a no-op."""
        require_user_id(actor_id, "actor_id")
        note = await self._get_note(note_id)
        if actor_id not in (note.owner_id, target_user_id):
            raise PermissionDeniedError("Only the note owner can remove collaborators")

        removed = await self.repos.note_collaborators.delete_pair(note_id, target_user_id)
        if removed:
            logger.info(f"Note {note_id} unshared from {target_user_id} by {actor_id}")
        return removed

    async def update_note_permission(
        self,
        note_id: str,
        actor_id: str,
        target_user_id: str,
        permission: Permission,
    ) -> NoteCollaborator:
        """Change the level of a note grant"""
        require_user_id(actor_id, "actor_id")
        note = await self._get_note(note_id)
        if note.owner_id != actor_id:
            raise PermissionDeniedError("Only the note owner can change permissions")

        grant = await self.repos.note_collaborators.find_pair(note_id, target_user_id)
        if not grant:
            raise NotFoundError("Note is not shared with this user")

        updated = await self.repos.note_collaborators.update(
            grant.id, NoteCollaboratorUpdate(permission=permission)
        )
        if not updated:
            raise NotFoundError("Note grant was removed")
        return updated

    async def list_note_collaborators(self, note_id: str, actor_id: str) -> List[NoteCollaborator]:
        """Grants on a note, visible to its owner and collaborators"""
        note = await self._get_note(note_id)
        if not await self.note_access(note, actor_id):
            raise PermissionDeniedError("You do not have access to this note")
        return await self.repos.note_collaborators.find_for_note(note_id)
