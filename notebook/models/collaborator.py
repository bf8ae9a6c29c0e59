"""Collaborator grant models for notes and folders"""
from datetime import datetime
from enum import Enum
from typing import Optional
from pydantic import BaseModel, ConfigDict


class Permission(str, Enum):
    """Grant level"""
    VIEW = "view"
    EDIT = "edit"


class NoteCollaboratorBase(BaseModel):
    """Base note grant fields"""
    note_id: str
    user_id: str
    permission: Permission = Permission.VIEW
    invited_by: str


class NoteCollaboratorCreate(NoteCollaboratorBase):
    """Note grant creation model"""
    pass


class NoteCollaboratorUpdate(BaseModel):
    """Note grant update model"""
    permission: Optional[Permission] = None


class NoteCollaborator(NoteCollaboratorBase):
    """Note grant as stored; unique on (note_id, user_id)"""
    model_config = ConfigDict(from_attributes=True)

    id: str
    created_at: Optional[datetime] = None


class FolderCollaboratorBase(BaseModel):
    """Base folder grant fields"""
    folder_id: str
    user_id: str
    permission: Permission = Permission.VIEW
    invited_by: str


class FolderCollaboratorCreate(FolderCollaboratorBase):
    """Folder grant creation model"""
    pass


class FolderCollaboratorUpdate(BaseModel):
    """Folder grant update model"""
    permission: Optional[Permission] = None


class FolderCollaborator(FolderCollaboratorBase):
    """Folder grant as stored; unique on (folder_id, user_id)"""
    model_config = ConfigDict(from_attributes=True)

    id: str
    created_at: Optional[datetime] = None


class Access(str, Enum):
    """Effective access a user has on a note or folder, derived from ownership and grants"""
    OWNER = "owner"
    EDIT = "edit"
    VIEW = "view"

    @classmethod
    def from_permission(cls, permission: Permission) -> "Access":
        return cls.EDIT if permission == Permission.EDIT else cls.VIEW

    @property
    def can_edit(self) -> bool:
        return self in (Access.OWNER, Access.EDIT)
