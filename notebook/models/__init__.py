"""Domain models for the notebook"""
from .note import Note, NoteCreate, NoteUpdate
from .folder import Folder, FolderCreate, FolderUpdate
from .collaborator import (
    Access,
    Permission,
    NoteCollaborator,
    NoteCollaboratorCreate,
    NoteCollaboratorUpdate,
    FolderCollaborator,
    FolderCollaboratorCreate,
    FolderCollaboratorUpdate,
)
from .user import UserProfile, UserProfileCreate, UserProfileUpdate

__all__ = [
    'Note', 'NoteCreate', 'NoteUpdate',
    'Folder', 'FolderCreate', 'FolderUpdate',
    'Access', 'Permission',
    'NoteCollaborator', 'NoteCollaboratorCreate', 'NoteCollaboratorUpdate',
    'FolderCollaborator', 'FolderCollaboratorCreate', 'FolderCollaboratorUpdate',
    'UserProfile', 'UserProfileCreate', 'UserProfileUpdate',
]
