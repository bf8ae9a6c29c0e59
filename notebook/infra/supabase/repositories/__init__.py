"""Repository factory and exports"""
from supabase import Client
from .notes import NoteRepository
from .folders import FolderRepository
from .collaborators import NoteCollaboratorRepository, FolderCollaboratorRepository
from .profiles import UserProfileRepository


class RepositoryFactory:
    """Factory for creating repository instances"""
    
    def __init__(self, client: Client):
        self._client = client
        self._notes: NoteRepository = None
        self._folders: FolderRepository = None
        self._note_collaborators: NoteCollaboratorRepository = None
        self._folder_collaborators: FolderCollaboratorRepository = None
        self._profiles: UserProfileRepository = None
    
    @property
    def notes(self) -> NoteRepository:
        """Get notes repository"""
        if self._notes is None:
            self._notes = NoteRepository(self._client)
        return self._notes
    
    @property
    def folders(self) -> FolderRepository:
        """Get folders repository"""
        if self._folders is None:
            self._folders = FolderRepository(self._client)
        return self._folders
    
    @property
    def note_collaborators(self) -> NoteCollaboratorRepository:
        """Get note collaborator repository"""
        if self._note_collaborators is None:
            self._note_collaborators = NoteCollaboratorRepository(self._client)
        return self._note_collaborators
    
    @property
    def folder_collaborators(self) -> FolderCollaboratorRepository:
        """Get folder collaborator repository"""
        if self._folder_collaborators is None:
            self._folder_collaborators = FolderCollaboratorRepository(self._client)
        return self._folder_collaborators
    
    @property
    def profiles(self) -> UserProfileRepository:
        """Get user profile repository"""
        if self._profiles is None:
            self._profiles = UserProfileRepository(self._client)
        return self._profiles


__all__ = [
    'RepositoryFactory',
    'NoteRepository',
    'FolderRepository',
    'NoteCollaboratorRepository',
    'FolderCollaboratorRepository',
    'UserProfileRepository',
]
