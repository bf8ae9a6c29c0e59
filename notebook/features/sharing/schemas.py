"""Request and response schemas for the sharing feature"""

from typing import List, Optional, Union

from pydantic import BaseModel, model_validator

from notebook.models.collaborator import FolderCollaborator, NoteCollaborator, Permission


class ShareRequest(BaseModel):
    """Grant access to a user, identified either by id or by email"""
    user_id: Optional[str] = None
    email: Optional[str] = None
    permission: Permission = Permission.VIEW

    @model_validator(mode="after")
    def check_target(self) -> "ShareRequest":
        if not self.user_id and not self.email:
            raise ValueError("Either user_id or email is required")
        return self


class UpdatePermissionRequest(BaseModel):
    """Change the level of an existing grant"""
    permission: Permission


class ShareResult(BaseModel):
    """
    Outcome of a share operation.

    The grant row is always written when this is returned. If a later step
    (per-note materialization) failed, failed_step names it and warnings
    describe it. Repeating the share writes whatever is still missing.
    """
    grant: Union[FolderCollaborator, NoteCollaborator]
    materialized_count: int = 0
    warnings: List[str] = []
    failed_step: Optional[str] = None

    @property
    def partial(self) -> bool:
        return self.failed_step is not None


class UnshareResponse(BaseModel):
    """Response model for removing a grant"""
    removed: bool
    message: str
