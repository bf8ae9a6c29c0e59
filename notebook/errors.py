"""Error taxonomy shared by the sharing, notes and view features"""
from typing import Optional


class NotebookError(Exception):
    """Base class for all notebook errors"""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(NotebookError):
    """Empty or self-referential input, rejected before any write"""


class PermissionDeniedError(NotebookError):
    """Caller is not allowed to perform the operation, rejected before any write"""


class DuplicateError(NotebookError):
    """
    Grant already exists. Informational: the operation is already satisfied.

    materialized_count is the number of missing per-note grants written while
    re-checking an existing folder share.
    """

    def __init__(self, message: str, materialized_count: int = 0):
        super().__init__(message)
        self.materialized_count = materialized_count


class NotFoundError(NotebookError):
    """Target note, folder or user does not exist (or vanished mid-operation)"""


class StoreError(NotebookError):
    """Transient I/O failure from the relational store"""

    def __init__(self, message: str, step: Optional[str] = None):
        super().__init__(message)
        self.step = step

    def __str__(self) -> str:
        if self.step:
            return f"{self.message} (step: {self.step})"
        return self.message
