"""Sharing feature module"""

from notebook.features.sharing.schemas import (
    ShareRequest,
    ShareResult,
    UnshareResponse,
    UpdatePermissionRequest,
)
from notebook.features.sharing.service import SharingService

__all__ = [
    "SharingService",
    "ShareRequest",
    "ShareResult",
    "UnshareResponse",
    "UpdatePermissionRequest",
]
