# API module exports
from notebook.api.base import api_router

__all__ = ["api_router"]
