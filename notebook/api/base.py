from fastapi import APIRouter
from notebook.api import health
from notebook.features.notebook_view.api import router as notebook_router
from notebook.features.notes.api import router as notes_router
from notebook.features.sharing.api import router as sharing_router

api_router = APIRouter()

# Include all sub-routers
api_router.include_router(health.router)
api_router.include_router(notebook_router)
api_router.include_router(notes_router)
api_router.include_router(sharing_router)
