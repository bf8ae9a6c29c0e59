"""FastAPI dependencies shared by the feature routers"""
from fastapi import Depends
from supabase import Client  # type: ignore

from notebook.features.notebook_view.service import NotebookViewService
from notebook.features.notes.service import NoteService
from notebook.features.sharing.service import SharingService
from notebook.infra.supabase.client import get_supabase_client


def get_client() -> Client:
    return get_supabase_client()


def get_sharing_service(client: Client = Depends(get_client)) -> SharingService:
    return SharingService(client)


def get_note_service(client: Client = Depends(get_client)) -> NoteService:
    return NoteService(client)


def get_view_service(client: Client = Depends(get_client)) -> NotebookViewService:
    return NotebookViewService(client)
