"""
Pytest configuration and fixtures for notebook tests.

This module provides:
- An in-memory Supabase double shared by services under test
- Seeded user profiles
- Service fixtures wired to the double
- An HTTP client for API tests with auth replaced by a bearer-token = user-id shim
- A virtual clock for debounce timing
"""

from collections.abc import AsyncGenerator
from typing import Optional

import pytest
from fastapi import Header, HTTPException
from httpx import ASGITransport, AsyncClient

from notebook.api.deps import get_client
from notebook.features.notebook_view.service import NotebookViewService
from notebook.features.notes.service import NoteService
from notebook.features.sharing.service import SharingService
from notebook.main import app
from notebook.middleware.auth import get_current_user_id, get_current_user_id_optional
from tests.factories import ALICE, BOB, CAROL
from tests.fakes import FakeSupabase, VirtualClock


@pytest.fixture
def db() -> FakeSupabase:
    """Fresh in-memory store with three profiles"""
    fake = FakeSupabase()
    fake.seed("profiles", id=ALICE, email="alice@example.com", user_name="Alice")
    fake.seed("profiles", id=BOB, email="bob@example.com", user_name="Bob")
    fake.seed("profiles", id=CAROL, email="carol@example.com", user_name="Carol")
    return fake


@pytest.fixture
def sharing(db: FakeSupabase) -> SharingService:
    return SharingService(db)


@pytest.fixture
def notes(db: FakeSupabase, sharing: SharingService) -> NoteService:
    return NoteService(db, sharing)


@pytest.fixture
def view(db: FakeSupabase) -> NotebookViewService:
    return NotebookViewService(db)


async def _user_from_bearer(authorization: Optional[str] = Header(None)) -> str:
    if not authorization:
        raise HTTPException(status_code=401, detail="Authorization header missing")
    return authorization.split(" ", 1)[1]


async def _optional_user_from_bearer(authorization: Optional[str] = Header(None)) -> Optional[str]:
    if not authorization:
        return None
    return authorization.split(" ", 1)[1]


@pytest.fixture
async def client(db: FakeSupabase) -> AsyncGenerator[AsyncClient, None]:
    """
    Async HTTP client against the FastAPI app.

    The store is the in-memory double and the bearer token is taken as the user id.
    """
    app.dependency_overrides[get_client] = lambda: db
    app.dependency_overrides[get_current_user_id] = _user_from_bearer
    app.dependency_overrides[get_current_user_id_optional] = _optional_user_from_bearer

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test"
    ) as test_client:
        yield test_client

    app.dependency_overrides.clear()


@pytest.fixture
def clock() -> VirtualClock:
    return VirtualClock()
