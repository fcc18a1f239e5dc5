"""Service test fixtures - entity sync over a real local backend + FastAPI test client.

Invariants:
    - Every test gets a fresh store and a fresh tmp_path backend
    - app.state is populated by the fixture (ASGITransport does not run the lifespan)
    - `today` is pinned to 2024-05-15 for every route

Design Decisions:
    - Background tasks run before the httpx response returns, so tests can
      assert persisted state right after the request
"""

from datetime import date
from types import SimpleNamespace
from unittest.mock import AsyncMock

import pytest
from httpx import ASGITransport, AsyncClient

from invoice_desk.api.dependencies import get_today
from invoice_desk.core.entity_store import EntityStore
from invoice_desk.core.errors import LocalStorageError
from invoice_desk.infrastructure.local_storage import build_local_backend
from invoice_desk.main import app
from invoice_desk.services.entity_sync import EntitySync
from invoice_desk.services.invoice_assistant import InvoiceAssistant

TODAY = date(2024, 5, 15)


class FailingRepository:
    """Repository whose every call fails like an unreachable backend."""

    def __init__(self):
        self.calls = []

    async def fetch_all(self):
        self.calls.append(("fetch_all",))
        raise LocalStorageError("disk unavailable", "read")

    async def upsert(self, entity):
        self.calls.append(("upsert", entity.id))
        raise LocalStorageError("disk unavailable", "write")

    async def delete_by_id(self, entity_id):
        self.calls.append(("delete_by_id", entity_id))
        raise LocalStorageError("disk unavailable", "write")

    async def fetch_settings(self):
        raise LocalStorageError("disk unavailable", "read")

    async def save_settings(self, settings):
        raise RuntimeError("unexpected driver failure")


@pytest.fixture
def backend(tmp_path):
    return build_local_backend(tmp_path / "data")


@pytest.fixture
def sync(backend):
    return EntitySync(EntityStore(), backend)


@pytest.fixture
def failing_sync(backend):
    """Sync whose invoice repository and settings always fail."""
    failing = FailingRepository()
    backend.invoices = failing
    backend.settings = failing
    return EntitySync(EntityStore(), backend)


@pytest.fixture
def mock_client():
    """Stands in for ResilientAnthropicClient; configure create_message per test."""
    return SimpleNamespace(create_message=AsyncMock())


@pytest.fixture
async def client(sync):
    """FastAPI test client over the per-test sync and a disabled assistant."""
    app.state.sync = sync
    app.state.assistant = InvoiceAssistant(None, model="test-model")
    app.dependency_overrides[get_today] = lambda: TODAY

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c

    app.dependency_overrides.clear()
