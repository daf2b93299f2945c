"""Pytest configuration and fixtures for ca-admin.

Every test runs against the in-memory document store; HTTP tests use the
FastAPI app through httpx's ASGI transport. STORE_BACKEND is forced to
memory before the app module is imported so no Firebase credentials are
needed.
"""

import os

os.environ["STORE_BACKEND"] = "memory"

import pytest  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402

from ca_admin.core.config import get_settings  # noqa: E402

get_settings.cache_clear()

from ca_admin.infrastructure.firebase.references import ReferenceBuilder  # noqa: E402
from ca_admin.infrastructure.memory import InMemoryDocumentStore  # noqa: E402
from ca_admin.main import create_app  # noqa: E402

TENANT = "a.b@x.com"
CONTACT = "9876543210"


@pytest.fixture
def store() -> InMemoryDocumentStore:
    return InMemoryDocumentStore()


@pytest.fixture
def refs() -> ReferenceBuilder:
    return ReferenceBuilder()


@pytest.fixture
def app(store: InMemoryDocumentStore):
    """Fresh app whose routes use the test's in-memory store."""
    application = create_app()
    application.state.document_store = store
    return application


@pytest.fixture
async def client(app) -> AsyncClient:
    """Async HTTP client against the FastAPI app (ASGI)."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest.fixture
def tenant_headers() -> dict[str, str]:
    return {"X-Tenant-Email": TENANT}
