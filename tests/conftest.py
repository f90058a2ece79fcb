"""Pytest configuration and fixtures."""

import os
from typing import AsyncGenerator

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

# Set test environment
os.environ["ENVIRONMENT"] = "test"
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["DEBUG"] = "false"
os.environ.pop("ORIGIN", None)

from rgbreg.api.app import create_app
from rgbreg.config import Settings
from rgbreg.registry.store import RegistrationStore


@pytest.fixture
def database_url(tmp_path) -> str:
    """File-backed SQLite database unique to each test."""
    return f"sqlite+aiosqlite:///{tmp_path / 'registrations.db'}"


@pytest.fixture
def settings(database_url) -> Settings:
    return Settings(_env_file=None, database_url=database_url)


@pytest_asyncio.fixture
async def store(database_url) -> AsyncGenerator[RegistrationStore, None]:
    """Initialized store, closed after the test."""
    store = RegistrationStore(database_url)
    await store.init()
    yield store
    await store.close()


@pytest.fixture
def test_app(settings, store):
    """Application wired to the test store."""
    return create_app(settings, store=store)


@pytest_asyncio.fixture
async def client(test_app) -> AsyncGenerator[AsyncClient, None]:
    """Create async test client."""
    transport = ASGITransport(app=test_app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest.fixture
def valid_payload() -> dict:
    """A submission that passes every validation rule."""
    return {
        "ethAddress": "0x" + "aB3" * 13 + "c",
        "rgbAddress": "bc1qar0srrr7xfkvy5l643lydnw9re59gtzzwf5mdq",
        "signature": "a" * 120,
        "message": "hello",
    }
