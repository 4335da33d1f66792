"""
Notes API — Test Configuration (conftest.py)
=============================================

What:  Shared pytest fixtures for the entire test suite.
How:   pytest auto-discovers conftest.py and makes fixtures available to all tests.

Fixture Hierarchy (all function-scoped):
    ├── data_file: Path of a notes file inside pytest's tmp_path
    ├── persistence: JsonFilePersistence bound to data_file
    ├── store: NoteStore backed by persistence
    ├── client_factory: Builds a loaded app + HTTPX client for a data file
    └── test_client: HTTPX AsyncClient on a fresh app using data_file
"""

import os
import tempfile
from contextlib import asynccontextmanager

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport

# Override settings for testing BEFORE any app imports
# notes_api.main builds a module-level app from the environment on import
os.environ["DATA_FILE"] = os.path.join(
    tempfile.mkdtemp(prefix="notes_api_test_"), "notes.json"
)
os.environ["LOG_LEVEL"] = "WARNING"

from notes_api.config import Settings  # noqa: E402
from notes_api.services.note_store import NoteStore  # noqa: E402
from notes_api.services.persistence import JsonFilePersistence  # noqa: E402


@pytest.fixture
def data_file(tmp_path):
    """A notes file path that does not exist yet (first run)."""
    return tmp_path / "notes.json"


@pytest.fixture
def persistence(data_file):
    return JsonFilePersistence(str(data_file))


@pytest.fixture
def store(persistence):
    """A NoteStore mirrored to data_file. Not loaded; tests call load() when needed."""
    return NoteStore(persistence)


@pytest.fixture
def client_factory():
    """
    Provides an async context manager building a client for a given data file.

    What:    Creates a fresh app, loads its store, yields an AsyncClient.
    Why:     ASGITransport does not run the lifespan, so the load that
             normally happens at startup is done here. Calling it twice on
             the same file simulates a process restart.

    Usage:
        async with client_factory(data_file) as client:
            response = await client.get("/notes")
    """
    from notes_api.main import create_app

    @asynccontextmanager
    async def _open(path):
        app = create_app(Settings(data_file=str(path), log_level="WARNING"))
        await app.state.note_store.load()
        transport = ASGITransport(app=app)
        async with AsyncClient(transport=transport, base_url="http://test") as client:
            yield client

    return _open


@pytest_asyncio.fixture
async def test_client(client_factory, data_file):
    """
    Provides an async HTTP test client for endpoint testing.

    Usage:
        async def test_list(test_client):
            response = await test_client.get("/notes")
            assert response.status_code == 200
    """
    async with client_factory(data_file) as client:
        yield client
