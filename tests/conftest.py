"""
Contacts API: Test Configuration (conftest.py)
==============================================

What:  Shared pytest fixtures for the test suite.
How:   pytest auto-discovers this file; fixtures are available to every test.

Fixture Overview:
    ├── mock_collection: AsyncMock stand-in for ContactCollection (service tests)
    ├── valid_payload:   A valid ContactInput body (camelCase JSON)
    ├── make_contact:    Factory for in-memory Contact ORM objects
    ├── refused_session_factory: sessions that raise ConnectionRefusedError
    ├── store:           ContactStore connected to a temporary SQLite file
    └── test_client:     HTTPX AsyncClient bound to an app using `store`
"""

import os

# Test settings must be in place before any contacts_api import
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///./test_contacts.db"
os.environ["ENVIRONMENT"] = "test"
os.environ["LOG_LEVEL"] = "WARNING"

import uuid
from datetime import date, datetime, timezone
from unittest.mock import AsyncMock, MagicMock

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport

from contacts_api.database import ContactStore
from contacts_api.models.contact import Contact


@pytest.fixture
def mock_collection():
    """
    A MagicMock whose store operations are AsyncMocks.

    Usage:
        mock_collection.find_by_id.return_value = make_contact()
        await contact_service.get_contact(mock_collection, str(uuid4()))
    """
    collection = MagicMock()
    collection.insert_one = AsyncMock()
    collection.find_all = AsyncMock(return_value=[])
    collection.find_by_id = AsyncMock(return_value=None)
    collection.update_by_id = AsyncMock(return_value=None)
    collection.delete_by_id = AsyncMock(return_value=None)
    return collection


@pytest.fixture
def valid_payload():
    return {
        "firstName": "John",
        "lastName": "Doe",
        "email": "john.doe@example.com",
        "favoriteColor": "Blue",
        "birthday": "1990-05-15",
    }


@pytest.fixture
def make_contact():
    """Factory building a detached Contact with every column populated."""

    def _make(**overrides):
        now = datetime(2024, 1, 15, 12, 0, tzinfo=timezone.utc)
        fields = {
            "id": uuid.uuid4(),
            "first_name": "John",
            "last_name": "Doe",
            "email": "john.doe@example.com",
            "favorite_color": "Blue",
            "birthday": date(1990, 5, 15),
            "created_at": now,
            "updated_at": now,
        }
        fields.update(overrides)
        return Contact(**fields)

    return _make


@pytest.fixture
def refused_session_factory():
    """
    Session factory whose sessions fail like asyncpg on a dropped database:
    every statement raises a bare ConnectionRefusedError (an OSError).

    Usage:
        store.get_collection()._session_factory = refused_session_factory
    """

    class _RefusedSession:
        async def __aenter__(self):
            return self

        async def __aexit__(self, *exc_info):
            return False

        async def _refuse(self, *args, **kwargs):
            raise ConnectionRefusedError(111, "Connection refused")

        scalars = execute = commit = _refuse

        def add(self, instance):
            pass

        async def rollback(self):
            pass

    return _RefusedSession


@pytest_asyncio.fixture
async def store(tmp_path):
    """A connected ContactStore backed by a fresh SQLite file per test."""
    contact_store = ContactStore(
        f"sqlite+aiosqlite:///{tmp_path / 'contacts.db'}",
        create_schema=True,
    )
    await contact_store.connect()
    yield contact_store
    await contact_store.dispose()


@pytest_asyncio.fixture
async def test_client(store):
    """
    HTTPX AsyncClient talking to an app bound to the `store` fixture.

    ASGITransport does not run the lifespan; the store is connected by its
    own fixture instead.
    """
    from contacts_api.main import create_app

    app = create_app(store=store)
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
