"""
Contacts API: Contact Store Gateway Tests
=========================================

What:  Tests for ContactStore lifecycle and ContactCollection operations.
How:   Runs against a real temporary SQLite database (sqlite+aiosqlite).
"""

import uuid
from datetime import date, datetime, timezone

import pytest
from sqlalchemy.dialects import postgresql
from sqlalchemy.schema import CreateTable

from contacts_api.database import ContactStore
from contacts_api.exceptions import (
    StoreConnectionError,
    StoreOperationError,
    StoreUnavailableError,
)
from contacts_api.models.base import Base
from contacts_api.models.contact import Contact


def _values(first_name: str = "John", **overrides) -> dict:
    now = datetime.now(timezone.utc)
    values = {
        "first_name": first_name,
        "last_name": "Doe",
        "email": f"{first_name.lower()}@example.com",
        "favorite_color": "Blue",
        "birthday": date(1990, 5, 15),
        "created_at": now,
        "updated_at": now,
    }
    values.update(overrides)
    return values


class TestContactStoreLifecycle:

    def test_collection_unavailable_before_connect(self, tmp_path):
        store = ContactStore(f"sqlite+aiosqlite:///{tmp_path / 'c.db'}")
        assert store.is_connected is False
        with pytest.raises(StoreUnavailableError):
            store.get_collection()

    @pytest.mark.asyncio
    async def test_connect_and_dispose(self, tmp_path):
        store = ContactStore(f"sqlite+aiosqlite:///{tmp_path / 'c.db'}", create_schema=True)
        await store.connect()
        assert store.is_connected is True
        assert await store.ping() is True

        await store.dispose()
        assert store.is_connected is False
        assert await store.ping() is False
        with pytest.raises(StoreUnavailableError):
            store.get_collection()

    @pytest.mark.asyncio
    async def test_connect_is_idempotent(self, store):
        collection = store.get_collection()
        await store.connect()
        assert store.get_collection() is collection

    @pytest.mark.asyncio
    async def test_connect_unreachable_database_raises(self, tmp_path):
        store = ContactStore(f"sqlite+aiosqlite:///{tmp_path / 'missing' / 'dir' / 'c.db'}")
        with pytest.raises(StoreConnectionError):
            await store.connect()
        assert store.is_connected is False

    @pytest.mark.asyncio
    async def test_connect_invalid_url_raises(self):
        store = ContactStore("definitely not a url")
        with pytest.raises(StoreConnectionError):
            await store.connect()
        assert store.safe_url == "<invalid database url>"

    def test_safe_url_masks_password(self):
        store = ContactStore("postgresql+asyncpg://user:s3cret@db:5432/contacts")
        assert "s3cret" not in store.safe_url
        assert "db:5432/contacts" in store.safe_url

    def test_sqlite_urls_skip_pool_sizing(self):
        sqlite_store = ContactStore("sqlite+aiosqlite:///x.db", pool_size=7)
        pg_store = ContactStore("postgresql+asyncpg://u:p@h/db", pool_size=7)
        assert "pool_size" not in sqlite_store._engine_options()
        assert pg_store._engine_options()["pool_size"] == 7


class TestContactCollection:

    @pytest.mark.asyncio
    async def test_insert_assigns_id(self, store):
        collection = store.get_collection()
        contact = await collection.insert_one(_values())

        assert isinstance(contact.id, uuid.UUID)
        found = await collection.find_by_id(contact.id)
        assert found is not None
        assert found.email == "john@example.com"
        assert found.birthday == date(1990, 5, 15)

    @pytest.mark.asyncio
    async def test_find_all_in_insertion_order(self, store):
        collection = store.get_collection()
        assert await collection.find_all() == []

        names = ["Zed", "Amy", "Max"]
        for name in names:
            await collection.insert_one(_values(name))

        assert [c.first_name for c in await collection.find_all()] == names

    @pytest.mark.asyncio
    async def test_find_by_unknown_id(self, store):
        assert await store.get_collection().find_by_id(uuid.uuid4()) is None

    @pytest.mark.asyncio
    async def test_update_by_id(self, store):
        collection = store.get_collection()
        contact = await collection.insert_one(_values())

        row = await collection.update_by_id(
            contact.id, {"first_name": "Jane", "favorite_color": "Green"}
        )

        assert row.first_name == "Jane"
        assert row.id == contact.id
        found = await collection.find_by_id(contact.id)
        assert found.favorite_color == "Green"
        assert found.last_name == "Doe"

    @pytest.mark.asyncio
    async def test_update_unknown_id(self, store):
        row = await store.get_collection().update_by_id(uuid.uuid4(), {"first_name": "Jane"})
        assert row is None

    @pytest.mark.asyncio
    async def test_delete_by_id(self, store):
        collection = store.get_collection()
        contact = await collection.insert_one(_values())

        row = await collection.delete_by_id(contact.id)

        assert (row.first_name, row.last_name) == ("John", "Doe")
        assert await collection.find_by_id(contact.id) is None
        assert await collection.delete_by_id(contact.id) is None

    @pytest.mark.asyncio
    async def test_store_errors_are_wrapped(self, store):
        async with store.engine.begin() as conn:
            await conn.run_sync(Base.metadata.drop_all)

        with pytest.raises(StoreOperationError) as exc_info:
            await store.get_collection().find_all()
        assert exc_info.value.operation == "find_all"
        assert exc_info.value.reason

    @pytest.mark.asyncio
    async def test_refused_connection_is_wrapped(self, store, refused_session_factory):
        collection = store.get_collection()
        collection._session_factory = refused_session_factory

        with pytest.raises(StoreOperationError) as exc_info:
            await collection.find_all()
        assert exc_info.value.operation == "find_all"
        assert "Connection refused" in exc_info.value.reason

        with pytest.raises(StoreOperationError):
            await collection.insert_one(_values())

    @pytest.mark.asyncio
    async def test_long_color_and_email_are_stored(self, store):
        color = "Blue" * 30
        email = f"{'x' * 320}@example.com"
        contact = await store.get_collection().insert_one(
            _values(favorite_color=color, email=email)
        )

        found = await store.get_collection().find_by_id(contact.id)
        assert found.favorite_color == color
        assert found.email == email


class TestContactTableSchema:

    def test_only_names_are_length_bounded(self):
        ddl = str(CreateTable(Contact.__table__).compile(dialect=postgresql.dialect()))

        assert "first_name VARCHAR(50)" in ddl
        assert "last_name VARCHAR(50)" in ddl
        assert "favorite_color VARCHAR NOT NULL" in ddl
        assert "email VARCHAR NOT NULL" in ddl
