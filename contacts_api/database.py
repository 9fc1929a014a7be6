"""
Contacts API: Contact Store Gateway
===================================

What:  Owns the single async SQLAlchemy engine and exposes a collection handle
       for contact records.
How:   `ContactStore` is constructed explicitly (no connection at import time),
       connected once by the application lifespan, and injected into routes.
       `ContactCollection` wraps each store call in its own session.
Who:   Created by `contacts_api.main.create_app()`; used by ContactService
       through the collection handle.
When:  `connect()` at startup, `get_collection()` per request, `dispose()` at
       shutdown.

Lifecycle:
    ContactStore(url)  ──connect()──▶  connected  ──dispose()──▶  disconnected
         │                                 │
         └── get_collection() raises       └── get_collection() returns handle
             StoreUnavailableError

    A failed `connect()` raises StoreConnectionError. The lifespan does not
    catch it, so uvicorn aborts startup and the process exits.

Connection Pooling:
    pool_size / max_overflow / pool_pre_ping come from settings for network
    databases. SQLite URLs (used by the test-suite) keep the driver's default
    pool, which does not accept sizing arguments.
"""

import logging
import uuid
from contextlib import asynccontextmanager
from typing import Any, AsyncGenerator, Dict, List, Optional

from fastapi import Depends, Request
from sqlalchemy import delete, select, text, update
from sqlalchemy.engine import Row, make_url
from sqlalchemy.exc import ArgumentError, SQLAlchemyError
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from contacts_api.config import settings
from contacts_api.exceptions import (
    StoreConnectionError,
    StoreOperationError,
    StoreUnavailableError,
)
from contacts_api.models.base import Base
from contacts_api.models.contact import Contact

logger = logging.getLogger(__name__)

contacts_table = Contact.__table__


class ContactCollection:
    """
    Handle to the `contacts` table.

    Every method is one store round trip in its own session: commit on
    success, rollback on failure. SQLAlchemy and connection (OSError) errors
    are wrapped into StoreOperationError and never retried.
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self._session_factory = session_factory

    @asynccontextmanager
    async def _session(self, operation: str) -> AsyncGenerator[AsyncSession, None]:
        async with self._session_factory() as session:
            try:
                yield session
                await session.commit()
            # asyncpg raises bare OSError for refused or dropped connections
            except (SQLAlchemyError, OSError) as e:
                await session.rollback()
                logger.error("Store operation '%s' failed: %s", operation, str(e))
                raise StoreOperationError(operation=operation, reason=str(e)) from e

    async def insert_one(self, values: Dict[str, Any]) -> Contact:
        """Insert a contact; the store assigns `id` and `seq`."""
        contact = Contact(**values)
        async with self._session("insert_one") as session:
            session.add(contact)
        return contact

    async def find_all(self) -> List[Contact]:
        """All contacts in insertion order."""
        async with self._session("find_all") as session:
            result = await session.scalars(select(Contact).order_by(Contact.seq))
            return list(result.all())

    async def find_by_id(self, contact_id: uuid.UUID) -> Optional[Contact]:
        async with self._session("find_by_id") as session:
            result = await session.scalars(select(Contact).where(Contact.id == contact_id))
            return result.one_or_none()

    async def update_by_id(
        self, contact_id: uuid.UUID, values: Dict[str, Any]
    ) -> Optional[Row]:
        """
        Replace the given columns on one contact.

        Returns the updated row (all columns), or None when no row matched.
        """
        stmt = (
            update(contacts_table)
            .where(contacts_table.c.id == contact_id)
            .values(**values)
            .returning(*contacts_table.c)
        )
        async with self._session("update_by_id") as session:
            result = await session.execute(stmt)
            return result.first()

    async def delete_by_id(self, contact_id: uuid.UUID) -> Optional[Row]:
        """Delete one contact; returns its id and names, or None when no row matched."""
        stmt = (
            delete(contacts_table)
            .where(contacts_table.c.id == contact_id)
            .returning(
                contacts_table.c.id,
                contacts_table.c.first_name,
                contacts_table.c.last_name,
            )
        )
        async with self._session("delete_by_id") as session:
            result = await session.execute(stmt)
            return result.first()


class ContactStore:
    """
    Gateway owning the connection pool to the contact store.

    Args:
        database_url:   Async SQLAlchemy URL
        pool_size:      Persistent connections (network databases only)
        max_overflow:   Extra connections for spikes (network databases only)
        pool_pre_ping:  Validate pooled connections before use
        create_schema:  Create missing tables during connect()
        echo:           Log emitted SQL
    """

    def __init__(
        self,
        database_url: str,
        *,
        pool_size: int = 20,
        max_overflow: int = 10,
        pool_pre_ping: bool = True,
        create_schema: bool = False,
        echo: bool = False,
    ):
        self.database_url = database_url
        self.pool_size = pool_size
        self.max_overflow = max_overflow
        self.pool_pre_ping = pool_pre_ping
        self.create_schema = create_schema
        self.echo = echo

        self._engine: Optional[AsyncEngine] = None
        self._collection: Optional[ContactCollection] = None

    @classmethod
    def from_settings(cls) -> "ContactStore":
        return cls(
            settings.database_url,
            pool_size=settings.db_pool_size,
            max_overflow=settings.db_max_overflow,
            pool_pre_ping=settings.db_pool_pre_ping,
            create_schema=settings.db_create_schema,
            echo=settings.log_level == "DEBUG",
        )

    @property
    def is_connected(self) -> bool:
        return self._collection is not None

    @property
    def engine(self) -> AsyncEngine:
        if self._engine is None:
            raise StoreUnavailableError(context={"reason": "not connected"})
        return self._engine

    @property
    def safe_url(self) -> str:
        """The database URL with the password masked, for log output."""
        try:
            return make_url(self.database_url).render_as_string(hide_password=True)
        except ArgumentError:
            return "<invalid database url>"

    def _engine_options(self) -> Dict[str, Any]:
        options: Dict[str, Any] = {"echo": self.echo}
        if not self.database_url.startswith("sqlite"):
            options.update(
                pool_size=self.pool_size,
                max_overflow=self.max_overflow,
                pool_pre_ping=self.pool_pre_ping,
                pool_recycle=3600,
            )
        return options

    async def connect(self) -> None:
        """
        Establish and verify the connection, optionally creating the schema.

        Raises:
            StoreConnectionError: the URL is invalid, the driver is missing,
                or the database rejected the connection.
        """
        if self.is_connected:
            return

        engine: Optional[AsyncEngine] = None
        try:
            engine = create_async_engine(self.database_url, **self._engine_options())
            async with engine.begin() as conn:
                await conn.execute(text("SELECT 1"))
                if self.create_schema:
                    await conn.run_sync(Base.metadata.create_all)
        except (SQLAlchemyError, OSError, ImportError) as e:
            logger.error("Error connecting to contact store %s: %s", self.safe_url, str(e))
            if engine is not None:
                await engine.dispose()
            raise StoreConnectionError(
                context={"url": self.safe_url, "reason": str(e)},
            ) from e

        self._engine = engine
        self._collection = ContactCollection(
            async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
        )
        logger.info("Connected to contact store %s", self.safe_url)

    def get_collection(self) -> ContactCollection:
        """
        Return the active collection handle.

        Raises:
            StoreUnavailableError: connect() has not completed (or dispose() ran).
        """
        if self._collection is None:
            raise StoreUnavailableError(context={"reason": "not connected"})
        return self._collection

    async def ping(self) -> bool:
        """Lightweight `SELECT 1` used by the health check."""
        if self._engine is None:
            return False
        try:
            async with self._engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
            return True
        except (SQLAlchemyError, OSError) as e:
            logger.warning("Contact store ping failed: %s", str(e))
            return False

    async def dispose(self) -> None:
        """Close all pooled connections; the store becomes disconnected."""
        self._collection = None
        if self._engine is not None:
            await self._engine.dispose()
            self._engine = None
            logger.info("Contact store connections closed")


# ── Request Dependencies ──────────────────────────────────────────────────
def get_store(request: Request) -> ContactStore:
    """FastAPI dependency: the ContactStore attached to the running app."""
    return request.app.state.store


def get_collection(store: ContactStore = Depends(get_store)) -> ContactCollection:
    """
    FastAPI dependency providing the collection handle per request.

    Raises:
        StoreUnavailableError: the store is not connected. The global handler
        turns this into a 500 `store_unavailable` response.
    """
    return store.get_collection()
