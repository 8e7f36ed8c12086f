from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, List

from fastapi import Request
from sqlalchemy import event, inspect, text
from sqlalchemy.engine import Connection
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession

from .settings import Settings

logger = logging.getLogger(__name__)


def get_engine_url(database_url: str) -> str:
    url = database_url
    if url.startswith("sqlite:///") and not url.startswith("sqlite+aiosqlite:///"):
        # Use aiosqlite for async support
        url = url.replace("sqlite:///", "sqlite+aiosqlite:///", 1)
    elif url.startswith("mysql://"):
        url = url.replace("mysql://", "mysql+aiomysql://", 1)
    return url


def _enable_sqlite_foreign_keys(dbapi_connection, _record) -> None:
    # SQLite ignores ON DELETE CASCADE unless this is set per connection
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def add_missing_columns(conn: Connection) -> List[str]:
    """Add every mapped column that the live table lacks.

    Existing columns are read through schema inspection first, so running
    this against an up-to-date schema issues no DDL at all.
    """
    inspector = inspect(conn)
    added: List[str] = []
    for table in SQLModel.metadata.sorted_tables:
        if not inspector.has_table(table.name):
            continue
        present = {col["name"] for col in inspector.get_columns(table.name)}
        for column in table.columns:
            if column.name in present:
                continue
            ddl_type = column.type.compile(dialect=conn.dialect)
            conn.execute(text(f"ALTER TABLE {table.name} ADD COLUMN {column.name} {ddl_type} NULL"))
            added.append(f"{table.name}.{column.name}")
    return added


class Database:
    """Storage handle: one async engine plus the session factory bound to it."""

    def __init__(self, settings: Settings) -> None:
        url = get_engine_url(settings.database_url)
        engine_kwargs = {"echo": False, "future": True}
        if not url.startswith("sqlite"):
            engine_kwargs.update(pool_size=settings.db_pool_size, max_overflow=0, pool_pre_ping=True)
        self.engine: AsyncEngine = create_async_engine(url, **engine_kwargs)
        if url.startswith("sqlite"):
            event.listen(self.engine.sync_engine, "connect", _enable_sqlite_foreign_keys)

        self.session_factory = sessionmaker(
            self.engine, class_=AsyncSession, expire_on_commit=False, autoflush=False, autocommit=False
        )

    @asynccontextmanager
    async def session(self) -> AsyncIterator[AsyncSession]:
        async with self.session_factory() as session:
            yield session

    async def init_db(self) -> None:
        # Import for side effects: registers the tables on SQLModel.metadata
        from . import models  # noqa: F401

        async with self.engine.begin() as conn:
            await conn.run_sync(SQLModel.metadata.create_all)
            added = await conn.run_sync(add_missing_columns)
        if added:
            logger.info("schema: added columns %s", ", ".join(added))

    async def dispose(self) -> None:
        await self.engine.dispose()


async def get_session(request: Request) -> AsyncIterator[AsyncSession]:
    """FastAPI dependency yielding a session from the app's storage handle."""
    database: Database = request.app.state.db
    async with database.session() as session:
        yield session
