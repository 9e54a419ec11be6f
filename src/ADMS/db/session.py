# src/ADMS/db/session.py
from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import Request
from sqlalchemy import event
from sqlalchemy.engine import URL, make_url
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import NullPool

from ADMS.app_logger import get_logger
from ADMS.core.config import settings
from ADMS.db.base import Base

log = get_logger("db")


def _enable_sqlite_foreign_keys(dbapi_connection, _connection_record) -> None:
    # SQLite ignores ON DELETE CASCADE unless this is set per connection
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


class Database:
    """
    Storage handle: one async engine plus its sessionmaker.

    Created at process start (app lifespan or CLI command) and passed to
    whatever needs storage; `dispose()` releases the pool at shutdown.
    """

    def __init__(self, url: str | URL | None = None, *, echo: bool | None = None,
                 nullpool: bool | None = None):
        self.url = make_url(url or settings.DATABASE_URL)
        echo = settings.DB_ECHO if echo is None else echo
        nullpool = settings.TESTING if nullpool is None else nullpool

        engine_kwargs: dict = {"echo": echo}
        if self.is_sqlite:
            engine_kwargs["connect_args"] = {"timeout": 30}
        else:
            engine_kwargs["pool_pre_ping"] = True
        if nullpool:
            engine_kwargs["poolclass"] = NullPool

        self.engine: AsyncEngine = create_async_engine(self.url, **engine_kwargs)
        if self.is_sqlite:
            event.listen(self.engine.sync_engine, "connect", _enable_sqlite_foreign_keys)

        self.sessionmaker: async_sessionmaker[AsyncSession] = async_sessionmaker(
            bind=self.engine,
            expire_on_commit=False,
            class_=AsyncSession,
        )

    @property
    def is_sqlite(self) -> bool:
        return self.url.get_backend_name() == "sqlite"

    @asynccontextmanager
    async def session(self) -> AsyncIterator[AsyncSession]:
        async with self.sessionmaker() as session:
            try:
                yield session
            except Exception:
                await session.rollback()
                raise

    async def create_all(self) -> None:
        # Registers every model on Base.metadata
        import ADMS.db.models  # noqa: F401

        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        log.info("schema created on %s", self.url.render_as_string(hide_password=True))

    async def drop_all(self) -> None:
        import ADMS.db.models  # noqa: F401

        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.drop_all)
        log.info("schema dropped on %s", self.url.render_as_string(hide_password=True))

    async def dispose(self) -> None:
        await self.engine.dispose()


# ---------------------------------------------------------------------------
# FastAPI dependencies
#   - get_database: the app-scoped storage handle
# ---------------------------------------------------------------------------

def get_database(request: Request) -> Database:
    return request.app.state.database

