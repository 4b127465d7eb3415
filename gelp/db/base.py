import logging
from typing import AsyncIterator

from fastapi import Request
from sqlalchemy import event
from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import declarative_base

from gelp.core.config import Settings

logger = logging.getLogger(__name__)

Base = declarative_base()

# backends with the INSERT ... ON CONFLICT upsert the stock repository relies on
SUPPORTED_DIALECTS = ("postgresql", "sqlite")


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys = ON")
    cursor.close()


class Database:
    """Storage handle: one engine plus the session factory bound to it.

    Built once at process start, closed at shutdown and handed to whoever
    needs a session (routes, sale coordinator, tests).
    """

    def __init__(self, url: str, echo: bool = False, lock_timeout: float = 5.0):
        backend = make_url(url).get_backend_name()
        if backend not in SUPPORTED_DIALECTS:
            raise ValueError(f"Unsupported database backend {backend!r}; expected one of {SUPPORTED_DIALECTS}")

        self.url = url
        connect_args = {}
        if backend == "sqlite":
            connect_args["timeout"] = lock_timeout

        self.engine: AsyncEngine = create_async_engine(url, echo=echo, connect_args=connect_args)
        if self.engine.dialect.name == "sqlite":
            event.listen(self.engine.sync_engine, "connect", _enable_sqlite_foreign_keys)

        self.session_factory = async_sessionmaker(
            bind=self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )

    @classmethod
    def from_settings(cls, settings: Settings) -> "Database":
        return cls(settings.DB_URL, echo=settings.DB_ECHO, lock_timeout=settings.DB_LOCK_TIMEOUT_SECONDS)

    @property
    def dialect(self) -> str:
        return self.engine.dialect.name

    def session(self) -> AsyncSession:
        return self.session_factory()

    async def create_all(self) -> None:
        # models must be imported so their tables are registered on Base.metadata
        from gelp.db.models import (  # noqa: F401
            categories,
            clients,
            products,
            sale_items,
            sales,
            stock,
            stock_entries,
            suppliers,
        )

        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.info("Schema ready on %s", self.engine.url.render_as_string(hide_password=True))

    async def dispose(self) -> None:
        await self.engine.dispose()
        logger.info("Database connections closed")


async def get_db(request: Request) -> AsyncIterator[AsyncSession]:
    database: Database = request.app.state.db
    async with database.session() as session:
        yield session
