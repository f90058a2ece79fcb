"""Database engine and session construction."""

import logging

from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

logger = logging.getLogger(__name__)


def normalize_database_url(url: str) -> str:
    """Convert sqlite:/// to sqlite+aiosqlite:/// if needed."""
    if url.startswith("sqlite:///") and "aiosqlite" not in url:
        return url.replace("sqlite:///", "sqlite+aiosqlite:///", 1)
    return url


def is_sqlite_url(url: str) -> bool:
    return url.startswith("sqlite")


def is_memory_url(url: str) -> bool:
    """In-memory SQLite: every session shares a single connection."""
    return is_sqlite_url(url) and (url.endswith(":///") or ":memory:" in url or "mode=memory" in url)


def _configure_sqlite(dbapi_connection, connection_record) -> None:
    """Per-connection SQLite pragmas: WAL journal for concurrent readers."""
    cursor = dbapi_connection.cursor()
    try:
        cursor.execute("PRAGMA journal_mode=WAL")
        cursor.execute("PRAGMA synchronous=NORMAL")
        cursor.execute("PRAGMA cache_size=1000")
    finally:
        cursor.close()


def create_engine(url: str, echo: bool = False) -> AsyncEngine:
    """Create an async engine for the given database URL."""
    db_url = normalize_database_url(url)
    engine = create_async_engine(db_url, echo=echo, future=True)

    if is_sqlite_url(db_url):
        event.listen(engine.sync_engine, "connect", _configure_sqlite)

    logger.debug("Created database engine for %s", engine.url.render_as_string(hide_password=True))
    return engine


def create_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Create the session factory bound to an engine."""
    return async_sessionmaker(
        bind=engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )
