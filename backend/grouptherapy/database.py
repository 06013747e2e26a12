"""
Database engine and session factory construction.

Nothing here is a module-level singleton: every DatabaseStorage builds its
own engine and session factory from a URL, so tests can run several
isolated databases side by side.

SQLite Notes:
-------------
SQLite (via aiosqlite) is the default backend:

1. WAL Mode (Write-Ahead Logging):
   - Enables concurrent reads during writes
   - Checkpointed (TRUNCATE) when the storage is closed

2. NullPool:
   - Creates new connection for each operation (required for async SQLite)
   - SQLite handles concurrent access via file-level locking

3. Busy Timeout (5 seconds):
   - Prevents "database is locked" errors during concurrent access

Any other async SQLAlchemy URL (e.g. postgresql+asyncpg://) uses the
driver's default pool instead.
"""
import sqlite3
from sqlalchemy.ext.asyncio import create_async_engine, AsyncEngine, async_sessionmaker, AsyncSession
from sqlalchemy.orm import declarative_base
from sqlalchemy.pool import NullPool
from sqlalchemy import event, text
from sqlalchemy.engine import Engine
from loguru import logger

from grouptherapy.constants import SQLITE_BUSY_TIMEOUT_MS

# Base class for models
Base = declarative_base()


def is_sqlite(database_url: str) -> bool:
    return database_url.startswith("sqlite")


def build_engine(database_url: str, echo: bool = False) -> AsyncEngine:
    """Create an async engine for the given URL."""
    if is_sqlite(database_url):
        return create_async_engine(database_url, echo=echo, poolclass=NullPool, future=True)
    return create_async_engine(database_url, echo=echo, pool_pre_ping=True, future=True)


def build_sessionmaker(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Create the session factory bound to an engine."""
    return async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
        autocommit=False
    )


# Enable SQLite WAL mode and busy timeout
@event.listens_for(Engine, "connect")
def set_sqlite_pragma(dbapi_conn, connection_record):
    """
    Enable SQLite-specific optimizations when using SQLite.
    - PRAGMA journal_mode=WAL: Use Write-Ahead Logging for better concurrency
    - PRAGMA busy_timeout=5000: Wait up to 5s for locks to release
    - PRAGMA synchronous=NORMAL: Balance between safety and performance for WAL mode
    """
    # aiosqlite hands us SQLAlchemy's adapter rather than a sqlite3.Connection
    if isinstance(dbapi_conn, sqlite3.Connection) or type(dbapi_conn).__module__.startswith("sqlalchemy.dialects.sqlite"):
        cursor = dbapi_conn.cursor()
        cursor.execute("PRAGMA journal_mode=WAL")
        cursor.execute(f"PRAGMA busy_timeout={SQLITE_BUSY_TIMEOUT_MS}")
        cursor.execute("PRAGMA synchronous=NORMAL")
        cursor.close()


async def init_db(engine: AsyncEngine):
    """Create all tables that do not exist yet."""
    # Register models on Base.metadata
    import grouptherapy.models  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def checkpoint_wal(engine: AsyncEngine):
    """
    Run a WAL checkpoint to consolidate the write-ahead log.
    No-op for non-SQLite engines.
    """
    if not is_sqlite(str(engine.url)):
        return
    try:
        async with engine.begin() as conn:
            await conn.execute(text("PRAGMA wal_checkpoint(TRUNCATE)"))
            logger.debug("WAL checkpoint completed")
    except Exception as e:
        logger.warning(f"WAL checkpoint failed: {e}")


async def close_db(engine: AsyncEngine):
    """Close database connections."""
    await checkpoint_wal(engine)
    await engine.dispose()
