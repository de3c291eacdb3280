"""
Async engine and session factory for the account store.

SQLite (the default) gets one connection per session so that concurrent
registrations contend on the unique indexes exactly as they would on a
server database.
"""

from typing import AsyncGenerator

from sqlalchemy import event, text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool

from webauth.config import get_settings
from webauth.logging_config import get_logger

settings = get_settings()
logger = get_logger(__name__)

is_sqlite = settings.database_url.startswith("sqlite")

# Bound parameters include salts and hashes; keep them out of echo and errors
_engine_options = {"echo": settings.debug, "hide_parameters": True}

if is_sqlite:
    engine = create_async_engine(
        settings.database_url,
        connect_args={"check_same_thread": False},
        poolclass=NullPool,
        **_engine_options,
    )

    @event.listens_for(engine.sync_engine, "connect")
    def _configure_sqlite(dbapi_conn, connection_record):
        cursor = dbapi_conn.cursor()
        cursor.execute("PRAGMA journal_mode=WAL")
        cursor.execute(f"PRAGMA busy_timeout={int(settings.database_busy_timeout_ms)}")
        cursor.close()
else:
    engine = create_async_engine(
        settings.database_url,
        pool_pre_ping=True,
        pool_size=settings.database_pool_size,
        max_overflow=settings.database_max_overflow,
        **_engine_options,
    )

async_session_maker = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autoflush=False,
)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """Request-scoped session; the store commits, anything left open is rolled back."""
    async with async_session_maker() as session:
        try:
            yield session
        finally:
            if session.in_transaction():
                await session.rollback()


async def check_db() -> bool:
    """Round-trip ``SELECT 1``; False when the store cannot be reached."""
    try:
        async with engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
    except (SQLAlchemyError, OSError):
        logger.warning("Database health check failed", exc_info=True)
        return False
    return True


async def init_db() -> None:
    """Create missing tables (migrations are the path for existing databases)."""
    from webauth.kernel.models import Base

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def close_db() -> None:
    await engine.dispose()
