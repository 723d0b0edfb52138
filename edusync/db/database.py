"""Database connection and session management."""

from collections.abc import AsyncGenerator
from typing import Any

from sqlalchemy.engine import URL, make_url
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

from edusync.config import SyncConfig, get_settings

settings = get_settings()


def build_store_url(store_url: str, store_credential: str = "") -> URL:
    """Turn the configured store URL into an async SQLAlchemy URL.

    Plain ``postgres://`` / ``postgresql://`` URLs get the asyncpg driver, and a
    non-empty credential replaces the password in the URL.
    """
    url = make_url(store_url)
    if url.drivername in ("postgres", "postgresql"):
        url = url.set(drivername="postgresql+asyncpg")
    if store_credential:
        url = url.set(password=store_credential)
    return url


def create_store_engine(store_url: str, store_credential: str = "", echo: bool = False) -> AsyncEngine:
    """Create the async engine for the store."""
    url = build_store_url(store_url, store_credential)
    kwargs: dict[str, Any] = {"echo": echo, "pool_pre_ping": True}
    if not url.drivername.startswith("sqlite"):
        kwargs.update(pool_size=10, max_overflow=20, pool_timeout=30, pool_recycle=1800)
    return create_async_engine(url, **kwargs)


def create_session_maker(bind: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(
        bind,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


engine = create_store_engine(settings.database_url, settings.database_credential)
async_session_maker = create_session_maker(engine)


def session_maker_for(config: SyncConfig) -> async_sessionmaker[AsyncSession]:
    """Session maker for an explicit sync configuration.

    A config pointing at the application store shares its engine and pool;
    any other store gets an engine of its own.
    """
    if (config.store_url, config.store_credential) == (settings.database_url, settings.database_credential):
        return async_session_maker
    return create_session_maker(create_store_engine(config.store_url, config.store_credential))


async def init_db() -> None:
    """Initialize database (create tables if needed)."""
    from edusync.models import Base

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """Dependency for getting database session."""
    async with async_session_maker() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
