from typing import AsyncGenerator, Optional
from contextlib import asynccontextmanager
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from edulink.core.config import Settings, settings, get_engine_options
from edulink.models.base import Base


def build_engine(config: Optional[Settings] = None, url: Optional[str] = None) -> AsyncEngine:
    """
    Create the async engine for one process.

    Called once at startup; the engine is passed explicitly to whatever needs
    it and disposed with close_db() at shutdown.
    """
    config = config or settings
    return create_async_engine(url or config.DATABASE_URL, **get_engine_options(config))


def build_session_factory(engine: AsyncEngine) -> async_sessionmaker:
    return async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,    # Snapshots are read after the session closes
        autoflush=False            # Explicit flush management
    )


@asynccontextmanager
async def session_scope(session_factory: async_sessionmaker) -> AsyncGenerator[AsyncSession, None]:
    """
    Context manager for sessions outside of request context.
    Usage: async with session_scope(factory) as session:
    """
    session = session_factory()
    try:
        yield session
        await session.commit()
    except Exception:
        await session.rollback()
        raise
    finally:
        await session.close()


# Database initialization functions
async def init_db(engine: AsyncEngine) -> None:
    """Create any missing tables"""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def close_db(engine: AsyncEngine) -> None:
    """Close database connections"""
    await engine.dispose()


# Register every model with the metadata
import edulink.models  # noqa: E402,F401
