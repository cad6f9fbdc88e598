"""
Async database engine, session factory and declarative base.
"""
import logging
from typing import AsyncIterator

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase

from smartpark.config import get_settings

log = logging.getLogger(__name__)

settings = get_settings()

engine = create_async_engine(settings.database_url, echo=settings.debug)

async_session_maker = async_sessionmaker(engine, expire_on_commit=False)


class Base(DeclarativeBase):
    """Base class for all database models."""


async def get_db() -> AsyncIterator[AsyncSession]:
    """
    Yield a database session for one request.
    Any exception rolls the session back so no partial write survives.
    """
    async with async_session_maker() as session:
        try:
            yield session
        except Exception:
            await session.rollback()
            raise


async def init_db() -> None:
    """Create all tables that do not exist yet."""
    # Register models on Base.metadata
    import smartpark.models  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    log.info("Database tables ready at %s", engine.url.render_as_string(hide_password=True))
