# db/database.py

import logging
from typing import AsyncGenerator

from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

from .. import config
from .base import Base

logger = logging.getLogger(__name__)

ASYNC_DATABASE_URL = config.async_database_url(config.DATABASE_URL)


def build_engine(url: str = ASYNC_DATABASE_URL, echo: bool = config.DB_ECHO) -> AsyncEngine:
    """Creates the async engine; pool sizing only applies to server databases."""
    if url.startswith("sqlite"):
        return create_async_engine(url, echo=echo)
    return create_async_engine(
        url,
        echo=echo,  # Set DB_ECHO=true for verbose SQL logs
        pool_size=config.DB_POOL_SIZE,
        max_overflow=config.DB_MAX_OVERFLOW,
        pool_pre_ping=True,
    )


# --- Database Engine Setup ---

engine = build_engine()

# expire_on_commit=False keeps ORM objects usable after the request commits
AsyncSessionLocal = async_sessionmaker(
    bind=engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


# --- Dependency Function for FastAPI ---

async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """
    Provides one AsyncSession per request. Every write made while handling the
    request belongs to a single store transaction: committed when the endpoint
    returns, rolled back on any exception.
    """
    async with AsyncSessionLocal() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


# --- Utility for creating tables (migrations own this in production) ---

async def create_db_and_tables(bind: AsyncEngine = engine) -> None:
    """Creates all defined tables in the database."""
    # Import all model modules so that SQLAlchemy knows about them
    from ..models import balance, bucket, expense, settings, transaction, wishlist  # noqa: F401

    async with bind.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Database tables ensured (%s).", bind.url.render_as_string(hide_password=True))
