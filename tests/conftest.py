"""Shared fixtures: an in-memory SQLite store per test, seeded catalog, API client."""

from typing import Dict

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from bucketwise import models  # noqa: F401  (registers every table on Base.metadata)
from bucketwise.db.base import Base
from bucketwise.db.database import get_db
from bucketwise.models.bucket import Bucket
from bucketwise.services.bucket_service import BucketService

USER_ID = "user-1"
OTHER_USER_ID = "user-2"


@pytest_asyncio.fixture
async def engine():
    engine = create_async_engine("sqlite+aiosqlite://", poolclass=StaticPool)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(bind=engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def empty_db(session_factory):
    """Session over an empty catalog."""
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def db(empty_db):
    """Session over the default seeded catalog."""
    await BucketService(empty_db).seed_default_buckets()
    await empty_db.commit()
    return empty_db


@pytest_asyncio.fixture
async def buckets(db) -> Dict[str, Bucket]:
    return {bucket.name: bucket for bucket in await BucketService(db).list_buckets()}


@pytest_asyncio.fixture
async def client(session_factory):
    from bucketwise.app import app

    async with session_factory() as session:
        await BucketService(session).seed_default_buckets()
        await session.commit()

    async def override_get_db():
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db] = override_get_db
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test", headers={"X-User-Id": USER_ID}) as ac:
        yield ac
    app.dependency_overrides.clear()
