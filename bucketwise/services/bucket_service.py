# services/bucket_service.py

import logging
from typing import Any, Dict, List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ..db.upsert import upsert_insert
from ..errors import NotFoundError
from ..models.bucket import Bucket
from ..rules.policy_config import DEFAULT_BUCKETS, EXPENSES_BUCKET, EXPENSES_BUCKET_TEMPLATE

logger = logging.getLogger(__name__)


class BucketService:
    """
    Read-mostly access to the shared bucket catalog, plus the idempotent
    creation of well-known rows (seed catalog, lazily materialized Expenses bucket).
    """

    def __init__(self, db: AsyncSession):
        self.db = db

    async def list_buckets(self) -> List[Bucket]:
        stmt = select(Bucket).order_by(Bucket.display_order.asc(), Bucket.id.asc())
        result = await self.db.execute(stmt)
        return list(result.scalars().all())

    async def get_bucket(self, bucket_id: int) -> Bucket:
        bucket = await self.db.get(Bucket, bucket_id)
        if bucket is None:
            raise NotFoundError(f"Bucket {bucket_id} not found.")
        return bucket

    async def get_bucket_by_name(self, name: str) -> Optional[Bucket]:
        result = await self.db.execute(select(Bucket).where(Bucket.name == name))
        return result.scalar_one_or_none()

    async def get_or_create(self, name: str, template: Dict[str, Any]) -> Bucket:
        """
        Ensures a bucket named ``name`` exists. The unique name plus
        ON CONFLICT DO NOTHING keeps concurrent callers from creating duplicates.
        """
        existing = await self.get_bucket_by_name(name)
        if existing is not None:
            return existing

        values = {**template, "name": name}
        stmt = upsert_insert(self.db, Bucket).values(**values).on_conflict_do_nothing(index_elements=["name"])
        await self.db.execute(stmt)
        logger.info("Materialized bucket '%s' from template.", name)

        bucket = await self.get_bucket_by_name(name)
        if bucket is None:
            raise NotFoundError(f"Bucket '{name}' could not be created.")
        return bucket

    async def get_or_create_expenses_bucket(self) -> Bucket:
        return await self.get_or_create(EXPENSES_BUCKET, EXPENSES_BUCKET_TEMPLATE)

    async def seed_default_buckets(self) -> int:
        """Inserts the default catalog rows that are missing. Returns how many were created."""
        existing = {bucket.name for bucket in await self.list_buckets()}
        created = 0
        for definition in DEFAULT_BUCKETS:
            if definition["name"] in existing:
                continue
            stmt = upsert_insert(self.db, Bucket).values(**definition).on_conflict_do_nothing(index_elements=["name"])
            await self.db.execute(stmt)
            created += 1

        if created:
            logger.info("Seeded %d default bucket(s).", created)
        return created
