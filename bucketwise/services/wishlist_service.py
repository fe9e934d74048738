# services/wishlist_service.py

from typing import Any, Dict, List

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ..db.base import utcnow
from ..db.enums import Priority
from ..errors import NotFoundError, ValidationError
from ..models.wishlist import WishlistItem
from ._helpers import normalize_currency, require_positive
from .bucket_service import BucketService

_UPDATABLE_FIELDS = ("name", "amount", "currency_code", "bucket_id", "priority", "category", "note")


class WishlistService:
    def __init__(self, db: AsyncSession, user_id: str):
        self.db = db
        self.user_id = user_id
        self.bucket_service = BucketService(db)

    async def list_items(self, include_purchased: bool = False) -> List[WishlistItem]:
        """Outstanding items, highest priority first, newest first within a priority."""
        stmt = select(WishlistItem).where(WishlistItem.user_id == self.user_id)
        if not include_purchased:
            stmt = stmt.where(WishlistItem.purchased_at.is_(None))
        stmt = stmt.order_by(WishlistItem.priority.asc(), WishlistItem.created_at.desc(), WishlistItem.id.desc())
        result = await self.db.execute(stmt)
        return list(result.scalars().all())

    async def get_item(self, item_id: int) -> WishlistItem:
        stmt = select(WishlistItem).where(WishlistItem.id == item_id, WishlistItem.user_id == self.user_id)
        item = (await self.db.execute(stmt)).scalar_one_or_none()
        if item is None:
            raise NotFoundError(f"Wishlist item {item_id} not found.")
        return item

    async def create_item(self, data: Dict[str, Any]) -> WishlistItem:
        bucket = await self.bucket_service.get_bucket(data["bucket_id"])
        item = WishlistItem(
            user_id=self.user_id,
            name=data["name"],
            amount=require_positive(data.get("amount")),
            currency_code=normalize_currency(data.get("currency_code")),
            bucket_id=bucket.id,
            priority=self._priority(data.get("priority", Priority.MEDIUM)),
            category=data.get("category"),
            note=data.get("note"),
        )
        self.db.add(item)
        await self.db.flush()
        return item

    async def update_item(self, item_id: int, updates: Dict[str, Any]) -> WishlistItem:
        item = await self.get_item(item_id)
        for key, value in updates.items():
            if key not in _UPDATABLE_FIELDS:
                continue
            if key == "amount":
                value = require_positive(value)
            elif key == "currency_code":
                value = normalize_currency(value)
            elif key == "bucket_id":
                value = (await self.bucket_service.get_bucket(value)).id
            elif key == "priority":
                value = self._priority(value)
            elif key == "name" and value is None:
                continue
            setattr(item, key, value)

        await self.db.flush()
        return item

    async def mark_purchased(self, item_id: int) -> WishlistItem:
        """Flags the item as bought. Recording the purchase itself is a separate call."""
        item = await self.get_item(item_id)
        if item.purchased_at is None:
            item.purchased_at = utcnow()
            await self.db.flush()
        return item

    async def delete_item(self, item_id: int) -> None:
        item = await self.get_item(item_id)
        await self.db.delete(item)
        await self.db.flush()

    @staticmethod
    def _priority(value) -> int:
        try:
            return int(Priority(int(value)))
        except (TypeError, ValueError) as exc:
            raise ValidationError("priority must be 1 (High), 2 (Medium) or 3 (Low).") from exc
