# models/wishlist.py

from typing import Optional
from datetime import datetime
from decimal import Decimal
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy import Integer, String, DECIMAL, DateTime, ForeignKey, Text

from ..db.base import Base, utcnow


class WishlistItem(Base):
    """Desired future purchase. Advisory only: never touches a balance."""
    __tablename__ = "wishlist_items"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    user_id: Mapped[str] = mapped_column(String(64), index=True)

    name: Mapped[str] = mapped_column(String(200))
    amount: Mapped[Decimal] = mapped_column(DECIMAL(12, 2))
    currency_code: Mapped[str] = mapped_column(String(3))
    bucket_id: Mapped[int] = mapped_column(ForeignKey("buckets.id"))

    # 1 = High, 2 = Medium, 3 = Low
    priority: Mapped[int] = mapped_column(Integer, default=2)
    category: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    note: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    # NULL while still outstanding
    purchased_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)
