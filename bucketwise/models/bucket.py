# models/bucket.py

from typing import Optional
from datetime import datetime
from decimal import Decimal
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy import Integer, String, DECIMAL, DateTime

from ..db.base import Base, utcnow
from ..rules.affordability import LimiterSet


class Bucket(Base):
    """
    A named spending category. Buckets are shared definitions: every user
    sees the same catalog, balances are kept per user in ``balances``.
    """
    __tablename__ = "buckets"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    # Names are semantic keys ("Necessity", "Savings", "Expenses", ...)
    name: Mapped[str] = mapped_column(String(50), unique=True, index=True)

    # Display only: the allocation engine applies the fixed policy split instead
    allocation_pct: Mapped[Decimal] = mapped_column(DECIMAL(5, 2), default=Decimal("0.00"))

    # --- Discipline limiters (required balance = amount x limiter) ---
    limiter_light: Mapped[Decimal] = mapped_column(DECIMAL(6, 2), default=Decimal("1.00"))
    limiter_intermediate: Mapped[Decimal] = mapped_column(DECIMAL(6, 2), default=Decimal("1.00"))
    limiter_strict: Mapped[Decimal] = mapped_column(DECIMAL(6, 2), default=Decimal("1.00"))
    limiter_desperate: Mapped[Optional[Decimal]] = mapped_column(DECIMAL(6, 2), nullable=True)

    display_order: Mapped[int] = mapped_column(Integer, default=0)
    color: Mapped[Optional[str]] = mapped_column(String(20), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)

    def limiters(self) -> LimiterSet:
        return LimiterSet(
            light=self.limiter_light,
            intermediate=self.limiter_intermediate,
            strict=self.limiter_strict,
            desperate=self.limiter_desperate,
        )

    def __repr__(self) -> str:
        return f"Bucket(id={self.id!r}, name={self.name!r})"
