# models/balance.py

from datetime import datetime
from decimal import Decimal
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy import Integer, String, DECIMAL, DateTime, ForeignKey, UniqueConstraint

from ..db.base import Base, utcnow


class Balance(Base):
    """
    One signed balance per (user, bucket, currency). Deficits are allowed;
    rows are only ever changed by additive deltas (see LedgerService).
    """
    __tablename__ = "balances"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    user_id: Mapped[str] = mapped_column(String(64), index=True)
    bucket_id: Mapped[int] = mapped_column(ForeignKey("buckets.id"))
    currency_code: Mapped[str] = mapped_column(String(3))

    balance: Mapped[Decimal] = mapped_column(DECIMAL(12, 2), default=Decimal("0.00"))
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)

    __table_args__ = (
        # Upsert target for the atomic increment
        UniqueConstraint("user_id", "bucket_id", "currency_code", name="uq_balances_user_bucket_currency"),
    )
