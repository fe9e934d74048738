# models/transaction.py

from typing import Optional
from datetime import datetime
from decimal import Decimal
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy import Integer, DECIMAL, DateTime, ForeignKey, String, Text, Boolean

from ..db.base import Base, utcnow
from ..db.enums import TransactionType, EnumString


class Transaction(Base):
    """
    Append-only log of every balance-affecting event. Rows are never updated
    or deleted; the sum of a bucket's rows equals its balance.
    """
    __tablename__ = "transactions"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    user_id: Mapped[str] = mapped_column(String(64), index=True)

    type: Mapped[TransactionType] = mapped_column(EnumString(TransactionType, 20), index=True)
    # Signed: positive for income/sweeps, negative for purchases and deductions
    amount: Mapped[Decimal] = mapped_column(DECIMAL(12, 2))
    currency_code: Mapped[str] = mapped_column(String(3), index=True)

    # Null for the raw income event itself
    bucket_id: Mapped[Optional[int]] = mapped_column(ForeignKey("buckets.id"), nullable=True, index=True)
    expense_id: Mapped[Optional[int]] = mapped_column(
        ForeignKey("expenses.id", ondelete="SET NULL"), nullable=True
    )

    # --- Item metadata ---
    item_name: Mapped[Optional[str]] = mapped_column(String(200), nullable=True)
    category: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    note: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    source: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    is_incremental: Mapped[bool] = mapped_column(Boolean, default=False)

    date: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, index=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)
