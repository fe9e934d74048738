# models/expense.py

from typing import Optional
from datetime import date, datetime
from decimal import Decimal
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy import Integer, String, DECIMAL, Date, DateTime, Boolean, Text

from ..db.base import Base, utcnow


class Expense(Base):
    __tablename__ = "expenses"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    user_id: Mapped[str] = mapped_column(String(64), index=True)

    name: Mapped[str] = mapped_column(String(120))
    # Total owed
    amount: Mapped[Decimal] = mapped_column(DECIMAL(12, 2))
    # Paid so far; NULL means the whole amount is paid in one shot
    paid_amount: Mapped[Optional[Decimal]] = mapped_column(DECIMAL(12, 2), nullable=True)
    # Only active expenses are reserved at allocation time and deducted
    active: Mapped[bool] = mapped_column(Boolean, default=True, index=True)
    currency_code: Mapped[str] = mapped_column(String(3))

    # Reporting only, never selects the debited bucket
    category: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    due_date: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    priority: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    note: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)
