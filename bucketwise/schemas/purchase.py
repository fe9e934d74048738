# schemas/purchase.py

from pydantic import BaseModel, Field, condecimal
from decimal import Decimal
from typing import Literal, Optional
from datetime import datetime

from ..db.enums import DisciplineMode

FinancialDecimal = condecimal(max_digits=12, decimal_places=2)


class PurchaseCheckIn(BaseModel):
    bucket_id: int
    amount: FinancialDecimal = Field(..., gt=Decimal("0.00"))
    currency_code: str = Field(..., min_length=3, max_length=3)
    # Unrecognized names fall back to intermediate
    mode: Optional[str] = Field(None, description="Overrides the user's default discipline mode.")


class PurchaseIn(PurchaseCheckIn):
    item_name: Optional[str] = Field(None, max_length=200)
    category: Optional[str] = Field(None, max_length=100)
    note: Optional[str] = None
    date: Optional[datetime] = None


class DailyCheckIn(BaseModel):
    bucket_id: int
    daily_amount: FinancialDecimal = Field(..., gt=Decimal("0.00"))
    currency_code: str = Field(..., min_length=3, max_length=3)
    mode: Optional[str] = None


class AffordabilityOut(BaseModel):
    """Outcome of the affordability engine for one bucket and amount."""

    bucket_id: int
    bucket_name: str
    currency_code: str
    amount: FinancialDecimal
    mode: DisciplineMode
    is_affordable: bool
    current_balance: FinancialDecimal
    # Computed from amount x limiter, so may exceed the stored precision
    required_balance: Decimal = Field(..., description="amount x limiter")
    max_affordable: FinancialDecimal = Field(..., description="Largest amount that passes the check.")
    limiter: Decimal
    income_needed: Optional[Decimal] = Field(
        None, description="Gross income that would make a blocked purchase affordable."
    )


class DailyCheckOut(AffordabilityOut):
    amount: Decimal = Field(..., description="daily_amount x days_remaining")
    daily_amount: FinancialDecimal
    days_remaining: int
    total_amount: Decimal


class PurchaseOut(AffordabilityOut):
    status: Literal["recorded", "rejected"]
    transaction_id: Optional[int] = None
    new_balance: Optional[FinancialDecimal] = None
