# schemas/income.py

from pydantic import BaseModel, Field, condecimal
from decimal import Decimal
from typing import List, Optional
from datetime import datetime

from ..db.enums import DisciplineMode

FinancialDecimal = condecimal(max_digits=12, decimal_places=2)


# --- 1. Input Schemas ---

class IncomeIn(BaseModel):
    """One income event to split across the buckets."""

    amount: FinancialDecimal = Field(..., gt=Decimal("0.00"), description="Gross income amount.")
    currency_code: str = Field(..., min_length=3, max_length=3, description="ISO-4217 code, e.g. 'USD'.")
    date: Optional[datetime] = Field(None, description="When the income was received. Defaults to now.")
    note: Optional[str] = None
    source: Optional[str] = Field(None, max_length=100, description="Free-form origin, e.g. 'Salary' or 'Freelance'.")


class IncomePreviewIn(BaseModel):
    """Calculator input. Nothing is written."""

    amount: FinancialDecimal = Field(..., ge=Decimal("0.00"))
    currency_code: str = Field(..., min_length=3, max_length=3)
    # Replaces the stored active expenses when given
    expense_amounts: Optional[List[FinancialDecimal]] = None
    purchase_bucket_id: Optional[int] = None
    purchase_amount: Optional[FinancialDecimal] = Field(None, gt=Decimal("0.00"))
    mode: Optional[str] = None


# --- 2. Output Schemas ---

class BucketAllocationOut(BaseModel):
    bucket_id: int
    bucket_name: str
    amount: FinancialDecimal
    new_balance: Optional[FinancialDecimal] = None
    transaction_id: Optional[int] = None

    class Config:
        from_attributes = True


class AllocationOut(BaseModel):
    income_transaction_id: int
    currency_code: str
    gross_income: FinancialDecimal
    total_active_expenses: FinancialDecimal
    net_after_expenses: FinancialDecimal = Field(..., description="Gross minus active expenses; may be negative.")
    allocations: List[BucketAllocationOut]
    expenses_allocation: Optional[BucketAllocationOut] = None
    savings: Optional[BucketAllocationOut] = None
    savings_share: FinancialDecimal


class SimulatedPurchaseOut(BaseModel):
    bucket_id: int
    bucket_name: str
    amount: FinancialDecimal
    mode: DisciplineMode
    current_balance: FinancialDecimal
    simulated_balance: Decimal
    is_affordable: bool
    required_balance: Decimal
    max_affordable: Decimal
    limiter: Decimal
    income_needed: Optional[Decimal] = None


class PreviewAllocationOut(BaseModel):
    bucket_id: int
    bucket_name: str
    amount: FinancialDecimal


class AllocationPreviewOut(BaseModel):
    currency_code: str
    gross_income: FinancialDecimal
    total_active_expenses: Decimal
    net_after_expenses: FinancialDecimal = Field(..., description="Clamped to zero for display.")
    expenses_share: FinancialDecimal
    savings_share: FinancialDecimal
    allocations: List[PreviewAllocationOut]
    purchase_check: Optional[SimulatedPurchaseOut] = None
