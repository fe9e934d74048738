# schemas/expense.py

from pydantic import BaseModel, Field, condecimal
from decimal import Decimal
from typing import Optional
from datetime import date, datetime

FinancialDecimal = condecimal(max_digits=12, decimal_places=2)


class ExpenseCreate(BaseModel):
    """Input for a recurring or one-off expense."""

    name: str = Field(..., min_length=1, max_length=120)
    amount: FinancialDecimal = Field(..., gt=Decimal("0.00"), description="Total owed.")
    paid_amount: Optional[FinancialDecimal] = Field(
        None, ge=Decimal("0.00"), description="Paid so far. Omit when the whole amount is paid at once."
    )
    active: bool = True
    currency_code: str = Field(..., min_length=3, max_length=3)
    category: Optional[str] = Field(None, max_length=100)
    due_date: Optional[date] = None
    priority: Optional[int] = Field(None, ge=1, le=3)
    note: Optional[str] = None


class ExpenseUpdate(BaseModel):
    """Partial update; only fields that are sent are applied."""

    name: Optional[str] = Field(None, min_length=1, max_length=120)
    amount: Optional[FinancialDecimal] = Field(None, gt=Decimal("0.00"))
    paid_amount: Optional[FinancialDecimal] = Field(None, ge=Decimal("0.00"))
    active: Optional[bool] = None
    currency_code: Optional[str] = Field(None, min_length=3, max_length=3)
    category: Optional[str] = Field(None, max_length=100)
    due_date: Optional[date] = None
    priority: Optional[int] = Field(None, ge=1, le=3)
    note: Optional[str] = None


class ExpenseOut(BaseModel):
    id: int
    name: str
    amount: FinancialDecimal
    paid_amount: Optional[FinancialDecimal] = None
    active: bool
    currency_code: str
    category: Optional[str] = None
    due_date: Optional[date] = None
    priority: Optional[int] = None
    note: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class DeductionOut(BaseModel):
    deducted: bool
    amount: FinancialDecimal
    reason: str
    is_incremental: bool = False
    new_balance: Optional[FinancialDecimal] = None
    transaction_id: Optional[int] = None


class ExpenseWriteOut(BaseModel):
    """An expense after a create or update, with the deduction it triggered."""

    expense: ExpenseOut
    deduction: DeductionOut
