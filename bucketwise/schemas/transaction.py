# schemas/transaction.py

from pydantic import BaseModel, Field, condecimal
from typing import Optional
from datetime import datetime

from ..db.enums import TransactionType

FinancialDecimal = condecimal(max_digits=12, decimal_places=2)


class TransactionOut(BaseModel):
    """One row of the transaction log."""

    id: int
    type: TransactionType
    amount: FinancialDecimal = Field(..., description="Signed: negative for purchases and deductions.")
    currency_code: str
    bucket_id: Optional[int] = None
    bucket_name: Optional[str] = None
    expense_id: Optional[int] = None
    item_name: Optional[str] = None
    category: Optional[str] = None
    note: Optional[str] = None
    source: Optional[str] = None
    is_incremental: bool = False
    date: datetime

    class Config:
        from_attributes = True
