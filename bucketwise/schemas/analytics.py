# schemas/analytics.py

from pydantic import BaseModel, Field, condecimal
from decimal import Decimal
from typing import List, Optional

FinancialDecimal = condecimal(max_digits=12, decimal_places=2)


class ItemSpendOut(BaseModel):
    name: str
    total: FinancialDecimal
    count: int


class BucketSpendOut(BaseModel):
    bucket_id: int
    bucket_name: str
    color: Optional[str] = None
    total: FinancialDecimal


class CategorySpendOut(BaseModel):
    category: str
    total: FinancialDecimal


class AnalyticsSummaryOut(BaseModel):
    """Spending summary for a single currency."""

    currency_code: str
    total_income: FinancialDecimal = Field(Decimal("0.00"))
    total_expenses: FinancialDecimal = Field(Decimal("0.00"), description="Reported as a positive amount.")
    net: FinancialDecimal = Field(Decimal("0.00"))
    top_items: List[ItemSpendOut]
    by_bucket: List[BucketSpendOut]
    by_category: List[CategorySpendOut]
    top_category: Optional[str] = None
