# schemas/bucket.py

from pydantic import BaseModel, Field, condecimal
from decimal import Decimal
from typing import List, Optional

# Use condecimal for precise financial values
FinancialDecimal = condecimal(max_digits=12, decimal_places=2)


class BucketOut(BaseModel):
    """A catalog bucket with its discipline limiters."""

    id: int
    name: str
    allocation_pct: Decimal = Field(..., description="Display-only share of income, in percent.")
    limiter_light: Decimal
    limiter_intermediate: Decimal
    limiter_strict: Decimal
    limiter_desperate: Optional[Decimal] = Field(None, description="Falls back to the strict limiter when absent.")
    display_order: int
    color: Optional[str] = None

    class Config:
        from_attributes = True


class SeedResultOut(BaseModel):
    created: int = Field(..., description="Number of default buckets inserted by this call.")
    buckets: List[BucketOut]


class BalanceOut(BaseModel):
    bucket_id: int
    bucket_name: str
    color: Optional[str] = None
    display_order: int
    currency_code: str
    balance: FinancialDecimal = Field(Decimal("0.00"), description="Signed; deficits are allowed.")


class BalancesOut(BaseModel):
    currency_code: str
    total: FinancialDecimal = Field(Decimal("0.00"), description="Sum of all bucket balances in this currency.")
    balances: List[BalanceOut]
