# schemas/wishlist.py

from pydantic import BaseModel, Field, condecimal
from decimal import Decimal
from typing import Optional
from datetime import datetime

FinancialDecimal = condecimal(max_digits=12, decimal_places=2)


class WishlistItemCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    amount: FinancialDecimal = Field(..., gt=Decimal("0.00"))
    currency_code: str = Field(..., min_length=3, max_length=3)
    bucket_id: int = Field(..., description="Bucket the item would be bought from.")
    priority: int = Field(2, ge=1, le=3, description="1 = High, 2 = Medium, 3 = Low.")
    category: Optional[str] = Field(None, max_length=100)
    note: Optional[str] = None


class WishlistItemUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=200)
    amount: Optional[FinancialDecimal] = Field(None, gt=Decimal("0.00"))
    currency_code: Optional[str] = Field(None, min_length=3, max_length=3)
    bucket_id: Optional[int] = None
    priority: Optional[int] = Field(None, ge=1, le=3)
    category: Optional[str] = Field(None, max_length=100)
    note: Optional[str] = None


class WishlistItemOut(WishlistItemCreate):
    id: int
    purchased_at: Optional[datetime] = None
    created_at: datetime

    class Config:
        from_attributes = True
