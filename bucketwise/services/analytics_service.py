# services/analytics_service.py

from datetime import datetime
from decimal import Decimal
from typing import Any, Dict, List, Optional

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from ..db.enums import TransactionType
from ..models.bucket import Bucket
from ..models.transaction import Transaction
from ..rules.allocation_rules import to_money
from ._helpers import normalize_currency

TOP_ITEMS_LIMIT = 5


class AnalyticsService:
    """
    Spending summary for one currency over an optional date window.
    Expense rows are stored negative; every figure here is reported as a
    positive amount spent.
    """

    def __init__(self, db: AsyncSession, user_id: str):
        self.db = db
        self.user_id = user_id

    def _filters(self, currency: str, start: Optional[datetime], end: Optional[datetime]) -> List[Any]:
        filters = [Transaction.user_id == self.user_id, Transaction.currency_code == currency]
        if start is not None:
            filters.append(Transaction.date >= start)
        if end is not None:
            filters.append(Transaction.date <= end)
        return filters

    async def _total(self, tx_type: TransactionType, filters: List[Any]) -> Decimal:
        stmt = select(func.coalesce(func.sum(Transaction.amount), 0)).where(*filters, Transaction.type == tx_type)
        return to_money((await self.db.execute(stmt)).scalar_one())

    async def summary(
        self, currency: str, start: Optional[datetime] = None, end: Optional[datetime] = None
    ) -> Dict[str, Any]:
        currency = normalize_currency(currency)
        filters = self._filters(currency, start, end)
        is_expense = Transaction.type == TransactionType.EXPENSE

        total_income = await self._total(TransactionType.INCOME, filters)
        total_expenses = Decimal("0.00") - await self._total(TransactionType.EXPENSE, filters)

        # --- Top items by spend ---
        spent = -func.sum(Transaction.amount)
        item_stmt = (
            select(Transaction.item_name, spent.label("total"), func.count(Transaction.id).label("count"))
            .where(*filters, is_expense, Transaction.item_name.is_not(None))
            .group_by(Transaction.item_name)
            .order_by(spent.desc())
            .limit(TOP_ITEMS_LIMIT)
        )
        top_items = [
            {"name": name, "total": to_money(total), "count": count}
            for name, total, count in (await self.db.execute(item_stmt)).all()
        ]

        # --- Spend per bucket ---
        bucket_stmt = (
            select(Bucket.id, Bucket.name, Bucket.color, spent.label("total"))
            .select_from(Transaction)
            .join(Bucket, Bucket.id == Transaction.bucket_id)
            .where(*filters, is_expense)
            .group_by(Bucket.id, Bucket.name, Bucket.color)
            .order_by(spent.desc())
        )
        by_bucket = [
            {"bucket_id": bucket_id, "bucket_name": name, "color": color, "total": to_money(total)}
            for bucket_id, name, color, total in (await self.db.execute(bucket_stmt)).all()
        ]

        # --- Spend per category ---
        category_stmt = (
            select(Transaction.category, spent.label("total"))
            .where(*filters, is_expense, Transaction.category.is_not(None))
            .group_by(Transaction.category)
            .order_by(spent.desc())
        )
        by_category = [
            {"category": category, "total": to_money(total)}
            for category, total in (await self.db.execute(category_stmt)).all()
        ]

        return {
            "currency_code": currency,
            "total_income": total_income,
            "total_expenses": total_expenses,
            "net": total_income - total_expenses,
            "top_items": top_items,
            "by_bucket": by_bucket,
            "by_category": by_category,
            "top_category": by_category[0]["category"] if by_category else None,
        }
