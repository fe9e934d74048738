# services/affordability_service.py

from datetime import date
from decimal import Decimal
from typing import Any, Dict, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from ..db.enums import DisciplineMode
from ..models.bucket import Bucket
from ..rules.affordability import AffordabilityDecision, check_affordability, daily_spending_total, days_remaining_in_month
from ..rules.allocation_rules import gross_income_needed
from ._helpers import normalize_currency, require_positive
from .bucket_service import BucketService
from .expense_service import ExpenseService
from .ledger_service import LedgerService
from .settings_service import SettingsService


class AffordabilityService:
    """Read-only affordability previews against a user's stored balances."""

    def __init__(self, db: AsyncSession, user_id: str):
        self.db = db
        self.user_id = user_id
        self.bucket_service = BucketService(db)
        self.ledger = LedgerService(db, user_id)
        self.expense_service = ExpenseService(db, user_id)
        self.settings_service = SettingsService(db, user_id)

    async def resolve_mode(self, mode=None) -> DisciplineMode:
        """Explicit override wins; otherwise the user's default mode."""
        if mode is None:
            return await self.settings_service.get_mode()
        return DisciplineMode.parse(mode)

    async def evaluate(self, bucket: Bucket, amount: Decimal, currency: str, mode: DisciplineMode) -> AffordabilityDecision:
        balance = await self.ledger.get_balance(bucket.id, currency)
        return check_affordability(amount, balance, bucket.limiters(), mode)

    async def income_needed(self, bucket: Bucket, decision: AffordabilityDecision, currency: str) -> Optional[Decimal]:
        if decision.is_affordable:
            return None
        total_active = await self.expense_service.total_active_expenses(currency)
        return gross_income_needed(decision.shortfall, bucket.name, total_active)

    async def check(self, bucket_id: int, amount, currency: str, mode=None) -> Dict[str, Any]:
        price = require_positive(amount)
        currency = normalize_currency(currency)
        bucket = await self.bucket_service.get_bucket(bucket_id)
        resolved_mode = await self.resolve_mode(mode)

        decision = await self.evaluate(bucket, price, currency, resolved_mode)
        return self.decision_payload(bucket, decision, currency, await self.income_needed(bucket, decision, currency))

    async def daily_check(
        self, bucket_id: int, daily_amount, currency: str, mode=None, today: Optional[date] = None
    ) -> Dict[str, Any]:
        """Can the bucket carry ``daily_amount`` every day until the end of the month?"""
        daily = require_positive(daily_amount, "daily_amount")
        currency = normalize_currency(currency)
        today = today or date.today()
        bucket = await self.bucket_service.get_bucket(bucket_id)
        resolved_mode = await self.resolve_mode(mode)

        total = daily_spending_total(daily, today)
        decision = await self.evaluate(bucket, total, currency, resolved_mode)

        payload = self.decision_payload(bucket, decision, currency, await self.income_needed(bucket, decision, currency))
        payload.update(
            {
                "daily_amount": daily,
                "days_remaining": days_remaining_in_month(today),
                "total_amount": total,
            }
        )
        return payload

    @staticmethod
    def decision_payload(
        bucket: Bucket, decision: AffordabilityDecision, currency: str, income_needed: Optional[Decimal]
    ) -> Dict[str, Any]:
        return {
            "bucket_id": bucket.id,
            "bucket_name": bucket.name,
            "currency_code": currency,
            "amount": decision.amount,
            "mode": decision.mode.value,
            "is_affordable": decision.is_affordable,
            "current_balance": decision.current_balance,
            "required_balance": decision.required_balance,
            "max_affordable": decision.max_affordable,
            "limiter": decision.limiter,
            "income_needed": income_needed,
        }
