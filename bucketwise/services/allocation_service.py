# services/allocation_service.py

import logging
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Any, Dict, Iterable, List, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from ..db.enums import DisciplineMode, TransactionType
from ..models.bucket import Bucket
from ..models.transaction import Transaction
from ..rules.affordability import check_affordability
from ..rules.allocation_rules import AllocationSplit, gross_income_needed, split_income, to_money
from ..rules.policy_config import EXPENSES_BUCKET, SAVINGS_BUCKET
from ..utils.deadline import run_with_timeout
from ._helpers import normalize_currency, require_non_negative, require_positive
from .bucket_service import BucketService
from .expense_service import ExpenseService
from .ledger_service import LedgerService
from .settings_service import SettingsService

logger = logging.getLogger(__name__)


@dataclass
class BucketAllocation:
    bucket_id: int
    bucket_name: str
    amount: Decimal
    new_balance: Optional[Decimal] = None
    transaction_id: Optional[int] = None


@dataclass
class AllocationResult:
    income_transaction: Transaction
    currency_code: str
    gross_income: Decimal
    total_active_expenses: Decimal
    net_after_expenses: Decimal
    allocations: List[BucketAllocation] = field(default_factory=list)
    expenses_allocation: Optional[BucketAllocation] = None
    savings: Optional[BucketAllocation] = None
    # Remainder is reported even when no Savings bucket exists to receive it
    savings_share: Decimal = Decimal("0.00")


class AllocationService:
    """
    Splits one income event across the bucket catalog and writes the result:
    the raw income row, then one sweep (ledger delta + transaction) per bucket
    with a non-zero share. Every write goes into the caller's store
    transaction, so an income event lands completely or not at all.
    """

    def __init__(self, db: AsyncSession, user_id: str):
        self.db = db
        self.user_id = user_id
        self.bucket_service = BucketService(db)
        self.expense_service = ExpenseService(db, user_id)
        self.ledger = LedgerService(db, user_id)

    async def allocate_income(
        self,
        amount,
        currency: str,
        date: Optional[datetime] = None,
        note: Optional[str] = None,
        source: Optional[str] = None,
        timeout: Optional[float] = None,
    ) -> AllocationResult:
        gross = require_positive(amount)
        currency = normalize_currency(currency)
        return await run_with_timeout(
            self._allocate(gross, currency, date, note, source), timeout, "allocate_income"
        )

    async def _allocate(
        self, gross: Decimal, currency: str, date: Optional[datetime], note: Optional[str], source: Optional[str]
    ) -> AllocationResult:
        # Read before any write so the reserve matches what this event sees
        total_active = await self.expense_service.total_active_expenses(currency)

        buckets = await self.bucket_service.list_buckets()
        expenses_bucket = await self.bucket_service.get_or_create_expenses_bucket()
        by_name = {bucket.name: bucket for bucket in buckets}
        by_name[EXPENSES_BUCKET] = expenses_bucket

        split = split_income(gross, total_active, [bucket.name for bucket in buckets])

        income_tx = await self.ledger.record(
            TransactionType.INCOME, gross, currency, bucket_id=None, date=date, note=note, source=source
        )

        result = AllocationResult(
            income_transaction=income_tx,
            currency_code=currency,
            gross_income=split.gross_income,
            total_active_expenses=split.total_active_expenses,
            net_after_expenses=split.net_after_expenses,
            savings_share=split.savings_share,
        )

        for name, share in split.bucket_shares().items():
            sweep = await self._sweep(by_name[name], share, currency, date, source)
            if sweep is not None:
                result.allocations.append(sweep)

        if split.expenses_share > 0:
            result.expenses_allocation = await self._sweep(
                expenses_bucket, split.expenses_share, currency, date, source, note="Reserved for active expenses"
            )

        savings_bucket = by_name.get(SAVINGS_BUCKET)
        if savings_bucket is None:
            logger.warning(
                "No '%s' bucket in the catalog; remainder %s %s for user %s was not swept.",
                SAVINGS_BUCKET, split.savings_share, currency, self.user_id,
            )
        else:
            result.savings = await self._sweep(savings_bucket, split.savings_share, currency, date, source)

        logger.info(
            "Allocated %s %s for user %s (active expenses %s, net %s, savings %s)",
            gross, currency, self.user_id, split.total_active_expenses, split.net_after_expenses, split.savings_share,
        )
        return result

    async def _sweep(
        self,
        bucket: Bucket,
        share: Decimal,
        currency: str,
        date: Optional[datetime],
        source: Optional[str],
        note: Optional[str] = None,
    ) -> Optional[BucketAllocation]:
        if share == 0:
            return None
        transaction, new_balance = await self.ledger.post(
            TransactionType.SWEEP, bucket.id, currency, share, date=date, source=source, note=note
        )
        return BucketAllocation(
            bucket_id=bucket.id,
            bucket_name=bucket.name,
            amount=share,
            new_balance=new_balance,
            transaction_id=transaction.id,
        )

    # ----------------------------------------------------------------------
    # CALCULATOR (no writes)
    # ----------------------------------------------------------------------

    async def preview(
        self,
        amount,
        currency: str,
        expense_amounts: Optional[Iterable[Any]] = None,
        purchase_bucket_id: Optional[int] = None,
        purchase_amount=None,
        mode=None,
    ) -> Dict[str, Any]:
        """
        What-if split for an income amount. With ``expense_amounts`` the given
        list replaces the user's stored active expenses. Net income is clamped
        to zero for display. A purchase can be checked against the balances the
        user would hold after this income.
        """
        gross = require_non_negative(amount, "amount")
        currency = normalize_currency(currency)

        if expense_amounts is None:
            total_active = await self.expense_service.total_active_expenses(currency)
        else:
            total_active = sum(
                (require_non_negative(value, "expense amount") for value in expense_amounts), Decimal("0.00")
            )

        buckets = await self.bucket_service.list_buckets()
        split = split_income(gross, total_active, [bucket.name for bucket in buckets], clamp_net=True)
        shares = self._shares_by_bucket(split)

        preview: Dict[str, Any] = {
            "currency_code": currency,
            "gross_income": split.gross_income,
            "total_active_expenses": split.total_active_expenses,
            "net_after_expenses": split.net_after_expenses,
            "expenses_share": split.expenses_share,
            "savings_share": split.savings_share,
            "allocations": [
                {"bucket_id": bucket.id, "bucket_name": bucket.name, "amount": shares[bucket.name]}
                for bucket in buckets
                if bucket.name in shares
            ],
            "purchase_check": None,
        }

        if purchase_bucket_id is not None and purchase_amount is not None:
            preview["purchase_check"] = await self._simulated_purchase_check(
                purchase_bucket_id, purchase_amount, currency, shares, split, mode
            )
        return preview

    async def _simulated_purchase_check(
        self, bucket_id: int, purchase_amount, currency: str, shares: Dict[str, Decimal], split: AllocationSplit, mode
    ) -> Dict[str, Any]:
        bucket = await self.bucket_service.get_bucket(bucket_id)
        price = require_positive(purchase_amount, "purchase_amount")
        if mode is None:
            mode = await SettingsService(self.db, self.user_id).get_mode()
        else:
            mode = DisciplineMode.parse(mode)

        current = await self.ledger.get_balance(bucket.id, currency)
        simulated = current + shares.get(bucket.name, Decimal("0.00"))
        decision = check_affordability(price, simulated, bucket.limiters(), mode)

        income_needed = None
        if not decision.is_affordable:
            income_needed = gross_income_needed(decision.shortfall, bucket.name, split.total_active_expenses)

        return {
            "bucket_id": bucket.id,
            "bucket_name": bucket.name,
            "amount": price,
            "mode": decision.mode.value,
            "current_balance": current,
            "simulated_balance": to_money(simulated),
            "is_affordable": decision.is_affordable,
            "required_balance": decision.required_balance,
            "max_affordable": decision.max_affordable,
            "limiter": decision.limiter,
            "income_needed": income_needed,
        }

    @staticmethod
    def _shares_by_bucket(split: AllocationSplit) -> Dict[str, Decimal]:
        shares = split.bucket_shares()
        shares[SAVINGS_BUCKET] = split.savings_share
        if split.expenses_share > 0:
            shares[EXPENSES_BUCKET] = split.expenses_share
        return shares
