# services/purchase_service.py

import logging
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Any, Dict, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from ..db.enums import TransactionType
from ..models.bucket import Bucket
from ..models.transaction import Transaction
from ..rules.affordability import AffordabilityDecision
from ..utils.deadline import run_with_timeout
from ._helpers import normalize_currency, require_positive
from .affordability_service import AffordabilityService
from .ledger_service import LedgerService

logger = logging.getLogger(__name__)

RECORDED = "recorded"
REJECTED = "rejected"

_METADATA_FIELDS = ("item_name", "category", "note", "source")


@dataclass
class PurchaseResult:
    status: str
    bucket: Bucket
    currency_code: str
    decision: AffordabilityDecision
    transaction: Optional[Transaction] = None
    new_balance: Optional[Decimal] = None
    income_needed: Optional[Decimal] = None

    @property
    def recorded(self) -> bool:
        return self.status == RECORDED


class PurchaseService:
    """
    Gated spending from a bucket. A blocked purchase is returned as a
    ``rejected`` result; only approved purchases write to the ledger.
    """

    def __init__(self, db: AsyncSession, user_id: str):
        self.db = db
        self.user_id = user_id
        self.affordability = AffordabilityService(db, user_id)
        self.ledger = LedgerService(db, user_id)

    async def record_purchase(
        self,
        bucket_id: int,
        amount,
        currency: str,
        metadata: Optional[Dict[str, Any]] = None,
        mode=None,
        date: Optional[datetime] = None,
        timeout: Optional[float] = None,
    ) -> PurchaseResult:
        price = require_positive(amount)
        currency = normalize_currency(currency)
        metadata = {key: value for key, value in (metadata or {}).items() if key in _METADATA_FIELDS}
        return await run_with_timeout(
            self._record(bucket_id, price, currency, metadata, mode, date), timeout, "record_purchase"
        )

    async def _record(
        self, bucket_id: int, price: Decimal, currency: str, metadata: Dict[str, Any], mode, date: Optional[datetime]
    ) -> PurchaseResult:
        bucket = await self.affordability.bucket_service.get_bucket(bucket_id)
        resolved_mode = await self.affordability.resolve_mode(mode)

        decision = await self.affordability.evaluate(bucket, price, currency, resolved_mode)
        if not decision.is_affordable:
            return await self._reject(bucket, currency, decision)

        # Re-checked by the store: fails if the balance dropped since the read above
        new_balance = await self.ledger.debit_if_covered(bucket.id, currency, price, decision.exact_required)
        if new_balance is None:
            logger.info(
                "Balance of bucket %s changed before the debit for user %s; re-evaluating purchase.",
                bucket.name, self.user_id,
            )
            fresh = await self.affordability.evaluate(bucket, price, currency, resolved_mode)
            return await self._reject(bucket, currency, fresh)

        transaction = await self.ledger.record(
            TransactionType.EXPENSE, -price, currency, bucket_id=bucket.id, date=date, **metadata
        )
        logger.info(
            "Recorded purchase of %s %s from %s for user %s (mode %s, balance now %s)",
            price, currency, bucket.name, self.user_id, resolved_mode.value, new_balance,
        )
        return PurchaseResult(
            status=RECORDED,
            bucket=bucket,
            currency_code=currency,
            decision=decision,
            transaction=transaction,
            new_balance=new_balance,
        )

    async def _reject(self, bucket: Bucket, currency: str, decision: AffordabilityDecision) -> PurchaseResult:
        income_needed = await self.affordability.income_needed(bucket, decision, currency)
        logger.info(
            "Rejected purchase of %s %s from %s for user %s: requires %s, balance %s (mode %s)",
            decision.amount, currency, bucket.name, self.user_id,
            decision.required_balance, decision.current_balance, decision.mode.value,
        )
        return PurchaseResult(
            status=REJECTED,
            bucket=bucket,
            currency_code=currency,
            decision=decision,
            income_needed=income_needed,
        )
