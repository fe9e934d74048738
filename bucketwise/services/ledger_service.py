# services/ledger_service.py

import logging
from datetime import datetime
from decimal import Decimal
from typing import Any, Dict, List, Optional, Tuple

from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from ..db.base import utcnow
from ..db.enums import TransactionType
from ..db.upsert import upsert_insert
from ..models.balance import Balance
from ..models.bucket import Bucket
from ..models.transaction import Transaction
from ..rules.allocation_rules import to_money

logger = logging.getLogger(__name__)


class LedgerService:
    """
    Balance Ledger + Transaction Log writer for one user.

    Balances are only changed through additive deltas evaluated by the
    database (``balance = balance + delta``), so concurrent sessions never
    lose each other's updates. Every delta is paired with exactly one
    transaction row inside the caller's store transaction.
    """

    def __init__(self, db: AsyncSession, user_id: str):
        self.db = db
        self.user_id = user_id

    # ----------------------------------------------------------------------
    # READS
    # ----------------------------------------------------------------------

    async def get_balance(self, bucket_id: int, currency: str) -> Decimal:
        """Current balance; a (bucket, currency) pair never written to is 0."""
        stmt = select(Balance.balance).where(
            Balance.user_id == self.user_id,
            Balance.bucket_id == bucket_id,
            Balance.currency_code == currency,
        )
        result = await self.db.execute(stmt)
        value = result.scalar_one_or_none()
        return value if value is not None else Decimal("0.00")

    async def list_balances(self, currency: str) -> List[Tuple[Bucket, Decimal]]:
        """Every catalog bucket with the user's balance in ``currency`` (0 when absent)."""
        stmt = (
            select(Bucket, Balance.balance)
            .outerjoin(
                Balance,
                (Balance.bucket_id == Bucket.id)
                & (Balance.user_id == self.user_id)
                & (Balance.currency_code == currency),
            )
            .order_by(Bucket.display_order.asc(), Bucket.id.asc())
        )
        result = await self.db.execute(stmt)
        return [(bucket, balance if balance is not None else Decimal("0.00")) for bucket, balance in result.all()]

    # ----------------------------------------------------------------------
    # WRITES
    # ----------------------------------------------------------------------

    async def apply_delta(self, bucket_id: int, currency: str, delta: Decimal) -> Decimal:
        """Atomic insert-or-increment keyed by (user, bucket, currency). Returns the new balance."""
        now = utcnow()
        stmt = upsert_insert(self.db, Balance).values(
            user_id=self.user_id,
            bucket_id=bucket_id,
            currency_code=currency,
            balance=delta,
            updated_at=now,
        )
        stmt = stmt.on_conflict_do_update(
            index_elements=["user_id", "bucket_id", "currency_code"],
            set_={
                "balance": Balance.balance + stmt.excluded.balance,
                "updated_at": stmt.excluded.updated_at,
            },
        ).returning(Balance.balance)

        result = await self.db.execute(stmt)
        return result.scalar_one()

    async def debit_if_covered(
        self, bucket_id: int, currency: str, amount: Decimal, required_balance: Decimal
    ) -> Optional[Decimal]:
        """
        Conditional atomic decrement: subtracts ``amount`` only while the stored
        balance still covers ``required_balance``. Returns the new balance, or
        None when the condition no longer holds (e.g. another session spent first).
        """
        stmt = (
            update(Balance)
            .where(
                Balance.user_id == self.user_id,
                Balance.bucket_id == bucket_id,
                Balance.currency_code == currency,
                Balance.balance >= required_balance,
            )
            .values(balance=Balance.balance - amount, updated_at=utcnow())
            .returning(Balance.balance)
            .execution_options(synchronize_session=False)
        )
        result = await self.db.execute(stmt)
        return result.scalar_one_or_none()

    async def record(
        self,
        tx_type: TransactionType,
        amount: Decimal,
        currency: str,
        bucket_id: Optional[int] = None,
        date: Optional[datetime] = None,
        **metadata: Any,
    ) -> Transaction:
        """Appends one row to the transaction log (never updated afterwards)."""
        transaction = Transaction(
            user_id=self.user_id,
            type=tx_type,
            amount=amount,
            currency_code=currency,
            bucket_id=bucket_id,
            date=date or utcnow(),
            **metadata,
        )
        self.db.add(transaction)
        await self.db.flush()
        return transaction

    async def post(
        self,
        tx_type: TransactionType,
        bucket_id: int,
        currency: str,
        amount: Decimal,
        date: Optional[datetime] = None,
        **metadata: Any,
    ) -> Tuple[Transaction, Decimal]:
        """Balance delta + its transaction row, as one unit."""
        new_balance = await self.apply_delta(bucket_id, currency, amount)
        transaction = await self.record(tx_type, amount, currency, bucket_id=bucket_id, date=date, **metadata)
        logger.debug(
            "Posted %s %s %s to bucket %s for user %s (balance now %s)",
            tx_type.value, amount, currency, bucket_id, self.user_id, new_balance,
        )
        return transaction, new_balance

    async def reconcile_bucket(self, bucket_id: int, currency: str) -> Dict[str, Decimal]:
        """Compares the stored balance with the sum of the bucket's transactions."""
        stmt = select(func.coalesce(func.sum(Transaction.amount), 0)).where(
            Transaction.user_id == self.user_id,
            Transaction.bucket_id == bucket_id,
            Transaction.currency_code == currency,
        )
        logged = to_money((await self.db.execute(stmt)).scalar_one())
        stored = await self.get_balance(bucket_id, currency)
        return {"balance": stored, "transactions_total": logged, "difference": stored - logged}
