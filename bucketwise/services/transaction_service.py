# services/transaction_service.py

from datetime import datetime
from typing import List, Optional, Tuple

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ..db.enums import TransactionType
from ..errors import ValidationError
from ..models.bucket import Bucket
from ..models.transaction import Transaction
from ._helpers import normalize_currency

MAX_PAGE_SIZE = 500


class TransactionService:
    """
    Read side of the transaction log. Rows are written by the ledger only;
    this service filters and pages through them for history screens.
    """

    def __init__(self, db: AsyncSession, user_id: str):
        self.db = db
        self.user_id = user_id

    async def list_transactions(
        self,
        tx_type: Optional[str] = None,
        bucket_id: Optional[int] = None,
        currency: Optional[str] = None,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
        limit: int = 100,
        offset: int = 0,
    ) -> List[Tuple[Transaction, Optional[str]]]:
        """Newest first, each row paired with its bucket name (None for raw income)."""
        if limit <= 0 or limit > MAX_PAGE_SIZE:
            raise ValidationError(f"limit must be between 1 and {MAX_PAGE_SIZE}.")
        if offset < 0:
            raise ValidationError("offset must not be negative.")

        stmt = (
            select(Transaction, Bucket.name)
            .outerjoin(Bucket, Bucket.id == Transaction.bucket_id)
            .where(Transaction.user_id == self.user_id)
        )
        if tx_type is not None:
            try:
                stmt = stmt.where(Transaction.type == TransactionType(str(tx_type).lower()))
            except ValueError as exc:
                raise ValidationError(f"Unknown transaction type {tx_type!r}.") from exc
        if bucket_id is not None:
            stmt = stmt.where(Transaction.bucket_id == bucket_id)
        if currency:
            stmt = stmt.where(Transaction.currency_code == normalize_currency(currency))
        if start is not None:
            stmt = stmt.where(Transaction.date >= start)
        if end is not None:
            stmt = stmt.where(Transaction.date <= end)

        stmt = stmt.order_by(Transaction.date.desc(), Transaction.id.desc()).limit(limit).offset(offset)
        result = await self.db.execute(stmt)
        return [(transaction, bucket_name) for transaction, bucket_name in result.all()]
