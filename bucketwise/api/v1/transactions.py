# api/v1/transactions.py

from datetime import datetime
from typing import List, Optional

from fastapi import APIRouter, Query

from ...db.enums import TransactionType
from ...errors import BucketwiseError
from ...schemas.transaction import TransactionOut
from ...services.transaction_service import MAX_PAGE_SIZE, TransactionService
from ..dependencies import DBDependency, UserIdDependency
from ..errors import to_http_exception

router = APIRouter(
    prefix="/transactions",
    tags=["Transaction History"],
)


@router.get("", response_model=List[TransactionOut], summary="Transaction history, newest first")
async def list_transactions(
    db: DBDependency,
    user_id: UserIdDependency,
    tx_type: Optional[TransactionType] = Query(None, alias="type"),
    bucket_id: Optional[int] = Query(None),
    currency: Optional[str] = Query(None),
    start: Optional[datetime] = Query(None),
    end: Optional[datetime] = Query(None),
    limit: int = Query(100, ge=1, le=MAX_PAGE_SIZE),
    offset: int = Query(0, ge=0),
):
    try:
        rows = await TransactionService(db, user_id).list_transactions(
            tx_type=tx_type.value if tx_type is not None else None,
            bucket_id=bucket_id,
            currency=currency,
            start=start,
            end=end,
            limit=limit,
            offset=offset,
        )
    except BucketwiseError as e:
        raise to_http_exception(e)

    history = []
    for transaction, bucket_name in rows:
        out = TransactionOut.model_validate(transaction)
        out.bucket_name = bucket_name
        history.append(out)
    return history
