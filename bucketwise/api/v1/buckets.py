# api/v1/buckets.py

from decimal import Decimal
from typing import List, Optional

from fastapi import APIRouter, Query, status

from ...errors import BucketwiseError
from ...schemas.bucket import BalanceOut, BalancesOut, BucketOut, SeedResultOut
from ...services.bucket_service import BucketService
from ...services.ledger_service import LedgerService
from ...services.settings_service import SettingsService
from ...services._helpers import normalize_currency
from ..dependencies import DBDependency, UserIdDependency
from ..errors import to_http_exception

router = APIRouter(tags=["Buckets & Balances"])


@router.get(
    "/buckets",
    response_model=List[BucketOut],
    summary="List the bucket catalog in display order",
)
async def list_buckets(db: DBDependency):
    return await BucketService(db).list_buckets()


@router.post(
    "/buckets/seed",
    response_model=SeedResultOut,
    status_code=status.HTTP_200_OK,
    summary="Insert the default buckets that are missing (idempotent)",
)
async def seed_buckets(db: DBDependency):
    service = BucketService(db)
    created = await service.seed_default_buckets()
    return {"created": created, "buckets": await service.list_buckets()}


@router.get(
    "/balances",
    response_model=BalancesOut,
    summary="Current balance of every bucket in one currency",
)
async def get_balances(
    db: DBDependency,
    user_id: UserIdDependency,
    currency: Optional[str] = Query(None, description="Defaults to the user's default currency."),
):
    try:
        if currency is None:
            currency = (await SettingsService(db, user_id).get_settings()).default_currency
        currency = normalize_currency(currency)
        rows = await LedgerService(db, user_id).list_balances(currency)
    except BucketwiseError as e:
        raise to_http_exception(e)

    balances = [
        BalanceOut(
            bucket_id=bucket.id,
            bucket_name=bucket.name,
            color=bucket.color,
            display_order=bucket.display_order,
            currency_code=currency,
            balance=balance,
        )
        for bucket, balance in rows
    ]
    return BalancesOut(
        currency_code=currency,
        total=sum((row.balance for row in balances), Decimal("0.00")),
        balances=balances,
    )
