# api/v1/purchases.py

from fastapi import APIRouter, status

from ...errors import BucketwiseError
from ...schemas.purchase import AffordabilityOut, DailyCheckIn, DailyCheckOut, PurchaseCheckIn, PurchaseIn, PurchaseOut
from ...services.affordability_service import AffordabilityService
from ...services.purchase_service import PurchaseService
from ..dependencies import DBDependency, UserIdDependency
from ..errors import to_http_exception

router = APIRouter(
    prefix="/purchases",
    tags=["Purchases & Affordability"],
)


@router.post(
    "/check",
    response_model=AffordabilityOut,
    summary="Check whether a purchase is affordable (no writes)",
)
async def check_purchase(check: PurchaseCheckIn, db: DBDependency, user_id: UserIdDependency):
    try:
        return await AffordabilityService(db, user_id).check(
            check.bucket_id, check.amount, check.currency_code, mode=check.mode
        )
    except BucketwiseError as e:
        raise to_http_exception(e)


@router.post(
    "",
    response_model=PurchaseOut,
    status_code=status.HTTP_200_OK,
    summary="Record a purchase if the bucket can afford it",
)
async def record_purchase(purchase: PurchaseIn, db: DBDependency, user_id: UserIdDependency):
    """
    A blocked purchase is not an error: the response carries
    ``status="rejected"`` together with the numbers that blocked it.
    """
    try:
        result = await PurchaseService(db, user_id).record_purchase(
            bucket_id=purchase.bucket_id,
            amount=purchase.amount,
            currency=purchase.currency_code,
            metadata=purchase.model_dump(include={"item_name", "category", "note"}),
            mode=purchase.mode,
            date=purchase.date,
        )
    except BucketwiseError as e:
        raise to_http_exception(e)

    payload = AffordabilityService.decision_payload(
        result.bucket, result.decision, result.currency_code, result.income_needed
    )
    payload.update(
        {
            "status": result.status,
            "transaction_id": result.transaction.id if result.transaction is not None else None,
            "new_balance": result.new_balance,
        }
    )
    return payload


@router.post(
    "/daily-check",
    response_model=DailyCheckOut,
    summary="Can a daily spend be sustained until the end of the month?",
)
async def daily_check(check: DailyCheckIn, db: DBDependency, user_id: UserIdDependency):
    try:
        return await AffordabilityService(db, user_id).daily_check(
            check.bucket_id, check.daily_amount, check.currency_code, mode=check.mode
        )
    except BucketwiseError as e:
        raise to_http_exception(e)
