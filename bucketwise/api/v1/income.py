# api/v1/income.py

from fastapi import APIRouter, status

from ...errors import BucketwiseError
from ...schemas.income import AllocationOut, AllocationPreviewOut, BucketAllocationOut, IncomeIn, IncomePreviewIn
from ...services.allocation_service import AllocationService
from ..dependencies import DBDependency, UserIdDependency
from ..errors import to_http_exception

router = APIRouter(
    prefix="/income",
    tags=["Income Allocation"],
)


@router.post(
    "",
    response_model=AllocationOut,
    status_code=status.HTTP_201_CREATED,
    summary="Record an income event and split it across the buckets",
)
async def allocate_income(income: IncomeIn, db: DBDependency, user_id: UserIdDependency):
    """
    Active expenses are reserved into the Expenses bucket first; the rest is
    split 60% Necessity / 10% every other bucket, with the remainder going
    to Savings.
    """
    try:
        result = await AllocationService(db, user_id).allocate_income(
            amount=income.amount,
            currency=income.currency_code,
            date=income.date,
            note=income.note,
            source=income.source,
        )
    except BucketwiseError as e:
        raise to_http_exception(e)

    def _out(allocation):
        return BucketAllocationOut.model_validate(allocation) if allocation is not None else None

    return AllocationOut(
        income_transaction_id=result.income_transaction.id,
        currency_code=result.currency_code,
        gross_income=result.gross_income,
        total_active_expenses=result.total_active_expenses,
        net_after_expenses=result.net_after_expenses,
        allocations=[_out(allocation) for allocation in result.allocations],
        expenses_allocation=_out(result.expenses_allocation),
        savings=_out(result.savings),
        savings_share=result.savings_share,
    )


@router.post(
    "/preview",
    response_model=AllocationPreviewOut,
    summary="Calculator: preview an income split without recording it",
)
async def preview_income(preview: IncomePreviewIn, db: DBDependency, user_id: UserIdDependency):
    try:
        return await AllocationService(db, user_id).preview(
            amount=preview.amount,
            currency=preview.currency_code,
            expense_amounts=preview.expense_amounts,
            purchase_bucket_id=preview.purchase_bucket_id,
            purchase_amount=preview.purchase_amount,
            mode=preview.mode,
        )
    except BucketwiseError as e:
        raise to_http_exception(e)
