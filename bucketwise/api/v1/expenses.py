# api/v1/expenses.py

from typing import List, Literal, Optional

from fastapi import APIRouter, Query, status

from ...errors import BucketwiseError
from ...schemas.expense import DeductionOut, ExpenseCreate, ExpenseOut, ExpenseUpdate, ExpenseWriteOut
from ...services.expense_service import ExpenseService
from ..dependencies import DBDependency, UserIdDependency
from ..errors import to_http_exception

router = APIRouter(
    prefix="/expenses",
    tags=["Expenses"],
)


def _write_out(expense, deduction) -> ExpenseWriteOut:
    return ExpenseWriteOut(
        expense=ExpenseOut.model_validate(expense),
        deduction=DeductionOut(
            deducted=deduction.deducted,
            amount=deduction.amount,
            reason=deduction.reason,
            is_incremental=deduction.is_incremental,
            new_balance=deduction.new_balance,
            transaction_id=deduction.transaction.id if deduction.transaction is not None else None,
        ),
    )


# --- CREATE Expense ---
@router.post(
    "",
    response_model=ExpenseWriteOut,
    status_code=status.HTTP_201_CREATED,
    summary="Create an expense and deduct its paid portion from the Expenses bucket",
)
async def create_expense(expense_data: ExpenseCreate, db: DBDependency, user_id: UserIdDependency):
    try:
        expense, deduction = await ExpenseService(db, user_id).create_expense(expense_data.model_dump())
    except BucketwiseError as e:
        raise to_http_exception(e)
    return _write_out(expense, deduction)


# --- READ All Expenses ---
@router.get(
    "",
    response_model=List[ExpenseOut],
    summary="List expenses, newest first",
)
async def list_expenses(
    db: DBDependency,
    user_id: UserIdDependency,
    active: Literal["all", "active", "inactive"] = Query("all"),
    currency: Optional[str] = Query(None),
):
    try:
        return await ExpenseService(db, user_id).list_expenses(active=active, currency=currency)
    except BucketwiseError as e:
        raise to_http_exception(e)


# --- READ Single Expense ---
@router.get(
    "/{expense_id}",
    response_model=ExpenseOut,
    summary="Get a specific expense by ID",
)
async def get_expense(expense_id: int, db: DBDependency, user_id: UserIdDependency):
    try:
        return await ExpenseService(db, user_id).get_expense(expense_id)
    except BucketwiseError as e:
        raise to_http_exception(e)


# --- UPDATE Expense ---
@router.patch(
    "/{expense_id}",
    response_model=ExpenseWriteOut,
    summary="Update an expense; a higher paid amount deducts only the difference",
)
async def update_expense(expense_id: int, update_data: ExpenseUpdate, db: DBDependency, user_id: UserIdDependency):
    try:
        expense, deduction = await ExpenseService(db, user_id).update_expense(
            expense_id, update_data.model_dump(exclude_unset=True)
        )
    except BucketwiseError as e:
        raise to_http_exception(e)
    return _write_out(expense, deduction)


# --- DELETE Expense ---
@router.delete(
    "/{expense_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete an expense (past deductions stay in the history)",
)
async def delete_expense(expense_id: int, db: DBDependency, user_id: UserIdDependency):
    try:
        await ExpenseService(db, user_id).delete_expense(expense_id)
    except BucketwiseError as e:
        raise to_http_exception(e)
    return None
