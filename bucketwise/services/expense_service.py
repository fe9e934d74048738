# services/expense_service.py

import logging
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Any, Dict, List, Optional, Tuple

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from ..db.enums import TransactionType
from ..errors import NotFoundError, ValidationError
from ..models.expense import Expense
from ..models.transaction import Transaction
from ..rules.allocation_rules import to_money
from ..utils.deadline import run_with_timeout
from ._helpers import normalize_currency, require_non_negative, require_positive
from .bucket_service import BucketService
from .ledger_service import LedgerService

logger = logging.getLogger(__name__)

_UPDATABLE_FIELDS = ("name", "amount", "paid_amount", "active", "currency_code", "category", "due_date", "priority", "note")


@dataclass(frozen=True)
class ExpenseSnapshot:
    """Immutable copy of an expense as it was before an edit."""

    id: Optional[int]
    name: str
    amount: Decimal
    paid_amount: Optional[Decimal]
    active: bool
    currency_code: str
    category: Optional[str] = None
    note: Optional[str] = None

    @classmethod
    def of(cls, expense: Expense) -> "ExpenseSnapshot":
        return cls(
            id=expense.id,
            name=expense.name,
            amount=expense.amount,
            paid_amount=expense.paid_amount,
            active=expense.active,
            currency_code=expense.currency_code,
            category=expense.category,
            note=expense.note,
        )


@dataclass(frozen=True)
class DeductionResult:
    deducted: bool
    amount: Decimal
    reason: str
    new_balance: Optional[Decimal] = None
    transaction: Optional[Transaction] = None
    is_incremental: bool = False

    @classmethod
    def skipped(cls, reason: str) -> "DeductionResult":
        return cls(deducted=False, amount=Decimal("0.00"), reason=reason)


def amount_paid(expense) -> Decimal:
    """An absent paid_amount means the whole amount is paid in one shot."""
    return expense.paid_amount if expense.paid_amount is not None else expense.amount


class ExpenseService:
    """
    Expense CRUD plus the deduction reconciler: every create or edit of an
    active expense withdraws the newly paid portion from the Expenses bucket.
    """

    def __init__(self, db: AsyncSession, user_id: str):
        self.db = db
        self.user_id = user_id
        self.bucket_service = BucketService(db)
        self.ledger = LedgerService(db, user_id)

    # ----------------------------------------------------------------------
    # DEDUCTION RECONCILER
    # ----------------------------------------------------------------------

    async def reconcile_expense(self, expense, previous_expense=None, timeout: Optional[float] = None) -> DeductionResult:
        return await run_with_timeout(
            self._reconcile_expense(expense, previous_expense), timeout, "reconcile_expense"
        )

    async def _reconcile_expense(self, expense, previous_expense=None) -> DeductionResult:
        if not expense.active:
            return DeductionResult.skipped("inactive")

        to_deduct = amount_paid(expense)

        if previous_expense is None:
            due = to_deduct
            incremental = expense.paid_amount is not None and expense.paid_amount < expense.amount
        else:
            delta = to_deduct - amount_paid(previous_expense)
            if delta < 0:
                # A lowered paid amount is not credited back to the Expenses bucket
                logger.info(
                    "Expense %s paid amount decreased by %s for user %s; no credit applied.",
                    expense.id, -delta, self.user_id,
                )
                return DeductionResult.skipped("paid_amount_decreased")
            if delta == 0:
                return DeductionResult.skipped("no_change")
            due = delta
            incremental = True

        if due <= 0:
            return DeductionResult.skipped("nothing_due")

        bucket = await self.bucket_service.get_or_create_expenses_bucket()
        transaction, new_balance = await self.ledger.post(
            TransactionType.EXPENSE,
            bucket.id,
            expense.currency_code,
            -due,
            item_name=expense.name,
            category=expense.category,
            note=expense.note,
            is_incremental=incremental,
            expense_id=expense.id,
        )
        logger.info(
            "Deducted %s %s for expense %s (user %s, incremental=%s); Expenses balance now %s",
            due, expense.currency_code, expense.id, self.user_id, incremental, new_balance,
        )
        return DeductionResult(
            deducted=True,
            amount=due,
            reason="incremental_payment" if incremental else "full_payment",
            new_balance=new_balance,
            transaction=transaction,
            is_incremental=incremental,
        )

    # ----------------------------------------------------------------------
    # QUERIES
    # ----------------------------------------------------------------------

    async def total_active_expenses(self, currency: str) -> Decimal:
        stmt = select(func.coalesce(func.sum(Expense.amount), 0)).where(
            Expense.user_id == self.user_id,
            Expense.active.is_(True),
            Expense.currency_code == currency,
        )
        result = await self.db.execute(stmt)
        return to_money(result.scalar_one())

    async def list_expenses(self, active: str = "all", currency: Optional[str] = None) -> List[Expense]:
        stmt = select(Expense).where(Expense.user_id == self.user_id)
        if currency:
            stmt = stmt.where(Expense.currency_code == normalize_currency(currency))
        if active == "active":
            stmt = stmt.where(Expense.active.is_(True))
        elif active == "inactive":
            stmt = stmt.where(Expense.active.is_(False))
        elif active != "all":
            raise ValidationError("active filter must be one of 'all', 'active', 'inactive'.")

        stmt = stmt.order_by(Expense.created_at.desc(), Expense.id.desc())
        result = await self.db.execute(stmt)
        return list(result.scalars().all())

    async def get_expense(self, expense_id: int) -> Expense:
        stmt = select(Expense).where(Expense.id == expense_id, Expense.user_id == self.user_id)
        expense = (await self.db.execute(stmt)).scalar_one_or_none()
        if expense is None:
            raise NotFoundError(f"Expense {expense_id} not found.")
        return expense

    # ----------------------------------------------------------------------
    # COMMANDS
    # ----------------------------------------------------------------------

    async def create_expense(self, data: Dict[str, Any]) -> Tuple[Expense, DeductionResult]:
        """Stores a new expense and deducts its paid portion in full."""
        expense = Expense(
            user_id=self.user_id,
            name=data["name"],
            amount=require_positive(data.get("amount")),
            paid_amount=self._paid_amount(data.get("paid_amount")),
            active=data.get("active", True),
            currency_code=normalize_currency(data.get("currency_code")),
            category=data.get("category"),
            due_date=self._due_date(data.get("due_date")),
            priority=data.get("priority"),
            note=data.get("note"),
        )
        self.db.add(expense)
        await self.db.flush()

        deduction = await self.reconcile_expense(expense)
        return expense, deduction

    async def update_expense(self, expense_id: int, updates: Dict[str, Any]) -> Tuple[Expense, DeductionResult]:
        """Applies the edit, then deducts only what was newly paid relative to the prior version."""
        expense = await self.get_expense(expense_id)
        previous = ExpenseSnapshot.of(expense)

        for key, value in updates.items():
            if key not in _UPDATABLE_FIELDS:
                continue
            if key == "amount":
                value = require_positive(value)
            elif key == "paid_amount":
                value = self._paid_amount(value)
            elif key == "currency_code":
                value = normalize_currency(value)
            elif key == "due_date":
                value = self._due_date(value)
            elif key in ("name", "active") and value is None:
                continue
            setattr(expense, key, value)

        await self.db.flush()
        deduction = await self.reconcile_expense(expense, previous)
        return expense, deduction

    async def set_active(self, expense_id: int, active: bool) -> Tuple[Expense, DeductionResult]:
        return await self.update_expense(expense_id, {"active": active})

    async def delete_expense(self, expense_id: int) -> None:
        """Removes the expense row; past deductions stay in the transaction log."""
        expense = await self.get_expense(expense_id)
        await self.db.delete(expense)
        await self.db.flush()

    # ----------------------------------------------------------------------
    # HELPERS
    # ----------------------------------------------------------------------

    @staticmethod
    def _paid_amount(value) -> Optional[Decimal]:
        if value is None:
            return None
        return require_non_negative(value, "paid_amount")

    @staticmethod
    def _due_date(value) -> Optional[date]:
        if value is None or isinstance(value, date):
            return value
        try:
            return date.fromisoformat(str(value))
        except ValueError as exc:
            raise ValidationError("due_date must be an ISO date (YYYY-MM-DD).") from exc
