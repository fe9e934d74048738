"""Gated purchases: approval, rejection and the stale-balance race."""

from decimal import Decimal

import pytest
from sqlalchemy import func, select

from bucketwise.db.enums import DisciplineMode, TransactionType
from bucketwise.errors import NotFoundError, ValidationError
from bucketwise.models.transaction import Transaction
from bucketwise.services.affordability_service import AffordabilityService
from bucketwise.services.expense_service import ExpenseService
from bucketwise.services.ledger_service import LedgerService
from bucketwise.services.purchase_service import REJECTED, RECORDED, PurchaseService
from bucketwise.services.settings_service import SettingsService

from .conftest import USER_ID

pytestmark = pytest.mark.asyncio


async def _fund(db, bucket, amount, currency="USD"):
    await LedgerService(db, USER_ID).post(TransactionType.SWEEP, bucket.id, currency, Decimal(amount))


async def _expense_rows(db):
    result = await db.execute(
        select(func.count(Transaction.id)).where(Transaction.type == TransactionType.EXPENSE)
    )
    return result.scalar_one()


async def test_affordable_purchase_is_recorded(db, buckets):
    investment = buckets["Investment"]
    await _fund(db, investment, "300")
    await SettingsService(db, USER_ID).update_settings({"default_mode": "strict"})

    result = await PurchaseService(db, USER_ID).record_purchase(
        investment.id, Decimal("50"), "USD", metadata={"item_name": "Index fund", "category": "Stocks"}
    )

    assert result.status == RECORDED
    assert result.recorded
    assert result.decision.mode is DisciplineMode.STRICT
    assert result.decision.max_affordable == Decimal("60.00")
    assert result.new_balance == Decimal("250.00")
    assert result.transaction.amount == Decimal("-50.00")
    assert result.transaction.item_name == "Index fund"
    assert await LedgerService(db, USER_ID).get_balance(investment.id, "USD") == Decimal("250.00")


async def test_blocked_purchase_is_rejected_without_writes(db, buckets):
    investment = buckets["Investment"]
    await _fund(db, investment, "100")

    result = await PurchaseService(db, USER_ID).record_purchase(investment.id, Decimal("40"), "USD")

    assert result.status == REJECTED
    assert result.transaction is None
    assert result.decision.mode is DisciplineMode.INTERMEDIATE
    assert result.decision.required_balance == Decimal("120.00")
    assert result.decision.max_affordable == Decimal("33.33")
    assert result.income_needed == Decimal("200.00")
    assert await _expense_rows(db) == 0
    assert await LedgerService(db, USER_ID).get_balance(investment.id, "USD") == Decimal("100.00")


async def test_income_needed_includes_active_expenses(db, buckets):
    await ExpenseService(db, USER_ID).create_expense({"name": "Rent", "amount": "100", "currency_code": "USD"})
    necessity = buckets["Necessity"]

    result = await PurchaseService(db, USER_ID).record_purchase(necessity.id, Decimal("10"), "USD")

    # required 30, shortfall 30, 30 / 0.6 = 50, plus 100 of active expenses
    assert result.income_needed == Decimal("150.00")


async def test_mode_override_beats_default(db, buckets):
    fun = buckets["Fun"]
    await _fund(db, fun, "100")

    blocked = await PurchaseService(db, USER_ID).record_purchase(fun.id, Decimal("15"), "USD")
    allowed = await PurchaseService(db, USER_ID).record_purchase(fun.id, Decimal("15"), "USD", mode="desperate")

    assert blocked.status == REJECTED
    assert allowed.status == RECORDED
    assert allowed.decision.limiter == Decimal("5")


async def test_savings_purchases_need_only_the_price(db, buckets):
    savings = buckets["Savings"]
    await _fund(db, savings, "20")

    result = await PurchaseService(db, USER_ID).record_purchase(savings.id, Decimal("20"), "USD")

    assert result.status == RECORDED
    assert result.new_balance == Decimal("0.00")


async def test_purchase_in_unfunded_currency_is_rejected(db, buckets):
    fun = buckets["Fun"]
    await _fund(db, fun, "1000", currency="USD")

    result = await PurchaseService(db, USER_ID).record_purchase(fun.id, Decimal("1"), "EUR")
    assert result.status == REJECTED
    assert result.decision.current_balance == Decimal("0")


async def test_balance_drained_between_check_and_debit(db, buckets, monkeypatch):
    learning = buckets["Learning"]
    await _fund(db, learning, "300")
    original = AffordabilityService.evaluate
    calls = []

    async def evaluate_then_drain(self, bucket, amount, currency, mode):
        decision = await original(self, bucket, amount, currency, mode)
        if not calls:
            # Another session spends from the bucket right after our read
            await LedgerService(db, USER_ID).apply_delta(bucket.id, currency, Decimal("-250.00"))
        calls.append(decision)
        return decision

    monkeypatch.setattr(AffordabilityService, "evaluate", evaluate_then_drain)

    result = await PurchaseService(db, USER_ID).record_purchase(learning.id, Decimal("50"), "USD")

    assert calls[0].is_affordable
    assert result.status == REJECTED
    assert result.decision.current_balance == Decimal("50.00")
    assert await _expense_rows(db) == 0
    assert await LedgerService(db, USER_ID).get_balance(learning.id, "USD") == Decimal("50.00")


async def test_store_guard_uses_the_unrounded_requirement(db, buckets, monkeypatch):
    emergency = buckets["Emergency"]
    await _fund(db, emergency, "0.02")
    original = AffordabilityService.evaluate
    calls = []

    async def evaluate_then_spend(self, bucket, amount, currency, mode):
        decision = await original(self, bucket, amount, currency, mode)
        if not calls:
            await LedgerService(db, USER_ID).apply_delta(bucket.id, currency, Decimal("-0.01"))
        calls.append(decision)
        return decision

    monkeypatch.setattr(AffordabilityService, "evaluate", evaluate_then_spend)

    # Desperate needs 1.2 x 0.01 = 0.012, which rounds to the 0.01 left after the spend
    result = await PurchaseService(db, USER_ID).record_purchase(
        emergency.id, Decimal("0.01"), "USD", mode=DisciplineMode.DESPERATE
    )

    assert calls[0].is_affordable
    assert result.status == REJECTED
    assert result.decision.required_balance == Decimal("0.01")
    assert await _expense_rows(db) == 0
    assert await LedgerService(db, USER_ID).get_balance(emergency.id, "USD") == Decimal("0.01")


@pytest.mark.parametrize("amount", [Decimal("0"), Decimal("-1")])
async def test_purchase_amount_must_be_positive(db, buckets, amount):
    with pytest.raises(ValidationError):
        await PurchaseService(db, USER_ID).record_purchase(buckets["Fun"].id, amount, "USD")


async def test_purchase_from_unknown_bucket(db):
    with pytest.raises(NotFoundError):
        await PurchaseService(db, USER_ID).record_purchase(12345, Decimal("1"), "USD")


async def test_affordability_check_is_read_only(db, buckets):
    emergency = buckets["Emergency"]
    await _fund(db, emergency, "90")

    check = await AffordabilityService(db, USER_ID).check(emergency.id, Decimal("30"), "USD")

    assert check["is_affordable"] is True
    assert check["required_balance"] == Decimal("90.00")
    assert check["income_needed"] is None
    assert await _expense_rows(db) == 0


async def test_daily_check(db, buckets):
    from datetime import date

    fun = buckets["Fun"]
    await _fund(db, fun, "1900")

    check = await AffordabilityService(db, USER_ID).daily_check(
        fun.id, Decimal("10"), "USD", today=date(2024, 2, 10)
    )

    assert check["days_remaining"] == 19
    assert check["total_amount"] == Decimal("190.00")
    assert check["is_affordable"] is True

    tight = await AffordabilityService(db, USER_ID).daily_check(
        fun.id, Decimal("10.01"), "USD", today=date(2024, 2, 10)
    )
    assert tight["is_affordable"] is False
