"""Affordability decisions for each discipline mode."""

from datetime import date
from decimal import Decimal

import pytest

from bucketwise.db.enums import DisciplineMode
from bucketwise.errors import LimiterConfigurationError
from bucketwise.rules.affordability import (
    LimiterSet,
    check_affordability,
    daily_spending_total,
    days_remaining_in_month,
)

NECESSITY = LimiterSet(Decimal("2"), Decimal("3"), Decimal("6"), Decimal("1.5"))
INVESTMENT = LimiterSet(Decimal("2"), Decimal("3"), Decimal("5"), Decimal("1.5"))
SAVINGS = LimiterSet(Decimal("1"), Decimal("1"), Decimal("1"), None)


def test_strict_purchase_is_affordable():
    decision = check_affordability(Decimal("50"), Decimal("300"), INVESTMENT, DisciplineMode.STRICT)

    assert decision.is_affordable
    assert decision.limiter == Decimal("5")
    assert decision.required_balance == Decimal("250.00")
    assert decision.max_affordable == Decimal("60.00")
    assert decision.shortfall == Decimal("0.00")


def test_intermediate_purchase_is_blocked():
    decision = check_affordability(Decimal("40"), Decimal("100"), INVESTMENT, "intermediate")

    assert not decision.is_affordable
    assert decision.required_balance == Decimal("120.00")
    assert decision.max_affordable == Decimal("33.33")
    assert decision.shortfall == Decimal("20.00")


def test_max_affordable_is_the_boundary():
    balance = Decimal("100")
    decision = check_affordability(Decimal("1"), balance, INVESTMENT, DisciplineMode.INTERMEDIATE)
    limit = decision.max_affordable

    assert check_affordability(limit, balance, INVESTMENT, DisciplineMode.INTERMEDIATE).is_affordable
    assert not check_affordability(limit + Decimal("0.01"), balance, INVESTMENT, DisciplineMode.INTERMEDIATE).is_affordable


@pytest.mark.parametrize("mode", list(DisciplineMode))
@pytest.mark.parametrize("balance", ["0", "0.01", "99.99", "100", "1234.56"])
def test_every_amount_up_to_max_affordable_passes(mode, balance):
    balance = Decimal(balance)
    limit = check_affordability(Decimal("0"), balance, NECESSITY, mode).max_affordable

    for amount in (Decimal("0"), limit / 2, limit):
        amount = amount.quantize(Decimal("0.01"))
        assert check_affordability(amount, balance, NECESSITY, mode).is_affordable
    assert not check_affordability(limit + Decimal("0.01"), balance, NECESSITY, mode).is_affordable


def test_max_affordable_times_limiter_recovers_balance():
    decision = check_affordability(Decimal("1"), Decimal("1000"), NECESSITY, DisciplineMode.STRICT)
    assert decision.max_affordable == Decimal("166.66")
    assert decision.max_affordable * decision.limiter <= Decimal("1000")
    assert (decision.max_affordable + Decimal("0.01")) * decision.limiter > Decimal("1000")


def test_desperate_falls_back_to_strict_without_coefficient():
    decision = check_affordability(Decimal("10"), Decimal("10"), SAVINGS, DisciplineMode.DESPERATE)
    assert decision.limiter == Decimal("1")

    no_desperate = LimiterSet(Decimal("2"), Decimal("3"), Decimal("5"))
    assert no_desperate.for_mode(DisciplineMode.DESPERATE) == Decimal("5")
    assert NECESSITY.for_mode(DisciplineMode.DESPERATE) == Decimal("1.5")


def test_unknown_mode_uses_intermediate():
    decision = check_affordability(Decimal("10"), Decimal("100"), NECESSITY, "reckless")
    assert decision.mode is DisciplineMode.INTERMEDIATE
    assert decision.limiter == Decimal("3")


@pytest.mark.parametrize("bad", [Decimal("0"), None, Decimal("-1")])
def test_invalid_limiter_raises(bad):
    limiters = LimiterSet(Decimal("2"), bad, Decimal("5"))
    with pytest.raises(LimiterConfigurationError):
        check_affordability(Decimal("10"), Decimal("100"), limiters, DisciplineMode.INTERMEDIATE)


def test_zero_amount_and_negative_balance():
    assert check_affordability(Decimal("0"), Decimal("0"), NECESSITY, DisciplineMode.STRICT).is_affordable
    assert not check_affordability(Decimal("0.01"), Decimal("-5"), NECESSITY, DisciplineMode.LIGHT).is_affordable


def test_days_remaining_in_month():
    assert days_remaining_in_month(date(2024, 2, 10)) == 19
    assert days_remaining_in_month(date(2023, 2, 10)) == 18
    assert days_remaining_in_month(date(2023, 1, 31)) == 0


def test_daily_spending_total():
    assert daily_spending_total(Decimal("10"), date(2024, 2, 10)) == Decimal("190.00")
    assert daily_spending_total(Decimal("12.50"), date(2024, 12, 31)) == Decimal("0.00")


def test_sub_cent_amounts_are_checked_in_cents():
    balance = Decimal("100")
    decision = check_affordability(Decimal("33.333"), balance, INVESTMENT, DisciplineMode.INTERMEDIATE)

    assert decision.amount == Decimal("33.33")
    assert decision.is_affordable
    assert decision.max_affordable == Decimal("33.33")

    over = check_affordability(Decimal("33.335"), balance, INVESTMENT, DisciplineMode.INTERMEDIATE)
    assert over.amount == Decimal("33.34")
    assert not over.is_affordable


def test_shortfall_uses_the_unrounded_requirement():
    emergency = LimiterSet(Decimal("2"), Decimal("3"), Decimal("5"), Decimal("1.2"))
    decision = check_affordability(Decimal("0.01"), Decimal("0.01"), emergency, DisciplineMode.DESPERATE)

    assert decision.required_balance == Decimal("0.01")
    assert decision.exact_required == Decimal("0.012")
    assert not decision.is_affordable
    assert decision.shortfall == Decimal("0.01")
