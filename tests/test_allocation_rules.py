"""Pure income split and income-needed math."""

from decimal import Decimal

import pytest

from bucketwise.rules.allocation_rules import gross_income_needed, split_income, to_money

CATALOG = ["Necessity", "Investment", "Learning", "Emergency", "Fun", "Savings"]


def test_to_money_rounds_half_up():
    assert to_money("10.005") == Decimal("10.01")
    assert to_money(2) == Decimal("2.00")
    assert to_money(0.1) == Decimal("0.10")


def test_split_with_active_expenses():
    split = split_income(Decimal("2000"), Decimal("200"), CATALOG)

    assert split.net_after_expenses == Decimal("1800.00")
    assert split.necessity_share == Decimal("1080.00")
    assert split.other_shares == {
        "Investment": Decimal("180.00"),
        "Learning": Decimal("180.00"),
        "Emergency": Decimal("180.00"),
        "Fun": Decimal("180.00"),
    }
    assert split.expenses_share == Decimal("200.00")
    assert split.savings_share == Decimal("0.00")


def test_split_ignores_savings_and_expenses_as_allocation_buckets():
    split = split_income(Decimal("1000"), Decimal("0"), CATALOG + ["Expenses"])

    assert "Savings" not in split.other_shares
    assert "Expenses" not in split.other_shares
    assert list(split.bucket_shares()) == ["Necessity", "Investment", "Learning", "Emergency", "Fun"]


@pytest.mark.parametrize(
    "gross, expenses",
    [
        ("1234.57", "0"),
        ("999.99", "333.33"),
        ("0.01", "0"),
        ("100", "250"),
        ("7777.77", "12.34"),
    ],
)
def test_split_conserves_gross_to_the_cent(gross, expenses):
    split = split_income(Decimal(gross), Decimal(expenses), CATALOG)

    total = split.allocated_sum + split.expenses_share + split.savings_share
    assert total == Decimal(gross)


def test_fixed_ratios_with_four_other_buckets_leave_nothing_for_savings():
    split = split_income(Decimal("5000"), Decimal("0"), CATALOG)

    assert split.necessity_share == Decimal("3000.00")
    assert all(share == Decimal("500.00") for share in split.other_shares.values())
    assert split.savings_share == Decimal("0.00")


def test_fewer_other_buckets_leaves_remainder_for_savings():
    split = split_income(Decimal("1000"), Decimal("0"), ["Necessity", "Fun", "Savings"])

    assert split.necessity_share == Decimal("600.00")
    assert split.other_shares == {"Fun": Decimal("100.00")}
    assert split.savings_share == Decimal("300.00")


def test_missing_necessity_is_not_redistributed():
    split = split_income(Decimal("1000"), Decimal("0"), ["Investment", "Savings"])

    assert split.necessity_share is None
    assert split.other_shares == {"Investment": Decimal("100.00")}
    assert split.savings_share == Decimal("900.00")


def test_no_other_buckets_at_all():
    split = split_income(Decimal("1000"), Decimal("0"), ["Savings"])

    assert split.allocated_sum == Decimal("0.00")
    assert split.savings_share == Decimal("1000.00")


def test_net_is_signed_unless_clamped():
    split = split_income(Decimal("100"), Decimal("250"), CATALOG)
    assert split.net_after_expenses == Decimal("-150.00")
    assert split.necessity_share == Decimal("-90.00")

    clamped = split_income(Decimal("100"), Decimal("250"), CATALOG, clamp_net=True)
    assert clamped.net_after_expenses == Decimal("0.00")
    assert clamped.necessity_share == Decimal("0.00")
    assert clamped.expenses_share == Decimal("250.00")


def test_gross_income_needed_for_necessity_and_other_buckets():
    assert gross_income_needed(Decimal("20"), "Necessity", Decimal("100")) == Decimal("133.33")
    assert gross_income_needed(Decimal("10"), "Fun", Decimal("0")) == Decimal("100.00")


def test_gross_income_needed_not_applicable():
    assert gross_income_needed(Decimal("10"), "Savings", Decimal("0")) is None
    assert gross_income_needed(Decimal("10"), "Expenses", Decimal("0")) is None
    assert gross_income_needed(Decimal("0"), "Fun", Decimal("0")) is None
