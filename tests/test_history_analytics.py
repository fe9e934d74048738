"""Transaction history listing and the spending summary."""

from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest
import pytest_asyncio

from bucketwise.errors import ValidationError
from bucketwise.services.allocation_service import AllocationService
from bucketwise.services.analytics_service import AnalyticsService
from bucketwise.services.purchase_service import PurchaseService
from bucketwise.services.transaction_service import TransactionService

from .conftest import OTHER_USER_ID, USER_ID

pytestmark = pytest.mark.asyncio


@pytest_asyncio.fixture
async def activity(db, buckets):
    await AllocationService(db, USER_ID).allocate_income(Decimal("10000"), "USD", source="Salary")
    purchases = PurchaseService(db, USER_ID)
    await purchases.record_purchase(buckets["Fun"].id, Decimal("20"), "USD", {"item_name": "Pizza", "category": "Food"})
    await purchases.record_purchase(buckets["Fun"].id, Decimal("25"), "USD", {"item_name": "Pizza", "category": "Food"})
    await purchases.record_purchase(buckets["Learning"].id, Decimal("40"), "USD", {"item_name": "Book", "category": "Education"})
    await purchases.record_purchase(buckets["Necessity"].id, Decimal("100"), "USD", {"item_name": "Groceries", "category": "Food"})
    return buckets


async def test_history_is_newest_first_with_bucket_names(db, activity):
    rows = await TransactionService(db, USER_ID).list_transactions()

    assert len(rows) == 1 + 5 + 4
    newest, bucket_name = rows[0]
    assert newest.item_name == "Groceries"
    assert bucket_name == "Necessity"
    income_rows = [name for tx, name in rows if tx.type.value == "income"]
    assert income_rows == [None]


async def test_history_filters(db, activity):
    service = TransactionService(db, USER_ID)

    expenses = await service.list_transactions(tx_type="expense")
    assert len(expenses) == 4
    assert all(tx.amount < 0 for tx, _ in expenses)

    fun = await service.list_transactions(bucket_id=activity["Fun"].id)
    assert len(fun) == 3

    assert await service.list_transactions(currency="EUR") == []
    assert len(await service.list_transactions(limit=2)) == 2
    future = datetime.now(timezone.utc) + timedelta(days=1)
    assert await service.list_transactions(start=future) == []
    assert await TransactionService(db, OTHER_USER_ID).list_transactions() == []


@pytest.mark.parametrize(
    "kwargs", [{"tx_type": "refund"}, {"limit": 0}, {"limit": 10_000}, {"offset": -1}]
)
async def test_history_validation(db, kwargs):
    with pytest.raises(ValidationError):
        await TransactionService(db, USER_ID).list_transactions(**kwargs)


async def test_summary(db, activity):
    summary = await AnalyticsService(db, USER_ID).summary("usd")

    assert summary["currency_code"] == "USD"
    assert summary["total_income"] == Decimal("10000.00")
    assert summary["total_expenses"] == Decimal("185.00")
    assert summary["net"] == Decimal("9815.00")

    assert summary["top_items"][0] == {"name": "Groceries", "total": Decimal("100.00"), "count": 1}
    pizza = next(item for item in summary["top_items"] if item["name"] == "Pizza")
    assert pizza == {"name": "Pizza", "total": Decimal("45.00"), "count": 2}

    assert [row["bucket_name"] for row in summary["by_bucket"]] == ["Necessity", "Fun", "Learning"]
    assert summary["by_category"][0] == {"category": "Food", "total": Decimal("145.00")}
    assert summary["top_category"] == "Food"


async def test_summary_without_activity(db):
    summary = await AnalyticsService(db, USER_ID).summary("USD")

    assert summary["total_income"] == Decimal("0.00")
    assert summary["total_expenses"] == Decimal("0.00")
    assert summary["top_items"] == []
    assert summary["top_category"] is None
