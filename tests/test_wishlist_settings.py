"""Per-user settings and the wishlist."""

from decimal import Decimal

import pytest

from bucketwise.db.enums import DisciplineMode
from bucketwise.errors import NotFoundError, ValidationError
from bucketwise.services.ledger_service import LedgerService
from bucketwise.services.settings_service import SettingsService
from bucketwise.services.wishlist_service import WishlistService

from .conftest import OTHER_USER_ID, USER_ID

pytestmark = pytest.mark.asyncio


async def test_settings_are_created_with_defaults(db):
    settings = await SettingsService(db, USER_ID).get_settings()

    assert settings.user_id == USER_ID
    assert settings.default_mode is DisciplineMode.INTERMEDIATE
    assert settings.default_currency == "USD"
    assert settings.locale == "en-US"
    assert (await SettingsService(db, USER_ID).get_settings()) is settings


async def test_update_settings(db):
    service = SettingsService(db, USER_ID)

    settings = await service.update_settings({"default_mode": "Light", "default_currency": "eur", "locale": "de-DE"})

    assert settings.default_mode is DisciplineMode.LIGHT
    assert settings.default_currency == "EUR"
    assert settings.locale == "de-DE"
    assert await service.get_mode() is DisciplineMode.LIGHT
    assert (await SettingsService(db, OTHER_USER_ID).get_mode()) is DisciplineMode.INTERMEDIATE


async def test_update_settings_accepts_enum_and_ignores_unknown_fields(db):
    settings = await SettingsService(db, USER_ID).update_settings(
        {"default_mode": DisciplineMode.DESPERATE, "user_id": "someone-else"}
    )
    assert settings.default_mode is DisciplineMode.DESPERATE
    assert settings.user_id == USER_ID


@pytest.mark.parametrize("updates", [{"default_mode": "yolo"}, {"default_currency": "EURO"}])
async def test_update_settings_validation(db, updates):
    with pytest.raises(ValidationError):
        await SettingsService(db, USER_ID).update_settings(updates)


async def test_wishlist_orders_by_priority_then_newest(db, buckets):
    service = WishlistService(db, USER_ID)
    fun = buckets["Fun"].id
    low = await service.create_item({"name": "Drone", "amount": "400", "currency_code": "USD", "bucket_id": fun, "priority": 3})
    high_old = await service.create_item({"name": "Boots", "amount": "90", "currency_code": "USD", "bucket_id": fun, "priority": 1})
    medium = await service.create_item({"name": "Game", "amount": "60", "currency_code": "USD", "bucket_id": fun})
    high_new = await service.create_item({"name": "Coat", "amount": "150", "currency_code": "USD", "bucket_id": fun, "priority": 1})

    assert medium.priority == 2
    assert [item.id for item in await service.list_items()] == [high_new.id, high_old.id, medium.id, low.id]


async def test_mark_purchased_hides_item_and_leaves_balances_alone(db, buckets):
    service = WishlistService(db, USER_ID)
    fun = buckets["Fun"]
    item = await service.create_item({"name": "Headphones", "amount": "120", "currency_code": "USD", "bucket_id": fun.id})

    purchased = await service.mark_purchased(item.id)
    stamp = purchased.purchased_at
    again = await service.mark_purchased(item.id)

    assert stamp is not None
    assert again.purchased_at == stamp
    assert await service.list_items() == []
    assert [i.id for i in await service.list_items(include_purchased=True)] == [item.id]
    assert await LedgerService(db, USER_ID).get_balance(fun.id, "USD") == Decimal("0.00")


async def test_update_and_delete_item(db, buckets):
    service = WishlistService(db, USER_ID)
    item = await service.create_item(
        {"name": "Bike", "amount": "800", "currency_code": "USD", "bucket_id": buckets["Fun"].id}
    )

    updated = await service.update_item(item.id, {"amount": "750.5", "bucket_id": buckets["Savings"].id, "priority": 1})
    assert updated.amount == Decimal("750.50")
    assert updated.bucket_id == buckets["Savings"].id
    assert updated.priority == 1

    await service.delete_item(item.id)
    with pytest.raises(NotFoundError):
        await service.get_item(item.id)


async def test_wishlist_validation(db, buckets):
    service = WishlistService(db, USER_ID)
    with pytest.raises(NotFoundError):
        await service.create_item({"name": "Ghost", "amount": "1", "currency_code": "USD", "bucket_id": 999})
    with pytest.raises(ValidationError):
        await service.create_item(
            {"name": "Odd", "amount": "1", "currency_code": "USD", "bucket_id": buckets["Fun"].id, "priority": 7}
        )
    with pytest.raises(ValidationError):
        await service.create_item({"name": "Free", "amount": "0", "currency_code": "USD", "bucket_id": buckets["Fun"].id})


async def test_wishlist_is_private(db, buckets):
    item = await WishlistService(db, USER_ID).create_item(
        {"name": "Tent", "amount": "200", "currency_code": "USD", "bucket_id": buckets["Fun"].id}
    )
    with pytest.raises(NotFoundError):
        await WishlistService(db, OTHER_USER_ID).mark_purchased(item.id)
