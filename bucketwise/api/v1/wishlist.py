# api/v1/wishlist.py

from typing import List

from fastapi import APIRouter, Query, status

from ...errors import BucketwiseError
from ...schemas.wishlist import WishlistItemCreate, WishlistItemOut, WishlistItemUpdate
from ...services.wishlist_service import WishlistService
from ..dependencies import DBDependency, UserIdDependency
from ..errors import to_http_exception

router = APIRouter(
    prefix="/wishlist",
    tags=["Wishlist"],
)


@router.get("", response_model=List[WishlistItemOut], summary="Outstanding wishlist items by priority")
async def list_wishlist(
    db: DBDependency,
    user_id: UserIdDependency,
    include_purchased: bool = Query(False),
):
    return await WishlistService(db, user_id).list_items(include_purchased=include_purchased)


@router.post("", response_model=WishlistItemOut, status_code=status.HTTP_201_CREATED, summary="Add a wishlist item")
async def create_wishlist_item(item_data: WishlistItemCreate, db: DBDependency, user_id: UserIdDependency):
    try:
        return await WishlistService(db, user_id).create_item(item_data.model_dump())
    except BucketwiseError as e:
        raise to_http_exception(e)


@router.patch("/{item_id}", response_model=WishlistItemOut, summary="Update a wishlist item")
async def update_wishlist_item(
    item_id: int, update_data: WishlistItemUpdate, db: DBDependency, user_id: UserIdDependency
):
    try:
        return await WishlistService(db, user_id).update_item(item_id, update_data.model_dump(exclude_unset=True))
    except BucketwiseError as e:
        raise to_http_exception(e)


@router.post("/{item_id}/purchased", response_model=WishlistItemOut, summary="Mark a wishlist item as purchased")
async def mark_wishlist_item_purchased(item_id: int, db: DBDependency, user_id: UserIdDependency):
    try:
        return await WishlistService(db, user_id).mark_purchased(item_id)
    except BucketwiseError as e:
        raise to_http_exception(e)


@router.delete("/{item_id}", status_code=status.HTTP_204_NO_CONTENT, summary="Remove a wishlist item")
async def delete_wishlist_item(item_id: int, db: DBDependency, user_id: UserIdDependency):
    try:
        await WishlistService(db, user_id).delete_item(item_id)
    except BucketwiseError as e:
        raise to_http_exception(e)
    return None
