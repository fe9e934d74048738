# api/v1/settings.py

from fastapi import APIRouter

from ...errors import BucketwiseError
from ...schemas.settings import SettingsOut, SettingsUpdate
from ...services.settings_service import SettingsService
from ..dependencies import DBDependency, UserIdDependency
from ..errors import to_http_exception

router = APIRouter(
    prefix="/settings",
    tags=["Settings"],
)


@router.get("", response_model=SettingsOut, summary="Get the user's settings (created with defaults)")
async def get_settings(db: DBDependency, user_id: UserIdDependency):
    return await SettingsService(db, user_id).get_settings()


@router.patch("", response_model=SettingsOut, summary="Update default mode, currency or locale")
async def update_settings(update_data: SettingsUpdate, db: DBDependency, user_id: UserIdDependency):
    try:
        return await SettingsService(db, user_id).update_settings(update_data.model_dump(exclude_unset=True))
    except BucketwiseError as e:
        raise to_http_exception(e)
