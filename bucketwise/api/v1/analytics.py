# api/v1/analytics.py

from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Query

from ...errors import BucketwiseError
from ...schemas.analytics import AnalyticsSummaryOut
from ...services.analytics_service import AnalyticsService
from ...services.settings_service import SettingsService
from ..dependencies import DBDependency, UserIdDependency
from ..errors import to_http_exception

router = APIRouter(
    prefix="/analytics",
    tags=["Analytics"],
)


@router.get("/summary", response_model=AnalyticsSummaryOut, summary="Income, spend and top items for one currency")
async def analytics_summary(
    db: DBDependency,
    user_id: UserIdDependency,
    currency: Optional[str] = Query(None, description="Defaults to the user's default currency."),
    start: Optional[datetime] = Query(None),
    end: Optional[datetime] = Query(None),
):
    try:
        if currency is None:
            currency = (await SettingsService(db, user_id).get_settings()).default_currency
        return await AnalyticsService(db, user_id).summary(currency, start=start, end=end)
    except BucketwiseError as e:
        raise to_http_exception(e)
