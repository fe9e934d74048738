# services/settings_service.py

import logging
from typing import Any, Dict

from sqlalchemy.ext.asyncio import AsyncSession

from .. import config
from ..db.enums import DisciplineMode
from ..db.upsert import upsert_insert
from ..errors import ValidationError
from ..models.settings import UserSettings
from ._helpers import normalize_currency

logger = logging.getLogger(__name__)

_UPDATABLE_FIELDS = ("default_mode", "default_currency", "locale")


class SettingsService:
    """Per-user settings; a row with defaults is created on first access."""

    def __init__(self, db: AsyncSession, user_id: str):
        self.db = db
        self.user_id = user_id

    async def get_settings(self) -> UserSettings:
        settings = await self.db.get(UserSettings, self.user_id)
        if settings is not None:
            return settings

        defaults = {
            "user_id": self.user_id,
            "default_mode": DisciplineMode.parse(config.DEFAULT_MODE),
            "default_currency": normalize_currency(config.DEFAULT_CURRENCY),
            "locale": "en-US",
        }
        stmt = upsert_insert(self.db, UserSettings).values(**defaults).on_conflict_do_nothing(
            index_elements=["user_id"]
        )
        await self.db.execute(stmt)
        logger.info("Created default settings for user %s", self.user_id)
        return await self.db.get(UserSettings, self.user_id)

    async def get_mode(self) -> DisciplineMode:
        settings = await self.get_settings()
        return settings.default_mode

    async def update_settings(self, updates: Dict[str, Any]) -> UserSettings:
        settings = await self.get_settings()

        for key, value in updates.items():
            if key not in _UPDATABLE_FIELDS or value is None:
                continue
            if key == "default_mode" and not isinstance(value, DisciplineMode):
                try:
                    value = DisciplineMode(str(value).lower())
                except ValueError as exc:
                    raise ValidationError(f"Unknown discipline mode {value!r}.") from exc
            elif key == "default_currency":
                value = normalize_currency(value)
            setattr(settings, key, value)

        await self.db.flush()
        return settings
