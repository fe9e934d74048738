# schemas/settings.py

from pydantic import BaseModel, Field
from typing import Optional

from ..db.enums import DisciplineMode


class SettingsUpdate(BaseModel):
    default_mode: Optional[DisciplineMode] = None
    default_currency: Optional[str] = Field(None, min_length=3, max_length=3)
    locale: Optional[str] = Field(None, max_length=20)


class SettingsOut(BaseModel):
    user_id: str
    default_mode: DisciplineMode
    default_currency: str
    locale: str

    class Config:
        from_attributes = True
