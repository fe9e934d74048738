# models/settings.py

from datetime import datetime
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy import String, DateTime

from ..db.base import Base, utcnow
from ..db.enums import DisciplineMode, EnumString


class UserSettings(Base):
    __tablename__ = "settings"

    user_id: Mapped[str] = mapped_column(String(64), primary_key=True)

    default_mode: Mapped[DisciplineMode] = mapped_column(
        EnumString(DisciplineMode, 20), default=DisciplineMode.INTERMEDIATE
    )
    default_currency: Mapped[str] = mapped_column(String(3), default="USD")
    locale: Mapped[str] = mapped_column(String(20), default="en-US")

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)
