# db/base.py

from datetime import datetime, timezone
from sqlalchemy.ext.asyncio import AsyncAttrs
from sqlalchemy.orm import DeclarativeBase


# Common base class for all models
class Base(AsyncAttrs, DeclarativeBase):
    pass


def utcnow() -> datetime:
    """Default factory for timestamp columns."""
    return datetime.now(timezone.utc)
