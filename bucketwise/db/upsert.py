# db/upsert.py

from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.ext.asyncio import AsyncSession


def upsert_insert(session: AsyncSession, model):
    """
    INSERT construct supporting ON CONFLICT for the session's dialect
    (PostgreSQL in production, SQLite in tests).
    """
    dialect = session.get_bind().dialect.name
    if dialect == "postgresql":
        return pg_insert(model)
    if dialect == "sqlite":
        return sqlite_insert(model)
    raise NotImplementedError(f"ON CONFLICT upserts are not supported for dialect '{dialect}'.")
