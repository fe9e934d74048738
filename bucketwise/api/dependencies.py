# api/dependencies.py

import secrets
from functools import lru_cache
from typing import Annotated, Optional

from fastapi import Depends, Header, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from .. import config
from ..db.database import get_db

# --- DATABASE DEPENDENCY ---
# One session (and one store transaction) per request, see db/database.py
DBDependency = Annotated[AsyncSession, Depends(get_db)]


# --- USER IDENTITY ---

async def get_current_user_id(x_user_id: Optional[str] = Header(None, alias="X-User-Id")) -> str:
    """
    The authenticated user id, forwarded by the gateway/client that performed
    authentication. Every ledger row is scoped to it.
    """
    user_id = (x_user_id or "").strip()
    if not user_id:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Missing X-User-Id header.",
        )
    if len(user_id) > 64:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="X-User-Id must be at most 64 characters.",
        )
    return user_id


UserIdDependency = Annotated[str, Depends(get_current_user_id)]


# --------------------------------------------------------------------------
# API KEY VALIDATION
# --------------------------------------------------------------------------

@lru_cache()
def get_expected_api_key() -> str:
    """Retrieves BUCKETWISE_API_KEY from the configuration (empty = check disabled)."""
    return str(config.API_KEY)


def verify_api_key(x_api_key: Optional[str] = Header(None, alias="X-API-Key")) -> Optional[str]:
    """
    FastAPI Dependency to validate the API key sent in the X-API-Key header.
    Only enforced when a key is configured.
    """
    expected_key = get_expected_api_key()
    if not expected_key:
        return None

    if not x_api_key or not secrets.compare_digest(x_api_key, expected_key):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid API Key provided for Bucketwise Backend Access",
        )
    return x_api_key
