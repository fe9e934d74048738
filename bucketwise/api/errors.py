# api/errors.py

import logging

from fastapi import HTTPException, status

from ..errors import (
    BucketwiseError,
    LimiterConfigurationError,
    NotFoundError,
    OperationTimeoutError,
    ValidationError,
)

logger = logging.getLogger(__name__)


def to_http_exception(exc: BucketwiseError) -> HTTPException:
    """Maps a service error onto the HTTP status the API reports for it."""
    if isinstance(exc, ValidationError):
        return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))
    if isinstance(exc, NotFoundError):
        return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc))
    if isinstance(exc, OperationTimeoutError):
        return HTTPException(status_code=status.HTTP_504_GATEWAY_TIMEOUT, detail=str(exc))
    if isinstance(exc, LimiterConfigurationError):
        logger.error("Bucket limiter misconfigured: %s", exc)
        return HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Server configuration error: {exc}",
        )
    logger.exception("Unhandled service error")
    return HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Internal server error.")
