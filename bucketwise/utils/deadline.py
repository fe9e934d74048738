# utils/deadline.py

import asyncio
import logging
from typing import Awaitable, Optional, TypeVar

from .. import config
from ..errors import OperationTimeoutError

logger = logging.getLogger(__name__)

T = TypeVar("T")


async def run_with_timeout(aw: Awaitable[T], seconds: Optional[float] = None, operation: str = "operation") -> T:
    """
    Awaits ``aw`` within ``seconds`` (BUCKETWISE_OPERATION_TIMEOUT_SECONDS by
    default). A non-positive budget disables the bound. Writes already flushed
    are not compensated here: the caller's store transaction rolls them back.
    """
    budget = config.OPERATION_TIMEOUT_SECONDS if seconds is None else seconds
    if budget <= 0:
        return await aw
    try:
        return await asyncio.wait_for(aw, timeout=budget)
    except asyncio.TimeoutError as exc:
        logger.warning("%s timed out after %.1fs", operation, budget)
        raise OperationTimeoutError(f"{operation} did not complete within {budget} seconds.") from exc
