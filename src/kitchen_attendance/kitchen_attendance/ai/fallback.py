from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, TypeVar

from ..core.exceptions import ExternalServiceError

logger = logging.getLogger(__name__)

T = TypeVar("T")


async def call_with_fallback(call: Awaitable[T], *, timeout: float, fallback: T, label: str) -> T:
    """Await an external collaborator, substituting `fallback` when it fails in any way.

    Timeouts and ExternalServiceError are expected and logged as warnings; any
    other exception is logged with its traceback. Cancellation still propagates.
    """

    try:
        return await asyncio.wait_for(call, timeout=timeout)
    except asyncio.TimeoutError:
        logger.warning("%s timed out after %.1fs, using fallback", label, timeout)
    except ExternalServiceError as exc:
        logger.warning("%s failed (%s), using fallback", label, exc)
    except Exception:
        logger.exception("%s crashed, using fallback", label)
    return fallback
