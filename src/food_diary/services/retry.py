"""Bounded retry with exponential backoff."""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from typing import TypeVar

_logger = logging.getLogger(__name__)

T = TypeVar("T")


async def with_retry(  # noqa: PLR0913
    attempt: Callable[[], Awaitable[T]],
    *,
    max_attempts: int = 5,
    initial_delay_seconds: float = 1.0,
    multiplier: float = 2.0,
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    action: str = "call",
) -> T:
    """Call ``attempt`` until it succeeds or ``max_attempts`` calls have failed.

    The delay before the second call is ``initial_delay_seconds`` and is
    multiplied by ``multiplier`` after every further failure. The last
    exception is re-raised once attempts are exhausted.
    """
    if max_attempts < 1:
        raise ValueError("max_attempts must be at least 1")
    delay = initial_delay_seconds
    attempt_number = 0
    while True:
        attempt_number += 1
        try:
            return await attempt()
        except Exception as exc:
            _logger.warning(
                "%s failed (attempt %s/%s, status=%s): %s",
                action,
                attempt_number,
                max_attempts,
                status_code_from_exception(exc),
                exc,
            )
            if attempt_number >= max_attempts:
                raise
        await sleep(delay)
        delay *= multiplier


def status_code_from_exception(exc: Exception) -> str:
    """Extract HTTP status code from an exception, if available."""
    response = getattr(exc, "response", None)
    status_code = getattr(response, "status_code", None)
    if isinstance(status_code, int):
        return str(status_code)
    return "n/a"
