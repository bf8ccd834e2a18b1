"""Fixed-delay retry loop for whole navigate-and-resolve cycles."""
from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Callable, Optional, Tuple, Type, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")
Sleep = Callable[[float], Awaitable[None]]


class RetryExhaustedError(RuntimeError):
    """Raised when every attempt of a retried operation failed."""

    def __init__(self, attempts: int, last_error: Optional[BaseException]) -> None:
        super().__init__(f"All {attempts} attempts failed; last error: {last_error}")
        self.attempts = attempts
        self.last_error = last_error


async def run_with_retries(
    operation: Callable[[], Awaitable[T]],
    *,
    attempts: int,
    delay_s: float,
    retry_on: Tuple[Type[BaseException], ...] = (Exception,),
    sleep: Sleep = asyncio.sleep,
    label: str = "operation",
) -> T:
    """Call ``operation`` up to ``attempts`` times, sleeping ``delay_s`` between failures.

    Each attempt invokes ``operation`` afresh; nothing is carried over. Errors
    outside ``retry_on`` propagate immediately.
    """
    if attempts <= 0:
        raise ValueError("attempts must be positive")
    last_error: Optional[BaseException] = None
    for attempt in range(1, attempts + 1):
        try:
            return await operation()
        except retry_on as exc:
            last_error = exc
            logger.warning("%s failed (attempt %s/%s): %s", label, attempt, attempts, exc)
            if attempt < attempts:
                logger.info("Retrying %s in %.1fs", label, delay_s)
                await sleep(delay_s)
    raise RetryExhaustedError(attempts, last_error) from last_error
