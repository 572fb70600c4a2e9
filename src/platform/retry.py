"""
Bounded retry with exponential backoff

Only the purchase write path (ticket write, compensating release) and optimistic
status transitions retry. Everything else is fail-fast.
"""

import asyncio
from typing import Awaitable, Callable, Tuple, Type, TypeVar

from src.platform.config.core_setting import settings
from src.platform.logging.loguru_io import Logger


_T = TypeVar('_T')


def backoff_delay(
    attempt: int,
    *,
    base_delay: float | None = None,
    max_delay: float | None = None,
    exponential_base: float = 2.0,
) -> float:
    """Delay before retry number `attempt` (1-based): base * exponential_base^(attempt-1), capped."""
    base = settings.RETRY_BASE_DELAY_SECONDS if base_delay is None else base_delay
    cap = settings.RETRY_MAX_DELAY_SECONDS if max_delay is None else max_delay
    return min(base * exponential_base ** (attempt - 1), cap)


async def retry_with_backoff(
    func: Callable[[], Awaitable[_T]],
    *,
    max_retries: int,
    exceptions: Tuple[Type[Exception], ...],
    operation: str,
    base_delay: float | None = None,
    max_delay: float | None = None,
) -> _T:
    """
    Await `func()` and retry it up to `max_retries` extra times when it raises one of
    `exceptions`.

    Args:
        func: Zero-argument coroutine factory (called once per attempt)
        max_retries: Number of retries after the first attempt
        exceptions: Exceptions that trigger a retry; anything else propagates immediately
        operation: Name used in log lines

    Returns:
        Result of the first successful attempt

    Raises:
        The last exception once retries are exhausted
    """
    attempt = 0
    while True:
        try:
            return await func()
        except exceptions as e:
            attempt += 1
            if attempt > max_retries:
                Logger.base.error(
                    f'❌ [RETRY] {operation} failed after {max_retries} retries: {type(e).__name__}: {e}'
                )
                raise
            delay = backoff_delay(attempt, base_delay=base_delay, max_delay=max_delay)
            Logger.base.warning(
                f'⏳ [RETRY] {operation} attempt {attempt}/{max_retries} failed '
                f'({type(e).__name__}), retrying in {delay:.3f}s'
            )
            await asyncio.sleep(delay)
