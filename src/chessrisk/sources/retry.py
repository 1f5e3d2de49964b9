"""
Retry with exponential backoff, shared by the API client and the browser.
"""

import asyncio
import logging
import random
from typing import Awaitable, Callable, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


async def with_retry(
    coro_func: Callable[[], Awaitable[T]],
    max_attempts: int = 3,
    base_delay: float = 2.0,
    description: str = "Operation",
    retry_on: tuple[type[BaseException], ...] = (Exception,),
) -> T:
    """
    Execute an async operation with exponential backoff retry.

    Pass a callable that creates a fresh coroutine for each attempt,
    since a coroutine can only be awaited once.

    Args:
        coro_func: Zero-argument callable returning a new coroutine
        max_attempts: Total attempts, including the first
        base_delay: Delay before the second attempt; doubles after that
        description: Name used in retry log lines
        retry_on: Exception types worth another attempt. Anything else
                  propagates immediately.

    Returns:
        Result of the coroutine

    Raises:
        The last retryable exception if all attempts fail
    """
    if max_attempts < 1:
        raise ValueError(f"max_attempts must be >= 1, got {max_attempts}")

    last_error = None

    for attempt in range(max_attempts):
        try:
            return await coro_func()
        except retry_on as e:
            last_error = e

            if attempt < max_attempts - 1:
                # Exponential backoff with jitter
                delay = base_delay * (2 ** attempt) + random.uniform(0, base_delay)
                logger.warning(
                    "[Retry %d/%d] %s failed: %s. Retrying in %.1fs...",
                    attempt + 1, max_attempts, description, e, delay,
                )
                await asyncio.sleep(delay)

    raise last_error
