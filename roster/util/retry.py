"""Bounded retry combinator.

Used wherever an operation is idempotent and checks its own outcome
(invite consumption, profile reconciliation). The operation signals
"not yet" by raising one of ``retry_on``; anything else propagates at once.

Usage:
    profile = await retry(
        attempt_reconcile,
        attempts=3,
        delay=0.5,
        retry_on=(ConflictError, PersistenceError),
        name="reconcile_profile",
    )
"""

import asyncio
from collections.abc import Awaitable, Callable
from typing import TypeVar

import logfire

T = TypeVar("T")


async def retry(
    operation: Callable[[], Awaitable[T]],
    attempts: int,
    delay: float,
    retry_on: tuple[type[Exception], ...] = (Exception,),
    name: str = "operation",
) -> T:
    """Run ``operation`` up to ``attempts`` times with a fixed delay in between.

    Args:
        operation: Zero-argument coroutine function
        attempts: Maximum number of attempts (at least 1)
        delay: Seconds to sleep between attempts
        retry_on: Exception types that trigger another attempt
        name: Operation name for logging

    Returns:
        The first successful result

    Raises:
        ValueError: If attempts is less than 1
        Exception: The last ``retry_on`` error once attempts are exhausted
    """
    if attempts < 1:
        raise ValueError("attempts must be at least 1")

    for attempt in range(1, attempts + 1):
        try:
            return await operation()
        except retry_on as e:
            if attempt == attempts:
                logfire.warn(
                    "Retries exhausted",
                    operation=name,
                    attempts=attempts,
                    error=str(e),
                    error_type=type(e).__name__,
                )
                raise
            logfire.info(
                "Retrying operation",
                operation=name,
                attempt=attempt,
                error=str(e),
                error_type=type(e).__name__,
            )
            await asyncio.sleep(delay)

    raise AssertionError("unreachable")
