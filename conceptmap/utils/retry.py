"""Exponential backoff retry for async generation calls."""

from __future__ import annotations

import asyncio
import functools
import random
from typing import Any, Callable, TypeVar

from conceptmap.utils.logging import get_logger

logger = get_logger(__name__)

F = TypeVar("F", bound=Callable[..., Any])

CLIENT_ERROR_STATUSES = (400, 401, 403, 404, 422)


def status_code(exc: BaseException) -> int | None:
    """HTTP status carried by an SDK error, directly or on its response."""
    status = getattr(exc, "status_code", None)
    if status is None:
        status = getattr(getattr(exc, "response", None), "status_code", None)
    return status if isinstance(status, int) else None


def backoff_delay(attempt: int, base_delay: float, max_delay: float) -> float:
    """Delay before retry number ``attempt`` (1-based): capped doubling plus up to 50% jitter."""
    delay = min(base_delay * (2 ** (attempt - 1)), max_delay)
    return delay + random.uniform(0, delay * 0.5)


def async_retry(
    max_attempts: int = 3,
    base_delay: float = 1.0,
    max_delay: float = 60.0,
    retryable_exceptions: tuple[type[Exception], ...] = (Exception,),
    non_retryable_status_codes: tuple[int, ...] = CLIENT_ERROR_STATUSES,
) -> Callable[[F], F]:
    """Retry an async callable on failure.

    Client errors (4xx other than 429) are re-raised at once. After the last
    attempt the final exception propagates unchanged.
    """

    def decorator(func: F) -> F:
        @functools.wraps(func)
        async def wrapper(*args: Any, **kwargs: Any) -> Any:
            attempt = 1
            while True:
                try:
                    return await func(*args, **kwargs)
                except retryable_exceptions as exc:
                    status = status_code(exc)
                    if status in non_retryable_status_codes:
                        logger.warning("retry_skipped_client_error", func=func.__name__, status=status)
                        raise
                    if attempt >= max_attempts:
                        raise

                    delay = backoff_delay(attempt, base_delay, max_delay)
                    logger.warning(
                        "retry_attempt",
                        func=func.__name__,
                        attempt=attempt,
                        max_attempts=max_attempts,
                        delay=round(delay, 2),
                        error=str(exc),
                    )
                    await asyncio.sleep(delay)
                    attempt += 1

        return wrapper  # type: ignore[return-value]

    return decorator
