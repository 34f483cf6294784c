"""Bounded retry with exponential backoff for transient drive API failures."""

import asyncio
import logging
import random
from dataclasses import dataclass
from functools import wraps
from typing import Any, Awaitable, Callable, Optional, TypeVar

from .errors import DriveError, is_retryable

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class RetryPolicy:
    """Configuration for retry behavior with exponential backoff."""

    # Attempts made are max_retries + 1
    max_retries: int = 3
    base_delay: float = 1.0
    max_delay: float = 30.0

    # Additive jitter, up to jitter_factor of the exponential delay
    jitter: bool = True
    jitter_factor: float = 0.3

    # Wait at least as long as a 429 Retry-After asks for
    respect_retry_after: bool = True

    def calculate_delay(self, attempt: int, retry_after: Optional[float] = None) -> float:
        """Calculate the delay in seconds after the 0-indexed attempt."""
        delay = self.base_delay * (2 ** attempt)

        if self.jitter and delay > 0:
            delay += random.uniform(0, self.jitter_factor * delay)

        if retry_after is not None and self.respect_retry_after:
            delay = max(delay, float(retry_after))

        return min(delay, self.max_delay)


class RetryController:
    """Runs one logical call with automatic retry of transient failures.

    Only errors whose classification says ``retryable`` are retried;
    anything else propagates after the first attempt.
    """

    def __init__(
        self,
        policy: Optional[RetryPolicy] = None,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
        on_retry: Optional[Callable[[int, Exception, float], None]] = None,
        on_give_up: Optional[Callable[[Exception], None]] = None,
    ):
        self.policy = policy or RetryPolicy()
        self._sleep = sleep
        self._on_retry = on_retry
        self._on_give_up = on_give_up

    def delay(self, attempt: int, error: Optional[Exception] = None) -> float:
        retry_after = None
        if isinstance(error, DriveError):
            retry_after = error.retry_after_seconds
        return self.policy.calculate_delay(attempt, retry_after)

    def _give_up(self, error: Exception) -> None:
        if self._on_give_up:
            self._on_give_up(error)

    async def execute(self, func: Callable[[], Awaitable[T]], context: Optional[dict] = None) -> T:
        """Await ``func`` until it succeeds, fails permanently, or the budget runs out."""
        max_retries = max(0, self.policy.max_retries)
        last_error: Optional[Exception] = None

        for attempt in range(max_retries + 1):
            try:
                return await func()
            except Exception as e:
                last_error = e
                if not is_retryable(e):
                    self._give_up(e)
                    raise

                if attempt >= max_retries:
                    break

                delay = self.delay(attempt, e)

                logger.warning(
                    "API request failed, retrying",
                    extra={
                        "attempt": attempt + 1,
                        "delay": round(delay, 3),
                        "error_code": getattr(e, "code", type(e).__name__),
                        **(context or {}),
                    },
                )

                if self._on_retry:
                    self._on_retry(attempt, e, delay)

                await self._sleep(delay)

        logger.warning(
            "API request failed, retries exhausted",
            extra={"attempts": max_retries + 1, **(context or {})},
        )
        self._give_up(last_error)
        raise last_error


def with_retry(policy: Optional[RetryPolicy] = None):
    """Decorator adding retry logic to a coroutine function."""
    def decorator(func):
        @wraps(func)
        async def wrapper(*args, **kwargs):
            controller = RetryController(policy)
            return await controller.execute(lambda: func(*args, **kwargs))
        return wrapper
    return decorator


# Preset retry policies

DEFAULT_RETRY = RetryPolicy()

NO_RETRY = RetryPolicy(max_retries=0)

AGGRESSIVE_RETRY = RetryPolicy(
    max_retries=5,
    base_delay=0.5,
    max_delay=60.0,
)
