"""
Retry with exponential backoff for provider calls.
"""

import asyncio
import random
from collections.abc import Awaitable, Callable
from typing import TypeVar

from shared.config.logging import get_logger
from shared.exceptions import RetryableProviderError
from shared.llm.config import LLMSettings

logger = get_logger(__name__)

T = TypeVar("T")


class RetryPolicy:
    """Exponential backoff with jitter, capped per delay."""

    def __init__(
        self,
        max_attempts: int = 3,
        initial_delay_ms: int = 500,
        backoff_multiplier: float = 2.0,
        jitter: float = 0.25,
        max_delay_ms: int = 30000,
    ):
        """
        Initialize retry policy.

        Args:
            max_attempts: Total attempts including the first one
            initial_delay_ms: Delay after the first failed attempt
            backoff_multiplier: Factor applied per subsequent attempt
            jitter: Relative random spread applied to each delay (0.25 = +/-25%)
            max_delay_ms: Upper bound for any single delay
        """
        self.max_attempts = max_attempts
        self.initial_delay_ms = initial_delay_ms
        self.backoff_multiplier = backoff_multiplier
        self.jitter = jitter
        self.max_delay_ms = max_delay_ms

    @classmethod
    def from_settings(cls, settings: LLMSettings) -> "RetryPolicy":
        """Build a policy from LLM settings."""
        return cls(
            max_attempts=settings.retry_max_attempts,
            initial_delay_ms=settings.retry_initial_delay_ms,
            backoff_multiplier=settings.retry_backoff_multiplier,
            jitter=settings.retry_jitter,
            max_delay_ms=settings.retry_max_delay_ms,
        )

    def delay_ms(self, attempt: int) -> int:
        """
        Delay to wait after a failed attempt.

        Args:
            attempt: 1-based number of the attempt that just failed

        Returns:
            Delay in milliseconds, never negative and never above max_delay_ms
        """
        base = self.initial_delay_ms * self.backoff_multiplier ** (attempt - 1)
        spread = base * self.jitter * random.uniform(-1.0, 1.0)
        return int(max(0.0, min(base + spread, self.max_delay_ms)))


async def call_with_retry(
    operation: Callable[[], Awaitable[T]],
    policy: RetryPolicy,
    provider: str,
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
) -> T:
    """
    Run an async operation, retrying retryable provider failures.

    Non-retryable errors propagate on the first occurrence. The delay is only
    slept between attempts, never after the last one.

    Args:
        operation: Zero-argument coroutine factory performing one attempt
        policy: Retry policy
        provider: Provider name for logging
        sleep: Async sleep function (seconds)

    Returns:
        Result of the first successful attempt

    Raises:
        RetryableProviderError: Last retryable error once attempts are exhausted
    """
    attempt = 1
    while True:
        try:
            return await operation()
        except RetryableProviderError as e:
            if attempt >= policy.max_attempts:
                logger.error(
                    "provider_retries_exhausted", provider=provider, attempts=policy.max_attempts
                )
                raise
            delay = policy.delay_ms(attempt)
            logger.warning(
                "provider_retry",
                provider=provider,
                attempt=attempt,
                max_attempts=policy.max_attempts,
                delay_ms=delay,
                error=str(e),
            )
            await sleep(delay / 1000)
            attempt += 1
