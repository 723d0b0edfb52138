"""Retry with exponential backoff for outbound provider calls.

YouTube fetches are deliberately not retried: a failed fetch fails the
educator's attempt and the next scheduled run picks it up again. This helper
is for the email provider, where a transient 5xx should not drop a
notification.
"""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Any, TypeVar

import httpx

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass
class RetryConfig:
    """Configuration for retry behavior."""

    max_retries: int = 3
    base_delay: float = 1.0  # seconds
    max_delay: float = 30.0  # seconds
    exponential_base: float = 2.0
    retryable_exceptions: tuple = (
        httpx.TimeoutException,
        httpx.ConnectError,
        httpx.ReadError,
        ConnectionError,
        TimeoutError,
    )
    retryable_status_codes: tuple = (429, 500, 502, 503, 504)

    def delay_for(self, attempt: int) -> float:
        """Backoff delay before the retry following ``attempt`` (0-based)."""
        return min(self.base_delay * (self.exponential_base**attempt), self.max_delay)


DEFAULT_RETRY_CONFIG = RetryConfig()


async def retry_async(
    func: Callable[..., Awaitable[T]],
    *args: Any,
    config: RetryConfig = DEFAULT_RETRY_CONFIG,
    operation_name: str = "operation",
    **kwargs: Any,
) -> T | None:
    """Execute an async function with retry logic and exponential backoff.

    Args:
        func: Async function to execute
        *args: Positional arguments for the function
        config: Retry configuration
        operation_name: Name of the operation for logging
        **kwargs: Keyword arguments for the function

    Returns:
        The result of the function, or None if all retries failed
    """
    for attempt in range(config.max_retries + 1):
        try:
            result = await func(*args, **kwargs)

            if isinstance(result, httpx.Response) and result.status_code in config.retryable_status_codes:
                if attempt < config.max_retries:
                    delay = config.delay_for(attempt)
                    logger.warning(
                        f"{operation_name}: Got status {result.status_code}, "
                        f"retrying in {delay:.1f}s (attempt {attempt + 1}/{config.max_retries + 1})"
                    )
                    await asyncio.sleep(delay)
                    continue
                logger.error(
                    f"{operation_name}: Failed after {config.max_retries + 1} attempts "
                    f"with status {result.status_code}"
                )
                return None

            return result

        except config.retryable_exceptions as e:
            if attempt < config.max_retries:
                delay = config.delay_for(attempt)
                logger.warning(
                    f"{operation_name}: {type(e).__name__}, "
                    f"retrying in {delay:.1f}s (attempt {attempt + 1}/{config.max_retries + 1})"
                )
                await asyncio.sleep(delay)
            else:
                logger.error(f"{operation_name}: Failed after {config.max_retries + 1} attempts: {e}")

    return None
