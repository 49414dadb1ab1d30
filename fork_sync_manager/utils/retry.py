"""Retry decorator for GitHub API calls that hit rate limits.

Sync attempts run inside short-lived webhook handlers and workflow jobs, so
the defaults favor a handful of bounded waits over long backoff schedules.
Errors other than rate limits are never retried.
"""

import asyncio
import functools
import time
from typing import Any, Awaitable, Callable, TypeVar

import structlog
from githubkit.exception import PrimaryRateLimitExceeded, RequestFailed, SecondaryRateLimitExceeded

logger = structlog.get_logger(__name__)

F = TypeVar("F", bound=Callable[..., Awaitable[Any]])


def _is_rate_limited(exc: RequestFailed) -> bool:
    """Return True if a failed request was rejected because of a rate limit."""
    status_code = exc.response.status_code
    if status_code == 429:
        return True
    if status_code != 403:
        return False
    remaining = exc.response.headers.get("x-ratelimit-remaining")
    return remaining == "0" or "rate limit" in str(exc).lower()


def _wait_time_from_headers(exc: RequestFailed, fallback: float) -> float:
    """Derive how long to wait from retry-after or x-ratelimit-reset headers."""
    headers = exc.response.headers
    retry_after = headers.get("retry-after")
    if retry_after:
        try:
            return float(retry_after)
        except ValueError:
            logger.warning("Invalid retry-after header value", retry_after=retry_after)
    reset = headers.get("x-ratelimit-reset")
    if reset:
        try:
            return max(int(reset) - int(time.time()) + 1, 0)
        except ValueError:
            logger.warning("Invalid x-ratelimit-reset header value", rate_limit_reset=reset)
    return fallback


def retry_on_rate_limit(
    max_retries: int = 5,
    initial_delay: float = 5.0,
    max_delay: float = 60.0,
    exponential_base: float = 2.0,
) -> Callable[[F], F]:
    """Decorator retrying an async GitHub call when it is rate limited.

    Args:
        max_retries: Maximum number of retries after the first attempt.
        initial_delay: Delay in seconds used when GitHub gives no hint.
        max_delay: Upper bound for any single wait.
        exponential_base: Multiplier applied to the fallback delay after each retry.

    Returns:
        Decorated coroutine function.
    """

    def decorator(func: F) -> F:
        if not asyncio.iscoroutinefunction(func):
            raise TypeError(f"@retry_on_rate_limit only supports async functions, got {func.__name__}")

        @functools.wraps(func)
        async def wrapper(*args: Any, **kwargs: Any) -> Any:
            delay = initial_delay
            attempt = 0
            while True:
                try:
                    return await func(*args, **kwargs)
                except (PrimaryRateLimitExceeded, SecondaryRateLimitExceeded) as exc:
                    if attempt >= max_retries:
                        logger.error("Max retries reached for GitHub rate limit", function=func.__name__, attempt=attempt + 1)
                        raise
                    retry_after = getattr(exc, "retry_after", None)
                    wait_time = retry_after.total_seconds() if retry_after else delay
                    rate_limit_type = "primary" if isinstance(exc, PrimaryRateLimitExceeded) else "secondary"
                except RequestFailed as exc:
                    if not _is_rate_limited(exc):
                        raise
                    if attempt >= max_retries:
                        logger.error(
                            "Max retries reached for GitHub rate limit",
                            function=func.__name__,
                            attempt=attempt + 1,
                            status_code=exc.response.status_code,
                        )
                        raise
                    wait_time = _wait_time_from_headers(exc, delay)
                    rate_limit_type = "http"

                wait_time = min(wait_time, max_delay)
                logger.warning(
                    "GitHub rate limit exceeded, waiting before retry",
                    function=func.__name__,
                    rate_limit_type=rate_limit_type,
                    attempt=attempt + 1,
                    max_retries=max_retries,
                    wait_time=wait_time,
                )
                await asyncio.sleep(wait_time)
                delay = min(delay * exponential_base, max_delay)
                attempt += 1

        return wrapper  # type: ignore

    return decorator
