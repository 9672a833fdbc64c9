"""Retry logic and exponential backoff utilities."""

import asyncio
import time
import random
import logging
from functools import wraps
from typing import Callable, Any

from adnamer.utils.errors import Unauthenticated

logger = logging.getLogger(__name__)


def exponential_backoff(attempt: int, base_delay: float = 1.0, max_delay: float = 60.0) -> float:
    """Calculate exponential backoff delay with jitter."""
    delay = min(base_delay * (2 ** attempt), max_delay)
    # Add jitter to prevent thundering herd
    jitter = random.uniform(0, delay * 0.1)
    return delay + jitter


def retry_with_backoff(
    max_retries: int = 3,
    base_delay: float = 1.0,
    max_delay: float = 60.0,
    exceptions: tuple = (Exception,)
):
    """Decorator for exponential backoff retry logic (sync or async functions)."""
    def decorator(func: Callable) -> Callable:
        def _on_failure(attempt: int, e: Exception) -> float:
            if attempt == max_retries:
                logger.error(f"Function {func.__name__} failed after {max_retries} retries: {e}")
                raise e

            delay = exponential_backoff(attempt, base_delay, max_delay)
            logger.warning(
                f"Attempt {attempt + 1} of {func.__name__} failed: {e}. "
                f"Retrying in {delay:.2f}s..."
            )
            return delay

        if asyncio.iscoroutinefunction(func):
            @wraps(func)
            async def async_wrapper(*args, **kwargs) -> Any:
                for attempt in range(max_retries + 1):
                    try:
                        return await func(*args, **kwargs)
                    except exceptions as e:
                        await asyncio.sleep(_on_failure(attempt, e))

            return async_wrapper

        @wraps(func)
        def wrapper(*args, **kwargs) -> Any:
            for attempt in range(max_retries + 1):
                try:
                    return func(*args, **kwargs)
                except exceptions as e:
                    time.sleep(_on_failure(attempt, e))

        return wrapper
    return decorator


class RetryableError(Exception):
    """Base class for errors that should trigger retries."""
    pass


class APIRateLimitError(RetryableError):
    """Raised when API rate limit is hit."""
    pass


class NetworkError(RetryableError):
    """Raised for network-related errors."""
    pass


class TemporaryServiceError(RetryableError):
    """Raised for temporary service unavailability."""
    pass


def translate_drive_error(e: Exception) -> Exception:
    """Map a Drive client error onto the retry taxonomy.

    Returns the exception to raise; unrecognised errors are returned unchanged.
    """
    status = getattr(getattr(e, "resp", None), "status", None)
    try:
        status = int(status) if status is not None else None
    except (TypeError, ValueError):
        status = None
    message = str(e).lower()

    if status == 401:
        return Unauthenticated(f"Google Drive rejected the credentials: {e}")
    if status == 429 or "ratelimitexceeded" in message or "rate limit" in message:
        return APIRateLimitError(f"Google Drive rate limit hit: {e}")
    if "quota" in message:
        return TemporaryServiceError(f"Google Drive quota exceeded: {e}")
    if status is not None and status >= 500:
        return TemporaryServiceError(f"Google Drive unavailable: {e}")
    if "network" in message or isinstance(e, (ConnectionError, TimeoutError)):
        return NetworkError(f"Network error: {e}")
    return e


# Specific retry decorators for different use cases
def retry_api_call(max_retries: int = 5, base_delay: float = 2.0):
    """Retry decorator specifically for API calls with longer delays."""
    return retry_with_backoff(
        max_retries=max_retries,
        base_delay=base_delay,
        max_delay=120.0,
        exceptions=(APIRateLimitError, NetworkError, TemporaryServiceError)
    )


def retry_file_operation(max_retries: int = 3, base_delay: float = 1.0):
    """Retry decorator for file operations with shorter delays."""
    return retry_with_backoff(
        max_retries=max_retries,
        base_delay=base_delay,
        max_delay=10.0,
        exceptions=(OSError,)
    )
