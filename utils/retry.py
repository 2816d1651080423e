"""
Retry logic with exponential backoff for form submissions.
"""
import logging
from typing import Any, Callable

import requests
from tenacity import (
    before_sleep_log,
    retry,
    retry_if_exception,
    stop_after_attempt,
    wait_exponential,
)

logger = logging.getLogger(__name__)

RETRYABLE_STATUS_CODES = (429, 500, 502, 503, 504)


def is_retryable_error(exception: BaseException) -> bool:
    """Check if a failed submission is worth sending again."""
    if isinstance(exception, requests.exceptions.HTTPError):
        response = exception.response
        status_code = response.status_code if response is not None else None
        return status_code in RETRYABLE_STATUS_CODES
    # Retry on connection errors, timeouts
    return isinstance(exception, (
        requests.exceptions.ConnectionError,
        requests.exceptions.Timeout,
        requests.exceptions.ChunkedEncodingError
    ))


def retry_with_backoff(
    max_retries: int = 5,
    initial_delay: float = 1.0,
    max_delay: float = 60.0,
    exponential_base: float = 2.0
):
    """
    Decorator for retrying functions with exponential backoff.

    Only errors accepted by ``is_retryable_error`` are retried; everything
    else, and the last retryable error, is re-raised.

    Args:
        max_retries: Maximum number of retry attempts
        initial_delay: Initial delay in seconds
        max_delay: Maximum delay in seconds
        exponential_base: Base for exponential backoff
    """
    def decorator(func: Callable) -> Callable:
        @retry(
            stop=stop_after_attempt(max_retries + 1),
            wait=wait_exponential(
                multiplier=initial_delay,
                max=max_delay,
                exp_base=exponential_base
            ),
            retry=retry_if_exception(is_retryable_error),
            before_sleep=before_sleep_log(logger, logging.WARNING),
            reraise=True
        )
        def wrapper(*args, **kwargs) -> Any:
            try:
                return func(*args, **kwargs)
            except requests.exceptions.RequestException as e:
                if not is_retryable_error(e):
                    logger.error(f"Non-retryable error in {func.__name__}: {e}")
                raise

        return wrapper
    return decorator
