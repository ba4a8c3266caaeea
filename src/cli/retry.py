"""Retry utilities with exponential backoff."""

import logging

import structlog
from tenacity import (
    before_sleep_log,
    retry,
    retry_if_exception_type,
    retry_if_not_exception_type,
    stop_after_attempt,
    wait_exponential,
)

logger = structlog.stdlib.get_logger(__name__)


def llm_retry(
    max_attempts: int = 3,
    min_wait: float = 1.0,
    max_wait: float = 10.0,
    exceptions: tuple = (Exception,),
    exclude: tuple = (),
):
    """Retry decorator for LLM API calls.

    Args:
        max_attempts: Max retry attempts
        min_wait: Min wait between retries (seconds)
        max_wait: Max wait between retries (seconds)
        exceptions: Exception types to retry on
        exclude: Subclasses of ``exceptions`` that fail immediately (e.g. auth)
    """
    condition = retry_if_exception_type(exceptions)
    if exclude:
        condition = condition & retry_if_not_exception_type(exclude)
    return retry(
        stop=stop_after_attempt(max_attempts),
        wait=wait_exponential(multiplier=1, min=min_wait, max=max_wait),
        retry=condition,
        before_sleep=before_sleep_log(logger, logging.WARNING),
        reraise=True,
    )
