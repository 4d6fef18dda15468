#!/usr/bin/env python3
"""
Shared utility functions for Google API clients.
"""

from __future__ import annotations
import logging
import random
import time
from googleapiclient.errors import HttpError

logger = logging.getLogger(__name__)


def is_retryable(error: HttpError) -> bool:
    """429 Too Many Requests and 5xx server errors are worth retrying."""
    status = error.resp.status
    return status == 429 or 500 <= status < 600


def retry_with_exponential_backoff(
    func,
    max_retries=5,
    initial_delay=1,
    max_delay=60,
    backoff_factor=2,
):
    """
    Retry a function with exponential backoff on 429 and 5xx errors.

    Args:
        func: Function to retry (should be a callable that takes no arguments)
        max_retries: Maximum number of retry attempts (default: 5)
        initial_delay: Initial delay in seconds before first retry (default: 1)
        max_delay: Maximum delay in seconds between retries (default: 60)
        backoff_factor: Factor to multiply delay by after each retry (default: 2)

    Returns:
        The return value of func() if successful

    Raises:
        HttpError: If the error is not retryable or if max_retries is exceeded
        Exception: Any other exception raised by func()
    """
    delay = initial_delay

    for attempt in range(max_retries + 1):
        try:
            return func()
        except HttpError as error:
            if not is_retryable(error) or attempt >= max_retries:
                if is_retryable(error):
                    logger.error(
                        f"✗ HTTP {error.resp.status}. Max retries ({max_retries}) reached."
                    )
                raise

            status = error.resp.status
            error_msg = "Rate limit exceeded (429)" if status == 429 else f"Server error ({status})"
            # ±20% jitter around the capped delay
            base_wait_time = min(delay, max_delay)
            jitter = base_wait_time * 0.2 * (2 * random.random() - 1)
            wait_time = max(0.1, base_wait_time + jitter)
            logger.warning(
                f"⚠️  {error_msg}. Retrying in {wait_time:.1f} seconds... "
                f"(attempt {attempt + 1}/{max_retries})"
            )
            time.sleep(wait_time)
            delay *= backoff_factor
