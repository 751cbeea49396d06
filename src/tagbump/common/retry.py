"""Bounded retry helper for registry calls.

Attempts are capped at ``max_attempts``; between attempts the caller sleeps
for a capped exponential delay (base, 2*base, 4*base, ... up to max_delay).
The terminal error is re-raised unchanged so callers can branch on its type.
"""
from __future__ import annotations

import logging
import time
from typing import Callable, Optional, TypeVar

from ..constants import Constants
from .logging_utils import extra_context, is_debug_enabled

logger = logging.getLogger(__name__)

T = TypeVar("T")


def backoff_delay(attempt: int, base_delay: float, max_delay: float) -> float:
    """Delay to wait after failed attempt number ``attempt`` (1-based)."""
    if base_delay <= 0:
        return 0.0
    return min(max_delay, base_delay * (2 ** (attempt - 1)))


def call_with_retry(
    operation: Callable[[], T],
    *,
    is_retryable: Callable[[BaseException], bool],
    max_attempts: Optional[int] = None,
    base_delay: Optional[float] = None,
    max_delay: Optional[float] = None,
    sleep: Callable[[float], None] = time.sleep,
    context: str = "",
) -> T:
    """Run ``operation`` until it succeeds or the attempt budget is spent.

    Args:
        operation: Zero-argument callable performing one attempt.
        is_retryable: Predicate deciding whether an exception is transient.
        max_attempts: Total attempts, including the first. Defaults to
            Constants.HTTP_RETRY_MAX.
        base_delay: First backoff delay in seconds.
        max_delay: Ceiling for any single backoff delay.
        sleep: Sleep function, injectable for tests.
        context: Label used in log records.

    Returns:
        Whatever ``operation`` returns.

    Raises:
        The last exception raised by ``operation`` when it is not retryable
        or when all attempts failed.
    """
    attempts = max(1, max_attempts if max_attempts is not None else Constants.HTTP_RETRY_MAX)
    base = Constants.HTTP_RETRY_BASE_DELAY_SEC if base_delay is None else base_delay
    ceiling = Constants.HTTP_RETRY_MAX_DELAY_SEC if max_delay is None else max_delay

    attempt = 0
    while True:
        attempt += 1
        try:
            return operation()
        except Exception as exc:  # pylint: disable=broad-exception-caught
            if not is_retryable(exc):
                raise
            if attempt >= attempts:
                logger.warning(
                    "%s failed after %d attempts: %s",
                    context or "operation",
                    attempt,
                    exc,
                    extra=extra_context(
                        event="retry_exhausted",
                        component="retry",
                        outcome="failed",
                        attempt=attempt,
                        context=context or None,
                    ),
                )
                raise
            delay = backoff_delay(attempt, base, ceiling)
            if is_debug_enabled(logger):
                logger.debug(
                    "Transient failure, retrying",
                    extra=extra_context(
                        event="retry",
                        component="retry",
                        outcome=type(exc).__name__,
                        attempt=attempt,
                        delay_sec=delay,
                        context=context or None,
                    ),
                )
            if delay:
                sleep(delay)
