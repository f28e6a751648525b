"""Retry decorators using tenacity."""

from __future__ import annotations

from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

TRANSIENT_ERRORS: tuple[type[BaseException], ...] = (TimeoutError, ConnectionError)


def retry_api(
    max_attempts: int = 3,
    *,
    exceptions: tuple[type[BaseException], ...] = TRANSIENT_ERRORS,
    max_wait: float = 30,
):
    """Retry decorator for API calls with exponential backoff.

    Only transient transport errors are retried here. Output-length overflow
    is handled by the pass orchestrator, never by this decorator.
    """
    return retry(
        stop=stop_after_attempt(max_attempts),
        wait=wait_exponential(multiplier=1, min=1, max=max_wait),
        retry=retry_if_exception_type(exceptions),
        reraise=True,
    )
