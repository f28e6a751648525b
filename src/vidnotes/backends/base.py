"""Generative backend contract."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from vidnotes.errors import VidnotesError

OVERFLOW_MARKERS = (
    "max_tokens",
    "max tokens",
    "token limit",
    "context_length_exceeded",
    "maximum context length",
)


class BackendError(VidnotesError):
    """A backend call failed for a reason other than output-length overflow."""


class BackendOverflowError(BackendError):
    """The backend rejected the requested output length."""


def is_overflow_error(error: BaseException) -> bool:
    """Classify a provider error as an output-length overflow by its message."""
    message = str(error).lower()
    return any(marker in message for marker in OVERFLOW_MARKERS)


def classify_error(error: Exception) -> BackendError:
    """Wrap a provider exception in the matching backend error type."""
    if isinstance(error, BackendError):
        return error
    if is_overflow_error(error):
        return BackendOverflowError(str(error))
    return BackendError(f"{type(error).__name__}: {error}")


@runtime_checkable
class GenerativeBackend(Protocol):
    """Anything that turns a prompt pair into text."""

    def call(
        self,
        system_prompt: str,
        user_prompt: str,
        temperature: float,
        max_output_tokens: int,
        provider: str,
    ) -> str:
        ...
