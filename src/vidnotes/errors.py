"""Exception hierarchy for vidnotes."""

from __future__ import annotations


class VidnotesError(Exception):
    """Base class for errors surfaced to the user."""


class ConfigError(VidnotesError):
    """Raised when configuration cannot be loaded or is invalid."""


class TranscriptError(VidnotesError):
    """Raised when a transcript file cannot be read."""


class DraftFailed(VidnotesError):
    """Raised when the drafting pass produces no usable note."""


class LinkingFailed(VidnotesError):
    """Raised when no section of a note could be linked.

    The note on disk is left untouched when this is raised.
    """

    def __init__(self, message: str, *, sections: int = 0, chunks_failed: int = 0):
        self.sections = sections
        self.chunks_failed = chunks_failed
        super().__init__(message)


class TranslationFailed(VidnotesError):
    """Raised when no part of a note body could be translated."""
