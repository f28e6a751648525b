"""Transcript data models."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class TranscriptSegment(BaseModel):
    """A single timed fragment of a video transcript."""

    model_config = ConfigDict(frozen=True)

    start_seconds: float = Field(ge=0.0)
    text: str


class TimeBucket(BaseModel):
    """Transcript text grouped into one time window."""

    start_seconds: int = Field(ge=0)
    text: str

    @property
    def marker(self) -> str:
        return f"[TimeIndex:{self.start_seconds}]"
