"""Document, chunk and pass result models."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


class Document(BaseModel):
    """A note split into its metadata block and its body.

    ``metadata_block`` holds the frontmatter including both ``---`` delimiter
    lines and the newline that ends it; ``body`` is everything after it.
    """

    model_config = ConfigDict(frozen=True)

    metadata_block: str = ""
    body: str = ""

    def render(self) -> str:
        return self.metadata_block + self.body


class Chunk(BaseModel):
    """A heading-bounded slice of a document body."""

    model_config = ConfigDict(frozen=True)

    index: int = Field(ge=0)
    text: str
    has_heading: bool


class ValidationResult(BaseModel):
    """Outcome of checking one candidate output."""

    accepted: bool
    reason: str | None = None

    @classmethod
    def ok(cls) -> ValidationResult:
        return cls(accepted=True)

    @classmethod
    def reject(cls, reason: str) -> ValidationResult:
        return cls(accepted=False, reason=reason)


class PassResult(BaseModel):
    """Outcome of one orchestrated backend call (with at most one retry)."""

    status: Literal["ok", "overflow", "failure"]
    text: str = ""
    reason: str | None = None
    attempts: int = 1
    budget_tokens: int = 0

    @property
    def ok(self) -> bool:
        return self.status == "ok"


class ChunkOutcome(BaseModel):
    """What happened to one chunk during a pass."""

    index: int
    text: str
    sent: bool = False
    accepted: bool = False
    reason: str | None = None
    attempts: int = 0


class LinkingReport(BaseModel):
    """Counts reported to the user after a linking pass."""

    sections: int = 0
    sections_linked: int = 0
    links_added: int = 0
    chunks: int = 0
    chunks_sent: int = 0
    chunks_accepted: int = 0
    chunks_failed: int = 0
    chunked: bool = False
    cancelled: bool = False

    def summary(self) -> str:
        text = f"added {self.links_added} links out of {self.sections} sections"
        if self.chunks_failed:
            text += f" ({self.chunks_failed} chunk(s) kept unchanged)"
        return text


class LinkingOutcome(BaseModel):
    """A linked document together with its report."""

    document: Document
    report: LinkingReport
