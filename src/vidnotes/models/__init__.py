"""Pydantic data models for vidnotes."""

from vidnotes.models.config import (
    BudgetConfig,
    DraftingConfig,
    LinkingConfig,
    PipelineConfig,
    TranslationConfig,
)
from vidnotes.models.document import (
    Chunk,
    ChunkOutcome,
    Document,
    LinkingOutcome,
    LinkingReport,
    PassResult,
    ValidationResult,
)
from vidnotes.models.limits import EffectiveLimits, ModelLimits, TokenBudget
from vidnotes.models.transcript import TimeBucket, TranscriptSegment

__all__ = [
    "BudgetConfig",
    "Chunk",
    "ChunkOutcome",
    "Document",
    "DraftingConfig",
    "EffectiveLimits",
    "LinkingConfig",
    "LinkingOutcome",
    "LinkingReport",
    "ModelLimits",
    "PassResult",
    "PipelineConfig",
    "TimeBucket",
    "TokenBudget",
    "TranscriptSegment",
    "TranslationConfig",
    "ValidationResult",
]
