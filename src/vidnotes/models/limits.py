"""Model limit and token budget models."""

from __future__ import annotations

import math
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

PassType = Literal["first", "linking"]


class ModelLimits(BaseModel):
    """Published limits of one (provider, model) pair."""

    model_config = ConfigDict(frozen=True)

    context_tokens: int = Field(gt=0)
    max_output_tokens: int = Field(ge=0)
    reserve_fraction: float | None = Field(default=None, ge=0.0, le=1.0)
    input_cap_tokens: int | None = Field(default=None, gt=0)


class EffectiveLimits(BaseModel):
    """Limits after the output reserve has been applied."""

    model_config = ConfigDict(frozen=True)

    limits: ModelLimits
    reserve_fraction: float
    max_output_eff: int
    input_max_eff: int

    @property
    def context_tokens(self) -> int:
        return self.limits.context_tokens


class TokenBudget(BaseModel):
    """Maximum output tokens a single backend call may request."""

    model_config = ConfigDict(frozen=True)

    tokens: int = Field(gt=0)
    pass_type: PassType = "first"
    source: str = "registry"  # registry | override | configured | fallback

    def reduced(self, factor: float) -> TokenBudget:
        """Return a smaller budget, never below one token."""
        return self.model_copy(
            update={"tokens": max(1, math.floor(self.tokens * factor))}
        )
