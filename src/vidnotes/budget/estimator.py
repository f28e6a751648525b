"""Token budget estimation — safe output-token budget per pass and model."""

from __future__ import annotations

import math

from vidnotes.budget.registry import ModelLimitsRegistry
from vidnotes.models.limits import PassType, TokenBudget
from vidnotes.utils.progress import log_debug, log_warning

# Known-safe output ceilings used when a computed budget collapses to zero.
SAFE_MINIMUM_TOKENS: dict[str, int] = {
    "openai": 4096,
    "anthropic": 4096,
    "ollama": 4096,
    "google": 8192,
}
DEFAULT_SAFE_MINIMUM = 4096

LINKING_MULTIPLIER = 0.85
CONSTRAINED_CAP_TOKENS = 2000
CONTEXT_MARGIN_FRACTION = 0.05
MIN_SAFE_TOKENS = 100
CHARS_PER_TOKEN = 4


def estimate_tokens(text: str) -> int:
    """Rough token count used for chunk sizing and prompt estimates."""
    return math.ceil(len(text) / CHARS_PER_TOKEN)


def safe_minimum(provider: str) -> int:
    return SAFE_MINIMUM_TOKENS.get(provider, DEFAULT_SAFE_MINIMUM)


def _adjust(
    tokens: int,
    pass_type: PassType,
    *,
    constrained: bool,
    linking_multiplier: float,
    constrained_cap: int,
) -> int:
    if pass_type == "linking":
        tokens = math.floor(tokens * linking_multiplier)
    if constrained:
        tokens = min(tokens, constrained_cap)
    return tokens


def estimate_budget(
    provider: str,
    model_id: str,
    pass_type: PassType,
    *,
    registry: ModelLimitsRegistry,
    configured_ceiling: int,
    constrained: bool = False,
    linking_multiplier: float = LINKING_MULTIPLIER,
    constrained_cap: int = CONSTRAINED_CAP_TOKENS,
) -> TokenBudget:
    """Compute the output-token budget for one pass.

    Never raises: any failure while resolving limits falls back to the
    configured ceiling with the same pass and device adjustments. The
    returned budget is always a positive integer.
    """
    adjust = dict(
        constrained=constrained,
        linking_multiplier=linking_multiplier,
        constrained_cap=constrained_cap,
    )

    try:
        effective = registry.effective(provider, model_id)
        if effective is None:
            base = configured_ceiling
            source = "configured"
        else:
            base = effective.max_output_eff
            source = "override" if registry.is_override(provider, model_id) else "registry"
            if 0 < configured_ceiling < base:
                base = configured_ceiling
                source = "configured"

        tokens = _adjust(base, pass_type, **adjust)
    except Exception as e:
        log_warning(f"Budget estimation failed for {provider}/{model_id}: {e}")
        tokens = _adjust(configured_ceiling, pass_type, **adjust)
        source = "fallback"

    if tokens <= 0:
        tokens = safe_minimum(provider)
        if constrained:
            tokens = min(tokens, constrained_cap)
        source = "fallback"

    tokens = max(1, tokens)
    log_debug("Budget", f"{provider}/{model_id} {pass_type}: {tokens} tokens ({source})")
    return TokenBudget(tokens=tokens, pass_type=pass_type, source=source)


def safe_max_tokens(
    provider: str,
    model_id: str,
    prompt_tokens: int,
    desired: int,
    *,
    registry: ModelLimitsRegistry,
) -> int:
    """Clamp a desired output size so prompt plus output fits the context.

    Keeps a margin of 5% of the context window and never returns less than
    ``MIN_SAFE_TOKENS``. Unknown models get ``desired`` unchanged.
    """
    effective = registry.effective(provider, model_id)
    if effective is None:
        return max(MIN_SAFE_TOKENS, desired)

    margin = math.floor(effective.context_tokens * CONTEXT_MARGIN_FRACTION)
    available = effective.context_tokens - prompt_tokens - margin
    return max(MIN_SAFE_TOKENS, min(desired, effective.max_output_eff, available))
