"""Model limits registry — static table plus user overrides."""

from __future__ import annotations

import math
from pathlib import Path

from vidnotes.models.limits import EffectiveLimits, ModelLimits
from vidnotes.utils.io import read_yaml, write_yaml
from vidnotes.utils.progress import log_step

HOSTED_RESERVE_FRACTION = 0.10
LOCAL_RESERVE_FRACTION = 0.15
LOCAL_PROVIDERS = frozenset({"ollama"})


def _limits(context: int, max_output: int, reserve: float) -> ModelLimits:
    return ModelLimits(
        context_tokens=context,
        max_output_tokens=max_output,
        reserve_fraction=reserve,
    )


BASE_MODELS: dict[str, dict[str, ModelLimits]] = {
    "openai": {
        "gpt-5": _limits(400_000, 128_000, 0.10),
        "gpt-4o": _limits(128_000, 16_384, 0.10),
        "gpt-4o-mini": _limits(128_000, 16_384, 0.10),
        "gpt-4-turbo": _limits(128_000, 4_096, 0.10),
        "gpt-4": _limits(8_192, 4_096, 0.10),
        "gpt-3.5-turbo": _limits(16_384, 4_096, 0.10),
    },
    "anthropic": {
        "claude-opus-4-0": _limits(400_000, 32_000, 0.10),
        "claude-opus-4-1": _limits(400_000, 32_000, 0.10),
        "claude-sonnet-4-0": _limits(400_000, 16_000, 0.10),
        "claude-3-5-sonnet-20241022": _limits(200_000, 8_192, 0.10),
        "claude-3-5-haiku-20241022": _limits(200_000, 8_192, 0.10),
        "claude-3-sonnet-20240229": _limits(200_000, 4_096, 0.10),
        "claude-3-opus-20240229": _limits(200_000, 4_096, 0.10),
        "claude-3-haiku-20240307": _limits(200_000, 4_096, 0.10),
    },
    "google": {
        "gemini-2.5-flash": _limits(2_000_000, 16_384, 0.10),
        "gemini-2.0-flash-exp": _limits(1_000_000, 8_192, 0.10),
        "gemini-1.5-pro": _limits(2_000_000, 8_192, 0.10),
        "gemini-1.5-flash": _limits(1_000_000, 8_192, 0.10),
        "gemini-1.5-flash-8b": _limits(1_000_000, 8_192, 0.10),
    },
    "ollama": {
        "llama3.1": _limits(32_768, 8_192, 0.15),
        "llama3.1:70b": _limits(32_768, 8_192, 0.15),
        "llama3.1:8b": _limits(32_768, 4_096, 0.15),
        "qwen2.5": _limits(32_768, 8_192, 0.15),
        "mistral": _limits(32_768, 4_096, 0.15),
    },
}


def default_reserve_fraction(provider: str) -> float:
    """Reserve applied when limits do not specify one."""
    if provider in LOCAL_PROVIDERS:
        return LOCAL_RESERVE_FRACTION
    return HOSTED_RESERVE_FRACTION


def effective_limits(provider: str, limits: ModelLimits) -> EffectiveLimits:
    """Apply the output reserve and derive the effective input maximum."""
    reserve = limits.reserve_fraction
    if reserve is None:
        reserve = default_reserve_fraction(provider)
    max_output_eff = max(0, math.floor(limits.max_output_tokens * (1 - reserve)))

    input_max = max(0, limits.context_tokens - max_output_eff)
    if limits.input_cap_tokens is not None:
        input_max = min(limits.input_cap_tokens, input_max)

    return EffectiveLimits(
        limits=limits,
        reserve_fraction=reserve,
        max_output_eff=max_output_eff,
        input_max_eff=input_max,
    )


class ModelLimitsRegistry:
    """Lookup of (provider, model) limits.

    User overrides shadow the static table; ``upsert`` never touches the
    static table. A missing model is a normal outcome (``None``), not an error.
    """

    def __init__(
        self,
        overrides: dict[str, dict[str, ModelLimits]] | None = None,
        *,
        base: dict[str, dict[str, ModelLimits]] | None = None,
    ):
        self._base = base if base is not None else BASE_MODELS
        self._overrides: dict[str, dict[str, ModelLimits]] = {}
        for provider, models in (overrides or {}).items():
            for model_id, limits in models.items():
                self.upsert(provider, model_id, limits)

    def lookup(self, provider: str, model_id: str) -> ModelLimits | None:
        override = self._overrides.get(provider, {}).get(model_id)
        if override is not None:
            return override
        return self._base.get(provider, {}).get(model_id)

    def is_override(self, provider: str, model_id: str) -> bool:
        return model_id in self._overrides.get(provider, {})

    def upsert(self, provider: str, model_id: str, limits: ModelLimits) -> None:
        """Insert or replace a user override."""
        self._overrides.setdefault(provider, {})[model_id] = limits

    def effective(self, provider: str, model_id: str) -> EffectiveLimits | None:
        limits = self.lookup(provider, model_id)
        if limits is None:
            return None
        return effective_limits(provider, limits)

    def is_supported(self, provider: str, model_id: str) -> bool:
        return self.lookup(provider, model_id) is not None

    def providers(self) -> list[str]:
        return sorted(set(self._base) | set(self._overrides))

    def models_for(self, provider: str) -> list[str]:
        models = list(self._base.get(provider, {}))
        for model_id in self._overrides.get(provider, {}):
            if model_id not in models:
                models.append(model_id)
        return models

    def provider_for(self, model_id: str) -> str | None:
        for provider in self.providers():
            if self.lookup(provider, model_id) is not None:
                return provider
        return None

    def overrides(self) -> dict[str, dict[str, ModelLimits]]:
        return {p: dict(models) for p, models in self._overrides.items()}

    # ----------------------------
    # Persistence of overrides
    # ----------------------------

    @classmethod
    def from_overrides_file(cls, path: Path | str | None) -> ModelLimitsRegistry:
        """Build a registry, loading overrides from YAML when the file exists."""
        registry = cls()
        if path is not None and Path(path).exists():
            registry.load_overrides(path)
        return registry

    def load_overrides(self, path: Path | str) -> int:
        data = read_yaml(path)
        count = 0
        for provider, models in data.items():
            for model_id, fields in (models or {}).items():
                self.upsert(str(provider), str(model_id), ModelLimits(**dict(fields)))
                count += 1
        log_step("Limits", f"Loaded {count} model override(s) from {Path(path).name}")
        return count

    def save_overrides(self, path: Path | str) -> None:
        data = {
            provider: {
                model_id: limits.model_dump(exclude_none=True)
                for model_id, limits in models.items()
            }
            for provider, models in self._overrides.items()
        }
        write_yaml(path, data)
