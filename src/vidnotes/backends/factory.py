"""Backend construction from configuration."""

from __future__ import annotations

from vidnotes.backends.base import GenerativeBackend
from vidnotes.errors import ConfigError
from vidnotes.models.config import BudgetConfig

SUPPORTED_PROVIDERS = ("anthropic", "openai", "ollama", "google")


def create_backend(budget: BudgetConfig) -> GenerativeBackend:
    """Build the backend for the configured provider and model."""
    provider = budget.provider
    if provider == "anthropic":
        from vidnotes.backends.anthropic_backend import AnthropicBackend

        return AnthropicBackend(budget.model)

    if provider in ("openai", "ollama", "google"):
        from vidnotes.backends.openai_backend import OpenAIBackend

        return OpenAIBackend(budget.model, provider=provider)

    raise ConfigError(
        f"Unknown provider {provider!r} (expected one of: "
        f"{', '.join(SUPPORTED_PROVIDERS)})"
    )
