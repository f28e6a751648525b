"""Tests for the model limits registry."""

from __future__ import annotations

from vidnotes.budget.registry import BASE_MODELS, ModelLimitsRegistry, effective_limits
from vidnotes.models.limits import ModelLimits


class TestLookup:
    def test_known_model(self) -> None:
        limits = ModelLimitsRegistry().lookup("openai", "gpt-4o")
        assert limits.context_tokens == 128_000
        assert limits.max_output_tokens == 16_384

    def test_unknown_model_is_none(self) -> None:
        registry = ModelLimitsRegistry()
        assert registry.lookup("openai", "gpt-99") is None
        assert registry.lookup("nobody", "gpt-4o") is None
        assert registry.effective("openai", "gpt-99") is None

    def test_override_shadows_base(self) -> None:
        registry = ModelLimitsRegistry()
        registry.upsert("openai", "gpt-4o", ModelLimits(context_tokens=1000, max_output_tokens=500))
        assert registry.lookup("openai", "gpt-4o").max_output_tokens == 500
        assert registry.is_override("openai", "gpt-4o")
        assert BASE_MODELS["openai"]["gpt-4o"].max_output_tokens == 16_384
        assert ModelLimitsRegistry().lookup("openai", "gpt-4o").max_output_tokens == 16_384

    def test_upsert_replaces_wholesale(self) -> None:
        registry = ModelLimitsRegistry()
        registry.upsert("ollama", "custom", ModelLimits(
            context_tokens=8000, max_output_tokens=2000, input_cap_tokens=4000,
        ))
        registry.upsert("ollama", "custom", ModelLimits(context_tokens=9000, max_output_tokens=1000))
        assert registry.lookup("ollama", "custom").input_cap_tokens is None


class TestEffective:
    def test_hosted_reserve(self) -> None:
        eff = ModelLimitsRegistry().effective("openai", "gpt-4o")
        assert eff.max_output_eff == 14_745
        assert eff.input_max_eff == 128_000 - 14_745

    def test_default_reserve_by_provider(self) -> None:
        limits = ModelLimits(context_tokens=10_000, max_output_tokens=1000)
        assert effective_limits("ollama", limits).max_output_eff == 850
        assert effective_limits("anthropic", limits).max_output_eff == 900

    def test_input_cap(self) -> None:
        limits = ModelLimits(context_tokens=10_000, max_output_tokens=1000, input_cap_tokens=2000)
        assert effective_limits("openai", limits).input_max_eff == 2000


class TestListing:
    def test_models_for_includes_overrides(self) -> None:
        registry = ModelLimitsRegistry()
        registry.upsert("ollama", "phi4", ModelLimits(context_tokens=16_000, max_output_tokens=4000))
        models = registry.models_for("ollama")
        assert models[0] == "llama3.1"
        assert models[-1] == "phi4"

    def test_provider_for(self) -> None:
        registry = ModelLimitsRegistry()
        assert registry.provider_for("gemini-1.5-pro") == "google"
        assert registry.provider_for("nope") is None

    def test_is_supported(self) -> None:
        registry = ModelLimitsRegistry()
        assert registry.is_supported("anthropic", "claude-3-5-sonnet-20241022")
        assert not registry.is_supported("anthropic", "claude-1")


class TestOverridesFile:
    def test_save_and_load(self, tmp_path) -> None:
        path = tmp_path / "limits.yaml"
        registry = ModelLimitsRegistry()
        registry.upsert("ollama", "phi4", ModelLimits(
            context_tokens=16_000, max_output_tokens=4000, reserve_fraction=0.2,
        ))
        registry.save_overrides(path)

        loaded = ModelLimitsRegistry.from_overrides_file(path)
        limits = loaded.lookup("ollama", "phi4")
        assert limits.context_tokens == 16_000
        assert limits.reserve_fraction == 0.2
        assert limits.input_cap_tokens is None

    def test_missing_file_means_no_overrides(self, tmp_path) -> None:
        registry = ModelLimitsRegistry.from_overrides_file(tmp_path / "absent.yaml")
        assert registry.overrides() == {}
