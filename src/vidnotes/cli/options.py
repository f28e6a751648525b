"""Options shared by the commands that call a model."""

from __future__ import annotations

import functools

import click

from vidnotes.errors import VidnotesError
from vidnotes.models.config import PipelineConfig
from vidnotes.utils.progress import log_error, set_verbose


def model_options(func):
    """Add --config/--provider/--model/--max-tokens/--verbose to a command."""

    @click.option(
        "--config", "-c", "config_path",
        default=None,
        type=click.Path(),
        help="Path to vidnotes.yaml (default: ./vidnotes.yaml if present)",
    )
    @click.option("--provider", default=None, help="Provider: anthropic, openai, google, ollama")
    @click.option("--model", default=None, help="Model id, e.g. claude-3-5-sonnet-20241022")
    @click.option(
        "--max-tokens",
        default=None,
        type=click.IntRange(min=1),
        help="Configured output-token ceiling",
    )
    @click.option(
        "--constrained/--no-constrained",
        default=None,
        help="Use the constrained-device budget caps",
    )
    @click.option("--verbose", "-v", is_flag=True, help="Show debug output")
    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        return func(*args, **kwargs)

    return wrapper


def build_config(
    config_path: str | None,
    provider: str | None,
    model: str | None,
    max_tokens: int | None,
    constrained: bool | None,
    verbose: bool,
    video_id: str | None = None,
) -> PipelineConfig:
    """Load configuration for a command, exiting with status 1 on error."""
    from vidnotes.pipeline.orchestrator import load_config

    set_verbose(verbose)
    try:
        return load_config(
            config_path,
            video_id=video_id,
            provider=provider,
            model=model,
            max_tokens=max_tokens,
            constrained=constrained,
        )
    except VidnotesError as e:
        log_error(str(e))
        raise SystemExit(1)
