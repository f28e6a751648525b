"""vidnotes translate — translate a note body."""

from __future__ import annotations

import click

from vidnotes.cli.options import build_config, model_options
from vidnotes.errors import VidnotesError
from vidnotes.utils.progress import log_error


@click.command()
@click.argument("note", type=click.Path())
@click.option("--language", "-l", required=True, help="Target language, e.g. German")
@click.option(
    "--output", "-o",
    default=None,
    type=click.Path(),
    help="Write the translation here instead of in place",
)
@model_options
def translate_cmd(
    note: str,
    language: str,
    output: str | None,
    config_path: str | None,
    provider: str | None,
    model: str | None,
    max_tokens: int | None,
    constrained: bool | None,
    verbose: bool,
) -> None:
    """Translate NOTE, keeping headings and links."""
    config = build_config(config_path, provider, model, max_tokens, constrained, verbose)

    from vidnotes.pipeline.orchestrator import run_translate

    try:
        run_translate(note, config, language, output_path=output)
    except VidnotesError as e:
        log_error(f"Translation failed: {e}")
        raise SystemExit(1)
