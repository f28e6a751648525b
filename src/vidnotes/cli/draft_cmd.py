"""vidnotes draft — summarize a transcript into a note."""

from __future__ import annotations

from pathlib import Path

import click

from vidnotes.cli.options import build_config, model_options
from vidnotes.errors import VidnotesError
from vidnotes.utils.progress import log_error


@click.command()
@click.argument("transcript", type=click.Path())
@click.option("--video-id", required=True, help="Video id used for links and the note URL")
@click.option("--title", default="", help="Note title (defaults to the video id)")
@click.option("--url", default="", help="Source URL (defaults to the watch URL)")
@click.option(
    "--output", "-o",
    default=None,
    type=click.Path(),
    help="Note path (default: <video-id>.md)",
)
@model_options
def draft_cmd(
    transcript: str,
    video_id: str,
    title: str,
    url: str,
    output: str | None,
    config_path: str | None,
    provider: str | None,
    model: str | None,
    max_tokens: int | None,
    constrained: bool | None,
    verbose: bool,
) -> None:
    """Draft a structured note from a transcript."""
    config = build_config(
        config_path, provider, model, max_tokens, constrained, verbose, video_id=video_id
    )

    from vidnotes.pipeline.orchestrator import run_draft

    output_path = Path(output) if output else Path(f"{video_id}.md")
    try:
        run_draft(transcript, output_path, config, title=title, url=url)
    except VidnotesError as e:
        log_error(f"Draft failed: {e}")
        raise SystemExit(1)
