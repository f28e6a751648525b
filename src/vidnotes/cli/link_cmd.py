"""vidnotes link — add timestamp links to a note's headings."""

from __future__ import annotations

import click

from vidnotes.cli.options import build_config, model_options
from vidnotes.errors import VidnotesError
from vidnotes.utils.progress import log_error


@click.command()
@click.argument("note", type=click.Path())
@click.option("--video-id", default=None, help="Video id (default: from the note frontmatter)")
@click.option("--dry-run", is_flag=True, help="Run the pass without writing the note")
@model_options
def link_cmd(
    note: str,
    video_id: str | None,
    dry_run: bool,
    config_path: str | None,
    provider: str | None,
    model: str | None,
    max_tokens: int | None,
    constrained: bool | None,
    verbose: bool,
) -> None:
    """Link each section heading of NOTE to the moment it is discussed."""
    config = build_config(
        config_path, provider, model, max_tokens, constrained, verbose, video_id=video_id
    )

    from vidnotes.pipeline.orchestrator import run_link

    try:
        run_link(note, config, dry_run=dry_run)
    except VidnotesError as e:
        log_error(f"Linking failed, note left unchanged: {e}")
        raise SystemExit(1)
