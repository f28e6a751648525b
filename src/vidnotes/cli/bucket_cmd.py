"""vidnotes bucket — print the annotated transcript."""

from __future__ import annotations

from pathlib import Path

import click

from vidnotes.errors import VidnotesError
from vidnotes.utils.progress import log_error, log_success


@click.command()
@click.argument("transcript", type=click.Path())
@click.option(
    "--output", "-o",
    default=None,
    type=click.Path(),
    help="Write to a file instead of stdout",
)
@click.option(
    "--min-duration",
    default=60,
    type=click.IntRange(min=1),
    show_default=True,
    help="Minimum bucket length in seconds",
)
def bucket_cmd(transcript: str, output: str | None, min_duration: int) -> None:
    """Group a transcript into time buckets with [TimeIndex:N] markers."""
    from vidnotes.ingestion.bucketer import format_annotated_transcript
    from vidnotes.ingestion.loader import load_segments
    from vidnotes.utils.io import write_atomic

    try:
        segments = load_segments(transcript)
    except VidnotesError as e:
        log_error(str(e))
        raise SystemExit(1)

    text = format_annotated_transcript(segments, min_duration=min_duration)
    if output:
        write_atomic(Path(output), text + "\n")
        log_success(f"Annotated transcript written to {output}")
    else:
        click.echo(text)
