"""Root CLI group for vidnotes."""

from __future__ import annotations

import click

from vidnotes import __version__


@click.group()
@click.version_option(version=__version__, prog_name="vidnotes")
def cli() -> None:
    """vidnotes — video transcripts into timestamp-linked notes."""


# Import and register subcommands
from vidnotes.cli.bucket_cmd import bucket_cmd  # noqa: E402
from vidnotes.cli.draft_cmd import draft_cmd  # noqa: E402
from vidnotes.cli.link_cmd import link_cmd  # noqa: E402
from vidnotes.cli.translate_cmd import translate_cmd  # noqa: E402
from vidnotes.cli.budget_cmd import budget_cmd  # noqa: E402
from vidnotes.cli.models_cmd import models_cmd  # noqa: E402

cli.add_command(bucket_cmd, "bucket")
cli.add_command(draft_cmd, "draft")
cli.add_command(link_cmd, "link")
cli.add_command(translate_cmd, "translate")
cli.add_command(budget_cmd, "budget")
cli.add_command(models_cmd, "models")
