"""vidnotes models — list known model limits."""

from __future__ import annotations

import click
from rich.console import Console
from rich.table import Table

from vidnotes.cli.options import build_config
from vidnotes.errors import VidnotesError
from vidnotes.utils.progress import log_error

console = Console()


@click.command()
@click.option("--provider", default=None, help="Only list this provider")
@click.option(
    "--config", "-c", "config_path",
    default=None,
    type=click.Path(),
    help="Path to vidnotes.yaml (for model overrides)",
)
def models_cmd(provider: str | None, config_path: str | None) -> None:
    """List the model limits registry, overrides included."""
    config = build_config(config_path, None, None, None, None, False)

    from vidnotes.pipeline.orchestrator import load_registry

    try:
        registry = load_registry(config)
    except VidnotesError as e:
        log_error(str(e))
        raise SystemExit(1)
    providers = [provider] if provider else registry.providers()

    table = Table(title="Model Limits", show_lines=False)
    table.add_column("Provider", style="bold")
    table.add_column("Model")
    table.add_column("Context", justify="right")
    table.add_column("Max output", justify="right")
    table.add_column("Effective output", justify="right")
    table.add_column("Source")

    for p in providers:
        for model_id in registry.models_for(p):
            effective = registry.effective(p, model_id)
            if effective is None:
                continue
            source = "[cyan]override[/cyan]" if registry.is_override(p, model_id) else "built-in"
            table.add_row(
                p,
                model_id,
                f"{effective.context_tokens:,}",
                f"{effective.limits.max_output_tokens:,}",
                f"{effective.max_output_eff:,}",
                source,
            )

    console.print(table)
