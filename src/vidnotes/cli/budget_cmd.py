"""vidnotes budget — show the output-token budget for a model."""

from __future__ import annotations

import click
from rich.console import Console
from rich.table import Table

from vidnotes.cli.options import build_config, model_options
from vidnotes.errors import VidnotesError
from vidnotes.utils.progress import log_error

console = Console()


@click.command()
@click.option(
    "--pass", "pass_type",
    default="first",
    type=click.Choice(["first", "linking"]),
    show_default=True,
    help="Pass to estimate for",
)
@model_options
def budget_cmd(
    pass_type: str,
    config_path: str | None,
    provider: str | None,
    model: str | None,
    max_tokens: int | None,
    constrained: bool | None,
    verbose: bool,
) -> None:
    """Show the effective limits and token budget for the configured model."""
    config = build_config(config_path, provider, model, max_tokens, constrained, verbose)

    from vidnotes.budget.estimator import estimate_budget
    from vidnotes.pipeline.orchestrator import load_registry

    b = config.budget
    try:
        registry = load_registry(config)
    except VidnotesError as e:
        log_error(str(e))
        raise SystemExit(1)
    effective = registry.effective(b.provider, b.model)
    budget = estimate_budget(
        b.provider,
        b.model,
        pass_type,
        registry=registry,
        configured_ceiling=b.max_tokens,
        constrained=b.constrained,
        linking_multiplier=b.linking_multiplier,
        constrained_cap=b.constrained_cap_tokens,
    )

    table = Table(title=f"{b.provider}/{b.model}", show_header=False)
    table.add_column(style="bold")
    table.add_column()
    if effective is None:
        table.add_row("Limits", "[yellow]unknown model[/yellow]")
    else:
        table.add_row("Context", f"{effective.context_tokens:,}")
        table.add_row("Max output", f"{effective.limits.max_output_tokens:,}")
        table.add_row("Reserve", f"{effective.reserve_fraction:.0%}")
        table.add_row("Effective output", f"{effective.max_output_eff:,}")
        table.add_row("Effective input", f"{effective.input_max_eff:,}")
    table.add_row("Configured ceiling", f"{b.max_tokens:,}")
    table.add_row("Constrained", "yes" if b.constrained else "no")
    table.add_row(f"Budget ({pass_type})", f"[green]{budget.tokens:,}[/green] ({budget.source})")

    console.print(table)
