"""Command-line entry point using Typer."""

import logging
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.table import Table

from deallocator.confirmation import ConfirmationGate, PresetConfirmation
from deallocator.handler import run_deallocation
from deallocator.inventory.loader import InventoryError
from deallocator.models import ClassificationResult, RunSummary
from deallocator.utils.config import (
    ConfigurationError,
    DeallocatorConfig,
    VALID_LOG_LEVELS,
    configure_logging,
)
from deallocator.utils.security import LogSanitizer

logger = logging.getLogger(__name__)

app = typer.Typer(
    name="deallocator",
    help="Azure Compute Deallocator - stop the VMs, scale sets and AKS clusters in an inventory",
    add_completion=False,
)

console = Console()


@app.callback()
def main() -> None:
    """Azure Compute Deallocator."""


def _show_classification(classification: ClassificationResult) -> None:
    counters = classification.counters
    table = Table(title="Resources to process")
    table.add_column("Kind", style="cyan")
    table.add_column("Count", justify="right")
    for kind, count in counters.to_dict().items():
        table.add_row(kind, str(count))
    table.add_row("[bold]Total[/bold]", f"[bold]{counters.total()}[/bold]")
    console.print(table)
    console.print(f"Exempt resources (skipped): {len(classification.exempt)}")


def _show_summary(summary: RunSummary) -> None:
    table = Table(title="Run summary (simulated)" if summary.simulate else "Run summary")
    table.add_column("Status", style="cyan")
    table.add_column("Count", justify="right")
    for status, count in sorted(summary.status_counts.items()):
        table.add_row(status, str(count))
    console.print(table)
    console.print(f"Processed: {summary.actionable_count}")
    console.print(f"Exempt: {summary.exempt_count}")
    style = "bold red" if summary.failed_count else "green"
    console.print(f"Not stopped: {summary.failed_count}", style=style)
    console.print(f"Exempt report: {summary.exempt_report}")
    console.print(f"Failed report: {summary.failed_report}")


@app.command("run")
def run(
    inventory: Path = typer.Argument(..., help="Inventory file (CSV or JSON)"),
    exemptions: Path = typer.Argument(..., help="Exempt subscription file with a 'Sub ID' column"),
    simulate: Optional[bool] = typer.Option(
        None, "--simulate/--live", help="Run every step except the provider calls"
    ),
    yes: Optional[str] = typer.Option(
        None, "--yes", help="Answer the confirmation prompt with this token"
    ),
    report_dir: Optional[Path] = typer.Option(None, "--report-dir", help="Directory for report files"),
    report_format: Optional[str] = typer.Option(None, "--report-format", help="csv or json"),
    grace_seconds: Optional[int] = typer.Option(
        None, "--grace-seconds", help="Pause after confirmation before the first action"
    ),
    stop_managed_clusters: Optional[bool] = typer.Option(
        None,
        "--stop-managed-clusters/--skip-managed-clusters",
        help="Issue the stop call for scale-set-backed AKS clusters",
    ),
    log_level: Optional[str] = typer.Option(None, "--log-level", help="DEBUG, INFO, WARNING or ERROR"),
) -> None:
    """Stop every non-exempt resource listed in INVENTORY."""
    try:
        config = DeallocatorConfig.from_environment(validate=False)
        if simulate is not None:
            config.simulate = simulate
        if report_dir is not None:
            config.report_dir = str(report_dir)
        if report_format is not None:
            config.report_format = report_format.lower().strip()
        if grace_seconds is not None:
            config.grace_period_seconds = grace_seconds
        if stop_managed_clusters is not None:
            config.stop_managed_clusters = stop_managed_clusters
        if log_level is not None:
            level = log_level.upper().strip()
            if level not in VALID_LOG_LEVELS:
                raise ConfigurationError(f"Invalid log level: {log_level}")
            config.log_level = level

        errors = config.validate()
        if errors:
            raise ConfigurationError("Invalid configuration", errors=errors)
    except ConfigurationError as e:
        console.print(f"✗ {e.message}", style="bold red")
        for error in e.errors:
            console.print(f"  {error}", style="yellow")
        raise typer.Exit(code=1)

    configure_logging(config)

    if config.simulate:
        console.print("SIMULATE mode: no resource will be changed", style="bold yellow")

    if yes is not None:
        gate: ConfirmationGate = PresetConfirmation(
            yes,
            token=config.confirmation_token,
            grace_period_seconds=config.grace_period_seconds,
        )
    else:
        gate = ConfirmationGate(
            token=config.confirmation_token,
            grace_period_seconds=config.grace_period_seconds,
        )

    try:
        summary, _ = run_deallocation(
            config,
            inventory,
            exemptions,
            gate,
            show_summary=_show_classification,
        )
    except InventoryError as e:
        console.print(f"✗ Cannot load input: {e}", style="bold red")
        raise typer.Exit(code=1)
    except KeyboardInterrupt:
        console.print("Interrupted.", style="yellow")
        raise typer.Exit(code=130)
    except Exception as e:
        console.print(f"✗ Unexpected error: {LogSanitizer.sanitize(str(e))}", style="bold red")
        logger.exception("Error in run command")
        raise typer.Exit(code=2)

    if summary.aborted:
        console.print("Cancelled. No resources were touched.")
        raise typer.Exit(code=0)

    _show_summary(summary)


if __name__ == "__main__":
    app()
