"""Run orchestration for the Azure compute deallocator.

A run goes through these steps:
1. Load the inventory and the exemption list (input errors abort the run)
2. Classify rows into exempt and actionable records
3. Show the pre-action summary and ask the operator to confirm
4. Pause for the grace period, then dispatch every actionable record
5. Write the exempt and failed resource reports

A declined confirmation ends the run with no resource touched and no report
written. Simulate mode runs every step but swaps the live executor for the
simulated one.
"""

import logging
from collections.abc import Callable
from pathlib import Path

from deallocator.actions.dispatcher import ActionDispatcher
from deallocator.actions.executors import (
    ActionExecutor,
    LiveActionExecutor,
    SimulatedActionExecutor,
)
from deallocator.confirmation import ConfirmationGate
from deallocator.filters.exemption import Classifier
from deallocator.inventory.loader import load_exemptions, load_inventory
from deallocator.inventory.reports import ReportWriter
from deallocator.models import ClassificationResult, RunSummary
from deallocator.providers.azure import AzureProvider
from deallocator.providers.base import ResourceProvider
from deallocator.utils.config import DeallocatorConfig
from deallocator.utils.logging import DeallocationLogger

logger = logging.getLogger(__name__)


def classify_inventory(
    inventory_path: str | Path,
    exemptions_path: str | Path,
    run_logger: DeallocationLogger,
) -> ClassificationResult:
    """
    Load both input files and classify the inventory.

    Raises:
        InventoryError: If either file cannot be loaded
    """
    rows = load_inventory(inventory_path)
    exemptions = load_exemptions(exemptions_path)
    return Classifier(exemptions, run_logger).classify(rows)


def build_executor(
    config: DeallocatorConfig,
    run_logger: DeallocationLogger,
    provider_factory: Callable[[], ResourceProvider] | None = None,
) -> ActionExecutor:
    """
    Choose the executor for the configured mode.

    The provider is only created for live runs, so simulate mode never
    requests cloud credentials.
    """
    if config.simulate:
        return SimulatedActionExecutor(run_logger)

    if provider_factory is None:
        provider_factory = AzureProvider

    return LiveActionExecutor(
        provider_factory(),
        run_logger,
        stop_managed_clusters=config.stop_managed_clusters,
    )


def summarize(
    classification: ClassificationResult,
    config: DeallocatorConfig,
    aborted: bool = False,
) -> RunSummary:
    """Build the operator-facing summary of a run."""
    status_counts: dict[str, int] = {}
    for record in classification.actionable:
        status_counts[record.status.value] = status_counts.get(record.status.value, 0) + 1

    return RunSummary(
        counters=classification.counters,
        exempt_count=len(classification.exempt),
        actionable_count=len(classification.actionable),
        failed_count=len(classification.failed()),
        status_counts=status_counts,
        simulate=config.simulate,
        aborted=aborted,
    )


def run_deallocation(
    config: DeallocatorConfig,
    inventory_path: str | Path,
    exemptions_path: str | Path,
    gate: ConfirmationGate,
    provider_factory: Callable[[], ResourceProvider] | None = None,
    show_summary: Callable[[ClassificationResult], None] | None = None,
) -> tuple[RunSummary, ClassificationResult]:
    """
    Execute a full deallocation run.

    Args:
        config: Run configuration
        inventory_path: Inventory CSV/JSON file
        exemptions_path: Exemption CSV/JSON file
        gate: Confirmation gate asked once before any action
        provider_factory: Builds the live provider; defaults to AzureProvider
        show_summary: Called with the classification before confirmation

    Returns:
        Tuple of (RunSummary, ClassificationResult with final statuses)

    Raises:
        InventoryError: If an input file cannot be loaded
    """
    run_logger = DeallocationLogger(simulate=config.simulate)
    classification = classify_inventory(inventory_path, exemptions_path, run_logger)

    if show_summary is not None:
        show_summary(classification)

    if not gate.confirm_proceed():
        logger.info("Run aborted by operator, no resources were touched")
        return summarize(classification, config, aborted=True), classification

    gate.grace_pause()

    executor = build_executor(config, run_logger, provider_factory)
    ActionDispatcher(executor, run_logger).dispatch(classification.actionable)

    writer = ReportWriter(config.report_dir, config.report_format)
    exempt_path, failed_path = writer.write(classification)

    summary = summarize(classification, config)
    summary.exempt_report = str(exempt_path)
    summary.failed_report = str(failed_path)

    logger.info(
        f"Run complete: {summary.actionable_count} processed, "
        f"{summary.failed_count} not stopped, {summary.exempt_count} exempt"
    )
    return summary, classification
