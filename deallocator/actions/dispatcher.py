"""Action dispatch over the actionable set.

Records are processed one at a time, in the order they were classified.
Per-resource failures end up as a terminal status on that record; they never
stop the pass.
"""

import logging
from collections import Counter
from collections.abc import Iterable

from deallocator.actions.executors import ActionExecutor
from deallocator.models import ActionStatus, ResourceRecord
from deallocator.utils.logging import DeallocationLogger

logger = logging.getLogger(__name__)


class ActionDispatcher:
    """Runs an executor over every actionable record and reports progress."""

    def __init__(
        self,
        executor: ActionExecutor,
        run_logger: DeallocationLogger | None = None,
    ):
        """
        Initialize dispatcher.

        Args:
            executor: Live or simulated executor applied to each record
            run_logger: Logger shared with the rest of the run
        """
        self.executor = executor
        self.run_logger = run_logger or executor.run_logger

    def dispatch(self, records: Iterable[ResourceRecord]) -> dict[str, int]:
        """
        Process every record once.

        Args:
            records: Actionable records, never exempt ones

        Returns:
            Count of records per final status value
        """
        records = list(records)
        self.run_logger.log_execution_start(len(records))

        for index, record in enumerate(records, start=1):
            if record.exempt:
                # Classification guarantees this never happens
                raise ValueError(f"Exempt record {record.resource_id} passed to dispatcher")

            logger.info(
                f"[{index}/{len(records)}] {record.kind.value} {record.resource_name} "
                f"in {record.subscription_name}"
            )
            self.executor.execute(record)
            if record.is_processed:
                self.run_logger.log_outcome(record)

        status_counts = Counter(record.status.value for record in records)
        succeeded = status_counts.get(ActionStatus.SUCCESS.value, 0)
        self.run_logger.log_execution_complete(
            total_processed=len(records),
            total_succeeded=succeeded,
            total_failed=len(records) - succeeded,
        )
        return dict(status_counts)
