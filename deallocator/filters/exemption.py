"""Exemption filtering and classification of inventory rows.

Rows whose subscription appears in the exemption list are set aside and
never dispatched; the rest become actionable records and are tallied per
resource kind for the pre-action summary.
"""

import logging
from collections.abc import Iterable, Iterator

from deallocator.models import (
    ClassificationResult,
    InventoryRow,
    ResourceRecord,
)
from deallocator.utils.logging import DeallocationLogger

logger = logging.getLogger(__name__)


class ExemptionSet:
    """Immutable set of protected subscription IDs.

    Membership is case-insensitive and ignores surrounding whitespace.
    """

    def __init__(self, subscription_ids: Iterable[str] = ()):
        self._ids = frozenset(
            self._normalize(s) for s in subscription_ids if s and s.strip()
        )

    @staticmethod
    def _normalize(subscription_id: str) -> str:
        return subscription_id.strip().casefold()

    def __contains__(self, subscription_id: object) -> bool:
        if not isinstance(subscription_id, str):
            return False
        return self._normalize(subscription_id) in self._ids

    def __len__(self) -> int:
        return len(self._ids)

    def __iter__(self) -> Iterator[str]:
        return iter(sorted(self._ids))

    def __repr__(self) -> str:
        return f"ExemptionSet({len(self._ids)} subscriptions)"


class Classifier:
    """Partitions inventory rows into exempt and actionable records."""

    def __init__(
        self,
        exemptions: ExemptionSet,
        run_logger: DeallocationLogger | None = None,
    ):
        self.exemptions = exemptions
        self.run_logger = run_logger or DeallocationLogger()

    def is_exempt(self, row: InventoryRow) -> bool:
        """Check if a row belongs to a protected subscription."""
        return row.subscription_id in self.exemptions

    def classify(self, rows: Iterable[InventoryRow]) -> ClassificationResult:
        """
        Classify inventory rows.

        Each row becomes exactly one record. Exempt records are logged and
        kept aside; every other record is counted by kind and returned as
        actionable. Unknown kind labels count as ``Unknown``.

        Args:
            rows: Loaded inventory rows

        Returns:
            ClassificationResult with exempt set, actionable set and counters
        """
        result = ClassificationResult()

        for row in rows:
            exempt = self.is_exempt(row)
            record = ResourceRecord.from_row(row, exempt=exempt)

            if exempt:
                result.exempt.append(record)
                self.run_logger.log_exempt_skipped(record)
                continue

            result.counters.increment(record.kind)
            result.actionable.append(record)

        self.run_logger.log_classification_summary(len(result.exempt), result.counters)
        return result


def classify(
    rows: Iterable[InventoryRow],
    exemptions: ExemptionSet,
    run_logger: DeallocationLogger | None = None,
) -> ClassificationResult:
    """Classify rows against an exemption set."""
    return Classifier(exemptions, run_logger).classify(rows)
