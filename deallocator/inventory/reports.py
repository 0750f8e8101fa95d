"""Report files for exempt and failed resources."""

import csv
import json
import logging
from datetime import datetime, timezone
from pathlib import Path

from deallocator.models import ClassificationResult, ResourceRecord

logger = logging.getLogger(__name__)

REPORT_COLUMNS = [
    "Subscription",
    "SubscriptionID",
    "Rsc Type",
    "Resource Name",
    "RscID",
    "Exempt",
    "Status",
    "Information",
]


class ReportWriter:
    """Writes the exempt and failed resource reports for a run."""

    def __init__(
        self,
        report_dir: str | Path = ".",
        report_format: str = "csv",
        timestamp: datetime | None = None,
    ):
        if report_format not in ("csv", "json"):
            raise ValueError(f"Unsupported report format: {report_format}")
        self.report_dir = Path(report_dir)
        self.report_format = report_format
        self.timestamp = timestamp or datetime.now(timezone.utc)

    def _path_for(self, name: str) -> Path:
        stamp = self.timestamp.strftime("%Y%m%d-%H%M%S")
        return self.report_dir / f"{name}-{stamp}.{self.report_format}"

    def write_records(self, path: Path, records: list[ResourceRecord]) -> Path:
        """Serialize records to ``path``; an empty list still produces a file."""
        path.parent.mkdir(parents=True, exist_ok=True)
        rows = [record.to_dict() for record in records]

        if self.report_format == "json":
            with path.open("w", encoding="utf-8") as f:
                json.dump(rows, f, indent=2)
        else:
            with path.open("w", encoding="utf-8", newline="") as f:
                writer = csv.DictWriter(f, fieldnames=REPORT_COLUMNS)
                writer.writeheader()
                writer.writerows(rows)

        logger.info(f"Wrote {len(records)} records to {path}")
        return path

    def write(self, result: ClassificationResult) -> tuple[Path, Path]:
        """
        Write both reports for a finished run.

        Args:
            result: Classification result with final dispatch statuses

        Returns:
            Tuple of (exempt_report_path, failed_report_path)
        """
        exempt_path = self.write_records(self._path_for("exempt-resources"), result.exempt)
        failed_path = self.write_records(self._path_for("failed-resources"), result.failed())
        return exempt_path, failed_path
