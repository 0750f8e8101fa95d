"""Tests for report writing."""

import csv
import json
from datetime import datetime, timezone

import pytest

from conftest import EXEMPT_SUB, make_record, make_row
from deallocator.inventory.reports import REPORT_COLUMNS, ReportWriter
from deallocator.models import ActionStatus, ClassificationResult, ResourceRecord

STAMP = datetime(2026, 3, 1, 12, 30, 5, tzinfo=timezone.utc)


def build_result() -> ClassificationResult:
    exempt = ResourceRecord.from_row(make_row("vm-prod", "VM", EXEMPT_SUB), exempt=True)
    ok = make_record("vm-dev")
    ok.record_outcome(ActionStatus.SUCCESS)
    stuck = make_record("aks-dev", "ManagedCluster")
    stuck.record_outcome(ActionStatus.CANNOT_BE_STOPPED)
    return ClassificationResult(exempt=[exempt], actionable=[ok, stuck])


def read_csv(path):
    with path.open(encoding="utf-8", newline="") as f:
        return list(csv.DictReader(f))


class TestReportWriter:
    """Tests for ReportWriter."""

    def test_file_names(self, tmp_path):
        writer = ReportWriter(tmp_path, timestamp=STAMP)

        exempt_path, failed_path = writer.write(build_result())

        assert exempt_path.name == "exempt-resources-20260301-123005.csv"
        assert failed_path.name == "failed-resources-20260301-123005.csv"

    def test_csv_contents(self, tmp_path):
        exempt_path, failed_path = ReportWriter(tmp_path, timestamp=STAMP).write(build_result())

        exempt_rows = read_csv(exempt_path)
        failed_rows = read_csv(failed_path)

        assert [r["Resource Name"] for r in exempt_rows] == ["vm-prod"]
        assert exempt_rows[0]["Status"] == "UnprocessedInitial"
        assert exempt_rows[0]["Exempt"] == "True"
        assert [r["Resource Name"] for r in failed_rows] == ["aks-dev"]
        assert failed_rows[0]["Status"] == "CannotBeStopped"
        assert list(failed_rows[0].keys()) == REPORT_COLUMNS

    def test_empty_failed_report_still_written(self, tmp_path):
        """Test a run with no failures still produces a header-only file."""
        ok = make_record()
        ok.record_outcome(ActionStatus.SUCCESS)

        _, failed_path = ReportWriter(tmp_path, timestamp=STAMP).write(
            ClassificationResult(actionable=[ok])
        )

        assert failed_path.exists()
        assert failed_path.read_text(encoding="utf-8").strip() == ",".join(REPORT_COLUMNS)

    def test_json_format(self, tmp_path):
        exempt_path, failed_path = ReportWriter(
            tmp_path, report_format="json", timestamp=STAMP
        ).write(build_result())

        assert exempt_path.suffix == ".json"
        failed = json.loads(failed_path.read_text(encoding="utf-8"))
        assert failed[0]["Resource Name"] == "aks-dev"
        assert failed[0]["Exempt"] is False

    def test_creates_report_dir(self, tmp_path):
        target = tmp_path / "reports" / "today"
        exempt_path, _ = ReportWriter(target, timestamp=STAMP).write(build_result())
        assert exempt_path.parent == target

    def test_rejects_unknown_format(self, tmp_path):
        with pytest.raises(ValueError):
            ReportWriter(tmp_path, report_format="xml")


def test_default_timestamp_is_utc(tmp_path):
    assert ReportWriter(tmp_path).timestamp.tzinfo is timezone.utc
