"""Tests for the run logger."""

import logging

import pytest
from azure.core.exceptions import HttpResponseError

from conftest import make_record
from deallocator.models import ActionStatus, RunCounters
from deallocator.utils.logging import ActionType, DeallocationLogger, LogLevel


@pytest.fixture
def run_logger():
    return DeallocationLogger()


class TestOutcomeLevels:
    """Tests for log_outcome level selection."""

    @pytest.mark.parametrize(
        "status,level",
        [
            (ActionStatus.SUCCESS, LogLevel.INFO),
            (ActionStatus.NOT_FOUND, LogLevel.WARNING),
            (ActionStatus.ERROR_NOT_FOUND, LogLevel.WARNING),
            (ActionStatus.CANNOT_BE_STOPPED, LogLevel.WARNING),
            (ActionStatus.UNSUPPORTED_OBJECT, LogLevel.WARNING),
            (ActionStatus.ERROR_STOPPING, LogLevel.ERROR),
            (ActionStatus.ERROR_DURING_STOP_ACTION, LogLevel.ERROR),
        ],
    )
    def test_level_follows_status(self, run_logger, status, level):
        record = make_record()
        record.record_outcome(status, "detail")

        run_logger.log_outcome(record)

        entry = run_logger.get_log_entries()[-1]
        assert entry.level is level
        assert entry.details == {"status": status.value, "information": "detail"}


class TestDeallocationLogger:
    """Tests for the individual log helpers."""

    def test_simulate_prefix(self, caplog):
        with caplog.at_level(logging.INFO, logger="deallocator"):
            DeallocationLogger(simulate=True).log_simulated(make_record("vm-3"))

        assert "[SIMULATE] [SIMULATE] VM vm-3: Would stop resource" in caplog.text

    def test_classification_summary(self, run_logger):
        run_logger.log_classification_summary(2, RunCounters(vm=3, managed_cluster=1))

        entry = run_logger.get_log_entries()[0]
        assert entry.action is ActionType.CLASSIFY
        assert entry.message == "6 resources loaded: 2 exempt, 4 to process"
        assert entry.details["ManagedCluster"] == 1

    def test_error_includes_azure_code(self, run_logger):
        error = HttpResponseError(message="denied")
        error.error = type("ODataError", (), {"code": "AuthorizationFailed"})()

        run_logger.log_error(make_record(), error, ActionType.STOP)

        entry = run_logger.get_log_entries()[0]
        assert entry.level is LogLevel.ERROR
        assert entry.error_info["azure_error_code"] == "AuthorizationFailed"
        assert entry.error_info["error_type"] == "HttpResponseError"

    def test_error_without_code(self, run_logger):
        run_logger.log_error(make_record(), RuntimeError("boom"))

        entry = run_logger.get_log_entries()[0]
        assert entry.action is ActionType.ERROR
        assert "azure_error_code" not in entry.error_info

    def test_messages_are_sanitized(self, run_logger):
        run_logger.log_error(make_record(), RuntimeError("client_secret=abc123"))

        entry = run_logger.get_log_entries()[0]
        assert "abc123" not in entry.error_info["error_message"]

    def test_entries_are_copied(self, run_logger):
        run_logger.log_lookup(make_record())
        entries = run_logger.get_log_entries()
        entries.clear()
        assert len(run_logger.get_log_entries()) == 1

    def test_to_dict(self, run_logger):
        run_logger.log_advisory(make_record("aks-1", "ManagedCluster"), "scale down")

        data = run_logger.get_log_entries()[0].to_dict()

        assert data["level"] == "WARNING"
        assert data["resource_type"] == "ManagedCluster"
        assert data["message"] == "scale down"
        assert "details" not in data

    def test_execution_banners(self, run_logger, caplog):
        with caplog.at_level(logging.INFO, logger="deallocator"):
            run_logger.log_execution_start(3)
            run_logger.log_execution_complete(3, 2, 1)

        assert "EXECUTION START (LIVE)" in caplog.text
        assert "Total resources stopped: 2" in caplog.text
        assert "Total resources not stopped: 1" in caplog.text
