"""Run logging for the Azure compute deallocator.

This module provides structured logging for classification, dispatch
outcomes and errors. Every message is sanitized before it is emitted, and
each entry is kept in memory so a run can be summarised afterwards.

Log levels follow the usual split:
- DEBUG: lookups and other processing steps
- INFO: classification lines, successful actions and the run summary
- WARNING: resources that could not be acted on
- ERROR: provider failures
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Optional

from deallocator.models import ActionStatus, ResourceRecord, RunCounters
from deallocator.utils.security import LogSanitizer

logger = logging.getLogger(__name__)


class LogLevel(Enum):
    """Log levels for deallocator operations."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class ActionType(Enum):
    """Types of actions that can be logged."""

    CLASSIFY = "CLASSIFY"
    SKIP = "SKIP"
    LOOKUP = "LOOKUP"
    STOP = "STOP"
    SIMULATE = "SIMULATE"
    ERROR = "ERROR"


# Statuses that mean the resource was left running because of a failure.
_WARNING_STATUSES = {
    ActionStatus.NOT_FOUND,
    ActionStatus.ERROR_NOT_FOUND,
    ActionStatus.CANNOT_BE_STOPPED,
    ActionStatus.UNSUPPORTED_OBJECT,
}
_ERROR_STATUSES = {
    ActionStatus.ERROR_STOPPING,
    ActionStatus.ERROR_DURING_STOP_ACTION,
}


@dataclass
class LogEntry:
    """Structured log entry."""

    timestamp: datetime
    level: LogLevel
    action: ActionType
    resource_type: str
    resource_id: str
    message: str
    details: Dict[str, Any] = field(default_factory=dict)
    error_info: Optional[Dict[str, Any]] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert log entry to dictionary for structured logging."""
        entry = {
            "timestamp": self.timestamp.isoformat(),
            "level": self.level.value,
            "action": self.action.value,
            "resource_type": self.resource_type,
            "resource_id": self.resource_id,
            "message": self.message,
        }
        if self.details:
            entry["details"] = self.details
        if self.error_info:
            entry["error"] = self.error_info
        return entry


class DeallocationLogger:
    """Structured logging for a single deallocation run.

    Entries are sanitized, written to the ``deallocator`` logger hierarchy
    and retained so the caller can inspect what happened to each resource.
    """

    def __init__(self, simulate: bool = False):
        """
        Initialize run logger.

        Args:
            simulate: Whether the run is a simulation; prefixes every line
        """
        self.simulate = simulate
        self._log_entries: List[LogEntry] = []

    def _create_entry(
        self,
        level: LogLevel,
        action: ActionType,
        resource_type: str,
        resource_id: str,
        message: str,
        details: Optional[Dict[str, Any]] = None,
        error_info: Optional[Dict[str, Any]] = None,
    ) -> LogEntry:
        """Create a sanitized log entry."""
        return LogEntry(
            timestamp=datetime.now(timezone.utc),
            level=level,
            action=action,
            resource_type=resource_type,
            resource_id=LogSanitizer.sanitize(resource_id),
            message=LogSanitizer.sanitize(message),
            details=LogSanitizer.sanitize_dict(details) if details else {},
            error_info=LogSanitizer.sanitize_dict(error_info) if error_info else None,
        )

    def _log(self, entry: LogEntry) -> None:
        """Emit entry and store it for reporting."""
        self._log_entries.append(entry)

        prefix = "[SIMULATE] " if self.simulate else ""
        log_message = (
            f"{prefix}[{entry.action.value}] {entry.resource_type} "
            f"{entry.resource_id}: {entry.message}"
        )

        if entry.details:
            detail_str = ", ".join(f"{k}={v}" for k, v in entry.details.items())
            log_message += f" ({detail_str})"

        if entry.level == LogLevel.DEBUG:
            logger.debug(log_message)
        elif entry.level == LogLevel.INFO:
            logger.info(log_message)
        elif entry.level == LogLevel.WARNING:
            logger.warning(log_message)
        elif entry.level == LogLevel.ERROR:
            if entry.error_info:
                log_message += f" - Error: {entry.error_info}"
            logger.error(log_message)
        elif entry.level == LogLevel.CRITICAL:
            logger.critical(log_message)

    # Classification

    def log_exempt_skipped(self, record: ResourceRecord) -> None:
        """Log a resource skipped because its subscription is protected."""
        entry = self._create_entry(
            level=LogLevel.INFO,
            action=ActionType.SKIP,
            resource_type=record.kind.value,
            resource_id=record.resource_name,
            message=(
                f"Skipped: subscription {record.subscription_name} "
                f"({record.subscription_id}) is exempt"
            ),
        )
        self._log(entry)

    def log_classification_summary(
        self, exempt_count: int, counters: RunCounters
    ) -> None:
        """Log aggregate and per-kind counts after classification."""
        entry = self._create_entry(
            level=LogLevel.INFO,
            action=ActionType.CLASSIFY,
            resource_type="inventory",
            resource_id="*",
            message=(
                f"{exempt_count + counters.total()} resources loaded: "
                f"{exempt_count} exempt, {counters.total()} to process"
            ),
            details=counters.to_dict(),
        )
        self._log(entry)

    # Dispatch

    def log_lookup(self, record: ResourceRecord) -> None:
        """Log a lookup against the live inventory at DEBUG level."""
        entry = self._create_entry(
            level=LogLevel.DEBUG,
            action=ActionType.LOOKUP,
            resource_type=record.kind.value,
            resource_id=record.resource_id,
            message=f"Resolving in subscription {record.subscription_id}",
        )
        self._log(entry)

    def log_outcome(self, record: ResourceRecord) -> None:
        """Log the terminal status of a record as soon as it is known."""
        if record.status in _ERROR_STATUSES:
            level = LogLevel.ERROR
        elif record.status in _WARNING_STATUSES:
            level = LogLevel.WARNING
        else:
            level = LogLevel.INFO

        details = {"status": record.status.value}
        if record.information:
            details["information"] = record.information

        entry = self._create_entry(
            level=level,
            action=ActionType.STOP,
            resource_type=record.kind.value,
            resource_id=record.resource_name,
            message=f"Finished with status {record.status.value}",
            details=details,
        )
        self._log(entry)

    def log_simulated(self, record: ResourceRecord) -> None:
        """Log the action that would have been taken for a record."""
        entry = self._create_entry(
            level=LogLevel.INFO,
            action=ActionType.SIMULATE,
            resource_type=record.kind.value,
            resource_id=record.resource_name,
            message="Would stop resource",
            details={"resource_id": record.resource_id},
        )
        self._log(entry)

    def log_advisory(self, record: ResourceRecord, advice: str) -> None:
        """Log operator advice for a resource that could not be stopped."""
        entry = self._create_entry(
            level=LogLevel.WARNING,
            action=ActionType.STOP,
            resource_type=record.kind.value,
            resource_id=record.resource_name,
            message=advice,
        )
        self._log(entry)

    def log_error(
        self,
        record: ResourceRecord,
        error: Exception,
        action: Optional[ActionType] = None,
    ) -> None:
        """Log a per-resource error with details of the exception."""
        error_info = {
            "error_type": type(error).__name__,
            "error_message": LogSanitizer.sanitize(str(error)),
        }

        # Azure SDK errors carry the service error code
        code = getattr(getattr(error, "error", None), "code", None)
        if code:
            error_info["azure_error_code"] = code

        entry = self._create_entry(
            level=LogLevel.ERROR,
            action=action or ActionType.ERROR,
            resource_type=record.kind.value,
            resource_id=record.resource_name,
            message=f"Error occurred: {type(error).__name__}",
            error_info=error_info,
        )
        self._log(entry)

    # Summary

    def log_execution_start(self, actionable_count: int) -> None:
        """Log start of the dispatch pass."""
        mode = "SIMULATE" if self.simulate else "LIVE"
        logger.info("=" * 60)
        logger.info(f"COMPUTE DEALLOCATOR - EXECUTION START ({mode})")
        logger.info("=" * 60)
        logger.info(f"Resources to process: {actionable_count}")
        logger.info(f"Timestamp: {datetime.now(timezone.utc).isoformat()}")
        logger.info("-" * 40)

    def log_execution_complete(
        self,
        total_processed: int,
        total_succeeded: int,
        total_failed: int,
    ) -> None:
        """Log completion of the dispatch pass with summary."""
        mode = "SIMULATE" if self.simulate else "LIVE"
        logger.info("-" * 40)
        logger.info(f"EXECUTION SUMMARY ({mode})")
        logger.info("-" * 40)
        logger.info(f"Total resources processed: {total_processed}")
        logger.info(f"Total resources stopped: {total_succeeded}")
        logger.info(f"Total resources not stopped: {total_failed}")
        logger.info("=" * 60)
        logger.info("COMPUTE DEALLOCATOR - EXECUTION COMPLETE")
        logger.info("=" * 60)

    def get_log_entries(self) -> List[LogEntry]:
        """Get all log entries for reporting."""
        return self._log_entries.copy()
