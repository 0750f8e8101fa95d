"""Configuration management for the Azure compute deallocator.

Configuration is read from environment variables; the command line can
override any value afterwards.

Key configuration options:
- SIMULATE: Run every step except the provider mutation
- LOG_LEVEL: Configurable log level
- GRACE_PERIOD_SECONDS: Pause between confirmation and the first action
- REPORT_DIR: Directory for the exempt and failed resource reports
- REPORT_FORMAT: ``csv`` or ``json``
- CONFIRMATION_TOKEN: Exact, case-sensitive answer that confirms a run
- STOP_MANAGED_CLUSTERS: Issue the real stop call for scale-set-backed clusters
"""

import logging
import os
from dataclasses import dataclass
from typing import List, Optional

VALID_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}

VALID_REPORT_FORMATS = {"csv", "json"}

DEFAULT_CONFIRMATION_TOKEN = "YES"

_config_logger = logging.getLogger(__name__)


class ConfigurationError(Exception):
    """Exception raised for configuration validation errors."""

    def __init__(self, message: str, errors: Optional[List[str]] = None):
        self.message = message
        self.errors = errors or []
        super().__init__(self.message)


def _parse_bool(value: str) -> bool:
    return value.lower().strip() in ("true", "1", "yes")


@dataclass
class DeallocatorConfig:
    """Configuration for a deallocation run.

    Attributes:
        simulate: When True, classification, logging and confirmation run as
            normal but no lookup or stop call reaches the provider.
        log_level: Log level for output.
        grace_period_seconds: Pause after confirmation during which the
            operator can still interrupt the process.
        report_dir: Directory the reports are written to.
        report_format: Report file format, ``csv`` or ``json``.
        confirmation_token: Answer required at the confirmation prompt.
        stop_managed_clusters: When True, scale-set-backed managed clusters
            are actually stopped instead of being reported as skipped.
    """

    simulate: bool = False
    log_level: str = "INFO"
    grace_period_seconds: int = 10
    report_dir: str = "."
    report_format: str = "csv"
    confirmation_token: str = DEFAULT_CONFIRMATION_TOKEN
    stop_managed_clusters: bool = False

    @classmethod
    def from_environment(cls, validate: bool = True) -> "DeallocatorConfig":
        """Create configuration from environment variables.

        Args:
            validate: If True, validates the configuration and raises
                ConfigurationError if invalid.

        Returns:
            DeallocatorConfig instance populated from environment variables.

        Raises:
            ConfigurationError: If GRACE_PERIOD_SECONDS is not an integer, or
                validation is enabled and the configuration is invalid.
        """
        config = cls()

        config.simulate = _parse_bool(os.environ.get("SIMULATE", "false"))
        config.stop_managed_clusters = _parse_bool(
            os.environ.get("STOP_MANAGED_CLUSTERS", "false")
        )

        log_level_value = os.environ.get("LOG_LEVEL", "INFO").upper().strip()
        if log_level_value in VALID_LOG_LEVELS:
            config.log_level = log_level_value
        else:
            _config_logger.warning(
                f"Invalid LOG_LEVEL '{log_level_value}', defaulting to INFO"
            )
            config.log_level = "INFO"

        grace_value = os.environ.get("GRACE_PERIOD_SECONDS")
        if grace_value:
            try:
                config.grace_period_seconds = int(grace_value.strip())
            except ValueError:
                raise ConfigurationError(
                    f"Invalid GRACE_PERIOD_SECONDS: '{grace_value}' is not a valid integer"
                )

        config.report_dir = os.environ.get("REPORT_DIR", ".")
        config.report_format = os.environ.get("REPORT_FORMAT", "csv").lower().strip()

        # The token is compared verbatim, so it is not stripped or case-folded
        config.confirmation_token = os.environ.get(
            "CONFIRMATION_TOKEN", DEFAULT_CONFIRMATION_TOKEN
        )

        if validate:
            errors = config.validate()
            if errors:
                raise ConfigurationError(
                    f"Configuration validation failed: {errors}", errors=errors
                )

        return config

    def validate(self) -> List[str]:
        """Validate configuration and return list of errors.

        Returns:
            List of error messages. Empty list if configuration is valid.
        """
        errors = []

        if self.grace_period_seconds < 0:
            errors.append("GRACE_PERIOD_SECONDS cannot be negative")

        if self.grace_period_seconds > 300:
            errors.append("GRACE_PERIOD_SECONDS should not exceed 300 (5 minutes)")

        if self.report_format not in VALID_REPORT_FORMATS:
            errors.append(
                f"REPORT_FORMAT must be one of {sorted(VALID_REPORT_FORMATS)}, "
                f"got '{self.report_format}'"
            )

        if not self.confirmation_token or not self.confirmation_token.strip():
            errors.append("CONFIRMATION_TOKEN cannot be empty")

        if not self.report_dir:
            errors.append("REPORT_DIR cannot be empty")

        return errors

    def get_numeric_log_level(self) -> int:
        """Get the numeric log level for use with logging module."""
        return getattr(logging, self.log_level, logging.INFO)


def configure_logging(config: DeallocatorConfig) -> logging.Logger:
    """Configure logging at the level held by a validated config.

    Args:
        config: DeallocatorConfig after environment and command-line values
            have been merged.

    Returns:
        Configured logger instance for the deallocator.
    """
    log_level = config.get_numeric_log_level()

    logging.basicConfig(
        level=log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        force=True,
    )

    # The Azure SDK logs every HTTP request at INFO
    logging.getLogger("azure").setLevel(max(log_level, logging.WARNING))

    deallocator_logger = logging.getLogger("deallocator")
    deallocator_logger.setLevel(log_level)

    return deallocator_logger
