"""Utility modules for Azure client management, configuration and logging."""

from deallocator.utils.azure_client import AzureClientManager
from deallocator.utils.config import (
    ConfigurationError,
    DeallocatorConfig,
    configure_logging,
)
from deallocator.utils.logging import (
    ActionType,
    DeallocationLogger,
    LogEntry,
    LogLevel,
)

__all__ = [
    "AzureClientManager",
    "ConfigurationError",
    "DeallocatorConfig",
    "configure_logging",
    "ActionType",
    "DeallocationLogger",
    "LogEntry",
    "LogLevel",
]
