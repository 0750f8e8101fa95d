"""Azure Compute Deallocator - bulk stop of inventoried compute resources."""

__version__ = "1.0.0"

from deallocator.models import (
    ActionInfo,
    ActionStatus,
    ClassificationResult,
    InventoryRow,
    NodePool,
    ProviderResource,
    ResourceKind,
    ResourceRecord,
    RunCounters,
    RunSummary,
    StatusAlreadyAssignedError,
)

__all__ = [
    "ActionInfo",
    "ActionStatus",
    "ClassificationResult",
    "InventoryRow",
    "NodePool",
    "ProviderResource",
    "ResourceKind",
    "ResourceRecord",
    "RunCounters",
    "RunSummary",
    "StatusAlreadyAssignedError",
]
