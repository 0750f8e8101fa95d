"""Data models for the Azure compute deallocator."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class ResourceKind(Enum):
    """Kinds of compute resources the deallocator knows how to stop."""

    VM = "VM"
    SCALE_SET = "ScaleSet"
    MANAGED_CLUSTER = "ManagedCluster"
    UNKNOWN = "Unknown"

    @classmethod
    def from_label(cls, label: str | None) -> "ResourceKind":
        """Map an inventory ``Rsc Type`` label to a kind.

        Unrecognised or empty labels map to ``UNKNOWN`` instead of failing.
        """
        if not label:
            return cls.UNKNOWN
        return _KIND_ALIASES.get(label.strip().lower(), cls.UNKNOWN)


_KIND_ALIASES = {
    "vm": ResourceKind.VM,
    "virtualmachine": ResourceKind.VM,
    "microsoft.compute/virtualmachines": ResourceKind.VM,
    "scaleset": ResourceKind.SCALE_SET,
    "vmss": ResourceKind.SCALE_SET,
    "virtualmachinescaleset": ResourceKind.SCALE_SET,
    "microsoft.compute/virtualmachinescalesets": ResourceKind.SCALE_SET,
    "managedcluster": ResourceKind.MANAGED_CLUSTER,
    "aks": ResourceKind.MANAGED_CLUSTER,
    "microsoft.containerservice/managedclusters": ResourceKind.MANAGED_CLUSTER,
}


class ActionStatus(Enum):
    """Terminal outcome of the dispatch pass for a single record."""

    SUCCESS = "Success"
    ERROR_STOPPING = "ErrorStopping"
    ERROR_DURING_STOP_ACTION = "ErrorDuringStopAction"
    ERROR_NOT_FOUND = "ErrorNotFound"
    NOT_FOUND = "NotFound"
    CANNOT_BE_STOPPED = "CannotBeStopped"
    UNSUPPORTED_OBJECT = "UnsupportedObject"
    UNPROCESSED_INITIAL = "UnprocessedInitial"


class ActionInfo:
    """Well-known values written to ``ResourceRecord.information``."""

    ALREADY_STOPPED = "AlreadyStopped"
    SKIPPED = "Skipped"
    STOP_REQUESTED = "StopRequested"
    SIMULATED = "Simulated"


class StatusAlreadyAssignedError(Exception):
    """Raised when a record's terminal status is written a second time."""

    def __init__(self, resource_id: str, current: ActionStatus):
        self.resource_id = resource_id
        self.current = current
        super().__init__(
            f"Status for {resource_id} already assigned ({current.value})"
        )


@dataclass
class InventoryRow:
    """One parsed line of the inventory file."""

    subscription_name: str
    subscription_id: str
    kind_label: str
    resource_name: str
    resource_id: str
    line_number: int = 0


@dataclass
class ResourceRecord:
    """Inventory resource with its classification and dispatch outcome."""

    subscription_name: str
    subscription_id: str
    kind: ResourceKind
    resource_name: str
    resource_id: str
    exempt: bool
    kind_label: str = ""
    status: ActionStatus = ActionStatus.UNPROCESSED_INITIAL
    information: str = ""

    @classmethod
    def from_row(cls, row: InventoryRow, exempt: bool) -> "ResourceRecord":
        """Build a record from a loaded inventory row."""
        return cls(
            subscription_name=row.subscription_name,
            subscription_id=row.subscription_id,
            kind=ResourceKind.from_label(row.kind_label),
            resource_name=row.resource_name,
            resource_id=row.resource_id,
            exempt=exempt,
            kind_label=row.kind_label,
        )

    @property
    def is_processed(self) -> bool:
        """Check if the dispatch pass has written a terminal status."""
        return self.status is not ActionStatus.UNPROCESSED_INITIAL

    def record_outcome(self, status: ActionStatus, information: str = "") -> None:
        """Write the terminal status for this record.

        Raises:
            StatusAlreadyAssignedError: If a status was already written.
        """
        if self.is_processed:
            raise StatusAlreadyAssignedError(self.resource_id, self.status)
        self.status = status
        self.information = information

    def annotate(self, information: str) -> None:
        """Set the information field without touching the status."""
        self.information = information

    def to_dict(self) -> dict[str, Any]:
        """Convert record to a report row keyed by the inventory column names."""
        return {
            "Subscription": self.subscription_name,
            "SubscriptionID": self.subscription_id,
            "Rsc Type": self.kind_label or self.kind.value,
            "Resource Name": self.resource_name,
            "RscID": self.resource_id,
            "Exempt": self.exempt,
            "Status": self.status.value,
            "Information": self.information,
        }


@dataclass
class RunCounters:
    """Per-kind tallies over the actionable records."""

    vm: int = 0
    scale_set: int = 0
    managed_cluster: int = 0
    unknown: int = 0

    def increment(self, kind: ResourceKind) -> None:
        """Count one record of the given kind."""
        if kind is ResourceKind.VM:
            self.vm += 1
        elif kind is ResourceKind.SCALE_SET:
            self.scale_set += 1
        elif kind is ResourceKind.MANAGED_CLUSTER:
            self.managed_cluster += 1
        else:
            self.unknown += 1

    def total(self) -> int:
        """Get total number of counted records."""
        return self.vm + self.scale_set + self.managed_cluster + self.unknown

    def to_dict(self) -> dict[str, int]:
        """Convert counters to a dictionary keyed by kind name."""
        return {
            ResourceKind.VM.value: self.vm,
            ResourceKind.SCALE_SET.value: self.scale_set,
            ResourceKind.MANAGED_CLUSTER.value: self.managed_cluster,
            ResourceKind.UNKNOWN.value: self.unknown,
        }


@dataclass
class ClassificationResult:
    """Exempt and actionable partitions of the inventory."""

    exempt: list[ResourceRecord] = field(default_factory=list)
    actionable: list[ResourceRecord] = field(default_factory=list)
    counters: RunCounters = field(default_factory=RunCounters)

    def total_count(self) -> int:
        """Get total number of classified records."""
        return len(self.exempt) + len(self.actionable)

    def failed(self) -> list[ResourceRecord]:
        """Get actionable records whose status is not ``SUCCESS``."""
        return [r for r in self.actionable if r.status is not ActionStatus.SUCCESS]


@dataclass
class NodePool:
    """Node pool of a managed cluster."""

    name: str
    mode: str
    backing_type: str
    count: int = 0

    SYSTEM_MODE = "System"
    SCALE_SET_BACKING = "VirtualMachineScaleSets"

    @property
    def is_system(self) -> bool:
        return (self.mode or "").lower() == self.SYSTEM_MODE.lower()

    @property
    def is_scale_set_backed(self) -> bool:
        return (self.backing_type or "").lower() == self.SCALE_SET_BACKING.lower()


@dataclass
class ProviderResource:
    """A resource resolved against the live provider inventory."""

    resource_id: str
    name: str
    resource_group: str
    kind: ResourceKind
    sdk_object: Any = None


@dataclass
class RunSummary:
    """Outcome of a deallocation run, as surfaced to the operator."""

    counters: RunCounters = field(default_factory=RunCounters)
    exempt_count: int = 0
    actionable_count: int = 0
    failed_count: int = 0
    status_counts: dict[str, int] = field(default_factory=dict)
    simulate: bool = False
    aborted: bool = False
    exempt_report: str | None = None
    failed_report: str | None = None

    def to_dict(self) -> dict[str, Any]:
        """Convert summary to dictionary for serialization."""
        return {
            "counters": self.counters.to_dict(),
            "exempt_count": self.exempt_count,
            "actionable_count": self.actionable_count,
            "failed_count": self.failed_count,
            "status_counts": dict(self.status_counts),
            "simulate": self.simulate,
            "aborted": self.aborted,
            "exempt_report": self.exempt_report,
            "failed_report": self.failed_report,
        }
