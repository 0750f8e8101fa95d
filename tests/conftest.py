"""Pytest configuration and shared fixtures."""

import csv
import json
from pathlib import Path
from typing import Dict, List
from unittest.mock import MagicMock

import pytest

from deallocator.models import (
    InventoryRow,
    NodePool,
    ProviderResource,
    ResourceRecord,
)
from deallocator.providers.base import ACCEPTED, ResourceProvider, SubscriptionContext

EXEMPT_SUB = "11111111-1111-1111-1111-111111111111"
ACTIVE_SUB = "22222222-2222-2222-2222-222222222222"

INVENTORY_HEADER = ["Subscription", "SubscriptionID", "Rsc Type", "Resource Name", "RscID"]


def arm_id(subscription_id: str, provider_type: str, name: str, group: str = "rg-test") -> str:
    """Build an Azure Resource Manager ID."""
    return f"/subscriptions/{subscription_id}/resourceGroups/{group}/providers/{provider_type}/{name}"


def make_row(
    name: str = "vm-01",
    kind_label: str = "VM",
    subscription_id: str = ACTIVE_SUB,
    subscription_name: str = "dev",
) -> InventoryRow:
    """Create an InventoryRow for testing."""
    provider_type = {
        "VM": "Microsoft.Compute/virtualMachines",
        "ScaleSet": "Microsoft.Compute/virtualMachineScaleSets",
        "ManagedCluster": "Microsoft.ContainerService/managedClusters",
    }.get(kind_label, "Microsoft.Web/sites")
    return InventoryRow(
        subscription_name=subscription_name,
        subscription_id=subscription_id,
        kind_label=kind_label,
        resource_name=name,
        resource_id=arm_id(subscription_id, provider_type, name),
    )


def make_record(
    name: str = "vm-01",
    kind_label: str = "VM",
    subscription_id: str = ACTIVE_SUB,
) -> ResourceRecord:
    """Create an actionable ResourceRecord for testing."""
    return ResourceRecord.from_row(
        make_row(name, kind_label, subscription_id), exempt=False
    )


def make_provider(pools: List[NodePool] | None = None) -> MagicMock:
    """Create a provider double whose calls all succeed."""
    provider = MagicMock(spec=ResourceProvider)
    provider.select_context.side_effect = lambda sub: SubscriptionContext(sub, "dev")
    provider.resolve_resource.side_effect = lambda context, record: ProviderResource(
        resource_id=record.resource_id,
        name=record.resource_name,
        resource_group="rg-test",
        kind=record.kind,
    )
    provider.stop_vm.return_value = ACCEPTED
    provider.stop_scale_set.return_value = "InProgress"
    provider.stop_cluster.return_value = ACCEPTED
    provider.get_cluster_pools.return_value = pools or []
    return provider


def write_csv(path: Path, header: List[str], rows: List[List[str]]) -> Path:
    """Write a CSV file with a header row."""
    with path.open("w", encoding="utf-8", newline="") as f:
        writer = csv.writer(f)
        writer.writerow(header)
        writer.writerows(rows)
    return path


@pytest.fixture
def provider() -> MagicMock:
    """Provider double with accepting stop calls."""
    return make_provider()


@pytest.fixture
def sample_inventory_rows() -> List[List[str]]:
    """Three-row inventory: exempt VM, active VM, availability-set AKS cluster."""
    return [
        ["prod", EXEMPT_SUB.upper(), "VM", "vm-prod",
         arm_id(EXEMPT_SUB, "Microsoft.Compute/virtualMachines", "vm-prod")],
        ["dev", ACTIVE_SUB, "VM", "vm-dev",
         arm_id(ACTIVE_SUB, "Microsoft.Compute/virtualMachines", "vm-dev")],
        ["dev", ACTIVE_SUB, "ManagedCluster", "aks-dev",
         arm_id(ACTIVE_SUB, "Microsoft.ContainerService/managedClusters", "aks-dev")],
    ]


@pytest.fixture
def inventory_csv(tmp_path: Path, sample_inventory_rows) -> Path:
    """Inventory CSV built from the sample rows."""
    return write_csv(tmp_path / "inventory.csv", INVENTORY_HEADER, sample_inventory_rows)


@pytest.fixture
def exemptions_csv(tmp_path: Path) -> Path:
    """Exemption CSV protecting EXEMPT_SUB (lowercase)."""
    return write_csv(tmp_path / "exemptions.csv", ["Sub ID"], [[EXEMPT_SUB.lower()]])


@pytest.fixture
def inventory_json(tmp_path: Path, sample_inventory_rows) -> Path:
    """Inventory JSON built from the sample rows."""
    data: List[Dict[str, str]] = [dict(zip(INVENTORY_HEADER, row)) for row in sample_inventory_rows]
    path = tmp_path / "inventory.json"
    path.write_text(json.dumps(data), encoding="utf-8")
    return path
