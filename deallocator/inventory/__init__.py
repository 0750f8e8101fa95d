"""Inventory file loading and report writing."""

from deallocator.inventory.loader import (
    InventoryError,
    load_exemptions,
    load_inventory,
)
from deallocator.inventory.reports import ReportWriter

__all__ = ["InventoryError", "ReportWriter", "load_exemptions", "load_inventory"]
