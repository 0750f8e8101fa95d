"""Inventory and exemption file loading.

Both files may be CSV (the usual export format) or JSON (an array of
objects using the same column names). Header names are compared after
trimming whitespace, and a UTF-8 byte order mark is tolerated.
"""

import csv
import json
import logging
from pathlib import Path
from typing import Any

from deallocator.filters.exemption import ExemptionSet
from deallocator.models import InventoryRow
from deallocator.utils.security import InputValidator

logger = logging.getLogger(__name__)

INVENTORY_COLUMNS = {
    "subscription_name": "Subscription",
    "subscription_id": "SubscriptionID",
    "kind_label": "Rsc Type",
    "resource_name": "Resource Name",
    "resource_id": "RscID",
}

EXEMPTION_COLUMN = "Sub ID"


class InventoryError(Exception):
    """Raised when an input file cannot be read or has the wrong shape."""

    def __init__(self, path: str | Path, reason: str):
        self.path = str(path)
        self.reason = reason
        super().__init__(f"{self.path}: {reason}")


def _read_records(path: Path) -> list[dict[str, Any]]:
    """Read a CSV or JSON file into a list of column dictionaries."""
    if not path.is_file():
        raise InventoryError(path, "file does not exist")

    suffix = path.suffix.lower()
    try:
        if suffix == ".json":
            with path.open(encoding="utf-8-sig") as f:
                data = json.load(f)
            if not isinstance(data, list) or not all(isinstance(d, dict) for d in data):
                raise InventoryError(path, "JSON input must be an array of objects")
            return [{str(k).strip(): v for k, v in d.items()} for d in data]

        if suffix in (".csv", ".txt", ""):
            with path.open(encoding="utf-8-sig", newline="") as f:
                reader = csv.DictReader(f)
                if reader.fieldnames is None:
                    return []
                reader.fieldnames = [name.strip() for name in reader.fieldnames]
                return [dict(row) for row in reader]
    except (OSError, UnicodeDecodeError, csv.Error, json.JSONDecodeError) as e:
        raise InventoryError(path, f"unreadable: {e}") from e

    raise InventoryError(path, f"unsupported file type '{suffix}'")


def _row_label(path: Path, index: int) -> str:
    if path.suffix.lower() == ".json":
        return f"object {index + 1}"
    return f"line {index + 2}"


def _require_columns(path: Path, records: list[dict[str, Any]], columns: list[str]) -> None:
    for index, record in enumerate(records):
        missing = [c for c in columns if c not in record]
        if missing:
            raise InventoryError(
                path,
                f"{_row_label(path, index)}: missing required column(s): {', '.join(missing)}",
            )


def _warn_on_malformed(path: Path, row: InventoryRow) -> None:
    """Log rows whose identifiers do not look like Azure IDs; they are still loaded."""
    for result in (
        InputValidator.validate_subscription_id(row.subscription_id),
        InputValidator.validate_resource_id(row.resource_id),
    ):
        if not result.is_valid:
            logger.warning(f"{path}:{row.line_number}: {'; '.join(result.errors)}")


def _cell(record: dict[str, Any], column: str) -> str:
    value = record.get(column)
    return "" if value is None else str(value).strip()


def load_inventory(path: str | Path) -> list[InventoryRow]:
    """
    Load the resource inventory.

    Args:
        path: Path to a CSV or JSON inventory file

    Returns:
        One InventoryRow per data row, in file order

    Raises:
        InventoryError: If the file is missing or unreadable, a row lacks a
            column, or a row has no subscription ID
    """
    path = Path(path)
    records = _read_records(path)
    _require_columns(path, records, list(INVENTORY_COLUMNS.values()))
    for index, record in enumerate(records):
        if not _cell(record, INVENTORY_COLUMNS["subscription_id"]):
            raise InventoryError(path, f"{_row_label(path, index)}: SubscriptionID is empty")

    rows = [
        InventoryRow(
            **{field: _cell(record, column) for field, column in INVENTORY_COLUMNS.items()},
            line_number=index + 1 if path.suffix.lower() == ".json" else index + 2,
        )
        for index, record in enumerate(records)
    ]
    for row in rows:
        _warn_on_malformed(path, row)
    logger.info(f"Loaded {len(rows)} inventory rows from {path}")
    return rows


def load_exemptions(path: str | Path) -> ExemptionSet:
    """
    Load the protected subscription list.

    Args:
        path: Path to a CSV or JSON file with a ``Sub ID`` column

    Returns:
        ExemptionSet of the listed subscription IDs

    Raises:
        InventoryError: If the file is missing or unreadable, or a row lacks
            the column
    """
    path = Path(path)
    records = _read_records(path)
    _require_columns(path, records, [EXEMPTION_COLUMN])

    exemptions = ExemptionSet(_cell(record, EXEMPTION_COLUMN) for record in records)
    logger.info(f"Loaded {len(exemptions)} exempt subscriptions from {path}")
    return exemptions
