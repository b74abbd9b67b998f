"""Genesis records written when a ledger is first initialized."""

from pathlib import Path
from typing import Any

import yaml

from .core.model import Asset

GENESIS_ASSETS: tuple[Asset, ...] = (
    Asset(1201, "+91 000000", "0000", 0, "SUCCESS", 0, "ONLINE", "YES"),
    Asset(1202, "+91 12345", "0000", 100, "FAILURE", 200, "OFFLINE", "NO"),
    Asset(1203, "+91 456787", "0120", 300, "SUCCESS", 500, "ONLINE", "NO"),
    Asset(1204, "+91 56789", "9873", 200, "SUCCESS", 600, "OFFLINE", "YES"),
    Asset(1205, "+91 67894", "15654", 300, "FAILURE", 700, "ONLINE", "NO"),
    Asset(1206, "+91 23456789", "4567", 500, "SUCCESS", 800, "OFFLINE", "YES"),
)

_FIELDS: dict[str, type] = {
    "dealer_id": int,
    "msisdn": str,
    "pin": str,
    "balance": int,
    "status": str,
    "trans_amount": int,
    "trans_type": str,
    "remarks": str,
}


def asset_from_mapping(data: dict[str, Any], where: str = "record") -> Asset:
    """Build an Asset from a plain mapping, checking names and types."""
    missing = [name for name in _FIELDS if name not in data]
    if missing:
        raise ValueError(f"{where}: missing {', '.join(missing)}")
    unknown = sorted(set(data) - set(_FIELDS))
    if unknown:
        raise ValueError(f"{where}: unknown field(s) {', '.join(unknown)}")

    for name, typ in _FIELDS.items():
        value = data[name]
        # unquoted YES/NO and 0120 do not load as strings
        if typ is int and (isinstance(value, bool) or not isinstance(value, int)):
            raise ValueError(f"{where}: {name} must be an integer, got {value!r}")
        if typ is str and not isinstance(value, str):
            raise ValueError(f"{where}: {name} must be a string, got {value!r}")
    return Asset(**data)


def load_genesis(path: Path) -> list[Asset]:
    """
    Load genesis records from a YAML list of mappings.

    Example:
        - dealer_id: 1201
          msisdn: "+91 000000"
          pin: "0000"
          balance: 0
          status: SUCCESS
          trans_amount: 0
          trans_type: ONLINE
          remarks: "YES"
    """
    doc = yaml.safe_load(path.read_text(encoding="utf-8"))
    if doc is None:
        return []
    if not isinstance(doc, list):
        raise ValueError(f"{path}: expected a list of records")

    assets = []
    for i, entry in enumerate(doc):
        if not isinstance(entry, dict):
            raise ValueError(f"{path}[{i}]: expected a mapping")
        assets.append(asset_from_mapping(entry, where=f"{path}[{i}]"))
    return assets
