"""Writers for parsed leases (JSON, JSONL, CSV)."""

from __future__ import annotations

import csv
from collections.abc import Iterable
from pathlib import Path
from typing import Any

import orjson

from dhcpleases.model import TIMESTAMP_FIELDS, Lease

CSV_COLUMNS = [
    "ip",
    "starts",
    "ends",
    "tstp",
    "tsfp",
    "atsfp",
    "cltt",
    "binding_state",
    "next_binding_state",
    "rewind_binding_state",
    "hardware",
    "mac",
    "uid",
    "client_hostname",
    "vendor_class_id",
    "vendor_name",
    "relay_circuit_id",
    "relay_remote_id",
]


def leases_to_json(leases: Iterable[Lease], indent: bool = False) -> bytes:
    option = orjson.OPT_INDENT_2 if indent else 0
    return orjson.dumps([lease.to_dict() for lease in leases], option=option)


def write_jsonl(leases: Iterable[Lease], path: Path) -> int:
    """One lease per line; returns how many were written."""
    path.parent.mkdir(parents=True, exist_ok=True)
    count = 0
    with path.open("wb") as f:
        for lease in leases:
            f.write(orjson.dumps(lease.to_dict()) + b"\n")
            count += 1
    return count


def lease_to_row(lease: Lease) -> dict[str, Any]:
    """Flatten a lease into CSV-friendly columns."""
    row: dict[str, Any] = {"ip": str(lease.ip) if lease.ip is not None else ""}
    for name in TIMESTAMP_FIELDS:
        ts = getattr(lease, name)
        row[name] = ts.isoformat() if ts is not None else ""
    row.update(
        binding_state=lease.binding_state,
        next_binding_state=lease.next_binding_state,
        rewind_binding_state=lease.rewind_binding_state,
        hardware=lease.hardware.hardware,
        mac=lease.hardware.mac,
        uid=lease.uid,
        client_hostname=lease.client_hostname,
        vendor_class_id=lease.vendor_class_id,
        vendor_name=lease.vendor_name,
        relay_circuit_id=lease.relay_circuit_id,
        relay_remote_id=lease.relay_remote_id,
    )
    return row


def write_csv(leases: Iterable[Lease], path: Path) -> int:
    path.parent.mkdir(parents=True, exist_ok=True)
    count = 0
    with path.open("w", newline="") as f:
        writer = csv.DictWriter(f, fieldnames=CSV_COLUMNS)
        writer.writeheader()
        for lease in leases:
            writer.writerow(lease_to_row(lease))
            count += 1
    return count
