"""Aggregates over parsed leases."""

from __future__ import annotations

from collections import Counter
from collections.abc import Iterable
from datetime import datetime

from dhcpleases.model import Lease


def summarize_leases(leases: Iterable[Lease], now: datetime | None = None) -> dict[str, object]:
    """Count blocks per binding state plus distinct addresses and MACs."""
    states: Counter[str] = Counter()
    ip_counts: Counter[str] = Counter()
    macs: set[str] = set()
    total = 0
    active = 0
    hosts = 0

    for lease in leases:
        total += 1
        if lease.binding_state:
            states[lease.binding_state] += 1
        elif lease.client_hostname:
            # host declarations carry no binding state
            hosts += 1
        if lease.is_active(now):
            active += 1
        if lease.ip is not None:
            ip_counts[str(lease.ip)] += 1
        if lease.hardware.mac:
            macs.add(lease.hardware.mac.lower())

    return {
        "leases": total,
        "binding_states": dict(states),
        "active": active,
        "hosts": hosts,
        "distinct_ips": len(ip_counts),
        "distinct_macs": len(macs),
        "duplicate_ips": sorted(ip for ip, count in ip_counts.items() if count > 1),
    }
