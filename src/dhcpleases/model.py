"""In-memory records for dhcpd.leases entries."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from ipaddress import IPv4Address, IPv6Address
from typing import Any

TIMESTAMP_FIELDS = ("starts", "ends", "tstp", "tsfp", "atsfp", "cltt")


@dataclass
class Hardware:
    """Link-layer descriptor from a ``hardware <type> <mac>;`` statement.

    ``mac`` keeps the text as written; ``mac_addr`` is only set when that text
    parses as a 6, 8 or 20 byte address, so the two can disagree.
    """

    hardware: str = ""
    mac: str = ""
    mac_addr: bytes | None = None

    def to_dict(self) -> dict[str, str]:
        return {"hardware": self.hardware, "mac": self.mac}


@dataclass
class Lease:
    """One ``lease`` or ``host`` block.

    Every field is optional. Timestamps are timezone-aware and ``None`` when the
    statement was absent or unreadable. ``uid`` is the raw quoted text with its
    octal escapes left in place.
    """

    ip: IPv4Address | IPv6Address | None = None
    starts: datetime | None = None
    ends: datetime | None = None
    tstp: datetime | None = None
    tsfp: datetime | None = None
    atsfp: datetime | None = None
    cltt: datetime | None = None
    binding_state: str = ""
    next_binding_state: str = ""
    rewind_binding_state: str = ""
    hardware: Hardware = field(default_factory=Hardware)
    uid: str = ""
    client_hostname: str = ""
    vendor_class_id: str = ""
    vendor_name: str = ""
    relay_circuit_id: str = ""
    relay_remote_id: str = ""

    def is_active(self, now: datetime | None = None) -> bool:
        """Active binding state and not past ``ends``. A naive ``now`` is UTC."""
        if self.binding_state != "active":
            return False
        if self.ends is None:
            return True
        if now is None:
            now = datetime.now(timezone.utc)
        elif now.tzinfo is None:
            now = now.replace(tzinfo=timezone.utc)
        return self.ends > now

    def to_dict(self) -> dict[str, Any]:
        """JSON shape of a lease.

        Key spellings (``cllt``, ``vendor-nmae`` and the bare relay keys)
        are kept for existing consumers and must not be corrected. Unset
        times and IPs export as ``null``; ``atsfp`` is left out when unset.
        """
        payload: dict[str, Any] = {
            "ip": str(self.ip) if self.ip is not None else None,
            "starts": _iso(self.starts),
            "ends": _iso(self.ends),
            "tstp": _iso(self.tstp),
            "tsfp": _iso(self.tsfp),
        }
        if self.atsfp is not None:
            payload["atsfp"] = _iso(self.atsfp)
        payload.update(
            {
                "cllt": _iso(self.cltt),
                "binding-state": self.binding_state,
                "next-binding-state": self.next_binding_state,
                "rewind-binding-state": self.rewind_binding_state,
                "hardware": self.hardware.to_dict(),
                "uid": self.uid,
                "client-hostname": self.client_hostname,
                "vendor-class-identifier": self.vendor_class_id,
                "vendor-nmae": self.vendor_name,
                "RelayCircuitId": self.relay_circuit_id,
                "RelayRemoteId": self.relay_remote_id,
            }
        )
        return payload


def _iso(ts: datetime | None) -> str | None:
    return ts.isoformat() if ts is not None else None
