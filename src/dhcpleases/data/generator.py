"""Synthetic dhcpd.leases generator.

Builds files shaped like what isc-dhcpd 4.x writes:
- a comment header and ``authoring-byte-order`` line
- ``lease`` blocks with starts/ends/tstp/cltt, binding states, hardware and uid
- the occasional failover fields (tsfp/atsfp/rewind binding state)
- ``host`` declarations written by OMAPI

Used for fixtures, regression tests and the parse benchmark.
"""

from __future__ import annotations

import random
from collections.abc import Sequence
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from ipaddress import IPv4Address

from dhcpleases.timestamps import format_timestamp

HEADER = (
    "# The format of this file is documented in the dhcpd.leases(5) manual page.\n"
    "# This lease file was written by isc-dhcp-4.4.3\n"
    "\n"
    "# authoring-byte-order entry is generated, DO NOT DELETE\n"
    "authoring-byte-order little-endian;\n"
    "\n"
)

BINDING_STATES: Sequence[str] = ("active", "free", "backup", "expired", "released", "abandoned")


@dataclass
class LeaseSpec:
    ip: IPv4Address
    mac: bytes
    starts: datetime
    duration: timedelta
    binding_state: str
    next_binding_state: str
    hostname: str | None = None
    failover: bool = False


def escape_uid(raw: bytes) -> str:
    """Quote bytes the way dhcpd prints them: printable ASCII, else ``\\ooo``."""
    out = []
    for byte in raw:
        # braces are escaped as well so a block never closes inside a uid
        if 32 <= byte < 127 and chr(byte) not in '"\\{}':
            out.append(chr(byte))
        else:
            out.append(f"\\{byte:03o}")
    return "".join(out)


def _format_mac(mac: bytes) -> str:
    return ":".join(f"{b:02x}" for b in mac)


def _build_lease(entry: LeaseSpec) -> tuple[str, dict]:
    ends = entry.starts + entry.duration
    lines = [
        f"lease {entry.ip} {{",
        f"  starts {format_timestamp(entry.starts)};",
        f"  ends {format_timestamp(ends)};",
        f"  tstp {format_timestamp(ends)};",
    ]
    if entry.failover:
        lines.append(f"  tsfp {format_timestamp(ends)};")
        lines.append(f"  atsfp {format_timestamp(ends)};")
    lines.extend(
        [
            f"  cltt {format_timestamp(entry.starts)};",
            f"  binding state {entry.binding_state};",
            f"  next binding state {entry.next_binding_state};",
        ]
    )
    if entry.failover:
        lines.append("  rewind binding state free;")
    uid = escape_uid(b"\x01" + entry.mac)  # ARP type 1 (ethernet) + MAC
    lines.append(f"  hardware ethernet {_format_mac(entry.mac)};")
    lines.append(f'  uid "{uid}";')
    if entry.hostname:
        lines.append(f'  client-hostname "{entry.hostname}";')
    lines.append("}")
    metadata = {
        "kind": "lease",
        "ip": str(entry.ip),
        "mac": _format_mac(entry.mac),
        "starts": entry.starts.isoformat(),
        "ends": ends.isoformat(),
        "binding_state": entry.binding_state,
        "uid": uid,
        "hostname": entry.hostname or "",
    }
    return "\n".join(lines) + "\n", metadata


def _build_host(name: str, ip: IPv4Address, mac: bytes) -> tuple[str, dict]:
    text = (
        f"host {name} {{\n"
        "  dynamic;\n"
        f"  hardware ethernet {_format_mac(mac)};\n"
        f"  fixed-address {ip};\n"
        '        supersede server.filename = "pxelinux.0";\n'
        f'        supersede host-name = "{name}";\n'
        "}\n"
    )
    metadata = {"kind": "host", "ip": str(ip), "mac": _format_mac(mac), "hostname": name}
    return text, metadata


def generate_leases_file(
    count: int = 8,
    *,
    seed: int = 1234,
    hosts: int = 0,
    network: str = "172.24.43.0",
    failover_ratio: float = 0.25,
) -> tuple[bytes, list[dict]]:
    """Generate a leases file plus per-block metadata, in file order."""
    rng = random.Random(seed)
    base_ip = IPv4Address(network)
    base_time = datetime(2019, 4, 27, 3, 24, 45, tzinfo=timezone.utc)
    blocks: list[str] = [HEADER]
    metadata: list[dict] = []

    for i in range(count):
        state = rng.choice(BINDING_STATES)
        entry = LeaseSpec(
            ip=base_ip + 1 + (i % 250),
            mac=bytes([0x00] + [rng.randint(0, 255) for _ in range(5)]),
            starts=base_time + timedelta(seconds=rng.randint(0, 86_400 * 30)),
            duration=timedelta(minutes=rng.choice((10, 60, 720))),
            binding_state=state,
            next_binding_state="free" if state == "active" else state,
            hostname=f"client{i:03d}" if rng.random() < 0.5 else None,
            failover=rng.random() < failover_ratio,
        )
        text, meta = _build_lease(entry)
        blocks.append(text)
        metadata.append(meta)

    for i in range(hosts):
        mac = bytes([0x4B] + [rng.randint(0, 255) for _ in range(5)])
        text, meta = _build_host(f"test{i + 1}.example.com", base_ip + 250 - i, mac)
        blocks.append(text)
        metadata.append(meta)

    return "".join(blocks).encode("ascii"), metadata
