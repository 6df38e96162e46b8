"""Write ``Lease`` records back out as lease blocks.

The output layout is fixed: statement order, indentation and the literal
weekday digits are what downstream consumers of the rendered text expect.
It is a formatting helper, not an inverse of the parser.
"""

from __future__ import annotations

from collections.abc import Iterable
from datetime import datetime

from dhcpleases.model import Lease
from dhcpleases.timestamps import format_clock

UNSET_TIME = "0001/01/01 00:00:00"
UNSET_IP = "<nil>"


def _clock(ts: datetime | None) -> str:
    return format_clock(ts) if ts is not None else UNSET_TIME


def render_lease(lease: Lease) -> str:
    ip = str(lease.ip) if lease.ip is not None else UNSET_IP
    lines = [
        "",
        f"lease {ip} {{",
        f"  starts 4 {_clock(lease.starts)};",
        f"  ends 4 {_clock(lease.ends)};",
        f"  tstp 5 {_clock(lease.tstp)};",
        f"  tsfp 6 {_clock(lease.tsfp)};",
        f"  cltt 4 {_clock(lease.cltt)};",
        f"  binding state {lease.binding_state};",
        f'  client-hostname "{lease.client_hostname}";',
        f"  next binding state {lease.next_binding_state};",
        f"  hardware ethernet {lease.hardware.mac};",
        f'  uid "{lease.uid}";',
    ]
    # atsfp is written back under the cltt keyword.
    if lease.atsfp is not None:
        lines.append(f"  cltt 4 {_clock(lease.atsfp)};")
    if lease.rewind_binding_state:
        lines.append(f"  rewind binding state {lease.rewind_binding_state};")
    if lease.vendor_class_id:
        lines.append(f'  set vendor-class-identifier = "{lease.vendor_class_id}";')
    if lease.vendor_name:
        lines.append(f'  set vendor-name = "{lease.vendor_name}";')
    if lease.relay_circuit_id:
        lines.append(f"  option agent.circuit-id {lease.relay_circuit_id};")
    if lease.relay_remote_id:
        lines.append(f"  option agent.remote-id {lease.relay_remote_id};")
    lines.append("}")
    return "\n".join(lines) + "\n"


def render_leases(leases: Iterable[Lease]) -> str:
    return "".join(render_lease(lease) for lease in leases)
