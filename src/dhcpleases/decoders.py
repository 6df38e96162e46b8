"""Line decoders for statements inside a lease or host block.

Each rule pairs an anchored pattern with a setter for one ``Lease`` field.
Blocks are decoded line by line; a line holding several statements is split
at its terminators first. Rules are evaluated in order against every statement
and all matching rules fire; anchoring the keyword to the start keeps
``binding state`` from matching ``next binding state`` and ``tsfp`` from
matching ``atsfp``.

Supported statements (see dhcpd.leases(5)):
- ``lease <ip> {`` / ``fixed-address <ip>;``
- ``host <name> {`` / ``client-hostname "<name>";``
- ``starts`` / ``ends`` / ``tstp`` / ``tsfp`` / ``atsfp`` / ``cltt``
- ``binding state``, ``next binding state``, ``rewind binding state``
- ``hardware <type> <mac>;`` and ``uid "<raw>";``
- ``set vendor-class-identifier``, ``set vendor-name``
- ``option agent.circuit-id``, ``option agent.remote-id``
"""

from __future__ import annotations

import logging
import re
import string
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from functools import partial
from ipaddress import ip_address
from types import MappingProxyType

from dhcpleases.model import TIMESTAMP_FIELDS, Hardware, Lease
from dhcpleases.timestamps import ZONE_OFFSETS, parse_timestamp

logger = logging.getLogger(__name__)

MAC_LENGTHS = (6, 8, 20)
HEX_DIGITS = set(string.hexdigits)

Setter = Callable[[Lease, str], None]


@dataclass(frozen=True)
class FieldRule:
    field: str
    pattern: re.Pattern[str]
    apply: Setter

    def match(self, line: str) -> str | None:
        found = self.pattern.match(line)
        return found.group(1) if found else None


@dataclass(frozen=True)
class DecoderRegistry:
    """Ordered, immutable rule set; safe to share between parse calls."""

    rules: tuple[FieldRule, ...]

    def decode_line(self, lease: Lease, line: str) -> int:
        """Run every matching rule on one line; returns how many fired."""
        fired = 0
        for rule in self.rules:
            value = rule.match(line)
            if value is None:
                continue
            rule.apply(lease, value)
            fired += 1
        return fired

    def decode_block(self, lease: Lease, text: str) -> Lease:
        for line in text.splitlines():
            for statement in split_statements(line):
                self.decode_line(lease, statement)
        return lease

    @property
    def fields(self) -> tuple[str, ...]:
        return tuple(dict.fromkeys(rule.field for rule in self.rules))


def split_statements(line: str) -> list[str]:
    """Break a line into ``{``/``;`` terminated statements.

    Separators inside double quotes do not count and an unquoted ``#`` starts
    a comment, so ``starts epoch 1556335485; # Sat Apr 27 ...`` yields one
    statement.
    """
    pieces: list[str] = []
    start = 0
    end = len(line)
    quoted = False
    escaped = False
    for idx, ch in enumerate(line):
        if escaped:
            escaped = False
        elif quoted:
            if ch == "\\":
                escaped = True
            elif ch == '"':
                quoted = False
        elif ch == '"':
            quoted = True
        elif ch in "{;":
            pieces.append(line[start : idx + 1])
            start = idx + 1
        elif ch == "#":
            end = idx
            break
    tail = line[start:end]
    if tail.strip():
        pieces.append(tail)
    return pieces


def parse_mac(text: str) -> bytes | None:
    """Parse ``00:db:70:c3:11:d7``, ``00-db-...`` or ``00db.70c3.11d7`` forms."""
    text = text.strip()
    for sep, width in ((":", 2), ("-", 2), (".", 4)):
        groups = text.split(sep)
        if len(groups) < 2:
            continue
        if all(len(g) == width and set(g) <= HEX_DIGITS for g in groups):
            raw = bytes.fromhex("".join(groups))
            if len(raw) in MAC_LENGTHS:
                return raw
    return None


def _set_ip(lease: Lease, value: str) -> None:
    try:
        lease.ip = ip_address(value.strip())
    except ValueError:
        logger.debug("unparseable address %r", value)
        lease.ip = None


def _set_text(name: str, lease: Lease, value: str) -> None:
    setattr(lease, name, value)


def _set_stripped(name: str, lease: Lease, value: str) -> None:
    setattr(lease, name, value.strip())


def _set_timestamp(name: str, zones: Mapping[str, int], lease: Lease, value: str) -> None:
    setattr(lease, name, parse_timestamp(value, zones))


def _set_hardware(lease: Lease, value: str) -> None:
    parts = value.strip().split(None, 1)
    kind = parts[0] if parts else ""
    mac = parts[1].strip() if len(parts) > 1 else ""
    mac_addr = parse_mac(mac)
    if mac_addr is None and mac:
        logger.debug("unparseable hardware address %r", mac)
    lease.hardware = Hardware(hardware=kind, mac=mac, mac_addr=mac_addr)


def _statement(keyword: str, tail: str = r"\s+(.*);") -> re.Pattern[str]:
    words = r"\s+".join(re.escape(word) for word in keyword.split())
    return re.compile(rf"^\s*{words}{tail}")


def build_registry(zones: Mapping[str, int] = ZONE_OFFSETS) -> DecoderRegistry:
    """Assemble the rule set; ``zones`` resolves timestamp zone suffixes."""
    zone_table = MappingProxyType({name.upper(): minutes for name, minutes in zones.items()})
    rules = [
        FieldRule("ip", _statement("lease", r"\s+(\S+?)\s*\{"), _set_ip),
        FieldRule(
            "client_hostname",
            _statement("host", r"\s+(.*?)\s*\{"),
            partial(_set_text, "client_hostname"),
        ),
        FieldRule("ip", _statement("fixed-address"), _set_ip),
    ]
    rules.extend(
        FieldRule(name, _statement(name), partial(_set_timestamp, name, zone_table))
        for name in TIMESTAMP_FIELDS
    )
    rules.extend(
        [
            FieldRule("uid", _statement("uid", r'\s+"(.*)";'), partial(_set_text, "uid")),
            FieldRule(
                "client_hostname",
                _statement("client-hostname", r'\s+"(.*)";'),
                partial(_set_text, "client_hostname"),
            ),
            FieldRule(
                "binding_state",
                _statement("binding state"),
                partial(_set_stripped, "binding_state"),
            ),
            FieldRule(
                "next_binding_state",
                _statement("next binding state"),
                partial(_set_stripped, "next_binding_state"),
            ),
            FieldRule(
                "rewind_binding_state",
                _statement("rewind binding state"),
                partial(_set_stripped, "rewind_binding_state"),
            ),
            FieldRule("hardware", _statement("hardware"), _set_hardware),
            FieldRule(
                "vendor_class_id",
                _statement("set vendor-class-identifier", r'\s*=\s*"(.*)";'),
                partial(_set_text, "vendor_class_id"),
            ),
            FieldRule(
                "vendor_name",
                _statement("set vendor-name", r'\s*=\s*"(.*)";'),
                partial(_set_text, "vendor_name"),
            ),
            FieldRule(
                "relay_circuit_id",
                _statement("option agent.circuit-id"),
                partial(_set_stripped, "relay_circuit_id"),
            ),
            FieldRule(
                "relay_remote_id",
                _statement("option agent.remote-id"),
                partial(_set_stripped, "relay_remote_id"),
            ),
        ]
    )
    return DecoderRegistry(rules=tuple(rules))


DEFAULT_REGISTRY = build_registry()
