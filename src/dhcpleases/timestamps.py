"""Timestamp grammar used by dhcpd.leases statements.

dhcpd writes times as ``<weekday> YYYY/MM/DD HH:MM:SS`` where the weekday is a
single digit (Sunday = 0). Some builds and hand-edited files append a zone:
either an abbreviation (``MDT``), a numeric offset (``+0000``) or both
(``+0000 UTC``). Values without a zone are UTC, which is what dhcpd itself
always writes.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Mapping
from datetime import datetime, timedelta, timezone, tzinfo
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

logger = logging.getLogger(__name__)

TIMESTAMP_FORMAT = "%Y/%m/%d %H:%M:%S"

# Minutes east of UTC. Abbreviations are ambiguous worldwide; this table picks
# the reading dhcpd users are most likely to have in their files.
ZONE_OFFSETS: dict[str, int] = {
    "UTC": 0,
    "UT": 0,
    "GMT": 0,
    "EST": -5 * 60,
    "EDT": -4 * 60,
    "CST": -6 * 60,
    "CDT": -5 * 60,
    "MST": -7 * 60,
    "MDT": -6 * 60,
    "PST": -8 * 60,
    "PDT": -7 * 60,
    "AKST": -9 * 60,
    "AKDT": -8 * 60,
    "HST": -10 * 60,
    "WET": 0,
    "WEST": 60,
    "BST": 60,
    "CET": 60,
    "CEST": 2 * 60,
    "EET": 2 * 60,
    "EEST": 3 * 60,
    "MSK": 3 * 60,
    "IST": 5 * 60 + 30,
    "JST": 9 * 60,
    "KST": 9 * 60,
    "AEST": 10 * 60,
    "AEDT": 11 * 60,
    "NZST": 12 * 60,
    "NZDT": 13 * 60,
}

TIMESTAMP_RE = re.compile(
    r"^(?P<stamp>\d{4}/\d{2}/\d{2} \d{2}:\d{2}:\d{2})"
    r"(?: (?P<offset>[+-]\d{4}))?"
    r"(?: (?P<zone>[A-Za-z]{2,}))?$"
)


def _resolve_zone(name: str, zones: Mapping[str, int]) -> tzinfo:
    """Map a zone abbreviation or IANA name onto a tzinfo.

    ``zones`` keys are expected in upper case.
    """
    minutes = zones.get(name.upper())
    if minutes is not None:
        return timezone(timedelta(minutes=minutes), name)
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError, OSError):
        logger.debug("unknown time zone %r, reading timestamp as UTC", name)
        return timezone.utc


def _offset_zone(offset: str, name: str | None) -> tzinfo:
    sign = -1 if offset[0] == "-" else 1
    minutes = int(offset[1:3]) * 60 + int(offset[3:5])
    delta = sign * timedelta(minutes=minutes)
    return timezone(delta, name) if name else timezone(delta)


def parse_timestamp(value: str, zones: Mapping[str, int] = ZONE_OFFSETS) -> datetime | None:
    """Decode ``"6 2019/04/27 03:24:45[ +hhmm][ TZ]"`` into an aware datetime.

    The first two characters (weekday digit and separator) are skipped without
    being checked against the date. Returns ``None`` for anything that does not
    fit the grammar, including ``never``.
    """
    value = value.strip()
    if len(value) < 3 or value[0].isspace() or value[1] != " ":
        logger.debug("malformed timestamp %r", value)
        return None
    match = TIMESTAMP_RE.match(value[2:])
    if not match:
        logger.debug("malformed timestamp %r", value)
        return None
    try:
        naive = datetime.strptime(match.group("stamp"), TIMESTAMP_FORMAT)
        offset, zone = match.group("offset"), match.group("zone")
        if offset:
            tz = _offset_zone(offset, zone)
        elif zone:
            tz = _resolve_zone(zone, zones)
        else:
            tz = timezone.utc
    except (ValueError, TypeError, OverflowError):
        logger.debug("timestamp out of range %r", value)
        return None
    return naive.replace(tzinfo=tz)


def weekday_digit(ts: datetime) -> int:
    """dhcpd weekday numbering: Sunday is 0."""
    return ts.isoweekday() % 7


def format_clock(ts: datetime) -> str:
    """``YYYY/MM/DD HH:MM:SS`` in the timestamp's own zone, zero padded."""
    # strftime drops the padding for years below 1000 on glibc.
    return (
        f"{ts.year:04d}/{ts.month:02d}/{ts.day:02d} "
        f"{ts.hour:02d}:{ts.minute:02d}:{ts.second:02d}"
    )


def format_timestamp(ts: datetime, weekday: int | None = None) -> str:
    """Write ``ts`` in the canonical lease-file form (UTC, no zone suffix)."""
    if ts.tzinfo is None:
        utc = ts.replace(tzinfo=timezone.utc)
    else:
        utc = ts.astimezone(timezone.utc)
    day = weekday_digit(utc) if weekday is None else weekday
    return f"{day} {format_clock(utc)}"
