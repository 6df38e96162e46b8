"""Split a dhcpd.leases byte stream into raw ``lease``/``host`` blocks.

A block starts at a ``lease`` or ``host`` keyword at the beginning of a line
and ends at the first ``}`` after it. Everything between blocks (comments,
``authoring-byte-order``, ``server-duid``, ``failover peer`` state, ...) is
skipped. The stream is read in chunks so memory stays bounded by the largest
block rather than the file.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterator
from dataclasses import dataclass
from typing import BinaryIO

logger = logging.getLogger(__name__)

DEFAULT_CHUNK_SIZE = 64 * 1024
BLOCK_KEYWORDS = ("lease", "host")

BLOCK_START_RE = re.compile(
    rb"^[ \t]*(" + b"|".join(k.encode() for k in BLOCK_KEYWORDS) + rb")[ \t]+", re.MULTILINE
)
CLOSE_BRACE = b"}"


@dataclass
class Block:
    keyword: str
    body: bytes

    def text(self, encoding: str = "utf-8", errors: str = "backslashreplace") -> str:
        """Full statement text, keyword included, ready for line decoding."""
        return f"{self.keyword} {self.body.decode(encoding, errors=errors)}"


def iter_blocks(stream: BinaryIO, chunk_size: int = DEFAULT_CHUNK_SIZE) -> Iterator[Block]:
    """Yield blocks in file order; a trailing block without ``}`` is dropped."""
    if chunk_size < 1:
        raise ValueError("chunk_size must be positive")
    buffer = b""
    pos = 0
    eof = False
    while True:
        match = BLOCK_START_RE.search(buffer, pos)
        if match:
            end = buffer.find(CLOSE_BRACE, match.end())
            if end != -1:
                keyword = match.group(1).decode("ascii")
                yield Block(keyword=keyword, body=buffer[match.end() : end + 1])
                pos = end + 1
                continue
        if eof:
            if match:
                logger.debug(
                    "dropping truncated %s block at end of input",
                    match.group(1).decode("ascii"),
                )
            return

        # Keep the newline in front of the first unconsumed line so ``^``
        # still anchors there after the buffer is compacted.
        limit = match.start() if match else len(buffer)
        cut = buffer.rfind(b"\n", 0, limit)
        if cut > 0:
            buffer = buffer[cut:]
            pos = max(pos - cut, 1)

        chunk = stream.read(chunk_size)
        if not chunk:
            eof = True
        else:
            buffer += chunk
