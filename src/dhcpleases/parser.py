"""Parse dhcpd.leases streams into ``Lease`` records."""

from __future__ import annotations

import io
import logging
from collections.abc import Iterator
from typing import TYPE_CHECKING, BinaryIO

from dhcpleases.decoders import DEFAULT_REGISTRY, DecoderRegistry
from dhcpleases.model import Lease
from dhcpleases.tokenizer import DEFAULT_CHUNK_SIZE, iter_blocks

if TYPE_CHECKING:
    from dhcpleases.config import ParserConfig

logger = logging.getLogger(__name__)


def iter_leases(
    stream: BinaryIO,
    registry: DecoderRegistry = DEFAULT_REGISTRY,
    *,
    chunk_size: int = DEFAULT_CHUNK_SIZE,
    encoding: str = "utf-8",
    errors: str = "backslashreplace",
) -> Iterator[Lease]:
    """Lazily decode each block of ``stream`` into a fresh ``Lease``."""
    for block in iter_blocks(stream, chunk_size=chunk_size):
        lease = Lease()
        registry.decode_block(lease, block.text(encoding, errors))
        yield lease


def parse(
    stream: BinaryIO,
    registry: DecoderRegistry = DEFAULT_REGISTRY,
    *,
    chunk_size: int = DEFAULT_CHUNK_SIZE,
    encoding: str = "utf-8",
    errors: str = "backslashreplace",
) -> list[Lease]:
    """Read every lease and host block, in file order.

    Content problems only degrade individual fields; read errors from
    ``stream`` propagate.
    """
    leases = list(
        iter_leases(stream, registry, chunk_size=chunk_size, encoding=encoding, errors=errors)
    )
    logger.info("parsed %d lease blocks", len(leases))
    return leases


def parse_bytes(data: bytes, registry: DecoderRegistry = DEFAULT_REGISTRY) -> list[Lease]:
    return parse(io.BytesIO(data), registry)


def parse_with_config(stream: BinaryIO, config: ParserConfig) -> list[Lease]:
    return parse(
        stream,
        config.registry(),
        chunk_size=config.chunk_size,
        encoding=config.encoding,
        errors=config.errors,
    )
