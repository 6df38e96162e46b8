from __future__ import annotations

import codecs
import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from dhcpleases.decoders import DecoderRegistry, build_registry
from dhcpleases.timestamps import ZONE_OFFSETS
from dhcpleases.tokenizer import DEFAULT_CHUNK_SIZE


class ConfigError(ValueError):
    """Raised for configuration payloads that cannot drive a parse."""


@dataclass
class ParserConfig:
    encoding: str = "utf-8"
    errors: str = "backslashreplace"
    chunk_size: int = DEFAULT_CHUNK_SIZE
    zone_offsets: dict[str, int] = field(default_factory=dict)  # minutes east of UTC

    @staticmethod
    def from_mapping(payload: dict[str, Any]) -> ParserConfig:
        if not isinstance(payload, dict):
            raise ConfigError("config must be a mapping")
        unknown = set(payload) - {"encoding", "errors", "chunk_size", "zone_offsets"}
        if unknown:
            raise ConfigError(f"unknown config keys: {sorted(unknown)}")

        encoding = str(payload.get("encoding", "utf-8"))
        errors = str(payload.get("errors", "backslashreplace"))
        try:
            codecs.lookup(encoding)
            codecs.lookup_error(errors)
        except LookupError as exc:
            raise ConfigError(str(exc)) from exc

        try:
            chunk_size = int(payload.get("chunk_size", DEFAULT_CHUNK_SIZE))
        except (TypeError, ValueError) as exc:
            raise ConfigError(f"chunk_size must be an integer: {exc}") from exc
        if chunk_size < 1:
            raise ConfigError("chunk_size must be positive")

        zones_obj = payload.get("zone_offsets") or {}
        if not isinstance(zones_obj, dict):
            raise ConfigError("zone_offsets must map abbreviations to minutes")
        zone_offsets: dict[str, int] = {}
        for name, minutes in zones_obj.items():
            try:
                zone_offsets[str(name).upper()] = int(minutes)
            except (TypeError, ValueError) as exc:
                raise ConfigError(f"zone offset for {name!r} must be minutes: {exc}") from exc
            if abs(zone_offsets[str(name).upper()]) >= 24 * 60:
                raise ConfigError(f"zone offset for {name!r} out of range")

        return ParserConfig(
            encoding=encoding,
            errors=errors,
            chunk_size=chunk_size,
            zone_offsets=zone_offsets,
        )

    def zones(self) -> dict[str, int]:
        return {**ZONE_OFFSETS, **self.zone_offsets}

    def registry(self) -> DecoderRegistry:
        return build_registry(self.zones())


def load_config(path: Path) -> ParserConfig:
    text = path.read_text()
    try:
        if path.suffix.lower() in {".yml", ".yaml"}:
            payload = yaml.safe_load(text) or {}
        else:
            payload = json.loads(text)
    except (yaml.YAMLError, json.JSONDecodeError) as exc:
        raise ConfigError(f"cannot read {path}: {exc}") from exc
    return ParserConfig.from_mapping(payload)


def sample_config() -> dict[str, Any]:
    return {
        "encoding": "utf-8",
        "errors": "backslashreplace",
        "chunk_size": DEFAULT_CHUNK_SIZE,
        "zone_offsets": {"MSK": 180, "SAST": 120},
    }
