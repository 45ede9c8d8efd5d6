# Copyright 2026 ProtoDiagram Contributors
# SPDX-License-Identifier: Apache-2.0

"""Data model and YAML parser for the diagram generation configuration file."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

import yaml

# ###############
# Public Interface
# ###############

CONFIG_FILE_NAME = ".protodiagram.yaml"

DEFAULT_SERVER_URL = "https://www.plantuml.com/plantuml/"

IMAGE_TYPES: tuple[str, ...] = ("png", "svg", "txt")

DEFAULT_MEANINGFUL_SUFFIXES: tuple[str, ...] = (
    "api",
    "service",
    "event",
    "model",
    "dto",
    "proto",
    "message",
    "client",
    "server",
)


class ConfigError(Exception):
    """Raised when a configuration file is invalid or cannot be loaded."""


@dataclass(frozen=True)
class LayoutConfig:
    """Tuning constants for the package-wrap heuristic.

    Attributes:
        meaningful_suffixes: Last package segments that always earn a wrapper.
        min_wrap_segments: Shortest path that is wrapped on length alone.
        max_full_segments: Longest path that is wrapped on length alone and
            shown unabbreviated.
        max_segments: Paths longer than this are never wrapped on length alone
            and are abbreviated when wrapped.
        suffix_tail_segments: Segments kept when a long path ends in a
            meaningful suffix.
        abbreviated_tail_segments: Trailing segments kept after ``first...``
            for paths beyond ``max_segments``.
    """

    meaningful_suffixes: tuple[str, ...] = DEFAULT_MEANINGFUL_SUFFIXES
    min_wrap_segments: int = 3
    max_full_segments: int = 6
    max_segments: int = 8
    suffix_tail_segments: int = 4
    abbreviated_tail_segments: int = 3


@dataclass(frozen=True)
class DiagramConfig:
    """Settings shared by every diagram generation call.

    Attributes:
        server_url: Base URL of the PlantUML rendering server.
        image_type: Rendered format requested from the server (png, svg, txt).
        well_known_prefix: Type-name prefix of externally defined types that
            never produce relationship edges.
        compression: When False the encoder skips deflate and emits the hex
            fallback encoding.
        layout: Package-wrap tuning constants.
    """

    server_url: str = DEFAULT_SERVER_URL
    image_type: str = "png"
    well_known_prefix: str = "google.protobuf."
    compression: bool = True
    layout: LayoutConfig = field(default_factory=LayoutConfig)


def load_config(path: Path) -> DiagramConfig:
    """Load and parse a diagram configuration file.

    Args:
        path: Path to the `.protodiagram.yaml` file.

    Returns:
        A DiagramConfig instance populated from the file.

    Raises:
        ConfigError: If the file cannot be read or the configuration is invalid.
    """
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        raise ConfigError(f"Config file not found: {path}") from None
    except OSError as exc:
        raise ConfigError(f"Cannot read config file: {exc}") from exc

    return parse_config(text, source_label=str(path))


def parse_config(text: str, source_label: str = "<string>") -> DiagramConfig:
    """Parse configuration YAML text into a DiagramConfig.

    An empty document yields the defaults.

    Args:
        text: Raw YAML content.
        source_label: Human-readable label used in error messages (e.g. the file path).

    Raises:
        ConfigError: If the YAML is invalid or a value has the wrong type.
    """
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Invalid YAML in {source_label}: {exc}") from exc

    if data is None:
        return DiagramConfig()
    if not isinstance(data, dict):
        raise ConfigError(f"{source_label}: config must be a YAML mapping")

    _reject_unknown_keys(data, _TOP_LEVEL_KEYS, source_label)

    defaults = DiagramConfig()
    image_type = _optional_string(data, "image-type", defaults.image_type, source_label)
    if image_type not in IMAGE_TYPES:
        raise ConfigError(f"{source_label}: 'image-type' must be one of {', '.join(IMAGE_TYPES)}")

    layout = defaults.layout
    if "layout" in data:
        layout = _parse_layout(data["layout"], f"{source_label}: layout")

    return DiagramConfig(
        server_url=_optional_string(data, "server-url", defaults.server_url, source_label),
        image_type=image_type,
        well_known_prefix=_optional_string(data, "well-known-prefix", defaults.well_known_prefix, source_label),
        compression=_optional_bool(data, "compression", defaults.compression, source_label),
        layout=layout,
    )


# ################
# Implementation
# ################

_TOP_LEVEL_KEYS = frozenset({"server-url", "image-type", "well-known-prefix", "compression", "layout"})

_LAYOUT_INT_KEYS: dict[str, str] = {
    "min-wrap-segments": "min_wrap_segments",
    "max-full-segments": "max_full_segments",
    "max-segments": "max_segments",
    "suffix-tail-segments": "suffix_tail_segments",
    "abbreviated-tail-segments": "abbreviated_tail_segments",
}


def _parse_layout(entry: object, location: str) -> LayoutConfig:
    """Parse the ``layout`` mapping into a LayoutConfig."""
    if not isinstance(entry, dict):
        raise ConfigError(f"{location} must be a YAML mapping")

    _reject_unknown_keys(entry, frozenset(_LAYOUT_INT_KEYS) | {"meaningful-suffixes"}, location)

    values: dict[str, object] = {}
    for key, attribute in _LAYOUT_INT_KEYS.items():
        if key in entry:
            value = entry[key]
            # bool is a subclass of int; "true" is not a segment count.
            if not isinstance(value, int) or isinstance(value, bool) or value < 0:
                raise ConfigError(f"{location}: '{key}' must be a non-negative integer")
            values[attribute] = value

    if "meaningful-suffixes" in entry:
        suffixes = entry["meaningful-suffixes"]
        if not isinstance(suffixes, list) or not all(isinstance(s, str) for s in suffixes):
            raise ConfigError(f"{location}: 'meaningful-suffixes' must be a list of strings")
        values["meaningful_suffixes"] = tuple(s.lower() for s in suffixes)

    return LayoutConfig(**values)  # type: ignore[arg-type]


def _reject_unknown_keys(mapping: dict[str, object], allowed: frozenset[str], source_label: str) -> None:
    unknown = sorted(str(key) for key in mapping if key not in allowed)
    if unknown:
        raise ConfigError(f"{source_label}: unknown key(s): {', '.join(unknown)}")


def _optional_string(mapping: dict[str, object], key: str, default: str, source_label: str) -> str:
    """Extract an optional string field from a mapping, raising ConfigError on a wrong type."""
    if key not in mapping:
        return default
    value = mapping[key]
    if not isinstance(value, str):
        raise ConfigError(f"{source_label}: '{key}' must be a string")
    return value


def _optional_bool(mapping: dict[str, object], key: str, default: bool, source_label: str) -> bool:
    """Extract an optional boolean field from a mapping, raising ConfigError on a wrong type."""
    if key not in mapping:
        return default
    value = mapping[key]
    if not isinstance(value, bool):
        raise ConfigError(f"{source_label}: '{key}' must be a boolean")
    return value
