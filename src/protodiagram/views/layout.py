# Copyright 2026 ProtoDiagram Contributors
# SPDX-License-Identifier: Apache-2.0

"""Package layout heuristics for diagram generation.

Decides whether the entities of a schema are wrapped in a named PlantUML
``package`` block and which name that block shows. Short or trivial package
paths are never wrapped, very deep ones are abbreviated, and mid-sized paths
are shown in full. All thresholds come from :class:`LayoutConfig`.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from protodiagram.config.settings import LayoutConfig
from protodiagram.model.schema import NamespaceDef, has_direct_content

logger = logging.getLogger(__name__)

# ###############
# Public Interface
# ###############


@dataclass(frozen=True)
class PackageLayout:
    """Outcome of the package layout analysis for one diagram.

    Attributes:
        wrap: Whether entities are wrapped in a named package block.
        display_name: Name shown on the package block; empty when not wrapping.
        content_namespace: Deepest namespace on the package path that
            directly declares an entity.
        content_levels: Number of namespace levels with direct content.
    """

    wrap: bool
    display_name: str
    content_namespace: NamespaceDef
    content_levels: int


def analyze_package_layout(
    root: NamespaceDef,
    package: str | None,
    config: LayoutConfig | None = None,
) -> PackageLayout:
    """Decide whether and how to wrap the diagram in a package block.

    Args:
        root: Root namespace of the schema.
        package: Dotted package path, or None when the schema has none.
        config: Heuristic thresholds; defaults apply when omitted.

    Returns:
        The :class:`PackageLayout` for this schema.
    """
    config = config or LayoutConfig()
    parts = [part for part in (package or "").strip().split(".") if part]
    content_namespace = find_content_namespace(root, parts)
    content_levels = count_content_levels(root)

    if not parts:
        return PackageLayout(False, "", content_namespace, content_levels)

    wrap = should_wrap(parts, content_levels, config)
    display_name = package_display_name(parts, config) if wrap else ""
    logger.debug(
        "Package %r: %d content level(s), wrap=%s, display=%r",
        package,
        content_levels,
        wrap,
        display_name,
    )
    return PackageLayout(wrap, display_name, content_namespace, content_levels)


def find_content_namespace(root: NamespaceDef, parts: list[str]) -> NamespaceDef:
    """Return the deepest namespace along *parts* that directly declares an entity.

    Empty intermediate levels are skipped. Falls back to *root* when no level
    on the path has content.
    """
    found = root
    current = root
    for part in parts:
        child = current.child_namespace(part)
        if child is None:
            break
        if has_direct_content(child):
            found = child
        current = child
    return found


def count_content_levels(namespace: NamespaceDef) -> int:
    """Count the namespace levels below and including *namespace* with direct content.

    Messages are not descended into; their nested types are not package levels.
    """
    levels = 1 if has_direct_content(namespace) else 0
    for node in namespace.nested:
        if isinstance(node, NamespaceDef):
            levels += count_content_levels(node)
    return levels


def should_wrap(parts: list[str], content_levels: int, config: LayoutConfig) -> bool:
    """Return True if a package block adds organizational value."""
    if content_levels == 0:
        return False
    if content_levels > 1:
        return True
    if parts[-1].lower() in config.meaningful_suffixes:
        return True
    if config.min_wrap_segments <= len(parts) <= config.max_full_segments:
        return True
    if len(parts) < config.min_wrap_segments:
        return False
    if len(parts) > config.max_segments:
        return False
    return True


def package_display_name(parts: list[str], config: LayoutConfig) -> str:
    """Return the name shown on the package block for the path *parts*."""
    if len(parts) <= config.max_full_segments:
        return ".".join(parts)
    if parts[-1].lower() in config.meaningful_suffixes:
        return ".".join(parts[-config.suffix_tail_segments :])
    if len(parts) > config.max_segments:
        return f"{parts[0]}...{'.'.join(parts[-config.abbreviated_tail_segments :])}"
    return ".".join(parts)
