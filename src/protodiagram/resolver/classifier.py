# Copyright 2026 ProtoDiagram Contributors
# SPDX-License-Identifier: Apache-2.0

"""Classification of schema entities into messages, enumerations, and services.

A single walk over the namespace tree records every declared entity name.
Enumerations nested in a message are registered twice: under their bare name
and under the ``Parent_Enum`` composite form still used by older diagrams.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from protodiagram.model.schema import EnumDef, MessageDef, NamespaceDef, ServiceDef

# ###############
# Public Interface
# ###############


class SchemaError(Exception):
    """Raised when the schema tree is missing or malformed."""


@dataclass
class TypeRegistry:
    """Entity names known to one diagram generation call.

    Attributes:
        known_types: Names of all messages and enumerations, including the
            composite aliases of nested enumerations.
        enum_types: The subset of ``known_types`` naming enumerations.
        service_types: Names of all services.
    """

    known_types: set[str] = field(default_factory=set)
    enum_types: set[str] = field(default_factory=set)
    service_types: set[str] = field(default_factory=set)

    def is_known(self, name: str) -> bool:
        """Return True if *name* is a message or enumeration of this schema."""
        return name in self.known_types

    def is_enum(self, name: str) -> bool:
        """Return True if *name* refers to an enumeration."""
        return name in self.enum_types

    def is_message(self, name: str) -> bool:
        """Return True if *name* refers to a message."""
        return name in self.known_types and name not in self.enum_types


def classify(root: NamespaceDef | None) -> TypeRegistry:
    """Walk *root* once and classify every declared entity.

    Args:
        root: The root namespace of a parsed schema.

    Returns:
        A fresh :class:`TypeRegistry` describing the schema.

    Raises:
        SchemaError: If *root* is missing or an entity has no name.
    """
    if root is None:
        raise SchemaError("Root namespace is required for type classification")
    registry = TypeRegistry()
    _collect(root, registry, parent_name="", path=root.name or "<root>")
    return registry


def composite_enum_name(enum_name: str, parent_name: str) -> str:
    """Return the legacy ``Parent_Enum`` name of an enumeration nested in *parent_name*."""
    return f"{parent_name}_{enum_name}" if parent_name else enum_name


# ################
# Implementation
# ################


def _collect(container: NamespaceDef | MessageDef, registry: TypeRegistry, parent_name: str, path: str) -> None:
    """Record every entity below *container* in *registry*."""
    for index, node in enumerate(container.nested):
        location = f"{path}[{index}]"
        if not node.name:
            raise SchemaError(f"{node.kind.capitalize()} at '{location}' has no name")
        if isinstance(node, MessageDef):
            registry.known_types.add(node.name)
            _collect(node, registry, parent_name=node.name, path=f"{path}.{node.name}")
        elif isinstance(node, EnumDef):
            registry.known_types.add(node.name)
            registry.enum_types.add(node.name)
            if parent_name:
                alias = composite_enum_name(node.name, parent_name)
                registry.known_types.add(alias)
                registry.enum_types.add(alias)
        elif isinstance(node, ServiceDef):
            registry.service_types.add(node.name)
        elif isinstance(node, NamespaceDef):
            _collect(node, registry, parent_name=parent_name, path=f"{path}.{node.name}")
