# Copyright 2026 ProtoDiagram Contributors
# SPDX-License-Identifier: Apache-2.0

"""PlantUML object diagram generation for parsed schema trees.

The diagram shows:
- Every message as an ``object`` block with one line per non-reserved field.
- Every enumeration as an ``enum`` block listing its value names.
- Every service as a ``control`` block listing its RPC signatures.
- Messages that declare enumerations grouped with them in a
  ``component "<Message> Types"`` block.
- A note per oneof group with more than one member.
- Deduplicated relationship edges after all entity blocks.

Each call builds its own registry, relationship set, and line buffer, so
concurrent calls never share state.
"""

from __future__ import annotations

import logging
import re

from protodiagram.config.settings import DiagramConfig
from protodiagram.model.schema import EnumDef, FieldDef, MessageDef, NamespaceDef, ServiceDef
from protodiagram.resolver.classifier import SchemaError, classify
from protodiagram.resolver.relationships import (
    Relationship,
    RelationshipKind,
    RelationshipResolver,
    RelationshipSet,
)
from protodiagram.views.layout import analyze_package_layout

logger = logging.getLogger(__name__)

# ###############
# Public Interface
# ###############

START_MARKER = "@startuml"
END_MARKER = "@enduml"
HEADER_LINES: tuple[str, ...] = (
    "!pragma useIntermediatePackages false",
    "skinparam componentStyle rectangle",
)


class DiagramError(Exception):
    """Raised when a schema tree cannot be turned into a diagram."""


def generate_plantuml(
    root: NamespaceDef | None,
    package: str | None = None,
    config: DiagramConfig | None = None,
) -> str:
    """Generate PlantUML object diagram text for a schema tree.

    Args:
        root: Root namespace of the parsed schema.
        package: Dotted package path of the schema, if any.
        config: Generation settings; defaults apply when omitted.

    Returns:
        Newline-joined diagram text starting with ``@startuml`` and ending
        with ``@enduml``.

    Raises:
        DiagramError: If the root is missing or an entity is malformed.
    """
    if root is None:
        raise DiagramError("Root namespace is required for PlantUML generation")
    try:
        return _DiagramBuilder(root, config or DiagramConfig()).build(package)
    except SchemaError as exc:
        raise DiagramError(f"Failed to process protobuf namespace: {exc}") from exc


def to_camel_case(name: str) -> str:
    """Convert a snake_case name to camelCase; camelCase input is returned unchanged."""
    if not name:
        return name
    return _SNAKE_SEGMENT.sub(lambda match: match.group(1).upper(), name)


# ################
# Implementation
# ################

_SNAKE_SEGMENT = re.compile(r"_([a-z])")


class _DiagramBuilder:
    """Accumulates the lines and edges of a single diagram."""

    def __init__(self, root: NamespaceDef, config: DiagramConfig) -> None:
        self._root = root
        self._config = config
        self._resolver = RelationshipResolver(classify(root), config.well_known_prefix)
        self._relations = RelationshipSet()
        self._lines: list[str] = [START_MARKER, *HEADER_LINES]

    def build(self, package: str | None) -> str:
        layout = analyze_package_layout(self._root, package, self._config.layout)
        if layout.wrap:
            self._lines.append(f'package "{layout.display_name}" {{')
        self._emit_namespace(self._root)
        self._lines.extend(self._relations.lines())
        if layout.wrap:
            self._lines.append("}")
        self._lines.append(END_MARKER)
        logger.debug("Generated %d line(s) with %d relationship(s)", len(self._lines), len(self._relations))
        return "\n".join(self._lines)

    # ------------------------------------------------------------------
    # Namespaces
    # ------------------------------------------------------------------

    def _emit_namespace(self, namespace: NamespaceDef) -> None:
        """Emit every entity below *namespace* in declaration order, without package nesting."""
        for node in namespace.nested:
            if isinstance(node, NamespaceDef):
                self._emit_namespace(node)
                continue
            try:
                if isinstance(node, MessageDef):
                    self._emit_message(node)
                elif isinstance(node, EnumDef):
                    self._emit_enum(node)
                elif isinstance(node, ServiceDef):
                    self._emit_service(node)
            except (SchemaError, DiagramError) as exc:
                raise DiagramError(f"Failed to process {node.name or '<unnamed>'}: {exc}") from exc

    # ------------------------------------------------------------------
    # Messages
    # ------------------------------------------------------------------

    def _emit_message(self, message: MessageDef) -> None:
        if not message.name:
            raise SchemaError("Message type must have a valid name")

        grouped = bool(message.nested_enums)
        if grouped:
            self._lines.append(f'component "{message.name} Types" {{')

        self._lines.append(f"object {message.name} {{")
        for field in message.fields:
            if field.reserved:
                continue
            try:
                self._emit_field(field, message.name)
            except SchemaError as exc:
                raise DiagramError(f"Failed to process field in {message.name}: {exc}") from exc
        self._lines.append("}")

        self._emit_oneof_notes(message)

        for node in message.nested:
            if isinstance(node, MessageDef):
                self._emit_message(node)
            elif isinstance(node, EnumDef):
                # Nested enums keep their bare name inside the component.
                self._emit_enum(node)

        if grouped:
            self._lines.append("}")

    def _emit_field(self, field: FieldDef, parent_name: str) -> None:
        resolver = self._resolver
        field_type = resolver.extract_field_type(field, parent_name)

        display_type = field_type
        if field.is_map:
            display_type = f"map<{field.key_type}, {field_type}>"
        if field.repeated and not field.is_map:
            display_type = f"{display_type} [ ]"
        if resolver.is_optional_field(field):
            display_type = f"{display_type} ?"

        self._lines.append(f"  {to_camel_case(field.name)} : {display_type}")

        if not resolver.is_well_known_type(field_type):
            resolver.create_relationship(field, field_type, parent_name, self._relations)

    def _emit_oneof_notes(self, message: MessageDef) -> None:
        """Add a note for every oneof group with more than one member."""
        for group in message.oneofs:
            if len(group.fields) > 1:
                members = " or ".join(to_camel_case(name) for name in group.fields)
                self._lines.append(f"note right of {message.name}")
                self._lines.append(f"  Only one of {members} is set")
                self._lines.append("end note")

    # ------------------------------------------------------------------
    # Enums and services
    # ------------------------------------------------------------------

    def _emit_enum(self, enum_def: EnumDef) -> None:
        if not enum_def.name:
            raise SchemaError("Enum type must have a valid name")
        self._lines.append(f"enum {enum_def.name} {{")
        for value in enum_def.values:
            if value.name:
                self._lines.append(f"  {value.name}")
        self._lines.append("}")

    def _emit_service(self, service: ServiceDef) -> None:
        if not service.name:
            raise SchemaError("Service type must have a valid name")
        self._lines.append(f"control {service.name} {{")
        for rpc in service.rpcs:
            if not rpc.name:
                raise SchemaError(f"Invalid method in service {service.name}")
            request_type = rpc.request_type or "Unknown"
            response_type = rpc.response_type or "Unknown"
            self._lines.append(f"  {rpc.name}({request_type}) : {response_type}")
            for target in (request_type, response_type):
                if not self._resolver.is_well_known_type(target):
                    self._relations.add(Relationship(service.name, RelationshipKind.ASSOCIATION, target))
        self._lines.append("}")
