# Copyright 2026 ProtoDiagram Contributors
# SPDX-License-Identifier: Apache-2.0

"""Field type resolution and relationship edges between schema entities.

Cardinality and relationship kind are independent axes. Two fields of the
same message that point at the same target with different cardinalities
produce two edges; the exact same (source, kind, cardinality, target)
combination is recorded only once per diagram.
"""

from __future__ import annotations

import enum
from collections.abc import Iterator
from dataclasses import dataclass

from protodiagram.model.schema import FieldDef
from protodiagram.resolver.classifier import SchemaError, TypeRegistry

# ###############
# Public Interface
# ###############


class Cardinality(enum.Enum):
    """Multiplicity of a relationship, rendered as a PlantUML label."""

    REQUIRED = '"1"'
    OPTIONAL = '"0..1"'
    MULTIPLE = '"0..*"'


class RelationshipKind(enum.Enum):
    """Arrow style of a relationship edge."""

    CONTAINMENT = "--*"
    REFERENCE = "--o"
    ASSOCIATION = "-->"


@dataclass(frozen=True)
class Relationship:
    """A directed edge between two entities of the diagram.

    Service edges carry no cardinality.
    """

    source: str
    kind: RelationshipKind
    target: str
    cardinality: Cardinality | None = None

    def render(self) -> str:
        """Return the PlantUML line for this edge."""
        if self.cardinality is None:
            return f"{self.source} {self.kind.value} {self.target}"
        return f"{self.source} {self.kind.value} {self.cardinality.value} {self.target}"


class RelationshipSet:
    """Insertion-ordered set of relationship edges."""

    def __init__(self) -> None:
        self._edges: dict[Relationship, None] = {}

    def add(self, relationship: Relationship) -> bool:
        """Add *relationship* unless an identical edge exists; return True if added."""
        if relationship in self._edges:
            return False
        self._edges[relationship] = None
        return True

    def lines(self) -> list[str]:
        """Return the rendered edges in insertion order."""
        return [edge.render() for edge in self._edges]

    def __contains__(self, relationship: object) -> bool:
        return relationship in self._edges

    def __iter__(self) -> Iterator[Relationship]:
        return iter(self._edges)

    def __len__(self) -> int:
        return len(self._edges)


class RelationshipResolver:
    """Resolves field types against a :class:`TypeRegistry` and builds edges."""

    def __init__(self, registry: TypeRegistry, well_known_prefix: str = "google.protobuf.") -> None:
        self.registry = registry
        self.well_known_prefix = well_known_prefix

    def extract_field_type(self, field: FieldDef | None, parent_name: str) -> str:
        """Return the declared type of *field* (the value type for map fields).

        Raises:
            SchemaError: If the field is missing or declares no type.
        """
        if field is None:
            raise SchemaError(f"Field of '{parent_name}' cannot be empty")
        if not field.type:
            raise SchemaError(f"Field {field.name or 'unknown'} of '{parent_name}' has no type defined")
        return field.type

    def resolve_type_name(self, raw_type: str, parent_name: str) -> str:
        """Return the canonical entity name for *raw_type* as seen from *parent_name*.

        Unknown names are returned unchanged; they never produce an edge.
        """
        if not raw_type:
            raise SchemaError("Field type must be a non-empty string")
        if self.registry.is_known(raw_type):
            return raw_type
        if parent_name:
            nested_name = f"{parent_name}_{raw_type}"
            if self.registry.is_known(nested_name):
                return nested_name
        return raw_type

    def is_well_known_type(self, raw_type: str) -> bool:
        """Return True if *raw_type* lives in the reserved external namespace."""
        return bool(raw_type) and raw_type.lstrip(".").startswith(self.well_known_prefix)

    @staticmethod
    def is_optional_field(field: FieldDef) -> bool:
        """Return True for explicitly optional fields and members of a oneof group."""
        return field.optional or field.oneof is not None

    def get_cardinality(self, field: FieldDef | None) -> Cardinality:
        """Return the cardinality implied by the labels of *field*."""
        if field is None:
            return Cardinality.REQUIRED
        if field.is_map or field.repeated:
            return Cardinality.MULTIPLE
        if self.is_optional_field(field):
            return Cardinality.OPTIONAL
        return Cardinality.REQUIRED

    def get_relationship_type(self, resolved_type: str | None) -> RelationshipKind:
        """Return containment for messages, reference for enums.

        Names that cannot be classified fall back to containment.
        """
        if not resolved_type:
            return RelationshipKind.CONTAINMENT
        if self.registry.is_enum(resolved_type):
            return RelationshipKind.REFERENCE
        return RelationshipKind.CONTAINMENT

    def create_relationship(
        self,
        field: FieldDef,
        field_type: str,
        parent_name: str,
        relations: RelationshipSet,
    ) -> Relationship | None:
        """Record the edge from *parent_name* implied by *field*.

        Returns:
            The new edge, or None if the target is unknown or the edge
            already exists.
        """
        resolved = self.resolve_type_name(field_type, parent_name)
        if not self.registry.is_known(resolved):
            return None
        relationship = Relationship(
            source=parent_name,
            kind=self.get_relationship_type(resolved),
            target=resolved,
            cardinality=self.get_cardinality(field),
        )
        return relationship if relations.add(relationship) else None
