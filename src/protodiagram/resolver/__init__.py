# Copyright 2026 ProtoDiagram Contributors
# SPDX-License-Identifier: Apache-2.0

"""Entity classification and relationship resolution for schema trees."""

from protodiagram.resolver.classifier import SchemaError, TypeRegistry, classify, composite_enum_name
from protodiagram.resolver.relationships import (
    Cardinality,
    Relationship,
    RelationshipKind,
    RelationshipResolver,
    RelationshipSet,
)

__all__ = [
    "SchemaError",
    "TypeRegistry",
    "classify",
    "composite_enum_name",
    "Cardinality",
    "Relationship",
    "RelationshipKind",
    "RelationshipResolver",
    "RelationshipSet",
]
