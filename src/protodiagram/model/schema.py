# Copyright 2026 ProtoDiagram Contributors
# SPDX-License-Identifier: Apache-2.0

"""Schema tree representations for parsed Protocol Buffer definitions."""

from __future__ import annotations

from typing import Annotated, Literal

from pydantic import BaseModel
from pydantic import Field as _Field

# ###############
# Public Interface
# ###############


class FieldDef(BaseModel):
    """A single field declared in a message.

    ``key_type`` is set only for map fields, in which case ``type`` holds the
    map value type.
    """

    name: str
    type: str
    number: int = 0
    repeated: bool = False
    optional: bool = False
    required: bool = False
    key_type: str | None = None
    oneof: str | None = None
    reserved: bool = False

    @property
    def is_map(self) -> bool:
        """Return True if the field is a ``map<K, V>`` field."""
        return self.key_type is not None


class OneofDef(BaseModel):
    """A mutual-exclusion group of sibling fields."""

    name: str
    fields: list[str] = _Field(default_factory=list)


class EnumValue(BaseModel):
    """A named integer value of an enumeration."""

    name: str
    number: int


class RpcDef(BaseModel):
    """A remote procedure declared in a service."""

    name: str
    request_type: str
    response_type: str
    client_streaming: bool = False
    server_streaming: bool = False


class EnumDef(BaseModel):
    """An enumeration definition."""

    kind: Literal["enum"] = "enum"
    name: str
    values: list[EnumValue] = _Field(default_factory=list)


class ServiceDef(BaseModel):
    """A service definition with its RPC signatures."""

    kind: Literal["service"] = "service"
    name: str
    rpcs: list[RpcDef] = _Field(default_factory=list)


class MessageDef(BaseModel):
    """A message definition with fields and optional nested definitions."""

    kind: Literal["message"] = "message"
    name: str
    fields: list[FieldDef] = _Field(default_factory=list)
    oneofs: list[OneofDef] = _Field(default_factory=list)
    nested: list[SchemaNode] = _Field(default_factory=list)
    reserved_names: list[str] = _Field(default_factory=list)
    reserved_numbers: list[tuple[int, int]] = _Field(default_factory=list)

    @property
    def nested_enums(self) -> list[EnumDef]:
        """Return the enumerations declared directly inside this message."""
        return [node for node in self.nested if isinstance(node, EnumDef)]


class NamespaceDef(BaseModel):
    """A package namespace level holding nested definitions."""

    kind: Literal["namespace"] = "namespace"
    name: str = ""
    nested: list[SchemaNode] = _Field(default_factory=list)

    def child_namespace(self, name: str) -> NamespaceDef | None:
        """Return the direct child namespace called *name*, if any."""
        for node in self.nested:
            if isinstance(node, NamespaceDef) and node.name == name:
                return node
        return None


# A node of the schema tree. The `kind` discriminator keeps the set of shapes
# closed: every consumer handles exactly these four.
SchemaNode = Annotated[
    NamespaceDef | MessageDef | EnumDef | ServiceDef,
    _Field(discriminator="kind"),
]

# Entity nodes, i.e. everything except namespaces.
EntityDef = MessageDef | EnumDef | ServiceDef


class ProtoFile(BaseModel):
    """Top-level model representing the parsed contents of a single .proto file."""

    syntax: str = "proto3"
    package: str | None = None
    imports: list[str] = _Field(default_factory=list)
    options: dict[str, str] = _Field(default_factory=dict)
    root: NamespaceDef = _Field(default_factory=NamespaceDef)


def has_direct_content(namespace: NamespaceDef | MessageDef) -> bool:
    """Return True if *namespace* directly declares a message, enum, or service."""
    return any(isinstance(node, MessageDef | EnumDef | ServiceDef) for node in namespace.nested)


# Resolve forward references in self-referential models.
MessageDef.model_rebuild()
NamespaceDef.model_rebuild()
ProtoFile.model_rebuild()
