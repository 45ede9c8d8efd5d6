# Copyright 2026 ProtoDiagram Contributors
# SPDX-License-Identifier: Apache-2.0

"""Schema model for parsed Protocol Buffer definitions (messages, enums, services)."""

from protodiagram.model.schema import (
    EntityDef,
    EnumDef,
    EnumValue,
    FieldDef,
    MessageDef,
    NamespaceDef,
    OneofDef,
    ProtoFile,
    RpcDef,
    SchemaNode,
    ServiceDef,
    has_direct_content,
)

__all__ = [
    # Members
    "FieldDef",
    "OneofDef",
    "EnumValue",
    "RpcDef",
    # Tree nodes
    "NamespaceDef",
    "MessageDef",
    "EnumDef",
    "ServiceDef",
    "SchemaNode",
    "EntityDef",
    "ProtoFile",
    "has_direct_content",
]
