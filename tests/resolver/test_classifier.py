# Copyright 2026 ProtoDiagram Contributors
# SPDX-License-Identifier: Apache-2.0

"""Tests for entity classification."""

import pytest

from protodiagram.model.schema import EnumDef, EnumValue, FieldDef, MessageDef, NamespaceDef, ServiceDef
from protodiagram.resolver.classifier import SchemaError, TypeRegistry, classify, composite_enum_name

# ###############
# Test Helpers
# ###############


def _schema() -> NamespaceDef:
    """Build ``pkg`` with a message nesting a message and two enums, a top-level enum and a service."""
    inner = MessageDef(
        name="Inner",
        nested=[EnumDef(name="Depth", values=[EnumValue(name="SHALLOW", number=0)])],
    )
    user = MessageDef(
        name="User",
        fields=[FieldDef(name="status", type="Status", number=1)],
        nested=[inner, EnumDef(name="Status", values=[EnumValue(name="ACTIVE", number=0)])],
    )
    return NamespaceDef(
        nested=[
            NamespaceDef(
                name="pkg",
                nested=[
                    user,
                    EnumDef(name="Color"),
                    ServiceDef(name="Users"),
                ],
            )
        ]
    )


# ###############
# Classification
# ###############


class TestClassify:
    def test_messages_are_known_but_not_enums(self) -> None:
        registry = classify(_schema())
        assert registry.is_message("User")
        assert registry.is_message("Inner")
        assert not registry.is_enum("User")

    def test_top_level_enum(self) -> None:
        registry = classify(_schema())
        assert registry.is_enum("Color")
        assert "Color" in registry.known_types
        assert "_Color" not in registry.known_types

    def test_nested_enum_registered_under_both_names(self) -> None:
        registry = classify(_schema())
        assert registry.is_enum("Status")
        assert registry.is_enum("User_Status")
        assert registry.is_known("User_Status")

    def test_deeply_nested_enum_uses_direct_parent(self) -> None:
        registry = classify(_schema())
        assert registry.is_enum("Depth")
        assert registry.is_enum("Inner_Depth")
        assert not registry.is_known("User_Depth")

    def test_services_are_kept_apart(self) -> None:
        registry = classify(_schema())
        assert registry.service_types == {"Users"}
        assert not registry.is_known("Users")

    def test_empty_root(self) -> None:
        registry = classify(NamespaceDef())
        assert registry == TypeRegistry()

    def test_each_call_returns_a_fresh_registry(self) -> None:
        root = _schema()
        first = classify(root)
        first.known_types.add("Injected")
        assert not classify(root).is_known("Injected")


# ###############
# Error Handling
# ###############


class TestClassifyErrors:
    def test_missing_root(self) -> None:
        with pytest.raises(SchemaError, match="Root namespace is required"):
            classify(None)

    def test_unnamed_message_reports_location(self) -> None:
        root = NamespaceDef(nested=[NamespaceDef(name="pkg", nested=[MessageDef(name="A"), MessageDef(name="")])])
        with pytest.raises(SchemaError, match=r"Message at '<root>\.pkg\[1\]' has no name"):
            classify(root)

    def test_unnamed_nested_enum(self) -> None:
        root = NamespaceDef(nested=[MessageDef(name="A", nested=[EnumDef(name="")])])
        with pytest.raises(SchemaError, match=r"Enum at '<root>\.A\[0\]' has no name"):
            classify(root)


def test_composite_enum_name() -> None:
    """Nested enums get a Parent_Enum alias; top-level enums keep their name."""
    assert composite_enum_name("Status", "User") == "User_Status"
    assert composite_enum_name("Status", "") == "Status"
