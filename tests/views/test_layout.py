# Copyright 2026 ProtoDiagram Contributors
# SPDX-License-Identifier: Apache-2.0

"""Tests for the package layout heuristics."""

import pytest

from protodiagram.config.settings import LayoutConfig
from protodiagram.model.schema import MessageDef, NamespaceDef
from protodiagram.views.layout import (
    analyze_package_layout,
    count_content_levels,
    find_content_namespace,
    package_display_name,
    should_wrap,
)

# ###############
# Test Helpers
# ###############


def _schema(package: str, message: str = "User") -> NamespaceDef:
    """Build the namespace chain for *package* with one message at the innermost level."""
    leaf = NamespaceDef(name=package.split(".")[-1], nested=[MessageDef(name=message)])
    node = leaf
    for segment in reversed(package.split(".")[:-1]):
        node = NamespaceDef(name=segment, nested=[node])
    return NamespaceDef(nested=[node])


# ###############
# Content Namespace
# ###############


class TestContentNamespace:
    def test_deepest_level_with_content(self) -> None:
        root = _schema("com.example.api")
        found = find_content_namespace(root, ["com", "example", "api"])
        assert found.name == "api"

    def test_empty_intermediate_levels_are_skipped(self) -> None:
        api = NamespaceDef(name="api")
        example = NamespaceDef(name="example", nested=[MessageDef(name="Base"), api])
        root = NamespaceDef(nested=[NamespaceDef(name="com", nested=[example])])
        assert find_content_namespace(root, ["com", "example", "api"]) is example

    def test_falls_back_to_root(self) -> None:
        root = NamespaceDef(nested=[MessageDef(name="User")])
        assert find_content_namespace(root, ["missing", "path"]) is root

    def test_content_levels(self) -> None:
        inner = NamespaceDef(name="b", nested=[MessageDef(name="B")])
        outer = NamespaceDef(name="a", nested=[MessageDef(name="A"), inner])
        assert count_content_levels(NamespaceDef(nested=[outer])) == 2
        assert count_content_levels(_schema("a.b.c")) == 1
        assert count_content_levels(NamespaceDef()) == 0


# ###############
# Wrap Decision
# ###############


class TestShouldWrap:
    @pytest.mark.parametrize(
        ("package", "expected"),
        [
            ("a", False),
            ("a.b", False),
            ("a.b.c", True),
            ("a.b.c.d.e.f", True),
            ("a.b.c.d.e.f.g", True),
            ("a.b.c.d.e.f.g.h", True),
            ("a.b.c.d.e.f.g.h.i", False),
            ("acme.api", True),
            ("a.b.c.d.e.f.g.h.i.service", True),
            ("Acme.API", True),
        ],
    )
    def test_single_content_level(self, package: str, expected: bool) -> None:
        assert should_wrap(package.split("."), 1, LayoutConfig()) is expected

    def test_multiple_content_levels_always_wrap(self) -> None:
        assert should_wrap(["a"], 2, LayoutConfig())

    def test_no_content_never_wraps(self) -> None:
        assert not should_wrap(["com", "example", "api"], 0, LayoutConfig())

    def test_thresholds_are_configurable(self) -> None:
        config = LayoutConfig(meaningful_suffixes=("v1",), min_wrap_segments=2)
        assert should_wrap(["acme", "v1"], 1, config)
        assert should_wrap(["acme", "orders"], 1, config)
        assert not should_wrap(["api"], 1, config)


# ###############
# Display Name
# ###############


class TestDisplayName:
    @pytest.mark.parametrize(
        ("package", "expected"),
        [
            ("com.example.api", "com.example.api"),
            ("a.b.c.d.e.f", "a.b.c.d.e.f"),
            ("a.b.c.d.e.f.api", "d.e.f.api"),
            ("a.b.c.d.e.f.g", "a.b.c.d.e.f.g"),
            ("a.b.c.d.e.f.g.h.i", "a...g.h.i"),
            ("a.b.c.d.e.f.g.h.i.model", "g.h.i.model"),
        ],
    )
    def test_display_name(self, package: str, expected: str) -> None:
        assert package_display_name(package.split("."), LayoutConfig()) == expected


# ###############
# Full Analysis
# ###############


class TestAnalyzePackageLayout:
    def test_meaningful_three_segment_package(self) -> None:
        layout = analyze_package_layout(_schema("com.example.api"), "com.example.api")
        assert layout.wrap
        assert layout.display_name == "com.example.api"
        assert layout.content_namespace.name == "api"
        assert layout.content_levels == 1

    def test_single_segment_package(self) -> None:
        layout = analyze_package_layout(_schema("a"), "a")
        assert not layout.wrap
        assert layout.display_name == ""

    @pytest.mark.parametrize("package", [None, "", "  "])
    def test_missing_package(self, package: str | None) -> None:
        root = NamespaceDef(nested=[MessageDef(name="User")])
        layout = analyze_package_layout(root, package)
        assert not layout.wrap
        assert layout.content_namespace is root

    def test_empty_schema_with_package(self) -> None:
        layout = analyze_package_layout(NamespaceDef(), "com.example.api")
        assert not layout.wrap
        assert layout.content_levels == 0

    def test_custom_config(self) -> None:
        config = LayoutConfig(meaningful_suffixes=())
        layout = analyze_package_layout(_schema("acme.api"), "acme.api", config)
        assert not layout.wrap
