# Copyright 2026 ProtoDiagram Contributors
# SPDX-License-Identifier: Apache-2.0

"""Tests for the ProtoDiagram web UI application."""

import dash

from protodiagram.config.settings import DiagramConfig
from protodiagram.webui.app import APP_TITLE, create_app, render_preview

# ###############
# Public Interface
# ###############


def test_create_app_returns_dash_instance() -> None:
    """create_app returns a Dash application instance."""
    app = create_app()
    assert isinstance(app, dash.Dash)


def test_create_app_has_layout() -> None:
    """create_app returns an app with a non-None layout."""
    app = create_app(config=DiagramConfig())
    assert app.layout is not None


def test_create_app_title() -> None:
    """create_app sets the application title."""
    app = create_app()
    assert app.title == APP_TITLE


def test_render_preview_success() -> None:
    """A valid proto source yields an image URL and the diagram text."""
    preview = render_preview("message User { string name = 1; }")
    assert preview.error == ""
    assert preview.image_url.startswith("https://www.plantuml.com/plantuml/png/")
    assert "object User {" in preview.plantuml_code


def test_render_preview_uses_config() -> None:
    """The configured server and image type shape the URL."""
    config = DiagramConfig(server_url="http://localhost:8080", image_type="svg")
    preview = render_preview("message User { string name = 1; }", config)
    assert preview.image_url.startswith("http://localhost:8080/svg/")


def test_render_preview_empty_source() -> None:
    """An empty text area asks for input instead of failing."""
    preview = render_preview("   ")
    assert preview.image_url == ""
    assert "Paste proto definitions" in preview.error


def test_render_preview_reports_errors() -> None:
    """Generation failures are reported as an error message."""
    preview = render_preview("message User { string name = }")
    assert preview.image_url == ""
    assert preview.plantuml_code == ""
    assert preview.error.startswith("Failed to generate PlantUML code:")
