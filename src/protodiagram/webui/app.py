# Copyright 2026 ProtoDiagram Contributors
# SPDX-License-Identifier: Apache-2.0

"""Dash-based web UI for interactive diagram previews."""

from dataclasses import dataclass

import dash
from dash import Input, Output, State, dcc, html

from protodiagram.api import DiagramGenerationError, ProtoDiagram
from protodiagram.config.settings import DiagramConfig

# ###############
# Public Interface
# ###############

APP_TITLE = "ProtoDiagram Viewer"


@dataclass(frozen=True)
class Preview:
    """What the viewer shows for one rendering request.

    Attributes:
        image_url: URL of the rendered diagram, empty when rendering failed.
        plantuml_code: The generated diagram text, empty when rendering failed.
        error: Error message, empty on success.
    """

    image_url: str = ""
    plantuml_code: str = ""
    error: str = ""


def render_preview(source: str | None, config: DiagramConfig | None = None) -> Preview:
    """Render *source* into the preview shown by the viewer.

    Errors are reported in the result rather than raised.
    """
    if not source or not source.strip():
        return Preview(error="Paste proto definitions to render a diagram.")
    try:
        result = ProtoDiagram(config).generate_diagram_url(source)
    except DiagramGenerationError as exc:
        return Preview(error=str(exc))
    return Preview(image_url=result.image_url, plantuml_code=result.plantuml_code)


def create_app(config: DiagramConfig | None = None) -> dash.Dash:
    """Create and configure the ProtoDiagram web UI application."""
    app = dash.Dash(
        __name__,
        title=APP_TITLE,
    )
    app.layout = _build_layout()
    _register_callbacks(app, config or DiagramConfig())
    return app


# ################
# Implementation
# ################

_SAMPLE_SOURCE = """syntax = "proto3";
package example;

message User {
  string name = 1;
  repeated Address addresses = 2;
}

message Address {
  string city = 1;
}
"""


def _build_layout() -> html.Div:
    """Build the application layout."""
    return html.Div(
        [
            html.H1(APP_TITLE),
            dcc.Textarea(
                id="proto-source",
                value=_SAMPLE_SOURCE,
                style={"width": "100%", "height": "16rem", "fontFamily": "monospace"},
            ),
            html.Button("Render", id="render-button", n_clicks=0),
            html.P(id="render-error", style={"color": "#b00020"}),
            html.Hr(),
            html.Img(id="diagram-image", style={"maxWidth": "100%"}),
            html.Pre(id="diagram-source", style={"background": "#f5f5f5", "padding": "1rem"}),
        ],
        style={"fontFamily": "sans-serif", "padding": "2rem"},
    )


def _register_callbacks(app: dash.Dash, config: DiagramConfig) -> None:
    @app.callback(
        Output("diagram-image", "src"),
        Output("diagram-source", "children"),
        Output("render-error", "children"),
        Input("render-button", "n_clicks"),
        State("proto-source", "value"),
    )
    def _on_render(n_clicks: int, source: str | None) -> tuple[str, str, str]:
        preview = render_preview(source, config)
        return preview.image_url, preview.plantuml_code, preview.error
