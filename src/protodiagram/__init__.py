# Copyright 2026 ProtoDiagram Contributors
# SPDX-License-Identifier: Apache-2.0

"""Protocol Buffer definitions to PlantUML diagrams and rendering URLs."""

from protodiagram.api import (
    DiagramGenerationError,
    DiagramResult,
    ProtoContentError,
    ProtoDiagram,
    build_image_url,
    generate_diagram,
    validate_proto_content,
)
from protodiagram.config.settings import DiagramConfig, LayoutConfig

__all__ = [
    "DiagramConfig",
    "DiagramGenerationError",
    "DiagramResult",
    "LayoutConfig",
    "ProtoContentError",
    "ProtoDiagram",
    "build_image_url",
    "generate_diagram",
    "validate_proto_content",
]
