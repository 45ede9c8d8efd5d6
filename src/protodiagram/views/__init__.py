# Copyright 2026 ProtoDiagram Contributors
# SPDX-License-Identifier: Apache-2.0

"""Diagram views: package layout, PlantUML generation, and URL encoding."""

from protodiagram.views.encoder import (
    HEX_PREFIX,
    EncodedDiagram,
    Encoding,
    EncodingError,
    decode,
    encode,
)
from protodiagram.views.layout import PackageLayout, analyze_package_layout
from protodiagram.views.plantuml import DiagramError, generate_plantuml, to_camel_case

__all__ = [
    "HEX_PREFIX",
    "EncodedDiagram",
    "Encoding",
    "EncodingError",
    "decode",
    "encode",
    "PackageLayout",
    "analyze_package_layout",
    "DiagramError",
    "generate_plantuml",
    "to_camel_case",
]
