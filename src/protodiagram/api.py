# Copyright 2026 ProtoDiagram Contributors
# SPDX-License-Identifier: Apache-2.0

"""High-level interface: proto source in, PlantUML text and image URL out."""

from __future__ import annotations

import dataclasses
import re
from dataclasses import dataclass

from protodiagram.config.settings import IMAGE_TYPES, ConfigError, DiagramConfig
from protodiagram.parser.lexer import LexerError
from protodiagram.parser.parser import ParseError, parse
from protodiagram.views.encoder import EncodedDiagram, Encoding, EncodingError, deflate_raw, encode
from protodiagram.views.plantuml import DiagramError, generate_plantuml

# ###############
# Public Interface
# ###############


class ProtoContentError(Exception):
    """Raised when proto source is missing, empty, or clearly not a proto file."""


class DiagramGenerationError(Exception):
    """Raised when a diagram cannot be generated from proto source."""


@dataclass(frozen=True)
class DiagramResult:
    """The outcome of a successful diagram generation.

    Attributes:
        image_url: URL of the rendered diagram on the PlantUML server.
        plantuml_code: The generated diagram text.
        encoding: Encoding used for the URL payload.
    """

    image_url: str
    plantuml_code: str
    encoding: Encoding


def validate_proto_content(source: object) -> bool:
    """Check that *source* looks like proto definitions.

    Returns:
        True when the content passes the checks.

    Raises:
        ProtoContentError: If the content is missing, not a string, blank,
            or contains no proto keyword.
    """
    if source is None:
        raise ProtoContentError("Proto content cannot be None")
    if not isinstance(source, str):
        raise ProtoContentError(f"Proto content must be a string, received {type(source).__name__}")
    if not source.strip():
        raise ProtoContentError("Proto content cannot be empty or contain only whitespace")
    if not _PROTO_KEYWORDS.search(source):
        raise ProtoContentError("Proto content does not appear to contain valid protobuf syntax")
    return True


def build_image_url(encoded: EncodedDiagram, server_url: str, image_type: str) -> str:
    """Return the server URL that renders *encoded* as *image_type*."""
    base = server_url if server_url.endswith("/") else f"{server_url}/"
    return f"{base}{image_type}/{encoded.url_token}"


class ProtoDiagram:
    """Converts proto source into PlantUML diagrams and rendering URLs.

    The instance only holds configuration; every call parses and generates
    from scratch.
    """

    def __init__(self, config: DiagramConfig | None = None) -> None:
        self._config = config or DiagramConfig()

    @property
    def config(self) -> DiagramConfig:
        """The active configuration."""
        return self._config

    def update_config(self, **changes: object) -> None:
        """Replace selected configuration values, e.g. ``update_config(image_type="svg")``.

        Raises:
            ConfigError: On unknown settings or an unsupported image type.
        """
        try:
            config = dataclasses.replace(self._config, **changes)  # type: ignore[arg-type]
        except TypeError as exc:
            raise ConfigError(f"Invalid configuration update: {exc}") from exc
        _check_image_type(config.image_type)
        if not isinstance(config.server_url, str) or not config.server_url:
            raise ConfigError("server_url must be a non-empty string")
        self._config = config

    def generate_plantuml_code(self, source: str) -> str:
        """Parse *source* and return the PlantUML diagram text.

        Raises:
            DiagramGenerationError: If the content is invalid, does not parse,
                or cannot be turned into a diagram.
        """
        try:
            validate_proto_content(source)
            proto_file = parse(source)
            return generate_plantuml(proto_file.root, proto_file.package, self._config)
        except (ProtoContentError, LexerError, ParseError, DiagramError) as exc:
            raise DiagramGenerationError(f"Failed to generate PlantUML code: {exc}") from exc

    def generate_diagram_url(
        self,
        source: str,
        image_type: str | None = None,
        server_url: str | None = None,
    ) -> DiagramResult:
        """Generate the diagram for *source* and the URL that renders it.

        Args:
            source: Proto definitions.
            image_type: Overrides the configured image type.
            server_url: Overrides the configured PlantUML server.

        Raises:
            DiagramGenerationError: If generation or encoding fails.
        """
        plantuml_code = self.generate_plantuml_code(source)
        image_type = image_type or self._config.image_type
        server_url = server_url or self._config.server_url
        try:
            _check_image_type(image_type)
            encoded = encode(plantuml_code, deflate_raw if self._config.compression else None)
        except (ConfigError, EncodingError) as exc:
            raise DiagramGenerationError(f"Failed to generate diagram: {exc}") from exc
        return DiagramResult(
            image_url=build_image_url(encoded, server_url, image_type),
            plantuml_code=plantuml_code,
            encoding=encoded.encoding,
        )


def generate_diagram(source: str, config: DiagramConfig | None = None) -> DiagramResult:
    """Generate a diagram URL for *source* with a one-off :class:`ProtoDiagram`."""
    return ProtoDiagram(config).generate_diagram_url(source)


# ################
# Implementation
# ################

_PROTO_KEYWORDS = re.compile(r"\b(syntax|package|message|enum|service|rpc|import|option)\b")


def _check_image_type(image_type: str) -> None:
    if image_type not in IMAGE_TYPES:
        raise ConfigError(f"Unsupported image type {image_type!r}; expected one of {', '.join(IMAGE_TYPES)}")
