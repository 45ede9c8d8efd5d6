# Copyright 2026 ProtoDiagram Contributors
# SPDX-License-Identifier: Apache-2.0

"""Configuration for diagram generation and rendering endpoints."""

from protodiagram.config.settings import (
    CONFIG_FILE_NAME,
    DEFAULT_MEANINGFUL_SUFFIXES,
    DEFAULT_SERVER_URL,
    IMAGE_TYPES,
    ConfigError,
    DiagramConfig,
    LayoutConfig,
    load_config,
    parse_config,
)

__all__ = [
    "CONFIG_FILE_NAME",
    "DEFAULT_MEANINGFUL_SUFFIXES",
    "DEFAULT_SERVER_URL",
    "IMAGE_TYPES",
    "ConfigError",
    "DiagramConfig",
    "LayoutConfig",
    "load_config",
    "parse_config",
]
