# Copyright 2026 ProtoDiagram Contributors
# SPDX-License-Identifier: Apache-2.0

"""Lexer and parser for .proto files."""

from protodiagram.parser.lexer import LexerError
from protodiagram.parser.parser import ParseError, parse

__all__ = [
    "parse",
    "ParseError",
    "LexerError",
]
