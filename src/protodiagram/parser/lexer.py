# Copyright 2026 ProtoDiagram Contributors
# SPDX-License-Identifier: Apache-2.0

"""Lexical scanner for .proto files.

Splits proto source into keyword, identifier, literal and punctuation tokens.
Whitespace and C-style comments never reach the parser.
"""

import enum
from collections.abc import Callable, Iterator
from dataclasses import dataclass

# ###############
# Public Interface
# ###############


class TokenType(enum.Enum):
    """Kinds of tokens in proto source."""

    # Keywords
    SYNTAX = "syntax"
    EDITION = "edition"
    PACKAGE = "package"
    IMPORT = "import"
    PUBLIC = "public"
    WEAK = "weak"
    OPTION = "option"
    MESSAGE = "message"
    ENUM = "enum"
    SERVICE = "service"
    RPC = "rpc"
    RETURNS = "returns"
    STREAM = "stream"
    REPEATED = "repeated"
    OPTIONAL = "optional"
    REQUIRED = "required"
    MAP = "map"
    ONEOF = "oneof"
    RESERVED = "reserved"
    EXTENSIONS = "extensions"
    EXTEND = "extend"
    GROUP = "group"
    TO = "to"
    MAX = "max"

    # Punctuation
    LBRACE = "{"
    RBRACE = "}"
    LPAREN = "("
    RPAREN = ")"
    LANGLE = "<"
    RANGLE = ">"
    LBRACKET = "["
    RBRACKET = "]"
    SEMICOLON = ";"
    COMMA = ","
    DOT = "."
    COLON = ":"
    EQUALS = "="
    MINUS = "-"
    PLUS = "+"

    # Literals
    STRING = "STRING"
    INTEGER = "INTEGER"
    FLOAT = "FLOAT"

    IDENTIFIER = "IDENTIFIER"
    EOF = "EOF"


@dataclass(frozen=True)
class Token:
    """One token of proto source.

    Attributes:
        type: Token kind.
        value: Source text of the token; for strings, the unquoted and
            unescaped content.
        line: Line of the first character, starting at 1.
        column: Column of the first character, starting at 1.
    """

    type: TokenType
    value: str
    line: int
    column: int


class LexerError(Exception):
    """Raised on characters or literals that are not valid proto syntax.

    Attributes:
        line: Line of the offending input, starting at 1.
        column: Column of the offending input, starting at 1.
    """

    def __init__(self, message: str, line: int, column: int) -> None:
        super().__init__(f"Line {line}, column {column}: {message}")
        self.line = line
        self.column = column


def tokenize(source: str) -> list[Token]:
    """Split proto *source* into tokens.

    Returns:
        The tokens in source order, terminated by exactly one EOF token.

    Raises:
        LexerError: On a stray character, a malformed number, a bad escape,
            or an unterminated string or block comment.
    """
    return _Lexer(source).run()


# ################
# Implementation
# ################

# Keyword members are exactly those whose value is a lowercase word.
_KEYWORDS: dict[str, TokenType] = {
    member.value: member for member in TokenType if member.value.isalpha() and member.value.islower()
}

_PUNCTUATION: dict[str, TokenType] = {member.value: member for member in TokenType if len(member.value) == 1}

_ESCAPES: dict[str, str] = {
    "n": "\n",
    "t": "\t",
    "r": "\r",
    "0": "\0",
    "\\": "\\",
    '"': '"',
    "'": "'",
}

_HEX_DIGITS = frozenset("0123456789abcdefABCDEF")


def _is_digit(ch: str) -> bool:
    return "0" <= ch <= "9"


def _is_ident_char(ch: str) -> bool:
    return ch.isalnum() or ch == "_"


class _Lexer:
    """Single-pass scanner; columns derive from the offset of the current line start."""

    def __init__(self, source: str) -> None:
        self._text = source
        self._index = 0
        self._line = 1
        self._line_start = 0

    def run(self) -> list[Token]:
        tokens = list(self._scan())
        tokens.append(Token(TokenType.EOF, "", self._line, self._column()))
        return tokens

    # ------------------------------------------------------------------
    # Cursor
    # ------------------------------------------------------------------

    def _column(self) -> int:
        return self._index - self._line_start + 1

    def _char(self, offset: int = 0) -> str:
        """Return the character *offset* places ahead, or '' past the end."""
        index = self._index + offset
        return self._text[index] if index < len(self._text) else ""

    def _move_to(self, index: int) -> None:
        """Advance the cursor to *index*, keeping line bookkeeping for skipped newlines."""
        newline = self._text.rfind("\n", self._index, index)
        if newline != -1:
            self._line += self._text.count("\n", self._index, index)
            self._line_start = newline + 1
        self._index = index

    def _take_while(self, predicate: Callable[[str], bool]) -> str:
        start = self._index
        end = start
        while end < len(self._text) and predicate(self._text[end]):
            end += 1
        self._move_to(end)
        return self._text[start:end]

    def _error(self, message: str, line: int | None = None, column: int | None = None) -> LexerError:
        return LexerError(message, line or self._line, column or self._column())

    # ------------------------------------------------------------------
    # Trivia
    # ------------------------------------------------------------------

    def _skip_trivia(self) -> None:
        """Move past whitespace, ``//`` comments and ``/* */`` comments."""
        while True:
            self._take_while(str.isspace)
            if self._char() != "/" or self._char(1) not in ("/", "*"):
                return
            if self._char(1) == "/":
                end = self._text.find("\n", self._index)
                self._move_to(len(self._text) if end == -1 else end)
            else:
                line, column = self._line, self._column()
                end = self._text.find("*/", self._index + 2)
                if end == -1:
                    raise self._error("Unterminated block comment", line, column)
                self._move_to(end + 2)

    # ------------------------------------------------------------------
    # Tokens
    # ------------------------------------------------------------------

    def _scan(self) -> Iterator[Token]:
        self._skip_trivia()
        while self._index < len(self._text):
            yield self._next_token()
            self._skip_trivia()

    def _next_token(self) -> Token:
        line, column = self._line, self._column()
        ch = self._char()
        if _is_digit(ch) or (ch == "." and _is_digit(self._char(1))):
            token_type, value = self._number(line, column)
        elif ch in ('"', "'"):
            token_type, value = TokenType.STRING, self._string(line, column)
        elif ch.isalpha() or ch == "_":
            value = self._take_while(_is_ident_char)
            token_type = _KEYWORDS.get(value, TokenType.IDENTIFIER)
        elif ch in _PUNCTUATION:
            self._move_to(self._index + 1)
            token_type, value = _PUNCTUATION[ch], ch
        else:
            raise self._error(f"Unexpected character: {ch!r}")
        return Token(token_type, value, line, column)

    def _string(self, line: int, column: int) -> str:
        """Read a quoted literal and return its unescaped content."""
        quote = self._char()
        self._move_to(self._index + 1)
        chars: list[str] = []
        while True:
            ch = self._char()
            if ch in ("", "\n"):
                raise self._error("Unterminated string literal", line, column)
            if ch == quote:
                self._move_to(self._index + 1)
                return "".join(chars)
            if ch == "\\":
                escape = self._char(1)
                if escape == "":
                    raise self._error("Unterminated string literal", line, column)
                if escape not in _ESCAPES:
                    self._move_to(self._index + 1)
                    raise self._error(f"Invalid escape sequence: '\\{escape}'")
                chars.append(_ESCAPES[escape])
                self._move_to(self._index + 2)
            else:
                chars.append(ch)
                self._move_to(self._index + 1)

    def _number(self, line: int, column: int) -> tuple[TokenType, str]:
        """Read a decimal, octal or hex integer, or a float with optional exponent.

        Signs are separate tokens; the parser applies them.
        """
        start = self._index
        if self._char() == "0" and self._char(1) in ("x", "X"):
            self._move_to(self._index + 2)
            if not self._take_while(_HEX_DIGITS.__contains__):
                raise self._error("Invalid hexadecimal literal", line, column)
            return TokenType.INTEGER, self._text[start : self._index]

        token_type = TokenType.INTEGER
        self._take_while(_is_digit)
        if self._char() == "." and self._char(1) != ".":
            token_type = TokenType.FLOAT
            self._move_to(self._index + 1)
            self._take_while(_is_digit)
        if self._char() in ("e", "E"):
            token_type = TokenType.FLOAT
            self._move_to(self._index + 1)
            if self._char() in ("+", "-"):
                self._move_to(self._index + 1)
            if not self._take_while(_is_digit):
                raise self._error("Invalid exponent in float literal", line, column)

        value = self._text[start : self._index]
        if _is_ident_char(self._char()):
            raise self._error(f"Invalid numeric literal: {value + self._char()!r}", line, column)
        return token_type, value
