# Copyright 2026 ProtoDiagram Contributors
# SPDX-License-Identifier: Apache-2.0

"""Tests for the proto lexical scanner."""

import pytest

from protodiagram.parser.lexer import LexerError, Token, TokenType, tokenize

# ###############
# Test Helpers
# ###############


def _tokens_no_eof(source: str) -> list[Token]:
    """Return all tokens except the terminal EOF token."""
    result = tokenize(source)
    assert result[-1].type == TokenType.EOF
    return result[:-1]


def _types(source: str) -> list[TokenType]:
    """Return the token types for all tokens except EOF."""
    return [tok.type for tok in _tokens_no_eof(source)]


def _values(source: str) -> list[str]:
    """Return the token values for all tokens except EOF."""
    return [tok.value for tok in _tokens_no_eof(source)]


# ###############
# EOF Handling
# ###############


class TestEof:
    def test_empty_string_produces_eof(self) -> None:
        tokens = tokenize("")
        assert len(tokens) == 1
        assert tokens[0].type == TokenType.EOF
        assert tokens[0].line == 1
        assert tokens[0].column == 1

    def test_whitespace_only_produces_eof(self) -> None:
        tokens = tokenize("   \t\n  ")
        assert [tok.type for tok in tokens] == [TokenType.EOF]


# ###############
# Keywords
# ###############


class TestKeywords:
    @pytest.mark.parametrize(
        ("source", "expected_type"),
        [
            ("syntax", TokenType.SYNTAX),
            ("package", TokenType.PACKAGE),
            ("import", TokenType.IMPORT),
            ("option", TokenType.OPTION),
            ("message", TokenType.MESSAGE),
            ("enum", TokenType.ENUM),
            ("service", TokenType.SERVICE),
            ("rpc", TokenType.RPC),
            ("returns", TokenType.RETURNS),
            ("stream", TokenType.STREAM),
            ("repeated", TokenType.REPEATED),
            ("optional", TokenType.OPTIONAL),
            ("map", TokenType.MAP),
            ("oneof", TokenType.ONEOF),
            ("reserved", TokenType.RESERVED),
            ("to", TokenType.TO),
            ("max", TokenType.MAX),
        ],
    )
    def test_keyword(self, source: str, expected_type: TokenType) -> None:
        assert _types(source) == [expected_type]

    def test_keyword_prefix_is_identifier(self) -> None:
        assert _types("messages") == [TokenType.IDENTIFIER]

    def test_keywords_are_case_sensitive(self) -> None:
        assert _types("Message") == [TokenType.IDENTIFIER]


# ###############
# Identifiers and Symbols
# ###############


class TestIdentifiersAndSymbols:
    def test_identifier_with_underscores_and_digits(self) -> None:
        assert _values("_user_id2") == ["_user_id2"]

    def test_qualified_name_is_split_on_dots(self) -> None:
        assert _types("google.protobuf.Timestamp") == [
            TokenType.IDENTIFIER,
            TokenType.DOT,
            TokenType.IDENTIFIER,
            TokenType.DOT,
            TokenType.IDENTIFIER,
        ]

    def test_field_declaration(self) -> None:
        assert _types("map<string, int32> tags = 3;") == [
            TokenType.MAP,
            TokenType.LANGLE,
            TokenType.IDENTIFIER,
            TokenType.COMMA,
            TokenType.IDENTIFIER,
            TokenType.RANGLE,
            TokenType.IDENTIFIER,
            TokenType.EQUALS,
            TokenType.INTEGER,
            TokenType.SEMICOLON,
        ]

    def test_brackets_and_parentheses(self) -> None:
        assert _types("{}()[]:+-") == [
            TokenType.LBRACE,
            TokenType.RBRACE,
            TokenType.LPAREN,
            TokenType.RPAREN,
            TokenType.LBRACKET,
            TokenType.RBRACKET,
            TokenType.COLON,
            TokenType.PLUS,
            TokenType.MINUS,
        ]


# ###############
# String Literals
# ###############


class TestStringLiterals:
    def test_double_quoted(self) -> None:
        tokens = _tokens_no_eof('"proto3"')
        assert tokens[0].type == TokenType.STRING
        assert tokens[0].value == "proto3"

    def test_single_quoted(self) -> None:
        assert _values("'google/protobuf/any.proto'") == ["google/protobuf/any.proto"]

    def test_other_quote_inside_string(self) -> None:
        assert _values("\"it's\"") == ["it's"]

    def test_escape_sequences(self) -> None:
        assert _values(r'"a\tb\n\"c\""') == ['a\tb\n"c"']

    def test_unterminated_string(self) -> None:
        with pytest.raises(LexerError, match="Unterminated string literal"):
            tokenize('"proto3')

    def test_newline_in_string(self) -> None:
        with pytest.raises(LexerError, match="Unterminated string literal"):
            tokenize('"proto\n3"')

    def test_invalid_escape(self) -> None:
        with pytest.raises(LexerError, match="Invalid escape sequence"):
            tokenize(r'"\q"')


# ###############
# Number Literals
# ###############


class TestNumberLiterals:
    @pytest.mark.parametrize(
        ("source", "expected_type"),
        [
            ("42", TokenType.INTEGER),
            ("0x1F", TokenType.INTEGER),
            ("017", TokenType.INTEGER),
            ("3.14", TokenType.FLOAT),
            (".5", TokenType.FLOAT),
            ("1e10", TokenType.FLOAT),
            ("2.5E-3", TokenType.FLOAT),
        ],
    )
    def test_number(self, source: str, expected_type: TokenType) -> None:
        tokens = _tokens_no_eof(source)
        assert len(tokens) == 1
        assert tokens[0].type == expected_type
        assert tokens[0].value == source

    def test_negative_number_is_sign_then_literal(self) -> None:
        assert _types("-1") == [TokenType.MINUS, TokenType.INTEGER]

    def test_invalid_hex_literal(self) -> None:
        with pytest.raises(LexerError, match="Invalid hexadecimal literal"):
            tokenize("0xZ")

    def test_invalid_exponent(self) -> None:
        with pytest.raises(LexerError, match="Invalid exponent"):
            tokenize("1e+")

    def test_number_followed_by_letters(self) -> None:
        with pytest.raises(LexerError, match="Invalid numeric literal"):
            tokenize("12ab")


# ###############
# Comments
# ###############


class TestComments:
    def test_line_comment_is_skipped(self) -> None:
        assert _values("message // the user\nUser") == ["message", "User"]

    def test_block_comment_is_skipped(self) -> None:
        assert _values("message /* multi\nline */ User") == ["message", "User"]

    def test_comment_at_end_of_input(self) -> None:
        assert _values("User // trailing") == ["User"]

    def test_unterminated_block_comment(self) -> None:
        with pytest.raises(LexerError, match="Unterminated block comment") as exc_info:
            tokenize("a /* never closed")
        assert exc_info.value.line == 1
        assert exc_info.value.column == 3


# ###############
# Source Locations
# ###############


class TestSourceLocations:
    def test_line_and_column_tracking(self) -> None:
        tokens = _tokens_no_eof("message User {\n  string name = 1;\n}")
        name = next(tok for tok in tokens if tok.value == "name")
        assert (name.line, name.column) == (2, 10)
        closing = tokens[-1]
        assert closing.type == TokenType.RBRACE
        assert (closing.line, closing.column) == (3, 1)

    def test_unexpected_character_reports_location(self) -> None:
        with pytest.raises(LexerError) as exc_info:
            tokenize("message User {\n  @\n}")
        assert exc_info.value.line == 2
        assert exc_info.value.column == 3
        assert "Unexpected character" in str(exc_info.value)
