# Copyright 2026 ProtoDiagram Contributors
# SPDX-License-Identifier: Apache-2.0

"""Recursive-descent parser for .proto files.

Converts a token stream produced by the lexer into a ProtoFile schema tree.
Declarations are attached to the innermost namespace of the file's package
path, so ``package a.b;`` yields ``root -> a -> b``.
"""

from protodiagram.model.schema import (
    EnumDef,
    EnumValue,
    FieldDef,
    MessageDef,
    NamespaceDef,
    OneofDef,
    ProtoFile,
    RpcDef,
    ServiceDef,
)
from protodiagram.parser.lexer import Token, TokenType, tokenize

# ###############
# Public Interface
# ###############


class ParseError(Exception):
    """Raised when proto tokens do not form a valid declaration.

    Attributes:
        line: Line of the offending token, starting at 1.
        column: Column of the offending token, starting at 1.
    """

    def __init__(self, message: str, line: int, column: int) -> None:
        super().__init__(f"Line {line}, column {column}: {message}")
        self.line = line
        self.column = column


def parse(source: str) -> ProtoFile:
    """Parse proto source text into a ProtoFile schema tree.

    Args:
        source: The full text of a .proto file.

    Returns:
        A ProtoFile instance representing the parsed definitions.

    Raises:
        LexerError: If the source cannot be split into tokens.
        ParseError: If the tokens do not form valid proto declarations.
    """
    tokens = tokenize(source)
    return _Parser(tokens).parse()


# ################
# Implementation
# ################

_KEYWORD_TYPES: frozenset[TokenType] = frozenset(
    {
        TokenType.SYNTAX,
        TokenType.EDITION,
        TokenType.PACKAGE,
        TokenType.IMPORT,
        TokenType.PUBLIC,
        TokenType.WEAK,
        TokenType.OPTION,
        TokenType.MESSAGE,
        TokenType.ENUM,
        TokenType.SERVICE,
        TokenType.RPC,
        TokenType.RETURNS,
        TokenType.STREAM,
        TokenType.REPEATED,
        TokenType.OPTIONAL,
        TokenType.REQUIRED,
        TokenType.MAP,
        TokenType.ONEOF,
        TokenType.RESERVED,
        TokenType.EXTENSIONS,
        TokenType.EXTEND,
        TokenType.GROUP,
        TokenType.TO,
        TokenType.MAX,
    }
)

_LABELS: frozenset[TokenType] = frozenset({TokenType.REPEATED, TokenType.OPTIONAL, TokenType.REQUIRED})

_MAX_FIELD_NUMBER = 536_870_911


class _Parser:
    """Recursive-descent parser for proto token streams."""

    def __init__(self, tokens: list[Token]) -> None:
        self._tokens = tokens
        self._pos = 0

    def parse(self) -> ProtoFile:
        """Parse the full token stream and return a ProtoFile."""
        result = ProtoFile()
        # Definitions seen before the package statement are re-homed once it appears.
        pending: list[MessageDef | EnumDef | ServiceDef] = []
        while not self._at_end():
            self._parse_top_level(result, pending)
        _package_namespace(result).nested.extend(pending)
        return result

    # ------------------------------------------------------------------
    # Token access helpers
    # ------------------------------------------------------------------

    def _current(self) -> Token:
        """Return the next token to be consumed."""
        return self._tokens[self._pos]

    def _peek_type(self, offset: int = 0) -> TokenType:
        """Return the token type *offset* tokens ahead of the current one."""
        index = min(self._pos + offset, len(self._tokens) - 1)
        return self._tokens[index].type

    def _at_end(self) -> bool:
        """Return True once only the EOF token remains."""
        return self._peek_type() == TokenType.EOF

    def _advance(self) -> Token:
        """Consume the current token and return it; the cursor never moves past EOF."""
        tok = self._tokens[self._pos]
        if self._pos < len(self._tokens) - 1:
            self._pos += 1
        return tok

    def _expect(self, *types: TokenType) -> Token:
        """Consume and return the current token, which must be one of *types*."""
        tok = self._current()
        if tok.type not in types:
            expected = ", ".join(repr(t.value) for t in types)
            raise ParseError(
                f"Expected {expected}, got {tok.value!r}",
                tok.line,
                tok.column,
            )
        return self._advance()

    def _check(self, *types: TokenType) -> bool:
        """Return True if the current token is one of *types*; nothing is consumed."""
        return self._peek_type() in types

    def _error(self, message: str) -> ParseError:
        tok = self._current()
        return ParseError(message, tok.line, tok.column)

    def _expect_name_token(self) -> Token:
        """Consume a name; proto keywords are valid names (a field may be called ``package``)."""
        tok = self._current()
        if tok.type != TokenType.IDENTIFIER and tok.type not in _KEYWORD_TYPES:
            raise ParseError(
                f"Expected identifier, got {tok.value!r}",
                tok.line,
                tok.column,
            )
        return self._advance()

    def _parse_full_ident(self) -> str:
        """Parse a dotted identifier such as ``com.example.api``."""
        parts = [self._expect_name_token().value]
        while self._check(TokenType.DOT):
            self._advance()  # consume .
            parts.append(self._expect_name_token().value)
        return ".".join(parts)

    def _parse_type_name(self) -> str:
        """Parse a type reference, keeping a leading dot when present."""
        prefix = ""
        if self._check(TokenType.DOT):
            self._advance()
            prefix = "."
        return prefix + self._parse_full_ident()

    def _parse_int(self) -> int:
        """Parse an optionally signed integer literal."""
        sign = 1
        if self._check(TokenType.MINUS, TokenType.PLUS):
            if self._advance().type == TokenType.MINUS:
                sign = -1
        tok = self._expect(TokenType.INTEGER)
        text = tok.value
        if text.lower().startswith("0x"):
            value = int(text, 16)
        elif len(text) > 1 and text.startswith("0"):
            try:
                value = int(text, 8)
            except ValueError:
                raise ParseError(f"Invalid octal literal {text!r}", tok.line, tok.column) from None
        else:
            value = int(text)
        return sign * value

    # ------------------------------------------------------------------
    # Top-level declarations
    # ------------------------------------------------------------------

    def _parse_top_level(self, result: ProtoFile, pending: list[MessageDef | EnumDef | ServiceDef]) -> None:
        """Parse one top-level declaration and record it on the ProtoFile."""
        tok = self._current()
        if tok.type in (TokenType.SYNTAX, TokenType.EDITION):
            result.syntax = self._parse_syntax()
        elif tok.type == TokenType.PACKAGE:
            if result.package is not None:
                raise ParseError("Duplicate package declaration", tok.line, tok.column)
            result.package = self._parse_package()
        elif tok.type == TokenType.IMPORT:
            result.imports.append(self._parse_import())
        elif tok.type == TokenType.OPTION:
            name, value = self._parse_option_statement()
            result.options[name] = value
        elif tok.type == TokenType.MESSAGE:
            pending.append(self._parse_message())
        elif tok.type == TokenType.ENUM:
            pending.append(self._parse_enum())
        elif tok.type == TokenType.SERVICE:
            pending.append(self._parse_service())
        elif tok.type == TokenType.EXTEND:
            self._skip_extend()
        elif tok.type == TokenType.SEMICOLON:
            self._advance()
        else:
            raise ParseError(
                f"Unexpected token {tok.value!r} at top level",
                tok.line,
                tok.column,
            )

    def _parse_syntax(self) -> str:
        """Parse: syntax = "proto3"; (or edition = "2023";)"""
        keyword = self._advance()
        self._expect(TokenType.EQUALS)
        value = self._expect(TokenType.STRING).value
        self._expect(TokenType.SEMICOLON)
        if keyword.type == TokenType.EDITION:
            return f"edition {value}"
        if value not in ("proto2", "proto3"):
            raise ParseError(f"Unsupported syntax {value!r}", keyword.line, keyword.column)
        return value

    def _parse_package(self) -> str:
        """Parse: package <full.ident>;"""
        self._expect(TokenType.PACKAGE)
        name = self._parse_full_ident()
        self._expect(TokenType.SEMICOLON)
        return name

    def _parse_import(self) -> str:
        """Parse: import [public|weak] "path";"""
        self._expect(TokenType.IMPORT)
        if self._check(TokenType.PUBLIC, TokenType.WEAK):
            self._advance()
        path = self._expect(TokenType.STRING).value
        self._expect(TokenType.SEMICOLON)
        return path

    # ------------------------------------------------------------------
    # Options
    # ------------------------------------------------------------------

    def _parse_option_statement(self) -> tuple[str, str]:
        """Parse: option <name> = <constant>;"""
        self._expect(TokenType.OPTION)
        name = self._parse_option_name()
        self._expect(TokenType.EQUALS)
        value = self._parse_constant()
        self._expect(TokenType.SEMICOLON)
        return name, value

    def _parse_option_name(self) -> str:
        """Parse an option name such as ``java_package`` or ``(my.ext).field``."""
        parts: list[str] = []
        while True:
            if self._check(TokenType.LPAREN):
                self._advance()
                parts.append(f"({self._parse_type_name()})")
                self._expect(TokenType.RPAREN)
            else:
                parts.append(self._expect_name_token().value)
            if not self._check(TokenType.DOT):
                return ".".join(parts)
            self._advance()  # consume .

    def _parse_constant(self) -> str:
        """Parse an option value and return its source text."""
        tok = self._current()
        if tok.type == TokenType.STRING:
            # Adjacent string literals concatenate.
            chunks: list[str] = []
            while self._check(TokenType.STRING):
                chunks.append(self._advance().value)
            return "".join(chunks)
        if tok.type in (TokenType.MINUS, TokenType.PLUS):
            sign = self._advance().value
            number = self._expect(TokenType.INTEGER, TokenType.FLOAT, TokenType.IDENTIFIER)
            return f"{sign if sign == '-' else ''}{number.value}"
        if tok.type in (TokenType.INTEGER, TokenType.FLOAT):
            return self._advance().value
        if tok.type == TokenType.LBRACE:
            self._skip_braced_block()
            return "{...}"
        if tok.type == TokenType.IDENTIFIER or tok.type in _KEYWORD_TYPES:
            return self._parse_full_ident()
        raise ParseError(f"Expected constant, got {tok.value!r}", tok.line, tok.column)

    def _parse_field_options(self) -> None:
        """Parse and discard a bracketed option list: [name = value, ...]."""
        self._expect(TokenType.LBRACKET)
        while True:
            self._parse_option_name()
            self._expect(TokenType.EQUALS)
            self._parse_constant()
            if not self._check(TokenType.COMMA):
                break
            self._advance()  # consume ,
        self._expect(TokenType.RBRACKET)

    def _skip_braced_block(self) -> None:
        """Skip a balanced ``{ ... }`` block, including nested braces."""
        open_tok = self._expect(TokenType.LBRACE)
        depth = 1
        while depth > 0:
            if self._at_end():
                raise ParseError("Unterminated block", open_tok.line, open_tok.column)
            tok = self._advance()
            if tok.type == TokenType.LBRACE:
                depth += 1
            elif tok.type == TokenType.RBRACE:
                depth -= 1

    def _skip_extend(self) -> None:
        """Parse: extend <Type> { ... } and discard the extension fields."""
        self._expect(TokenType.EXTEND)
        self._parse_type_name()
        self._skip_braced_block()

    # ------------------------------------------------------------------
    # Message declarations
    # ------------------------------------------------------------------

    def _parse_message(self) -> MessageDef:
        """Parse: message <Name> { body* }"""
        self._expect(TokenType.MESSAGE)
        name_tok = self._expect_name_token()
        self._expect(TokenType.LBRACE)
        message = MessageDef(name=name_tok.value)
        while not self._check(TokenType.RBRACE, TokenType.EOF):
            self._parse_message_element(message)
        self._expect(TokenType.RBRACE)
        _mark_reserved_fields(message)
        return message

    def _parse_message_element(self, message: MessageDef) -> None:
        """Parse one element of a message body and add it to *message*."""
        tok = self._current()
        if tok.type == TokenType.SEMICOLON:
            self._advance()
        elif tok.type == TokenType.MESSAGE and self._peek_type(1) != TokenType.DOT:
            message.nested.append(self._parse_message())
        elif tok.type == TokenType.ENUM and self._peek_type(1) != TokenType.DOT:
            message.nested.append(self._parse_enum())
        elif tok.type == TokenType.OPTION and self._peek_type(1) != TokenType.DOT:
            self._parse_option_statement()
        elif tok.type == TokenType.ONEOF:
            self._parse_oneof(message)
        elif tok.type == TokenType.MAP and self._peek_type(1) == TokenType.LANGLE:
            message.fields.append(self._parse_map_field())
        elif tok.type == TokenType.RESERVED:
            self._parse_reserved(message.reserved_names, message.reserved_numbers)
        elif tok.type == TokenType.EXTENSIONS:
            self._parse_extensions()
        elif tok.type == TokenType.EXTEND:
            self._skip_extend()
        else:
            message.fields.append(self._parse_field())

    def _parse_field(self, oneof: str | None = None) -> FieldDef:
        """Parse: [label] <type> <name> = <number> [options];"""
        label: TokenType | None = None
        if oneof is None and self._check(*_LABELS):
            label = self._advance().type
        if self._check(TokenType.GROUP) and self._peek_type(1) != TokenType.DOT:
            raise self._error("Groups are not supported; use a nested message instead")
        field_type = self._parse_type_name()
        name_tok = self._expect_name_token()
        self._expect(TokenType.EQUALS)
        number = self._parse_field_number()
        if self._check(TokenType.LBRACKET):
            self._parse_field_options()
        self._expect(TokenType.SEMICOLON)
        return FieldDef(
            name=name_tok.value,
            type=field_type,
            number=number,
            repeated=label == TokenType.REPEATED,
            optional=label == TokenType.OPTIONAL,
            required=label == TokenType.REQUIRED,
            oneof=oneof,
        )

    def _parse_map_field(self) -> FieldDef:
        """Parse: map<K, V> <name> = <number> [options];"""
        self._expect(TokenType.MAP)
        self._expect(TokenType.LANGLE)
        key_type = self._parse_type_name()
        self._expect(TokenType.COMMA)
        value_type = self._parse_type_name()
        self._expect(TokenType.RANGLE)
        name_tok = self._expect_name_token()
        self._expect(TokenType.EQUALS)
        number = self._parse_field_number()
        if self._check(TokenType.LBRACKET):
            self._parse_field_options()
        self._expect(TokenType.SEMICOLON)
        return FieldDef(name=name_tok.value, type=value_type, number=number, key_type=key_type)

    def _parse_field_number(self) -> int:
        tok = self._current()
        number = self._parse_int()
        if not 1 <= number <= _MAX_FIELD_NUMBER:
            raise ParseError(f"Field number {number} out of range", tok.line, tok.column)
        return number

    def _parse_oneof(self, message: MessageDef) -> None:
        """Parse: oneof <name> { field* } and append its members to *message*."""
        self._expect(TokenType.ONEOF)
        name_tok = self._expect_name_token()
        self._expect(TokenType.LBRACE)
        group = OneofDef(name=name_tok.value)
        while not self._check(TokenType.RBRACE, TokenType.EOF):
            if self._check(TokenType.SEMICOLON):
                self._advance()
            elif self._check(TokenType.OPTION) and self._peek_type(1) != TokenType.DOT:
                self._parse_option_statement()
            else:
                field = self._parse_field(oneof=group.name)
                group.fields.append(field.name)
                message.fields.append(field)
        self._expect(TokenType.RBRACE)
        message.oneofs.append(group)

    def _parse_reserved(self, names: list[str], numbers: list[tuple[int, int]]) -> None:
        """Parse: reserved 1, 5 to 9, 100 to max; or reserved "a", "b";"""
        self._expect(TokenType.RESERVED)
        if self._check(TokenType.STRING, TokenType.IDENTIFIER):
            while True:
                names.append(self._advance().value)
                if not self._check(TokenType.COMMA):
                    break
                self._advance()  # consume ,
        else:
            numbers.extend(self._parse_ranges())
        self._expect(TokenType.SEMICOLON)

    def _parse_extensions(self) -> None:
        """Parse: extensions 100 to 199 [options];"""
        self._expect(TokenType.EXTENSIONS)
        self._parse_ranges()
        if self._check(TokenType.LBRACKET):
            self._parse_field_options()
        self._expect(TokenType.SEMICOLON)

    def _parse_ranges(self) -> list[tuple[int, int]]:
        """Parse a comma-separated list of ``N`` or ``N to M|max`` ranges."""
        ranges: list[tuple[int, int]] = []
        while True:
            start = self._parse_int()
            end = start
            if self._check(TokenType.TO):
                self._advance()
                if self._check(TokenType.MAX):
                    self._advance()
                    end = _MAX_FIELD_NUMBER
                else:
                    end = self._parse_int()
            ranges.append((start, end))
            if not self._check(TokenType.COMMA):
                return ranges
            self._advance()  # consume ,

    # ------------------------------------------------------------------
    # Enum declarations
    # ------------------------------------------------------------------

    def _parse_enum(self) -> EnumDef:
        """Parse: enum <Name> { (option | value | reserved)* }"""
        self._expect(TokenType.ENUM)
        name_tok = self._expect_name_token()
        self._expect(TokenType.LBRACE)
        enum_def = EnumDef(name=name_tok.value)
        reserved_names: list[str] = []
        reserved_numbers: list[tuple[int, int]] = []
        while not self._check(TokenType.RBRACE, TokenType.EOF):
            if self._check(TokenType.SEMICOLON):
                self._advance()
            elif self._check(TokenType.OPTION) and self._peek_type(1) != TokenType.EQUALS:
                self._parse_option_statement()
            elif self._check(TokenType.RESERVED) and self._peek_type(1) != TokenType.EQUALS:
                self._parse_reserved(reserved_names, reserved_numbers)
            else:
                value_tok = self._expect_name_token()
                self._expect(TokenType.EQUALS)
                number = self._parse_int()
                if self._check(TokenType.LBRACKET):
                    self._parse_field_options()
                self._expect(TokenType.SEMICOLON)
                enum_def.values.append(EnumValue(name=value_tok.value, number=number))
        self._expect(TokenType.RBRACE)
        return enum_def

    # ------------------------------------------------------------------
    # Service declarations
    # ------------------------------------------------------------------

    def _parse_service(self) -> ServiceDef:
        """Parse: service <Name> { (option | rpc)* }"""
        self._expect(TokenType.SERVICE)
        name_tok = self._expect_name_token()
        self._expect(TokenType.LBRACE)
        service = ServiceDef(name=name_tok.value)
        while not self._check(TokenType.RBRACE, TokenType.EOF):
            if self._check(TokenType.SEMICOLON):
                self._advance()
            elif self._check(TokenType.OPTION):
                self._parse_option_statement()
            elif self._check(TokenType.RPC):
                service.rpcs.append(self._parse_rpc())
            else:
                tok = self._current()
                raise ParseError(
                    f"Unexpected token {tok.value!r} in service body",
                    tok.line,
                    tok.column,
                )
        self._expect(TokenType.RBRACE)
        return service

    def _parse_rpc(self) -> RpcDef:
        """Parse: rpc <Name> ([stream] Req) returns ([stream] Resp) (; | { option* })"""
        self._expect(TokenType.RPC)
        name_tok = self._expect_name_token()
        client_streaming, request_type = self._parse_rpc_type()
        self._expect(TokenType.RETURNS)
        server_streaming, response_type = self._parse_rpc_type()
        if self._check(TokenType.LBRACE):
            self._advance()
            while not self._check(TokenType.RBRACE, TokenType.EOF):
                if self._check(TokenType.SEMICOLON):
                    self._advance()
                else:
                    self._parse_option_statement()
            self._expect(TokenType.RBRACE)
        else:
            self._expect(TokenType.SEMICOLON)
        return RpcDef(
            name=name_tok.value,
            request_type=request_type,
            response_type=response_type,
            client_streaming=client_streaming,
            server_streaming=server_streaming,
        )

    def _parse_rpc_type(self) -> tuple[bool, str]:
        """Parse: ( [stream] <Type> )"""
        self._expect(TokenType.LPAREN)
        streaming = False
        if self._check(TokenType.STREAM) and self._peek_type(1) not in (TokenType.RPAREN, TokenType.DOT):
            self._advance()
            streaming = True
        type_name = self._parse_type_name()
        self._expect(TokenType.RPAREN)
        return streaming, type_name


def _package_namespace(result: ProtoFile) -> NamespaceDef:
    """Return the innermost namespace of the file's package, creating levels as needed."""
    namespace = result.root
    if not result.package:
        return namespace
    for segment in result.package.split("."):
        child = namespace.child_namespace(segment)
        if child is None:
            child = NamespaceDef(name=segment)
            namespace.nested.append(child)
        namespace = child
    return namespace


def _mark_reserved_fields(message: MessageDef) -> None:
    """Flag fields whose name or number falls in a reserved declaration."""
    reserved_names = set(message.reserved_names)
    for field in message.fields:
        in_range = any(start <= field.number <= end for start, end in message.reserved_numbers)
        if field.name in reserved_names or in_range:
            field.reserved = True
