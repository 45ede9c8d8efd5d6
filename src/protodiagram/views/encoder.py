# Copyright 2026 ProtoDiagram Contributors
# SPDX-License-Identifier: Apache-2.0

"""PlantUML text encoding for rendering server URLs.

Diagram text is UTF-8 encoded, compressed with raw DEFLATE (no zlib header
or checksum), and written 3 bytes at a time as 4 characters of the PlantUML
alphabet ``0-9 A-Z a-z - _``. Without a compressor the bytes are hex
encoded instead, and the server expects the ``~h`` marker in front of them.
"""

from __future__ import annotations

import enum
import logging
import zlib
from collections.abc import Callable
from dataclasses import dataclass

logger = logging.getLogger(__name__)

# ###############
# Public Interface
# ###############

PLANTUML_ALPHABET = "0123456789ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz-_"

HEX_PREFIX = "~h"

Compressor = Callable[[bytes], bytes]


class EncodingError(Exception):
    """Raised when diagram text cannot be encoded or a token cannot be decoded."""


class Encoding(enum.Enum):
    """Payload encoding of an encoded diagram."""

    DEFLATE = "deflate"
    HEX = "hex"


@dataclass(frozen=True)
class EncodedDiagram:
    """An encoded diagram payload and how it was encoded.

    Attributes:
        data: The encoded payload, without any prefix.
        encoding: Which encoding produced ``data``.
    """

    data: str
    encoding: Encoding

    @property
    def url_token(self) -> str:
        """Return the payload as it is appended to a server URL."""
        if self.encoding is Encoding.HEX:
            return HEX_PREFIX + self.data
        return self.data


def deflate_raw(data: bytes) -> bytes:
    """Compress *data* with raw DEFLATE at the highest compression level."""
    compressor = zlib.compressobj(9, zlib.DEFLATED, -15)
    return compressor.compress(data) + compressor.flush()


def encode(text: str, compressor: Compressor | None = deflate_raw) -> EncodedDiagram:
    """Encode diagram text for a PlantUML server URL.

    Args:
        text: The diagram text.
        compressor: Raw DEFLATE implementation; None selects the hex fallback.

    Returns:
        The :class:`EncodedDiagram` carrying the payload and its encoding.

    Raises:
        EncodingError: If the compressor fails.
    """
    raw = text.encode("utf-8")
    if compressor is None:
        logger.warning("No compression available - using HEX encoding fallback")
        return EncodedDiagram(raw.hex(), Encoding.HEX)

    try:
        compressed = compressor(raw)
    except Exception as exc:
        raise EncodingError(f"Deflate compression failed: {exc}") from exc

    data = encode64(compressed)
    logger.debug("Encoded %d byte(s) of diagram text into %d character(s)", len(raw), len(data))
    return EncodedDiagram(data, Encoding.DEFLATE)


def decode(token: str, encoding: Encoding | None = None) -> str:
    """Decode a token produced by :func:`encode` back into diagram text.

    Args:
        token: The payload, with or without the ``~h`` marker.
        encoding: Forces an encoding; when None a ``~h`` marker selects hex.

    Raises:
        EncodingError: If the token is malformed or does not inflate.
    """
    if token.startswith(HEX_PREFIX):
        token = token[len(HEX_PREFIX) :]
        encoding = encoding or Encoding.HEX
    encoding = encoding or Encoding.DEFLATE

    if encoding is Encoding.HEX:
        try:
            raw = bytes.fromhex(token)
        except ValueError as exc:
            raise EncodingError(f"Invalid hex payload: {exc}") from exc
    else:
        raw = _inflate_raw(decode64(token))

    try:
        return raw.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise EncodingError(f"Decoded payload is not UTF-8 text: {exc}") from exc


def encode64(data: bytes) -> str:
    """Encode bytes with the PlantUML alphabet, zero-padding the last group."""
    chunks: list[str] = []
    for i in range(0, len(data), 3):
        b1 = data[i]
        b2 = data[i + 1] if i + 1 < len(data) else 0
        b3 = data[i + 2] if i + 2 < len(data) else 0
        chunks.append(_append_3bytes(b1, b2, b3))
    return "".join(chunks)


def decode64(token: str) -> bytes:
    """Invert :func:`encode64`; trailing padding bytes are kept as zeros."""
    values: list[int] = []
    for position, ch in enumerate(token):
        value = _DECODE_TABLE.get(ch)
        if value is None:
            raise EncodingError(f"Invalid character {ch!r} at position {position}")
        values.append(value)

    out = bytearray()
    for i in range(0, len(values), 4):
        c1, c2, c3, c4 = (values[i : i + 4] + [0, 0, 0])[:4]
        out.append(((c1 << 2) | (c2 >> 4)) & 0xFF)
        out.append(((c2 & 0xF) << 4 | (c3 >> 2)) & 0xFF)
        out.append(((c3 & 0x3) << 6 | c4) & 0xFF)
    return bytes(out)


# ################
# Implementation
# ################

_DECODE_TABLE: dict[str, int] = {ch: index for index, ch in enumerate(PLANTUML_ALPHABET)}


def _encode_6bit(b: int) -> str:
    return PLANTUML_ALPHABET[b & 0x3F]


def _append_3bytes(b1: int, b2: int, b3: int) -> str:
    c1 = b1 >> 2
    c2 = ((b1 & 0x3) << 4) | (b2 >> 4)
    c3 = ((b2 & 0xF) << 2) | (b3 >> 6)
    c4 = b3 & 0x3F
    return _encode_6bit(c1) + _encode_6bit(c2) + _encode_6bit(c3) + _encode_6bit(c4)


def _inflate_raw(data: bytes) -> bytes:
    """Inflate a raw DEFLATE stream, ignoring padding after its end."""
    decompressor = zlib.decompressobj(-15)
    try:
        out = decompressor.decompress(data) + decompressor.flush()
    except zlib.error as exc:
        raise EncodingError(f"Deflate decompression failed: {exc}") from exc
    if not decompressor.eof:
        raise EncodingError("Deflate decompression failed: truncated payload")
    return out
