# Copyright 2026 ProtoDiagram Contributors
# SPDX-License-Identifier: Apache-2.0

"""Tests for the PlantUML URL encoder."""

import logging
import zlib

import pytest

from protodiagram.views.encoder import (
    HEX_PREFIX,
    PLANTUML_ALPHABET,
    EncodedDiagram,
    Encoding,
    EncodingError,
    decode,
    decode64,
    deflate_raw,
    encode,
    encode64,
)

# ###############
# Test Helpers
# ###############


def _large_diagram(lines: int) -> str:
    body = [f"object Entity{i} {{\n  field{i} : string\n}}" for i in range(lines // 3)]
    return "\n".join(["@startuml", *body, "@enduml"])


# ###############
# Alphabet Encoding
# ###############


class TestEncode64:
    def test_alphabet_is_url_safe(self) -> None:
        assert len(PLANTUML_ALPHABET) == 64
        assert len(set(PLANTUML_ALPHABET)) == 64
        assert PLANTUML_ALPHABET[:10] == "0123456789"
        assert PLANTUML_ALPHABET[-2:] == "-_"

    @pytest.mark.parametrize(
        ("data", "expected"),
        [
            (b"", ""),
            (b"\x00\x00\x00", "0000"),
            (b"\xff\xff\xff", "____"),
            (b"abc", "OM9Z"),
            (b"a", "OG00"),
        ],
    )
    def test_known_values(self, data: bytes, expected: str) -> None:
        assert encode64(data) == expected

    def test_output_length_is_padded_to_groups_of_four(self) -> None:
        assert len(encode64(b"abcd")) == 8

    def test_decode_keeps_padding_as_zero_bytes(self) -> None:
        assert decode64("OG00") == b"a\x00\x00"

    def test_decode_rejects_foreign_characters(self) -> None:
        with pytest.raises(EncodingError, match="Invalid character '\\+' at position 2"):
            decode64("OM+Z")


# ###############
# Compression
# ###############


class TestDeflate:
    def test_raw_stream_has_no_zlib_header(self) -> None:
        compressed = deflate_raw(b"@startuml\n@enduml")
        assert zlib.decompress(compressed, -15) == b"@startuml\n@enduml"
        with pytest.raises(zlib.error):
            zlib.decompress(compressed)

    def test_encode_uses_deflate_by_default(self) -> None:
        encoded = encode("@startuml\n@enduml")
        assert encoded.encoding is Encoding.DEFLATE
        assert encoded.url_token == encoded.data
        assert set(encoded.data) <= set(PLANTUML_ALPHABET)

    def test_custom_compressor_receives_utf8_bytes(self) -> None:
        received: list[bytes] = []

        def compressor(data: bytes) -> bytes:
            received.append(data)
            return deflate_raw(data)

        encode("Grüße", compressor)
        assert received == ["Grüße".encode()]

    def test_compressor_failure_is_wrapped(self) -> None:
        def broken(data: bytes) -> bytes:
            raise RuntimeError("boom")

        with pytest.raises(EncodingError, match="Deflate compression failed: boom") as exc_info:
            encode("@startuml", broken)
        assert isinstance(exc_info.value.__cause__, RuntimeError)


# ###############
# Hex Fallback
# ###############


class TestHexFallback:
    def test_no_compressor_selects_hex(self, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.WARNING, logger="protodiagram.views.encoder"):
            encoded = encode("AB", None)
        assert encoded == EncodedDiagram("4142", Encoding.HEX)
        assert encoded.url_token == f"{HEX_PREFIX}4142"
        assert "HEX encoding fallback" in caplog.text

    def test_hex_token_decodes_by_prefix(self) -> None:
        assert decode("~h4142") == "AB"

    def test_forced_hex_decoding(self) -> None:
        assert decode("4142", Encoding.HEX) == "AB"

    def test_invalid_hex(self) -> None:
        with pytest.raises(EncodingError, match="Invalid hex payload"):
            decode("~hzz")

    def test_non_utf8_payload(self) -> None:
        with pytest.raises(EncodingError, match="not UTF-8"):
            decode("~hff")


# ###############
# Round Trips
# ###############


class TestRoundTrip:
    @pytest.mark.parametrize(
        "text",
        [
            "",
            "@startuml\nobject User {\n  name : string\n}\n@enduml",
            'note right of Café\n  Only one of ünïcode or 表 is set\nend note',
        ],
    )
    def test_deflate_round_trip(self, text: str) -> None:
        assert decode(encode(text).url_token) == text

    def test_large_diagram_round_trip(self) -> None:
        text = _large_diagram(12_000)
        assert text.count("\n") > 10_000
        encoded = encode(text)
        assert len(encoded.data) < len(text)
        assert decode(encoded.url_token) == text

    def test_hex_round_trip(self) -> None:
        text = "@startuml\nenum Color {\n  RED\n}\n@enduml"
        assert decode(encode(text, None).url_token) == text

    def test_truncated_token(self) -> None:
        token = encode(_large_diagram(300)).data
        with pytest.raises(EncodingError, match="Deflate decompression failed"):
            decode(token[: len(token) // 2])
