"""Tests for the template helper library."""

import base64

import pytest

from sqlexport.errors import HelperArgumentError
from sqlexport.templates import helpers as h
from sqlexport.templates.helpers import HELPERS, LEGACY_ALIASES, HelperLibrary


class TestQuoteDouble:
    @pytest.mark.parametrize("text", ["", "plain", 'a"b', '""', 'say "hi" twice "x"'])
    def test_quote_count_doubles(self, text):
        assert h.quote_double(text).count('"') == 2 * text.count('"')

    def test_examples(self):
        assert h.quote_double("") == ""
        assert h.quote_double('a"b') == 'a""b'

    def test_no_surrounding_quotes(self):
        assert h.quote_double("abc") == "abc"

    def test_rejects_non_text(self):
        with pytest.raises(HelperArgumentError, match="quoteDouble"):
            h.quote_double(b"bytes")


class TestJoin:
    def test_join_text(self):
        assert h.join_text() == ""
        assert h.join_text("a", "b", "c") == "abc"

    def test_join_bytes(self):
        assert h.join_bytes() == b""
        assert h.join_bytes(b"a", b"", b"\x00c") == b"a\x00c"

    def test_join_text_rejects_int(self):
        with pytest.raises(HelperArgumentError):
            h.join_text("a", 1)

    def test_join_bytes_rejects_text(self):
        with pytest.raises(HelperArgumentError):
            h.join_bytes(b"a", "b")


class TestConversions:
    @pytest.mark.parametrize("text", ["", "hello", "naïve ☃", "line\nbreak"])
    def test_text_round_trip(self, text):
        assert h.bytes_to_text(h.text_to_bytes(text)) == text

    def test_text_to_bytes_is_utf8(self):
        assert h.text_to_bytes("é") == b"\xc3\xa9"

    def test_invalid_utf8_round_trips(self):
        data = b"ok\xff\xfe\x00"
        assert h.text_to_bytes(h.bytes_to_text(data)) == data

    def test_bytes_to_text_accepts_memoryview(self):
        assert h.bytes_to_text(memoryview(b"abc")) == "abc"

    def test_bytes_to_text_rejects_none(self):
        with pytest.raises(HelperArgumentError, match="null"):
            h.bytes_to_text(None)


class TestEncodingAndHashing:
    def test_base64(self):
        assert h.base64_encode(h.text_to_bytes("hi")) == "aGk="
        assert h.base64_encode(b"") == ""

    def test_base64_matches_stdlib(self):
        data = bytes(range(256))
        assert h.base64_encode(data) == base64.b64encode(data).decode("ascii")

    def test_hex(self):
        assert h.hex_encode(b"\x00\xff") == "00ff"

    @pytest.mark.parametrize(
        "func, size",
        [(h.hash_md5, 16), (h.hash_sha1, 20), (h.hash_sha256, 32)],
    )
    @pytest.mark.parametrize("data", [b"", b"x", b"y" * 10_000])
    def test_digest_lengths(self, func, size, data):
        assert len(func(data)) == size

    def test_known_digests(self):
        assert h.hex_encode(h.hash_md5(b"")) == "d41d8cd98f00b204e9800998ecf8427e"
        assert h.hex_encode(h.hash_sha1(b"abc")) == "a9993e364706816aba3e25717850c26c9cd0d89d"

    def test_hash_rejects_text(self):
        with pytest.raises(HelperArgumentError, match="hashSHA256"):
            h.hash_sha256("not bytes")


class TestHelperLibrary:
    def test_registered_names(self):
        library = HelperLibrary.default(legacy_aliases=False)
        assert set(library) == {
            "quoteDouble",
            "joinText",
            "joinBytes",
            "bytesToText",
            "textToBytes",
            "base64Encode",
            "hexEncode",
            "hashMD5",
            "hashSHA1",
            "hashSHA256",
        }

    def test_legacy_aliases_point_at_same_functions(self, helpers):
        for alias, target in LEGACY_ALIASES.items():
            assert helpers[alias] is HELPERS[target]

    def test_is_read_only(self, helpers):
        with pytest.raises(TypeError):
            helpers["quoteDouble"] = str  # type: ignore[index]

    def test_copies_input(self):
        source = {"f": h.hex_encode}
        library = HelperLibrary(source)
        source["g"] = h.hash_md5
        assert "g" not in library
        assert len(library) == 1
