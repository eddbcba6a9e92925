"""Data-transformation helpers callable from inside templates."""

from __future__ import annotations

import base64
import binascii
import hashlib
from types import MappingProxyType
from typing import Callable, Dict, Iterator, Mapping

from ..values import as_bytes, as_text, decode_text, encode_text


def quote_double(text: object) -> str:
    """Double every ``"`` (SQL/CSV literal quoting); no surrounding quotes."""

    return as_text(text, "quoteDouble").replace('"', '""')


def join_text(*parts: object) -> str:
    return "".join(as_text(part, "joinText") for part in parts)


def join_bytes(*parts: object) -> bytes:
    return b"".join(as_bytes(part, "joinBytes") for part in parts)


def bytes_to_text(data: object) -> str:
    """
    Reinterpret a byte sequence as text.

    Invalid UTF-8 sequences are kept as lone surrogates, so
    ``text_to_bytes(bytes_to_text(b)) == b`` holds for any input and the
    output sink writes the original bytes back out.
    """

    return decode_text(as_bytes(data, "bytesToText"))


def text_to_bytes(text: object) -> bytes:
    return encode_text(as_text(text, "textToBytes"))


def base64_encode(data: object) -> str:
    """Standard base64 alphabet, padded."""

    return base64.b64encode(as_bytes(data, "base64Encode")).decode("ascii")


def hex_encode(data: object) -> str:
    return binascii.hexlify(as_bytes(data, "hexEncode")).decode("ascii")


def hash_md5(data: object) -> bytes:
    return hashlib.md5(as_bytes(data, "hashMD5")).digest()


def hash_sha1(data: object) -> bytes:
    return hashlib.sha1(as_bytes(data, "hashSHA1")).digest()


def hash_sha256(data: object) -> bytes:
    return hashlib.sha256(as_bytes(data, "hashSHA256")).digest()


HELPERS: Mapping[str, Callable[..., object]] = MappingProxyType(
    {
        "quoteDouble": quote_double,
        "joinText": join_text,
        "joinBytes": join_bytes,
        "bytesToText": bytes_to_text,
        "textToBytes": text_to_bytes,
        "base64Encode": base64_encode,
        "hexEncode": hex_encode,
        "hashMD5": hash_md5,
        "hashSHA1": hash_sha1,
        "hashSHA256": hash_sha256,
    }
)

# Names used by templates written for the first release of the tool.
LEGACY_ALIASES: Mapping[str, str] = MappingProxyType(
    {
        "strDoubleQuoted": "quoteDouble",
        "strJoin": "joinText",
        "byteJoin": "joinBytes",
        "byteToStr": "bytesToText",
        "strToByte": "textToBytes",
        "base64enc": "base64Encode",
        "md5byte": "hashMD5",
        "sha1byte": "hashSHA1",
        "sha256byte": "hashSHA256",
    }
)


class HelperLibrary(Mapping[str, Callable[..., object]]):
    """Immutable name -> function table shared by the header and row templates."""

    def __init__(self, functions: Mapping[str, Callable[..., object]]) -> None:
        self._functions: Mapping[str, Callable[..., object]] = MappingProxyType(
            dict(functions)
        )

    @classmethod
    def default(cls, legacy_aliases: bool = True) -> "HelperLibrary":
        """Build the standard helper table, optionally with the legacy names."""

        functions: Dict[str, Callable[..., object]] = dict(HELPERS)
        if legacy_aliases:
            for alias, target in LEGACY_ALIASES.items():
                functions[alias] = HELPERS[target]
        return cls(functions)

    def __getitem__(self, name: str) -> Callable[..., object]:
        return self._functions[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._functions)

    def __len__(self) -> int:
        return len(self._functions)

    def __repr__(self) -> str:
        return f"HelperLibrary({sorted(self._functions)})"
