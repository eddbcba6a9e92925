"""Row value kinds and the coercions used by template helpers."""

from __future__ import annotations

from decimal import Decimal
from enum import Enum

from .errors import HelperArgumentError

# Text <-> bytes reinterpretation is lossless for every byte sequence: bytes
# that are not valid UTF-8 round-trip through lone surrogates.
TEXT_ENCODING = "utf-8"
TEXT_ERRORS = "surrogateescape"


class ValueKind(Enum):
    """Kinds a row value can take once materialized."""

    NULL = "null"
    BOOLEAN = "boolean"
    INTEGER = "integer"
    FLOAT = "float"
    TEXT = "text"
    BYTES = "bytes"
    OTHER = "other"


def kind_of(value: object) -> ValueKind:
    """Classify ``value``; driver types outside the core set are ``OTHER``."""

    if value is None:
        return ValueKind.NULL
    # bool before int: bool is an int subclass.
    if isinstance(value, bool):
        return ValueKind.BOOLEAN
    if isinstance(value, int):
        return ValueKind.INTEGER
    if isinstance(value, (float, Decimal)):
        return ValueKind.FLOAT
    if isinstance(value, str):
        return ValueKind.TEXT
    if isinstance(value, (bytes, bytearray, memoryview)):
        return ValueKind.BYTES
    return ValueKind.OTHER


def normalize_value(value: object) -> object:
    """Convert driver-specific byte containers to ``bytes``; keep the rest."""

    if isinstance(value, (bytearray, memoryview)):
        return bytes(value)
    return value


def as_text(value: object, helper: str) -> str:
    """Return ``value`` if it is text, otherwise raise ``HelperArgumentError``."""

    if kind_of(value) is ValueKind.TEXT:
        return value  # type: ignore[return-value]
    raise HelperArgumentError(
        f"{helper}: expected text, got {kind_of(value).value} ({type(value).__name__})"
    )


def as_bytes(value: object, helper: str) -> bytes:
    """Return ``value`` as ``bytes`` if it is a byte sequence, otherwise raise."""

    if kind_of(value) is ValueKind.BYTES:
        return bytes(value)  # type: ignore[arg-type]
    raise HelperArgumentError(
        f"{helper}: expected bytes, got {kind_of(value).value} ({type(value).__name__})"
    )


def decode_text(data: bytes) -> str:
    return data.decode(TEXT_ENCODING, TEXT_ERRORS)


def encode_text(text: str) -> bytes:
    return text.encode(TEXT_ENCODING, TEXT_ERRORS)
