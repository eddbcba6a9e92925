"""Byte-stream output sink for rendered template chunks."""

from __future__ import annotations

import sys
from contextlib import contextmanager
from pathlib import Path
from typing import BinaryIO, Iterator, Optional, Protocol

from ..values import TEXT_ERRORS


class TextSink(Protocol):
    """Anything that accepts rendered text chunks."""

    def write(self, chunk: str) -> object:
        ...


class StreamSink:
    """
    Encode text chunks onto a binary stream as they are produced.

    Lone surrogates produced by ``bytesToText`` on invalid UTF-8 are written
    back as the original bytes.
    """

    def __init__(self, stream: BinaryIO, encoding: str = "utf-8") -> None:
        self._stream = stream
        self.encoding = encoding
        self.bytes_written = 0

    def write(self, chunk: str) -> int:
        data = chunk.encode(self.encoding, TEXT_ERRORS)
        self._stream.write(data)
        self.bytes_written += len(data)
        return len(data)

    def flush(self) -> None:
        self._stream.flush()


@contextmanager
def open_output(path: Optional[str | Path] = None, encoding: str = "utf-8") -> Iterator[StreamSink]:
    """Yield a sink on ``path``, or on standard output when ``path`` is None."""

    if path is None:
        sink = StreamSink(sys.stdout.buffer, encoding=encoding)
        try:
            yield sink
        finally:
            sink.flush()
        return

    target = Path(path)
    if target.parent and not target.parent.exists():
        target.parent.mkdir(parents=True, exist_ok=True)
    with target.open("wb") as handle:
        sink = StreamSink(handle, encoding=encoding)
        yield sink
