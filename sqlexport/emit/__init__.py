"""Emit rendered output to byte streams."""

from .stream import StreamSink, TextSink, open_output

__all__ = ["StreamSink", "TextSink", "open_output"]
