"""Render buffers, the buffer stack, and block capture."""

from tabula.buffer.base import NoActiveBufferError, RenderBuffer, RenderError
from tabula.buffer.capture import (
    capture,
    capture_lines,
    join_lines,
    min_indent,
    normalize_indentation,
)
from tabula.buffer.stack import BufferStack

__all__ = [
    "BufferStack",
    "NoActiveBufferError",
    "RenderBuffer",
    "RenderError",
    "capture",
    "capture_lines",
    "join_lines",
    "min_indent",
    "normalize_indentation",
]
