"""Capture: turn what a block writes to the buffer back into a value.

The block runs against the current buffer as usual. Everything it appended
is then cut out of the buffer again and re-based to the smallest leading
indentation found among its non-blank lines, so the text can be embedded
anywhere in the caller's output.

For example, a block that writes::

        <p>
          13
        </p>

captures as ``"<p>\\n  13\\n</p>\\n"``.
"""

import logging
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from typing import Any

from tabula.buffer.base import RenderBuffer
from tabula.buffer.stack import BufferStack

logger = logging.getLogger(__name__)


def leading_spaces(line: str) -> int | None:
    """Count leading space characters, or None for a blank line."""
    stripped = line.lstrip(" ")
    if not stripped:
        return None
    return len(line) - len(stripped)


def min_indent(lines: list[str]) -> int:
    """Smallest leading-space width among the non-blank lines (0 if none)."""
    widths = [w for w in (leading_spaces(line) for line in lines) if w is not None]
    return min(widths, default=0)


def normalize_indentation(lines: list[str]) -> list[str]:
    """Strip the common leading indentation from every line.

    Blank lines do not lower the common width; they are shortened like
    every other line.

    Examples:
        >>> normalize_indentation(["    a", "      b", "    c"])
        ['a', '  b', 'c']
        >>> normalize_indentation(["  x", "", "  y"])
        ['x', '', 'y']
    """
    width = min_indent(lines)
    return [line[width:] for line in lines]


@contextmanager
def excising(buffer: RenderBuffer) -> Iterator[list[str]]:
    """Collect and remove every line written to ``buffer`` inside the block.

    The yielded list is filled when the block exits. The buffer is cut back
    to its length at entry whether the block succeeds or raises.
    """
    mark = buffer.position_mark()
    captured: list[str] = []
    try:
        yield captured
    finally:
        captured.extend(buffer.excise(mark))


def capture_lines(
    stack: BufferStack,
    callback: Callable[..., Any],
    /,
    *args: Any,
    **kwargs: Any,
) -> list[str]:
    """Run ``callback`` and return the lines it produced, re-based.

    The callback either writes to the current buffer or returns its output
    as a string (as a Jinja macro or ``caller()`` does). A returned string is
    pushed at the current tabulation, so both kinds of block are normalized
    the same way. Any other return value is ignored.

    Args:
        stack: Buffer stack whose current buffer the callback writes to
        callback: Block to run
        *args: Positional arguments for the callback
        **kwargs: Keyword arguments for the callback

    Returns:
        The produced lines with common indentation removed

    Raises:
        NoActiveBufferError: If no template context is active
    """
    buffer = stack.current_buffer()

    with excising(buffer) as captured:
        result = callback(*args, **kwargs)
        if isinstance(result, str):
            buffer.push_text(result)

    logger.debug("Captured %d line(s)", len(captured))
    return normalize_indentation(captured)


def join_lines(lines: list[str], separator: str = "\n") -> str:
    """Terminate every line with ``separator``; empty for no lines."""
    return "".join(f"{line}{separator}" for line in lines)


def capture(
    stack: BufferStack,
    callback: Callable[..., Any],
    /,
    *args: Any,
    **kwargs: Any,
) -> str:
    """Run ``callback`` and return its output as a normalized string.

    Every captured line is newline-terminated; a block that produces
    nothing captures as ``""``. Arguments after ``callback`` are passed to
    it unchanged.
    """
    return join_lines(capture_lines(stack, callback, *args, **kwargs))
