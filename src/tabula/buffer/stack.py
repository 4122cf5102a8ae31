"""Stack of render buffers for nested template invocations.

The top of the stack is the buffer every helper writes to. A sub-render
pushes its own buffer for as long as it runs; ``active()`` guarantees the
matching pop even when the render raises.
"""

import logging
from collections.abc import Iterator
from contextlib import contextmanager

from tabula.buffer.base import NoActiveBufferError, RenderBuffer, RenderError

logger = logging.getLogger(__name__)


class BufferStack:
    """Ordered buffer references; the last one is current."""

    def __init__(self) -> None:
        self._buffers: list[RenderBuffer] = []

    def __len__(self) -> int:
        return len(self._buffers)

    def __bool__(self) -> bool:
        return bool(self._buffers)

    def push(self, buffer: RenderBuffer) -> None:
        """Make ``buffer`` the current buffer."""
        self._buffers.append(buffer)
        logger.debug("Pushed render buffer (depth %d)", len(self._buffers))

    def pop(self, expected: RenderBuffer | None = None) -> RenderBuffer:
        """Remove and return the current buffer.

        Args:
            expected: Buffer the caller believes is on top, checked by identity

        Raises:
            NoActiveBufferError: If the stack is empty
            RenderError: If ``expected`` is not the current buffer
        """
        if not self._buffers:
            raise NoActiveBufferError("Cannot pop from an empty buffer stack")
        if expected is not None and self._buffers[-1] is not expected:
            raise RenderError("Unbalanced buffer stack: popped buffer is not on top")

        buffer = self._buffers.pop()
        logger.debug("Popped render buffer (depth %d)", len(self._buffers))
        return buffer

    def current_buffer(self) -> RenderBuffer:
        """Return the buffer helpers currently write to.

        Raises:
            NoActiveBufferError: If no template context is active
        """
        if not self._buffers:
            raise NoActiveBufferError()
        return self._buffers[-1]

    @contextmanager
    def active(self, buffer: RenderBuffer) -> Iterator[RenderBuffer]:
        """Keep ``buffer`` current for the duration of the block."""
        self.push(buffer)
        try:
            yield buffer
        finally:
            self.pop(buffer)
