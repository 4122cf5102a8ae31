"""Per-render state: the buffer stack and the host environment switch.

One RenderContext is created for each top-level render and dropped when it
finishes, so buffers never leak from one render into the next. Renders on
different threads must use different contexts.
"""

from collections.abc import Iterator
from contextlib import contextmanager

from tabula.buffer import BufferStack, RenderBuffer
from tabula.config import TabulaConfig


class HostExtensions:
    """Helpers that only make sense when a host view layer drives rendering.

    Composed onto a RenderContext when host rendering is enabled.
    """

    def __init__(self, context: "RenderContext") -> None:
        self._context = context

    @property
    def template_active(self) -> bool:
        """Return True if a template is currently being rendered."""
        return bool(self._context.stack)

    def concat(self, text: str) -> None:
        """Push host-produced text into the current buffer at its indentation."""
        self._context.current_buffer().push_text(str(text))


class RenderContext:
    """Explicit state for one top-level render.

    Usage:
        context = RenderContext(config)
        with context.rendering() as buffer:
            buffer.push_text("<p>hi</p>")
        output = buffer.getvalue()
    """

    def __init__(
        self,
        config: TabulaConfig | None = None,
        host_rendering: bool | None = None,
    ) -> None:
        """Initialize the context.

        Args:
            config: Tabula configuration (defaults used when None)
            host_rendering: Override for config.host; fixed for the context's life
        """
        self.config = config or TabulaConfig()
        self.stack = BufferStack()

        if host_rendering is None:
            host_rendering = self.config.host.active
        self._host_rendering = host_rendering
        self.host = HostExtensions(self) if host_rendering else None

    @property
    def host_rendering(self) -> bool:
        """Return whether a host view environment is present."""
        return self._host_rendering

    def new_buffer(self) -> RenderBuffer:
        """Create an empty buffer using the configured indentation."""
        return RenderBuffer(
            indent_width=self.config.buffer.indent_width,
            indent_char=self.config.buffer.indent_char,
        )

    def current_buffer(self) -> RenderBuffer:
        """Return the buffer helpers currently write to."""
        return self.stack.current_buffer()

    @contextmanager
    def rendering(self) -> Iterator[RenderBuffer]:
        """Push a fresh buffer for a (sub-)render and pop it afterwards."""
        with self.stack.active(self.new_buffer()) as buffer:
            yield buffer

    @contextmanager
    def bound(self, buffer: RenderBuffer) -> Iterator[RenderBuffer]:
        """Make an existing buffer current for the duration of the block."""
        with self.stack.active(buffer):
            yield buffer
