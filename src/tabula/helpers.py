"""Helper methods available inside every template as ``h``.

Helpers bind to one RenderContext and always act on its current buffer,
so the same object works inside sub-renders and captured blocks.
"""

import functools
import logging
from collections.abc import Callable, Iterable
from typing import TYPE_CHECKING, Any

from tabula.buffer import RenderBuffer, RenderError, capture_lines, join_lines
from tabula.context import HostExtensions, RenderContext
from tabula.renderers.filters import flatten, list_of

if TYPE_CHECKING:
    from tabula.templates.renderer import TemplateRenderer

logger = logging.getLogger(__name__)


class Helpers:
    """Template helper facade over a RenderContext.

    Attributes:
        context: Render context the helpers act on
    """

    def __init__(
        self,
        context: RenderContext,
        renderer: "TemplateRenderer | None" = None,
    ) -> None:
        """Initialize helpers.

        Args:
            context: Render context for the current render
            renderer: Template renderer used by partial() and capture_partial()
        """
        self.context = context
        self._renderer = renderer

    @property
    def buffer(self) -> RenderBuffer:
        """Current render buffer."""
        return self.context.current_buffer()

    @property
    def host_rendering(self) -> bool:
        """Return whether a host view environment is present."""
        return self.context.host_rendering

    @property
    def host(self) -> HostExtensions | None:
        """Host extensions, or None when host rendering is disabled."""
        return self.context.host

    def flatten(self, text: str) -> str:
        """Convert line breaks to entities so they survive <pre>-like tags."""
        return flatten(text)

    def list_of(
        self,
        items: Iterable[Any],
        render_item: Callable[[Any], Any] | None = None,
    ) -> str:
        """Wrap each rendered item in the configured list markers.

        For instance ``h.list_of(["hello", "yall"])`` produces::

            <li>hello</li>
            <li>yall</li>
        """
        lists = self.context.config.lists
        return list_of(
            items,
            render_item,
            open_marker=lists.open_marker,
            close_marker=lists.close_marker,
            separator=lists.separator,
        )

    def tab_up(self, i: int = 1) -> int:
        """Increase the tabulation of the current buffer by ``i``."""
        return self.buffer.adjust_tabulation(i)

    def tab_down(self, i: int = 1) -> int:
        """Decrease the tabulation of the current buffer by ``i``."""
        return self.buffer.adjust_tabulation(-i)

    def capture(self, callback: Callable[..., Any], /, *args: Any, **kwargs: Any) -> str:
        """Run ``callback`` and return its output, with excess indentation removed.

        The callback may write to the buffer or return its markup, as a
        macro does. For instance ``{% set foo = h.capture(body, 13) %}``
        with ``{% macro body(a) %}<p>{{ a }}</p>{% endmacro %}`` sets
        ``foo`` to ``"<p>13</p>\\n"``.

        Written lines are removed from the buffer; if the callback raises,
        the buffer is restored and the error propagates.
        """
        lines = capture_lines(self.context.stack, callback, *args, **kwargs)
        return join_lines(lines, self.context.config.capture.separator)

    def bind_proc(self, func: Callable[..., Any]) -> Callable[..., Any]:
        """Tie ``func`` to the buffer that is current now.

        The returned callable makes that buffer current while ``func`` runs,
        however deep the stack is when it is eventually called.
        """
        buffer = self.buffer

        @functools.wraps(func)
        def bound(*args: Any, **kwargs: Any) -> Any:
            with self.context.bound(buffer):
                return func(*args, **kwargs)

        return bound

    def partial(self, template_name: str, /, **variables: Any) -> str:
        """Render another template into its own buffer and return the text."""
        renderer = self._require_renderer()
        with self.context.rendering() as buffer:
            renderer.stream(self.context, template_name, variables)
        logger.debug("Rendered partial %s (%d lines)", template_name, len(buffer))
        return buffer.getvalue()

    def capture_partial(self, template_name: str, /, **variables: Any) -> str:
        """Render another template at the current tabulation and capture it."""
        renderer = self._require_renderer()
        return self.capture(renderer.stream, self.context, template_name, variables)

    def _require_renderer(self) -> "TemplateRenderer":
        if self._renderer is None:
            raise RenderError("No template renderer is bound to these helpers")
        return self._renderer
