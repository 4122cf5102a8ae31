"""Jinja2 front end that drives the render buffer.

Template output is streamed with ``Template.generate()`` and pushed into
the current buffer one line at a time, at the buffer's tabulation when the
line completes. Helper calls made by the template (tab_up, capture, partial)
therefore take effect between the lines around them.

Expression output (``{{ ... }}``) loses one trailing newline, so an
embedded partial or captured block ends on the line break of the
template line that embeds it rather than adding a blank line.
"""

import functools
import logging
from pathlib import Path
from typing import Any

from jinja2 import (
    BaseLoader,
    Environment,
    FileSystemLoader,
    Template,
    TemplateNotFound,
    select_autoescape,
)

from tabula.config import TabulaConfig
from tabula.context import RenderContext
from tabula.helpers import Helpers
from tabula.renderers.filters import flatten, list_of

logger = logging.getLogger(__name__)


def strip_final_newline(value: Any) -> Any:
    """Drop one trailing newline from an expression's output.

    Partials and captured blocks are newline-terminated; the template line
    that embeds them supplies its own line break.
    """
    if isinstance(value, str) and value.endswith("\n"):
        return value[:-1]
    return value


class LineWriter:
    """Splits streamed template text into lines for the current buffer."""

    def __init__(self, context: RenderContext) -> None:
        self._context = context
        self._pending = ""

    def write(self, chunk: str) -> None:
        """Buffer ``chunk`` and push every line it completes."""
        self._pending += chunk
        if "\n" not in self._pending:
            return

        *complete, self._pending = self._pending.split("\n")
        buffer = self._context.current_buffer()
        for line in complete:
            buffer.push_line(line)

    def close(self) -> None:
        """Push the unterminated last line, if any."""
        if self._pending:
            self._context.current_buffer().push_line(self._pending)
            self._pending = ""


class TemplateRenderer:
    """Renders Jinja2 templates through a Tabula render buffer.

    Every template sees the helper object as ``h``; ``flatten`` and
    ``list_of`` are also available as filters.

    Usage:
        renderer = TemplateRenderer(config)
        html = renderer.render("page.html.j2", title="Home")
    """

    def __init__(
        self,
        config: TabulaConfig | None = None,
        loader: BaseLoader | None = None,
    ) -> None:
        """Initialize the template renderer.

        Args:
            config: Tabula configuration
            loader: Jinja2 loader (defaults to the configured search path)
        """
        self.config = config or TabulaConfig()

        if loader is None:
            loader = FileSystemLoader(self.config.templates.search_path)

        self._env = Environment(
            loader=loader,
            autoescape=select_autoescape(
                enabled_extensions=self.config.templates.autoescape_extensions,
                disabled_extensions=(),
                default_for_string=False,
                default=False,
            ),
            trim_blocks=True,
            lstrip_blocks=True,
            keep_trailing_newline=True,
            finalize=strip_final_newline,
            extensions=["jinja2.ext.do"],
        )

        lists = self.config.lists
        self._env.filters["flatten"] = flatten
        self._env.filters["list_of"] = functools.partial(
            list_of,
            open_marker=lists.open_marker,
            close_marker=lists.close_marker,
            separator=lists.separator,
        )

    @property
    def environment(self) -> Environment:
        """The underlying Jinja2 environment."""
        return self._env

    def get_template(self, template: str | Template) -> Template:
        """Load a template by name.

        Raises:
            ValueError: If the template cannot be found
        """
        if isinstance(template, Template):
            return template

        try:
            return self._env.get_template(template)
        except TemplateNotFound as e:
            logger.error("Failed to load template %s: %s", template, e)
            raise ValueError(f"Template not found: {template}") from e

    def stream(
        self,
        context: RenderContext,
        template: str | Template,
        variables: dict[str, Any],
    ) -> None:
        """Render ``template`` into the current buffer of ``context``.

        Args:
            context: Render context with an active buffer
            template: Template name or loaded template
            variables: Template variables
        """
        loaded = self.get_template(template)
        helpers = Helpers(context, renderer=self)
        writer = LineWriter(context)

        for chunk in loaded.generate({**variables, "h": helpers}):
            writer.write(chunk)
        writer.close()

    def render(self, template: str | Template, /, **variables: Any) -> str:
        """Render a template in a fresh render context.

        Args:
            template: Template name or loaded template
            **variables: Template variables

        Returns:
            Rendered text, every line newline-terminated
        """
        loaded = self.get_template(template)
        context = RenderContext(self.config)

        try:
            with context.rendering() as buffer:
                self.stream(context, loaded, variables)
        except Exception as e:
            logger.error("Template rendering failed: %s", e)
            raise

        rendered = buffer.getvalue()
        logger.info("Rendered %s (%d lines)", loaded.name or "<string>", len(buffer))
        return rendered

    def render_string(self, source: str, /, **variables: Any) -> str:
        """Render template source text."""
        return self.render(self._env.from_string(source), **variables)

    def render_to_file(
        self,
        template: str | Template,
        output_path: Path,
        /,
        **variables: Any,
    ) -> Path:
        """Render a template and write the result to ``output_path``.

        Returns:
            Path to written file
        """
        content = self.render(template, **variables)

        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_text(content, encoding="utf-8")
        logger.info("Wrote rendered output to %s", output_path)

        return output_path
