"""Shared pytest fixtures for Tabula tests.

Fixtures are organized by category:
- Context fixtures: render contexts with an active buffer
- Template fixtures: in-memory template sources and a renderer over them
- Configuration fixtures: raw config dictionaries
"""

import logging
from collections.abc import Iterator
from typing import Any

import pytest
from jinja2 import DictLoader

from tabula.buffer import RenderBuffer
from tabula.context import RenderContext
from tabula.helpers import Helpers
from tabula.templates import TemplateRenderer

# =============================================================================
# Context Fixtures
# =============================================================================


@pytest.fixture
def context() -> RenderContext:
    """Return a render context with default configuration."""
    return RenderContext()


@pytest.fixture
def active_buffer(context: RenderContext) -> Iterator[RenderBuffer]:
    """Yield the root buffer of a render in progress."""
    with context.rendering() as buffer:
        yield buffer


@pytest.fixture
def helpers(context: RenderContext, active_buffer: RenderBuffer) -> Helpers:
    """Return helpers bound to a context with an active buffer."""
    return Helpers(context)


# =============================================================================
# Template Fixtures
# =============================================================================


@pytest.fixture
def template_sources() -> dict[str, str]:
    """Return in-memory templates keyed by name."""
    return {
        "card.html.j2": (
            '<div class="card">\n'
            "  <span>{{ name }}</span>\n"
            "</div>\n"
        ),
        "page.html.j2": (
            "<div>\n"
            "{% do h.tab_up() %}\n"
            "<p>{{ title }}</p>\n"
            "{% do h.tab_down() %}\n"
            "</div>\n"
        ),
        "captured.html.j2": (
            "<section>\n"
            "{% do h.tab_up(2) %}\n"
            '{% set card = h.capture_partial("card.html.j2", name="Ada") %}\n'
            "{% do h.tab_down(2) %}\n"
            "<pre>{{ card|flatten }}</pre>\n"
            "</section>\n"
        ),
        "nested.html.j2": (
            "<main>\n"
            "{% do h.tab_up() %}\n"
            '{{ h.partial("card.html.j2", name="Bo") }}\n'
            "{% do h.tab_down() %}\n"
            "</main>\n"
        ),
        "list.html.j2": (
            "<ul>\n"
            "{% do h.tab_up() %}\n"
            "{{ items|list_of }}\n"
            "{% do h.tab_down() %}\n"
            "</ul>\n"
        ),
    }


@pytest.fixture
def renderer(template_sources: dict[str, str]) -> TemplateRenderer:
    """Return a renderer over the in-memory templates."""
    return TemplateRenderer(loader=DictLoader(template_sources))


# =============================================================================
# Configuration Fixtures
# =============================================================================


@pytest.fixture
def full_config() -> dict[str, Any]:
    """Return a complete Tabula configuration with all options."""
    return {
        "buffer": {
            "indent_width": 4,
            "indent_char": " ",
        },
        "capture": {
            "separator": "\r\n",
        },
        "lists": {
            "open_marker": "<option>",
            "close_marker": "</option>",
            "separator": "",
        },
        "host": {
            "enabled": True,
            "force_disabled": False,
        },
        "templates": {
            "search_path": ["views", "shared"],
            "autoescape_extensions": ["html"],
        },
    }


@pytest.fixture(autouse=True)
def reset_tabula_logging() -> Iterator[None]:
    """Drop handlers installed by CLI invocations after each test."""
    yield
    logging.getLogger("tabula").handlers.clear()
