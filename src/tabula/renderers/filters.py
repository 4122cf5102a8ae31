"""Jinja2 filters and text helpers for whitespace-sensitive output.

These helpers are registered as template filters and also exposed on the
``h`` helper object.
"""

import re
from collections.abc import Callable, Iterable
from typing import Any

# Entity that survives inside whitespace-sensitive tags such as <pre>
LINE_FEED_ENTITY = "&#x000A;"

_CARRIAGE_RETURN_RE = re.compile(r"\r")
_LINE_FEED_RE = re.compile(r"\n")


def flatten(text: str) -> str:
    """Replace line feeds with their HTML entity and drop carriage returns.

    Args:
        text: Any string

    Returns:
        Single-line text that renders with its line breaks intact

    Examples:
        >>> flatten("a\\r\\nb\\nc")
        'a&#x000A;b&#x000A;c'
    """
    text = _LINE_FEED_RE.sub(LINE_FEED_ENTITY, str(text))
    return _CARRIAGE_RETURN_RE.sub("", text)


def list_of(
    items: Iterable[Any],
    render_item: Callable[[Any], Any] | None = None,
    *,
    open_marker: str = "<li>",
    close_marker: str = "</li>",
    separator: str = "\n",
) -> str:
    """Render each item and wrap it in a marker pair.

    ``render_item`` may itself write to or capture from the current buffer;
    items are rendered strictly in order.

    Args:
        items: Items to render
        render_item: Callable producing the text for one item (default: str)
        open_marker: Text placed before each item
        close_marker: Text placed after each item
        separator: Text placed between wrapped items

    Returns:
        The wrapped items joined by ``separator``; empty for no items

    Examples:
        >>> list_of(["hello", "yall"])
        '<li>hello</li>\\n<li>yall</li>'
    """
    render = render_item or str
    return separator.join(f"{open_marker}{render(item)}{close_marker}" for item in items)
