"""Tabula template rendering.

Jinja2 templates rendered through the Tabula render buffer, with the
helper object exposed to every template as ``h``.
"""

from tabula.templates.renderer import LineWriter, TemplateRenderer

__all__ = ["LineWriter", "TemplateRenderer"]
