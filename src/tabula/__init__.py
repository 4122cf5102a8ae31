"""Tabula - helper layer for indentation-sensitive markup templates.

Tabula keeps the output of a template render in a line buffer with an
automatic indentation level, and lets templates capture the output of a
nested block as a plain string instead of streaming it.

Core pieces:
- RenderBuffer: emitted lines plus the current tabulation
- BufferStack: the buffers of nested template invocations
- capture: run a block, excise what it wrote, re-base its indentation
- Helpers: the object templates see as ``h``
"""

__version__ = "0.1.0"
__author__ = "Tabula Contributors"
