"""Render buffer and the errors raised by buffer handling.

A RenderBuffer holds the output of one template rendering as a list of
lines, together with the tabulation (indentation depth) that newly pushed
lines receive. Lines are stored without their terminating newline.
"""


class RenderError(Exception):
    """Base class for errors raised by Tabula's rendering core."""


class NoActiveBufferError(RenderError):
    """Raised when a buffer is requested outside any template context."""

    def __init__(self, message: str | None = None) -> None:
        self.message = message or (
            "No active render buffer: helpers were called outside a "
            "template rendering context"
        )
        super().__init__(self.message)


class RenderBuffer:
    """Ordered output lines plus the current auto-indent level.

    ``tabulation`` is adjusted by signed deltas and never clamped. Callers
    that raise it must lower it again, otherwise the extra indentation
    applies to every line pushed for the rest of the render.

    Attributes:
        lines: Emitted lines, oldest first
        tabulation: Current indentation depth in tabs
        indent_width: Indent characters per tab
        indent_char: Character used for indentation
    """

    def __init__(self, indent_width: int = 2, indent_char: str = " ") -> None:
        """Initialize an empty buffer.

        Args:
            indent_width: Number of indent characters per tabulation level
            indent_char: Character repeated to build the indentation
        """
        self.lines: list[str] = []
        self.tabulation = 0
        self.indent_width = indent_width
        self.indent_char = indent_char

    def __len__(self) -> int:
        return len(self.lines)

    def __repr__(self) -> str:
        return f"RenderBuffer(lines={len(self.lines)}, tabulation={self.tabulation})"

    @property
    def indentation(self) -> str:
        """Indent prefix for the current tabulation (empty when not positive)."""
        return self.indent_char * (self.indent_width * self.tabulation)

    def emit(self, text: str) -> None:
        """Append a line as-is."""
        self.lines.append(text)

    def push_line(self, line: str) -> None:
        """Append one line prefixed with the current indentation.

        Blank lines are appended without indentation.
        """
        self.emit(f"{self.indentation}{line}" if line else line)

    def push_text(self, text: str) -> None:
        """Append text line by line, each prefixed with the current indentation.

        Args:
            text: One or more lines; a trailing newline does not add a line
        """
        for line in text.splitlines():
            self.push_line(line)

    def adjust_tabulation(self, delta: int) -> int:
        """Shift the tabulation by ``delta`` and return the new value."""
        self.tabulation += delta
        return self.tabulation

    def position_mark(self) -> int:
        """Return a mark identifying everything appended after this point."""
        return len(self.lines)

    def excise(self, from_position: int) -> list[str]:
        """Remove and return every line appended since ``from_position``.

        Args:
            from_position: Mark previously returned by position_mark()

        Returns:
            The removed lines in emission order
        """
        if from_position < 0:
            raise ValueError(f"Invalid buffer position: {from_position}")

        excised = self.lines[from_position:]
        del self.lines[from_position:]
        return excised

    def getvalue(self) -> str:
        """Return the buffer contents with every line newline-terminated."""
        return "".join(f"{line}\n" for line in self.lines)
