"""Unit tests for the render buffer."""

import pytest

from tabula.buffer import RenderBuffer


class TestEmitAndExcise:
    """Tests for appending lines and cutting them back out."""

    def test_excise_full_range_returns_lines_in_order(self) -> None:
        """Test that excising from 0 returns every emitted line and empties the buffer."""
        buffer = RenderBuffer()
        for line in ["<ul>", "  <li>a</li>", "</ul>"]:
            buffer.emit(line)

        excised = buffer.excise(0)

        assert excised == ["<ul>", "  <li>a</li>", "</ul>"]
        assert buffer.lines == []

    def test_excise_from_mark_keeps_prefix(self) -> None:
        """Test that lines before the mark stay in the buffer."""
        buffer = RenderBuffer()
        buffer.emit("keep")
        mark = buffer.position_mark()
        buffer.emit("drop 1")
        buffer.emit("drop 2")

        assert buffer.excise(mark) == ["drop 1", "drop 2"]
        assert buffer.lines == ["keep"]

    def test_excise_at_end_returns_nothing(self) -> None:
        """Test excising at the current end of the buffer."""
        buffer = RenderBuffer()
        buffer.emit("line")

        assert buffer.excise(buffer.position_mark()) == []
        assert buffer.lines == ["line"]

    def test_excise_negative_position_rejected(self) -> None:
        """Test that a negative mark is refused instead of slicing from the end."""
        buffer = RenderBuffer()
        buffer.emit("line")

        with pytest.raises(ValueError, match="Invalid buffer position"):
            buffer.excise(-1)
        assert buffer.lines == ["line"]

    def test_emit_does_not_indent(self) -> None:
        """Test that emit appends text verbatim regardless of tabulation."""
        buffer = RenderBuffer()
        buffer.adjust_tabulation(3)
        buffer.emit("raw")

        assert buffer.lines == ["raw"]


class TestTabulation:
    """Tests for the tabulation register."""

    @pytest.mark.parametrize("delta", [0, 1, 3, -2])
    def test_adjust_and_revert_restores_value(self, delta: int) -> None:
        """Test that a balanced pair of adjustments restores the tabulation."""
        buffer = RenderBuffer()
        buffer.adjust_tabulation(1)

        buffer.adjust_tabulation(delta)
        buffer.adjust_tabulation(-delta)

        assert buffer.tabulation == 1

    def test_adjust_returns_new_value(self) -> None:
        """Test that adjust_tabulation reports the resulting depth."""
        buffer = RenderBuffer()

        assert buffer.adjust_tabulation(2) == 2
        assert buffer.adjust_tabulation(-1) == 1

    def test_tabulation_not_clamped(self) -> None:
        """Test that a negative tabulation is held, with no indentation applied."""
        buffer = RenderBuffer()
        buffer.adjust_tabulation(-1)

        assert buffer.tabulation == -1
        assert buffer.indentation == ""

    def test_indentation_uses_width_and_char(self) -> None:
        """Test the indentation prefix for custom settings."""
        buffer = RenderBuffer(indent_width=1, indent_char="\t")
        buffer.adjust_tabulation(2)

        assert buffer.indentation == "\t\t"


class TestPushText:
    """Tests for indentation-aware pushing."""

    def test_push_line_applies_tabulation(self) -> None:
        """Test that pushed lines carry the current indentation."""
        buffer = RenderBuffer()
        buffer.push_line("<div>")
        buffer.adjust_tabulation(1)
        buffer.push_line("<p>hi</p>")

        assert buffer.lines == ["<div>", "  <p>hi</p>"]

    def test_push_line_leaves_blank_lines_unindented(self) -> None:
        """Test that blank lines get no trailing whitespace."""
        buffer = RenderBuffer()
        buffer.adjust_tabulation(2)
        buffer.push_line("")

        assert buffer.lines == [""]

    def test_push_text_splits_lines(self) -> None:
        """Test that multi-line text becomes one buffer line per line."""
        buffer = RenderBuffer()
        buffer.adjust_tabulation(1)
        buffer.push_text("<b>\n  x\n</b>\n")

        assert buffer.lines == ["  <b>", "    x", "  </b>"]


class TestGetValue:
    """Tests for the final output string."""

    def test_lines_are_newline_terminated(self) -> None:
        """Test that every line ends with a newline."""
        buffer = RenderBuffer()
        buffer.emit("a")
        buffer.emit("")
        buffer.emit("b")

        assert buffer.getvalue() == "a\n\nb\n"

    def test_empty_buffer(self) -> None:
        """Test that an empty buffer renders as an empty string."""
        assert RenderBuffer().getvalue() == ""
