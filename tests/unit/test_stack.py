"""Unit tests for the buffer stack and render context."""

import pytest

from tabula.buffer import BufferStack, NoActiveBufferError, RenderBuffer, RenderError
from tabula.config import HostConfig, TabulaConfig
from tabula.context import HostExtensions, RenderContext


class TestBufferStack:
    """Tests for BufferStack."""

    def test_empty_stack_has_no_current_buffer(self) -> None:
        """Test that asking for a buffer outside any render fails clearly."""
        stack = BufferStack()

        with pytest.raises(NoActiveBufferError, match="outside a template rendering context"):
            stack.current_buffer()

    def test_top_of_stack_is_current(self) -> None:
        """Test that the most recently pushed buffer is current."""
        stack = BufferStack()
        outer, inner = RenderBuffer(), RenderBuffer()

        stack.push(outer)
        stack.push(inner)

        assert stack.current_buffer() is inner
        assert stack.pop() is inner
        assert stack.current_buffer() is outer

    def test_pop_empty_raises(self) -> None:
        """Test popping an empty stack."""
        with pytest.raises(NoActiveBufferError):
            BufferStack().pop()

    def test_pop_wrong_buffer_raises(self) -> None:
        """Test that popping with a mismatched expectation is refused."""
        stack = BufferStack()
        stack.push(RenderBuffer())

        with pytest.raises(RenderError, match="Unbalanced"):
            stack.pop(RenderBuffer())
        assert len(stack) == 1

    def test_active_pops_on_error(self) -> None:
        """Test that active() restores the stack when the block raises."""
        stack = BufferStack()

        with pytest.raises(KeyError):
            with stack.active(RenderBuffer()):
                raise KeyError("boom")

        assert len(stack) == 0
        assert not stack


class TestRenderContext:
    """Tests for RenderContext."""

    def test_rendering_pushes_fresh_buffer(self, context: RenderContext) -> None:
        """Test that nested renders get distinct buffers and unwind in order."""
        with context.rendering() as outer:
            assert context.current_buffer() is outer
            with context.rendering() as inner:
                assert inner is not outer
                assert context.current_buffer() is inner
                assert len(context.stack) == 2
            assert context.current_buffer() is outer

        assert len(context.stack) == 0

    def test_rendering_unwinds_on_error(self, context: RenderContext) -> None:
        """Test that a failing render leaves no stale buffer behind."""
        with pytest.raises(RuntimeError):
            with context.rendering():
                with context.rendering():
                    raise RuntimeError("template failed")

        assert len(context.stack) == 0

    def test_contexts_do_not_share_state(self) -> None:
        """Test that separate renders never see each other's buffers."""
        first, second = RenderContext(), RenderContext()

        with first.rendering():
            with pytest.raises(NoActiveBufferError):
                second.current_buffer()

    def test_new_buffer_uses_config(self) -> None:
        """Test that buffers pick up the configured indentation."""
        config = TabulaConfig()
        config.buffer.indent_width = 4
        context = RenderContext(config)

        buffer = context.new_buffer()
        buffer.adjust_tabulation(1)

        assert buffer.indentation == "    "

    def test_bound_makes_existing_buffer_current(self, context: RenderContext) -> None:
        """Test rebinding an existing buffer for a block."""
        with context.rendering() as outer:
            with context.rendering():
                with context.bound(outer):
                    assert context.current_buffer() is outer
                assert context.current_buffer() is not outer


class TestHostRendering:
    """Tests for the host environment switch and extensions."""

    def test_disabled_by_default(self, context: RenderContext) -> None:
        """Test that no host extensions exist by default."""
        assert context.host_rendering is False
        assert context.host is None

    def test_enabled_from_config(self) -> None:
        """Test enabling host rendering through configuration."""
        context = RenderContext(TabulaConfig(host=HostConfig(enabled=True)))

        assert context.host_rendering is True
        assert isinstance(context.host, HostExtensions)

    def test_force_disabled_wins(self) -> None:
        """Test that force_disabled suppresses host extensions."""
        config = TabulaConfig(host=HostConfig(enabled=True, force_disabled=True))

        assert RenderContext(config).host is None

    def test_explicit_override(self) -> None:
        """Test overriding the configured switch at construction."""
        context = RenderContext(host_rendering=True)

        assert context.host_rendering is True

    def test_concat_pushes_into_current_buffer(self) -> None:
        """Test that concat writes at the current indentation."""
        context = RenderContext(host_rendering=True)
        assert context.host is not None

        assert context.host.template_active is False
        with context.rendering() as buffer:
            assert context.host.template_active is True
            buffer.adjust_tabulation(1)
            context.host.concat("<form>\n</form>")

        assert buffer.lines == ["  <form>", "  </form>"]
