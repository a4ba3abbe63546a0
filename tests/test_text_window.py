"""Tests for TextWindow class."""

import pytest
from term_ui import Keystroke, TextWindow, object_positioning_conf

LONG_TEXT = "\n".join(f"Line {i}" for i in range(50))


def key(kind):
    return Keystroke('', kind)


class TestTextWindow:
    """Tests for the TextWindow class."""

    def test_string_text_initialization(self, context):
        """Test initialization with string text."""
        window = TextWindow(context, "Line 1\nLine 2\nLine 3")

        assert window.text == "Line 1\nLine 2\nLine 3"
        assert window.surface.view_y == 0
        assert window.surface.buffer.text(1).rstrip() == "Line 2"

    def test_list_text_initialization(self, context):
        """Test initialization with list of lines."""
        window = TextWindow(context, ["Line 1", "Line 2", "Line 3"])

        assert window.text == "Line 1\nLine 2\nLine 3"

    def test_tuple_text_initialization(self, context):
        """Test initialization with tuple of lines."""
        window = TextWindow(context, ("Line 1", "Line 2"))

        assert window.text == "Line 1\nLine 2"

    def test_text_wrapping(self, context):
        """Test that long lines are wrapped to the view width."""
        window = TextWindow(
            context,
            "This is a very long line that should be wrapped to fit within the window width"
            " because it is longer than the terminal",
        )

        assert len(window._lines) > 1
        for line in window._lines:
            assert len(line) <= window.get_visible_width()

    def test_buffer_holds_all_lines(self, context):
        """Test that the buffer is as tall as the text."""
        window = TextWindow(context, LONG_TEXT)

        assert window.get_height() == 50
        assert window.get_visible_height() < 50
        assert window.surface.buffer.text(49).rstrip() == "Line 49"

    def test_scroll_down(self, context):
        """Test scrolling down with arrow key."""
        window = TextWindow(context, LONG_TEXT)

        assert window.process_focus(key('down')) is True
        assert window.surface.view_y == 1
        assert window.surface.view_needs_update is True

    def test_scroll_up_at_top(self, context):
        """Test that scrolling up at top doesn't go negative."""
        window = TextWindow(context, LONG_TEXT)

        assert window.process_focus(key('up')) is True
        assert window.surface.view_y == 0

    def test_page_down_and_up(self, context):
        """Test page scrolling."""
        window = TextWindow(context, LONG_TEXT)
        page = window.get_visible_height()

        window.process_focus(key('pagedown'))
        assert window.surface.view_y == page
        window.process_focus(key('pageup'))
        assert window.surface.view_y == 0

    def test_home_and_end(self, context):
        """Test jumping to the end and back to the top."""
        window = TextWindow(context, LONG_TEXT)

        window.process_focus(key('end'))
        assert window.surface.view_y == 50 - window.get_visible_height()
        window.process_focus(key('pagedown'))
        assert window.surface.view_y == 50 - window.get_visible_height()
        window.process_focus(key('home'))
        assert window.surface.view_y == 0

    def test_other_keys_not_consumed(self, context):
        """Test that keys other than scrolling keys are left to the caller."""
        window = TextWindow(context, LONG_TEXT)

        assert window.process_focus(key('escape')) is False
        assert window.process_focus(Keystroke('q')) is False

    def test_short_text_does_not_scroll(self, context):
        """Test that scrolling keys are ignored when the text fits."""
        window = TextWindow(context, "Short text")

        assert window.process_focus(key('down')) is False
        assert window.surface.view_y == 0

    def test_scroll_pos(self, context):
        """Test the scroll position of a text taller than the view."""
        window = TextWindow(context, LONG_TEXT)

        assert window.surface.scroll_pos == 0.0
        window.process_focus(key('down'))
        assert 0.0 < window.surface.scroll_pos < 1.0
        window.process_focus(key('end'))
        assert window.surface.scroll_pos == 1.0

    def test_status_bar_updates(self, context):
        """Test that status bar updates based on scrollability."""
        short = TextWindow(context, "Short text")
        assert short.status_bar is None

        long = TextWindow(context, LONG_TEXT)
        assert long.status_bar == TextWindow.SCROLL_STATUS

        long.change_text("Now short")
        assert long.status_bar is None

    def test_custom_status_bar_kept(self, context):
        """Test that a status bar given by the caller is not replaced by a fitting text."""
        window = TextWindow(context, "Short", status_bar="[Esc=Close]")
        assert window.status_bar == "[Esc=Close]"

    def test_change_text_resets_view(self, context):
        """Test that changing the text scrolls back to the top."""
        window = TextWindow(context, LONG_TEXT)
        window.process_focus(key('pagedown'))

        window.change_text(["a", "b"])

        assert window.text == "a\nb"
        assert window.surface.view_y == 0
        assert window.surface.buffer.text(0).rstrip() == "a"

    def test_empty_text(self, context):
        """Test handling of empty text."""
        window = TextWindow(context, "")

        assert window._lines == ['']

    def test_window_sizing_to_fit_content(self, context):
        """Test that window sizes itself to fit content."""
        window = TextWindow(context, "Short")

        assert window.position.width <= int(context.screen.width * 0.9)
        assert window.position.height <= int(context.screen.height * 0.9)
        assert window.position.width == 10  # Minimum width
        assert window.position.height == 6   # Minimum height

    def test_sizing_capped_by_screen(self, context):
        """Test that a long text is limited to 90% of the screen."""
        window = TextWindow(context, LONG_TEXT)

        assert window.position.height == int(context.screen.height * 0.9)

    def test_explicit_size(self, context):
        """Test that an explicit size is not changed to fit the text."""
        window = TextWindow(context, "Short", width=30, height=8, top=0, left=0)

        assert (window.position.width, window.position.height) == (30, 8)

    @pytest.mark.parametrize('width', [20, 40])
    def test_reposition_rewraps(self, context, width):
        """Test that repositioning wraps the text to the new width."""
        window = TextWindow(context, "word " * 30, width=60, height=10, top=0, left=0)

        window.reposition(object_positioning_conf(top=0, left=0, height=10, width=width))

        assert window.get_visible_width() == width - 2
        for line in window._lines:
            assert len(line) <= width - 2
