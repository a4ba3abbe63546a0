"""Tests for the UI context."""

import logging

import pytest
from term_ui import (
    PARENT,
    ConfigurationError,
    Container,
    Label,
    TUIContext,
    Window,
    create_widget,
    object_positioning_conf,
)

from conftest import create_mock_terminal


class TestWindowRegistry:
    """Tests for creating, finding and destroying windows."""

    def test_generated_ids(self, context):
        """Test that windows without id get unique generated ids."""
        first = context.create_window()
        second = context.create_window()
        assert first.id != second.id
        assert context.windows == [first, second]

    def test_generated_id_skips_taken(self, context):
        """Test that a generated id never collides with an explicit one."""
        Window(context, id='window_1')
        window = Window(context)
        assert window.id == 'window_2'

    def test_get_window(self, context):
        """Test finding a window by id."""
        window = context.create_window(id='main')
        assert context.get_window('main') is window
        assert context.get_window('missing') is None

    def test_create_window_with_container(self, context):
        """Test that the container fills the window buffer."""
        window, container = context.create_window_with_container(
            width=20, height=10, buffer_height=30,
        )
        assert isinstance(container, Container)
        assert window.widget is container
        assert container.get_parent() is window
        assert (container.get_height(), container.get_width()) == (30, 18)

    def test_child_and_top_level_windows(self, context):
        """Test the parent/child window queries."""
        parent = context.create_window(width=30, height=12)
        child = context.create_window(parent=parent, width=10, height=4)
        assert context.top_level_windows() == [parent]
        assert context.child_windows(parent) == [child]
        assert context.child_windows(child) == []

    def test_destroy_window(self, context):
        """Test that destroying a window removes it with its children and widgets."""
        parent, container = context.create_window_with_container(width=30, height=12)
        label = create_widget(Label, container, object_positioning_conf(height=1, width=5),
                              text='x')
        child = context.create_window(parent=parent, width=10, height=4)
        context.focus.init_focus_manager()

        parent.destroy()

        assert context.windows == []
        assert context.focus.focus_chain == []
        assert context.get_focused_window() is None
        assert container.widgets == []
        assert label.get_parent() is container
        assert context.get_window(child.id) is None

    def test_destroy_unknown_window(self, context):
        """Test that destroying a window of another context does nothing."""
        window = context.create_window(id='main')
        other_context = TUIContext(create_mock_terminal())
        other = Window(other_context, id='main')

        context.destroy_window(other)

        assert context.get_window('main') is window

    def test_destroy_focused_window(self, context):
        """Test that destroying the focused window moves the focus on."""
        first = context.create_window(width=10, height=5)
        second = context.create_window(width=10, height=5)
        context.focus.init_focus_manager()

        context.destroy_window(first)

        assert context.get_focused_window() is second

    def test_destroy_all_windows(self, context):
        """Test removing every window."""
        parent = context.create_window(width=30, height=12)
        context.create_window(parent=parent, width=10, height=4)
        context.create_window(width=10, height=5)
        context.focus.init_focus_manager()

        context.destroy_all_windows()

        assert context.windows == []
        assert context.focus.focus_chain == []
        assert context.focus.focus_id is None

    def test_move_window_to_top(self, context):
        """Test changing the stacking order."""
        first = context.create_window(width=10, height=5)
        second = context.create_window(width=10, height=5)
        context.refresh_all_windows()

        context.move_window_to_top(first)

        assert context.windows == [second, first]
        assert first.surface.view_needs_update is True


class TestRefresh:
    """Tests for the refresh helpers."""

    def test_full_redraw_first(self, context):
        """Test that the first refresh clears the screen and draws everything."""
        window = context.create_window(width=10, height=5)

        assert context.refresh_all_windows() is True

        context.display.clear.assert_called_once()
        context.display.flush.assert_called_once()
        assert window.surface.view_needs_update is False

    def test_nothing_to_do(self, context):
        """Test that a second refresh copies nothing."""
        context.create_window(width=10, height=5)
        context.refresh_all_windows()
        context.display.reset_mock()

        assert context.refresh_all_windows() is False

        context.display.blit.assert_not_called()
        context.display.flush.assert_not_called()

    def test_windows_above_are_copied_again(self, context):
        """Test that windows stacked above an updated window stay on top."""
        below = context.create_window(width=10, height=5, top=0, left=0)
        above = context.create_window(width=10, height=5, top=2, left=2)
        context.refresh_all_windows()

        below.request_view_update()
        context.refresh_all_windows()

        assert above.surface.view_needs_update is False
        screen_y = above.surface.screen_y
        rows = [c.args[0] for c in context.display.blit.call_args_list[-6:]]
        assert screen_y in rows

    def test_window_below_not_copied(self, context):
        """Test that updating the top window leaves the windows below alone."""
        below = context.create_window(width=10, height=5, top=0, left=0)
        above = context.create_window(width=10, height=5, top=2, left=2)
        context.refresh_all_windows()
        context.display.reset_mock()

        above.request_view_update()
        context.refresh_all_windows()

        origins = {(c.args[0], c.args[1]) for c in context.display.blit.call_args_list}
        assert (below.surface.screen_y, below.surface.screen_x) not in origins

    def test_refresh_window(self, context):
        """Test refreshing a single window by id."""
        window = context.create_window(id='main', width=10, height=5)

        assert context.refresh_window('main') is True
        context.display.flush.assert_called_once()
        assert window.surface.view_needs_update is False
        assert context.refresh_window('main') is False
        assert context.refresh_window('missing') is False

    def test_refresh_nested_window(self, context):
        """Test that refreshing a nested window also refreshes its parents."""
        parent = context.create_window(id='parent', width=30, height=12, top=0, left=0)
        child = context.create_window(id='child', parent=parent, width=10, height=4,
                                      top=1, left=1)
        context.refresh_all_windows()
        context.display.reset_mock()

        child.canvas.write(0, 0, 'new')
        child.request_view_update()

        assert context.refresh_window('child') is True
        assert parent.surface.overlay.text(2)[2:5] == 'new'
        assert parent.surface.buffer.text(2).strip() == ''
        context.display.blit.assert_called()

    def test_hide_triggers_full_redraw(self, context):
        """Test that hiding a window clears the screen on the next refresh."""
        window = context.create_window(width=10, height=5)
        context.refresh_all_windows()
        context.display.reset_mock()

        window.hide()
        context.refresh_all_windows()

        context.display.clear.assert_called_once()

    def test_widget_changes_reach_the_screen(self, context):
        """Test the path from a widget change to the display."""
        window, container = context.create_window_with_container(width=20, height=5,
                                                                 top=0, left=0)
        label = create_widget(Label, container, object_positioning_conf(
            anchor_top=(PARENT, 'top'), height=1, anchor_left=(PARENT, 'left'), width=10,
        ), text='before')
        context.refresh_all_windows()
        context.display.reset_mock()

        label.change_text('after')
        context.refresh_all_windows()

        rows = context.display.blit.call_args_list[0].args[2]
        assert ''.join(ch for ch, _ in rows[0]).startswith('after')


class TestResize:
    """Tests for terminal resize handling."""

    def test_handle_resize(self, context):
        """Test that top-level windows follow the new terminal size."""
        window = context.create_window()
        context.term.width = 100
        context.term.height = 30

        context.handle_resize()

        assert (window.position.width, window.position.height) == (100, 30)
        assert context.screen.width == 100

    def test_handle_resize_logs_errors(self, context, caplog):
        """Test that a window that no longer fits is logged, not raised."""
        small = context.create_window(id='small', width=10, height=5, top=0, left=0)
        big = context.create_window(id='big', opc=object_positioning_conf(
            anchor_top=(PARENT, 'top', 20), anchor_bottom=(PARENT, 'bottom'),
            anchor_left=(PARENT, 'left'), anchor_right=(PARENT, 'right'),
        ))
        context.term.height = 10

        with caplog.at_level(logging.ERROR, logger='term_ui'):
            context.handle_resize()

        assert 'Could not reposition' in caplog.text
        assert big.position.height == 4
        assert small.position.height == 5

    def test_handle_resize_keeps_widget_geometry(self, context, caplog):
        """Test that a window whose widgets no longer fit keeps its previous layout."""
        window, container = context.create_window_with_container()
        widget = create_widget(Label, container, object_positioning_conf(
            anchor_top=(PARENT, 'top', 10), anchor_bottom=(PARENT, 'bottom'), width=5,
        ), text='x')
        context.term.height = 8

        with caplog.at_level(logging.ERROR, logger='term_ui'):
            context.handle_resize()

        assert 'Could not reposition' in caplog.text
        assert window.position.height == 24
        assert container.get_height() == 22
        assert (widget.position.y, widget.position.height) == (10, 12)
        assert widget.position.y + widget.position.height <= container.get_height()


class TestColors:
    """Tests for the color helpers of the context."""

    def test_color_pairs(self, context):
        """Test creating and looking up color pairs."""
        pair = context.init_color_pair('red', 'black')
        assert pair == 1
        assert context.get_color_pair('red', 'black') == pair
        assert context.get_color_pair('blue', 'black') is None

    def test_unknown_color(self, context):
        """Test that unknown color names are configuration errors."""
        with pytest.raises(ConfigurationError):
            context.init_color_pair('mauve', 'black')
