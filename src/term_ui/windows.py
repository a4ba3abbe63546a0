"""
Windows.

A window is the top-level drawable unit: it owns a ``Surface`` (buffer and
view), an optional border with title and status bar, and a single root
widget, usually a ``Container``. Windows can be nested: a child window
copies its view onto the overlay of its parent's surface instead of to the
terminal.
"""

import logging
import textwrap
import weakref
from typing import Optional

from .keys import Keystroke
from .log import obj_desc
from .positioning import (
    PARENT,
    Anchor,
    ConfigurationError,
    Dimensions,
    ObjectPositioningConfiguration,
    compute_object_positioning,
    object_positioning_conf,
)
from .surface import BufferRegion, Surface

logger = logging.getLogger(__name__)


def window_positioning_conf(top=None, left=None, height=None, width=None):
    """Build a positioning configuration from plain coordinates.

    A missing size fills the parent (starting at the given position, if
    any). A given size without a position is centered in the parent.
    """
    kwargs = {}
    if height is None:
        kwargs['anchor_top'] = Anchor(PARENT, 'top', top or 0)
        kwargs['anchor_bottom'] = Anchor(PARENT, 'bottom')
    elif top is None:
        kwargs['anchor_middle'] = Anchor(PARENT, 'middle')
        kwargs['height'] = height
    else:
        kwargs['top'] = top
        kwargs['height'] = height
    if width is None:
        kwargs['anchor_left'] = Anchor(PARENT, 'left', left or 0)
        kwargs['anchor_right'] = Anchor(PARENT, 'right')
    elif left is None:
        kwargs['anchor_center'] = Anchor(PARENT, 'center')
        kwargs['width'] = width
    else:
        kwargs['left'] = left
        kwargs['width'] = width
    return ObjectPositioningConfiguration(**kwargs)


class Window:
    """A window with an optional border and one root widget.

    Windows register themselves in the context when created, so a window
    that fails to position is never shown.

    Child windows are composed on the overlay of this window's surface, never
    on its buffer, so hiding or destroying them uncovers the original content.

    Attributes:
        id: Identifier, unique within the context
        title: Window title displayed in the top border
        title_color: Color pair of the title, or None to use the border color
        border: Whether to draw a border around the window
        status_bar: Status text displayed in the bottom border
        focusable: Whether the window can take the focus
        opc: Positioning configuration (relative to the screen or the parent window)
        position: Resolved outer position, border included
        surface: Buffer and view of the window content
        canvas: Drawing region covering the whole buffer
        widget: Root widget, or None
        focused: Whether the window has the focus
        hidden: Whether the window is hidden
    """

    def __init__(self, context, opc: Optional[ObjectPositioningConfiguration] = None, *,
                 id: Optional[str] = None, title='', border=True, focusable=True,
                 parent: Optional['Window'] = None, buffer_height=None, buffer_width=None,
                 status_bar=None, border_color=0, title_color=None, top=None, left=None,
                 height=None, width=None):
        self.context = context
        self.id = context.new_window_id() if id is None else id
        if context.get_window(self.id) is not None:
            raise ConfigurationError(f'A window with id {self.id!r} already exists')
        self.title = title
        self.title_color = title_color
        self.border = border
        self.status_bar = status_bar
        self.border_color = border_color
        self.focusable = focusable
        self.buffer_height = buffer_height
        self.buffer_width = buffer_width
        self._parent = weakref.ref(parent) if parent is not None else None
        self.opc = opc or window_positioning_conf(top, left, height, width)
        self.position = Dimensions()
        self.widget = None
        self.focused = False
        self.hidden = False
        self._force_redraw = True

        self._compute_position()
        b = self._border_size()
        self.surface = Surface(
            parent.surface.overlay if parent is not None else context.display,
            self.position.height - 2 * b,
            self.position.width - 2 * b,
            buffer_height,
            buffer_width,
        )
        self._place_surface()
        context.register_window(self)
        logger.debug('Window %r created: %s', self.id, self.opc)

    def __repr__(self):
        return f'<{type(self).__name__} {self.id!r}>'

    def _border_size(self):
        return 1 if self.border else 0

    def _layout_parent(self):
        parent = self.get_parent()
        return parent if parent is not None else self.context.screen

    def _compute_position(self):
        height, width, top, left = compute_object_positioning(self.opc, self._layout_parent())
        b = self._border_size()
        if height < 2 * b or width < 2 * b:
            raise ConfigurationError(
                f'Window {self.id!r} is too small ({height}x{width}) for its border'
            )
        self.position = Dimensions(left, top, width, height)

    def _place_surface(self):
        b = self._border_size()
        self.surface.screen_y = self.position.y + b
        self.surface.screen_x = self.position.x + b
        self.canvas = BufferRegion(self.surface.buffer, 0, 0,
                                   self.surface.buffer.height, self.surface.buffer.width)

    def get_parent(self) -> Optional['Window']:
        """Return the parent window, or None for a top-level window."""
        return self._parent() if self._parent is not None else None

    def get_height(self):
        """Return the usable height (the buffer height)."""
        return self.surface.buffer.height

    def get_width(self):
        """Return the usable width (the buffer width)."""
        return self.surface.buffer.width

    def get_visible_height(self):
        return self.surface.view_height

    def get_visible_width(self):
        return self.surface.view_width

    def reposition(self, opc: Optional[ObjectPositioningConfiguration] = None):
        """Recompute the window geometry, optionally from a new configuration.

        The root widget and the child windows are repositioned as well.

        Raises:
            ConfigurationError: if the window, its widgets or its child
                windows cannot be positioned. The previous configuration and
                geometry of the whole subtree are kept in that case.
        """
        previous = self.opc
        position = self.position
        surface_state = self.surface.save_state()
        if opc is not None:
            self.opc = opc
        try:
            self._compute_position()
            self._apply_geometry()
        except ConfigurationError:
            logger.debug('Window %r: reposition failed, restoring %s', self.id, previous)
            self.opc = previous
            self.position = position
            self.surface.restore_state(surface_state)
            self._place_surface()
            self._reposition_contents()
            raise
        self._force_redraw = True
        self.context.request_full_redraw()

    def _apply_geometry(self):
        b = self._border_size()
        self.surface.resize(self.position.height - 2 * b, self.position.width - 2 * b,
                            self.buffer_height, self.buffer_width)
        self._place_surface()
        self._reposition_contents()

    def _reposition_contents(self):
        if self.widget is not None:
            self.widget.reposition()
        for child in self.context.child_windows(self):
            child.reposition()

    def move(self, top: int, left: int):
        """Move the window to (top, left) in its parent, keeping its size.

        Raises:
            ConfigurationError: if the window cannot be positioned there.
        """
        self.reposition(object_positioning_conf(
            anchor_top=(PARENT, 'top', top), height=self.position.height,
            anchor_left=(PARENT, 'left', left), width=self.position.width,
        ))

    # Widget

    def add_widget(self, widget):
        """Set ``widget`` as the root widget, replacing the current one."""
        if self.widget is widget:
            return
        if widget.get_parent() is not self:
            widget._adopt(self)
        if self.widget is not None:
            self.remove_widget(self.widget)
        self.widget = widget
        widget.invalidate()
        if self.focused and widget.accept_focus():
            widget.gain_focus()
        self.request_update()

    set_widget = add_widget

    def remove_widget(self, widget):
        """Remove the root widget. Nothing happens if ``widget`` is not it."""
        if widget is None or widget is not self.widget:
            return
        self.widget = None
        widget.canvas.clear()
        self.request_update()

    def request_update(self):
        """Called by the root widget when it needs to be redrawn."""
        self.request_view_update()

    def request_view_update(self):
        """Mark the view of this window and of all its parent windows as out of date."""
        window = self
        while window is not None:
            window.surface.request_update()
            window = window.get_parent()

    # Focus

    def accept_focus(self) -> bool:
        return self.focusable and not self.hidden

    def gain_focus(self):
        self.focused = True
        if self.widget is not None and self.widget.accept_focus():
            self.widget.gain_focus()
        self.request_view_update()
        logger.debug('Window %r gained focus', self.id)

    def release_focus(self) -> bool:
        """Release the focus. Returns False if the root widget refuses."""
        if self.widget is not None and not self.widget.release_focus():
            logger.debug('Window %r: %s kept the focus', self.id, obj_desc(self.widget))
            return False
        self.focused = False
        self.request_view_update()
        logger.debug('Window %r released focus', self.id)
        return True

    def drop_focus(self):
        """Lose the focus unconditionally (the window is going away or hidden)."""
        self.focused = False
        self.request_view_update()

    def is_focused(self) -> bool:
        return self.focused

    def request_focus(self, widget) -> bool:
        """Containers API: a window can only focus its root widget."""
        return widget is not None and widget is self.widget and widget.accept_focus()

    def has_focus(self, widget) -> bool:
        return widget is not None and widget is self.widget

    def remove_focus(self, widget):
        """Containers API: the root widget can no longer hold the focus."""

    def process_focus(self, key: Keystroke) -> bool:
        """Forward ``key`` to the root widget. Returns True if it was consumed."""
        if self.widget is not None:
            return self.widget.process_focus(key)
        return False

    # Cursor

    def require_cursor(self) -> bool:
        """Return True if the focused widget wants the terminal cursor shown."""
        return not self.hidden and self.widget is not None and self.widget.require_cursor()

    def sync_cursor(self):
        """Return the screen position of the cursor of the focused widget.

        The widget reports its cursor in buffer coordinates; the position is
        mapped through the view of this window and of every parent window.

        Returns:
            Tuple (y, x), or None if no cursor is required or it is scrolled
            out of view.
        """
        if not self.require_cursor():
            return None
        cursor = self.widget.sync_cursor()
        if cursor is None:
            return None
        y, x = cursor
        window = self
        while window is not None:
            surface = window.surface
            y -= surface.view_y
            x -= surface.view_x
            if not (0 <= y < surface.view_height and 0 <= x < surface.view_width):
                return None
            y += surface.screen_y
            x += surface.screen_x
            window = window.get_parent()
        return y, x

    # View

    def move_view(self, y: int, x: int):
        """Move the origin of the view to (y, x), clamped to the buffer."""
        self.surface.move_view(y, x)
        self.request_view_update()

    def move_view_inc(self, dy: int = 0, dx: int = 0):
        self.surface.move_view_inc(dy, dx)
        self.request_view_update()

    def set_title(self, title: str, title_color: Optional[int] = None):
        """Change the title, and its color pair if ``title_color`` is given."""
        self.title = title
        if title_color is not None:
            self.title_color = title_color
        self.request_view_update()

    def show(self):
        """Show the window again. It takes the focus if no window holds it."""
        if not self.hidden:
            return
        self.hidden = False
        self._force_redraw = True
        self.request_view_update()
        if self.context.get_focused_window() is None:
            self.context.focus.request_focus(self)

    def hide(self):
        if self.hidden:
            return
        self.hidden = True
        if self.focused:
            self.context.focus.remove_focus(self)
        parent = self.get_parent()
        if parent is not None:
            parent._force_redraw = True
            parent.request_view_update()
        self.context.request_full_redraw()

    def destroy(self):
        self.context.destroy_window(self)

    def refresh(self, force_redraw: bool = False) -> bool:
        """Redraw what changed and copy the view to the screen.

        Widgets that need an update are redrawn into the buffer. If there are
        visible child windows, the overlay is rebuilt from the buffer and the
        children are copied onto it. Then the view is copied if it is out of
        date (or ``force_redraw`` is True).

        Returns:
            True if the view was copied, False otherwise.
        """
        if self.hidden:
            return False
        force = force_redraw or self._force_redraw
        self._force_redraw = False
        if self.widget is not None and self.widget.update(force):
            self.surface.request_update()

        children = [w for w in self.context.child_windows(self) if not w.hidden]
        self.surface.use_overlay = bool(children)
        if children:
            restack = force or self.surface.view_needs_update
            if restack:
                self.surface.reset_overlay()
            for child in children:
                if restack:
                    child.surface.request_update()
                if child.refresh(force):
                    self.surface.request_update()
                    restack = True

        updated = self.surface.update_view(force=force)
        if updated and self.border:
            self.draw_border()
        return updated

    def draw_border(self):
        """Draw the border, title, status bar and scroll indicators."""
        width = self.position.width
        height = self.position.height
        if width < 2 or height < 2:
            return
        color = self.border_color
        scroll_pos = self.surface.scroll_pos
        sink = self.surface.sink
        y, x = self.position.y, self.position.x

        title_text = f' {self.title} '.center(width - 2, '-')[:width - 2]
        corner = '+' if scroll_pos is None else '^'
        top = '+' + title_text + corner

        info = f' {self.status_bar} ' if self.status_bar else ''
        dashes = '-' * max(0, width - 2 - len(info))
        corner = '+' if scroll_pos is None else 'v'
        bottom = '+' + (dashes + info)[:width - 2] + corner

        view_height = height - 2
        scroll_row = None
        if scroll_pos is not None and view_height > 0:
            scroll_row = int(scroll_pos * (view_height - 1))
        left_side = [[('|', color)] for _ in range(view_height)]
        right_side = [[('=' if row == scroll_row else '|', color)] for row in range(view_height)]

        top_cells = [(ch, color) for ch in top]
        if self.title and self.title_color is not None:
            label = f' {self.title} '
            start = title_text.find(label)
            if start >= 0:
                for col in range(1 + start, 1 + start + len(label)):
                    top_cells[col] = (top_cells[col][0], self.title_color)

        sink.blit(y, x, [top_cells])
        sink.blit(y + height - 1, x, [[(ch, color) for ch in bottom]])
        sink.blit(y + 1, x, left_side)
        sink.blit(y + 1, x + width - 1, right_side)


class TextWindow(Window):
    """A window that displays scrollable text content.

    The text is wrapped to the view width and written once into a buffer as
    tall as the text; scrolling only moves the view.
    """

    SCROLL_STATUS = '[Arrows/PgUp/PgDn=Scroll]'

    def __init__(self, context, text, *args, **kwargs):
        """Initialize a text window.

        Args:
            context: TUIContext the window belongs to
            text: Text content (string, list, or tuple of lines)
            *args, **kwargs: Passed to Window.__init__(). If neither a
                configuration nor a size is given, the window is sized to
                fit the text within 90% of the parent.
        """
        self.text = "\n".join(text) if isinstance(text, (list, tuple)) else text
        self._lines = []
        if not args and kwargs.get('opc') is None:
            self._fit_to_text(context, kwargs)
        super().__init__(context, *args, **kwargs)
        self._layout_text()

    def _fit_to_text(self, context, kwargs):
        parent = kwargs.get('parent')
        if parent is not None:
            max_height, max_width = parent.get_visible_height(), parent.get_visible_width()
        else:
            max_height, max_width = context.screen.height, context.screen.width
        max_win_width = int(max_width * 0.9)
        max_win_height = int(max_height * 0.9)
        b = 2 if kwargs.get('border', True) else 0
        lines = self._wrap(max(1, max_win_width - b))
        max_line_length = max(len(line) for line in lines)
        if kwargs.get('width') is None:
            kwargs['width'] = max(10, min(max_win_width, max_line_length + b))
        if kwargs.get('height') is None:
            kwargs['height'] = max(6, min(max_win_height, len(lines) + b))

    def _wrap(self, width):
        lines = []
        for line in self.text.splitlines() or ['']:
            lines.extend(textwrap.wrap(line, width) or [''])
        return lines

    def _layout_text(self):
        view_width = self.surface.view_width
        self._lines = self._wrap(max(1, view_width))
        self.surface.resize(self.surface.view_height, view_width,
                            max(len(self._lines), self.buffer_height or 0), self.buffer_width)
        self._place_surface()
        self.canvas.clear()
        for row, line in enumerate(self._lines):
            self.canvas.write(row, 0, line)
        self._update_status()
        self.request_view_update()

    def _update_status(self):
        if self.surface.scroll_pos is not None:
            self.status_bar = self.SCROLL_STATUS
        elif self.status_bar == self.SCROLL_STATUS:
            self.status_bar = None

    def change_text(self, text):
        self.text = "\n".join(text) if isinstance(text, (list, tuple)) else text
        self.surface.move_view(0, 0)
        self._layout_text()

    def reposition(self, opc=None):
        super().reposition(opc)
        self._layout_text()

    def process_focus(self, key: Keystroke) -> bool:
        """Handle scrolling input."""
        page = self.surface.view_height
        below_the_fold = self.surface.buffer.height - page
        if below_the_fold <= 0:
            return super().process_focus(key)
        match key.kind:
            case 'down':
                self.move_view_inc(1, 0)
            case 'up':
                self.move_view_inc(-1, 0)
            case 'pagedown':
                self.move_view_inc(page, 0)
            case 'pageup':
                self.move_view_inc(-page, 0)
            case 'home':
                self.move_view(0, 0)
            case 'end':
                self.move_view(below_the_fold, 0)
            case _:
                return super().process_focus(key)
        return True
