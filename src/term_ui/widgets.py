"""
Widgets and containers.

A widget is a positionable, focusable unit that draws into a region of its
window's buffer. Containers hold an ordered list of child widgets (the order
is also the tab order) and keep track of which child has the focus.

Parents are either containers or windows; both provide ``canvas``,
``get_height()``, ``get_width()``, ``request_update()``,
``request_focus(widget)``, ``has_focus(widget)``, ``is_focused()`` and
``remove_widget(widget)``.
"""

import logging
import weakref
from typing import Callable, List, Optional

from .keys import Keystroke
from .log import obj_desc
from .positioning import (
    ConfigurationError,
    Dimensions,
    ObjectPositioningConfiguration,
    compute_object_positioning,
    resolution_order,
)

logger = logging.getLogger(__name__)


class Widget:
    """Base class for widgets.

    Subclasses set ``focusable`` and override ``redraw()`` to paint into
    ``canvas`` and ``process_focus()`` to handle keystrokes.

    Attributes:
        opc: Positioning configuration
        position: Resolved position relative to the parent
        canvas: Drawing region inside the window buffer
        visible: Whether the widget is shown
        update_needed: Whether the widget must be redrawn on the next update
        cursor: (y, x) of the terminal cursor inside the widget, used while
            ``require_cursor()`` returns True
    """

    focusable = False

    def __init__(self, parent, opc: ObjectPositioningConfiguration):
        self._parent = weakref.ref(parent)
        self.opc = opc
        self.position = Dimensions()
        self.canvas = None
        self.visible = True
        self.update_needed = True
        self.cursor = (0, 0)
        self._compute_position()
        logger.debug('%s created: %s', obj_desc(self), opc)

    def __repr__(self):
        return obj_desc(self)

    def get_parent(self):
        """Return the parent container or window, or None if it is gone."""
        return self._parent()

    def _set_parent(self, parent):
        self._parent = weakref.ref(parent)

    def _adopt(self, parent):
        """Move the widget under ``parent``, taking it out of its previous parent.

        Raises:
            ConfigurationError: if the widget cannot be positioned in
                ``parent``. It stays with its previous parent in that case.
        """
        previous = self._parent
        old_parent = self.get_parent()
        old_canvas = self.canvas
        self._set_parent(parent)
        try:
            self.reposition()
        except ConfigurationError:
            self._parent = previous
            raise
        if old_parent is not None and old_parent is not parent:
            old_parent.remove_widget(self)
            old_canvas.clear()

    def _compute_position(self):
        parent = self.get_parent()
        height, width, top, left = compute_object_positioning(self.opc, parent)
        self.position = Dimensions(left, top, width, height)
        self.canvas = parent.canvas.derive(top, left, height, width)

    def get_height(self):
        """Return the usable height of the widget."""
        return self.position.height

    def get_width(self):
        """Return the usable width of the widget."""
        return self.position.width

    def reposition(self, opc: Optional[ObjectPositioningConfiguration] = None):
        """Recompute the position, optionally from a new configuration.

        Raises:
            ConfigurationError: if the widget cannot be positioned. The
                previous configuration is kept in that case.
        """
        previous = self.opc
        if opc is not None:
            self.opc = opc
        try:
            self._compute_position()
        except ConfigurationError:
            self.opc = previous
            raise
        self.invalidate()
        self.request_update()

    # Focus

    def accept_focus(self) -> bool:
        """Return True if the widget can receive the focus now."""
        return self.focusable and self.visible

    def gain_focus(self):
        """Called after the widget received the focus."""
        self.request_update()

    def release_focus(self) -> bool:
        """Called before the widget loses the focus. Return False to keep it."""
        self.request_update()
        return True

    def process_focus(self, key: Keystroke) -> bool:
        """Handle ``key`` while in focus. Return True if it was consumed."""
        return False

    def request_focus(self) -> bool:
        """Ask the parent to move its focus to this widget."""
        parent = self.get_parent()
        if parent is None:
            return False
        return parent.request_focus(self)

    def is_focused(self) -> bool:
        """Return True if this widget and all its parents hold the focus."""
        parent = self.get_parent()
        return parent is not None and parent.has_focus(self) and parent.is_focused()

    # Cursor

    def require_cursor(self) -> bool:
        """Return True if the terminal cursor should be shown while focused."""
        return False

    def move_cursor(self, y: int, x: int):
        """Place the cursor at (y, x) inside the widget, clamped to its size."""
        self.cursor = (max(0, min(y, self.get_height() - 1)),
                       max(0, min(x, self.get_width() - 1)))

    def sync_cursor(self):
        """Return the cursor position in window buffer coordinates."""
        y, x = self.cursor
        return self.canvas.top + y, self.canvas.left + x

    # Drawing

    def request_update(self):
        """Mark the widget for redraw and propagate the request upwards."""
        self.update_needed = True
        parent = self.get_parent()
        if parent is not None:
            parent.request_update()

    def invalidate(self):
        self.update_needed = True

    def redraw(self):
        """Paint the widget into its canvas."""

    def update(self, force_redraw: bool = False) -> bool:
        """Redraw the widget if needed.

        Returns:
            True if the widget was redrawn, False otherwise.
        """
        if not (self.update_needed or force_redraw):
            return False
        if self.visible:
            self.redraw()
        else:
            self.canvas.clear()
        self.update_needed = False
        return True

    def show(self):
        if not self.visible:
            self.visible = True
            self.invalidate()
            self.request_update()

    def hide(self):
        if self.visible:
            self.visible = False
            self.request_update()
            parent = self.get_parent()
            if parent is not None and parent.has_focus(self):
                parent.remove_focus(self)

    def destroy(self):
        """Remove the widget from its parent and erase it."""
        parent = self.get_parent()
        if parent is not None:
            parent.remove_widget(self)
        logger.debug('%s destroyed', obj_desc(self))


class Container(Widget):
    """A widget holding other widgets.

    The container owns the focus pointer among its children: at most one
    child is focused at a time, and only children whose ``accept_focus()``
    returns True can become focused.
    """

    def __init__(self, parent, opc: ObjectPositioningConfiguration):
        self.widgets: List[Widget] = []
        self._focused: Optional[Widget] = None
        super().__init__(parent, opc)

    @property
    def focused_widget(self) -> Optional[Widget]:
        return self._focused

    @property
    def focus_id(self) -> Optional[int]:
        """Index of the focused child, or None."""
        if self._focused is None:
            return None
        return self.widgets.index(self._focused)

    def add_widget(self, widget: Widget):
        """Append ``widget`` to the container."""
        if widget in self.widgets:
            return
        if widget.get_parent() is not self:
            widget._adopt(self)
        self.widgets.append(widget)
        widget.invalidate()
        self.request_update()
        logger.debug('%s added to %s', obj_desc(widget), obj_desc(self))

    def remove_widget(self, widget: Widget):
        """Remove ``widget``. Nothing happens if it is not a child.

        If the removed widget had the focus, the focus moves to the next
        sibling that accepts it, or nowhere if none does.
        """
        if widget not in self.widgets:
            return
        idx = self.widgets.index(widget)
        if widget is self._focused:
            self._focused = None
            candidates = self.widgets[idx + 1:] + self.widgets[:idx]
            for candidate in candidates:
                if candidate.accept_focus():
                    self._set_focus(candidate)
                    break
        self.widgets.remove(widget)
        widget.canvas.clear()
        self.request_update()
        logger.debug('%s removed from %s', obj_desc(widget), obj_desc(self))

    def _set_focus(self, widget: Widget):
        self._focused = widget
        logger.debug('%s: focus -> %s', obj_desc(self), obj_desc(widget))
        widget.gain_focus()

    def remove_focus(self, widget: Widget):
        """Drop the focus from ``widget`` because it can no longer hold it."""
        if widget is self._focused and not self._next_widget():
            self._focused = None

    def request_focus(self, widget: Widget) -> bool:
        """Move the focus to ``widget``.

        Fails if ``widget`` is not a child, does not accept the focus, or the
        currently focused child refuses to release it.
        """
        if widget not in self.widgets or not widget.accept_focus():
            return False
        if widget is self._focused:
            return True
        if self._focused is not None and not self._focused.release_focus():
            return False
        self._set_focus(widget)
        return True

    def has_focus(self, widget) -> bool:
        return widget is not None and widget is self._focused

    def _move_focus(self, step: int, wrap: bool = True) -> bool:
        count = len(self.widgets)
        if count == 0:
            return False
        if self._focused is not None:
            start = self.widgets.index(self._focused)
        else:
            start = -1 if step > 0 else count
        for i in range(1, count + 1):
            idx = start + step * i
            if not wrap and not 0 <= idx < count:
                break
            candidate = self.widgets[idx % count]
            if candidate.accept_focus():
                if isinstance(candidate, Container):
                    candidate._select_edge(step)
                    if candidate is self._focused:
                        candidate.gain_focus()
                        return True
                return self.request_focus(candidate)
        # Ran off the end: give the focus back to the parent
        if self._focused is not None and self._focused.release_focus():
            self._focused = None
        return self._focused is not None

    def _select_edge(self, step: int):
        """Point the focus at the first child (or the last one if ``step`` is
        negative) that accepts it. The child is not notified."""
        order = self.widgets if step > 0 else reversed(self.widgets)
        for widget in order:
            if widget.accept_focus():
                if isinstance(widget, Container):
                    widget._select_edge(step)
                self._focused = widget
                return

    def _next_widget(self, wrap: bool = True) -> bool:
        """Move the focus to the next child that accepts it.

        With ``wrap`` the search continues from the first child. Without it,
        moving past the last child releases the focused child.

        Returns:
            True if a child holds the focus afterwards.
        """
        return self._move_focus(1, wrap)

    def _previous_widget(self, wrap: bool = True) -> bool:
        """Move the focus to the previous child that accepts it."""
        return self._move_focus(-1, wrap)

    def accept_focus(self) -> bool:
        return self.visible and any(w.accept_focus() for w in self.widgets)

    def gain_focus(self):
        if self._focused is not None and self._focused.accept_focus():
            self._focused.gain_focus()
        else:
            self._focused = None
            self._next_widget()

    def release_focus(self) -> bool:
        if self._focused is not None:
            return self._focused.release_focus()
        return True

    def process_focus(self, key: Keystroke) -> bool:
        """Forward ``key`` to the focused child, then handle Tab and Shift-Tab.

        Tab wraps around inside the outermost container only. A nested
        container passes Tab on to its parent after its last child (or
        Shift-Tab before its first one).
        """
        if self._focused is not None and self._focused.process_focus(key):
            return True
        if key.kind == 'tab':
            wrap = not isinstance(self.get_parent(), Container)
            if key.shift:
                return self._previous_widget(wrap)
            return self._next_widget(wrap)
        return False

    def require_cursor(self) -> bool:
        return self._focused is not None and self._focused.require_cursor()

    def sync_cursor(self):
        if self._focused is None:
            return None
        return self._focused.sync_cursor()

    def invalidate(self):
        super().invalidate()
        for widget in self.widgets:
            widget.invalidate()

    def reposition(self, opc: Optional[ObjectPositioningConfiguration] = None):
        """Reposition the container, then its children in dependency order.

        Raises:
            ConfigurationError: if the container or one of its children
                cannot be positioned. If ``opc`` was given, the container and
                its children go back to the previous configuration.
        """
        previous = self.opc
        super().reposition(opc)
        try:
            self._reposition_children()
        except ConfigurationError:
            if opc is not None:
                super().reposition(previous)
                self._reposition_children()
            raise

    def _reposition_children(self):
        for widget in resolution_order(self.widgets):
            widget.reposition()

    def redraw(self):
        self.canvas.clear()

    def update(self, force_redraw: bool = False) -> bool:
        if not (self.update_needed or force_redraw):
            return False
        if not self.visible:
            self.canvas.clear()
        else:
            if force_redraw:
                self.redraw()
            for widget in self.widgets:
                widget.update(force_redraw)
        self.update_needed = False
        return True

    def destroy(self):
        for widget in list(self.widgets):
            widget.destroy()
        super().destroy()


class Label(Widget):
    """A non-focusable text label."""

    def __init__(self, parent, opc, text: str = '', alignment: str = 'l', color: int = 0):
        self.text = text
        self.alignment = alignment
        self.color = color
        super().__init__(parent, opc)

    def change_text(self, text: str, alignment: Optional[str] = None, color: int = -1):
        """Change the label text.

        Args:
            text: New text
            alignment: 'l', 'c' or 'r'; unchanged if None
            color: Color pair id; unchanged if negative
        """
        self.text = text
        if alignment is not None:
            self.alignment = alignment
        if color >= 0:
            self.color = color
        self.request_update()

    def redraw(self):
        self.canvas.clear()
        width = self.get_width()
        for row, line in enumerate(self.text.splitlines()):
            if self.alignment == 'c':
                line = line.center(width)
            elif self.alignment == 'r':
                line = line.rjust(width)
            self.canvas.write(row, 0, line, self.color)


class Button(Widget):
    """A focusable button. Enter or space calls ``on_press(button)``."""

    focusable = True

    def __init__(self, parent, opc, label: str = 'Button',
                 on_press: Optional[Callable[['Button'], None]] = None,
                 color: int = 0, color_highlight: int = 0):
        self.label = label
        self.on_press = on_press
        self.color = color
        self.color_highlight = color_highlight
        super().__init__(parent, opc)

    def change_label(self, label: str):
        self.label = label
        self.request_update()

    def process_focus(self, key: Keystroke) -> bool:
        if key.kind == 'enter' or key.is_char(' '):
            if self.on_press is not None:
                self.on_press(self)
            return True
        return False

    def redraw(self):
        self.canvas.clear()
        color = self.color_highlight if self.is_focused() else self.color
        text = f'[ {self.label} ]'.center(self.get_width())
        self.canvas.write(self.get_height() // 2, 0, text, color)


def create_widget(cls, parent, opc: ObjectPositioningConfiguration, *args, **kwargs):
    """Create a widget of type ``cls`` and add it to ``parent``.

    Raises:
        ConfigurationError: if the widget cannot be positioned; nothing is
            added to ``parent`` in that case.
    """
    widget = cls(parent, opc, *args, **kwargs)
    parent.add_widget(widget)
    return widget
