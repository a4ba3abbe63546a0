"""
The UI context: window registry, focus chain, colors and display.

A context is created explicitly by the application driver (or by a test)
and holds all the state shared by the windows of one terminal.
"""

import logging
from typing import Dict, List, Optional

from blessed import Terminal

from .colors import Color, ColorRegistry
from .display import TerminalDisplay
from .focus import FocusManager
from .log import obj_desc
from .positioning import ConfigurationError, Dimensions, object_positioning_conf, PARENT
from .widgets import Container
from .windows import Window

logger = logging.getLogger(__name__)


class TUIContext:
    """Registry of the windows shown on one terminal.

    Windows are kept in stacking order: later windows are drawn over
    earlier ones.

    Attributes:
        term: Blessed Terminal instance
        colors: Color pair registry
        display: Output sink of top-level windows
        focus: Focus chain manager
        screen: Screen dimensions, the layout parent of top-level windows
    """

    def __init__(self, term: Optional[Terminal] = None):
        self.term = term or Terminal()
        self.colors = ColorRegistry()
        self.display = TerminalDisplay(self.term, self.colors)
        self.focus = FocusManager()
        self.screen = Dimensions(0, 0, self.term.width, self.term.height)
        self._windows: Dict[str, Window] = {}
        self._window_counter = 0
        self._full_redraw = True

    @property
    def windows(self) -> List[Window]:
        return list(self._windows.values())

    def new_window_id(self) -> str:
        self._window_counter += 1
        while f'window_{self._window_counter}' in self._windows:
            self._window_counter += 1
        return f'window_{self._window_counter}'

    def register_window(self, window: Window):
        """Add a newly created window to the registry and the focus chain."""
        self._windows[window.id] = window
        self.focus.add_window(window)

    def create_window(self, opc=None, **kwargs) -> Window:
        """Create a window. See ``Window`` for the arguments."""
        return Window(self, opc, **kwargs)

    def create_window_with_container(self, opc=None, **kwargs):
        """Create a window whose root widget is a container filling its buffer.

        Returns:
            Tuple (window, container).
        """
        window = self.create_window(opc, **kwargs)
        container = Container(window, object_positioning_conf(
            anchor_top=(PARENT, 'top'),
            anchor_bottom=(PARENT, 'bottom'),
            anchor_left=(PARENT, 'left'),
            anchor_right=(PARENT, 'right'),
        ))
        window.add_widget(container)
        return window, container

    def get_window(self, id: str) -> Optional[Window]:
        """Return the window with ``id``, or None if there is none."""
        return self._windows.get(id)

    def child_windows(self, window: Window) -> List[Window]:
        return [w for w in self._windows.values() if w.get_parent() is window]

    def top_level_windows(self) -> List[Window]:
        return [w for w in self._windows.values() if w.get_parent() is None]

    def get_focused_window(self) -> Optional[Window]:
        return self.focus.get_focused_window()

    def destroy_window(self, window: Window):
        """Destroy ``window``, its child windows and its widgets.

        Nothing happens if the window is not registered in this context.
        """
        if self._windows.get(window.id) is not window:
            return
        for child in self.child_windows(window):
            self.destroy_window(child)
        if window.widget is not None:
            window.widget.destroy()
        self.focus.remove_window(window)
        del self._windows[window.id]
        parent = window.get_parent()
        if parent is not None:
            parent._force_redraw = True
            parent.request_view_update()
        self.request_full_redraw()
        logger.debug('Window %r destroyed', window.id)

    def destroy_all_windows(self):
        for window in reversed(self.top_level_windows()):
            self.destroy_window(window)
        self.focus.set_focus_chain()

    def move_window_to_top(self, window: Window):
        """Draw ``window`` above all the other windows."""
        if self._windows.get(window.id) is not window:
            return
        del self._windows[window.id]
        self._windows[window.id] = window
        window.request_view_update()

    def request_full_redraw(self):
        """Clear the screen and redraw every window on the next refresh."""
        self._full_redraw = True

    def refresh_window(self, id: str, force_redraw: bool = False) -> bool:
        """Refresh the window with ``id`` and its parent windows.

        Returns:
            True if anything was copied to the screen, False otherwise
            (including when no window has this id).
        """
        window = self.get_window(id)
        if window is None:
            return False
        updated = window.refresh(force_redraw)
        parent = window.get_parent()
        while parent is not None:
            if updated:
                parent.surface.request_update()
            updated = parent.refresh() or updated
            parent = parent.get_parent()
        if updated:
            self.display.flush()
        return updated

    def refresh_all_windows(self, force: bool = False) -> bool:
        """Refresh every window and flush the display once.

        When a window is copied to the screen, the windows stacked above it
        are copied again so that they stay on top.

        Returns:
            True if anything was copied to the screen.
        """
        if self._full_redraw:
            self.display.clear()
            self._full_redraw = False
            force = True
        updated_below = False
        for window in self.top_level_windows():
            if updated_below:
                window.surface.request_update()
            if window.refresh(force):
                updated_below = True
        if updated_below:
            self.display.flush()
        return updated_below

    def handle_resize(self):
        """Update the screen size and reposition all the top-level windows."""
        self.screen.width = self.term.width
        self.screen.height = self.term.height
        for window in self.top_level_windows():
            try:
                window.reposition()
            except ConfigurationError:
                logger.exception('Could not reposition %s after resize', obj_desc(window))
        self.request_full_redraw()

    def init_color_pair(self, foreground: Color, background: Color) -> int:
        return self.colors.init_color_pair(foreground, background)

    def get_color_pair(self, foreground: Color, background: Color) -> Optional[int]:
        return self.colors.get_color_pair(foreground, background)
