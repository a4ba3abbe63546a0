"""
Application driver: terminal setup and the main input loop.
"""

import logging
import signal
from typing import Callable, Optional

from blessed import Terminal

from .context import TUIContext
from .keys import Keystroke, getch
from .log import configure_logging

logger = logging.getLogger(__name__)


def default_exit_func(key: Keystroke) -> bool:
    return key.kind == 'escape'


class Application:
    """Owns a UI context and runs the poll-dispatch-render loop.

    Each iteration reads one keystroke (the only blocking call), delivers it
    through the focus chain and then flushes every out-of-date view once.
    The terminal cursor stays hidden unless the focused widget asks for it
    through ``require_cursor()``.
    Subclasses typically create their windows in ``__init__`` through
    ``self.context``.
    """

    def __init__(
        self,
        *,
        term: Optional[Terminal] = None,
        inkey_timeout: Optional[float] = None,
        register_resize_handler: bool = True,
        exit_func: Callable[[Keystroke], bool] = default_exit_func,
        log_file: Optional[str] = None,
        log_level: int = logging.WARNING,
    ):
        if log_file is not None:
            configure_logging(log_file, log_level)
        self.term = term or Terminal()
        self.context = TUIContext(self.term)
        self.inkey_timeout = inkey_timeout
        self.exit_func = exit_func
        self.closed = False
        self._resize_pending = False
        self._cursor = None
        if register_resize_handler:
            signal.signal(signal.SIGWINCH, self._handle_sigwinch)

    def _handle_sigwinch(self, signum, frame):
        """Trigger a relayout on the next loop iteration."""
        self._resize_pending = True

    def close(self):
        """Leave the main loop after the current iteration."""
        self.closed = True

    def on_tick(self):
        """Optional hook executed once per loop iteration after rendering."""

    def run(self):
        """Enter the main event loop."""
        if not self.context.windows:
            raise RuntimeError(
                "Application.run() called with no windows. "
                "Create a window before run()."
            )

        with self.term.fullscreen(), self.term.cbreak(), self.term.hidden_cursor():
            if self.context.get_focused_window() is None:
                self.context.focus.init_focus_manager()
            self.context.refresh_all_windows(force=True)
            self._sync_cursor(redrawn=True)

            while not self.closed:
                if self._resize_pending:
                    self._process_resize()

                key = getch(self.term, self.inkey_timeout)
                if key is not None:
                    self._handle_key(key)
                    if self.closed:
                        break

                self._sync_cursor(self.context.refresh_all_windows())
                self.on_tick()
        logger.debug('Main loop finished')

    def _sync_cursor(self, redrawn: bool):
        """Show the terminal cursor where the focused widget wants it, or hide it.

        Drawing moves the terminal cursor, so it is placed again after every
        redraw even if its position did not change.
        """
        window = self.context.get_focused_window()
        cursor = window.sync_cursor() if window is not None else None
        if cursor == self._cursor and not redrawn:
            return
        if cursor is None:
            if self._cursor is not None:
                print(self.term.hide_cursor, end='', flush=True)
        else:
            print(self.term.move(*cursor) + self.term.normal_cursor, end='', flush=True)
        self._cursor = cursor

    def _handle_key(self, key: Keystroke):
        """Dispatch a keystroke through the focus chain."""
        if self.context.focus.process_focus(key):
            return
        if self.exit_func(key):
            self.close()

    def _process_resize(self):
        """Reposition and re-render the windows after a terminal resize."""
        self._resize_pending = False
        self.context.handle_resize()
        self.context.refresh_all_windows(force=True)
        self._sync_cursor(redrawn=True)
