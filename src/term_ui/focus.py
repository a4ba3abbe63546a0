"""
Focus chain management.

The focus chain is the ordered list of windows the user can cycle through.
At most one window of the chain has the focus; keystrokes go to it first.
"""

import logging
from typing import Callable, List, Optional

from .keys import Keystroke

logger = logging.getLogger(__name__)

KeyPredicate = Callable[[Keystroke], bool]


def default_next_window_func(key: Keystroke) -> bool:
    return key.kind == 'f2'


def default_previous_window_func(key: Keystroke) -> bool:
    return key.kind == 'f1'


class FocusManager:
    """Tracks which window of the focus chain has the focus.

    Attributes:
        focus_chain: Ordered windows that can be cycled through
        focus_id: Index of the focused window in the chain, or None
    """

    def __init__(self):
        self.focus_chain: List = []
        self.focus_id: Optional[int] = None
        self._next_window_func: KeyPredicate = default_next_window_func
        self._previous_window_func: KeyPredicate = default_previous_window_func

    def set_next_window_func(self, func: KeyPredicate):
        """Set the predicate telling whether a keystroke asks for the next window."""
        self._next_window_func = func

    def set_previous_window_func(self, func: KeyPredicate):
        """Set the predicate telling whether a keystroke asks for the previous window."""
        self._previous_window_func = func

    def get_focused_window(self):
        if self.focus_id is None:
            return None
        return self.focus_chain[self.focus_id]

    def add_window(self, window):
        """Append ``window`` to the end of the chain."""
        if window not in self.focus_chain:
            self.focus_chain.append(window)

    def _focus(self, idx: int):
        self.focus_id = idx
        window = self.focus_chain[idx]
        window.gain_focus()
        logger.debug('Focus -> window %r', window.id)

    def set_focus_chain(self, *windows, new_focus_id: int = 0) -> bool:
        """Replace the focus chain and focus the window at ``new_focus_id``.

        Returns:
            False if the currently focused window refused to release the
            focus (the chain is left unchanged), True otherwise.

        Raises:
            ValueError: if ``new_focus_id`` is out of range.
        """
        if windows and not 0 <= new_focus_id < len(windows):
            raise ValueError(
                f'new_focus_id {new_focus_id} out of range for a chain of {len(windows)} windows'
            )
        current = self.get_focused_window()
        if current is not None and not current.release_focus():
            return False
        self.focus_chain = list(windows)
        self.focus_id = None
        for window in self.focus_chain:
            if window.focused:
                window.drop_focus()
        if windows:
            if windows[new_focus_id].accept_focus():
                self._focus(new_focus_id)
            else:
                logger.warning('Window %r in the new focus chain does not accept the focus',
                               windows[new_focus_id].id)
        return True

    def init_focus_manager(self) -> bool:
        """Focus the first window of the chain that accepts the focus.

        Returns:
            True if a window got the focus. An empty or fully unfocusable
            chain leaves no window focused.
        """
        current = self.get_focused_window()
        if current is not None and not current.release_focus():
            return False
        self.focus_id = None
        for idx, window in enumerate(self.focus_chain):
            if window.accept_focus():
                self._focus(idx)
                return True
        return False

    def request_focus(self, window) -> bool:
        """Move the focus to ``window``.

        Fails if the window is not in the chain, does not accept the focus,
        or the focused window refuses to release it.
        """
        if window not in self.focus_chain or not window.accept_focus():
            return False
        current = self.get_focused_window()
        if window is current:
            return True
        if current is not None and not current.release_focus():
            return False
        self._focus(self.focus_chain.index(window))
        return True

    def _cycle(self, step: int) -> bool:
        count = len(self.focus_chain)
        if count == 0:
            return False
        if self.focus_id is None:
            start = -1 if step > 0 else count
            tries = count
        else:
            start = self.focus_id
            tries = count - 1
        for i in range(1, tries + 1):
            candidate = self.focus_chain[(start + step * i) % count]
            if candidate.accept_focus():
                return self.request_focus(candidate)
        return False

    def next_window(self) -> bool:
        """Move the focus to the next window that accepts it."""
        return self._cycle(1)

    def previous_window(self) -> bool:
        """Move the focus to the previous window that accepts it."""
        return self._cycle(-1)

    def process_focus(self, key: Keystroke) -> bool:
        """Deliver ``key`` to the focused window, then check window navigation.

        Returns:
            True if the keystroke was consumed.
        """
        window = self.get_focused_window()
        if window is not None and window.process_focus(key):
            return True
        if self._next_window_func(key):
            return self.next_window()
        if self._previous_window_func(key):
            return self.previous_window()
        return False

    def _refocus_after(self, idx: int):
        count = len(self.focus_chain)
        for i in range(count):
            candidate = self.focus_chain[(idx + i) % count]
            if candidate.accept_focus():
                self._focus((idx + i) % count)
                return

    def remove_focus(self, window):
        """Take the focus away from ``window``, which can no longer hold it.

        The focus moves to the next window that accepts it, if any.
        """
        if window is not self.get_focused_window():
            return
        window.drop_focus()
        idx = self.focus_id
        self.focus_id = None
        self._refocus_after(idx + 1)

    def remove_window(self, window):
        """Remove ``window`` from the chain. Nothing happens if it is not there."""
        if window not in self.focus_chain:
            return
        idx = self.focus_chain.index(window)
        was_focused = idx == self.focus_id
        self.focus_chain.pop(idx)
        if was_focused:
            window.drop_focus()
            self.focus_id = None
            self._refocus_after(idx)
        elif self.focus_id is not None and idx < self.focus_id:
            self.focus_id -= 1
