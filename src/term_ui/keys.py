"""
Keystroke acquisition.

Blessed keystrokes are converted into ``Keystroke`` records so that widgets
and focus predicates can match keys without knowing Blessed's key names.
"""

from dataclasses import dataclass
from typing import Optional

from blessed import Terminal
from blessed.keyboard import Keystroke as BlessedKeystroke

# Blessed key name (without the KEY_ prefix) -> (kind, shift)
_NAMED_KEYS = {
    'ENTER': ('enter', False),
    'TAB': ('tab', False),
    'BTAB': ('tab', True),
    'ESCAPE': ('escape', False),
    'BACKSPACE': ('backspace', False),
    'DELETE': ('delete', False),
    'INSERT': ('insert', False),
    'HOME': ('home', False),
    'END': ('end', False),
    'PGUP': ('pageup', False),
    'PGDOWN': ('pagedown', False),
    'UP': ('up', False),
    'DOWN': ('down', False),
    'LEFT': ('left', False),
    'RIGHT': ('right', False),
    'SUP': ('up', True),
    'SDOWN': ('down', True),
    'SLEFT': ('left', True),
    'SRIGHT': ('right', True),
    'SHOME': ('home', True),
    'SEND': ('end', True),
}

_CONTROL_CHARS = {
    '\t': 'tab',
    '\n': 'enter',
    '\r': 'enter',
    '\x1b': 'escape',
    '\x7f': 'backspace',
    '\x08': 'backspace',
}


@dataclass(frozen=True)
class Keystroke:
    """A keystroke.

    Attributes:
        value: String representing the keystroke
        kind: 'char' for printable characters, otherwise the key name
            ('enter', 'tab', 'up', 'f1', ...)
        alt: ALT was pressed (only meaningful if kind != 'char')
        ctrl: CTRL was pressed (only meaningful if kind != 'char')
        shift: SHIFT was pressed (only meaningful if kind != 'char')
    """
    value: str
    kind: str = 'char'
    alt: bool = False
    ctrl: bool = False
    shift: bool = False

    @classmethod
    def from_blessed(cls, key: BlessedKeystroke) -> 'Keystroke':
        value = str(key)
        if key.is_sequence and key.name:
            name = key.name[4:] if key.name.startswith('KEY_') else key.name
            alt = ctrl = shift = False
            while True:
                if name.startswith('CTRL_'):
                    ctrl, name = True, name[5:]
                elif name.startswith('ALT_'):
                    alt, name = True, name[4:]
                elif name.startswith('SHIFT_'):
                    shift, name = True, name[6:]
                else:
                    break
            kind, implied_shift = _NAMED_KEYS.get(name, (name.lower(), False))
            return cls(value, kind, alt=alt, ctrl=ctrl, shift=shift or implied_shift)
        if value in _CONTROL_CHARS:
            return cls(value, _CONTROL_CHARS[value])
        if len(value) == 1 and ord(value) < 32:
            return cls(value, chr(ord(value) + 96), ctrl=True)
        return cls(value)

    def is_char(self, value=None) -> bool:
        """Return True for a printable character (equal to ``value`` if given)."""
        return self.kind == 'char' and (value is None or self.value == value)


def getch(term: Terminal, timeout: Optional[float] = None) -> Optional[Keystroke]:
    """Wait for a keystroke and return it.

    Blocks until a key is pressed, or at most ``timeout`` seconds if given.
    Returns None when the timeout expires.
    """
    key = term.inkey(timeout=timeout)
    if not key:
        return None
    return Keystroke.from_blessed(key)
