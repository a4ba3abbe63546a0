"""
Terminal UI Library

A text-mode UI toolkit built on the Blessed library. Provides windows and
widgets positioned from anchor constraints, double-buffered rendering with
scrollable views, and keyboard focus routing through windows and containers.
"""

from .app import Application
from .colors import ColorRegistry
from .context import TUIContext
from .display import TerminalDisplay
from .focus import FocusManager
from .keys import Keystroke, getch
from .log import configure_logging, obj_desc
from .positioning import (
    PARENT,
    Anchor,
    ConfigurationError,
    Dimensions,
    ObjectPositioningConfiguration,
    compute_object_positioning,
    object_positioning_conf,
)
from .surface import Buffer, BufferRegion, Surface
from .widgets import Button, Container, Label, Widget, create_widget
from .windows import TextWindow, Window

__all__ = [
    'Anchor',
    'Application',
    'Buffer',
    'BufferRegion',
    'Button',
    'ColorRegistry',
    'ConfigurationError',
    'Container',
    'Dimensions',
    'FocusManager',
    'Keystroke',
    'Label',
    'ObjectPositioningConfiguration',
    'PARENT',
    'Surface',
    'TerminalDisplay',
    'TextWindow',
    'TUIContext',
    'Widget',
    'Window',
    'compute_object_positioning',
    'configure_logging',
    'create_widget',
    'getch',
    'obj_desc',
    'object_positioning_conf',
]

__version__ = '0.1.0'
