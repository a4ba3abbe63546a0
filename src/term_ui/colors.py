"""
Color pair registry.

Widgets refer to colors through small integer pair ids. Pair 0 is the
terminal's default colors and is always defined.
"""

import logging
from typing import Dict, Optional, Tuple, Union

from .positioning import ConfigurationError

logger = logging.getLogger(__name__)

COLOR_NAMES = ('black', 'red', 'green', 'yellow', 'blue', 'magenta', 'cyan', 'white')

Color = Union[int, str]


def get_color_index(color: Color) -> int:
    """Return the terminal color index of ``color``.

    ``color`` is either an index or one of the eight basic color names,
    optionally prefixed with ``bright_``. ``'default'`` maps to -1.
    """
    if isinstance(color, int):
        return color
    name = color.lower()
    if name == 'default':
        return -1
    offset = 0
    if name.startswith('bright_'):
        name = name[len('bright_'):]
        offset = 8
    try:
        return COLOR_NAMES.index(name) + offset
    except ValueError:
        raise ConfigurationError(f'Unknown color: {color!r}') from None


class ColorRegistry:
    """Allocates pair ids for (foreground, background) combinations."""

    def __init__(self):
        self._pairs: Dict[Tuple[int, int], int] = {(-1, -1): 0}
        self._by_id: Dict[int, Tuple[int, int]] = {0: (-1, -1)}

    def init_color_pair(self, foreground: Color, background: Color) -> int:
        """Return the id of the pair, allocating it if needed."""
        key = (get_color_index(foreground), get_color_index(background))
        pair_id = self._pairs.get(key)
        if pair_id is None:
            pair_id = len(self._by_id)
            self._pairs[key] = pair_id
            self._by_id[pair_id] = key
            logger.debug('Color pair %d initialized: %s', pair_id, key)
        return pair_id

    def get_color_pair(self, foreground: Color, background: Color) -> Optional[int]:
        """Return the id of the pair, or None if it was never initialized."""
        try:
            key = (get_color_index(foreground), get_color_index(background))
        except ConfigurationError:
            return None
        return self._pairs.get(key)

    def get_pair(self, pair_id: int) -> Optional[Tuple[int, int]]:
        """Return the (foreground, background) indices of a pair id, or None."""
        return self._by_id.get(pair_id)

    def __len__(self):
        return len(self._by_id)
