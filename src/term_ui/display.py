"""
Physical display backed by a Blessed terminal.
"""

import logging
from itertools import groupby
from typing import Optional

from blessed import Terminal

from .colors import ColorRegistry

logger = logging.getLogger(__name__)


class TerminalDisplay:
    """Writes cell rows to the terminal.

    This is the output sink of top-level window surfaces. Output is written
    with ``print(..., end='')`` and only pushed to the terminal by ``flush()``.

    Attributes:
        term: Blessed Terminal instance
        colors: Registry used to turn pair ids into terminal sequences
    """

    def __init__(self, term: Optional[Terminal] = None, colors: Optional[ColorRegistry] = None):
        self.term = term or Terminal()
        self.colors = colors or ColorRegistry()

    @property
    def height(self):
        return self.term.height

    @property
    def width(self):
        return self.term.width

    def _style(self, pair_id):
        pair = self.colors.get_pair(pair_id)
        if pair is None:
            return ''
        fg, bg = pair
        style = ''
        if fg >= 0:
            style += self.term.color(fg)
        if bg >= 0:
            style += self.term.on_color(bg)
        return style

    def blit(self, y, x, rows):
        """Copy rows of ``(char, pair)`` cells to the screen at (y, x), clipped."""
        height, width = self.height, self.width
        for i, cells in enumerate(rows):
            row = y + i
            if not 0 <= row < height:
                continue
            col = x
            if col < 0:
                cells = cells[-col:]
                col = 0
            cells = cells[:max(0, width - col)]
            if not cells:
                continue
            line = self.term.move(row, col)
            for pair_id, run in groupby(cells, key=lambda cell: cell[1]):
                text = ''.join(ch for ch, _ in run)
                style = self._style(pair_id) if pair_id else ''
                line += style + text + self.term.normal if style else text
            print(line, end='')

    def clear(self):
        print(self.term.home + self.term.clear, end='')

    def flush(self):
        print('', end='', flush=True)
