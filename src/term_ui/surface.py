"""
Off-screen buffers and the buffer/view synchronization model.

Drawing always happens in a ``Buffer``, which can be larger than what is
visible. A ``Surface`` maps a rectangular view of its buffer onto an output
sink (the terminal display, or the overlay of an enclosing window) and only
copies it when something changed.
"""

import logging
from typing import List, Tuple

from .log import obj_desc

logger = logging.getLogger(__name__)

Cell = Tuple[str, int]
BLANK: Cell = (' ', 0)


class Buffer:
    """A grid of cells, each one a ``(character, color_pair)`` tuple.

    Writes outside the grid are clipped. A buffer also implements the sink
    interface (``blit``) so that nested windows can copy into it.
    """

    def __init__(self, height: int, width: int):
        self.height = max(0, height)
        self.width = max(0, width)
        self.cells: List[List[Cell]] = [
            [BLANK] * self.width for _ in range(self.height)
        ]

    def resize(self, height: int, width: int):
        """Resize the buffer, keeping the content that still fits."""
        height = max(0, height)
        width = max(0, width)
        rows = []
        for y in range(height):
            row = self.cells[y][:width] if y < self.height else []
            rows.append(row + [BLANK] * (width - len(row)))
        self.cells = rows
        self.height = height
        self.width = width

    def copy(self) -> 'Buffer':
        buffer = Buffer(0, 0)
        buffer.copy_from(self)
        return buffer

    def copy_from(self, other: 'Buffer'):
        """Replace size and content with those of ``other``, keeping this object."""
        self.cells = [row[:] for row in other.cells]
        self.height = other.height
        self.width = other.width

    def write(self, y: int, x: int, text: str, color: int = 0):
        """Write ``text`` starting at (y, x), clipped to the buffer."""
        if not 0 <= y < self.height:
            return
        row = self.cells[y]
        for i, ch in enumerate(text):
            col = x + i
            if col >= self.width:
                break
            if col >= 0:
                row[col] = (ch, color)

    def fill(self, y: int, x: int, height: int, width: int, cell: Cell = BLANK):
        """Fill a rectangle with ``cell``."""
        for row_idx in range(max(0, y), min(self.height, y + height)):
            row = self.cells[row_idx]
            for col in range(max(0, x), min(self.width, x + width)):
                row[col] = cell

    def clear(self):
        self.fill(0, 0, self.height, self.width)

    def region(self, y: int, x: int, height: int, width: int) -> List[List[Cell]]:
        """Return a copy of the cells inside a rectangle.

        Parts of the rectangle outside the buffer are blank.
        """
        rows = []
        for row_idx in range(y, y + height):
            if 0 <= row_idx < self.height:
                src = self.cells[row_idx]
                rows.append([
                    src[col] if 0 <= col < self.width else BLANK
                    for col in range(x, x + width)
                ])
            else:
                rows.append([BLANK] * width)
        return rows

    def blit(self, y: int, x: int, rows: List[List[Cell]]):
        """Copy ``rows`` of cells into the buffer at (y, x), clipped."""
        for i, cells in enumerate(rows):
            row_idx = y + i
            if not 0 <= row_idx < self.height:
                continue
            row = self.cells[row_idx]
            for j, cell in enumerate(cells):
                col = x + j
                if 0 <= col < self.width:
                    row[col] = cell

    def text(self, y: int) -> str:
        """Return the characters of row ``y`` as a string."""
        return ''.join(ch for ch, _ in self.cells[y])


class BufferRegion:
    """A rectangular drawing area inside a buffer.

    Coordinates passed to the drawing methods are relative to the region, and
    anything outside it is clipped. Widgets draw through a region of their
    window's buffer.
    """

    def __init__(self, buffer: Buffer, top: int, left: int, height: int, width: int):
        self.buffer = buffer
        self.top = top
        self.left = left
        self.height = max(0, height)
        self.width = max(0, width)

    def derive(self, top: int, left: int, height: int, width: int) -> 'BufferRegion':
        """Create a sub-region, clipped to this one."""
        height = max(0, min(height, self.height - top))
        width = max(0, min(width, self.width - left))
        return BufferRegion(self.buffer, self.top + top, self.left + left, height, width)

    def write(self, y: int, x: int, text: str, color: int = 0):
        if not 0 <= y < self.height:
            return
        if x < 0:
            text = text[-x:]
            x = 0
        text = text[:max(0, self.width - x)]
        self.buffer.write(self.top + y, self.left + x, text, color)

    def fill(self, cell: Cell = BLANK):
        self.buffer.fill(self.top, self.left, self.height, self.width, cell)

    def clear(self):
        self.fill(BLANK)

    def text(self, y: int) -> str:
        """Return the characters of row ``y`` of the region as a string."""
        return ''.join(
            ch for ch, _ in self.buffer.region(self.top + y, self.left, 1, self.width)[0]
        )


class Surface:
    """A buffer plus the view that maps part of it onto an output sink.

    The view is the visible rectangle: ``view_height`` x ``view_width`` cells
    of the buffer starting at (``view_y``, ``view_x``), shown on the sink at
    (``screen_y``, ``screen_x``). The view never extends past the buffer.

    Nested surfaces are composed on ``overlay``, a copy of the buffer that is
    rebuilt with ``reset_overlay()``, so that the buffer itself only ever holds
    the owner's content. While ``use_overlay`` is set, the view is copied from
    the overlay instead of the buffer.

    Attributes:
        buffer: Off-screen content
        overlay: Buffer content with nested surfaces copied over it
        use_overlay: Whether the view shows the overlay
        sink: Object with a ``blit(y, x, rows)`` method receiving the view
        view_needs_update: Dirty flag; the next ``update_view`` will copy
    """

    def __init__(self, sink, view_height: int, view_width: int,
                 buffer_height=None, buffer_width=None, screen_y=0, screen_x=0):
        self.sink = sink
        self.view_height = max(0, view_height)
        self.view_width = max(0, view_width)
        self.buffer = Buffer(
            max(self.view_height, buffer_height or 0),
            max(self.view_width, buffer_width or 0),
        )
        self.overlay = Buffer(self.buffer.height, self.buffer.width)
        self.use_overlay = False
        self.view_y = 0
        self.view_x = 0
        self.screen_y = screen_y
        self.screen_x = screen_x
        self.view_needs_update = True

    def _clamp_view(self):
        self.view_y = max(0, min(self.view_y, self.buffer.height - self.view_height))
        self.view_x = max(0, min(self.view_x, self.buffer.width - self.view_width))

    def move_view(self, y: int, x: int):
        """Move the view origin to (y, x) in the buffer, clamped to the buffer."""
        self.view_y = y
        self.view_x = x
        self._clamp_view()
        self.view_needs_update = True

    def move_view_inc(self, dy: int = 0, dx: int = 0):
        """Move the view origin by (dy, dx)."""
        self.move_view(self.view_y + dy, self.view_x + dx)

    def request_update(self):
        """Mark the view as out of date without moving it."""
        self.view_needs_update = True

    def reset_overlay(self):
        """Restart composition from the current buffer content."""
        self.overlay.copy_from(self.buffer)

    def update_view(self, force: bool = False) -> bool:
        """Copy the buffer region under the view to the sink.

        Nothing is copied unless the view is out of date or ``force`` is True.

        Returns:
            True if the sink was written, False otherwise.
        """
        if not (self.view_needs_update or force):
            return False
        source = self.overlay if self.use_overlay else self.buffer
        rows = source.region(self.view_y, self.view_x,
                             self.view_height, self.view_width)
        self.sink.blit(self.screen_y, self.screen_x, rows)
        self.view_needs_update = False
        return True

    def resize(self, view_height: int, view_width: int,
               buffer_height=None, buffer_width=None):
        """Resize the view and buffer. The buffer never gets smaller than the view."""
        self.view_height = max(0, view_height)
        self.view_width = max(0, view_width)
        self.buffer.resize(max(self.view_height, buffer_height or 0),
                           max(self.view_width, buffer_width or 0))
        self.overlay.resize(self.buffer.height, self.buffer.width)
        self._clamp_view()
        self.view_needs_update = True
        logger.debug('%s resized: view %dx%d, buffer %dx%d', obj_desc(self),
                     self.view_height, self.view_width,
                     self.buffer.height, self.buffer.width)

    def save_state(self):
        """Return the view geometry and a copy of the buffer, for ``restore_state()``."""
        return (self.view_height, self.view_width, self.view_y, self.view_x,
                self.buffer.copy())

    def restore_state(self, state):
        """Go back to a state returned by ``save_state()``."""
        self.view_height, self.view_width, self.view_y, self.view_x, buffer = state
        self.buffer.copy_from(buffer)
        self.overlay.resize(self.buffer.height, self.buffer.width)
        self.view_needs_update = True

    @property
    def scroll_pos(self):
        """Vertical scroll position (0.0 to 1.0), or None if the buffer fits the view."""
        below_the_fold = self.buffer.height - self.view_height
        if below_the_fold <= 0:
            return None
        return self.view_y / below_the_fold
