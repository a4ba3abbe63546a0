"""
Object positioning for windows and widgets.

Every object is positioned from a partial description: anchors to the edges of
its parent or of already-positioned siblings, plus optional explicit sizes.
This module classifies such a description and resolves it into an absolute
height, width, top and left relative to the parent.
"""

import logging
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

from .log import obj_desc

logger = logging.getLogger(__name__)

VERTICAL_SIDES = ('top', 'bottom', 'middle')
HORIZONTAL_SIDES = ('left', 'right', 'center')


class ConfigurationError(ValueError):
    """Raised when an object cannot be positioned from its configuration."""


class _Parent:
    """Sentinel used as anchor target meaning "the parent of this object"."""

    def __repr__(self):
        return 'PARENT'


PARENT = _Parent()


@dataclass
class Dimensions:
    """Represents object dimensions (position and size).

    All fields are optional and can be None while the object is not yet
    positioned. Positions are relative to the parent object.
    """
    x: Optional[int] = None
    y: Optional[int] = None
    width: Optional[int] = None
    height: Optional[int] = None

    @property
    def bottom(self):
        """Row just below the object, or None if not positioned."""
        if self.y is None or self.height is None:
            return None
        return self.y + self.height

    @property
    def right(self):
        """Column just right of the object, or None if not positioned."""
        if self.x is None or self.width is None:
            return None
        return self.x + self.width

    def is_resolved(self):
        return None not in (self.x, self.y, self.width, self.height)


@dataclass(frozen=True)
class Anchor:
    """Reference to an edge of another object.

    Attributes:
        target: PARENT, the parent itself, or an already-positioned sibling
        side: Edge of the target ('top', 'bottom', 'middle', 'left',
            'right' or 'center')
        pad: Offset added to the edge position
    """
    target: object
    side: str
    pad: int = 0


@dataclass
class ObjectPositioningConfiguration:
    """Positioning description of one object.

    ``vertical`` and ``horizontal`` are filled by ``classify()`` with the
    combination of inputs that was supplied, or ``'unknown'`` when the
    information is insufficient.
    """
    anchor_top: Optional[Anchor] = None
    anchor_bottom: Optional[Anchor] = None
    anchor_middle: Optional[Anchor] = None
    anchor_left: Optional[Anchor] = None
    anchor_right: Optional[Anchor] = None
    anchor_center: Optional[Anchor] = None
    top: Optional[int] = None
    left: Optional[int] = None
    height: Optional[int] = None
    width: Optional[int] = None
    vertical: str = 'unknown'
    horizontal: str = 'unknown'

    def __post_init__(self):
        self.classify()

    def classify(self):
        """Classify the vertical and horizontal positioning information."""
        _check_anchor(self.anchor_top, VERTICAL_SIDES, 'anchor_top')
        _check_anchor(self.anchor_bottom, VERTICAL_SIDES, 'anchor_bottom')
        _check_anchor(self.anchor_middle, VERTICAL_SIDES, 'anchor_middle')
        _check_anchor(self.anchor_left, HORIZONTAL_SIDES, 'anchor_left')
        _check_anchor(self.anchor_right, HORIZONTAL_SIDES, 'anchor_right')
        _check_anchor(self.anchor_center, HORIZONTAL_SIDES, 'anchor_center')

        if self.anchor_top and self.anchor_bottom:
            self.vertical = 'abottom_atop'
        elif self.anchor_bottom and self.height is not None:
            self.vertical = 'abottom_height'
        elif self.anchor_top and self.height is not None:
            self.vertical = 'atop_height'
        elif self.anchor_middle and self.height is not None:
            self.vertical = 'amiddle_height'
        elif (self.height is not None and self.anchor_top is None and
              self.anchor_bottom is None and self.anchor_middle is None):
            self.vertical = 'top_height'
        else:
            self.vertical = 'unknown'

        if self.anchor_left and self.anchor_right:
            self.horizontal = 'aleft_aright'
        elif self.anchor_right and self.width is not None:
            self.horizontal = 'aright_width'
        elif self.anchor_left and self.width is not None:
            self.horizontal = 'aleft_width'
        elif self.anchor_center and self.width is not None:
            self.horizontal = 'acenter_width'
        elif (self.width is not None and self.anchor_left is None and
              self.anchor_right is None and self.anchor_center is None):
            self.horizontal = 'left_width'
        else:
            self.horizontal = 'unknown'

    def anchors(self) -> List[Anchor]:
        """Return every anchor set in this configuration."""
        return [a for a in (self.anchor_top, self.anchor_bottom,
                            self.anchor_middle, self.anchor_left,
                            self.anchor_right, self.anchor_center)
                if a is not None]

    def __str__(self):
        fields = []
        for name in ('anchor_top', 'anchor_bottom', 'anchor_middle',
                     'anchor_left', 'anchor_right', 'anchor_center'):
            anchor = getattr(self, name)
            if anchor is not None:
                fields.append(f'{name}=({_target_desc(anchor.target)}, '
                              f'{anchor.side}, {anchor.pad})')
        for name in ('top', 'left', 'height', 'width'):
            value = getattr(self, name)
            if value is not None:
                fields.append(f'{name}={value}')
        return (f'OPC[{self.vertical}/{self.horizontal}] ' + ', '.join(fields))


def _target_desc(target):
    if target is PARENT:
        return 'PARENT'
    return obj_desc(target)


def _check_anchor(anchor, sides, name):
    if anchor is None:
        return
    if anchor.side not in sides:
        raise ConfigurationError(
            f'{name}: side {anchor.side!r} is not one of {", ".join(sides)}'
        )


def _as_anchor(value):
    if value is None or isinstance(value, Anchor):
        return value
    if isinstance(value, tuple) and len(value) in (2, 3):
        return Anchor(*value)
    raise ConfigurationError(f'Invalid anchor specification: {value!r}')


def object_positioning_conf(**kwargs) -> ObjectPositioningConfiguration:
    """Create an object positioning configuration.

    Anchors can be passed as ``Anchor`` instances or as ``(target, side)`` /
    ``(target, side, pad)`` tuples, for example::

        object_positioning_conf(anchor_top=(PARENT, 'top', 1),
                                anchor_left=(label, 'right'),
                                height=3, width=10)
    """
    for key, value in kwargs.items():
        if key.startswith('anchor_'):
            kwargs[key] = _as_anchor(value)
    try:
        return ObjectPositioningConfiguration(**kwargs)
    except TypeError as e:
        raise ConfigurationError(str(e)) from e


def parent_size(parent) -> Tuple[int, int]:
    """Return the usable (height, width) of a parent object."""
    if isinstance(parent, Dimensions):
        return parent.height, parent.width
    return parent.get_height(), parent.get_width()


def get_anchor(anchor: Anchor, parent) -> int:
    """Return the row or column that ``anchor`` refers to.

    Anchors to the parent are resolved relative to it (origin 0 and far edge
    equal to its size). Anchors to any other object read its already
    computed position, which must share the parent's coordinate space.
    """
    if anchor.target is PARENT or anchor.target is parent:
        height, width = parent_size(parent)
        edges = {
            'top': 0,
            'bottom': height,
            'middle': height // 2,
            'left': 0,
            'right': width,
            'center': width // 2,
        }
    else:
        target = anchor.target
        pos = target if isinstance(target, Dimensions) else getattr(target, 'position', None)
        if pos is None or not pos.is_resolved():
            raise ConfigurationError(
                f'Anchor target {_target_desc(target)} has not been positioned'
            )
        edges = {
            'top': pos.y,
            'bottom': pos.bottom,
            'middle': pos.y + pos.height // 2,
            'left': pos.x,
            'right': pos.right,
            'center': pos.x + pos.width // 2,
        }
    return edges[anchor.side] + anchor.pad


def compute_object_positioning(opc: ObjectPositioningConfiguration, parent):
    """Compute the object position from ``opc`` and its ``parent``.

    Returns:
        Tuple (height, width, top, left), with top and left relative to the
        parent object.

    Raises:
        ConfigurationError: if the information in ``opc`` is insufficient or
            inconsistent.
    """
    opc.classify()
    vertical = opc.vertical
    horizontal = opc.horizontal

    if vertical == 'abottom_atop':
        top = get_anchor(opc.anchor_top, parent)
        height = get_anchor(opc.anchor_bottom, parent) - top
    elif vertical == 'abottom_height':
        height = opc.height
        top = get_anchor(opc.anchor_bottom, parent) - height
    elif vertical == 'atop_height':
        height = opc.height
        top = get_anchor(opc.anchor_top, parent)
    elif vertical == 'amiddle_height':
        height = opc.height
        top = max(0, get_anchor(opc.anchor_middle, parent) - height // 2)
    elif vertical == 'top_height':
        height = opc.height
        top = opc.top or 0
    else:
        raise ConfigurationError(
            f'Insufficient information to compute the vertical positioning: {opc}'
        )

    if horizontal == 'aleft_aright':
        left = get_anchor(opc.anchor_left, parent)
        width = get_anchor(opc.anchor_right, parent) - left
    elif horizontal == 'aright_width':
        width = opc.width
        left = get_anchor(opc.anchor_right, parent) - width
    elif horizontal == 'aleft_width':
        width = opc.width
        left = get_anchor(opc.anchor_left, parent)
    elif horizontal == 'acenter_width':
        width = opc.width
        left = max(0, get_anchor(opc.anchor_center, parent) - width // 2)
    elif horizontal == 'left_width':
        width = opc.width
        left = opc.left or 0
    else:
        raise ConfigurationError(
            f'Insufficient information to compute the horizontal positioning: {opc}'
        )

    if height < 0 or width < 0:
        raise ConfigurationError(
            f'Negative size ({height}x{width}) computed from {opc}'
        )

    logger.debug('Positioned %s -> h=%d w=%d top=%d left=%d',
                 opc, height, width, top, left)
    return height, width, top, left


def resolution_order(objects) -> list:
    """Sort sibling objects so that anchor targets come before dependents.

    Objects keep their relative order where no dependency forces otherwise.

    Raises:
        ConfigurationError: if the anchors between siblings form a cycle.
    """
    ids = {id(obj): obj for obj in objects}
    state: Dict[int, str] = {}
    ordered = []

    def visit(obj, path):
        key = id(obj)
        if state.get(key) == 'done':
            return
        if state.get(key) == 'visiting':
            cycle = ' -> '.join(_target_desc(o) for o in path + [obj])
            raise ConfigurationError(f'Cyclic anchor reference: {cycle}')
        state[key] = 'visiting'
        opc = getattr(obj, 'opc', None)
        if opc is not None:
            for anchor in opc.anchors():
                if id(anchor.target) in ids and anchor.target is not obj:
                    visit(anchor.target, path + [obj])
                elif anchor.target is obj:
                    raise ConfigurationError(
                        f'{_target_desc(obj)} is anchored to itself'
                    )
        state[key] = 'done'
        ordered.append(obj)

    for obj in objects:
        visit(obj, [])
    return ordered
