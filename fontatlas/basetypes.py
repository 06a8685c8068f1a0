"""
fontatlas.basetypes - geometry types and converters

licence: https://opensource.org/licenses/MIT
"""

from collections import namedtuple
from numbers import Real


def to_int(int_str):
    """Convert from int-like or string in any representation."""
    if isinstance(int_str, int):
        return int_str
    try:
        # '0xFF' - hex
        # '99' - decimal
        return int(int_str, 0)
    except (TypeError, ValueError):
        # '099' - ValueError above, OK as decimal
        return int(int_str)


def _split_ints(value):
    """Split string of ints separated by commas, spaces or `x`."""
    for item in value.replace(',', ' ').split():
        try:
            yield to_int(item)
        except ValueError:
            # '8x16' - not a hex number, so x is a separator
            yield from (to_int(_s) for _s in item.split('x'))


def to_tuple(value=0, *, length=2):
    """Convert int, string or sequence to a tuple of ints of given length."""
    if isinstance(value, str):
        value = tuple(_split_ints(value))
        if len(value) == 1:
            value *= length
    elif isinstance(value, Real):
        value = (int(value),) * length
    elif not value:
        value = (0,) * length
    value = tuple(to_int(_i) for _i in value)
    if len(value) != length:
        raise ValueError(f"Can't convert {value!r} to {length}-tuple.")
    return value


class _VectorMixin:
    """Vector operations on tuple."""

    def __str__(self):
        return ' '.join(f'{_e}' for _e in self)

    def __add__(self, other):
        return type(self)(*(_l + _r for _l, _r in zip(self, other)))

    def __sub__(self, other):
        return type(self)(*(_l - _r for _l, _r in zip(self, other)))

    def __bool__(self):
        return any(self)


class Coord(_VectorMixin, namedtuple('Coord', 'x y')):
    """Integer 2D point."""

    @classmethod
    def create(cls, coord=0):
        return cls(*to_tuple(coord, length=2))


class Margins(_VectorMixin, namedtuple('Margins', 'top bottom left right')):
    """Spacing around a sprite, in pixels."""

    @classmethod
    def create(cls, margins=0):
        """Create from int, 'n' or 'top,bottom,left,right'."""
        if isinstance(margins, cls):
            return margins
        margins = cls(*to_tuple(margins, length=4))
        if any(_m < 0 for _m in margins):
            raise ValueError(f'Margins must not be negative: {margins}')
        return margins

    @classmethod
    def uniform(cls, margin):
        return cls(margin, margin, margin, margin)

    def horizontal(self):
        return self.left + self.right

    def vertical(self):
        return self.top + self.bottom


class Size(_VectorMixin, namedtuple('Size', 'width height')):
    """Width and height of a sprite or canvas."""

    def __str__(self):
        return f'{self.width}x{self.height}'

    @classmethod
    def create(cls, size=0):
        return cls(*to_tuple(size, length=2))

    def area(self):
        return self.width * self.height

    def grow(self, margins):
        """Size including margins on all sides."""
        return Size(
            self.width + margins.horizontal(),
            self.height + margins.vertical(),
        )


class Rect(namedtuple('Rect', 'min max')):
    """
    Axis-aligned rectangle.

    min: top-left corner, inclusive
    max: bottom-right corner, exclusive
    """

    def __str__(self):
        return f'{self.width()}x{self.height()}+{self.min.x}+{self.min.y}'

    @classmethod
    def create(cls, x, y, width, height):
        return cls(Coord(x, y), Coord(x + width, y + height))

    @property
    def x(self):
        return self.min.x

    @property
    def y(self):
        return self.min.y

    def width(self):
        return self.max.x - self.min.x

    def height(self):
        return self.max.y - self.min.y

    def size(self):
        return Size(self.width(), self.height())

    def is_empty(self):
        return self.width() <= 0 or self.height() <= 0

    def grow(self, margins):
        """Rectangle extended by margins on all sides."""
        return Rect(
            Coord(self.min.x - margins.left, self.min.y - margins.top),
            Coord(self.max.x + margins.right, self.max.y + margins.bottom),
        )

    def shrink(self, margins):
        """Rectangle reduced by margins on all sides."""
        return Rect(
            Coord(self.min.x + margins.left, self.min.y + margins.top),
            Coord(self.max.x - margins.right, self.max.y - margins.bottom),
        )

    def intersects(self, other):
        """Rectangles share at least one pixel."""
        if self.is_empty() or other.is_empty():
            return False
        return (
            self.min.x < other.max.x and other.min.x < self.max.x
            and self.min.y < other.max.y and other.min.y < self.max.y
        )

    def contains(self, other):
        """Other rectangle lies fully inside this one."""
        return (
            self.min.x <= other.min.x and other.max.x <= self.max.x
            and self.min.y <= other.min.y and other.max.y <= self.max.y
        )

    def as_box(self):
        """Convert to PIL box (left, top, right, bottom)."""
        return (self.min.x, self.min.y, self.max.x, self.max.y)
