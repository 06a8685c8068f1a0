"""
fontatlas.packer - shelf packing of sprites into a texture atlas

licence: https://opensource.org/licenses/MIT
"""

import logging
from collections import namedtuple
from math import ceil, sqrt

from .basetypes import Size, Margins, Rect


# default ceiling for either side of the canvas
MAX_SIDE = 1024


# index pair pointing back into the caller's asset collection
SpriteRef = namedtuple('SpriteRef', 'asset_id sprite_id')

# packer input: sprite and its content size
SizeEntry = namedtuple('SizeEntry', 'ref size')

# packer output: sprite and its content rectangle, padding excluded
PlacementEntry = namedtuple('PlacementEntry', 'ref rect')


class PackResult(namedtuple('PackResult', 'canvas placements attempts')):
    """
    Outcome of a successful pack.

    canvas: final canvas Size
    placements: list of PlacementEntry, in packing order
    attempts: canvas sizes tried, ending with `canvas`
    """

    def as_dict(self):
        """Placements keyed by SpriteRef."""
        return {_p.ref: _p.rect for _p in self.placements}


class PackingError(Exception):
    """Sprites could not be packed."""

    def __init__(self, message, canvas):
        super().__init__(message)
        # last attempted canvas size
        self.canvas = canvas


class SpriteTooLarge(PackingError):
    """A single sprite does not fit the largest permitted canvas.

    Raised when either the width or the height of the sprite exceeds the maximum side.
    """

    def __init__(self, ref, size, canvas, max_side):
        super().__init__(
            f'Sprite #{ref.sprite_id} of asset #{ref.asset_id} ({size}) '
            f'exceeds the maximum canvas side of {max_side}.',
            canvas
        )
        self.ref = ref
        self.size = size


class CanvasLimitExceeded(PackingError):
    """Canvas growth reached the maximum side without fitting all sprites."""

    def __init__(self, canvas, max_side):
        super().__init__(
            f'Could not pack sprites into {canvas}: '
            f'growing the canvas would exceed the maximum side of {max_side}.',
            canvas
        )


class InvariantViolation(AssertionError):
    """Packing produced an inconsistent placement."""


##############################################################################
# sprite size table

def build_size_table(assets):
    """
    Flatten sprite sizes of all assets.

    assets: sequence of objects with a get_sprite_sizes() method
    returns: list of SizeEntry in asset-then-sprite order, total sprite area
    """
    entries = [
        SizeEntry(SpriteRef(_asset_id, _sprite_id), Size(*_size))
        for _asset_id, _asset in enumerate(assets)
        for _sprite_id, _size in enumerate(_asset.get_sprite_sizes())
    ]
    area = sum(_entry.size.area() for _entry in entries)
    return entries, area


def guess_side(area, halve=True):
    """Guess a square canvas side from the total sprite area."""
    side = ceil(sqrt(area))
    # round up to power of two
    side = 1 << max(0, side - 1).bit_length()
    if halve:
        side //= 2
    return max(1, side)


##############################################################################
# shelf packer

class ShelfPacker:
    """
    Place sprites in rows of descending height, growing the canvas as needed.

    Shelf packing wastes the space above shorter sprites in a row, which is
    acceptable for glyph sprites of similar heights.
    """

    def __init__(self, padding=Margins(0, 0, 0, 0), max_side=MAX_SIDE):
        self.padding = Margins.create(padding)
        if max_side < 1:
            raise ValueError(f'Maximum canvas side must be positive, not {max_side}.')
        self.max_side = max_side

    def pack(self, entries, initial_side=None):
        """
        Find a canvas size and a placement for every sprite.

        entries: sequence of SizeEntry
        initial_side: side of the first square canvas tried (default: guess from area)
        returns: PackResult
        """
        entries = list(entries)
        if initial_side is None:
            initial_side = guess_side(sum(_e.size.area() for _e in entries))
        side = min(max(1, initial_side), self.max_side)
        canvas = Size(side, side)
        for entry in entries:
            if max(entry.size) > self.max_side:
                raise SpriteTooLarge(entry.ref, entry.size, canvas, self.max_side)
        # stable: equal heights keep their input order
        ordered = sorted(entries, key=lambda _e: _e.size.height, reverse=True)
        attempts = []
        while True:
            attempts.append(canvas)
            placements = self._try_pack(ordered, canvas)
            if placements is not None:
                break
            logging.debug('Sprites do not fit in %s.', canvas)
            canvas = self._grow(canvas)
        self._validate(entries, placements, canvas)
        logging.debug(
            'Packed %d sprites into %s after %d attempt(s).',
            len(placements), canvas, len(attempts)
        )
        return PackResult(canvas, placements, attempts)

    def _grow(self, canvas):
        """Double the smaller side, width first."""
        if canvas.width <= canvas.height:
            grown = Size(canvas.width * 2, canvas.height)
        else:
            grown = Size(canvas.width, canvas.height * 2)
        if max(grown) > self.max_side:
            raise CanvasLimitExceeded(canvas, self.max_side)
        return grown

    def _try_pack(self, ordered, canvas):
        """Place sorted sprites in rows; return None if they don't fit."""
        pad = self.padding
        placements = []
        current_x, current_y, next_row_y = 0, 0, 0
        index = 0
        while index < len(ordered):
            ref, size = ordered[index]
            # without this check we would wrap rows endlessly
            if size.width + pad.horizontal() > canvas.width:
                return None
            if current_x == 0:
                # first sprite in a row is the tallest
                next_row_y = current_y + size.height + pad.vertical()
                if next_row_y > canvas.height:
                    return None
            if current_x + pad.horizontal() + size.width > canvas.width:
                current_x, current_y = 0, next_row_y
                continue
            rect = Rect.create(
                current_x + pad.left, current_y + pad.top,
                size.width, size.height
            )
            placements.append(PlacementEntry(ref, rect))
            current_x += size.width + pad.horizontal()
            index += 1
        return placements

    def _validate(self, entries, placements, canvas):
        """Check placements against the input sizes and the canvas."""
        if len(placements) != len(entries):
            raise InvariantViolation(
                f'Placed {len(placements)} of {len(entries)} sprites.'
            )
        sizes = {_e.ref: _e.size for _e in entries}
        bounds = Rect.create(0, 0, *canvas)
        for ref, rect in placements:
            if rect.size() != sizes[ref]:
                raise InvariantViolation(
                    f'Sprite {ref} placed as {rect.size()}, expected {sizes[ref]}.'
                )
            if not bounds.contains(rect.grow(self.padding)):
                raise InvariantViolation(
                    f'Sprite {ref} placed at {rect}, outside canvas {canvas}.'
                )
