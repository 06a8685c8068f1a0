"""
fontatlas.atlas - texture atlas of font sprites

licence: https://opensource.org/licenses/MIT
"""

import logging

from PIL import Image

from .basetypes import Margins
from .packer import (
    ShelfPacker, SpriteRef, InvariantViolation, MAX_SIDE,
    build_size_table, guess_side,
)


class TextureAtlas:
    """Packs the sprites of a number of fonts into a single image."""

    def __init__(self, padding=Margins(0, 0, 0, 0), max_side=MAX_SIDE):
        self.padding = Margins.create(padding)
        self.max_side = max_side
        self.fonts = []
        self.sprite_sizes = None
        self.side_guess = 1
        self.result = None

    def add_font(self, font):
        """Add a font; returns its asset id."""
        self.fonts.append(font)
        # earlier size table and packing are stale
        self.sprite_sizes = None
        self.result = None
        return len(self.fonts) - 1

    @property
    def size(self):
        """Final canvas size."""
        if self.result is None:
            return None
        return self.result.canvas

    def load_sizes(self):
        """Rebuild the sprite size table and the canvas size guess."""
        self.sprite_sizes, area = build_size_table(self.fonts)
        self.side_guess = guess_side(area)
        logging.info(
            'Loaded %d sprite sizes. Guess for image side length is %d.',
            len(self.sprite_sizes), self.side_guess
        )

    def pack(self):
        """Determine canvas size and sprite placements."""
        if self.sprite_sizes is None:
            raise ValueError('Sprite sizes must be loaded before packing.')
        packer = ShelfPacker(self.padding, self.max_side)
        self.result = packer.pack(self.sprite_sizes, initial_side=self.side_guess)
        logging.info('Final image size is %s.', self.result.canvas)
        return self.result

    def get_rect(self, asset_id, sprite_id):
        """Content rectangle of a packed sprite."""
        if self.result is None:
            raise ValueError('Atlas has not been packed.')
        return self.result.as_dict()[SpriteRef(asset_id, sprite_id)]

    def sprite_rects(self):
        """Content rectangles in asset-then-sprite order."""
        if self.result is None:
            raise ValueError('Atlas has not been packed.')
        rects = self.result.as_dict()
        return [rects[_entry.ref] for _entry in self.sprite_sizes]

    def get_asset_sprite_texture(self, asset_id, sprite_id, sources):
        if not 0 <= asset_id < len(self.fonts):
            raise IndexError(
                f'Failed to get sprite texture from asset #{asset_id} '
                'as this asset id does not exist.'
            )
        return self.fonts[asset_id].get_sprite_texture(sprite_id, sources)

    def build_image(self, sources):
        """Composite all sprites into the atlas image."""
        if self.result is None:
            raise ValueError('Atlas has not been packed.')
        image = Image.new('RGBA', tuple(self.result.canvas))
        for (asset_id, sprite_id), rect in self.result.placements:
            if rect.is_empty():
                continue
            texture = self.get_asset_sprite_texture(asset_id, sprite_id, sources)
            if texture.size != tuple(rect.size()):
                raise InvariantViolation(
                    f'Sprite #{sprite_id} of asset #{asset_id} is {texture.size}, '
                    f'but its atlas rectangle is {rect}.'
                )
            image.paste(texture, (rect.x, rect.y))
        return image
