"""
fontatlas test suite
texture atlas tests
"""

import unittest
from itertools import combinations

from fontatlas import Sources, FontAsset, TextureAtlas, Margins, Size, Rect
from .base import BaseTester, write_font, RED, GREEN, CLEAR


class TestTextureAtlas(BaseTester):

    def setUp(self):
        super().setUp()
        self.sources = Sources()
        self.fonts = [
            FontAsset.from_fnt(
                self.sources.load(write_font(self.temp_path, _name, _name)),
                self.sources
            )
            for _name in ('one', 'two')
        ]

    def _pack(self, fonts, **kwargs):
        atlas = TextureAtlas(**kwargs)
        for font in fonts:
            atlas.add_font(font)
        atlas.load_sizes()
        atlas.pack()
        return atlas

    def test_single_font(self):
        atlas = self._pack(self.fonts[:1])
        self.assertEqual(atlas.side_guess, 4)
        self.assertEqual(atlas.size, Size(16, 8))
        self.assertEqual(atlas.get_rect(0, 1), Rect.create(0, 0, 5, 7))
        self.assertEqual(atlas.get_rect(0, 2), Rect.create(5, 0, 4, 7))

    def test_build_image(self):
        """Sprites are copied to their rectangles."""
        atlas = self._pack(self.fonts, padding=Margins.uniform(1))
        image = atlas.build_image(self.sources)
        self.assertEqual(image.size, tuple(atlas.size))
        self.assertEqual(image.mode, 'RGBA')
        for asset_id in range(2):
            red = image.crop(atlas.get_rect(asset_id, 1).as_box())
            green = image.crop(atlas.get_rect(asset_id, 2).as_box())
            self.assertEqual({_c for _, _c in red.getcolors()}, {RED})
            self.assertEqual({_c for _, _c in green.getcolors()}, {GREEN})
        # padding stays clear
        self.assertEqual(image.getpixel((0, 0)), CLEAR)

    def test_sprite_rects(self):
        """Rectangles are listed in asset-then-sprite order."""
        atlas = self._pack(self.fonts, padding=Margins.uniform(1))
        rects = atlas.sprite_rects()
        self.assertEqual(len(rects), 6)
        self.assertEqual(rects[4], atlas.get_rect(1, 1))
        for rect1, rect2 in combinations(rects, 2):
            self.assertFalse(rect1.intersects(rect2))

    def test_add_font_resets(self):
        atlas = self._pack(self.fonts[:1])
        atlas.add_font(self.fonts[1])
        with self.assertRaises(ValueError):
            atlas.pack()
        atlas.load_sizes()
        atlas.pack()
        self.assertEqual(len(atlas.sprite_rects()), 6)

    def test_not_packed(self):
        atlas = TextureAtlas()
        atlas.add_font(self.fonts[0])
        with self.assertRaises(ValueError):
            atlas.pack()
        atlas.load_sizes()
        with self.assertRaises(ValueError):
            atlas.build_image(self.sources)
        with self.assertRaises(ValueError):
            atlas.sprite_rects()

    def test_no_fonts(self):
        atlas = self._pack([])
        self.assertEqual(atlas.size, Size(1, 1))
        self.assertEqual(atlas.build_image(self.sources).size, (1, 1))

    def test_unknown_asset(self):
        atlas = self._pack(self.fonts[:1])
        with self.assertRaises(IndexError):
            atlas.get_asset_sprite_texture(1, 0, self.sources)


if __name__ == '__main__':
    unittest.main()
