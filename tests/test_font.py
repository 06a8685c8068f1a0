"""
fontatlas test suite
font asset tests
"""

import unittest

from fontatlas import Sources, SourceError, FontAsset, Size
from .base import BaseTester, write_font, RED, GREEN, CLEAR


class TestFontAsset(BaseTester):

    def setUp(self):
        super().setUp()
        self.sources = Sources()
        fnt_id = self.sources.load(write_font(self.temp_path))
        self.font = FontAsset.from_fnt(fnt_id, self.sources)

    def test_from_fnt(self):
        font = self.font
        self.assertEqual(font.name, 'Test Font')
        self.assertEqual(font.line_height, 9)
        self.assertEqual(font.base, 7)
        self.assertEqual(font.num_frames, 1)
        self.assertEqual([_c.char_code for _c in font.chars], [32, 65, 66])
        self.assertEqual(font.get_char(66).x_offset, -1)
        self.assertEqual(font.get_char(66).x_advance, 5)

    def test_sprite_sizes(self):
        self.assertEqual(
            self.font.get_sprite_sizes(),
            [Size(0, 0), Size(5, 7), Size(4, 7)]
        )

    def test_sprite_texture(self):
        texture = self.font.get_sprite_texture(1, self.sources)
        self.assertEqual(texture.size, (5, 7))
        self.assertEqual({_c for _, _c in texture.getcolors()}, {RED})
        texture = self.font.get_sprite_texture(2, self.sources)
        self.assertEqual({_c for _, _c in texture.getcolors()}, {GREEN})

    def test_sprite_outside_page(self):
        fnt_path = self.temp_path / 'wide.fnt'
        fnt_path.write_text(
            'page id=0 file="test.png"\nchar id=65 x=12 y=0 width=8 height=8\n'
        )
        font = FontAsset.from_fnt(self.sources.load(fnt_path), self.sources)
        with self.assertRaises(SourceError):
            font.get_sprite_texture(0, self.sources)

    def test_missing_page_reference(self):
        fnt_path = self.temp_path / 'nopage.fnt'
        fnt_path.write_text('char id=65 width=1 height=1 page=1\n')
        fnt_id = self.sources.load(fnt_path)
        with self.assertRaises(SourceError):
            FontAsset.from_fnt(fnt_id, self.sources)

    def test_render_text(self):
        image = self.font.render_text('A B', self.sources)
        # A at 0, space at 6, B at 9 with offset -1
        self.assertEqual(image.size, (12, 9))
        self.assertEqual(image.getpixel((0, 1)), RED)
        self.assertEqual(image.getpixel((8, 1)), GREEN)
        self.assertEqual(image.getpixel((6, 1)), CLEAR)
        # dotted baseline where no glyph covers it
        self.assertEqual(image.getpixel((5, 7)), CLEAR)
        self.assertEqual(image.getpixel((6, 7))[:3], (128, 128, 128))

    def test_render_missing_char(self):
        with self.assertRaises(KeyError):
            self.font.render_text('AC', self.sources)


if __name__ == '__main__':
    unittest.main()
