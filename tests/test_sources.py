"""
fontatlas test suite
source loading tests
"""

import unittest

from fontatlas import Sources, SourceId, SourceError
from .base import BaseTester, write_font, RED


class TestSources(BaseTester):

    def setUp(self):
        super().setUp()
        self.fnt_path = write_font(self.temp_path)
        self.sources = Sources()

    def test_load_fnt(self):
        """Loading a descriptor also loads its page image."""
        fnt_id = self.sources.load(self.fnt_path)
        self.assertEqual(fnt_id, SourceId('fnt', 0))
        self.assertEqual(self.sources.get_fnt(fnt_id).info.face, 'Test Font')
        self.assertEqual(self.sources.get_path(fnt_id), self.fnt_path.resolve())
        image_id = self.sources.find('test.png')
        self.assertEqual(image_id, SourceId('image', 0))
        image = self.sources.get_image(image_id)
        self.assertEqual(image.mode, 'RGBA')
        self.assertEqual(image.size, (16, 8))
        self.assertEqual(image.getpixel((0, 0)), RED)

    def test_load_cached(self):
        fnt_id = self.sources.load(self.fnt_path)
        with self.assertLogs(level='INFO'):
            self.assertEqual(self.sources.load(self.fnt_path), fnt_id)
        self.assertEqual(len(self.sources.fnt_files), 1)
        self.assertEqual(len(self.sources.images), 1)

    def test_shared_page(self):
        """Descriptors referring to the same page share the image."""
        other = self.temp_path / 'other.fnt'
        other.write_text(self.fnt_path.read_text())
        self.sources.load(self.fnt_path)
        self.sources.load(other)
        self.assertEqual(len(self.sources.fnt_files), 2)
        self.assertEqual(len(self.sources.images), 1)

    def test_relative_path(self):
        fnt_id = self.sources.load(self.fnt_path)
        self.assertEqual(
            self.sources.get_relative_path(fnt_id, 'test.png'),
            (self.temp_path / 'test.png').resolve()
        )

    def test_alias(self):
        fnt_id = self.sources.load(self.fnt_path)
        image_id = self.sources.find('test.png')
        self.sources.insert_alias(fnt_id, 'my-font')
        self.assertEqual(self.sources.find('my-font'), fnt_id)
        # same path again
        with self.assertLogs(level='INFO'):
            self.sources.insert_alias(fnt_id, 'my-font')
        # refused for another path
        with self.assertLogs(level='WARNING'):
            self.sources.insert_alias(image_id, 'my-font')
        self.assertEqual(self.sources.find('my-font'), fnt_id)

    def test_alias_invalid_id(self):
        with self.assertRaises(SourceError):
            self.sources.insert_alias(SourceId('fnt', 3), 'nothing')

    def test_invalid_ids(self):
        fnt_id = self.sources.load(self.fnt_path)
        with self.assertRaises(SourceError):
            self.sources.get_image(fnt_id)
        with self.assertRaises(SourceError):
            self.sources.get_fnt(SourceId('fnt', 1))
        with self.assertRaises(SourceError):
            self.sources.find('nothing.png')

    def test_unknown_extension(self):
        path = self.temp_path / 'test.txt'
        path.write_text('info')
        with self.assertRaises(SourceError):
            self.sources.load(path)

    def test_missing_file(self):
        with self.assertRaises(SourceError):
            self.sources.load(self.temp_path / 'missing.fnt')

    def test_missing_page(self):
        (self.temp_path / 'test.png').unlink()
        with self.assertRaises(SourceError):
            self.sources.load(self.fnt_path)

    def test_not_utf8(self):
        path = self.temp_path / 'binary.fnt'
        path.write_bytes(b'info face="\xff\xfe\xfa"\n')
        with self.assertRaises(SourceError):
            self.sources.load(path)

    def test_not_an_image(self):
        path = self.temp_path / 'broken.png'
        path.write_bytes(b'not a png')
        with self.assertRaises(SourceError):
            self.sources.load(path)


if __name__ == '__main__':
    unittest.main()
