"""
fontatlas.sources - loading and caching of source files

licence: https://opensource.org/licenses/MIT
"""

import logging
from collections import namedtuple
from pathlib import Path

from PIL import Image

from .fnt import FntFile, FileFormatError


FNT_SUFFIXES = ('.fnt',)
IMAGE_SUFFIXES = ('.png', '.bmp', '.tga')

# kinds of source
FNT = 'fnt'
IMAGE = 'image'


class SourceError(Exception):
    """Source file could not be loaded or found."""


class SourceId(namedtuple('SourceId', 'kind index')):
    """Reference to a loaded source file."""

    def __str__(self):
        return f'{self.kind} #{self.index}'


class Sources:
    """Store of loaded font descriptors and images, addressed by SourceId."""

    def __init__(self):
        # lists of (canonical path, content)
        self.images = []
        self.fnt_files = []
        # file name or other alias -> SourceId
        self.aliases = {}

    def _store(self, kind):
        if kind == FNT:
            return self.fnt_files
        if kind == IMAGE:
            return self.images
        raise SourceError(f'Invalid source kind `{kind}`.')

    def _get(self, source_id):
        store = self._store(source_id.kind)
        if not 0 <= source_id.index < len(store):
            raise SourceError(f'Invalid source id {source_id}.')
        return store[source_id.index]

    def get_path(self, source_id):
        """Canonical path of a loaded source."""
        path, _ = self._get(source_id)
        return path

    def get_relative_path(self, source_id, file):
        """Path of a file relative to the directory of a loaded source."""
        return self.get_path(source_id).parent / file

    def get_fnt(self, source_id):
        if source_id.kind != FNT:
            raise SourceError(f'Source {source_id} is not a font descriptor.')
        _, fnt = self._get(source_id)
        return fnt

    def get_image(self, source_id):
        if source_id.kind != IMAGE:
            raise SourceError(f'Source {source_id} is not an image.')
        _, image = self._get(source_id)
        return image

    def find(self, alias):
        """Get the SourceId registered under an alias."""
        try:
            return self.aliases[alias]
        except KeyError:
            raise SourceError(f'No source file registered as `{alias}`.') from None

    def insert_alias(self, source_id, alias):
        """Register an additional name for a loaded source."""
        # also checks that source_id is valid
        path = self.get_path(source_id)
        other_id = self.aliases.get(alias)
        if other_id is None:
            self.aliases[alias] = source_id
        elif self.get_path(other_id) == path:
            logging.info(
                "Source file alias '%s' has been inserted already for path %s",
                alias, path
            )
        else:
            logging.warning(
                "Source file alias '%s' already refers to '%s'; not inserting.",
                alias, self.get_path(other_id)
            )

    def load(self, path):
        """Load a source file, or get the id of an already loaded one."""
        path = Path(path)
        suffix = path.suffix.lower()
        if suffix in FNT_SUFFIXES:
            loader = self._load_fnt
        elif suffix in IMAGE_SUFFIXES:
            loader = self._load_image
        else:
            raise SourceError(
                f"Failed to load source file '{path}': "
                f"unrecognised file extension '{path.suffix}'."
            )
        if path.name in self.aliases:
            logging.info("Source file '%s' has been loaded already.", path.name)
            return self.aliases[path.name]
        try:
            return loader(path)
        except (OSError, UnicodeDecodeError, FileFormatError) as e:
            raise SourceError(f"Failed to load source file '{path}': {e}") from e

    def _register(self, kind, path, content):
        store = self._store(kind)
        source_id = SourceId(kind, len(store))
        store.append((path.resolve(), content))
        self.aliases[path.name] = source_id
        return source_id

    def _load_fnt(self, path):
        logging.info("Loading font descriptor '%s'.", path)
        fnt = FntFile.load(path.read_text(encoding='utf-8-sig'))
        source_id = self._register(FNT, path, fnt)
        for dep in fnt.dependencies():
            # page files are relative to the descriptor
            dep_path = self.get_relative_path(source_id, dep)
            try:
                self.load(dep_path)
            except SourceError as e:
                raise SourceError(f"Failed loading dependency '{dep}': {e}") from e
        return source_id

    def _load_image(self, path):
        logging.info("Loading image '%s'.", path)
        with Image.open(path) as image:
            image = image.convert('RGBA')
        return self._register(IMAGE, path, image)
