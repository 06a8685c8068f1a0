"""
fontatlas - pack bitmap fonts into a texture atlas

licence: https://opensource.org/licenses/MIT
"""

import sys as _sys
assert _sys.version_info >= (3, 9)

from .constants import VERSION as __version__
from .basetypes import Coord, Size, Margins, Rect
from .packer import (
    SpriteRef, SizeEntry, PlacementEntry, PackResult, ShelfPacker,
    PackingError, SpriteTooLarge, CanvasLimitExceeded, InvariantViolation,
    build_size_table, guess_side,
)
from .fnt import FntFile, FileFormatError
from .sources import Sources, SourceId, SourceError
from .font import FontAsset, CharacterSprite, SourceSprite
from .atlas import TextureAtlas
from .meta import AtlasMeta, FontMeta, CharMeta
from .cli import build_atlas
