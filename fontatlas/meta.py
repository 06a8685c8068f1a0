"""
fontatlas.meta - atlas metadata in json and binary form

licence: https://opensource.org/licenses/MIT
"""

import json
import logging
from dataclasses import dataclass, field

from .basetypes import Rect
from .fnt import FileFormatError
from .font import NO_ANIMATION
from .struct import little_endian as le, StructError


@dataclass
class CharMeta:
    # index in the sprites list of the atlas;
    # the next num_animation_frames - 1 sprites are the other frames
    first_sprite_index: int
    char_code: int
    x_offset: int
    y_offset: int
    x_advance: int


@dataclass
class FontMeta:
    name: str
    animation: str = NO_ANIMATION
    num_animation_frames: int = 1
    line_height: int = 0
    base_line_y: int = 0
    chars: list = field(default_factory=list)


@dataclass
class AtlasMeta:
    """Where sprites are on the atlas image, and how to use them as fonts."""
    atlas_name: str
    texture_file: str
    width: int
    height: int
    sprites: list = field(default_factory=list)
    fonts: list = field(default_factory=list)

    @classmethod
    def from_atlas(cls, atlas, name, texture_file):
        """Collect metadata of a packed TextureAtlas."""
        sprites = atlas.sprite_rects()
        fonts = []
        first_sprite = 0
        for font in atlas.fonts:
            fonts.append(FontMeta(
                name=font.name,
                animation=font.animation,
                num_animation_frames=font.num_frames,
                line_height=font.line_height,
                base_line_y=font.base,
                chars=[
                    CharMeta(
                        first_sprite_index=first_sprite + _index,
                        char_code=_char.char_code,
                        x_offset=_char.x_offset,
                        y_offset=_char.y_offset,
                        x_advance=_char.x_advance,
                    )
                    for _index, _char in enumerate(font.chars)
                ],
            ))
            first_sprite += len(font.chars)
        width, height = atlas.size
        return cls(name, texture_file, width, height, sprites, fonts)

    ##########################################################################
    # json

    def to_json(self, indent=2):
        tree = dict(
            atlas_name=self.atlas_name,
            texture_file=self.texture_file,
            width=self.width,
            height=self.height,
            sprites=[
                dict(x=_r.x, y=_r.y, width=_r.width(), height=_r.height())
                for _r in self.sprites
            ],
            fonts=[
                dict(
                    name=_f.name,
                    animation=_f.animation,
                    num_animation_frames=_f.num_animation_frames,
                    line_height=_f.line_height,
                    base_line_y=_f.base_line_y,
                    chars=[vars(_c) for _c in _f.chars],
                )
                for _f in self.fonts
            ],
        )
        return json.dumps(tree, indent=indent)

    @classmethod
    def from_json(cls, data):
        try:
            tree = json.loads(data)
            return cls(
                atlas_name=tree['atlas_name'],
                texture_file=tree['texture_file'],
                width=tree['width'],
                height=tree['height'],
                sprites=[
                    Rect.create(_s['x'], _s['y'], _s['width'], _s['height'])
                    for _s in tree['sprites']
                ],
                fonts=[
                    FontMeta(**{
                        **_f, 'chars': [CharMeta(**_c) for _c in _f['chars']]
                    })
                    for _f in tree['fonts']
                ],
            )
        except (ValueError, KeyError, TypeError) as e:
            raise FileFormatError(f'Not a valid atlas metadata JSON file: {e}') from e

    ##########################################################################
    # binary

    def to_bytes(self):
        return _write_binary(self)

    @classmethod
    def from_bytes(cls, data):
        return _read_binary(cls, data)


##############################################################################
# binary metadata format
#
# header, then blocks each consisting of a block header and payload
#   atlas block: _ATLAS, atlas name and texture file name as null-terminated strings
#   sprites block: array of _SPRITE
#   font block (one per font): _FONT, null-terminated font name, array of _CHAR

_MAGIC = b'FAT'
_VERSION = 1

_HEAD = le.Struct(
    magic='3s',
    version='uint8',
)

_BLKHEAD = le.Struct(
    typeId='uint8',
    blkSize='uint32',
)

# type ids
_BLK_ATLAS = 1
_BLK_SPRITES = 2
_BLK_FONT = 3

_ATLAS = le.Struct(
    width='uint16',
    height='uint16',
)

_SPRITE = le.Struct(
    x='uint16',
    y='uint16',
    width='uint16',
    height='uint16',
)

_FONT = le.Struct(
    lineHeight='int16',
    baseLineY='int16',
    animation='uint8',
    numFrames='uint16',
    charCount='uint32',
)

_CHAR = le.Struct(
    firstSprite='uint32',
    charCode='uint32',
    xoffset='int16',
    yoffset='int16',
    xadvance='int16',
)

_ANIMATIONS = {
    NO_ANIMATION: 0,
}
_ANIMATIONS_REVERSE = {_v: _k for _k, _v in _ANIMATIONS.items()}

_MAX_UINT16 = 0xffff


def _to_cstr(value):
    return value.encode('utf-8') + b'\0'

def _read_cstr(data, offset):
    """Read null-terminated string; return string and offset past terminator."""
    end = data.find(b'\0', offset)
    if end < 0:
        raise FileFormatError('Unterminated string in atlas metadata.')
    return data[offset:end].decode('utf-8', 'replace'), end + 1


def _block(type_id, payload):
    return bytes(_BLKHEAD(typeId=type_id, blkSize=len(payload))) + payload


def _write_binary(meta):
    """Convert metadata to binary format."""
    try:
        return _pack_binary(meta)
    except StructError as e:
        raise FileFormatError(f'Cannot store atlas metadata in binary form: {e}') from e


def _pack_binary(meta):
    if max(meta.width, meta.height) > _MAX_UINT16:
        raise FileFormatError(
            f'Atlas of {meta.width}x{meta.height} too large for binary metadata.'
        )
    blocks = [bytes(_HEAD(magic=_MAGIC, version=_VERSION))]
    blocks.append(_block(_BLK_ATLAS, b''.join((
        bytes(_ATLAS(width=meta.width, height=meta.height)),
        _to_cstr(meta.atlas_name),
        _to_cstr(meta.texture_file),
    ))))
    blocks.append(_block(_BLK_SPRITES, b''.join(
        bytes(_SPRITE(x=_r.x, y=_r.y, width=_r.width(), height=_r.height()))
        for _r in meta.sprites
    )))
    for font in meta.fonts:
        header = _FONT(
            lineHeight=font.line_height,
            baseLineY=font.base_line_y,
            animation=_ANIMATIONS[font.animation],
            numFrames=font.num_animation_frames,
            charCount=len(font.chars),
        )
        chars = b''.join(
            bytes(_CHAR(
                firstSprite=_c.first_sprite_index,
                charCode=_c.char_code,
                xoffset=_c.x_offset,
                yoffset=_c.y_offset,
                xadvance=_c.x_advance,
            ))
            for _c in font.chars
        )
        blocks.append(_block(
            _BLK_FONT, bytes(header) + _to_cstr(font.name) + chars
        ))
    return b''.join(blocks)


def _read_binary(cls, data):
    """Parse binary metadata."""
    try:
        head = _HEAD.from_bytes(data)
        if head.magic != _MAGIC:
            raise FileFormatError('Not a binary atlas metadata file: wrong magic.')
        if head.version != _VERSION:
            raise FileFormatError(f'Unsupported atlas metadata version {head.version}.')
        meta = cls('', '', 0, 0)
        offset = _HEAD.size
        while offset < len(data):
            blkhead = _BLKHEAD.from_bytes(data, offset)
            start = offset + _BLKHEAD.size
            payload = data[start:start+blkhead.blkSize]
            if len(payload) < blkhead.blkSize:
                raise FileFormatError('Truncated block in atlas metadata.')
            if blkhead.typeId == _BLK_ATLAS:
                atlas = _ATLAS.from_bytes(payload)
                meta.width, meta.height = atlas.width, atlas.height
                meta.atlas_name, pos = _read_cstr(payload, _ATLAS.size)
                meta.texture_file, _ = _read_cstr(payload, pos)
            elif blkhead.typeId == _BLK_SPRITES:
                meta.sprites = [
                    Rect.create(_s.x, _s.y, _s.width, _s.height)
                    for _s in _SPRITE.array_from_bytes(
                        payload, 0, len(payload) // _SPRITE.size
                    )
                ]
            elif blkhead.typeId == _BLK_FONT:
                meta.fonts.append(_read_font(payload))
            else:
                logging.warning('Skipping unknown block type %d.', blkhead.typeId)
            offset = start + blkhead.blkSize
    except StructError as e:
        raise FileFormatError(f'Truncated atlas metadata: {e}') from e
    return meta


def _read_font(payload):
    header = _FONT.from_bytes(payload)
    name, pos = _read_cstr(payload, _FONT.size)
    chars = _CHAR.array_from_bytes(payload, pos, header.charCount)
    try:
        animation = _ANIMATIONS_REVERSE[header.animation]
    except KeyError:
        raise FileFormatError(f'Unknown animation kind {header.animation}.') from None
    return FontMeta(
        name=name,
        animation=animation,
        num_animation_frames=header.numFrames,
        line_height=header.lineHeight,
        base_line_y=header.baseLineY,
        chars=[
            CharMeta(
                first_sprite_index=_c.firstSprite,
                char_code=_c.charCode,
                x_offset=_c.xoffset,
                y_offset=_c.yoffset,
                x_advance=_c.xadvance,
            )
            for _c in chars
        ],
    )
