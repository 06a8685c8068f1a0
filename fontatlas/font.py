"""
fontatlas.font - fonts as collections of character sprites

licence: https://opensource.org/licenses/MIT
"""

import logging
import unicodedata
from collections import namedtuple
from pathlib import PurePosixPath

from PIL import Image, ImageDraw

from .basetypes import Size, Rect
from .sources import SourceError


# character animation kinds
NO_ANIMATION = 'none'

# shown in place of unprintable characters in messages
_PLACEHOLDER = '⌧'

# colour of the baseline in text previews
_BASELINE_COLOUR = (128, 128, 128, 255)


class SourceSprite(namedtuple('SourceSprite', 'image_id x y width height')):
    """Rectangle on a source image."""

    @property
    def rect(self):
        return Rect.create(self.x, self.y, self.width, self.height)

    def get_image(self, sources):
        """Crop the sprite from its source image."""
        image = sources.get_image(self.image_id)
        bounds = Rect.create(0, 0, image.width, image.height)
        if not bounds.contains(self.rect):
            raise SourceError(
                f'Sprite {self.rect} extends beyond its {image.width}x{image.height} image.'
            )
        return image.crop(self.rect.as_box())


CharacterSprite = namedtuple(
    'CharacterSprite', 'char_code sprite frame x_offset y_offset x_advance'
)


def printable(char_code):
    """Character for use in messages."""
    try:
        char = chr(char_code)
    except (ValueError, OverflowError):
        return _PLACEHOLDER
    if unicodedata.category(char).startswith('C'):
        return _PLACEHOLDER
    return char


class FontAsset:
    """Bitmap font whose characters are sprites on the source pages."""

    def __init__(
            self, name, chars=(), *,
            line_height=0, base=0, animation=NO_ANIMATION, num_frames=1
        ):
        self.name = name
        self.chars = list(chars)
        self.line_height = line_height
        self.base = base
        self.animation = animation
        self.num_frames = num_frames

    def __repr__(self):
        return f'<{type(self).__name__} {self.name!r} with {len(self.chars)} chars>'

    @classmethod
    def from_fnt(cls, fnt_id, sources):
        """Build font from a loaded BMFont descriptor."""
        fnt = sources.get_fnt(fnt_id)
        chars = []
        for char in fnt.chars:
            try:
                page = fnt.get_page(char.page)
                # page images are registered under their file name
                image_id = sources.find(PurePosixPath(page.file).name)
            except (KeyError, SourceError) as e:
                raise SourceError(
                    f"Failed to find the source image of character "
                    f"'{printable(char.id)}' (#{char.id}) for font '{fnt.info.face}': {e}"
                ) from e
            chars.append(CharacterSprite(
                char_code=char.id,
                sprite=SourceSprite(image_id, char.x, char.y, char.width, char.height),
                frame=0,
                x_offset=char.xoffset,
                y_offset=char.yoffset,
                x_advance=char.xadvance,
            ))
        logging.debug("Font '%s' has %d characters.", fnt.info.face, len(chars))
        return cls(
            fnt.info.face, chars,
            line_height=fnt.common.lineHeight,
            base=fnt.common.base,
        )

    def get_sprite_sizes(self):
        return [Size(_c.sprite.width, _c.sprite.height) for _c in self.chars]

    def get_sprite_texture(self, index, sources):
        """RGBA image of a character sprite."""
        char = self.chars[index]
        try:
            return char.sprite.get_image(sources)
        except SourceError as e:
            raise SourceError(
                f"Failed to get the texture of character #{char.char_code} "
                f"of font '{self.name}': {e}"
            ) from e

    def get_char(self, char_code):
        for char in self.chars:
            if char.char_code == char_code:
                return char
        raise KeyError(
            f"Font '{self.name}' does not have a sprite for "
            f"'{printable(char_code)}' (char code #{char_code})"
        )

    def render_text(self, text, sources):
        """Draw a line of text on an image, with a dotted baseline."""
        chars = [self.get_char(ord(_c)) for _c in text]
        width = max(
            (
                _x + _c.x_offset + _c.sprite.width
                for _x, _c in zip(self._origins(chars), chars)
            ),
            default=0
        )
        image = Image.new('RGBA', (max(1, width), max(1, self.line_height)))
        draw = ImageDraw.Draw(image)
        if 0 <= self.base < image.height:
            for x in range(width):
                if x % 3 != 2:
                    draw.point((x, self.base), fill=_BASELINE_COLOUR)
        for x, char in zip(self._origins(chars), chars):
            if char.sprite.rect.is_empty():
                continue
            sprite = char.sprite.get_image(sources)
            # offsets may be negative, paste clips to the image
            image.paste(sprite, (x + char.x_offset, char.y_offset), sprite)
        return image

    @staticmethod
    def _origins(chars):
        """Horizontal pen position of each character."""
        x = 0
        for char in chars:
            yield x
            x += char.x_advance
