"""
fontatlas.fnt - AngelCode BMFont descriptor files

licence: https://opensource.org/licenses/MIT
"""

import json
import shlex
import logging
import xml.etree.ElementTree as etree
from dataclasses import dataclass, field, fields


# text/xml/binary format: https://www.angelcode.com/products/bmfont/doc/file_format.html
# json format: https://github.com/Jam3/load-bmfont/blob/master/json-spec.md


class FileFormatError(Exception):
    """Incorrect file format."""


##############################################################################
# descriptor records
# field names follow the attribute names used in the file

@dataclass
class FntInfo:
    """How the font was generated."""
    face: str = ''
    size: int = 0
    bold: int = 0
    italic: int = 0
    charset: str = ''
    unicode: int = 0
    # font height stretch in percentage
    stretchH: int = 100
    smooth: int = 0
    # supersampling level
    aa: int = 1
    # up, right, down, left
    padding: tuple = (0, 0, 0, 0)
    # horizontal, vertical
    spacing: tuple = (0, 0)
    outline: int = 0


@dataclass
class FntCommon:
    """Information common to all characters."""
    # distance in pixels between each line of text
    lineHeight: int = 0
    # pixels from the top of the line to the base of the characters
    base: int = 0
    scaleW: int = 0
    scaleH: int = 0
    pages: int = 0
    packed: int = 0
    alphaChnl: int = 0
    redChnl: int = 0
    greenChnl: int = 0
    blueChnl: int = 0


@dataclass
class FntPage:
    """Texture file of a page."""
    id: int = 0
    file: str = ''


@dataclass
class FntChar:
    """Character image location and metrics."""
    id: int = 0
    x: int = 0
    y: int = 0
    width: int = 0
    height: int = 0
    xoffset: int = 0
    yoffset: int = 0
    xadvance: int = 0
    page: int = 0
    # 1 = blue, 2 = green, 4 = red, 8 = alpha, 15 = all channels
    chnl: int = 15


@dataclass
class FntKerning:
    """Adjustment of x position when `second` immediately follows `first`."""
    first: int = 0
    second: int = 0
    amount: int = 0


##############################################################################
# value conversion

def _to_int(value):
    """Convert str or numeric value to int."""
    if isinstance(value, str):
        value = value.lower()
    if value == 'true':
        return 1
    elif value == 'false':
        return 0
    return int(value)

def _to_array(value, length):
    """Convert comma-separated str or sequence to tuple of ints."""
    if isinstance(value, str):
        value = value.split(',')
    value = tuple(_to_int(_v) for _v in value)
    if len(value) != length:
        raise ValueError(f'expected {length} values')
    return value

def _convert(fld, value):
    """Convert attribute value to the type of the record field."""
    if fld.type is int:
        return _to_int(value)
    if fld.type is tuple:
        return _to_array(value, len(fld.default))
    return str(value)

def _create_record(record_type, tag, attrs):
    """Create a descriptor record from a dict of attributes."""
    if not isinstance(attrs, dict):
        raise FileFormatError(
            f"BMFont `{tag}` declaration should be a set of attributes, not `{attrs!r}`."
        )
    known = {_f.name: _f for _f in fields(record_type)}
    kwargs = {}
    for key, value in attrs.items():
        try:
            fld = known[key]
        except KeyError:
            raise FileFormatError(
                f'Unrecognised attribute `{key}` in BMFont `{tag}` declaration.'
            ) from None
        try:
            kwargs[key] = _convert(fld, value)
        except (TypeError, ValueError) as e:
            raise FileFormatError(
                f'Invalid value `{value}` for `{key}` in BMFont `{tag}` declaration: {e}'
            ) from e
    return record_type(**kwargs)


_RECORDS = {
    'info': FntInfo,
    'common': FntCommon,
    'page': FntPage,
    'char': FntChar,
    'kerning': FntKerning,
}


##############################################################################
# descriptor file

@dataclass
class FntFile:
    """Parsed BMFont descriptor."""
    info: FntInfo = field(default_factory=FntInfo)
    common: FntCommon = field(default_factory=FntCommon)
    pages: list = field(default_factory=list)
    chars: list = field(default_factory=list)
    kernings: list = field(default_factory=list)
    # descriptor variant the file was read from
    bmformat: str = 'text'

    @classmethod
    def load(cls, data):
        """Parse a descriptor in text, xml or json format."""
        start = data.lstrip()[:1]
        if start == '<':
            logging.debug('Found xml BMFont descriptor.')
            return cls.from_xml(data)
        if start == '{':
            logging.debug('Found json BMFont descriptor.')
            return cls.from_json(data)
        logging.debug('Found text BMFont descriptor.')
        return cls.parse(data)

    @classmethod
    def parse(cls, data):
        """Parse text descriptor."""
        fnt = cls(bmformat='text')
        for line in data.splitlines():
            tag, _, rest = line.strip().partition(' ')
            if not tag:
                continue
            if tag in ('chars', 'kernings'):
                # count only
                continue
            try:
                record_type = _RECORDS[tag]
            except KeyError:
                logging.warning('Unrecognised tag `%s` in BMFont descriptor.', tag)
                continue
            fnt._add(tag, _create_record(record_type, tag, _parse_text_dict(rest)))
        return fnt

    @classmethod
    def from_xml(cls, data):
        """Parse XML descriptor."""
        try:
            root = etree.fromstring(data)
        except etree.ParseError as e:
            raise FileFormatError(f'Not a valid BMFont XML file: {e}') from e
        if root.tag != 'font':
            raise FileFormatError(
                f'Not a valid BMFont XML file: root should be <font>, not <{root.tag}>'
            )
        fnt = cls(bmformat='xml')
        for tag in ('info', 'common'):
            elem = root.find(tag)
            if elem is not None:
                fnt._add(tag, _create_record(_RECORDS[tag], tag, elem.attrib))
        for group, tag in (('pages', 'page'), ('chars', 'char'), ('kernings', 'kerning')):
            for elem in root.iterfind(f'{group}/{tag}'):
                fnt._add(tag, _create_record(_RECORDS[tag], tag, elem.attrib))
        return fnt

    @classmethod
    def from_json(cls, data):
        """Parse JSON descriptor."""
        try:
            tree = json.loads(data)
        except ValueError as e:
            raise FileFormatError(f'Not a valid BMFont JSON file: {e}') from e
        if not isinstance(tree, dict):
            raise FileFormatError('Not a valid BMFont JSON file: expected an object.')
        fnt = cls(bmformat='json')
        for tag in ('info', 'common'):
            if tag in tree:
                fnt._add(tag, _create_record(_RECORDS[tag], tag, tree[tag]))
        # pages are a list of file names
        for page_id, name in enumerate(_json_list(tree, 'pages')):
            if not isinstance(name, str):
                raise FileFormatError(f'BMFont page should be a file name, not `{name!r}`.')
            fnt._add('page', FntPage(id=page_id, file=name))
        for tag in ('char', 'kerning'):
            for attrs in _json_list(tree, tag + 's'):
                fnt._add(tag, _create_record(_RECORDS[tag], tag, attrs))
        return fnt

    def _add(self, tag, record):
        if tag in ('info', 'common'):
            setattr(self, tag, record)
        else:
            getattr(self, tag + 's').append(record)

    def dependencies(self):
        """File names of the texture pages."""
        return [_page.file for _page in self.pages]

    def get_page(self, page_id):
        for page in self.pages:
            if page.id == page_id:
                return page
        raise KeyError(f'No page with id {page_id} in font `{self.info.face}`.')

    def get_char(self, char_id):
        for char in self.chars:
            if char.id == char_id:
                return char
        raise KeyError(f'No character with id {char_id} in font `{self.info.face}`.')


def _parse_text_dict(line):
    """Parse space separated key=value pairs."""
    try:
        items = shlex.split(line)
    except ValueError as e:
        raise FileFormatError(f'Could not parse BMFont line `{line}`: {e}') from e
    pairs = (_item.partition('=') for _item in items)
    # ignore items without a value
    return {_key: _value for _key, _sep, _value in pairs if _sep and _value}

def _json_list(tree, group):
    """Get a list of declarations from a JSON descriptor."""
    items = tree.get(group, [])
    if not isinstance(items, list):
        raise FileFormatError(
            f'BMFont `{group}` should be a list, not `{items!r}`.'
        )
    return items
