"""
fontatlas.struct - binary structures

licence: https://opensource.org/licenses/MIT
"""

import ctypes
from types import SimpleNamespace
from functools import partial


class StructError(ValueError):
    pass


# type strings
TYPES = {
    'uint8': ctypes.c_uint8,
    'int8': ctypes.c_int8,
    'uint16': ctypes.c_uint16,
    'int16': ctypes.c_int16,
    'uint32': ctypes.c_uint32,
    'int32': ctypes.c_int32,
    'char': ctypes.c_char,
}


def _parse_type(atype):
    """Convert member type specification to ctypes type."""
    if isinstance(atype, StructType):
        return atype._ctype
    if isinstance(atype, type):
        return atype
    try:
        return TYPES[atype]
    except KeyError:
        pass
    if isinstance(atype, str) and atype.endswith('s'):
        return ctypes.c_char * int(atype[:-1])
    raise ValueError('Field type `{}` not understood'.format(atype))


def _int_range(ctype):
    """Smallest and largest value of an integer ctypes type; None for other types."""
    if ctype not in TYPES.values() or ctype is ctypes.c_char:
        return None
    bits = 8 * ctypes.sizeof(ctype)
    if ctype(-1).value < 0:
        return -(1 << (bits - 1)), (1 << (bits - 1)) - 1
    return 0, (1 << bits) - 1


class StructValue:
    """Wrapper for ctypes Structure value."""

    def __init__(self, cvalue):
        object.__setattr__(self, '_cvalue', cvalue)

    def __getattr__(self, attr):
        if attr.startswith('_'):
            raise AttributeError(attr)
        return getattr(self._cvalue, attr)

    def __setattr__(self, attr, value):
        setattr(self._cvalue, attr, value)

    def __bytes__(self):
        return bytes(self._cvalue)

    def __eq__(self, other):
        return isinstance(other, StructValue) and bytes(self) == bytes(other)

    @property
    def __dict__(self):
        return {
            _field: getattr(self._cvalue, _field)
            for _field, *_ in self._cvalue._fields_
        }

    def __repr__(self):
        return type(self).__name__ + '({})'.format(
            ', '.join(f'{_k}={_v!r}' for _k, _v in vars(self).items())
        )


class StructType:
    """
    Represent a structured type.

    mystruct = StructType('<', first='uint8', second='uint16')
    s = mystruct(first=1, second=2)

    assert bytes(s) == b'\\1\\2\\0'
    """

    def __init__(self, endian, /, **description):
        """Create a structured type."""
        if endian[:1].lower() in ('b', '>'):
            parent = ctypes.BigEndianStructure
        elif endian[:1].lower() in ('l', '<'):
            parent = ctypes.LittleEndianStructure
        else:
            raise ValueError(f"Endianness '{endian}' not recognised.")

        class _CStruct(parent):
            _fields_ = tuple(
                (_field, _parse_type(_type))
                for _field, _type in description.items()
            )
            _pack_ = True
            _layout_ = 'ms'

        self._ctype = _CStruct
        self._ranges = {
            _field: _int_range(_parse_type(_type))
            for _field, _type in description.items()
        }

    def __call__(self, **kwargs):
        """Instantiate a struct variable; integers must fit their fields."""
        for field, value in kwargs.items():
            bounds = self._ranges.get(field)
            if bounds and not bounds[0] <= value <= bounds[1]:
                raise StructError(
                    f'Value {value} out of range {bounds[0]}..{bounds[1]} '
                    f'for field `{field}`.'
                )
        return StructValue(self._ctype(**kwargs))

    def from_bytes(self, data, offset=0):
        """Read struct from a bytes-like object."""
        if offset < 0 or len(data) < offset + self.size:
            raise StructError(
                f'Need {self.size} bytes at offset {offset}, '
                f'only {max(0, len(data) - offset)} available.'
            )
        return StructValue(self._ctype.from_buffer_copy(data, offset))

    def array_from_bytes(self, data, offset, count):
        """Read a sequence of structs."""
        return [
            self.from_bytes(data, offset + _i * self.size)
            for _i in range(count)
        ]

    @property
    def size(self):
        return ctypes.sizeof(self._ctype)


little_endian = SimpleNamespace(Struct=partial(StructType, '<'))
