"""I/O modules for the PCX codec."""

from .stream import ByteReader, read_exact
from .header import (
    PcxHeader,
    parse_header,
    unpack_header,
    pack_header,
    is_recognized_format,
    describe_header,
)
from .image_writer import write_image

__all__ = [
    'ByteReader',
    'read_exact',
    'PcxHeader',
    'parse_header',
    'unpack_header',
    'pack_header',
    'is_recognized_format',
    'describe_header',
    'write_image',
]
