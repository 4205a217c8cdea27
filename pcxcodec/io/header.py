"""PCX header parsing and packing."""

import re
import struct
from dataclasses import dataclass, astuple
from logging import getLogger
from typing import Dict, List, Tuple

from ..constants import (
    HEADER_FORMAT, HEADER_SIZE, HEADER_FIELDS, PCX_IDENTIFIER,
    PALETTE_SIZE, RESERVED2_SIZE,
)
from ..errors import TruncatedInputError
from .stream import read_exact

logger = getLogger(__name__)


def _field_offsets() -> List[Tuple[str, int, int]]:
    """Return (name, offset, size) for every header field in wire order."""
    codes = re.findall(r'\d*[a-zA-Z]', HEADER_FORMAT[1:])
    layout = []
    offset = 0
    for name, code in zip(HEADER_FIELDS, codes):
        size = struct.calcsize('<' + code)
        layout.append((name, offset, size))
        offset += size
    return layout


FIELD_LAYOUT = _field_offsets()


@dataclass(frozen=True)
class PcxHeader:
    """Decoded 128-byte PCX header. Built once by ``unpack_header``."""

    identifier: int
    version: int
    encoding: int
    bits_per_pixel: int
    x_start: int
    y_start: int
    x_end: int
    y_end: int
    horizontal_resolution: int
    vertical_resolution: int
    palette: bytes
    reserved1: int
    bit_plane_count: int
    bytes_per_scan_line: int
    palette_type: int
    horizontal_screen_size: int
    vertical_screen_size: int
    reserved2: bytes

    @property
    def width(self) -> int:
        return self.x_end - self.x_start + 1

    @property
    def height(self) -> int:
        return self.y_end - self.y_start + 1

    @property
    def scanline_length(self) -> int:
        """Decoded bytes per row, all planes included."""
        return self.bit_plane_count * self.bytes_per_scan_line

    @property
    def ega_palette(self) -> List[Tuple[int, int, int]]:
        """The 16-colour header palette as RGB triples."""
        return [tuple(self.palette[i:i + 3]) for i in range(0, PALETTE_SIZE, 3)]


def is_recognized_format(header: PcxHeader) -> bool:
    """Return True if the header carries the PCX identifier byte."""
    return header is not None and header.identifier == PCX_IDENTIFIER


def unpack_header(header_bytes: bytes) -> PcxHeader:
    """
    Unpack a 128-byte PCX header.

    Args:
        header_bytes: Header data; must hold at least 128 bytes

    Returns:
        PcxHeader with all fields populated

    Raises:
        TruncatedInputError: If fewer than 128 bytes are given
    """
    if len(header_bytes) < HEADER_SIZE:
        name, offset, _ = _field_at(len(header_bytes))
        raise TruncatedInputError(
            f"Header truncated in field '{name}' (offset {offset}): "
            f"expected {HEADER_SIZE} bytes, got {len(header_bytes)}",
            expected=HEADER_SIZE, received=len(header_bytes))

    fields = struct.unpack(HEADER_FORMAT, bytes(header_bytes[:HEADER_SIZE]))
    return PcxHeader(*fields)


def parse_header(stream) -> PcxHeader:
    """
    Read and decode the header from the current position of a stream.

    Exactly 128 bytes are consumed on success. On failure the number of
    bytes consumed is unspecified.

    Args:
        stream: ByteReader or binary file object

    Returns:
        PcxHeader

    Raises:
        TruncatedInputError: If the stream ends inside the header
    """
    data = read_exact(stream, HEADER_SIZE)
    header = unpack_header(data)

    logger.debug(f"PCX header: identifier=0x{header.identifier:02X} "
                 f"version={header.version} encoding={header.encoding} "
                 f"bpp={header.bits_per_pixel} planes={header.bit_plane_count} "
                 f"bytes/line={header.bytes_per_scan_line} "
                 f"window=({header.x_start},{header.y_start})-({header.x_end},{header.y_end})")
    return header


def pack_header(header: PcxHeader) -> bytes:
    """Serialize a header back into its 128-byte wire form."""
    if len(header.palette) != PALETTE_SIZE:
        raise ValueError(f"Palette must be {PALETTE_SIZE} bytes, got {len(header.palette)}")
    if len(header.reserved2) != RESERVED2_SIZE:
        raise ValueError(f"Reserved block must be {RESERVED2_SIZE} bytes, got {len(header.reserved2)}")

    return struct.pack(HEADER_FORMAT, *astuple(header))


def describe_header(header: PcxHeader) -> Dict[str, object]:
    """Summarize a header for display."""
    if is_recognized_format(header):
        identifier = f"{header.identifier} (ZSoft .PCX)"
    else:
        identifier = str(header.identifier)

    return {
        'Identifier': identifier,
        'Version': header.version,
        'Encoding': 'RLE' if header.encoding == 1 else header.encoding,
        'Bits per Pixel': header.bits_per_pixel,
        'Color Planes': header.bit_plane_count,
        'Image Dimensions': f"{header.width} x {header.height}",
        'Bytes per Line': header.bytes_per_scan_line,
        'HDPI': header.horizontal_resolution,
        'VDPI': header.vertical_resolution,
        'Palette Type': header.palette_type,
    }


def _field_at(offset: int) -> Tuple[str, int, int]:
    """Return the layout entry of the field containing a byte offset."""
    for entry in FIELD_LAYOUT:
        name, start, size = entry
        if start <= offset < start + size:
            return entry
    return FIELD_LAYOUT[-1]
