"""Constants for the PCX codec."""

import struct

# Identifier byte of a ZSoft PCX file
PCX_IDENTIFIER = 0x0A

# Header format (Little-endian, 128 bytes total)
# B: Identifier, B: Version, B: Encoding, B: Bits per pixel
# H: X start, H: Y start, H: X end, H: Y end
# H: Horizontal resolution, H: Vertical resolution
# 48s: EGA palette (16 RGB triples), B: Reserved
# B: Bit plane count, H: Bytes per scan line, H: Palette type
# H: Horizontal screen size, H: Vertical screen size, 54s: Reserved
HEADER_FORMAT = '<BBBBHHHHHH48sBBHHHH54s'
HEADER_SIZE = struct.calcsize(HEADER_FORMAT)  # 128 bytes

HEADER_FIELDS = (
    'identifier',
    'version',
    'encoding',
    'bits_per_pixel',
    'x_start',
    'y_start',
    'x_end',
    'y_end',
    'horizontal_resolution',
    'vertical_resolution',
    'palette',
    'reserved1',
    'bit_plane_count',
    'bytes_per_scan_line',
    'palette_type',
    'horizontal_screen_size',
    'vertical_screen_size',
    'reserved2',
)

PALETTE_SIZE = 48
RESERVED2_SIZE = 54

# RLE markers
RUN_MARKER = 0xC0       # Top two bits set
RUN_COUNT_MASK = 0x3F   # Lower six bits hold the run count

# Leading byte of a trailing 256-colour palette (not decoded)
VGA_PALETTE_MARKER = 0x0C

# Only 24-bit colour (three 8-bit planes) is decoded
SUPPORTED_LAYOUTS = frozenset([(8, 3)])

OPAQUE_ALPHA = 255

# Read-ahead size of ByteReader
DEFAULT_BUFFER_SIZE = 4096
