"""Plane assembly: packed scanline planes to RGBA pixels."""

import numpy as np
from PIL import Image

from ..constants import SUPPORTED_LAYOUTS, OPAQUE_ALPHA, VGA_PALETTE_MARKER
from ..errors import UnsupportedFormatError, MalformedDimensionsError


class RgbaImage:
    """
    Default pixel sink: an RGBA image addressed by (x, y).

    Pixels are stored in a (height, width, 4) uint8 array.
    """

    def __init__(self, width: int, height: int):
        if width <= 0 or height <= 0:
            raise MalformedDimensionsError(width, height)
        self.width = width
        self.height = height
        self.pixels = np.zeros((height, width, 4), dtype=np.uint8)

    def __setitem__(self, xy, rgba) -> None:
        x, y = xy
        self.pixels[y, x] = rgba

    def __getitem__(self, xy):
        x, y = xy
        return tuple(int(c) for c in self.pixels[y, x])

    @property
    def size(self):
        return self.width, self.height

    def to_pil(self) -> Image.Image:
        """Return a copy of the pixels as a PIL RGBA image."""
        return Image.fromarray(self.pixels.copy())

    def save(self, path: str) -> None:
        self.to_pil().save(path)


def check_supported(bits_per_pixel: int, plane_count: int) -> None:
    """
    Reject plane/bit-depth layouts the assembler does not decode.

    Only 24-bit colour stored as three 8-bit planes is supported.

    Raises:
        UnsupportedFormatError: For any other combination
    """
    if (bits_per_pixel, plane_count) in SUPPORTED_LAYOUTS:
        return

    detail = None
    if (bits_per_pixel, plane_count) == (8, 1):
        detail = f"256-colour palette (marker 0x{VGA_PALETTE_MARKER:02X}) is not decoded"
    raise UnsupportedFormatError(bits_per_pixel, plane_count, detail)


def assemble_row(scanline, width: int, plane_count: int, bytes_per_plane: int,
                 y: int, sink, bits_per_pixel: int = 8) -> None:
    """
    Write one decoded row of plane data into the sink.

    Planes are stored one after another in the scanline, each
    ``bytes_per_plane`` long: red, then green, then blue. Pixels are
    written fully opaque.

    Green and blue start at ``bytes_per_plane`` rather than ``width``:
    PCX pads each plane to an even byte count, so the two differ for odd
    widths and agree otherwise.

    Args:
        scanline: Decoded row bytes
        width: Image width in pixels
        plane_count: Number of colour planes
        bytes_per_plane: Bytes per plane in the row (>= width, may be padded)
        y: Row index in the sink
        sink: Object accepting ``sink[x, y] = (r, g, b, a)``
        bits_per_pixel: Bits per pixel per plane

    Raises:
        UnsupportedFormatError: If the layout is not 8-bit, 3-plane
        MalformedDimensionsError: If the row is too short for the width
    """
    check_supported(bits_per_pixel, plane_count)

    if bytes_per_plane < width:
        raise MalformedDimensionsError(
            width, detail=f"plane holds {bytes_per_plane} bytes, fewer than the width")
    if len(scanline) < plane_count * bytes_per_plane:
        raise MalformedDimensionsError(
            width,
            detail=f"scanline holds {len(scanline)} bytes, need {plane_count * bytes_per_plane}")

    red = scanline[0:width]
    green = scanline[bytes_per_plane:bytes_per_plane + width]
    blue = scanline[bytes_per_plane * 2:bytes_per_plane * 2 + width]

    for x in range(width):
        sink[x, y] = (red[x], green[x], blue[x], OPAQUE_ALPHA)
