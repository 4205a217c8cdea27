"""Header parsing, packing and format recognition."""

import sys
import os
import io
import dataclasses

# Add parent directory and this directory to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

import numpy as np
import pytest

from pcxcodec.constants import HEADER_SIZE
from pcxcodec.errors import TruncatedInputError
from pcxcodec.io import (
    ByteReader, parse_header, unpack_header, pack_header,
    is_recognized_format, describe_header,
)
from pcx_samples import make_header_bytes, run_tests


def test_header_size():
    """The wire header is 128 bytes."""
    assert HEADER_SIZE == 128


def test_parse_fields():
    """Fields decode in wire order, 16-bit values little-endian."""
    print("=" * 60)
    print("Test: Header Fields")
    print("=" * 60)

    data = make_header_bytes(width=320, height=200, x_start=16, y_start=8)
    header = parse_header(io.BytesIO(data))

    assert header.identifier == 0x0A
    assert header.version == 5
    assert header.encoding == 1
    assert header.bits_per_pixel == 8
    assert (header.x_start, header.y_start) == (16, 8)
    assert (header.x_end, header.y_end) == (335, 207)
    assert header.horizontal_resolution == 300
    assert header.vertical_resolution == 300
    assert header.palette == bytes(range(48))
    assert header.bit_plane_count == 3
    assert header.bytes_per_scan_line == 320
    assert header.palette_type == 1
    assert (header.horizontal_screen_size, header.vertical_screen_size) == (640, 480)
    assert header.reserved2 == bytes(54)

    assert header.width == 320
    assert header.height == 200
    assert header.scanline_length == 960
    print(f"   ✓ {header.width}x{header.height}, {header.bit_plane_count} planes")


def test_width_height_from_window():
    """xStart=0, xEnd=9, yStart=0, yEnd=4 gives a 10x5 image."""
    header = unpack_header(make_header_bytes(width=10, height=5))
    assert (header.x_start, header.x_end, header.y_start, header.y_end) == (0, 9, 0, 4)
    assert header.width == 10
    assert header.height == 5


def test_round_trip():
    """Re-serializing a parsed header reproduces the original bytes."""
    print("=" * 60)
    print("Test: Header Round Trip")
    print("=" * 60)

    rng = np.random.default_rng(7)
    samples = [make_header_bytes()] + [
        bytes(rng.integers(0, 256, HEADER_SIZE, dtype=np.uint8)) for _ in range(5)
    ]

    for data in samples:
        header = unpack_header(data)
        assert pack_header(header) == data

    print(f"   ✓ {len(samples)} headers reproduced byte for byte")


def test_header_is_immutable():
    header = unpack_header(make_header_bytes())
    with pytest.raises(dataclasses.FrozenInstanceError):
        header.x_end = 100


def test_parse_consumes_exactly_header():
    """Parsing a raw stream leaves it positioned right after the header."""
    data = make_header_bytes() + b'\x01\x02\x03'

    stream = io.BytesIO(data)
    parse_header(stream)
    assert stream.tell() == HEADER_SIZE

    reader = ByteReader(data)
    parse_header(reader)
    assert reader.position == HEADER_SIZE
    assert reader.read_byte() == 0x01


class _TrickleStream:
    """Stream returning at most 7 bytes per read call."""

    def __init__(self, data):
        self.inner = io.BytesIO(data)

    def read(self, size=-1):
        return self.inner.read(min(size, 7) if size >= 0 else 7)


def test_parse_short_reads():
    """Short reads from the stream are retried."""
    header = parse_header(_TrickleStream(make_header_bytes(width=33, height=17)))
    assert (header.width, header.height) == (33, 17)


def test_truncated_header():
    """A stream shorter than 128 bytes fails with TruncatedInputError."""
    print("=" * 60)
    print("Test: Truncated Header")
    print("=" * 60)

    data = make_header_bytes()

    for cut in (0, 1, 9, 64, 127):
        with pytest.raises(TruncatedInputError) as excinfo:
            parse_header(io.BytesIO(data[:cut]))
        assert excinfo.value.expected == HEADER_SIZE
        assert excinfo.value.received == cut
        print(f"   ✓ {cut} bytes: {excinfo.value}")

    with pytest.raises(TruncatedInputError, match="x_end"):
        parse_header(io.BytesIO(data[:9]))
    with pytest.raises(TruncatedInputError, match="reserved2"):
        parse_header(ByteReader(data[:100]))


def test_truncated_error_is_value_error():
    with pytest.raises(ValueError):
        unpack_header(b'\x0a' * 10)


def test_recognized_format():
    """Only identifier 0x0A is recognized."""
    assert is_recognized_format(unpack_header(make_header_bytes()))
    assert not is_recognized_format(unpack_header(make_header_bytes(identifier=0x0B)))
    assert not is_recognized_format(None)


def test_ega_palette():
    header = unpack_header(make_header_bytes())
    palette = header.ega_palette
    assert len(palette) == 16
    assert palette[0] == (0, 1, 2)
    assert palette[15] == (45, 46, 47)


def test_pack_rejects_bad_blocks():
    header = unpack_header(make_header_bytes())
    with pytest.raises(ValueError):
        pack_header(dataclasses.replace(header, palette=b'\x00' * 3))
    with pytest.raises(ValueError):
        pack_header(dataclasses.replace(header, reserved2=b''))


def test_describe_header():
    info = describe_header(unpack_header(make_header_bytes(width=4, height=2)))
    assert info['Identifier'] == '10 (ZSoft .PCX)'
    assert info['Image Dimensions'] == '4 x 2'
    assert info['Encoding'] == 'RLE'
    assert info['Color Planes'] == 3


def main():
    """Run all header tests."""
    tests = [
        test_header_size, test_parse_fields, test_width_height_from_window,
        test_round_trip, test_header_is_immutable, test_parse_consumes_exactly_header,
        test_parse_short_reads, test_truncated_header, test_truncated_error_is_value_error,
        test_recognized_format, test_ega_palette, test_pack_rejects_bad_blocks,
        test_describe_header,
    ]
    return run_tests(tests, "HEADER")


if __name__ == "__main__":
    sys.exit(main())
