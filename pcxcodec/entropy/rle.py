"""Run-Length decoding of PCX scanlines."""

from typing import Iterator, Tuple

from ..constants import RUN_MARKER, RUN_COUNT_MASK


def iter_runs(reader) -> Iterator[Tuple[int, int]]:
    """
    Yield (value, count) runs from an encoded PCX byte stream.

    Each encoded byte is either:
    - a run marker (top two bits set): count is the lower six bits and
      the value is the next byte
    - a literal: the byte itself, with a count of 1

    Bytes are only read when the next run is requested.

    Args:
        reader: ByteReader positioned at the start of encoded data
    """
    while True:
        value = reader.read_byte()
        count = 1

        if value & RUN_MARKER == RUN_MARKER:
            count = value & RUN_COUNT_MASK
            value = reader.read_byte()

        yield value, count


def decode_scanline(reader, target_length: int) -> bytearray:
    """
    Decode one RLE scanline into exactly ``target_length`` bytes.

    A run that would overflow the row is clipped on output but consumed
    whole from the stream; runs never span scanlines. No encoded bytes are
    read once the row is full.

    Args:
        reader: ByteReader positioned at the start of the row
        target_length: Bytes per row, all planes included

    Returns:
        Decoded row as a bytearray

    Raises:
        TruncatedInputError: If the stream ends before the row is full
    """
    scanline = bytearray(target_length)
    index = 0
    runs = iter_runs(reader)

    while index < target_length:
        value, count = next(runs)
        end = min(index + count, target_length)
        scanline[index:end] = bytes((value,)) * (end - index)
        index = end

    return scanline
