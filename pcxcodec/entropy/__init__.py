"""Entropy decoding modules for the PCX codec."""

from .rle import iter_runs, decode_scanline

__all__ = [
    'iter_runs',
    'decode_scanline',
]
