"""Decoded image writer supporting PNG, NumPy, and raw formats."""

import numpy as np
from pathlib import Path
from PIL import Image

FORMATS = ('png', 'npy', 'raw')


def write_image(image, path: str, format: str = None) -> Path:
    """
    Write a decoded RGBA image to file.

    Args:
        image: RgbaImage, or a (height, width, 4) uint8 numpy array
        path: Output file path
        format: Output format ('png', 'npy' or 'raw'). Auto-detected from extension if None.

    Returns:
        Path actually written

    Raises:
        ValueError: If format is unsupported
    """
    path = Path(path)
    pixels = np.asarray(getattr(image, 'pixels', image))

    # Auto-detect format from extension
    if format is None:
        suffix = path.suffix.lower().lstrip('.')
        if suffix in FORMATS:
            format = suffix
        else:
            # Default to png
            format = 'png'
            path = path.with_suffix('.png')

    if pixels.ndim != 3 or pixels.shape[2] != 4:
        raise ValueError(f"Expected (height, width, 4) RGBA array, got shape {pixels.shape}")

    if format == 'png':
        _write_png(pixels, path)
    elif format == 'npy':
        _write_numpy(pixels, path)
    elif format == 'raw':
        _write_raw(pixels, path)
    else:
        raise ValueError(f"Unsupported format: {format}")

    return path


def _write_png(pixels: np.ndarray, path: Path) -> None:
    """Write image as PNG using PIL."""
    Image.fromarray(np.ascontiguousarray(pixels, dtype=np.uint8)).save(path)


def _write_numpy(pixels: np.ndarray, path: Path) -> None:
    """Write image as NumPy array."""
    np.save(str(path), pixels)


def _write_raw(pixels: np.ndarray, path: Path) -> None:
    """Write image as raw RGBA bytes."""
    with open(path, 'wb') as f:
        f.write(pixels.astype(np.uint8).tobytes())
