"""Error kinds raised while decoding PCX images."""


class PcxDecodeError(ValueError):
    """Base class for invalid or unsupported PCX input."""


class TruncatedInputError(PcxDecodeError, EOFError):
    """The stream ended before a structurally required byte count was read."""

    def __init__(self, message: str, expected: int = None, received: int = None):
        super().__init__(message)
        self.expected = expected
        self.received = received


class UnsupportedFormatError(PcxDecodeError):
    """Recognized header, but the plane/bit-depth layout is not implemented."""

    def __init__(self, bits_per_pixel: int, plane_count: int, detail: str = None):
        message = (f"Unsupported PCX layout: {bits_per_pixel} bits per pixel, "
                   f"{plane_count} plane(s)")
        if detail:
            message = f"{message} ({detail})"
        super().__init__(message)
        self.bits_per_pixel = bits_per_pixel
        self.plane_count = plane_count


class MalformedDimensionsError(PcxDecodeError):
    """Derived width or height is not positive, or rows are too short."""

    def __init__(self, width: int, height: int = None, detail: str = None):
        if height is None:
            message = f"Malformed row for image width {width}"
        else:
            message = f"Malformed image dimensions: {width}x{height}"
        if detail:
            message = f"{message} ({detail})"
        super().__init__(message)
        self.width = width
        self.height = height


class DecoderStateError(RuntimeError):
    """A decoder operation was called in the wrong session state."""
