"""Buffered byte reader over a binary stream."""

import io

from ..constants import DEFAULT_BUFFER_SIZE
from ..errors import TruncatedInputError


class ByteReader:
    """Byte-level reader with read-ahead over a file-like object."""

    def __init__(self, stream, buffer_size: int = DEFAULT_BUFFER_SIZE):
        """
        Initialize byte reader.

        Args:
            stream: File object opened in binary read mode, or a bytes-like
                object to read from
            buffer_size: Number of bytes requested from the stream per refill
        """
        if isinstance(stream, (bytes, bytearray, memoryview)):
            stream = io.BytesIO(bytes(stream))
        if buffer_size < 1:
            raise ValueError(f"Buffer size must be positive, got {buffer_size}")

        self.stream = stream
        self.buffer = b''
        self.buffer_size = buffer_size
        self.offset = 0
        self.position = 0  # Bytes handed out so far

    def _fill(self) -> bool:
        """Refill the read-ahead buffer. Returns False at end of stream."""
        chunk = self.stream.read(self.buffer_size)
        if not chunk:
            return False
        self.buffer = chunk
        self.offset = 0
        return True

    def read_byte(self) -> int:
        """Read a single byte."""
        if self.offset >= len(self.buffer) and not self._fill():
            raise TruncatedInputError(
                f"Unexpected end of stream at offset {self.position}",
                expected=1, received=0)

        byte = self.buffer[self.offset]
        self.offset += 1
        self.position += 1
        return byte

    def read(self, size: int = -1) -> bytes:
        """Read up to ``size`` bytes (everything left if negative)."""
        parts = []
        needed = size

        while needed != 0:
            if self.offset >= len(self.buffer) and not self._fill():
                break
            available = len(self.buffer) - self.offset
            take = available if needed < 0 else min(needed, available)
            parts.append(self.buffer[self.offset:self.offset + take])
            self.offset += take
            self.position += take
            if needed > 0:
                needed -= take

        return b''.join(parts)

    def read_bytes(self, size: int) -> bytes:
        """Read exactly ``size`` bytes."""
        data = self.read(size)
        if len(data) < size:
            raise TruncatedInputError(
                f"Unexpected end of stream: expected {size} bytes, got {len(data)}",
                expected=size, received=len(data))
        return data


def read_exact(stream, size: int) -> bytes:
    """
    Read ``size`` bytes from a stream without reading past them.

    Short reads are retried until the stream reports end of file.

    Returns:
        The bytes read; shorter than ``size`` only if the stream ended
    """
    data = bytearray()
    while len(data) < size:
        chunk = stream.read(size - len(data))
        if not chunk:
            break
        data += chunk
    return bytes(data)
