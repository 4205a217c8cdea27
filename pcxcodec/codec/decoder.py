"""PCX Decoder - Drives header parsing, row decoding and progress reporting."""

import threading
from concurrent.futures import Future, ThreadPoolExecutor
from enum import Enum
from logging import getLogger
from typing import Callable, List, NamedTuple, Optional

from ..constants import DEFAULT_BUFFER_SIZE
from ..errors import DecoderStateError, MalformedDimensionsError
from ..io.stream import ByteReader
from ..io.header import PcxHeader, parse_header, is_recognized_format
from ..entropy import decode_scanline
from .planes import RgbaImage, assemble_row, check_supported

logger = getLogger(__name__)


class DecoderState(Enum):
    CREATED = 'created'
    HEADER_PARSED = 'header_parsed'
    DECODING = 'decoding'
    COMPLETED = 'completed'
    FAILED = 'failed'


class ProgressEvent(NamedTuple):
    """
    Progress of a decode session.

    ``image`` is the sink being filled; on the final event (progress 100)
    it holds the completed image.
    """

    progress: int
    image: Optional[object] = None


ProgressListener = Callable[[ProgressEvent], None]
ErrorListener = Callable[[BaseException], None]


class DecodeTask:
    """Handle on a detached decode running on a worker thread."""

    def __init__(self, future: Future):
        self.future = future

    def join(self, timeout: float = None):
        """
        Wait for the decode to finish.

        Returns:
            The decoded image

        Raises:
            The error that failed the decode, or
            concurrent.futures.TimeoutError if ``timeout`` expires
        """
        return self.future.result(timeout)

    def exception(self, timeout: float = None) -> Optional[BaseException]:
        """Wait for the decode and return its error, or None on success."""
        return self.future.exception(timeout)

    def done(self) -> bool:
        return self.future.done()

    def add_done_callback(self, fn: Callable[['DecodeTask'], None]) -> None:
        """Call ``fn(task)`` once the decode completes or fails."""
        self.future.add_done_callback(lambda _: fn(self))


class PcxDecoder:
    """
    Decoder for PCX images.

    Session lifecycle:
        CREATED -> HEADER_PARSED -> DECODING -> COMPLETED
    with FAILED reachable from header parsing and decoding.

    A decoder runs one session. After ``parse_header``, exactly one of
    ``decode_blocking`` or ``decode_detached`` may be called.

    Pipeline:
    1. Parse header
    2. Validate dimensions, allocate image
    3. Per row: RLE decode scanline
    4. Per row: assemble planes into pixels
    5. Per row: progress event
    6. Final progress event carrying the image
    """

    def __init__(self, stream, image_factory: Callable = RgbaImage,
                 buffer_size: int = DEFAULT_BUFFER_SIZE):
        """
        Initialize decoder.

        Args:
            stream: Binary file object, bytes, or ByteReader holding a PCX file
            image_factory: Callable ``(width, height)`` returning the pixel sink
            buffer_size: Read-ahead size used when wrapping ``stream``
        """
        if isinstance(stream, ByteReader):
            self._reader = stream
        else:
            self._reader = ByteReader(stream, buffer_size)

        self._image_factory = image_factory
        self._header = None
        self._image = None
        self._state = DecoderState.CREATED
        self._lock = threading.Lock()
        self._listeners: List[ProgressListener] = []
        self._error_listeners: List[ErrorListener] = []

    @property
    def header(self) -> Optional[PcxHeader]:
        """Parsed header, or None until ``parse_header`` succeeds."""
        return self._header

    @property
    def image(self):
        """Pixel sink of the session, or None until the header is parsed."""
        return self._image

    @property
    def state(self) -> DecoderState:
        return self._state

    @property
    def is_pcx_file(self) -> bool:
        return is_recognized_format(self._header)

    def subscribe(self, listener: ProgressListener) -> ProgressListener:
        """Register a progress listener. Returns it, so it can decorate."""
        self._listeners.append(listener)
        return listener

    def unsubscribe(self, listener: ProgressListener) -> None:
        self._listeners.remove(listener)

    def add_error_listener(self, listener: ErrorListener) -> ErrorListener:
        """Register a callback receiving the error that fails a session."""
        self._error_listeners.append(listener)
        return listener

    def parse_header(self) -> PcxHeader:
        """
        Read the header and allocate the image.

        Returns:
            Parsed header

        Raises:
            TruncatedInputError: If the stream ends inside the header
            MalformedDimensionsError: If width or height is not positive
            DecoderStateError: If the header was already parsed
        """
        error = None
        with self._lock:
            if self._state is not DecoderState.CREATED:
                raise DecoderStateError(
                    f"Cannot parse header in state '{self._state.value}'")
            try:
                header = parse_header(self._reader)
                if header.width <= 0 or header.height <= 0:
                    raise MalformedDimensionsError(header.width, header.height)
                image = self._image_factory(header.width, header.height)
            except Exception as e:
                self._state = DecoderState.FAILED
                error = e
            else:
                self._header = header
                self._image = image
                self._state = DecoderState.HEADER_PARSED

        # Listeners run outside the lock so they may call back into the decoder
        if error is not None:
            self._fail(error)
            raise error

        logger.debug(f"Header parsed: {header.width}x{header.height}, "
                     f"{header.bit_plane_count} plane(s) of {header.bits_per_pixel} bits")
        return header

    def decode_blocking(self):
        """
        Decode all rows on the calling thread.

        Returns:
            The decoded image

        Raises:
            PcxDecodeError: If the image data is truncated or unsupported
            DecoderStateError: If called outside the HEADER_PARSED state
        """
        self._begin('decode_blocking')
        return self._run()

    def decode_detached(self) -> DecodeTask:
        """
        Decode all rows on a worker thread and return immediately.

        Progress listeners are called from the worker. The returned task
        reports completion and carries the error of a failed decode.

        Raises:
            DecoderStateError: If called outside the HEADER_PARSED state
        """
        self._begin('decode_detached')

        executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix='pcx-decode')
        try:
            future = executor.submit(self._run)
        finally:
            executor.shutdown(wait=False)

        return DecodeTask(future)

    def _begin(self, operation: str) -> None:
        """Claim the session for a decode mode."""
        with self._lock:
            if self._state is not DecoderState.HEADER_PARSED:
                raise DecoderStateError(
                    f"Cannot call {operation}() in state '{self._state.value}'")
            self._state = DecoderState.DECODING

    def _run(self):
        """Run the row loop and settle the session state."""
        header = self._header
        logger.info(f"Decoding {header.width}x{header.height} PCX image")

        try:
            self._decode_rows()
        except Exception as e:
            self._fail(e)
            raise

        self._state = DecoderState.COMPLETED
        logger.info("Decoding finished")
        return self._image

    def _decode_rows(self) -> None:
        header = self._header
        width, height = header.width, header.height

        check_supported(header.bits_per_pixel, header.bit_plane_count)
        if not is_recognized_format(header):
            logger.warning(f"Identifier 0x{header.identifier:02X} is not a PCX identifier")

        target_length = header.scanline_length

        for y in range(height):
            scanline = decode_scanline(self._reader, target_length)
            assemble_row(scanline, width, header.bit_plane_count,
                         header.bytes_per_scan_line, y, self._image,
                         header.bits_per_pixel)

            progress = int(round(100.0 * y / height))
            self._emit(ProgressEvent(progress, self._image))

        self._emit(ProgressEvent(100, self._image))

    def _emit(self, event: ProgressEvent) -> None:
        for listener in list(self._listeners):
            listener(event)

    def _fail(self, error: BaseException) -> None:
        self._state = DecoderState.FAILED
        logger.error(f"PCX decode failed: {error}")
        for listener in list(self._error_listeners):
            listener(error)
