"""
Buffered byte reader with one-byte lookahead.

The reader keeps a single window of bytes pulled from the source and an
index into it. The window is replaced only when every byte in it has been
consumed, so ``peek()`` is stable until the next consuming call.
"""

import logging
import re
from typing import IO
from typing import Any
from typing import Final

from bytejson._errors import EndOfInput
from bytejson._errors import SourceIOError

logger = logging.getLogger(__name__)

DEFAULT_CHUNK_SIZE: Final = 4096

_SIGNIFICANT: Final = re.compile(rb"[^ \t\r\n]")


class ByteBufferReader:
    """
    Sequential byte access over an arbitrary binary source.

    The source only needs a ``read(n)`` method returning ``bytes``; an empty
    result means the source is exhausted. From then on the reader is
    terminal and every consuming call raises ``EndOfInput`` without touching
    the source again.
    """

    def __init__(
        self,
        source: IO[bytes],
        chunk_size: int = DEFAULT_CHUNK_SIZE,
        close_source: bool = False,
    ) -> None:
        if not hasattr(source, "read"):
            raise TypeError("source must have a read() method")
        if not isinstance(chunk_size, int) or chunk_size < 1:
            raise ValueError("chunk_size must be a positive integer")

        self._source = source
        self._chunk_size = chunk_size
        self._close_source = close_source
        self._window = b""
        self._pos = 0
        self._base = 0
        self._exhausted = False

    @property
    def offset(self) -> int:
        """Absolute number of bytes consumed so far."""
        return self._base + self._pos

    def _fill(self) -> bool:
        """Replaces the spent window. Returns False once the source is dry."""
        if self._exhausted:
            return False

        self._base += len(self._window)
        self._window = b""
        self._pos = 0

        try:
            chunk = self._source.read(self._chunk_size)
        except OSError as e:
            raise SourceIOError(f"failed to read from source: {e}") from e

        if not chunk:
            self._exhausted = True
            logger.debug("source exhausted after %d bytes", self._base)
            return False
        if isinstance(chunk, str):
            raise TypeError("source must be opened in binary mode")

        self._window = bytes(chunk)
        logger.debug(
            "refilled %d bytes at offset %d", len(self._window), self._base
        )
        return True

    def peek(self) -> int:
        """Returns the next byte without consuming it."""
        if self._pos >= len(self._window) and not self._fill():
            raise EndOfInput(self.offset)
        return self._window[self._pos]

    def next(self) -> int:
        """Consumes and returns the next byte."""
        if self._pos >= len(self._window) and not self._fill():
            raise EndOfInput(self.offset)
        byte = self._window[self._pos]
        self._pos += 1
        return byte

    def skip_whitespace(self) -> int:
        """
        Consumes JSON whitespace and the first significant byte after it.

        Only space, tab, CR and LF count as whitespace.
        """
        while True:
            if self._pos >= len(self._window) and not self._fill():
                raise EndOfInput(self.offset)

            match = _SIGNIFICANT.search(self._window, self._pos)
            if match is None:
                self._pos = len(self._window)
                continue

            start = match.start()
            self._pos = start + 1
            return self._window[start]

    def read_run(self, pattern: re.Pattern[bytes], scratch: bytearray) -> int:
        """
        Consumes the longest run of bytes matched by ``pattern``.

        ``pattern`` must match a run of single-byte tokens (for example a
        ``[...]+`` character class) so that a run split across two windows
        can be resumed. Matched bytes are appended to ``scratch``. Returns
        the number of bytes consumed; reaching the end of the source simply
        ends the run.
        """
        consumed = 0
        while True:
            if self._pos >= len(self._window) and not self._fill():
                return consumed

            match = pattern.match(self._window, self._pos)
            if match is None:
                return consumed

            end = match.end()
            scratch += self._window[self._pos : end]
            consumed += end - self._pos
            self._pos = end
            if end < len(self._window):
                return consumed

    def at_end(self) -> bool:
        """Reports whether every byte of the source has been consumed."""
        return self._pos >= len(self._window) and not self._fill()

    def close(self) -> None:
        """Drops the window and, if owned, closes the source."""
        self._window = b""
        self._pos = 0
        self._exhausted = True
        if self._close_source:
            self._source.close()

    def __enter__(self) -> "ByteBufferReader":
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self.close()
