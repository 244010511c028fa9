"""UTF-8 position mapping for reporting parse errors against decoded text."""

from __future__ import annotations

from bisect import bisect_right
from typing import Final

_ASCII_LIMIT: Final = 0x7F


def _utf8_width(char: str) -> int:
    code = ord(char)
    if code <= _ASCII_LIMIT:
        return 1
    if code <= 0x7FF:
        return 2
    if code <= 0xFFFF:
        return 3
    return 4


class UTF8PositionMapper:
    """Efficient UTF-8 position mapping with checkpoint system.

    The parser works on bytes, so error offsets are byte offsets. When the
    input came from a ``str`` those offsets are mapped back to character
    offsets. Instead of a full map of the document, checkpoints are recorded
    at regular character intervals and positions are walked forward from the
    nearest one.
    """

    def __init__(self, text: str, checkpoint_interval: int = 256) -> None:
        """Initialize position mapper with checkpoint system.

        Args:
            text: The text the parsed bytes were encoded from
            checkpoint_interval: Characters between checkpoints
        """
        self.text: Final = text
        self.checkpoint_interval: Final = checkpoint_interval
        self._byte_marks: list[int] = []
        self._char_marks: list[int] = []
        self._is_ascii_only = text.isascii()

        if not self._is_ascii_only:
            self._build_checkpoints()

    def _build_checkpoints(self) -> None:
        byte_pos = 0
        for char_pos, char in enumerate(self.text):
            if char_pos % self.checkpoint_interval == 0:
                self._byte_marks.append(byte_pos)
                self._char_marks.append(char_pos)
            byte_pos += _utf8_width(char)

        self._byte_marks.append(byte_pos)
        self._char_marks.append(len(self.text))

    def byte_to_char(self, byte_pos: int) -> int:
        """Convert byte position to character position.

        Offsets that fall inside a multi-byte sequence map to the character
        that sequence encodes.
        """
        if self._is_ascii_only:
            return min(byte_pos, len(self.text))

        idx = bisect_right(self._byte_marks, byte_pos) - 1
        current_byte = self._byte_marks[idx]
        current_char = self._char_marks[idx]

        while current_char < len(self.text):
            width = _utf8_width(self.text[current_char])
            if current_byte + width > byte_pos:
                break
            current_byte += width
            current_char += 1

        return current_char

