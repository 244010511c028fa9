"""Exception hierarchy shared by the reader, parser and writer."""

from bytejson._utf8_mapper import UTF8PositionMapper


class JSONError(Exception):
    """Base class for every error raised by bytejson."""


class JSONDecodeError(JSONError, ValueError):
    """
    Handles JSON parsing failures with position and lexeme information.

    Positions are byte offsets into the source until ``locate()`` maps them
    onto the text the bytes were encoded from.
    """

    def __init__(
        self, msg: str, pos: int = 0, lexeme: str | None = None
    ) -> None:
        if not isinstance(msg, str):
            raise TypeError("msg must be a string")
        if not isinstance(pos, int) or pos < 0:
            raise ValueError("pos must be a non-negative integer")

        self.msg = msg
        self.pos = pos
        self.lexeme = lexeme
        self.lineno: int | None = None
        self.colno: int | None = None
        super().__init__(msg)

    def locate(self, doc: str) -> None:
        """Rewrites ``pos`` as a character offset and computes line/column."""
        pos = UTF8PositionMapper(doc).byte_to_char(self.pos)
        self.pos = pos
        self.lineno = doc.count("\n", 0, pos) + 1
        self.colno = pos - doc.rfind("\n", 0, pos)

    def __str__(self) -> str:
        if self.lineno is None:
            return f"{self.msg} at byte {self.pos}"
        return f"{self.msg} at line {self.lineno}, column {self.colno}"

    def __reduce__(self):  # type: ignore[no-untyped-def]
        return type(self), (self.msg, self.pos, self.lexeme)


class JSONSyntaxError(JSONDecodeError):
    """A byte or lexeme violates the JSON grammar."""


class EndOfInput(JSONDecodeError, EOFError):
    """The source ran out before a complete value was read."""

    def __init__(self, pos: int = 0) -> None:
        super().__init__("Unexpected end of input", pos)

    def __reduce__(self):  # type: ignore[no-untyped-def]
        return type(self), (self.pos,)


class SourceIOError(JSONError, OSError):
    """The underlying byte source or sink failed."""


__all__ = [
    "EndOfInput",
    "JSONDecodeError",
    "JSONError",
    "JSONSyntaxError",
    "SourceIOError",
]
