"""
Recursive-descent parser producing value model trees from a byte reader.

Grammar (RFC 4627, strict):

    document := object | array
    value    := object | array | string | number | "true" | "false" | "null"
    object   := '{' (pair (',' pair)*)? '}'
    pair     := string ':' value
    array    := '[' (value (',' value)*)? ']'

Strings are copied into a scratch buffer that is reused for every token of
a parse. Numbers and literals are scanned as barewords and classified once
the whole lexeme is known.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterator
from dataclasses import dataclass
from typing import Final

from bytejson._errors import EndOfInput
from bytejson._errors import JSONSyntaxError
from bytejson._model import FALSE
from bytejson._model import INT64_MAX
from bytejson._model import INT64_MIN
from bytejson._model import NULL
from bytejson._model import TRUE
from bytejson._model import JsonArray
from bytejson._model import JsonFloat
from bytejson._model import JsonInteger
from bytejson._model import JsonObject
from bytejson._model import JsonString
from bytejson._model import JsonValue
from bytejson._profiling import ProfileContext
from bytejson._reader import DEFAULT_CHUNK_SIZE
from bytejson._reader import ByteBufferReader

logger = logging.getLogger(__name__)

type Document = JsonObject | JsonArray

_QUOTE: Final = ord('"')
_BACKSLASH: Final = ord("\\")
_COLON: Final = ord(":")
_COMMA: Final = ord(",")
_LBRACE: Final = ord("{")
_RBRACE: Final = ord("}")
_LBRACKET: Final = ord("[")
_RBRACKET: Final = ord("]")
_U: Final = ord("u")

_STRING_RUN: Final = re.compile(rb'[^"\\\x00-\x1f]+')
_BAREWORD_RUN: Final = re.compile(rb"[A-Za-z0-9.+\-]+")
_BAREWORD_START: Final = frozenset(
    b"ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz0123456789.+-"
)
_NUMBER: Final = re.compile(
    rb"-?(?:0|[1-9][0-9]*)(?:\.[0-9]+)?(?:[eE][+-]?[0-9]+)?"
)

# int64 needs at most 19 digits; anything longer cannot fit
_MAX_INT_DIGITS: Final = 19

_SIMPLE_ESCAPES: Final = {
    ord('"'): '"',
    ord("\\"): "\\",
    ord("/"): "/",
    ord("b"): "\b",
    ord("f"): "\f",
    ord("n"): "\n",
    ord("r"): "\r",
    ord("t"): "\t",
}

_HEX_VALUES: Final = {
    byte: int(chr(byte), 16) for byte in b"0123456789abcdefABCDEF"
}


def _describe(byte: int) -> str:
    if 0x20 < byte < 0x7F:
        return repr(chr(byte))
    return f"byte 0x{byte:02X}"


def _decode_run(run: bytearray, start: int) -> str:
    try:
        return run.decode("utf-8")
    except UnicodeDecodeError as e:
        raise JSONSyntaxError(
            f"Invalid UTF-8 in string: {e.reason}", start + e.start
        ) from e


@dataclass(frozen=True)
class ParseConfig:
    """
    Configures parsing with immutable settings.

    ``chunk_size`` is the number of bytes requested from the source per
    refill. ``max_depth`` bounds container nesting; ``None`` leaves it to
    the interpreter's recursion limit.
    """

    chunk_size: int = DEFAULT_CHUNK_SIZE
    max_depth: int | None = None

    def __post_init__(self) -> None:
        if isinstance(self.chunk_size, bool) or not isinstance(
            self.chunk_size, int
        ):
            raise TypeError("chunk_size must be an integer")
        if self.chunk_size < 1:
            raise ValueError("chunk_size must be positive")
        if self.max_depth is not None:
            if isinstance(self.max_depth, bool) or not isinstance(
                self.max_depth, int
            ):
                raise TypeError("max_depth must be an integer or None")
            if self.max_depth < 1:
                raise ValueError("max_depth must be positive")


class JsonParser:
    """
    Recursive-descent parser over a ``ByteBufferReader``.

    Each ``parse_*`` call consumes exactly one value and leaves whatever
    follows it unread, so several documents can be read from one stream.
    A parser owns mutable cursor state and must not be shared between
    threads.
    """

    def __init__(
        self, reader: ByteBufferReader, config: ParseConfig | None = None
    ) -> None:
        self.reader = reader
        self.config = config or ParseConfig()
        self._scratch = bytearray()
        self._depth = 0
        self._keys: dict[str, str] = {}

    def parse_document(self) -> Document | None:
        """
        Parses the next object or array.

        Returns ``None`` when the source holds nothing but whitespace. Any
        other leading byte is a syntax error.
        """
        with ProfileContext("parse_document"):
            self._keys.clear()
            try:
                byte = self.reader.skip_whitespace()
            except EndOfInput:
                return None

            if byte == _LBRACE:
                document: Document = self._parse_object_body()
            elif byte == _LBRACKET:
                document = self._parse_array_body()
            else:
                raise JSONSyntaxError(
                    f"Expecting '{{' or '[' at start of document, found "
                    f"{_describe(byte)}",
                    self.reader.offset - 1,
                )

            logger.debug(
                "parsed %s ending at byte %d",
                type(document).__name__,
                self.reader.offset,
            )
            return document

    def parse_object(self) -> JsonObject:
        """Parses an object; the next significant byte must be '{'."""
        with ProfileContext("parse_object"):
            self._keys.clear()
            byte = self.reader.skip_whitespace()
            if byte != _LBRACE:
                raise JSONSyntaxError(
                    f"Expecting '{{' at start of object, found "
                    f"{_describe(byte)}",
                    self.reader.offset - 1,
                )
            return self._parse_object_body()

    def parse_array(self) -> JsonArray:
        """Parses an array; the next significant byte must be '['."""
        with ProfileContext("parse_array"):
            self._keys.clear()
            byte = self.reader.skip_whitespace()
            if byte != _LBRACKET:
                raise JSONSyntaxError(
                    f"Expecting '[' at start of array, found "
                    f"{_describe(byte)}",
                    self.reader.offset - 1,
                )
            return self._parse_array_body()

    def iter_documents(self) -> Iterator[Document]:
        """Yields documents until only whitespace remains."""
        while True:
            document = self.parse_document()
            if document is None:
                return
            yield document

    def expect_end(self) -> None:
        """Raises unless only whitespace remains in the source."""
        try:
            byte = self.reader.skip_whitespace()
        except EndOfInput:
            return
        raise JSONSyntaxError(
            f"Extra data: {_describe(byte)} after end of document",
            self.reader.offset - 1,
        )

    def _enter_container(self) -> None:
        limit = self.config.max_depth
        if limit is not None and self._depth >= limit:
            raise JSONSyntaxError(
                f"Maximum nesting depth of {limit} exceeded",
                self.reader.offset - 1,
            )
        self._depth += 1

    def _parse_value(self, byte: int) -> JsonValue:
        if byte == _QUOTE:
            return JsonString(self._scan_string())
        elif byte == _LBRACE:
            return self._parse_object_body()
        elif byte == _LBRACKET:
            return self._parse_array_body()
        else:
            return self._scan_bareword(byte)

    def _parse_object_body(self) -> JsonObject:
        # The opening brace has already been consumed
        self._enter_container()
        try:
            return self._read_members()
        finally:
            self._depth -= 1

    def _read_members(self) -> JsonObject:
        reader = self.reader
        obj = JsonObject()

        byte = reader.skip_whitespace()
        if byte != _RBRACE:
            while True:
                if byte != _QUOTE:
                    raise JSONSyntaxError(
                        "Expecting property name enclosed in double quotes, "
                        f"found {_describe(byte)}",
                        reader.offset - 1,
                    )
                key = self._intern(self._scan_string())

                byte = reader.skip_whitespace()
                if byte != _COLON:
                    raise JSONSyntaxError(
                        f"Expecting ':' after property name, found "
                        f"{_describe(byte)}",
                        reader.offset - 1,
                    )

                obj[key] = self._parse_value(reader.skip_whitespace())

                byte = reader.skip_whitespace()
                if byte == _RBRACE:
                    break
                if byte != _COMMA:
                    raise JSONSyntaxError(
                        f"Expecting ',' or '}}' after object value, found "
                        f"{_describe(byte)}",
                        reader.offset - 1,
                    )
                byte = reader.skip_whitespace()

        return obj

    def _parse_array_body(self) -> JsonArray:
        # The opening bracket has already been consumed
        self._enter_container()
        try:
            return self._read_items()
        finally:
            self._depth -= 1

    def _read_items(self) -> JsonArray:
        reader = self.reader
        array = JsonArray()

        byte = reader.skip_whitespace()
        if byte != _RBRACKET:
            while True:
                array.append(self._parse_value(byte))

                byte = reader.skip_whitespace()
                if byte == _RBRACKET:
                    break
                if byte != _COMMA:
                    raise JSONSyntaxError(
                        f"Expecting ',' or ']' after array value, found "
                        f"{_describe(byte)}",
                        reader.offset - 1,
                    )
                byte = reader.skip_whitespace()

        return array

    def _intern(self, key: str) -> str:
        """Reuses one string object per distinct key within a document."""
        return self._keys.setdefault(key, key)

    def _scan_string(self) -> str:
        # The opening quote has already been consumed
        reader = self.reader
        scratch = self._scratch
        pieces: list[str] = []

        with ProfileContext("scan_string"):
            while True:
                run_start = reader.offset
                scratch.clear()
                if reader.read_run(_STRING_RUN, scratch):
                    pieces.append(_decode_run(scratch, run_start))

                byte = reader.next()
                if byte == _QUOTE:
                    break
                elif byte == _BACKSLASH:
                    pieces.append(self._decode_escape())
                else:
                    raise JSONSyntaxError(
                        f"Invalid control character {_describe(byte)} in "
                        "string",
                        reader.offset - 1,
                    )

        return "".join(pieces)

    def _decode_escape(self) -> str:
        # The backslash has already been consumed
        reader = self.reader
        byte = reader.next()

        simple = _SIMPLE_ESCAPES.get(byte)
        if simple is not None:
            return simple
        if byte != _U:
            sequence = "\\" + chr(byte) if byte < 0x80 else "\\"
            raise JSONSyntaxError(
                f"Invalid escape sequence {sequence!r}",
                reader.offset - 2,
                lexeme=sequence,
            )

        # Unpaired surrogates survive as lone code points
        lone = ""
        code = self._read_hex4()
        while 0xD800 <= code <= 0xDBFF and reader.peek() == _BACKSLASH:
            reader.next()
            if reader.peek() != _U:
                return lone + chr(code) + self._decode_escape()
            reader.next()
            low = self._read_hex4()
            if 0xDC00 <= low <= 0xDFFF:
                code = 0x10000 + ((code - 0xD800) << 10) + (low - 0xDC00)
                break
            lone += chr(code)
            code = low

        return lone + chr(code)

    def _read_hex4(self) -> int:
        reader = self.reader
        code = 0
        for _ in range(4):
            byte = reader.next()
            digit = _HEX_VALUES.get(byte)
            if digit is None:
                raise JSONSyntaxError(
                    f"Invalid \\u escape: {_describe(byte)} is not hex",
                    reader.offset - 1,
                )
            code = (code << 4) | digit
        return code

    def _scan_bareword(self, first: int) -> JsonValue:
        reader = self.reader
        start = reader.offset - 1
        if first not in _BAREWORD_START:
            raise JSONSyntaxError(
                f"Expecting value, found {_describe(first)}", start
            )

        scratch = self._scratch
        scratch.clear()
        scratch.append(first)
        with ProfileContext("scan_bareword"):
            reader.read_run(_BAREWORD_RUN, scratch)
            return _classify_bareword(bytes(scratch), start)


def _classify_bareword(lexeme: bytes, start: int) -> JsonValue:
    """
    Maps a bareword to a literal, integer or float.

    Lexemes with '.', 'e' or 'E' are floats; other numbers are integers and
    must fit in 64 bits.
    """
    if lexeme == b"null":
        return NULL
    elif lexeme == b"true":
        return TRUE
    elif lexeme == b"false":
        return FALSE

    text = lexeme.decode("ascii")
    if _NUMBER.fullmatch(lexeme) is None:
        raise JSONSyntaxError(f"Invalid literal {text!r}", start, lexeme=text)

    if b"." in lexeme or b"e" in lexeme or b"E" in lexeme:
        return JsonFloat(float(text))

    digits = len(text) - text.startswith("-")
    value = int(text) if digits <= _MAX_INT_DIGITS else None
    if value is None or not INT64_MIN <= value <= INT64_MAX:
        raise JSONSyntaxError(
            f"Integer {text} does not fit in 64 bits", start, lexeme=text
        )
    return JsonInteger(value)


__all__ = [
    "Document",
    "JsonParser",
    "ParseConfig",
]
