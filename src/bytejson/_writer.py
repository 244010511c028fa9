"""
Depth-first writer that serializes value model trees as UTF-8 JSON text.

Output is accumulated in a small buffer and pushed to the sink in chunks.
"""

from __future__ import annotations

import io
import logging
import math
from dataclasses import dataclass
from typing import IO
from typing import Any
from typing import Final

from bytejson._errors import SourceIOError
from bytejson._model import DEFAULT_INDENT
from bytejson._model import JsonArray
from bytejson._model import JsonBoolean
from bytejson._model import JsonFloat
from bytejson._model import JsonInteger
from bytejson._model import JsonNull
from bytejson._model import JsonObject
from bytejson._model import JsonString
from bytejson._model import JsonValue
from bytejson._profiling import ProfileContext
from bytejson._reader import DEFAULT_CHUNK_SIZE

logger = logging.getLogger(__name__)

_NAMED_ESCAPES: Final = {
    "\n": "\\n",
    "\r": "\\r",
    "\t": "\\t",
    "\b": "\\b",
}


def _build_escape_table() -> dict[int, str]:
    table = {ord('"'): '\\"', ord("\\"): "\\\\"}
    for code in range(0x20):
        table[code] = _NAMED_ESCAPES.get(chr(code), f"\\u{code:04X}")
    # Lone surrogates cannot be encoded as UTF-8
    for code in range(0xD800, 0xE000):
        table[code] = f"\\u{code:04X}"
    return table


_ESCAPES: Final = _build_escape_table()


def escape_string(text: str) -> str:
    """Returns ``text`` as a quoted JSON string literal."""
    return '"' + text.translate(_ESCAPES) + '"'


def format_float(number: float) -> str:
    """
    Formats a float as the shortest text that reads back to the same value.

    NaN and the infinities have no JSON spelling and are written as ``0``.
    """
    if not math.isfinite(number):
        return "0"
    return repr(number)


@dataclass(frozen=True)
class EncodeConfig:
    """
    Configures JSON writing with immutable settings.

    ``indent`` is the unit repeated once per nesting level in pretty mode
    and ignored in compact mode. ``max_depth`` optionally bounds container
    nesting; trees are otherwise walked without cycle detection.
    """

    compact: bool = False
    indent: str = DEFAULT_INDENT
    max_depth: int | None = None

    def __post_init__(self) -> None:
        if not isinstance(self.compact, bool):
            raise TypeError("compact must be a boolean")
        if not isinstance(self.indent, str):
            raise TypeError("indent must be a string")
        if self.max_depth is not None:
            if isinstance(self.max_depth, bool) or not isinstance(
                self.max_depth, int
            ):
                raise TypeError("max_depth must be an integer or None")
            if self.max_depth < 1:
                raise ValueError("max_depth must be positive")


class JsonWriter:
    """
    Walks a value tree and pushes UTF-8 bytes to a binary sink.

    Pretty mode puts every container entry on its own line and indents by
    one ``indent`` unit per level; compact mode emits no whitespace between
    tokens. Empty containers are written as ``{}`` and ``[]`` in both modes.
    """

    def __init__(
        self,
        sink: IO[bytes],
        config: EncodeConfig | None = None,
        close_sink: bool = False,
        buffer_size: int = DEFAULT_CHUNK_SIZE,
    ) -> None:
        if not hasattr(sink, "write"):
            raise TypeError("sink must have a write() method")

        self.sink = sink
        self.config = config or EncodeConfig()
        self._close_sink = close_sink
        self._buffer_size = buffer_size
        self._pending: list[str] = []
        self._pending_size = 0

        if self.config.compact:
            self._item_sep = ","
            self._key_sep = ":"
            self._newline = ""
            self._indent = ""
        else:
            self._item_sep = ",\n"
            self._key_sep = ": "
            self._newline = "\n"
            self._indent = self.config.indent

    def write(self, value: JsonValue) -> None:
        """Writes one complete value and flushes it to the sink."""
        with ProfileContext("write_value"):
            self._write_value(value, 0)
        self.flush()

    def flush(self) -> None:
        """Pushes buffered text to the sink and flushes the sink."""
        if self._pending:
            data = "".join(self._pending).encode("utf-8")
            self._pending.clear()
            self._pending_size = 0
            try:
                self.sink.write(data)
            except OSError as e:
                raise SourceIOError(f"failed to write to sink: {e}") from e
            logger.debug("flushed %d bytes to sink", len(data))

        flush = getattr(self.sink, "flush", None)
        if flush is not None:
            try:
                flush()
            except OSError as e:
                raise SourceIOError(f"failed to flush sink: {e}") from e

    def close(self) -> None:
        """Flushes pending output and, if owned, closes the sink."""
        try:
            self.flush()
        finally:
            if self._close_sink:
                self.sink.close()

    def __enter__(self) -> JsonWriter:
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        if exc_type is None:
            self.close()
        elif self._close_sink:
            self.sink.close()

    def _emit(self, text: str) -> None:
        self._pending.append(text)
        self._pending_size += len(text)
        if self._pending_size >= self._buffer_size:
            self.flush()

    def _write_value(self, value: JsonValue, depth: int) -> None:
        match value:
            case JsonObject():
                self._write_object(value, depth)
            case JsonArray():
                self._write_array(value, depth)
            case JsonString(text):
                self._emit(escape_string(text))
            case JsonInteger(number):
                self._emit(str(number))
            case JsonFloat(number):
                self._emit(format_float(number))
            case JsonBoolean(flag):
                self._emit("true" if flag else "false")
            case JsonNull.NULL:
                self._emit("null")
            case _:
                name = type(value).__name__
                msg = f"Object of type {name} is not a JsonValue"
                raise TypeError(msg)

    def _check_depth(self, depth: int) -> None:
        limit = self.config.max_depth
        if limit is not None and depth >= limit:
            raise ValueError(f"Maximum nesting depth of {limit} exceeded")

    def _write_object(self, obj: JsonObject, depth: int) -> None:
        if not obj:
            self._emit("{}")
            return
        self._check_depth(depth)

        inner = self._indent * (depth + 1)
        self._emit("{" + self._newline)
        for i, (key, item) in enumerate(obj.items()):
            if i:
                self._emit(self._item_sep)
            self._emit(inner + escape_string(key) + self._key_sep)
            self._write_value(item, depth + 1)
        self._emit(self._newline + self._indent * depth + "}")

    def _write_array(self, array: JsonArray, depth: int) -> None:
        if not array:
            self._emit("[]")
            return
        self._check_depth(depth)

        inner = self._indent * (depth + 1)
        self._emit("[" + self._newline)
        for i, item in enumerate(array):
            if i:
                self._emit(self._item_sep)
            self._emit(inner)
            self._write_value(item, depth + 1)
        self._emit(self._newline + self._indent * depth + "]")


def write(
    value: JsonValue,
    sink: IO[bytes],
    compact: bool = False,
    indent: str = DEFAULT_INDENT,
) -> None:
    """Writes ``value`` to a binary sink. The sink is left open."""
    config = EncodeConfig(compact=compact, indent=indent)
    with JsonWriter(sink, config) as writer:
        writer.write(value)


def to_text(
    value: JsonValue, compact: bool = False, indent: str = DEFAULT_INDENT
) -> str:
    """Serializes ``value`` to a ``str``."""
    buffer = io.BytesIO()
    write(value, buffer, compact=compact, indent=indent)
    return buffer.getvalue().decode("utf-8")


__all__ = [
    "EncodeConfig",
    "JsonWriter",
    "escape_string",
    "format_float",
    "to_text",
    "write",
]
