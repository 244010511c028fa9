"""
Streaming RFC 4627 JSON codec over byte sources and sinks.

Parses objects and arrays from any binary stream through a buffered,
refillable reader into a closed value model, and writes value trees back as
pretty or compact UTF-8 text.
"""

import io
import logging
import os
from collections.abc import Iterator
from contextlib import contextmanager
from typing import IO
from typing import Any

from bytejson._errors import EndOfInput
from bytejson._errors import JSONDecodeError
from bytejson._errors import JSONError
from bytejson._errors import JSONSyntaxError
from bytejson._errors import SourceIOError
from bytejson._model import DEFAULT_INDENT
from bytejson._model import FALSE
from bytejson._model import NULL
from bytejson._model import TRUE
from bytejson._model import JsonArray
from bytejson._model import JsonBoolean
from bytejson._model import JsonFloat
from bytejson._model import JsonInteger
from bytejson._model import JsonNull
from bytejson._model import JsonObject
from bytejson._model import JsonString
from bytejson._model import JsonValue
from bytejson._model import from_python
from bytejson._model import to_python
from bytejson._parser import Document
from bytejson._parser import JsonParser
from bytejson._parser import ParseConfig
from bytejson._profiling import HotPathStats
from bytejson._profiling import clear_hot_path_stats
from bytejson._profiling import get_hot_path_stats
from bytejson._reader import ByteBufferReader
from bytejson._writer import EncodeConfig
from bytejson._writer import JsonWriter
from bytejson._writer import to_text as _to_text
from bytejson._writer import write as _write

__version__ = "0.1.0"

logger = logging.getLogger(__name__)

# Text is JSON, bytes are UTF-8 JSON, path-likes name files
type Source = str | bytes | bytearray | os.PathLike[str] | IO[bytes]
type Sink = os.PathLike[str] | IO[bytes]


@contextmanager
def _open_reader(
    source: Source, config: ParseConfig
) -> Iterator[ByteBufferReader]:
    """
    Opens a reader over ``source`` for the duration of the block.

    Streams created here (from text, bytes or a path) are closed on exit;
    caller-supplied streams are left open.
    """
    owned = True
    if isinstance(source, str):
        data = source.encode("utf-8", "surrogatepass")
        stream: IO[bytes] = io.BytesIO(data)
    elif isinstance(source, bytes | bytearray | memoryview):
        stream = io.BytesIO(bytes(source))
    elif isinstance(source, os.PathLike):
        try:
            stream = open(source, "rb")  # noqa: SIM115
        except OSError as e:
            raise SourceIOError(f"cannot open {source!r}: {e}") from e
    else:
        stream = source
        owned = False

    with ByteBufferReader(
        stream, config.chunk_size, close_source=owned
    ) as reader:
        yield reader


def parse_object(
    source: Source, config: ParseConfig | None = None
) -> JsonObject:
    """
    Parses one JSON object from ``source``.

    Raises ``EndOfInput`` if the source is empty or ends mid-object.
    """
    config = config or ParseConfig()
    with _open_reader(source, config) as reader:
        return JsonParser(reader, config).parse_object()


def parse_array(
    source: Source, config: ParseConfig | None = None
) -> JsonArray:
    """
    Parses one JSON array from ``source``.

    Raises ``EndOfInput`` if the source is empty or ends mid-array.
    """
    config = config or ParseConfig()
    with _open_reader(source, config) as reader:
        return JsonParser(reader, config).parse_array()


def parse_document(
    source: Source, config: ParseConfig | None = None
) -> Document | None:
    """
    Parses one JSON object or array, whichever the source starts with.

    Returns ``None`` for an empty or whitespace-only source.
    """
    config = config or ParseConfig()
    with _open_reader(source, config) as reader:
        return JsonParser(reader, config).parse_document()


def iter_documents(
    source: Source, config: ParseConfig | None = None
) -> Iterator[Document]:
    """Yields every whitespace-separated document in ``source``."""
    config = config or ParseConfig()
    with _open_reader(source, config) as reader:
        yield from JsonParser(reader, config).iter_documents()


def _read_document(
    source: Source, kind: type | None, suppress_errors: bool
) -> Any:
    try:
        document = parse_document(source)
        if document is not None and kind is not None:
            if not isinstance(document, kind):
                raise JSONSyntaxError(
                    f"Expecting {kind.__name__}, found "
                    f"{type(document).__name__}",
                    0,
                )
        return document
    except JSONError:
        if not suppress_errors:
            raise
        logger.error("failed to read JSON document", exc_info=True)
        return None


def read_object(
    source: Source, *, suppress_errors: bool = False
) -> JsonObject | None:
    """
    Reads a JSON object, returning ``None`` for an empty source.

    With ``suppress_errors`` any failure is logged and ``None`` is returned
    instead of raising.
    """
    return _read_document(source, JsonObject, suppress_errors)


def read_array(
    source: Source, *, suppress_errors: bool = False
) -> JsonArray | None:
    """
    Reads a JSON array, returning ``None`` for an empty source.

    With ``suppress_errors`` any failure is logged and ``None`` is returned
    instead of raising.
    """
    return _read_document(source, JsonArray, suppress_errors)


def read_next(
    source: Source, *, suppress_errors: bool = False
) -> Document | None:
    """Reads whichever document comes next, object or array."""
    return _read_document(source, None, suppress_errors)


def write(
    value: Any,
    sink: Sink,
    compact: bool = False,
    indent: str = DEFAULT_INDENT,
) -> None:
    """
    Writes ``value`` as JSON to a binary sink or a file path.

    Plain Python data is converted with ``from_python`` first. A file opened
    from a path is closed afterwards; a caller-supplied stream is flushed
    and left open.
    """
    tree = from_python(value)
    if not isinstance(sink, os.PathLike):
        _write(tree, sink, compact=compact, indent=indent)
        return

    try:
        stream = open(sink, "wb")  # noqa: SIM115
    except OSError as e:
        raise SourceIOError(f"cannot open {sink!r}: {e}") from e
    config = EncodeConfig(compact=compact, indent=indent)
    with JsonWriter(stream, config, close_sink=True) as writer:
        writer.write(tree)


def to_text(
    value: Any, compact: bool = False, indent: str = DEFAULT_INDENT
) -> str:
    """Serializes ``value`` to a ``str``."""
    return _to_text(from_python(value), compact=compact, indent=indent)


def loads(
    s: str | bytes | bytearray, config: ParseConfig | None = None
) -> Document:
    """
    Parses a complete JSON document held in memory.

    Unlike ``parse_document`` an empty input is an error, and anything but
    whitespace after the document is rejected as extra data. Errors for
    ``str`` input report character positions with line and column.
    """
    if not isinstance(s, str | bytes | bytearray):
        raise TypeError(
            f"the JSON object must be str or bytes, not {type(s).__name__}"
        )

    config = config or ParseConfig()
    try:
        with _open_reader(s, config) as reader:
            parser = JsonParser(reader, config)
            document = parser.parse_document()
            if document is None:
                raise EndOfInput(reader.offset)
            parser.expect_end()
            return document
    except JSONDecodeError as e:
        if isinstance(s, str):
            e.locate(s)
        raise


def load(fp: IO[Any], config: ParseConfig | None = None) -> Document:
    """Parses a complete JSON document from a binary or text file object."""
    if not hasattr(fp, "read"):
        raise TypeError("fp must have a read() method")
    if isinstance(fp, io.TextIOBase):
        return loads(fp.read(), config)

    config = config or ParseConfig()
    with _open_reader(fp, config) as reader:
        parser = JsonParser(reader, config)
        document = parser.parse_document()
        if document is None:
            raise EndOfInput(reader.offset)
        parser.expect_end()
        return document


def dumps(
    obj: Any, *, compact: bool = False, indent: str = DEFAULT_INDENT
) -> str:
    """Serializes a value tree or plain Python data to a JSON string."""
    return to_text(obj, compact=compact, indent=indent)


def dump(
    obj: Any,
    fp: IO[Any],
    *,
    compact: bool = False,
    indent: str = DEFAULT_INDENT,
) -> None:
    """Serializes to a binary or text file object, leaving it open."""
    if not hasattr(fp, "write"):
        raise TypeError("fp must have a write() method")
    if isinstance(fp, io.TextIOBase):
        fp.write(dumps(obj, compact=compact, indent=indent))
    else:
        write(obj, fp, compact=compact, indent=indent)


__all__ = [
    "FALSE",
    "NULL",
    "TRUE",
    "ByteBufferReader",
    "Document",
    "EncodeConfig",
    "EndOfInput",
    "HotPathStats",
    "JSONDecodeError",
    "JSONError",
    "JSONSyntaxError",
    "JsonArray",
    "JsonBoolean",
    "JsonFloat",
    "JsonInteger",
    "JsonNull",
    "JsonObject",
    "JsonParser",
    "JsonString",
    "JsonValue",
    "JsonWriter",
    "ParseConfig",
    "SourceIOError",
    "clear_hot_path_stats",
    "dump",
    "dumps",
    "from_python",
    "get_hot_path_stats",
    "iter_documents",
    "load",
    "loads",
    "parse_array",
    "parse_document",
    "parse_object",
    "read_array",
    "read_next",
    "read_object",
    "to_python",
    "to_text",
    "write",
]
