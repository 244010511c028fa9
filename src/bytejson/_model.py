"""
Value model: a closed tagged union covering every JSON value.

Scalars are immutable wrappers around one Python value. Containers are
mutable and only ever hold other ``JsonValue`` instances; plain Python values
assigned into them are converted on the way in.
"""

from __future__ import annotations

from collections.abc import Iterable
from collections.abc import Iterator
from collections.abc import Mapping
from collections.abc import MutableMapping
from collections.abc import MutableSequence
from dataclasses import dataclass
from enum import Enum
from typing import Any
from typing import overload

INT64_MIN = -(2**63)
INT64_MAX = 2**63 - 1

DEFAULT_INDENT = "    "


@dataclass(frozen=True, slots=True)
class JsonString:
    value: str

    def __post_init__(self) -> None:
        if not isinstance(self.value, str):
            raise TypeError(
                f"JsonString requires str, not {type(self.value).__name__}"
            )


@dataclass(frozen=True, slots=True)
class JsonInteger:
    """
    Signed 64-bit integer.

    Values outside the int64 range raise ``OverflowError`` instead of being
    truncated.
    """

    value: int

    def __post_init__(self) -> None:
        if isinstance(self.value, bool) or not isinstance(self.value, int):
            raise TypeError(
                f"JsonInteger requires int, not {type(self.value).__name__}"
            )
        if not INT64_MIN <= self.value <= INT64_MAX:
            raise OverflowError(f"{self.value} does not fit in 64 bits")


@dataclass(frozen=True, slots=True)
class JsonFloat:
    value: float

    def __post_init__(self) -> None:
        if isinstance(self.value, bool) or not isinstance(
            self.value, int | float
        ):
            raise TypeError(
                f"JsonFloat requires float, not {type(self.value).__name__}"
            )
        object.__setattr__(self, "value", float(self.value))


@dataclass(frozen=True, slots=True)
class JsonBoolean:
    value: bool

    def __post_init__(self) -> None:
        if not isinstance(self.value, bool):
            raise TypeError(
                f"JsonBoolean requires bool, not {type(self.value).__name__}"
            )


class JsonNull(Enum):
    """The JSON ``null`` literal. ``NULL`` is its only member."""

    NULL = None

    def __repr__(self) -> str:
        return "NULL"


NULL = JsonNull.NULL
TRUE = JsonBoolean(True)
FALSE = JsonBoolean(False)


def _expect(value: JsonValue, kind: type, what: str) -> Any:
    if not isinstance(value, kind):
        raise TypeError(f"expected {what}, found {type(value).__name__}")
    return value


class JsonObject(MutableMapping[str, "JsonValue"]):
    """
    Ordered mapping of string keys to JSON values.

    Keys keep their first insertion position: assigning to an existing key
    replaces its value in place. Deleting a key and assigning it again
    appends it at the end.
    """

    __slots__ = ("_entries",)

    def __init__(
        self,
        entries: Mapping[str, Any] | Iterable[tuple[str, Any]] | None = None,
    ) -> None:
        self._entries: dict[str, JsonValue] = {}
        if entries is not None:
            self.update(entries)

    def __getitem__(self, key: str) -> JsonValue:
        return self._entries[key]

    def __setitem__(self, key: str, value: Any) -> None:
        if not isinstance(key, str):
            raise TypeError(f"keys must be str, not {type(key).__name__}")
        self._entries[key] = from_python(value)

    def __delitem__(self, key: str) -> None:
        del self._entries[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, JsonObject):
            return NotImplemented
        return self._entries == other._entries

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"JsonObject({self._entries!r})"

    def __str__(self) -> str:
        return self.to_text()

    def to_text(
        self, compact: bool = False, indent: str = DEFAULT_INDENT
    ) -> str:
        from bytejson._writer import to_text

        return to_text(self, compact=compact, indent=indent)

    def get_object(self, key: str) -> JsonObject:
        return _expect(self._entries[key], JsonObject, "object")

    def get_array(self, key: str) -> JsonArray:
        return _expect(self._entries[key], JsonArray, "array")

    def get_string(self, key: str) -> str:
        return _expect(self._entries[key], JsonString, "string").value

    def get_int(self, key: str) -> int:
        return _expect(self._entries[key], JsonInteger, "integer").value

    def get_float(self, key: str) -> float:
        value = _expect(self._entries[key], JsonFloat | JsonInteger, "number")
        return float(value.value)

    def get_bool(self, key: str) -> bool:
        return _expect(self._entries[key], JsonBoolean, "boolean").value

    def get_layered(self, path: str) -> JsonValue | None:
        """
        Looks up a dotted path such as ``"server.tls.port"``.

        Returns ``None`` when any segment is missing. An intermediate value
        that is not an object raises ``TypeError``.
        """
        head, sep, rest = path.partition(".")
        if not sep:
            return self._entries.get(head)
        if head not in self._entries:
            return None
        return self.get_object(head).get_layered(rest)

    def put_layered(self, path: str, value: Any) -> None:
        """Assigns a dotted path, creating intermediate objects as needed."""
        head, sep, rest = path.partition(".")
        if not sep:
            self[head] = value
            return
        if head not in self._entries:
            self._entries[head] = JsonObject()
        self.get_object(head).put_layered(rest, value)


class JsonArray(MutableSequence["JsonValue"]):
    """Ordered sequence of JSON values without holes."""

    __slots__ = ("_items",)

    def __init__(self, items: Iterable[Any] | None = None) -> None:
        self._items: list[JsonValue] = []
        if items is not None:
            self.extend(items)

    @overload
    def __getitem__(self, index: int) -> JsonValue: ...

    @overload
    def __getitem__(self, index: slice) -> JsonArray: ...

    def __getitem__(self, index: int | slice) -> JsonValue | JsonArray:
        if isinstance(index, slice):
            return JsonArray(self._items[index])
        return self._items[index]

    def __setitem__(self, index: Any, value: Any) -> None:
        if isinstance(index, slice):
            self._items[index] = [from_python(item) for item in value]
        else:
            self._items[index] = from_python(value)

    def __delitem__(self, index: int | slice) -> None:
        del self._items[index]

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[JsonValue]:
        return iter(self._items)

    def insert(self, index: int, value: Any) -> None:
        self._items.insert(index, from_python(value))

    def append(self, value: Any) -> None:
        self._items.append(from_python(value))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, JsonArray):
            return NotImplemented
        return self._items == other._items

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"JsonArray({self._items!r})"

    def __str__(self) -> str:
        return self.to_text()

    def to_text(
        self, compact: bool = False, indent: str = DEFAULT_INDENT
    ) -> str:
        from bytejson._writer import to_text

        return to_text(self, compact=compact, indent=indent)

    def get_object(self, index: int) -> JsonObject:
        return _expect(self._items[index], JsonObject, "object")

    def get_array(self, index: int) -> JsonArray:
        return _expect(self._items[index], JsonArray, "array")

    def get_string(self, index: int) -> str:
        return _expect(self._items[index], JsonString, "string").value

    def get_int(self, index: int) -> int:
        return _expect(self._items[index], JsonInteger, "integer").value

    def get_float(self, index: int) -> float:
        value = _expect(self._items[index], JsonFloat | JsonInteger, "number")
        return float(value.value)

    def get_bool(self, index: int) -> bool:
        return _expect(self._items[index], JsonBoolean, "boolean").value


type JsonValue = (
    JsonObject
    | JsonArray
    | JsonString
    | JsonInteger
    | JsonFloat
    | JsonBoolean
    | JsonNull
)

_VARIANTS = (
    JsonObject,
    JsonArray,
    JsonString,
    JsonInteger,
    JsonFloat,
    JsonBoolean,
    JsonNull,
)


def from_python(obj: Any) -> JsonValue:  # noqa: PLR0911
    """
    Converts plain Python data into the value model.

    ``JsonValue`` instances pass through unchanged; containers are converted
    recursively.
    """
    if isinstance(obj, _VARIANTS):
        return obj
    elif obj is None:
        return NULL
    elif isinstance(obj, bool):
        return TRUE if obj else FALSE
    elif isinstance(obj, int):
        return JsonInteger(obj)
    elif isinstance(obj, float):
        return JsonFloat(obj)
    elif isinstance(obj, str):
        return JsonString(obj)
    elif isinstance(obj, Mapping):
        return JsonObject(obj)
    elif isinstance(obj, list | tuple):
        return JsonArray(obj)
    else:
        msg = f"Object of type {type(obj).__name__} is not JSON serializable"
        raise TypeError(msg)


def to_python(value: JsonValue) -> Any:
    """Converts a value tree into ``dict``/``list``/scalar Python data."""
    match value:
        case JsonObject():
            return {key: to_python(item) for key, item in value.items()}
        case JsonArray():
            return [to_python(item) for item in value]
        case JsonString(text):
            return text
        case JsonInteger(number) | JsonFloat(number):
            return number
        case JsonBoolean(flag):
            return flag
        case JsonNull.NULL:
            return None
        case _:
            msg = f"Object of type {type(value).__name__} is not a JsonValue"
            raise TypeError(msg)


__all__ = [
    "FALSE",
    "INT64_MAX",
    "INT64_MIN",
    "NULL",
    "TRUE",
    "JsonArray",
    "JsonBoolean",
    "JsonFloat",
    "JsonInteger",
    "JsonNull",
    "JsonObject",
    "JsonString",
    "JsonValue",
    "from_python",
    "to_python",
]
