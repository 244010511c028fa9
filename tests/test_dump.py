"""
JSON encoding functionality tests.

Validates pretty and compact layout, string escaping, non-finite floats and
the sinks values can be written to.
"""

import io
import math
from pathlib import Path

import pytest

import bytejson


def test_dump() -> None:
    """
    Validates dump to text and binary file-like objects.
    """
    sio = io.StringIO()
    bytejson.dump({}, sio)
    assert sio.getvalue() == "{}"

    bio = io.BytesIO()
    bytejson.dump([1, "é"], bio, compact=True)
    assert bio.getvalue() == '[1,"é"]'.encode()
    assert not bio.closed


def test_dumps() -> None:
    """
    Validates dumps of empty containers in both modes.
    """
    assert bytejson.dumps({}) == "{}"
    assert bytejson.dumps([]) == "[]"
    assert bytejson.dumps({}, compact=True) == "{}"
    assert bytejson.dumps({"a": []}) == '{\n    "a": []\n}'


def test_compact_layout() -> None:
    """
    Validates that compact mode emits no whitespace between tokens.
    """
    obj = bytejson.JsonObject({"key1": "value1", "key2": 2})
    assert obj.to_text(compact=True) == '{"key1":"value1","key2":2}'

    nested = {"a": [1, {"b": None}], "c": True}
    assert (
        bytejson.dumps(nested, compact=True)
        == '{"a":[1,{"b":null}],"c":true}'
    )


def test_pretty_layout() -> None:
    """
    Validates one entry per line with one indent unit per level.
    """
    nested = {"a": [1, {"b": None}], "c": False}
    assert bytejson.dumps(nested) == (
        "{\n"
        '    "a": [\n'
        "        1,\n"
        "        {\n"
        '            "b": null\n'
        "        }\n"
        "    ],\n"
        '    "c": false\n'
        "}"
    )


def test_str_is_pretty_text() -> None:
    """
    Validates that str() of a container gives its pretty JSON text.
    """
    array = bytejson.JsonArray([1, 2])
    assert str(array) == "[\n    1,\n    2\n]"
    assert str(array) == array.to_text()


def test_custom_indent() -> None:
    """
    Validates that any indent unit is repeated per level.
    """
    assert bytejson.dumps([[1]], indent="\t") == "[\n\t[\n\t\t1\n\t]\n]"
    assert bytejson.dumps([1, 2], indent="") == "[\n1,\n2\n]"

    with pytest.raises(TypeError):
        bytejson.EncodeConfig(indent=2)  # type: ignore[arg-type]


@pytest.mark.parametrize(
    "text,expected",
    [
        ('say "hi"', '"say \\"hi\\""'),
        ("back\\slash", '"back\\\\slash"'),
        ("line\nfeed", '"line\\nfeed"'),
        ("carriage\rreturn", '"carriage\\rreturn"'),
        ("tab\there", '"tab\\there"'),
        ("\b", '"\\b"'),
        ("\x01", '"\\u0001"'),
        ("\x0c", '"\\u000C"'),
        ("\x1f", '"\\u001F"'),
        ("a/b", '"a/b"'),
        ("\x7f", '"\x7f"'),
    ],
)
def test_string_escaping(text: str, expected: str) -> None:
    """
    Validates the escape set used for string literals.
    """
    assert bytejson.dumps([text], compact=True) == f"[{expected}]"


def test_non_ascii_written_raw() -> None:
    """
    Validates that non-ASCII characters are written as UTF-8, not escaped.
    """
    buffer = io.BytesIO()
    bytejson.write({"ключ": "日本"}, buffer, compact=True)
    assert buffer.getvalue() == '{"ключ":"日本"}'.encode()


def test_lone_surrogate_escaped() -> None:
    """
    Validates that unpaired surrogates are written as \\u escapes and read
    back unchanged.
    """
    text = bytejson.dumps(["a\ud800b"], compact=True)
    assert text == '["a\\uD800b"]'
    assert bytejson.loads(text).get_string(0) == "a\ud800b"


@pytest.mark.parametrize("number", [math.nan, math.inf, -math.inf])
def test_non_finite_floats_written_as_zero(number: float) -> None:
    """
    Validates that NaN and the infinities are written as 0, which reads
    back as an integer.
    """
    text = bytejson.dumps([number], compact=True)
    assert text == "[0]"
    assert bytejson.loads(text)[0] == bytejson.JsonInteger(0)


def test_float_overflow_reads_as_infinity() -> None:
    """
    Validates that an out-of-range exponent reads as infinity.
    """
    doc = bytejson.loads("[1e400, -1e400]")
    assert doc.get_float(0) == math.inf
    assert bytejson.dumps(doc, compact=True) == "[0,0]"


@pytest.mark.parametrize(
    "number,expected",
    [
        (1.0, "1.0"),
        (-0.5, "-0.5"),
        (1e100, "1e+100"),
        (0.1, "0.1"),
        (1.5e-7, "1.5e-07"),
    ],
)
def test_float_formatting(number: float, expected: str) -> None:
    """
    Validates float text is the shortest form that reads back exactly.
    """
    assert bytejson.dumps([number], compact=True) == f"[{expected}]"
    assert bytejson.loads(f"[{expected}]").get_float(0) == number


def test_integer_extremes() -> None:
    """
    Validates that int64 extremes are written exactly.
    """
    text = bytejson.dumps([2**63 - 1, -(2**63)], compact=True)
    assert text == "[9223372036854775807,-9223372036854775808]"


def test_unserializable_values() -> None:
    """
    Validates rejection of values with no JSON counterpart.
    """
    with pytest.raises(TypeError, match="not JSON serializable"):
        bytejson.dumps([object()])
    with pytest.raises(TypeError, match="keys must be str"):
        bytejson.dumps({1: "one"})
    with pytest.raises(OverflowError):
        bytejson.dumps([2**64])


def test_max_depth() -> None:
    """
    Validates that the optional nesting bound is enforced while writing.
    """
    config = bytejson.EncodeConfig(compact=True, max_depth=2)
    sink = io.BytesIO()

    bytejson.JsonWriter(sink, config).write(bytejson.JsonArray([[1]]))
    assert sink.getvalue() == b"[[1]]"

    with pytest.raises(ValueError, match="nesting depth"):
        bytejson.JsonWriter(io.BytesIO(), config).write(
            bytejson.JsonArray([[[1]]])
        )


def test_writer_buffers_large_output() -> None:
    """
    Validates that output larger than the buffer reaches the sink intact.
    """
    value = bytejson.JsonArray(["x" * 100] * 200)
    sink = io.BytesIO()
    bytejson.JsonWriter(sink, buffer_size=64).write(value)

    assert bytejson.loads(sink.getvalue()) == value


def test_write_to_path(tmp_path: Path) -> None:
    """
    Validates writing to a file path, which is created and closed.
    """
    path = tmp_path / "out.json"
    bytejson.write({"a": 1}, path, compact=True)

    assert path.read_bytes() == b'{"a":1}'
    assert bytejson.parse_object(path).get_int("a") == 1


class _FailingSink(io.RawIOBase):
    def writable(self) -> bool:
        return True

    def write(self, data: object) -> int:
        raise OSError("disk full")


def test_sink_failure_wrapped() -> None:
    """
    Validates that OS-level write failures surface as SourceIOError.
    """
    with pytest.raises(bytejson.SourceIOError):
        bytejson.write([1], _FailingSink())


def test_supplementary_character_written_raw() -> None:
    """
    Validates that a character outside the BMP is written as 4-byte UTF-8.
    """
    sink = io.BytesIO()
    bytejson.write(["\U0001f600"], sink, compact=True)
    assert sink.getvalue() == b'["\xf0\x9f\x98\x80"]'
