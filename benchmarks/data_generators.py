"""
Test data generators for JSON benchmarks.

Every generator is seeded so that runs compare like with like:
- Different sizes (small/large objects, long arrays)
- Different shapes (flat, deeply nested, mixed)
- String-heavy content with escape sequences and non-ASCII text
- Newline-separated document streams
"""

import json
import random
import string
from collections.abc import Callable
from typing import Any

_SEED = 4627
_ESCAPES = ['\\"', "\\\\", "\\/", "\\b", "\\f", "\\n", "\\r", "\\t"]
_ESCAPE_PROBABILITY = 0.3
_NON_ASCII = "éüßøñ日本語☃"

DATA_TYPES = [
    "small_object",
    "large_object",
    "mixed_array",
    "nested_structure",
    "string_heavy",
]


def generate_test_data(data_type: str) -> str:
    """Generates JSON text of the given type."""
    generators: dict[str, Callable[[random.Random], str]] = {
        "small_object": _generate_small_object,
        "large_object": _generate_large_object,
        "mixed_array": _generate_mixed_array,
        "nested_structure": _generate_nested_structure,
        "string_heavy": _generate_string_heavy,
        "document_stream": _generate_document_stream,
    }

    if data_type not in generators:
        raise ValueError(f"Unknown data type: {data_type}")

    return generators[data_type](random.Random(_SEED))


def generate_test_bytes(data_type: str) -> bytes:
    """Generates the same JSON as ``generate_test_data``, UTF-8 encoded."""
    return generate_test_data(data_type).encode("utf-8")


def generate_test_tree(data_type: str) -> Any:
    """Generates plain Python data for write benchmarks."""
    return json.loads(generate_test_data(data_type))


def _generate_small_object(rng: random.Random) -> str:
    data = {
        "id": 12345,
        "name": "Alice Johnson",
        "email": "alice@example.com",
        "active": True,
        "balance": 1234.56,
        "metadata": {"created": "2024-01-15T10:30:00Z", "source": "api"},
    }
    return json.dumps(data)


def _generate_large_object(rng: random.Random) -> str:
    """A user profile with a long transaction history (> 10KB)."""
    data = {
        "user_id": rng.randint(1_000_000, 9_999_999),
        "profile": {
            "first_name": _random_string(rng, 10),
            "last_name": _random_string(rng, 12),
            "email": f"{_random_string(rng, 8)}@example.com",
            "address": {
                "street": f"{rng.randint(1, 9999)} Main St",
                "city": _random_string(rng, 12),
                "zip": f"{rng.randint(10000, 99999)}",
            },
            "notifications": {
                "email": rng.choice([True, False]),
                "push": rng.choice([True, False]),
            },
        },
        "transactions": [
            {
                "id": f"txn_{i:06d}",
                "amount": round(rng.uniform(1.0, 1000.0), 2),
                "currency": rng.choice(["USD", "EUR", "GBP", "JPY"]),
                "description": f"Payment for {_random_string(rng, 20)}",
                "status": rng.choice(["completed", "pending", "failed"]),
            }
            for i in range(80)
        ],
    }
    return json.dumps(data)


def _generate_mixed_array(rng: random.Random) -> str:
    makers: list[Callable[[int], Any]] = [
        lambda _: rng.randint(-(2**40), 2**40),
        lambda _: round(rng.uniform(-100.0, 100.0), 3),
        lambda _: _random_string(rng, rng.randint(5, 30)),
        lambda _: rng.choice([True, False]),
        lambda _: None,
        lambda i: {"index": i, "score": round(rng.uniform(0, 100), 2)},
    ]
    array = [rng.choice(makers)(i) for i in range(400)]
    return json.dumps(array)


def _generate_nested_structure(rng: random.Random) -> str:
    def create_nested(depth: int) -> dict[str, Any]:
        if depth <= 0:
            return {"value": _random_string(rng, 10)}
        return {
            "level": depth,
            "items": [create_nested(depth - 1) for _ in range(2)],
            "nested": create_nested(depth - 1),
        }

    return json.dumps(create_nested(7))


def _generate_string_heavy(rng: random.Random) -> str:
    def create_escaped_string() -> str:
        chars = []
        for _ in range(50):
            if rng.random() < _ESCAPE_PROBABILITY:
                chars.append(rng.choice(_ESCAPES))
            elif rng.random() < _ESCAPE_PROBABILITY:
                chars.append(rng.choice(_NON_ASCII))
            else:
                chars.append(rng.choice(string.ascii_letters + " "))
        return "".join(chars)

    strings = [create_escaped_string() for _ in range(100)]
    unicode = [f"\\u{rng.randint(0x00A0, 0xD7FF):04x}" for _ in range(50)]

    # Built as text so the escapes above stay escapes in the output
    return (
        '{"strings": ["'
        + '", "'.join(strings)
        + '"], "unicode": ["'
        + '", "'.join(unicode)
        + '"]}'
    )


def _generate_document_stream(rng: random.Random) -> str:
    documents = [
        json.dumps({"seq": i, "payload": _random_string(rng, 40)})
        for i in range(500)
    ]
    return "\n".join(documents)


def _random_string(rng: random.Random, length: int) -> str:
    return "".join(rng.choices(string.ascii_letters, k=length))
