"""Reversible JSON encoding for cached values.

Backends that store text (Redis) need values to come back with the same
type they went in with. Plain JSON turns tuples into lists and has no date
or set type, so every non-list container and rich scalar is written as a
single-key tagged object:

    ("ok", 1)            -> {"__tuple__": ["ok", 1]}
    {"a": 1}             -> {"__dict__": [["a", 1]]}
    date(2023, 12, 25)   -> {"__date__": "2023-12-25"}

Every JSON object in the payload is a tag, so decoding is unambiguous.
Values of any other type raise TypeError rather than being stringified.
"""

import datetime
import json
import uuid
from decimal import Decimal
from typing import Any, Callable, Dict


def _encode(value: Any) -> Any:
    if value is None or isinstance(value, (bool, int, float, str)):
        return value
    if isinstance(value, list):
        return [_encode(v) for v in value]
    if isinstance(value, tuple):
        return {"__tuple__": [_encode(v) for v in value]}
    if isinstance(value, dict):
        return {"__dict__": [[_encode(k), _encode(v)] for k, v in value.items()]}
    if isinstance(value, frozenset):
        return {"__frozenset__": [_encode(v) for v in value]}
    if isinstance(value, set):
        return {"__set__": [_encode(v) for v in value]}
    if isinstance(value, bytes):
        return {"__bytes__": value.hex()}
    # datetime is a date subclass, check it first
    if isinstance(value, datetime.datetime):
        return {"__datetime__": value.isoformat()}
    if isinstance(value, datetime.date):
        return {"__date__": value.isoformat()}
    if isinstance(value, datetime.time):
        return {"__time__": value.isoformat()}
    if isinstance(value, datetime.timedelta):
        return {"__timedelta__": [value.days, value.seconds, value.microseconds]}
    if isinstance(value, Decimal):
        return {"__decimal__": str(value)}
    if isinstance(value, uuid.UUID):
        return {"__uuid__": str(value)}
    raise TypeError(f"Cannot cache value of type {type(value).__qualname__}")


_DECODERS: Dict[str, Callable[[Any], Any]] = {
    "__tuple__": lambda items: tuple(_decode(v) for v in items),
    "__dict__": lambda pairs: {_decode(k): _decode(v) for k, v in pairs},
    "__frozenset__": lambda items: frozenset(_decode(v) for v in items),
    "__set__": lambda items: {_decode(v) for v in items},
    "__bytes__": bytes.fromhex,
    "__datetime__": datetime.datetime.fromisoformat,
    "__date__": datetime.date.fromisoformat,
    "__time__": datetime.time.fromisoformat,
    "__timedelta__": lambda parts: datetime.timedelta(
        days=parts[0], seconds=parts[1], microseconds=parts[2]
    ),
    "__decimal__": Decimal,
    "__uuid__": uuid.UUID,
}


def _decode(data: Any) -> Any:
    if isinstance(data, list):
        return [_decode(v) for v in data]
    if isinstance(data, dict):
        if len(data) != 1:
            raise ValueError(f"Malformed cached value: {data!r}")
        (tag, payload), = data.items()
        decoder = _DECODERS.get(tag)
        if decoder is None:
            raise ValueError(f"Unknown cached value tag: {tag}")
        return decoder(payload)
    return data


def dumps(value: Any) -> str:
    """Encode a value to text; raises TypeError for unsupported types."""
    return json.dumps(_encode(value), separators=(",", ":"))


def loads(raw: str) -> Any:
    """Decode text written by dumps(); raises ValueError on malformed input."""
    return _decode(json.loads(raw))
