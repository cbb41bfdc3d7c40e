"""JSON encoding and precision-preserving decoding for JSON-RPC bodies.

Integers decode to ``int`` (exact at any magnitude) and every other JSON number
decodes to ``decimal.Decimal`` holding the literal exactly. Nothing is coerced
to ``float`` until a caller asks for one through the result extractors, and
encoding writes a Decimal back as the same literal.
"""

import dataclasses
import json
from decimal import Decimal
from typing import Any

from pydantic import BaseModel

from rpcwire.errors import create_error

Number = int | Decimal


def _reject_constant(name: str) -> Any:
    """Refuse NaN and Infinity, which are not valid JSON."""
    raise ValueError(f"Invalid JSON number constant: {name}")


def _encode_default(value: Any) -> Any:
    """Map values json cannot write natively to ones it can."""
    if isinstance(value, BaseModel):
        return value.model_dump(mode="json")
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return dataclasses.asdict(value)
    if isinstance(value, (set, frozenset)):
        return list(value)
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


def _key_text(key: Any) -> str:
    if isinstance(key, str):
        return key
    if key is None or isinstance(key, (bool, int, float)):
        return json.dumps(key, allow_nan=False)
    raise TypeError(f"Object keys must be str, int, float, bool or None, not {type(key).__name__}")


def _write(value: Any, out: list[str], active: set[int]) -> None:
    """Append the JSON text of ``value`` to ``out``.

    Decimals are written as their own literal, so every digit survives.
    ``active`` holds the ids of the containers being written.
    """
    if isinstance(value, str):
        out.append(json.dumps(value, ensure_ascii=False))
    elif value is None or isinstance(value, (bool, int, float)):
        out.append(json.dumps(value, allow_nan=False))
    elif isinstance(value, Decimal):
        if not value.is_finite():
            raise ValueError(f"Cannot encode non-finite Decimal {value}")
        out.append(str(value))
    elif isinstance(value, (dict, list, tuple)):
        if id(value) in active:
            raise ValueError("Circular reference detected")
        active.add(id(value))
        if isinstance(value, dict):
            out.append("{")
            for index, (key, item) in enumerate(value.items()):
                if index:
                    out.append(",")
                out.append(json.dumps(_key_text(key), ensure_ascii=False))
                out.append(":")
                _write(item, out, active)
            out.append("}")
        else:
            out.append("[")
            for index, item in enumerate(value):
                if index:
                    out.append(",")
                _write(item, out, active)
            out.append("]")
        active.discard(id(value))
    else:
        _write(_encode_default(value), out, active)


def encode(value: Any) -> bytes:
    """Encode a value to compact UTF-8 JSON bytes.

    Args:
        value: Wire dict, list of wire dicts, or any params/result value

    Returns:
        JSON bytes

    Raises:
        SerializationError: If the value cannot be represented as JSON
    """
    out: list[str] = []
    try:
        _write(value, out, set())
    except (TypeError, ValueError, RecursionError) as e:
        raise create_error("SERIALIZATION_FAILED", detail=str(e)) from e
    return "".join(out).encode("utf-8")


def decode(body: bytes | str) -> Any:
    """Decode JSON text without losing numeric precision.

    Args:
        body: Raw JSON bytes or text

    Returns:
        Decoded value; numbers are ``int`` or ``Decimal``

    Raises:
        json.JSONDecodeError: If the text is not valid JSON
        UnicodeDecodeError: If the bytes are not UTF-8
        ValueError: If the text uses NaN or Infinity
    """
    if isinstance(body, (bytes, bytearray)):
        body = body.decode("utf-8")
    return json.loads(body, parse_float=Decimal, parse_constant=_reject_constant)
