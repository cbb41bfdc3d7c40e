"""Typed extraction of untyped JSON-RPC results.

Results are decoded generically (see ``codec.decode``), so integers arrive as
``int`` and other numbers as ``Decimal``. Each extractor accepts exactly one
kind of value and raises TypeMismatch, carrying the value, for anything else.
"""

import math
from decimal import Decimal
from typing import Any, TypeVar

from pydantic import PydanticUserError, TypeAdapter, ValidationError

from rpcwire.errors import RPCWireError, create_error

from . import codec

T = TypeVar("T")


def _kind(value: Any) -> str:
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, (int, Decimal)):
        return "number"
    if isinstance(value, str):
        return "string"
    if isinstance(value, list):
        return "array"
    if isinstance(value, dict):
        return "object"
    return type(value).__name__


def _mismatch(expected: str, value: Any) -> RPCWireError:
    return create_error(
        "TYPE_MISMATCH",
        expected=expected,
        actual=_kind(value),
        value=value,
    )


def as_int(value: Any) -> int:
    """Interpret a result as an integer.

    Only integer JSON literals qualify; ``3.0`` or ``1e3`` decode as Decimal
    and are rejected.

    Raises:
        TypeMismatch: If value is not an integer token
    """
    if isinstance(value, bool) or not isinstance(value, int):
        raise _mismatch("integer", value)
    return value


def as_float(value: Any) -> float:
    """Interpret a numeric result as a float.

    Raises:
        TypeMismatch: If value is not numeric or overflows a float
    """
    if isinstance(value, bool) or not isinstance(value, (int, Decimal)):
        raise _mismatch("float", value)
    try:
        result = float(value)
    except OverflowError as e:
        raise _mismatch("float", value) from e
    if math.isinf(result):
        raise _mismatch("float", value)
    return result


def as_decimal(value: Any) -> Decimal:
    """Interpret a numeric result as an exact Decimal."""
    if isinstance(value, bool) or not isinstance(value, (int, Decimal)):
        raise _mismatch("decimal", value)
    return Decimal(value)


def as_bool(value: Any) -> bool:
    """Interpret a result as a boolean."""
    if not isinstance(value, bool):
        raise _mismatch("boolean", value)
    return value


def as_str(value: Any) -> str:
    """Interpret a result as a string."""
    if not isinstance(value, str):
        raise _mismatch("string", value)
    return value


def as_object(value: Any, shape: type[T]) -> T:
    """Re-interpret a generically decoded result as ``shape``.

    The value is encoded back to canonical JSON bytes, then parsed into
    ``shape`` with a pydantic TypeAdapter, so any pydantic-supported target
    works: models, dataclasses, TypedDicts, ``list[int]`` and so on.

    Args:
        value: Decoded result
        shape: Target type

    Returns:
        Instance of ``shape``

    Raises:
        SerializationError: If encoding or parsing fails
    """
    raw = codec.encode(value)
    try:
        adapter = TypeAdapter(shape)
    except PydanticUserError as e:
        raise create_error(
            "SERIALIZATION_FAILED",
            detail=f"Cannot build a parser for {shape!r}: {e}",
        ) from e
    try:
        return adapter.validate_json(raw)
    except ValidationError as e:
        raise create_error(
            "SERIALIZATION_FAILED",
            detail=f"Result does not match {getattr(shape, '__name__', shape)}: {e}",
        ) from e
