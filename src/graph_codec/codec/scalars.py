"""
Timestamp codec and numeric narrowing.

Timestamps travel as integer milliseconds since the Unix epoch. Narrowing
converts a decoded number to the numeric kind a property was declared with,
following two's-complement wrapping for integers and IEEE-754 single
precision for ``FLOAT``.
"""

from __future__ import annotations

import logging
import math
import struct
from collections.abc import Iterable, Mapping
from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Any, Dict, Optional, Union

from ..errors import FormatError
from ..settings import settings
from .base import EncodeContext, Serializer
from .writer import JsonWriter

logger = logging.getLogger(__name__)

EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)
_MILLISECOND = timedelta(milliseconds=1)

# Largest magnitude a double holds without losing integer precision.
SAFE_INTEGER_LIMIT = 2**53


def encode_timestamp(t: datetime) -> int:
    """Milliseconds since the epoch. Naive datetimes are taken as UTC."""
    if t.tzinfo is None:
        t = t.replace(tzinfo=timezone.utc)
    return (t - EPOCH) // _MILLISECOND


def decode_timestamp(literal: Any) -> datetime:
    """Build a UTC datetime from an integral millisecond count."""
    if isinstance(literal, bool) or not isinstance(literal, (int, float)):
        raise FormatError(f"Timestamp must be an integral number, got {type(literal).__name__}")
    if isinstance(literal, float):
        if not literal.is_integer():
            raise FormatError(f"Timestamp must be an integral number, got {literal!r}")
        literal = int(literal)
    try:
        return EPOCH + timedelta(milliseconds=literal)
    except OverflowError as e:
        raise FormatError(f"Timestamp {literal} is out of range") from e


class TimestampSerializer(Serializer):
    handled_type = datetime

    def serialize(self, value: datetime, writer: JsonWriter, ctx: EncodeContext) -> None:
        writer.write_number(encode_timestamp(value))


class NumberKind(Enum):
    """Numeric kinds a property value can be declared with."""

    BYTE = "byte"
    INT = "int"
    LONG = "long"
    FLOAT = "float"
    DOUBLE = "double"

    @property
    def is_integral(self) -> bool:
        return self in _INTEGER_BITS

    @classmethod
    def parse(cls, kind: Union["NumberKind", str, type]) -> "NumberKind":
        """Accept a NumberKind, a kind name (``"int32"``, ``"double"``...) or a type.

        The Python types map to the widest kind: ``int`` is LONG and ``float`` is
        DOUBLE, since that is what they hold.
        """
        if isinstance(kind, NumberKind):
            return kind
        if isinstance(kind, type):
            if kind is int:
                return cls.LONG
            if kind is float:
                return cls.DOUBLE
            raise ValueError(f"No number kind for type {kind.__name__}")
        try:
            return _KIND_ALIASES[str(kind).strip().lower()]
        except KeyError:
            raise ValueError(f"Unknown number kind '{kind}'") from None


_INTEGER_BITS = {NumberKind.BYTE: 8, NumberKind.INT: 32, NumberKind.LONG: 64}

_KIND_ALIASES = {
    "byte": NumberKind.BYTE,
    "int8": NumberKind.BYTE,
    "int": NumberKind.INT,
    "int32": NumberKind.INT,
    "integer": NumberKind.INT,
    "long": NumberKind.LONG,
    "int64": NumberKind.LONG,
    "float": NumberKind.FLOAT,
    "float32": NumberKind.FLOAT,
    "double": NumberKind.DOUBLE,
    "float64": NumberKind.DOUBLE,
}


def _wrap(n: int, bits: int) -> int:
    n &= (1 << bits) - 1
    return n - (1 << bits) if n >> (bits - 1) else n


def _saturate(x: float, bits: int) -> int:
    if math.isnan(x):
        return 0
    lo, hi = -(1 << (bits - 1)), (1 << (bits - 1)) - 1
    if x <= lo:
        return lo
    if x >= hi:
        return hi
    return int(x)


def _to_double(value: Union[int, float]) -> float:
    try:
        return float(value)
    except OverflowError:
        return math.inf if value > 0 else -math.inf


def _to_float32(value: Union[int, float]) -> float:
    x = _to_double(value)
    try:
        return struct.unpack("f", struct.pack("f", x))[0]
    except OverflowError:
        return math.inf if x > 0 else -math.inf


def _check_precision(value: float, kind: NumberKind, policy: str) -> None:
    if policy == "ignore" or not math.isfinite(value) or abs(value) <= SAFE_INTEGER_LIMIT:
        return
    msg = (
        f"Narrowing {value!r} to {kind.value}: magnitude exceeds 2**53, "
        "the original integer may already have lost precision"
    )
    if policy == "error":
        raise FormatError(msg)
    logger.warning(msg)


def narrow_number(value: Any, kind: Union[NumberKind, str, type], *, policy: Optional[str] = None) -> Any:
    """Narrow a decoded number to ``kind``; non-numeric values pass through unchanged."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return value

    kind = NumberKind.parse(kind)
    if kind is NumberKind.DOUBLE:
        return _to_double(value)
    if kind is NumberKind.FLOAT:
        return _to_float32(value)

    bits = _INTEGER_BITS[kind]
    if isinstance(value, int):
        return _wrap(value, bits)

    _check_precision(value, kind, policy or settings.precision_policy)
    if kind is NumberKind.BYTE:
        return _wrap(_saturate(value, 32), 8)
    return _saturate(value, bits)


def narrow_numbers(values: Iterable[Any], kind: Union[NumberKind, str, type], *, policy: Optional[str] = None):
    """Narrow every element of a decoded collection, keeping list/tuple/set types."""
    kind = NumberKind.parse(kind)
    narrowed = [narrow_number(v, kind, policy=policy) for v in values]
    if isinstance(values, (tuple, set, frozenset)):
        return type(values)(narrowed)
    return narrowed


def narrow_properties(
    values: Mapping[str, Any],
    kinds: Mapping[str, Union[NumberKind, str, type]],
    *,
    policy: Optional[str] = None,
) -> Dict[str, Any]:
    """Narrow a decoded property map against a ``key -> kind`` schema."""
    out: Dict[str, Any] = {}
    for key, value in values.items():
        kind = kinds.get(key)
        if kind is None:
            out[key] = value
        elif isinstance(value, (list, tuple, set, frozenset)):
            out[key] = narrow_numbers(value, kind, policy=policy)
        else:
            out[key] = narrow_number(value, kind, policy=policy)
    return out
