"""
Identifier variants for graph elements.

An identifier is either numeric (a signed 64-bit integer) or textual. The
variant is always asked for through ``is_number()``; the codec never guesses
it from the content.
"""

from __future__ import annotations

import re
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Union

LONG_MIN = -(2**63)
LONG_MAX = 2**63 - 1

EDGE_ID_SEPARATOR = ">>"
_NUMERIC_PREFIX = "L"
_TEXTUAL_PREFIX = "S"
_CANONICAL_LONG = re.compile(r"0|-?[1-9][0-9]*")


class Id(ABC):
    """Handle to a vertex or an edge."""

    @abstractmethod
    def is_number(self) -> bool:
        """True for the numeric variant."""

    @abstractmethod
    def as_long(self) -> int:
        pass

    @abstractmethod
    def as_text(self) -> str:
        pass

    def as_object(self) -> Union[int, str]:
        return self.as_long() if self.is_number() else self.as_text()

    def __lt__(self, other: Any) -> bool:
        if not isinstance(other, Id):
            return NotImplemented
        return self.as_text() < other.as_text()

    def __str__(self) -> str:
        return self.as_text()


@dataclass(frozen=True, eq=True)
class NumericId(Id):
    value: int

    def __post_init__(self) -> None:
        if isinstance(self.value, bool) or not isinstance(self.value, int):
            raise TypeError(f"Numeric id requires an int, got {type(self.value).__name__}")
        if not LONG_MIN <= self.value <= LONG_MAX:
            raise ValueError(f"Numeric id {self.value} is out of the signed 64-bit range")

    def is_number(self) -> bool:
        return True

    def as_long(self) -> int:
        return self.value

    def as_text(self) -> str:
        return str(self.value)


@dataclass(frozen=True, eq=True)
class TextualId(Id):
    value: str

    def __post_init__(self) -> None:
        if not isinstance(self.value, str):
            raise TypeError(f"Textual id requires a str, got {type(self.value).__name__}")

    def is_number(self) -> bool:
        return False

    def as_long(self) -> int:
        try:
            return int(self.value)
        except ValueError:
            raise ValueError(f"Textual id '{self.value}' is not a number") from None

    def as_text(self) -> str:
        return self.value


def _prefixed(vertex_id: Id) -> str:
    prefix = _NUMERIC_PREFIX if vertex_id.is_number() else _TEXTUAL_PREFIX
    return f"{prefix}{vertex_id.as_text()}"


def _unprefixed(part: str) -> Id:
    if part.startswith(_NUMERIC_PREFIX):
        digits = part[1:]
        if not _CANONICAL_LONG.fullmatch(digits):
            raise ValueError(f"Invalid numeric vertex id part '{part}' in edge id")
        return NumericId(int(digits))
    if part.startswith(_TEXTUAL_PREFIX):
        return TextualId(part[1:])
    raise ValueError(f"Invalid vertex id part '{part}' in edge id")


@dataclass(frozen=True, eq=True)
class EdgeId(Id):
    """Composite textual id of an edge.

    Rendered as ``<owner>>><label>>><other>`` where each vertex id carries an
    ``L`` (numeric) or ``S`` (textual) prefix, e.g. ``S1:person>>knows>>S2:person``.
    Non-empty sort values are placed between the label and the other vertex.
    """

    owner_vertex: Id
    label: str
    other_vertex: Id
    sort_values: str = ""

    def is_number(self) -> bool:
        return False

    def as_long(self) -> int:
        raise ValueError(f"Edge id '{self.as_text()}' is not a number")

    def as_text(self) -> str:
        parts = [_prefixed(self.owner_vertex), self.label]
        if self.sort_values:
            parts.append(self.sort_values)
        parts.append(_prefixed(self.other_vertex))
        return EDGE_ID_SEPARATOR.join(parts)

    @classmethod
    def parse(cls, text: str) -> "EdgeId":
        parts = text.split(EDGE_ID_SEPARATOR)
        if len(parts) == 3:
            owner, label, other = parts
            sort_values = ""
        elif len(parts) == 4:
            owner, label, sort_values, other = parts
            if not sort_values:
                raise ValueError(f"Empty sort values in edge id '{text}'")
        else:
            raise ValueError(f"Invalid edge id '{text}'")
        return cls(_unprefixed(owner), label, _unprefixed(other), sort_values)


class IdGenerator:
    """Rebuilds identifiers from decoded scalars."""

    @staticmethod
    def of(value: Any) -> Id:
        if isinstance(value, Id):
            return value
        if isinstance(value, bool):
            raise TypeError("Can't build an id from a bool")
        if isinstance(value, int):
            return NumericId(value)
        if isinstance(value, str):
            if EDGE_ID_SEPARATOR in value:
                try:
                    edge_id = EdgeId.parse(value)
                except ValueError:
                    edge_id = None
                # Only a canonical edge id text survives re-encoding unchanged.
                if edge_id is not None and edge_id.as_text() == value:
                    return edge_id
            return TextualId(value)
        raise TypeError(f"Can't build an id from {type(value).__name__}")
