"""
Push-style JSON generator.

The element codec drives this writer with start/end/field-name/scalar calls,
so field order is exactly the call order. Scalar literals are rendered by the
standard library ``json`` module; the writer only tracks structure.
"""

from __future__ import annotations

import io
import json
import math
from dataclasses import dataclass
from typing import Any, Mapping, Optional, Protocol, TextIO

from ..errors import EncodeError


@dataclass
class _Frame:
    kind: str  # "object" | "array"
    count: int = 0
    awaiting_value: bool = False


class JsonWriter:
    """Writes JSON text incrementally to a stream (an in-memory buffer by default).

    Nothing is rolled back on failure: whatever was pushed before a fault stays
    in the stream. Callers that need atomic output should write to the default
    buffer and only commit ``getvalue()`` once encoding succeeded.
    """

    def __init__(
        self,
        stream: Optional[TextIO] = None,
        *,
        indent: Optional[int] = None,
        ensure_ascii: bool = False,
        nan_as_string: bool = True,
    ):
        self._stream = stream if stream is not None else io.StringIO()
        self._owns_stream = stream is None
        self.indent = indent
        self.ensure_ascii = ensure_ascii
        self.nan_as_string = nan_as_string

        self._stack: list[_Frame] = []
        self._root_written = False

        self._item_separator = "," if indent is not None else ", "
        self._key_separator = ": "

    # --- structure ---

    def write_start_object(self) -> None:
        self._before_value()
        self._write("{")
        self._stack.append(_Frame("object"))

    def write_end_object(self) -> None:
        frame = self._top("object")
        if frame.awaiting_value:
            raise EncodeError("Can't close an object while a field value is pending")
        self._close(frame, "}")

    def write_start_array(self) -> None:
        self._before_value()
        self._write("[")
        self._stack.append(_Frame("array"))

    def write_end_array(self) -> None:
        self._close(self._top("array"), "]")

    def write_field_name(self, name: str) -> None:
        if not isinstance(name, str):
            raise EncodeError(f"Field names must be strings, got {type(name).__name__}")
        frame = self._top("object")
        if frame.awaiting_value:
            raise EncodeError(f"Expected a value, got field name '{name}'")
        self._separate(frame)
        self._write(json.dumps(name, ensure_ascii=self.ensure_ascii))
        self._write(self._key_separator)
        frame.count += 1
        frame.awaiting_value = True

    # --- scalars ---

    def write_string(self, value: str) -> None:
        self._before_value()
        self._write(json.dumps(value, ensure_ascii=self.ensure_ascii))

    def write_number(self, value: Any) -> None:
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise EncodeError(f"Not a number: {value!r}")
        if isinstance(value, float) and not math.isfinite(value):
            if not self.nan_as_string:
                raise EncodeError(f"Out of range float value {value!r}")
            self.write_string(json.dumps(value))
            return
        self._before_value()
        self._write(int.__repr__(value) if isinstance(value, int) else float.__repr__(value))

    def write_bool(self, value: bool) -> None:
        self._before_value()
        self._write("true" if value else "false")

    def write_null(self) -> None:
        self._before_value()
        self._write("null")

    def write_string_field(self, name: str, value: str) -> None:
        self.write_field_name(name)
        self.write_string(value)

    # --- output ---

    @property
    def complete(self) -> bool:
        return self._root_written and not self._stack

    def getvalue(self) -> str:
        if not self._owns_stream:
            raise EncodeError("getvalue() is only available for the internal buffer")
        return self._stream.getvalue()  # type: ignore[attr-defined]

    # --- internals ---

    def _write(self, text: str) -> None:
        self._stream.write(text)

    def _newline(self, depth: int) -> None:
        self._write("\n" + " " * (self.indent * depth))

    def _separate(self, frame: _Frame) -> None:
        if frame.count:
            self._write(self._item_separator)
        if self.indent is not None:
            self._newline(len(self._stack))

    def _top(self, kind: str) -> _Frame:
        if not self._stack or self._stack[-1].kind != kind:
            raise EncodeError(f"Not inside an {kind}")
        return self._stack[-1]

    def _close(self, frame: _Frame, token: str) -> None:
        self._stack.pop()
        if frame.count and self.indent is not None:
            self._newline(len(self._stack))
        self._write(token)

    def _before_value(self) -> None:
        if not self._stack:
            if self._root_written:
                raise EncodeError("A JSON document holds a single root value")
            self._root_written = True
            return
        frame = self._stack[-1]
        if frame.kind == "object":
            if not frame.awaiting_value:
                raise EncodeError("Expected a field name before the value")
            frame.awaiting_value = False
        else:
            self._separate(frame)
            frame.count += 1


class TypeTagger(Protocol):
    """Embeds a type discriminator around a scalar in polymorphic slots."""

    def write_type_prefix_for_scalar(self, value: Any, writer: JsonWriter) -> None: ...

    def write_type_suffix_for_scalar(self, value: Any, writer: JsonWriter) -> None: ...


class WrapperArrayTagger:
    """Writes tagged scalars as ``["<TypeName>", <scalar>]``."""

    def __init__(self, aliases: Mapping[type, str] | None = None):
        self.aliases = dict(aliases or {})

    def type_id(self, value: Any) -> str:
        cls = type(value)
        return self.aliases.get(cls, cls.__name__)

    def write_type_prefix_for_scalar(self, value: Any, writer: JsonWriter) -> None:
        writer.write_start_array()
        writer.write_string(self.type_id(value))

    def write_type_suffix_for_scalar(self, value: Any, writer: JsonWriter) -> None:
        writer.write_end_array()
