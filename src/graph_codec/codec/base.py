"""
Serializer contract and per-call encode context.

The context carries everything one encode call needs (the codec table, the
writer, an optional type tagger) so serializers hold no shared mutable state.
"""

from __future__ import annotations

import dataclasses
from abc import ABC, abstractmethod
from collections.abc import Mapping
from enum import Enum
from typing import TYPE_CHECKING, Any, Optional

from pydantic import BaseModel

from ..errors import EncodeError
from ..structure.ids import Id
from .writer import JsonWriter, TypeTagger

if TYPE_CHECKING:
    from .registry import CodecTable


class Serializer(ABC):
    """Writes values of one concrete type through a JsonWriter."""

    handled_type: type = object

    @abstractmethod
    def serialize(self, value: Any, writer: JsonWriter, ctx: "EncodeContext") -> None:
        pass

    def serialize_with_type(
        self, value: Any, writer: JsonWriter, ctx: "EncodeContext", tagger: TypeTagger
    ) -> None:
        # Serializers that don't embed a type id write the plain form.
        self.serialize(value, writer, ctx)


class EncodeContext:
    """Dispatches values to registered serializers or the generic encoding."""

    def __init__(self, table: "CodecTable", writer: JsonWriter, tagger: Optional[TypeTagger] = None):
        self.table = table
        self.writer = writer
        self.tagger = tagger

    def find_value_serializer(self, cls: type) -> Optional[Serializer]:
        return self.table.serializer_for(cls)

    def write_value(self, value: Any) -> None:
        if value is None:
            self.writer.write_null()
            return

        serializer = self.find_value_serializer(type(value))
        if serializer is None:
            self._write_generic(value)
        elif self.tagger is not None:
            serializer.serialize_with_type(value, self.writer, self, self.tagger)
        else:
            serializer.serialize(value, self.writer, self)

    def _write_generic(self, value: Any) -> None:
        writer = self.writer
        if isinstance(value, Enum):
            self.write_value(value.value)
        elif isinstance(value, str):
            writer.write_string(value)
        elif isinstance(value, bool):
            writer.write_bool(value)
        elif isinstance(value, (int, float)):
            writer.write_number(value)
        elif isinstance(value, Mapping):
            writer.write_start_object()
            for key, item in value.items():
                writer.write_field_name(_field_name(key))
                self.write_value(item)
            writer.write_end_object()
        elif isinstance(value, (list, tuple, set, frozenset)):
            writer.write_start_array()
            for item in value:
                self.write_value(item)
            writer.write_end_array()
        elif isinstance(value, BaseModel):
            self.write_value(value.model_dump())
        elif dataclasses.is_dataclass(value) and not isinstance(value, type):
            writer.write_start_object()
            for f in dataclasses.fields(value):
                writer.write_field_name(f.name)
                self.write_value(getattr(value, f.name))
            writer.write_end_object()
        else:
            raise EncodeError(f"No serializer for type {type(value).__name__}")


def _field_name(key: Any) -> str:
    if isinstance(key, str):
        return key
    if isinstance(key, Id):
        return key.as_text()
    if isinstance(key, int) and not isinstance(key, bool):
        return str(key)
    raise EncodeError(f"Unsupported mapping key type {type(key).__name__}")
