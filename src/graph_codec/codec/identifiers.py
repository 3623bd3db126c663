"""
Identifier codec.

Numeric ids are written as JSON numbers and textual ids as JSON strings. In
polymorphic slots (property values encoded with a type tagger) the scalar is
wrapped by the tagger so a reader can tell which id variant produced it.
Decoding back into an ``Id`` is left to ``IdGenerator.of``.
"""

from __future__ import annotations

from typing import Type

from ..structure.ids import Id
from .base import EncodeContext, Serializer
from .writer import JsonWriter, TypeTagger


def write_id(id: Id, writer: JsonWriter) -> None:
    if id.is_number():
        writer.write_number(id.as_long())
    else:
        writer.write_string(id.as_text())


def write_id_field(name: str, id: Id, writer: JsonWriter) -> None:
    """Named field holding the plain (untagged) id scalar."""
    writer.write_field_name(name)
    write_id(id, writer)


class IdSerializer(Serializer):
    def __init__(self, handled_type: Type[Id] = Id):
        self.handled_type = handled_type

    def serialize(self, value: Id, writer: JsonWriter, ctx: EncodeContext) -> None:
        write_id(value, writer)

    def serialize_with_type(self, value: Id, writer: JsonWriter, ctx: EncodeContext, tagger: TypeTagger) -> None:
        tagger.write_type_prefix_for_scalar(value, writer)
        self.serialize(value, writer, ctx)
        tagger.write_type_suffix_for_scalar(value, writer)
