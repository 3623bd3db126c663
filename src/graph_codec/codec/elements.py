"""
Vertex and edge codec.

Field order is fixed: id, label, type, the four endpoint fields for edges,
then properties in the element's own iteration order. Golden files compare
byte-for-byte against this order.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Generic, TypeVar

from ..errors import EncodeError, FormatError
from ..structure.elements import Edge, Element, Property, Vertex
from .base import EncodeContext, Serializer
from .identifiers import write_id_field
from .writer import JsonWriter

logger = logging.getLogger(__name__)

E = TypeVar("E", bound=Element)


class ElementSerializer(Serializer, Generic[E]):
    def write_properties_field(
        self, element: Element, properties: Dict[str, Property], writer: JsonWriter, ctx: EncodeContext
    ) -> None:
        writer.write_field_name("properties")
        writer.write_start_object()

        for prop in properties.values():
            key, val = prop.key, prop.value
            try:
                writer.write_field_name(key)
                ctx.write_value(val)
            except Exception as e:
                raise EncodeError(
                    f"Failed to serialize property({key}: {val!r}) for {element.type_name} '{element.id}'",
                    e,
                    key=key,
                    value=val,
                    element=element,
                ) from e

        writer.write_end_object()

    def write_header(self, element: E, writer: JsonWriter) -> None:
        write_id_field("id", element.id, writer)
        writer.write_string_field("label", element.label)
        writer.write_string_field("type", element.type_name)


class VertexSerializer(ElementSerializer[Vertex]):
    handled_type = Vertex

    def serialize(self, vertex: Vertex, writer: JsonWriter, ctx: EncodeContext) -> None:
        writer.write_start_object()

        self.write_header(vertex, writer)
        self.write_properties_field(vertex, vertex.properties, writer, ctx)

        writer.write_end_object()


class EdgeSerializer(ElementSerializer[Edge]):
    handled_type = Edge

    def serialize(self, edge: Edge, writer: JsonWriter, ctx: EncodeContext) -> None:
        writer.write_start_object()

        self.write_header(edge, writer)

        write_id_field("outV", edge.out_id, writer)
        writer.write_string_field("outVLabel", edge.out_label)
        write_id_field("inV", edge.in_id, writer)
        writer.write_string_field("inVLabel", edge.in_label)

        self.write_properties_field(edge, edge.properties, writer, ctx)

        writer.write_end_object()


def decode_vertex(tree: Any) -> Vertex:
    return Vertex.from_dict(tree)


def decode_edge(tree: Any) -> Edge:
    return Edge.from_dict(tree)


def decode_element(tree: Any) -> Element:
    """Pick Vertex or Edge from the document's ``type`` field."""
    kind = tree.get("type") if isinstance(tree, dict) else None
    if kind == "vertex":
        return Vertex.from_dict(tree)
    if kind == "edge":
        return Edge.from_dict(tree)
    logger.debug(f"Can't tell element kind of {type(tree).__name__} document")
    raise FormatError(f"Unknown element type '{kind}'")
