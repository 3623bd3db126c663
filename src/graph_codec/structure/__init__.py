"""Graph-domain views handled by the codec."""

from .elements import Edge, Element, Property, Vertex
from .ids import EdgeId, Id, IdGenerator, NumericId, TextualId

__all__ = [
    "Id",
    "NumericId",
    "TextualId",
    "EdgeId",
    "IdGenerator",
    "Element",
    "Vertex",
    "Edge",
    "Property",
]
