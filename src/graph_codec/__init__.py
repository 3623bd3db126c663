"""
graph-codec

JSON encoding of graph vertices, edges, identifiers and timestamps that keeps
the type information plain structural JSON would lose.
"""

from .codec import (
    CodecModule,
    JsonCodec,
    NumberKind,
    decode_timestamp,
    encode_timestamp,
    from_json,
    narrow_number,
    narrow_numbers,
    narrow_properties,
    register_module,
    to_json,
)
from .errors import CodecError, DecodeError, EncodeError, FormatError
from .structure import Edge, EdgeId, Element, Id, IdGenerator, NumericId, Property, TextualId, Vertex

__version__ = "0.1.0"

__all__ = [
    "__version__",
    "to_json",
    "from_json",
    "register_module",
    "JsonCodec",
    "CodecModule",
    "NumberKind",
    "encode_timestamp",
    "decode_timestamp",
    "narrow_number",
    "narrow_numbers",
    "narrow_properties",
    "CodecError",
    "FormatError",
    "EncodeError",
    "DecodeError",
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
