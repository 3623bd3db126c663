"""JSON codec for graph elements, identifiers and timestamps."""

from .base import EncodeContext, Serializer
from .elements import EdgeSerializer, ElementSerializer, VertexSerializer
from .facade import JsonCodec, default_codec, from_json, register_module, to_json
from .identifiers import IdSerializer, write_id_field
from .registry import CodecModule, CodecTable, builtin_module, default_table
from .scalars import (
    NumberKind,
    TimestampSerializer,
    decode_timestamp,
    encode_timestamp,
    narrow_number,
    narrow_numbers,
    narrow_properties,
)
from .writer import JsonWriter, TypeTagger, WrapperArrayTagger

__all__ = [
    "JsonCodec",
    "JsonWriter",
    "TypeTagger",
    "WrapperArrayTagger",
    "EncodeContext",
    "Serializer",
    "IdSerializer",
    "ElementSerializer",
    "VertexSerializer",
    "EdgeSerializer",
    "TimestampSerializer",
    "CodecModule",
    "CodecTable",
    "builtin_module",
    "default_table",
    "default_codec",
    "register_module",
    "to_json",
    "from_json",
    "write_id_field",
    "NumberKind",
    "encode_timestamp",
    "decode_timestamp",
    "narrow_number",
    "narrow_numbers",
    "narrow_properties",
]
