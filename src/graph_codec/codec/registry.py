"""
Codec modules and the immutable codec table.

A ``CodecModule`` collects serializers and deserializers while the process
starts up; a ``CodecTable`` freezes them. Lookups go by exact runtime type.
Tables are never mutated, so a table can be shared across threads once built.
"""

from __future__ import annotations

import logging
from datetime import datetime
from functools import lru_cache
from types import MappingProxyType
from typing import Any, Callable, Dict, Iterable, Mapping, Optional

from ..structure.elements import Edge, Element, Vertex
from ..structure.ids import EdgeId, NumericId, TextualId
from .base import Serializer
from .elements import EdgeSerializer, VertexSerializer, decode_edge, decode_element, decode_vertex
from .identifiers import IdSerializer
from .scalars import TimestampSerializer, decode_timestamp

logger = logging.getLogger(__name__)

Deserializer = Callable[[Any], Any]


class CodecModule:
    """A named bundle of per-type codecs; the last registration for a type wins."""

    def __init__(self, name: str):
        self.name = name
        self.serializers: Dict[type, Serializer] = {}
        self.deserializers: Dict[type, Deserializer] = {}

    def add_serializer(self, cls: type, serializer: Serializer) -> "CodecModule":
        if cls in self.serializers:
            logger.debug(f"[{self.name}] replacing serializer for {cls.__name__}")
        self.serializers[cls] = serializer
        return self

    def add_deserializer(self, cls: type, deserializer: Deserializer) -> "CodecModule":
        if cls in self.deserializers:
            logger.debug(f"[{self.name}] replacing deserializer for {cls.__name__}")
        self.deserializers[cls] = deserializer
        return self


class CodecTable:
    """Frozen type -> codec mapping built from one or more modules."""

    def __init__(self, modules: Iterable[CodecModule] = ()):
        modules = tuple(modules)
        serializers: Dict[type, Serializer] = {}
        deserializers: Dict[type, Deserializer] = {}
        names = []
        for module in modules:
            serializers.update(module.serializers)
            deserializers.update(module.deserializers)
            names.append(module.name)
        self._modules = modules
        self._serializers: Mapping[type, Serializer] = MappingProxyType(serializers)
        self._deserializers: Mapping[type, Deserializer] = MappingProxyType(deserializers)
        self.module_names = tuple(names)
        logger.debug(
            f"Codec table built from {list(names)}: "
            f"{len(serializers)} serializers, {len(deserializers)} deserializers"
        )

    @property
    def serializers(self) -> Mapping[type, Serializer]:
        return self._serializers

    @property
    def deserializers(self) -> Mapping[type, Deserializer]:
        return self._deserializers

    def serializer_for(self, cls: type) -> Optional[Serializer]:
        return self._serializers.get(cls)

    def deserializer_for(self, cls: Any) -> Optional[Deserializer]:
        try:
            return self._deserializers.get(cls)
        except TypeError:
            # Unhashable shape descriptors have no registered deserializer.
            return None

    def with_module(self, module: CodecModule) -> "CodecTable":
        """A new table with ``module`` layered on top of this one."""
        return CodecTable(self._modules + (module,))


def builtin_module() -> CodecModule:
    module = CodecModule("graph")

    module.add_serializer(datetime, TimestampSerializer())
    module.add_deserializer(datetime, decode_timestamp)

    module.add_serializer(TextualId, IdSerializer(TextualId))
    module.add_serializer(NumericId, IdSerializer(NumericId))
    module.add_serializer(EdgeId, IdSerializer(EdgeId))

    module.add_serializer(Vertex, VertexSerializer())
    module.add_serializer(Edge, EdgeSerializer())
    module.add_deserializer(Vertex, decode_vertex)
    module.add_deserializer(Edge, decode_edge)
    module.add_deserializer(Element, decode_element)
    return module


@lru_cache(maxsize=1)
def default_table() -> CodecTable:
    """The builtin codec table, built once on first use."""
    return CodecTable((builtin_module(),))
