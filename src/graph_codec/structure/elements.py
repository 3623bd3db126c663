"""
Vertex and edge views consumed by the element codec.

Elements own an ordered property map; properties keep a back-reference to
their element so error messages can name the owner.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, ClassVar, Dict, Optional

from ..errors import FormatError
from .ids import Id, IdGenerator


@dataclass
class Property:
    """A key/value attribute attached to exactly one element."""
    key: str
    value: Any
    element: Optional["Element"] = field(default=None, repr=False, compare=False)


@dataclass
class Element:
    """Base vertex/edge capability: id, label and ordered properties."""
    id: Id
    label: str
    properties: Dict[str, Property] = field(default_factory=dict)

    type_name: ClassVar[str] = "element"

    def __post_init__(self) -> None:
        if not isinstance(self.id, Id):
            self.id = IdGenerator.of(self.id)
        raw = self.properties if self.properties is not None else {}
        self.properties = {}
        for key, value in raw.items():
            if isinstance(value, Property):
                self.set_property(value.key, value.value)
            else:
                self.set_property(key, value)

    def set_property(self, key: str, value: Any) -> Property:
        """Set (or replace) a property, keeping first-insertion order."""
        prop = Property(key=key, value=value, element=self)
        self.properties[key] = prop
        return prop

    def value(self, key: str, default: Any = None) -> Any:
        prop = self.properties.get(key)
        return default if prop is None else prop.value

    def values(self) -> Dict[str, Any]:
        return {key: prop.value for key, prop in self.properties.items()}

    def __str__(self) -> str:
        return f"{self.type_name}[{self.id}]"

    @classmethod
    def _check_document(cls, data: Any) -> Mapping[str, Any]:
        if not isinstance(data, Mapping):
            raise FormatError(f"Expected a JSON object for {cls.type_name}, got {type(data).__name__}")
        kind = data.get("type", cls.type_name)
        if kind != cls.type_name:
            raise FormatError(f"Expected type '{cls.type_name}', got '{kind}'")
        props = data.get("properties", {})
        if props is None:
            props = {}
        if not isinstance(props, Mapping):
            raise FormatError(f"Field 'properties' of {cls.type_name} must be an object")
        return data

    @staticmethod
    def _required(data: Mapping[str, Any], name: str) -> Any:
        if name not in data:
            raise FormatError(f"Missing required field '{name}'")
        return data[name]

    @staticmethod
    def _id_of(data: Mapping[str, Any], name: str) -> Id:
        raw = Element._required(data, name)
        try:
            return IdGenerator.of(raw)
        except (TypeError, ValueError) as e:
            raise FormatError(f"Invalid id in field '{name}': {e}") from e

    @staticmethod
    def _label_of(data: Mapping[str, Any], name: str) -> str:
        label = Element._required(data, name)
        if not isinstance(label, str):
            raise FormatError(f"Field '{name}' must be a string, got {type(label).__name__}")
        return label


@dataclass
class Vertex(Element):
    type_name: ClassVar[str] = "vertex"

    @classmethod
    def from_dict(cls, data: Any) -> "Vertex":
        """Rebuild a vertex from a decoded JSON object (any field order)."""
        data = cls._check_document(data)
        return cls(
            id=cls._id_of(data, "id"),
            label=cls._label_of(data, "label"),
            properties=dict(data.get("properties") or {}),
        )


@dataclass
class Edge(Element):
    # Endpoints are only projected (id and label) when encoding.
    out_vertex: Vertex = field(default=None, kw_only=True)  # type: ignore[assignment]
    in_vertex: Vertex = field(default=None, kw_only=True)  # type: ignore[assignment]

    type_name: ClassVar[str] = "edge"

    def __post_init__(self) -> None:
        if self.out_vertex is None or self.in_vertex is None:
            raise ValueError("Edge requires both out_vertex and in_vertex")
        super().__post_init__()

    @property
    def out_id(self) -> Id:
        return self.out_vertex.id

    @property
    def out_label(self) -> str:
        return self.out_vertex.label

    @property
    def in_id(self) -> Id:
        return self.in_vertex.id

    @property
    def in_label(self) -> str:
        return self.in_vertex.label

    @classmethod
    def from_dict(cls, data: Any) -> "Edge":
        """Rebuild an edge from a decoded JSON object (any field order)."""
        data = cls._check_document(data)
        return cls(
            id=cls._id_of(data, "id"),
            label=cls._label_of(data, "label"),
            properties=dict(data.get("properties") or {}),
            out_vertex=Vertex(cls._id_of(data, "outV"), cls._label_of(data, "outVLabel")),
            in_vertex=Vertex(cls._id_of(data, "inV"), cls._label_of(data, "inVLabel")),
        )
