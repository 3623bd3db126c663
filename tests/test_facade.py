"""Tests for the codec table, registration and the to_json/from_json facade."""

from __future__ import annotations

import json
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional

import pytest
from pydantic import BaseModel

import graph_codec
from graph_codec.codec import (
    CodecModule,
    CodecTable,
    JsonCodec,
    NumberKind,
    Serializer,
    builtin_module,
    default_table,
    narrow_number,
)
from graph_codec.codec import facade
from graph_codec.errors import DecodeError, EncodeError
from graph_codec.structure import Edge, Element, NumericId, TextualId, Vertex

from .conftest import EDGE_JSON, VERTEX_JSON


class Point(BaseModel):
    x: int
    y: int


@dataclass
class Span:
    start: datetime
    end: Optional[datetime] = None


class Color(Enum):
    RED = "red"


class Money:
    def __init__(self, cents: int):
        self.cents = cents


class MoneySerializer(Serializer):
    handled_type = Money

    def serialize(self, value, writer, ctx) -> None:
        writer.write_string(f"{value.cents / 100:.2f}")


class BrokenMoneySerializer(Serializer):
    handled_type = Money

    def serialize(self, value, writer, ctx) -> None:
        raise KeyError("currency")


class ShoutingVertexSerializer(Serializer):
    handled_type = Vertex

    def serialize(self, value, writer, ctx) -> None:
        writer.write_string(value.label.upper())


# ---------------------------------------------------------------------------
# Registry
# ---------------------------------------------------------------------------


class TestCodecTable:
    def test_default_table_is_built_once(self) -> None:
        assert default_table() is default_table()

    def test_builtin_registrations(self) -> None:
        table = default_table()
        for cls in (datetime, NumericId, TextualId, Vertex, Edge):
            assert table.serializer_for(cls) is not None
        for cls in (datetime, Vertex, Edge, Element):
            assert table.deserializer_for(cls) is not None

    def test_lookup_is_by_exact_type(self) -> None:
        class SpecialVertex(Vertex):
            pass

        assert default_table().serializer_for(SpecialVertex) is None

    def test_tables_are_read_only(self) -> None:
        with pytest.raises(TypeError):
            default_table().serializers[Money] = MoneySerializer()  # type: ignore[index]

    def test_last_registration_wins(self) -> None:
        first, second = MoneySerializer(), MoneySerializer()
        module = CodecModule("money").add_serializer(Money, first).add_serializer(Money, second)
        assert CodecTable([module]).serializer_for(Money) is second

    def test_with_module_layers_on_top(self) -> None:
        base = CodecTable([builtin_module()])
        layered = base.with_module(CodecModule("shout").add_serializer(Vertex, ShoutingVertexSerializer()))
        assert isinstance(layered.serializer_for(Vertex), ShoutingVertexSerializer)
        assert not isinstance(base.serializer_for(Vertex), ShoutingVertexSerializer)
        assert layered.module_names == ("graph", "shout")

    def test_table_accepts_generators(self) -> None:
        table = CodecTable(m for m in [builtin_module()])
        assert table.serializer_for(Vertex) is not None
        assert table.with_module(CodecModule("x")).serializer_for(Vertex) is not None

    def test_unhashable_target_has_no_deserializer(self) -> None:
        assert default_table().deserializer_for([Vertex]) is None


# ---------------------------------------------------------------------------
# to_json
# ---------------------------------------------------------------------------


class TestToJson:
    def test_module_level_entry_point(self, alice: Vertex) -> None:
        assert graph_codec.to_json(alice) == VERTEX_JSON

    def test_list_of_elements(self, alice: Vertex, knows: Edge) -> None:
        assert graph_codec.to_json([alice, knows]) == f"[{VERTEX_JSON}, {EDGE_JSON}]"

    def test_timestamp(self) -> None:
        assert graph_codec.to_json(datetime(2021, 1, 1, tzinfo=timezone.utc)) == "1609459200000"

    def test_ids(self) -> None:
        assert graph_codec.to_json(NumericId(5)) == "5"
        assert graph_codec.to_json(TextualId("5")) == '"5"'

    def test_generic_fallbacks(self) -> None:
        assert graph_codec.to_json(Point(x=1, y=2)) == '{"x": 1, "y": 2}'
        assert graph_codec.to_json(Color.RED) == '"red"'
        assert graph_codec.to_json((1, "a", None, False)) == '[1, "a", null, false]'
        assert graph_codec.to_json({1: "a"}) == '{"1": "a"}'
        assert graph_codec.to_json(frozenset({3})) == "[3]"

    def test_dataclass_uses_registered_codecs_for_fields(self) -> None:
        span = Span(start=datetime(1970, 1, 1, 0, 0, 2, tzinfo=timezone.utc))
        assert graph_codec.to_json(span) == '{"start": 2000, "end": null}'

    def test_unknown_type(self) -> None:
        with pytest.raises(EncodeError, match="No serializer for type Money"):
            graph_codec.to_json(Money(100))

    def test_custom_module(self) -> None:
        codec = JsonCodec().with_module(CodecModule("money").add_serializer(Money, MoneySerializer()))
        assert codec.to_json({"price": Money(1999)}) == '{"price": "19.99"}'

    def test_register_module_affects_module_level_codec(self, alice: Vertex) -> None:
        graph_codec.register_module(CodecModule("shout").add_serializer(Vertex, ShoutingVertexSerializer()))
        assert graph_codec.to_json(alice) == '"PERSON"'

    def test_nan(self) -> None:
        assert graph_codec.to_json(float("nan")) == '"NaN"'
        with pytest.raises(EncodeError):
            JsonCodec(nan_as_string=False).to_json(float("nan"))

    def test_indent(self, alice: Vertex) -> None:
        assert JsonCodec(indent=2).to_json(alice) == json.dumps(json.loads(VERTEX_JSON), indent=2)

    def test_any_fault_becomes_encode_error(self) -> None:
        codec = JsonCodec().with_module(CodecModule("broken").add_serializer(Money, BrokenMoneySerializer()))
        with pytest.raises(EncodeError) as info:
            codec.to_json(Money(1))
        assert isinstance(info.value.cause, KeyError)

    def test_self_reference_becomes_encode_error(self) -> None:
        loop: list = []
        loop.append(loop)
        with pytest.raises(EncodeError):
            graph_codec.to_json(loop)

    def test_from_settings(self, monkeypatch) -> None:
        from graph_codec.settings import CodecSettings

        monkeypatch.setenv("GRAPH_CODEC_INDENT", "4")
        codec = JsonCodec.from_settings(CodecSettings())
        assert codec.indent == 4
        assert codec.table is default_table()


# ---------------------------------------------------------------------------
# from_json
# ---------------------------------------------------------------------------


class TestFromJson:
    @pytest.mark.parametrize("text", ["", "   ", None])
    @pytest.mark.parametrize("target", [Vertex, int, list[Edge], Any])
    def test_empty_input_is_decode_error(self, text, target) -> None:
        with pytest.raises(DecodeError, match="can't be empty"):
            graph_codec.from_json(text, target)

    def test_non_text_input(self) -> None:
        with pytest.raises(DecodeError):
            graph_codec.from_json(42, int)  # type: ignore[arg-type]

    def test_malformed(self) -> None:
        with pytest.raises(DecodeError) as info:
            graph_codec.from_json("{bad", Vertex)
        assert isinstance(info.value.cause, json.JSONDecodeError)

    def test_untyped(self) -> None:
        assert graph_codec.from_json(VERTEX_JSON)["properties"] == {"name": "alice", "age": 30}

    def test_deep_nesting_is_decode_error(self) -> None:
        depth = 100000
        with pytest.raises(DecodeError):
            graph_codec.from_json("[" * depth + "]" * depth, list)

    def test_bytes(self) -> None:
        assert graph_codec.from_json(b"[1, 2]", list[int]) == [1, 2]

    def test_vertex(self, alice: Vertex) -> None:
        assert graph_codec.from_json(VERTEX_JSON, Vertex) == alice

    def test_edge_in_any_field_order(self, knows: Edge) -> None:
        doc = json.loads(EDGE_JSON)
        shuffled = json.dumps(dict(reversed(list(doc.items()))))
        edge = graph_codec.from_json(shuffled, Edge)
        assert edge.id == knows.id
        assert edge.out_id == knows.out_id
        assert edge.value("since") == 1609459200000

    def test_reencode_is_byte_stable(self) -> None:
        assert graph_codec.to_json(graph_codec.from_json(EDGE_JSON, Edge)) == EDGE_JSON

    def test_list_of_vertices(self, alice: Vertex) -> None:
        assert graph_codec.from_json(f"[{VERTEX_JSON}, {VERTEX_JSON}]", list[Vertex]) == [alice, alice]

    def test_mixed_elements(self) -> None:
        items = graph_codec.from_json(f"[{VERTEX_JSON}, {EDGE_JSON}]", list[Element])
        assert [type(e) for e in items] == [Vertex, Edge]

    def test_unknown_element_type(self) -> None:
        with pytest.raises(DecodeError):
            graph_codec.from_json('{"id": 1, "label": "x", "type": "hyperedge"}', Element)

    def test_mapping_of_timestamps(self) -> None:
        out = graph_codec.from_json('{"a": 1609459200000}', dict[str, datetime])
        assert out == {"a": datetime(2021, 1, 1, tzinfo=timezone.utc)}

    def test_timestamp_literal(self) -> None:
        assert graph_codec.from_json("0", datetime) == datetime(1970, 1, 1, tzinfo=timezone.utc)

    def test_non_integral_timestamp(self) -> None:
        with pytest.raises(DecodeError):
            graph_codec.from_json("1.5", datetime)

    def test_optional(self) -> None:
        assert graph_codec.from_json("null", Optional[Vertex]) is None
        assert graph_codec.from_json(VERTEX_JSON, Vertex | None).label == "person"

    def test_union_falls_through(self) -> None:
        assert graph_codec.from_json("0", Optional[datetime]) == datetime(1970, 1, 1, tzinfo=timezone.utc)
        with pytest.raises(DecodeError):
            graph_codec.from_json('"x"', Optional[datetime])

    def test_tuples(self) -> None:
        assert graph_codec.from_json('[1, "a"]', tuple[int, str]) == (1, "a")
        assert graph_codec.from_json("[1, 2, 3]", tuple[int, ...]) == (1, 2, 3)
        with pytest.raises(DecodeError):
            graph_codec.from_json("[1]", tuple[int, str])

    def test_set(self) -> None:
        assert graph_codec.from_json("[1, 1, 2]", set[int]) == {1, 2}

    def test_pydantic_model(self) -> None:
        assert graph_codec.from_json('{"x": 1, "y": 2}', Point) == Point(x=1, y=2)

    @pytest.mark.parametrize(
        "text,target",
        [
            ('"abc"', int),
            ("[1]", Vertex),
            ('{"id": 1, "label": "x", "type": "edge"}', Vertex),
            ('{"label": "x"}', Vertex),
            ('{"a": 1}', list[int]),
            ("[1]", dict[str, int]),
            ('{"x": "one", "y": 2}', Point),
        ],
    )
    def test_shape_mismatch_is_decode_error(self, text: str, target) -> None:
        with pytest.raises(DecodeError):
            graph_codec.from_json(text, target)


class TestEndToEnd:
    def test_vertex_golden_and_age_narrowing(self, alice: Vertex) -> None:
        text = graph_codec.to_json(alice)
        assert text == VERTEX_JSON

        # A decoder that widens every number hands narrowing a double.
        widened = json.loads(text, parse_int=float)["properties"]["age"]
        assert widened == 30.0 and type(widened) is float
        age = narrow_number(widened, NumberKind.INT)
        assert age == 30 and type(age) is int

        decoded = graph_codec.from_json(text, Vertex)
        assert narrow_number(decoded.value("age"), "int32") == 30

    def test_default_codec_is_lazy(self) -> None:
        assert facade._default_codec is None
        codec = facade.default_codec()
        assert facade.default_codec() is codec


@pytest.mark.parametrize(
    "raw",
    ["L01>>knows>>L2", "L1_0>>knows>>L2", "L+1>>knows>>L2", "L1>>knows>>>>L2", "L1>>knows>>L2"],
)
def test_vertex_id_text_survives_reencoding(raw: str) -> None:
    text = f'{{"id": "{raw}", "label": "p", "type": "vertex", "properties": {{}}}}'
    assert graph_codec.to_json(graph_codec.from_json(text, Vertex)) == text
