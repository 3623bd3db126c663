from __future__ import annotations

from datetime import datetime, timezone

import pytest

from graph_codec.codec import facade
from graph_codec.structure import Edge, EdgeId, NumericId, TextualId, Vertex

VERTEX_JSON = '{"id": 42, "label": "person", "type": "vertex", "properties": {"name": "alice", "age": 30}}'

EDGE_JSON = (
    '{"id": "S1:person>>knows>>S2:person", "label": "knows", "type": "edge", '
    '"outV": 1, "outVLabel": "person", "inV": 2, "inVLabel": "person", '
    '"properties": {"since": 1609459200000}}'
)


@pytest.fixture
def alice() -> Vertex:
    return Vertex(NumericId(42), "person", {"name": "alice", "age": 30})


@pytest.fixture
def knows() -> Edge:
    return Edge(
        EdgeId(TextualId("1:person"), "knows", TextualId("2:person")),
        "knows",
        {"since": datetime(2021, 1, 1, tzinfo=timezone.utc)},
        out_vertex=Vertex(NumericId(1), "person"),
        in_vertex=Vertex(NumericId(2), "person"),
    )


@pytest.fixture(autouse=True)
def _reset_default_codec(monkeypatch):
    monkeypatch.setattr(facade, "_default_codec", None)
