from __future__ import annotations

import io
import json

from graph_codec import __version__
from graph_codec.cli.main import build_parser, main

from .conftest import EDGE_JSON, VERTEX_JSON


def _write(tmp_path, text: str):
    path = tmp_path / "elements.json"
    path.write_text(text, encoding="utf-8")
    return str(path)


def test_version(capsys) -> None:
    assert main(["version"]) == 0
    assert capsys.readouterr().out.strip() == __version__


def test_format_restores_canonical_order(tmp_path, capsys) -> None:
    shuffled = json.dumps(dict(reversed(list(json.loads(EDGE_JSON).items()))))
    assert main(["format", _write(tmp_path, shuffled)]) == 0
    assert capsys.readouterr().out.strip() == EDGE_JSON


def test_format_list_with_indent(tmp_path, capsys) -> None:
    path = _write(tmp_path, f"[{VERTEX_JSON}, {EDGE_JSON}]")
    assert main(["format", path, "--indent", "2"]) == 0
    out = capsys.readouterr().out
    assert json.loads(out) == json.loads(f"[{VERTEX_JSON}, {EDGE_JSON}]")
    assert out.startswith("[\n  {\n")


def test_format_reads_stdin(monkeypatch, capsys) -> None:
    monkeypatch.setattr("sys.stdin", io.StringIO(VERTEX_JSON))
    assert main(["format", "-", "--shape", "vertex"]) == 0
    assert capsys.readouterr().out.strip() == VERTEX_JSON


def test_inspect(tmp_path, capsys) -> None:
    path = _write(tmp_path, f"[{VERTEX_JSON}, {EDGE_JSON}]")
    assert main(["inspect", path]) == 0
    out = capsys.readouterr().out
    assert "person" in out
    assert "knows" in out


def test_decode_failure_exit_code(tmp_path, capsys) -> None:
    path = _write(tmp_path, '{"id": 1}')
    assert main(["format", path, "--shape", "vertex"]) == 1
    assert "error:" in capsys.readouterr().err


def test_missing_file(tmp_path, capsys) -> None:
    assert main(["format", str(tmp_path / "nope.json")]) == 1


def test_parser_shapes() -> None:
    args = build_parser().parse_args(["inspect", "x.json", "--shape", "edges"])
    assert args.shape == "edges"


def test_non_utf8_input_exit_code(tmp_path, capsys) -> None:
    path = tmp_path / "latin1.json"
    path.write_bytes(b'{"id": 1, "label": "caf\xe9"}')
    assert main(["format", str(path), "--shape", "vertex"]) == 1
    assert "error:" in capsys.readouterr().err
