from __future__ import annotations

import argparse
import sys
from typing import Any

from graph_codec.settings import settings

SHAPES = ("auto", "vertex", "edge", "element", "vertices", "edges", "elements")


def _configure_logging() -> None:
    import logging

    level = (settings.log_level or "INFO").upper()
    logging.basicConfig(level=level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")


def _read(path: str) -> str:
    if path == "-":
        return sys.stdin.read()
    with open(path, encoding="utf-8") as f:
        return f.read()


def _target(shape: str, text: str) -> Any:
    from graph_codec.structure import Edge, Element, Vertex

    if shape == "auto":
        shape = "elements" if text.lstrip().startswith("[") else "element"
    return {
        "vertex": Vertex,
        "edge": Edge,
        "element": Element,
        "vertices": list[Vertex],
        "edges": list[Edge],
        "elements": list[Element],
    }[shape]


def _load(args: argparse.Namespace):
    from graph_codec.codec import JsonCodec

    codec = JsonCodec.from_settings()
    if getattr(args, "indent", None) is not None:
        codec = JsonCodec(
            codec.table, indent=args.indent, ensure_ascii=codec.ensure_ascii, nan_as_string=codec.nan_as_string
        )
    text = _read(args.path)
    return codec, codec.from_json(text, _target(args.shape, text))


def cmd_version() -> int:
    from graph_codec import __version__

    print(__version__)
    return 0


def cmd_format(args: argparse.Namespace) -> int:
    """Re-emit elements in canonical field order."""
    _configure_logging()
    codec, value = _load(args)
    print(codec.to_json(value))
    return 0


def cmd_inspect(args: argparse.Namespace) -> int:
    _configure_logging()
    from rich.console import Console
    from rich.table import Table

    _, value = _load(args)
    elements = value if isinstance(value, list) else [value]

    table = Table(title=f"Elements in {args.path}")
    table.add_column("Id", style="cyan")
    table.add_column("Id kind", style="blue")
    table.add_column("Label", style="green")
    table.add_column("Type", style="magenta")
    table.add_column("Properties", justify="right")

    for el in elements:
        table.add_row(
            el.id.as_text(),
            "number" if el.id.is_number() else "text",
            el.label,
            el.type_name,
            str(len(el.properties)),
        )

    Console().print(table)
    return 0


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="graph-codec")
    sub = p.add_subparsers(dest="cmd", required=True)

    sub.add_parser("version").set_defaults(func=lambda _a: cmd_version())

    fmt = sub.add_parser("format", help="Normalise vertex/edge JSON to canonical field order")
    fmt.add_argument("path", help="JSON file, or - for stdin")
    fmt.add_argument("--shape", choices=SHAPES, default="auto")
    fmt.add_argument("--indent", type=int, default=None)
    fmt.set_defaults(func=cmd_format)

    ins = sub.add_parser("inspect", help="Summarise the elements in a JSON file")
    ins.add_argument("path", help="JSON file, or - for stdin")
    ins.add_argument("--shape", choices=SHAPES, default="auto")
    ins.set_defaults(func=cmd_inspect)

    return p


def main(argv: list[str] | None = None) -> int:
    from graph_codec.errors import CodecError

    parser = build_parser()
    args = parser.parse_args(argv)
    try:
        return args.func(args)
    except (CodecError, OSError, UnicodeDecodeError) as e:
        print(f"error: {e}", file=sys.stderr)
        return 1


def app() -> None:
    raise SystemExit(main())


if __name__ == "__main__":
    app()
