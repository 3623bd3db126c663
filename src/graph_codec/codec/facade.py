"""
Public encode/decode entry points.

``to_json`` pushes a value through the codec table into a ``JsonWriter``;
``from_json`` parses text with the standard library and then converts the
document tree into the requested type or shape (``Vertex``, ``list[Edge]``,
``dict[str, datetime]``...). Leaf types without a registered deserializer are
validated with a pydantic ``TypeAdapter``.
"""

from __future__ import annotations

import collections.abc
import json
import logging
import types
from functools import lru_cache
from typing import Any, Optional, Union, get_args, get_origin

from pydantic import TypeAdapter

from ..errors import CodecError, DecodeError, EncodeError
from ..settings import CodecSettings, settings
from .base import EncodeContext
from .registry import CodecModule, CodecTable, default_table
from .writer import JsonWriter, TypeTagger

logger = logging.getLogger(__name__)

_SEQUENCE_ORIGINS = {
    list: list,
    set: set,
    frozenset: frozenset,
    collections.abc.Sequence: list,
    collections.abc.MutableSequence: list,
    collections.abc.Iterable: list,
    collections.abc.Collection: list,
    collections.abc.Set: set,
    collections.abc.MutableSet: set,
}
_MAPPING_ORIGINS = {dict, collections.abc.Mapping, collections.abc.MutableMapping}


def describe(target: Any) -> str:
    if get_origin(target) is not None or not isinstance(target, type):
        return repr(target)
    return target.__name__


@lru_cache(maxsize=256)
def _cached_adapter(target: Any) -> TypeAdapter:
    return TypeAdapter(target)


def _type_adapter(target: Any) -> TypeAdapter:
    try:
        hash(target)
    except TypeError:
        return TypeAdapter(target)
    return _cached_adapter(target)


class JsonCodec:
    """Encodes and decodes graph values against one immutable codec table."""

    def __init__(
        self,
        table: Optional[CodecTable] = None,
        *,
        indent: Optional[int] = None,
        ensure_ascii: bool = False,
        nan_as_string: bool = True,
        tagger: Optional[TypeTagger] = None,
    ):
        self.table = table if table is not None else default_table()
        self.indent = indent
        self.ensure_ascii = ensure_ascii
        self.nan_as_string = nan_as_string
        self.tagger = tagger

    @classmethod
    def from_settings(cls, cfg: CodecSettings = settings, table: Optional[CodecTable] = None) -> "JsonCodec":
        return cls(
            table,
            indent=cfg.indent,
            ensure_ascii=cfg.ensure_ascii,
            nan_as_string=cfg.nan_as_string,
        )

    def with_module(self, module: CodecModule) -> "JsonCodec":
        return JsonCodec(
            self.table.with_module(module),
            indent=self.indent,
            ensure_ascii=self.ensure_ascii,
            nan_as_string=self.nan_as_string,
            tagger=self.tagger,
        )

    # --- encode ---

    def writer(self) -> JsonWriter:
        return JsonWriter(indent=self.indent, ensure_ascii=self.ensure_ascii, nan_as_string=self.nan_as_string)

    def write(self, value: Any, writer: JsonWriter, *, tagger: Optional[TypeTagger] = None) -> None:
        """Push ``value`` into an existing writer (no buffering, no wrapping)."""
        EncodeContext(self.table, writer, tagger or self.tagger).write_value(value)

    def to_json(self, value: Any, *, tagger: Optional[TypeTagger] = None) -> str:
        writer = self.writer()
        try:
            self.write(value, writer, tagger=tagger)
        except EncodeError as e:
            logger.error(f"Failed to encode {type(value).__name__}: {e}")
            raise
        except Exception as e:
            logger.error(f"Failed to encode {type(value).__name__}: {e}")
            raise EncodeError(f"Failed to encode {type(value).__name__}", e) from e
        return writer.getvalue()

    # --- decode ---

    def from_json(self, text: Union[str, bytes, None], target: Any = Any) -> Any:
        if text is not None and not isinstance(text, (str, bytes, bytearray)):
            raise DecodeError(f"Json value must be str or bytes, got {type(text).__name__}")
        if text is None or not text.strip():
            raise DecodeError(f"Json value can't be empty for '{describe(target)}'")
        try:
            tree = json.loads(text)
        except (json.JSONDecodeError, UnicodeDecodeError, RecursionError) as e:
            logger.error(f"Malformed JSON for '{describe(target)}': {e}")
            raise DecodeError(f"Malformed JSON for '{describe(target)}'", e) from e
        return self.convert(tree, target)

    def convert(self, tree: Any, target: Any = Any) -> Any:
        """Turn an already-parsed document tree into ``target``."""
        try:
            return self._convert(tree, target)
        except DecodeError:
            raise
        except (CodecError, TypeError, ValueError, RecursionError) as e:
            logger.error(f"Failed to decode '{describe(target)}': {e}")
            raise DecodeError(f"Failed to decode '{describe(target)}'", e) from e

    def _convert(self, tree: Any, target: Any) -> Any:
        if target is Any or target is object:
            return tree

        deserializer = self.table.deserializer_for(target)
        if deserializer is not None:
            return deserializer(tree)

        origin = get_origin(target)
        args = get_args(target)

        if origin is Union or origin is types.UnionType:
            return self._convert_union(tree, target, args)
        if origin in _SEQUENCE_ORIGINS:
            item = args[0] if args else Any
            return _SEQUENCE_ORIGINS[origin](self._convert(v, item) for v in self._expect(tree, list, target))
        if origin is tuple:
            return self._convert_tuple(tree, target, args)
        if origin in _MAPPING_ORIGINS:
            key_type, value_type = args if args else (Any, Any)
            return {
                self._convert(k, key_type): self._convert(v, value_type)
                for k, v in self._expect(tree, dict, target).items()
            }
        return _type_adapter(target).validate_python(tree)

    def _convert_union(self, tree: Any, target: Any, args: tuple) -> Any:
        if tree is None and type(None) in args:
            return None
        last: Optional[Exception] = None
        for arg in args:
            if arg is type(None):
                continue
            try:
                return self._convert(tree, arg)
            except (CodecError, TypeError, ValueError) as e:
                last = e
        raise DecodeError(f"Value matches none of {describe(target)}", last)

    def _convert_tuple(self, tree: Any, target: Any, args: tuple) -> tuple:
        items = self._expect(tree, list, target)
        if not args:
            return tuple(items)
        if len(args) == 2 and args[1] is Ellipsis:
            return tuple(self._convert(v, args[0]) for v in items)
        if len(args) != len(items):
            raise DecodeError(f"Expected {len(args)} items for {describe(target)}, got {len(items)}")
        return tuple(self._convert(v, t) for v, t in zip(items, args))

    @staticmethod
    def _expect(tree: Any, kind: type, target: Any) -> Any:
        if not isinstance(tree, kind):
            raise DecodeError(
                f"Expected a JSON {'array' if kind is list else 'object'} for "
                f"{describe(target)}, got {type(tree).__name__}"
            )
        return tree


_default_codec: Optional[JsonCodec] = None


def default_codec() -> JsonCodec:
    """Process-wide codec built lazily from settings and the builtin table."""
    global _default_codec
    if _default_codec is None:
        _default_codec = JsonCodec.from_settings()
    return _default_codec


def register_module(module: CodecModule) -> None:
    """Layer ``module`` onto the process-wide codec.

    Call during startup, before any thread encodes or decodes.
    """
    global _default_codec
    _default_codec = default_codec().with_module(module)
    logger.debug(f"Registered codec module '{module.name}'")


def to_json(value: Any, *, tagger: Optional[TypeTagger] = None) -> str:
    return default_codec().to_json(value, tagger=tagger)


def from_json(text: Union[str, bytes, None], target: Any = Any) -> Any:
    return default_codec().from_json(text, target)
