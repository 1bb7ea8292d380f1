"""Strict decoder over JSON-shaped Python values.

Self-contained implementation of the document interface in ``core``:

* ``JsonDocument``      – parses text with ``json`` and hands out the root view.
* ``JsonKeyedContainer`` – a ``dict`` node.
* ``JsonSequenceView``  – a ``list`` node with a read cursor.
* ``decode_strict_value`` – type-directed strict conversion of one value.

Nothing here coerces.  Record types (dataclasses) are the only composite
that calls back into the engine: their fields are decoded one by one through
``ctx.decoder.decode_record``, exactly like any other keyed decode.
"""

from __future__ import annotations

import enum
import json
import math
import typing
from datetime import datetime
from typing import Any, Callable, Dict, List

from ..core import DecodeContext, Document, KeyedContainer, SequenceView
from ..errors import (
    DataCorruptedError,
    DocumentError,
    KeyNotFoundError,
    PathItem,
    SchemaError,
    TypeMismatchError,
    ValueNotFoundError,
    type_name,
)
from ..scalars import FixedWidthInt, Float32, URL
from ..utils.hints import (
    dict_value_type,
    is_enum,
    is_record,
    list_element_type,
    member_for,
    raw_type_of,
    unwrap_optional,
)

_MISSING = object()


# ─────────────────────────────────────────────────────────────────────────────
# Scalar readers
# ─────────────────────────────────────────────────────────────────────────────


def _read_bool(tp: Any, value: Any, path: List[PathItem], ctx: DecodeContext) -> bool:
    if not isinstance(value, bool):
        raise TypeMismatchError(tp, value, path)
    return value


def _read_int(tp: Any, value: Any, path: List[PathItem], ctx: DecodeContext) -> int:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise TypeMismatchError(tp, value, path)
    if isinstance(value, float):
        if not (math.isfinite(value) and value.is_integer()):
            raise DataCorruptedError(f"number {value!r} does not fit in {type_name(tp)}", path)
        value = int(value)
    if isinstance(tp, type) and issubclass(tp, FixedWidthInt):
        if not tp.fits(value):
            raise DataCorruptedError(f"number {value} does not fit in {type_name(tp)}", path)
        return tp(value)
    return value


def _read_float(tp: Any, value: Any, path: List[PathItem], ctx: DecodeContext) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise TypeMismatchError(tp, value, path)
    if tp is Float32:
        try:
            return Float32(value)
        except OverflowError:
            raise DataCorruptedError(f"number {value!r} does not fit in Float32", path) from None
    try:
        return float(value)
    except OverflowError:
        raise DataCorruptedError(f"number {value!r} does not fit in float", path) from None


def _read_str(tp: Any, value: Any, path: List[PathItem], ctx: DecodeContext) -> str:
    if not isinstance(value, str):
        raise TypeMismatchError(tp, value, path)
    return value


def _read_url(tp: Any, value: Any, path: List[PathItem], ctx: DecodeContext) -> URL:
    text = _read_str(tp, value, path, ctx)
    if not URL.is_valid(text):
        raise DataCorruptedError("invalid URL string", path)
    return URL(text)


def _read_datetime(tp: Any, value: Any, path: List[PathItem], ctx: DecodeContext) -> datetime:
    text = _read_str(tp, value, path, ctx)
    try:
        return ctx.config.date_parser(text)
    except ValueError as exc:
        raise DataCorruptedError(f"invalid date {text!r}: {exc}", path) from None


Reader = Callable[[Any, Any, List[PathItem], DecodeContext], Any]

SCALAR_READERS: Dict[Any, Reader] = {
    bool: _read_bool,
    int: _read_int,
    float: _read_float,
    Float32: _read_float,
    str: _read_str,
    URL: _read_url,
    datetime: _read_datetime,
}


# ─────────────────────────────────────────────────────────────────────────────
# Strict value decoding
# ─────────────────────────────────────────────────────────────────────────────


def decode_strict_value(tp: Any, value: Any, path: List[PathItem], ctx: DecodeContext) -> Any:
    """Decode *value* as *tp* without any coercion.

    ``null`` for a non-optional type raises ``ValueNotFoundError``.  Unknown
    target types raise ``SchemaError`` (never recoverable).
    """
    if tp is Any:
        return value

    inner, optional = unwrap_optional(tp)
    if value is None:
        if optional:
            return None
        raise ValueNotFoundError(tp, path)
    if optional:
        tp = inner

    origin = typing.get_origin(tp)
    if origin is list:
        return _decode_list(tp, value, path, ctx)
    if origin is dict:
        return _decode_dict(tp, value, path, ctx)
    if is_enum(tp):
        return _decode_enum(tp, value, path, ctx)
    if is_record(tp):
        if not isinstance(value, dict):
            raise TypeMismatchError(tp, value, path)
        return ctx.decoder.decode_record(tp, JsonKeyedContainer(value, path), ctx)

    reader = SCALAR_READERS.get(tp)
    if reader is None and origin is None and isinstance(tp, type) and issubclass(tp, FixedWidthInt):
        reader = _read_int
    if reader is None:
        raise SchemaError(f"unsupported target type {type_name(tp)}")
    return reader(tp, value, path, ctx)


def _decode_list(tp: Any, value: Any, path: List[PathItem], ctx: DecodeContext) -> list:
    if not isinstance(value, list):
        raise TypeMismatchError(tp, value, path)
    elem = list_element_type(tp)
    view = JsonSequenceView(value, path)
    out = []
    while not view.is_at_end:
        out.append(view.decode_strict(elem, ctx))
    return out


def _decode_dict(tp: Any, value: Any, path: List[PathItem], ctx: DecodeContext) -> dict:
    if not isinstance(value, dict):
        raise TypeMismatchError(tp, value, path)
    val_tp = dict_value_type(tp)
    return {
        key: decode_strict_value(val_tp, item, path + [key], ctx)
        for key, item in value.items()
    }


def _decode_enum(tp: type[enum.Enum], value: Any, path: List[PathItem], ctx: DecodeContext) -> enum.Enum:
    raw_type = raw_type_of(tp)
    try:
        raw = SCALAR_READERS[raw_type](raw_type, value, path, ctx)
    except TypeMismatchError:
        raise TypeMismatchError(tp, value, path) from None
    member = member_for(tp, raw)
    if member is None:
        raise DataCorruptedError(
            f"cannot initialize {tp.__qualname__} from invalid {raw_type.__name__} value {raw!r}",
            path,
        )
    return member


# ─────────────────────────────────────────────────────────────────────────────
# Containers
# ─────────────────────────────────────────────────────────────────────────────


class JsonKeyedContainer(KeyedContainer):
    """``KeyedContainer`` over a ``dict``."""

    def __init__(self, obj: Dict[str, Any], path: List[PathItem]) -> None:
        self._obj = obj
        self.path = list(path)

    def has_key(self, key: str) -> bool:
        return key in self._obj

    def is_null(self, key: str) -> bool:
        return self._obj.get(key) is None

    def decode_strict(self, tp: Any, key: str, ctx: DecodeContext) -> Any:
        value = self._obj.get(key, _MISSING)
        if value is _MISSING:
            raise KeyNotFoundError(key, self.path + [key])
        return decode_strict_value(tp, value, self.path + [key], ctx)

    def nested_sequence(self, key: str) -> "JsonSequenceView":
        value = self._child(list, key)
        return JsonSequenceView(value, self.path + [key])

    def nested_keyed(self, key: str) -> "JsonKeyedContainer":
        value = self._child(dict, key)
        return JsonKeyedContainer(value, self.path + [key])

    def _child(self, kind: type, key: str) -> Any:
        value = self._obj.get(key, _MISSING)
        if value is _MISSING:
            raise KeyNotFoundError(key, self.path + [key])
        if value is None:
            raise ValueNotFoundError(kind, self.path + [key])
        if not isinstance(value, kind):
            raise TypeMismatchError(kind, value, self.path + [key])
        return value


class JsonSequenceView(SequenceView):
    """``SequenceView`` over a ``list``; reads advance only on success."""

    def __init__(self, items: List[Any], path: List[PathItem]) -> None:
        self._items = items
        self._index = 0
        self.path = list(path)

    @property
    def is_at_end(self) -> bool:
        return self._index >= len(self._items)

    @property
    def current_index(self) -> int:
        return self._index

    def element_path(self) -> List[PathItem]:
        return self.path + [self._index]

    def decode_strict(self, tp: Any, ctx: DecodeContext) -> Any:
        value = decode_strict_value(tp, self._current(tp), self.element_path(), ctx)
        self._index += 1
        return value

    def decode_strict_if_present(self, tp: Any, ctx: DecodeContext) -> Any:
        if self._current(tp) is None:
            self._index += 1
            return None
        return self.decode_strict(tp, ctx)

    def nested_sequence(self) -> "JsonSequenceView":
        value = self._current(list)
        if value is None:
            raise ValueNotFoundError(list, self.element_path())
        if not isinstance(value, list):
            raise TypeMismatchError(list, value, self.element_path())
        view = JsonSequenceView(value, self.element_path())
        self._index += 1
        return view

    def skip(self) -> None:
        if not self.is_at_end:
            self._index += 1

    def _current(self, tp: Any) -> Any:
        if self.is_at_end:
            raise ValueNotFoundError(tp, self.element_path())
        return self._items[self._index]


class JsonRootView(JsonSequenceView):
    """One-element view over a whole document; its element sits at the root path."""

    def __init__(self, data: Any) -> None:
        super().__init__([data], [])

    def element_path(self) -> List[PathItem]:
        return []


class JsonDocument(Document):
    """Documents as produced by ``json.loads``."""

    def parse(self, text: Any) -> Any:
        try:
            return json.loads(text)
        except (TypeError, ValueError) as exc:
            raise DocumentError(f"malformed JSON document: {exc}") from exc

    def root(self, data: Any) -> JsonRootView:
        return JsonRootView(data)
