"""Helpers over *declared* target types (annotations, not runtime values)."""

from __future__ import annotations

import dataclasses
import enum
import types
import typing
from datetime import datetime
from typing import Any, Optional, Tuple

from ..errors import SchemaError, type_name
from ..scalars import FixedWidthInt, Float32, URL

_NONE_TYPE = type(None)
_UNION_TYPES: Tuple[Any, ...] = (typing.Union,)
if hasattr(types, "UnionType"):
    _UNION_TYPES += (types.UnionType,)


def unwrap_optional(tp: Any) -> Tuple[Any, bool]:
    """Split ``Optional[T]`` / ``T | None`` into ``(T, True)``; else ``(tp, False)``.

    ::

        unwrap_optional(Optional[int])     → (int, True)
        unwrap_optional(int | str | None)  → (int | str, True)  # typing.Union
        unwrap_optional(list[int])         → (list[int], False)
    """
    if typing.get_origin(tp) in _UNION_TYPES:
        args = typing.get_args(tp)
        if _NONE_TYPE in args:
            rest = tuple(a for a in args if a is not _NONE_TYPE)
            if len(rest) == 1:
                return rest[0], True
            return typing.Union[rest], True
    return tp, False


def list_element_type(tp: Any) -> Any:
    args = typing.get_args(tp)
    return args[0] if args else Any


def dict_value_type(tp: Any) -> Any:
    args = typing.get_args(tp)
    if args and args[0] is not str:
        raise SchemaError(f"{type_name(tp)}: only str keys are supported")
    return args[1] if len(args) == 2 else Any


def is_record(tp: Any) -> bool:
    return isinstance(tp, type) and dataclasses.is_dataclass(tp)


def is_enum(tp: Any) -> bool:
    return isinstance(tp, enum.EnumMeta)


def raw_type_of(enum_cls: type[enum.Enum]) -> type:
    """The raw-value type backing *enum_cls*.

    ``str`` if every member value is a string, otherwise the single scalar
    type shared by all member values (``int``, ``float`` or ``bool``).
    """
    kinds = {type(m.value) for m in enum_cls}
    if not kinds or kinds == {str}:
        return str
    if kinds == {int, float}:
        return float
    if len(kinds) == 1:
        (kind,) = kinds
        if kind in (int, float, bool):
            return kind
    raise SchemaError(f"{enum_cls.__qualname__}: raw values must share one scalar type")


def member_for(enum_cls: type[enum.Enum], raw: Any) -> Optional[enum.Enum]:
    try:
        return enum_cls(raw)
    except ValueError:
        return None


def conforms(value: Any, tp: Any) -> bool:
    """Whether *value* is a valid instance of the declared type *tp*."""
    if tp is Any:
        return True
    inner, optional = unwrap_optional(tp)
    if value is None:
        return optional
    if optional:
        return conforms(value, inner)

    origin = typing.get_origin(tp)
    if origin in _UNION_TYPES:
        return any(conforms(value, arg) for arg in typing.get_args(tp))
    if origin is list:
        elem = list_element_type(tp)
        return isinstance(value, list) and all(conforms(v, elem) for v in value)
    if origin is dict:
        val_tp = dict_value_type(tp)
        return isinstance(value, dict) and all(
            isinstance(k, str) and conforms(v, val_tp) for k, v in value.items()
        )
    if origin is not None:
        return False

    if tp is bool:
        return isinstance(value, bool)
    if isinstance(tp, type) and issubclass(tp, FixedWidthInt):
        return isinstance(value, int) and not isinstance(value, bool) and tp.fits(value)
    if tp is int:
        return isinstance(value, int) and not isinstance(value, bool)
    if tp in (float, Float32):
        return isinstance(value, (int, float)) and not isinstance(value, bool)
    if tp is URL:
        return isinstance(value, str) and URL.is_valid(value)
    if tp is datetime:
        return isinstance(value, datetime)
    if isinstance(tp, type):
        return isinstance(value, tp)
    return False
