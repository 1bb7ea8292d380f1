"""Record schemas and per-field declared defaults.

A record is any dataclass.  Each ``init`` field becomes a ``FieldDescriptor``
with the document key it is read from and, optionally, a declared default
that the engine falls back to when neither the strict decode nor a coercion
produced a value.

Declaring a default (opt-in, per field)::

    @dataclass
    class Account:
        name: str = decoded_field(key="displayName")
        id: int = decoded_field(fallback=0)
        tags: list[str] = decoded_field(fallback=[])

or, for a whole type at once::

    @dataclass
    class Account(FallbackProvider):
        id: int

        @classmethod
        def fallback_value(cls, key):
            return FieldDefault.of(0) if key == "id" else NO_DEFAULT

A plain dataclass ``default=`` is **not** a declared default.
"""

from __future__ import annotations

import copy
import dataclasses
import typing
from dataclasses import dataclass
from typing import Any, Generic, List, Optional, TypeVar

from .errors import SchemaError, type_name
from .utils.hints import conforms, unwrap_optional

T = TypeVar("T")

KEY_METADATA = "safe_decoder.key"
FALLBACK_METADATA = "safe_decoder.fallback"


class FieldDefault(Generic[T]):
    """Either "no default" (``NO_DEFAULT``) or "default of this exact value".

    ::

        FieldDefault.of(42).present   → True
        NO_DEFAULT.present            → False
    """

    __slots__ = ("present", "_value")

    def __init__(self, present: bool, value: Optional[T] = None) -> None:
        self.present = present
        self._value = value

    @classmethod
    def of(cls, value: T) -> "FieldDefault[T]":
        return cls(True, value)

    @property
    def value(self) -> T:
        """A fresh deep copy of the declared value (mutable defaults stay private)."""
        if not self.present:
            raise LookupError("no default declared")
        return copy.deepcopy(self._value)

    def __eq__(self, other: Any) -> bool:
        if not isinstance(other, FieldDefault):
            return NotImplemented
        return self.present == other.present and self._value == other._value

    def __hash__(self) -> int:
        return hash(self.present)

    def __repr__(self) -> str:
        return f"FieldDefault.of({self._value!r})" if self.present else "NO_DEFAULT"


NO_DEFAULT: FieldDefault[Any] = FieldDefault(False)


class FallbackProvider:
    """Mixin for records that answer default lookups in code.

    Consulted only for fields without a ``decoded_field(fallback=...)``.
    """

    @classmethod
    def fallback_value(cls, key: str) -> FieldDefault[Any]:
        return NO_DEFAULT


def decoded_field(*, key: Optional[str] = None, fallback: Any = dataclasses.MISSING, **kwargs: Any) -> Any:
    """``dataclasses.field`` with a document *key* and a declared *fallback*.

    The fallback also becomes the dataclass default, so the record can
    still be constructed directly without that argument.
    """
    metadata = dict(kwargs.pop("metadata", None) or {})
    if key is not None:
        metadata[KEY_METADATA] = key
    if fallback is not dataclasses.MISSING:
        declared = FieldDefault.of(fallback)
        metadata[FALLBACK_METADATA] = declared
        if "default" not in kwargs and "default_factory" not in kwargs:
            kwargs["default_factory"] = lambda: declared.value
    return dataclasses.field(metadata=metadata, **kwargs)


@dataclass(frozen=True)
class FieldDescriptor:
    """One decodable field of a record.

    Attributes:
        name:     Attribute name on the dataclass.
        key:      Document key the value is read from.
        type:     Declared type with ``Optional`` stripped.
        optional: Whether ``None`` is a valid value (missing / null → None).
        default:  Declared default (``NO_DEFAULT`` if none).
    """

    name: str
    key: str
    type: Any
    optional: bool
    default: FieldDefault[Any] = NO_DEFAULT

    @property
    def has_default(self) -> bool:
        return self.default.present


@dataclass(frozen=True)
class RecordSchema:
    """Field descriptors of one dataclass, in declaration order."""

    cls: type
    fields: List[FieldDescriptor]

    @classmethod
    def of(cls, record: type) -> "RecordSchema":
        """Introspect *record*; raise ``SchemaError`` on an ill-typed default."""
        if not (isinstance(record, type) and dataclasses.is_dataclass(record)):
            raise SchemaError(f"{type_name(record)} is not a dataclass")
        try:
            hints = typing.get_type_hints(record)
        except NameError as exc:
            raise SchemaError(f"{record.__qualname__}: unresolvable annotation ({exc})") from exc

        provides = issubclass(record, FallbackProvider)
        fields: List[FieldDescriptor] = []
        for f in dataclasses.fields(record):
            if not f.init:
                continue
            declared = hints[f.name]
            inner, optional = unwrap_optional(declared)
            key = f.metadata.get(KEY_METADATA, f.name)
            default = f.metadata.get(FALLBACK_METADATA, NO_DEFAULT)
            if not default.present and provides:
                default = record.fallback_value(key)
            if not isinstance(default, FieldDefault):
                raise SchemaError(
                    f"{record.__qualname__}.{f.name}: fallback_value() must return a FieldDefault"
                )
            if default.present and not conforms(default._value, declared):
                raise SchemaError(
                    f"{record.__qualname__}.{f.name}: default {default._value!r} "
                    f"is not a {type_name(declared)}"
                )
            fields.append(FieldDescriptor(f.name, key, inner, optional, default))
        return cls(record, fields)
