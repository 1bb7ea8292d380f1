"""Failure taxonomy and the error classifier.

Every failure the strict layer can produce is a ``DecodingError`` subclass
carrying a ``FailureKind``.  Only those three kinds are eligible for
coercion or for a declared per-field default; every other exception
(malformed document text, an unsupported target type, a bug in user code)
aborts the enclosing decode unchanged.

Exports
-------
FailureKind
    ``TYPE_MISMATCH`` / ``DATA_CORRUPTED`` / ``VALUE_ABSENT``.

SafeDecoderError
    Root of every exception raised by this package.

DecodingError, TypeMismatchError, DataCorruptedError, ValueAbsentError,
KeyNotFoundError, ValueNotFoundError
    Recoverable-candidate failures raised by the strict layer.

DocumentError, SchemaError
    Always fatal.

classify, is_recoverable
    The classifier itself.
"""

from __future__ import annotations

import enum
from typing import Any, List, Optional, Sequence, Union

import structlog

logger = structlog.get_logger(__name__)

PathItem = Union[str, int]


class FailureKind(enum.Enum):
    """Kinds of per-value decode failure that may be recovered from."""

    TYPE_MISMATCH = "type_mismatch"
    DATA_CORRUPTED = "data_corrupted"
    VALUE_ABSENT = "value_absent"


def format_pointer(path: Sequence[PathItem]) -> str:
    """Render a coding path as an RFC 6901 JSON Pointer.

    ::

        format_pointer(["items", 2, "id"])   → "/items/2/id"
        format_pointer(["a/b", "m~n"])       → "/a~1b/m~0n"
        format_pointer([])                   → ""
    """
    return "".join(
        "/" + str(item).replace("~", "~0").replace("/", "~1")
        for item in path
    )


def type_name(tp: Any) -> str:
    """Human-readable name for a target type (``int``, ``list[int]``, …)."""
    if isinstance(tp, type) and not getattr(tp, "__args__", None):
        return tp.__qualname__
    return repr(tp).replace("typing.", "")


# ─────────────────────────────────────────────────────────────────────────────
# Exceptions
# ─────────────────────────────────────────────────────────────────────────────


class SafeDecoderError(Exception):
    """Base class for every exception raised by safe_decoder."""


class DecodingError(SafeDecoderError):
    """A single value could not be decoded as its declared type.

    Attributes:
        kind:    The ``FailureKind`` this failure is classified as.
        path:    Coding path from the document root to the failing value.
        reason:  Short description without the location.
    """

    kind: FailureKind

    def __init__(self, reason: str, path: Sequence[PathItem] = ()) -> None:
        self.reason = reason
        self.path: List[PathItem] = list(path)
        super().__init__(f"{self.pointer or '/'}: {reason}")

    @property
    def pointer(self) -> str:
        return format_pointer(self.path)


class TypeMismatchError(DecodingError):
    """The value's JSON shape does not match the declared type."""

    kind = FailureKind.TYPE_MISMATCH

    def __init__(self, expected: Any, actual: Any, path: Sequence[PathItem] = ()) -> None:
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"expected {type_name(expected)}, found {_json_kind(actual)}",
            path,
        )


class DataCorruptedError(DecodingError):
    """The value has the right shape but its content cannot be interpreted."""

    kind = FailureKind.DATA_CORRUPTED


class ValueAbsentError(DecodingError):
    """No value: the key is missing or the value is an explicit ``null``."""

    kind = FailureKind.VALUE_ABSENT


class KeyNotFoundError(ValueAbsentError):
    def __init__(self, key: PathItem, path: Sequence[PathItem] = ()) -> None:
        self.key = key
        super().__init__(f"no value associated with key {key!r}", path)


class ValueNotFoundError(ValueAbsentError):
    def __init__(self, expected: Any, path: Sequence[PathItem] = ()) -> None:
        self.expected = expected
        super().__init__(f"expected {type_name(expected)}, found null", path)


class DocumentError(SafeDecoderError):
    """The input is not a well-formed document.  Never recoverable."""


class SchemaError(SafeDecoderError, TypeError):
    """A target type cannot be decoded, or a declared default is ill-typed."""


# ─────────────────────────────────────────────────────────────────────────────
# Classifier
# ─────────────────────────────────────────────────────────────────────────────


def classify(error: BaseException, target: Any = None) -> Optional[FailureKind]:
    """Map *error* to its ``FailureKind``, or ``None`` if it must propagate.

    *target* is the declared type being decoded (logged with fatal failures).
    """
    if isinstance(error, DecodingError):
        return error.kind
    logger.debug("failure.fatal", target=type_name(target), error=type(error).__name__)
    return None


def is_recoverable(error: BaseException) -> bool:
    return classify(error) is not None


def _json_kind(value: Any) -> str:
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "bool"
    if isinstance(value, (int, float)):
        return "number"
    if isinstance(value, str):
        return "string"
    if isinstance(value, (list, tuple)):
        return "array"
    if isinstance(value, dict):
        return "object"
    return type(value).__name__
