"""Element-wise re-walk of arrays whose strict bulk decode failed.

A strict ``list[T]`` decode is all-or-nothing: one ``"2"`` among integers
fails the whole value.  This module owns both the matcher that identifies
array targets and the coercion that walks the raw array again, sending each
element through the full engine.

Exports
-------
ListMatcher
    Fires on ``list[T]`` (and bare ``list``) target types.

ArrayCoercion
    Re-decodes the array one element at a time through
    ``ctx.decoder.decode_element``.
"""

from __future__ import annotations

import typing
from typing import Any

from ..core import Coercion, DecodeContext, FieldReader, TypeMatcher
from ..errors import DecodingError, FailureKind
from ..utils.hints import list_element_type


class ListMatcher(TypeMatcher):
    """Match ``list`` and ``list[T]`` declared types."""

    def matches(self, tp: Any) -> bool:
        return tp is list or typing.get_origin(tp) is list


class ArrayCoercion(Coercion):
    """Walk the raw array again, element by element.

    * Only a type mismatch (anywhere inside the strict attempt) triggers
      the re-walk; corrupted content inside an element is not retried.
    * Opening the array is itself strict: a value that is not an array
      raises, and the coercion declines.
    * An element that stays unresolved raises its own failure, which
      aborts the whole array.  Nothing is skipped, and the reports of
      the elements already walked are dropped with it.
    """

    def coerce(self, error: DecodingError, reader: FieldReader, target: Any, ctx: DecodeContext) -> Any:
        if error.kind is not FailureKind.TYPE_MISMATCH:
            raise error
        elem = list_element_type(target)
        view = reader.nested_sequence()
        out = []
        with ctx.session.tentative():
            while not view.is_at_end:
                out.append(ctx.decoder.decode_element(elem, view, ctx))
        return out
