"""Raw-value resolution for ``enum.Enum`` targets.

Two families, told apart by ``raw_type_of``:

* **string-backed** — no coercion of its own.  A literal matching no
  member is reported (when non-empty) and becomes absent.
* **scalar-backed** (``int``, ``float``, ``bool``) — on a type mismatch the
  raw scalar is decoded through the engine first (``"2"`` → ``2``) and
  then looked up; a raw value matching no member is reported and becomes
  absent.

"Absent" resolves to ``None`` for an optional field; a required field falls
on to its declared default, or re-raises the original failure.

Exports
-------
EnumMatcher
    Fires on any ``enum.Enum`` subclass.

RawValueCoercion
    The resolver itself.
"""

from __future__ import annotations

import enum
from typing import Any

from ..casters import format_scalar
from ..core import ABSENT, Coercion, DecodeContext, FieldReader, TypeMatcher
from ..errors import DecodingError, FailureKind
from ..utils.hints import is_enum, member_for, raw_type_of


class EnumMatcher(TypeMatcher):
    def matches(self, tp: Any) -> bool:
        return is_enum(tp)


class RawValueCoercion(Coercion):
    """Resolve an enum member from its raw value, or give up as absent."""

    def coerce(self, error: DecodingError, reader: FieldReader, target: Any, ctx: DecodeContext) -> Any:
        raw_type = raw_type_of(target)
        if raw_type is str:
            return self._string_backed(error, reader, ctx)
        return self._scalar_backed(error, reader, target, raw_type, ctx)

    def _string_backed(self, error: DecodingError, reader: FieldReader, ctx: DecodeContext) -> Any:
        if error.kind is not FailureKind.DATA_CORRUPTED:
            raise error
        text = reader.decode_strict(str, ctx)
        if text:
            ctx.session.report(error, text)
        return ABSENT

    def _scalar_backed(
            self,
            error: DecodingError,
            reader: FieldReader,
            target: type[enum.Enum],
            raw_type: type,
            ctx: DecodeContext,
    ) -> Any:
        if error.kind is FailureKind.TYPE_MISMATCH:
            # no descriptor: a default for the enum field must not stand in
            # for its raw value
            raw = ctx.decoder.decode_value(raw_type, reader, ctx)
        elif error.kind is FailureKind.DATA_CORRUPTED:
            raw = reader.decode_strict(raw_type, ctx)
        else:
            raise error

        member = member_for(target, raw)
        if member is not None:
            return member
        ctx.session.report(error, format_scalar(raw) or str(raw))
        return ABSENT
