"""Scalar coercions — the strategies behind the scalar coercion table.

Every strategy here first obtains *some* string form of the misdecoded
value through ``FieldReader.read_string`` and then applies a rule.  Which
failure kinds a strategy accepts is part of its rule:

* numbers and booleans are reconstructed only from a type mismatch
  (``"1"`` for ``int``);
* strings are reconstructed only from a type mismatch (``1`` for ``str``);
* dates and URLs recover only from corrupted content.

Exports
-------
StringCoercion
    Canonical text of a number / boolean received where a string was expected.

CasterCoercion
    Looks up the target in a ``type → caster`` table and applies the caster.

DateCoercion
    Empty date string → absent; anything else stays fatal.

URLCoercion
    Invalid URL → absent, and the raw text is reported.
"""

from __future__ import annotations

from typing import Any, Mapping

from ..casters import Caster
from ..core import ABSENT, Coercion, DecodeContext, FieldReader
from ..errors import DecodingError, FailureKind


class StringCoercion(Coercion):
    """``1`` → ``"1"``, ``true`` → ``"true"``, ``2.5`` → ``"2.5"``."""

    def coerce(self, error: DecodingError, reader: FieldReader, target: Any, ctx: DecodeContext) -> Any:
        if error.kind is not FailureKind.TYPE_MISMATCH:
            raise error
        return reader.read_string(ctx)


class CasterCoercion(Coercion):
    """Apply ``casters[target]`` to the string form of the value.

    A caster returning ``None`` declines, and so does a value that has no
    string form at all (an object, an array).
    """

    def __init__(self, casters: Mapping[Any, Caster]) -> None:
        self._casters = casters

    def coerce(self, error: DecodingError, reader: FieldReader, target: Any, ctx: DecodeContext) -> Any:
        if error.kind is not FailureKind.TYPE_MISMATCH:
            raise error
        caster = self._casters.get(target)
        if caster is None:
            raise error
        value = caster(reader.read_string(ctx))
        if value is None:
            raise error
        return value


class DateCoercion(Coercion):
    """An empty date string means "no date"; it is not re-parsed."""

    def coerce(self, error: DecodingError, reader: FieldReader, target: Any, ctx: DecodeContext) -> Any:
        if error.kind is not FailureKind.DATA_CORRUPTED:
            raise error
        if reader.decode_strict(str, ctx) == "":
            return ABSENT
        raise error


class URLCoercion(Coercion):
    """An invalid URL is dropped, and the diagnostic callback gets the text."""

    def coerce(self, error: DecodingError, reader: FieldReader, target: Any, ctx: DecodeContext) -> Any:
        if error.kind is not FailureKind.DATA_CORRUPTED:
            raise error
        ctx.session.report(error, reader.decode_strict(str, ctx))
        return ABSENT
