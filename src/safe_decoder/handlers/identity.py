"""No-op (catch-all) coercion — the bottom of the coercion tree."""

from __future__ import annotations

from typing import Any

from ..core import Coercion, DecodeContext, FieldReader
from ..errors import DecodingError


class NoCoercion(Coercion):
    """Always decline by re-raising the strict failure.

    Mounted at the lowest priority (typically -999) so that types with no
    rule of their own (records, dicts, ``Any``) go straight to the declared
    default lookup.
    """

    def coerce(self, error: DecodingError, reader: FieldReader, target: Any, ctx: DecodeContext) -> Any:
        raise error
