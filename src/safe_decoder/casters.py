"""Built-in casters — the scalar coercion table.

A *caster* turns the string form of a misdecoded value into the target
type, or returns ``None`` to decline.  Casters are pure: they never raise,
never touch the document and never read the decode session.

Number grammars are ASCII-only and locale-invariant: ``"1_000"``, ``" 1"``
and ``"١"`` (Arabic-Indic one) all decline even though ``int()`` would
accept them.

Exports
-------
BUILTIN_CASTERS
    Mapping of target type → caster.  Default types: bool, int, float,
    the fixed-width integers and Float32.

cast_bool, cast_int, cast_float
    The individual rules.

make_int_caster
    Caster factory for bounded integer types.

format_scalar
    The reverse direction: canonical text of a number / boolean, used when a
    string was expected but a primitive arrived.

Custom casters can be registered by passing a custom casters dict to
``build_default_decoder(casters=...)``.
"""

from __future__ import annotations

import math
from typing import Any, Callable, Optional

import regex

from .scalars import FIXED_WIDTH_INTS, FixedWidthInt, Float32

Caster = Callable[[str], Optional[Any]]

_INT_RE = regex.compile(r"[+-]?[0-9]+")
_FLOAT_RE = regex.compile(
    r"[+-]?(?:[0-9]+(?:\.[0-9]*)?|\.[0-9]+)(?:[eE][+-]?[0-9]+)?"
    r"|[+-]?(?i:inf|infinity|nan)"
)


def cast_bool(text: str) -> Optional[bool]:
    """``"true"`` / ``"false"`` in any letter case; everything else declines."""
    lowered = text.lower()
    if lowered == "true":
        return True
    if lowered == "false":
        return False
    return None


def cast_int(text: str) -> Optional[int]:
    if _INT_RE.fullmatch(text) is None:
        return None
    try:
        return int(text)
    except ValueError:
        # beyond the interpreter's int string conversion limit
        return None


def cast_float(text: str) -> Optional[float]:
    if _FLOAT_RE.fullmatch(text) is None:
        return None
    return float(text)


def make_int_caster(tp: type[FixedWidthInt]) -> Caster:
    """Caster for a fixed-width integer type; declines on overflow."""

    def caster(text: str) -> Optional[FixedWidthInt]:
        value = cast_int(text)
        if value is None or not tp.fits(value):
            return None
        return tp(value)

    caster.__name__ = f"cast_{tp.__name__.lower()}"
    return caster


def cast_float32(text: str) -> Optional[Float32]:
    value = cast_float(text)
    if value is None:
        return None
    try:
        return Float32(value)
    except OverflowError:
        return None


def format_scalar(value: Any) -> Optional[str]:
    """Canonical text for a JSON primitive, ``None`` for anything else.

    ::

        format_scalar(1)     → "1"
        format_scalar(1.5)   → "1.5"
        format_scalar(True)  → "true"
        format_scalar([1])   → None
    """
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, int):
        return str(int(value))
    if isinstance(value, float):
        if math.isnan(value):
            return "nan"
        if math.isinf(value):
            return "inf" if value > 0 else "-inf"
        return repr(float(value))
    return None


# ─────────────────────────────────────────────────────────────────────────────
# Built-in casters
# ─────────────────────────────────────────────────────────────────────────────

BUILTIN_CASTERS: dict[Any, Caster] = {
    bool: cast_bool,
    int: cast_int,
    float: cast_float,
    Float32: cast_float32,
    **{tp: make_int_caster(tp) for tp in FIXED_WIDTH_INTS},
}
