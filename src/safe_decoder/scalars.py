"""Scalar target types that Python does not ship natively.

* ``Int8`` … ``UInt64`` – fixed-width integers.  They are ``int``
  subclasses, so decoded values compare equal to plain ints; the width only
  matters for range checks.
* ``Float32``          – single-precision float (rounded on construction).
* ``URL``              – a ``str`` subclass holding a syntactically valid URI
  reference.
* ``parse_iso8601``    – the default date parser (internet date-time).
"""

from __future__ import annotations

import math
import struct
from datetime import datetime, timedelta, timezone
from typing import ClassVar, Optional

import regex


class FixedWidthInt(int):
    """Base class for bounded integer types.

    ``FixedWidthInt`` itself is not a target type; use one of the concrete
    subclasses below.
    """

    MIN: ClassVar[int]
    MAX: ClassVar[int]

    def __new__(cls, value: int = 0):
        value = int(value)
        if not cls.fits(value):
            raise OverflowError(f"{value} does not fit in {cls.__name__}")
        return super().__new__(cls, value)

    @classmethod
    def fits(cls, value: int) -> bool:
        return cls.MIN <= value <= cls.MAX

    def __repr__(self) -> str:
        return f"{type(self).__name__}({int(self)})"


def _bounded(name: str, bits: int, signed: bool) -> type:
    lo = -(1 << (bits - 1)) if signed else 0
    hi = (1 << (bits - 1)) - 1 if signed else (1 << bits) - 1
    return type(name, (FixedWidthInt,), {"MIN": lo, "MAX": hi, "__module__": __name__})


Int8 = _bounded("Int8", 8, True)
Int16 = _bounded("Int16", 16, True)
Int32 = _bounded("Int32", 32, True)
Int64 = _bounded("Int64", 64, True)
UInt8 = _bounded("UInt8", 8, False)
UInt16 = _bounded("UInt16", 16, False)
UInt32 = _bounded("UInt32", 32, False)
UInt64 = _bounded("UInt64", 64, False)

FIXED_WIDTH_INTS = (Int8, Int16, Int32, Int64, UInt8, UInt16, UInt32, UInt64)


class Float32(float):
    """IEEE-754 single precision value.

    Construction rounds to the nearest representable single; values beyond
    the single-precision range raise ``OverflowError``.
    """

    def __new__(cls, value: float = 0.0):
        value = float(value)
        if math.isfinite(value):
            value = struct.unpack("<f", struct.pack("<f", value))[0]
        return super().__new__(cls, value)

    def __repr__(self) -> str:
        return f"Float32({float(self)!r})"


# ─────────────────────────────────────────────────────────────────────────────
# URL
# ─────────────────────────────────────────────────────────────────────────────

# RFC 3986 unreserved + reserved characters, or a well-formed percent escape.
_URL_RE = regex.compile(r"(?:[A-Za-z0-9\-._~:/?#\[\]@!$&'()*+,;=]|%[0-9A-Fa-f]{2})+")
_SCHEME_RE = regex.compile(r"[A-Za-z][A-Za-z0-9+.\-]*:")


class URL(str):
    """A URI reference, absolute (``https://x.io/a``) or relative (``a/b``).

    Only syntax is checked: every character must be legal in a URI (or be a
    percent escape) and the string must be non-empty.
    """

    def __new__(cls, value: str):
        if not cls.is_valid(value):
            raise ValueError(f"invalid URL string: {value!r}")
        return super().__new__(cls, value)

    @staticmethod
    def is_valid(value: str) -> bool:
        return isinstance(value, str) and _URL_RE.fullmatch(value) is not None

    @property
    def scheme(self) -> Optional[str]:
        m = _SCHEME_RE.match(self)
        return m.group(0)[:-1].lower() if m else None

    def __repr__(self) -> str:
        return f"URL({str(self)!r})"


# ─────────────────────────────────────────────────────────────────────────────
# Dates
# ─────────────────────────────────────────────────────────────────────────────

_ISO8601_RE = regex.compile(
    r"(?P<y>[0-9]{4})-(?P<mo>[0-9]{2})-(?P<d>[0-9]{2})"
    r"[Tt](?P<h>[0-9]{2}):(?P<mi>[0-9]{2}):(?P<s>[0-9]{2})"
    r"(?:\.(?P<frac>[0-9]+))?"
    r"(?P<tz>[Zz]|[+-][0-9]{2}:?[0-9]{2})"
)


def parse_iso8601(text: str) -> datetime:
    """Parse an internet date-time (``2019-01-01T01:01:01Z``).

    A time-zone designator is mandatory.  Fractional seconds are accepted and
    truncated to microseconds.  Raises ``ValueError`` on anything else.
    """
    m = _ISO8601_RE.fullmatch(text)
    if m is None:
        raise ValueError(f"not an ISO-8601 date-time: {text!r}")

    tz = m["tz"]
    if tz in ("Z", "z"):
        tzinfo = timezone.utc
    else:
        sign = -1 if tz[0] == "-" else 1
        digits = tz[1:].replace(":", "")
        offset = timedelta(hours=int(digits[:2]), minutes=int(digits[2:]))
        tzinfo = timezone(sign * offset)

    micro = int((m["frac"] or "0")[:6].ljust(6, "0"))
    return datetime(
        int(m["y"]), int(m["mo"]), int(m["d"]),
        int(m["h"]), int(m["mi"]), int(m["s"]),
        micro, tzinfo=tzinfo,
    )
