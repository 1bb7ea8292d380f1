"""Shared TypeMatcher implementations.

Only matchers that are genuinely reusable across multiple coercions live
here.  Matchers that are tightly coupled to a single coercion (e.g.
``EnumMatcher``) are co-located with that coercion in the ``handlers``
sub-package.

Exports
-------
ExactTypeMatcher
    Match one declared type by identity.

TableMatcher
    Match any type that is a key of a lookup table (the caster table).

AlwaysMatcher
    Unconditional match — catch-all / fallback sentinel.
"""

from __future__ import annotations

from typing import Any, Container

from .core import TypeMatcher


class ExactTypeMatcher(TypeMatcher):
    """Match a declared type by identity.

    ::

        ExactTypeMatcher(str).matches(str)       # True
        ExactTypeMatcher(str).matches(URL)       # False (subclass)
    """

    def __init__(self, tp: Any) -> None:
        self._tp = tp

    def matches(self, tp: Any) -> bool:
        return tp is self._tp


class TableMatcher(TypeMatcher):
    """Match types present in *table* (checked live, so later additions count).

    ::

        TableMatcher(BUILTIN_CASTERS).matches(int)   # True
    """

    def __init__(self, table: Container[Any]) -> None:
        self._table = table

    def matches(self, tp: Any) -> bool:
        try:
            return tp in self._table
        except TypeError:
            return False


class AlwaysMatcher(TypeMatcher):
    """Unconditional match — use as a catch-all / fallback node.

    ::

        AlwaysMatcher().matches(anything)   # True
    """

    def matches(self, tp: Any) -> bool:
        return True
