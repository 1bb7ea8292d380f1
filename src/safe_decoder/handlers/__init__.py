"""Handlers sub-package — concrete Coercion + TypeMatcher implementations,
grouped by target family.

scalar    – numbers, booleans, strings, dates and URLs
container – element-wise re-walk of arrays + its matcher
enum      – raw-value resolution for enums + its matcher
identity  – decline everything (catch-all)
"""

from .container import ArrayCoercion, ListMatcher
from .enum import EnumMatcher, RawValueCoercion
from .identity import NoCoercion
from .scalar import CasterCoercion, DateCoercion, StringCoercion, URLCoercion

__all__ = [
    # scalar
    "StringCoercion",
    "CasterCoercion",
    "DateCoercion",
    "URLCoercion",
    # container
    "ListMatcher",
    "ArrayCoercion",
    # enum
    "EnumMatcher",
    "RawValueCoercion",
    # identity
    "NoCoercion",
]
