"""Containers sub-package — the strict document layer and field readers.

json     – strict decoding over ``json.loads`` output
readers  – ``FieldReader`` adapters used by every coercion
"""

from .json import (
    JsonDocument,
    JsonKeyedContainer,
    JsonRootView,
    JsonSequenceView,
    decode_strict_value,
)
from .readers import ElementReader, KeyedReader

__all__ = [
    "JsonDocument",
    "JsonKeyedContainer",
    "JsonRootView",
    "JsonSequenceView",
    "decode_strict_value",
    "ElementReader",
    "KeyedReader",
]
