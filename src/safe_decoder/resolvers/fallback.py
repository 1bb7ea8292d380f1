"""Declared-default lookup — the last resort for a failed field.

The engine asks ``FallbackKeyResolver.resolve`` only after the strict decode
failed *and* the type's coercion declined (or yielded "no value" for a
required field).  A declared default always wins; otherwise the original
failure is re-raised unchanged so the caller sees the true cause.
"""

from __future__ import annotations

from typing import Any, Optional

import structlog

from ..errors import DecodingError
from ..records import NO_DEFAULT, FieldDefault, FieldDescriptor

logger = structlog.get_logger(__name__)


class FallbackKeyResolver:
    """Resolve a field's declared default or re-raise the failure."""

    def lookup(self, descriptor: Optional[FieldDescriptor]) -> FieldDefault[Any]:
        """``NO_DEFAULT`` for array elements and raw-value reads (no descriptor)."""
        if descriptor is None:
            return NO_DEFAULT
        return descriptor.default

    def resolve(
            self,
            descriptor: Optional[FieldDescriptor],
            error: DecodingError,
    ) -> Any:
        default = self.lookup(descriptor)
        if not default.present:
            raise error
        logger.info(
            "fallback.applied",
            key=descriptor.key, pointer=error.pointer, kind=error.kind.value,
        )
        return default.value
