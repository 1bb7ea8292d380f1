"""``FieldReader`` adapters: one keyed field, or the element under a cursor."""

from __future__ import annotations

from typing import Any, List, Optional

from ..core import DecodeContext, FieldReader, KeyedContainer, SequenceView
from ..errors import PathItem


class KeyedReader(FieldReader):
    """Reads ``container[key]``."""

    def __init__(self, container: KeyedContainer, key: str) -> None:
        self._container = container
        self._key = key

    @property
    def path(self) -> List[PathItem]:
        return self._container.path + [self._key]

    @property
    def key(self) -> Optional[str]:
        return self._key

    def decode_strict(self, tp: Any, ctx: DecodeContext) -> Any:
        return self._container.decode_strict(tp, self._key, ctx)

    def decode_strict_if_present(self, tp: Any, ctx: DecodeContext) -> Any:
        return self._container.decode_strict_if_present(tp, self._key, ctx)

    def nested_sequence(self) -> SequenceView:
        return self._container.nested_sequence(self._key)

    def __repr__(self) -> str:
        return f"KeyedReader({self._key!r})"


class ElementReader(FieldReader):
    """Reads the element under *view*'s cursor.

    Every successful read consumes the element, so at most one read per
    element may succeed; failed reads leave the cursor where it was.
    """

    def __init__(self, view: SequenceView) -> None:
        self._view = view

    @property
    def path(self) -> List[PathItem]:
        return self._view.element_path()

    def decode_strict(self, tp: Any, ctx: DecodeContext) -> Any:
        return self._view.decode_strict(tp, ctx)

    def decode_strict_if_present(self, tp: Any, ctx: DecodeContext) -> Any:
        return self._view.decode_strict_if_present(tp, ctx)

    def nested_sequence(self) -> SequenceView:
        return self._view.nested_sequence()

    def __repr__(self) -> str:
        return f"ElementReader(index={self._view.current_index})"
