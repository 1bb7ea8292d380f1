"""Decoder factory — the single place where all pieces are assembled.

``build_default_decoder`` is the recommended entry point for users who want a
fully functional Decoder without hand-wiring the coercion registry.

Customisation points:

* **diagnostic**  – callback for lossy recoveries.
* **lenient**     – ``False`` → strict decoding only.
* **date_parser** – ``str → datetime`` (default ISO-8601 internet date-time).
* **casters**     – extra / overriding ``type → caster`` entries.
* **coercions**   – extra ``CoercionNode``s mounted in the registry.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Callable, Iterable, Mapping

from .casters import BUILTIN_CASTERS, Caster
from .containers.json import JsonDocument
from .core import CoercionNode, CoercionRegistry, Decoder, DecoderConfig, Diagnostic
from .handlers.container import ArrayCoercion, ListMatcher
from .handlers.enum import EnumMatcher, RawValueCoercion
from .handlers.identity import NoCoercion
from .handlers.scalar import CasterCoercion, DateCoercion, StringCoercion, URLCoercion
from .matchers import AlwaysMatcher, ExactTypeMatcher, TableMatcher
from .resolvers.fallback import FallbackKeyResolver
from .scalars import URL, parse_iso8601


def build_default_decoder(
        *,
        diagnostic: Diagnostic | None = None,
        lenient: bool = True,
        date_parser: Callable[[str], datetime] | None = None,
        casters: Mapping[Any, Caster] | None = None,
        coercions: Iterable[CoercionNode] = (),
) -> Decoder:
    """Assemble a Decoder over JSON-shaped values with the standard coercions.

    What gets wired
    ---------------
    document
        ``JsonDocument`` — strict decoding of ``json.loads`` output.

    registry
        * ``RawValueCoercion`` (priority 20)   – ``enum.Enum`` subclasses.
        * ``StringCoercion``   (priority 10)   – ``str``.
        * ``DateCoercion``     (priority 10)   – ``datetime``.
        * ``URLCoercion``      (priority 10)   – ``URL``.
        * ``CasterCoercion``   (priority 10)   – every type in the caster
          table (bool, int, float, Float32, Int8 … UInt64 by default).
        * ``ArrayCoercion``    (priority 10)   – ``list[T]``.
        * ``NoCoercion``       (priority -999, catch-all) – records, dicts,
          ``Any``: straight to the declared default.

    fallback
        ``FallbackKeyResolver`` — ``decoded_field(fallback=…)`` and
        ``FallbackProvider.fallback_value``.

    Args:
        diagnostic:  ``(failure, raw_text) → None``, called once per lossy
                     recovery.  Can be overridden per ``decode`` call.
        lenient:     ``False`` → no coercion and no declared defaults.
        date_parser: Parser for ``datetime`` fields; must raise ``ValueError``
                     on bad input.  ``None`` → ``parse_iso8601``.
        casters:     Merged over ``BUILTIN_CASTERS`` (e.g. a stricter ``bool``
                     rule, or a caster for a custom ``FixedWidthInt``).
        coercions:   Extra nodes; give them a priority above 10 to override a
                     built-in rule.

    Returns:
        Fully wired ``Decoder`` ready for use.

    Example::

        @dataclass
        class Item:
            id: int
            tags: list[str] = decoded_field(fallback=[])

        decoder = build_default_decoder()
        decoder.decode(Item, {"id": "7"})
        # → Item(id=7, tags=[])
    """
    table: dict[Any, Caster] = dict(BUILTIN_CASTERS)
    if casters:
        table.update(casters)

    registry = CoercionRegistry()
    registry.register(CoercionNode(
        name="enum", priority=20,
        matcher=EnumMatcher(),
        coercion=RawValueCoercion(),
    ))
    registry.register(CoercionNode(
        name="string", priority=10,
        matcher=ExactTypeMatcher(str),
        coercion=StringCoercion(),
    ))
    registry.register(CoercionNode(
        name="date", priority=10,
        matcher=ExactTypeMatcher(datetime),
        coercion=DateCoercion(),
    ))
    registry.register(CoercionNode(
        name="url", priority=10,
        matcher=ExactTypeMatcher(URL),
        coercion=URLCoercion(),
    ))
    registry.register(CoercionNode(
        name="scalar", priority=10,
        matcher=TableMatcher(table),
        coercion=CasterCoercion(table),
    ))
    registry.register(CoercionNode(
        name="array", priority=10,
        matcher=ListMatcher(),
        coercion=ArrayCoercion(),
    ))
    for node in coercions:
        registry.register(node)
    registry.register(CoercionNode(
        name="identity", priority=-999,
        matcher=AlwaysMatcher(),
        coercion=NoCoercion(),
    ))

    config = DecoderConfig(
        diagnostic=diagnostic,
        lenient=lenient,
        date_parser=date_parser or parse_iso8601,
    )
    return Decoder(
        document=JsonDocument(),
        registry=registry,
        fallback=FallbackKeyResolver(),
        config=config,
    )
