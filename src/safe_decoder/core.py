"""Core abstractions, the decode session, the coercion registry and Decoder.

This module owns every *interface* in the system.  Concrete document
containers live in ``containers``, coercion strategies in ``handlers``, the
default-value lookup in ``resolvers`` and the wiring in ``factory``.

Decode flow (``Decoder.decode`` entry point)::

    data (JSON-shaped value)
      │
      ▼
    session(config)                         ← one DecodeSession per call
      │
      ▼
    decode_element(T, root_view, ctx)       ← the root is a one-element array
      │
      ▼
    decode_value(T, reader, ctx)
        reader.decode_strict(T, ctx)        ← always attempted first
          └─ record types: decode_record → decode_value per field
        on DecodingError:
            classify(error)                 → not recoverable: re-raise
            coercion_for(T).coerce(…)       ← registry, first match by priority
                value  → done
                ABSENT → None (optional) / fallback (required)
                raises → fallback
            fallback.resolve(descriptor, error)
                default → done
                none    → re-raise the original error
"""

from __future__ import annotations

import dataclasses
from abc import ABC, abstractmethod
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass, field
from datetime import datetime
from typing import (
    TYPE_CHECKING, Any, Callable, Dict, Iterator, List, Optional, Tuple,
)

import structlog

from .casters import format_scalar
from .errors import (
    DecodingError,
    FailureKind,
    PathItem,
    SafeDecoderError,
    TypeMismatchError,
    classify,
    type_name,
)
from .scalars import Int64, parse_iso8601

if TYPE_CHECKING:
    from .records import FieldDescriptor, RecordSchema
    from .resolvers.fallback import FallbackKeyResolver

logger = structlog.get_logger(__name__)


class _Absent:
    """Sentinel returned by a coercion whose recovery is "no value"."""

    _instance: Optional["_Absent"] = None

    def __new__(cls) -> "_Absent":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "ABSENT"

    def __bool__(self) -> bool:
        return False


ABSENT = _Absent()

_UNSET: Any = object()
_DECLINED: Any = object()

#: Signature of the diagnostic callback: ``(failure, raw_text) → None``.
Diagnostic = Callable[[DecodingError, str], None]


# ─────────────────────────────────────────────────────────────────────────────
# Configuration and session
# ─────────────────────────────────────────────────────────────────────────────


@dataclass(frozen=True)
class DecoderConfig:
    """Caller-facing configuration, fixed for the lifetime of one session.

    Attributes:
        diagnostic:  Called once per lossy recovery with the failure and the
                     offending raw text.  ``None`` → recoveries are only logged.
        lenient:     ``False`` disables coercion and declared defaults
                     entirely; the strict decoder runs alone.
        date_parser: ``str → datetime``; must raise ``ValueError`` on bad input.
    """

    diagnostic: Optional[Diagnostic] = None
    lenient: bool = True
    date_parser: Callable[[str], datetime] = parse_iso8601


_current_session: ContextVar[Optional["DecodeSession"]] = ContextVar(
    "safe_decoder_session", default=None,
)


@dataclass(eq=False)
class DecodeSession:
    """Per-top-level-call scope carrying the configuration.

    The session is read, never mutated, by nested decode steps, with one
    exception: the diagnostics journal, which lets a strict attempt that
    gets thrown away (and retried element-wise) take its reports with it.
    """

    config: DecoderConfig
    open: bool = True
    _journal: List[List[Tuple[DecodingError, str]]] = field(default_factory=list, repr=False)
    _token: Any = field(default=None, repr=False)

    @property
    def diagnostic(self) -> Optional[Diagnostic]:
        return self.config.diagnostic

    def report(self, failure: DecodingError, raw: str) -> None:
        """Report a lossy recovery (held while inside a ``tentative`` scope)."""
        if self._journal:
            self._journal[-1].append((failure, raw))
            return
        logger.warning(
            "diagnostic.reported",
            kind=failure.kind.value, pointer=failure.pointer, raw=raw,
        )
        if self.config.diagnostic is not None:
            self.config.diagnostic(failure, raw)

    @contextmanager
    def tentative(self) -> Iterator[None]:
        """Hold reports; release them on success, drop them on failure."""
        self._journal.append([])
        try:
            yield
        except BaseException:
            self._journal.pop()
            raise
        for failure, raw in self._journal.pop():
            self.report(failure, raw)


def begin_session(config: DecoderConfig) -> DecodeSession:
    """Open a session and make it the current one for this thread / task."""
    sess = DecodeSession(config=config)
    sess._token = _current_session.set(sess)
    logger.debug("session.begin", lenient=config.lenient, diagnostic=config.diagnostic is not None)
    return sess


def end_session(sess: DecodeSession) -> None:
    """Close *sess* and restore whatever session was current before it."""
    if not sess.open:
        return
    sess.open = False
    _current_session.reset(sess._token)
    logger.debug("session.end")


def current_session() -> Optional[DecodeSession]:
    return _current_session.get()


@contextmanager
def session(config: DecoderConfig) -> Iterator[DecodeSession]:
    """``begin_session`` / ``end_session`` around a block, even on error."""
    sess = begin_session(config)
    try:
        yield sess
    finally:
        end_session(sess)


@dataclass
class DecodeContext:
    """State threaded through an entire ``decode`` call.

    Attributes:
        session: The session of the top-level call.
        decoder: Back-reference to the owning Decoder (gives access to
                 ``decode_value``, ``decode_element``, ``decode_record``…).
    """

    session: DecodeSession
    decoder: "Decoder"

    @property
    def config(self) -> DecoderConfig:
        return self.session.config


# ─────────────────────────────────────────────────────────────────────────────
# Document interface — the strict decoder being wrapped
# ─────────────────────────────────────────────────────────────────────────────


class KeyedContainer(ABC):
    """Object-shaped node of a document.

    ``decode_strict`` never coerces: wrong shape → ``TypeMismatchError``,
    uninterpretable content → ``DataCorruptedError``, missing key →
    ``KeyNotFoundError``, ``null`` → ``ValueNotFoundError``.
    """

    path: List[PathItem]

    @abstractmethod
    def has_key(self, key: str) -> bool: ...

    @abstractmethod
    def is_null(self, key: str) -> bool:
        """True if *key* is missing or holds ``null``."""

    @abstractmethod
    def decode_strict(self, tp: Any, key: str, ctx: DecodeContext) -> Any: ...

    def decode_strict_if_present(self, tp: Any, key: str, ctx: DecodeContext) -> Any:
        """Like ``decode_strict`` but a missing key or ``null`` yields ``None``."""
        if self.is_null(key):
            return None
        return self.decode_strict(tp, key, ctx)

    @abstractmethod
    def nested_sequence(self, key: str) -> "SequenceView": ...

    @abstractmethod
    def nested_keyed(self, key: str) -> "KeyedContainer": ...


class SequenceView(ABC):
    """Cursor over an array-shaped node.

    Reads advance the cursor only when they succeed, so a failed strict
    read can be retried differently at the same position.
    """

    path: List[PathItem]

    @property
    @abstractmethod
    def is_at_end(self) -> bool: ...

    @property
    @abstractmethod
    def current_index(self) -> int: ...

    @abstractmethod
    def element_path(self) -> List[PathItem]:
        """Coding path of the element under the cursor."""

    @abstractmethod
    def decode_strict(self, tp: Any, ctx: DecodeContext) -> Any: ...

    @abstractmethod
    def decode_strict_if_present(self, tp: Any, ctx: DecodeContext) -> Any: ...

    @abstractmethod
    def nested_sequence(self) -> "SequenceView": ...

    @abstractmethod
    def skip(self) -> None:
        """Advance past the current element without reading it."""


class Document(ABC):
    """Entry point into a concrete document representation."""

    @abstractmethod
    def parse(self, text: Any) -> Any:
        """Turn serialized text into a document value (``DocumentError`` on failure)."""

    @abstractmethod
    def root(self, data: Any) -> SequenceView:
        """A one-element view whose only element is the document root."""


class FieldReader(ABC):
    """Uniform read surface over one value: a keyed field or an array element.

    Coercion strategies only ever talk to a ``FieldReader``, so each is
    written once for both container kinds.
    """

    @property
    @abstractmethod
    def path(self) -> List[PathItem]: ...

    @property
    def key(self) -> Optional[str]:
        """Field key, or ``None`` for an array element (no declared default)."""
        return None

    @abstractmethod
    def decode_strict(self, tp: Any, ctx: DecodeContext) -> Any: ...

    @abstractmethod
    def decode_strict_if_present(self, tp: Any, ctx: DecodeContext) -> Any: ...

    @abstractmethod
    def nested_sequence(self) -> SequenceView: ...

    def read_string(self, ctx: DecodeContext) -> str:
        """Best-effort string form of the value.

        A direct string read first; on a type mismatch, 64-bit integer,
        floating point and boolean reads are tried in turn and formatted back to text.
        """
        try:
            return self.decode_strict(str, ctx)
        except TypeMismatchError as mismatch:
            for alternate in (Int64, float, bool):
                try:
                    value = self.decode_strict(alternate, ctx)
                except DecodingError:
                    continue
                return format_scalar(value)
            raise mismatch


# ─────────────────────────────────────────────────────────────────────────────
# Coercion system — per-type strategy selection
# ─────────────────────────────────────────────────────────────────────────────


class TypeMatcher(ABC):
    """Predicate over a *declared* target type (never over a runtime value).

    Examples::

        ExactTypeMatcher(str)    → tp is str
        EnumMatcher()            → tp is an Enum subclass
        ListMatcher()            → tp is list or list[T]
    """

    @abstractmethod
    def matches(self, tp: Any) -> bool: ...


class Coercion(ABC):
    """Recovery strategy for one family of target types.

    ``coerce`` is called only after the strict read failed with a
    recoverable ``error``.  It returns the recovered value, or ``ABSENT``
    when the recovery is "no value", and raises (any ``DecodingError``,
    typically *error* itself) to decline.
    """

    @abstractmethod
    def coerce(self, error: DecodingError, reader: FieldReader, target: Any, ctx: DecodeContext) -> Any: ...


@dataclass
class CoercionNode:
    """Single node in the coercion registry."""

    name: str
    priority: int
    matcher: TypeMatcher
    coercion: Coercion


class CoercionRegistry:
    """Priority-ordered, first-match registry of ``CoercionNode``.

    ::

        coercion = registry.resolve(int)
    """

    def __init__(self) -> None:
        self._nodes: List[CoercionNode] = []

    # -- registration -------------------------------------------------------

    def register(self, node: CoercionNode) -> None:
        """Add a node to the registry."""
        self._nodes.append(node)

    # -- dispatch -----------------------------------------------------------

    def resolve(self, tp: Any) -> Optional[Coercion]:
        """Return the coercion of the highest-priority node matching *tp*."""
        for node in self.nodes():
            if node.matcher.matches(tp):
                return node.coercion
        return None

    # -- introspection ------------------------------------------------------

    def nodes(self) -> List[CoercionNode]:
        """Return nodes sorted by descending priority."""
        return sorted(self._nodes, key=lambda n: n.priority, reverse=True)


# ─────────────────────────────────────────────────────────────────────────────
# Decoder — orchestrator / public entry point
# ─────────────────────────────────────────────────────────────────────────────


class Decoder:
    """Top-level orchestrator.  Holds the document layer, the coercion
    registry and the fallback resolver, opens sessions and runs the
    strict → classify → coerce → fallback algorithm.

    Algorithms (see individual method docs for details):

    * ``decode``          – open a session, decode the root, close it.
    * ``decode_value``    – required value through the full engine.
    * ``decode_value_if_present`` – optional value (missing / null → None).
    * ``decode_element``  – one array element (no declared default).
    * ``decode_record``   – build a dataclass field by field.
    """

    def __init__(
            self,
            *,
            document: Document,
            registry: CoercionRegistry,
            fallback: "FallbackKeyResolver",
            config: Optional[DecoderConfig] = None,
    ) -> None:
        self.document = document
        self.registry = registry
        self.fallback = fallback
        self.config = config or DecoderConfig()
        self._coercions: Dict[Any, Optional[Coercion]] = {}
        self._schemas: Dict[type, "RecordSchema"] = {}

    # -- public API ---------------------------------------------------------

    def decode(self, tp: Any, data: Any, *, diagnostic: Any = _UNSET) -> Any:
        """Decode *data* (an already-parsed JSON value) as *tp*.

        *diagnostic* overrides the configured callback for this call only
        (``None`` disables it).
        """
        config = self.config
        if diagnostic is not _UNSET:
            config = dataclasses.replace(config, diagnostic=diagnostic)

        with session(config) as sess:
            ctx = DecodeContext(session=sess, decoder=self)
            try:
                return self.decode_element(tp, self.document.root(data), ctx)
            except SafeDecoderError as error:
                logger.debug(
                    "decode.failed",
                    target=type_name(tp),
                    error=type(error).__name__,
                    pointer=getattr(error, "pointer", None),
                )
                raise

    def decode_json(self, tp: Any, text: Any, *, diagnostic: Any = _UNSET) -> Any:
        """Parse *text* (``str`` / ``bytes``) and decode it as *tp*."""
        return self.decode(tp, self.document.parse(text), diagnostic=diagnostic)

    # -- engine -------------------------------------------------------------

    def decode_value(
            self,
            tp: Any,
            reader: FieldReader,
            ctx: DecodeContext,
            descriptor: Optional["FieldDescriptor"] = None,
    ) -> Any:
        """Decode a required value.

        *descriptor* is the field being decoded; ``None`` disables the
        declared-default lookup (array elements, raw values of enums).
        """
        if not ctx.config.lenient:
            return reader.decode_strict(tp, ctx)
        try:
            with ctx.session.tentative():
                return reader.decode_strict(tp, ctx)
        except SafeDecoderError as error:
            kind = classify(error, tp)
            if kind is None:
                raise
            if kind is FailureKind.VALUE_ABSENT:
                return self.fallback.resolve(descriptor, error)
            result = self._coerce(tp, error, reader, ctx)
            if result is not ABSENT:
                return result
            return self.fallback.resolve(descriptor, error)

    def decode_value_if_present(
            self,
            tp: Any,
            reader: FieldReader,
            ctx: DecodeContext,
            descriptor: Optional["FieldDescriptor"] = None,
    ) -> Any:
        """Decode an optional value; missing or ``null`` is ``None``, never an error."""
        if not ctx.config.lenient:
            return reader.decode_strict_if_present(tp, ctx)
        try:
            with ctx.session.tentative():
                return reader.decode_strict_if_present(tp, ctx)
        except SafeDecoderError as error:
            kind = classify(error, tp)
            if kind is None:
                raise
            if kind is FailureKind.VALUE_ABSENT:
                return self.fallback.resolve(descriptor, error)
            result = self._coerce(tp, error, reader, ctx, optional=True)
            if result is ABSENT:
                return None
            if result is not _DECLINED:
                return result
            return self.fallback.resolve(descriptor, error)

    def decode_element(self, tp: Any, view: SequenceView, ctx: DecodeContext) -> Any:
        """Decode the element under *view*'s cursor and advance past it."""
        from .containers.readers import ElementReader
        from .utils.hints import unwrap_optional

        index = view.current_index
        inner, optional = unwrap_optional(tp)
        reader = ElementReader(view)
        if optional:
            value = self.decode_value_if_present(inner, reader, ctx)
        else:
            value = self.decode_value(inner, reader, ctx)
        if view.current_index == index:
            view.skip()
        return value

    def decode_record(self, cls: type, container: KeyedContainer, ctx: DecodeContext) -> Any:
        """Build dataclass *cls* from *container*, one field at a time."""
        from .containers.readers import KeyedReader

        schema = self.schema_for(cls)
        values: dict[str, Any] = {}
        for fd in schema.fields:
            reader = KeyedReader(container, fd.key)
            if fd.optional:
                values[fd.name] = self.decode_value_if_present(fd.type, reader, ctx, fd)
            else:
                values[fd.name] = self.decode_value(fd.type, reader, ctx, fd)
        return cls(**values)

    # -- lookups ------------------------------------------------------------

    def coercion_for(self, tp: Any) -> Optional[Coercion]:
        """Registry lookup for *tp*, cached per declared type."""
        try:
            return self._coercions[tp]
        except KeyError:
            coercion = self._coercions[tp] = self.registry.resolve(tp)
            return coercion
        except TypeError:
            return self.registry.resolve(tp)

    def schema_for(self, cls: type) -> "RecordSchema":
        """Field schema of dataclass *cls*, built (and validated) once."""
        from .records import RecordSchema

        schema = self._schemas.get(cls)
        if schema is None:
            schema = self._schemas[cls] = RecordSchema.of(cls)
        return schema

    # -- internals ----------------------------------------------------------

    def _coerce(
            self,
            tp: Any,
            error: DecodingError,
            reader: FieldReader,
            ctx: DecodeContext,
            *,
            optional: bool = False,
    ) -> Any:
        """Run the coercion for *tp*.

        Returns the value, ``ABSENT``, or ``_DECLINED`` (optional only; for a
        required value a decline and ``ABSENT`` both mean "ask for a default").
        """
        declined = _DECLINED if optional else ABSENT
        coercion = self.coercion_for(tp)
        if coercion is None:
            return declined
        try:
            result = coercion.coerce(error, reader, tp, ctx)
        except DecodingError as decline:
            logger.debug(
                "coercion.declined",
                target=type_name(tp), pointer=error.pointer,
                kind=error.kind.value, cause=decline.reason,
            )
            return declined
        if result is not ABSENT:
            logger.debug(
                "coercion.applied",
                target=type_name(tp), pointer=error.pointer, kind=error.kind.value,
            )
        return result
