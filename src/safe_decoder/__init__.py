from .core import (
    ABSENT,
    Coercion,
    CoercionNode,
    CoercionRegistry,
    DecodeContext,
    DecodeSession,
    Decoder,
    DecoderConfig,
    FieldReader,
    TypeMatcher,
    begin_session,
    current_session,
    end_session,
    session,
)
from .errors import (
    DataCorruptedError,
    DecodingError,
    DocumentError,
    FailureKind,
    KeyNotFoundError,
    SafeDecoderError,
    SchemaError,
    TypeMismatchError,
    ValueAbsentError,
    ValueNotFoundError,
    classify,
    is_recoverable,
)
from .factory import build_default_decoder
from .log import configure_logging
from .records import NO_DEFAULT, FallbackProvider, FieldDefault, decoded_field
from .scalars import (
    URL,
    Float32,
    Int8,
    Int16,
    Int32,
    Int64,
    UInt8,
    UInt16,
    UInt32,
    UInt64,
)

__all__ = [
    # entry point
    "build_default_decoder",
    "Decoder",
    "DecoderConfig",
    # session
    "DecodeSession",
    "DecodeContext",
    "begin_session",
    "end_session",
    "current_session",
    "session",
    # extension
    "ABSENT",
    "Coercion",
    "CoercionNode",
    "CoercionRegistry",
    "FieldReader",
    "TypeMatcher",
    # records
    "decoded_field",
    "FieldDefault",
    "NO_DEFAULT",
    "FallbackProvider",
    # errors
    "FailureKind",
    "SafeDecoderError",
    "DecodingError",
    "TypeMismatchError",
    "DataCorruptedError",
    "ValueAbsentError",
    "KeyNotFoundError",
    "ValueNotFoundError",
    "DocumentError",
    "SchemaError",
    "classify",
    "is_recoverable",
    # scalars
    "URL",
    "Float32",
    "Int8",
    "Int16",
    "Int32",
    "Int64",
    "UInt8",
    "UInt16",
    "UInt32",
    "UInt64",
    # logging
    "configure_logging",
]
