from skimalens.core.exceptions import (
    FormatError,
    ParseError,
    SkimaLensError,
    UnsupportedDataKindError,
)
from skimalens.core.models import MessageRole, NormalizedMessage, classify_role
from skimalens.core.types import (
    DataKind,
    DataMetadata,
    ParsedData,
    RawPayload,
    SerializationKind,
)

__all__ = [
    "DataKind",
    "DataMetadata",
    "FormatError",
    "MessageRole",
    "NormalizedMessage",
    "ParseError",
    "ParsedData",
    "RawPayload",
    "SerializationKind",
    "SkimaLensError",
    "UnsupportedDataKindError",
    "classify_role",
]
