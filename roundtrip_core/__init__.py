"""roundtrip-core - native ⇄ JSON / MessagePack ⇄ Unstructured round-trip verification."""

__version__ = "0.1.0"

from .models import (
    INTERNAL_VERSION,
    GroupVersion,
    GroupVersionKind,
    ObjectMeta,
    TypeMeta,
    Unstructured,
)
from .errors import (
    RoundtripError,
    SeedError,
    NotRegisteredError,
    ConversionError,
    FuzzError,
    SerializerError,
    EncodeError,
    DecodeError,
    DiagnoseError,
    SubtestFatal,
)
from .scheme import Scheme
from .fuzzer import Fuzzer, fuzzer_for
from .equality import Equalities, Semantic
from .serializer import CodecFactory, JSONSerializer, MsgpackSerializer, diagnose
from .roundtrip import (
    ASSERTIONS,
    RoundtripReport,
    RoundtripVerifier,
    SubtestResult,
    resolve_seed,
    roundtrip_to_unstructured,
)

__all__ = [
    "INTERNAL_VERSION",
    "GroupVersion",
    "GroupVersionKind",
    "ObjectMeta",
    "TypeMeta",
    "Unstructured",
    "RoundtripError",
    "SeedError",
    "NotRegisteredError",
    "ConversionError",
    "FuzzError",
    "SerializerError",
    "EncodeError",
    "DecodeError",
    "DiagnoseError",
    "SubtestFatal",
    "Scheme",
    "Fuzzer",
    "fuzzer_for",
    "Equalities",
    "Semantic",
    "CodecFactory",
    "JSONSerializer",
    "MsgpackSerializer",
    "diagnose",
    "ASSERTIONS",
    "RoundtripReport",
    "RoundtripVerifier",
    "SubtestResult",
    "resolve_seed",
    "roundtrip_to_unstructured",
]
