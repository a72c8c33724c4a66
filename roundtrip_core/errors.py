"""Exception hierarchy shared by the scheme, the codecs and the verifier."""
from __future__ import annotations

from typing import Optional


class RoundtripError(RuntimeError):
    """Base class for every error raised by roundtrip_core."""
    pass


class SeedError(RoundtripError):
    """Raised when the seed override cannot be parsed as a signed 64-bit int."""
    pass


class NotRegisteredError(RoundtripError):
    """Raised when a scheme is asked for a kind it does not know."""
    pass


class ConversionError(RoundtripError):
    pass


class FuzzError(RoundtripError):
    pass


class SerializerError(RoundtripError):
    pass


class EncodeError(SerializerError):
    pass


class DecodeError(SerializerError):
    pass


class DiagnoseError(RoundtripError):
    """Raised when bytes cannot be fully disassembled.

    ``partial`` holds whatever was rendered before the failure.
    """

    def __init__(self, message: str, partial: Optional[str] = None):
        super().__init__(message)
        self.partial = partial or ""


class SubtestFatal(RoundtripError):
    """Aborts the enclosing subtest; sibling subtests keep running."""
    pass
