"""Text (JSON) and binary (MessagePack) codecs for registered objects."""
from __future__ import annotations

from ..scheme import Scheme
from .base import Serializer
from .diagnose import diagnose
from .json import JSONSerializer
from .msgpack import MsgpackSerializer


class CodecFactory:
    """One JSON and one MessagePack serializer bound to a scheme."""

    def __init__(self, scheme: Scheme):
        self.scheme = scheme
        self.json = JSONSerializer(scheme)
        self.msgpack = MsgpackSerializer(scheme)


__all__ = [
    "CodecFactory",
    "Serializer",
    "JSONSerializer",
    "MsgpackSerializer",
    "diagnose",
]
