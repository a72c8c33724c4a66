"""Binary codec backed by msgspec's MessagePack implementation.

Two encode modes share one decoder:

* ``encode``                  – deterministic: map keys sorted
* ``encode_nondeterministic`` – insertion order, with every mapping reversed
  first so the byte stream really differs from the deterministic one
"""
from __future__ import annotations

from typing import Any, Dict

import msgspec

from ..errors import DecodeError, EncodeError
from ..scheme import Scheme
from .base import Serializer


def _reversed_maps(obj: Any) -> Any:
    if isinstance(obj, dict):
        return {k: _reversed_maps(obj[k]) for k in reversed(list(obj))}
    if isinstance(obj, list):
        return [_reversed_maps(v) for v in obj]
    return obj


class MsgpackSerializer(Serializer):
    name = "msgpack"

    def __init__(self, scheme: Scheme):
        super().__init__(scheme)
        self._encoder = msgspec.msgpack.Encoder(order="deterministic")
        self._nondeterministic = msgspec.msgpack.Encoder()
        self._decoder = msgspec.msgpack.Decoder()

    def _dump(self, payload: Dict[str, Any], buf: bytearray) -> None:
        self._encode_with(self._encoder, payload, buf)

    def encode_nondeterministic(self, obj: Any, buf: bytearray) -> None:
        payload = _reversed_maps(self._payload(obj))
        buf.clear()
        self._encode_with(self._nondeterministic, payload, buf)

    @staticmethod
    def _encode_with(encoder: msgspec.msgpack.Encoder, payload: Any, buf: bytearray) -> None:
        try:
            encoder.encode_into(payload, buf)
        except (msgspec.EncodeError, TypeError, OverflowError) as e:
            raise EncodeError(f"msgpack: {e}") from e

    def _load(self, data: bytes) -> Any:
        try:
            return self._decoder.decode(data)
        except msgspec.DecodeError as e:
            raise DecodeError(f"msgpack: {e}") from e
