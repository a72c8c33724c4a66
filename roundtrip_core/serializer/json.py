"""Text codec backed by orjson."""
from __future__ import annotations

from typing import Any, Dict

import orjson

from ..errors import DecodeError, EncodeError
from .base import Serializer


class JSONSerializer(Serializer):
    name = "json"
    options = orjson.OPT_NON_STR_KEYS

    def _dump(self, payload: Dict[str, Any], buf: bytearray) -> None:
        try:
            buf += orjson.dumps(payload, option=self.options)
        except orjson.JSONEncodeError as e:
            raise EncodeError(f"json: {e}") from e

    def _load(self, data: bytes) -> Any:
        try:
            return orjson.loads(data)
        except orjson.JSONDecodeError as e:
            raise DecodeError(f"json: {e}") from e
