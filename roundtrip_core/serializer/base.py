"""Shared encode / decode plumbing.

Every serializer offers two decode targets:

* ``decode_generic`` → :class:`Unstructured` (schemaless mapping)
* ``decode_typed``   → a registered typed object built through the scheme

Subclasses only implement ``_dump`` (mapping → bytes into a buffer) and
``_load`` (bytes → python value).
"""
from __future__ import annotations

from typing import Any, Dict, Optional, Tuple

from ..errors import ConversionError, DecodeError, EncodeError, NotRegisteredError
from ..fields import is_dataclass_type
from ..models import GroupVersionKind, Unstructured
from ..scheme import Scheme


class Serializer:
    name = "base"

    def __init__(self, scheme: Scheme):
        self.scheme = scheme

    # ── encode ───────────────────────────────────────────────
    def encode(self, obj: Any, buf: bytearray) -> None:
        payload = self._payload(obj)
        buf.clear()
        self._dump(payload, buf)

    def _payload(self, obj: Any) -> Dict[str, Any]:
        if isinstance(obj, Unstructured):
            return obj.object
        if isinstance(obj, dict):
            return obj
        if is_dataclass_type(type(obj)):
            try:
                return self.scheme.to_unstructured(obj)
            except ConversionError as e:
                raise EncodeError(f"{self.name}: {e}") from e
        raise EncodeError(f"{self.name}: cannot encode {type(obj).__qualname__}")

    def _dump(self, payload: Dict[str, Any], buf: bytearray) -> None:
        raise NotImplementedError

    def _load(self, data: bytes) -> Any:
        raise NotImplementedError

    # ── decode ───────────────────────────────────────────────
    def decode_generic(
        self, data: bytes, default_gvk: Optional[GroupVersionKind] = None
    ) -> Tuple[Unstructured, GroupVersionKind]:
        raw = self._load_mapping(data)
        gvk = self._resolve_gvk(raw, default_gvk)
        u = Unstructured(raw)
        if not raw.get("apiVersion") or not raw.get("kind"):
            u.set_group_version_kind(gvk)
        return u, gvk

    def decode_typed(
        self, data: bytes, default_gvk: Optional[GroupVersionKind] = None
    ) -> Tuple[Any, GroupVersionKind]:
        raw = self._load_mapping(data)
        gvk = self._resolve_gvk(raw, default_gvk)
        try:
            obj = self.scheme.new(gvk)
            self.scheme.from_unstructured(raw, obj)
        except (NotRegisteredError, ConversionError) as e:
            raise DecodeError(f"{self.name}: {e}") from e
        obj.set_group_version_kind(gvk)
        return obj, gvk

    def _load_mapping(self, data: bytes) -> Dict[str, Any]:
        raw = self._load(data)
        if not isinstance(raw, dict):
            raise DecodeError(f"{self.name}: expected a mapping at top level, got {type(raw).__name__}")
        return raw

    def _resolve_gvk(
        self, raw: Dict[str, Any], default_gvk: Optional[GroupVersionKind]
    ) -> GroupVersionKind:
        api_version, kind = raw.get("apiVersion", ""), raw.get("kind", "")
        if not isinstance(api_version, str) or not isinstance(kind, str):
            raise DecodeError(f"{self.name}: apiVersion and kind must be strings")
        try:
            gvk = GroupVersionKind.from_api_version_and_kind(api_version, kind)
        except ValueError as e:
            raise DecodeError(f"{self.name}: {e}") from e
        if default_gvk is not None:
            # 누락된 부분만 힌트로 채움
            if not kind:
                gvk = GroupVersionKind(gvk.group, gvk.version, default_gvk.kind)
            if not api_version:
                gvk = GroupVersionKind(default_gvk.group, default_gvk.version, gvk.kind)
        if not gvk.kind:
            raise DecodeError(f"{self.name}: Object 'Kind' is missing in {_preview(raw)}")
        if not gvk.version:
            raise DecodeError(f"{self.name}: Object 'apiVersion' is missing in {_preview(raw)}")
        return gvk


def _preview(raw: Dict[str, Any], limit: int = 80) -> str:
    text = repr(raw)
    return text if len(text) <= limit else text[: limit - 3] + "..."
