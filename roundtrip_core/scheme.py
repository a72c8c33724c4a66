"""Type registry: kinds ↔ classes, object construction and conversion.

* ``add_known_types`` registers dataclass types under a group/version.
* ``convert`` copies an internal object into its versioned counterpart
  (or back), field by field, unless a custom conversion func is registered
  for the (src, dst) class pair.
* ``to_unstructured`` / ``from_unstructured`` translate typed objects to and
  from the plain wire mapping the codecs work on.
"""
from __future__ import annotations

import base64
import binascii
import logging
from typing import Any, Callable, Dict, Iterable, List, Set, Tuple

from .errors import ConversionError, NotRegisteredError
from .fields import (
    TYPE_META_FIELDS,
    dict_value_type,
    field_specs,
    is_dataclass_type,
    list_item_type,
    unwrap_optional,
)
from .models import GroupVersion, GroupVersionKind

LOGGER = logging.getLogger("roundtrip.scheme")
LOGGER.addHandler(logging.NullHandler())

ConversionFunc = Callable[[Any, Any, "Scope"], None]


class Scope:
    """Handed to custom conversion funcs so they can fall back to the default."""

    def __init__(self, scheme: Scheme, context: Any = None):
        self.scheme = scheme
        self.context = context

    def convert(self, src: Any, dst: Any) -> None:
        self.scheme.convert(src, dst, self.context)

    def auto_convert(self, src: Any, dst: Any, ignore: Iterable[str] = ()) -> None:
        self.scheme._auto_convert(src, dst, self, frozenset(ignore))


class Scheme:
    def __init__(self) -> None:
        self._gvk_to_type: Dict[GroupVersionKind, type] = {}
        self._type_to_gvk: Dict[type, List[GroupVersionKind]] = {}
        self._conversions: Dict[Tuple[type, type], ConversionFunc] = {}

    # ── registration ──────────────────────────────────────────
    def add_known_types(self, gv: GroupVersion, *classes: type) -> None:
        for cls in classes:
            kind = getattr(cls, "__kind__", None) or cls.__name__
            self.add_known_type_with_name(gv.with_kind(kind), cls)

    def add_known_type_with_name(self, gvk: GroupVersionKind, cls: type) -> None:
        if not is_dataclass_type(cls):
            raise TypeError(f"{cls!r} is not a dataclass")
        old = self._gvk_to_type.get(gvk)
        if old is not None and old is not cls:
            raise ValueError(f"double registration of different types for {gvk}: {old!r} and {cls!r}")
        self._gvk_to_type[gvk] = cls
        self._type_to_gvk.setdefault(cls, [])
        if gvk not in self._type_to_gvk[cls]:
            self._type_to_gvk[cls].append(gvk)
        LOGGER.debug("registered %s as %s", cls.__qualname__, gvk)

    def add_conversion_func(self, src_cls: type, dst_cls: type, fn: ConversionFunc) -> None:
        self._conversions[(src_cls, dst_cls)] = fn
        LOGGER.debug("conversion func %s -> %s", src_cls.__qualname__, dst_cls.__qualname__)

    # ── lookup ───────────────────────────────────────────────
    def all_known_types(self) -> Set[GroupVersionKind]:
        return set(self._gvk_to_type)

    def object_kinds(self, obj: Any) -> List[GroupVersionKind]:
        kinds = self._type_to_gvk.get(type(obj))
        if not kinds:
            raise NotRegisteredError(f"no kind is registered for the type {type(obj).__qualname__}")
        return list(kinds)

    def new(self, gvk: GroupVersionKind) -> Any:
        cls = self._gvk_to_type.get(gvk)
        if cls is None:
            raise NotRegisteredError(f"no kind {gvk.kind!r} is registered for version {gvk.api_version!r}")
        return cls()

    # ── conversion ───────────────────────────────────────────
    def convert(self, src: Any, dst: Any, context: Any = None) -> None:
        scope = Scope(self, context)
        fn = self._conversions.get((type(src), type(dst)))
        try:
            if fn is not None:
                fn(src, dst, scope)
            else:
                self._auto_convert(src, dst, scope, frozenset())
        except ConversionError:
            raise
        except (TypeError, ValueError, AttributeError) as e:
            raise ConversionError(
                f"converting {type(src).__qualname__} to {type(dst).__qualname__}: {e}"
            ) from e

    def _auto_convert(self, src: Any, dst: Any, scope: Scope, ignore: frozenset) -> None:
        if not (is_dataclass_type(type(src)) and is_dataclass_type(type(dst))):
            raise ConversionError(f"cannot convert {type(src).__qualname__} to {type(dst).__qualname__}")
        src_fields = {f.name for f in field_specs(type(src))}
        dst_fields = {f.name for f in field_specs(type(dst))}
        unmatched = (src_fields ^ dst_fields) - ignore - TYPE_META_FIELDS
        if unmatched:
            raise ConversionError(
                f"{type(src).__qualname__} → {type(dst).__qualname__}: "
                f"no counterpart for fields {sorted(unmatched)}"
            )
        for spec in field_specs(type(dst)):
            if spec.name in TYPE_META_FIELDS or spec.name in ignore:
                continue
            value = getattr(src, spec.name)
            setattr(dst, spec.name, self._convert_value(value, spec.type, scope))

    def _convert_value(self, value: Any, tp: Any, scope: Scope) -> Any:
        if value is None:
            return None
        tp, _ = unwrap_optional(tp)
        if is_dataclass_type(tp):
            out = tp()
            scope.convert(value, out)
            return out
        item = list_item_type(tp)
        if item is not None:
            return [self._convert_value(v, item, scope) for v in value]
        val_tp = dict_value_type(tp)
        if val_tp is not None:
            return {k: self._convert_value(v, val_tp, scope) for k, v in value.items()}
        return value

    # ── typed ↔ wire mapping ─────────────────────────────────
    def to_unstructured(self, obj: Any) -> Dict[str, Any]:
        if not is_dataclass_type(type(obj)):
            raise ConversionError(f"{type(obj).__qualname__} is not a registered object type")
        return _to_wire(obj)

    def from_unstructured(self, data: Dict[str, Any], obj: Any) -> Any:
        _fill(obj, data, path=type(obj).__name__)
        return obj


# ---------------------------------------------------------------------------
def _to_wire(value: Any) -> Any:
    if is_dataclass_type(type(value)):
        out: Dict[str, Any] = {}
        for spec in field_specs(type(value)):
            v = getattr(value, spec.name)
            if v is not None:
                out[spec.wire_name] = _to_wire(v)
        return out
    if isinstance(value, (bytes, bytearray)):
        return base64.b64encode(value).decode("ascii")
    if isinstance(value, list):
        return [_to_wire(v) for v in value]
    if isinstance(value, dict):
        return {k: _to_wire(v) for k, v in value.items()}
    return value


def _fill(obj: Any, data: Any, path: str) -> None:
    if not isinstance(data, dict):
        raise ConversionError(f"{path}: expected a mapping, got {type(data).__name__}")
    for spec in field_specs(type(obj)):
        if spec.wire_name not in data:
            continue
        setattr(obj, spec.name, _from_wire(data[spec.wire_name], spec.type, f"{path}.{spec.wire_name}"))


def _from_wire(value: Any, tp: Any, path: str) -> Any:
    if value is None:
        return None
    tp, _ = unwrap_optional(tp)
    if tp is Any:
        return value
    if is_dataclass_type(tp):
        out = tp()
        _fill(out, value, path)
        return out
    item = list_item_type(tp)
    if item is not None:
        _expect(value, list, path)
        return [_from_wire(v, item, f"{path}[{i}]") for i, v in enumerate(value)]
    val_tp = dict_value_type(tp)
    if val_tp is not None:
        _expect(value, dict, path)
        return {k: _from_wire(v, val_tp, f"{path}[{k!r}]") for k, v in value.items()}
    if tp is bytes:
        _expect(value, str, path)
        try:
            return base64.b64decode(value, validate=True)
        except (binascii.Error, ValueError) as e:
            raise ConversionError(f"{path}: invalid base64: {e}") from e
    if tp is bool:
        _expect(value, bool, path)
        return value
    if tp is int:
        if isinstance(value, bool) or not isinstance(value, int):
            raise ConversionError(f"{path}: expected int, got {type(value).__name__}")
        return value
    if tp is float:
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise ConversionError(f"{path}: expected float, got {type(value).__name__}")
        return float(value)
    if tp is str:
        _expect(value, str, path)
        return value
    raise ConversionError(f"{path}: unsupported field type {tp!r}")


def _expect(value: Any, tp: type, path: str) -> None:
    if not isinstance(value, tp):
        raise ConversionError(f"{path}: expected {tp.__name__}, got {type(value).__name__}")
