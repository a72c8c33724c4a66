"""Dataclass field introspection shared by the scheme and the fuzzer."""
from __future__ import annotations

import dataclasses
import functools
import types
import typing
from dataclasses import dataclass
from typing import Any, Tuple, Union

TYPE_META_FIELDS = frozenset({"api_version", "kind"})

_UNION_TYPES = (Union, getattr(types, "UnionType", Union))


@dataclass(frozen=True)
class FieldSpec:
    name: str        # python attribute
    wire_name: str   # key on the wire
    type: Any


def camel(name: str) -> str:
    head, *rest = name.split("_")
    return head + "".join(p[:1].upper() + p[1:] for p in rest)


@functools.lru_cache(maxsize=None)
def field_specs(cls: type) -> Tuple[FieldSpec, ...]:
    hints = typing.get_type_hints(cls)
    return tuple(
        FieldSpec(f.name, f.metadata.get("name") or camel(f.name), hints[f.name])
        for f in dataclasses.fields(cls)
    )


def is_dataclass_type(tp: Any) -> bool:
    return isinstance(tp, type) and dataclasses.is_dataclass(tp)


def unwrap_optional(tp: Any) -> Tuple[Any, bool]:
    """Optional[X] → (X, True); anything else → (tp, False)."""
    if typing.get_origin(tp) in _UNION_TYPES:
        args = [a for a in typing.get_args(tp) if a is not type(None)]
        if len(args) == 1:
            return args[0], True
        raise TypeError(f"unsupported union {tp!r}")
    return tp, False


def list_item_type(tp: Any) -> Any:
    """Element type of List[X], or None when tp is not a list type."""
    if typing.get_origin(tp) is list:
        (item,) = typing.get_args(tp) or (Any,)
        return item
    return None


def dict_value_type(tp: Any) -> Any:
    """Value type of Dict[str, X], or None when tp is not a mapping type."""
    if typing.get_origin(tp) is dict:
        args = typing.get_args(tp) or (str, Any)
        if args[0] is not str:
            raise TypeError(f"only str-keyed mappings are supported, got {tp!r}")
        return args[1]
    return None
