"""Semantic deep equality.

Unlike ``==``, an empty mapping/sequence equals ``None`` (an omitted field
decodes as absent, a fuzzed one may be empty), and ``True`` never equals
``1``. Custom per-class equality funcs override the structural walk.
"""
from __future__ import annotations

import dataclasses
from collections.abc import Mapping, Sequence
from typing import Any, Callable, Dict, Optional

EqualityFunc = Callable[[Any, Any], bool]


def _is_empty(v: Any) -> bool:
    return isinstance(v, (Mapping, list, tuple)) and len(v) == 0


class Equalities:
    def __init__(self, funcs: Optional[Dict[type, EqualityFunc]] = None):
        self._funcs: Dict[type, EqualityFunc] = dict(funcs or {})

    def add_func(self, cls: type, fn: EqualityFunc) -> None:
        self._funcs[cls] = fn

    def deep_equal(self, a: Any, b: Any) -> bool:
        return self._equal(a, b)

    # ------------------------------------------------------------------
    def _equal(self, a: Any, b: Any) -> bool:
        if a is b:
            return True
        if a is None or b is None:
            return _is_empty(b if a is None else a)

        ta, tb = type(a), type(b)
        fn = self._funcs.get(ta)
        if fn is not None and ta is tb:
            return fn(a, b)

        if dataclasses.is_dataclass(a) or dataclasses.is_dataclass(b):
            if ta is not tb:
                return False
            return all(
                self._equal(getattr(a, f.name), getattr(b, f.name))
                for f in dataclasses.fields(a)
            )
        if isinstance(a, Mapping) or isinstance(b, Mapping):
            if not (isinstance(a, Mapping) and isinstance(b, Mapping)):
                return False
            if a.keys() != b.keys():
                return False
            return all(self._equal(a[k], b[k]) for k in a)
        if isinstance(a, (str, bytes, bytearray)) or isinstance(b, (str, bytes, bytearray)):
            return a == b
        if isinstance(a, Sequence) or isinstance(b, Sequence):
            if not (isinstance(a, Sequence) and isinstance(b, Sequence)):
                return False
            if len(a) != len(b):
                return False
            return all(self._equal(x, y) for x, y in zip(a, b))
        if isinstance(a, bool) != isinstance(b, bool):
            return False
        return a == b


# 기본 인스턴스
Semantic = Equalities()
