"""Randomized population of dataclass objects.

The fuzzer walks field type hints and fills every field with random content
drawn from a ``numpy.random.Generator``, so a given seed always produces the
same sequence of objects.

Custom population rules are plain callables ``fn(obj, c)`` registered for a
single class; ``c`` is a :class:`Continue` exposing the generator and a way
to fall back to the default walk (``c.fuzz_no_custom(obj)``).
"""
from __future__ import annotations

import inspect
import logging
import typing
from typing import Any, Callable, Dict, Iterable, Mapping, Optional, Union

import numpy as np

from .config import RT_CONFIG
from .errors import FuzzError
from .fields import (
    TYPE_META_FIELDS,
    dict_value_type,
    field_specs,
    is_dataclass_type,
    list_item_type,
    unwrap_optional,
)

LOGGER = logging.getLogger("roundtrip.fuzzer")
LOGGER.addHandler(logging.NullHandler())

INT64_MIN = -(2**63)
INT64_MAX = 2**63 - 1

# ASCII 위주 + 멀티바이트 몇 개 (서로게이트 제외)
_ALPHABET = (
    "abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ0123456789"
    "-_.:/ ~\"\\'{}[]"
    "äßéλЖ中文한글"
)

CustomFunc = Callable[[Any, "Continue"], None]
# codecs → custom funcs (list keyed by first-parameter annotation, or an explicit mapping)
FuzzerFuncs = Callable[[Any], Union[Iterable[CustomFunc], Mapping[type, CustomFunc]]]


class Continue:
    """Handle passed to custom funcs."""

    def __init__(self, fuzzer: Fuzzer):
        self._fuzzer = fuzzer
        self.rng = fuzzer.rng

    def fuzz(self, obj: Any) -> None:
        self._fuzzer.fuzz(obj)

    def fuzz_no_custom(self, obj: Any) -> None:
        self._fuzzer.fuzz_no_custom(obj)

    def random_string(self, max_length: Optional[int] = None) -> str:
        return self._fuzzer.random_string(max_length)

    def random_bool(self) -> bool:
        return bool(self.rng.integers(2))

    def int_between(self, low: int, high: int) -> int:
        """Uniform int in [low, high]."""
        return int(self.rng.integers(low, high, endpoint=True))

    def choice(self, options):
        return options[int(self.rng.integers(len(options)))]


class Fuzzer:
    def __init__(
        self,
        rng: np.random.Generator,
        custom_funcs: Optional[Mapping[type, CustomFunc]] = None,
        nil_chance: float = RT_CONFIG["nil_chance"],
        min_elements: int = RT_CONFIG["min_elements"],
        max_elements: int = RT_CONFIG["max_elements"],
        max_string_length: int = RT_CONFIG["max_string_length"],
        max_depth: int = RT_CONFIG["max_depth"],
    ):
        if not 0.0 <= nil_chance <= 1.0:
            raise ValueError(f"nil_chance must be within [0, 1], got {nil_chance}")
        if min_elements < 0 or max_elements < min_elements:
            raise ValueError(f"bad element range [{min_elements}, {max_elements}]")
        self.rng = rng
        self.custom_funcs: Dict[type, CustomFunc] = dict(custom_funcs or {})
        self.nil_chance = nil_chance
        self.min_elements = min_elements
        self.max_elements = max_elements
        self.max_string_length = max_string_length
        self.max_depth = max_depth
        self._depth = 0

    # ------------------------------------------------------------------
    def fuzz(self, obj: Any) -> None:
        fn = self.custom_funcs.get(type(obj))
        if fn is not None:
            fn(obj, Continue(self))
        else:
            self.fuzz_no_custom(obj)

    def fuzz_no_custom(self, obj: Any) -> None:
        cls = type(obj)
        if not is_dataclass_type(cls):
            raise FuzzError(f"cannot fuzz non-dataclass {cls.__qualname__}")
        self._depth += 1
        try:
            if self._depth > self.max_depth:
                raise FuzzError(f"{cls.__qualname__}: nesting deeper than {self.max_depth}")
            for spec in field_specs(cls):
                if spec.name in TYPE_META_FIELDS:
                    continue
                setattr(obj, spec.name, self._value(spec.type, f"{cls.__name__}.{spec.name}"))
        finally:
            self._depth -= 1

    # ------------------------------------------------------------------
    def random_string(self, max_length: Optional[int] = None) -> str:
        n = int(self.rng.integers(0, (max_length or self.max_string_length), endpoint=True))
        idx = self.rng.integers(0, len(_ALPHABET), size=n)
        return "".join(_ALPHABET[i] for i in idx)

    def _n_elements(self) -> int:
        return int(self.rng.integers(self.min_elements, self.max_elements, endpoint=True))

    def _value(self, tp: Any, where: str) -> Any:
        tp, optional = unwrap_optional(tp)
        if optional and self.rng.random() < self.nil_chance:
            return None
        if is_dataclass_type(tp):
            out = tp()
            self.fuzz(out)
            return out
        item = list_item_type(tp)
        if item is not None:
            return [self._value(item, where) for _ in range(self._n_elements())]
        val_tp = dict_value_type(tp)
        if val_tp is not None:
            return {self.random_string(): self._value(val_tp, where) for _ in range(self._n_elements())}
        if tp is str or tp is Any:
            return self.random_string()
        if tp is bool:
            return bool(self.rng.integers(2))
        if tp is int:
            return int(self.rng.integers(INT64_MIN, INT64_MAX, endpoint=True, dtype=np.int64))
        if tp is float:
            # 유한값만 (NaN/Inf 는 JSON 에서 왕복 불가)
            return float(self.rng.uniform(-1e6, 1e6))
        if tp is bytes:
            return self.rng.bytes(int(self.rng.integers(0, self.max_string_length, endpoint=True)))
        raise FuzzError(f"{where}: don't know how to fuzz {tp!r}")


# ---------------------------------------------------------------------------
def _target_type(fn: CustomFunc) -> type:
    params = list(inspect.signature(fn).parameters)
    if len(params) != 2:
        raise TypeError(f"custom fuzz func {fn.__qualname__} must take (obj, c)")
    hints = typing.get_type_hints(fn)
    target = hints.get(params[0])
    if not isinstance(target, type):
        raise TypeError(f"custom fuzz func {fn.__qualname__} needs a class annotation on {params[0]!r}")
    return target


def custom_funcs_from(funcs: Optional[FuzzerFuncs], codecs: Any) -> Dict[type, CustomFunc]:
    if funcs is None:
        return {}
    produced = funcs(codecs)
    if isinstance(produced, Mapping):
        custom = dict(produced)
    else:
        custom = {_target_type(fn): fn for fn in produced}
    LOGGER.debug("custom fuzz funcs for: %s", ", ".join(sorted(t.__qualname__ for t in custom)))
    return custom


def fuzzer_for(funcs: Optional[FuzzerFuncs], seed: int, codecs: Any = None, **kw: Any) -> Fuzzer:
    """Build a fuzzer seeded with ``seed`` and the custom funcs ``funcs(codecs)`` yields."""
    return Fuzzer(np.random.default_rng(seed), custom_funcs_from(funcs, codecs), **kw)
