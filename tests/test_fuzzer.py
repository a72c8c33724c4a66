"""Fuzzer: reproducibility, custom funcs, Optional / container handling."""
from dataclasses import dataclass, field
from typing import Dict, List, Optional

import numpy as np
import pytest
from hypothesis import given, settings, strategies as st

from roundtrip_core.errors import FuzzError
from roundtrip_core.fuzzer import Continue, Fuzzer, fuzzer_for
from roundtrip_core.sampleapi import types
from roundtrip_core.sampleapi.fuzzer import RESTART_POLICIES, SECRET_TYPES


@dataclass
class Leaf:
    n: int = 0
    f: float = 0.0
    b: bool = False
    raw: bytes = b""


@dataclass
class Tree:
    name: str = ""
    leaf: Optional[Leaf] = None
    leaves: List[Leaf] = field(default_factory=list)
    tags: Dict[str, str] = field(default_factory=dict)


@dataclass
class Unsupported:
    s: set = field(default_factory=set)


@dataclass
class Loop:
    child: Optional["Loop"] = None


def test_same_seed_same_objects(funcs):
    a, b = fuzzer_for(funcs, 7), fuzzer_for(funcs, 7)
    for _ in range(10):
        x, y = types.Deployment(), types.Deployment()
        a.fuzz(x)
        b.fuzz(y)
        assert x == y


@settings(max_examples=25, deadline=None)
@given(st.integers(min_value=0, max_value=2**64 - 1))
def test_reproducible_for_any_seed(seed):
    x, y = Tree(), Tree()
    Fuzzer(np.random.default_rng(seed)).fuzz(x)
    Fuzzer(np.random.default_rng(seed)).fuzz(y)
    assert x == y


def test_different_seeds_differ(funcs):
    x, y = types.ConfigMap(), types.ConfigMap()
    fuzzer_for(funcs, 1).fuzz(x)
    fuzzer_for(funcs, 2).fuzz(y)
    assert x != y


def test_custom_funcs_applied(funcs):
    f = fuzzer_for(funcs, 3)
    for _ in range(20):
        cm, s, pod = types.ConfigMap(), types.Secret(), types.Pod()
        f.fuzz(cm)
        f.fuzz(s)
        f.fuzz(pod)
        assert cm.data
        assert s.type in SECRET_TYPES
        assert pod.spec.restart in RESTART_POLICIES
        assert len(pod.metadata.uid) == 32


def test_type_meta_untouched(funcs):
    cm = types.ConfigMap()
    fuzzer_for(funcs, 3).fuzz(cm)
    assert cm.api_version == "" and cm.kind == ""


def test_nil_chance_extremes():
    always = Tree()
    Fuzzer(np.random.default_rng(0), nil_chance=1.0).fuzz(always)
    assert always.leaf is None

    never = Tree()
    Fuzzer(np.random.default_rng(0), nil_chance=0.0, min_elements=2, max_elements=2).fuzz(never)
    assert isinstance(never.leaf, Leaf)
    assert len(never.leaves) == 2
    assert len(never.tags) <= 2


def test_mapping_funcs():
    def fill(t: Tree, c: Continue) -> None:
        t.name = "fixed"

    t = Tree()
    fuzzer_for(lambda codecs: {Tree: fill}, 0).fuzz(t)
    assert t.name == "fixed"
    assert t.leaf is None


def test_custom_func_needs_annotation():
    def bad(obj, c):
        pass

    with pytest.raises(TypeError):
        fuzzer_for(lambda codecs: [bad], 0)


def test_unsupported_field_type():
    with pytest.raises(FuzzError):
        Fuzzer(np.random.default_rng(0)).fuzz(Unsupported())


def test_depth_guard():
    with pytest.raises(FuzzError):
        Fuzzer(np.random.default_rng(0), nil_chance=0.0, max_depth=4).fuzz(Loop())


def test_bad_options():
    with pytest.raises(ValueError):
        Fuzzer(np.random.default_rng(0), nil_chance=2.0)
    with pytest.raises(ValueError):
        Fuzzer(np.random.default_rng(0), min_elements=3, max_elements=1)
