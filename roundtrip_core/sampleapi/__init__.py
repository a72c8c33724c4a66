"""Small bundled API used by the CLI and the test-suite.

* core group ``""`` v1: ConfigMap, Secret, Pod (+ WatchEvent, ListOptions,
  which are on the non-round-trippable denylist)
* group ``"apps"`` v1: Deployment

Both groups also register their internal versions.
"""
from __future__ import annotations

from typing import Tuple

from ..fuzzer import FuzzerFuncs
from ..models import INTERNAL_VERSION, GroupVersion
from ..scheme import Scheme
from . import apps_v1, types, v1
from .conversion import register_conversions
from .fuzzer import funcs as fuzzer_funcs

CORE_V1 = GroupVersion("", "v1")
APPS_V1 = GroupVersion("apps", "v1")
CORE_INTERNAL = GroupVersion("", INTERNAL_VERSION)
APPS_INTERNAL = GroupVersion("apps", INTERNAL_VERSION)


def install(scheme: Scheme) -> None:
    scheme.add_known_types(
        CORE_INTERNAL,
        types.ConfigMap, types.Secret, types.Pod, types.WatchEvent, types.ListOptions,
    )
    scheme.add_known_types(
        CORE_V1,
        v1.ConfigMap, v1.Secret, v1.Pod, v1.WatchEvent, v1.ListOptions,
    )
    scheme.add_known_types(APPS_INTERNAL, types.Deployment)
    scheme.add_known_types(APPS_V1, apps_v1.Deployment)
    register_conversions(scheme)


def new_scheme() -> Tuple[Scheme, FuzzerFuncs]:
    scheme = Scheme()
    install(scheme)
    return scheme, fuzzer_funcs


__all__ = ["install", "new_scheme", "fuzzer_funcs", "CORE_V1", "APPS_V1"]
