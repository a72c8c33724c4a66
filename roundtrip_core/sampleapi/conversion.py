"""Hand-written conversions for fields whose name differs between versions."""
from __future__ import annotations

from ..scheme import Scheme, Scope
from . import types, v1

_RENAMED = ("restart", "restart_policy")


def convert_internal_pod_spec_to_v1(src: types.PodSpec, dst: v1.PodSpec, scope: Scope) -> None:
    scope.auto_convert(src, dst, ignore=_RENAMED)
    dst.restart_policy = src.restart


def convert_v1_pod_spec_to_internal(src: v1.PodSpec, dst: types.PodSpec, scope: Scope) -> None:
    scope.auto_convert(src, dst, ignore=_RENAMED)
    dst.restart = src.restart_policy


def register_conversions(scheme: Scheme) -> None:
    scheme.add_conversion_func(types.PodSpec, v1.PodSpec, convert_internal_pod_spec_to_v1)
    scheme.add_conversion_func(v1.PodSpec, types.PodSpec, convert_v1_pod_spec_to_internal)
