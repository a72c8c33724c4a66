"""Custom fuzz funcs for the internal sample types.

Each func is picked up by the class annotation of its first parameter.
"""
from __future__ import annotations

from typing import Any, Callable, List

from ..fuzzer import Continue
from ..models import ObjectMeta
from . import types

SECRET_TYPES = ("Opaque", "kubernetes.io/tls", "kubernetes.io/dockerconfigjson")
RESTART_POLICIES = ("Always", "OnFailure", "Never")


def fuzz_object_meta(m: ObjectMeta, c: Continue) -> None:
    c.fuzz_no_custom(m)
    m.generation = c.int_between(0, 2**31)
    m.uid = c.rng.bytes(16).hex()


def fuzz_config_map(cm: types.ConfigMap, c: Continue) -> None:
    c.fuzz_no_custom(cm)
    # data 는 항상 1개 이상
    while not cm.data:
        cm.data[c.random_string()] = c.random_string()


def fuzz_secret(s: types.Secret, c: Continue) -> None:
    c.fuzz_no_custom(s)
    s.type = c.choice(SECRET_TYPES)


def fuzz_pod_spec(spec: types.PodSpec, c: Continue) -> None:
    c.fuzz_no_custom(spec)
    spec.restart = c.choice(RESTART_POLICIES)


def fuzz_deployment_spec(spec: types.DeploymentSpec, c: Continue) -> None:
    c.fuzz_no_custom(spec)
    if spec.replicas is not None:
        spec.replicas = abs(spec.replicas) % 1000
    spec.min_ready_seconds = c.int_between(0, 600)


def funcs(codecs: Any) -> List[Callable[..., None]]:
    return [
        fuzz_object_meta,
        fuzz_config_map,
        fuzz_secret,
        fuzz_pod_spec,
        fuzz_deployment_spec,
    ]
