"""Core v1 wire types."""
from __future__ import annotations
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from ..models import ObjectMeta, TypeMeta


@dataclass
class ConfigMap(TypeMeta):
    metadata: ObjectMeta = field(default_factory=ObjectMeta)
    data: Dict[str, str] = field(default_factory=dict)
    binary_data: Dict[str, bytes] = field(default_factory=dict)
    immutable: Optional[bool] = None


@dataclass
class Secret(TypeMeta):
    metadata: ObjectMeta = field(default_factory=ObjectMeta)
    type: str = ""
    data: Dict[str, bytes] = field(default_factory=dict)
    immutable: Optional[bool] = None


@dataclass
class EnvVar:
    name: str = ""
    value: str = ""


@dataclass
class Container:
    name: str = ""
    image: str = ""
    command: List[str] = field(default_factory=list)
    env: List[EnvVar] = field(default_factory=list)
    cpu_limit: Optional[float] = None


@dataclass
class PodSpec:
    containers: List[Container] = field(default_factory=list)
    restart_policy: str = ""
    node_name: str = ""
    priority: Optional[int] = None
    host_network: bool = False


@dataclass
class Pod(TypeMeta):
    metadata: ObjectMeta = field(default_factory=ObjectMeta)
    spec: PodSpec = field(default_factory=PodSpec)


@dataclass
class WatchEvent(TypeMeta):
    type: str = ""
    object: Dict[str, str] = field(default_factory=dict)


@dataclass
class ListOptions(TypeMeta):
    label_selector: str = ""
    limit: int = 0
