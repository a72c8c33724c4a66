"""apps/v1 wire types."""
from __future__ import annotations
from dataclasses import dataclass, field
from typing import Dict, Optional

from ..models import ObjectMeta, TypeMeta
from .v1 import PodSpec


@dataclass
class DeploymentSpec:
    replicas: Optional[int] = None
    selector: Dict[str, str] = field(default_factory=dict)
    template: PodSpec = field(default_factory=PodSpec)
    paused: bool = False
    min_ready_seconds: int = 0


@dataclass
class DeploymentStatus:
    replicas: int = 0
    ready_replicas: int = 0
    observed_generation: int = 0


@dataclass
class Deployment(TypeMeta):
    metadata: ObjectMeta = field(default_factory=ObjectMeta)
    spec: DeploymentSpec = field(default_factory=DeploymentSpec)
    status: DeploymentStatus = field(default_factory=DeploymentStatus)
