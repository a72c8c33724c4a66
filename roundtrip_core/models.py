from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Dict

# 내부(unversioned) 표현 전용 버전 태그: 변환의 출발점일 뿐, 직렬화 대상이 아님
INTERNAL_VERSION = "__internal"


@dataclass(frozen=True, order=True)
class GroupVersion:
    group: str
    version: str

    @property
    def api_version(self) -> str:
        if not self.group:
            return self.version
        return f"{self.group}/{self.version}"

    def with_kind(self, kind: str) -> GroupVersionKind:
        return GroupVersionKind(self.group, self.version, kind)

    @classmethod
    def parse(cls, api_version: str) -> GroupVersion:
        if not api_version:
            return cls("", "")
        if api_version.count("/") > 1:
            raise ValueError(f"unexpected apiVersion {api_version!r}")
        if "/" not in api_version:
            return cls("", api_version)
        group, version = api_version.split("/")
        return cls(group, version)


@dataclass(frozen=True, order=True)
class GroupVersionKind:
    group: str
    version: str
    kind: str

    def group_version(self) -> GroupVersion:
        return GroupVersion(self.group, self.version)

    @property
    def api_version(self) -> str:
        return self.group_version().api_version

    @property
    def subtest_name(self) -> str:
        if not self.group:
            return f"{self.version}/{self.kind}"
        return f"{self.version}.{self.group}/{self.kind}"

    @classmethod
    def from_api_version_and_kind(cls, api_version: str, kind: str) -> GroupVersionKind:
        return GroupVersion.parse(api_version).with_kind(kind)

    @classmethod
    def parse(cls, text: str) -> GroupVersionKind:
        """``"v1/ConfigMap"`` or ``"apps/v1/Deployment"`` → GroupVersionKind"""
        api_version, sep, kind = text.rpartition("/")
        if not sep or not kind:
            raise ValueError(f"expected <apiVersion>/<Kind>, got {text!r}")
        return cls.from_api_version_and_kind(api_version, kind)

    def __str__(self) -> str:
        return f"{self.api_version}, Kind={self.kind}"


# ===== 객체 메타 =====

@dataclass
class TypeMeta:
    """Self-describing identity carried by every registered object."""
    api_version: str = field(default="", metadata={"name": "apiVersion"})
    kind: str = ""

    def get_group_version_kind(self) -> GroupVersionKind:
        return GroupVersionKind.from_api_version_and_kind(self.api_version, self.kind)

    def set_group_version_kind(self, gvk: GroupVersionKind) -> None:
        self.api_version = gvk.api_version
        self.kind = gvk.kind


@dataclass
class ObjectMeta:
    name: str = ""
    namespace: str = ""
    uid: str = ""
    generation: int = 0
    labels: Dict[str, str] = field(default_factory=dict)
    annotations: Dict[str, str] = field(default_factory=dict)


@dataclass
class Unstructured:
    """Schemaless decoded form; ``object`` is the raw wire mapping."""
    object: Dict[str, Any] = field(default_factory=dict)

    @property
    def api_version(self) -> str:
        return self.object.get("apiVersion", "")

    @property
    def kind(self) -> str:
        return self.object.get("kind", "")

    def get_group_version_kind(self) -> GroupVersionKind:
        return GroupVersionKind.from_api_version_and_kind(self.api_version, self.kind)

    def set_group_version_kind(self, gvk: GroupVersionKind) -> None:
        self.object["apiVersion"] = gvk.api_version
        self.object["kind"] = gvk.kind
