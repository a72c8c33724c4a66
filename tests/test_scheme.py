"""Scheme registration, construction, conversion and typed ⇄ wire mapping."""
import pytest

from roundtrip_core.errors import ConversionError, NotRegisteredError
from roundtrip_core.models import INTERNAL_VERSION, GroupVersionKind, ObjectMeta
from roundtrip_core.sampleapi import apps_v1, types, v1

CM = GroupVersionKind("", "v1", "ConfigMap")


def _pod():
    return types.Pod(
        metadata=ObjectMeta(name="web", labels={"app": "web"}),
        spec=types.PodSpec(
            containers=[types.Container(name="c", image="nginx", env=[types.EnvVar("A", "1")], cpu_limit=0.5)],
            restart="Never",
            priority=7,
        ),
    )


def test_known_types(scheme):
    known = scheme.all_known_types()
    assert CM in known
    assert GroupVersionKind("", INTERNAL_VERSION, "ConfigMap") in known
    assert GroupVersionKind("apps", "v1", "Deployment") in known
    # copy, not a view
    known.clear()
    assert scheme.all_known_types()


def test_new(scheme):
    obj = scheme.new(CM)
    assert isinstance(obj, v1.ConfigMap)
    assert obj.data == {}
    assert scheme.object_kinds(obj) == [CM]


def test_new_unknown(scheme):
    with pytest.raises(NotRegisteredError):
        scheme.new(GroupVersionKind("", "v2", "ConfigMap"))


def test_double_registration(scheme):
    with pytest.raises(ValueError):
        scheme.add_known_type_with_name(CM, v1.Secret)


def test_convert_renamed_field(scheme):
    out = v1.Pod()
    scheme.convert(_pod(), out)
    assert out.spec.restart_policy == "Never"
    assert isinstance(out.spec.containers[0], v1.Container)
    assert out.spec.containers[0].env == [v1.EnvVar("A", "1")]
    assert out.metadata.labels == {"app": "web"}

    back = types.Pod()
    scheme.convert(out, back)
    assert back == _pod()


def test_convert_nested_custom(scheme):
    d = types.Deployment()
    d.spec.template.restart = "Always"
    out = apps_v1.Deployment()
    scheme.convert(d, out)
    assert out.spec.template.restart_policy == "Always"


def test_convert_unmatched_fields(scheme):
    # 커스텀 변환 없이 이름이 다른 필드 → 실패
    with pytest.raises(ConversionError):
        scheme.convert(types.Pod(), v1.ConfigMap())


def test_to_unstructured(scheme):
    cm = v1.ConfigMap(data={"k": "v"}, binary_data={"b": b"\x00\x01"})
    cm.set_group_version_kind(CM)
    wire = scheme.to_unstructured(cm)
    assert wire["apiVersion"] == "v1"
    assert wire["kind"] == "ConfigMap"
    assert wire["binaryData"] == {"b": "AAE="}
    assert "immutable" not in wire            # None → omitted
    assert wire["metadata"]["name"] == ""


def test_from_unstructured(scheme):
    obj = scheme.from_unstructured(
        {"apiVersion": "v1", "kind": "ConfigMap", "data": {"k": "v"},
         "binaryData": {"b": "AAE="}, "immutable": True, "unknown": 1},
        v1.ConfigMap(),
    )
    assert obj.data == {"k": "v"}
    assert obj.binary_data == {"b": b"\x00\x01"}
    assert obj.immutable is True
    assert obj.get_group_version_kind() == CM


@pytest.mark.parametrize("wire", [
    {"data": ["k"]},
    {"immutable": "yes"},
    {"binaryData": {"b": "not base64!"}},
    {"metadata": {"generation": True}},
    {"metadata": "x"},
])
def test_from_unstructured_type_errors(scheme, wire):
    with pytest.raises(ConversionError):
        scheme.from_unstructured(wire, v1.ConfigMap())


def test_float_accepts_int(scheme):
    pod = scheme.from_unstructured({"spec": {"containers": [{"cpuLimit": 2}]}}, v1.Pod())
    assert pod.spec.containers[0].cpu_limit == 2.0
    assert isinstance(pod.spec.containers[0].cpu_limit, float)


def test_registration_is_logged(caplog):
    from roundtrip_core.sampleapi import new_scheme

    caplog.set_level("DEBUG", logger="roundtrip.scheme")
    new_scheme()
    assert "registered ConfigMap as" in caplog.text
    assert "conversion func PodSpec -> PodSpec" in caplog.text
