"""
JSON / MessagePack codecs.

• decode_generic → Unstructured, decode_typed → registered type
• deterministic vs nondeterministic msgpack: 바이트는 다르지만 내용은 같음
"""
import msgspec
import pytest
from hypothesis import given, settings, strategies as st

from roundtrip_core.equality import Semantic
from roundtrip_core.errors import DecodeError, EncodeError
from roundtrip_core.models import GroupVersionKind, ObjectMeta, Unstructured
from roundtrip_core.sampleapi import new_scheme, v1
from roundtrip_core.serializer import CodecFactory

CM = GroupVersionKind("", "v1", "ConfigMap")


def _config_map():
    cm = v1.ConfigMap(
        metadata=ObjectMeta(name="cfg", labels={"b": "2", "a": "1"}),
        data={"z": "last", "a": "first"},
        binary_data={"bin": b"\xff\x00"},
    )
    cm.set_group_version_kind(CM)
    return cm


@pytest.mark.parametrize("codec", ["json", "msgpack"])
def test_generic_roundtrip(codecs, codec):
    c = getattr(codecs, codec)
    buf = bytearray()
    c.encode(_config_map(), buf)
    u, gvk = c.decode_generic(buf, CM)
    assert isinstance(u, Unstructured)
    assert gvk == CM
    assert u.api_version == "v1" and u.kind == "ConfigMap"
    assert u.object["data"] == {"z": "last", "a": "first"}
    assert u.object["binaryData"] == {"bin": "/wA="}


@pytest.mark.parametrize("codec", ["json", "msgpack"])
def test_typed_roundtrip(codecs, codec):
    c = getattr(codecs, codec)
    buf = bytearray()
    c.encode(_config_map(), buf)
    obj, gvk = c.decode_typed(bytes(buf))
    assert gvk == CM
    assert obj == _config_map()


def test_json_and_msgpack_agree(codecs):
    buf = bytearray()
    codecs.json.encode(_config_map(), buf)
    uj, _ = codecs.json.decode_generic(buf)
    codecs.msgpack.encode(_config_map(), buf)
    um, _ = codecs.msgpack.decode_generic(buf)
    assert Semantic.deep_equal(uj, um)


def test_deterministic_is_sorted(codecs):
    buf = bytearray()
    codecs.msgpack.encode(_config_map(), buf)
    keys = list(msgspec.msgpack.decode(bytes(buf)))
    assert keys == sorted(keys)


def test_nondeterministic_bytes_differ(codecs):
    det, nondet = bytearray(), bytearray()
    codecs.msgpack.encode(_config_map(), det)
    codecs.msgpack.encode_nondeterministic(_config_map(), nondet)
    assert det != nondet
    a, _ = codecs.msgpack.decode_generic(det)
    b, _ = codecs.msgpack.decode_generic(nondet)
    assert Semantic.deep_equal(a, b)


def test_buffer_reused(codecs):
    buf = bytearray(b"garbage" * 100)
    codecs.json.encode({"apiVersion": "v1", "kind": "ConfigMap"}, buf)
    assert bytes(buf) == b'{"apiVersion":"v1","kind":"ConfigMap"}'
    codecs.msgpack.encode({"kind": "ConfigMap", "apiVersion": "v1"}, buf)
    assert msgspec.msgpack.decode(bytes(buf)) == {"apiVersion": "v1", "kind": "ConfigMap"}


def test_default_gvk_fills_missing_identity(codecs):
    u, gvk = codecs.json.decode_generic(b'{"data":{"k":"v"}}', CM)
    assert gvk == CM
    assert u.get_group_version_kind() == CM


@pytest.mark.parametrize("payload", [b'{"data":{}}', b'{"kind":"ConfigMap"}'])
def test_missing_identity_without_hint(codecs, payload):
    with pytest.raises(DecodeError):
        codecs.json.decode_generic(payload)


@pytest.mark.parametrize("payload", [b"[1,2]", b"{", b'{"apiVersion":1,"kind":"X"}', b'{"apiVersion":"a/b/c","kind":"X"}'])
def test_json_decode_errors(codecs, payload):
    with pytest.raises(DecodeError):
        codecs.json.decode_generic(payload, CM)


def test_typed_decode_unknown_kind(codecs):
    with pytest.raises(DecodeError):
        codecs.json.decode_typed(b'{"apiVersion":"v9","kind":"ConfigMap"}')


def test_typed_decode_bad_field(codecs):
    with pytest.raises(DecodeError):
        codecs.msgpack.decode_typed(msgspec.msgpack.encode({"apiVersion": "v1", "kind": "ConfigMap", "data": 3}))


def test_truncated_msgpack(codecs):
    buf = bytearray()
    codecs.msgpack.encode(_config_map(), buf)
    with pytest.raises(DecodeError):
        codecs.msgpack.decode_generic(bytes(buf[:-4]), CM)


def test_encode_errors(codecs):
    with pytest.raises(EncodeError):
        codecs.json.encode({"apiVersion": "v1", "kind": "X", "n": 2**70}, bytearray())
    with pytest.raises(EncodeError):
        codecs.msgpack.encode({"apiVersion": "v1", "kind": "X", "n": 2**70}, bytearray())
    with pytest.raises(EncodeError):
        codecs.json.encode(object(), bytearray())


# ── property: generic payloads ────────────────────────────────
scalars = (
    st.none()
    | st.booleans()
    | st.integers(min_value=-(2**63), max_value=2**63 - 1)
    | st.floats(allow_nan=False, allow_infinity=False)
    | st.text(st.characters(blacklist_categories=("Cs",)), max_size=10)
)
values = st.recursive(
    scalars,
    lambda children: st.lists(children, max_size=4)
    | st.dictionaries(st.text(st.characters(blacklist_categories=("Cs",)), max_size=6), children, max_size=4),
    max_leaves=15,
)
payloads = st.dictionaries(st.text(st.characters(blacklist_categories=("Cs",)), max_size=6), values, max_size=5).map(
    lambda d: {**d, "apiVersion": "v1", "kind": "Thing"}
)


@settings(max_examples=75, deadline=None)
@given(payloads)
def test_codecs_agree_on_any_payload(payload):
    codecs = CodecFactory(new_scheme()[0])
    buf = bytearray()
    codecs.json.encode(payload, buf)
    j1, _ = codecs.json.decode_generic(buf)
    codecs.msgpack.encode(payload, buf)
    c1, _ = codecs.msgpack.decode_generic(buf)
    codecs.msgpack.encode_nondeterministic(payload, buf)
    c1n, _ = codecs.msgpack.decode_generic(buf)
    assert Semantic.deep_equal(j1, c1)
    assert Semantic.deep_equal(c1, c1n)

    codecs.json.encode(j1, buf)
    j2, _ = codecs.json.decode_generic(buf)
    codecs.msgpack.encode_nondeterministic(c1, buf)
    c2n, _ = codecs.msgpack.decode_generic(buf)
    assert Semantic.deep_equal(j1, j2)
    assert Semantic.deep_equal(c1, c2n)
