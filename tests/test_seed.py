"""
Seed resolution + per-kind seed derivation.

• TEST_RAND_SEED 가 있으면 int64 로 파싱, 실패하면 SeedError
• 없으면 시계의 sub-second(ns) 부분
• kind 별 seed 는 (base seed, gvk) 로만 결정
"""
import pytest

from roundtrip_core.errors import SeedError
from roundtrip_core.models import GroupVersionKind
from roundtrip_core.roundtrip import resolve_seed, type_seed

CM = GroupVersionKind("", "v1", "ConfigMap")
DEPLOY = GroupVersionKind("apps", "v1", "Deployment")


@pytest.mark.parametrize("raw, expected", [
    ("42", 42),
    ("-5", -5),
    ("+8", 8),
    ("9223372036854775807", 2**63 - 1),
    ("-9223372036854775808", -(2**63)),
])
def test_override(raw, expected):
    assert resolve_seed({"TEST_RAND_SEED": raw}) == expected


@pytest.mark.parametrize("raw", [
    "abc", "1.5", "0x10", "9223372036854775808",
    " 7 ", "7\n", "1_000", "\u0661\u0662", "+",
])
def test_bad_override_is_fatal(raw):
    with pytest.raises(SeedError):
        resolve_seed({"TEST_RAND_SEED": raw})


def test_clock_seed_is_sub_second():
    assert resolve_seed({}, now_ns=1_234_567_890_123) == 567_890_123


def test_empty_override_falls_back_to_clock():
    assert resolve_seed({"TEST_RAND_SEED": ""}, now_ns=3_000_000_017) == 17


def test_seed_is_logged(caplog):
    caplog.set_level("INFO", logger="roundtrip.verifier")
    resolve_seed({"TEST_RAND_SEED": "99"})
    assert "99" in caplog.text


def test_type_seed_stable_and_distinct():
    assert type_seed(42, CM) == type_seed(42, CM)
    assert type_seed(42, CM) != type_seed(42, DEPLOY)
    assert type_seed(42, CM) != type_seed(43, CM)
    assert type_seed(42, CM) >= 0
