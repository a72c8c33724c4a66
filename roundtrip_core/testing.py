"""pytest glue: one test case per kind.

Usage::

    VERIFIER = RoundtripVerifier(scheme, funcs, skipped)

    @pytest.mark.parametrize("subtest", roundtrip_params(VERIFIER))
    def test_roundtrip_to_unstructured(subtest):
        assert_subtest(VERIFIER, subtest)
"""
from __future__ import annotations

from typing import List

import pytest

from .roundtrip import FATAL, SKIPPED, RoundtripVerifier, Subtest, SubtestResult


def roundtrip_params(verifier: RoundtripVerifier) -> List:
    params = []
    for s in verifier.subtests():
        marks = [pytest.mark.skip(reason=f"{s.name} is in the skip set")] if s.skipped else []
        params.append(pytest.param(s, id=s.name, marks=marks))
    return params


def assert_subtest(verifier: RoundtripVerifier, subtest: Subtest) -> SubtestResult:
    result = verifier.run_subtest(subtest)
    if result.status == SKIPPED:
        pytest.skip(f"{subtest.name} is in the skip set")
    if result.status == FATAL:
        pytest.fail(f"[seed={verifier.seed}] {result.fatal}", pytrace=False)
    if result.errors:
        pytest.fail(f"[seed={verifier.seed}] " + "\n\n".join(result.errors), pytrace=False)
    return result
