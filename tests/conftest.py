import pytest

from roundtrip_core.sampleapi import new_scheme
from roundtrip_core.serializer import CodecFactory


@pytest.fixture
def scheme_and_funcs():
    return new_scheme()


@pytest.fixture
def scheme(scheme_and_funcs):
    return scheme_and_funcs[0]


@pytest.fixture
def funcs(scheme_and_funcs):
    return scheme_and_funcs[1]


@pytest.fixture
def codecs(scheme):
    return CodecFactory(scheme)
