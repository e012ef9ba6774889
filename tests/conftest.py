"""Shared fixtures: the two toy fields and curves."""

import pytest

from curvelab.common.field import PrimeField
from curvelab.elliptic import WeierstrassCurve, create_curve23_params, create_curve61_params


@pytest.fixture
def f23():
    return PrimeField(23)


@pytest.fixture
def f61():
    return PrimeField(61)


@pytest.fixture
def c61():
    return WeierstrassCurve(create_curve61_params())


@pytest.fixture
def c23():
    return WeierstrassCurve(create_curve23_params())
