"""Shared fixtures for the unit suites."""

import pytest

from commutative_crypto.config import set_default_config
from commutative_crypto.crypto.context import Context
from commutative_crypto.crypto.ec_group import ECGroup


@pytest.fixture
def p224_group():
    return ECGroup.from_curve_id("secp224r1", Context())


@pytest.fixture(autouse=True)
def _reset_default_config():
    """Every test starts and ends with the environment-derived default."""
    set_default_config(None)
    yield
    set_default_config(None)
