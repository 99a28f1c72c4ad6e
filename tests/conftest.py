"""
Pytest configuration and fixtures for the fishing simulator test suite.

This module provides:
- A fresh Simulation per test
- A wealthy Simulation for purchase/progression tests
- Helpers for building container entries
"""
import os
import sys

import pytest

# Make implementation/src importable without installing the package
sys.path.insert(
    0,
    os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), "implementation", "src"),
)

from fishsim import bignum  # noqa: E402
from fishsim.simulation import Simulation  # noqa: E402
from fishsim.types import ContainerEntry  # noqa: E402


@pytest.fixture
def sim():
    """A brand new simulation at 10 ticks/s."""
    return Simulation()


@pytest.fixture
def rich_sim():
    """A simulation holding 1e30 fish."""
    s = Simulation()
    s.set_fish(bignum.create(1, 30))
    return s


def entry(value):
    """Container entry holding ``value`` fish/s."""
    return ContainerEntry(bignum.to_safe_number(value))
