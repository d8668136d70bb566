"""Shared fixtures for the path tracer tests.

Every random quantity comes from a seeded numpy Generator so that failures
reproduce exactly.
"""

import numpy as np
import pytest

from pathtrace.materials.lambertian import Lambertian


@pytest.fixture
def rng():
    """Seeded random generator, fresh for every test."""
    return np.random.default_rng(1234)


@pytest.fixture
def grey():
    """Mid-grey diffuse material."""
    return Lambertian(np.array([0.5, 0.5, 0.5]))
