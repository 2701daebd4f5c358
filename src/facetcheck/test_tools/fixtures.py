"""
facetcheck-specific pytest fixtures, imported automatically upon starting a
pytest session (see ``conftest.py``).
"""

import pytest

from ..config import settings
from ..rng import VariateEngine
from .models import BeckmannNDF, LambertianBSDF, RoughMirrorBSDF


@pytest.fixture
def engine():
    """
    A variate engine with a fixed seed, fresh for each test.
    """
    return VariateEngine(seed=20231)


@pytest.fixture
def beckmann():
    """
    Isotropic Beckmann distribution with roughness 0.5.
    """
    return BeckmannNDF(alpha_x=0.5)


@pytest.fixture
def rough_mirror(beckmann):
    """
    Rough mirror BRDF built on the :func:`beckmann` distribution.
    """
    return RoughMirrorBSDF(beckmann)


@pytest.fixture
def lambertian():
    return LambertianBSDF(reflectance=0.5)


@pytest.fixture
def settings_override():
    """
    Temporarily override settings. Returns a callable which takes setting
    values as keyword arguments; original values are restored upon teardown.
    """
    saved = {}

    def override(**kwargs):
        for key, value in kwargs.items():
            key = key.upper()
            if key not in saved:
                saved[key] = settings.get(key)
            settings.set(key, value)

    yield override

    for key, value in saved.items():
        settings.set(key, value)
