import numpy as np
import pytest

from facetcheck.rng import VariateEngine
from facetcheck.sampling import (
    cosine_weighted_direction,
    disk_sample,
    isotropic_direction,
    uniform_hemisphere_direction,
)
from facetcheck.test_tools.stats import chi2_pvalue, ks_pvalue


def test_disk_sample_shape(engine):
    assert disk_sample(engine).shape == (3,)
    assert disk_sample(engine, dim=2).shape == (2,)
    assert disk_sample(engine, size=10).shape == (10, 3)
    assert disk_sample(engine, size=10, dim=2).shape == (10, 2)

    # 3D samples lie in the z = 0 plane
    assert np.all(disk_sample(engine, size=10)[:, 2] == 0.0)

    with pytest.raises(ValueError):
        disk_sample(engine, dim=4)


@pytest.mark.parametrize("radius", [1.0, 0.999999, 2.5])
def test_disk_sample_distribution(engine, radius):
    p = disk_sample(engine, radius=radius, size=100000, dim=2)
    r2 = np.einsum("ij,ij->i", p, p) / radius**2
    assert np.all(r2 <= 1.0)

    # Counts per annulus are proportional to annulus areas: r² is uniform
    edges = np.linspace(0.0, 1.0, 11)
    assert chi2_pvalue(r2, edges, lambda x: x) > 1e-3

    # Azimuths are uniform
    phi = np.arctan2(p[:, 1], p[:, 0]) % (2.0 * np.pi)
    assert ks_pvalue(phi / (2.0 * np.pi), lambda x: np.clip(x, 0.0, 1.0)) > 1e-3


def test_disk_sample_batch_matches_sequence():
    e1, e2 = VariateEngine(9), VariateEngine(9)
    batch = disk_sample(e1, radius=0.5, size=5)
    sequence = np.array([disk_sample(e2, radius=0.5) for _ in range(5)])
    assert np.allclose(batch, sequence, rtol=0.0, atol=1e-15)


def test_isotropic_direction(engine):
    v = isotropic_direction(engine, size=100000)
    assert np.allclose(np.linalg.norm(v, axis=-1), 1.0, atol=1e-9)
    assert np.allclose(v.mean(axis=0), 0.0, atol=0.01)

    # Each coordinate of a uniform sphere direction is uniform on [-1, 1]
    assert ks_pvalue(v[:, 0], lambda x: np.clip(0.5 * (x + 1.0), 0.0, 1.0)) > 1e-3

    assert isotropic_direction(engine).shape == (3,)


def test_uniform_hemisphere_direction(engine):
    v = uniform_hemisphere_direction(engine, size=50000)
    assert np.all(v[:, 2] >= 0.0)
    assert np.allclose(np.linalg.norm(v, axis=-1), 1.0)
    assert ks_pvalue(v[:, 2], lambda x: np.clip(x, 0.0, 1.0)) > 1e-3


def test_cosine_weighted_direction(engine):
    v = cosine_weighted_direction(engine, size=100000)
    assert np.allclose(np.linalg.norm(v, axis=-1), 1.0)
    assert np.all(v[:, 2] >= 0.0)

    # P(w < t) = t²
    assert ks_pvalue(v[:, 2], lambda t: np.clip(t, 0.0, 1.0) ** 2) > 1e-3


def test_cosine_weighted_direction_about_normal(engine):
    normal = np.array([1.0, -2.0, 0.5])
    n = normal / np.linalg.norm(normal)
    v = cosine_weighted_direction(engine, normal=normal, size=50000)
    assert v.shape == (50000, 3)
    assert np.allclose(np.linalg.norm(v, axis=-1), 1.0)

    cos_theta = v @ n
    assert np.all(cos_theta >= -1e-12)
    assert ks_pvalue(cos_theta, lambda t: np.clip(t, 0.0, 1.0) ** 2) > 1e-3

    # Single sample
    assert cosine_weighted_direction(engine, normal=normal).shape == (3,)
