import numpy as np
import pytest

from facetcheck.exceptions import PreconditionError
from facetcheck.shadowing import projected_area_quadrature
from facetcheck.test_tools.models import (
    BeckmannNDF,
    LambertianBSDF,
    RoughMirrorBSDF,
    StudentTNDF,
)
from facetcheck.test_tools.stats import ks_pvalue
from facetcheck.typing import BSDF, NDF


def test_protocols(beckmann, rough_mirror, lambertian):
    assert isinstance(beckmann, NDF)
    assert isinstance(StudentTNDF(alpha=0.3, gamma=2.0), NDF)
    assert isinstance(rough_mirror, BSDF)
    assert isinstance(lambertian, BSDF)


def test_beckmann_construct():
    ndf = BeckmannNDF(alpha_x=0.2)
    assert ndf.alpha_y == 0.2
    assert BeckmannNDF(0.2, 0.4).alpha_y == 0.4

    with pytest.raises(PreconditionError):
        BeckmannNDF(alpha_x=0.0)

    with pytest.raises(PreconditionError):
        BeckmannNDF(alpha_x=0.2, alpha_y=-1.0)


def test_beckmann_density(beckmann):
    m = np.array([[0.0, 0.0, 1.0], [0.0, 0.0, -1.0], [1.0, 0.0, 0.0]])
    assert np.allclose(beckmann.D(m), [beckmann.max_density, 0.0, 0.0])

    # Single normal
    assert beckmann.D([0.0, 0.0, 1.0]).shape == (1,)

    # Anisotropy: the density falls off faster along the smoother axis
    ndf = BeckmannNDF(alpha_x=0.2, alpha_y=0.6)
    m = np.array([[0.2, 0.0, 1.0], [0.0, 0.2, 1.0]])
    m /= np.linalg.norm(m, axis=-1, keepdims=True)
    dx, dy = ndf.D(m)
    assert dx < dy


@pytest.mark.parametrize(
    "ndf",
    [
        BeckmannNDF(alpha_x=0.5),
        BeckmannNDF(alpha_x=0.3, alpha_y=0.8),
        StudentTNDF(alpha=0.5, gamma=2.0),
        StudentTNDF(alpha=0.2, gamma=5.0),
    ],
    ids=["beckmann", "beckmann_aniso", "student_t", "student_t_light"],
)
def test_ndf_normalization(ndf):
    # Projected area at normal incidence is 1
    assert np.isclose(projected_area_quadrature(ndf, 1.0), 1.0, atol=2e-3)


@pytest.mark.parametrize("u", [0.0, 0.1, 0.5, 0.99, 1.0])
def test_beckmann_sigma(beckmann, u):
    s = np.sqrt(1.0 - u * u)
    sigma = beckmann.sigma([s, 0.0, u])
    assert sigma.shape == (1,)
    assert np.all(np.isfinite(sigma))

    # Projected area is at least the projected geometric area
    assert sigma[0] >= u - 1e-12

    # Smith relation for upper hemisphere views: σ = cos θ (1 + Λ)
    if u > 0.0:
        assert np.isclose(sigma[0], u * (1.0 + beckmann.smith_lambda([s, 0.0, u])[0]))


def test_beckmann_sample(engine):
    ndf = BeckmannNDF(alpha_x=0.5)
    m = ndf.sample(engine, 100000)
    assert np.allclose(np.linalg.norm(m, axis=-1), 1.0)
    assert np.all(m[:, 2] > 0.0)

    # P(tan²θ < t) = 1 - exp(-t / α²)
    tan2 = (m[:, 0] ** 2 + m[:, 1] ** 2) / m[:, 2] ** 2
    assert ks_pvalue(tan2, lambda t: 1.0 - np.exp(-np.maximum(t, 0.0) / 0.25)) > 1e-3


def test_beckmann_sample_anisotropic(engine):
    ndf = BeckmannNDF(alpha_x=0.2, alpha_y=0.6)
    m = ndf.sample(engine, 100000)
    slope_x = -m[:, 0] / m[:, 2]
    slope_y = -m[:, 1] / m[:, 2]
    assert np.isclose(slope_x.var(), 0.5 * 0.2**2, rtol=0.02)
    assert np.isclose(slope_y.var(), 0.5 * 0.6**2, rtol=0.02)


def test_student_t_construct():
    ndf = StudentTNDF(alpha=0.5, gamma=2.0)
    assert np.isclose(ndf.max_density, 1.0 / (np.pi * 0.25))

    for gamma in [1.0, 0.5]:
        with pytest.raises(PreconditionError):
            StudentTNDF(alpha=0.5, gamma=gamma)


def test_student_t_converges_to_beckmann():
    m = np.array([[0.1, 0.2, 1.0], [0.5, 0.0, 0.5]])
    m /= np.linalg.norm(m, axis=-1, keepdims=True)
    assert np.allclose(
        StudentTNDF(alpha=0.4, gamma=1e6).D(m), BeckmannNDF(alpha_x=0.4).D(m), rtol=1e-4
    )


@pytest.mark.parametrize("gamma", [1.5, 2.0, 4.0])
def test_student_t_sample(engine, gamma):
    alpha = 0.5
    ndf = StudentTNDF(alpha=alpha, gamma=gamma)
    m = ndf.sample(engine, 100000)
    assert np.allclose(np.linalg.norm(m, axis=-1), 1.0)

    # P(tan²θ < t) = 1 - (1 + t / (α² (γ - 1)))^(1 - γ)
    k = alpha**2 * (gamma - 1.0)
    tan2 = (m[:, 0] ** 2 + m[:, 1] ** 2) / m[:, 2] ** 2
    cdf = lambda t: 1.0 - (1.0 + np.maximum(t, 0.0) / k) ** (1.0 - gamma)
    assert ks_pvalue(tan2, cdf) > 1e-3


def test_student_t_sigma():
    ndf = StudentTNDF(alpha=0.5, gamma=2.0)
    assert np.isclose(ndf.sigma([0.0, 0.0, 1.0]), 1.0, atol=2e-3)

    # Projected areas of opposite views differ by the view cosine
    u, s = 0.6, 0.8
    assert np.isclose(ndf.sigma([s, 0.0, u]) - ndf.sigma([-s, 0.0, -u]), u, atol=5e-3)


def test_rough_mirror_eval(rough_mirror):
    wi = np.array([0.5, 0.0, np.sqrt(0.75)])

    # Specular direction gets the peak of the lobe
    wo = np.array([[-0.5, 0.0, np.sqrt(0.75)], [0.5, 0.0, np.sqrt(0.75)], [0.0, 0.0, -1.0]])
    values = rough_mirror.eval(wi, wo)
    assert values[0] > values[1] > 0.0
    assert values[2] == 0.0

    # Incident directions below the horizon do not scatter
    assert np.all(rough_mirror.eval(-wi, wo) == 0.0)


def test_rough_mirror_reciprocity(rough_mirror):
    wi = np.array([0.3, -0.2, 0.9])
    wi /= np.linalg.norm(wi)
    wo = np.array([-0.6, 0.1, 0.5])
    wo /= np.linalg.norm(wo)

    f_io = rough_mirror.eval(wi, wo)[0] / wo[2]
    f_oi = rough_mirror.eval(wo, wi)[0] / wi[2]
    assert np.isclose(f_io, f_oi)


def test_rough_mirror_sample(engine, rough_mirror):
    wi = np.array([0.5, 0.0, np.sqrt(0.75)])
    wo, pdf, value = rough_mirror.sample(wi, engine, 1000)
    assert wo.shape == (1000, 3)
    assert pdf.shape == value.shape == (1000,)
    assert np.allclose(np.linalg.norm(wo, axis=-1), 1.0)
    assert np.all(pdf >= 0.0)
    assert np.allclose(value, rough_mirror.eval(wi, wo))

    # Sampled directions concentrate around the specular direction
    assert np.mean(wo @ np.array([-0.5, 0.0, np.sqrt(0.75)])) > 0.5


def test_lambertian(engine, lambertian):
    wi = np.array([0.0, 0.0, 1.0])
    assert np.allclose(
        lambertian.eval(wi, [[0.0, 0.0, 1.0], [0.0, 0.0, -1.0]]), [0.5 / np.pi, 0.0]
    )

    wo, pdf, value = lambertian.sample(wi, engine, 100)
    assert np.allclose(value / pdf, 0.5)

    with pytest.raises(PreconditionError):
        LambertianBSDF(reflectance=1.5)
