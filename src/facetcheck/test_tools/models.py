"""
Reference microfacet distributions and BRDFs.

All models work in a local shading frame with the geometric normal along +z and
are vectorized over (N, 3) arrays of directions.
"""

from __future__ import annotations

import attrs
import numpy as np
from scipy.special import erf

from ..attrs import define, documented
from ..exceptions import PreconditionError
from ..rng import VariateEngine
from ..sampling import cosine_weighted_direction
from ..shadowing import projected_area_quadrature

_SQRT_PI = np.sqrt(np.pi)


def _validate_positive(instance, attribute, value):
    if not value > 0.0:
        raise PreconditionError(
            f"while validating '{attribute.name}': must be strictly positive, "
            f"got {value}"
        )


def _as_directions(v) -> np.ndarray:
    return np.atleast_2d(np.asarray(v, dtype=float))


def _slopes_to_normals(x: np.ndarray, y: np.ndarray) -> np.ndarray:
    m = np.stack((-x, -y, np.ones_like(x)), axis=-1)
    return m / np.linalg.norm(m, axis=-1, keepdims=True)


def _normals_to_slopes(m: np.ndarray) -> tuple[np.ndarray, np.ndarray, np.ndarray]:
    # Returns slopes and the cosine of the normals; slopes are zero where the
    # normal is not in the upper hemisphere
    mz = m[:, 2]
    upper = mz > 0.0
    safe_mz = np.where(upper, mz, 1.0)
    return -m[:, 0] / safe_mz, -m[:, 1] / safe_mz, mz


def _projected_roughness(w: np.ndarray, alpha_x: float, alpha_y: float) -> np.ndarray:
    sin2 = w[:, 0] ** 2 + w[:, 1] ** 2
    safe = np.where(sin2 > 0.0, sin2, 1.0)
    alpha2 = np.where(
        sin2 > 0.0,
        (w[:, 0] ** 2 * alpha_x**2 + w[:, 1] ** 2 * alpha_y**2) / safe,
        alpha_x * alpha_y,
    )
    return np.sqrt(alpha2)


@define(frozen=True)
class BeckmannNDF:
    r"""
    Anisotropic Beckmann distribution of microfacet normals.

    Slopes follow a centered Gaussian distribution with standard deviations
    ``alpha_x / sqrt(2)`` and ``alpha_y / sqrt(2)``:

    .. math::

        D(m) = \frac{1}{\pi \alpha_x \alpha_y \cos^4 \theta_m}
        \exp \left( -\frac{\tan^2 \theta_m \cos^2 \phi_m}{\alpha_x^2}
        - \frac{\tan^2 \theta_m \sin^2 \phi_m}{\alpha_y^2} \right)

    for normals in the upper hemisphere, 0 otherwise. Its maximum,
    ``1 / (π α_x α_y)``, is reached at normal incidence.
    """

    alpha_x: float = documented(
        attrs.field(converter=float, validator=_validate_positive),
        doc="Roughness along the x axis.",
        type="float",
    )

    alpha_y: float = documented(
        attrs.field(
            default=attrs.Factory(lambda self: self.alpha_x, takes_self=True),
            converter=float,
            validator=_validate_positive,
        ),
        doc="Roughness along the y axis. If unset, the distribution is isotropic.",
        type="float",
        init_type="float, optional",
        default="alpha_x",
    )

    @property
    def max_density(self) -> float:
        """Maximum value of :meth:`D`."""
        return 1.0 / (np.pi * self.alpha_x * self.alpha_y)

    def D(self, m: np.ndarray) -> np.ndarray:
        m = _as_directions(m)
        x, y, mz = _normals_to_slopes(m)
        result = np.exp(-((x / self.alpha_x) ** 2) - (y / self.alpha_y) ** 2)
        result *= self.max_density / np.where(mz > 0.0, mz, 1.0) ** 4
        return np.where(mz > 0.0, result, 0.0)

    def smith_lambda(self, w: np.ndarray) -> np.ndarray:
        """
        Smith auxiliary function Λ for directions in the upper hemisphere.
        """
        w = _as_directions(w)
        c = np.clip(np.abs(w[:, 2]), 0.0, 1.0)
        alpha = _projected_roughness(w, self.alpha_x, self.alpha_y)
        s = np.sqrt(1.0 - c * c)

        with np.errstate(divide="ignore", invalid="ignore"):
            a = c / (alpha * s)
            result = 0.5 * (erf(a) - 1.0) + np.exp(-a * a) / (2.0 * a * _SQRT_PI)

        return np.where(s > 0.0, result, 0.0)

    def sigma(self, w: np.ndarray) -> np.ndarray:
        """
        Closed-form projected area ``σ(w) = ∫ D(m) max(m·w, 0) dm``.

        Parameters
        ----------
        w : array-like
            A unit 3-vector or a (N, 3) array of unit vectors, in either
            hemisphere.

        Returns
        -------
        ndarray
            Projected areas as a (N,) array.

        Notes
        -----
        With ``c = |cos θ|`` and ``a = c / (α sin θ)``, the lower hemisphere
        part is ``c Λ(a)``, which stays finite at grazing angles where it
        tends to ``α / (2 sqrt(π))``. Views in the upper hemisphere add
        ``cos θ``.
        """
        w = _as_directions(w)
        c = np.clip(np.abs(w[:, 2]), 0.0, 1.0)
        alpha = _projected_roughness(w, self.alpha_x, self.alpha_y)
        s = np.sqrt(1.0 - c * c)

        with np.errstate(divide="ignore", invalid="ignore"):
            a = c / (alpha * s)
            shadowed = 0.5 * c * (erf(a) - 1.0) + 0.5 * alpha * s * np.exp(
                -a * a
            ) / _SQRT_PI

        shadowed = np.where(s > 0.0, shadowed, 0.0)
        return shadowed + np.maximum(w[:, 2], 0.0)

    def sample(self, engine: VariateEngine, size: int) -> np.ndarray:
        """
        Sample normals with density ``D(m) cos θ_m``.

        Draws two batches of ``size`` Gaussian variates, for the x then the y
        slope.
        """
        x = self.alpha_x / np.sqrt(2.0) * engine.gaussian(size=size)
        y = self.alpha_y / np.sqrt(2.0) * engine.gaussian(size=size)
        return _slopes_to_normals(x, y)


@define(frozen=True)
class StudentTNDF:
    r"""
    Isotropic Student-t distribution of microfacet normals.

    Slopes follow a bivariate Student-t distribution:

    .. math::

        P_{22}(\tilde{x}, \tilde{y}) = \frac{1}{\pi \alpha^2}
        \left(1 + \frac{\tilde{x}^2 + \tilde{y}^2}{\alpha^2 (\gamma - 1)}
        \right)^{-\gamma}

    and ``D(m) = P22(-m_x / m_z, -m_y / m_z) / m_z^4``. The distribution has
    heavier tails than Beckmann's and converges to it as ``γ → ∞``. Used as a
    null-scattering distribution, it requires a majorant at least
    ``1 / (π α²)``.
    """

    alpha: float = documented(
        attrs.field(converter=float, validator=_validate_positive),
        doc="Roughness.",
        type="float",
    )

    gamma: float = documented(
        attrs.field(converter=float),
        doc="Tail shape parameter, strictly greater than 1.",
        type="float",
    )

    @gamma.validator
    def _gamma_validator(self, attribute, value):
        if not value > 1.0:
            raise PreconditionError(
                f"while validating '{attribute.name}': must be greater than 1, "
                f"got {value}"
            )

    @property
    def max_density(self) -> float:
        """Maximum value of :meth:`D`."""
        return 1.0 / (np.pi * self.alpha**2)

    def D(self, m: np.ndarray) -> np.ndarray:
        m = _as_directions(m)
        x, y, mz = _normals_to_slopes(m)
        r2 = (x * x + y * y) / (self.alpha**2 * (self.gamma - 1.0))
        result = self.max_density * (1.0 + r2) ** (-self.gamma)
        result /= np.where(mz > 0.0, mz, 1.0) ** 4
        return np.where(mz > 0.0, result, 0.0)

    def sigma(self, w: np.ndarray) -> float:
        """
        Projected area, computed with :func:`.projected_area_quadrature`.
        """
        return projected_area_quadrature(self, w)

    def sample(self, engine: VariateEngine, size: int) -> np.ndarray:
        """
        Sample normals with density ``D(m) cos θ_m``.

        Slopes are Gaussian pairs scaled by an inverse square root Gamma
        variate: x then y Gaussian batches are drawn, then one batch of
        ``Gamma(γ - 1)`` variates.
        """
        x = engine.gaussian(size=size)
        y = engine.gaussian(size=size)
        g = engine.gamma(self.gamma - 1.0, size=size)
        scale = self.alpha / np.sqrt(2.0) / np.sqrt(g / (self.gamma - 1.0))
        return _slopes_to_normals(scale * x, scale * y)


@define(frozen=True)
class RoughMirrorBSDF:
    r"""
    Microfacet BRDF built on perfectly specular facets with a Beckmann
    distribution and the height-correlated Smith masking-shadowing term:

    .. math::

        f(\omega_i, \omega_o) |\cos \theta_o| =
        \frac{D(h) G_2(\omega_i, \omega_o)}{4 \cos \theta_i}

    with ``h`` the half vector. Sampling picks a normal with density
    ``D(h) cos θ_h`` and reflects the incident direction about it.
    """

    ndf: BeckmannNDF = documented(
        attrs.field(validator=attrs.validators.instance_of(BeckmannNDF)),
        doc="Distribution of facet normals.",
        type=":class:`.BeckmannNDF`",
    )

    def _g2(self, wi: np.ndarray, wo: np.ndarray) -> np.ndarray:
        return 1.0 / (1.0 + self.ndf.smith_lambda(wi) + self.ndf.smith_lambda(wo))

    def eval(self, wi: np.ndarray, wo: np.ndarray) -> np.ndarray:
        wi = np.asarray(wi, dtype=float)
        wo = _as_directions(wo)
        if wi[2] <= 0.0:
            return np.zeros(len(wo))

        h = wi + wo
        length = np.linalg.norm(h, axis=-1)
        h = h / np.where(length > 0.0, length, 1.0)[:, None]

        valid = (wo[:, 2] > 0.0) & (length > 0.0) & (h @ wi > 0.0)
        wis = np.broadcast_to(wi, wo.shape)
        result = self.ndf.D(h) * self._g2(wis, wo) / (4.0 * wi[2])
        return np.where(valid, result, 0.0)

    def sample(
        self, wi: np.ndarray, engine: VariateEngine, size: int
    ) -> tuple[np.ndarray, np.ndarray, np.ndarray]:
        wi = np.asarray(wi, dtype=float)
        h = self.ndf.sample(engine, size)
        cos_ih = h @ wi
        wo = 2.0 * cos_ih[:, None] * h - wi

        with np.errstate(divide="ignore", invalid="ignore"):
            pdf = self.ndf.D(h) * h[:, 2] / (4.0 * np.abs(cos_ih))
        pdf = np.where(np.abs(cos_ih) > 0.0, pdf, 0.0)

        return wo, pdf, self.eval(wi, wo)


@define(frozen=True)
class LambertianBSDF:
    """
    Ideal diffuse reflector: ``f |cos θ_o| = ρ max(cos θ_o, 0) / π``, with
    cosine-weighted sampling. Its directional albedo is ``ρ`` for any incident
    direction in the upper hemisphere.
    """

    reflectance: float = documented(
        attrs.field(default=0.5, converter=float),
        doc="Diffuse reflectance ρ.",
        type="float",
        default="0.5",
    )

    @reflectance.validator
    def _reflectance_validator(self, attribute, value):
        if not 0.0 <= value <= 1.0:
            raise PreconditionError(
                f"while validating '{attribute.name}': must be in [0, 1], "
                f"got {value}"
            )

    def eval(self, wi: np.ndarray, wo: np.ndarray) -> np.ndarray:
        wo = _as_directions(wo)
        if np.asarray(wi, dtype=float)[2] <= 0.0:
            return np.zeros(len(wo))
        return self.reflectance / np.pi * np.maximum(wo[:, 2], 0.0)

    def sample(
        self, wi: np.ndarray, engine: VariateEngine, size: int
    ) -> tuple[np.ndarray, np.ndarray, np.ndarray]:
        wo = cosine_weighted_direction(engine, size=size)
        pdf = np.maximum(wo[:, 2], 0.0) / np.pi
        return wo, pdf, self.eval(wi, wo)
