"""
Monte Carlo estimation of the projected area of a null-scattering microfacet
distribution.

Microfacet normals are generated by shooting parallel rays along a view
direction onto the unit sphere: uniform points on the unit disk are lifted onto
the hemisphere facing the view and rotated into place. The resulting normals
have a density proportional to ``max(m·w, 0)``. Each normal is then accepted
with probability ``D(m) / majorant``, so that the accepted fraction converges
to ``σ(w) / (π · majorant)`` where ``σ(w) = ∫ D(m) max(m·w, 0) dm``.
"""

from __future__ import annotations

import logging
import typing as t
import warnings

import attrs
import numpy as np
from tqdm.auto import tqdm

from .attrs import documented, frozen
from .config import ProgressLevel, settings
from .exceptions import MajorantViolationWarning, PreconditionError
from .frame import rotate_y, rotate_z
from .quad import GAUSS_LEGENDRE_100, Quad
from .rng import VariateEngine, default_engine
from .sampling import disk_sample
from .typing import NDF
from .warp import disk_to_hemisphere

logger = logging.getLogger(__name__)


def _view_angles(wi: float | np.typing.ArrayLike) -> tuple[float, float]:
    # Return the (cos θ, φ) pair of a view direction. A scalar is a view
    # cosine with the view in the xz-plane.
    if np.ndim(wi) == 0:
        u = float(wi)
        if not -1.0 <= u <= 1.0:
            raise PreconditionError(f"view cosine must lie in [-1, 1], got {u}")
        return u, 0.0

    w = np.asarray(wi, dtype=float)
    length = np.linalg.norm(w)
    if w.shape != (3,) or length == 0.0:
        raise PreconditionError(f"view direction must be a non-zero 3-vector, got {wi}")
    w = w / length
    return float(np.clip(w[2], -1.0, 1.0)), float(np.arctan2(w[1], w[0]))


def _chunk_sizes(n: int, chunk_size: int) -> t.Iterator[int]:
    for start in range(0, n, chunk_size):
        yield min(chunk_size, n - start)


def view_cosines(
    start: float, stop: float, step: float, inclusive: bool = False
) -> list[float]:
    """
    Enumerate view cosines by repeated addition of ``step`` to ``start``, up to
    ``stop`` (included if ``inclusive`` is ``True``).

    Repeated addition rather than multiplication keeps the column count of
    streamed tables identical to the accumulating loops used by downstream
    plotting scripts.
    """
    if not step > 0.0:
        raise PreconditionError(f"step must be strictly positive, got {step}")

    result = []
    u = start
    while u <= stop if inclusive else u < stop:
        result.append(u)
        u += step
    return result


def sample_projected_normals(
    engine: VariateEngine,
    wi: float | np.typing.ArrayLike,
    size: int | None = None,
    radius: float | None = None,
) -> np.ndarray:
    """
    Sample unit-sphere normals with density proportional to ``max(m·w, 0)``.

    Parameters
    ----------
    engine : .VariateEngine
        Random variate source. Each normal consumes two uniform draws.

    wi : float or array-like
        View direction as a 3-vector, or view cosine ``u = cos θ`` for a view
        in the xz-plane.

    size : int, optional
        Number of samples. If unset, a single normal is returned.

    radius : float, optional
        Disk radius, slightly below 1 to keep the lifted point away from the
        sphere's silhouette. Defaults to the ``disk_radius`` setting.

    Returns
    -------
    ndarray
        A (3,) or (size, 3) array of unit vectors.
    """
    u, phi = _view_angles(wi)
    if radius is None:
        radius = settings.disk_radius

    # Disk point lifted onto the +z hemisphere, tilted to the view zenith, then
    # turned to the view azimuth
    p = disk_sample(engine, radius=radius, size=size, dim=2)
    m = disk_to_hemisphere(p)
    m = rotate_y(m, u)
    return rotate_z(m, phi)


@frozen
class ShadowingEstimate:
    """
    Result of an acceptance-rejection projected area estimate.
    """

    u: float = documented(
        attrs.field(converter=float),
        doc="Cosine of the view zenith angle.",
        type="float",
    )

    majorant: float = documented(
        attrs.field(converter=float),
        doc="Density upper bound used for the rejection test.",
        type="float",
    )

    accepted: int = documented(
        attrs.field(converter=int),
        doc="Number of accepted trials.",
        type="int",
    )

    n_samples: int = documented(
        attrs.field(converter=int),
        doc="Total number of trials.",
        type="int",
    )

    @property
    def acceptance(self) -> float:
        """Accepted fraction of trials, in [0, 1]."""
        return self.accepted / self.n_samples

    @property
    def stderr(self) -> float:
        """Standard error of :attr:`acceptance` (binomial)."""
        p = self.acceptance
        return float(np.sqrt(p * (1.0 - p) / self.n_samples))

    @property
    def projected_area(self) -> float:
        """Projected area ``σ(w) = π · majorant · acceptance``."""
        return np.pi * self.majorant * self.acceptance

    @property
    def projected_area_stderr(self) -> float:
        """Standard error of :attr:`projected_area`."""
        return np.pi * self.majorant * self.stderr


def estimate_projected_area(
    ndf: NDF,
    wi: float | np.typing.ArrayLike,
    majorant: float,
    n_samples: int = 100000,
    engine: VariateEngine | None = None,
    radius: float | None = None,
    check_majorant: bool | None = None,
) -> ShadowingEstimate:
    """
    Estimate the projected area of a null-scattering NDF by acceptance-rejection.

    Each trial samples a normal with :func:`sample_projected_normals` and is
    accepted if one extra uniform draw falls below ``ndf.D(m) / majorant``.
    Trials are processed in chunks of ``chunk_size`` (setting): within a chunk,
    all normals are drawn first, then all acceptance variates.

    Parameters
    ----------
    ndf : .NDF
        Distribution whose density ``D`` is evaluated at sampled normals.

    wi : float or array-like
        View direction as a 3-vector, or view cosine ``u = cos θ`` for a view
        in the xz-plane.

    majorant : float
        Upper bound of ``D`` over the unit sphere. A ratio above 1 is applied
        literally (the trial is always accepted), which biases the estimate.

    n_samples : int, default: 100000
        Number of trials.

    engine : .VariateEngine, optional
        Random variate source. Defaults to an engine derived from
        :data:`.root_seed_state`.

    radius : float, optional
        Disk radius. Defaults to the ``disk_radius`` setting.

    check_majorant : bool, optional
        If ``True``, count bound violations and emit a
        :class:`.MajorantViolationWarning`. Defaults to the ``check_majorant``
        setting. Has no effect on the estimate.

    Returns
    -------
    .ShadowingEstimate

    Raises
    ------
    .PreconditionError
        If ``n_samples`` or ``majorant`` is not strictly positive.
    """
    if n_samples < 1:
        raise PreconditionError(f"n_samples must be strictly positive, got {n_samples}")
    if not majorant > 0.0:
        raise PreconditionError(f"majorant must be strictly positive, got {majorant}")

    u, _ = _view_angles(wi)
    if engine is None:
        engine = default_engine()
    if check_majorant is None:
        check_majorant = settings.check_majorant

    accepted = 0
    n_violations = 0
    max_ratio = 0.0

    with tqdm(
        total=n_samples,
        unit_scale=True,
        leave=False,
        desc=f"Projected area (u={u:.3f})",
        disable=settings.progress < ProgressLevel.ESTIMATOR,
    ) as pbar:
        for size in _chunk_sizes(n_samples, settings.chunk_size):
            m = sample_projected_normals(engine, wi, size=size, radius=radius)
            ratio = np.asarray(ndf.D(m), dtype=float) / majorant
            xi = engine.uniform(size=size)
            accepted += int(np.count_nonzero(xi < ratio))

            if check_majorant:
                exceeding = ratio > 1.0
                n_violations += int(np.count_nonzero(exceeding))
                max_ratio = max(max_ratio, float(ratio.max(initial=0.0)))

            pbar.update(size)

    if n_violations:
        logger.warning(
            "Majorant %s exceeded for %d of %d samples (max ratio %.6g)",
            majorant,
            n_violations,
            n_samples,
            max_ratio,
        )
        warnings.warn(MajorantViolationWarning(max_ratio, n_violations), stacklevel=2)

    result = ShadowingEstimate(
        u=u, majorant=majorant, accepted=accepted, n_samples=n_samples
    )
    logger.debug(
        "Projected area estimate at u=%g: acceptance=%g ± %g (%d trials)",
        u,
        result.acceptance,
        result.stderr,
        n_samples,
    )
    return result


def projected_area_quadrature(
    ndf: NDF,
    wi: float | np.typing.ArrayLike,
    quad_theta: Quad = GAUSS_LEGENDRE_100,
    quad_phi: Quad = GAUSS_LEGENDRE_100,
) -> float:
    """
    Deterministic reference for ``σ(w) = ∫ D(m) max(m·w, 0) dm``, integrated
    over the upper hemisphere of normals with a tensor-product rule in
    (cos θ, φ).

    Parameters
    ----------
    ndf : .NDF
        Distribution. Normals with a negative z component are not integrated.

    wi : float or array-like
        View direction as a 3-vector, or view cosine for a view in the
        xz-plane.

    quad_theta, quad_phi : .Quad, default: :data:`.GAUSS_LEGENDRE_100`
        Rules used along the zenith cosine and azimuth dimensions.

    Returns
    -------
    float
    """
    u, phi_v = _view_angles(wi)
    s = np.sqrt(1.0 - u * u)
    w = np.array([s * np.cos(phi_v), s * np.sin(phi_v), u])

    mu = quad_theta.eval_nodes((0.0, 1.0))
    phi = quad_phi.eval_nodes((0.0, 2.0 * np.pi))
    mu_grid, phi_grid = np.meshgrid(mu, phi, indexing="ij")
    sin_theta = np.sqrt(1.0 - mu_grid**2)
    m = np.stack(
        (sin_theta * np.cos(phi_grid), sin_theta * np.sin(phi_grid), mu_grid), axis=-1
    ).reshape(-1, 3)

    values = np.asarray(ndf.D(m), dtype=float) * np.maximum(m @ w, 0.0)
    values = values.reshape(mu.size, phi.size)

    inner = quad_phi.integrate(values, (0.0, 2.0 * np.pi))
    return quad_theta.integrate(inner, (0.0, 1.0))


def sweep_projected_area(
    ndf: NDF,
    majorant: float,
    du: float,
    n_samples: int = 100000,
    engine: VariateEngine | None = None,
    **kwargs,
) -> tuple[np.ndarray, np.ndarray]:
    """
    Estimate acceptance fractions for view cosines ``u`` from -1 (included) to
    1 (excluded) in steps of ``du``. Views lie in the xz-plane.

    Extra keyword arguments are forwarded to :func:`estimate_projected_area`.

    Returns
    -------
    cosines, acceptance : ndarray
    """
    if engine is None:
        engine = default_engine()

    cosines = view_cosines(-1.0, 1.0, du)
    acceptance = np.empty(len(cosines))

    for i, u in enumerate(cosines):
        estimate = estimate_projected_area(
            ndf, u, majorant, n_samples=n_samples, engine=engine, **kwargs
        )
        acceptance[i] = estimate.acceptance

    return np.array(cosines), acceptance
