"""
Cross-check of the evaluation and sampling routines of a BSDF.

Both routines give access to the same quantity, the directional albedo
``∫ f(wi, wo) |cos θo| dwo``: the sampling path averages ``value / pdf`` over
directions drawn by the BSDF itself, while the evaluation path averages
``eval(wi, wo) / pdf(wo)`` over directions drawn from a fixed reference
distribution. Any disagreement beyond sampling noise reveals an inconsistency
between ``eval`` and ``sample``.
"""

from __future__ import annotations

import logging
import typing as t

import attrs
import numpy as np
import pint
from tqdm.auto import tqdm

from . import sampling, warp
from .attrs import documented, frozen
from .config import ProgressLevel, settings
from .exceptions import PreconditionError
from .rng import VariateEngine, default_engine
from .typing import BSDF
from .units import to_radian

logger = logging.getLogger(__name__)

#: Reference distributions available to the evaluation path, as
#: (sampler, density) pairs.
REFERENCE_DISTRIBUTIONS: dict[str, tuple[t.Callable, t.Callable]] = {
    "uniform_sphere": (
        sampling.isotropic_direction,
        warp.square_to_uniform_sphere_pdf,
    ),
    "uniform_hemisphere": (
        sampling.uniform_hemisphere_direction,
        warp.square_to_uniform_hemisphere_pdf,
    ),
    "cosine_hemisphere": (
        lambda engine, size: sampling.cosine_weighted_direction(engine, size=size),
        warp.square_to_cosine_hemisphere_pdf,
    ),
}


def _incident_direction(wi) -> np.ndarray:
    # A 3-vector is normalized; a scalar or quantity is an incident zenith
    # angle, in degrees if unitless, with the direction in the xz-plane
    if isinstance(wi, pint.Quantity) or np.ndim(wi) == 0:
        theta = float(to_radian(wi))
        return np.array([np.sin(theta), 0.0, np.cos(theta)])

    w = np.asarray(wi, dtype=float)
    length = np.linalg.norm(w)
    if w.shape != (3,) or length == 0.0:
        raise PreconditionError(f"incident direction must be a non-zero 3-vector, got {wi}")
    return w / length


def _chunk_sizes(n: int, chunk_size: int) -> t.Iterator[int]:
    for start in range(0, n, chunk_size):
        yield min(chunk_size, n - start)


@frozen
class PathEstimate:
    """
    Monte Carlo mean of weighted contributions along one estimation path.
    """

    mean: float = documented(
        attrs.field(converter=float),
        doc="Sample mean of the contributions.",
        type="float",
    )

    stderr: float = documented(
        attrs.field(converter=float),
        doc="Standard error of the mean.",
        type="float",
    )

    count: int = documented(
        attrs.field(converter=int),
        doc="Number of contributions.",
        type="int",
    )

    @classmethod
    def from_sums(cls, total: float, total_sq: float, count: int) -> PathEstimate:
        """
        Build an estimate from the running sum and sum of squares of ``count``
        contributions.
        """
        mean = total / count
        variance = max(total_sq / count - mean * mean, 0.0)
        return cls(mean=mean, stderr=np.sqrt(variance / count), count=count)


@frozen
class ConsistencyReport:
    """
    Outcome of :func:`compare_eval_sample`. Holds both path estimates and
    their distribution over bins of the outgoing zenith cosine; whether they
    agree is left to the caller (see :meth:`agrees`).
    """

    wi: np.ndarray = documented(
        attrs.field(converter=np.array, eq=False),
        doc="Incident direction, normalized.",
        type="ndarray",
    )

    sample: PathEstimate = documented(
        attrs.field(),
        doc="Sampling path estimate.",
        type=":class:`.PathEstimate`",
    )

    eval: PathEstimate = documented(
        attrs.field(),
        doc="Evaluation path estimate.",
        type=":class:`.PathEstimate`",
    )

    bin_edges: np.ndarray = documented(
        attrs.field(converter=np.array, eq=False),
        doc="Edges of the outgoing zenith cosine bins, increasing from -1 to 1.",
        type="ndarray",
    )

    sample_hist: np.ndarray = documented(
        attrs.field(converter=np.array, eq=False),
        doc="Sampling path contribution per bin. Sums to ``sample.mean``.",
        type="ndarray",
    )

    eval_hist: np.ndarray = documented(
        attrs.field(converter=np.array, eq=False),
        doc="Evaluation path contribution per bin. Sums to ``eval.mean``.",
        type="ndarray",
    )

    @property
    def rel_diff(self) -> float:
        """
        Relative difference ``(sample - eval) / eval``. Zero if both means are
        zero, infinite if only the evaluation mean is.
        """
        diff = self.sample.mean - self.eval.mean
        if self.eval.mean == 0.0:
            return 0.0 if diff == 0.0 else np.copysign(np.inf, diff)
        return diff / self.eval.mean

    def agrees(self, rtol: float = 0.01, n_sigma: float | None = None) -> bool:
        """
        Check whether both paths agree.

        Parameters
        ----------
        rtol : float, default: 0.01
            Relative tolerance on the difference of the means.

        n_sigma : float, optional
            If set, a difference within ``n_sigma`` combined standard errors is
            also accepted.

        Returns
        -------
        bool
        """
        diff = abs(self.sample.mean - self.eval.mean)
        if diff <= rtol * abs(self.eval.mean):
            return True
        if n_sigma is not None:
            sigma = np.hypot(self.sample.stderr, self.eval.stderr)
            return bool(diff <= n_sigma * sigma)
        return False

    def bins(self) -> t.Iterator[tuple[float, float, float, float]]:
        """
        Iterate over ``(cos_lo, cos_hi, sample, eval)`` rows of the binned
        contributions.
        """
        for i in range(len(self.sample_hist)):
            yield (
                float(self.bin_edges[i]),
                float(self.bin_edges[i + 1]),
                float(self.sample_hist[i]),
                float(self.eval_hist[i]),
            )


def compare_eval_sample(
    bsdf: BSDF,
    wi,
    n_sample: int,
    n_eval: int,
    engine: VariateEngine | None = None,
    reference: str = "uniform_sphere",
    n_bins: int | None = None,
) -> ConsistencyReport:
    """
    Estimate the directional albedo of a BSDF along the sampling and the
    evaluation paths.

    Parameters
    ----------
    bsdf : .BSDF
        Scattering model, expressed in a local frame with the geometric normal
        along +z.

    wi : array-like or float or quantity
        Incident direction as a 3-vector, or incident zenith angle (unitless
        values are interpreted in degrees) with the direction in the xz-plane.

    n_sample : int
        Number of sampling path trials.

    n_eval : int
        Number of evaluation path trials.

    engine : .VariateEngine, optional
        Random variate source. Two independent child engines are spawned from
        it, one per path. Defaults to an engine derived from
        :data:`.root_seed_state`.

    reference : {"uniform_sphere", "uniform_hemisphere", "cosine_hemisphere"}, default: "uniform_sphere"
        Distribution of the outgoing directions on the evaluation path. Its
        support must cover that of the BSDF, otherwise the evaluation path
        misses energy.

    n_bins : int, optional
        Number of outgoing zenith cosine bins. Defaults to the ``n_bins``
        setting.

    Returns
    -------
    .ConsistencyReport

    Raises
    ------
    .PreconditionError
        If a trial count or ``n_bins`` is not strictly positive.

    ValueError
        If ``reference`` is unknown.
    """
    if n_sample < 1 or n_eval < 1:
        raise PreconditionError(
            f"trial counts must be strictly positive, got n_sample={n_sample} "
            f"and n_eval={n_eval}"
        )
    if n_bins is None:
        n_bins = settings.n_bins
    if n_bins < 1:
        raise PreconditionError(f"n_bins must be strictly positive, got {n_bins}")

    try:
        ref_sampler, ref_pdf = REFERENCE_DISTRIBUTIONS[reference]
    except KeyError as e:
        raise ValueError(
            f"unknown reference distribution '{reference}' (expected one of "
            f"{list(REFERENCE_DISTRIBUTIONS)})"
        ) from e

    wi = _incident_direction(wi)
    if engine is None:
        engine = default_engine()
    sample_engine, eval_engine = engine.spawn(2)

    bin_edges = np.linspace(-1.0, 1.0, n_bins + 1)
    disable = settings.progress < ProgressLevel.ESTIMATOR

    # Sampling path
    total, total_sq = 0.0, 0.0
    sample_hist = np.zeros(n_bins)

    for size in tqdm(
        list(_chunk_sizes(n_sample, settings.chunk_size)),
        desc="Sampling path",
        leave=False,
        disable=disable,
    ):
        wo, pdf, value = bsdf.sample(wi, sample_engine, size)
        pdf = np.asarray(pdf, dtype=float)
        value = np.asarray(value, dtype=float)
        contrib = np.divide(value, pdf, out=np.zeros_like(value), where=pdf > 0.0)

        total += contrib.sum()
        total_sq += np.square(contrib).sum()
        sample_hist += np.histogram(wo[:, 2], bins=bin_edges, weights=contrib)[0]

    sample = PathEstimate.from_sums(total, total_sq, n_sample)

    # Evaluation path
    total, total_sq = 0.0, 0.0
    eval_hist = np.zeros(n_bins)

    for size in tqdm(
        list(_chunk_sizes(n_eval, settings.chunk_size)),
        desc="Evaluation path",
        leave=False,
        disable=disable,
    ):
        wo = ref_sampler(eval_engine, size)
        pdf = ref_pdf(wo)
        value = np.asarray(bsdf.eval(wi, wo), dtype=float)
        contrib = np.divide(value, pdf, out=np.zeros_like(value), where=pdf > 0.0)

        total += contrib.sum()
        total_sq += np.square(contrib).sum()
        eval_hist += np.histogram(wo[:, 2], bins=bin_edges, weights=contrib)[0]

    evaluated = PathEstimate.from_sums(total, total_sq, n_eval)

    report = ConsistencyReport(
        wi=wi,
        sample=sample,
        eval=evaluated,
        bin_edges=bin_edges,
        sample_hist=sample_hist / n_sample,
        eval_hist=eval_hist / n_eval,
    )
    logger.debug(
        "Eval/sample comparison at wi=%s: sample=%g ± %g, eval=%g ± %g",
        wi,
        sample.mean,
        sample.stderr,
        evaluated.mean,
        evaluated.stderr,
    )
    return report
