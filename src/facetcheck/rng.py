"""
Components related with pseudo-random number generation.

Seed management is inspired by `SeedBank <https://github.com/lenskit/seedbank>`__.
"""

from __future__ import annotations

import logging

import attrs
import numpy as np
import numpy.random

from .attrs import define, documented
from .config import settings
from .exceptions import PreconditionError

logger = logging.getLogger(__name__)


def _convert_seed_sequence(value) -> np.random.SeedSequence:
    return (
        value
        if isinstance(value, np.random.SeedSequence)
        else np.random.SeedSequence(value)
    )


@attrs.define
class SeedState:
    """
    Manage a root seed and facilities to derive seeds.
    """

    _seed: np.random.SeedSequence = attrs.field(
        default=None,
        converter=_convert_seed_sequence,
    )

    def reset(self, seed=None):
        """
        Reset the seed state.

        Parameters
        ----------
        seed : int or numpy.random.SeedSequence, optional
            Value used to initialize the internal seed sequence. If unset, the
            current seed sequence is reused, with its children spawned member
            reset.
        """
        if seed is not None:
            self._seed = _convert_seed_sequence(seed)
        else:
            self._seed = np.random.SeedSequence(entropy=self._seed.entropy)

    def next(self, n: int = 1) -> np.ndarray:
        """
        Get the next *n* seed values.

        Parameters
        ----------
        n : int
            Number of seed values to generate.

        Returns
        -------
        ndarray
            Generated RNG seeds.
        """
        return self._seed.spawn(1)[0].generate_state(n)

    def numpy_default_rng(self) -> numpy.random.Generator:
        """
        Return a default Numpy RNG initialized with a generated seed.
        """
        seed = self.next(1)[0]
        return np.random.default_rng(seed=seed)

    def variate_engine(self) -> VariateEngine:
        """
        Return a :class:`.VariateEngine` seeded with the next derived seed.
        """
        return VariateEngine(seed=self._seed.spawn(1)[0])


#: Root seed state, initialized from the ``seed`` setting (see :class:`.SeedState`).
root_seed_state = SeedState(settings.seed)


@define(eq=False)
class VariateEngine:
    """
    Scalar random variate generator owning a single pseudo-random stream.

    Every sampling routine of this package takes an engine explicitly; there is
    no hidden global stream. Two engines constructed with the same seed and
    driven through the same sequence of calls produce bit-identical results.

    All methods accept an optional ``size`` argument. If it is unset, a Python
    float is returned; otherwise a Numpy array of the requested shape.

    Notes
    -----
    The stream is not safe to share between concurrent workers: use
    :meth:`spawn` to derive one independent engine per worker.
    """

    seed: np.random.SeedSequence = documented(
        attrs.field(default=None, converter=_convert_seed_sequence),
        doc="Seed sequence from which the stream is initialized. If an integer "
        "is passed, it is converted to a :class:`numpy.random.SeedSequence`. "
        "If unset, fresh OS entropy is used.",
        type=":class:`numpy.random.SeedSequence`",
        init_type="int or :class:`numpy.random.SeedSequence`, optional",
        default="None",
    )

    _generator: np.random.Generator = attrs.field(init=False, repr=False)

    def __attrs_post_init__(self):
        self._generator = np.random.Generator(np.random.PCG64(self.seed))

    @property
    def generator(self) -> np.random.Generator:
        """
        Underlying Numpy generator. Drawing from it directly advances the stream.
        """
        return self._generator

    def reseed(self, seed=None) -> None:
        """
        Restart the stream.

        Parameters
        ----------
        seed : int or numpy.random.SeedSequence, optional
            New seed. If unset, the current seed is replayed from its start.
        """
        if seed is not None:
            self.seed = _convert_seed_sequence(seed)
        else:
            self.seed = np.random.SeedSequence(
                entropy=self.seed.entropy, spawn_key=self.seed.spawn_key
            )
        self.__attrs_post_init__()
        logger.debug("Reseeded variate engine (entropy=%s)", self.seed.entropy)

    def spawn(self, n: int) -> list[VariateEngine]:
        """
        Derive statistically independent child engines.

        Parameters
        ----------
        n : int
            Number of child engines.

        Returns
        -------
        list of .VariateEngine
            Child engines. Spawning is deterministic: the k-th call to this
            method on engines seeded identically yields identical children.
        """
        return [VariateEngine(seed=child) for child in self.seed.spawn(n)]

    def uniform(self, a: float = 0.0, b: float = 1.0, size=None):
        """
        Draw uniform variates on [a, b).

        Each variate consumes exactly one draw ``t`` in [0, 1) from the stream
        and is computed as ``a + t * (b - a)``.

        Parameters
        ----------
        a, b : float, default: 0, 1
            Interval bounds.

        size : int or tuple of int, optional
            Output shape.

        Returns
        -------
        float or ndarray
        """
        t = self._generator.random(size)
        if a == 0.0 and b == 1.0:
            return t
        return a + t * (b - a)

    def gaussian(self, size=None):
        """
        Draw standard normal variates with the Box-Muller transform.

        Each variate consumes two uniform draws ``u1`` then ``u2`` and is
        computed as ``sqrt(2) * cos(2π u1) * sqrt(-log(u2))``. For batched calls,
        all ``u1`` values are drawn before the ``u2`` values.

        Parameters
        ----------
        size : int or tuple of int, optional
            Output shape.

        Returns
        -------
        float or ndarray

        Warnings
        --------
        A ``u2`` draw of exactly 0 yields an infinite variate. It is
        deliberately left unclamped.
        """
        u1 = self._generator.random(size)
        u2 = self._generator.random(size)

        with np.errstate(divide="ignore"):
            result = np.sqrt(2.0) * np.cos(2.0 * np.pi * u1) * np.sqrt(-np.log(u2))

        return float(result) if size is None else result

    def gamma(self, shape: float, size=None):
        """
        Draw variates from a Gamma(shape, scale=1) distribution.

        Parameters
        ----------
        shape : float
            Shape parameter, strictly positive.

        size : int or tuple of int, optional
            Output shape.

        Returns
        -------
        float or ndarray

        Raises
        ------
        .PreconditionError
            If ``shape`` is not strictly positive.
        """
        if not shape > 0.0:
            raise PreconditionError(f"gamma shape must be strictly positive, got {shape}")

        return self._generator.standard_gamma(shape, size)


def default_engine() -> VariateEngine:
    """
    Return a new engine seeded from :data:`.root_seed_state`.
    """
    logger.debug("Using default RNG seed generator")
    return root_seed_state.variate_engine()
