"""Capability protocols for the scattering models driven by the estimators."""

from __future__ import annotations

import typing as t

import numpy as np

if t.TYPE_CHECKING:
    from .rng import VariateEngine


@t.runtime_checkable
class NDF(t.Protocol):
    """
    Microfacet normal distribution.

    ``D`` takes a (N, 3) array of unit microfacet normals and returns a (N,)
    array of nonnegative densities. Normals in the lower hemisphere are valid
    inputs.
    """

    def D(self, m: np.ndarray) -> np.ndarray: ...


@t.runtime_checkable
class BSDF(t.Protocol):
    """
    Scattering model in a local shading frame where the geometric normal is +z.

    * ``eval(wi, wo)`` takes an incident 3-vector and a (N, 3) array of outgoing
      directions and returns the (N,) cosine-weighted scattering density.
    * ``sample(wi, engine, size)`` returns ``(wo, pdf, value)``: (size, 3)
      outgoing directions, their (size,) sampling densities, and the (size,)
      values of ``eval(wi, wo)`` at those directions.
    """

    def eval(self, wi: np.ndarray, wo: np.ndarray) -> np.ndarray: ...

    def sample(
        self, wi: np.ndarray, engine: VariateEngine, size: int
    ) -> tuple[np.ndarray, np.ndarray, np.ndarray]: ...
