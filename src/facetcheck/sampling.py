"""
Direction and disk samplers driven by a :class:`.VariateEngine`.

Each sample consumes two uniform draws, taken in the order documented by the
corresponding :mod:`facetcheck.warp` mapping. Batched calls draw a (N, 2)
block row by row, so that a batch of N samples is identical to N successive
single-sample calls on the same engine.
"""

from __future__ import annotations

import numpy as np

from . import warp
from .frame import build_orthonormal_basis, to_world
from .rng import VariateEngine


def _draw_square(engine: VariateEngine, size: int | None) -> np.ndarray:
    shape = (2,) if size is None else (size, 2)
    return np.asarray(engine.uniform(size=shape))


def disk_sample(
    engine: VariateEngine,
    radius: float = 1.0,
    size: int | None = None,
    dim: int = 3,
) -> np.ndarray:
    """
    Sample points uniformly distributed over a disk centered at the origin.

    Draws ``φ = uniform(0, 2π)`` then ``r = radius * sqrt(uniform())``.

    Parameters
    ----------
    engine : .VariateEngine
        Random variate source.

    radius : float, default: 1.0
        Disk radius.

    size : int, optional
        Number of samples. If unset, a single point is returned.

    dim : {2, 3}, default: 3
        If 3, points are embedded in the z = 0 plane.

    Returns
    -------
    ndarray
        A (dim,) or (size, dim) array.
    """
    if dim not in (2, 3):
        raise ValueError(f"dim must be 2 or 3, got {dim}")

    p = warp.square_to_uniform_disk(_draw_square(engine, size), radius=radius)
    if dim == 2:
        return p

    if size is None:
        return np.array([p[0], p[1], 0.0])
    return np.column_stack((p, np.zeros(len(p))))


def isotropic_direction(engine: VariateEngine, size: int | None = None) -> np.ndarray:
    """
    Sample unit vectors uniformly distributed over the full sphere.

    Draws ``w = uniform(-1, 1)`` then ``φ = uniform(0, 2π)`` and returns
    ``(w, s cos φ, s sin φ)`` with ``s = sqrt(1 - w²)``.
    """
    return warp.square_to_uniform_sphere(_draw_square(engine, size))


def uniform_hemisphere_direction(
    engine: VariateEngine, size: int | None = None
) -> np.ndarray:
    """
    Sample unit vectors uniformly distributed over the upper (+z) hemisphere.
    """
    return warp.square_to_uniform_hemisphere(_draw_square(engine, size))


def cosine_weighted_direction(
    engine: VariateEngine,
    normal: np.typing.ArrayLike | None = None,
    size: int | None = None,
) -> np.ndarray:
    """
    Sample directions with density proportional to the cosine of the angle to
    a normal.

    Draws ``w = sqrt(uniform())`` then ``φ = uniform(0, 2π)``; the canonical
    sample is ``(s cos φ, s sin φ, w)`` with +z as the normal.

    Parameters
    ----------
    engine : .VariateEngine
        Random variate source.

    normal : array-like, optional
        If set, samples are expressed in the ``(tangent, bitangent, normal)``
        frame built by :func:`.build_orthonormal_basis`. The normal is
        normalized internally.

    size : int, optional
        Number of samples. If unset, a single direction is returned.

    Returns
    -------
    ndarray
        A (3,) or (size, 3) array.
    """
    local = warp.square_to_cosine_hemisphere(_draw_square(engine, size))
    if normal is None:
        return local

    n = np.asarray(normal, dtype=float)
    tangent, bitangent = build_orthonormal_basis(n)
    return to_world(local, tangent, bitangent, n / np.linalg.norm(n))
