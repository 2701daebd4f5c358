"""
Warping functions mapping uniform samples on the [0, 1)² square to
distributions on the disk, sphere and hemisphere, with their densities.

Component order of the input samples matters: it fixes which uniform variate
drives which coordinate. Functions accept a single 2-vector or a (N, 2) array
and return arrays with a matching leading dimension.
"""

from __future__ import annotations

import numpy as np
from numpy.typing import ArrayLike

from .exceptions import PreconditionError

_INV_PI = 1.0 / np.pi
_INV_TWO_PI = 0.5 / np.pi
_INV_FOUR_PI = 0.25 / np.pi


def _as_samples(sample: ArrayLike) -> tuple[np.ndarray, bool]:
    sample = np.asarray(sample, dtype=float)
    single = sample.ndim == 1 and sample.size == 2
    sample = np.atleast_1d(sample)
    if sample.ndim < 2:
        sample = sample.reshape((sample.size // 2, 2))
    if sample.ndim > 2 or sample.shape[1] != 2:
        raise ValueError(f"array must be of shape (N, 2), got {sample.shape}")
    return sample, single


def _as_directions(v: ArrayLike) -> np.ndarray:
    v = np.atleast_1d(np.asarray(v, dtype=float))
    if v.ndim < 2:
        v = v.reshape((v.size // 3, 3))
    if v.ndim > 2 or v.shape[1] != 3:
        raise ValueError(f"array must be of shape (N, 3), got {v.shape}")
    return v


def square_to_uniform_disk(sample: ArrayLike, radius: float = 1.0) -> np.ndarray:
    """
    Polar square to disk mapping with uniform areal density.

    Parameters
    ----------
    sample : array-like
        A (N, 2) array of sample values. The first component drives the azimuth
        ``φ = 2π s0``, the second one the radius ``r = radius * sqrt(s1)``.

    radius : float, default: 1.0
        Disk radius.

    Returns
    -------
    ndarray
        Sampled coordinates on the disk as a (N, 2) array.

    Notes
    -----
    The square root makes the density uniform per unit area; a linear radius
    would concentrate samples near the center.
    """
    if not radius > 0.0:
        raise PreconditionError(f"disk radius must be strictly positive, got {radius}")

    sample, single = _as_samples(sample)
    phi = 2.0 * np.pi * sample[:, 0]
    r = radius * np.sqrt(sample[:, 1])
    result = np.vstack((r * np.cos(phi), r * np.sin(phi))).T
    return result[0] if single else result


def square_to_uniform_disk_pdf(p: ArrayLike, radius: float = 1.0) -> np.ndarray:
    """
    Density of :func:`square_to_uniform_disk` per unit area.
    """
    p = np.atleast_2d(np.asarray(p, dtype=float))
    inside = np.einsum("ij,ij->i", p, p) <= radius * radius
    return np.where(inside, 1.0 / (np.pi * radius * radius), 0.0)


def square_to_uniform_sphere(sample: ArrayLike) -> np.ndarray:
    """
    Uniformly sample a vector on the unit sphere with respect to solid angles.

    Parameters
    ----------
    sample : array-like
        A (N, 2) array of sample values. The first component drives the polar
        cosine ``w = 2 s0 - 1``, the second one the azimuth ``φ = 2π s1``.

    Returns
    -------
    ndarray
        Sampled directions as a (N, 3) array ``(w, s cos φ, s sin φ)`` with
        ``s = sqrt(1 - w²)``: the polar axis is +x.
    """
    sample, single = _as_samples(sample)
    w = 2.0 * sample[:, 0] - 1.0
    phi = 2.0 * np.pi * sample[:, 1]
    s = np.sqrt(np.maximum(0.0, 1.0 - w * w))
    result = np.vstack((w, s * np.cos(phi), s * np.sin(phi))).T
    return result[0] if single else result


def square_to_uniform_sphere_pdf(v: ArrayLike) -> np.ndarray:
    """
    Density of :func:`square_to_uniform_sphere` per unit solid angle.
    """
    v = _as_directions(v)
    return np.full(len(v), _INV_FOUR_PI)


def square_to_cosine_hemisphere(sample: ArrayLike) -> np.ndarray:
    """
    Sample a direction on the upper (+z) hemisphere with density proportional
    to the cosine of its zenith angle.

    Parameters
    ----------
    sample : array-like
        A (N, 2) array of sample values. The first component drives the zenith
        cosine ``w = sqrt(s0)``, the second one the azimuth ``φ = 2π s1``.

    Returns
    -------
    ndarray
        Sampled directions as a (N, 3) array ``(s cos φ, s sin φ, w)``.
    """
    sample, single = _as_samples(sample)
    w = np.sqrt(sample[:, 0])
    phi = 2.0 * np.pi * sample[:, 1]
    s = np.sqrt(np.maximum(0.0, 1.0 - w * w))
    result = np.vstack((s * np.cos(phi), s * np.sin(phi), w)).T
    return result[0] if single else result


def square_to_cosine_hemisphere_pdf(v: ArrayLike) -> np.ndarray:
    """
    Density of :func:`square_to_cosine_hemisphere` per unit solid angle,
    ``max(cos θ, 0) / π``.
    """
    v = _as_directions(v)
    return np.maximum(v[:, 2], 0.0) * _INV_PI


def square_to_uniform_hemisphere(sample: ArrayLike) -> np.ndarray:
    """
    Uniformly sample a vector on the upper (+z) hemisphere with respect to
    solid angles.

    Parameters
    ----------
    sample : array-like
        A (N, 2) array of sample values. The first component drives the zenith
        cosine ``w = s0``, the second one the azimuth ``φ = 2π s1``.

    Returns
    -------
    ndarray
        Sampled directions as a (N, 3) array.
    """
    sample, single = _as_samples(sample)
    w = sample[:, 0]
    phi = 2.0 * np.pi * sample[:, 1]
    s = np.sqrt(np.maximum(0.0, 1.0 - w * w))
    result = np.vstack((s * np.cos(phi), s * np.sin(phi), w)).T
    return result[0] if single else result


def square_to_uniform_hemisphere_pdf(v: ArrayLike) -> np.ndarray:
    """
    Density of :func:`square_to_uniform_hemisphere` per unit solid angle.
    """
    v = _as_directions(v)
    return np.where(v[:, 2] >= 0.0, _INV_TWO_PI, 0.0)


def disk_to_hemisphere(p: ArrayLike) -> np.ndarray:
    """
    Lift points of the unit disk vertically onto the upper unit hemisphere,
    ``z = sqrt(1 - x² - y²)``. Uniform disk points become cosine-distributed
    directions.
    """
    p, single = _as_samples(p)
    z = np.sqrt(np.maximum(0.0, 1.0 - np.einsum("ij,ij->i", p, p)))
    result = np.column_stack((p, z))
    return result[0] if single else result
