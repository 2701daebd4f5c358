"""Frame and angle manipulation utilities."""

from __future__ import annotations

import numpy as np

from .exceptions import PreconditionError
from .units import unit_registry as ureg


def _as_vectors(v: np.typing.ArrayLike, dim: int = 3) -> tuple[np.ndarray, bool]:
    # Return a (N, dim) float array and a flag telling whether the input was a
    # single vector
    v = np.asarray(v, dtype=float)
    single = v.ndim == 1
    v = np.atleast_2d(v)
    if v.ndim > 2 or v.shape[1] != dim:
        raise ValueError(f"array must be of shape (N, {dim}), got {v.shape}")
    return v, single


def build_orthonormal_basis(normal: np.typing.ArrayLike) -> tuple[np.ndarray, np.ndarray]:
    """
    Build two unit vectors completing a normal to a right-handed orthonormal
    frame.

    The helper axis is the coordinate axis least aligned with ``normal``, which
    keeps the construction well-conditioned for normals aligned with any
    coordinate axis.

    Parameters
    ----------
    normal : array-like
        A non-zero 3-vector. It does not have to be normalized.

    Returns
    -------
    tangent, bitangent : ndarray
        Unit vectors such that ``(tangent, bitangent, normalize(normal))`` is
        orthonormal and ``cross(tangent, bitangent) == normalize(normal)``.

    Raises
    ------
    .PreconditionError
        If ``normal`` is the zero vector.
    """
    n = np.asarray(normal, dtype=float)
    if n.shape != (3,):
        raise ValueError(f"normal must be a 3-vector, got shape {n.shape}")

    length = np.linalg.norm(n)
    if length == 0.0:
        raise PreconditionError("cannot build an orthonormal basis around a zero vector")
    n = n / length

    axis = np.zeros(3)
    axis[np.argmin(np.abs(n))] = 1.0

    tangent = np.cross(axis, n)
    tangent /= np.linalg.norm(tangent)
    bitangent = np.cross(n, tangent)

    return tangent, bitangent


def to_world(
    local: np.typing.ArrayLike,
    tangent: np.ndarray,
    bitangent: np.ndarray,
    normal: np.ndarray,
) -> np.ndarray:
    """
    Express local coordinates, given in the ``(tangent, bitangent, normal)``
    frame, in world coordinates.

    Parameters
    ----------
    local : array-like
        A 3-vector or a (N, 3) array of local coordinates.

    tangent, bitangent, normal : ndarray
        Frame axes in world coordinates.

    Returns
    -------
    ndarray
        World coordinates, with the same shape as ``local``.
    """
    v, single = _as_vectors(local)
    basis = np.vstack((tangent, bitangent, normal))
    result = v @ basis
    return result[0] if single else result


def to_local(
    world: np.typing.ArrayLike,
    tangent: np.ndarray,
    bitangent: np.ndarray,
    normal: np.ndarray,
) -> np.ndarray:
    """
    Inverse of :func:`to_world` for an orthonormal frame.
    """
    v, single = _as_vectors(world)
    basis = np.vstack((tangent, bitangent, normal))
    result = v @ basis.T
    return result[0] if single else result


def rotate_y(v: np.typing.ArrayLike, cos_theta: float) -> np.ndarray:
    """
    Rotate vectors about the +y axis by the angle θ ∈ [0, π] whose cosine is
    ``cos_theta``. The +z axis is mapped to ``(sin θ, 0, cos θ)``.

    Parameters
    ----------
    v : array-like
        A 3-vector or a (N, 3) array.

    cos_theta : float
        Rotation angle cosine, in [-1, 1].

    Returns
    -------
    ndarray
        Rotated vectors, with the same shape as ``v``.
    """
    v, single = _as_vectors(v)
    u = cos_theta
    s = np.sqrt(1.0 - u * u)
    x, y, z = v[:, 0], v[:, 1], v[:, 2]
    result = np.stack((x * u + s * z, y, u * z - x * s), axis=-1)
    return result[0] if single else result


def rotate_z(v: np.typing.ArrayLike, phi: float) -> np.ndarray:
    """
    Rotate vectors counter-clockwise about the +z axis by ``phi`` [rad].
    """
    v, single = _as_vectors(v)
    c, s = np.cos(phi), np.sin(phi)
    x, y, z = v[:, 0], v[:, 1], v[:, 2]
    result = np.stack((c * x - s * y, s * x + c * y, z), axis=-1)
    return result[0] if single else result


@ureg.wraps(ret=None, args=("dimensionless", "rad", None), strict=False)
def cos_angle_to_direction(
    cos_theta: np.typing.ArrayLike,
    phi: np.typing.ArrayLike,
    flip: bool = False,
) -> np.ndarray:
    r"""
    Convert a zenith cosine and azimuth angle pair to a direction.

    Parameters
    ----------
    cos_theta : array-like
        Zenith angle cosine [dimensionless].
        Convention: 1 corresponds to zenith, -1 corresponds to nadir.

    phi : array-like
        Azimuth angle [radian].
        Convention: 0 corresponds to the X axis.

    flip : bool
        If ``True``, flip the returned direction (points towards the nadir with
        `cos_theta` equal to 1).

    Returns
    -------
    ndarray
        Directions corresponding to the angular parameters as a (N, 3) array.
    """
    cos_theta = np.atleast_1d(cos_theta).astype(float)
    phi = np.atleast_1d(phi).astype(float)

    sin_theta = np.sqrt(1.0 - np.multiply(cos_theta, cos_theta))
    sin_phi, cos_phi = np.sin(phi), np.cos(phi)

    result = np.vstack((sin_theta * cos_phi, sin_theta * sin_phi, cos_theta)).T
    return result if not flip else -result


@ureg.wraps(ret=None, args=("rad", None), strict=False)
def angles_to_direction(angles: np.typing.ArrayLike, flip: bool = False) -> np.ndarray:
    r"""
    Convert a zenith and azimuth angle pair to a direction unit vector.

    Parameters
    ----------
    angles : array-like
        A sequence of (zenith, azimuth) pairs, where zenith = 0 corresponds to
        +z direction [rad].

    flip : bool, optional, default: False
        If ``True``, flip returned directions.

    Returns
    -------
    ndarray
        Directions corresponding to the angular parameters as a (N, 3) array.
    """
    angles = np.atleast_1d(angles).astype(float)
    if angles.ndim < 2:
        angles = angles.reshape((angles.size // 2, 2))
    if angles.ndim > 2 or angles.shape[1] != 2:
        raise ValueError(f"array must be of shape (N, 2), got {angles.shape}")

    # Negative zeniths are folded to the opposite azimuth
    negative_zenith = angles[:, 0] < 0
    angles[negative_zenith, 0] *= -1
    angles[negative_zenith, 1] += np.pi

    return cos_angle_to_direction(np.cos(angles[:, 0]), angles[:, 1], flip=flip)


def direction_to_angles(v: np.typing.ArrayLike) -> np.ndarray:
    """
    Convert cartesian vectors to zenith-azimuth pairs.

    Parameters
    ----------
    v : array-like
        A sequence of 3-vectors (shape (N, 3)). They do not have to be
        normalized.

    Returns
    -------
    ndarray
        A (N, 2) array of zenith and azimuth angles [rad], where zenith = 0
        corresponds to +z direction and azimuths lie in [0, 2π[.
    """
    v, _ = _as_vectors(v)
    v = v / np.linalg.norm(v, axis=-1).reshape(len(v), 1)
    theta = np.arccos(np.clip(v[..., 2], -1.0, 1.0))
    phi = np.arctan2(v[..., 1], v[..., 0]) % (2.0 * np.pi)
    return np.vstack((theta, phi)).T
