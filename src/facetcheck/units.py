"""Unit handling. Only angles are dimensioned in this package."""

from __future__ import annotations

__all__ = ["unit_registry", "to_radian"]

import logging

import numpy as np
import pint

logger = logging.getLogger(__name__)

#: Unit registry common to all components. Aliased in :mod:`facetcheck`.
unit_registry = pint.get_application_registry()


def to_radian(value, default_units: str = "deg") -> np.ndarray | float:
    """
    Convert an angle to a magnitude in radian.

    Parameters
    ----------
    value : float or array-like or quantity
        Angle value. Unitless values are interpreted in ``default_units``.

    default_units : str, default: "deg"
        Units used to interpret unitless values.

    Returns
    -------
    float or ndarray
        Angle magnitude in radian.
    """
    if not isinstance(value, pint.Quantity):
        value = unit_registry.Quantity(value, default_units)
    return value.m_as(unit_registry.radian)
