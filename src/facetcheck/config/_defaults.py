"""
This module provides default settings for facetcheck. Dynaconf's double
underscore convention would be used to represent parameter dotted hierarchical
naming; all current parameters are flat.
"""

from __future__ import annotations


def seed(settings=None, validator=None) -> int | None:
    return 0


def chunk_size(settings=None, validator=None) -> int:
    return 65536


def check_majorant(settings=None, validator=None) -> bool:
    return False


def disk_radius(settings=None, validator=None) -> float:
    # Slightly below 1 to keep the lifted hemisphere point away from z = 0
    return 0.999999


def n_bins(settings=None, validator=None) -> int:
    return 10


def progress(settings=None, validator=None) -> str:
    return "none"
