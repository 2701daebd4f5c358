import numpy as np
import pint
import pytest

from facetcheck.units import to_radian
from facetcheck.units import unit_registry as ureg


@pytest.mark.parametrize(
    "value, default_units, expected",
    [
        (180.0, "deg", np.pi),
        (0.5, "rad", 0.5),
        (ureg.Quantity(90.0, "deg"), "rad", 0.5 * np.pi),
        ([0.0, 45.0], "deg", [0.0, 0.25 * np.pi]),
    ],
    ids=["deg", "rad", "quantity", "array"],
)
def test_to_radian(value, default_units, expected):
    assert np.allclose(to_radian(value, default_units=default_units), expected)


def test_to_radian_incompatible():
    with pytest.raises(pint.DimensionalityError):
        to_radian(ureg.Quantity(1.0, "m"))
