"""
Tabulate the projected area of a null-scattering Student-t distribution: the
quadrature reference acceptance σ(u) / (π · majorant) on the first line, the
Monte Carlo acceptance fractions on the second line.
"""

import logging

import numpy as np
import typer
from typing_extensions import Annotated

from ._console import data, message

logger = logging.getLogger(__name__)


def _format_row(values) -> str:
    return " ".join(f"{x:.6g}" for x in values)


def main(
    roughness: Annotated[float, typer.Argument(help="Distribution roughness α.")],
    majorant: Annotated[float, typer.Argument(help="Upper bound of the density.")],
    gamma: Annotated[float, typer.Argument(help="Student-t shape γ (> 1).")],
    du: Annotated[float, typer.Argument(help="View cosine step.")],
    samples: Annotated[
        int, typer.Option("--samples", "-n", help="Trials per view cosine.")
    ] = 100000,
):
    from ..exceptions import PreconditionError
    from ..rng import default_engine
    from ..shadowing import (
        estimate_projected_area,
        projected_area_quadrature,
        view_cosines,
    )
    from ..test_tools.models import StudentTNDF

    message(f"roughness: {roughness:g}")
    message(f"majorant: {majorant:g}")
    message(f"gamma: {gamma:g}")
    message(f"du: {du:g}")

    try:
        ndf = StudentTNDF(alpha=roughness, gamma=gamma)
        if majorant < ndf.max_density:
            logger.warning(
                "Majorant %g is below the density maximum %g: acceptance is biased",
                majorant,
                ndf.max_density,
            )

        reference = [
            projected_area_quadrature(ndf, u) / (np.pi * majorant)
            for u in view_cosines(-0.999, 0.98, du, inclusive=True)
        ]
        data(_format_row(reference))

        engine = default_engine()
        estimates = [
            estimate_projected_area(ndf, u, majorant, n_samples=samples, engine=engine)
            for u in view_cosines(-1.0, 1.0, du)
        ]
        data(_format_row(x.acceptance for x in estimates))

    except PreconditionError as e:
        raise typer.BadParameter(str(e)) from e
