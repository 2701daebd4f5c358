"""Quadrature rules, including the two baked 100-point rules on [0, 1]."""

from __future__ import annotations

import typing as t
from enum import Enum

import attrs
import numpy as np

from . import _quad_tables
from .attrs import documented, frozen


class QuadType(Enum):
    """Quadrature rule type flags."""

    GAUSS_LEGENDRE = "gauss_legendre"  #: Open rule, nodes strictly inside the domain.
    GAUSS_LOBATTO = "gauss_lobatto"  #: Closed rule, domain endpoints are nodes.


def _summary_numpy(value: np.ndarray) -> str:
    if value.size <= 4:
        return np.array2string(value, separator=", ")
    return f"array<{value.shape}, {value[0]:.6g} ... {value[-1]:.6g}>"


@frozen(eq=False)
class Quad:
    """
    A data class storing information about a quadrature rule. Nodes and weights
    are defined on the reference ``domain`` interval, [-1, 1] by default. The
    integration interval can be changed using the ``interval`` argument of the
    :meth:`.eval_nodes` and :meth:`.integrate` methods.
    """

    type: QuadType = documented(
        attrs.field(converter=QuadType, repr=lambda x: str(x)),
        doc="Quadrature type. If a string is passed, it is converted to a "
        ":class:`.QuadType`.",
        type=":class:`.QuadType`",
    )

    nodes: np.ndarray = documented(
        attrs.field(converter=np.array, repr=_summary_numpy),
        doc="Quadrature rule nodes.",
        type="ndarray",
    )

    weights: np.ndarray = documented(
        attrs.field(converter=np.array, repr=_summary_numpy),
        doc="Quadrature rule weights.",
        type="ndarray",
    )

    domain: tuple[float, float] = documented(
        attrs.field(default=(-1.0, 1.0), converter=lambda x: tuple(float(v) for v in x)),
        doc="Reference interval on which nodes and weights are defined.",
        type="tuple of float",
        default="(-1.0, 1.0)",
    )

    @nodes.validator
    @weights.validator
    def _nodes_weights_validator(self, attribute, value):
        if self.nodes.shape != self.weights.shape:
            raise ValueError(
                f"while validating {attribute.name}: nodes and weights arrays "
                f"must have the same shape, got nodes.shape = {self.nodes.shape} "
                f"and weights.shape = {self.weights.shape}"
            )

    @domain.validator
    def _domain_validator(self, attribute, value):
        if len(value) != 2 or not value[0] < value[1]:
            raise ValueError(
                f"while validating {attribute.name}: expected an increasing "
                f"2-tuple, got {value}"
            )

    def __attrs_post_init__(self):
        # Nodes and weights are immutable, including on the baked rules
        self.nodes.setflags(write=False)
        self.weights.setflags(write=False)

    def __len__(self) -> int:
        return self.nodes.size

    @classmethod
    def gauss_legendre(cls, n: int) -> Quad:
        """
        Initialize a :class:`.Quad` instance with Gauss-Legendre nodes and
        weights on [-1, 1].

        Parameters
        ----------
        n : int
            Number of quadrature points.

        Returns
        -------
        :class:`.Quad`
            Gauss-Legendre quadrature definition.
        """
        if n < 1:
            raise ValueError(f"Gauss-Legendre rules need at least 1 point, got {n}")

        nodes, weights = np.polynomial.legendre.leggauss(n)
        return cls(type=QuadType.GAUSS_LEGENDRE, nodes=nodes, weights=weights)

    @classmethod
    def gauss_lobatto(cls, n: int) -> Quad:
        """
        Initialize a :class:`.Quad` instance with Gauss-Lobatto nodes and
        weights on [-1, 1].

        Parameters
        ----------
        n : int
            Number of quadrature points, including both endpoints.

        Returns
        -------
        :class:`.Quad`
            Gauss-Lobatto quadrature definition.

        Notes
        -----
        Interior nodes are the roots of :math:`P'_{n-1}`; weights are
        :math:`2 / (n (n - 1) P_{n-1}(x_i)^2)`.
        """
        if n < 2:
            raise ValueError(f"Gauss-Lobatto rules need at least 2 points, got {n}")

        p = np.polynomial.legendre.Legendre.basis(n - 1)
        interior = np.sort(p.deriv().roots().real) if n > 2 else np.array([])
        nodes = np.concatenate(([-1.0], interior, [1.0]))
        weights = 2.0 / (n * (n - 1) * p(nodes) ** 2)
        return cls(type=QuadType.GAUSS_LOBATTO, nodes=nodes, weights=weights)

    @classmethod
    def new(cls, type: str | QuadType, n: int) -> Quad:
        """
        Initialize a :class:`.Quad` instance of the specified type.

        Parameters
        ----------
        type : str or .QuadType
            Quadrature rule type. If a string is passed, it is converted to
            a :class:`.QuadType`.

        n : int
            Number of quadrature points.

        Returns
        -------
        :class:`.Quad`
            Quadrature definition.
        """
        type = QuadType(type)

        if type is QuadType.GAUSS_LEGENDRE:
            return cls.gauss_legendre(n)

        elif type is QuadType.GAUSS_LOBATTO:
            return cls.gauss_lobatto(n)

        else:
            raise ValueError(f"unknown quadrature type '{type}'")

    def _scale(self, interval: tuple[float, float] | None) -> tuple[float, float]:
        # Affine map x -> offset + factor * x from the reference domain to the
        # target interval
        if interval is None:
            return 0.0, 1.0
        a0, b0 = self.domain
        a, b = interval
        factor = (b - a) / (b0 - a0)
        return a - a0 * factor, factor

    def eval_nodes(self, interval: tuple[float, float] | None = None) -> np.ndarray:
        """
        Compute nodes scaled to a specific interval.

        Parameters
        ----------
        interval :  tuple of float, optional
            Interval for which nodes are to be scaled as a 2-tuple. If ``None``,
            the reference domain is used.

        Returns
        -------
        ndarray
            Scaled node values.
        """
        if interval is None:
            return self.nodes
        offset, factor = self._scale(interval)
        return offset + factor * self.nodes

    def integrate(
        self, values: np.typing.ArrayLike, interval: tuple[float, float] | None = None
    ) -> float:
        """
        Evaluate quadrature rule, accounting for interval scaling.

        Parameters
        ----------
        values : ndarray
            Function values at quadrature nodes, as returned by
            :meth:`eval_nodes` for the same interval. Extra leading dimensions
            are integrated independently.

        interval : tuple of float, optional
            Interval on which the integral is being computed as a 2-tuple.
            If ``None``, the reference domain is used.

        Returns
        -------
        float or ndarray
            Quadrature evaluation for the specified interval.
        """
        _, factor = self._scale(interval)
        result = factor * np.dot(np.asarray(values, dtype=float), self.weights)
        return float(result) if np.ndim(result) == 0 else result

    def integrate_function(
        self,
        f: t.Callable[[np.ndarray], np.typing.ArrayLike],
        interval: tuple[float, float] | None = None,
    ) -> float:
        """
        Integrate a vectorized callable over an interval: ``∫ f(x) dx ≈ Σ wᵢ f(xᵢ)``.
        """
        return self.integrate(f(self.eval_nodes(interval)), interval)

    @property
    def str_summary(self) -> str:
        """
        Return a summarized representation of the current instance.
        """
        return f"Quad(type={QuadType(self.type)}, n={len(self.nodes)})"


#: 100-point Gauss-Legendre (open) rule on [0, 1].
GAUSS_LEGENDRE_100 = Quad(
    type=QuadType.GAUSS_LEGENDRE,
    nodes=_quad_tables.GAUSS_LEGENDRE_100_NODES,
    weights=_quad_tables.GAUSS_LEGENDRE_100_WEIGHTS,
    domain=(0.0, 1.0),
)

#: 100-point Gauss-Lobatto (closed) rule on [0, 1].
GAUSS_LOBATTO_100 = Quad(
    type=QuadType.GAUSS_LOBATTO,
    nodes=_quad_tables.GAUSS_LOBATTO_100_NODES,
    weights=0.5 * _quad_tables.GAUSS_LOBATTO_100_WEIGHTS_M1P1,
    domain=(0.0, 1.0),
)
