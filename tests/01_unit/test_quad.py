import numpy as np
import pytest

from facetcheck.quad import GAUSS_LEGENDRE_100, GAUSS_LOBATTO_100, Quad, QuadType


@pytest.mark.parametrize(
    "n, exp_nodes, exp_weights",
    [
        (
            1,
            [0],
            [2],
        ),
        (
            2,
            [-np.sqrt(1.0 / 3.0), np.sqrt(1.0 / 3.0)],
            [1, 1],
        ),
        (
            3,
            [-np.sqrt(3.0 / 5.0), 0, np.sqrt(3.0 / 5.0)],
            [5.0 / 9.0, 8.0 / 9.0, 5.0 / 9.0],
        ),
        (
            4,
            [-0.861136, -0.339981, 0.339981, 0.861136],
            [0.347855, 0.652145, 0.652145, 0.347855],
        ),
    ],
    ids=list([f"n-{i}" for i in range(1, 5)]),
)
def test_gauss_legendre(n, exp_nodes, exp_weights):
    quad = Quad.gauss_legendre(n)
    assert np.allclose(quad.nodes, exp_nodes)
    assert np.allclose(quad.weights, exp_weights)


@pytest.mark.parametrize(
    "n, exp_nodes, exp_weights",
    [
        (
            2,
            [-1, 1],
            [1.0, 1.0],
        ),
        (
            3,
            [-1, 0, 1],
            [1.0 / 3.0, 4.0 / 3.0, 1.0 / 3.0],
        ),
        (
            4,
            [-1, -np.sqrt(1.0 / 5.0), np.sqrt(1.0 / 5.0), 1],
            [1.0 / 6.0, 5.0 / 6.0, 5.0 / 6.0, 1.0 / 6.0],
        ),
        (
            5,
            [-1, -np.sqrt(3.0 / 7.0), 0, np.sqrt(3.0 / 7.0), 1],
            [1.0 / 10.0, 49.0 / 90.0, 32.0 / 45.0, 49.0 / 90.0, 1.0 / 10.0],
        ),
    ],
    ids=list([f"n-{i}" for i in range(2, 6)]),
)
def test_gauss_lobatto(n, exp_nodes, exp_weights):
    quad = Quad.gauss_lobatto(n)
    assert np.allclose(quad.nodes, exp_nodes)
    assert np.allclose(quad.weights, exp_weights)


def test_quad_new():
    quad = Quad.new("gauss_legendre", 3)
    assert quad.type is QuadType.GAUSS_LEGENDRE
    assert len(quad) == 3

    quad = Quad.new(QuadType.GAUSS_LOBATTO, 4)
    assert quad.type is QuadType.GAUSS_LOBATTO
    assert quad.str_summary == "Quad(type=QuadType.GAUSS_LOBATTO, n=4)"

    with pytest.raises(ValueError):
        Quad.new("simpson", 3)


def test_quad_construct_invalid():
    with pytest.raises(ValueError):
        Quad(type="gauss_legendre", nodes=[0.0, 1.0], weights=[1.0])

    with pytest.raises(ValueError):
        Quad(type="gauss_legendre", nodes=[0.5], weights=[1.0], domain=(1.0, 0.0))


def test_quad_integrate():
    quad = Quad.gauss_legendre(10)
    f = lambda x: x**2
    values = np.array([f(x) for x in quad.eval_nodes(interval=(0, 1))])
    assert np.allclose(quad.integrate(values, interval=(0, 1)), 1.0 / 3.0)

    # Reference domain integration
    assert np.isclose(quad.integrate_function(lambda x: x**2), 2.0 / 3.0)

    # Leading dimensions are integrated independently
    nodes = quad.eval_nodes((0.0, 2.0))
    values = np.stack((np.ones_like(nodes), nodes))
    assert np.allclose(quad.integrate(values, (0.0, 2.0)), [2.0, 2.0])


@pytest.mark.parametrize(
    "quad", [GAUSS_LEGENDRE_100, GAUSS_LOBATTO_100], ids=["legendre", "lobatto"]
)
def test_baked_rules(quad):
    assert len(quad) == 100
    assert quad.domain == (0.0, 1.0)

    # Weights sum to the domain length
    assert abs(quad.weights.sum() - 1.0) < 1e-9
    assert np.all(quad.weights > 0.0)

    # Nodes increase monotonically and stay within the domain
    assert np.all(np.diff(quad.nodes) > 0.0)
    assert np.all((quad.nodes >= 0.0) & (quad.nodes <= 1.0))

    # Low-order polynomials are integrated exactly
    for k in range(8):
        assert np.isclose(
            quad.integrate_function(lambda x: x**k), 1.0 / (k + 1), rtol=1e-12
        )

    # Scaling to another interval
    assert np.isclose(quad.integrate_function(np.cos, (0.0, 0.5 * np.pi)), 1.0)


def test_baked_rules_endpoints():
    # The open rule excludes the endpoints, the closed rule contains them
    assert 0.0 < GAUSS_LEGENDRE_100.nodes[0] < GAUSS_LEGENDRE_100.nodes[-1] < 1.0
    assert GAUSS_LOBATTO_100.nodes[0] == 0.0
    assert GAUSS_LOBATTO_100.nodes[-1] == 1.0

    # Closed rule end weights are 1 / (n (n - 1))
    assert np.isclose(GAUSS_LOBATTO_100.weights[0], 1.0 / 9900.0)
    assert np.isclose(GAUSS_LOBATTO_100.weights[-1], 1.0 / 9900.0)


def test_baked_tables_read_only():
    from facetcheck import _quad_tables

    with pytest.raises(ValueError):
        _quad_tables.GAUSS_LEGENDRE_100_NODES[0] = 0.5

    # Public rules do not share memory with the tables but are frozen too
    for quad in [GAUSS_LEGENDRE_100, GAUSS_LOBATTO_100]:
        with pytest.raises(ValueError):
            quad.weights[0] = 123.0
        with pytest.raises(ValueError):
            quad.nodes[0] = 0.5

    assert np.isclose(GAUSS_LEGENDRE_100.weights.sum(), 1.0)


def test_quad_arrays_read_only():
    # Rules built at runtime are frozen; the input arrays are left untouched
    nodes, weights = np.array([-0.5, 0.5]), np.array([1.0, 1.0])
    quad = Quad(type="gauss_legendre", nodes=nodes, weights=weights)
    with pytest.raises(ValueError):
        quad.nodes[0] = 0.0
    nodes[0] = 0.0
    assert quad.nodes[0] == -0.5

    quad = Quad.gauss_lobatto(5)
    with pytest.raises(ValueError):
        quad.weights[0] = 0.0
