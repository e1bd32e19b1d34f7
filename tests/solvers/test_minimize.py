"""Tests for the minimize convenience solver."""

import jax.numpy as jnp
import pytest

import riemcg as rc
from riemcg.manifolds import InvalidPointError
from riemcg.optimizers import CGScheme, ParameterValidationError
from riemcg.solvers import ConvergenceStatus, OptimizeResult, minimize


@pytest.fixture
def sphere():
    return rc.Sphere(2)


@pytest.fixture
def rayleigh_problem(sphere):
    """Minimize -x^T A x on S^2; the minimizers are +-e1 with value -3."""
    a = jnp.diag(jnp.array([3.0, 2.0, 1.0]))
    return rc.RiemannianProblem(
        sphere,
        lambda x: -x @ a @ x,
        grad_fn=lambda x: sphere.proj(x, -2.0 * a @ x),
    )


X0 = jnp.array([0.6, 0.48, 0.64])


@pytest.mark.parametrize("method", [scheme.value for scheme in CGScheme])
def test_sphere_leading_eigenvector(rayleigh_problem, method):
    result = minimize(rayleigh_problem, X0, method=method, options={"max_iterations": 100})
    assert isinstance(result, OptimizeResult)
    assert result.fun == pytest.approx(-3.0, abs=1e-8)
    assert jnp.allclose(jnp.abs(result.x), jnp.array([1.0, 0.0, 0.0]), atol=1e-4)
    assert result.niter > 0
    assert result.grad_norm < 1e-3
    assert result.metadata["scheme"] == method


def test_default_method_is_hestenes_stiefel(rayleigh_problem):
    result = minimize(rayleigh_problem, X0, options={"max_iterations": 5})
    assert result.metadata["scheme"] == "hestenes_stiefel"
    assert minimize(rayleigh_problem, X0, method="cg", options={"max_iterations": 5}).metadata["scheme"] == (
        "hestenes_stiefel"
    )


def test_abbreviated_method(rayleigh_problem):
    result = minimize(rayleigh_problem, X0, method="FR", options={"max_iterations": 5})
    assert result.metadata["scheme"] == "fletcher_reeves"


def test_iteration_bound_status(rayleigh_problem):
    result = minimize(rayleigh_problem, X0, options={"max_iterations": 2})
    assert result.niter == 2
    assert result.status == ConvergenceStatus.MAX_ITERATIONS
    assert not result.success
    assert result.message == "Maximum number of iterations reached."
    assert result.metadata["max_iterations"] == 2


def test_stationary_start(rayleigh_problem):
    x0 = jnp.array([1.0, 0.0, 0.0])
    result = minimize(rayleigh_problem, x0)
    assert result.niter == 0
    assert result.status == ConvergenceStatus.STATIONARY
    assert result.success
    assert jnp.array_equal(result.x, x0)
    assert result.fun == -3.0


def test_autodiff_gradient(sphere):
    a = jnp.diag(jnp.array([3.0, 2.0, 1.0]))
    problem = rc.RiemannianProblem(sphere, lambda x: -x @ a @ x)
    result = minimize(problem, X0, method="pr", options={"max_iterations": 50})
    assert result.fun == pytest.approx(-3.0, abs=1e-8)


def test_euclidean_quadratic():
    problem = rc.RiemannianProblem(rc.Euclidean(2), lambda x: x[0] ** 2 + 10.0 * x[1] ** 2)
    result = minimize(problem, jnp.array([1.0, 1.0]), options={"max_iterations": 2})
    assert jnp.allclose(result.x, jnp.zeros(2), atol=1e-8)


def test_options_are_forwarded(rayleigh_problem):
    states = []
    line_search = rc.BacktrackingLineSearch()
    result = minimize(
        rayleigh_problem,
        X0,
        method="dy",
        options={"max_iterations": 3, "line_search": line_search, "callback": states.append},
    )
    assert len(states) == result.niter
    assert result.metadata["line_search"] == repr(line_search)


def test_invalid_initial_point(rayleigh_problem):
    with pytest.raises(InvalidPointError):
        minimize(rayleigh_problem, jnp.array([1.0, 1.0, 0.0]))


def test_unknown_option(rayleigh_problem):
    with pytest.raises(ParameterValidationError) as exc_info:
        minimize(rayleigh_problem, X0, options={"tolerance": 1e-6})
    assert "tolerance" in str(exc_info.value)


def test_unknown_method(rayleigh_problem):
    with pytest.raises(ParameterValidationError):
        minimize(rayleigh_problem, X0, method="lbfgs")


@pytest.mark.slow
def test_spd_minimization():
    """Minimize tr(A X) - log det X on SPD(3); the minimizer is A^-1."""
    a = jnp.array([[2.0, 0.5, 0.0], [0.5, 1.5, 0.2], [0.0, 0.2, 1.0]])
    spd = rc.SymmetricPositiveDefinite(3)
    problem = rc.RiemannianProblem(spd, lambda x: jnp.trace(a @ x) - jnp.linalg.slogdet(x)[1])
    result = minimize(problem, jnp.eye(3), options={"max_iterations": 200})
    assert jnp.allclose(result.x, jnp.linalg.inv(a), atol=1e-6)


class TestOptimizeResult:
    """Test the result record."""

    def test_default_metadata(self):
        result = OptimizeResult(x=jnp.zeros(2), fun=0.0, niter=0, status=ConvergenceStatus.STATIONARY, grad_norm=0.0)
        assert result.metadata == {}
        assert result.success
        assert result.message.startswith("Optimization terminated successfully")
