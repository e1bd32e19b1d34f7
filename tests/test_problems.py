"""Tests for RiemannianProblem."""

import jax.numpy as jnp
import pytest

import riemcg as rc


@pytest.fixture
def sphere():
    return rc.Sphere(2)


def test_cost_evaluation(sphere):
    problem = rc.RiemannianProblem(sphere, lambda x: jnp.sum(x))
    assert problem.cost(jnp.array([1.0, 0.0, 0.0])) == 1.0


def test_autodiff_gradient_is_projected(sphere):
    problem = rc.RiemannianProblem(sphere, lambda x: -x[2])
    grad = problem.grad(jnp.array([1.0, 0.0, 0.0]))
    assert jnp.allclose(grad, jnp.array([0.0, 0.0, -1.0]))


def test_explicit_riemannian_gradient_is_used_as_is(sphere):
    problem = rc.RiemannianProblem(sphere, lambda x: -x[2], grad_fn=lambda x: jnp.full(3, 7.0))
    assert jnp.array_equal(problem.grad(jnp.array([1.0, 0.0, 0.0])), jnp.full(3, 7.0))


def test_euclidean_gradient_is_converted(sphere):
    problem = rc.RiemannianProblem(sphere, lambda x: -x[2], euclidean_grad_fn=lambda x: jnp.array([5.0, 0.0, -1.0]))
    grad = problem.grad(jnp.array([1.0, 0.0, 0.0]))
    assert jnp.allclose(grad, jnp.array([0.0, 0.0, -1.0]))


def test_spd_autodiff_gradient_uses_affine_invariant_metric():
    spd = rc.SymmetricPositiveDefinite(2)
    problem = rc.RiemannianProblem(spd, lambda x: jnp.trace(x))
    x = jnp.array([[2.0, 0.0], [0.0, 3.0]])
    # egrad = I, rgrad = x I x
    assert jnp.allclose(problem.grad(x), x @ x)


def test_repr(sphere):
    assert repr(rc.RiemannianProblem(sphere, jnp.sum)) == "RiemannianProblem(Sphere(n=2))"
