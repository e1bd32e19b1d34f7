"""Problem definition for Riemannian optimization.

A :class:`RiemannianProblem` pairs a manifold with a cost function and its
Riemannian gradient. When no gradient is supplied, it is derived with JAX
automatic differentiation: the Euclidean gradient of the cost is converted
with the manifold's ``egrad2rgrad``.
"""

from collections.abc import Callable

import jax
from jaxtyping import Array

from .core.type_system import ManifoldPoint, TangentVector
from .manifolds.base import Manifold


class RiemannianProblem:
    """Cost function on a manifold together with its Riemannian gradient.

    Args:
        manifold: Manifold the cost is defined on.
        cost_fn: Smooth cost, Point -> real. Must be JAX-differentiable unless
            a gradient is provided.
        grad_fn: Riemannian gradient, Point -> tangent vector at that point.
        euclidean_grad_fn: Euclidean gradient of ``cost_fn``; converted with
            ``manifold.egrad2rgrad``. Ignored when ``grad_fn`` is given.

    Example:
        >>> import jax.numpy as jnp
        >>> from riemcg.manifolds import Sphere
        >>> sphere = Sphere(2)
        >>> problem = RiemannianProblem(sphere, lambda x: -x[2])
        >>> problem.grad(jnp.array([1.0, 0.0, 0.0]))
        Array([ 0.,  0., -1.], dtype=float32)
    """

    def __init__(
        self,
        manifold: Manifold,
        cost_fn: Callable[[ManifoldPoint], Array],
        grad_fn: Callable[[ManifoldPoint], TangentVector] | None = None,
        euclidean_grad_fn: Callable[[ManifoldPoint], Array] | None = None,
    ):
        self.manifold = manifold
        self.cost_fn = cost_fn
        self.grad_fn = grad_fn
        self.euclidean_grad_fn = jax.grad(cost_fn) if euclidean_grad_fn is None else euclidean_grad_fn

    def cost(self, x: ManifoldPoint) -> Array:
        """Evaluate the cost at x."""
        return self.cost_fn(x)

    def grad(self, x: ManifoldPoint) -> TangentVector:
        """Evaluate the Riemannian gradient at x."""
        if self.grad_fn is not None:
            return self.grad_fn(x)
        return self.manifold.egrad2rgrad(x, self.euclidean_grad_fn(x))

    def __repr__(self) -> str:
        return f"RiemannianProblem({self.manifold!r})"
