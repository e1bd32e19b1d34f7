"""Implementation of the Symmetric Positive Definite (SPD) manifold.

This module provides operations for optimization on the manifold of symmetric
positive definite matrices with the affine-invariant metric, which is
fundamental in covariance estimation, signal processing, and diffusion tensor
imaging.

Mathematical Foundation:
For SPD manifold P(n) with affine-invariant metric ⟨U, V⟩_X = tr(X^(-1)U X^(-1)V),
the geodesic leaving X with velocity V is:
    gamma(t) = X^(1/2) expm(t X^(-1/2) V X^(-1/2)) X^(1/2)

and parallel transport of W along it is the congruence W -> E W E^T with
    E(t) = X^(1/2) expm(t/2 X^(-1/2) V X^(-1/2)) X^(-1/2)

References:
- Pennec, X. (2006). Intrinsic Statistics on Riemannian Manifolds
- Sra, S. & Hosseini, R. (2015). Conic geometric optimisation on the manifold
  of positive definite matrices
"""

from collections.abc import Callable

import jax.numpy as jnp
import jax.random as jr
from jax import Array

from ..core.constants import NumericalConstants
from .base import Manifold


def _sym(x: Array) -> Array:
    return 0.5 * (x + x.T)


def _spectral_map(x: Array, fn: Callable[[Array], Array], clamp: bool = True) -> Array:
    """Apply a scalar function to the eigenvalues of a symmetric matrix.

    For symmetric X = Q @ diag(λ) @ Q^T, returns Q @ diag(fn(λ)) @ Q^T.
    With ``clamp`` the eigenvalues are bounded away from zero first, as
    required by log, sqrt and inverse sqrt of SPD matrices.
    """
    eigenvals, eigenvecs = jnp.linalg.eigh(_sym(x))
    if clamp:
        eigenvals = jnp.maximum(eigenvals, NumericalConstants.HIGH_PRECISION_EPSILON)
    return jnp.asarray((eigenvecs * fn(eigenvals)) @ eigenvecs.T)


def _matrix_sqrt(x: Array) -> Array:
    return _spectral_map(x, jnp.sqrt)


def _matrix_inv_sqrt(x: Array) -> Array:
    return _spectral_map(x, lambda w: 1.0 / jnp.sqrt(w))


def _matrix_log(x: Array) -> Array:
    return _spectral_map(x, jnp.log)


def _matrix_exp(x: Array) -> Array:
    # Symmetric argument: exp of the eigenvalues, no clamping.
    return _spectral_map(x, jnp.exp, clamp=False)


class SymmetricPositiveDefinite(Manifold):
    """Symmetric Positive Definite manifold SPD(n) with affine-invariant metric.

    The manifold of nxn symmetric positive definite matrices:
    SPD(n) = {X ∈ R^(nxn) : X = X^T, X ≻ 0}

    The affine-invariant metric makes the manifold complete with non-positive
    curvature, so geodesics never leave the manifold and transport along them
    has a closed form.
    """

    def __init__(self, n: int) -> None:
        """Initialize the SPD manifold.

        Args:
            n: Size of the matrices (nxn).

        Raises:
            ValueError: If n < 1.
        """
        if n < 1:
            raise ValueError(f"SPD matrix size must be positive, got {n}")
        self.n = n

    def proj(self, x: Array, v: Array) -> Array:
        """Project matrix v onto the tangent space, the symmetric matrices."""
        return _sym(v)

    def exp(self, x: Array, v: Array) -> Array:
        """Exponential map: exp_x(v) = x^(1/2) expm(x^(-1/2) v x^(-1/2)) x^(1/2)."""
        x_sqrt = _matrix_sqrt(x)
        x_inv_sqrt = _matrix_inv_sqrt(x)
        return _sym(x_sqrt @ _matrix_exp(x_inv_sqrt @ v @ x_inv_sqrt) @ x_sqrt)

    def log(self, x: Array, y: Array) -> Array:
        """Logarithmic map: log_x(y) = x^(1/2) logm(x^(-1/2) y x^(-1/2)) x^(1/2)."""
        x_sqrt = _matrix_sqrt(x)
        x_inv_sqrt = _matrix_inv_sqrt(x)
        return _sym(x_sqrt @ _matrix_log(x_inv_sqrt @ y @ x_inv_sqrt) @ x_sqrt)

    def inner(self, x: Array, u: Array, v: Array) -> Array:
        """Affine-invariant inner product <u, v>_x = tr(x^(-1) u x^(-1) v)."""
        x_inv_u = jnp.linalg.solve(x, u)
        x_inv_v = jnp.linalg.solve(x, v)
        return jnp.trace(x_inv_u @ x_inv_v)

    def transp(self, x: Array, y: Array, v: Array) -> Array:
        """Parallel transport from x to y along the minimizing geodesic.

        P_{x→y}(v) = E v E^T with E = x^(1/2) (x^(-1/2) y x^(-1/2))^(1/2) x^(-1/2).
        """
        x_sqrt = _matrix_sqrt(x)
        x_inv_sqrt = _matrix_inv_sqrt(x)
        e = x_sqrt @ _matrix_sqrt(x_inv_sqrt @ y @ x_inv_sqrt) @ x_inv_sqrt
        return _sym(e @ v @ e.T)

    def transp_along(self, x: Array, v: Array, t: float, w: Array) -> Array:
        """Parallel transport w along t -> exp(x, t v) without recomputing the end point."""
        x_sqrt = _matrix_sqrt(x)
        x_inv_sqrt = _matrix_inv_sqrt(x)
        e = x_sqrt @ _matrix_exp(0.5 * t * (x_inv_sqrt @ v @ x_inv_sqrt)) @ x_inv_sqrt
        return _sym(e @ w @ e.T)

    def egrad2rgrad(self, x: Array, egrad: Array) -> Array:
        """Riemannian gradient under the affine-invariant metric: x sym(egrad) x."""
        return _sym(x @ _sym(egrad) @ x)

    def dist(self, x: Array, y: Array) -> Array:
        """Geodesic distance ||logm(x^(-1/2) y x^(-1/2))||_F."""
        x_inv_sqrt = _matrix_inv_sqrt(x)
        return jnp.linalg.norm(_matrix_log(x_inv_sqrt @ y @ x_inv_sqrt), "fro")

    def random_point(self, key: Array, *shape: int) -> Array:
        """Generate a random SPD matrix as the matrix exponential of a random symmetric matrix."""
        a = jr.normal(key, (self.n, self.n))
        return _matrix_exp(_sym(a))

    def random_tangent(self, key: Array, x: Array, *shape: int) -> Array:
        """Generate a random symmetric matrix."""
        return _sym(jr.normal(key, (self.n, self.n)))

    def validate_point(self, x: Array, atol: float = NumericalConstants.VALIDATION_TOLERANCE) -> bool:
        """Validate that x is symmetric positive definite."""
        if x.shape != (self.n, self.n):
            return False
        if not bool(jnp.allclose(x, x.T, atol=atol)):
            return False
        eigenvals = jnp.linalg.eigvalsh(_sym(x))
        return bool(jnp.all(eigenvals > atol))

    def validate_tangent(self, x: Array, v: Array, atol: float = NumericalConstants.VALIDATION_TOLERANCE) -> bool:
        """Validate that v is a symmetric matrix of the right size."""
        return v.shape == (self.n, self.n) and bool(jnp.allclose(v, v.T, atol=atol))

    @property
    def dimension(self) -> int:
        """Intrinsic dimension n(n+1)/2."""
        return self.n * (self.n + 1) // 2

    def __repr__(self) -> str:
        """String representation of the manifold."""
        return f"SymmetricPositiveDefinite(n={self.n})"
