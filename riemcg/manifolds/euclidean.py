"""Implementation of flat Euclidean space R^n as a Riemannian manifold.

Geodesics are straight lines and parallel transport is the identity, so
optimizers running on this manifold reduce to their classical Euclidean
counterparts.
"""

import math

import jax.numpy as jnp
import jax.random as jr
from jaxtyping import Array

from ..core.constants import NumericalConstants
from ..core.type_system import ManifoldPoint, TangentVector
from .base import Manifold


class Euclidean(Manifold):
    """Euclidean space of arrays with a fixed shape and the Frobenius inner product."""

    def __init__(self, *shape: int):
        """Initialize Euclidean space.

        Args:
            *shape: Shape of the points (default: a single coordinate).

        Raises:
            ValueError: If any shape entry is not positive.
        """
        if not shape:
            shape = (1,)
        if any(s <= 0 for s in shape):
            raise ValueError(f"Euclidean shape entries must be positive, got {shape}")
        self._shape = tuple(shape)

    def proj(self, x: Array, v: Array) -> Array:
        """Every ambient vector is already tangent."""
        return jnp.asarray(v)

    def exp(self, x: Array, v: Array) -> Array:
        """Follow the straight line x + v."""
        return jnp.asarray(x + v)

    def log(self, x: Array, y: Array) -> Array:
        """Return the displacement y - x."""
        return jnp.asarray(y - x)

    def transp(self, x: Array, y: Array, v: Array) -> Array:
        """Parallel transport is the identity in flat space."""
        return jnp.asarray(v)

    def transp_along(self, x: Array, v: Array, t: float, w: Array) -> Array:
        """Parallel transport is the identity in flat space."""
        return jnp.asarray(w)

    def inner(self, x: Array, u: Array, v: Array) -> Array:
        """Frobenius inner product, independent of the base point."""
        return jnp.sum(u * v)

    def dist(self, x: Array, y: Array) -> Array:
        """Euclidean distance."""
        return jnp.linalg.norm(jnp.ravel(y - x))

    def random_point(self, key: Array, *shape: int) -> Array:
        """Sample a point from the standard normal distribution."""
        if not shape:
            shape = self._shape
        return jr.normal(key, shape)

    def random_tangent(self, key: Array, x: Array, *shape: int) -> Array:
        """Sample a tangent vector from the standard normal distribution."""
        if not shape:
            shape = x.shape
        return jr.normal(key, shape)

    def validate_point(self, x: ManifoldPoint, atol: float = NumericalConstants.VALIDATION_TOLERANCE) -> bool:
        """A point is valid when it has the right shape and finite entries."""
        return tuple(x.shape) == self._shape and bool(jnp.all(jnp.isfinite(x)))

    def validate_tangent(
        self, x: ManifoldPoint, v: TangentVector, atol: float = NumericalConstants.VALIDATION_TOLERANCE
    ) -> bool:
        """A tangent vector is valid when it has the shape of the point."""
        return tuple(v.shape) == self._shape

    @property
    def shape(self) -> tuple[int, ...]:
        """Shape of the points."""
        return self._shape

    @property
    def dimension(self) -> int:
        """Number of coordinates."""
        return math.prod(self._shape)

    def __repr__(self) -> str:
        """String representation of the manifold."""
        return f"Euclidean{self._shape}"
