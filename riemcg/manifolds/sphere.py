"""Unit sphere S^n with the round metric.

Geodesics are great circles, so both the curve and parallel transport along
it have closed forms. Conjugate gradient relies on the latter to carry the
previous search direction over to the new iterate exactly, even when a line
search steps past the antipode.
"""

import jax.numpy as jnp
import jax.random as jr
from jaxtyping import Array

from ..core.constants import NumericalConstants
from ..core.type_system import ManifoldPoint, TangentVector
from .base import Manifold


class Sphere(Manifold):
    """Unit vectors of R^(n+1) with the metric inherited from the ambient space.

    Tangent vectors at x are the ambient vectors orthogonal to x; the inner
    product is the ambient dot product.
    """

    def __init__(self, n: int = 2):
        """Create S^n.

        Args:
            n: Intrinsic dimension; points live in R^(n+1).

        Raises:
            ValueError: If n < 1.
        """
        if n < 1:
            raise ValueError(f"Sphere dimension must be positive, got {n}")
        self._n = n

    def proj(self, x: Array, v: Array) -> Array:
        """Remove the radial component of v at x."""
        radial = jnp.sum(x * v, axis=-1, keepdims=True)
        return v - radial * x

    def exp(self, x: Array, v: Array) -> Array:
        """Walk the great circle leaving x with velocity v for unit time.

        exp_x(v) = cos(|v|) x + sin(|v|) v / |v|
        """
        speed = jnp.maximum(jnp.linalg.norm(v), NumericalConstants.EPSILON)
        return jnp.cos(speed) * x + jnp.sin(speed) * v / speed

    def log(self, x: Array, y: Array) -> Array:
        """Initial velocity of the shortest great circle arc from x to y."""
        direction = self.proj(x, y - x)
        length = jnp.maximum(jnp.linalg.norm(direction), NumericalConstants.EPSILON)
        angle = self.dist(x, y)
        return jnp.asarray(angle * direction / length)

    def transp(self, x: Array, y: Array, v: Array) -> Array:
        """Transport v from x to y along the shortest arc.

        P(v) = v - <y, v> / (1 + <x, y>) (x + y), an isometry between the two
        tangent spaces. Antipodal end points have no unique shortest arc; the
        denominator is clamped there.
        """
        denom = jnp.maximum(1.0 + jnp.dot(x, y), NumericalConstants.EPSILON)
        return jnp.asarray(v - (jnp.dot(y, v) / denom) * (x + y))

    def transp_along(self, x: Array, v: Array, t: float, w: Array) -> Array:
        """Parallel transport w along the great circle t -> exp(x, t v).

        With s = ||v|| and e = v / s, the great circle is
        gamma(t) = cos(ts) x + sin(ts) e. The component of w along e rotates
        with the curve while the component orthogonal to x and e is unchanged:

            P_t(w) = w + <e, w> ((cos(ts) - 1) e - sin(ts) x)

        This is exact for every t, including arcs longer than pi.
        """
        v_norm = jnp.linalg.norm(v)
        e = v / jnp.maximum(v_norm, NumericalConstants.EPSILON)
        angle = t * v_norm
        coeff = jnp.dot(e, w)
        return jnp.asarray(w + coeff * ((jnp.cos(angle) - 1.0) * e - jnp.sin(angle) * x))

    def inner(self, x: Array, u: Array, v: Array) -> Array:
        """Ambient dot product of two tangent vectors."""
        return jnp.dot(u, v)

    def dist(self, x: Array, y: Array) -> Array:
        """Angle between x and y."""
        return jnp.arccos(jnp.clip(jnp.dot(x, y), -1.0, 1.0))

    def random_point(self, key: Array, *shape: int) -> Array:
        """Uniform sample: a normalized standard Gaussian vector."""
        if not shape:
            shape = (self.ambient_dimension,)
        gaussian = jr.normal(key, shape)
        return jnp.asarray(gaussian / jnp.linalg.norm(gaussian, axis=-1, keepdims=True))

    def random_tangent(self, key: Array, x: Array, *shape: int) -> Array:
        """Gaussian vector projected onto the tangent space at x."""
        if not shape:
            shape = x.shape
        return jnp.asarray(self.proj(x, jr.normal(key, shape)))

    def validate_point(self, x: ManifoldPoint, atol: float = NumericalConstants.VALIDATION_TOLERANCE) -> bool:
        """Check the shape and the unit norm of x."""
        if x.shape != (self.ambient_dimension,):
            return False
        return bool(jnp.allclose(jnp.linalg.norm(x), 1.0, atol=atol))

    def validate_tangent(
        self, x: ManifoldPoint, v: TangentVector, atol: float = NumericalConstants.VALIDATION_TOLERANCE
    ) -> bool:
        """Check that x is on the sphere and v is orthogonal to it."""
        if not self.validate_point(x, atol) or v.shape != x.shape:
            return False
        return bool(jnp.allclose(jnp.dot(x, v), 0.0, atol=atol))

    @property
    def dimension(self) -> int:
        """Intrinsic dimension n."""
        return self._n

    @property
    def ambient_dimension(self) -> int:
        """Length n + 1 of the coordinate vectors."""
        return self._n + 1

    def __repr__(self) -> str:
        return f"Sphere(n={self._n})"
