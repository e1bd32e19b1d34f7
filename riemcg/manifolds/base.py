"""Base class for the bundled Riemannian manifolds.

The optimizers never use this class directly: they consume the geometry
provider contract of :mod:`riemcg.geometry`, which adapts any ``Manifold``
into a metric and a geodesic. Only the operations that adaptation and the
problem layer need are part of the interface.
"""

import jax.numpy as jnp
from jaxtyping import Array, Float, PRNGKeyArray

from ..core.constants import NumericalConstants
from ..core.type_system import ManifoldPoint, TangentVector


class Manifold:
    """Riemannian manifold with points and tangent vectors stored as JAX arrays.

    Subclasses provide the tangent projection, exponential and logarithmic
    maps, transport between two points and the metric. Geodesic evaluation
    and transport along a geodesic are derived from those and can be
    replaced by closed forms.
    """

    def proj(self, x: ManifoldPoint, v: Float[Array, "..."]) -> TangentVector:
        """Map an ambient vector v to the tangent space at x."""
        raise NotImplementedError(f"{type(self).__name__} does not define a tangent projection")

    def exp(self, x: ManifoldPoint, v: TangentVector) -> ManifoldPoint:
        """End point of the geodesic leaving x with velocity v, at unit time."""
        raise NotImplementedError(f"{type(self).__name__} does not define an exponential map")

    def log(self, x: ManifoldPoint, y: ManifoldPoint) -> TangentVector:
        """Velocity v at x with exp(x, v) = y along the shortest geodesic."""
        raise NotImplementedError(f"{type(self).__name__} does not define a logarithmic map")

    def transp(self, x: ManifoldPoint, y: ManifoldPoint, v: TangentVector) -> TangentVector:
        """Parallel transport v from x to y along the shortest geodesic joining them.

        Args:
            x: Point v is anchored at.
            y: Destination point.
            v: Tangent vector at x.

        Returns:
            A tangent vector at y.
        """
        raise NotImplementedError(f"{type(self).__name__} does not define parallel transport")

    def inner(self, x: ManifoldPoint, u: TangentVector, v: TangentVector) -> Array:
        """Metric <u, v>_x of two tangent vectors at x, as a scalar array."""
        raise NotImplementedError(f"{type(self).__name__} does not define a metric")

    def norm(self, x: ManifoldPoint, v: TangentVector) -> Array:
        """Length of v under the metric at x."""
        return jnp.sqrt(self.inner(x, v, v))

    def dist(self, x: ManifoldPoint, y: ManifoldPoint) -> Array:
        """Geodesic distance, the length of log(x, y)."""
        return self.norm(x, self.log(x, y))

    def geodesic(self, x: ManifoldPoint, v: TangentVector, t: float) -> ManifoldPoint:
        """Evaluate the geodesic with base point x and initial velocity v at time t.

        Args:
            x: Base point of the geodesic.
            v: Initial velocity, a tangent vector at x.
            t: Curve parameter.

        Returns:
            The point gamma(t) = exp(x, t v).
        """
        return self.exp(x, t * v)

    def transp_along(self, x: ManifoldPoint, v: TangentVector, t: float, w: TangentVector) -> TangentVector:
        """Parallel transport w along the geodesic t -> exp(x, t v) to time t.

        The default transports along the minimizing geodesic between the end
        points, which agrees with transport along the curve as long as the
        curve itself is minimizing. Manifolds with closed-form transport along
        geodesics override this.

        Args:
            x: Base point of the geodesic.
            v: Initial velocity of the geodesic.
            t: Curve parameter of the target point.
            w: Tangent vector at x to be transported.

        Returns:
            The transported vector, anchored at ``self.geodesic(x, v, t)``.
        """
        return self.transp(x, self.geodesic(x, v, t), w)

    def egrad2rgrad(self, x: ManifoldPoint, egrad: Float[Array, "..."]) -> TangentVector:
        """Convert a Euclidean gradient into the Riemannian gradient at x.

        The default is the tangent projection, which is correct for
        submanifolds carrying the metric induced by the ambient space.
        """
        return self.proj(x, egrad)

    def random_point(self, key: PRNGKeyArray, *shape: int) -> ManifoldPoint:
        """Sample a point; ``shape`` overrides the default point shape where supported."""
        raise NotImplementedError(f"{type(self).__name__} does not support random points")

    def random_tangent(self, key: PRNGKeyArray, x: ManifoldPoint, *shape: int) -> TangentVector:
        """Sample a tangent vector at x."""
        raise NotImplementedError(f"{type(self).__name__} does not support random tangent vectors")

    def validate_point(self, x: ManifoldPoint, atol: float = NumericalConstants.VALIDATION_TOLERANCE) -> bool:
        """Whether x lies on the manifold, up to atol."""
        raise NotImplementedError(f"{type(self).__name__} does not support point validation")

    def validate_tangent(
        self, x: ManifoldPoint, v: TangentVector, atol: float = NumericalConstants.VALIDATION_TOLERANCE
    ) -> bool:
        """Whether v is tangent at x; by default, whether v is its own projection."""
        return bool(jnp.allclose(v, self.proj(x, v), atol=atol))

    @property
    def dimension(self) -> int:
        """Intrinsic dimension."""
        raise NotImplementedError(f"{type(self).__name__} does not define its dimension")

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"
