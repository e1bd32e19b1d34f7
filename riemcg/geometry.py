"""Geometry provider contract consumed by the optimizers.

The optimizers are generic over a capability set rather than a class
hierarchy: a *metric* that yields an inner product at a point, and a
*geodesic* that can be anchored, evaluated and used to parallel transport
tangent vectors. Any object with the right methods satisfies the protocols
below; :class:`ManifoldMetric` and :class:`ManifoldGeodesic` build them from
a :class:`~riemcg.manifolds.base.Manifold`.
"""

from typing import Protocol, runtime_checkable

import jax.numpy as jnp

from .core.type_system import ManifoldPoint, TangentVector, to_float
from .manifolds.base import Manifold
from .manifolds.errors import DimensionError, GeodesicNotSetError


@runtime_checkable
class InnerProduct(Protocol):
    """Inner product on the tangent space of a single point."""

    def __call__(self, u: TangentVector, v: TangentVector) -> float: ...

    def norm2(self, v: TangentVector) -> float: ...


@runtime_checkable
class Metric(Protocol):
    """Riemannian metric: maps a point to the inner product of its tangent space."""

    def __call__(self, x: ManifoldPoint) -> InnerProduct: ...


@runtime_checkable
class Geodesic(Protocol):
    """Geodesic curve determined by a base point and an initial velocity."""

    point: ManifoldPoint | None
    velocity: TangentVector | None

    def set(self, point: ManifoldPoint, velocity: TangentVector) -> None: ...

    def __call__(self, t: float) -> ManifoldPoint: ...

    def parallel_translate(self, vector: TangentVector, t: float) -> TangentVector: ...


class ManifoldInnerProduct:
    """Inner product of a manifold's tangent space at a fixed point."""

    __slots__ = ("manifold", "point")

    def __init__(self, manifold: Manifold, point: ManifoldPoint):
        self.manifold = manifold
        self.point = point

    def __call__(self, u: TangentVector, v: TangentVector) -> float:
        return to_float(self.manifold.inner(self.point, u, v))

    def norm2(self, v: TangentVector) -> float:
        return to_float(self.manifold.inner(self.point, v, v))

    def norm(self, v: TangentVector) -> float:
        return to_float(jnp.sqrt(self.manifold.inner(self.point, v, v)))


class ManifoldMetric:
    """Metric of a manifold, following the :class:`Metric` protocol.

    Examples:
        >>> from riemcg.manifolds import Sphere
        >>> metric = ManifoldMetric(Sphere(2))
        >>> x = jnp.array([0.0, 0.0, 1.0])
        >>> metric(x).norm2(jnp.array([3.0, 4.0, 0.0]))
        25.0
    """

    def __init__(self, manifold: Manifold):
        self.manifold = manifold

    def __call__(self, x: ManifoldPoint) -> ManifoldInnerProduct:
        return ManifoldInnerProduct(self.manifold, x)

    def __repr__(self) -> str:
        return f"ManifoldMetric({self.manifold!r})"


class ManifoldGeodesic:
    """Geodesic of a manifold, following the :class:`Geodesic` protocol.

    The curve is t -> exp(point, t * velocity). ``parallel_translate`` moves a
    tangent vector at ``point`` to the tangent space at ``self(t)`` along the
    curve, using the manifold's closed form where it has one.

    A geodesic object is mutable: ``set`` re-anchors it. Optimizers own their
    geodesic exclusively and re-anchor it once per iteration.
    """

    def __init__(self, manifold: Manifold):
        self.manifold = manifold
        self.point: ManifoldPoint | None = None
        self.velocity: TangentVector | None = None

    def set(self, point: ManifoldPoint, velocity: TangentVector) -> None:
        """Anchor the geodesic at ``point`` with initial ``velocity``.

        Raises:
            DimensionError: If the velocity does not have the shape of the point.
        """
        point = jnp.asarray(point)
        velocity = jnp.asarray(velocity)
        if point.shape != velocity.shape:
            raise DimensionError(
                "Geodesic velocity must have the shape of its base point",
                expected=tuple(point.shape),
                actual=tuple(velocity.shape),
            )
        self.point = point
        self.velocity = velocity

    def _require_set(self) -> tuple[ManifoldPoint, TangentVector]:
        if self.point is None or self.velocity is None:
            raise GeodesicNotSetError("Geodesic must be set before it is evaluated")
        return self.point, self.velocity

    def __call__(self, t: float) -> ManifoldPoint:
        point, velocity = self._require_set()
        return self.manifold.geodesic(point, velocity, t)

    def parallel_translate(self, vector: TangentVector, t: float) -> TangentVector:
        point, velocity = self._require_set()
        return self.manifold.transp_along(point, velocity, t, vector)

    def __repr__(self) -> str:
        state = "unset" if self.point is None else "set"
        return f"ManifoldGeodesic({self.manifold!r}, {state})"
