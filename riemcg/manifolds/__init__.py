"""Manifolds bundled with RiemCG and validating factories for them.

The factories check their arguments before construction and raise
``TypeError`` for non-integers and ``ValueError`` for out-of-range sizes.
"""

from .base import Manifold
from .errors import DimensionError, GeodesicNotSetError, InvalidPointError, ManifoldError
from .euclidean import Euclidean
from .spd import SymmetricPositiveDefinite
from .sphere import Sphere


def _require_int(name: str, value: object, minimum: int) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError(f"{name} must be an integer, got {type(value).__name__}")
    if value < minimum:
        raise ValueError(f"{name} must be at least {minimum}, got {value}")
    return value


def create_euclidean(*shape: int) -> Euclidean:
    """Flat space of arrays with the given shape.

    Examples:
        >>> plane = create_euclidean(2)
        >>> matrices = create_euclidean(3, 3)
    """
    for size in shape:
        _require_int("Euclidean shape entry", size, 1)
    return Euclidean(*shape)


def create_sphere(n: int = 2) -> Sphere:
    """Unit sphere S^n in R^(n+1), n >= 1.

    Examples:
        >>> create_sphere().ambient_dimension
        3
    """
    return Sphere(n=_require_int("Sphere dimension", n, 1))


def create_spd(n: int) -> SymmetricPositiveDefinite:
    """SPD(n) with the affine-invariant metric, n >= 2.

    Examples:
        >>> create_spd(3).dimension
        6
    """
    return SymmetricPositiveDefinite(n=_require_int("SPD matrix size", n, 2))


__all__ = [
    "DimensionError",
    "Euclidean",
    "GeodesicNotSetError",
    "InvalidPointError",
    "Manifold",
    "ManifoldError",
    "Sphere",
    "SymmetricPositiveDefinite",
    "create_euclidean",
    "create_spd",
    "create_sphere",
]
