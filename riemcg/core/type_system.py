"""Type system for RiemCG with JAX array aliases.

This module provides type aliases and small conversion utilities for JAX arrays
used in Riemannian manifold operations.
"""

from typing import Any

import jax.numpy as jnp
from jaxtyping import Array, Float

# Type aliases for common manifold objects
ManifoldPoint = Float[Array, "..."]
"""Type alias for points on a Riemannian manifold."""

TangentVector = Float[Array, "..."]
"""Type alias for tangent vectors on a Riemannian manifold."""

Scalar = Float[Array, ""]
"""Type alias for scalar results such as inner products."""


def to_float(value: Any) -> float:
    """Convert a JAX scalar (or any real number) to a Python float.

    Line searches and scheme coefficients run Python control flow on these
    values, so they are materialized eagerly.

    Examples:
        >>> to_float(jnp.array(2.5))
        2.5
    """
    return float(jnp.real(jnp.asarray(value)))


def is_finite(value: Any) -> bool:
    """Return True if a scalar value is neither NaN nor infinite.

    Examples:
        >>> is_finite(1.0)
        True
        >>> is_finite(jnp.inf)
        False
    """
    return bool(jnp.isfinite(jnp.asarray(value)))
