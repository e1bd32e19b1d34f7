"""Manifold error hierarchy.

This module provides the exceptions raised by manifold implementations and the
geometry adapters built on top of them.
"""

from jaxtyping import Array


class ManifoldError(Exception):
    """Base exception for manifold-related errors."""

    pass


class DimensionError(ManifoldError):
    """Exception for shape mismatches in manifold operations."""

    def __init__(self, message: str, expected: int | tuple | None = None, actual: int | tuple | None = None):
        """Initialize DimensionError with shape information."""
        super().__init__(message)
        self.expected = expected
        self.actual = actual

    def __str__(self) -> str:
        """Return string representation with shape information."""
        base_msg = super().__str__()
        if self.expected is not None and self.actual is not None:
            return f"{base_msg} (expected={self.expected}, actual={self.actual})"
        return base_msg


class InvalidPointError(ManifoldError):
    """Exception for points that do not lie on the manifold."""

    def __init__(
        self,
        message: str,
        point: Array | None = None,
        manifold_type: str | None = None,
    ):
        """Initialize InvalidPointError with the offending point."""
        super().__init__(message)
        self.point = point
        self.manifold_type = manifold_type


class GeodesicNotSetError(ManifoldError):
    """Exception for evaluating a geodesic before its base point and velocity are set."""

    pass
