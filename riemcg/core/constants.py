"""Configuration constants for RiemCG.

This module defines numerical constants and default settings used throughout
the library to ensure consistent behavior and eliminate magic numbers.
"""


class NumericalConstants:
    """Numerical constants for stability and tolerance in manifold operations.

    These constants are used by the manifold implementations for small-value
    detection, eigenvalue clamping and point validation.
    """

    EPSILON: float = 1e-10
    """Numerical stability threshold for small value detection."""

    RTOL: float = 1e-8
    """Relative tolerance for numerical comparisons."""

    ATOL: float = 1e-10
    """Absolute tolerance for numerical comparisons."""

    HIGH_PRECISION_EPSILON: float = 1e-12
    """Lower bound for eigenvalues of SPD matrices in matrix functions."""

    VALIDATION_TOLERANCE: float = 1e-6
    """Tolerance for validating points on manifolds."""


class LineSearchDefaults:
    """Default settings of the bundled line searches."""

    INITIAL_STEP_SIZE: float = 1.0
    """First trial step length when no previous step length is known."""

    CONTRACTION_FACTOR: float = 0.5
    """Backtracking shrink factor applied after a rejected trial step."""

    OPTIMISM: float = 2.0
    """Backtracking growth factor applied to the previous step length."""

    SUFFICIENT_DECREASE: float = 1e-4
    """Armijo constant."""

    BACKTRACKING_MAX_ITERATIONS: int = 25
    """Maximum number of backtracking contractions per search."""

    SECANT_TOLERANCE: float = 1e-10
    """Relative reduction of the directional derivative accepted by the secant search."""

    SECANT_MAX_ITERATIONS: int = 50
    """Maximum number of secant updates per search."""


class OptimizerDefaults:
    """Default settings of the conjugate gradient optimizer."""

    MAX_ITERATIONS: int = 1000
    """Iteration bound of a single ``optimize`` call."""

    SCHEME: str = "hestenes_stiefel"
    """Conjugate-direction scheme used when none is given."""
