"""Optimization result returned by :func:`riemcg.solvers.minimize`."""

import dataclasses
from enum import Enum
from typing import Any

from jaxtyping import Array


class ConvergenceStatus(Enum):
    """Enumeration of the ways a conjugate gradient run ends."""

    STATIONARY = "stationary_point"
    MAX_ITERATIONS = "max_iterations_reached"


@dataclasses.dataclass
class OptimizeResult:
    """Result of a Riemannian conjugate gradient run.

    Attributes:
        x: Final point on the manifold.
        fun: Cost at the final point.
        niter: Number of successful iterations.
        status: How the run ended.
        grad_norm: Riemannian norm of the gradient at the final point.
        metadata: Run configuration (scheme, line search, iteration bound).
    """

    x: Array
    fun: float
    niter: int
    status: ConvergenceStatus
    grad_norm: float
    metadata: dict[str, Any] | None = None

    def __post_init__(self):
        """Initialize default metadata if not provided."""
        if self.metadata is None:
            self.metadata = {}

    @property
    def success(self) -> bool:
        """Whether the run stopped at a point where no descent step was found."""
        return self.status == ConvergenceStatus.STATIONARY

    @property
    def message(self) -> str:
        """Descriptive message about the optimization outcome."""
        status_messages = {
            ConvergenceStatus.STATIONARY: "Optimization terminated successfully: no descent step found.",
            ConvergenceStatus.MAX_ITERATIONS: "Maximum number of iterations reached.",
        }
        return status_messages[self.status]
