"""Riemannian nonlinear conjugate gradient.

This module implements conjugate gradient descent on Riemannian manifolds.
Search directions are built from the current gradient and the previous
direction, parallel transported along the previous geodesic; each iteration
then runs a line search along the geodesic leaving the current point in the
new direction.

The optimizer is generic over the geometry provider contract of
:mod:`riemcg.geometry` and the line search contract of
:mod:`riemcg.linesearch`.

References:
    Smith, S. T. (1994). Optimization techniques on Riemannian manifolds.
    Fields Institute Communications, 3, 113-136.
    Absil, P.-A., Mahony, R., & Sepulchre, R. (2008). Optimization Algorithms
    on Matrix Manifolds. Princeton University Press.
"""

import dataclasses
import logging
from collections.abc import Callable
from typing import Any

from jax import tree_util

from ..core.constants import OptimizerDefaults
from ..core.type_system import ManifoldPoint, TangentVector, is_finite, to_float
from ..geometry import Geodesic, ManifoldGeodesic, ManifoldMetric, Metric
from ..linesearch import LineSearch, SecantLineSearch
from ..manifolds.base import Manifold
from .errors import OptimizerError, ParameterValidationError, ReentrantOptimizationError
from .schemes import CGScheme, ConjugacyTerms

logger = logging.getLogger(__name__)

CostFunction = Callable[[ManifoldPoint], Any]
GradientFunction = Callable[[ManifoldPoint], TangentVector]


@dataclasses.dataclass(frozen=True)
class CGState:
    """Snapshot of a conjugate gradient run after its latest successful step.

    A new snapshot replaces the previous one after every successful step;
    a failed step leaves the snapshot untouched.

    Attributes:
        x: Current point.
        x_prev: Point the latest geodesic started from (None before the first step).
        grad: Gradient at ``x_prev``, computed by the latest step.
        grad_prev: Gradient computed by the step before the latest one.
        velocity: Search direction at ``x_prev``; the latest geodesic's initial velocity.
        transported_velocity: Direction of the step before, transported to ``x_prev``
            (None when the latest step was the first).
        alpha: Step length accepted by the latest line search (0 before the first step).
        iteration: Number of successful steps so far.
        max_iterations: Iteration bound of the run.
    """

    x: ManifoldPoint
    x_prev: ManifoldPoint | None = None
    grad: TangentVector | None = None
    grad_prev: TangentVector | None = None
    velocity: TangentVector | None = None
    transported_velocity: TangentVector | None = None
    alpha: float = 0.0
    iteration: int = 0
    max_iterations: int = OptimizerDefaults.MAX_ITERATIONS

    def tree_flatten(self):
        """Flatten the CGState for JAX."""
        children = (self.x, self.x_prev, self.grad, self.grad_prev, self.velocity, self.transported_velocity)
        aux_data = {"alpha": self.alpha, "iteration": self.iteration, "max_iterations": self.max_iterations}
        return children, aux_data

    @classmethod
    def tree_unflatten(cls, aux_data, children):
        """Unflatten the CGState for JAX."""
        return cls(*children, **aux_data)


# Register the CGState class as a PyTree node
tree_util.register_pytree_node_class(CGState)


def _validate_max_iterations(value: Any) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        raise ParameterValidationError(
            f"max_iterations must be a positive integer, got {value!r}",
            parameter_name="max_iterations",
            received_value=value,
        )
    return value


class ConjugateGradient:
    """Conjugate gradient descent on a Riemannian manifold.

    Seeks a local minimum of a smooth cost by stepping along geodesics in the
    direction given by the selected conjugate-direction scheme. The scheme is
    fixed for the lifetime of the instance.

    The instance is stateful and not reentrant: it owns its geodesic, its
    line search and the :class:`CGState` of the run in progress. Use one
    instance per concurrent optimization.

    Args:
        metric: Riemannian metric (see :class:`riemcg.geometry.Metric`).
        geodesic: Geodesic object used for stepping and transport; owned by the
            optimizer from now on.
        line_search: Line search along geodesics (default: :class:`SecantLineSearch`).
        scheme: Conjugate-direction scheme, as a :class:`CGScheme` or its name.
        max_iterations: Iteration bound of ``optimize``.
        restart_on_nonfinite: Replace a NaN or infinite scheme coefficient by 0,
            restarting from the steepest descent direction for that iteration.
            When False the coefficient is used as is.

    Example:
        >>> import jax.numpy as jnp
        >>> from riemcg.manifolds import Sphere
        >>> sphere = Sphere(2)
        >>> a = jnp.diag(jnp.array([3.0, 2.0, 1.0]))
        >>> cg = ConjugateGradient.for_manifold(sphere, scheme="polak_ribiere")
        >>> x = cg.optimize(
        ...     jnp.array([0.6, 0.0, 0.8]),
        ...     cost=lambda x: -x @ a @ x,
        ...     gradient=lambda x: sphere.proj(x, -2 * a @ x),
        ... )
    """

    def __init__(
        self,
        metric: Metric,
        geodesic: Geodesic,
        line_search: LineSearch | None = None,
        scheme: CGScheme | str = OptimizerDefaults.SCHEME,
        max_iterations: int = OptimizerDefaults.MAX_ITERATIONS,
        restart_on_nonfinite: bool = True,
    ):
        self._metric = metric
        self._geodesic = geodesic
        self._line_search = SecantLineSearch() if line_search is None else line_search
        self._scheme = CGScheme.from_value(scheme)
        self._max_iterations = _validate_max_iterations(max_iterations)
        self.restart_on_nonfinite = restart_on_nonfinite
        self._state: CGState | None = None
        self._running = False

    @classmethod
    def for_manifold(cls, manifold: Manifold, **kwargs: Any) -> "ConjugateGradient":
        """Create an optimizer using a manifold's metric and geodesics."""
        return cls(ManifoldMetric(manifold), ManifoldGeodesic(manifold), **kwargs)

    @property
    def scheme(self) -> CGScheme:
        """Conjugate-direction scheme of this instance."""
        return self._scheme

    @property
    def line_search(self) -> LineSearch:
        """Line search used by every step."""
        return self._line_search

    @property
    def state(self) -> CGState | None:
        """Snapshot of the current run, or None before the first ``optimize``."""
        return self._state

    @property
    def max_iterations(self) -> int:
        """Iteration bound of ``optimize``."""
        return self._max_iterations

    @max_iterations.setter
    def max_iterations(self, value: int) -> None:
        self._max_iterations = _validate_max_iterations(value)

    def start(self, x0: ManifoldPoint) -> CGState:
        """Begin a new run at ``x0``: clear the line search memory and the state."""
        self._line_search.reset()
        self._state = CGState(x=x0, max_iterations=self._max_iterations)
        return self._state

    def _coefficient(self, state: CGState, grad: TangentVector, transported_velocity: TangentVector) -> float:
        # The geodesic is still the previous one here: prev_grad lives at its
        # base point and is moved to the current point lazily.
        def transport(v: TangentVector) -> TangentVector:
            return self._geodesic.parallel_translate(v, state.alpha)

        terms = ConjugacyTerms(
            inner=self._metric(state.x),
            prev_inner=self._metric(state.x_prev),
            grad=grad,
            prev_grad=state.grad,
            transported_velocity=transported_velocity,
            transport=transport,
        )
        beta = self._scheme.coefficient(terms)
        if not is_finite(beta) and self.restart_on_nonfinite:
            logger.warning(
                f"Non-finite {self._scheme.value} coefficient at iteration {state.iteration}; "
                "restarting from the steepest descent direction"
            )
            return 0.0
        return beta

    def step(self, cost: CostFunction, gradient: GradientFunction) -> bool:
        """Perform one conjugate gradient iteration.

        Args:
            cost: Cost function, Point -> real.
            gradient: Riemannian gradient of ``cost``, anchored at its argument.

        Returns:
            True if the point moved; False if the line search found no step, in
            which case the state is left unchanged.

        Raises:
            OptimizerError: If no run has been started.
        """
        state = self._state
        if state is None:
            raise OptimizerError("No run in progress: call start() or optimize() first")

        grad = gradient(state.x)

        # The conjugate direction is the negative gradient modified by the previous direction
        direction = -grad
        transported_velocity = None
        if state.iteration > 0:
            self._geodesic.set(state.x_prev, state.velocity)
            transported_velocity = self._geodesic.parallel_translate(state.velocity, state.alpha)
            beta = self._coefficient(state, grad, transported_velocity)
            direction = direction + beta * transported_velocity

        geodesic = self._geodesic
        geodesic.set(state.x, direction)

        def restricted_cost(t: float) -> float:
            return to_float(cost(geodesic(t)))

        def restricted_derivative(t: float) -> float:
            xt = geodesic(t)
            return to_float(self._metric(xt)(gradient(xt), geodesic.parallel_translate(geodesic.velocity, t)))

        alpha = to_float(self._line_search.search(restricted_cost, restricted_derivative))
        if not alpha > 0.0:
            logger.debug(f"Iteration {state.iteration}: line search returned {alpha}, no descent step")
            return False

        self._state = CGState(
            x=geodesic(alpha),
            x_prev=state.x,
            grad=grad,
            grad_prev=state.grad,
            velocity=direction,
            transported_velocity=transported_velocity,
            alpha=alpha,
            iteration=state.iteration + 1,
            max_iterations=state.max_iterations,
        )
        logger.debug(f"Iteration {state.iteration}: step length {alpha:.6g}")
        return True

    def optimize(
        self,
        x0: ManifoldPoint,
        cost: CostFunction,
        gradient: GradientFunction,
        callback: Callable[[CGState], None] | None = None,
    ) -> ManifoldPoint:
        """Minimize ``cost`` starting from ``x0``.

        Steps until ``max_iterations`` is reached or a line search fails. A
        failed line search means no descent direction exists at the current
        point, which is treated as having reached a stationary point.

        Args:
            x0: Initial point.
            cost: Cost function, Point -> real.
            gradient: Riemannian gradient of ``cost``, anchored at its argument.
            callback: Called with the new state after every successful step.

        Returns:
            The last point reached.

        Raises:
            ReentrantOptimizationError: If called while this instance is already optimizing.
        """
        if self._running:
            raise ReentrantOptimizationError("optimize() is already running on this ConjugateGradient instance")
        self._running = True
        try:
            state = self.start(x0)
            stationary = False
            while state.iteration < state.max_iterations:
                if not self.step(cost, gradient):
                    stationary = True
                    break
                state = self._state
                if callback is not None:
                    callback(state)
        finally:
            self._running = False

        reason = "stationary point reached" if stationary else "iteration bound reached"
        logger.info(f"Conjugate gradient ({self._scheme.value}) stopped after {state.iteration} iterations: {reason}")
        return state.x

    def __repr__(self) -> str:
        return (
            f"ConjugateGradient(scheme={self._scheme.value}, max_iterations={self._max_iterations}, "
            f"line_search={self._line_search!r})"
        )
