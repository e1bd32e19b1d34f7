"""Convenience solver running Riemannian conjugate gradient on a problem."""

import logging
from typing import Any

import jax.numpy as jnp

from ..core.constants import OptimizerDefaults
from ..core.type_system import ManifoldPoint, to_float
from ..manifolds.errors import InvalidPointError
from ..optimizers.conjugate_gradient import ConjugateGradient
from ..optimizers.errors import ParameterValidationError
from ..problems import RiemannianProblem
from .results import ConvergenceStatus, OptimizeResult

logger = logging.getLogger(__name__)

_OPTION_KEYS = frozenset({"max_iterations", "line_search", "restart_on_nonfinite", "callback"})


def minimize(
    problem: RiemannianProblem,
    x0: ManifoldPoint,
    method: str = OptimizerDefaults.SCHEME,
    options: dict[str, Any] | None = None,
) -> OptimizeResult:
    """Minimize a function on a Riemannian manifold with conjugate gradient.

    Args:
        problem: Problem holding the manifold, the cost and its gradient.
        x0: Initial point on the manifold.
        method: Conjugate-direction scheme name or abbreviation
            ("fletcher_reeves"/"fr", "polak_ribiere"/"pr", "hestenes_stiefel"/"hs",
            "conjugate_descent"/"cd", "dai_yuan"/"dy"). "cg" selects the default.
        options: Optional settings: ``max_iterations``, ``line_search``,
            ``restart_on_nonfinite`` and ``callback`` (see
            :class:`~riemcg.optimizers.ConjugateGradient`).

    Returns:
        OptimizeResult with the final point and run diagnostics.

    Raises:
        InvalidPointError: If x0 does not lie on the problem's manifold.
        ParameterValidationError: If the method or an option is invalid.
    """
    options = dict(options or {})
    unknown = sorted(set(options) - _OPTION_KEYS)
    if unknown:
        raise ParameterValidationError(
            f"Unknown minimize options: {', '.join(unknown)}",
            parameter_name="options",
            received_value=unknown,
        )

    manifold = problem.manifold
    x0 = jnp.asarray(x0)
    if not manifold.validate_point(x0):
        raise InvalidPointError(f"Initial point does not lie on {manifold!r}", point=x0, manifold_type=repr(manifold))

    scheme = OptimizerDefaults.SCHEME if isinstance(method, str) and method.lower() == "cg" else method
    callback = options.pop("callback", None)
    optimizer = ConjugateGradient.for_manifold(manifold, scheme=scheme, **options)

    x = optimizer.optimize(x0, problem.cost, problem.grad, callback=callback)

    state = optimizer.state
    niter = state.iteration
    status = ConvergenceStatus.MAX_ITERATIONS if niter >= optimizer.max_iterations else ConvergenceStatus.STATIONARY
    result = OptimizeResult(
        x=x,
        fun=to_float(problem.cost(x)),
        niter=niter,
        status=status,
        grad_norm=to_float(manifold.norm(x, problem.grad(x))),
        metadata={
            "scheme": optimizer.scheme.value,
            "line_search": repr(optimizer.line_search),
            "max_iterations": optimizer.max_iterations,
        },
    )
    logger.info(f"minimize: {result.message} (niter={niter}, fun={result.fun:.6g})")
    return result
