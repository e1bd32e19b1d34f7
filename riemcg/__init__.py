"""RiemCG: Riemannian conjugate gradient optimization in JAX.

Nonlinear conjugate gradient generalized from flat space to Riemannian
manifolds: search directions are combined across iterations by parallel
transport, and each iteration line-searches along a geodesic.

🔧 **Quick Start:**
    >>> import jax.numpy as jnp
    >>> import riemcg as rc
    >>>
    >>> sphere = rc.create_sphere(2)
    >>> a = jnp.diag(jnp.array([3.0, 2.0, 1.0]))
    >>> problem = rc.RiemannianProblem(sphere, lambda x: -x @ a @ x)
    >>> result = rc.minimize(problem, jnp.array([0.6, 0.0, 0.8]), method="polak_ribiere")
    >>> print(f"{result.message} after {result.niter} iterations")

📐 **Conjugate-direction schemes:**
- **Fletcher–Reeves**, **Polak–Ribière**, **Hestenes–Stiefel** (default),
  **Conjugate Descent**, **Dai–Yuan**

🧭 **Bring your own geometry:**
    The optimizer only needs a metric and a geodesic (see :mod:`riemcg.geometry`).
    Bundled manifolds: Euclidean space, the sphere S^n and SPD(n) with the
    affine-invariant metric.

    >>> cg = rc.ConjugateGradient(metric, geodesic, line_search=rc.BacktrackingLineSearch())
    >>> x = cg.optimize(x0, cost, gradient)
"""

__version__ = "0.1.0"

from .core.constants import LineSearchDefaults, NumericalConstants, OptimizerDefaults
from .geometry import Geodesic, InnerProduct, ManifoldGeodesic, ManifoldMetric, Metric
from .linesearch import BacktrackingLineSearch, LineSearch, SecantLineSearch
from .manifolds import (
    Euclidean,
    Manifold,
    Sphere,
    SymmetricPositiveDefinite,
    create_euclidean,
    create_spd,
    create_sphere,
)
from .optimizers import (
    CGScheme,
    CGState,
    ConjugateGradient,
    OptimizerError,
    ParameterValidationError,
    ReentrantOptimizationError,
)
from .problems import RiemannianProblem
from .solvers import ConvergenceStatus, OptimizeResult, minimize

__all__ = [
    "BacktrackingLineSearch",
    "CGScheme",
    "CGState",
    "ConjugateGradient",
    "ConvergenceStatus",
    "Euclidean",
    "Geodesic",
    "InnerProduct",
    "LineSearch",
    "LineSearchDefaults",
    "Manifold",
    "ManifoldGeodesic",
    "ManifoldMetric",
    "Metric",
    "NumericalConstants",
    "OptimizeResult",
    "OptimizerDefaults",
    "OptimizerError",
    "ParameterValidationError",
    "ReentrantOptimizationError",
    "RiemannianProblem",
    "SecantLineSearch",
    "Sphere",
    "SymmetricPositiveDefinite",
    "__version__",
    "create_euclidean",
    "create_spd",
    "create_sphere",
    "minimize",
]
