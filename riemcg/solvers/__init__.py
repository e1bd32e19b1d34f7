"""Solver implementations for Riemannian optimization problems.

This module provides the ``minimize`` entry point, which runs Riemannian
conjugate gradient on a :class:`~riemcg.problems.RiemannianProblem`.
"""

from .minimize import minimize
from .results import ConvergenceStatus, OptimizeResult

__all__ = ["ConvergenceStatus", "OptimizeResult", "minimize"]
