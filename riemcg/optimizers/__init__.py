"""Riemannian conjugate gradient optimizer and its conjugate-direction schemes."""

from .conjugate_gradient import CGState, ConjugateGradient
from .errors import OptimizerError, ParameterValidationError, ReentrantOptimizationError
from .schemes import (
    CGScheme,
    ConjugacyTerms,
    conjugate_descent,
    dai_yuan,
    fletcher_reeves,
    hestenes_stiefel,
    polak_ribiere,
)

__all__ = [
    "CGScheme",
    "CGState",
    "ConjugacyTerms",
    "ConjugateGradient",
    "OptimizerError",
    "ParameterValidationError",
    "ReentrantOptimizationError",
    "conjugate_descent",
    "dai_yuan",
    "fletcher_reeves",
    "hestenes_stiefel",
    "polak_ribiere",
]
