"""RiemCG core module: constants and type aliases."""

from .constants import LineSearchDefaults, NumericalConstants, OptimizerDefaults
from .type_system import ManifoldPoint, Scalar, TangentVector, is_finite, to_float

__all__ = [
    "LineSearchDefaults",
    "ManifoldPoint",
    "NumericalConstants",
    "OptimizerDefaults",
    "Scalar",
    "TangentVector",
    "is_finite",
    "to_float",
]
