"""Conjugate-direction schemes for Riemannian conjugate gradient.

Each scheme is a pure function computing the coefficient ``beta`` that
weights the transported previous search direction:

    direction = -grad + beta * T(prev_direction)

where ``T`` is parallel transport from the previous iterate to the current
one along the previous geodesic. All inner products are taken at the
current point, except the denominator of Fletcher–Reeves which uses the
previous point's own metric.

References:
    Ring, W., & Wirth, B. (2012). Optimization methods on Riemannian manifolds
    and their application to shape space. SIAM Journal on Optimization.
    Sato, H. (2022). Riemannian conjugate gradient methods: general framework
    and specific algorithms with convergence analyses.
"""

import dataclasses
from collections.abc import Callable
from enum import Enum
from functools import cached_property

from ..core.type_system import TangentVector
from ..geometry import InnerProduct
from .errors import ParameterValidationError


@dataclasses.dataclass(frozen=True)
class ConjugacyTerms:
    """Quantities a scheme coefficient is computed from.

    Attributes:
        inner: Inner product at the current point.
        prev_inner: Inner product at the previous point.
        grad: Gradient at the current point.
        prev_grad: Gradient at the previous point.
        transported_velocity: Previous search direction transported to the current point.
        transport: Transports a tangent vector at the previous point to the current one.
    """

    inner: InnerProduct
    prev_inner: InnerProduct
    grad: TangentVector
    prev_grad: TangentVector
    transported_velocity: TangentVector
    transport: Callable[[TangentVector], TangentVector]

    @cached_property
    def transported_prev_grad(self) -> TangentVector:
        """Previous gradient transported to the current point (computed once)."""
        return self.transport(self.prev_grad)

    @cached_property
    def grad_difference(self) -> TangentVector:
        """grad - T(prev_grad), the transported gradient change."""
        return self.grad - self.transported_prev_grad


def fletcher_reeves(terms: ConjugacyTerms) -> float:
    """beta = ||grad||^2 / ||prev_grad||^2, each norm at its own point."""
    return terms.inner.norm2(terms.grad) / terms.prev_inner.norm2(terms.prev_grad)


def polak_ribiere(terms: ConjugacyTerms) -> float:
    """beta = <grad, grad - T(prev_grad)> / ||T(prev_grad)||^2."""
    return terms.inner(terms.grad, terms.grad_difference) / terms.inner.norm2(terms.transported_prev_grad)


def hestenes_stiefel(terms: ConjugacyTerms) -> float:
    """beta = <grad, grad - T(prev_grad)> / <T(prev_dir), grad - T(prev_grad)>."""
    diff = terms.grad_difference
    return terms.inner(terms.grad, diff) / terms.inner(terms.transported_velocity, diff)


def conjugate_descent(terms: ConjugacyTerms) -> float:
    """beta = -||grad||^2 / <T(prev_dir), T(prev_grad)>."""
    return -terms.inner.norm2(terms.grad) / terms.inner(terms.transported_velocity, terms.transported_prev_grad)


def dai_yuan(terms: ConjugacyTerms) -> float:
    """beta = ||grad||^2 / <T(prev_dir), grad - T(prev_grad)>."""
    return terms.inner.norm2(terms.grad) / terms.inner(terms.transported_velocity, terms.grad_difference)


class CGScheme(Enum):
    """Enumeration of the conjugate-direction schemes."""

    FLETCHER_REEVES = "fletcher_reeves"
    POLAK_RIBIERE = "polak_ribiere"
    HESTENES_STIEFEL = "hestenes_stiefel"
    CONJUGATE_DESCENT = "conjugate_descent"
    DAI_YUAN = "dai_yuan"

    def coefficient(self, terms: ConjugacyTerms) -> float:
        """Compute this scheme's coefficient.

        Division by zero in the formula yields ``nan`` or ``inf`` rather than
        raising; deciding what to do with a non-finite coefficient is left to
        the caller.
        """
        try:
            return float(_COEFFICIENTS[self](terms))
        except ZeroDivisionError:
            return float("nan")

    @classmethod
    def from_value(cls, value: "CGScheme | str") -> "CGScheme":
        """Resolve a scheme from a member, its value, its name or an abbreviation.

        Examples:
            >>> CGScheme.from_value("polak_ribiere")
            <CGScheme.POLAK_RIBIERE: 'polak_ribiere'>
            >>> CGScheme.from_value("HS")
            <CGScheme.HESTENES_STIEFEL: 'hestenes_stiefel'>

        Raises:
            ParameterValidationError: If the value names no scheme.
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            key = value.strip().lower().replace("-", "_").replace(" ", "_")
            key = _ALIASES.get(key, key)
            for scheme in cls:
                if key == scheme.value:
                    return scheme
        valid = ", ".join(scheme.value for scheme in cls)
        raise ParameterValidationError(
            f"Unknown conjugate gradient scheme {value!r}; expected one of: {valid}",
            parameter_name="scheme",
            received_value=value,
        )


_COEFFICIENTS: dict[CGScheme, Callable[[ConjugacyTerms], float]] = {
    CGScheme.FLETCHER_REEVES: fletcher_reeves,
    CGScheme.POLAK_RIBIERE: polak_ribiere,
    CGScheme.HESTENES_STIEFEL: hestenes_stiefel,
    CGScheme.CONJUGATE_DESCENT: conjugate_descent,
    CGScheme.DAI_YUAN: dai_yuan,
}

_ALIASES: dict[str, str] = {
    "fr": "fletcher_reeves",
    "pr": "polak_ribiere",
    "prp": "polak_ribiere",
    "hs": "hestenes_stiefel",
    "cd": "conjugate_descent",
    "dy": "dai_yuan",
}
