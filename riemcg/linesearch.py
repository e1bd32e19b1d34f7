"""One-dimensional line searches along geodesics.

A line search receives the restriction of the cost to a geodesic,
``f(t) = cost(gamma(t))``, and its derivative ``df(t)``, and returns a step
length. A non-positive return value means no acceptable step was found; the
optimizers interpret it as having reached a stationary point.

Line searches keep memory between calls (the last step length, used to pick
the next initial trial); ``reset`` clears it.
"""

import logging
from collections.abc import Callable
from typing import Protocol, runtime_checkable

from .core.constants import LineSearchDefaults
from .core.type_system import is_finite, to_float

logger = logging.getLogger(__name__)

ScalarFunction = Callable[[float], float]


@runtime_checkable
class LineSearch(Protocol):
    """Line search contract used by the conjugate gradient optimizer."""

    alpha: float

    def reset(self) -> None: ...

    def search(self, f: ScalarFunction, df: ScalarFunction) -> float: ...


class BacktrackingLineSearch:
    """Back-tracking line search with the Armijo sufficient decrease condition.

    The first trial step is ``initial_step_size``; later searches start from
    ``optimism`` times the previous step length and contract by
    ``contraction_factor`` until the Armijo condition
    ``f(t) <= f(0) + sufficient_decrease * t * df(0)`` holds.

    Args:
        contraction_factor: Shrink factor in (0, 1).
        optimism: Growth factor (>= 1) applied to the previous step length.
        sufficient_decrease: Armijo constant in (0, 1).
        max_iterations: Maximum number of contractions.
        initial_step_size: First trial step length (> 0).

    Raises:
        ValueError: If a parameter is out of range.
    """

    def __init__(
        self,
        contraction_factor: float = LineSearchDefaults.CONTRACTION_FACTOR,
        optimism: float = LineSearchDefaults.OPTIMISM,
        sufficient_decrease: float = LineSearchDefaults.SUFFICIENT_DECREASE,
        max_iterations: int = LineSearchDefaults.BACKTRACKING_MAX_ITERATIONS,
        initial_step_size: float = LineSearchDefaults.INITIAL_STEP_SIZE,
    ):
        if not 0.0 < contraction_factor < 1.0:
            raise ValueError(f"contraction_factor must be in (0, 1), got {contraction_factor}")
        if optimism < 1.0:
            raise ValueError(f"optimism must be at least 1, got {optimism}")
        if not 0.0 < sufficient_decrease < 1.0:
            raise ValueError(f"sufficient_decrease must be in (0, 1), got {sufficient_decrease}")
        if max_iterations < 1:
            raise ValueError(f"max_iterations must be positive, got {max_iterations}")
        if initial_step_size <= 0.0:
            raise ValueError(f"initial_step_size must be positive, got {initial_step_size}")

        self.contraction_factor = contraction_factor
        self.optimism = optimism
        self.sufficient_decrease = sufficient_decrease
        self.max_iterations = max_iterations
        self.initial_step_size = initial_step_size
        self.alpha = 0.0

    def reset(self) -> None:
        """Forget the previous step length."""
        self.alpha = 0.0

    def search(self, f: ScalarFunction, df: ScalarFunction) -> float:
        f0 = to_float(f(0.0))
        df0 = to_float(df(0.0))
        if not is_finite(df0) or df0 >= 0.0:
            logger.debug(f"Backtracking: not a descent direction (df(0)={df0})")
            self.alpha = 0.0
            return 0.0

        alpha = self.optimism * self.alpha if self.alpha > 0.0 else self.initial_step_size
        newf = to_float(f(alpha))
        step_count = 1

        # Backtrack while the Armijo criterion is not satisfied
        while (
            not is_finite(newf) or newf > f0 + self.sufficient_decrease * alpha * df0
        ) and step_count <= self.max_iterations:
            alpha *= self.contraction_factor
            newf = to_float(f(alpha))
            step_count += 1

        # Without any decrease the step is rejected.
        if not is_finite(newf) or newf > f0:
            logger.debug(f"Backtracking: no decrease after {step_count} trials")
            alpha = 0.0

        self.alpha = alpha
        return alpha

    def __repr__(self) -> str:
        return (
            f"BacktrackingLineSearch(contraction_factor={self.contraction_factor}, "
            f"optimism={self.optimism}, sufficient_decrease={self.sufficient_decrease})"
        )


class SecantLineSearch:
    """Exact line search locating a minimizer of ``f`` as a root of ``df``.

    Starting from ``t = 0`` and a trial step (the previous step length, or
    ``initial_step_size``), the search extrapolates with secant steps while
    ``df`` stays negative. Once a point with ``df > 0`` is found the root is
    bracketed and refined by regula falsi with the Illinois modification, so
    the search converges to a sign change from descent to ascent, a local
    minimizer of ``f``. It stops when ``|df(t)| <= tolerance * |df(0)|``.

    When ``df`` is affine, as for a quadratic cost along a straight line, a
    single secant update lands on the exact minimizer.

    The search fails (returns 0) for non-descent directions and for end
    points that do not decrease the cost.

    Args:
        initial_step_size: First trial step length (> 0).
        tolerance: Relative derivative reduction that ends the search (> 0).
        max_iterations: Maximum number of derivative evaluations after df(0).

    Raises:
        ValueError: If a parameter is out of range.
    """

    def __init__(
        self,
        initial_step_size: float = LineSearchDefaults.INITIAL_STEP_SIZE,
        tolerance: float = LineSearchDefaults.SECANT_TOLERANCE,
        max_iterations: int = LineSearchDefaults.SECANT_MAX_ITERATIONS,
    ):
        if initial_step_size <= 0.0:
            raise ValueError(f"initial_step_size must be positive, got {initial_step_size}")
        if tolerance <= 0.0:
            raise ValueError(f"tolerance must be positive, got {tolerance}")
        if max_iterations < 1:
            raise ValueError(f"max_iterations must be positive, got {max_iterations}")

        self.initial_step_size = initial_step_size
        self.tolerance = tolerance
        self.max_iterations = max_iterations
        self.alpha = 0.0

    def reset(self) -> None:
        """Forget the previous step length."""
        self.alpha = 0.0

    def _fail(self, reason: str) -> float:
        logger.debug(f"Secant search failed: {reason}")
        self.alpha = 0.0
        return 0.0

    def search(self, f: ScalarFunction, df: ScalarFunction) -> float:
        d0 = to_float(df(0.0))
        if not is_finite(d0) or d0 >= 0.0:
            return self._fail(f"not a descent direction (df(0)={d0})")

        # lo always has df < 0; hi, once found, has df > 0.
        t_lo, d_lo = 0.0, d0
        t_hi: float | None = None
        d_hi = 0.0
        kept = ""
        t = self.alpha if self.alpha > 0.0 else self.initial_step_size
        for _ in range(self.max_iterations):
            d = to_float(df(t))
            if not is_finite(d):
                # Overshot into a region where the cost is undefined.
                upper = t if t_hi is None else min(t, t_hi)
                t = 0.5 * (t_lo + upper)
                continue
            if abs(d) <= self.tolerance * abs(d0):
                break

            if d < 0.0:
                prev_t, prev_d = t_lo, d_lo
                t_lo, d_lo = t, d
                if t_hi is None:
                    t_next = _secant(prev_t, prev_d, t_lo, d_lo)
                    if not is_finite(t_next) or t_next <= t_lo:
                        t_next = 2.0 * t_lo
                    t = t_next
                    continue
                # Illinois: halve an end point kept twice in a row.
                if kept == "hi":
                    d_hi *= 0.5
                kept = "hi"
            else:
                t_hi, d_hi = t, d
                if kept == "lo":
                    d_lo *= 0.5
                kept = "lo"

            t_next = _secant(t_lo, d_lo, t_hi, d_hi)
            if not (is_finite(t_next) and t_lo < t_next < t_hi):
                t_next = 0.5 * (t_lo + t_hi)
            t = t_next

        f0 = to_float(f(0.0))
        ft = to_float(f(t))
        if not is_finite(ft) or ft > f0:
            return self._fail(f"no decrease at t={t} (f(0)={f0}, f(t)={ft})")

        self.alpha = t
        return t

    def __repr__(self) -> str:
        return f"SecantLineSearch(tolerance={self.tolerance}, max_iterations={self.max_iterations})"


def _secant(a: float, da: float, b: float, db: float) -> float:
    """Root of the line through (a, da) and (b, db)."""
    if db == da:
        return float("nan")
    return b - db * (b - a) / (db - da)
