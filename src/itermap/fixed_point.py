# src/itermap/fixed_point.py
"""
Fixed points by successive substitution (Picard iteration).

Starting from y_old = y0, y_new = f(y0) the solver keeps substituting until
|y_new - y_old| <= tol. Each substitution counts one iteration; once the count
exceeds ``max_iter`` the run ends as EXHAUSTED. Exhaustion is a normal outcome
carried by the result (and announced with NonConvergenceWarning), never an
exception.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Callable
import math
import warnings

import numpy as np

from .errors import NonConvergenceError, NonConvergenceWarning

__all__ = ["SolverStatus", "FixedPointResult", "solve", "DEFAULT_TOL", "DEFAULT_MAX_ITER"]

DEFAULT_TOL = 1e-11
DEFAULT_MAX_ITER = 10000


class SolverStatus(str, Enum):
    CONVERGED = "converged"
    EXHAUSTED = "exhausted"


@dataclass(frozen=True)
class FixedPointResult:
    """
    Outcome of `solve`.

    Fields:
      - status: CONVERGED or EXHAUSTED (both terminal)
      - value: the fixed point when converged, else the last iterate
      - iterations: substitutions performed after the first evaluation
        (max_iter + 1 when exhausted)
      - tol, max_iter: settings the run used
      - residual: |y_new - y_old| of the final pair
    """
    status: SolverStatus
    value: float
    iterations: int
    tol: float
    max_iter: int
    residual: float

    @property
    def converged(self) -> bool:
        return self.status is SolverStatus.CONVERGED

    def unwrap(self) -> float:
        """Return the converged value; raise NonConvergenceError otherwise."""
        if not self.converged:
            raise NonConvergenceError(self.value, self.iterations, self.tol)
        return self.value

    def __str__(self) -> str:
        if self.converged:
            return f"converged to {float(self.value)!r} after {self.iterations} iterations (tol={self.tol:g})"
        return (
            f"not converged after {self.iterations} iterations "
            f"(tol={self.tol:g}, last iterate {float(self.value)!r}, residual {float(self.residual)!r})"
        )


def solve(
    f: Callable[[float], float],
    y0: float,
    tol: float = DEFAULT_TOL,
    max_iter: int = DEFAULT_MAX_ITER,
    *,
    warn: bool = True,
) -> FixedPointResult:
    """
    Approximate a fixed point of ``f`` by successive substitution from ``y0``.

    Args:
        f: Map callable y -> y_next
        y0: Starting value
        tol: Absolute tolerance on successive iterates (>= 0)
        max_iter: Iteration cap (>= 0)
        warn: Emit NonConvergenceWarning when the cap is exhausted

    Returns:
        FixedPointResult; branch on ``result.converged``.

    Notes:
        A non-finite difference (overflow to inf, NaN) never satisfies the
        tolerance, so divergent maps run into the cap instead of reporting a
        spurious convergence.
    """
    if not float(tol) >= 0.0:
        raise ValueError(f"tol must be >= 0; got {tol!r}")
    if isinstance(max_iter, bool) or int(max_iter) != max_iter or max_iter < 0:
        raise ValueError(f"max_iter must be a non-negative integer; got {max_iter!r}")
    tol = float(tol)
    max_iter = int(max_iter)

    iterations = 0
    status = SolverStatus.CONVERGED
    # overflow to inf/NaN is an outcome here, not a numpy warning
    with np.errstate(over="ignore", invalid="ignore"):
        y_old = y0
        y_new = f(y0)
        while not abs(y_new - y_old) <= tol:
            # the cap is checked with the pair, never mid-substitution
            if iterations > max_iter:
                status = SolverStatus.EXHAUSTED
                break
            y_old = y_new
            y_new = f(y_new)
            iterations += 1

        residual = abs(y_new - y_old)
    result = FixedPointResult(
        status=status,
        value=y_new,
        iterations=iterations,
        tol=tol,
        max_iter=max_iter,
        residual=residual,
    )
    if warn and status is SolverStatus.EXHAUSTED:
        note = "" if math.isfinite(residual) else " (iterates are no longer finite)"
        warnings.warn(
            f"Fixed-point iteration exhausted max_iter={max_iter} without meeting tol={tol:g}{note}; "
            f"last iterate {float(y_new)!r}.",
            NonConvergenceWarning,
            stacklevel=2,
        )
    return result
