# src/itermap/stability.py
"""Local stability of fixed points and symbolic derivatives of map expressions."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Literal
import math

import sympy as sp

from .maps import parse_expression

__all__ = ["StabilityReport", "classify", "derivative_at", "stability", "symbolic_derivative"]

StabilityLabel = Literal["stable", "unstable", "neutral"]


@dataclass(frozen=True)
class StabilityReport:
    point: float
    derivative: float
    label: StabilityLabel

    @property
    def multiplier(self) -> float:
        """|f'(y*)|, the local contraction/expansion factor."""
        return abs(self.derivative)


def classify(derivative: float, atol: float = 1e-12) -> StabilityLabel:
    """'stable' if |d| < 1, 'unstable' if |d| > 1, 'neutral' within atol of 1."""
    m = abs(float(derivative))
    if math.isnan(m):
        raise ValueError("Cannot classify a NaN derivative.")
    if abs(m - 1.0) <= atol:
        return "neutral"
    return "stable" if m < 1.0 else "unstable"


def derivative_at(f: Callable[[float], float], y: float, h: float = 1e-6) -> float:
    """
    f'(y), using ``f.derivative`` when the map provides one and a central
    difference otherwise.
    """
    analytic = getattr(f, "derivative", None)
    if callable(analytic):
        return float(analytic(y))
    step = h * max(1.0, abs(y))
    return (float(f(y + step)) - float(f(y - step))) / (2.0 * step)


def stability(f: Callable[[float], float], point: float, atol: float = 1e-12) -> StabilityReport:
    d = derivative_at(f, point)
    return StabilityReport(point=float(point), derivative=d, label=classify(d, atol=atol))


def symbolic_derivative(expr: str, var: str = "y") -> str:
    """
    d(expr)/d(var) as an expanded expression string; the logistic rule
    "r*y*(1 - y/K)" gives r - 2*r*y/K.
    """
    parsed = parse_expression(expr, var)
    return str(sp.expand(sp.diff(parsed, sp.Symbol(var))))
