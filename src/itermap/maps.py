# src/itermap/maps.py
"""
One-dimensional maps y_{n+1} = f(y_n; params).

A map is a small immutable value bundling its parameters with a pure
evaluation rule. Instances are plain callables, so every engine function
(`generate`, `trace`, `solve`) also accepts a bare ``f(y) -> y_next``.

The maps never validate their input: negative or out-of-range states are
evaluated as-is, and floating point overflow yields inf/NaN.
"""

from __future__ import annotations

import math
import re
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Callable, Mapping, Protocol, runtime_checkable

import numpy as np
import sympy as sp

from .errors import MapDefinitionError

__all__ = [
    "MapFunction",
    "LinearMap",
    "LogisticMap",
    "ExpressionMap",
    "parse_expression",
    "linear_map",
    "logistic_map",
    "make_map",
    "map_kinds",
]


@runtime_checkable
class MapFunction(Protocol):
    """Anything callable as f(y) -> y_next."""

    def __call__(self, y: float) -> float: ...


# ----------------------------------------------------------------------------
# Built-in maps
# ----------------------------------------------------------------------------

@dataclass(frozen=True)
class LinearMap:
    """Affine map f(y) = alpha + beta * y."""
    alpha: float
    beta: float

    def __call__(self, y: float) -> float:
        return self.alpha + self.beta * y

    def derivative(self, y: float) -> float:
        return self.beta

    def fixed_points(self) -> tuple[float, ...]:
        """alpha / (1 - beta); empty when beta == 1 (no or infinitely many)."""
        if self.beta == 1:
            return ()
        return (self.alpha / (1.0 - self.beta),)

    def domain(self) -> tuple[float, float]:
        fps = self.fixed_points()
        if fps and math.isfinite(fps[0]):
            center = fps[0]
            half = max(abs(center), 1.0)
            return (center - half, center + half)
        half = max(abs(self.alpha), 1.0)
        return (-half, half)


@dataclass(frozen=True)
class LogisticMap:
    """Logistic growth map f(y) = r * y * (1 - y / K)."""
    r: float
    K: float = 1.0

    def __call__(self, y: float) -> float:
        return self.r * y * (1.0 - y / self.K)

    def derivative(self, y: float) -> float:
        return self.r * (1.0 - 2.0 * y / self.K)

    def fixed_points(self) -> tuple[float, ...]:
        """0 and K * (1 - 1/r); the latter only exists for r != 0."""
        if self.r == 0:
            return (0.0,)
        return (0.0, self.K * (1.0 - 1.0 / self.r))

    def domain(self) -> tuple[float, float]:
        return (0.0, self.K) if self.K > 0 else (self.K, 0.0)


_FUNCTION_NAMES = frozenset({
    "exp", "log", "sqrt", "Abs",
    "sin", "cos", "tan", "asin", "acos", "atan",
    "sinh", "cosh", "tanh", "pi",
})
_IDENT = re.compile(r"[A-Za-z_][A-Za-z_0-9]*")


def parse_expression(expr: str, var: str = "y") -> sp.Expr:
    """
    Parse ``expr`` with sympy. Every identifier other than the elementary
    functions above is a plain symbol, so names like ``beta`` or ``gamma``
    stay parameters instead of resolving to sympy's special functions.
    """
    if not isinstance(expr, str):
        raise MapDefinitionError(f"expression must be a string, got {type(expr).__name__}")
    names = {n: sp.Symbol(n) for n in _IDENT.findall(expr) if n not in _FUNCTION_NAMES}
    names[var] = sp.Symbol(var)
    try:
        return sp.sympify(expr, locals=names)
    except (sp.SympifyError, SyntaxError, TypeError) as exc:
        raise MapDefinitionError(f"Cannot parse expression {expr!r}: {exc}") from None


@dataclass(frozen=True)
class ExpressionMap:
    """
    Map defined by an expression string in one state variable, e.g.
    ``ExpressionMap("a*y*exp(-y)", params={"a": 2.0})``.

    The expression is parsed with sympy and compiled with ``lambdify``;
    parameters are substituted at construction time.
    """
    expr: str
    var: str = "y"
    params: Mapping[str, float] = field(default_factory=dict, hash=False)
    bounds: tuple[float, float] = (0.0, 1.0)
    _fn: Callable[[float], float] = field(init=False, repr=False, compare=False)
    _dfn: Callable[[float], float] = field(init=False, repr=False, compare=False)
    _sym: Any = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        sym = sp.Symbol(self.var)
        parsed = parse_expression(self.expr, self.var)

        try:
            subs = {sp.Symbol(k): float(v) for k, v in self.params.items()}
        except (TypeError, ValueError):
            raise MapDefinitionError(f"Parameters of {self.expr!r} must be numbers: {dict(self.params)}") from None
        bound = parsed.subs(subs)
        free = {s.name for s in bound.free_symbols} - {self.var}
        if free:
            raise MapDefinitionError(
                f"Map expression {self.expr!r} has unbound symbols: {sorted(free)}"
            )

        object.__setattr__(self, "params", MappingProxyType(dict(self.params)))
        object.__setattr__(self, "bounds", (float(self.bounds[0]), float(self.bounds[1])))
        object.__setattr__(self, "_sym", bound)
        object.__setattr__(self, "_fn", sp.lambdify(sym, bound, modules="numpy"))
        object.__setattr__(self, "_dfn", sp.lambdify(sym, sp.diff(bound, sym), modules="numpy"))

    # numpy scalars overflow to inf; Python floats would raise OverflowError
    def __call__(self, y: float) -> float:
        return self._fn(np.float64(y))

    def derivative(self, y: float) -> float:
        return self._dfn(np.float64(y))

    def fixed_points(self) -> tuple[float, ...]:
        """Real solutions of f(y) = y found by sympy, sorted ascending."""
        sym = sp.Symbol(self.var)
        try:
            roots = sp.solve(sp.Eq(self._sym, sym), sym)
        except NotImplementedError as exc:
            raise MapDefinitionError(
                f"No closed-form fixed points for {self.expr!r}: {exc}"
            ) from None
        real = [complex(sp.N(r)) for r in roots]
        return tuple(sorted(z.real for z in real if abs(z.imag) < 1e-12))

    def domain(self) -> tuple[float, float]:
        return self.bounds


# ----------------------------------------------------------------------------
# Constructors / registry
# ----------------------------------------------------------------------------

def linear_map(alpha: float, beta: float) -> LinearMap:
    return LinearMap(alpha=float(alpha), beta=float(beta))


def logistic_map(r: float, K: float = 1.0) -> LogisticMap:
    return LogisticMap(r=float(r), K=float(K))


def _expression_map(expr: str, var: str = "y", params=None, bounds=(0.0, 1.0)) -> ExpressionMap:
    return ExpressionMap(expr=expr, var=var, params=dict(params or {}), bounds=tuple(bounds))


_REQUIRED: dict[str, tuple[str, ...]] = {
    "linear": ("alpha", "beta"),
    "logistic": ("r",),
    "expr": ("expr",),
}

_BUILDERS: dict[str, Callable[..., Any]] = {
    "linear": linear_map,
    "logistic": logistic_map,
    "expr": _expression_map,
}


def map_kinds() -> tuple[str, ...]:
    return tuple(_BUILDERS)


def make_map(kind: str, **params):
    """
    Build a map by kind name: ``make_map("logistic", r=1.5, K=10)``.

    Raises MapDefinitionError on unknown kinds, missing parameters or
    non-numeric parameter values.
    """
    builder = _BUILDERS.get(kind)
    if builder is None:
        raise MapDefinitionError(f"Unknown map kind {kind!r}; available: {list(_BUILDERS)}")

    missing = [name for name in _REQUIRED[kind] if name not in params]
    if missing:
        raise MapDefinitionError(f"Map kind {kind!r} requires parameter(s): {missing}")

    if kind != "expr":
        for name, value in params.items():
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise MapDefinitionError(
                    f"Parameter {name!r} of {kind!r} map must be a number, got {type(value).__name__}"
                )
    try:
        return builder(**params)
    except TypeError as exc:
        raise MapDefinitionError(f"Invalid parameters for {kind!r} map: {exc}") from None
