# src/itermap/errors.py
from __future__ import annotations

__all__ = [
    "ItermapError",
    "InvalidStepCount",
    "MapDefinitionError",
    "NonConvergenceError",
    "ConfigError",
    "NonConvergenceWarning",
]


class ItermapError(Exception):
    """Base error for the itermap package."""


class InvalidStepCount(ItermapError, ValueError):
    """Raised when an iteration is requested with fewer than one step."""
    def __init__(self, steps, *, name: str = "steps"):
        self.steps = steps
        self.name = name
        super().__init__(f"{name} must be an integer >= 1; got {steps!r}")


class MapDefinitionError(ItermapError, ValueError):
    """Raised when a map cannot be built from the given kind/parameters/expression."""
    def __init__(self, message: str):
        super().__init__(message)


class NonConvergenceError(ItermapError):
    """Raised by FixedPointResult.unwrap() when the iteration cap was exhausted."""
    def __init__(self, last: float, iterations: int, tol: float):
        self.last = last
        self.iterations = iterations
        self.tol = tol
        msg = (
            f"Fixed-point iteration did not converge within {iterations} iterations "
            f"(tol={tol:g}); last iterate {last!r}"
        )
        super().__init__(msg)


class ConfigError(ItermapError):
    """Raised when an experiment file is malformed or invalid."""
    def __init__(self, message: str, path=None):
        self.path = path
        if path is not None:
            message = f"{path}: {message}"
        super().__init__(message)


class NonConvergenceWarning(RuntimeWarning):
    """Emitted when the fixed-point solver hits its iteration cap."""
