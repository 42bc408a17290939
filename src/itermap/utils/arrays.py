# src/itermap/utils/arrays.py
from __future__ import annotations

import numbers

import numpy as np

from itermap.errors import InvalidStepCount

__all__ = ["require_steps", "require_nonnegative", "readonly"]


def require_steps(steps, name: str = "steps") -> int:
    """
    Ensure 'steps' is an integer >= 1 and return it as int.
    Floats and bools are rejected even when integral.
    """
    if isinstance(steps, bool) or not isinstance(steps, numbers.Integral):
        raise InvalidStepCount(steps, name=name)
    if steps < 1:
        raise InvalidStepCount(steps, name=name)
    return int(steps)


def require_nonnegative(value, name: str) -> float:
    """Ensure 'value' is a real number >= 0 (NaN rejected)."""
    val = float(value)
    if not val >= 0.0:
        raise ValueError(f"{name} must be >= 0; got {value!r}")
    return val


def readonly(a: np.ndarray) -> np.ndarray:
    """Flag 'a' as non-writeable and return it (no copy)."""
    a.flags.writeable = False
    return a
