# src/itermap/trajectory.py
"""
Trajectory generation for one-dimensional maps.

`generate` iterates y_t = f(y_{t-1}) from y_0. `generate_stochastic` adds
i.i.d. Normal(0, noise_variance) observation noise AFTER the deterministic
pass: the recursion always continues from the unperturbed state.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Callable, Iterator

import numpy as np

from itermap.utils.arrays import readonly, require_nonnegative, require_steps

__all__ = ["Trajectory", "generate", "generate_stochastic", "noise_series", "resolve_rng"]


def _same(a: np.ndarray | None, b: np.ndarray | None) -> bool:
    if a is None or b is None:
        return a is b
    return np.array_equal(a, b, equal_nan=True)


@dataclass(frozen=True, eq=False)
class Trajectory:
    """
    Immutable sequence of states indexed by discrete time 0..T-1.

    Fields:
      - states:   observed states, shape (T,)
      - baseline: deterministic states before noise (stochastic runs only)
      - noise:    additive noise series (stochastic runs only)

    For stochastic runs ``states == baseline + noise`` elementwise.
    All arrays are read-only. Two trajectories are equal when all their
    arrays match elementwise (NaN equal to NaN); they are not hashable.
    """
    states: np.ndarray
    baseline: np.ndarray | None = None
    noise: np.ndarray | None = None

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Trajectory):
            return NotImplemented
        return (
            _same(self.states, other.states)
            and _same(self.baseline, other.baseline)
            and _same(self.noise, other.noise)
        )

    __hash__ = None  # type: ignore[assignment]

    def __len__(self) -> int:
        return int(self.states.shape[0])

    def __getitem__(self, idx):
        return self.states[idx]

    def __iter__(self) -> Iterator[float]:
        return iter(self.states.tolist())

    def __array__(self, dtype=None, copy=None) -> np.ndarray:
        if dtype is None:
            return self.states
        return self.states.astype(dtype)

    @property
    def t(self) -> np.ndarray:
        """Discrete time labels 0..T-1."""
        return np.arange(len(self), dtype=np.int64)

    @property
    def stochastic(self) -> bool:
        return self.noise is not None

    @property
    def initial(self) -> float:
        return float(self.states[0])

    @property
    def final(self) -> float:
        return float(self.states[-1])

    def __repr__(self) -> str:
        kind = "stochastic" if self.stochastic else "deterministic"
        return f"Trajectory({kind}, steps={len(self)}, y0={self.initial!r}, y_end={self.final!r})"


# ----------------------------------------------------------------------------
# Internals
# ----------------------------------------------------------------------------

def _iterate(f: Callable[[float], float], y0: float, steps: int) -> np.ndarray:
    out = np.empty((steps,), dtype=np.float64)
    y = y0
    out[0] = y
    # inf/NaN from overflow are recorded as produced
    with np.errstate(over="ignore", invalid="ignore"):
        for t in range(1, steps):
            y = f(y)
            out[t] = y
    return out


def resolve_rng(rng: np.random.Generator | None = None, seed=None) -> np.random.Generator:
    """
    Return the random source for one invocation.

    Either pass an existing Generator (its state advances) or a seed; passing
    both is ambiguous and rejected. With neither, a fresh unseeded Generator
    is created, so results are not reproducible.
    """
    if rng is not None and seed is not None:
        raise ValueError("Pass either rng or seed, not both.")
    if rng is not None:
        if not isinstance(rng, np.random.Generator):
            raise TypeError(f"rng must be a numpy.random.Generator; got {type(rng).__name__}")
        return rng
    return np.random.default_rng(seed)


# ----------------------------------------------------------------------------
# Public API
# ----------------------------------------------------------------------------

def generate(f: Callable[[float], float], y0: float, steps: int) -> Trajectory:
    """
    Iterate ``f`` from ``y0`` and return the first ``steps`` states.

    Args:
        f: Map callable y -> y_next
        y0: Initial condition (element 0 of the result)
        steps: Number of states to return (>= 1)

    Returns:
        Deterministic Trajectory of length ``steps``

    Raises:
        InvalidStepCount: if ``steps`` is not an integer >= 1
    """
    n = require_steps(steps)
    return Trajectory(states=readonly(_iterate(f, y0, n)))


def noise_series(
    steps: int,
    noise_variance: float,
    *,
    rng: np.random.Generator | None = None,
    seed=None,
) -> np.ndarray:
    """``steps`` i.i.d. draws from Normal(0, noise_variance)."""
    n = require_steps(steps)
    var = require_nonnegative(noise_variance, "noise_variance")
    gen = resolve_rng(rng, seed)
    return readonly(gen.normal(loc=0.0, scale=math.sqrt(var), size=n))


def generate_stochastic(
    f: Callable[[float], float],
    y0: float,
    steps: int,
    noise_variance: float,
    *,
    rng: np.random.Generator | None = None,
    seed=None,
) -> Trajectory:
    """
    Deterministic trajectory plus additive observation noise.

    The noise is drawn after the deterministic pass and added elementwise;
    it never feeds back into the recursion.

    Args:
        f: Map callable y -> y_next
        y0: Initial condition of the deterministic pass
        steps: Trajectory length (>= 1)
        noise_variance: Variance of the Normal(0, .) draws (>= 0)
        rng: Random source to draw from (mutually exclusive with seed)
        seed: Seed for a fresh numpy Generator

    Returns:
        Trajectory with ``baseline`` and ``noise`` populated
    """
    n = require_steps(steps)
    var = require_nonnegative(noise_variance, "noise_variance")
    gen = resolve_rng(rng, seed)

    baseline = readonly(_iterate(f, y0, n))
    noise = noise_series(n, var, rng=gen)
    with np.errstate(invalid="ignore"):
        states = baseline + noise
    return Trajectory(states=readonly(states), baseline=baseline, noise=noise)
