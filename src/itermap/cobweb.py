# src/itermap/cobweb.py
"""
Cobweb traces of one-dimensional maps.

A trace starts with a vertical rise from the axis, (y0, 0) -> (y0, f(y0)),
then alternates a horizontal move to the identity line and a vertical move
back to the map curve, once per iteration. ``trace(f, y0, steps)`` therefore
holds exactly ``1 + 2*steps`` segments.

Display bounds and the dense (x, f(x)) curve are not part of the trace;
`auto_domain` and `sample_curve` provide them for renderers.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Iterator, Literal, NamedTuple, Sequence

import numpy as np

from itermap.utils.arrays import require_steps

__all__ = [
    "CobwebSegment",
    "CobwebTrace",
    "iter_trace",
    "trace",
    "auto_domain",
    "sample_curve",
]

Orientation = Literal["vertical", "horizontal"]


class CobwebSegment(NamedTuple):
    """Line segment (x0, y0) -> (x1, y1) in (state, next-state) space."""
    x0: float
    y0: float
    x1: float
    y1: float
    orientation: Orientation

    @property
    def start(self) -> tuple[float, float]:
        return (self.x0, self.y0)

    @property
    def end(self) -> tuple[float, float]:
        return (self.x1, self.y1)


@dataclass(frozen=True)
class CobwebTrace:
    """
    Ordered, immutable cobweb trace.

    ``orbit`` holds every state the trace touches, y0 through f^(steps+1)(y0),
    i.e. ``steps + 2`` values.
    """
    segments: tuple[CobwebSegment, ...]
    orbit: tuple[float, ...]
    steps: int

    def __len__(self) -> int:
        return len(self.segments)

    def __getitem__(self, idx):
        return self.segments[idx]

    def __iter__(self) -> Iterator[CobwebSegment]:
        return iter(self.segments)

    def as_arrays(self) -> tuple[np.ndarray, np.ndarray]:
        """
        Segments as (X, Y) arrays of shape (2, n_segments), the layout
        ``Axes.plot(X, Y)`` draws as one line per column.
        """
        if not self.segments:
            empty = np.empty((2, 0), dtype=np.float64)
            return empty, empty.copy()
        arr = np.asarray([s[:4] for s in self.segments], dtype=np.float64)
        X = np.vstack([arr[:, 0], arr[:, 2]])
        Y = np.vstack([arr[:, 1], arr[:, 3]])
        return X, Y

    def domain(self, pad: float = 0.05) -> tuple[float, float]:
        return auto_domain(self.orbit, pad=pad)


def iter_trace(f: Callable[[float], float], y0: float, steps: int) -> Iterator[CobwebSegment]:
    """Lazily yield the ``1 + 2*steps`` segments of the cobweb trace."""
    n = require_steps(steps)
    return _segments(f, y0, n)


def _segments(f: Callable[[float], float], y0: float, steps: int) -> Iterator[CobwebSegment]:
    y_old = y0
    y_new = f(y0)
    yield CobwebSegment(y0, 0.0, y0, y_new, "vertical")
    for _ in range(steps):
        yield CobwebSegment(y_old, y_new, y_new, y_new, "horizontal")
        y_old = y_new
        y_new = f(y_new)
        yield CobwebSegment(y_old, y_old, y_old, y_new, "vertical")


def trace(f: Callable[[float], float], y0: float, steps: int) -> CobwebTrace:
    """
    Cobweb trace of ``f`` from ``y0`` over ``steps`` iterations.

    Raises:
        InvalidStepCount: if ``steps`` is not an integer >= 1
    """
    n = require_steps(steps)
    segments = tuple(_segments(f, y0, n))
    # vertical segments carry the orbit: x of each rise, plus the final height
    orbit = tuple(s.x0 for s in segments if s.orientation == "vertical") + (segments[-1].y1,)
    return CobwebTrace(segments=segments, orbit=orbit, steps=n)


# ----------------------------------------------------------------------------
# Display helpers
# ----------------------------------------------------------------------------

def auto_domain(values: Sequence[float] | np.ndarray, pad: float = 0.05) -> tuple[float, float]:
    """
    (lo, hi) bounds around the finite entries of ``values`` with a relative pad.
    Falls back to (-1, 1) when nothing finite remains.
    """
    arr = np.asarray(values, dtype=np.float64)
    arr = arr[np.isfinite(arr)]
    if arr.size == 0:
        return (-1.0, 1.0)
    lo = float(np.min(arr))
    hi = float(np.max(arr))
    span = hi - lo if hi > lo else 1.0
    return (lo - pad * span, hi + pad * span)


def sample_curve(
    f: Callable[[float], float],
    domain: tuple[float, float],
    num: int = 400,
) -> tuple[np.ndarray, np.ndarray]:
    """Dense samples (x, f(x)) of the map curve over ``domain``."""
    lo, hi = (float(domain[0]), float(domain[1]))
    if not hi > lo:
        raise ValueError(f"domain must satisfy lo < hi; got {domain!r}")
    n = require_steps(num, name="num")
    xs = np.linspace(lo, hi, n)
    with np.errstate(over="ignore", invalid="ignore"):
        ys = np.asarray([f(float(x)) for x in xs], dtype=np.float64)
    return xs, ys
