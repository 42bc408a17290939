# src/itermap/plot/_primitives.py
from __future__ import annotations

from typing import Any, Callable

import numpy as np
import matplotlib.pyplot as plt

from itermap.cobweb import CobwebTrace, auto_domain, sample_curve, trace as cobweb_trace
from itermap.trajectory import Trajectory

__all__ = ["series", "analysis"]


# ----------------------------------------------------------------------------
# Figure/Axes helpers
# ----------------------------------------------------------------------------

def _get_ax(ax=None) -> plt.Axes:
    if ax is not None:
        return ax
    _fig, created_ax = plt.subplots(figsize=(6.0, 4.0), layout="constrained")
    return created_ax


def _resolve_value(value: Any) -> np.ndarray:
    if isinstance(value, Trajectory):
        return value.states
    if isinstance(value, str):
        raise TypeError("String keys are not supported by plot primitives. Pass arrays directly.")
    return np.asarray(value, dtype=float)


def _apply_limits(
    ax: plt.Axes,
    *,
    xlim: tuple[float | None, float | None] | None = None,
    ylim: tuple[float | None, float | None] | None = None,
) -> None:
    if xlim is not None:
        ax.set_xlim(xlim)
    if ylim is not None:
        ax.set_ylim(ylim)


def _apply_labels(
    ax: plt.Axes,
    *,
    xlabel: str | None,
    ylabel: str | None,
    title: str | None,
) -> None:
    if xlabel is not None:
        ax.set_xlabel(xlabel)
    if ylabel is not None:
        ax.set_ylabel(ylabel)
    if title is not None:
        ax.set_title(title)


def _style_kwargs(*, color=None, lw=None, ls=None, marker=None, alpha=None) -> dict[str, Any]:
    kw: dict[str, Any] = {}
    if color is not None:
        kw["color"] = color
    if lw is not None:
        kw["linewidth"] = float(lw)
    if ls is not None:
        kw["linestyle"] = ls
    if marker is not None:
        kw["marker"] = marker
    if alpha is not None:
        kw["alpha"] = float(alpha)
    return kw


# ----------------------------------------------------------------------------
# Time series
# ----------------------------------------------------------------------------

class _SeriesPlot:
    """Time-series plots of trajectories."""
    def plot(
        self,
        y,
        *,
        t=None,
        label: str | None = None,
        baseline: bool = True,
        color: str | None = None,
        lw: float | None = None,
        ls: str | None = "-",
        marker: str | None = "o",
        alpha: float | None = None,
        xlim=None,
        ylim=None,
        xlabel: str | None = "t",
        ylabel: str | None = "$y_t$",
        title: str | None = None,
        legend: bool = True,
        ax=None,
    ) -> plt.Axes:
        """
        Plot states against discrete time.

        A stochastic Trajectory also draws its noise-free baseline (dashed)
        unless ``baseline=False``.
        """
        data = _resolve_value(y)
        tt = np.arange(data.shape[0]) if t is None else np.asarray(t)
        if tt.shape != data.shape:
            raise ValueError(f"t and y must have the same shape; got {tt.shape} and {data.shape}")

        plot_ax = _get_ax(ax)
        style = _style_kwargs(color=color, lw=lw, ls=ls, marker=marker, alpha=alpha)
        style.setdefault("markersize", 3.0)
        plot_ax.plot(tt, data, label=label, **style)

        if baseline and isinstance(y, Trajectory) and y.baseline is not None:
            plot_ax.plot(tt, y.baseline, linestyle="--", color="gray", label="deterministic")

        _apply_limits(plot_ax, xlim=xlim, ylim=ylim)
        _apply_labels(plot_ax, xlabel=xlabel, ylabel=ylabel, title=title)
        if legend and (label is not None or (baseline and isinstance(y, Trajectory) and y.stochastic)):
            plot_ax.legend()
        return plot_ax


# ----------------------------------------------------------------------------
# Analysis plots
# ----------------------------------------------------------------------------

class _AnalysisPlot:
    """Histogram and cobweb diagrams."""
    def hist(
        self,
        y,
        *,
        bins: int = 30,
        density: bool = False,
        label: str | None = None,
        color: str | None = None,
        alpha: float | None = None,
        xlim=None,
        ylim=None,
        xlabel: str | None = None,
        ylabel: str | None = None,
        title: str | None = None,
        legend: bool = True,
        ax=None,
    ) -> plt.Axes:
        """
        Histogram of values, typically a noise series.

        A stochastic Trajectory passed directly is histogrammed by its noise.
        """
        if isinstance(y, Trajectory) and y.noise is not None:
            data = y.noise
        else:
            data = _resolve_value(y)
        plot_ax = _get_ax(ax)
        hist_kwargs: dict[str, Any] = {"bins": bins, "density": density}
        if color is not None:
            hist_kwargs["color"] = color
        if alpha is not None:
            hist_kwargs["alpha"] = alpha
        if label is not None:
            hist_kwargs["label"] = label
        plot_ax.hist(data[np.isfinite(data)], **hist_kwargs)

        if label and legend:
            plot_ax.legend()
        if ylabel is None:
            ylabel = "Density" if density else "Count"
        _apply_limits(plot_ax, xlim=xlim, ylim=ylim)
        _apply_labels(plot_ax, xlabel=xlabel, ylabel=ylabel, title=title)
        return plot_ax

    def cobweb(
        self,
        *,
        f: Callable[[float], float],
        x0: float | None = None,
        steps: int = 20,
        trace: CobwebTrace | None = None,
        xlim: tuple[float | None, float | None] | None = None,
        ylim: tuple[float | None, float | None] | None = None,
        samples: int = 400,
        ax=None,
        color: str | None = None,
        lw: float | None = None,
        identity_color: str | None = None,
        stair_color: str | None = None,
        stair_lw: float | None = 0.8,
        xlabel: str | None = "$y_t$",
        ylabel: str | None = "$y_{t+1}$",
        title: str | None = None,
        legend: bool = True,
    ) -> plt.Axes:
        """
        Cobweb diagram: map curve, identity line and the iteration staircase.

        Pass either ``x0`` (the trace is computed with ``steps`` iterations)
        or a precomputed ``trace``. Without ``xlim`` the domain comes from
        ``f.domain()`` when available, widened to include the orbit.
        """
        if trace is None:
            if x0 is None:
                raise ValueError("cobweb requires either x0 or trace.")
            trace = cobweb_trace(f, x0, steps)

        lo, hi = auto_domain(trace.orbit)
        domain_fn = getattr(f, "domain", None)
        if callable(domain_fn):
            d_lo, d_hi = domain_fn()
            lo, hi = min(lo, d_lo), max(hi, d_hi)
        if xlim is None:
            xlim_resolved = (lo, hi)
        else:
            xlim_resolved = (
                xlim[0] if xlim[0] is not None else lo,
                xlim[1] if xlim[1] is not None else hi,
            )
        if ylim is None:
            ylim_resolved = xlim_resolved
        else:
            ylim_resolved = (
                ylim[0] if ylim[0] is not None else xlim_resolved[0],
                ylim[1] if ylim[1] is not None else xlim_resolved[1],
            )

        xs, ys = sample_curve(f, xlim_resolved, num=samples)
        plot_ax = _get_ax(ax)
        plot_ax.plot(xs, ys, label="f(y)", **_style_kwargs(color=color, lw=lw))
        plot_ax.plot(xs, xs, linestyle="--", color=identity_color or "gray", label="identity")

        X, Y = trace.as_arrays()
        stair_kw: dict[str, Any] = {"color": stair_color or "black"}
        if stair_lw is not None:
            stair_kw["linewidth"] = float(stair_lw)
        plot_ax.plot(X, Y, **stair_kw)

        _apply_limits(plot_ax, xlim=xlim_resolved, ylim=ylim_resolved)
        if legend:
            plot_ax.legend()
        _apply_labels(plot_ax, xlabel=xlabel, ylabel=ylabel, title=title)
        return plot_ax


series = _SeriesPlot()
analysis = _AnalysisPlot()
