# src/itermap/plot/_export.py
from __future__ import annotations

from pathlib import Path
from typing import Sequence

import matplotlib.pyplot as plt

__all__ = ["savefig", "show"]


def _as_fig(obj) -> plt.Figure:
    if hasattr(obj, "figure") and obj.figure is not None:
        return obj.figure  # Axes -> Figure
    return obj


def savefig(
    fig_or_ax,
    path: str | Path,
    *,
    fmts: Sequence[str] | None = None,
    dpi: int = 150,
    transparent: bool = False,
    bbox_inches: str | None = "tight",
) -> list[Path]:
    """
    Save a figure (or an axes' figure).

    ``path`` with a suffix ("plot.pdf") writes that one format; a bare path
    writes ``<path>.<fmt>`` for each entry of ``fmts`` (default png).
    Giving both a suffix and ``fmts`` is rejected. Returns the written paths.
    """
    fig = _as_fig(fig_or_ax)
    target = Path(path)

    if target.suffix:
        if fmts is not None:
            raise ValueError("Pass either a path with an extension or fmts, not both.")
        norm_fmts = [target.suffix.lstrip(".").lower()]
        target = target.with_suffix("")
    else:
        # lower-case, dedupe, keep order
        norm_fmts = []
        for fmt in fmts or ("png",):
            f2 = str(fmt).lower().lstrip(".")
            if f2 and f2 not in norm_fmts:
                norm_fmts.append(f2)
        if not norm_fmts:
            raise ValueError("fmts must contain at least one non-empty format.")

    target.parent.mkdir(parents=True, exist_ok=True)
    written: list[Path] = []
    for fmt in norm_fmts:
        outfile = target.with_suffix(f".{fmt}")
        fig.savefig(outfile, dpi=dpi, transparent=transparent, bbox_inches=bbox_inches)
        written.append(outfile)
    return written


def show() -> None:
    plt.show()
