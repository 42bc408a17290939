# src/itermap/plot/__init__.py
from __future__ import annotations

from typing import TYPE_CHECKING

from ._primitives import series, analysis
from . import _export as export

if TYPE_CHECKING:
    from ._primitives import _SeriesPlot as _SeriesPlot  # type: ignore
    from ._primitives import _AnalysisPlot as _AnalysisPlot  # type: ignore

    series: _SeriesPlot
    analysis: _AnalysisPlot

cobweb = analysis.cobweb
hist = analysis.hist
savefig = export.savefig

__all__ = [
    "series",
    "analysis",
    "export",
    "cobweb",
    "hist",
    "savefig",
]
