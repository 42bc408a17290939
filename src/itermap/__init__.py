# src/itermap/__init__.py
from __future__ import annotations

from .errors import (
    ItermapError, InvalidStepCount, MapDefinitionError, NonConvergenceError,
    ConfigError, NonConvergenceWarning,
)
from .maps import (
    MapFunction, LinearMap, LogisticMap, ExpressionMap,
    linear_map, logistic_map, make_map,
)
from .trajectory import Trajectory, generate, generate_stochastic, noise_series
from .cobweb import CobwebSegment, CobwebTrace, iter_trace, trace
from .fixed_point import SolverStatus, FixedPointResult, solve
from .stability import StabilityReport, stability, symbolic_derivative
from .config import ExperimentConfig, load_experiment

__version__ = "0.1.0"

__all__ = [
    # Maps
    "MapFunction", "LinearMap", "LogisticMap", "ExpressionMap",
    "linear_map", "logistic_map", "make_map",
    # Core engine
    "Trajectory", "generate", "generate_stochastic", "noise_series",
    "CobwebSegment", "CobwebTrace", "iter_trace", "trace",
    "SolverStatus", "FixedPointResult", "solve",
    # Analysis
    "StabilityReport", "stability", "symbolic_derivative",
    # Config
    "ExperimentConfig", "load_experiment",
    # Errors
    "ItermapError", "InvalidStepCount", "MapDefinitionError", "NonConvergenceError",
    "ConfigError", "NonConvergenceWarning",
]
