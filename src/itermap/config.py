# src/itermap/config.py
"""
Experiment files (TOML).

    [map]
    kind = "logistic"        # "linear" | "logistic" | "expr"
    r = 1.5
    K = 10.0

    [run]
    y0 = 0.001
    steps = 50
    noise_variance = 0.1     # optional
    seed = 1                 # optional

    [solve]                  # optional
    tol = 1e-11
    max_iter = 10000

    [cobweb]                 # optional
    steps = 20
    domain = [0.0, 10.0]     # optional

For ``kind = "expr"`` the map table takes ``expr``, optional ``var`` and a
``[map.params]`` sub-table.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Mapping
import tomllib

from .errors import ConfigError, MapDefinitionError
from .fixed_point import DEFAULT_MAX_ITER, DEFAULT_TOL
from .maps import make_map

__all__ = [
    "RunConfig",
    "SolveConfig",
    "CobwebConfig",
    "ExperimentConfig",
    "load_experiment",
    "parse_experiment",
]

_KNOWN_TABLES = {"map", "run", "solve", "cobweb"}


@dataclass(frozen=True)
class RunConfig:
    y0: float
    steps: int
    noise_variance: float | None = None
    seed: int | None = None

    @property
    def stochastic(self) -> bool:
        return self.noise_variance is not None


@dataclass(frozen=True)
class SolveConfig:
    tol: float = DEFAULT_TOL
    max_iter: int = DEFAULT_MAX_ITER


@dataclass(frozen=True)
class CobwebConfig:
    steps: int = 20
    domain: tuple[float, float] | None = None


@dataclass(frozen=True)
class ExperimentConfig:
    map: Any
    run: RunConfig
    solve: SolveConfig = SolveConfig()
    cobweb: CobwebConfig = CobwebConfig()
    source: Path | None = None


# ----------------------------------------------------------------------------
# Table readers
# ----------------------------------------------------------------------------

def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _table(data: Mapping[str, Any], name: str, *, required: bool) -> Dict[str, Any] | None:
    if name not in data:
        if required:
            raise ConfigError(f"missing required table [{name}]")
        return None
    tbl = data[name]
    if not isinstance(tbl, dict):
        raise ConfigError(f"[{name}] must be a table")
    return tbl


def _reject_unknown(tbl: Mapping[str, Any], name: str, allowed: set[str]) -> None:
    unknown = sorted(set(tbl) - allowed)
    if unknown:
        raise ConfigError(f"[{name}] has unknown key(s) {unknown}; allowed: {sorted(allowed)}")


def _read_map(tbl: Dict[str, Any]):
    kind = tbl.get("kind")
    if not isinstance(kind, str):
        raise ConfigError("[map].kind must be a string")
    params = {k: v for k, v in tbl.items() if k != "kind"}
    if kind == "expr":
        _reject_unknown(params, "map", {"expr", "var", "params", "domain"})
        if "params" in params and not isinstance(params["params"], dict):
            raise ConfigError("[map.params] must be a table")
        if "domain" in params:
            params["bounds"] = _read_domain(params.pop("domain"), "map")
    try:
        return make_map(kind, **params)
    except MapDefinitionError as exc:
        raise ConfigError(f"[map]: {exc}") from None


def _read_domain(value: Any, table: str) -> tuple[float, float]:
    if (
        not isinstance(value, list)
        or len(value) != 2
        or not all(_is_number(v) for v in value)
        or not float(value[0]) < float(value[1])
    ):
        raise ConfigError(f"[{table}].domain must be [lo, hi] with lo < hi")
    return (float(value[0]), float(value[1]))


def _read_run(tbl: Dict[str, Any]) -> RunConfig:
    _reject_unknown(tbl, "run", {"y0", "steps", "noise_variance", "seed"})
    y0 = tbl.get("y0")
    if not _is_number(y0):
        raise ConfigError("[run].y0 must be a number")
    steps = tbl.get("steps")
    if not _is_int(steps) or steps < 1:
        raise ConfigError("[run].steps must be an integer >= 1")
    var = tbl.get("noise_variance")
    if var is not None and (not _is_number(var) or var < 0):
        raise ConfigError("[run].noise_variance must be a number >= 0")
    seed = tbl.get("seed")
    if seed is not None and (not _is_int(seed) or seed < 0):
        raise ConfigError("[run].seed must be a non-negative integer")
    return RunConfig(
        y0=float(y0),
        steps=int(steps),
        noise_variance=None if var is None else float(var),
        seed=seed,
    )


def _read_solve(tbl: Dict[str, Any] | None) -> SolveConfig:
    if tbl is None:
        return SolveConfig()
    _reject_unknown(tbl, "solve", {"tol", "max_iter"})
    tol = tbl.get("tol", DEFAULT_TOL)
    if not _is_number(tol) or tol < 0:
        raise ConfigError("[solve].tol must be a number >= 0")
    max_iter = tbl.get("max_iter", DEFAULT_MAX_ITER)
    if not _is_int(max_iter) or max_iter < 0:
        raise ConfigError("[solve].max_iter must be a non-negative integer")
    return SolveConfig(tol=float(tol), max_iter=int(max_iter))


def _read_cobweb(tbl: Dict[str, Any] | None) -> CobwebConfig:
    if tbl is None:
        return CobwebConfig()
    _reject_unknown(tbl, "cobweb", {"steps", "domain"})
    steps = tbl.get("steps", CobwebConfig.steps)
    if not _is_int(steps) or steps < 1:
        raise ConfigError("[cobweb].steps must be an integer >= 1")
    domain = tbl.get("domain")
    return CobwebConfig(
        steps=int(steps),
        domain=None if domain is None else _read_domain(domain, "cobweb"),
    )


# ----------------------------------------------------------------------------
# Public API
# ----------------------------------------------------------------------------

def parse_experiment(data: Mapping[str, Any], source: Path | None = None) -> ExperimentConfig:
    """Validate an already-decoded TOML mapping into an ExperimentConfig."""
    try:
        unknown = sorted(set(data) - _KNOWN_TABLES)
        if unknown:
            raise ConfigError(f"unknown table(s) {unknown}; allowed: {sorted(_KNOWN_TABLES)}")
        return ExperimentConfig(
            map=_read_map(_table(data, "map", required=True)),
            run=_read_run(_table(data, "run", required=True)),
            solve=_read_solve(_table(data, "solve", required=False)),
            cobweb=_read_cobweb(_table(data, "cobweb", required=False)),
            source=source,
        )
    except ConfigError as exc:
        if source is None or exc.path is not None:
            raise
        raise ConfigError(str(exc), path=source) from None


def load_experiment(path: str | Path) -> ExperimentConfig:
    """Read and validate an experiment TOML file."""
    p = Path(path)
    try:
        with open(p, "rb") as fh:
            data = tomllib.load(fh)
    except FileNotFoundError:
        raise ConfigError("experiment file not found", path=p) from None
    except tomllib.TOMLDecodeError as exc:
        raise ConfigError(f"invalid TOML: {exc}", path=p) from None
    return parse_experiment(data, source=p)
