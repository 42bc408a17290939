# src/itermap/cli.py
"""
Command line entry point.

    itermap run experiment.toml
    itermap solve experiment.toml
    itermap solve --map linear --param alpha=8 --param beta=0.8 --y0 0.001
    itermap trace experiment.toml --steps 5
    itermap plot experiment.toml --out figures/logistic.png

Exit status: 0 on success, 1 on invalid input, 2 when the fixed-point solver
exhausts its iteration cap.
"""

from __future__ import annotations

import argparse
import sys
from typing import Sequence

from .config import ExperimentConfig, load_experiment
from .cobweb import trace
from .errors import ConfigError, ItermapError, MapDefinitionError
from .fixed_point import DEFAULT_MAX_ITER, DEFAULT_TOL, solve
from .maps import make_map, map_kinds
from .stability import stability
from .trajectory import generate, generate_stochastic

__all__ = ["main", "build_parser"]

EXIT_OK = 0
EXIT_INVALID = 1
EXIT_NOT_CONVERGED = 2


def _parse_param(text: str) -> tuple[str, float]:
    name, sep, value = text.partition("=")
    if not sep or not name:
        raise argparse.ArgumentTypeError(f"expected NAME=VALUE, got {text!r}")
    try:
        return name.strip(), float(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"value of {name!r} must be a number, got {value!r}") from None


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="itermap", description="Iterate one-dimensional maps.")
    sub = parser.add_subparsers(dest="command", required=True)

    p_run = sub.add_parser("run", help="print the trajectory of an experiment")
    p_run.add_argument("file")
    p_run.add_argument("--steps", type=int, default=None, help="override [run].steps")
    p_run.add_argument(
        "--seed", type=int, default=None,
        help="override [run].seed; only for experiments with [run].noise_variance",
    )

    p_solve = sub.add_parser("solve", help="find a fixed point by successive substitution")
    p_solve.add_argument("file", nargs="?")
    p_solve.add_argument("--map", dest="kind", choices=map_kinds(), default=None)
    p_solve.add_argument("--param", type=_parse_param, action="append", default=[], metavar="NAME=VALUE")
    p_solve.add_argument("--expr", default=None, help="expression for --map expr")
    p_solve.add_argument("--var", default="y", help="state variable of --expr")
    p_solve.add_argument("--y0", type=float, default=None)
    p_solve.add_argument("--tol", type=float, default=None)
    p_solve.add_argument("--max-iter", dest="max_iter", type=int, default=None)

    p_trace = sub.add_parser("trace", help="print the cobweb segments of an experiment")
    p_trace.add_argument("file")
    p_trace.add_argument("--steps", type=int, default=None, help="override [cobweb].steps")

    p_plot = sub.add_parser("plot", help="render time series and cobweb diagram")
    p_plot.add_argument("file")
    p_plot.add_argument("--out", required=True, help="output path; the extension selects the format")
    return parser


# ----------------------------------------------------------------------------
# Commands
# ----------------------------------------------------------------------------

def _cmd_run(args, cfg: ExperimentConfig) -> int:
    steps = args.steps if args.steps is not None else cfg.run.steps
    if args.seed is not None and not cfg.run.stochastic:
        raise ConfigError("--seed needs a stochastic run; set [run].noise_variance", path=cfg.source)
    if cfg.run.stochastic:
        seed = args.seed if args.seed is not None else cfg.run.seed
        traj = generate_stochastic(cfg.map, cfg.run.y0, steps, cfg.run.noise_variance, seed=seed)
        print("t\ty\tbaseline\tnoise")
        for t, (y, b, e) in enumerate(zip(traj.states.tolist(), traj.baseline.tolist(), traj.noise.tolist())):
            print(f"{t}\t{y!r}\t{b!r}\t{e!r}")
    else:
        traj = generate(cfg.map, cfg.run.y0, steps)
        print("t\ty")
        for t, y in enumerate(traj.states.tolist()):
            print(f"{t}\t{y!r}")
    return EXIT_OK


def _solve_target(args):
    if args.file is not None:
        if args.kind is not None:
            raise MapDefinitionError("Pass either an experiment file or --map, not both.")
        cfg = load_experiment(args.file)
        y0 = args.y0 if args.y0 is not None else cfg.run.y0
        tol = args.tol if args.tol is not None else cfg.solve.tol
        max_iter = args.max_iter if args.max_iter is not None else cfg.solve.max_iter
        return cfg.map, y0, tol, max_iter

    if args.kind is None:
        raise MapDefinitionError("solve requires an experiment file or --map.")
    params = dict(args.param)
    if args.kind == "expr":
        if args.expr is None:
            raise MapDefinitionError("--map expr requires --expr.")
        f = make_map("expr", expr=args.expr, var=args.var, params=params)
    else:
        f = make_map(args.kind, **params)
    if args.y0 is None:
        raise MapDefinitionError("solve with --map requires --y0.")
    tol = args.tol if args.tol is not None else DEFAULT_TOL
    max_iter = args.max_iter if args.max_iter is not None else DEFAULT_MAX_ITER
    return f, args.y0, tol, max_iter


def _cmd_solve(args) -> int:
    f, y0, tol, max_iter = _solve_target(args)
    result = solve(f, y0, tol=tol, max_iter=max_iter, warn=False)
    print(result)
    if not result.converged:
        return EXIT_NOT_CONVERGED
    report = stability(f, result.value)
    print(f"stability: {report.label} (|f'(y*)| = {report.multiplier:.6g})")
    return EXIT_OK


def _cmd_trace(args, cfg: ExperimentConfig) -> int:
    steps = args.steps if args.steps is not None else cfg.cobweb.steps
    tr = trace(cfg.map, cfg.run.y0, steps)
    print("orientation\tx0\ty0\tx1\ty1")
    for seg in tr:
        print(f"{seg.orientation}\t{float(seg.x0)!r}\t{float(seg.y0)!r}\t{float(seg.x1)!r}\t{float(seg.y1)!r}")
    return EXIT_OK


def _cmd_plot(args, cfg: ExperimentConfig) -> int:
    import matplotlib

    matplotlib.use("Agg")
    import matplotlib.pyplot as plt

    from . import plot

    if cfg.run.stochastic:
        traj = generate_stochastic(cfg.map, cfg.run.y0, cfg.run.steps, cfg.run.noise_variance, seed=cfg.run.seed)
    else:
        traj = generate(cfg.map, cfg.run.y0, cfg.run.steps)

    ncols = 3 if traj.stochastic else 2
    fig, axes = plt.subplots(1, ncols, figsize=(5.0 * ncols, 4.0), layout="constrained")
    try:
        plot.series.plot(traj, ax=axes[0], title="Trajectory")
        plot.cobweb(
            f=cfg.map,
            x0=cfg.run.y0,
            steps=cfg.cobweb.steps,
            xlim=cfg.cobweb.domain,
            ax=axes[1],
            title="Cobweb diagram",
        )
        if traj.stochastic:
            plot.hist(traj, ax=axes[2], xlabel="noise", title="Noise series")
        written = plot.savefig(fig, args.out)
    finally:
        plt.close(fig)
    for path in written:
        print(path)
    return EXIT_OK


def main(argv: Sequence[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    try:
        if args.command == "solve":
            return _cmd_solve(args)
        cfg = load_experiment(args.file)
        if args.command == "run":
            return _cmd_run(args, cfg)
        if args.command == "trace":
            return _cmd_trace(args, cfg)
        return _cmd_plot(args, cfg)
    except ItermapError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return EXIT_INVALID
