from __future__ import annotations

from pathlib import Path

import pytest

from itermap import cli

DATA = Path(__file__).resolve().parents[1] / "data" / "experiments"


def _rows(out: str) -> list[str]:
    return [line for line in out.splitlines() if line]


def test_run_prints_deterministic_trajectory(capsys):
    code = cli.main(["run", str(DATA / "logistic.toml")])
    captured = capsys.readouterr()
    assert code == 0
    rows = _rows(captured.out)
    assert rows[0] == "t\ty"
    assert len(rows) == 1 + 40
    assert rows[1] == "0\t0.001"
    last = float(rows[-1].split("\t")[1])
    assert last == pytest.approx(10.0 / 3.0, abs=1e-3)


def test_run_steps_override(capsys):
    code = cli.main(["run", str(DATA / "logistic.toml"), "--steps", "3"])
    captured = capsys.readouterr()
    assert code == 0
    assert len(_rows(captured.out)) == 1 + 3


def test_run_stochastic_is_reproducible(capsys):
    path = str(DATA / "linear_noisy.toml")
    assert cli.main(["run", path]) == 0
    first = capsys.readouterr().out
    assert cli.main(["run", path]) == 0
    second = capsys.readouterr().out
    assert first == second

    rows = _rows(first)
    assert rows[0] == "t\ty\tbaseline\tnoise"
    assert len(rows) == 1 + 100
    t, y, baseline, noise = rows[5].split("\t")
    assert float(y) == pytest.approx(float(baseline) + float(noise))

    assert cli.main(["run", path, "--seed", "7"]) == 0
    assert capsys.readouterr().out != first


def test_solve_with_map_option(capsys):
    code = cli.main(
        ["solve", "--map", "linear", "--param", "alpha=8", "--param", "beta=0.8", "--y0", "0.001"]
    )
    captured = capsys.readouterr()
    assert code == 0
    value = float(captured.out.split("converged to ", 1)[1].split(" ", 1)[0])
    assert value == pytest.approx(40.0, abs=1e-9)
    assert "stability: stable" in captured.out


def test_solve_expression_map(capsys):
    code = cli.main(
        ["solve", "--map", "expr", "--expr", "y*exp(a*(1 - y))", "--param", "a=0.8", "--y0", "0.2"]
    )
    captured = capsys.readouterr()
    assert code == 0
    assert "converged to" in captured.out
    assert "stability: stable" in captured.out


def test_solve_divergent_file_reports_exhaustion(capsys):
    code = cli.main(["solve", str(DATA / "divergent.toml")])
    captured = capsys.readouterr()
    assert code == 2
    assert "not converged after 201 iterations" in captured.out


def test_solve_requires_a_target(capsys):
    code = cli.main(["solve"])
    captured = capsys.readouterr()
    assert code == 1
    assert captured.err.startswith("error:")

    code = cli.main(["solve", str(DATA / "logistic.toml"), "--map", "linear"])
    captured = capsys.readouterr()
    assert code == 1
    assert "not both" in captured.err


def test_solve_rejects_malformed_param():
    with pytest.raises(SystemExit):
        cli.main(["solve", "--map", "linear", "--param", "alpha", "--y0", "0"])


def test_missing_file_is_invalid_input(tmp_path: Path, capsys):
    code = cli.main(["run", str(tmp_path / "missing.toml")])
    captured = capsys.readouterr()
    assert code == 1
    assert "not found" in captured.err


def test_trace_prints_segments(capsys):
    code = cli.main(["trace", str(DATA / "logistic.toml")])
    captured = capsys.readouterr()
    assert code == 0
    rows = _rows(captured.out)
    assert rows[0] == "orientation\tx0\ty0\tx1\ty1"
    assert len(rows) == 1 + (1 + 2 * 12)
    assert rows[1].startswith("vertical\t0.001\t0.0\t0.001\t")
    assert rows[2].startswith("horizontal\t")


def test_plot_writes_figure(tmp_path: Path, capsys):
    out = tmp_path / "figures" / "noisy.png"
    code = cli.main(["plot", str(DATA / "linear_noisy.toml"), "--out", str(out)])
    captured = capsys.readouterr()
    assert code == 0
    assert out.exists()
    assert str(out) in captured.out


def test_run_rejects_seed_for_deterministic_experiment(capsys):
    code = cli.main(["run", str(DATA / "logistic.toml"), "--seed", "3"])
    captured = capsys.readouterr()
    assert code == 1
    assert captured.out == ""
    assert "noise_variance" in captured.err
