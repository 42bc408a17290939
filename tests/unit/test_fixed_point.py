from __future__ import annotations

import math
import warnings

import numpy as np
import pytest

from itermap.errors import NonConvergenceError, NonConvergenceWarning
from itermap.fixed_point import FixedPointResult, SolverStatus, solve
from itermap.maps import ExpressionMap, LinearMap, LogisticMap


def test_linear_map_converges_to_closed_form():
    alpha, beta = 8.0, 0.8
    result = solve(LinearMap(alpha, beta), 0.001)
    assert isinstance(result, FixedPointResult)
    assert result.status is SolverStatus.CONVERGED
    assert result.converged
    assert result.value == pytest.approx(alpha / (1.0 - beta), abs=1e-9)
    assert result.iterations < 1000
    assert result.residual <= result.tol


@pytest.mark.parametrize("y0", [-500.0, 0.001, 39.0, 1e6])
def test_linear_convergence_is_independent_of_start(y0):
    result = solve(LinearMap(8.0, 0.8), y0)
    assert result.converged
    assert result.value == pytest.approx(40.0, abs=1e-9)


def test_divergent_linear_map_is_exhausted():
    with pytest.warns(NonConvergenceWarning, match="exhausted max_iter=10000"):
        result = solve(LinearMap(8.0, 1.5), 0.001)
    assert result.status is SolverStatus.EXHAUSTED
    assert not result.converged
    assert result.iterations == result.max_iter + 1
    assert not math.isfinite(result.value) or abs(result.value) > 1e100


def test_small_cap_reports_last_iterate():
    f = LinearMap(1.0, 1.5)
    with pytest.warns(NonConvergenceWarning):
        result = solve(f, 0.0, max_iter=3)
    # f(0)=1, then four substitutions: 2.5, 4.75, 8.125, 13.1875
    assert result.iterations == 4
    assert result.value == pytest.approx(13.1875)


def test_oscillating_map_is_exhausted():
    with pytest.warns(NonConvergenceWarning):
        result = solve(LinearMap(0.0, -1.0), 1.0, max_iter=100)
    assert not result.converged
    assert abs(result.value) == pytest.approx(1.0)


def test_logistic_map_converges_to_nontrivial_fixed_point():
    r, K = 1.5, 10.0
    result = solve(LogisticMap(r, K), 0.001)
    assert result.converged
    assert result.value == pytest.approx(K * (r - 1.0) / r, abs=1e-8)
    assert result.value == pytest.approx(3.3333333333, abs=1e-8)


def test_logistic_map_below_threshold_decays_to_zero():
    result = solve(LogisticMap(0.5, 10.0), 0.001)
    assert result.converged
    assert result.value == pytest.approx(0.0, abs=1e-10)


@pytest.mark.parametrize("y0", [0.0, 3.7, -12.5])
def test_exact_fixed_start_returns_immediately(y0):
    result = solve(lambda y: y, y0)
    assert result.converged
    assert result.iterations == 0
    assert result.value == y0


def test_zero_cap_with_non_fixed_start():
    result = solve(LinearMap(8.0, 0.8), 0.0, max_iter=0, warn=False)
    assert result.status is SolverStatus.EXHAUSTED
    assert result.iterations == 1


def test_nan_never_counts_as_convergence():
    result = solve(lambda y: math.nan, 1.0, max_iter=5, warn=False)
    assert not result.converged
    assert math.isnan(result.value)


def test_warn_false_is_silent():
    with warnings.catch_warnings():
        warnings.simplefilter("error")
        result = solve(LinearMap(8.0, 1.5), 0.001, max_iter=10, warn=False)
    assert not result.converged


def test_unwrap():
    assert solve(LinearMap(8.0, 0.8), 0.0).unwrap() == pytest.approx(40.0)
    exhausted = solve(LinearMap(8.0, 1.5), 0.0, max_iter=10, warn=False)
    with pytest.raises(NonConvergenceError, match="did not converge within 11 iterations") as excinfo:
        exhausted.unwrap()
    assert excinfo.value.iterations == 11


def test_result_str():
    ok = solve(LinearMap(8.0, 0.8), 0.0)
    assert str(ok).startswith("converged to")
    bad = solve(LinearMap(8.0, 1.5), 0.0, max_iter=5, warn=False)
    assert str(bad).startswith("not converged after 6 iterations")


def test_rejects_invalid_settings():
    with pytest.raises(ValueError, match="tol"):
        solve(LinearMap(8.0, 0.8), 0.0, tol=-1e-3)
    with pytest.raises(ValueError, match="max_iter"):
        solve(LinearMap(8.0, 0.8), 0.0, max_iter=-1)
    with pytest.raises(ValueError, match="max_iter"):
        solve(LinearMap(8.0, 0.8), 0.0, max_iter=2.5)


def test_divergent_expression_map_is_exhausted():
    with pytest.warns(NonConvergenceWarning, match="no longer finite"):
        result = solve(ExpressionMap("y**2"), 2.0, max_iter=50)
    assert result.status is SolverStatus.EXHAUSTED
    assert result.iterations == 51
    assert math.isinf(result.value)


def test_numpy_overflow_raises_no_runtime_warning():
    with warnings.catch_warnings():
        warnings.simplefilter("error")
        result = solve(lambda y: np.float64(y) * 1e300, 1e10, max_iter=20, warn=False)
    assert not result.converged
    assert np.isnan(result.residual)
