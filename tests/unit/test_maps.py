from __future__ import annotations

import dataclasses
import math

import numpy as np
import pytest

from itermap.errors import MapDefinitionError
from itermap.maps import (
    ExpressionMap,
    LinearMap,
    LogisticMap,
    MapFunction,
    linear_map,
    logistic_map,
    make_map,
    map_kinds,
)


def test_linear_map_evaluates_affine_rule():
    f = LinearMap(alpha=8.0, beta=0.8)
    assert f(10.0) == pytest.approx(16.0)
    assert f(0.0) == pytest.approx(8.0)


def test_logistic_map_evaluates_growth_rule():
    f = LogisticMap(r=1.5, K=10.0)
    assert f(2.0) == pytest.approx(2.4)
    assert f(10.0) == pytest.approx(0.0)


def test_maps_accept_out_of_domain_inputs():
    f = LogisticMap(r=1.5, K=10.0)
    assert f(-1.0) == pytest.approx(-1.65)
    assert f(20.0) == pytest.approx(-30.0)


def test_overflow_is_not_guarded():
    f = LinearMap(alpha=0.0, beta=1e308)
    assert math.isinf(f(10.0))


def test_maps_are_immutable():
    f = LinearMap(alpha=1.0, beta=2.0)
    with pytest.raises(dataclasses.FrozenInstanceError):
        f.alpha = 3.0  # type: ignore[misc]


def test_maps_satisfy_protocol():
    assert isinstance(LinearMap(1.0, 0.5), MapFunction)
    assert isinstance(LogisticMap(2.0), MapFunction)


def test_closed_form_fixed_points():
    (p,) = LinearMap(alpha=8.0, beta=0.8).fixed_points()
    assert p == pytest.approx(40.0)
    assert LinearMap(alpha=1.0, beta=1.0).fixed_points() == ()

    zero, nontrivial = LogisticMap(r=1.5, K=10.0).fixed_points()
    assert zero == 0.0
    assert nontrivial == pytest.approx(10.0 / 3.0)
    assert LogisticMap(r=0.0, K=10.0).fixed_points() == (0.0,)


def test_analytic_derivatives():
    assert LinearMap(alpha=8.0, beta=0.8).derivative(123.0) == pytest.approx(0.8)
    f = LogisticMap(r=1.5, K=10.0)
    assert f.derivative(0.0) == pytest.approx(1.5)
    assert f.derivative(10.0 / 3.0) == pytest.approx(0.5)


def test_default_domains():
    assert LogisticMap(r=2.0, K=10.0).domain() == (0.0, 10.0)
    assert LinearMap(alpha=8.0, beta=0.8).domain() == pytest.approx((0.0, 80.0))
    lo, hi = LinearMap(alpha=1.0, beta=1.0).domain()
    assert lo < hi


def test_helper_constructors_coerce_to_float():
    f = linear_map(8, 1)
    assert isinstance(f.alpha, float) and isinstance(f.beta, float)
    g = logistic_map(3)
    assert g.K == 1.0


def test_make_map_builds_registered_kinds():
    assert set(map_kinds()) == {"linear", "logistic", "expr"}
    assert make_map("linear", alpha=8, beta=0.8) == LinearMap(8.0, 0.8)
    assert make_map("logistic", r=1.5, K=10) == LogisticMap(1.5, 10.0)


def test_make_map_rejects_unknown_kind():
    with pytest.raises(MapDefinitionError, match="Unknown map kind"):
        make_map("tent", mu=2.0)


def test_make_map_rejects_missing_parameters():
    with pytest.raises(MapDefinitionError, match="requires parameter"):
        make_map("linear", alpha=1.0)


def test_make_map_rejects_non_numeric_parameters():
    with pytest.raises(MapDefinitionError, match="must be a number"):
        make_map("logistic", r="fast")
    with pytest.raises(MapDefinitionError, match="must be a number"):
        make_map("linear", alpha=True, beta=0.5)


def test_make_map_rejects_unexpected_parameters():
    with pytest.raises(MapDefinitionError, match="Invalid parameters"):
        make_map("linear", alpha=1.0, beta=0.5, gamma=2.0)


def test_expression_map_evaluates_and_differentiates():
    f = ExpressionMap("a*y*(1 - y)", params={"a": 2.0})
    assert f(0.25) == pytest.approx(0.375)
    assert f.derivative(0.25) == pytest.approx(1.0)
    assert f.fixed_points() == pytest.approx((0.0, 0.5))


def test_expression_map_custom_variable():
    f = make_map("expr", expr="c + x/2", var="x", params={"c": 1.0})
    assert f(4.0) == pytest.approx(3.0)


def test_expression_map_rejects_unbound_symbols():
    with pytest.raises(MapDefinitionError, match="unbound symbols"):
        ExpressionMap("a*y")


def test_expression_map_rejects_unparsable_expression():
    with pytest.raises(MapDefinitionError, match="Cannot parse"):
        ExpressionMap("y**")


def test_expression_map_overflow_yields_inf():
    f = ExpressionMap("y**2")
    g = ExpressionMap("y**3")
    with np.errstate(over="ignore"):
        assert math.isinf(f(1e200))
        assert math.isinf(f.derivative(1e200))
        assert math.isinf(g.derivative(1e200))
    assert math.isnan(f(math.nan))


def test_expression_map_is_hashable_value():
    a = ExpressionMap("a*y", params={"a": 2.0}, bounds=[0, 5])
    b = ExpressionMap("a*y", params={"a": 2.0}, bounds=(0.0, 5.0))
    assert a == b
    assert hash(a) == hash(b)
    assert len({a, b, ExpressionMap("2*y")}) == 2
    assert a != ExpressionMap("a*y", params={"a": 3.0}, bounds=(0.0, 5.0))
