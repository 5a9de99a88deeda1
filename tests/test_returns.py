import math

import pytest
from hypothesis import given, strategies as st

from rehabpro.domain.returns import compute_roi, grade_profit, grade_roi, simple_roi
from rehabpro.domain.settings import ProfitThresholds, RoiThresholds

money = st.floats(min_value=-1_000_000.0, max_value=1_000_000.0, allow_nan=False, allow_infinity=False)
# at least a dollar invested (or none), at least half a month held
investment = st.one_of(
    st.just(0.0),
    st.floats(min_value=1.0, max_value=1_000_000.0),
    st.floats(min_value=-1_000_000.0, max_value=-1.0),
)
months = st.one_of(st.just(0.0), st.floats(min_value=0.5, max_value=120.0))
methods = st.sampled_from(["simple", "annualized", "cash_on_cash", "irr_simplified"])


def test_simple_roi():
    assert simple_roi(214_000, 16_000) == pytest.approx(7.4766, abs=1e-4)


def test_simple_roi_zero_investment():
    assert simple_roi(0, 16_000) == 0.0


def test_annualized_roi():
    assert compute_roi("annualized", 214_000, 16_000, 4) == pytest.approx(22.43, abs=0.01)


def test_annualized_roi_zero_months_is_zero():
    assert compute_roi("annualized", 214_000, 16_000, 0) == 0.0


def test_cash_on_cash_uses_cash_in_deal():
    got = compute_roi("cash_on_cash", 214_000, 16_000, 4, financed_amount=100_000)
    assert got == pytest.approx(16_000 / 114_000 * 100)


def test_cash_on_cash_fully_financed_is_zero():
    assert compute_roi("cash_on_cash", 214_000, 16_000, 4, financed_amount=214_000) == 0.0


def test_irr_simplified_compounds():
    expected = ((1 + 16_000 / 214_000) ** 3 - 1) * 100
    assert compute_roi("irr_simplified", 214_000, 16_000, 4) == pytest.approx(expected)


def test_irr_simplified_total_loss():
    assert compute_roi("irr_simplified", 100_000, -100_000, 6) == -100.0


def test_unknown_method_raises():
    with pytest.raises(ValueError):
        compute_roi("payback", 100_000, 10_000, 6)  # type: ignore[arg-type]


@given(method=methods, ti=investment, gp=money, hm=months, fin=st.floats(min_value=0, max_value=1_000_000))
def test_roi_is_always_finite(method, ti, gp, hm, fin):
    assert math.isfinite(compute_roi(method, ti, gp, hm, financed_amount=fin))


@pytest.mark.parametrize(
    "roi, grade",
    [(30, "excellent"), (25, "excellent"), (20, "good"), (12, "fair"), (7.5, "poor"), (2, "bad")],
)
def test_grade_roi(roi, grade):
    assert grade_roi(roi, RoiThresholds()) == grade


def test_grade_profit_takes_weaker_band():
    t = ProfitThresholds()
    # 60k dollars is excellent, but 60k on 600k ARV is 10%: fair
    assert grade_profit(60_000, 600_000, t) == "fair"
    assert grade_profit(60_000, 250_000, t) == "excellent"
    assert grade_profit(40_000, 250_000, t) == "good"


def test_grade_profit_below_floor():
    t = ProfitThresholds()
    assert grade_profit(16_000, 250_000, t) == "poor"
    assert grade_profit(-5_000, 250_000, t) == "bad"
    assert grade_profit(0, 250_000, t) == "bad"
