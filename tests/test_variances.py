# tests/test_variances.py
import pytest
from hypothesis import given, strategies as st

from rehabpro.domain.budget import BudgetLineItem, compute_variances

amounts = st.floats(min_value=0.0, max_value=1_000_000.0, allow_nan=False, allow_infinity=False)


def test_actual_compares_to_forecast_when_forecast_exists():
    v = compute_variances(underwriting=10_000.0, forecast=12_000.0, actual=12_500.0)

    assert v.forecast_variance == pytest.approx(2_000.0)
    assert v.actual_variance == pytest.approx(500.0)
    assert v.total_variance == pytest.approx(2_500.0)


def test_actual_falls_back_to_underwriting_without_forecast():
    v = compute_variances(underwriting=10_000.0, forecast=0.0, actual=9_000.0)

    assert v.forecast_variance == pytest.approx(-10_000.0)
    assert v.actual_variance == pytest.approx(-1_000.0)
    assert v.total_variance == pytest.approx(-1_000.0)


def test_missing_values_count_as_zero():
    v = compute_variances(underwriting=None, forecast=None, actual=None)

    assert v.forecast_variance == 0.0
    assert v.actual_variance == 0.0
    assert v.total_variance == 0.0


def test_no_actual_yet_shows_unspent_budget():
    v = compute_variances(underwriting=5_000.0, forecast=6_000.0)

    assert v.actual_variance == pytest.approx(-6_000.0)
    assert v.total_variance == pytest.approx(-5_000.0)


@given(uw=amounts, fc=amounts, act=amounts)
def test_total_variance_ignores_forecast(uw, fc, act):
    v = compute_variances(uw, fc, act)

    assert v.total_variance == act - uw


@given(uw=amounts, fc=amounts, act=st.one_of(st.none(), amounts))
def test_line_item_variances_track_amounts(uw, fc, act):
    li = BudgetLineItem(
        category="demo",
        item="Haul-off",
        underwriting_amount=uw,
        forecast_amount=fc,
        actual_amount=act,
    )

    expected = compute_variances(uw, fc, act)
    assert li.forecast_variance == expected.forecast_variance
    assert li.actual_variance == expected.actual_variance
    assert li.total_variance == expected.total_variance
    assert li.budget_amount == (fc if fc > 0 else uw)
