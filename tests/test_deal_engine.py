# tests/test_deal_engine.py
import pytest

from .fixtures.deals import cheap_buy, lead_stage, marginal_flip, overpriced

from rehabpro.domain.inputs import FinancialInputs
from rehabpro.domain.settings import (
    DEFAULT_SETTINGS,
    CalculationSettings,
    CategoryWeightedContingency,
    GrossMargin,
    ItemizedSelling,
    RoiSettings,
    TieredContingency,
)
from rehabpro.services.deal_engine import compute_deal_report, simple_settings


def test_quick_calculator_numbers():
    r = compute_deal_report(marginal_flip())

    assert r.contingency == pytest.approx(5_000)
    assert r.rehab_with_contingency == pytest.approx(55_000)
    assert r.holding_costs == pytest.approx(6_000)
    assert r.selling_costs == pytest.approx(20_000)
    assert r.total_investment == pytest.approx(214_000)
    assert r.gross_profit == pytest.approx(16_000)
    assert r.roi == pytest.approx(7.4766, abs=1e-4)
    # 175k - 55k - 6k - 3k; selling costs stay out of the quick MAO
    assert r.mao == pytest.approx(111_000)
    assert r.spread == pytest.approx(-39_000)
    assert r.deal_quality == "marginal"
    assert r.deal_label == "Marginal Deal"


def test_quick_calculator_grades_and_risk():
    r = compute_deal_report(marginal_flip())

    assert r.roi_grade == "poor"
    assert r.profit_grade == "poor"
    assert r.ratios.rehab_to_arv == pytest.approx(22.0)
    assert r.ratios.purchase_to_arv == pytest.approx(60.0)
    assert r.profit_margin == pytest.approx(6.4)
    assert r.risk_level == "medium"


def test_same_inputs_same_report():
    assert compute_deal_report(marginal_flip()) == compute_deal_report(marginal_flip())


@pytest.mark.parametrize(
    "inputs, quality",
    [
        (cheap_buy(), "good"),
        (marginal_flip(), "marginal"),
        (overpriced(), "bad"),
    ],
)
def test_deal_quality(inputs, quality):
    assert compute_deal_report(inputs).deal_quality == quality


def test_lead_stage_has_no_spread_or_sensitivity():
    r = compute_deal_report(lead_stage())

    assert r.spread is None
    assert r.sensitivity is None
    assert r.deal_quality == "marginal"  # profitable on paper, no price yet
    assert r.ratios.purchase_to_arv == 0.0


def test_missing_arv_zeroes_ratios():
    r = compute_deal_report(FinancialInputs(purchase_price=100_000, rehab_budget=20_000))

    assert r.ratios.rehab_to_arv == 0.0
    assert r.deal_quality == "bad"


def test_sensitivity_scenarios():
    s = compute_deal_report(marginal_flip()).sensitivity
    assert s is not None

    assert s.arv_down_5.gross_profit == pytest.approx(4_500)
    assert s.arv_down_5.profit_change == pytest.approx(-11_500)
    assert s.arv_down_10.gross_profit == pytest.approx(-7_000)
    assert s.arv_down_10.profit_change == pytest.approx(-23_000)
    assert s.rehab_up_10.gross_profit == pytest.approx(10_500)
    assert s.rehab_up_10.profit_change == pytest.approx(-5_500)
    assert s.rehab_up_20.gross_profit == pytest.approx(5_000)
    assert s.rehab_up_20.profit_change == pytest.approx(-11_000)


def test_break_even_and_max_purchase():
    s = compute_deal_report(marginal_flip()).sensitivity
    assert s is not None

    assert s.break_even_arv == pytest.approx(214_000 / 0.92)
    # (230k - 55k - 3k - 6k) / 1.2
    assert s.max_purchase_for_target == pytest.approx(166_000 / 1.2)
    assert s.target_roi == 20.0


def test_break_even_arv_really_breaks_even():
    inputs = marginal_flip()
    s = compute_deal_report(inputs).sensitivity
    at_break_even = compute_deal_report(inputs.model_copy(update={"arv": s.break_even_arv}))

    assert at_break_even.gross_profit == pytest.approx(0.0, abs=1e-6)


def test_target_roi_is_configurable():
    s = compute_deal_report(marginal_flip(), target_roi=10.0).sensitivity
    assert s.max_purchase_for_target == pytest.approx(166_000 / 1.1)


def test_default_profile_overrides_scalar_fields():
    # default profile: seventy rule with selling included, flat 10%, 1500/mo, 8%
    r = compute_deal_report(marginal_flip(), DEFAULT_SETTINGS)

    assert r.total_investment == pytest.approx(214_000)
    assert r.mao == pytest.approx(91_000)


def test_profile_methods_drive_every_calculator():
    settings = CalculationSettings(
        name="Conservative",
        mao=GrossMargin(target_profit_percent=20),
        roi=RoiSettings(method="annualized"),
        contingency=TieredContingency(),
        selling=ItemizedSelling(fixed_amount=500),
    )
    r = compute_deal_report(marginal_flip(), settings)

    # 50k falls in the 12% tier
    assert r.contingency == pytest.approx(6_000)
    # 8% of 250k + 500
    assert r.selling_costs == pytest.approx(20_500)
    assert r.total_investment == pytest.approx(150_000 + 56_000 + 3_000 + 6_000)
    assert r.gross_profit == pytest.approx(250_000 - 215_000 - 20_500)
    assert r.roi == pytest.approx(14_500 / 215_000 * 100 * 3)
    # 250k * 0.8 - (56k + 6k + 20.5k + 3k)
    assert r.mao == pytest.approx(114_500)


def test_rehab_shock_scales_category_budgets():
    inputs = marginal_flip().model_copy(
        update={"category_budgets": {"plumbing": 20_000.0, "kitchen": 30_000.0}}
    )
    settings = CalculationSettings(contingency=CategoryWeightedContingency())
    r = compute_deal_report(inputs, settings)

    # 12% of 20k + 10% of 30k
    assert r.contingency == pytest.approx(5_400)
    # +10% on rehab also lifts the weighted contingency by 10%
    assert r.gross_profit - r.sensitivity.rehab_up_10.gross_profit == pytest.approx(5_000 + 540)


def test_simple_settings_mirror_scalar_fields():
    s = simple_settings(marginal_flip())

    assert s.contingency.default_percent == 10
    assert s.holding.default_monthly == 1_500
    assert s.selling.default_percent == 8
    assert s.mao.include_selling_costs is False


def test_report_to_dict_carries_presentation_fields():
    d = compute_deal_report(marginal_flip()).to_dict()

    assert d["deal_label"] == "Marginal Deal"
    assert d["profit_margin"] == pytest.approx(6.4)
    assert d["sensitivity"]["arv_down_5"]["label"] == "ARV -5%"
    assert d["mao_targets"][0]["label"] == "70% rule"


def test_budget_overrun_raises_risk():
    base = compute_deal_report(cheap_buy())
    over = compute_deal_report(cheap_buy(), budget_variance_pct=15.0)

    order = ["low", "medium", "high"]
    assert order.index(over.risk_level) >= order.index(base.risk_level)
