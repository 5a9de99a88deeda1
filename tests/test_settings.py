import pytest
from pydantic import ValidationError

from rehabpro.domain.settings import (
    DEFAULT_SETTINGS,
    CalculationSettings,
    CategoryWeightedContingency,
    ContingencyTier,
    FlatPercentContingency,
    HybridHolding,
    ItemizedSelling,
    NetProfitTarget,
    PercentageOfLoanHolding,
    RoiSettings,
    ScopeBasedContingency,
    SeventyRule,
    TieredContingency,
    settings_from_row,
    settings_to_row,
)


def test_defaults():
    s = DEFAULT_SETTINGS

    assert s.is_default is True
    assert s.mao.method == "seventy_rule"
    assert s.mao.arv_multiplier == 0.70
    assert s.roi.method == "simple"
    assert s.contingency.method == "flat_percent"
    assert s.contingency.default_percent == 10
    assert s.holding.default_monthly == 1_500
    assert s.selling.default_percent == 8
    assert s.variance_alerts.warning_percent == 5
    assert s.variance_alerts.critical_percent == 10


def test_empty_row_gives_defaults():
    s = settings_from_row({})

    assert s.mao == SeventyRule()
    assert s.contingency.default_percent == 10
    assert s.holding.method == "flat_monthly"


def test_row_round_trip_keeps_active_methods():
    original = CalculationSettings(
        name="Detroit flips",
        mao=NetProfitTarget(target_profit=40_000, include_selling_costs=False),
        roi=RoiSettings(method="irr_simplified"),
        contingency=TieredContingency(
            tiers=(ContingencyTier(max_budget=40_000, percent=14), ContingencyTier(percent=9)),
        ),
        holding=HybridHolding(default_monthly=900, include_hoa=True),
        selling=ItemizedSelling(agent_commission=4.5, fixed_amount=1_200),
    )

    back = settings_from_row(settings_to_row(original))

    assert back == original


@pytest.mark.parametrize(
    "settings",
    [
        CalculationSettings(holding=PercentageOfLoanHolding(loan_rate_annual=10)),
        CalculationSettings(contingency=ScopeBasedContingency(default_percent=12)),
    ],
)
def test_other_variants_round_trip(settings):
    assert settings_from_row(settings_to_row(settings)) == settings


def test_row_layout_uses_flat_columns():
    row = settings_to_row(DEFAULT_SETTINGS)

    assert row["mao_method"] == "seventy_rule"
    assert row["mao_arv_multiplier"] == 0.70
    assert row["contingency_default_percent"] == 10
    assert row["holding_cost_default_monthly"] == 1_500
    assert row["selling_cost_method"] == "flat_percent"


@pytest.mark.parametrize(
    "column, value",
    [
        ("mao_method", "eighty_rule"),
        ("roi_method", "payback"),
        ("contingency_method", "vibes"),
        ("holding_cost_method", "daily"),
    ],
)
def test_unknown_method_in_row_raises(column, value):
    with pytest.raises(ValueError):
        settings_from_row({column: value})


def test_unknown_method_in_payload_rejected():
    with pytest.raises(ValidationError):
        CalculationSettings.model_validate({"mao": {"method": "eighty_rule"}})


def test_nested_payload_selects_variant():
    s = CalculationSettings.model_validate(
        {"contingency": {"method": "tiered"}, "holding": {"method": "itemized"}}
    )

    assert isinstance(s.contingency, TieredContingency)
    assert s.holding.items.monthly_total() == 1_500


def test_negative_flat_contingency_rejected():
    with pytest.raises(ValidationError):
        CalculationSettings.model_validate({"contingency": {"method": "flat_percent", "default_percent": -1}})


@pytest.mark.parametrize(
    "contingency",
    [
        FlatPercentContingency(default_percent=7),
        TieredContingency(fallback_percent=5),
        TieredContingency(tiers=(ContingencyTier(max_budget=10_000, percent=20),), fallback_percent=6),
        CategoryWeightedContingency(category_rates={"kitchen": 9.0}, fallback_percent=4),
        ScopeBasedContingency(default_percent=11),
    ],
)
def test_every_contingency_variant_round_trips(contingency):
    settings = CalculationSettings(contingency=contingency)
    back = settings_from_row(settings_to_row(settings))

    assert back.contingency == contingency


def test_fallback_percent_is_a_row_column():
    row = settings_to_row(CalculationSettings(contingency=TieredContingency(fallback_percent=5)))

    assert row["contingency_fallback_percent"] == 5
    assert settings_from_row(row).contingency.fallback_percent == 5


def test_non_finite_settings_rejected():
    with pytest.raises(ValidationError):
        SeventyRule(arv_multiplier=float("nan"))
    with pytest.raises(ValidationError):
        CalculationSettings.model_validate({"holding": {"method": "flat_monthly", "default_monthly": float("inf")}})
