# src/rehabpro/domain/settings.py
from __future__ import annotations

from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

# Budget categories, in the order the budget table shows them
BUDGET_CATEGORIES = (
    "soft_costs",
    "demo",
    "structural",
    "plumbing",
    "hvac",
    "electrical",
    "insulation_drywall",
    "interior_paint",
    "flooring",
    "tile",
    "kitchen",
    "bathrooms",
    "doors_windows",
    "interior_trim",
    "exterior",
    "landscaping",
    "finishing",
    "contingency",
)

DEFAULT_CATEGORY_RATES: dict[str, float] = {
    "soft_costs": 5,
    "demo": 10,
    "structural": 15,
    "plumbing": 12,
    "hvac": 12,
    "electrical": 12,
    "insulation_drywall": 10,
    "interior_paint": 8,
    "flooring": 8,
    "tile": 10,
    "kitchen": 10,
    "bathrooms": 12,
    "doors_windows": 8,
    "interior_trim": 8,
    "exterior": 12,
    "landscaping": 8,
    "finishing": 5,
    "contingency": 0,
}

# Rate used whenever a tier or category lookup comes up empty
FALLBACK_CONTINGENCY_PERCENT = 10.0


def _non_negative(v: float, name: str) -> float:
    if v < 0:
        raise ValueError(f"{name} must be non-negative")
    return v


# --------------------------------------------
# MAO methods
# --------------------------------------------

class _MaoBase(BaseModel):
    model_config = ConfigDict(frozen=True, allow_inf_nan=False)

    include_holding_costs: bool = True
    include_selling_costs: bool = True
    include_closing_costs: bool = True


class SeventyRule(_MaoBase):
    method: Literal["seventy_rule"] = "seventy_rule"
    arv_multiplier: float = 0.70


class CustomPercentage(_MaoBase):
    method: Literal["custom_percentage"] = "custom_percentage"
    arv_multiplier: float = 0.70


class ArvMinusAll(_MaoBase):
    method: Literal["arv_minus_all"] = "arv_minus_all"
    target_profit: float = 30_000.0


class NetProfitTarget(_MaoBase):
    method: Literal["net_profit_target"] = "net_profit_target"
    target_profit: float = 30_000.0


class GrossMargin(_MaoBase):
    method: Literal["gross_margin"] = "gross_margin"
    target_profit_percent: float = 15.0


MaoMethod = Annotated[
    Union[SeventyRule, CustomPercentage, ArvMinusAll, NetProfitTarget, GrossMargin],
    Field(discriminator="method"),
]


# --------------------------------------------
# ROI methods
# --------------------------------------------

class RoiThresholds(BaseModel):
    model_config = ConfigDict(frozen=True, allow_inf_nan=False)

    excellent: float = 25.0
    good: float = 15.0
    fair: float = 10.0
    poor: float = 5.0


class RoiSettings(BaseModel):
    model_config = ConfigDict(frozen=True, allow_inf_nan=False)

    method: Literal["simple", "annualized", "cash_on_cash", "irr_simplified"] = "simple"
    thresholds: RoiThresholds = RoiThresholds()


# --------------------------------------------
# Contingency methods
# --------------------------------------------

class ContingencyTier(BaseModel):
    model_config = ConfigDict(frozen=True, allow_inf_nan=False)

    max_budget: float | None = None  # None => no upper bound
    percent: float


DEFAULT_TIERS = (
    ContingencyTier(max_budget=25_000, percent=15),
    ContingencyTier(max_budget=50_000, percent=12),
    ContingencyTier(max_budget=100_000, percent=10),
    ContingencyTier(max_budget=None, percent=8),
)


class FlatPercentContingency(BaseModel):
    model_config = ConfigDict(frozen=True, allow_inf_nan=False)

    method: Literal["flat_percent"] = "flat_percent"
    default_percent: float = 10.0

    @field_validator("default_percent")
    @classmethod
    def _pct(cls, v: float) -> float:
        return _non_negative(v, "default_percent")


class TieredContingency(BaseModel):
    model_config = ConfigDict(frozen=True, allow_inf_nan=False)

    method: Literal["tiered"] = "tiered"
    # list order matters: the first tier that fits wins
    tiers: tuple[ContingencyTier, ...] = DEFAULT_TIERS
    fallback_percent: float = FALLBACK_CONTINGENCY_PERCENT


class CategoryWeightedContingency(BaseModel):
    model_config = ConfigDict(frozen=True, allow_inf_nan=False)

    method: Literal["category_weighted"] = "category_weighted"
    category_rates: dict[str, float] = Field(default_factory=lambda: dict(DEFAULT_CATEGORY_RATES))
    fallback_percent: float = FALLBACK_CONTINGENCY_PERCENT


class ScopeBasedContingency(BaseModel):
    model_config = ConfigDict(frozen=True, allow_inf_nan=False)

    method: Literal["scope_based"] = "scope_based"
    default_percent: float = 10.0


ContingencyMethod = Annotated[
    Union[
        FlatPercentContingency,
        TieredContingency,
        CategoryWeightedContingency,
        ScopeBasedContingency,
    ],
    Field(discriminator="method"),
]


# --------------------------------------------
# Holding cost methods
# --------------------------------------------

class HoldingCostItems(BaseModel):
    """Monthly carrying cost line items, in dollars."""
    model_config = ConfigDict(frozen=True, allow_inf_nan=False)

    taxes: float = 250.0
    insurance: float = 150.0
    utilities: float = 200.0
    loan_interest: float = 800.0
    hoa: float = 0.0
    lawn_care: float = 100.0
    other: float = 0.0

    def monthly_total(self) -> float:
        return (
            self.taxes
            + self.insurance
            + self.utilities
            + self.loan_interest
            + self.hoa
            + self.lawn_care
            + self.other
        )


class FlatMonthlyHolding(BaseModel):
    model_config = ConfigDict(frozen=True, allow_inf_nan=False)

    method: Literal["flat_monthly"] = "flat_monthly"
    default_monthly: float = 1_500.0


class ItemizedHolding(BaseModel):
    model_config = ConfigDict(frozen=True, allow_inf_nan=False)

    method: Literal["itemized"] = "itemized"
    items: HoldingCostItems = HoldingCostItems()


class PercentageOfLoanHolding(BaseModel):
    model_config = ConfigDict(frozen=True, allow_inf_nan=False)

    method: Literal["percentage_of_loan"] = "percentage_of_loan"
    loan_rate_annual: float = 12.0


class HybridHolding(BaseModel):
    """
    Base monthly rate plus the itemized components switched on below.
    Lawn care, loan interest and other always ride along with the base.
    """
    model_config = ConfigDict(frozen=True, allow_inf_nan=False)

    method: Literal["hybrid"] = "hybrid"
    default_monthly: float = 1_500.0
    items: HoldingCostItems = HoldingCostItems()
    include_taxes: bool = True
    include_insurance: bool = True
    include_utilities: bool = True
    include_hoa: bool = False


HoldingCostMethod = Annotated[
    Union[FlatMonthlyHolding, ItemizedHolding, PercentageOfLoanHolding, HybridHolding],
    Field(discriminator="method"),
]


# --------------------------------------------
# Selling cost methods
# --------------------------------------------

class FlatPercentSelling(BaseModel):
    model_config = ConfigDict(frozen=True, allow_inf_nan=False)

    method: Literal["flat_percent"] = "flat_percent"
    default_percent: float = 8.0
    fixed_amount: float = 0.0


class ItemizedSelling(BaseModel):
    model_config = ConfigDict(frozen=True, allow_inf_nan=False)

    method: Literal["itemized"] = "itemized"
    agent_commission: float = 5.0
    buyer_concessions: float = 2.0
    closing_percent: float = 1.0
    fixed_amount: float = 0.0


SellingCostMethod = Annotated[
    Union[FlatPercentSelling, ItemizedSelling],
    Field(discriminator="method"),
]


# --------------------------------------------
# Thresholds
# --------------------------------------------

class ProfitThresholds(BaseModel):
    model_config = ConfigDict(frozen=True, allow_inf_nan=False)

    min_acceptable: float = 20_000.0
    target: float = 35_000.0
    excellent: float = 50_000.0

    min_percent: float = 10.0
    target_percent: float = 15.0
    excellent_percent: float = 20.0


class VarianceAlertSettings(BaseModel):
    model_config = ConfigDict(frozen=True, allow_inf_nan=False)

    enabled: bool = True
    warning_percent: float = 5.0
    critical_percent: float = 10.0
    alert_on_forecast: bool = True
    alert_on_actual: bool = True


# --------------------------------------------
# Profile
# --------------------------------------------

class CalculationSettings(BaseModel):
    """
    One calculation profile. Exactly one method per calculator is active;
    each method carries only the parameters it uses.
    """
    model_config = ConfigDict(frozen=True, allow_inf_nan=False)

    name: str = "Default"
    description: str | None = None
    is_default: bool = False

    mao: MaoMethod = SeventyRule()
    roi: RoiSettings = RoiSettings()
    contingency: ContingencyMethod = FlatPercentContingency()
    holding: HoldingCostMethod = FlatMonthlyHolding()
    selling: SellingCostMethod = FlatPercentSelling()
    profit: ProfitThresholds = ProfitThresholds()
    variance_alerts: VarianceAlertSettings = VarianceAlertSettings()


DEFAULT_SETTINGS = CalculationSettings(is_default=True)


# --------------------------------------------
# Flat row layout (one column per parameter)
# --------------------------------------------

_MAO_TYPES = {
    "seventy_rule": SeventyRule,
    "custom_percentage": CustomPercentage,
    "arv_minus_all": ArvMinusAll,
    "net_profit_target": NetProfitTarget,
    "gross_margin": GrossMargin,
}

_ROI_METHODS = {"simple", "annualized", "cash_on_cash", "irr_simplified"}

_CONTINGENCY_METHODS = {"flat_percent", "tiered", "category_weighted", "scope_based"}

_HOLDING_METHODS = {"flat_monthly", "itemized", "percentage_of_loan", "hybrid"}

_SELLING_METHODS = {"flat_percent", "itemized"}


def _num(row: dict[str, Any], key: str, default: float) -> float:
    v = row.get(key)
    if v is None:
        return default
    return float(v)


def _flag(row: dict[str, Any], key: str, default: bool) -> bool:
    v = row.get(key)
    if v is None:
        return default
    return bool(v)


def _pick(row: dict[str, Any], key: str, allowed: set[str] | dict, default: str) -> str:
    v = row.get(key) or default
    if v not in allowed:
        raise ValueError(f"unknown {key}: {v}")
    return str(v)


def settings_from_row(row: dict[str, Any]) -> CalculationSettings:
    """
    Build a profile from the flat settings-table layout
    (mao_method, mao_arv_multiplier, contingency_tiers, holding_cost_items, ...).

    Missing columns take the documented defaults; unknown method names raise.
    """
    mao_method = _pick(row, "mao_method", _MAO_TYPES, "seventy_rule")
    mao_common = dict(
        include_holding_costs=_flag(row, "mao_include_holding_costs", True),
        include_selling_costs=_flag(row, "mao_include_selling_costs", True),
        include_closing_costs=_flag(row, "mao_include_closing_costs", True),
    )
    if mao_method in ("seventy_rule", "custom_percentage"):
        mao = _MAO_TYPES[mao_method](arv_multiplier=_num(row, "mao_arv_multiplier", 0.70), **mao_common)
    elif mao_method == "gross_margin":
        mao = GrossMargin(target_profit_percent=_num(row, "mao_target_profit_percent", 15.0), **mao_common)
    else:
        mao = _MAO_TYPES[mao_method](target_profit=_num(row, "mao_target_profit", 30_000.0), **mao_common)

    roi = RoiSettings(
        method=_pick(row, "roi_method", _ROI_METHODS, "simple"),
        thresholds=RoiThresholds(
            excellent=_num(row, "roi_threshold_excellent", 25.0),
            good=_num(row, "roi_threshold_good", 15.0),
            fair=_num(row, "roi_threshold_fair", 10.0),
            poor=_num(row, "roi_threshold_poor", 5.0),
        ),
    )

    cont_method = _pick(row, "contingency_method", _CONTINGENCY_METHODS, "flat_percent")
    default_pct = _num(row, "contingency_default_percent", 10.0)
    if cont_method == "flat_percent":
        contingency = FlatPercentContingency(default_percent=default_pct)
    elif cont_method == "tiered":
        raw_tiers = row.get("contingency_tiers")
        tiers = tuple(ContingencyTier(**t) for t in raw_tiers) if raw_tiers else DEFAULT_TIERS
        contingency = TieredContingency(
            tiers=tiers,
            fallback_percent=_num(row, "contingency_fallback_percent", FALLBACK_CONTINGENCY_PERCENT),
        )
    elif cont_method == "category_weighted":
        rates = row.get("contingency_category_rates") or DEFAULT_CATEGORY_RATES
        contingency = CategoryWeightedContingency(
            category_rates={k: float(v) for k, v in rates.items()},
            fallback_percent=_num(row, "contingency_fallback_percent", FALLBACK_CONTINGENCY_PERCENT),
        )
    else:
        contingency = ScopeBasedContingency(default_percent=default_pct)

    hold_method = _pick(row, "holding_cost_method", _HOLDING_METHODS, "flat_monthly")
    items = HoldingCostItems(**(row.get("holding_cost_items") or {}))
    monthly = _num(row, "holding_cost_default_monthly", 1_500.0)
    if hold_method == "flat_monthly":
        holding = FlatMonthlyHolding(default_monthly=monthly)
    elif hold_method == "itemized":
        holding = ItemizedHolding(items=items)
    elif hold_method == "percentage_of_loan":
        holding = PercentageOfLoanHolding(loan_rate_annual=_num(row, "holding_cost_loan_rate_annual", 12.0))
    else:
        holding = HybridHolding(
            default_monthly=monthly,
            items=items,
            include_taxes=_flag(row, "holding_cost_include_taxes", True),
            include_insurance=_flag(row, "holding_cost_include_insurance", True),
            include_utilities=_flag(row, "holding_cost_include_utilities", True),
            include_hoa=_flag(row, "holding_cost_include_hoa", False),
        )

    sell_method = _pick(row, "selling_cost_method", _SELLING_METHODS, "flat_percent")
    fixed = _num(row, "selling_cost_fixed_amount", 0.0)
    if sell_method == "flat_percent":
        selling = FlatPercentSelling(default_percent=_num(row, "selling_cost_default_percent", 8.0), fixed_amount=fixed)
    else:
        selling = ItemizedSelling(
            agent_commission=_num(row, "selling_cost_agent_commission", 5.0),
            buyer_concessions=_num(row, "selling_cost_buyer_concessions", 2.0),
            closing_percent=_num(row, "selling_cost_closing_percent", 1.0),
            fixed_amount=fixed,
        )

    profit = ProfitThresholds(
        min_acceptable=_num(row, "profit_min_acceptable", 20_000.0),
        target=_num(row, "profit_target", 35_000.0),
        excellent=_num(row, "profit_excellent", 50_000.0),
        min_percent=_num(row, "profit_min_percent", 10.0),
        target_percent=_num(row, "profit_target_percent", 15.0),
        excellent_percent=_num(row, "profit_excellent_percent", 20.0),
    )

    alerts = VarianceAlertSettings(
        enabled=_flag(row, "variance_alert_enabled", True),
        warning_percent=_num(row, "variance_warning_percent", 5.0),
        critical_percent=_num(row, "variance_critical_percent", 10.0),
        alert_on_forecast=_flag(row, "variance_alert_on_forecast", True),
        alert_on_actual=_flag(row, "variance_alert_on_actual", True),
    )

    return CalculationSettings(
        name=row.get("name") or "Default",
        description=row.get("description"),
        is_default=bool(row.get("is_default", False)),
        mao=mao,
        roi=roi,
        contingency=contingency,
        holding=holding,
        selling=selling,
        profit=profit,
        variance_alerts=alerts,
    )


def settings_to_row(settings: CalculationSettings) -> dict[str, Any]:
    """Flatten a profile back into the settings-table column layout."""
    row: dict[str, Any] = {
        "name": settings.name,
        "description": settings.description,
        "is_default": settings.is_default,
    }

    mao = settings.mao
    row["mao_method"] = mao.method
    row["mao_include_holding_costs"] = mao.include_holding_costs
    row["mao_include_selling_costs"] = mao.include_selling_costs
    row["mao_include_closing_costs"] = mao.include_closing_costs
    if isinstance(mao, (SeventyRule, CustomPercentage)):
        row["mao_arv_multiplier"] = mao.arv_multiplier
    elif isinstance(mao, GrossMargin):
        row["mao_target_profit_percent"] = mao.target_profit_percent
    else:
        row["mao_target_profit"] = mao.target_profit

    row["roi_method"] = settings.roi.method
    t = settings.roi.thresholds
    row.update(
        roi_threshold_excellent=t.excellent,
        roi_threshold_good=t.good,
        roi_threshold_fair=t.fair,
        roi_threshold_poor=t.poor,
    )

    cont = settings.contingency
    row["contingency_method"] = cont.method
    if isinstance(cont, (FlatPercentContingency, ScopeBasedContingency)):
        row["contingency_default_percent"] = cont.default_percent
    elif isinstance(cont, TieredContingency):
        row["contingency_tiers"] = [t.model_dump() for t in cont.tiers]
        row["contingency_fallback_percent"] = cont.fallback_percent
    else:
        row["contingency_category_rates"] = dict(cont.category_rates)
        row["contingency_fallback_percent"] = cont.fallback_percent

    hold = settings.holding
    row["holding_cost_method"] = hold.method
    if isinstance(hold, FlatMonthlyHolding):
        row["holding_cost_default_monthly"] = hold.default_monthly
    elif isinstance(hold, ItemizedHolding):
        row["holding_cost_items"] = hold.items.model_dump()
    elif isinstance(hold, PercentageOfLoanHolding):
        row["holding_cost_loan_rate_annual"] = hold.loan_rate_annual
    else:
        row["holding_cost_default_monthly"] = hold.default_monthly
        row["holding_cost_items"] = hold.items.model_dump()
        row["holding_cost_include_taxes"] = hold.include_taxes
        row["holding_cost_include_insurance"] = hold.include_insurance
        row["holding_cost_include_utilities"] = hold.include_utilities
        row["holding_cost_include_hoa"] = hold.include_hoa

    sell = settings.selling
    row["selling_cost_method"] = sell.method
    row["selling_cost_fixed_amount"] = sell.fixed_amount
    if isinstance(sell, FlatPercentSelling):
        row["selling_cost_default_percent"] = sell.default_percent
    else:
        row["selling_cost_agent_commission"] = sell.agent_commission
        row["selling_cost_buyer_concessions"] = sell.buyer_concessions
        row["selling_cost_closing_percent"] = sell.closing_percent

    p = settings.profit
    row.update(
        profit_min_acceptable=p.min_acceptable,
        profit_target=p.target,
        profit_excellent=p.excellent,
        profit_min_percent=p.min_percent,
        profit_target_percent=p.target_percent,
        profit_excellent_percent=p.excellent_percent,
    )

    a = settings.variance_alerts
    row.update(
        variance_alert_enabled=a.enabled,
        variance_warning_percent=a.warning_percent,
        variance_critical_percent=a.critical_percent,
        variance_alert_on_forecast=a.alert_on_forecast,
        variance_alert_on_actual=a.alert_on_actual,
    )
    return row
