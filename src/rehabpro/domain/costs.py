# src/rehabpro/domain/costs.py
"""
Cost sub-calculators: holding, selling and contingency.

Each takes the active method variant from the settings profile plus the
deal numbers it needs and returns a dollar amount.
"""
from __future__ import annotations

from datetime import date
from typing import Mapping, Sequence

from rehabpro.domain.settings import (
    CategoryWeightedContingency,
    ContingencyMethod,
    ContingencyTier,
    FlatMonthlyHolding,
    FlatPercentContingency,
    FlatPercentSelling,
    HoldingCostMethod,
    HybridHolding,
    ItemizedHolding,
    PercentageOfLoanHolding,
    ScopeBasedContingency,
    SellingCostMethod,
    TieredContingency,
)

# Scope multipliers for scope-based contingency
SCOPE_MULTIPLIERS = {
    "cosmetic": 0.8,
    "moderate": 1.0,
    "full_gut": 1.5,
}


# ---------------------------------------------------------------------
# Holding costs
# ---------------------------------------------------------------------

def monthly_holding_cost(method: HoldingCostMethod, purchase_price: float | None) -> float:
    if isinstance(method, FlatMonthlyHolding):
        return method.default_monthly

    if isinstance(method, ItemizedHolding):
        return method.items.monthly_total()

    if isinstance(method, PercentageOfLoanHolding):
        return (purchase_price or 0.0) * (method.loan_rate_annual / 100.0) / 12.0

    if isinstance(method, HybridHolding):
        items = method.items
        variable = items.loan_interest + items.lawn_care + items.other
        if method.include_taxes:
            variable += items.taxes
        if method.include_insurance:
            variable += items.insurance
        if method.include_utilities:
            variable += items.utilities
        if method.include_hoa:
            variable += items.hoa
        return method.default_monthly + variable

    raise ValueError(f"unsupported holding cost method: {method!r}")


def compute_holding_costs(
    method: HoldingCostMethod,
    purchase_price: float | None,
    hold_months: float,
) -> float:
    """Total carrying cost over the hold. Zero months => zero cost."""
    if not hold_months:
        return 0.0
    return monthly_holding_cost(method, purchase_price) * hold_months


# ---------------------------------------------------------------------
# Selling costs
# ---------------------------------------------------------------------

def selling_cost_percent(method: SellingCostMethod) -> float:
    """Effective percent of ARV (whole number) the method charges."""
    if isinstance(method, FlatPercentSelling):
        return method.default_percent
    return method.agent_commission + method.buyer_concessions + method.closing_percent


def compute_selling_costs(arv: float | None, method: SellingCostMethod) -> float:
    return (arv or 0.0) * (selling_cost_percent(method) / 100.0) + method.fixed_amount


# ---------------------------------------------------------------------
# Contingency
# ---------------------------------------------------------------------

def select_tier(tiers: Sequence[ContingencyTier], rehab_budget: float) -> ContingencyTier | None:
    # relies on list order; tiers are expected ascending by max_budget
    for tier in tiers:
        if tier.max_budget is None or rehab_budget <= tier.max_budget:
            return tier
    return None


def age_multiplier(year_built: int | None, as_of_year: int | None = None) -> float:
    """Older homes hide more surprises."""
    if not year_built:
        return 1.0
    age = (as_of_year or date.today().year) - year_built

    if age < 20:
        return 0.9
    if age < 40:
        return 1.0
    if age < 60:
        return 1.1
    if age < 80:
        return 1.2
    return 1.3


def category_weighted_contingency(
    method: CategoryWeightedContingency,
    rehab_budget: float,
    category_budgets: Mapping[str, float] | None,
) -> float:
    if not category_budgets:
        return rehab_budget * method.fallback_percent / 100.0

    total = 0.0
    for category, subtotal in category_budgets.items():
        rate = method.category_rates.get(category, method.fallback_percent)
        total += (subtotal or 0.0) * rate / 100.0
    return total


def compute_contingency(
    method: ContingencyMethod,
    rehab_budget: float,
    *,
    category_budgets: Mapping[str, float] | None = None,
    year_built: int | None = None,
    rehab_scope: str | None = None,
    as_of_year: int | None = None,
) -> float:
    if isinstance(method, FlatPercentContingency):
        return rehab_budget * method.default_percent / 100.0

    if isinstance(method, TieredContingency):
        tier = select_tier(method.tiers, rehab_budget)
        pct = tier.percent if tier is not None else method.fallback_percent
        return rehab_budget * pct / 100.0

    if isinstance(method, CategoryWeightedContingency):
        return category_weighted_contingency(method, rehab_budget, category_budgets)

    if isinstance(method, ScopeBasedContingency):
        pct = (
            method.default_percent
            * age_multiplier(year_built, as_of_year)
            * SCOPE_MULTIPLIERS.get(rehab_scope or "moderate", 1.0)
        )
        return rehab_budget * pct / 100.0

    raise ValueError(f"unsupported contingency method: {method!r}")
