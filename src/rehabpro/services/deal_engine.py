from __future__ import annotations

from dataclasses import dataclass

from rehabpro.adapters.logging_utils import get_logger
from rehabpro.domain.costs import (
    compute_contingency,
    compute_holding_costs,
    compute_selling_costs,
    select_tier,
    selling_cost_percent,
)
from rehabpro.domain.inputs import FinancialInputs
from rehabpro.domain.offer import compute_mao, mao_target_table
from rehabpro.domain.report import DealReport, Scenario, Sensitivity
from rehabpro.domain.returns import compute_roi, grade_profit, grade_roi
from rehabpro.domain.rules import assess_risk, classify_deal, compute_ratios
from rehabpro.domain.settings import (
    CalculationSettings,
    CategoryWeightedContingency,
    FlatMonthlyHolding,
    FlatPercentContingency,
    FlatPercentSelling,
    SeventyRule,
    TieredContingency,
)

logger = get_logger(__name__)

DEFAULT_TARGET_ROI = 20.0


@dataclass(frozen=True)
class CoreNumbers:
    holding_costs: float
    selling_costs: float
    contingency: float
    rehab_with_contingency: float
    total_investment: float
    gross_profit: float
    roi: float
    mao: float


def simple_settings(inputs: FinancialInputs) -> CalculationSettings:
    """
    Profile for the quick deal calculator that only has the six scalar
    fields on the project: flat contingency %, flat monthly holding,
    flat selling %, and a 70% rule that leaves selling costs out of MAO.
    """
    return CalculationSettings(
        name="Quick calculator",
        mao=SeventyRule(
            arv_multiplier=0.70,
            include_holding_costs=True,
            include_selling_costs=False,
            include_closing_costs=True,
        ),
        contingency=FlatPercentContingency(default_percent=inputs.contingency_percent),
        holding=FlatMonthlyHolding(default_monthly=inputs.holding_costs_monthly),
        selling=FlatPercentSelling(default_percent=inputs.selling_cost_percent, fixed_amount=0.0),
    )


def compute_core(
    inputs: FinancialInputs,
    settings: CalculationSettings,
    *,
    as_of_year: int | None = None,
) -> CoreNumbers:
    """
    The strict calculation chain: contingency -> holding/selling ->
    total investment -> profit -> ROI / MAO.
    """
    arv = inputs.arv or 0.0
    purchase = inputs.purchase_price or 0.0

    # 1. Rehab + contingency
    contingency = compute_contingency(
        settings.contingency,
        inputs.rehab_budget,
        category_budgets=inputs.category_budgets,
        year_built=inputs.year_built,
        rehab_scope=inputs.rehab_scope,
        as_of_year=as_of_year,
    )
    rehab_wc = inputs.rehab_budget + contingency

    # 2. Carrying and exit costs
    holding = compute_holding_costs(settings.holding, inputs.purchase_price, inputs.hold_months)
    selling = compute_selling_costs(inputs.arv, settings.selling)

    # 3-4. Investment and profit
    total_investment = purchase + rehab_wc + inputs.closing_costs + holding
    gross_profit = arv - total_investment - selling

    # 5. Returns and offer
    roi = compute_roi(
        settings.roi.method,
        total_investment,
        gross_profit,
        inputs.hold_months,
        financed_amount=inputs.financed_amount,
    )
    mao = compute_mao(
        settings.mao,
        inputs.arv,
        rehab_wc,
        holding_costs=holding,
        selling_costs=selling,
        closing_costs=inputs.closing_costs,
    )

    return CoreNumbers(
        holding_costs=holding,
        selling_costs=selling,
        contingency=contingency,
        rehab_with_contingency=rehab_wc,
        total_investment=total_investment,
        gross_profit=gross_profit,
        roi=roi,
        mao=mao,
    )


def _scenario(
    label: str,
    inputs: FinancialInputs,
    settings: CalculationSettings,
    base: CoreNumbers,
    as_of_year: int | None,
) -> Scenario:
    shocked = compute_core(inputs, settings, as_of_year=as_of_year)
    return Scenario(
        label=label,
        gross_profit=shocked.gross_profit,
        profit_change=shocked.gross_profit - base.gross_profit,
        roi=shocked.roi,
    )


def _with_arv(inputs: FinancialInputs, factor: float) -> FinancialInputs:
    return inputs.model_copy(update={"arv": (inputs.arv or 0.0) * factor})


def _with_rehab(inputs: FinancialInputs, factor: float) -> FinancialInputs:
    update: dict = {"rehab_budget": inputs.rehab_budget * factor}
    if inputs.category_budgets:
        update["category_budgets"] = {k: v * factor for k, v in inputs.category_budgets.items()}
    return inputs.model_copy(update=update)


def compute_sensitivity(
    inputs: FinancialInputs,
    settings: CalculationSettings,
    base: CoreNumbers,
    *,
    target_roi: float = DEFAULT_TARGET_ROI,
    as_of_year: int | None = None,
) -> Sensitivity:
    arv = inputs.arv or 0.0
    sell_pct = selling_cost_percent(settings.selling) / 100.0
    fixed_selling = settings.selling.fixed_amount

    break_even = None
    if sell_pct < 1.0:
        break_even = (base.total_investment + fixed_selling) / (1.0 - sell_pct)

    max_purchase = (
        arv * (1.0 - sell_pct)
        - fixed_selling
        - base.rehab_with_contingency
        - inputs.closing_costs
        - base.holding_costs
    ) / (1.0 + target_roi / 100.0)

    return Sensitivity(
        arv_down_5=_scenario("ARV -5%", _with_arv(inputs, 0.95), settings, base, as_of_year),
        arv_down_10=_scenario("ARV -10%", _with_arv(inputs, 0.90), settings, base, as_of_year),
        rehab_up_10=_scenario("Rehab +10%", _with_rehab(inputs, 1.10), settings, base, as_of_year),
        rehab_up_20=_scenario("Rehab +20%", _with_rehab(inputs, 1.20), settings, base, as_of_year),
        break_even_arv=break_even,
        max_purchase_for_target=max_purchase,
        target_roi=target_roi,
    )


def compute_deal_report(
    inputs: FinancialInputs,
    settings: CalculationSettings | None = None,
    *,
    budget_variance_pct: float = 0.0,
    target_roi: float = DEFAULT_TARGET_ROI,
    as_of_year: int | None = None,
) -> DealReport:
    """
    Full deal report for one project.

    Without a settings profile the quick six-field calculator is used
    (see simple_settings). With a profile, its methods drive every
    calculator and the scalar percent / monthly fields on inputs are ignored.
    """
    if settings is None:
        settings = simple_settings(inputs)

    if isinstance(settings.contingency, TieredContingency):
        if select_tier(settings.contingency.tiers, inputs.rehab_budget) is None:
            logger.warning(
                "no contingency tier matched; using fallback rate",
                extra={"context": {
                    "rehab_budget": inputs.rehab_budget,
                    "fallback_percent": settings.contingency.fallback_percent,
                }},
            )

    if isinstance(settings.contingency, CategoryWeightedContingency) and inputs.category_budgets:
        unknown = sorted(set(inputs.category_budgets) - set(settings.contingency.category_rates))
        if unknown:
            logger.warning(
                "no contingency rate for categories; using fallback rate",
                extra={"context": {
                    "categories": unknown,
                    "fallback_percent": settings.contingency.fallback_percent,
                }},
            )

    base = compute_core(inputs, settings, as_of_year=as_of_year)

    purchase = inputs.purchase_price
    spread = base.mao - purchase if purchase and purchase > 0 else None

    ratios = compute_ratios(
        inputs.arv,
        purchase,
        base.rehab_with_contingency,
        base.total_investment,
        base.gross_profit,
    )

    sensitivity = None
    if inputs.arv and purchase:
        sensitivity = compute_sensitivity(
            inputs,
            settings,
            base,
            target_roi=target_roi,
            as_of_year=as_of_year,
        )

    report = DealReport(
        holding_costs=base.holding_costs,
        selling_costs=base.selling_costs,
        contingency=base.contingency,
        rehab_with_contingency=base.rehab_with_contingency,
        mao=base.mao,
        total_investment=base.total_investment,
        gross_profit=base.gross_profit,
        roi=base.roi,
        spread=spread,
        deal_quality=classify_deal(base.gross_profit, purchase, base.mao),
        roi_grade=grade_roi(base.roi, settings.roi.thresholds),
        profit_grade=grade_profit(base.gross_profit, inputs.arv, settings.profit),
        risk_level=assess_risk(ratios, base.roi, budget_variance_pct),
        ratios=ratios,
        mao_targets=mao_target_table(
            inputs.arv,
            base.rehab_with_contingency,
            holding_costs=base.holding_costs,
            selling_costs=base.selling_costs,
        ),
        sensitivity=sensitivity,
    )

    logger.debug(
        "deal report computed",
        extra={"context": {
            "profile": settings.name,
            "mao_method": settings.mao.method,
            "gross_profit": report.gross_profit,
            "deal_quality": report.deal_quality,
        }},
    )
    return report
