import math
from typing import Literal

from rehabpro.domain.settings import ProfitThresholds, RoiThresholds

RoiMethodName = Literal["simple", "annualized", "cash_on_cash", "irr_simplified"]
Grade = Literal["excellent", "good", "fair", "poor", "bad"]


def simple_roi(total_investment: float, gross_profit: float) -> float:
    if total_investment <= 0:
        return 0.0
    return gross_profit / total_investment * 100.0


def compute_roi(
    method: RoiMethodName,
    total_investment: float,
    gross_profit: float,
    hold_months: float,
    financed_amount: float = 0.0,
) -> float:
    """
    ROI as a percentage. Every zero denominator returns 0 so the result is
    always finite.
    """
    if method == "simple":
        return simple_roi(total_investment, gross_profit)

    if method == "annualized":
        if hold_months <= 0:
            return 0.0
        return simple_roi(total_investment, gross_profit) * (12.0 / hold_months)

    if method == "cash_on_cash":
        # profit over the cash actually put in (investment less the loan)
        cash_invested = total_investment - (financed_amount or 0.0)
        if cash_invested <= 0:
            return 0.0
        return gross_profit / cash_invested * 100.0

    if method == "irr_simplified":
        # compounded annual growth of the money in the deal
        if total_investment <= 0 or hold_months <= 0:
            return 0.0
        growth = 1.0 + gross_profit / total_investment
        if growth <= 0:
            return -100.0
        try:
            rate = (growth ** (12.0 / hold_months) - 1.0) * 100.0
        except OverflowError:
            return 0.0
        return rate if math.isfinite(rate) else 0.0

    raise ValueError(f"unsupported ROI method: {method}")


def grade_roi(roi: float, thresholds: RoiThresholds) -> Grade:
    if roi >= thresholds.excellent:
        return "excellent"
    if roi >= thresholds.good:
        return "good"
    if roi >= thresholds.fair:
        return "fair"
    if roi >= thresholds.poor:
        return "poor"
    return "bad"


def grade_profit(gross_profit: float, arv: float | None, thresholds: ProfitThresholds) -> Grade:
    """
    Grade by dollars and by profit as % of ARV; the weaker of the two wins.
    """
    margin = gross_profit / arv * 100.0 if arv else 0.0

    def _band(value: float, floor: float, target: float, top: float) -> int:
        if value >= top:
            return 3
        if value >= target:
            return 2
        if value >= floor:
            return 1
        return 0

    band = min(
        _band(gross_profit, thresholds.min_acceptable, thresholds.target, thresholds.excellent),
        _band(margin, thresholds.min_percent, thresholds.target_percent, thresholds.excellent_percent),
    )
    if band == 3:
        return "excellent"
    if band == 2:
        return "good"
    if band == 1:
        return "fair"
    return "poor" if gross_profit > 0 else "bad"
