# src/rehabpro/api/schemas.py
from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict

from rehabpro.domain.draws import DrawMilestone, DrawStatus
from rehabpro.domain.settings import CalculationSettings, VarianceAlertSettings


# --------------------------------------------
# Budget line items
# --------------------------------------------

class LineItemIn(BaseModel):
    model_config = ConfigDict(extra="ignore", allow_inf_nan=False)

    category: str
    item: str
    qty: float = 0.0
    unit: str = "ls"
    rate: float = 0.0
    underwriting_amount: float = 0.0
    forecast_amount: float = 0.0
    actual_amount: float | None = None


# --------------------------------------------
# Deal report
# --------------------------------------------

class DealReportRequest(BaseModel):
    """
    Raw financial inputs (strings like "$250,000" or "8%" are accepted) plus
    either an inline settings profile, a stored profile id, or a user whose
    default profile should be used. With none of those the built-in
    defaults apply.

    line_items, when given, supply the category budgets for weighted
    contingency and the budget variance % for the risk score.
    """
    model_config = ConfigDict(extra="ignore", allow_inf_nan=False)

    inputs: dict[str, Any]
    settings: CalculationSettings | None = None
    user_id: str | None = None
    profile_id: int | None = None
    line_items: list[LineItemIn] | None = None
    budget_variance_pct: float | None = None


class DealReportResponse(BaseModel):
    """Mirrors DealReport.to_dict(); permissive so new fields don't break clients."""
    model_config = ConfigDict(extra="allow")

    mao: float
    total_investment: float
    gross_profit: float
    roi: float
    spread: float | None = None
    deal_quality: str
    deal_label: str


# --------------------------------------------
# Budget variance
# --------------------------------------------

class BudgetVarianceRequest(BaseModel):
    items: list[LineItemIn]
    alerts: VarianceAlertSettings | None = None


class LineItemOut(LineItemIn):
    budget_amount: float
    forecast_variance: float
    actual_variance: float
    total_variance: float


class CategorySummary(BaseModel):
    category: str
    underwriting_amount: float
    forecast_amount: float
    actual_amount: float
    budget_amount: float
    total_variance: float
    actual_variance: float
    variance_percent: float


class AlertOut(BaseModel):
    category: str
    item: str
    comparison: Literal["forecast_vs_underwriting", "actual_vs_forecast"]
    level: Literal["warning", "critical"]
    variance: float
    variance_percent: float


class BudgetVarianceResponse(BaseModel):
    items: list[LineItemOut]
    categories: list[CategorySummary]
    alerts: list[AlertOut]
    budget_variance_percent: float


# --------------------------------------------
# Draws
# --------------------------------------------

class DrawIn(BaseModel):
    model_config = ConfigDict(extra="ignore", allow_inf_nan=False)

    draw_number: int
    amount: float
    status: DrawStatus = "pending"
    milestone: DrawMilestone | None = None
    description: str | None = None
    percent_complete: float | None = None


class DrawSummaryRequest(BaseModel):
    model_config = ConfigDict(allow_inf_nan=False)

    total_budget: float
    draws: list[DrawIn] = []


class DrawSummaryResponse(BaseModel):
    total_budget: float
    total_paid: float
    total_pending: float
    remaining: float
    percent_paid: float
    percent_pending: float
    draw_count: int
    over_budget: bool
    next_draw_number: int
    schedule: list[DrawIn]


# --------------------------------------------
# Settings profiles
# --------------------------------------------

class SettingsProfileItem(BaseModel):
    profile_id: int
    settings: CalculationSettings


class SettingsSaveRequest(BaseModel):
    settings: CalculationSettings
    profile_id: int | None = None


class SettingsPreviewResponse(BaseModel):
    model_config = ConfigDict(extra="allow")

    sample_deal: dict[str, float]
    holding_costs: float
    selling_costs: float
    contingency: float
    rehab_with_contingency: float
    mao: float
    total_investment: float
    gross_profit: float
    roi: float
    roi_grade: str


# --------------------------------------------
# Rehab estimate
# --------------------------------------------

RehabScope = Literal["cosmetic", "moderate", "full_gut"]


class RehabEstimateRequest(BaseModel):
    model_config = ConfigDict(allow_inf_nan=False)

    sqft: float | None = None
    year_built: int | None = None
    scope: RehabScope = "moderate"
