# src/rehabpro/api/http.py
from __future__ import annotations

from dataclasses import asdict
from functools import lru_cache
from typing import Any

import pandas as pd
from fastapi import Depends, FastAPI, HTTPException

from rehabpro.adapters.config import config
from rehabpro.adapters.logging_utils import get_logger
from rehabpro.adapters.rehab_estimator import RehabEstimator
from rehabpro.adapters.sql_repo import SqlSettingsRepository
from rehabpro.analysis.budget_batch import (
    apply_line_items,
    budget_variance_percent,
    compute_budget_variances_df,
    line_items_to_df,
    summarize_by_category,
)
from rehabpro.domain.budget import BudgetLineItem, line_item_alerts
from rehabpro.domain.draws import Draw, draw_schedule, next_draw_number, summarize_draws
from rehabpro.domain.inputs import FinancialInputs
from rehabpro.domain.ports import SettingsRepository
from rehabpro.domain.settings import DEFAULT_SETTINGS, CalculationSettings, settings_to_row
from rehabpro.services.deal_engine import compute_deal_report
from rehabpro.services.settings_profiles import delete_profile, resolve_settings, save_profile
from rehabpro.services.validation import prepare_financial_inputs
from .schemas import (
    BudgetVarianceRequest,
    BudgetVarianceResponse,
    DealReportRequest,
    DealReportResponse,
    DrawSummaryRequest,
    DrawSummaryResponse,
    RehabEstimateRequest,
    SettingsPreviewResponse,
    SettingsProfileItem,
    SettingsSaveRequest,
)

logger = get_logger(__name__)

app = FastAPI(title="rehabpro")

_rehab_estimator = RehabEstimator()


@lru_cache(maxsize=1)
def _default_repo() -> SqlSettingsRepository:
    return SqlSettingsRepository(config.DB_URI)


def get_settings_repo() -> SettingsRepository:
    return _default_repo()


# -----------------------------
# Deal reports
# -----------------------------
@app.post("/deals/report", response_model=DealReportResponse)
def deal_report(
    payload: DealReportRequest,
    repo: SettingsRepository = Depends(get_settings_repo),
) -> DealReportResponse:
    """
    Report under an inline profile, a stored profile, the user's default,
    or the built-in defaults (in that order).
    """
    try:
        inputs = prepare_financial_inputs(payload.inputs)
        variance_pct = 0.0
        if payload.line_items:
            df = line_items_to_df(BudgetLineItem(**li.model_dump()) for li in payload.line_items)
            inputs, variance_pct = apply_line_items(inputs, df)
        if payload.budget_variance_pct is not None:
            variance_pct = payload.budget_variance_pct

        settings = payload.settings or resolve_settings(repo, payload.user_id, payload.profile_id)
        report = compute_deal_report(
            inputs,
            settings,
            budget_variance_pct=variance_pct,
            target_roi=config.SENSITIVITY_TARGET_ROI,
        )
    except LookupError as e:
        raise HTTPException(status_code=404, detail=str(e)) from e
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e

    logger.info(
        "deal report",
        extra={"context": {
            "user_id": payload.user_id,
            "profile": settings.name,
            "deal_quality": report.deal_quality,
        }},
    )
    return DealReportResponse(**report.to_dict())


@app.post("/deals/simple", response_model=DealReportResponse)
def deal_report_simple(payload: dict[str, Any]) -> DealReportResponse:
    """Quick calculator: only the six scalar fields on the project."""
    try:
        inputs = prepare_financial_inputs(payload)
        report = compute_deal_report(inputs, target_roi=config.SENSITIVITY_TARGET_ROI)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e
    return DealReportResponse(**report.to_dict())


# -----------------------------
# Budget variance
# -----------------------------
@app.post("/budget/variances", response_model=BudgetVarianceResponse)
def budget_variances(payload: BudgetVarianceRequest) -> BudgetVarianceResponse:
    items = [BudgetLineItem(**li.model_dump()) for li in payload.items]
    df = line_items_to_df(items)

    with_var = compute_budget_variances_df(df)
    summary = summarize_by_category(df)
    alerts = line_item_alerts(items, payload.alerts or DEFAULT_SETTINGS.variance_alerts)

    item_rows = with_var.to_dict(orient="records")
    for row in item_rows:
        # pandas turns a missing actual into NaN
        if pd.isna(row.get("actual_amount")):
            row["actual_amount"] = None

    return BudgetVarianceResponse(
        items=item_rows,
        categories=summary.to_dict(orient="records"),
        alerts=[asdict(a) for a in alerts],
        budget_variance_percent=budget_variance_percent(df),
    )


# -----------------------------
# Draws
# -----------------------------
@app.post("/draws/summary", response_model=DrawSummaryResponse)
def draws_summary(payload: DrawSummaryRequest) -> DrawSummaryResponse:
    draws = [Draw(**d.model_dump()) for d in payload.draws]
    summary = summarize_draws(draws, payload.total_budget)
    if summary.over_budget:
        logger.warning(
            "draws exceed rehab budget",
            extra={"context": {"total_budget": payload.total_budget, "remaining": summary.remaining}},
        )
    return DrawSummaryResponse(
        **asdict(summary),
        over_budget=summary.over_budget,
        next_draw_number=next_draw_number(draws),
        schedule=[asdict(d) for d in draw_schedule(draws)],
    )


# -----------------------------
# Settings profiles
# -----------------------------
@app.get("/settings/defaults", response_model=CalculationSettings)
def settings_defaults() -> CalculationSettings:
    return DEFAULT_SETTINGS


@app.get("/settings/defaults/row")
def settings_defaults_row() -> dict[str, Any]:
    """Defaults in the flat settings-table column layout."""
    return settings_to_row(DEFAULT_SETTINGS)


@app.post("/settings/preview", response_model=SettingsPreviewResponse)
def settings_preview(settings: CalculationSettings) -> SettingsPreviewResponse:
    """Run the sample deal through a profile so edits can be previewed live."""
    sample = FinancialInputs(
        arv=config.SAMPLE_ARV,
        purchase_price=config.SAMPLE_PURCHASE_PRICE,
        rehab_budget=config.SAMPLE_REHAB_BUDGET,
        closing_costs=config.SAMPLE_CLOSING_COSTS,
        hold_months=config.SAMPLE_HOLD_MONTHS,
    )
    report = compute_deal_report(sample, settings, target_roi=config.SENSITIVITY_TARGET_ROI)
    return SettingsPreviewResponse(
        sample_deal={
            "arv": config.SAMPLE_ARV,
            "purchase_price": config.SAMPLE_PURCHASE_PRICE,
            "rehab_budget": config.SAMPLE_REHAB_BUDGET,
            "closing_costs": config.SAMPLE_CLOSING_COSTS,
            "hold_months": config.SAMPLE_HOLD_MONTHS,
        },
        holding_costs=report.holding_costs,
        selling_costs=report.selling_costs,
        contingency=report.contingency,
        rehab_with_contingency=report.rehab_with_contingency,
        mao=report.mao,
        total_investment=report.total_investment,
        gross_profit=report.gross_profit,
        roi=report.roi,
        roi_grade=report.roi_grade,
    )


@app.get("/settings/{user_id}", response_model=list[SettingsProfileItem])
def list_settings(
    user_id: str,
    repo: SettingsRepository = Depends(get_settings_repo),
) -> list[SettingsProfileItem]:
    return [SettingsProfileItem(profile_id=pid, settings=s) for pid, s in repo.list_for_user(user_id)]


@app.put("/settings/{user_id}")
def put_settings(
    user_id: str,
    body: SettingsSaveRequest,
    repo: SettingsRepository = Depends(get_settings_repo),
) -> dict[str, Any]:
    try:
        pid = save_profile(repo, user_id, body.settings, profile_id=body.profile_id)
    except KeyError as e:
        raise HTTPException(status_code=404, detail=str(e)) from e
    return {"profile_id": pid, "user_id": user_id, "is_default": body.settings.is_default}


@app.delete("/settings/profile/{profile_id}")
def delete_settings(
    profile_id: int,
    user_id: str,
    repo: SettingsRepository = Depends(get_settings_repo),
) -> dict[str, Any]:
    """Delete one of user_id's profiles; other users' profiles read as missing."""
    if not delete_profile(repo, user_id, profile_id):
        raise HTTPException(status_code=404, detail=f"settings profile {profile_id} not found")
    return {"profile_id": profile_id, "user_id": user_id, "deleted": True}


# -----------------------------
# Rehab estimate
# -----------------------------
@app.post("/rehab/estimate")
def rehab_estimate(body: RehabEstimateRequest) -> dict[str, Any]:
    est = _rehab_estimator.estimate(body.sqft, year_built=body.year_built, scope=body.scope)
    if est is None:
        raise HTTPException(status_code=400, detail="sqft is required for a rehab estimate")
    return asdict(est)
