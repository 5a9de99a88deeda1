# src/rehabpro/analysis/budget_batch.py

from __future__ import annotations

from typing import Iterable

import numpy as np
import pandas as pd

from rehabpro.domain.budget import BudgetLineItem
from rehabpro.domain.inputs import FinancialInputs

AMOUNT_COLUMNS = ["underwriting_amount", "forecast_amount", "actual_amount"]


def line_items_to_df(items: Iterable[BudgetLineItem]) -> pd.DataFrame:
    rows = [
        {
            "category": li.category,
            "item": li.item,
            "qty": li.qty,
            "unit": li.unit,
            "rate": li.rate,
            "underwriting_amount": li.underwriting_amount,
            "forecast_amount": li.forecast_amount,
            "actual_amount": li.actual_amount,
        }
        for li in items
    ]
    return pd.DataFrame(rows, columns=["category", "item", "qty", "unit", "rate", *AMOUNT_COLUMNS])


def _amounts(df: pd.DataFrame, col: str) -> np.ndarray:
    if col not in df.columns:
        return np.zeros(len(df), dtype=float)
    return pd.to_numeric(df[col], errors="coerce").fillna(0.0).to_numpy(dtype=float)


def compute_budget_variances_df(df: pd.DataFrame) -> pd.DataFrame:
    """
    Vectorized three-column variance over a line-item DataFrame.

    Expected columns on df:
      - category
      - underwriting_amount
      - forecast_amount
      - actual_amount (may be blank)

    Same rules as compute_variances: missing amounts count as 0 and actual
    spend is compared to forecast when one exists, otherwise underwriting.
    """
    uw = _amounts(df, "underwriting_amount")
    fc = _amounts(df, "forecast_amount")
    act = _amounts(df, "actual_amount")

    budget = np.where(fc > 0, fc, uw)

    out = df.copy()
    out["budget_amount"] = budget
    out["forecast_variance"] = fc - uw
    out["actual_variance"] = act - budget
    out["total_variance"] = act - uw
    return out


def summarize_by_category(df: pd.DataFrame) -> pd.DataFrame:
    """
    Roll line items up per category.

    Returns one row per category with underwriting/forecast/actual totals,
    the best-estimate budget, total variance and variance % of budget.
    """
    with_var = compute_budget_variances_df(df)
    for col in AMOUNT_COLUMNS:
        with_var[col] = _amounts(with_var, col)

    grouped = (
        with_var.groupby("category", sort=False)[
            [*AMOUNT_COLUMNS, "budget_amount", "total_variance", "actual_variance"]
        ]
        .sum()
        .reset_index()
    )

    budget = grouped["budget_amount"].to_numpy(dtype=float)
    actual_var = grouped["actual_variance"].to_numpy(dtype=float)
    pct = np.zeros_like(budget)
    mask = budget > 0
    pct[mask] = actual_var[mask] / budget[mask] * 100.0
    grouped["variance_percent"] = pct

    return grouped.sort_values("budget_amount", ascending=False, kind="stable").reset_index(drop=True)


def category_budgets(df: pd.DataFrame) -> dict[str, float]:
    """Best-estimate rehab subtotal per category (feeds weighted contingency)."""
    summary = summarize_by_category(df)
    return {str(r.category): float(r.budget_amount) for r in summary.itertuples(index=False)}


def budget_variance_percent(df: pd.DataFrame) -> float:
    """Project-level overrun: (actual - forecast) / forecast x 100, 0 with no forecast."""
    fc_total = float(_amounts(df, "forecast_amount").sum())
    act_total = float(_amounts(df, "actual_amount").sum())
    if fc_total <= 0:
        return 0.0
    return (act_total - fc_total) / fc_total * 100.0


def apply_line_items(inputs: FinancialInputs, df: pd.DataFrame) -> tuple[FinancialInputs, float]:
    """
    Feed a project's line items into its deal inputs.

    Category subtotals fill in category_budgets (for category-weighted
    contingency) unless the inputs already carry them. Also returns the
    project-level budget variance % for the risk score.
    """
    if df.empty:
        return inputs, 0.0
    if not inputs.category_budgets:
        inputs = inputs.model_copy(update={"category_budgets": category_budgets(df)})
    return inputs, budget_variance_percent(df)
