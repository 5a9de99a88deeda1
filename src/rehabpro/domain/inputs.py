from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

RehabScope = Literal["cosmetic", "moderate", "full_gut"]


class FinancialInputs(BaseModel):
    """
    Per-project numbers a deal report is computed from.

    arv / purchase_price may be unknown at lead stage (None).
    Percentages are whole numbers: 8 means 8%.
    """
    model_config = ConfigDict(frozen=True, allow_inf_nan=False)

    arv: float | None = Field(default=None, description="After-repair value")
    purchase_price: float | None = Field(default=None, description="Offer or contract price")
    rehab_budget: float = 0.0
    closing_costs: float = 0.0
    holding_costs_monthly: float = 0.0
    hold_months: float = 0.0
    selling_cost_percent: float = 0.0
    contingency_percent: float = 0.0

    # Optional context for the richer calculators
    financed_amount: float = Field(default=0.0, description="Loan principal; cash-on-cash ROI only")
    year_built: int | None = None
    rehab_scope: RehabScope | None = None
    category_budgets: dict[str, float] | None = None

    @field_validator(
        "arv",
        "purchase_price",
        "rehab_budget",
        "closing_costs",
        "holding_costs_monthly",
        "hold_months",
        "selling_cost_percent",
        "contingency_percent",
        "financed_amount",
    )
    @classmethod
    def _non_negative(cls, v: float | None, info) -> float | None:
        if v is not None and v < 0:
            raise ValueError(f"{info.field_name} must be non-negative")
        return v

    @field_validator("category_budgets")
    @classmethod
    def _non_negative_budgets(cls, v: dict[str, float] | None) -> dict[str, float] | None:
        if v is None:
            return v
        for cat, amount in v.items():
            if amount < 0:
                raise ValueError(f"category budget for {cat} must be non-negative")
        return v
