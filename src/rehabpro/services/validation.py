# src/rehabpro/services/validation.py

import math
from typing import Any

from rehabpro.domain.inputs import FinancialInputs

MONEY_FIELDS = [
    "arv",
    "purchase_price",
    "rehab_budget",
    "closing_costs",
    "holding_costs_monthly",
    "financed_amount",
]

PERCENT_FIELDS = [
    "selling_cost_percent",
    "contingency_percent",
]

# Optional money fields: blank means "not known yet"
NULLABLE_FIELDS = {"arv", "purchase_price"}


def _to_num(val: Any, field_name: str) -> float:
    """
    Coerce values like:
      - 250000
      - "250000"
      - "$250,000"
      - "8%"   (percent fields stay whole numbers: 8.0)
    into float.
    """
    if isinstance(val, bool):
        raise ValueError(f"Invalid type for {field_name}: bool")
    if isinstance(val, (int, float)):
        num = float(val)
    elif isinstance(val, str):
        s = val.strip().replace(",", "").replace("$", "")
        if s.endswith("%"):
            s = s[:-1]
        try:
            num = float(s)
        except ValueError:
            raise ValueError(f"Invalid number for {field_name}: {val!r}") from None
    else:
        raise ValueError(f"Invalid type for {field_name}: {type(val)}")

    # "nan" and "inf" parse as floats but never describe money
    if not math.isfinite(num):
        raise ValueError(f"Invalid number for {field_name}: {val!r}")
    return num


def _is_blank(val: Any) -> bool:
    return val is None or (isinstance(val, str) and not val.strip())


def prepare_financial_inputs(raw: dict[str, Any]) -> FinancialInputs:
    """
    Normalize a form / API payload into FinancialInputs.

    Responsibilities:
      - Strip currency and percent formatting.
      - Treat blank ARV / purchase price as unknown (None).
      - Default other blanks to 0.
      - Leave range checks (non-negative) to FinancialInputs.
    """
    cleaned: dict[str, Any] = {}

    for f in MONEY_FIELDS:
        val = raw.get(f)
        if _is_blank(val):
            if f not in NULLABLE_FIELDS:
                cleaned[f] = 0.0
            continue
        cleaned[f] = _to_num(val, f)

    for f in PERCENT_FIELDS:
        val = raw.get(f)
        cleaned[f] = 0.0 if _is_blank(val) else _to_num(val, f)

    hm = raw.get("hold_months")
    cleaned["hold_months"] = 0.0 if _is_blank(hm) else _to_num(hm, "hold_months")

    yb = raw.get("year_built")
    if not _is_blank(yb):
        try:
            cleaned["year_built"] = int(_to_num(yb, "year_built"))
        except ValueError:
            raise ValueError("Invalid year_built") from None

    if raw.get("rehab_scope"):
        cleaned["rehab_scope"] = str(raw["rehab_scope"]).strip().lower()

    cats = raw.get("category_budgets")
    if cats:
        if not isinstance(cats, dict):
            raise ValueError("category_budgets must be a mapping of category -> amount")
        cleaned["category_budgets"] = {str(k): _to_num(v, f"category_budgets.{k}") for k, v in cats.items()}

    return FinancialInputs(**cleaned)
