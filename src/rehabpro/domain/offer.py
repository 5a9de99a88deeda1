from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

from rehabpro.domain.settings import (
    ArvMinusAll,
    CustomPercentage,
    GrossMargin,
    MaoMethod,
    NetProfitTarget,
    SeventyRule,
)


def mao_total_costs(
    method: MaoMethod,
    rehab_with_contingency: float,
    *,
    holding_costs: float = 0.0,
    selling_costs: float = 0.0,
    closing_costs: float = 0.0,
) -> float:
    total = rehab_with_contingency
    if method.include_holding_costs:
        total += holding_costs
    if method.include_selling_costs:
        total += selling_costs
    if method.include_closing_costs:
        total += closing_costs
    return total


def compute_mao(
    method: MaoMethod,
    arv: float | None,
    rehab_with_contingency: float,
    *,
    holding_costs: float = 0.0,
    selling_costs: float = 0.0,
    closing_costs: float = 0.0,
) -> float:
    """
    Maximum allowable offer.

    Not bounded: a negative MAO just means the numbers don't work.
    """
    arv_value = arv or 0.0
    total_costs = mao_total_costs(
        method,
        rehab_with_contingency,
        holding_costs=holding_costs,
        selling_costs=selling_costs,
        closing_costs=closing_costs,
    )

    if isinstance(method, (SeventyRule, CustomPercentage)):
        return arv_value * method.arv_multiplier - total_costs
    if isinstance(method, (ArvMinusAll, NetProfitTarget)):
        return arv_value - total_costs - method.target_profit
    if isinstance(method, GrossMargin):
        return arv_value * (1.0 - method.target_profit_percent / 100.0) - total_costs

    raise ValueError(f"unsupported MAO method: {method!r}")


@dataclass(frozen=True)
class MaoTarget:
    label: str
    target_profit: float
    mao: float


def mao_target_table(
    arv: float | None,
    rehab_with_contingency: float,
    *,
    holding_costs: float,
    selling_costs: float,
    targets: Sequence[float] = (25.0, 20.0, 15.0),
) -> list[MaoTarget]:
    """
    MAO at several profit targets (as % of ARV) next to the classic
    ARV x 70% - rehab rule.
    """
    arv_value = arv or 0.0
    rows = [
        MaoTarget(
            label="70% rule",
            target_profit=arv_value * 0.30,
            mao=arv_value * 0.70 - rehab_with_contingency,
        )
    ]
    for pct in targets:
        profit = arv_value * pct / 100.0
        rows.append(
            MaoTarget(
                label=f"{pct:g}% profit target",
                target_profit=profit,
                mao=arv_value - selling_costs - holding_costs - rehab_with_contingency - profit,
            )
        )
    return rows
