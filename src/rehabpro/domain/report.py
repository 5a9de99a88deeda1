from dataclasses import asdict, dataclass, field
from typing import Any, Literal

from rehabpro.domain.offer import MaoTarget

DealQuality = Literal["good", "marginal", "bad"]
RiskLevel = Literal["low", "medium", "high"]

DEAL_QUALITY_LABELS = {
    "good": "Good Deal",
    "marginal": "Marginal Deal",
    "bad": "Bad Deal",
}


@dataclass(frozen=True)
class Scenario:
    label: str
    gross_profit: float
    profit_change: float  # vs the base case
    roi: float


@dataclass(frozen=True)
class Sensitivity:
    arv_down_5: Scenario
    arv_down_10: Scenario
    rehab_up_10: Scenario
    rehab_up_20: Scenario
    break_even_arv: float | None       # ARV where gross profit hits 0
    max_purchase_for_target: float     # highest price that still clears target ROI
    target_roi: float                  # whole-number percent


@dataclass(frozen=True)
class DealRatios:
    rehab_to_arv: float       # %
    purchase_to_arv: float    # %
    total_cost_to_arv: float  # %
    profit_margin: float      # gross profit as % of ARV


@dataclass(frozen=True)
class DealReport:
    # cost build-up
    holding_costs: float
    selling_costs: float
    contingency: float
    rehab_with_contingency: float

    # headline numbers
    mao: float
    total_investment: float
    gross_profit: float
    roi: float
    spread: float | None  # MAO - purchase; None until a price is known

    # presentation
    deal_quality: DealQuality
    roi_grade: str
    profit_grade: str
    risk_level: RiskLevel
    ratios: DealRatios
    mao_targets: list[MaoTarget] = field(default_factory=list)
    sensitivity: Sensitivity | None = None

    @property
    def profit_margin(self) -> float:
        return self.ratios.profit_margin

    @property
    def deal_label(self) -> str:
        return DEAL_QUALITY_LABELS[self.deal_quality]

    def to_dict(self) -> dict[str, Any]:
        out = asdict(self)
        out["profit_margin"] = self.profit_margin
        out["deal_label"] = self.deal_label
        return out
