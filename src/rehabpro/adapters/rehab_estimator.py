# src/rehabpro/adapters/rehab_estimator.py
from __future__ import annotations

import math
from dataclasses import dataclass, field

from rehabpro.domain.costs import age_multiplier


def _round_half_up(x: float) -> float:
    # whole dollars, halves round up (22.5 -> 23)
    return float(math.floor(x + 0.5))


def _default_costs() -> dict[str, dict[str, float]]:
    # $/sqft bands by scope
    return {
        "cosmetic": {"low": 15.0, "mid": 25.0, "high": 40.0},
        "moderate": {"low": 35.0, "mid": 55.0, "high": 80.0},
        "full_gut": {"low": 70.0, "mid": 100.0, "high": 150.0},
    }


@dataclass
class RehabEstimatorConfig:
    """
    Per-square-foot rehab bands by scope of work.

    Swap the bands for local numbers; keep the interface the same.
    """
    cost_per_sqft: dict[str, dict[str, float]] = field(default_factory=_default_costs)


@dataclass(frozen=True)
class RehabEstimate:
    scope: str
    age_multiplier: float
    low: float
    mid: float
    high: float
    per_sqft_low: float
    per_sqft_mid: float
    per_sqft_high: float


class RehabEstimator:
    """
    Ballpark rehab budget from square footage, age and scope.

    Inputs:
      - sqft (required)
      - year_built (optional)
      - scope: cosmetic | moderate | full_gut

    Output:
      - low / mid / high budget in whole dollars, or None without sqft.
    """

    def __init__(self, cfg: RehabEstimatorConfig | None = None) -> None:
        self.cfg = cfg or RehabEstimatorConfig()

    def estimate(
        self,
        sqft: float | None,
        year_built: int | None = None,
        scope: str = "moderate",
        as_of_year: int | None = None,
    ) -> RehabEstimate | None:
        if not sqft or sqft <= 0:
            return None

        bands = self.cfg.cost_per_sqft.get(scope)
        if bands is None:
            raise ValueError(f"unknown rehab scope: {scope}")

        mult = age_multiplier(year_built, as_of_year)

        return RehabEstimate(
            scope=scope,
            age_multiplier=mult,
            low=_round_half_up(sqft * bands["low"] * mult),
            mid=_round_half_up(sqft * bands["mid"] * mult),
            high=_round_half_up(sqft * bands["high"] * mult),
            per_sqft_low=_round_half_up(bands["low"] * mult),
            per_sqft_mid=_round_half_up(bands["mid"] * mult),
            per_sqft_high=_round_half_up(bands["high"] * mult),
        )
