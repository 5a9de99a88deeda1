from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Literal

DrawStatus = Literal["pending", "approved", "paid"]
DrawMilestone = Literal[
    "project_start",
    "demo_complete",
    "rough_in",
    "drywall",
    "finishes",
    "final",
]

MILESTONE_LABELS = {
    "project_start": "Project Start",
    "demo_complete": "Demo Complete",
    "rough_in": "Rough-In",
    "drywall": "Drywall",
    "finishes": "Finishes",
    "final": "Final",
}


@dataclass(frozen=True)
class Draw:
    draw_number: int
    amount: float
    status: DrawStatus = "pending"
    milestone: DrawMilestone | None = None
    description: str | None = None
    percent_complete: float | None = None


@dataclass(frozen=True)
class DrawSummary:
    total_budget: float
    total_paid: float
    total_pending: float   # pending + approved, committed but not yet paid
    remaining: float       # negative when draws exceed the budget
    percent_paid: float
    percent_pending: float
    draw_count: int

    @property
    def over_budget(self) -> bool:
        return self.remaining < 0


def summarize_draws(draws: Iterable[Draw], total_budget: float) -> DrawSummary:
    """
    Payment progress against the rehab budget.

    Approved draws count as pending until they are paid. Percentages are 0
    when there is no budget.
    """
    items = list(draws)
    paid = sum(d.amount for d in items if d.status == "paid")
    pending = sum(d.amount for d in items if d.status in ("pending", "approved"))

    def _pct(amount: float) -> float:
        return amount / total_budget * 100.0 if total_budget > 0 else 0.0

    return DrawSummary(
        total_budget=total_budget,
        total_paid=paid,
        total_pending=pending,
        remaining=total_budget - paid - pending,
        percent_paid=_pct(paid),
        percent_pending=_pct(pending),
        draw_count=len(items),
    )


def draw_schedule(draws: Iterable[Draw]) -> list[Draw]:
    """Draws in draw-number order."""
    return sorted(draws, key=lambda d: d.draw_number)


def next_draw_number(draws: Iterable[Draw]) -> int:
    return max((d.draw_number for d in draws), default=0) + 1
