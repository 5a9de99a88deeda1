from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Literal

from rehabpro.domain.settings import VarianceAlertSettings

AlertLevel = Literal["ok", "warning", "critical"]
Comparison = Literal["forecast_vs_underwriting", "actual_vs_forecast"]


@dataclass(frozen=True)
class Variances:
    forecast_variance: float  # forecast - underwriting
    actual_variance: float    # actual - best available estimate
    total_variance: float     # actual - underwriting


def compute_variances(
    underwriting: float | None,
    forecast: float | None,
    actual: float | None = None,
) -> Variances:
    """
    Three signed deltas for one budget line.

    Actual spend is compared to the forecast when one exists, otherwise to
    the underwriting number. Missing amounts count as 0.
    """
    uw = underwriting or 0.0
    fc = forecast or 0.0
    act = actual or 0.0

    estimate = fc if fc > 0 else uw
    return Variances(
        forecast_variance=fc - uw,
        actual_variance=act - estimate,
        total_variance=act - uw,
    )


@dataclass(frozen=True)
class BudgetLineItem:
    category: str
    item: str
    qty: float = 0.0
    unit: str = "ls"
    rate: float = 0.0
    underwriting_amount: float = 0.0
    forecast_amount: float = 0.0
    actual_amount: float | None = None

    # Variances are always derived from the three amounts; never stored.
    @property
    def variances(self) -> Variances:
        return compute_variances(self.underwriting_amount, self.forecast_amount, self.actual_amount)

    @property
    def forecast_variance(self) -> float:
        return self.variances.forecast_variance

    @property
    def actual_variance(self) -> float:
        return self.variances.actual_variance

    @property
    def total_variance(self) -> float:
        return self.variances.total_variance

    @property
    def budget_amount(self) -> float:
        """Best available estimate: forecast if set, else underwriting."""
        return self.forecast_amount if self.forecast_amount > 0 else self.underwriting_amount


def variance_percent(variance: float, base: float) -> float:
    if base == 0:
        return 0.0
    return variance / base * 100.0


def classify_variance(variance: float, base: float, alerts: VarianceAlertSettings) -> AlertLevel:
    # only overruns raise alerts; any spend on an unbudgeted line is critical
    if base <= 0:
        return "critical" if variance > 0 else "ok"
    pct = variance_percent(variance, base)
    if pct >= alerts.critical_percent:
        return "critical"
    if pct >= alerts.warning_percent:
        return "warning"
    return "ok"


@dataclass(frozen=True)
class VarianceAlert:
    category: str
    item: str
    comparison: Comparison
    level: AlertLevel
    variance: float
    variance_percent: float


def line_item_alerts(
    items: Iterable[BudgetLineItem],
    alerts: VarianceAlertSettings,
) -> list[VarianceAlert]:
    """
    Alerts for every line whose forecast or actual overruns the configured
    warning / critical thresholds.
    """
    if not alerts.enabled:
        return []

    out: list[VarianceAlert] = []
    for li in items:
        v = li.variances

        if alerts.alert_on_forecast and li.forecast_amount > 0:
            level = classify_variance(v.forecast_variance, li.underwriting_amount, alerts)
            if level != "ok":
                out.append(
                    VarianceAlert(
                        category=li.category,
                        item=li.item,
                        comparison="forecast_vs_underwriting",
                        level=level,
                        variance=v.forecast_variance,
                        variance_percent=variance_percent(v.forecast_variance, li.underwriting_amount),
                    )
                )

        if alerts.alert_on_actual and li.actual_amount is not None:
            level = classify_variance(v.actual_variance, li.budget_amount, alerts)
            if level != "ok":
                out.append(
                    VarianceAlert(
                        category=li.category,
                        item=li.item,
                        comparison="actual_vs_forecast",
                        level=level,
                        variance=v.actual_variance,
                        variance_percent=variance_percent(v.actual_variance, li.budget_amount),
                    )
                )
    return out
