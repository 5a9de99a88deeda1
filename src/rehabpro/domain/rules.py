from rehabpro.domain.report import DealQuality, DealRatios, RiskLevel


def classify_deal(gross_profit: float, purchase_price: float | None, mao: float) -> DealQuality:
    """
    good     - profitable and bought at or under MAO
    marginal - profitable but paying over MAO (or no price yet)
    bad      - not profitable
    """
    if gross_profit <= 0:
        return "bad"
    if purchase_price and purchase_price > 0 and purchase_price <= mao:
        return "good"
    return "marginal"


def compute_ratios(
    arv: float | None,
    purchase_price: float | None,
    rehab_with_contingency: float,
    total_investment: float,
    gross_profit: float,
) -> DealRatios:
    if not arv or arv <= 0:
        return DealRatios(0.0, 0.0, 0.0, 0.0)
    return DealRatios(
        rehab_to_arv=rehab_with_contingency / arv * 100.0,
        purchase_to_arv=(purchase_price or 0.0) / arv * 100.0,
        total_cost_to_arv=total_investment / arv * 100.0,
        profit_margin=gross_profit / arv * 100.0,
    )


def assess_risk(ratios: DealRatios, roi: float, budget_variance_pct: float = 0.0) -> RiskLevel:
    score = 0

    # 1. Rehab heavy relative to ARV
    if ratios.rehab_to_arv > 30:
        score += 2
    elif ratios.rehab_to_arv > 20:
        score += 1

    # 2. Paying close to retail
    if ratios.purchase_to_arv > 75:
        score += 2
    elif ratios.purchase_to_arv > 65:
        score += 1

    # 3. Thin return
    if roi < 15:
        score += 2
    elif roi < 20:
        score += 1

    # 4. Budget already running over
    if budget_variance_pct > 10:
        score += 1

    if score >= 5:
        return "high"
    if score >= 3:
        return "medium"
    return "low"
