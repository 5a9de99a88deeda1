# tests/test_api_budget.py
import pytest

ITEMS = [
    {"category": "plumbing", "item": "Rough-in", "underwriting_amount": 8000, "forecast_amount": 9000, "actual_amount": 9500},
    {"category": "plumbing", "item": "Fixtures", "underwriting_amount": 2500},
    {"category": "kitchen", "item": "Cabinets", "underwriting_amount": 12000, "forecast_amount": 11000, "actual_amount": 13200},
]


def test_budget_variances(client):
    r = client.post("/budget/variances", json={"items": ITEMS})
    assert r.status_code == 200, r.text

    data = r.json()
    assert len(data["items"]) == 3
    assert data["items"][1]["actual_amount"] is None
    assert data["items"][1]["total_variance"] == pytest.approx(-2_500)

    cats = {c["category"]: c for c in data["categories"]}
    assert cats["plumbing"]["budget_amount"] == pytest.approx(11_500)
    assert cats["kitchen"]["variance_percent"] == pytest.approx(20.0)

    assert len(data["alerts"]) == 3
    assert data["budget_variance_percent"] == pytest.approx(13.5)


def test_budget_variances_custom_alerts(client):
    r = client.post(
        "/budget/variances",
        json={"items": ITEMS, "alerts": {"warning_percent": 15, "critical_percent": 25}},
    )
    assert r.status_code == 200, r.text

    alerts = r.json()["alerts"]
    # only the 20% cabinets overrun clears a 15% warning
    assert [(a["item"], a["level"]) for a in alerts] == [("Cabinets", "warning")]


def test_budget_variances_needs_category(client):
    r = client.post("/budget/variances", json={"items": [{"item": "Mystery"}]})
    assert r.status_code == 422
