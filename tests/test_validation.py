import pytest
from pydantic import ValidationError

from rehabpro.domain.inputs import FinancialInputs
from rehabpro.services.validation import prepare_financial_inputs


def test_formatted_strings_are_cleaned():
    fi = prepare_financial_inputs(
        {
            "arv": "$250,000",
            "purchase_price": "150000",
            "rehab_budget": 50_000,
            "selling_cost_percent": "8%",
            "contingency_percent": "10",
            "hold_months": "4",
        }
    )

    assert fi.arv == 250_000.0
    assert fi.purchase_price == 150_000.0
    assert fi.selling_cost_percent == 8.0
    assert fi.contingency_percent == 10.0
    assert fi.hold_months == 4.0


def test_small_percents_stay_whole_numbers():
    fi = prepare_financial_inputs({"selling_cost_percent": 0.5})
    assert fi.selling_cost_percent == 0.5


def test_blank_arv_and_price_are_unknown():
    fi = prepare_financial_inputs({"arv": "", "purchase_price": None, "rehab_budget": "  "})

    assert fi.arv is None
    assert fi.purchase_price is None
    assert fi.rehab_budget == 0.0
    assert fi.hold_months == 0.0


def test_optional_context_fields():
    fi = prepare_financial_inputs(
        {
            "year_built": "1948",
            "rehab_scope": " Full_Gut ",
            "category_budgets": {"kitchen": "$20,000", "plumbing": 8000},
            "financed_amount": "120,000",
        }
    )

    assert fi.year_built == 1948
    assert fi.rehab_scope == "full_gut"
    assert fi.category_budgets == {"kitchen": 20_000.0, "plumbing": 8_000.0}
    assert fi.financed_amount == 120_000.0


@pytest.mark.parametrize(
    "raw",
    [
        {"arv": "lots"},
        {"rehab_budget": True},
        {"hold_months": [4]},
        {"year_built": "old"},
        {"category_budgets": ["kitchen"]},
    ],
)
def test_bad_values_raise(raw):
    with pytest.raises(ValueError):
        prepare_financial_inputs(raw)


def test_negative_values_rejected():
    with pytest.raises(ValidationError):
        prepare_financial_inputs({"rehab_budget": -1})


def test_unknown_scope_rejected():
    with pytest.raises(ValidationError):
        prepare_financial_inputs({"rehab_scope": "teardown"})


@pytest.mark.parametrize("bad", ["nan", "NaN", "inf", "-inf", float("nan"), float("inf")])
def test_non_finite_numbers_rejected(bad):
    with pytest.raises(ValueError):
        prepare_financial_inputs({"arv": 250_000, "purchase_price": "150000", "rehab_budget": bad})


def test_non_finite_category_budget_rejected():
    with pytest.raises(ValueError):
        prepare_financial_inputs({"category_budgets": {"kitchen": "inf"}})


def test_inputs_model_refuses_non_finite():
    with pytest.raises(ValidationError):
        FinancialInputs(arv=float("inf"))
    with pytest.raises(ValidationError):
        FinancialInputs(rehab_budget=float("nan"))
