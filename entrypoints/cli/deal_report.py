# entrypoints/cli/deal_report.py
import os
import sys

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..", "..", "src")))

import argparse
import json

from rehabpro.adapters.config import config
from rehabpro.adapters.logging_utils import get_logger
from rehabpro.adapters.storage import read_json, read_line_items
from rehabpro.analysis.budget_batch import apply_line_items
from rehabpro.domain.settings import CalculationSettings, settings_from_row
from rehabpro.services.deal_engine import compute_deal_report
from rehabpro.services.validation import prepare_financial_inputs

log = get_logger(__name__)


def _load_settings(path: str | None) -> CalculationSettings | None:
    if not path:
        return None
    data = read_json(path)
    # accept either the nested profile shape or the flat settings-table row
    if "mao_method" in data:
        return settings_from_row(data)
    return CalculationSettings.model_validate(data)


def main() -> None:
    ap = argparse.ArgumentParser(description="Print a deal report as JSON")
    ap.add_argument("--inputs", required=True, help="JSON file with the project's financial inputs")
    ap.add_argument(
        "--settings",
        required=False,
        help="Optional JSON settings profile; without it the quick six-field calculator is used",
    )
    ap.add_argument(
        "--line-items",
        required=False,
        help="Optional budget line items (CSV or Parquet) for category budgets and budget variance",
    )
    ap.add_argument("--target-roi", type=float, default=config.SENSITIVITY_TARGET_ROI)
    args = ap.parse_args()

    inputs = prepare_financial_inputs(read_json(args.inputs))
    settings = _load_settings(args.settings)

    variance_pct = 0.0
    if args.line_items:
        inputs, variance_pct = apply_line_items(inputs, read_line_items(args.line_items))

    log.info("computing deal report", extra={"context": {"inputs": args.inputs, "settings": args.settings}})
    report = compute_deal_report(
        inputs,
        settings,
        budget_variance_pct=variance_pct,
        target_roi=args.target_roi,
    )

    print(json.dumps(report.to_dict(), indent=2))


if __name__ == "__main__":
    main()
