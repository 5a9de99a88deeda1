# entrypoints/cli/budget_variance.py
import os
import sys

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..", "..", "src")))

import argparse

from rehabpro.adapters.logging_utils import get_logger
from rehabpro.adapters.storage import read_line_items, write_df
from rehabpro.analysis.budget_batch import budget_variance_percent, summarize_by_category

log = get_logger(__name__)


def main() -> None:
    ap = argparse.ArgumentParser(description="Roll budget line items up by category")
    ap.add_argument("--csv", required=True, help="Line items (CSV or Parquet)")
    ap.add_argument("--out", required=False, help="Optional output path for the category summary")
    args = ap.parse_args()

    log.info("reading line items", extra={"context": {"path": args.csv}})
    items = read_line_items(args.csv)

    summary = summarize_by_category(items)
    overrun = budget_variance_percent(items)

    print(summary.to_string(index=False))
    print(f"\nProject variance vs forecast: {overrun:+.1f}%")

    if args.out:
        write_df(summary, args.out)
        log.info("wrote category summary", extra={"context": {"path": args.out, "rows": len(summary)}})


if __name__ == "__main__":
    main()
