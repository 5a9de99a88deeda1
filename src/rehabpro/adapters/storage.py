import json
from pathlib import Path
from typing import Any

import pandas as pd

_COLUMN_DEFAULTS: dict[str, Any] = {
    "item": "",
    "qty": 0.0,
    "unit": "ls",
    "rate": 0.0,
    "underwriting_amount": 0.0,
    "forecast_amount": 0.0,
    "actual_amount": None,
}


def read_line_items(path: str) -> pd.DataFrame:
    """
    Budget line items from CSV or Parquet.

    Missing optional columns are added (amounts default to 0, actual stays blank).
    """
    df = pd.read_parquet(path) if path.endswith(".parquet") else pd.read_csv(path)

    if "category" not in df.columns:
        raise ValueError(f"{path}: line items need a 'category' column")

    for col, default in _COLUMN_DEFAULTS.items():
        if col not in df.columns:
            df[col] = default
    return df


def write_df(df: pd.DataFrame, path: str) -> None:
    Path(path).parent.mkdir(parents=True, exist_ok=True)
    if path.endswith(".parquet"):
        df.to_parquet(path, index=False)
    else:
        df.to_csv(path, index=False)


def read_json(path: str) -> dict[str, Any]:
    with open(path, encoding="utf-8") as fh:
        data = json.load(fh)
    if not isinstance(data, dict):
        raise ValueError(f"{path}: expected a JSON object")
    return data
