# src/rehabpro/adapters/config.py
import math
from typing import Any

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class AppConfig(BaseSettings):
    # App & logging
    ENV: str = Field(default="dev")
    LOG_LEVEL: str = Field(default="INFO")

    # persistence
    DB_URI: str = Field(default="sqlite:///rehabpro.db")

    # -----------------------------
    # Deal report defaults
    # -----------------------------
    # whole-number percent, e.g. 20 means 20% ROI
    SENSITIVITY_TARGET_ROI: float = Field(default=20.0)

    # Sample deal used by the settings preview
    SAMPLE_ARV: float = Field(default=350_000.0)
    SAMPLE_PURCHASE_PRICE: float = Field(default=200_000.0)
    SAMPLE_REHAB_BUDGET: float = Field(default=50_000.0)
    SAMPLE_CLOSING_COSTS: float = Field(default=5_000.0)
    SAMPLE_HOLD_MONTHS: float = Field(default=4.0)

    model_config = SettingsConfigDict(
        env_prefix="REHABPRO_",
        case_sensitive=False,
        extra="ignore",
    )

    @field_validator("SENSITIVITY_TARGET_ROI", mode="before")
    @classmethod
    def _to_whole_percent(cls, v: Any) -> Any:
        if v is None:
            return v
        if isinstance(v, str):
            v = v.strip().replace("%", "")
        try:
            f = float(v)
        except Exception as err:
            raise ValueError("target ROI must be numeric or percent-like") from err
        if not math.isfinite(f) or f < 0:
            raise ValueError("target ROI must be a finite, non-negative number")
        return f

    @field_validator(
        "SAMPLE_ARV",
        "SAMPLE_PURCHASE_PRICE",
        "SAMPLE_REHAB_BUDGET",
        "SAMPLE_CLOSING_COSTS",
        "SAMPLE_HOLD_MONTHS",
        mode="before",
    )
    @classmethod
    def _non_negative(cls, v: Any) -> Any:
        f = float(v)
        if not math.isfinite(f) or f < 0:
            raise ValueError("sample deal values must be finite and non-negative")
        return f


config = AppConfig()
