from __future__ import annotations

from pathlib import Path
from typing import Literal
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

import yaml
from pydantic import BaseModel, ConfigDict, Field, field_validator


class ColumnsConfig(BaseModel):
    created_at: str = "created_at"
    duration: str = "duration"
    summary_status: str = "summary_status"


class StatusesConfig(BaseModel):
    passed: str = "passed"
    failed: str = "failed"
    case_sensitive: bool = True


class TimeConfig(BaseModel):
    # None keeps the calendar date exactly as written in the source timestamp.
    timezone: str | None = None
    label_format: str = "%b %d %Y"

    @field_validator("timezone")
    @classmethod
    def _validate_timezone(cls, value: str | None) -> str | None:
        if value is None:
            return None
        try:
            ZoneInfo(value)
        except (ZoneInfoNotFoundError, ValueError) as exc:
            raise ValueError(f"Unknown timezone: {value}") from exc
        return value


class AnomalyConfig(BaseModel):
    sigma_multiplier: float = Field(default=1.0, gt=0.0)
    zero_pass_step: float = Field(default=0.2, ge=0.0, le=1.0)
    zero_pass_saturation_count: int = Field(default=5, ge=0)


class OutputsConfig(BaseModel):
    tables_format: Literal["parquet", "csv"] = "csv"


class AppConfig(BaseModel):
    model_config = ConfigDict(extra="forbid")

    columns: ColumnsConfig = Field(default_factory=ColumnsConfig)
    statuses: StatusesConfig = Field(default_factory=StatusesConfig)
    time: TimeConfig = Field(default_factory=TimeConfig)
    anomaly: AnomalyConfig = Field(default_factory=AnomalyConfig)
    outputs: OutputsConfig = Field(default_factory=OutputsConfig)


DEFAULT_CONFIG_PATH = Path("configs/default.yaml")
CSV_PATH_ENV_VAR = "BUILD_HISTORY_AUDIT_CSV"


def load_config(path: Path) -> AppConfig:
    with path.open("r", encoding="utf-8") as handle:
        data = yaml.safe_load(handle) or {}
    return AppConfig.model_validate(data)

