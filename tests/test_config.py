from __future__ import annotations

from pathlib import Path

import pytest
import yaml
from pydantic import ValidationError

from build_history_audit.config import AppConfig, load_config


def test_load_config_defaults_from_empty_file(tmp_path: Path) -> None:
    config_path = tmp_path / "config.yaml"
    config_path.write_text("", encoding="utf-8")

    cfg = load_config(config_path)

    assert cfg.columns.created_at == "created_at"
    assert cfg.columns.duration == "duration"
    assert cfg.columns.summary_status == "summary_status"
    assert cfg.statuses.passed == "passed"
    assert cfg.statuses.failed == "failed"
    assert cfg.time.timezone is None
    assert cfg.time.label_format == "%b %d %Y"
    assert cfg.anomaly.sigma_multiplier == 1.0
    assert cfg.anomaly.zero_pass_step == 0.2
    assert cfg.anomaly.zero_pass_saturation_count == 5
    assert cfg.outputs.tables_format == "csv"


def test_load_config_overrides(tmp_path: Path) -> None:
    config_data = {
        "columns": {
            "created_at": "Created At",
            "duration": "Duration (s)",
            "summary_status": "Status",
        },
        "statuses": {"passed": "SUCCESS", "failed": "FAILURE", "case_sensitive": False},
        "time": {"timezone": "Europe/Berlin", "label_format": "%Y-%m-%d"},
        "anomaly": {"sigma_multiplier": 2.0},
        "outputs": {"tables_format": "parquet"},
    }
    config_path = tmp_path / "config.yaml"
    config_path.write_text(yaml.safe_dump(config_data), encoding="utf-8")

    cfg = load_config(config_path)

    assert cfg.columns.created_at == "Created At"
    assert cfg.statuses.passed == "SUCCESS"
    assert cfg.statuses.case_sensitive is False
    assert cfg.time.timezone == "Europe/Berlin"
    assert cfg.anomaly.sigma_multiplier == 2.0
    assert cfg.outputs.tables_format == "parquet"


def test_config_rejects_unknown_sections_and_bad_values() -> None:
    with pytest.raises(ValidationError):
        AppConfig.model_validate({"charts": {"type": "StackedBar"}})
    with pytest.raises(ValidationError):
        AppConfig.model_validate({"anomaly": {"sigma_multiplier": 0}})
    with pytest.raises(ValidationError, match="Unknown timezone"):
        AppConfig.model_validate({"time": {"timezone": "Mars/Olympus_Mons"}})
