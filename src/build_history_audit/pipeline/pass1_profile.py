from __future__ import annotations

import logging
from datetime import date
from pathlib import Path

import pandas as pd

from build_history_audit.config import AppConfig
from build_history_audit.features.aggregates import build_basic_quality, build_counts_per_day
from build_history_audit.io.read import load_records, load_table
from build_history_audit.io.write import write_table
from build_history_audit.models import SkippedRecord
from build_history_audit.paths import build_output_paths
from build_history_audit.pipeline.daily import preprocess_records
from build_history_audit.preprocess.time import partition_valid_records

LOGGER = logging.getLogger(__name__)


def prepare_base_dataframe(
    csv_path: Path | None, config: AppConfig
) -> tuple[pd.DataFrame, pd.DataFrame, list[SkippedRecord]]:
    """Return all preprocessed rows, the rows with a usable day key, and skip reasons."""
    df = load_records(csv_path=csv_path, config=config)
    prepared = preprocess_records(df, config)
    valid, skipped = partition_valid_records(prepared)
    return prepared, valid, skipped


def skipped_records_frame(skipped: list[SkippedRecord]) -> pd.DataFrame:
    return pd.DataFrame(
        {
            "row_index": [item.row_index for item in skipped],
            "reason": [item.reason for item in skipped],
        },
        columns=["row_index", "reason"],
    )


def build_profile_artifacts(
    csv_path: Path | None, out_dir: Path, config: AppConfig
) -> dict[str, pd.DataFrame]:
    paths = build_output_paths(out_dir)
    prepared, valid, skipped = prepare_base_dataframe(csv_path=csv_path, config=config)

    artifacts: dict[str, pd.DataFrame] = {
        "counts_per_day": build_counts_per_day(valid, label_format=config.time.label_format),
        "skipped_records": skipped_records_frame(skipped),
        "basic_quality": build_basic_quality(prepared, n_skipped=len(skipped)),
    }

    extension = "parquet" if config.outputs.tables_format == "parquet" else "csv"
    for name, table in artifacts.items():
        output_path = paths.artifacts / f"{name}.{extension}"
        write_table(table, output_path, fmt=config.outputs.tables_format)

    LOGGER.info(
        "Profiled %d build record(s) into %d day(s); %d skipped",
        len(prepared),
        len(artifacts["counts_per_day"]),
        len(skipped),
    )
    return artifacts


def _to_date(value: object) -> date | None:
    if value is None or pd.isna(value):
        return None
    if isinstance(value, pd.Timestamp):
        return value.date()
    if isinstance(value, date):
        return value
    return pd.Timestamp(str(value)).date()


def _coerce_day_columns(df: pd.DataFrame) -> pd.DataFrame:
    working = df.copy()
    if "day_key" in working.columns:
        working["day_key"] = working["day_key"].map(_to_date).astype("object")
    for column in ("iso_date", "label"):
        if column in working.columns:
            working[column] = working[column].astype(str)
    return working


def load_profile_artifacts(out_dir: Path, config: AppConfig) -> dict[str, pd.DataFrame]:
    paths = build_output_paths(out_dir)
    extension = ".parquet" if config.outputs.tables_format == "parquet" else ".csv"

    artifacts: dict[str, pd.DataFrame] = {}
    for path in sorted(paths.artifacts.glob(f"*{extension}")):
        artifacts[path.stem] = _coerce_day_columns(load_table(path))
    return artifacts
