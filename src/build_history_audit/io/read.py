from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import asdict
from pathlib import Path
from typing import Any

import pandas as pd

from build_history_audit.config import AppConfig
from build_history_audit.io.schema import CANONICAL_COLUMNS, CanonicalColumns, normalize_columns
from build_history_audit.models import BuildRecord


def _validate_required_columns(df: pd.DataFrame) -> pd.DataFrame:
    for column in CANONICAL_COLUMNS:
        if column not in df.columns:
            raise ValueError(f"Normalized data missing column: {column}")
    return df


def load_records(csv_path: Path | None, config: AppConfig) -> pd.DataFrame:
    """Load build records from CSV and return canonical columns."""
    if csv_path is None:
        raise ValueError("csv_path is required to load build records")

    # utf-8-sig strips BOM-prefixed headers commonly found in exported CSV files.
    df = pd.read_csv(csv_path, encoding="utf-8-sig")
    normalized = normalize_columns(df=df, columns=config.columns)
    return _validate_required_columns(normalized)


def _record_to_row(record: BuildRecord | Mapping[str, Any]) -> dict[str, Any]:
    if isinstance(record, BuildRecord):
        row = asdict(record)
        return {
            CanonicalColumns.created_at: row["created_at"],
            CanonicalColumns.duration: row["duration_seconds"],
            CanonicalColumns.summary_status: row["summary_status"],
        }
    return {column: record.get(column) for column in CANONICAL_COLUMNS}


def records_to_frame(
    records: pd.DataFrame | Iterable[BuildRecord | Mapping[str, Any]],
) -> pd.DataFrame:
    """Materialize an in-memory record sequence as a canonical DataFrame snapshot."""
    if isinstance(records, pd.DataFrame):
        return _validate_required_columns(records.copy())
    rows = [_record_to_row(record) for record in records]
    return pd.DataFrame(rows, columns=CANONICAL_COLUMNS)


def load_table(path: Path) -> pd.DataFrame:
    if path.suffix == ".parquet":
        return pd.read_parquet(path)
    if path.suffix == ".csv":
        return pd.read_csv(path)
    raise ValueError(f"Unsupported table file type: {path.suffix}")
