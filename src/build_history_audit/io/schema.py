from __future__ import annotations

from dataclasses import dataclass

import pandas as pd

from build_history_audit.config import ColumnsConfig


@dataclass(frozen=True)
class CanonicalColumns:
    created_at: str = "created_at"
    duration: str = "duration"
    summary_status: str = "summary_status"


CANONICAL_COLUMNS = [
    CanonicalColumns.created_at,
    CanonicalColumns.duration,
    CanonicalColumns.summary_status,
]


def normalize_columns(df: pd.DataFrame, columns: ColumnsConfig) -> pd.DataFrame:
    """Rename source columns to canonical names used by the aggregator/detectors."""
    rename_map = {
        columns.created_at: CanonicalColumns.created_at,
        columns.duration: CanonicalColumns.duration,
        columns.summary_status: CanonicalColumns.summary_status,
    }
    missing = [source for source in rename_map if source not in df.columns]
    if missing:
        missing_str = ", ".join(missing)
        raise ValueError(f"Missing required columns in CSV: {missing_str}")
    return df.rename(columns=rename_map)
