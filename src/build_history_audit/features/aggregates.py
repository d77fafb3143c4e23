from __future__ import annotations

from datetime import date

import numpy as np
import pandas as pd

from build_history_audit.models import DayAggregate
from build_history_audit.preprocess.status import FAILED, OTHER, PASSED
from build_history_audit.preprocess.time import format_day_label

COUNTS_PER_DAY_COLUMNS = [
    "day_key",
    "iso_date",
    "label",
    "n_passed",
    "n_failed",
    "n_other",
    "n_total",
    "total_duration",
    "failure_rate",
]


def group_record_indices(df: pd.DataFrame) -> dict[date, np.ndarray]:
    """Map each day key, in ascending order, to the row positions recorded on that day."""
    if df.empty:
        return {}
    indices = df.groupby("day_key", sort=True, dropna=True).indices
    return {day_key: np.asarray(indices[day_key], dtype=int) for day_key in sorted(indices)}


def fold_day_aggregate(day_key: date, statuses: np.ndarray, durations: np.ndarray) -> DayAggregate:
    return DayAggregate(
        day_key=day_key,
        passed_count=int(np.count_nonzero(statuses == PASSED)),
        failed_count=int(np.count_nonzero(statuses == FAILED)),
        other_count=int(np.count_nonzero(statuses == OTHER)),
        total_duration=float(np.sum(durations, dtype=float)),
    )


def aggregate_by_day(df: pd.DataFrame) -> list[DayAggregate]:
    """Fold preprocessed records into one immutable aggregate per day, oldest first.

    Expects the ``day_key``, ``status_normalized`` and ``duration_seconds``
    columns produced by the preprocessing steps, with invalid rows removed.
    """
    groups = group_record_indices(df)
    if not groups:
        return []

    statuses = df["status_normalized"].to_numpy(dtype=object)
    durations = df["duration_seconds"].to_numpy(dtype=float)
    return [
        fold_day_aggregate(day_key, statuses[positions], durations[positions])
        for day_key, positions in groups.items()
    ]


def counts_per_day_frame(aggregates: list[DayAggregate], label_format: str) -> pd.DataFrame:
    if not aggregates:
        return pd.DataFrame(columns=COUNTS_PER_DAY_COLUMNS)

    frame = pd.DataFrame(
        {
            "day_key": [aggregate.day_key for aggregate in aggregates],
            "iso_date": [aggregate.day_key.isoformat() for aggregate in aggregates],
            "label": [
                format_day_label(aggregate.day_key, label_format) for aggregate in aggregates
            ],
            "n_passed": [aggregate.passed_count for aggregate in aggregates],
            "n_failed": [aggregate.failed_count for aggregate in aggregates],
            "n_other": [aggregate.other_count for aggregate in aggregates],
            "n_total": [aggregate.record_count for aggregate in aggregates],
            "total_duration": [aggregate.total_duration for aggregate in aggregates],
        }
    )
    decided = frame["n_passed"] + frame["n_failed"]
    frame["failure_rate"] = (frame["n_failed"] / decided).where(decided > 0)
    return frame[COUNTS_PER_DAY_COLUMNS]


def build_counts_per_day(df: pd.DataFrame, label_format: str = "%b %d %Y") -> pd.DataFrame:
    return counts_per_day_frame(aggregate_by_day(df), label_format=label_format)


def build_basic_quality(df: pd.DataFrame, n_skipped: int) -> pd.DataFrame:
    """Data-quality counters for a preprocessed (pre-partition) record frame."""
    n_days = 0
    if "day_key" in df.columns:
        n_days = int(df["day_key"].dropna().nunique())
    metrics = [
        ("rows_total", int(len(df))),
        ("invalid_created_at", int(n_skipped)),
        ("missing_duration", int(df["duration_missing"].sum()) if len(df) else 0),
        ("other_status", int((df["status_normalized"] == OTHER).sum()) if len(df) else 0),
        ("days_total", n_days),
    ]
    return pd.DataFrame(metrics, columns=["metric", "value"])
