from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

import pandas as pd

from build_history_audit.config import AppConfig
from build_history_audit.detectors.failure_rate import find_abnormal_days
from build_history_audit.features.aggregates import build_counts_per_day
from build_history_audit.io.read import records_to_frame
from build_history_audit.models import BuildRecord, DailyStats, SkippedRecord
from build_history_audit.preprocess.duration import coerce_duration
from build_history_audit.preprocess.status import normalize_status
from build_history_audit.preprocess.time import add_day_keys, partition_valid_records


def preprocess_records(df: pd.DataFrame, config: AppConfig) -> pd.DataFrame:
    """Attach day keys, normalized statuses and numeric durations to canonical records."""
    working = add_day_keys(df=df, config=config.time)
    working = normalize_status(df=working, config=config.statuses)
    return coerce_duration(df=working)


def assemble_daily_stats(
    counts_per_day: pd.DataFrame,
    abnormal: Iterable[int],
    skipped: Iterable[SkippedRecord] = (),
) -> DailyStats:
    return DailyStats(
        day_keys=tuple(counts_per_day["day_key"]) if not counts_per_day.empty else (),
        labels=tuple(str(label) for label in counts_per_day.get("label", [])),
        passed=tuple(int(value) for value in counts_per_day.get("n_passed", [])),
        failed=tuple(int(value) for value in counts_per_day.get("n_failed", [])),
        duration=tuple(float(value) for value in counts_per_day.get("total_duration", [])),
        abnormal=tuple(sorted({int(index) for index in abnormal})),
        skipped=tuple(skipped),
    )


def build_daily_stats(
    records: pd.DataFrame | Iterable[BuildRecord | Mapping[str, Any]],
    config: AppConfig | None = None,
) -> DailyStats:
    """Aggregate build records by calendar day and flag days with abnormal failure rates.

    ``records`` is a fully materialized snapshot: a DataFrame with canonical
    columns, or a sequence of ``BuildRecord`` / mappings with ``created_at``,
    ``duration`` and ``summary_status`` keys. Records whose ``created_at`` cannot
    be parsed are left out and returned in ``DailyStats.skipped``.
    """
    cfg = config or AppConfig()
    prepared = preprocess_records(records_to_frame(records), cfg)
    valid, skipped = partition_valid_records(prepared)
    counts = build_counts_per_day(valid, label_format=cfg.time.label_format)
    abnormal = find_abnormal_days(
        counts["n_passed"].to_numpy(dtype=int),
        counts["n_failed"].to_numpy(dtype=int),
        sigma_multiplier=cfg.anomaly.sigma_multiplier,
        zero_pass_step=cfg.anomaly.zero_pass_step,
        zero_pass_saturation_count=cfg.anomaly.zero_pass_saturation_count,
    )
    return assemble_daily_stats(counts, abnormal=abnormal, skipped=skipped)
