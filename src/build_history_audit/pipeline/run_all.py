from __future__ import annotations

from pathlib import Path

import pandas as pd

from build_history_audit.config import AppConfig
from build_history_audit.detectors.base import DetectorResult
from build_history_audit.io.write import write_summary
from build_history_audit.models import DailyStats, SkippedRecord
from build_history_audit.paths import build_output_paths
from build_history_audit.pipeline.daily import assemble_daily_stats
from build_history_audit.pipeline.pass1_profile import build_profile_artifacts
from build_history_audit.pipeline.pass2_detect import run_detectors

DAILY_STATS_FILENAME = "daily_stats.json"


def daily_stats_from_outputs(
    artifacts: dict[str, pd.DataFrame],
    results: dict[str, DetectorResult],
) -> DailyStats:
    counts = artifacts.get("counts_per_day", pd.DataFrame())
    skipped_frame = artifacts.get("skipped_records", pd.DataFrame())
    skipped = [
        SkippedRecord(row_index=int(row.row_index), reason=str(row.reason))
        for row in skipped_frame.itertuples(index=False)
    ]
    failure_rate = results.get("failure_rate")
    abnormal = failure_rate.summary.get("abnormal_indices", []) if failure_rate else []
    return assemble_daily_stats(counts, abnormal=abnormal, skipped=skipped)


def run_all(csv_path: Path | None, out_dir: Path, config: AppConfig) -> Path:
    paths = build_output_paths(out_dir)
    artifacts = build_profile_artifacts(csv_path=csv_path, out_dir=out_dir, config=config)
    results = run_detectors(artifacts=artifacts, out_dir=out_dir, config=config)
    stats = daily_stats_from_outputs(artifacts=artifacts, results=results)
    return write_summary(stats.to_payload(), paths.root / DAILY_STATS_FILENAME)
