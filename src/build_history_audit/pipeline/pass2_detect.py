from __future__ import annotations

import logging
from pathlib import Path

import pandas as pd

from build_history_audit.config import AppConfig
from build_history_audit.detectors.base import DetectorResult
from build_history_audit.detectors.registry import default_detectors
from build_history_audit.io.write import write_summary, write_table
from build_history_audit.paths import build_output_paths

LOGGER = logging.getLogger(__name__)


def _day_flags_table(flags: pd.Series) -> pd.DataFrame:
    return flags.rename("is_abnormal").to_frame().reset_index().rename(columns={"index": "day_index"})


def run_detectors(
    artifacts: dict[str, pd.DataFrame],
    out_dir: Path,
    config: AppConfig,
) -> dict[str, DetectorResult]:
    paths = build_output_paths(out_dir)
    extension = "parquet" if config.outputs.tables_format == "parquet" else "csv"
    feature_context: dict[str, pd.DataFrame] = dict(artifacts)
    counts = feature_context.get("counts_per_day", pd.DataFrame())

    results: dict[str, DetectorResult] = {}
    for detector in default_detectors(config):
        result = detector.run(df=counts, features=feature_context)
        results[result.detector] = result

        write_summary(result.summary, paths.summary / f"{result.detector}.json")
        for table_name, table in result.tables.items():
            write_table(
                table,
                paths.tables / f"{result.detector}__{table_name}.{extension}",
                fmt=config.outputs.tables_format,
            )
            feature_context[f"{result.detector}.{table_name}"] = table

        if result.day_flags is not None:
            write_table(
                _day_flags_table(result.day_flags),
                paths.flags / f"{result.detector}__day_flags.{extension}",
                fmt=config.outputs.tables_format,
            )
        LOGGER.info("Detector %s finished: %s", result.detector, result.summary)
    return results
