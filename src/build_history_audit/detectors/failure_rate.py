from __future__ import annotations

import logging
from collections.abc import Sequence

import numpy as np
import pandas as pd

from build_history_audit.detectors.base import Detector, DetectorResult
from build_history_audit.detectors.stats import (
    DEFAULT_ZERO_PASS_SATURATION_COUNT,
    DEFAULT_ZERO_PASS_STEP,
    abnormality_coefficients,
    anomaly_threshold,
    indices_above,
)

LOGGER = logging.getLogger(__name__)

DAY_COEFFICIENT_COLUMNS = [
    "day_index",
    "day_key",
    "iso_date",
    "label",
    "n_passed",
    "n_failed",
    "abnormality_coefficient",
    "is_abnormal",
]


def find_abnormal_days(
    passed: Sequence[int] | np.ndarray,
    failed: Sequence[int] | np.ndarray,
    sigma_multiplier: float = 1.0,
    zero_pass_step: float = DEFAULT_ZERO_PASS_STEP,
    zero_pass_saturation_count: int = DEFAULT_ZERO_PASS_SATURATION_COUNT,
) -> list[int]:
    """Indices of days whose abnormality coefficient is strictly above mean + k * std."""
    coefficients = abnormality_coefficients(
        passed,
        failed,
        zero_pass_step=zero_pass_step,
        zero_pass_saturation_count=zero_pass_saturation_count,
    )
    _, _, threshold = anomaly_threshold(coefficients, sigma_multiplier=sigma_multiplier)
    return indices_above(coefficients, threshold)


def _column_values(counts: pd.DataFrame, column: str) -> np.ndarray:
    if column not in counts.columns:
        return np.full(len(counts), None, dtype=object)
    return counts[column].to_numpy()


def _empty_summary() -> dict[str, object]:
    return {
        "n_days": 0,
        "n_abnormal_days": 0,
        "mean": None,
        "std": None,
        "threshold": None,
        "abnormal_indices": [],
    }


class FailureRateAnomalyDetector(Detector):
    name = "failure_rate"

    def __init__(
        self,
        sigma_multiplier: float = 1.0,
        zero_pass_step: float = DEFAULT_ZERO_PASS_STEP,
        zero_pass_saturation_count: int = DEFAULT_ZERO_PASS_SATURATION_COUNT,
    ) -> None:
        self.sigma_multiplier = sigma_multiplier
        self.zero_pass_step = zero_pass_step
        self.zero_pass_saturation_count = zero_pass_saturation_count

    def run(self, df: pd.DataFrame, features: dict[str, pd.DataFrame]) -> DetectorResult:
        counts = features.get("counts_per_day", pd.DataFrame())
        if counts.empty:
            empty = pd.DataFrame(columns=DAY_COEFFICIENT_COLUMNS)
            return DetectorResult(
                detector=self.name,
                summary=_empty_summary(),
                tables={"day_coefficients": empty, "abnormal_days": empty.copy()},
                day_flags=pd.Series([], dtype=bool),
            )

        passed = pd.to_numeric(counts["n_passed"], errors="coerce").fillna(0).astype(int)
        failed = pd.to_numeric(counts["n_failed"], errors="coerce").fillna(0).astype(int)
        coefficients = abnormality_coefficients(
            passed.to_numpy(),
            failed.to_numpy(),
            zero_pass_step=self.zero_pass_step,
            zero_pass_saturation_count=self.zero_pass_saturation_count,
        )
        mean, std, threshold = anomaly_threshold(
            coefficients, sigma_multiplier=self.sigma_multiplier
        )
        abnormal_indices = indices_above(coefficients, threshold)

        flags = np.zeros(coefficients.size, dtype=bool)
        flags[abnormal_indices] = True

        table = pd.DataFrame(
            {
                "day_index": np.arange(coefficients.size, dtype=int),
                "day_key": _column_values(counts, "day_key"),
                "iso_date": _column_values(counts, "iso_date"),
                "label": _column_values(counts, "label"),
                "n_passed": passed.to_numpy(),
                "n_failed": failed.to_numpy(),
                "abnormality_coefficient": coefficients,
                "is_abnormal": flags,
            }
        )
        abnormal = table.loc[table["is_abnormal"]].reset_index(drop=True)
        if abnormal_indices:
            LOGGER.info(
                "Flagged %d of %d day(s) above failure threshold %.4f: %s",
                len(abnormal_indices),
                coefficients.size,
                threshold,
                ", ".join(abnormal["iso_date"].astype(str)),
            )

        return DetectorResult(
            detector=self.name,
            summary={
                "n_days": int(coefficients.size),
                "n_abnormal_days": len(abnormal_indices),
                "mean": mean,
                "std": std,
                "threshold": threshold,
                "sigma_multiplier": float(self.sigma_multiplier),
                "abnormal_indices": abnormal_indices,
            },
            tables={"day_coefficients": table, "abnormal_days": abnormal},
            day_flags=pd.Series(flags, name="is_abnormal"),
        )
