from __future__ import annotations

from collections.abc import Sequence

import numpy as np

DEFAULT_ZERO_PASS_STEP = 0.2
DEFAULT_ZERO_PASS_SATURATION_COUNT = 5


def abnormality_coefficients(
    passed: Sequence[int] | np.ndarray,
    failed: Sequence[int] | np.ndarray,
    zero_pass_step: float = DEFAULT_ZERO_PASS_STEP,
    zero_pass_saturation_count: int = DEFAULT_ZERO_PASS_SATURATION_COUNT,
) -> np.ndarray:
    """Per-day failure severity.

    Days with at least one passed build use the plain failure rate. Days with no
    passed build fall back to ``zero_pass_step * failed`` up to
    ``zero_pass_saturation_count`` failures, and 1.0 beyond that.
    """
    passed_arr = np.asarray(passed, dtype=float)
    failed_arr = np.asarray(failed, dtype=float)
    if passed_arr.shape != failed_arr.shape:
        raise ValueError(
            f"passed and failed must be aligned, got {passed_arr.size} and {failed_arr.size} days"
        )
    if passed_arr.size == 0:
        return np.array([], dtype=float)

    has_passed = passed_arr > 0.0
    rate = np.divide(
        failed_arr,
        passed_arr + failed_arr,
        out=np.zeros_like(failed_arr, dtype=float),
        where=has_passed,
    )
    fallback = np.where(
        failed_arr <= float(zero_pass_saturation_count),
        zero_pass_step * failed_arr,
        1.0,
    )
    return np.where(has_passed, rate, fallback)


def anomaly_threshold(
    coefficients: np.ndarray,
    sigma_multiplier: float = 1.0,
) -> tuple[float, float, float]:
    """Return mean, population standard deviation and ``mean + k * std``."""
    if coefficients.size == 0:
        return float("nan"), float("nan"), float("nan")
    mean = float(np.mean(coefficients))
    std = float(np.std(coefficients, ddof=0))
    return mean, std, mean + sigma_multiplier * std


def indices_above(values: np.ndarray, threshold: float) -> list[int]:
    if values.size == 0:
        return []
    return [int(index) for index in np.flatnonzero(values > threshold)]
