from __future__ import annotations

from build_history_audit.config import AppConfig
from build_history_audit.detectors.base import Detector
from build_history_audit.detectors.failure_rate import FailureRateAnomalyDetector


def default_detectors(config: AppConfig) -> list[Detector]:
    detectors: list[Detector] = [
        FailureRateAnomalyDetector(
            sigma_multiplier=config.anomaly.sigma_multiplier,
            zero_pass_step=config.anomaly.zero_pass_step,
            zero_pass_saturation_count=config.anomaly.zero_pass_saturation_count,
        ),
    ]
    return detectors
