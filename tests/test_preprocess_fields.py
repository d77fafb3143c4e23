from __future__ import annotations

import numpy as np
import pandas as pd

from build_history_audit.config import StatusesConfig
from build_history_audit.preprocess.duration import coerce_duration
from build_history_audit.preprocess.status import normalize_status


def test_normalize_status_maps_passed_failed_and_other() -> None:
    df = pd.DataFrame({"summary_status": ["passed", "failed", "errored", None, "Passed"]})
    out = normalize_status(df=df, config=StatusesConfig())

    assert out["status_normalized"].tolist() == ["passed", "failed", "other", "other", "other"]


def test_normalize_status_case_insensitive_custom_labels() -> None:
    df = pd.DataFrame({"summary_status": ["SUCCESS", " success ", "Failure", "canceled"]})
    config = StatusesConfig(passed="success", failed="FAILURE", case_sensitive=False)
    out = normalize_status(df=df, config=config)

    assert out["status_normalized"].tolist() == ["passed", "passed", "failed", "other"]


def test_coerce_duration_treats_missing_and_non_numeric_as_zero() -> None:
    df = pd.DataFrame({"duration": [12.5, "30", None, "n/a", np.inf, 0]})
    out = coerce_duration(df=df)

    assert out["duration_seconds"].tolist() == [12.5, 30.0, 0.0, 0.0, 0.0, 0.0]
    assert out["duration_missing"].tolist() == [False, False, True, True, True, False]
    assert not out["duration_seconds"].isna().any()


def test_coerce_duration_rejects_booleans_and_negative_values() -> None:
    df = pd.DataFrame({"duration": [True, False, np.bool_(True), -5, "-1.5", 7]})
    out = coerce_duration(df=df)

    assert out["duration_seconds"].tolist() == [0.0, 0.0, 0.0, 0.0, 0.0, 7.0]
    assert out["duration_missing"].tolist() == [True, True, True, True, True, False]
