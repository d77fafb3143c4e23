from __future__ import annotations

import pandas as pd

from build_history_audit.config import StatusesConfig

PASSED = "passed"
FAILED = "failed"
OTHER = "other"


def normalize_status(df: pd.DataFrame, config: StatusesConfig) -> pd.DataFrame:
    working = df.copy()
    status = working["summary_status"].fillna("").astype(str)
    passed_label = config.passed
    failed_label = config.failed
    if not config.case_sensitive:
        status = status.str.strip().str.casefold()
        passed_label = passed_label.strip().casefold()
        failed_label = failed_label.strip().casefold()
    working["status_normalized"] = status.map({passed_label: PASSED, failed_label: FAILED}).fillna(
        OTHER
    )
    return working
