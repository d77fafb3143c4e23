from __future__ import annotations

import numpy as np
import pandas as pd


def _is_bool(value: object) -> bool:
    return isinstance(value, (bool, np.bool_))


def coerce_duration(df: pd.DataFrame) -> pd.DataFrame:
    """Add ``duration_seconds``; missing, non-numeric, boolean, negative and
    non-finite values become 0 and are marked in ``duration_missing``."""
    working = df.copy()
    raw = working["duration"]
    is_bool = raw.map(_is_bool).astype(bool)
    numeric = pd.to_numeric(raw.where(~is_bool), errors="coerce").astype(float)
    values = numeric.to_numpy()
    working["duration_missing"] = ~np.isfinite(values) | (values < 0)
    working["duration_seconds"] = numeric.where(~working["duration_missing"], 0.0)
    return working
