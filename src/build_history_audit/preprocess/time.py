from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Any

import pandas as pd

from build_history_audit.config import TimeConfig
from build_history_audit.models import SkippedRecord

LOGGER = logging.getLogger(__name__)

# pd.Timestamp resolves these against the wall clock.
RELATIVE_TIMESTAMP_WORDS = frozenset({"now", "today"})


def _is_missing(value: Any) -> bool:
    if value is None:
        return True
    try:
        return bool(pd.isna(value))
    except (TypeError, ValueError):
        return False


def _parse_created_at(value: Any, timezone: str | None) -> tuple[pd.Timestamp | None, str | None]:
    if _is_missing(value):
        return None, "missing created_at"
    if isinstance(value, str):
        if not value.strip():
            return None, "missing created_at"
        if value.strip().casefold() in RELATIVE_TIMESTAMP_WORDS:
            return None, f"unparseable created_at: {value!r}"
    elif not isinstance(value, (datetime, date)):
        return None, f"unsupported created_at type: {type(value).__name__}"

    try:
        timestamp = pd.Timestamp(value.strip() if isinstance(value, str) else value)
    except (ValueError, TypeError, OverflowError):
        return None, f"unparseable created_at: {value!r}"
    if pd.isna(timestamp):
        return None, "missing created_at"

    # Naive timestamps keep the calendar date they were written with.
    if timezone and timestamp.tzinfo is not None:
        timestamp = timestamp.tz_convert(timezone)
    return timestamp, None


def add_day_keys(df: pd.DataFrame, config: TimeConfig) -> pd.DataFrame:
    """Attach ``timestamp``, ``day_key`` and ``timestamp_error`` columns.

    ``day_key`` is the timestamp truncated to its calendar date. Rows whose
    ``created_at`` cannot be parsed get ``day_key=None`` and a reason in
    ``timestamp_error``; they are kept so the caller can report them.
    """
    working = df.reset_index(drop=True).copy()
    parsed = [_parse_created_at(value, config.timezone) for value in working["created_at"]]

    working["timestamp"] = pd.Series(
        [timestamp for timestamp, _ in parsed], index=working.index, dtype="object"
    )
    working["timestamp_error"] = pd.Series(
        [error for _, error in parsed], index=working.index, dtype="object"
    )
    working["day_key"] = pd.Series(
        [timestamp.date() if timestamp is not None else None for timestamp, _ in parsed],
        index=working.index,
        dtype="object",
    )
    return working


def partition_valid_records(df: pd.DataFrame) -> tuple[pd.DataFrame, list[SkippedRecord]]:
    """Split out rows without a usable day key, returning them as skip reasons."""
    if df.empty:
        return df.copy(), []

    invalid_mask = df["day_key"].isna()
    skipped = [
        SkippedRecord(row_index=int(row_index), reason=str(reason))
        for row_index, reason in df.loc[invalid_mask, "timestamp_error"].items()
    ]
    if skipped:
        LOGGER.warning(
            "Skipped %d of %d build record(s) with missing or unparseable created_at",
            len(skipped),
            len(df),
        )
    return df.loc[~invalid_mask].copy(), skipped


def format_day_label(day_key: date, label_format: str) -> str:
    return day_key.strftime(label_format)
