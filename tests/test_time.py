from __future__ import annotations

from datetime import date

import pandas as pd

from build_history_audit.config import TimeConfig
from build_history_audit.preprocess.time import (
    add_day_keys,
    format_day_label,
    partition_valid_records,
)


def test_add_day_keys_truncates_time_of_day() -> None:
    df = pd.DataFrame(
        {
            "created_at": [
                "2015-01-05 00:00:01 UTC",
                "2015-01-05 23:59:59 UTC",
                "2015-01-06T08:30:00",
            ]
        }
    )
    out = add_day_keys(df=df, config=TimeConfig())

    assert out["day_key"].tolist() == [date(2015, 1, 5), date(2015, 1, 5), date(2015, 1, 6)]
    assert out["timestamp_error"].isna().all()


def test_add_day_keys_converts_aware_timestamps_when_timezone_configured() -> None:
    df = pd.DataFrame({"created_at": ["2015-01-05T23:30:00+00:00", "2015-01-05 10:00:00"]})

    as_written = add_day_keys(df=df, config=TimeConfig())
    converted = add_day_keys(df=df, config=TimeConfig(timezone="Europe/Berlin"))

    assert as_written.loc[0, "day_key"] == date(2015, 1, 5)
    assert converted.loc[0, "day_key"] == date(2015, 1, 6)
    # Naive timestamps are never shifted.
    assert converted.loc[1, "day_key"] == date(2015, 1, 5)


def test_partition_valid_records_reports_unparseable_created_at() -> None:
    df = pd.DataFrame(
        {
            "created_at": [
                "2015-01-05 10:00:00",
                "not a date",
                None,
                "",
                42,
                "now",
                " Today ",
            ],
        }
    )
    out = add_day_keys(df=df, config=TimeConfig())
    valid, skipped = partition_valid_records(out)

    assert valid.index.tolist() == [0]
    assert [item.row_index for item in skipped] == [1, 2, 3, 4, 5, 6]
    assert "unparseable" in skipped[0].reason
    assert skipped[1].reason == "missing created_at"
    assert skipped[2].reason == "missing created_at"
    assert "unsupported" in skipped[3].reason
    assert skipped[4].reason == "unparseable created_at: 'now'"
    assert skipped[5].reason == "unparseable created_at: ' Today '"
    assert out["day_key"].iloc[1:].isna().all()


def test_partition_valid_records_handles_empty_frame() -> None:
    out = add_day_keys(df=pd.DataFrame({"created_at": []}), config=TimeConfig())
    valid, skipped = partition_valid_records(out)

    assert valid.empty
    assert skipped == []


def test_format_day_label_uses_weekday_free_month_day_year() -> None:
    assert format_day_label(date(2015, 1, 5), "%b %d %Y") == "Jan 05 2015"
