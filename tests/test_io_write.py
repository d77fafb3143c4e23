from __future__ import annotations

import json
from datetime import date
from pathlib import Path

import numpy as np
import pandas as pd
import pytest

from build_history_audit.io.write import write_summary, write_table
from build_history_audit.logging import configure_logging


def test_write_summary_serializes_numpy_and_dates(tmp_path: Path) -> None:
    path = write_summary(
        {
            "n_days": np.int64(3),
            "threshold": np.float64(0.75),
            "flags": np.array([False, True]),
            "first_day": date(2015, 1, 5),
        },
        tmp_path / "nested" / "summary.json",
    )

    assert json.loads(path.read_text(encoding="utf-8")) == {
        "flags": [False, True],
        "first_day": "2015-01-05",
        "n_days": 3,
        "threshold": 0.75,
    }


def test_write_table_rejects_unknown_format(tmp_path: Path) -> None:
    with pytest.raises(ValueError, match="Unsupported table format"):
        write_table(pd.DataFrame({"x": [1]}), tmp_path / "table.xlsx", fmt="xlsx")


def test_configure_logging_rejects_unknown_level() -> None:
    with pytest.raises(ValueError, match="Unknown log level"):
        configure_logging("chatty")
