from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Any


@dataclass(frozen=True)
class BuildRecord:
    created_at: Any
    duration_seconds: Any
    summary_status: Any


@dataclass(frozen=True)
class SkippedRecord:
    row_index: int
    reason: str


@dataclass(frozen=True)
class DayAggregate:
    day_key: date
    passed_count: int = 0
    failed_count: int = 0
    other_count: int = 0
    total_duration: float = 0.0

    @property
    def record_count(self) -> int:
        return self.passed_count + self.failed_count + self.other_count


@dataclass(frozen=True)
class DailyStats:
    """Per-day aggregates aligned to ``day_keys`` plus anomalous day indices."""

    day_keys: tuple[date, ...] = ()
    labels: tuple[str, ...] = ()
    passed: tuple[int, ...] = ()
    failed: tuple[int, ...] = ()
    duration: tuple[float, ...] = ()
    abnormal: tuple[int, ...] = ()
    skipped: tuple[SkippedRecord, ...] = ()

    @property
    def iso_dates(self) -> tuple[str, ...]:
        return tuple(day.isoformat() for day in self.day_keys)

    def to_payload(self) -> dict[str, Any]:
        return {
            "labels": list(self.labels),
            "iso_dates": list(self.iso_dates),
            "datasets": {
                "passed": [int(value) for value in self.passed],
                "failed": [int(value) for value in self.failed],
                "duration": [float(value) for value in self.duration],
            },
            "abnormal": [int(value) for value in self.abnormal],
            "skipped": [
                {"row_index": int(item.row_index), "reason": item.reason} for item in self.skipped
            ],
        }
