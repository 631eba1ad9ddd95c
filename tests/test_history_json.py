from __future__ import annotations

import json
from datetime import datetime, timedelta
from pathlib import Path

import pytest
from dateutil import tz

from pedometer_stats.model import MetricKind, PeriodKind
from pedometer_stats.sources.history_json import (
    PedometerExportPaths,
    PedometerExportSource,
    _item_to_entry,
    _item_to_goal,
)


def _write(path: Path, data: object) -> None:
    path.write_text(json.dumps(data, ensure_ascii=False), encoding="utf-8")


def test_load_entries_skips_malformed_items(tmp_path: Path) -> None:
    _write(
        tmp_path / "history.json",
        [
            {
                "id": "a1",
                "date": "2025-07-01",
                "startTime": "08:00",
                "endTime": "08:30",
                "steps": 3000,
                "distance": 2000.0,
                "kcal": 21.0,
                "userName": "taro",
            },
            {"date": "not-a-date", "steps": 5},
            {"date": "2025-07-01", "steps": -1},
            {"steps": 10},
            "garbage",
        ],
    )
    src = PedometerExportSource(PedometerExportPaths(root=tmp_path))
    src.validate()
    entries = src.load_entries()

    assert [e.date for e in entries] == ["2025-07-01", "not-a-date"]
    first = entries[0]
    assert first.id == "a1"
    assert first.steps == 3000
    assert first.start_time == "08:00"
    assert first.user_name == "taro"
    assert entries[1].day is None


def test_load_goals_sorted_newest_first(tmp_path: Path) -> None:
    _write(tmp_path / "history.json", [])
    _write(
        tmp_path / "goals.json",
        [
            {
                "targetType": "steps",
                "targetValue": 8000,
                "periodType": "daily",
                "createdAt": "2025-06-01T09:00:00",
                "isActive": False,
            },
            {
                "target_type": "calories",
                "target_value": 300,
                "period_type": "weekly",
                "created_at": "2025-06-10T09:00:00",
            },
            {"targetType": "floors", "targetValue": 3, "periodType": "daily",
             "createdAt": "2025-06-11T09:00:00"},
        ],
    )
    goals = PedometerExportSource(PedometerExportPaths(root=tmp_path)).load_goals()
    assert [g.target_type for g in goals] == [MetricKind.CALORIES, MetricKind.STEPS]
    assert goals[0].period_type is PeriodKind.WEEKLY
    assert goals[0].is_active
    assert not goals[1].is_active
    assert goals[1].created_at == datetime(2025, 6, 1, 9, 0, tzinfo=tz.gettz("Asia/Tokyo"))


def test_load_goals_missing_file_is_empty(tmp_path: Path) -> None:
    _write(tmp_path / "history.json", [])
    assert PedometerExportSource(PedometerExportPaths(root=tmp_path)).load_goals() == []


def test_validate_raises_when_root_missing(tmp_path: Path) -> None:
    missing = tmp_path / "missing"
    src = PedometerExportSource(PedometerExportPaths(root=missing))
    with pytest.raises(FileNotFoundError, match="missing"):
        src.validate()


def test_validate_raises_when_history_missing(tmp_path: Path) -> None:
    src = PedometerExportSource(PedometerExportPaths(root=tmp_path))
    with pytest.raises(FileNotFoundError, match="history.json"):
        src.validate()


def test_load_entries_requires_list(tmp_path: Path) -> None:
    _write(tmp_path / "history.json", {"date": "2025-07-01"})
    src = PedometerExportSource(PedometerExportPaths(root=tmp_path))
    with pytest.raises(ValueError, match="JSON list"):
        src.load_entries()


def test_item_converters_reject_bad_values() -> None:
    assert _item_to_entry({"date": "2025-07-01", "steps": "inf"}) is None
    assert _item_to_entry({"date": "2025-07-01", "kcal": True}) is None
    assert _item_to_goal({"targetType": "steps", "periodType": "daily",
                          "targetValue": 1, "createdAt": "yesterday"}) is None
    assert _item_to_goal(["steps"]) is None


def test_load_goals_mixes_naive_and_aware_timestamps(tmp_path: Path) -> None:
    _write(tmp_path / "history.json", [])
    _write(
        tmp_path / "goals.json",
        [
            {"targetType": "steps", "targetValue": 8000, "periodType": "daily",
             "createdAt": "2025-07-01T10:00:00"},
            {"targetType": "steps", "targetValue": 9000, "periodType": "daily",
             "createdAt": "2025-07-02T10:00:00+09:00"},
            {"targetType": "steps", "targetValue": 7000, "periodType": "daily",
             "createdAt": "2025-07-01T00:30:00Z"},
        ],
    )
    goals = PedometerExportSource(PedometerExportPaths(root=tmp_path)).load_goals()
    assert [g.target_value for g in goals] == [9000, 8000, 7000]
    naive = goals[1].created_at
    assert naive.tzinfo is not None
    assert naive.utcoffset() == timedelta(hours=9)


def test_goal_active_flag_must_be_json_bool() -> None:
    base = {"targetType": "steps", "targetValue": 8000, "periodType": "daily",
            "createdAt": "2025-07-01T10:00:00"}
    assert _item_to_goal({**base, "isActive": "false"}) is None
    assert _item_to_goal({**base, "isActive": 0}) is None
    goal = _item_to_goal({**base, "isActive": False})
    assert goal is not None
    assert not goal.is_active
