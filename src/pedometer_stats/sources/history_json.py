"""歩数計アプリのエクスポート (history.json / goals.json) の読み込み。"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Any

from dateutil import parser as date_parser
from dateutil import tz

from pedometer_stats.config import DEFAULT_TIMEZONE
from pedometer_stats.model import Goal, HistoryEntry, MetricKind, PeriodKind
from pedometer_stats.sources.base import DataSource, SourcePaths

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PedometerExportPaths(SourcePaths):
    """Paths for a pedometer export directory."""

    # root: folder containing history.json and (optionally) goals.json

    @property
    def history_file(self) -> Path:
        return self.root / "history.json"

    @property
    def goals_file(self) -> Path:
        return self.root / "goals.json"


class PedometerExportSource(DataSource):
    """Reads history entries and goals saved by the tracking app."""

    _paths: PedometerExportPaths

    def validate(self) -> None:
        """Validate that the export directory and history file exist."""
        if not self._paths.root.exists():
            raise FileNotFoundError(str(self._paths.root))
        if not self._paths.history_file.exists():
            raise FileNotFoundError(str(self._paths.history_file))

    def load_entries(self) -> list[HistoryEntry]:
        """Parse history.json into typed entries.

        Items that are not objects or miss a required field are skipped. Entries
        with a malformed date are kept; period filters leave them out.

        Raises:
            ValueError: If the file is not a JSON list.
        """
        out: list[HistoryEntry] = []
        for item in self._read_json_list(self._paths.history_file):
            entry = _item_to_entry(item)
            if entry is None:
                logger.debug("Skipping malformed history item: %r", item)
                continue
            out.append(entry)
        return out

    def load_goals(self) -> list[Goal]:
        """Parse goals.json; an absent file means no goals yet."""
        if not self._paths.goals_file.exists():
            return []
        out: list[Goal] = []
        for item in self._read_json_list(self._paths.goals_file):
            goal = _item_to_goal(item)
            if goal is None:
                logger.debug("Skipping malformed goal item: %r", item)
                continue
            out.append(goal)
        out.sort(key=lambda g: g.created_at, reverse=True)
        return out


def _number(value: Any) -> float | None:
    """float に変換する。数値でない・負の場合は None。"""
    if isinstance(value, bool) or not isinstance(value, int | float | str):
        return None
    try:
        out = float(value)
    except ValueError:
        return None
    return out if math.isfinite(out) and out >= 0 else None


def _item_to_entry(item: Any) -> HistoryEntry | None:
    if not isinstance(item, dict):
        return None
    date_key = item.get("date")
    if not isinstance(date_key, str):
        return None
    steps = _number(item.get("steps", 0))
    distance = _number(item.get("distance", 0))
    kcal = _number(item.get("kcal", 0))
    if steps is None or distance is None or kcal is None:
        return None
    fields: dict[str, Any] = {
        "date": date_key,
        "start_time": str(item.get("startTime", item.get("start_time", ""))),
        "end_time": str(item.get("endTime", item.get("end_time", ""))),
        "steps": int(steps),
        "distance": distance,
        "kcal": kcal,
        "user_name": str(item.get("userName", item.get("user_name", ""))),
    }
    if item.get("id"):
        fields["id"] = str(item["id"])
    return HistoryEntry(**fields)


def _item_to_goal(item: Any) -> Goal | None:
    if not isinstance(item, dict):
        return None
    try:
        target_type = MetricKind(item.get("targetType", item.get("target_type")))
        period_type = PeriodKind(item.get("periodType", item.get("period_type")))
    except ValueError:
        return None
    target_value = _number(item.get("targetValue", item.get("target_value")))
    created_at = _parse_created_at(item.get("createdAt", item.get("created_at")))
    is_active = item.get("isActive", item.get("is_active", True))
    if target_value is None or created_at is None or not isinstance(is_active, bool):
        return None
    fields: dict[str, Any] = {
        "target_type": target_type,
        "target_value": target_value,
        "period_type": period_type,
        "created_at": created_at,
        "is_active": is_active,
    }
    if item.get("id"):
        fields["id"] = str(item["id"])
    return Goal(**fields)


def _parse_created_at(raw: Any) -> datetime | None:
    if not isinstance(raw, str) or not raw.strip():
        return None
    try:
        parsed = date_parser.isoparse(raw)
    except ValueError:
        return None
    # タイムゾーンなしの値は既定のゾーンで解釈する
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=tz.gettz(DEFAULT_TIMEZONE))
    return parsed
