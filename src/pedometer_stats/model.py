"""履歴エントリ・目標・統計結果の型付きモデル。"""

from __future__ import annotations

import re
import uuid
from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum

_DAY_KEY_RE = re.compile(r"\d{4}-\d{2}-\d{2}")
_TIME_RE = re.compile(r"(\d{1,2}):\d{2}(?::\d{2})?")


class MetricKind(str, Enum):
    """Quantity aggregated over history entries."""

    STEPS = "steps"
    DISTANCE = "distance"
    CALORIES = "calories"

    @property
    def display_name(self) -> str:
        return {
            MetricKind.STEPS: "歩数",
            MetricKind.DISTANCE: "距離 (km)",
            MetricKind.CALORIES: "カロリー (kcal)",
        }[self]

    @property
    def unit(self) -> str:
        return {
            MetricKind.STEPS: "歩",
            MetricKind.DISTANCE: "km",
            MetricKind.CALORIES: "kcal",
        }[self]


class PeriodKind(str, Enum):
    """Calendar-aligned period used to evaluate goals."""

    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"

    @property
    def display_name(self) -> str:
        return {
            PeriodKind.DAILY: "毎日",
            PeriodKind.WEEKLY: "毎週",
            PeriodKind.MONTHLY: "毎月",
        }[self]


class StatsWindow(str, Enum):
    """Rolling trailing-N-day range used by the statistics screen."""

    WEEK = "week"
    MONTH = "month"
    YEAR = "year"

    @property
    def days(self) -> int:
        return {StatsWindow.WEEK: 7, StatsWindow.MONTH: 30, StatsWindow.YEAR: 365}[
            self
        ]

    @property
    def display_name(self) -> str:
        return {
            StatsWindow.WEEK: "週間",
            StatsWindow.MONTH: "月間",
            StatsWindow.YEAR: "年間",
        }[self]


def parse_day_key(key: str) -> date | None:
    """Parse a ``YYYY-MM-DD`` day-key; None when it is not a calendar date."""
    if not isinstance(key, str) or not _DAY_KEY_RE.fullmatch(key):
        return None
    try:
        return datetime.strptime(key, "%Y-%m-%d").date()
    except ValueError:
        return None


@dataclass(frozen=True)
class HistoryEntry:
    """One completed activity session.

    ``date`` is kept as the canonical ``YYYY-MM-DD`` string because it is the
    grouping and sort key; ``day`` gives the parsed calendar date.
    """

    date: str
    start_time: str
    end_time: str
    steps: int
    distance: float
    kcal: float
    user_name: str
    id: str = field(default_factory=lambda: uuid.uuid4().hex)

    @property
    def day(self) -> date | None:
        return parse_day_key(self.date)

    @property
    def start_hour(self) -> int | None:
        match = _TIME_RE.fullmatch(self.start_time.strip())
        if not match:
            return None
        hour = int(match.group(1))
        return hour if 0 <= hour < 24 else None


@dataclass(frozen=True)
class Goal:
    """User-defined target for one metric over one period."""

    target_type: MetricKind
    target_value: float
    period_type: PeriodKind
    created_at: datetime
    is_active: bool = True
    id: str = field(default_factory=lambda: uuid.uuid4().hex)


@dataclass(frozen=True)
class UserProfile:
    """Explicit user context (nickname and body weight)."""

    nickname: str
    weight_kg: float


@dataclass(frozen=True)
class ChartPoint:
    """One aggregated bucket of a chart series."""

    label: str
    value: float


@dataclass(frozen=True)
class StatsResult:
    """Totals, per-day averages and maxima over a statistics window."""

    window: StatsWindow
    metric: MetricKind
    days_with_data: int
    total_steps: int
    total_distance: float
    total_calories: float
    average_steps_per_day: int
    average_distance_per_day: float
    average_calories_per_day: float
    max_steps_in_one_day: int
    max_distance_in_one_day: float
    max_calories_in_one_day: float
    chart_series: list[ChartPoint] = field(default_factory=list)

    def total_for(self, metric: MetricKind) -> float:
        return {
            MetricKind.STEPS: self.total_steps,
            MetricKind.DISTANCE: self.total_distance,
            MetricKind.CALORIES: self.total_calories,
        }[metric]

    def average_for(self, metric: MetricKind) -> float:
        """Average per day with data, used for the chart reference line."""
        return {
            MetricKind.STEPS: self.average_steps_per_day,
            MetricKind.DISTANCE: self.average_distance_per_day,
            MetricKind.CALORIES: self.average_calories_per_day,
        }[metric]

    def max_for(self, metric: MetricKind) -> float:
        return {
            MetricKind.STEPS: self.max_steps_in_one_day,
            MetricKind.DISTANCE: self.max_distance_in_one_day,
            MetricKind.CALORIES: self.max_calories_in_one_day,
        }[metric]
