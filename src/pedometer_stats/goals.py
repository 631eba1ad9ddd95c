"""目標の作成・進捗率・残り・進捗グラフの計算。"""

from __future__ import annotations

import math
from collections.abc import Sequence
from dataclasses import replace
from datetime import date, datetime

from pedometer_stats.aggregate import filter_by_period, sum_metric
from pedometer_stats.model import ChartPoint, Goal, HistoryEntry, MetricKind, PeriodKind
from pedometer_stats.periods import days_in_month, reference_day, trailing_days

INVALID_TARGET_MESSAGE = "有効な目標値を入力してください"


class InvalidGoalTargetError(ValueError):
    """Raised when a goal target is missing, non-numeric or not positive."""

    def __init__(self, message: str = INVALID_TARGET_MESSAGE) -> None:
        super().__init__(message)
        self.message = message


def parse_target_value(raw: str | float) -> float:
    """Parse a goal target typed by the user.

    Raises:
        InvalidGoalTargetError: If the value is not a finite number above 0.
    """
    try:
        value = float(raw)
    except (TypeError, ValueError):
        raise InvalidGoalTargetError() from None
    if not math.isfinite(value) or value <= 0:
        raise InvalidGoalTargetError()
    return value


def create_goal(
    target_type: MetricKind,
    raw_value: str | float,
    period_type: PeriodKind,
    created_at: datetime,
) -> Goal:
    """Build a new active goal, validating its target first."""
    return Goal(
        target_type=target_type,
        target_value=parse_target_value(raw_value),
        period_type=period_type,
        created_at=created_at,
    )


def active_goal(goals: Sequence[Goal], metric: MetricKind) -> Goal | None:
    """Most recently created active goal for a metric."""
    candidates = [g for g in goals if g.target_type == metric and g.is_active]
    if not candidates:
        return None
    return max(candidates, key=lambda g: g.created_at)


def add_goal(goals: Sequence[Goal], new_goal: Goal) -> list[Goal]:
    """Return the goal list with ``new_goal`` added, newest first.

    The previous active goal of the same metric is deactivated.
    """
    previous = active_goal(goals, new_goal.target_type)
    out = [
        replace(g, is_active=False) if previous is not None and g.id == previous.id else g
        for g in goals
    ]
    out.append(new_goal)
    return sorted(out, key=lambda g: g.created_at, reverse=True)


def current_value(
    goal: Goal, entries: Sequence[HistoryEntry], now: date | datetime
) -> float:
    relevant = filter_by_period(entries, goal.period_type, now)
    return float(sum_metric(relevant, goal.target_type))


def progress(goal: Goal, entries: Sequence[HistoryEntry], now: date | datetime) -> float:
    """Completion ratio clamped to [0, 1].

    A non-positive target cannot be reached by validated goals; it yields 0.0
    instead of raising.
    """
    if goal.target_value <= 0:
        return 0.0
    ratio = current_value(goal, entries, now) / goal.target_value
    return max(0.0, min(ratio, 1.0))


def remaining(goal: Goal, entries: Sequence[HistoryEntry], now: date | datetime) -> float:
    return max(0.0, goal.target_value - current_value(goal, entries, now))


def relevant_entries(
    goal: Goal, entries: Sequence[HistoryEntry], now: date | datetime
) -> list[HistoryEntry]:
    """Entries counted by the goal, newest day first."""
    relevant = filter_by_period(entries, goal.period_type, now)
    return sorted(relevant, key=lambda e: e.date, reverse=True)


def daily_target(goal: Goal, now: date | datetime) -> float:
    """Target value spread over one day, for the reference line of the chart."""
    if goal.period_type is PeriodKind.DAILY:
        return goal.target_value
    if goal.period_type is PeriodKind.WEEKLY:
        return goal.target_value / 7
    return goal.target_value / days_in_month(now)


def progress_chart(
    goal: Goal, entries: Sequence[HistoryEntry], now: date | datetime
) -> list[ChartPoint]:
    """Chart series for a goal.

    Daily goals get one bucket per hour from 00:00 up to the current hour;
    weekly and monthly goals get one bucket per day over the last 7 days or
    the length of the current month, oldest first. A plain ``date`` covers
    the whole day (00:00 to 23:00).
    """
    if goal.period_type is PeriodKind.DAILY:
        return _hourly_series(goal.target_type, entries, now)
    count = 7 if goal.period_type is PeriodKind.WEEKLY else days_in_month(now)
    return _daily_series(goal.target_type, entries, now, count)


def _hourly_series(
    metric: MetricKind, entries: Sequence[HistoryEntry], now: date | datetime
) -> list[ChartPoint]:
    today = reference_day(now)
    last_hour = now.hour if isinstance(now, datetime) else 23
    todays = [e for e in entries if e.day == today]
    points: list[ChartPoint] = []
    for hour in range(last_hour + 1):
        bucket = [e for e in todays if e.start_hour == hour]
        points.append(
            ChartPoint(label=f"{hour:02d}:00", value=float(sum_metric(bucket, metric)))
        )
    return points


def _daily_series(
    metric: MetricKind,
    entries: Sequence[HistoryEntry],
    now: date | datetime,
    count: int,
) -> list[ChartPoint]:
    points: list[ChartPoint] = []
    for day in trailing_days(now, count):
        bucket = [e for e in entries if e.day == day]
        points.append(
            ChartPoint(label=day.strftime("%m/%d"), value=float(sum_metric(bucket, metric)))
        )
    return points
