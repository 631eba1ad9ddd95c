"""統計画面の集計: 合計・1日平均・1日最大・グラフ系列。"""

from __future__ import annotations

from collections.abc import Sequence
from datetime import date, datetime

from pedometer_stats.aggregate import (
    METRIC_COLUMNS,
    average_per_day,
    daily_totals,
    distinct_days,
    filter_by_period,
    max_per_day,
    sum_metric,
)
from pedometer_stats.model import (
    ChartPoint,
    HistoryEntry,
    MetricKind,
    StatsResult,
    StatsWindow,
    parse_day_key,
)


def compute_stats(
    entries: Sequence[HistoryEntry],
    window: StatsWindow,
    metric: MetricKind,
    now: date | datetime,
) -> StatsResult:
    """Compute every statistic for a trailing window.

    Args:
        entries: Full history snapshot supplied by the caller.
        window: Trailing window (7, 30 or 365 days including today).
        metric: Metric plotted by ``chart_series``.
        now: Reference instant.

    Returns:
        StatsResult with zeros and an empty series when nothing matches.
    """
    filtered = filter_by_period(entries, window, now)
    return StatsResult(
        window=window,
        metric=metric,
        days_with_data=distinct_days(filtered),
        total_steps=int(sum_metric(filtered, MetricKind.STEPS)),
        total_distance=float(sum_metric(filtered, MetricKind.DISTANCE)),
        total_calories=float(sum_metric(filtered, MetricKind.CALORIES)),
        average_steps_per_day=int(average_per_day(filtered, MetricKind.STEPS)),
        average_distance_per_day=float(average_per_day(filtered, MetricKind.DISTANCE)),
        average_calories_per_day=float(average_per_day(filtered, MetricKind.CALORIES)),
        max_steps_in_one_day=int(max_per_day(filtered, MetricKind.STEPS)),
        max_distance_in_one_day=float(max_per_day(filtered, MetricKind.DISTANCE)),
        max_calories_in_one_day=float(max_per_day(filtered, MetricKind.CALORIES)),
        chart_series=chart_series(filtered, window, metric),
    )


def chart_series(
    filtered: Sequence[HistoryEntry], window: StatsWindow, metric: MetricKind
) -> list[ChartPoint]:
    """One point per day with data, ascending by day-key."""
    totals = daily_totals(filtered)
    column = METRIC_COLUMNS[metric]
    return [
        ChartPoint(label=format_chart_label(key, window), value=float(value))
        for key, value in zip(totals["date"], totals[column])
    ]


def format_chart_label(day_key: str, window: StatsWindow) -> str:
    """``MM/dd`` for week and month windows, ``yyyy/MM`` for the year window."""
    day = parse_day_key(day_key)
    if day is None:
        return day_key
    if window is StatsWindow.YEAR:
        return day.strftime("%Y/%m")
    return day.strftime("%m/%d")


class StatsEngine:
    """Recompute statistics only when one of the inputs changed.

    The entry snapshot is compared by value, so a caller passing a fresh list
    with the same records gets the cached result back.
    """

    def __init__(self) -> None:
        self._key: tuple[object, ...] | None = None
        self._result: StatsResult | None = None

    def compute(
        self,
        entries: Sequence[HistoryEntry],
        window: StatsWindow,
        metric: MetricKind,
        now: date | datetime,
    ) -> StatsResult:
        key = (tuple(entries), window, metric, now)
        if self._result is None or key != self._key:
            self._result = compute_stats(entries, window, metric, now)
            self._key = key
        return self._result

    def invalidate(self) -> None:
        self._key = None
        self._result = None
