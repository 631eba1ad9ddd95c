"""履歴の期間フィルタと指標の集計 (合計・日別平均・日別最大)。"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from datetime import date, datetime

import pandas as pd

from pedometer_stats.model import HistoryEntry, MetricKind, PeriodKind, StatsWindow
from pedometer_stats.periods import in_window, is_in_period

logger = logging.getLogger(__name__)

ENTRY_COLUMNS = [
    "id",
    "date",
    "start_time",
    "end_time",
    "steps",
    "distance",
    "kcal",
    "user_name",
]

METRIC_COLUMNS: dict[MetricKind, str] = {
    MetricKind.STEPS: "steps",
    MetricKind.DISTANCE: "distance",
    MetricKind.CALORIES: "kcal",
}


def filter_by_period(
    entries: Sequence[HistoryEntry],
    period: PeriodKind | StatsWindow,
    now: date | datetime,
) -> list[HistoryEntry]:
    """Keep entries whose day falls in a goal period or a statistics window.

    Entries with an unparseable day-key are dropped. Input order is kept.
    """
    out: list[HistoryEntry] = []
    for entry in entries:
        day = entry.day
        if day is None:
            logger.debug("Skipping entry %s with invalid date %r", entry.id, entry.date)
            continue
        if isinstance(period, StatsWindow):
            keep = in_window(day, now, period)
        else:
            keep = is_in_period(day, now, period)
        if keep:
            out.append(entry)
    return out


def entries_to_frame(entries: Sequence[HistoryEntry]) -> pd.DataFrame:
    """Convert history entries to a DataFrame, one row per session."""
    rows = [
        {
            "id": e.id,
            "date": e.date,
            "start_time": e.start_time,
            "end_time": e.end_time,
            "steps": int(e.steps),
            "distance": float(e.distance),
            "kcal": float(e.kcal),
            "user_name": e.user_name,
        }
        for e in entries
    ]
    if not rows:
        return pd.DataFrame(columns=ENTRY_COLUMNS)
    return pd.DataFrame(rows, columns=ENTRY_COLUMNS)


def sum_metric(entries: Sequence[HistoryEntry], metric: MetricKind) -> int | float:
    """Sum one metric; steps stay integral."""
    if metric is MetricKind.STEPS:
        if not entries:
            return 0
        return int(entries_to_frame(entries)["steps"].sum())
    if not entries:
        return 0.0
    return float(entries_to_frame(entries)[METRIC_COLUMNS[metric]].sum())


def group_by_day(entries: Sequence[HistoryEntry]) -> dict[str, list[HistoryEntry]]:
    """Group entries by their raw day-key, in first-seen order."""
    groups: dict[str, list[HistoryEntry]] = {}
    for entry in entries:
        groups.setdefault(entry.date, []).append(entry)
    return groups


def daily_totals(entries: Sequence[HistoryEntry]) -> pd.DataFrame:
    """Per-day sums of every metric, ascending by day-key.

    Returns DataFrame columns:
        date, steps, distance, kcal
    """
    if not entries:
        return pd.DataFrame(columns=["date", "steps", "distance", "kcal"])
    g = entries_to_frame(entries).groupby("date", as_index=False).agg(
        steps=("steps", "sum"),
        distance=("distance", "sum"),
        kcal=("kcal", "sum"),
    )
    return g.sort_values("date").reset_index(drop=True)


def distinct_days(entries: Sequence[HistoryEntry]) -> int:
    return len({e.date for e in entries})


def average_per_day(
    entries: Sequence[HistoryEntry], metric: MetricKind
) -> int | float:
    """Average over days that have data; 0 when there are none.

    The steps average is floor-divided like the integer totals it comes from.
    """
    days = distinct_days(entries)
    total = sum_metric(entries, metric)
    if metric is MetricKind.STEPS:
        return int(total) // days if days else 0
    return total / days if days else 0.0


def max_per_day(entries: Sequence[HistoryEntry], metric: MetricKind) -> int | float:
    """Largest single-day sum of a metric; 0 when there are no entries."""
    totals = daily_totals(entries)
    if totals.empty:
        return 0 if metric is MetricKind.STEPS else 0.0
    best = totals[METRIC_COLUMNS[metric]].max()
    if metric is MetricKind.STEPS:
        return int(best)
    return float(best)
