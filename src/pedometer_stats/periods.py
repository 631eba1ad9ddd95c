"""期間判定: 目標用のカレンダー期間と統計用のローリング期間。"""

from __future__ import annotations

from datetime import date, datetime, timedelta

import pandas as pd

from pedometer_stats.model import PeriodKind, StatsWindow


def reference_day(now: date | datetime) -> date:
    """Return the calendar day of ``now`` (aware values keep their own wall clock)."""
    if isinstance(now, datetime):
        return now.date()
    return now


def is_in_period(day: date, now: date | datetime, period: PeriodKind) -> bool:
    """Calendar-aligned membership test used for goals.

    Weeks are ISO weeks (Monday start), compared by ISO year and week number
    so that the days around New Year land in the right bucket.
    """
    today = reference_day(now)
    if period is PeriodKind.DAILY:
        return day == today
    if period is PeriodKind.WEEKLY:
        return day.isocalendar()[:2] == today.isocalendar()[:2]
    return (day.year, day.month) == (today.year, today.month)


def window_start(now: date | datetime, window: StatsWindow) -> date:
    """First day included in a trailing window."""
    return reference_day(now) - timedelta(days=window.days - 1)


def in_window(day: date, now: date | datetime, window: StatsWindow) -> bool:
    """Rolling trailing-N-day test used for statistics (today included)."""
    today = reference_day(now)
    return window_start(today, window) <= day <= today


def days_in_month(now: date | datetime) -> int:
    """Number of days in the month containing ``now``."""
    today = reference_day(now)
    return int(pd.Timestamp(today).days_in_month)


def trailing_days(now: date | datetime, count: int) -> list[date]:
    """``count`` consecutive days ending at ``now``, ascending."""
    today = reference_day(now)
    days = pd.date_range(end=pd.Timestamp(today), periods=count, freq="D")
    return list(days.date)
