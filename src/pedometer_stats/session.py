"""計測セッション終了時の履歴エントリ生成。"""

from __future__ import annotations

from datetime import datetime

from pedometer_stats.calories import estimate_kcal
from pedometer_stats.model import HistoryEntry, UserProfile


def finish_session(
    started_at: datetime,
    ended_at: datetime,
    steps: int,
    distance_m: float | None,
    user: UserProfile | None,
) -> HistoryEntry:
    """Build the history entry recorded when a tracked session stops.

    Args:
        started_at: Session start; its date becomes the day-key.
        ended_at: Session end.
        steps: Steps counted by the sensor.
        distance_m: Distance in meters, None if the sensor gave none.
        user: Current user, None if nobody has entered a profile yet.

    Returns:
        New entry. Calories fall back to 0.0 when no estimate is possible.

    Raises:
        ValueError: If the session ends before it starts or counts are negative.
    """
    if ended_at < started_at:
        raise ValueError("Session ends before it starts")
    if steps < 0 or (distance_m is not None and distance_m < 0):
        raise ValueError("Step count and distance must be non-negative")

    weight = user.weight_kg if user is not None else None
    kcal = estimate_kcal(distance_m, weight)
    return HistoryEntry(
        date=started_at.strftime("%Y-%m-%d"),
        start_time=started_at.strftime("%H:%M"),
        end_time=ended_at.strftime("%H:%M"),
        steps=int(steps),
        distance=float(distance_m or 0.0),
        kcal=kcal if kcal is not None else 0.0,
        user_name=user.nickname if user is not None else "",
    )
