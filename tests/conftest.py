from __future__ import annotations

from collections.abc import Callable

import pytest

from pedometer_stats.model import HistoryEntry


def _entry(
    date: str,
    steps: int = 0,
    distance: float = 0.0,
    kcal: float = 0.0,
    start_time: str = "08:00",
    end_time: str = "08:30",
    user_name: str = "taro",
) -> HistoryEntry:
    return HistoryEntry(
        date=date,
        start_time=start_time,
        end_time=end_time,
        steps=steps,
        distance=distance,
        kcal=kcal,
        user_name=user_name,
    )


@pytest.fixture
def make_entry() -> Callable[..., HistoryEntry]:
    return _entry
