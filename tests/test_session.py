from __future__ import annotations

from datetime import datetime

import pytest

from pedometer_stats.model import UserProfile
from pedometer_stats.session import finish_session


def test_finish_session_builds_entry_with_calories() -> None:
    user = UserProfile(nickname="taro", weight_kg=60.0)
    entry = finish_session(
        datetime(2025, 7, 1, 7, 5), datetime(2025, 7, 1, 7, 50), 6000, 5000.0, user
    )
    assert entry.date == "2025-07-01"
    assert entry.start_time == "07:05"
    assert entry.end_time == "07:50"
    assert entry.steps == 6000
    assert entry.kcal == pytest.approx(315.0)
    assert entry.user_name == "taro"
    assert entry.day is not None


def test_finish_session_without_estimate_records_zero() -> None:
    entry = finish_session(
        datetime(2025, 7, 1, 7, 0), datetime(2025, 7, 1, 7, 10), 100, None, None
    )
    assert entry.kcal == 0.0
    assert entry.distance == 0.0
    assert entry.user_name == ""


def test_finish_session_rejects_reversed_times() -> None:
    with pytest.raises(ValueError):
        finish_session(
            datetime(2025, 7, 1, 8, 0), datetime(2025, 7, 1, 7, 0), 1, 1.0, None
        )
