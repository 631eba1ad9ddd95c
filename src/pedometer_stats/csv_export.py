"""CSVエクスポート (統計画面の期間で絞り込んだ履歴)。"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from datetime import date, datetime
from pathlib import Path

from pedometer_stats.aggregate import filter_by_period
from pedometer_stats.model import HistoryEntry, StatsWindow

logger = logging.getLogger(__name__)

CSV_HEADER = "日付,開始時間,終了時間,歩数,距離(km),カロリー(kcal),ユーザー名"


def csv_line(entry: HistoryEntry) -> str:
    """Join the entry fields with commas.

    Fields are not quoted, so a comma inside a value (e.g. the user name)
    shifts the columns. Readers of existing exports rely on this format.
    """
    fields = (
        entry.date,
        entry.start_time,
        entry.end_time,
        str(entry.steps),
        str(entry.distance),
        str(entry.kcal),
        entry.user_name,
    )
    return ",".join(fields)


def sorted_for_export(
    entries: Sequence[HistoryEntry], window: StatsWindow, now: date | datetime
) -> list[HistoryEntry]:
    """Entries in the window, newest day-key first."""
    filtered = filter_by_period(entries, window, now)
    return sorted(filtered, key=lambda e: e.date, reverse=True)


def to_csv(
    entries: Sequence[HistoryEntry], window: StatsWindow, now: date | datetime
) -> str:
    """Render the export text: header line plus one line per entry."""
    lines = [CSV_HEADER]
    lines.extend(csv_line(e) for e in sorted_for_export(entries, window, now))
    return "".join(f"{line}\n" for line in lines)


def export_filename(now: datetime) -> str:
    return f"pedometer_stats_{now.strftime('%Y%m%d_%H%M%S')}.csv"


def write_csv(
    entries: Sequence[HistoryEntry],
    window: StatsWindow,
    now: datetime,
    export_dir: Path,
) -> Path:
    """Write the CSV export into ``export_dir`` and return its path."""
    export_dir.mkdir(parents=True, exist_ok=True)
    out_path = export_dir / export_filename(now)
    out_path.write_text(to_csv(entries, window, now), encoding="utf-8")
    logger.info("Wrote CSV export %s", out_path)
    return out_path
