"""履歴の Excel 出力 (CSV と同じ列 + 曜日)。"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from datetime import date, datetime
from pathlib import Path
from typing import Any

import pandas as pd
from openpyxl.styles import Alignment, Border, Font, Side

from pedometer_stats.aggregate import entries_to_frame
from pedometer_stats.csv_export import sorted_for_export
from pedometer_stats.model import HistoryEntry, StatsWindow

logger = logging.getLogger(__name__)

_WEEKDAYS: tuple[str, ...] = ("月", "火", "水", "木", "金", "土", "日")

_HEADER_MAP: dict[str, str] = {
    "weekday": "曜日",
    "date": "日付",
    "start_time": "開始時間",
    "end_time": "終了時間",
    "steps": "歩数",
    "distance": "距離(km)",
    "kcal": "カロリー(kcal)",
    "user_name": "ユーザー名",
}

_EXPORT_COLUMNS = [
    "weekday",
    "date",
    "start_time",
    "end_time",
    "steps",
    "distance",
    "kcal",
    "user_name",
]


@dataclass(frozen=True)
class ExcelLayout:
    """Layout/formatting configuration for the history sheet."""

    sheet_name: str = "履歴"


def _weekday_label(day_key: object) -> str:
    """日付文字列を曜日ラベルに変換する (不正な値は空文字)。"""
    parsed = pd.to_datetime(day_key, format="%Y-%m-%d", errors="coerce")
    if pd.isna(parsed):
        return ""
    return _WEEKDAYS[parsed.weekday()]


def history_frame(
    entries: Sequence[HistoryEntry], window: StatsWindow, now: date | datetime
) -> pd.DataFrame:
    """Rows of the export, newest day first, with a weekday column."""
    df = entries_to_frame(sorted_for_export(entries, window, now))
    df = df.copy()
    df["weekday"] = df["date"].map(_weekday_label)
    return df[_EXPORT_COLUMNS].rename(columns=_HEADER_MAP)


def write_history_xlsx(
    entries: Sequence[HistoryEntry],
    window: StatsWindow,
    now: date | datetime,
    out_path: Path,
    layout: ExcelLayout,
) -> None:
    """Write a formatted Excel file with the entries of a window.

    Args:
        entries: Full history snapshot.
        window: Statistics window used to select entries.
        now: Reference instant.
        out_path: Output path for the XLSX file.
        layout: Excel layout parameters.
    """
    out_path.parent.mkdir(parents=True, exist_ok=True)
    export_df = history_frame(entries, window, now)

    with pd.ExcelWriter(out_path, engine="openpyxl") as writer:
        export_df.to_excel(writer, index=False, sheet_name=layout.sheet_name)
        ws = writer.book[layout.sheet_name]
        _format_sheet(ws)
    logger.info("Wrote Excel export %s (%d rows)", out_path, len(export_df))


def _style_header_row(ws: Any) -> None:
    thin = Side(style="thin")
    border = Border(left=thin, right=thin, top=thin, bottom=thin)
    center = Alignment(horizontal="center", vertical="center", wrap_text=True)
    for cell in ws[1]:
        cell.font = Font(bold=True)
        cell.alignment = center
        cell.border = border


def _style_body_rows(ws: Any) -> None:
    thin = Side(style="thin")
    border = Border(left=thin, right=thin, top=thin, bottom=thin)
    center = Alignment(horizontal="center", vertical="center")
    for row in ws.iter_rows(min_row=2):
        for cell in row:
            cell.alignment = center
            cell.border = border


def _apply_column_formats(ws: Any) -> None:
    """列幅と数値書式をヘッダー名で設定する。"""
    col_index = {str(cell.value): cell.column_letter for cell in ws[1]}
    widths = {
        "曜日": 6,
        "日付": 12,
        "開始時間": 10,
        "終了時間": 10,
        "歩数": 10,
        "距離(km)": 12,
        "カロリー(kcal)": 14,
        "ユーザー名": 16,
    }
    for header, width in widths.items():
        letter = col_index.get(header)
        if letter is not None:
            ws.column_dimensions[letter].width = width

    formats = {"歩数": "#,##0", "距離(km)": "#,##0.0", "カロリー(kcal)": "0.0"}
    for header, fmt in formats.items():
        letter = col_index.get(header)
        if letter is None:
            continue
        for cell in ws[letter][1:]:
            cell.number_format = fmt


def _format_sheet(ws: Any) -> None:
    """Apply borders, widths and number formats to a worksheet.

    Args:
        ws: openpyxl worksheet.
    """
    _style_header_row(ws)
    _style_body_rows(ws)
    _apply_column_formats(ws)
