from __future__ import annotations

from collections.abc import Callable
from datetime import datetime
from pathlib import Path
from typing import cast

from openpyxl import Workbook, load_workbook
from openpyxl.utils import get_column_letter
from openpyxl.worksheet.worksheet import Worksheet

from pedometer_stats.excel_writer import (
    ExcelLayout,
    _format_sheet,
    history_frame,
    write_history_xlsx,
)
from pedometer_stats.model import HistoryEntry, StatsWindow

NOW = datetime(2025, 7, 1, 18, 0)


def test_write_history_xlsx_happy_path_and_formatting(
    tmp_path: Path, make_entry: Callable[..., HistoryEntry]
) -> None:
    entries = [
        make_entry("2025-06-30", steps=1200, distance=800.0, kcal=8.4),
        make_entry("2025-07-01", steps=3000, distance=2000.0, kcal=21.0),
    ]
    out = tmp_path / "nested" / "out.xlsx"
    write_history_xlsx(entries, StatsWindow.WEEK, NOW, out, ExcelLayout())

    wb = load_workbook(out)
    ws = cast(Worksheet, wb[ExcelLayout().sheet_name])

    headers = [cell.value for cell in ws[1]]
    assert headers == [
        "曜日",
        "日付",
        "開始時間",
        "終了時間",
        "歩数",
        "距離(km)",
        "カロリー(kcal)",
        "ユーザー名",
    ]
    # newest first; 2025-07-01 is a Tuesday
    assert ws.cell(row=2, column=1).value == "火"
    assert ws.cell(row=2, column=2).value == "2025-07-01"
    assert ws.cell(row=3, column=1).value == "月"
    assert ws.cell(row=2, column=5).value == 3000

    assert ws.column_dimensions["A"].width == 6
    steps_letter = get_column_letter(headers.index("歩数") + 1)
    assert ws.column_dimensions[steps_letter].width == 10
    assert ws.cell(row=2, column=5).number_format == "#,##0"
    assert ws.cell(row=2, column=1).font.bold is False
    assert ws.cell(row=1, column=1).font.bold is True


def test_history_frame_weekday_and_empty_window(
    make_entry: Callable[..., HistoryEntry],
) -> None:
    df = history_frame([make_entry("2025-07-01")], StatsWindow.WEEK, NOW)
    assert list(df["曜日"]) == ["火"]
    empty = history_frame([make_entry("broken")], StatsWindow.WEEK, NOW)
    assert empty.empty
    assert "日付" in empty.columns


def test_format_sheet_handles_missing_headers() -> None:
    wb = Workbook()
    ws = cast(Worksheet, wb.active)
    ws.append(["Solo"])
    ws.append([1])

    _format_sheet(ws)

    assert ws.cell(row=1, column=1).font.bold is True
    assert ws.cell(row=2, column=1).alignment.horizontal == "center"
