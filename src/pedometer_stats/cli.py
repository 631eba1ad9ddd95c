"""CLI: 履歴の統計・目標の進捗を表示し、CSV/Excel に出力する。"""

from __future__ import annotations

import argparse
import logging
from datetime import datetime
from pathlib import Path

from dateutil import parser as date_parser

from pedometer_stats.config import AppConfig, load_config
from pedometer_stats.csv_export import export_filename, write_csv
from pedometer_stats.excel_writer import ExcelLayout, write_history_xlsx
from pedometer_stats.goals import current_value, progress, remaining
from pedometer_stats.model import Goal, MetricKind, StatsResult, StatsWindow
from pedometer_stats.sources.history_json import (
    PedometerExportPaths,
    PedometerExportSource,
)
from pedometer_stats.stats import compute_stats

logger = logging.getLogger(__name__)

_DEFAULT_CONFIG = Path.home() / ".pedometer_stats" / "config.json"


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments.

    Returns:
        Parsed argparse namespace.
    """
    parser = argparse.ArgumentParser(
        description="歩数計の履歴から統計と目標の進捗を集計します。"
    )
    parser.add_argument(
        "--config",
        default=str(_DEFAULT_CONFIG),
        help="設定ファイル (default: ~/.pedometer_stats/config.json).",
    )
    parser.add_argument(
        "--data-dir",
        default=None,
        help="history.json / goals.json のあるディレクトリ.",
    )
    parser.add_argument(
        "--window",
        choices=[w.value for w in StatsWindow],
        default=None,
        help="統計期間 (week / month / year).",
    )
    parser.add_argument(
        "--metric",
        choices=[m.value for m in MetricKind],
        default=None,
        help="グラフに使う指標.",
    )
    parser.add_argument(
        "--now",
        default=None,
        help="基準日時 (ISO 8601). 省略時は現在時刻.",
    )
    parser.add_argument("--csv", action="store_true", help="CSV を出力する.")
    parser.add_argument("--xlsx", action="store_true", help="Excel を出力する.")
    parser.add_argument("-v", "--verbose", action="store_true", help="DEBUG ログ.")
    return parser.parse_args(argv)


def resolve_now(raw: str | None, config: AppConfig) -> datetime:
    """Reference instant: ``--now`` if given, else the clock in the configured zone."""
    local_tz = config.local_tz()
    if raw:
        parsed = date_parser.isoparse(raw)
        return parsed if parsed.tzinfo else parsed.replace(tzinfo=local_tz)
    return datetime.now(tz=local_tz)


def format_stats(result: StatsResult) -> list[str]:
    metric = result.metric
    lines = [
        f"{result.window.display_name}統計 ({result.days_with_data} 日分)",
        f"  合計歩数: {result.total_steps}",
        f"  合計距離: {result.total_distance:.2f}",
        f"  合計カロリー: {result.total_calories:.1f}",
        f"  1日平均歩数: {result.average_steps_per_day}",
        f"  1日平均距離: {result.average_distance_per_day:.2f}",
        f"  1日平均カロリー: {result.average_calories_per_day:.1f}",
        f"  1日最大歩数: {result.max_steps_in_one_day}",
        f"  1日最大距離: {result.max_distance_in_one_day:.2f}",
        f"  1日最大カロリー: {result.max_calories_in_one_day:.1f}",
        f"  {metric.display_name} (平均 {result.average_for(metric):g} {metric.unit}):",
    ]
    lines.extend(f"    {p.label} {p.value:g}" for p in result.chart_series)
    return lines


def format_goal(goal: Goal, current: float, ratio: float, rest: float) -> str:
    return (
        f"{goal.target_type.display_name} ({goal.period_type.display_name}): "
        f"{int(current)} / {int(goal.target_value)} {goal.target_type.unit} "
        f"{int(ratio * 100)}% 残り {int(rest)}"
    )


def main(argv: list[str] | None = None) -> int:
    """Run the statistics CLI.

    Returns:
        Exit code (0 on success).
    """
    ns = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if ns.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    config = load_config(Path(ns.config).expanduser())
    data_dir = Path(ns.data_dir or config.data_dir or ".").expanduser().resolve()
    window = StatsWindow(ns.window) if ns.window else config.stats_window
    metric = MetricKind(ns.metric) if ns.metric else config.stats_metric
    now = resolve_now(ns.now, config)

    source = PedometerExportSource(PedometerExportPaths(root=data_dir))
    source.validate()
    entries = source.load_entries()
    goals = source.load_goals()
    logger.debug("Loaded %d entries and %d goals", len(entries), len(goals))

    result = compute_stats(entries, window, metric, now)
    for line in format_stats(result):
        print(line)

    for goal in goals:
        if not goal.is_active:
            continue
        print(
            format_goal(
                goal,
                current_value(goal, entries, now),
                progress(goal, entries, now),
                remaining(goal, entries, now),
            )
        )

    export_dir = Path(config.export_dir or data_dir / "exports").expanduser()
    if ns.csv:
        csv_path = write_csv(entries, window, now, export_dir)
        print(f"OK: CSV: {csv_path}")
    if ns.xlsx:
        xlsx_path = export_dir / export_filename(now).replace(".csv", ".xlsx")
        write_history_xlsx(entries, window, now, xlsx_path, ExcelLayout())
        print(f"OK: Excel: {xlsx_path}")
    return 0
