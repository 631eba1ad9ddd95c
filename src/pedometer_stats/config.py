"""設定ファイル (JSON) の読み込みと保存。"""

from __future__ import annotations

import json
from dataclasses import asdict, dataclass, replace
from datetime import tzinfo
from pathlib import Path
from typing import Any

from dateutil import tz

from pedometer_stats.model import MetricKind, StatsWindow

DEFAULT_TIMEZONE = "Asia/Tokyo"


@dataclass(frozen=True)
class AppConfig:
    """Persisted application settings."""

    data_dir: str = ""
    export_dir: str = ""
    timezone: str = DEFAULT_TIMEZONE
    window: str = StatsWindow.WEEK.value
    metric: str = MetricKind.STEPS.value

    @property
    def stats_window(self) -> StatsWindow:
        return StatsWindow(self.window)

    @property
    def stats_metric(self) -> MetricKind:
        return MetricKind(self.metric)

    def local_tz(self) -> tzinfo:
        """Configured time zone, falling back to the default one."""
        return tz.gettz(self.timezone) or tz.gettz(DEFAULT_TIMEZONE) or tz.tzlocal()


def load_config(path: Path) -> AppConfig:
    """Return the saved configuration merged over defaults.

    A missing file, undecodable text, invalid JSON or unknown values fall back
    to defaults.
    """
    defaults = AppConfig()
    if not path.exists():
        return defaults
    try:
        raw: Any = json.loads(path.read_text(encoding="utf-8"))
    except (json.JSONDecodeError, UnicodeDecodeError):
        return defaults
    if not isinstance(raw, dict):
        return defaults

    values = {
        key: str(raw[key])
        for key in asdict(defaults)
        if key in raw and raw[key] is not None
    }
    merged = replace(defaults, **values)
    if merged.window not in {w.value for w in StatsWindow}:
        merged = replace(merged, window=defaults.window)
    if merged.metric not in {m.value for m in MetricKind}:
        merged = replace(merged, metric=defaults.metric)
    return merged


def save_config(config: AppConfig, path: Path) -> None:
    """Write the configuration as a JSON object."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(
        json.dumps(asdict(config), ensure_ascii=False, indent=2), encoding="utf-8"
    )
