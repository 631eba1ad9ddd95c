"""python -m pedometer_stats のエントリポイント。"""

from __future__ import annotations

from pedometer_stats.cli import main

if __name__ == "__main__":
    raise SystemExit(main())
