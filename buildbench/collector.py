from __future__ import annotations

from pathlib import Path
from typing import Iterable

import pandas as pd

from .runner import MeasurementResult

RESULT_COLUMNS = [
    "scenario",
    "title",
    "tool",
    "command",
    "exit_status",
    "elapsed_s",
    "user_s",
    "system_s",
]

CSV_FILENAME = "build_timings.csv"


def results_dataframe(results: Iterable[MeasurementResult]) -> pd.DataFrame:
    rows = [
        {
            "scenario": result.scenario_name,
            "title": result.scenario_title,
            "tool": result.tool_name,
            "command": result.command,
            "exit_status": result.exit_status,
            "elapsed_s": result.elapsed,
            "user_s": result.user_time,
            "system_s": result.system_time,
        }
        for result in results
    ]
    if not rows:
        return pd.DataFrame(columns=RESULT_COLUMNS)
    return pd.DataFrame(rows, columns=RESULT_COLUMNS)


def write_results_csv(results: Iterable[MeasurementResult], output_dir: Path) -> Path:
    output_dir.mkdir(parents=True, exist_ok=True)
    path = output_dir / CSV_FILENAME
    results_dataframe(results).to_csv(path, index=False)
    return path


def summarise(df: pd.DataFrame) -> dict[str, dict[str, float]]:
    """Elapsed seconds per scenario and tool, e.g. ``{"no-context": {"native-cli": 0.4}}``."""
    summary: dict[str, dict[str, float]] = {}
    for row in df.itertuples(index=False):
        summary.setdefault(row.scenario, {})[row.tool] = float(row.elapsed_s)
    return summary
