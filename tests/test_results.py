"""Tests for result tabulation and chart rendering."""

from __future__ import annotations

from pathlib import Path

import pandas as pd

from buildbench.charts import CHART_FILENAME, render_comparison_chart
from buildbench.collector import (
    CSV_FILENAME,
    RESULT_COLUMNS,
    results_dataframe,
    summarise,
    write_results_csv,
)
from buildbench.config import LIBRARY_CLIENT, NATIVE_CLI
from buildbench.runner import MeasurementResult


def _result(scenario: str, tool: str, elapsed: float, exit_status: int = 0) -> MeasurementResult:
    return MeasurementResult(
        scenario_name=scenario,
        scenario_title=scenario.upper(),
        tool_name=tool,
        command="docker" if tool == NATIVE_CLI else "buildbench-client",
        elapsed=elapsed,
        exit_status=exit_status,
        user_time=0.1,
        system_time=0.05,
    )


RESULTS = [
    _result("no-context", NATIVE_CLI, 0.5),
    _result("no-context", LIBRARY_CLIENT, 0.7),
    _result("large-file", NATIVE_CLI, 12.0, exit_status=1),
    _result("large-file", LIBRARY_CLIENT, 30.0),
]


class TestCollector:
    """DataFrame and CSV output."""

    def test_dataframe_rows_and_columns(self) -> None:
        df = results_dataframe(RESULTS)
        assert list(df.columns) == RESULT_COLUMNS
        assert len(df) == 4
        assert df.loc[2, "exit_status"] == 1
        assert df.loc[3, "elapsed_s"] == 30.0

    def test_empty_dataframe_keeps_columns(self) -> None:
        df = results_dataframe([])
        assert df.empty
        assert list(df.columns) == RESULT_COLUMNS

    def test_csv_round_trip(self, tmp_path: Path) -> None:
        path = write_results_csv(RESULTS, tmp_path / "out")
        assert path.name == CSV_FILENAME
        loaded = pd.read_csv(path)
        assert loaded["tool"].tolist() == [NATIVE_CLI, LIBRARY_CLIENT, NATIVE_CLI, LIBRARY_CLIENT]

    def test_summarise(self) -> None:
        summary = summarise(results_dataframe(RESULTS))
        assert summary == {
            "no-context": {NATIVE_CLI: 0.5, LIBRARY_CLIENT: 0.7},
            "large-file": {NATIVE_CLI: 12.0, LIBRARY_CLIENT: 30.0},
        }


class TestCharts:
    """Grouped bar chart output."""

    def test_renders_png(self, tmp_path: Path) -> None:
        path = render_comparison_chart(results_dataframe(RESULTS), tmp_path)
        assert path == tmp_path / CHART_FILENAME
        assert path.read_bytes()[:8] == b"\x89PNG\r\n\x1a\n"

    def test_empty_frame_renders_nothing(self, tmp_path: Path) -> None:
        assert render_comparison_chart(results_dataframe([]), tmp_path) is None
        assert not (tmp_path / CHART_FILENAME).exists()
