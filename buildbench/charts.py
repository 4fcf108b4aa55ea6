from __future__ import annotations

import logging
from pathlib import Path

import matplotlib

matplotlib.use("Agg")

import matplotlib.pyplot as plt
import numpy as np
import pandas as pd
import seaborn as sns

from .config import LIBRARY_CLIENT, NATIVE_CLI

LOGGER = logging.getLogger("buildbench.charts")

CHART_FILENAME = "build_timings.png"

sns.set_style("whitegrid")
plt.rcParams["figure.dpi"] = 100
plt.rcParams["savefig.dpi"] = 300
plt.rcParams["font.size"] = 10
plt.rcParams["axes.labelsize"] = 11
plt.rcParams["axes.titlesize"] = 13
plt.rcParams["legend.fontsize"] = 9

TOOL_COLORS = {
    NATIVE_CLI: "#2E86AB",  # Blue
    LIBRARY_CLIENT: "#F18F01",  # Orange
}


def render_comparison_chart(
    df: pd.DataFrame,
    output_dir: Path,
    title: str = "Image Build Time by Build Context",
) -> Path | None:
    """Render a grouped bar chart of elapsed build time per scenario and tool."""
    if df.empty:
        LOGGER.warning("No measurements to chart")
        return None

    output_dir.mkdir(parents=True, exist_ok=True)
    chart_path = output_dir / CHART_FILENAME

    scenario_order = list(dict.fromkeys(df["title"]))
    tool_order = [tool for tool in (NATIVE_CLI, LIBRARY_CLIENT) if tool in set(df["tool"])]

    fig, ax = plt.subplots(figsize=(12, 6))
    sns.barplot(
        data=df,
        x="title",
        y="elapsed_s",
        hue="tool",
        order=scenario_order,
        hue_order=tool_order,
        palette=TOOL_COLORS,
        errorbar=None,
        ax=ax,
    )

    # Containers follow hue_order; bars inside follow scenario_order.
    for tool, container in zip(tool_order, ax.containers):
        tool_rows = df[df["tool"] == tool].set_index("title")
        present = [scenario for scenario in scenario_order if scenario in tool_rows.index]
        for scenario, bar in zip(present, container.patches):
            row = tool_rows.loc[scenario]
            if isinstance(row, pd.DataFrame):
                row = row.iloc[-1]
            if int(row["exit_status"]) != 0:
                bar.set_hatch("//")
                bar.set_edgecolor("#C73E1D")
            height = bar.get_height()
            if np.isfinite(height):
                ax.text(
                    bar.get_x() + bar.get_width() / 2,
                    height,
                    f"{height:.2f}s",
                    ha="center",
                    va="bottom",
                    fontsize=8,
                )

    ax.set_xlabel("Build context", fontweight="semibold")
    ax.set_ylabel("Wall-clock time (seconds)", fontweight="semibold")
    ax.set_title(title, fontweight="bold", pad=15)
    longest = float(np.nanmax(df["elapsed_s"].to_numpy(dtype=float)))
    ax.set_ylim(bottom=0, top=max(longest, 0.001) * 1.15)
    ax.grid(True, alpha=0.3, axis="y", linestyle="--")
    ax.set_axisbelow(True)
    ax.legend(title="Tool", frameon=True)

    plt.tight_layout()
    fig.savefig(chart_path, bbox_inches="tight", facecolor="white")
    plt.close(fig)

    LOGGER.info("Rendered chart %s", chart_path)
    return chart_path
