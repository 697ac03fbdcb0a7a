"""Rendering of plotted functions: ASCII text for the shell, images via matplotlib."""

from __future__ import annotations

import math

import matplotlib

matplotlib.use("Agg")  # Use non-GUI backend (no Tkinter required)
import matplotlib.pyplot as plt  # noqa: E402
import numpy as np  # noqa: E402

from .config import PLOT_SAMPLES  # noqa: E402
from .graph import Area, Graph, Plot  # noqa: E402
from .logging_config import get_logger  # noqa: E402

logger = get_logger("plotting")


def _row(pos: float, plot: Plot) -> int:
    return int(math.floor(pos - plot.screen.y.min))


def _column(pos: float, plot: Plot) -> int:
    return int(math.floor(pos - plot.screen.x.min))


def render_ascii(plot: Plot) -> str:
    """Draw a projected plot as text, one character per screen cell.

    Samples are ``*``, the axes ``-`` and ``|`` with ``+`` at tic marks and
    where they cross. The first line of the result is the top screen row.

    Args:
        plot: Plot produced by Graph.plot

    Returns:
        Multi-line string without trailing newline
    """
    rows = int(plot.screen.y.max) - int(plot.screen.y.min)
    cols = len(plot.points)
    grid = [[" " for _ in range(cols)] for _ in range(rows)]

    axis_row = _row(plot.x_axis.pos, plot) if plot.x_axis is not None else None
    axis_col = _column(plot.y_axis.pos, plot) if plot.y_axis is not None else None

    if axis_row is not None and 0 <= axis_row < rows:
        for c in range(cols):
            grid[axis_row][c] = "-"
        if plot.y_axis is not None:
            for tic in plot.y_axis.tics:
                c = _column(tic.pos, plot)
                if 0 <= c < cols:
                    grid[axis_row][c] = "+"
    if axis_col is not None and 0 <= axis_col < cols:
        for r in range(rows):
            grid[r][axis_col] = "|"
        if plot.x_axis is not None:
            for tic in plot.x_axis.tics:
                r = _row(tic.pos, plot)
                if 0 <= r < rows:
                    grid[r][axis_col] = "+"

    for c, point in enumerate(plot.points):
        if point is None:
            continue
        r = _row(point, plot)
        if 0 <= r < rows:
            grid[r][c] = "*"

    return "\n".join("".join(line) for line in reversed(grid))


def save_plot(
    graph: Graph, area: Area, path: str, samples: int = PLOT_SAMPLES
) -> str:
    """Plot a graph over ``area`` into an image file.

    Points where the function cannot be evaluated, or evaluates to a
    non-finite value, are left as gaps.

    Args:
        graph: Graph to sample
        area: Plotted area in user coordinates
        path: Output file; the format follows the extension (png, svg, pdf)
        samples: Number of sample points across the x range

    Returns:
        The path written
    """
    x_vals = np.linspace(area.x.min, area.x.max, samples)
    samples_y = [graph.calc(float(x)) for x in x_vals]
    y_vals = np.array([np.nan if y is None else y for y in samples_y], dtype=float)
    y_vals[~np.isfinite(y_vals)] = np.nan

    fig, ax = plt.subplots(figsize=(10, 6))
    try:
        label = f"{graph.name}({graph.parameter})"
        ax.plot(x_vals, y_vals, linewidth=2, color="#2E86AB", label=label)
        ax.set_xlim(area.x.min, area.x.max)
        ax.set_ylim(area.y.min, area.y.max)
        ax.set_xlabel(graph.parameter, fontsize=12, fontweight="bold")
        ax.set_ylabel(label, fontsize=12, fontweight="bold")
        ax.set_title(f"Plot of {graph.name}", fontsize=14, fontweight="bold")
        ax.grid(True, alpha=0.3, linestyle="--")
        ax.axhline(y=0, color="k", linewidth=0.8, linestyle="-", alpha=0.3)
        ax.axvline(x=0, color="k", linewidth=0.8, linestyle="-", alpha=0.3)
        ax.legend(loc="best", fontsize=10)
        fig.tight_layout()
        fig.savefig(path, dpi=150, bbox_inches="tight")
    finally:
        plt.close(fig)
    logger.info("saved plot of %s to %s", graph.name, path)
    return path
