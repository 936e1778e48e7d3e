"""Figures for the animal fat vs deaths analysis.

This module provides the two raster figures of the report:
- Scatter plot of deaths against animal fat supply with an OLS trend line
  and its confidence band
- Histogram of animal fat supply across countries

Plots are drawn with matplotlib on the non-interactive Agg backend.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import matplotlib

matplotlib.use("Agg")

import matplotlib.pyplot as plt  # noqa: E402
import numpy as np  # noqa: E402
from matplotlib.axes import Axes  # noqa: E402
from matplotlib.figure import Figure  # noqa: E402

from dietcorr.analysis.inference import trend_band  # noqa: E402
from dietcorr.core.errors import RenderError  # noqa: E402
from dietcorr.core.loader import AnalysisFrame  # noqa: E402

logger = logging.getLogger(__name__)

X_LABEL = "Animal Fat Supply (grams per capita per day)"
Y_LABEL = "COVID-19 Deaths"
SCATTER_TITLE = "Relationship Between Animal Fat Consumption and COVID-19 Deaths"
HISTOGRAM_TITLE = "Distribution of Animal Fat Consumption Across Countries"

DEFAULT_FIGSIZE = (7.0, 5.0)
DEFAULT_DPI = 300
POINT_ALPHA = 0.7
TREND_COLOR = "#3366FF"
BAND_COLOR = "#999999"


@dataclass
class PlotResult:
    """Result from a plot generation function.

    Attributes:
        figure: Matplotlib figure object
        title: Plot title
        description: Description of what the plot shows
        data_summary: Summary of data used
    """

    figure: Figure
    title: str
    description: str
    data_summary: dict[str, Any]

    def save(self, path: Path | str, dpi: int = DEFAULT_DPI) -> Path:
        """Write the figure as a PNG and release it.

        Args:
            path: Destination file (overwritten if present)
            dpi: Raster resolution

        Returns:
            Path of the written file
        """
        path = Path(path)
        try:
            self.figure.savefig(path, format="png", dpi=dpi)
        finally:
            self.close()
        logger.info(f"Saved '{self.title}' to {path}")
        return path

    def close(self) -> None:
        """Release the figure."""
        plt.close(self.figure)


def _require_rows(frame: AnalysisFrame, what: str) -> None:
    if frame.is_empty:
        raise RenderError(f"Cannot render {what}: the analysis frame has no rows")


def _apply_minimal_theme(ax: Axes) -> None:
    """Light grid, no frame, plain white background."""
    for spine in ax.spines.values():
        spine.set_visible(False)
    ax.set_facecolor("white")
    ax.grid(True, color="#EBEBEB", linewidth=0.8)
    ax.set_axisbelow(True)
    ax.tick_params(length=0)


def create_scatter_plot(
    frame: AnalysisFrame,
    confidence_level: float = 0.95,
    figsize: tuple[float, float] = DEFAULT_FIGSIZE,
    title: str = SCATTER_TITLE,
    x_label: str = X_LABEL,
    y_label: str = Y_LABEL,
) -> PlotResult:
    """Scatter plot of Y against X with an OLS trend line.

    Points are semi-transparent to reveal overplotting. The shaded band is
    the confidence interval of the fitted mean.

    Args:
        frame: Analysis frame
        confidence_level: Confidence level of the band
        figsize: Figure size in inches
        title: Plot title
        x_label: Horizontal axis label
        y_label: Vertical axis label

    Returns:
        PlotResult with the scatter figure

    Raises:
        RenderError: If the frame has no rows
    """
    _require_rows(frame, "scatter plot")
    x, y = frame.x, frame.y

    fig, ax = plt.subplots(figsize=figsize)
    try:
        ax.scatter(x, y, alpha=POINT_ALPHA, color="black", s=18, linewidths=0)

        band = trend_band(frame, confidence_level=confidence_level)
        if band is not None:
            if band.lower is not None and band.upper is not None:
                ax.fill_between(
                    band.x, band.lower, band.upper,
                    color=BAND_COLOR, alpha=0.4, linewidth=0,
                )
            ax.plot(band.x, band.fit, color=TREND_COLOR, linewidth=1.5)
        else:
            logger.debug("Skipping trend line: X does not vary")

        ax.set_title(title)
        ax.set_xlabel(x_label)
        ax.set_ylabel(y_label)
        _apply_minimal_theme(ax)
        fig.tight_layout()
    except Exception:
        plt.close(fig)
        raise

    summary = {
        "n_points": len(frame),
        "x_range": [float(x.min()), float(x.max())],
        "y_range": [float(y.min()), float(y.max())],
        "trend_line": band is not None,
        "confidence_band": band is not None and band.lower is not None,
    }

    return PlotResult(
        figure=fig,
        title=title,
        description=f"Scatter plot of {frame.y_source} vs {frame.x_source} "
                    f"with a linear trend and {confidence_level:.0%} confidence band.",
        data_summary=summary,
    )


def create_histogram(
    frame: AnalysisFrame,
    bins: int = 15,
    figsize: tuple[float, float] = DEFAULT_FIGSIZE,
    title: str = HISTOGRAM_TITLE,
    x_label: str = X_LABEL,
) -> PlotResult:
    """Histogram of X, counting countries per bin.

    Args:
        frame: Analysis frame
        bins: Number of bins
        figsize: Figure size in inches
        title: Plot title
        x_label: Horizontal axis label

    Returns:
        PlotResult with the histogram figure

    Raises:
        RenderError: If the frame has no rows
    """
    _require_rows(frame, "histogram")
    x = frame.x
    counts, edges = np.histogram(x, bins=bins)

    fig, ax = plt.subplots(figsize=figsize)
    try:
        ax.hist(x, bins=edges, color="#595959", edgecolor="white", linewidth=0.5)
        ax.set_title(title)
        ax.set_xlabel(x_label)
        ax.set_ylabel("Number of Countries")
        _apply_minimal_theme(ax)
        fig.tight_layout()
    except Exception:
        plt.close(fig)
        raise

    summary = {
        "count": len(frame),
        "bins": bins,
        "bin_edges": [float(e) for e in edges],
        "bin_counts": [int(c) for c in counts],
        "mean": float(x.mean()),
        "median": float(np.median(x)),
    }

    return PlotResult(
        figure=fig,
        title=title,
        description=f"Histogram of {frame.x_source} across countries.",
        data_summary=summary,
    )
