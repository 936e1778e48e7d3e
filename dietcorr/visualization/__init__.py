"""Visualization tools for dietcorr.

This module contains:
- Scatter plot with OLS trend line and confidence band
- Histogram of the X variable
"""

from dietcorr.visualization.plots import (
    PlotResult,
    create_histogram,
    create_scatter_plot,
)

__all__ = [
    "PlotResult",
    "create_histogram",
    "create_scatter_plot",
]
