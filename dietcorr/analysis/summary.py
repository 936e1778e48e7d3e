"""Descriptive statistics for the analysis frame.

Produces the min / quartiles / mean / max summary of each numeric column.
Quantiles use linear interpolation between order statistics.
"""

from __future__ import annotations

import math
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any

import numpy as np
import pandas as pd

from dietcorr.core.loader import X_COLUMN, Y_COLUMN, AnalysisFrame

SUMMARY_LABELS = ("Min.", "1st Qu.", "Median", "Mean", "3rd Qu.", "Max.")


@dataclass(frozen=True)
class ColumnSummary:
    """Summary statistics for one column.

    Attributes:
        label: Column name shown in output
        count: Number of values summarized
        min: Minimum value
        q25: 25th percentile
        median: Median value
        mean: Arithmetic mean
        q75: 75th percentile
        max: Maximum value
    """

    label: str
    count: int
    min: float
    q25: float
    median: float
    mean: float
    q75: float
    max: float

    @property
    def is_empty(self) -> bool:
        """True when the column had no values."""
        return self.count == 0

    def values(self) -> tuple[float, ...]:
        """Statistics in display order (min, Q1, median, mean, Q3, max)."""
        return (self.min, self.q25, self.median, self.mean, self.q75, self.max)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "label": self.label,
            "count": self.count,
            "min": self.min,
            "q25": self.q25,
            "median": self.median,
            "mean": self.mean,
            "q75": self.q75,
            "max": self.max,
        }

    def format_for_display(self) -> str:
        """Format as a two-line table (labels over values)."""
        cells = [_format_stat(v) for v in self.values()]
        width = max(len(s) for s in (*SUMMARY_LABELS, *cells))
        header = " ".join(label.rjust(width) for label in SUMMARY_LABELS)
        row = " ".join(cell.rjust(width) for cell in cells)
        return f"{header}\n{row}"


@dataclass(frozen=True)
class FrameSummary:
    """Summaries of the X and Y columns of an analysis frame."""

    x: ColumnSummary
    y: ColumnSummary

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {"x": self.x.to_dict(), "y": self.y.to_dict()}


def _format_stat(value: float) -> str:
    if math.isnan(value):
        return "NA"
    return f"{value:.4g}"


def summarize_column(
    values: Sequence[float] | np.ndarray | pd.Series,
    label: str,
) -> ColumnSummary:
    """Compute the summary of one numeric column.

    Missing values are ignored. An empty column yields an all-NaN summary
    with count 0 instead of raising.

    Args:
        values: Numeric values
        label: Column name shown in output

    Returns:
        ColumnSummary for the values
    """
    data = pd.Series(values, dtype=float).dropna()

    if len(data) == 0:
        nan = float("nan")
        return ColumnSummary(
            label=label, count=0,
            min=nan, q25=nan, median=nan, mean=nan, q75=nan, max=nan,
        )

    q25, median, q75 = (float(q) for q in data.quantile([0.25, 0.5, 0.75]))
    return ColumnSummary(
        label=label,
        count=len(data),
        min=float(data.min()),
        q25=q25,
        median=median,
        mean=float(data.mean()),
        q75=q75,
        max=float(data.max()),
    )


def summarize(frame: AnalysisFrame) -> FrameSummary:
    """Summarize the X and Y columns of an analysis frame.

    Example:
        >>> summary = summarize(frame)
        >>> print(summary.x.format_for_display())
    """
    data = frame.to_dataframe()
    return FrameSummary(
        x=summarize_column(data[X_COLUMN], label=frame.x_source),
        y=summarize_column(data[Y_COLUMN], label=frame.y_source),
    )
