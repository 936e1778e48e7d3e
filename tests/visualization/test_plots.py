"""Tests for visualization plots module."""

import struct
from pathlib import Path

import matplotlib.pyplot as plt
import numpy as np
import pandas as pd
import pytest

from dietcorr.core.errors import RenderError
from dietcorr.core.loader import AnalysisFrame
from dietcorr.visualization.plots import (
    HISTOGRAM_TITLE,
    SCATTER_TITLE,
    PlotResult,
    create_histogram,
    create_scatter_plot,
)


def _png_size(path: Path) -> tuple[int, int]:
    """Read width and height from a PNG header."""
    with path.open("rb") as handle:
        header = handle.read(24)
    assert header[:8] == b"\x89PNG\r\n\x1a\n"
    return struct.unpack(">II", header[16:24])


def _frame(n: int) -> AnalysisFrame:
    rng = np.random.default_rng(3)
    x = rng.uniform(0, 10, n)
    return AnalysisFrame(
        data=pd.DataFrame({
            "Country": [f"C{i}" for i in range(n)],
            "X": x,
            "Y": 2 * x + rng.normal(0, 1, n),
        }),
        x_source="Animal fats",
        y_source="Deaths",
    )


@pytest.fixture
def empty_frame() -> AnalysisFrame:
    """Analysis frame with no rows."""
    return AnalysisFrame(
        data=pd.DataFrame({
            "Country": pd.Series([], dtype=object),
            "X": pd.Series([], dtype=float),
            "Y": pd.Series([], dtype=float),
        })
    )


class TestPlotResult:
    """Tests for PlotResult."""

    def test_create_result(self, ten_country_frame: AnalysisFrame) -> None:
        """Test that PlotResult has expected attributes."""
        result = create_histogram(ten_country_frame)
        try:
            assert isinstance(result, PlotResult)
            assert result.figure is not None
            assert result.title == HISTOGRAM_TITLE
            assert result.description
            assert isinstance(result.data_summary, dict)
        finally:
            result.close()

    def test_save_size_and_resolution(
        self, ten_country_frame: AnalysisFrame, tmp_path: Path
    ) -> None:
        """Test that a 7x5 inch figure at 300 dpi is 2100x1500 pixels."""
        path = create_scatter_plot(ten_country_frame).save(tmp_path / "scatter.png", dpi=300)

        assert path.exists()
        assert _png_size(path) == (2100, 1500)

    def test_save_closes_figure(self, ten_country_frame: AnalysisFrame, tmp_path: Path) -> None:
        """Test that saving releases the figure."""
        result = create_histogram(ten_country_frame)
        number = result.figure.number
        assert plt.fignum_exists(number)

        result.save(tmp_path / "hist.png")

        assert not plt.fignum_exists(number)

    def test_save_overwrites(self, ten_country_frame: AnalysisFrame, tmp_path: Path) -> None:
        """Test that an existing file is replaced."""
        path = tmp_path / "hist.png"
        path.write_bytes(b"stale")

        create_histogram(ten_country_frame).save(path, dpi=50)

        assert _png_size(path) == (350, 250)

    def test_save_to_missing_directory(
        self, ten_country_frame: AnalysisFrame, tmp_path: Path
    ) -> None:
        """Test that a failed save still releases the figure."""
        result = create_histogram(ten_country_frame)
        number = result.figure.number

        with pytest.raises(OSError):
            result.save(tmp_path / "missing" / "hist.png")

        assert not plt.fignum_exists(number)


class TestScatterPlot:
    """Tests for scatter plot creation."""

    def test_create_scatter_basic(self, ten_country_frame: AnalysisFrame) -> None:
        """Test creating the scatter plot."""
        result = create_scatter_plot(ten_country_frame)
        try:
            ax = result.figure.axes[0]
            assert result.title == SCATTER_TITLE
            assert ax.get_xlabel() == "Animal Fat Supply (grams per capita per day)"
            assert ax.get_ylabel() == "COVID-19 Deaths"
            assert result.data_summary["n_points"] == 10
            assert result.data_summary["trend_line"]
            assert result.data_summary["confidence_band"]
        finally:
            result.close()

    def test_points_semi_transparent(self, ten_country_frame: AnalysisFrame) -> None:
        """Test that points are drawn at 0.7 opacity."""
        result = create_scatter_plot(ten_country_frame)
        try:
            points = result.figure.axes[0].collections[0]
            assert points.get_alpha() == pytest.approx(0.7)
            assert len(points.get_offsets()) == 10
        finally:
            result.close()

    def test_trend_line_and_band(self, ten_country_frame: AnalysisFrame) -> None:
        """Test that one trend line and one shaded band are drawn."""
        result = create_scatter_plot(ten_country_frame)
        try:
            ax = result.figure.axes[0]
            assert len(ax.lines) == 1
            assert len(ax.collections) == 2
        finally:
            result.close()

    def test_figure_size(self, ten_country_frame: AnalysisFrame) -> None:
        """Test the default 7x5 inch size and a custom size."""
        default = create_scatter_plot(ten_country_frame)
        custom = create_scatter_plot(ten_country_frame, figsize=(4.0, 3.0))
        try:
            assert tuple(default.figure.get_size_inches()) == (7.0, 5.0)
            assert tuple(custom.figure.get_size_inches()) == (4.0, 3.0)
        finally:
            default.close()
            custom.close()

    def test_two_points_without_band(self) -> None:
        """Test that two points render a line but no band."""
        result = create_scatter_plot(_frame(2))
        try:
            assert result.data_summary["trend_line"]
            assert not result.data_summary["confidence_band"]
            assert len(result.figure.axes[0].lines) == 1
        finally:
            result.close()

    def test_single_point(self) -> None:
        """Test that one point renders without a trend line."""
        result = create_scatter_plot(_frame(1))
        try:
            assert not result.data_summary["trend_line"]
            assert len(result.figure.axes[0].lines) == 0
        finally:
            result.close()

    def test_empty_frame(self, empty_frame: AnalysisFrame) -> None:
        """Test that an empty frame raises RenderError."""
        with pytest.raises(RenderError, match="no rows"):
            create_scatter_plot(empty_frame)


class TestHistogram:
    """Tests for histogram creation."""

    def test_fifteen_bins(self, ten_country_frame: AnalysisFrame) -> None:
        """Test the default bin count and that every country is counted."""
        result = create_histogram(ten_country_frame)
        try:
            assert result.data_summary["bins"] == 15
            assert len(result.data_summary["bin_counts"]) == 15
            assert sum(result.data_summary["bin_counts"]) == 10
            assert len(result.figure.axes[0].patches) == 15
        finally:
            result.close()

    def test_custom_bins(self) -> None:
        """Test a custom bin count."""
        result = create_histogram(_frame(40), bins=8)
        try:
            assert len(result.data_summary["bin_edges"]) == 9
            assert sum(result.data_summary["bin_counts"]) == 40
        finally:
            result.close()

    def test_axis_labels(self, ten_country_frame: AnalysisFrame) -> None:
        """Test histogram labels."""
        result = create_histogram(ten_country_frame)
        try:
            ax = result.figure.axes[0]
            assert ax.get_ylabel() == "Number of Countries"
            assert ax.get_title() == HISTOGRAM_TITLE
        finally:
            result.close()

    def test_empty_frame(self, empty_frame: AnalysisFrame) -> None:
        """Test that an empty frame raises RenderError."""
        with pytest.raises(RenderError):
            create_histogram(empty_frame)
