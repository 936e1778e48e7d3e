"""Tests for descriptive summaries."""

import math

import numpy as np
import pandas as pd
import pytest

from dietcorr.analysis.summary import ColumnSummary, summarize, summarize_column
from dietcorr.core.loader import AnalysisFrame


class TestSummarizeColumn:
    """Tests for summarize_column."""

    def test_known_values(self) -> None:
        """Test quartiles use linear interpolation."""
        s = summarize_column([4.0, 1.0, 3.0, 2.0], label="v")

        assert s.count == 4
        assert s.min == 1.0
        assert s.q25 == pytest.approx(1.75)
        assert s.median == pytest.approx(2.5)
        assert s.mean == pytest.approx(2.5)
        assert s.q75 == pytest.approx(3.25)
        assert s.max == 4.0

    def test_ignores_missing(self) -> None:
        """Test that NaN values are not counted."""
        s = summarize_column([1.0, np.nan, 3.0], label="v")

        assert s.count == 2
        assert s.mean == pytest.approx(2.0)

    @pytest.mark.parametrize("seed", [0, 1, 2, 3])
    def test_order_statistics_monotone(self, seed: int) -> None:
        """Test min <= Q1 <= median <= Q3 <= max."""
        values = np.random.default_rng(seed).lognormal(0, 2, 37)
        s = summarize_column(values, label="v")

        assert s.min <= s.q25 <= s.median <= s.q75 <= s.max
        assert s.min <= s.mean <= s.max

    def test_single_value(self) -> None:
        """Test that one value fills every statistic."""
        s = summarize_column([5.0], label="v")
        assert s.values() == (5.0, 5.0, 5.0, 5.0, 5.0, 5.0)

    def test_empty_is_all_nan(self) -> None:
        """Test that empty input gives an all-NaN summary."""
        s = summarize_column([], label="v")

        assert s.count == 0
        assert s.is_empty
        assert all(math.isnan(v) for v in s.values())

    def test_format_for_display(self) -> None:
        """Test the two-line table layout."""
        text = summarize_column([1.0, 2.0, 3.0, 4.0], label="v").format_for_display()
        header, row = text.splitlines()

        for label in ("Min.", "1st Qu.", "Median", "Mean", "3rd Qu.", "Max."):
            assert label in header
        assert row.split() == ["1", "1.75", "2.5", "2.5", "3.25", "4"]

    def test_format_empty(self) -> None:
        """Test that an empty summary displays NA."""
        text = summarize_column([], label="v").format_for_display()
        assert text.splitlines()[1].split() == ["NA"] * 6

    def test_to_dict(self) -> None:
        """Test converting a summary to a dictionary."""
        d = summarize_column([1.0, 2.0], label="v").to_dict()

        assert d["label"] == "v"
        assert d["count"] == 2
        assert set(d) >= {"min", "q25", "median", "mean", "q75", "max"}

    def test_immutable(self) -> None:
        """Test that summaries cannot be changed after creation."""
        s = summarize_column([1.0, 2.0], label="v")
        with pytest.raises(AttributeError):
            s.mean = 0.0  # type: ignore[misc]


class TestSummarize:
    """Tests for summarize."""

    def test_labels_from_source_columns(self, ten_country_frame: AnalysisFrame) -> None:
        """Test that summaries are labelled with the source column names."""
        summary = summarize(ten_country_frame)

        assert isinstance(summary.x, ColumnSummary)
        assert summary.x.label == "Animal fats"
        assert summary.y.label == "Deaths"
        assert summary.x.count == summary.y.count == 10

    def test_matches_pandas(self, ten_country_frame: AnalysisFrame) -> None:
        """Test agreement with pandas describe()."""
        desc = ten_country_frame.to_dataframe()["X"].describe()
        s = summarize(ten_country_frame).x

        assert s.min == pytest.approx(desc["min"])
        assert s.q25 == pytest.approx(desc["25%"])
        assert s.median == pytest.approx(desc["50%"])
        assert s.mean == pytest.approx(desc["mean"])
        assert s.q75 == pytest.approx(desc["75%"])
        assert s.max == pytest.approx(desc["max"])

    def test_empty_frame(self) -> None:
        """Test that an empty frame does not raise."""
        frame = AnalysisFrame(
            data=pd.DataFrame({"Country": [], "X": [], "Y": []}).astype(
                {"X": float, "Y": float}
            )
        )
        summary = summarize(frame)

        assert summary.x.is_empty
        assert summary.y.is_empty
