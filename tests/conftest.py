"""Pytest configuration and fixtures for dietcorr tests."""

from collections.abc import Callable
from pathlib import Path

import numpy as np
import pandas as pd
import pytest

from dietcorr.config import Settings
from dietcorr.core.loader import AnalysisFrame

HEADER = ["Country", "Alcoholic Beverages", "Animal fats", "Confirmed", "Deaths"]

TEN_COUNTRIES = [
    ("Albania", "0.9", "0.8", "2.79", "0.0504"),
    ("Argentina", "1.5", "1.9", "4.20", "0.1087"),
    ("Australia", "2.1", "2.6", "0.11", "0.0036"),
    ("Austria", "3.3", "5.2", "4.67", "0.0845"),
    ("Belgium", "2.9", "4.9", "6.12", "0.1826"),
    ("Brazil", "1.7", "1.5", "4.46", "0.1079"),
    ("Canada", "1.9", "2.1", "2.16", "0.0531"),
    ("Denmark", "2.4", "6.3", "3.47", "0.0383"),
    ("France", "3.0", "4.4", "4.84", "0.1115"),
    ("Germany", "3.4", "3.9", "2.59", "0.0626"),
]


def _render_csv(rows: list[tuple[str, ...]], header: list[str] = HEADER) -> str:
    lines = [",".join(header)]
    lines.extend(",".join(row) for row in rows)
    return "\n".join(lines) + "\n"


@pytest.fixture
def write_csv(tmp_path: Path) -> Callable[..., Path]:
    """Return a helper that writes rows to a CSV file under tmp_path."""

    def _write(
        rows: list[tuple[str, ...]],
        name: str = "Fat_Supply_Quantity_Data.csv",
        header: list[str] = HEADER,
    ) -> Path:
        path = tmp_path / name
        path.write_text(_render_csv(rows, header), encoding="utf-8")
        return path

    return _write


@pytest.fixture
def ten_country_csv(write_csv: Callable[..., Path]) -> Path:
    """CSV with 10 complete countries."""
    return write_csv(TEN_COUNTRIES)


@pytest.fixture
def missing_y_csv(write_csv: Callable[..., Path]) -> Path:
    """CSV with 10 countries where Belgium has an empty Deaths cell."""
    rows = [
        (*row[:4], "") if row[0] == "Belgium" else row
        for row in TEN_COUNTRIES
    ]
    return write_csv(rows)


@pytest.fixture
def two_row_csv(write_csv: Callable[..., Path]) -> Path:
    """CSV with only two valid paired rows."""
    rows = [
        TEN_COUNTRIES[0],
        TEN_COUNTRIES[1],
        ("Chad", "0.1", "", "0.05", "0.0012"),
        ("Fiji", "0.4", "1.1", "0.00", ""),
    ]
    return write_csv(rows)


@pytest.fixture
def header_only_csv(write_csv: Callable[..., Path]) -> Path:
    """CSV with a header row and no data."""
    return write_csv([])


@pytest.fixture
def ten_country_frame() -> AnalysisFrame:
    """Analysis frame built from the 10-country sample."""
    return AnalysisFrame(
        data=pd.DataFrame({
            "Country": [row[0] for row in TEN_COUNTRIES],
            "X": [float(row[2]) for row in TEN_COUNTRIES],
            "Y": [float(row[4]) for row in TEN_COUNTRIES],
        }),
        x_source="Animal fats",
        y_source="Deaths",
    )


@pytest.fixture
def large_frame() -> AnalysisFrame:
    """Analysis frame with more rows than the normality test accepts."""
    rng = np.random.default_rng(7)
    n = 6200
    x = rng.gamma(2.0, 2.0, n)
    return AnalysisFrame(
        data=pd.DataFrame({
            "Country": [f"C{i:05d}" for i in range(n)],
            "X": x,
            "Y": 0.01 * x + rng.normal(0, 0.02, n),
        }),
        x_source="Animal fats",
        y_source="Deaths",
    )


@pytest.fixture
def make_settings(tmp_path: Path) -> Callable[..., Settings]:
    """Return a helper building Settings that write into tmp_path/out."""

    def _make(input_path: Path, **overrides) -> Settings:
        return Settings(input_path=input_path, output_dir=tmp_path / "out", **overrides)

    return _make
