"""Loading and cleaning of the country-level input table.

This module provides the data layer of the pipeline:
- Reading a delimited file into a record table
- Projecting the identifier and the two analysis columns
- Dropping rows with missing or non-numeric values

Example:
    >>> from dietcorr.core.loader import load_records, clean_frame
    >>> records = load_records("Fat_Supply_Quantity_Data.csv")
    >>> frame = clean_frame(records, x_column="Animal fats", y_column="Deaths")
    >>> print(f"{len(frame)} countries kept")
"""

from __future__ import annotations

import csv
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import numpy as np
import pandas as pd
from pandas.api.types import is_numeric_dtype

from dietcorr.core.errors import NotFoundError, ParseError, SchemaError

logger = logging.getLogger(__name__)

ID_COLUMN = "Country"
X_COLUMN = "X"
Y_COLUMN = "Y"
FRAME_COLUMNS = (ID_COLUMN, X_COLUMN, Y_COLUMN)


@dataclass(frozen=True, eq=False)
class AnalysisFrame:
    """Cleaned table driving every downstream computation.

    Holds exactly three columns (``Country``, ``X``, ``Y``) with no missing
    X or Y. The wrapped DataFrame is a private copy and every accessor
    returns a copy, so one frame can feed plots, tests and the report
    without any of them seeing another's changes.

    Attributes:
        data: DataFrame with columns Country, X, Y
        x_source: Name of the input column mapped to X
        y_source: Name of the input column mapped to Y
        dropped_rows: Number of input rows removed during cleaning
    """

    data: pd.DataFrame
    x_source: str = X_COLUMN
    y_source: str = Y_COLUMN
    dropped_rows: int = 0

    def __post_init__(self) -> None:
        if list(self.data.columns) != list(FRAME_COLUMNS):
            raise ValueError(
                f"AnalysisFrame requires columns {list(FRAME_COLUMNS)}, "
                f"got {list(self.data.columns)}"
            )
        if self.data[[X_COLUMN, Y_COLUMN]].isna().any().any():
            raise ValueError("AnalysisFrame must not contain missing X or Y values")
        object.__setattr__(self, "data", self.data.reset_index(drop=True).copy())

    def __len__(self) -> int:
        return len(self.data)

    @property
    def is_empty(self) -> bool:
        """True when no rows survived cleaning."""
        return len(self.data) == 0

    @property
    def x(self) -> np.ndarray:
        """X values as a float array."""
        return self.data[X_COLUMN].to_numpy(dtype=float, copy=True)

    @property
    def y(self) -> np.ndarray:
        """Y values as a float array."""
        return self.data[Y_COLUMN].to_numpy(dtype=float, copy=True)

    @property
    def countries(self) -> list[str]:
        """Country identifiers in row order."""
        return self.data[ID_COLUMN].tolist()

    def equals(self, other: AnalysisFrame) -> bool:
        """Check whether two frames hold the same rows in the same order."""
        return self.data.equals(other.data)

    def to_dataframe(self) -> pd.DataFrame:
        """Return a copy of the underlying DataFrame."""
        return self.data.copy()

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "x_source": self.x_source,
            "y_source": self.y_source,
            "n_rows": len(self),
            "dropped_rows": self.dropped_rows,
            "records": self.data.to_dict(orient="records"),
        }


def load_records(
    path: Path | str,
    delimiter: str = ",",
    encoding: str = "utf-8-sig",
) -> pd.DataFrame:
    """Read a delimited text file with a header row.

    Every cell is kept as a string; empty cells become missing values.
    Column names and row order are preserved.

    Args:
        path: Path to the delimited file
        delimiter: Field delimiter
        encoding: File encoding

    Returns:
        Record table as a DataFrame

    Raises:
        NotFoundError: If the file does not exist
        ParseError: If the delimiter is not a single character, or the file
            is empty, undecodable, or has rows whose field count differs
            from the header
    """
    if len(delimiter) != 1:
        raise ParseError(f"Delimiter must be a single character, got {delimiter!r}")
    path = Path(path)
    if not path.is_file():
        raise NotFoundError(path)

    logger.info(f"Loading records from {path}")
    _check_field_counts(path, delimiter, encoding)

    try:
        records = pd.read_csv(
            path,
            sep=delimiter,
            encoding=encoding,
            dtype=str,
            keep_default_na=False,
            na_values=[""],
            skipinitialspace=True,
        )
    except pd.errors.EmptyDataError as e:
        raise ParseError(f"{path} is empty (no header row)") from e
    except pd.errors.ParserError as e:
        raise ParseError(f"Malformed delimited data in {path}: {e}") from e
    except UnicodeDecodeError as e:
        raise ParseError(f"{path} is not valid {encoding} text: {e}") from e

    logger.info(f"Loaded {len(records)} rows x {len(records.columns)} columns")
    return records


def _check_field_counts(path: Path, delimiter: str, encoding: str) -> None:
    """Ensure every non-blank row has as many fields as the header.

    pandas silently pads short rows, so the count is checked separately.
    """
    expected: int | None = None
    try:
        with path.open(newline="", encoding=encoding) as handle:
            reader = csv.reader(handle, delimiter=delimiter, skipinitialspace=True)
            for row in reader:
                if not row:
                    continue
                if expected is None:
                    expected = len(row)
                elif len(row) != expected:
                    raise ParseError(
                        f"Malformed row at line {reader.line_num} of {path}: "
                        f"expected {expected} fields, found {len(row)}"
                    )
    except UnicodeDecodeError as e:
        raise ParseError(f"{path} is not valid {encoding} text: {e}") from e
    except csv.Error as e:
        raise ParseError(f"Malformed delimited data in {path}: {e}") from e

    if expected is None:
        raise ParseError(f"{path} is empty (no header row)")


def clean_frame(
    records: pd.DataFrame,
    x_column: str,
    y_column: str,
    id_column: str = ID_COLUMN,
) -> AnalysisFrame:
    """Project and clean the two analysis columns.

    Rows whose X or Y value is missing or not a finite number are dropped,
    never imputed. Row order is preserved. Cleaning a frame that already
    has columns Country, X and Y returns an equal frame.

    Args:
        records: Record table from load_records
        x_column: Source column used as X
        y_column: Source column used as Y
        id_column: Column identifying each country

    Returns:
        AnalysisFrame with columns Country, X, Y

    Raises:
        SchemaError: If any of the requested columns is absent
    """
    required = [id_column, x_column, y_column]
    missing = [col for col in dict.fromkeys(required) if col not in records.columns]
    if missing:
        raise SchemaError(missing, [str(c) for c in records.columns])

    x = _to_numeric(records[x_column])
    y = _to_numeric(records[y_column])
    projected = pd.DataFrame({
        ID_COLUMN: records[id_column].to_numpy(),
        X_COLUMN: x.to_numpy(),
        Y_COLUMN: y.to_numpy(),
    })

    keep = np.isfinite(projected[X_COLUMN]) & np.isfinite(projected[Y_COLUMN])
    cleaned = projected[keep].reset_index(drop=True)
    dropped = len(projected) - len(cleaned)

    if dropped:
        logger.info(
            f"Dropped {dropped} of {len(projected)} rows with missing or "
            f"non-numeric '{x_column}'/'{y_column}'"
        )
    logger.debug(f"Analysis frame has {len(cleaned)} rows")

    return AnalysisFrame(
        data=cleaned,
        x_source=x_column,
        y_source=y_column,
        dropped_rows=dropped,
    )


def _to_numeric(series: pd.Series) -> pd.Series:
    """Coerce a column to float, mapping anything unparseable to NaN."""
    if is_numeric_dtype(series):
        return series.astype(float)
    stripped = series.map(lambda v: v.strip() if isinstance(v, str) else v)
    return pd.to_numeric(stripped, errors="coerce").astype(float)
