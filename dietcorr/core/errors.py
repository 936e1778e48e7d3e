"""Error types raised by the analysis pipeline.

Every failure aborts the run; nothing is retried. Each error subclasses the
closest builtin so callers can catch either the specific kind or the
builtin it extends.
"""

from __future__ import annotations

from collections.abc import Iterable


class AnalysisError(Exception):
    """Base class for all pipeline failures."""

    kind = "AnalysisError"


class NotFoundError(AnalysisError, FileNotFoundError):
    """The input file does not exist."""

    kind = "NotFoundError"

    def __init__(self, path: object) -> None:
        self.path = str(path)
        super().__init__(f"Input file not found: {self.path}")


class ParseError(AnalysisError, ValueError):
    """The input file is not valid delimited data."""

    kind = "ParseError"


class SchemaError(AnalysisError, ValueError):
    """One or more requested columns are absent from the input.

    Attributes:
        missing: Names of the absent columns
        available: Column names that were present
    """

    kind = "SchemaError"

    def __init__(self, missing: Iterable[str], available: Iterable[str]) -> None:
        self.missing = tuple(missing)
        self.available = tuple(available)
        super().__init__(
            f"Column(s) {', '.join(repr(m) for m in self.missing)} not found "
            f"in input (available: {', '.join(self.available) or 'none'})"
        )


class InsufficientDataError(AnalysisError, ValueError):
    """Too few valid observations for a statistical test.

    Attributes:
        test: Name of the test that was attempted
        required: Minimum number of observations
        actual: Number of observations available
    """

    kind = "InsufficientDataError"

    def __init__(self, test: str, required: int, actual: int, detail: str = "") -> None:
        self.test = test
        self.required = required
        self.actual = actual
        message = (
            f"Insufficient data for {test} "
            f"(need at least {required} observations, got {actual})"
        )
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)


class RenderError(AnalysisError, ValueError):
    """A figure could not be rendered from the analysis frame."""

    kind = "RenderError"
