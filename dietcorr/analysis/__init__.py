"""Statistical analysis tools for dietcorr.

This module contains:
- Descriptive summaries (min, quartiles, mean, max)
- Pearson correlation test and OLS regression
- Shapiro-Wilk normality checks
"""

from dietcorr.analysis.inference import (
    CoefficientEstimate,
    CorrelationTest,
    NormalityTest,
    RegressionResult,
    normality_tests,
    ols_regression,
    pearson_test,
    shapiro_test,
)
from dietcorr.analysis.summary import ColumnSummary, FrameSummary, summarize, summarize_column

__all__ = [
    "CoefficientEstimate",
    "ColumnSummary",
    "CorrelationTest",
    "FrameSummary",
    "NormalityTest",
    "RegressionResult",
    "normality_tests",
    "ols_regression",
    "pearson_test",
    "shapiro_test",
    "summarize",
    "summarize_column",
]
