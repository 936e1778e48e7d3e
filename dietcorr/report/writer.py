"""Plain-text report of the analysis results.

The report is written for people, not parsers. Only the order of its
sections is fixed:

1. header banner
2. research question
3. variable definitions
4. number of countries
5. X summary
6. Y summary
7. Pearson correlation test
8. linear regression summary
9. normality checks for X, then Y
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from dietcorr.analysis.inference import CorrelationTest, NormalityTest, RegressionResult
from dietcorr.analysis.summary import FrameSummary

logger = logging.getLogger(__name__)

BANNER = "=" * 44
RULE = "-" * 44

REPORT_TITLE = "Statistical Analysis Output"
RESEARCH_QUESTION = (
    "Is there a significant correlation between animal fat consumption\n"
    "and COVID-19 deaths across countries?"
)
X_DESCRIPTION = "Animal fats (grams per capita per day)"
Y_DESCRIPTION = "COVID-19 Deaths"


@dataclass(frozen=True)
class ReportContent:
    """Everything the report shows.

    Attributes:
        n_rows: Number of countries in the analysis frame
        summary: Summaries of X and Y
        correlation: Pearson correlation test
        regression: OLS fit of Y on X
        normality_x: Shapiro-Wilk result for X
        normality_y: Shapiro-Wilk result for Y
        x_name: Short name of X (the source column)
        y_name: Short name of Y (the source column)
        x_description: Human-readable definition of X
        y_description: Human-readable definition of Y
    """

    n_rows: int
    summary: FrameSummary
    correlation: CorrelationTest
    regression: RegressionResult
    normality_x: NormalityTest
    normality_y: NormalityTest
    x_name: str = "Animal fats"
    y_name: str = "Deaths"
    x_description: str = X_DESCRIPTION
    y_description: str = Y_DESCRIPTION

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "n_rows": self.n_rows,
            "summary": self.summary.to_dict(),
            "correlation": self.correlation.to_dict(),
            "regression": self.regression.to_dict(),
            "normality": {
                "x": self.normality_x.to_dict(),
                "y": self.normality_y.to_dict(),
            },
        }


def _section(title: str) -> list[str]:
    return ["", RULE, title, RULE]


def render_report(content: ReportContent) -> str:
    """Render the report text.

    Args:
        content: Results to report

    Returns:
        Report text ending with a newline
    """
    x_short, y_short = content.x_name, content.y_name

    lines = [
        BANNER,
        REPORT_TITLE,
        BANNER,
        "",
        "Research Question:",
        RESEARCH_QUESTION,
        "",
        "Variables used:",
        f"X = {content.x_description}",
        f"Y = {content.y_description}",
        "",
        f"Number of countries in analysis: {content.n_rows}",
        "",
        f"Summary statistics for {x_short} (X):",
        content.summary.x.format_for_display(),
        "",
        f"Summary statistics for {y_short} (Y):",
        content.summary.y.format_for_display(),
    ]

    lines += _section("Pearson Correlation Test (X vs Y)")
    lines.append(content.correlation.format_for_display())

    lines += _section("Linear Regression Model: Y ~ X")
    lines.append(content.regression.format_for_display())

    lines += _section("Normality checks (Shapiro-Wilk)")
    lines += [
        "",
        f"X ({x_short}):",
        content.normality_x.format_for_display(),
        "",
        f"Y ({y_short}):",
        content.normality_y.format_for_display(),
    ]

    return "\n".join(lines) + "\n"


def write_report(path: Path | str, content: ReportContent) -> Path:
    """Write the report as UTF-8 text, replacing any existing file.

    Args:
        path: Destination file
        content: Results to report

    Returns:
        Path of the written file
    """
    path = Path(path)
    text = render_report(content)
    with path.open("w", encoding="utf-8") as handle:
        handle.write(text)
    logger.info(f"Wrote analysis report to {path}")
    return path
