"""End-to-end analysis run.

Steps run strictly in order, each finishing before the next starts:

    load -> clean -> summarize -> plot -> test -> report

All outputs are derived from one AnalysisFrame. Any error aborts the run
at the step that raised it, so a failed run never reaches the report.

Example:
    >>> from dietcorr.config import Settings
    >>> from dietcorr.pipeline import run_analysis
    >>> outputs = run_analysis(Settings(input_path="data.csv", output_dir="out"))
    >>> print(outputs.report_path)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Any

from dietcorr.analysis.inference import normality_tests, ols_regression, pearson_test
from dietcorr.analysis.summary import summarize
from dietcorr.config import Settings, get_settings
from dietcorr.core.loader import AnalysisFrame, clean_frame, load_records
from dietcorr.report.writer import ReportContent, write_report
from dietcorr.visualization.plots import create_histogram, create_scatter_plot

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AnalysisOutputs:
    """Artefacts and results of a completed run.

    Attributes:
        frame: The analysis frame every output was derived from
        content: Numeric results shown in the report
        scatter_path: Written scatter plot
        histogram_path: Written histogram
        report_path: Written text report
    """

    frame: AnalysisFrame
    content: ReportContent
    scatter_path: Path
    histogram_path: Path
    report_path: Path

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "results": self.content.to_dict(),
            "scatter_path": str(self.scatter_path),
            "histogram_path": str(self.histogram_path),
            "report_path": str(self.report_path),
        }


def build_frame(settings: Settings) -> AnalysisFrame:
    """Load the input file and clean it into the analysis frame."""
    records = load_records(settings.input_path, delimiter=settings.delimiter)
    return clean_frame(
        records,
        x_column=settings.x_column,
        y_column=settings.y_column,
        id_column=settings.id_column,
    )


def render_figures(frame: AnalysisFrame, settings: Settings) -> tuple[Path, Path]:
    """Render and save the scatter plot and the histogram.

    Returns:
        Tuple of (scatter path, histogram path)
    """
    scatter = create_scatter_plot(
        frame,
        confidence_level=settings.confidence_level,
        figsize=settings.figure_size,
    )
    scatter_path = scatter.save(settings.scatter_path, dpi=settings.figure_dpi)

    histogram = create_histogram(
        frame,
        bins=settings.histogram_bins,
        figsize=settings.figure_size,
    )
    histogram_path = histogram.save(settings.histogram_path, dpi=settings.figure_dpi)

    return scatter_path, histogram_path


def run_analysis(settings: Settings | None = None) -> AnalysisOutputs:
    """Run the full analysis and write all artefacts.

    Args:
        settings: Run configuration (global settings if None)

    Returns:
        AnalysisOutputs with written paths and computed results

    Raises:
        NotFoundError, ParseError, SchemaError: While loading or cleaning
        RenderError: If the analysis frame is empty
        InsufficientDataError: If too few rows remain for the tests
    """
    settings = settings or get_settings()
    start_time = datetime.now()
    logger.info(f"Starting analysis of {settings.input_path}")

    frame = build_frame(settings)
    summary = summarize(frame)

    settings.output_dir.mkdir(parents=True, exist_ok=True)
    scatter_path, histogram_path = render_figures(frame, settings)

    correlation = pearson_test(frame, confidence_level=settings.confidence_level)
    regression = ols_regression(frame)
    normality_x, normality_y = normality_tests(
        frame,
        seed=settings.random_seed,
        max_n=settings.normality_max_n,
    )

    content = ReportContent(
        n_rows=len(frame),
        summary=summary,
        correlation=correlation,
        regression=regression,
        normality_x=normality_x,
        normality_y=normality_y,
        x_name=frame.x_source,
        y_name=frame.y_source,
    )
    report_path = write_report(settings.report_path, content)

    elapsed = (datetime.now() - start_time).total_seconds()
    logger.info(f"Analysis of {len(frame)} countries complete in {elapsed:.2f}s")

    return AnalysisOutputs(
        frame=frame,
        content=content,
        scatter_path=scatter_path,
        histogram_path=histogram_path,
        report_path=report_path,
    )
