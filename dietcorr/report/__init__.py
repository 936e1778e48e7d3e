"""Text report generation for dietcorr."""

from dietcorr.report.writer import ReportContent, render_report, write_report

__all__ = [
    "ReportContent",
    "render_report",
    "write_report",
]
