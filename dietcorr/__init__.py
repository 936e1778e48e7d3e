"""dietcorr: Animal fat supply vs COVID-19 deaths across countries.

This package runs a one-shot statistical analysis of the country-level
Fat Supply Quantity dataset: it cleans the animal fat and deaths columns,
renders a scatter plot and a histogram, tests the correlation, fits a
linear regression, checks normality, and writes a text report.
"""

__version__ = "0.1.0"


def __getattr__(name: str):
    """Lazy imports for main package exports."""
    if name == "run_analysis":
        from dietcorr.pipeline import run_analysis

        return run_analysis
    if name == "Settings":
        from dietcorr.config import Settings

        return Settings
    if name == "AnalysisFrame":
        from dietcorr.core.loader import AnalysisFrame

        return AnalysisFrame
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


__all__ = [
    "AnalysisFrame",
    "Settings",
    "run_analysis",
    "__version__",
]
