"""Core functionality for dietcorr.

This module contains:
- Error types raised by the pipeline
- Record loading from delimited files
- Cleaning into the analysis frame
"""

from dietcorr.core.errors import (
    AnalysisError,
    InsufficientDataError,
    NotFoundError,
    ParseError,
    RenderError,
    SchemaError,
)
from dietcorr.core.loader import AnalysisFrame, clean_frame, load_records

__all__ = [
    "AnalysisError",
    "AnalysisFrame",
    "InsufficientDataError",
    "NotFoundError",
    "ParseError",
    "RenderError",
    "SchemaError",
    "clean_frame",
    "load_records",
]
