"""Command-line interface for dietcorr."""

import argparse
import logging
import sys
from pathlib import Path

from pydantic import ValidationError

from dietcorr import __version__
from dietcorr.config import Settings
from dietcorr.core.errors import AnalysisError

logger = logging.getLogger("dietcorr")

# CLI option -> Settings field
_OVERRIDES = {
    "input": "input_path",
    "delimiter": "delimiter",
    "id_column": "id_column",
    "x_column": "x_column",
    "y_column": "y_column",
    "output_dir": "output_dir",
    "seed": "random_seed",
    "bins": "histogram_bins",
    "width": "figure_width",
    "height": "figure_height",
    "dpi": "figure_dpi",
    "log_level": "log_level",
}


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser."""
    parser = argparse.ArgumentParser(
        prog="dietcorr",
        description="Correlate animal fat supply with COVID-19 deaths across countries",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "input",
        nargs="?",
        type=Path,
        help="Delimited input file (default: Fat_Supply_Quantity_Data.csv)",
    )
    parser.add_argument(
        "-o", "--output-dir",
        type=Path,
        help="Directory for figures and the report (default: .)",
    )
    parser.add_argument("--delimiter", help="Field delimiter (default: ,)")
    parser.add_argument("--id-column", help="Country column (default: Country)")
    parser.add_argument("--x-column", help="Column used as X (default: 'Animal fats')")
    parser.add_argument("--y-column", help="Column used as Y (default: Deaths)")
    parser.add_argument(
        "--seed",
        type=int,
        help="Random seed for normality-test subsampling (default: 123)",
    )
    parser.add_argument("--bins", type=int, help="Histogram bin count (default: 15)")
    parser.add_argument("--width", type=float, help="Figure width in inches (default: 7)")
    parser.add_argument("--height", type=float, help="Figure height in inches (default: 5)")
    parser.add_argument("--dpi", type=int, help="Figure resolution (default: 300)")
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Logging level (default: INFO)",
    )
    return parser


def settings_from_args(args: argparse.Namespace) -> Settings:
    """Build Settings, letting explicit CLI options override the environment."""
    overrides = {
        field: getattr(args, option)
        for option, field in _OVERRIDES.items()
        if getattr(args, option) is not None
    }
    return Settings(**overrides)


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the CLI."""
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        settings = settings_from_args(args)
    except ValidationError as e:
        print(f"Error: invalid configuration\n{e}", file=sys.stderr)
        return 2

    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    from dietcorr.pipeline import run_analysis

    try:
        outputs = run_analysis(settings)
    except AnalysisError as e:
        logger.error(f"Analysis failed ({e.kind}): {e}")
        print(f"Error [{e.kind}]: {e}", file=sys.stderr)
        return 1

    print(
        "Analysis complete. Plots and results have been saved in "
        f"{settings.output_dir.resolve()}:"
    )
    for path in (outputs.scatter_path, outputs.histogram_path, outputs.report_path):
        print(f"  {path.name}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
