"""Configuration management for dietcorr.

Uses pydantic-settings for type-safe environment variable loading.
Every path is explicit; nothing is inferred from the process working
directory beyond the relative defaults below.
"""

from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

SCATTER_FILENAME = "Figure1_scatter_AnimalFats_vs_Deaths.png"
HISTOGRAM_FILENAME = "Figure2_histogram_AnimalFats.png"
REPORT_FILENAME = "Analysis_results.txt"


class Settings(BaseSettings):
    """Run settings loaded from environment variables (prefix ``DIETCORR_``)."""

    model_config = SettingsConfigDict(
        env_prefix="DIETCORR_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Input
    input_path: Path = Field(
        default=Path("Fat_Supply_Quantity_Data.csv"),
        description="Delimited input file with a header row",
    )
    delimiter: str = Field(
        default=",",
        min_length=1,
        max_length=1,
        description="Field delimiter of the input file",
    )
    id_column: str = Field(
        default="Country",
        description="Column identifying each country",
    )
    x_column: str = Field(
        default="Animal fats",
        description="Source column used as X (grams per capita per day)",
    )
    y_column: str = Field(
        default="Deaths",
        description="Source column used as Y (COVID-19 deaths)",
    )

    # Output
    output_dir: Path = Field(
        default=Path("."),
        description="Directory receiving figures and the text report",
    )

    # Statistics
    random_seed: int = Field(
        default=123,
        description="Seed for subsampling before normality testing",
    )
    normality_max_n: int = Field(
        default=5000,
        ge=3,
        le=5000,
        description="Largest sample passed to the Shapiro-Wilk test",
    )
    confidence_level: float = Field(
        default=0.95,
        gt=0.0,
        lt=1.0,
        description="Confidence level for the correlation interval and trend band",
    )

    # Figures
    histogram_bins: int = Field(
        default=15,
        ge=1,
        description="Number of histogram bins",
    )
    figure_width: float = Field(
        default=7.0,
        gt=0,
        description="Figure width in inches",
    )
    figure_height: float = Field(
        default=5.0,
        gt=0,
        description="Figure height in inches",
    )
    figure_dpi: int = Field(
        default=300,
        gt=0,
        description="Raster resolution of saved figures",
    )

    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO",
        description="Logging level",
    )

    @property
    def figure_size(self) -> tuple[float, float]:
        """Figure size in inches as (width, height)."""
        return (self.figure_width, self.figure_height)

    @property
    def scatter_path(self) -> Path:
        """Output path of the scatter plot."""
        return self.output_dir / SCATTER_FILENAME

    @property
    def histogram_path(self) -> Path:
        """Output path of the histogram."""
        return self.output_dir / HISTOGRAM_FILENAME

    @property
    def report_path(self) -> Path:
        """Output path of the text report."""
        return self.output_dir / REPORT_FILENAME


# Global settings instance, built on first use
_settings: Settings | None = None


def get_settings() -> Settings:
    """Get the global settings instance."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings
