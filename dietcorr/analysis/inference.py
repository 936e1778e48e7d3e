"""Inferential statistics on the analysis frame.

This module provides:
- Pearson correlation test with a Fisher-z confidence interval
- Ordinary least squares regression of Y on X
- Shapiro-Wilk normality tests, with fixed-seed subsampling of large samples

Numerical work is delegated to scipy and statsmodels; this module only
validates inputs and packages the results.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any

import numpy as np
import statsmodels.api as sm
from scipy import stats

from dietcorr.core.errors import InsufficientDataError
from dietcorr.core.loader import AnalysisFrame

logger = logging.getLogger(__name__)

MIN_OBSERVATIONS = 3
DEFAULT_SEED = 123
SHAPIRO_MAX_N = 5000
P_VALUE_FLOOR = 2.2e-16

# Upper bounds on |r| for each strength label
STRENGTH_BANDS = ((0.1, "negligible"), (0.3, "weak"), (0.5, "moderate"), (0.7, "strong"))
SIGNIFICANCE_BANDS = (
    (0.001, "highly significant (p < 0.001)"),
    (0.01, "significant (p < 0.01)"),
    (0.05, "significant (p < 0.05)"),
)


def format_pvalue(p: float) -> str:
    """Format a p-value, collapsing values below machine precision."""
    if math.isnan(p):
        return "NA"
    if p < P_VALUE_FLOOR:
        return f"< {P_VALUE_FLOOR:.2g}"
    return f"{p:.4g}"


def significance_stars(p: float) -> str:
    """Conventional significance code for a p-value."""
    if math.isnan(p):
        return ""
    if p < 0.001:
        return "***"
    if p < 0.01:
        return "**"
    if p < 0.05:
        return "*"
    if p < 0.1:
        return "."
    return ""


@dataclass(frozen=True)
class CorrelationTest:
    """Result of a Pearson correlation test.

    Attributes:
        x_label: Name of the X variable
        y_label: Name of the Y variable
        n: Number of paired observations
        r: Pearson correlation coefficient
        t_statistic: t statistic of the test of zero correlation
        df: Degrees of freedom (n - 2)
        p_value: Two-sided p-value
        ci_low: Lower bound of the confidence interval for r
        ci_high: Upper bound of the confidence interval for r
        confidence_level: Confidence level of the interval
        interpretation: Human-readable interpretation
    """

    x_label: str
    y_label: str
    n: int
    r: float
    t_statistic: float
    df: int
    p_value: float
    ci_low: float
    ci_high: float
    confidence_level: float = 0.95
    interpretation: str = ""

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "x_label": self.x_label,
            "y_label": self.y_label,
            "n": self.n,
            "r": self.r,
            "t_statistic": self.t_statistic,
            "df": self.df,
            "p_value": self.p_value,
            "confidence_interval": [self.ci_low, self.ci_high],
            "confidence_level": self.confidence_level,
            "interpretation": self.interpretation,
        }

    def format_for_display(self) -> str:
        """Format as human-readable text."""
        level = f"{self.confidence_level * 100:g}"
        lines = [
            "Pearson's product-moment correlation",
            "",
            f"data:  {self.x_label} and {self.y_label} (n = {self.n})",
            f"t = {self.t_statistic:.4g}, df = {self.df}, "
            f"p-value = {format_pvalue(self.p_value)}",
            "alternative hypothesis: true correlation is not equal to 0",
            f"{level} percent confidence interval:",
            f" {self.ci_low:.7g} {self.ci_high:.7g}",
            "sample estimates:",
            f"  cor = {self.r:.7g}",
        ]
        if self.interpretation:
            lines.extend(["", self.interpretation])
        return "\n".join(lines)


@dataclass(frozen=True)
class CoefficientEstimate:
    """One row of a regression coefficient table."""

    name: str
    estimate: float
    std_error: float
    t_value: float
    p_value: float

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "name": self.name,
            "estimate": self.estimate,
            "std_error": self.std_error,
            "t_value": self.t_value,
            "p_value": self.p_value,
        }


@dataclass(frozen=True)
class RegressionResult:
    """Result of an ordinary least squares fit of Y on X.

    Attributes:
        x_label: Name of the predictor
        y_label: Name of the response
        n: Number of observations
        intercept: Intercept coefficient row
        slope: Slope coefficient row
        r_squared: Coefficient of determination
        adj_r_squared: R-squared adjusted for one predictor
        residual_std_error: Square root of the residual mean square
        df_residual: Residual degrees of freedom
        f_statistic: Overall F statistic
        f_p_value: p-value of the F statistic
        residual_quantiles: Min, Q1, median, Q3, max of the residuals
    """

    x_label: str
    y_label: str
    n: int
    intercept: CoefficientEstimate
    slope: CoefficientEstimate
    r_squared: float
    adj_r_squared: float
    residual_std_error: float
    df_residual: int
    f_statistic: float
    f_p_value: float
    residual_quantiles: tuple[float, float, float, float, float]

    @property
    def coefficients(self) -> tuple[CoefficientEstimate, CoefficientEstimate]:
        """Coefficient rows as (intercept, slope)."""
        return (self.intercept, self.slope)

    def predict(self, x: float | np.ndarray) -> float | np.ndarray:
        """Fitted value(s) for the given predictor value(s)."""
        return self.intercept.estimate + self.slope.estimate * np.asarray(x, dtype=float)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "x_label": self.x_label,
            "y_label": self.y_label,
            "n": self.n,
            "coefficients": [c.to_dict() for c in self.coefficients],
            "r_squared": self.r_squared,
            "adj_r_squared": self.adj_r_squared,
            "residual_std_error": self.residual_std_error,
            "df_residual": self.df_residual,
            "f_statistic": self.f_statistic,
            "f_p_value": self.f_p_value,
            "residual_quantiles": list(self.residual_quantiles),
        }

    def format_for_display(self) -> str:
        """Format as a regression summary table."""
        q_labels = ("Min", "1Q", "Median", "3Q", "Max")
        q_cells = [f"{q:.4g}" for q in self.residual_quantiles]
        q_width = max(len(s) for s in (*q_labels, *q_cells))

        rows = [("", "Estimate", "Std. Error", "t value", "Pr(>|t|)", "")]
        for coef in self.coefficients:
            rows.append((
                coef.name,
                f"{coef.estimate:.5g}",
                f"{coef.std_error:.5g}",
                f"{coef.t_value:.3f}",
                format_pvalue(coef.p_value),
                significance_stars(coef.p_value),
            ))
        widths = [max(len(row[i]) for row in rows) for i in range(6)]
        table = [
            "  ".join(
                cell.ljust(widths[i]) if i in (0, 5) else cell.rjust(widths[i])
                for i, cell in enumerate(row)
            ).rstrip()
            for row in rows
        ]

        return "\n".join([
            f"Model: {self.y_label} ~ {self.x_label} (n = {self.n})",
            "",
            "Residuals:",
            " ".join(label.rjust(q_width) for label in q_labels),
            " ".join(cell.rjust(q_width) for cell in q_cells),
            "",
            "Coefficients:",
            *table,
            "---",
            "Signif. codes:  0 '***' 0.001 '**' 0.01 '*' 0.05 '.' 0.1 ' ' 1",
            "",
            f"Residual standard error: {self.residual_std_error:.4g} "
            f"on {self.df_residual} degrees of freedom",
            f"Multiple R-squared:  {self.r_squared:.4g},\t"
            f"Adjusted R-squared:  {self.adj_r_squared:.4g}",
            f"F-statistic: {self.f_statistic:.4g} on 1 and {self.df_residual} DF,  "
            f"p-value: {format_pvalue(self.f_p_value)}",
        ])


@dataclass(frozen=True)
class NormalityTest:
    """Result of a Shapiro-Wilk normality test.

    Attributes:
        label: Name of the tested variable
        statistic: W statistic
        p_value: p-value
        n_tested: Number of values passed to the test
        n_total: Number of values available before subsampling
        seed: Seed used when the sample was drawn, else None
    """

    label: str
    statistic: float
    p_value: float
    n_tested: int
    n_total: int
    seed: int | None = None

    @property
    def subsampled(self) -> bool:
        """True when a random subsample was tested instead of all values."""
        return self.n_tested < self.n_total

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "label": self.label,
            "statistic": self.statistic,
            "p_value": self.p_value,
            "n_tested": self.n_tested,
            "n_total": self.n_total,
            "subsampled": self.subsampled,
            "seed": self.seed,
        }

    def format_for_display(self) -> str:
        """Format as human-readable text."""
        lines = [
            "Shapiro-Wilk normality test",
            "",
            f"data:  {self.label} (n = {self.n_tested})",
            f"W = {self.statistic:.5g}, p-value = {format_pvalue(self.p_value)}",
        ]
        if self.subsampled:
            lines.append(
                f"(random sample of {self.n_tested} from {self.n_total} values, "
                f"seed = {self.seed})"
            )
        return "\n".join(lines)


@dataclass(frozen=True, eq=False)
class TrendBand:
    """Fitted OLS line with a confidence band for the mean response."""

    x: np.ndarray
    fit: np.ndarray
    lower: np.ndarray | None
    upper: np.ndarray | None


def _require(test: str, n: int, minimum: int = MIN_OBSERVATIONS) -> None:
    if n < minimum:
        raise InsufficientDataError(test, required=minimum, actual=n)


def pearson_test(
    frame: AnalysisFrame,
    confidence_level: float = 0.95,
) -> CorrelationTest:
    """Test for linear association between X and Y.

    The p-value is two-sided under bivariate normality; the confidence
    interval uses the Fisher z-transform.

    Args:
        frame: Analysis frame
        confidence_level: Confidence level of the interval for r

    Returns:
        CorrelationTest

    Raises:
        InsufficientDataError: With fewer than 3 pairs, or when X or Y
            is constant (r undefined)

    Example:
        >>> result = pearson_test(frame)
        >>> print(result.format_for_display())
    """
    test = "Pearson correlation test"
    x, y = frame.x, frame.y
    n = len(x)
    _require(test, n)

    for label, values in (("X", x), ("Y", y)):
        if np.ptp(values) == 0:
            raise InsufficientDataError(
                test, required=MIN_OBSERVATIONS, actual=n,
                detail=f"{label} is constant, so the correlation is undefined",
            )

    result = stats.pearsonr(x, y)
    r = float(result.statistic)
    p_value = float(result.pvalue)
    ci = result.confidence_interval(confidence_level=confidence_level)

    df = n - 2
    with np.errstate(divide="ignore", invalid="ignore"):
        t_statistic = float(r * np.sqrt(df / (1.0 - r * r)))

    logger.info(f"Pearson r = {r:.4f} (p = {p_value:.3g}, n = {n})")

    return CorrelationTest(
        x_label=frame.x_source,
        y_label=frame.y_source,
        n=n,
        r=r,
        t_statistic=t_statistic,
        df=df,
        p_value=p_value,
        ci_low=float(ci.low),
        ci_high=float(ci.high),
        confidence_level=confidence_level,
        interpretation=interpret_correlation(r, p_value),
    )


def interpret_correlation(r: float, p_value: float) -> str:
    """Describe a correlation's strength, sign and significance in one sentence.

    Strength follows the usual |r| cut points (0.1, 0.3, 0.5, 0.7). An r of
    exactly zero has no sign and is described without a direction.

    Example:
        >>> interpret_correlation(0.42, 0.003)
        'Moderate positive correlation, significant (p < 0.01).'
    """
    strength = next(
        (label for bound, label in STRENGTH_BANDS if abs(r) < bound),
        "very strong",
    )
    if r > 0:
        description = f"{strength} positive correlation"
    elif r < 0:
        description = f"{strength} negative correlation"
    else:
        description = f"{strength} correlation with no direction"

    significance = next(
        (label for alpha, label in SIGNIFICANCE_BANDS if p_value < alpha),
        "not statistically significant (p >= 0.05)",
    )
    return f"{description.capitalize()}, {significance}."


def _fit_ols(x: np.ndarray, y: np.ndarray) -> Any:
    design = sm.add_constant(x, has_constant="add")
    return sm.OLS(y, design).fit()


def ols_regression(frame: AnalysisFrame) -> RegressionResult:
    """Fit Y = b0 + b1 * X by ordinary least squares.

    Args:
        frame: Analysis frame

    Returns:
        RegressionResult with coefficient table and fit statistics

    Raises:
        InsufficientDataError: With fewer than 3 observations, or when X is
            constant (slope not identifiable)
    """
    test = "linear regression"
    x, y = frame.x, frame.y
    n = len(x)
    _require(test, n)
    if np.ptp(x) == 0:
        raise InsufficientDataError(
            test, required=MIN_OBSERVATIONS, actual=n,
            detail="X is constant, so the slope is not identifiable",
        )

    model = _fit_ols(x, y)
    params = np.asarray(model.params)
    bse = np.asarray(model.bse)
    tvalues = np.asarray(model.tvalues)
    pvalues = np.asarray(model.pvalues)

    intercept, slope = (
        CoefficientEstimate(
            name=name,
            estimate=float(params[i]),
            std_error=float(bse[i]),
            t_value=float(tvalues[i]),
            p_value=float(pvalues[i]),
        )
        for i, name in enumerate(("(Intercept)", frame.x_source))
    )

    quantiles = np.quantile(np.asarray(model.resid), [0.0, 0.25, 0.5, 0.75, 1.0])

    logger.info(
        f"OLS fit: slope = {slope.estimate:.4g} (SE {slope.std_error:.3g}), "
        f"R^2 = {model.rsquared:.4f}"
    )

    return RegressionResult(
        x_label=frame.x_source,
        y_label=frame.y_source,
        n=n,
        intercept=intercept,
        slope=slope,
        r_squared=float(model.rsquared),
        adj_r_squared=float(model.rsquared_adj),
        residual_std_error=float(np.sqrt(model.mse_resid)),
        df_residual=int(model.df_resid),
        f_statistic=float(model.fvalue),
        f_p_value=float(model.f_pvalue),
        residual_quantiles=tuple(float(q) for q in quantiles),
    )


def trend_band(
    frame: AnalysisFrame,
    confidence_level: float = 0.95,
    n_points: int = 100,
) -> TrendBand | None:
    """OLS trend line over the X range with a confidence band for the mean.

    Returns None when X does not vary (no line can be drawn). The band is
    omitted (lower/upper None) with fewer than 3 points, since the
    residual variance is then undefined.
    """
    x, y = frame.x, frame.y
    if len(x) < 2 or np.ptp(x) == 0:
        return None

    model = _fit_ols(x, y)
    grid = np.linspace(x.min(), x.max(), n_points)
    design = sm.add_constant(grid, has_constant="add")

    if len(x) < MIN_OBSERVATIONS:
        return TrendBand(x=grid, fit=np.asarray(model.predict(design)), lower=None, upper=None)

    prediction = model.get_prediction(design).summary_frame(alpha=1.0 - confidence_level)
    return TrendBand(
        x=grid,
        fit=prediction["mean"].to_numpy(),
        lower=prediction["mean_ci_lower"].to_numpy(),
        upper=prediction["mean_ci_upper"].to_numpy(),
    )


def sample_indices(
    n: int,
    max_n: int = SHAPIRO_MAX_N,
    seed: int = DEFAULT_SEED,
) -> np.ndarray | None:
    """Row indices of a fixed-seed sample of ``max_n`` out of ``n``.

    Returns None when no sampling is needed (n <= max_n). The same
    (n, max_n, seed) always selects the same indices.
    """
    if n <= max_n:
        return None
    rng = np.random.default_rng(seed)
    return np.sort(rng.choice(n, size=max_n, replace=False))


def shapiro_test(
    values: Sequence[float] | np.ndarray,
    label: str,
    seed: int = DEFAULT_SEED,
    max_n: int = SHAPIRO_MAX_N,
) -> NormalityTest:
    """Shapiro-Wilk test of normality for one column.

    Columns with more than ``max_n`` values are tested on a uniform random
    sample of ``max_n`` values drawn without replacement with ``seed``.

    Args:
        values: Numeric values (missing values are ignored)
        label: Name of the variable
        seed: Seed for subsampling
        max_n: Largest sample passed to the test

    Returns:
        NormalityTest

    Raises:
        InsufficientDataError: With fewer than 3 values
    """
    data = np.asarray(values, dtype=float)
    data = data[~np.isnan(data)]
    n_total = len(data)
    _require("Shapiro-Wilk normality test", n_total)

    indices = sample_indices(n_total, max_n=max_n, seed=seed)
    if indices is not None:
        logger.warning(
            f"{label}: {n_total} values exceed {max_n}, "
            f"testing a random sample (seed = {seed})"
        )
        data = data[indices]

    return _run_shapiro(data, label, n_total, seed if indices is not None else None)


def _run_shapiro(data: np.ndarray, label: str, n_total: int, seed: int | None) -> NormalityTest:
    statistic, p_value = stats.shapiro(data)
    logger.info(f"Shapiro-Wilk {label}: W = {statistic:.4f}, p = {p_value:.3g}")
    return NormalityTest(
        label=label,
        statistic=float(statistic),
        p_value=float(p_value),
        n_tested=len(data),
        n_total=n_total,
        seed=seed,
    )


def normality_tests(
    frame: AnalysisFrame,
    seed: int = DEFAULT_SEED,
    max_n: int = SHAPIRO_MAX_N,
) -> tuple[NormalityTest, NormalityTest]:
    """Shapiro-Wilk tests for X and Y.

    When the frame has more than ``max_n`` rows, one row sample is drawn
    and both columns are tested on it, so X and Y refer to the same
    countries.

    Returns:
        Tuple of (X result, Y result)
    """
    n = len(frame)
    _require("Shapiro-Wilk normality test", n)

    x, y = frame.x, frame.y
    indices = sample_indices(n, max_n=max_n, seed=seed)
    if indices is not None:
        logger.warning(
            f"{n} rows exceed {max_n}, testing a random sample of rows (seed = {seed})"
        )
        x, y = x[indices], y[indices]

    used_seed = seed if indices is not None else None
    return (
        _run_shapiro(x, frame.x_source, n, used_seed),
        _run_shapiro(y, frame.y_source, n, used_seed),
    )
