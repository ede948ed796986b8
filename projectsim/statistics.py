# statistics.py - Summary statistics over simulated project durations
import numpy as np
from scipy import stats
from typing import Dict, NamedTuple, Optional, Tuple


class InsufficientSamplesError(ValueError):
    """Raised when a statistic needs more samples than were collected"""


class ConfidenceInterval(NamedTuple):
    """Two-sided confidence interval around a sample mean"""
    lower: float
    upper: float

    @property
    def mean(self) -> float:
        return (self.lower + self.upper) / 2

    @property
    def half_width(self) -> float:
        return (self.upper - self.lower) / 2


def _as_samples(samples) -> np.ndarray:
    arr = np.asarray(samples, dtype=float)
    if arr.ndim != 1:
        raise ValueError(f"Samples must be one-dimensional, got shape {arr.shape}")
    if arr.size == 0:
        raise InsufficientSamplesError("No samples collected")
    return arr


def _check_percent(p: float, label: str = "Percentile") -> float:
    p = float(p)
    if not (0 <= p <= 100):
        raise ValueError(f"{label} must be between 0 and 100, got {p}")
    return p


def mean(samples) -> float:
    return float(np.mean(_as_samples(samples)))


def confidence_interval(samples, level: float = 0.95) -> ConfidenceInterval:
    """
    Student-t confidence interval for the mean.

    The critical value is taken at cumulative probability (level + 1) / 2
    with n - 1 degrees of freedom and scaled by the standard error s / sqrt(n).
    """
    arr = _as_samples(samples)
    if not (0 < level < 1):
        raise ValueError(f"Confidence level must be strictly between 0 and 1, got {level}")

    n = arr.size
    if n < 2:
        raise InsufficientSamplesError(
            f"Confidence interval needs at least 2 samples, got {n}"
        )

    sample_mean = float(np.mean(arr))
    sample_std = float(np.std(arr, ddof=1))
    critical = float(stats.t.ppf((level + 1) / 2, n - 1))
    half_width = critical * sample_std / np.sqrt(n)

    return ConfidenceInterval(sample_mean - half_width, sample_mean + half_width)


def exceedance_probability(samples, threshold: float) -> float:
    """Fraction of samples strictly greater than threshold"""
    arr = _as_samples(samples)
    return float(np.mean(arr > threshold))


def percentile(samples, p: float) -> float:
    """Value at the p-th percentile, linear interpolation between order statistics"""
    arr = _as_samples(samples)
    p = _check_percent(p)
    return float(np.percentile(arr, p, method="linear"))


def percentile_cutoffs(samples, lower: float = 5.0, upper: float = 5.0) -> Tuple[float, float]:
    """
    Lower and upper tail cutoffs.

    `lower` is the percentage left in the lower tail and `upper` the percentage
    left in the upper tail, so the defaults give the 5th and 95th percentiles.
    """
    lower = _check_percent(lower, "Lower percentile")
    upper = _check_percent(upper, "Upper percentile")
    return percentile(samples, lower), percentile(samples, 100 - upper)


def summarize(samples,
              confidence_level: float = 0.95,
              threshold: float = 40.0,
              lower_percentile: float = 5.0,
              upper_percentile: float = 5.0) -> Dict[str, Optional[float]]:
    """
    Collect every reported statistic into one dictionary.

    Standard deviation and the confidence interval need two samples; with a
    single sample they are reported as None.
    """
    arr = _as_samples(samples)
    low_cut, high_cut = percentile_cutoffs(arr, lower_percentile, upper_percentile)

    if arr.size >= 2:
        ci = confidence_interval(arr, confidence_level)
        std, ci_lower, ci_upper, ci_half = float(np.std(arr, ddof=1)), ci.lower, ci.upper, ci.half_width
    else:
        std = ci_lower = ci_upper = ci_half = None

    return {
        "num_simulations": int(arr.size),
        "mean_project_duration": float(np.mean(arr)),
        "median_project_duration": float(np.median(arr)),
        "std_project_duration": std,
        "min_project_duration": float(np.min(arr)),
        "max_project_duration": float(np.max(arr)),
        "confidence_level": float(confidence_level),
        "ci_lower": ci_lower,
        "ci_upper": ci_upper,
        "ci_half_width": ci_half,
        "threshold": float(threshold),
        "exceedance_probability": exceedance_probability(arr, threshold),
        "lower_percentile": lower_percentile,
        "upper_percentile": upper_percentile,
        "lower_cutoff": low_cut,
        "upper_cutoff": high_cut,
    }
