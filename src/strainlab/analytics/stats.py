"""Statistics toolkit shared by every scoring module.

Small numeric primitives over ordered sequences of floats.  All of them are
total: empty or degenerate input yields a defined zero/identity result
instead of raising.  Inputs are never mutated; sorting happens on a private
copy.

Note that :func:`quartiles` is a simple index-based estimator
(``sorted[n // 4]`` / ``sorted[3n // 4]``), not an interpolated one.  Baselines
computed with it must stay comparable with previously stored values, so it
is kept as-is.
"""

from __future__ import annotations

from typing import Sequence

import numpy as np


def _as_array(xs: Sequence[float]) -> np.ndarray:
    return np.asarray(list(xs), dtype=np.float64)


def mean(xs: Sequence[float]) -> float:
    """Arithmetic mean, 0 for an empty sequence."""
    if len(xs) == 0:
        return 0.0
    return float(np.mean(_as_array(xs)))


def standard_deviation(xs: Sequence[float]) -> float:
    """Sample standard deviation (n - 1 divisor), 0 for fewer than 2 values."""
    if len(xs) <= 1:
        return 0.0
    return float(np.std(_as_array(xs), ddof=1))


def median(xs: Sequence[float]) -> float:
    """Middle value, or the average of the two middle values for even counts."""
    if len(xs) == 0:
        return 0.0
    return float(np.median(_as_array(xs)))


def quartiles(xs: Sequence[float]) -> tuple[float, float, float]:
    """Return ``(Q1, Q2, Q3)``.

    Fewer than 4 values yields ``(0, median, 0)``.
    """
    n = len(xs)
    if n < 4:
        return (0.0, median(xs), 0.0)
    arr = np.sort(_as_array(xs))
    return (float(arr[n // 4]), median(xs), float(arr[(3 * n) // 4]))


def interquartile_range(xs: Sequence[float]) -> float:
    q1, _, q3 = quartiles(xs)
    return q3 - q1


def percentile(xs: Sequence[float], p: float) -> float:
    """Linearly interpolated order statistic at ``(p / 100) * (n - 1)``.

    ``p`` is clamped to [0, 100].
    """
    if len(xs) == 0:
        return 0.0
    p = min(100.0, max(0.0, float(p)))
    return float(np.percentile(_as_array(xs), p))


def moving_average(xs: Sequence[float], window_size: int) -> list[float]:
    """Centered moving average with the window clipped at both ends.

    Element ``i`` is the mean of ``xs[i - w//2 : i + w//2 + 1]``.  The output
    has the same length as the input.  A non-positive window or an empty
    input returns the values unchanged.
    """
    if window_size <= 0 or len(xs) == 0:
        return [float(x) for x in xs]

    arr = _as_array(xs)
    n = len(arr)
    half = window_size // 2
    idx = np.arange(n)
    starts = np.maximum(0, idx - half)
    ends = np.minimum(n, idx + half + 1)

    cumsum = np.insert(np.cumsum(arr), 0, 0.0)
    sums = cumsum[ends] - cumsum[starts]
    return [float(v) for v in sums / (ends - starts)]


def remove_outliers(xs: Sequence[float], threshold: float = 1.5) -> list[float]:
    """Drop values outside the Tukey fence ``[Q1 - t*IQR, Q3 + t*IQR]``.

    Fewer than 4 values are returned unchanged.  Surviving values keep their
    original order.
    """
    if len(xs) < 4:
        return [float(x) for x in xs]
    q1, _, q3 = quartiles(xs)
    iqr = q3 - q1
    lower = q1 - threshold * iqr
    upper = q3 + threshold * iqr
    return [float(x) for x in xs if lower <= x <= upper]


# ---------------------------------------------------------------------------
# Trend helpers
# ---------------------------------------------------------------------------


def coefficient_of_variation(xs: Sequence[float]) -> float:
    """Population standard deviation as a percentage of the mean."""
    if len(xs) == 0:
        return 0.0
    arr = _as_array(xs)
    avg = float(np.mean(arr))
    if avg <= 0:
        return 0.0
    return float(np.std(arr, ddof=0)) / avg * 100.0


def linear_trend(xs: Sequence[float]) -> float:
    """Least-squares slope of the values against their index."""
    n = len(xs)
    if n < 2:
        return 0.0
    y = _as_array(xs)
    x = np.arange(n, dtype=np.float64)
    denom = n * float(np.sum(x * x)) - float(np.sum(x)) ** 2
    if denom == 0:
        return 0.0
    return (n * float(np.sum(x * y)) - float(np.sum(x)) * float(np.sum(y))) / denom


def weighted_average(xs: Sequence[float], decay: float = 0.9) -> float:
    """Exponentially weighted mean; the last value has weight 1."""
    n = len(xs)
    if n == 0:
        return 0.0
    weights = decay ** np.arange(n - 1, -1, -1, dtype=np.float64)
    return float(np.sum(_as_array(xs) * weights) / np.sum(weights))
