"""Rolling personal baselines for HRV and resting heart rate.

A baseline is built from historical daily values in three steps, in this
order:

1. drop Tukey-fence outliers (a single bad night should not move it),
2. smooth with a centered moving average,
3. average the most recent ``window_days`` smoothed values.

Until at least ``min_days`` historical values exist the baseline is *not
established*: :class:`BaselineEstimate` then carries ``value=None`` and
callers are expected to treat recovery as undetermined instead of comparing
against zero.

The adaptive (multi-window) baseline and the personalised sleep need are
kept for progress displays; recovery scoring uses :meth:`BaselineEngine.compute`.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Sequence

from strainlab.analytics import stats
from strainlab.analytics.capabilities import BaselineCalculating
from strainlab.config import ConfigurationError
from strainlab.models import UserBaseline

logger = logging.getLogger(__name__)

DEFAULT_WINDOW_DAYS = 7
DEFAULT_SLEEP_NEED_MIN = 450.0
SLEEP_NEED_RANGE = (360.0, 600.0)
GOOD_RECOVERY_SCORE = 67.0


@dataclass(frozen=True)
class BaselineEstimate:
    """Result of a baseline computation."""

    value: float | None  # None until established
    days_available: int
    window_days: int
    min_days: int

    @property
    def established(self) -> bool:
        return self.value is not None

    @property
    def days_remaining(self) -> int:
        return max(0, self.min_days - self.days_available)


class BaselinePhase(str, Enum):
    INITIAL = "Getting started"
    CALIBRATING = "Calibrating"
    ESTABLISHED = "Established"
    MATURE = "Personalized"


@dataclass(frozen=True)
class AdaptiveBaseline:
    value: float
    confidence: float  # 0-1
    phase: BaselinePhase

    @property
    def is_reliable(self) -> bool:
        return self.confidence >= 0.7


def _finite(values: Sequence[float]) -> list[float]:
    return [float(v) for v in values if v is not None and math.isfinite(v)]


class BaselineEngine(BaselineCalculating):
    """Computes rolling baselines; holds only immutable configuration."""

    def __init__(
        self,
        window_days: int = DEFAULT_WINDOW_DAYS,
        min_days: int | None = None,
        outlier_threshold: float = 1.5,
        smoothing_window: int = 3,
    ) -> None:
        if window_days < 1:
            raise ConfigurationError(f"window_days must be >= 1, got {window_days}")
        if min_days is not None and min_days < 1:
            raise ConfigurationError(f"min_days must be >= 1, got {min_days}")
        if outlier_threshold <= 0:
            raise ConfigurationError(
                f"outlier_threshold must be positive, got {outlier_threshold}"
            )
        self.window_days = window_days
        self.min_days = min_days if min_days is not None else window_days
        self.outlier_threshold = outlier_threshold
        self.smoothing_window = smoothing_window

    # -- primitive operations -------------------------------------------

    def calculate_rolling_average(self, values: Sequence[float], days: int) -> float:
        if days <= 0:
            raise ConfigurationError(f"days must be >= 1, got {days}")
        return stats.mean(list(values)[-days:])

    def detect_outliers(self, values: Sequence[float], threshold: float = 1.5) -> list[float]:
        return stats.remove_outliers(values, threshold)

    def smooth_values(self, values: Sequence[float], window_size: int = 3) -> list[float]:
        return stats.moving_average(values, window_size)

    # -- baseline policy ------------------------------------------------

    def compute(self, values: Sequence[float]) -> BaselineEstimate:
        """Run the outlier -> smooth -> rolling mean pipeline over *values*.

        *values* are daily values in chronological order.
        """
        clean = _finite(values)
        if len(clean) < self.min_days:
            logger.info(
                "Baseline not established: %d of %d days available",
                len(clean), self.min_days,
            )
            return BaselineEstimate(None, len(clean), self.window_days, self.min_days)

        kept = self.detect_outliers(clean, self.outlier_threshold)
        smoothed = self.smooth_values(kept, self.smoothing_window)
        value = max(0.0, self.calculate_rolling_average(smoothed, self.window_days))
        logger.debug(
            "Baseline %.2f from %d days (%d outliers dropped)",
            value, len(clean), len(clean) - len(kept),
        )
        return BaselineEstimate(value, len(clean), self.window_days, self.min_days)

    def build_user_baseline(
        self,
        hrv_history: Sequence[float],
        rhr_history: Sequence[float],
        on: date,
        sleep_need_minutes: float = DEFAULT_SLEEP_NEED_MIN,
        max_heart_rate: float = 190.0,
    ) -> UserBaseline:
        return UserBaseline(
            computed_on=on,
            hrv_baseline=self.compute(hrv_history).value,
            rhr_baseline=self.compute(rhr_history).value,
            window_days=self.window_days,
            sleep_need_minutes=sleep_need_minutes,
            max_heart_rate=max_heart_rate,
        )

    # -- adaptive baseline ----------------------------------------------

    def adaptive(self, values: Sequence[float]) -> AdaptiveBaseline:
        """Multi-window baseline whose weighting and confidence grow with history."""
        clean = _finite(values)
        n = len(clean)
        if n == 0:
            return AdaptiveBaseline(0.0, 0.0, BaselinePhase.INITIAL)

        if n < 7:
            return AdaptiveBaseline(stats.mean(clean), n / 7.0, BaselinePhase.INITIAL)

        w7 = stats.weighted_average(clean[-7:])
        if n < 14:
            confidence = min(0.5 + (n - 7) / 14.0, 0.7)
            return AdaptiveBaseline(w7, confidence, BaselinePhase.CALIBRATING)

        w14 = stats.weighted_average(clean[-14:])
        if n < 28:
            confidence = min(0.7 + (n - 14) / 56.0, 0.85)
            return AdaptiveBaseline(0.6 * w7 + 0.4 * w14, confidence, BaselinePhase.ESTABLISHED)

        w28 = stats.weighted_average(clean[-28:])
        return AdaptiveBaseline(
            0.5 * w7 + 0.3 * w14 + 0.2 * w28, 0.95, BaselinePhase.MATURE,
        )

    def is_reliable(
        self,
        values: Sequence[float],
        minimum_days: int = 7,
        max_cv: float = 30.0,
    ) -> bool:
        """Enough history and a coefficient of variation under *max_cv* percent."""
        clean = _finite(values)
        if len(clean) < minimum_days:
            return False
        return stats.coefficient_of_variation(clean) <= max_cv

    def trend(self, values: Sequence[float]) -> float:
        """Per-day slope of the history (positive = rising)."""
        return stats.linear_trend(_finite(values))


def personal_sleep_need(
    sleep_durations: Sequence[float],
    recovery_scores: Sequence[float],
) -> float:
    """Estimate sleep need as the mean duration of well-recovered nights.

    Falls back to 450 minutes without at least a week of paired history or
    without any night followed by a good (>= 67) recovery.
    """
    if len(sleep_durations) < 7 or len(sleep_durations) != len(recovery_scores):
        return DEFAULT_SLEEP_NEED_MIN

    good = [
        d for d, r in zip(sleep_durations, recovery_scores)
        if r is not None and r >= GOOD_RECOVERY_SCORE
    ]
    if not good:
        return DEFAULT_SLEEP_NEED_MIN

    low, high = SLEEP_NEED_RANGE
    return min(max(stats.mean(good), low), high)
