"""Data completeness assessment.

Scores how much the inputs behind today's scores can be trusted: HRV and
resting HR sample counts, whether a night of sleep was recorded, and how
mature the baseline history is.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Sequence

W_HRV = 0.35
W_RHR = 0.20
W_SLEEP = 0.25
W_BASELINE = 0.20


class ConfidenceLevel(str, Enum):
    HIGH = "High confidence"
    MODERATE = "Moderate confidence"
    LOW = "Limited data"


@dataclass(frozen=True)
class DataQuality:
    hrv_sample_count: int
    rhr_sample_count: int
    sleep_data_available: bool
    activity_data_available: bool
    baseline_maturity: float  # 0-1
    overall_confidence: float  # 0-1
    warnings: tuple[str, ...] = field(default_factory=tuple)

    @property
    def hrv_data_available(self) -> bool:
        return self.hrv_sample_count > 0

    @property
    def rhr_data_available(self) -> bool:
        return self.rhr_sample_count > 0

    @property
    def confidence_level(self) -> ConfidenceLevel:
        if self.overall_confidence >= 0.8:
            return ConfidenceLevel.HIGH
        if self.overall_confidence >= 0.5:
            return ConfidenceLevel.MODERATE
        return ConfidenceLevel.LOW


@dataclass(frozen=True)
class BaselineStatus:
    phase: str
    message: str
    progress: float  # 0-1


def _hrv_quality(count: int) -> float:
    # 3+ overnight readings is ideal
    return {0: 0.0, 1: 0.4, 2: 0.7}.get(count, 1.0)


def _rhr_quality(count: int) -> float:
    if count == 0:
        return 0.0
    if count <= 5:
        return 0.5
    if count <= 20:
        return 0.8
    return 1.0


def _sleep_quality(minutes: float | None) -> float:
    if minutes is None:
        return 0.0
    if minutes < 180:
        return 0.3
    if minutes < 300:
        return 0.6
    return 1.0


def baseline_maturity(days_covered: int) -> float:
    if days_covered <= 2:
        return 0.2
    if days_covered <= 6:
        return 0.4
    if days_covered <= 13:
        return 0.7
    if days_covered <= 27:
        return 0.9
    return 1.0


def assess_quality(
    hrv_values: Sequence[float],
    rhr_values: Sequence[float],
    sleep_minutes: float | None,
    activity_minutes: float,
    days_covered: int,
) -> DataQuality:
    """Rate the completeness of the data behind a day's scores."""
    hrv_q = _hrv_quality(len(hrv_values))
    rhr_q = _rhr_quality(len(rhr_values))
    sleep_q = _sleep_quality(sleep_minutes)
    maturity = baseline_maturity(days_covered)

    warnings = []
    if hrv_q < 0.5:
        warnings.append("Limited HRV data available")
    if rhr_q < 0.5:
        warnings.append("Limited heart rate data")
    if sleep_q < 0.5:
        warnings.append("No sleep data from last night")
    if maturity < 0.5:
        warnings.append("Still calibrating your baseline")

    confidence = W_HRV * hrv_q + W_RHR * rhr_q + W_SLEEP * sleep_q + W_BASELINE * maturity

    return DataQuality(
        hrv_sample_count=len(hrv_values),
        rhr_sample_count=len(rhr_values),
        sleep_data_available=sleep_minutes is not None,
        activity_data_available=activity_minutes > 0,
        baseline_maturity=maturity,
        overall_confidence=confidence,
        warnings=tuple(warnings),
    )


def baseline_status(days_covered: int) -> BaselineStatus:
    """User-facing progress of baseline calibration."""
    if days_covered <= 2:
        return BaselineStatus("Initial", "Getting to know you", days_covered / 7.0)
    if days_covered <= 6:
        return BaselineStatus("Calibrating", "Calibrating your baseline", days_covered / 7.0)
    if days_covered <= 13:
        return BaselineStatus("Established", "Baseline established", min(1.0, days_covered / 14.0))
    if days_covered <= 27:
        return BaselineStatus("Refined", "Baseline refined", min(1.0, days_covered / 28.0))
    return BaselineStatus("Personalized", "Personalized baseline", 1.0)
